""" Application's command line

    docker-compose-agent files|merge|validate ...

"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .compose_files import ComposeFileManager
from .exceptions import DockerComposeAgentError, ValidationError
from .merger import merge_content_into_files
from .settings import Settings
from .validator import DockerComposeConfigChecker, validate_compose_file

log = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docker-compose-agent",
        description="Merges services into the docker-compose files of a project",
    )
    parser.add_argument(
        "--config", type=Path, help="YAML config file (see settings.py)"
    )
    parser.add_argument(
        "--loglevel",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    files_parser = subparsers.add_parser(
        "files", help="lists (and creates if needed) the docker-compose files"
    )
    files_parser.add_argument("--project-dir", type=Path)

    merge_parser = subparsers.add_parser(
        "merge", help="merges a YAML file into the docker-compose files"
    )
    merge_parser.add_argument("content", help="YAML file to merge or - for stdin")
    merge_parser.add_argument("--project-dir", type=Path)
    merge_parser.add_argument(
        "--file",
        dest="files",
        action="append",
        type=Path,
        help="target file (repeatable), defaults to all docker-compose files",
    )
    merge_parser.add_argument(
        "--no-check",
        dest="check_validity",
        action="store_false",
        help="skips docker-compose validation",
    )

    validate_parser = subparsers.add_parser(
        "validate", help="validates a docker-compose file"
    )
    validate_parser.add_argument("file", type=Path)

    return parser


def _read_content(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _run(options: argparse.Namespace, settings: Settings) -> None:
    checker = DockerComposeConfigChecker(
        settings.docker_compose_command, settings.validation_timeout
    )
    project_dir = getattr(options, "project_dir", None) or settings.project_dir

    if options.command == "validate":
        validate_compose_file(options.file, checker)
        print(f"{options.file} is valid")
        return

    manager = ComposeFileManager(project_dir, settings.compose_version, checker)
    if options.command == "files":
        for path in manager.get_compose_file_paths():
            print(path)
        return

    content = _read_content(options.content)
    files = options.files or manager.get_compose_file_paths()
    merge_content_into_files(content, files, options.check_validity, checker)
    for path in files:
        print(f"{path} updated")


def main(args: Optional[list[str]] = None) -> int:
    parser = create_parser()
    options = parser.parse_args(args)
    logging.basicConfig(level=getattr(logging, options.loglevel))

    try:
        settings = (
            Settings.from_config_file(options.config)
            if options.config
            else Settings.from_env()
        )
        _run(options, settings)
    except ValidationError as e:
        log.error("docker-compose rejected %s:\n%s", e.path, e.error_data)
        return 1
    except (DockerComposeAgentError, OSError) as e:
        log.error("%s", e)
        return 1
    return 0
