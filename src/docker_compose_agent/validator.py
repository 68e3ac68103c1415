""" Validation of docker-compose files by docker-compose itself

    docker-compose -f <path> config -q

"""
import copy
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Optional, Protocol, Union

from .exceptions import CmdLineError, ValidationError
from .file_utils import temporary_file
from .settings import DEFAULT_DOCKER_COMPOSE_COMMAND, DEFAULT_VALIDATION_TIMEOUT_S
from .subprocess_utils import exec_command
from .yaml_tools import load_yaml_file, write_yaml_file

log = logging.getLogger(__name__)

# these reference files or services that are not available next to the checked copy
_UNCHECKABLE_SERVICE_KEYS = ("env_file", "depends_on")


class ComposeConfigChecker(Protocol):
    def run(self, path: Path) -> None:
        """raises ValidationError if the compose file at path is invalid"""


class DockerComposeConfigChecker:
    def __init__(
        self,
        command: Sequence[str] = DEFAULT_DOCKER_COMPOSE_COMMAND,
        timeout: float = DEFAULT_VALIDATION_TIMEOUT_S,
    ):
        self.command = list(command)
        self.timeout = timeout

    def run(self, path: Path) -> None:
        cmd = self.command + ["-f", f"{path}", "config", "-q"]
        try:
            exec_command(cmd, timeout=self.timeout)
        except CmdLineError as e:
            raise ValidationError(path, e.command, e.error_data) from e


def _strip_uncheckable_keys(document: dict) -> dict:
    document = copy.deepcopy(document)
    services = document.get("services")
    if isinstance(services, dict):
        for service in services.values():
            if isinstance(service, dict):
                for key in _UNCHECKABLE_SERVICE_KEYS:
                    service.pop(key, None)
    return document


def validate_compose_file(
    path: Union[str, Path], checker: Optional[ComposeConfigChecker] = None
) -> None:
    """Checks the compose file at path

    The check runs on a copy without env_file and depends_on entries.

    raises ValidationError
    raises FilesystemError
    raises MergeError if the file is not valid YAML
    """
    checker = checker or DockerComposeConfigChecker()
    document = _strip_uncheckable_keys(load_yaml_file(path))
    with temporary_file(prefix="docker-compose-check-") as check_file:
        write_yaml_file(check_file, document)
        log.debug("checking %s (as %s)", path, check_file)
        checker.run(check_file)
    log.debug("%s is a valid docker-compose file", path)
