""" Merges YAML content into docker-compose files

With validity check (default), every target file is merged into a temporary
copy which is then validated; targets are replaced only once all copies are
valid, so either all targets are updated or none.

"""
import logging
from collections.abc import Mapping, Sequence
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Optional, Union

from . import yaml_tools
from .exceptions import MergeError
from .file_utils import replace_file, temporary_file
from .validator import ComposeConfigChecker, validate_compose_file

log = logging.getLogger(__name__)

Content = Union[Mapping[str, Any], str]


def _parse_content(content: Content) -> dict[str, Any]:
    if isinstance(content, str):
        return yaml_tools.load_yaml(content)
    if isinstance(content, Mapping):
        return dict(content)
    raise MergeError(
        f"Content must be a mapping or a YAML string, got {type(content).__name__}"
    )


def merge_content_into_files(
    content: Content,
    files: Sequence[Union[str, Path]],
    check_validity: bool = True,
    checker: Optional[ComposeConfigChecker] = None,
) -> None:
    """Merges content into each of the docker-compose files

    raises MergeError if content (or a target) is not a YAML mapping
    raises ValidationError if any merged file is rejected (no file is modified)
    raises FilesystemError
    """
    document = yaml_tools.normalize_compose(_parse_content(content))
    log.debug(
        "merging into %s:\n%s",
        [f"{f}" for f in files],
        yaml_tools.dump_yaml(document),
    )

    if not check_validity:
        for file in files:
            yaml_tools.merge_content_into_file(document, file)
            log.info("%s updated (not validated)", file)
        return

    with ExitStack() as stack:
        merged_files: list[tuple[Path, Path]] = []
        for file in files:
            tmp_file = stack.enter_context(
                temporary_file(prefix="docker-compose-tmp-")
            )
            yaml_tools.normalize_file(file, tmp_file)
            yaml_tools.merge_content_into_file(document, tmp_file)
            validate_compose_file(tmp_file, checker)
            merged_files.append((Path(file), tmp_file))

        for file, tmp_file in merged_files:
            replace_file(tmp_file, file)
            log.info("%s updated", file)


def merge_content_into_file(
    content: Content,
    file: Union[str, Path],
    check_validity: bool = True,
    checker: Optional[ComposeConfigChecker] = None,
) -> None:
    merge_content_into_files(content, [file], check_validity, checker)
