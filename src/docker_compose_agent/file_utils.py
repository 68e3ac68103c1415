import contextlib
import logging
import os
import shutil
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import Optional, Union

from .exceptions import FilesystemError

log = logging.getLogger(__name__)


def _running_as_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0


@contextlib.contextmanager
def temporary_file(
    prefix: str, suffix: str = ".yml", directory: Optional[Path] = None
) -> Iterator[Path]:
    """Yields the path of a new (empty and uniquely named) file, removed on exit

    raises FilesystemError
    """
    try:
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=directory)
        os.close(fd)
    except OSError as e:
        raise FilesystemError(f"Could not create a temporary file: {e}") from e

    path = Path(name)
    try:
        yield path
    except BaseException:
        # the error in flight is the one the caller needs to see
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            log.warning("Could not remove %s: %s", path, e)
        raise

    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise FilesystemError(f"Could not remove {path}: {e}") from e


def replace_file(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """Atomically replaces destination with a copy of source

    The copy is staged next to destination so that os.replace never crosses
    filesystems. Permissions of destination are kept, and so is its
    ownership when running as root.

    raises FilesystemError
    """
    destination = Path(destination)
    with temporary_file(
        prefix=f".{destination.name}.", suffix=".tmp", directory=destination.parent
    ) as staging:
        try:
            shutil.copyfile(source, staging)
            if destination.exists():
                stat = destination.stat()
                os.chmod(staging, stat.st_mode & 0o7777)
                if _running_as_root():
                    os.chown(staging, stat.st_uid, stat.st_gid)
            else:
                os.chmod(staging, 0o644)
            os.replace(staging, destination)
        except OSError as e:
            raise FilesystemError(f"Could not replace {destination}: {e}") from e
    log.debug("replaced %s with %s", destination, source)


def chown_like_parent(path: Union[str, Path]) -> None:
    """Gives path the owner and group of its parent directory

    Only warns when not permitted (e.g. not running as root)

    raises FilesystemError
    """
    path = Path(path)
    try:
        dir_stat = path.parent.stat()
    except OSError as e:
        raise FilesystemError(f"Could not read the owner of {path.parent}: {e}") from e
    try:
        os.chown(path, dir_stat.st_uid, dir_stat.st_gid)
    except PermissionError as e:
        log.warning("Could not change the owner of %s: %s", path, e)
    except OSError as e:
        raise FilesystemError(f"Could not change the owner of {path}: {e}") from e
