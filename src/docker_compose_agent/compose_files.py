import logging
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Optional, Union

from .exceptions import FilesystemError
from .file_utils import chown_like_parent
from .merger import Content, merge_content_into_files
from .models import Service
from .serializer import serialize_service
from .settings import DEFAULT_COMPOSE_VERSION
from .validator import ComposeConfigChecker

log = logging.getLogger(__name__)

COMPOSE_FILENAME_PATTERN = re.compile(r"^docker-compose(.)*\.(yaml|yml)$")
DEFAULT_COMPOSE_FILENAME = "docker-compose.yml"


class ComposeFileManager:
    """Working set of docker-compose files of a project directory

    Files are looked up once (on first access) in the top level of
    project_dir. When there are none, a minimal docker-compose.yml is created.
    """

    def __init__(
        self,
        project_dir: Union[str, Path],
        version: str = DEFAULT_COMPOSE_VERSION,
        checker: Optional[ComposeConfigChecker] = None,
    ):
        self.project_dir = Path(project_dir)
        self.version = version
        self.checker = checker
        self._files: Optional[list[Path]] = None

    def _seek_files(self) -> list[Path]:
        try:
            found = sorted(
                path
                for path in self.project_dir.iterdir()
                if path.is_file() and COMPOSE_FILENAME_PATTERN.match(path.name)
            )
        except OSError as e:
            raise FilesystemError(f"Could not list {self.project_dir}: {e}") from e

        if not found:
            log.info("no docker-compose file found, let's create it")
            default_file = self.project_dir / DEFAULT_COMPOSE_FILENAME
            return [self._create_compose_file(default_file)]

        for path in found:
            log.info("%s has been found", path.name)
        return found

    def _create_compose_file(self, path: Path) -> Path:
        try:
            path.write_text(f"version: '{self.version}'\n", encoding="utf-8")
        except OSError as e:
            raise FilesystemError(f"Could not create {path}: {e}") from e
        chown_like_parent(path)
        log.info("%s was successfully created!", path.name)
        return path

    def get_compose_file_paths(self) -> list[Path]:
        if self._files is None:
            self._files = self._seek_files()
        return list(self._files)

    def files_initialized(self) -> bool:
        return bool(self._files)

    def merge_content(self, content: Content, check_validity: bool = True) -> None:
        merge_content_into_files(
            content, self.get_compose_file_paths(), check_validity, self.checker
        )

    def merge_service(
        self,
        service: Service,
        env_file_names: Sequence[str] = (),
        check_validity: bool = True,
    ) -> None:
        """Adds (or updates) the service in every docker-compose file"""
        compose_specs = serialize_service(service, env_file_names, self.version)
        self.merge_content(compose_specs, check_validity)
