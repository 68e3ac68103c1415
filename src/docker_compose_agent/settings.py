""" Configuration of the agent

Values come from (in order of precedence) a YAML config file, environment
variables and the defaults below.

Example of config file:

    main:
      compose_version: "3.7"
      docker_compose_command: docker compose
      validation_timeout: 30
      project_dir: /project
"""
import logging
import os
import shlex
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from .exceptions import ConfigurationError

log = logging.getLogger(__name__)

DEFAULT_COMPOSE_VERSION = "3.7"
DEFAULT_DOCKER_COMPOSE_COMMAND = ("docker-compose",)
DEFAULT_VALIDATION_TIMEOUT_S = 60.0

ENV_PREFIX = "DOCKER_COMPOSE_"


def _parse_command(value: Union[str, list, tuple]) -> tuple[str, ...]:
    command = tuple(shlex.split(value)) if isinstance(value, str) else tuple(value)
    if not command:
        raise ConfigurationError("docker_compose_command cannot be empty")
    return command


def _parse_timeout(value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid validation_timeout {value!r}") from e
    if timeout <= 0:
        raise ConfigurationError(f"validation_timeout must be positive, got {timeout}")
    return timeout


@dataclass(frozen=True)
class Settings:
    compose_version: str = DEFAULT_COMPOSE_VERSION
    docker_compose_command: tuple[str, ...] = DEFAULT_DOCKER_COMPOSE_COMMAND
    validation_timeout: float = DEFAULT_VALIDATION_TIMEOUT_S
    project_dir: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any], base: Optional["Settings"] = None):
        settings = base or cls()
        changes: dict[str, Any] = {}
        if values.get("compose_version") is not None:
            changes["compose_version"] = f"{values['compose_version']}"
        if values.get("docker_compose_command") is not None:
            changes["docker_compose_command"] = _parse_command(
                values["docker_compose_command"]
            )
        if values.get("validation_timeout") is not None:
            changes["validation_timeout"] = _parse_timeout(values["validation_timeout"])
        if values.get("project_dir") is not None:
            changes["project_dir"] = Path(values["project_dir"])
        return replace(settings, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        values = {
            "compose_version": environ.get(f"{ENV_PREFIX}VERSION"),
            "docker_compose_command": environ.get(f"{ENV_PREFIX}COMMAND"),
            "validation_timeout": environ.get(f"{ENV_PREFIX}VALIDATION_TIMEOUT"),
            "project_dir": environ.get(f"{ENV_PREFIX}PROJECT_DIR"),
        }
        return cls.from_mapping(values)

    @classmethod
    def from_config_file(
        cls, config_file: Union[str, Path], environ: Optional[Mapping[str, str]] = None
    ) -> "Settings":
        log.debug("loading settings from %s", config_file)
        try:
            with Path(config_file).open(encoding="utf-8") as fp:
                config = yaml.safe_load(fp) or {}
        except OSError as e:
            raise ConfigurationError(f"Could not read config file {config_file}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid config file {config_file}:\n{e}") from e

        main = config.get("main") if isinstance(config, dict) else None
        if not isinstance(main, dict):
            raise ConfigurationError(f"Missing 'main' section in {config_file}")
        return cls.from_mapping(main, base=cls.from_env(environ))
