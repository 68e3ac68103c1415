# pylint: disable=redefined-outer-name
# pylint: disable=unused-argument
# pylint: disable=unused-variable

from pathlib import Path
from typing import Any

import pytest
import yaml
from faker import Faker

from docker_compose_agent.exceptions import ValidationError
from docker_compose_agent.models import (
    BindVolume,
    EnvVariable,
    EnvVariableType,
    Label,
    NamedVolume,
    Port,
    Service,
    TmpfsVolume,
)

INVALID_IMAGE = "invalid-image"


class FakeComposeConfigChecker:
    """Stands for `docker-compose config -q`

    Rejects any document having a service with INVALID_IMAGE and records
    what it was asked to check
    """

    def __init__(self):
        self.checked_paths: list[Path] = []
        self.checked_documents: list[dict[str, Any]] = []

    def run(self, path: Path) -> None:
        assert path.exists()
        document = yaml.safe_load(path.read_text()) or {}
        self.checked_paths.append(path)
        self.checked_documents.append(document)
        for service in (document.get("services") or {}).values():
            if (service or {}).get("image") == INVALID_IMAGE:
                raise ValidationError(
                    path, ["docker-compose", "-f", f"{path}", "config", "-q"], "invalid"
                )


@pytest.fixture
def invalid_image() -> str:
    return INVALID_IMAGE


@pytest.fixture
def fake_checker() -> FakeComposeConfigChecker:
    return FakeComposeConfigChecker()


@pytest.fixture
def service_name(faker: Faker) -> str:
    return faker.word().lower()


@pytest.fixture
def full_service(service_name: str) -> Service:
    return Service(
        name=service_name,
        image="nginx:latest",
        command="nginx -g 'daemon off;'",
        depends_on=["db"],
        ports=[Port(80, 8080), Port(443, 8443)],
        labels={
            "traefik.enable": "true",
            "traefik.port": Label("80", comment="the exposed port"),
        },
        environment={
            "NGINX_HOST": EnvVariable("example.com"),
            "NGINX_PORT": EnvVariable(
                "80", EnvVariableType.IMAGE_ENV_VARIABLE, comment="listening port"
            ),
            "API_KEY": EnvVariable("s3cr3t", EnvVariableType.SHARED_SECRET),
            "LOG_LEVEL": EnvVariable("info", EnvVariableType.SHARED_ENV_VARIABLE),
        },
        volumes=[
            NamedVolume("webdata", "/data"),
            BindVolume("./conf", "/etc/nginx/conf.d", read_only=True),
            TmpfsVolume("/tmp"),
        ],
    )

