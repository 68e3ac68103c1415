import logging
from collections.abc import Sequence
from typing import Any, Union

from .models import (
    ComposeSpecsDict,
    EnvVariable,
    EnvVariableName,
    Label,
    Port,
    Service,
    ServiceSpecsDict,
    Volume,
    VolumeName,
    VolumeType,
)
from .settings import DEFAULT_COMPOSE_VERSION
from .yaml_tools import CommentedItem

log = logging.getLogger(__name__)


def get_environment_variables_for_docker_compose(
    service: Service,
) -> dict[EnvVariableName, EnvVariable]:
    """container variables, then image variables (container ones win)"""
    env_variables = dict(service.get_all_container_env_variables())
    for name, variable in service.get_all_image_env_variables().items():
        env_variables.setdefault(name, variable)
    return env_variables


def get_environment_variables_for_dotenv(
    service: Service,
) -> dict[EnvVariableName, EnvVariable]:
    """shared secrets, then shared variables (secrets win)

    These go to the companion .env file, not in the compose file
    """
    env_variables = dict(service.get_all_shared_secrets())
    for name, variable in service.get_all_shared_env_variables().items():
        env_variables.setdefault(name, variable)
    return env_variables


def _port_to_compose(port: Port) -> str:
    return f"{port.source}:{port.target}"


def _label_to_compose(label: Union[str, Label]) -> str:
    return label.value if isinstance(label, Label) else label


def _env_variable_to_compose(variable: EnvVariable) -> Union[str, CommentedItem]:
    if variable.comment is not None:
        return CommentedItem(variable.value, variable.comment)
    return variable.value


def _volume_to_compose(volume: Volume) -> dict[str, Any]:
    specs: dict[str, Any] = {"type": volume.type.value, "source": volume.source}
    if volume.type in (VolumeType.NAMED_VOLUME, VolumeType.BIND_VOLUME):
        specs["target"] = volume.target
        specs["read_only"] = volume.read_only
    return specs


def serialize_service(
    service: Service,
    env_file_names: Sequence[str] = (),
    version: str = DEFAULT_COMPOSE_VERSION,
) -> ComposeSpecsDict:
    """Converts a service into a docker-compose document with that single service

    Empty fields are left out. Named volumes used by the service are also
    declared in the top-level volumes section.
    """
    environment = get_environment_variables_for_docker_compose(service)
    service_specs: ServiceSpecsDict = {
        "image": service.image,
        "command": service.command,
        "depends_on": list(service.depends_on),
        "ports": [_port_to_compose(p) for p in service.ports],
        "labels": {k: _label_to_compose(v) for k, v in service.labels.items()},
        "environment": {
            name: _env_variable_to_compose(variable)
            for name, variable in environment.items()
        },
        "volumes": [_volume_to_compose(v) for v in service.volumes],
    }
    service_specs = {key: value for key, value in service_specs.items() if value}
    if env_file_names:
        service_specs["env_file"] = list(env_file_names)

    compose_specs: ComposeSpecsDict = {
        "version": version,
        "services": {service.name: service_specs},
    }

    # declared without options
    named_volumes: dict[VolumeName, None] = {
        volume.source: None
        for volume in service.volumes
        if volume.type == VolumeType.NAMED_VOLUME
    }
    if named_volumes:
        compose_specs["volumes"] = named_volumes

    log.debug("serialized service %s: %s", service.name, compose_specs)
    return compose_specs
