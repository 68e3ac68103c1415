from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional, TypedDict, Union

ServiceName = str
ServiceSpecsDict = dict[str, Any]
VolumeName = str
EnvVariableName = str


class ComposeSpecsDict(TypedDict, total=False):
    version: str
    services: dict[ServiceName, ServiceSpecsDict]
    volumes: dict[VolumeName, Any]


class VolumeType(str, Enum):
    NAMED_VOLUME = "volume"
    BIND_VOLUME = "bind"
    TMPFS_VOLUME = "tmpfs"


@dataclass(frozen=True)
class NamedVolume:
    type: ClassVar[VolumeType] = VolumeType.NAMED_VOLUME

    source: VolumeName
    target: str
    read_only: bool = False


@dataclass(frozen=True)
class BindVolume:
    type: ClassVar[VolumeType] = VolumeType.BIND_VOLUME

    source: str  # host path
    target: str
    read_only: bool = False


@dataclass(frozen=True)
class TmpfsVolume:
    type: ClassVar[VolumeType] = VolumeType.TMPFS_VOLUME

    source: str


Volume = Union[NamedVolume, BindVolume, TmpfsVolume]


class EnvVariableType(str, Enum):
    CONTAINER_ENV_VARIABLE = "containerEnvVariable"
    IMAGE_ENV_VARIABLE = "imageEnvVariable"
    SHARED_ENV_VARIABLE = "sharedEnvVariable"
    SHARED_SECRET = "sharedSecret"


@dataclass(frozen=True)
class EnvVariable:
    value: str
    type: EnvVariableType = EnvVariableType.CONTAINER_ENV_VARIABLE
    comment: Optional[str] = None


@dataclass(frozen=True)
class Label:
    value: str
    comment: Optional[str] = None


@dataclass(frozen=True)
class Port:
    source: int
    target: int


@dataclass(frozen=True)
class Service:
    """A container service as described by the caller

    Example:
        Service(
            name="web",
            image="nginx:latest",
            ports=[Port(80, 8080)],
            volumes=[NamedVolume("webdata", "/data")],
        )
    """

    name: ServiceName
    image: Optional[str] = None
    command: Optional[str] = None
    depends_on: list[ServiceName] = field(default_factory=list)
    ports: list[Port] = field(default_factory=list)
    labels: dict[str, Union[str, Label]] = field(default_factory=dict)
    environment: dict[EnvVariableName, EnvVariable] = field(default_factory=dict)
    volumes: list[Volume] = field(default_factory=list)

    def __post_init__(self):
        if not self.name:
            raise ValueError("A service needs a name")

    def _env_variables_of_type(
        self, env_type: EnvVariableType
    ) -> dict[EnvVariableName, EnvVariable]:
        return {
            name: variable
            for name, variable in self.environment.items()
            if variable.type == env_type
        }

    def get_all_container_env_variables(self) -> dict[EnvVariableName, EnvVariable]:
        return self._env_variables_of_type(EnvVariableType.CONTAINER_ENV_VARIABLE)

    def get_all_image_env_variables(self) -> dict[EnvVariableName, EnvVariable]:
        return self._env_variables_of_type(EnvVariableType.IMAGE_ENV_VARIABLE)

    def get_all_shared_env_variables(self) -> dict[EnvVariableName, EnvVariable]:
        return self._env_variables_of_type(EnvVariableType.SHARED_ENV_VARIABLE)

    def get_all_shared_secrets(self) -> dict[EnvVariableName, EnvVariable]:
        return self._env_variables_of_type(EnvVariableType.SHARED_SECRET)
