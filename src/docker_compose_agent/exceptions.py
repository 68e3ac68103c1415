class DockerComposeAgentError(Exception):
    """Basic exception"""


class ConfigurationError(DockerComposeAgentError):
    """Invalid configuration"""


class FilesystemError(DockerComposeAgentError):
    """Reading, writing or removing a compose (or temporary) file failed"""


class MergeError(DockerComposeAgentError):
    """YAML content cannot be merged (malformed or not a mapping)"""


class CmdLineError(DockerComposeAgentError):
    """Error in the command line"""

    def __init__(self, command, error_data: str = ""):
        if isinstance(command, (list, tuple)):
            command = " ".join(f"{c}" for c in command)
        super().__init__(f"Error while running '{command}':\n{error_data}")
        self.command = command
        self.error_data = error_data


class ValidationError(CmdLineError):
    """docker-compose rejected the configuration

    error_data holds the captured output of the checker
    """

    def __init__(self, path, command, error_data: str = ""):
        super().__init__(command, error_data)
        self.path = path
