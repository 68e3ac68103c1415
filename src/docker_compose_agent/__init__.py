""" Python package for docker_compose_agent

"""

__version__: str = "0.1.0"
