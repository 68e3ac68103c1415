""" Utils and extensions to 'subprocess' standard library


SEE https://docs.python.org/3/library/subprocess.html
"""


import logging
import subprocess
from typing import Optional, Union

from .exceptions import CmdLineError

log = logging.getLogger(__name__)


def run_command(cmd: Union[str, list[str]], shell=False, **kwargs) -> str:
    """Thin wrapper for  subprocess.run

    stderr is folded into stdout so that the diagnostics of tools like
    docker-compose (which report on either stream) end up in one place.

    returns command outputs

    raises subprocess.CalledProcessError
    raises subprocess.TimeoutExpired
    raises FileNotFoundError if the program does not exist
    """

    result = subprocess.run(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        check=True,
        shell=shell,
        encoding="utf-8",
        **kwargs,
    )
    return result.stdout.rstrip() if result.stdout else ""


def exec_command(
    program_and_args: list[str],
    cwd: str = ".",
    *,
    timeout: Optional[float] = None,
) -> Optional[str]:
    """Runs a program and waits for it (at most timeout seconds)

    returns output or None if no outputs
    raises CmdLineError
    """
    try:
        output = run_command(program_and_args, cwd=cwd, timeout=timeout)
    except FileNotFoundError as e:
        raise CmdLineError(
            program_and_args,
            "The command was invalid and the cmd call failed.",
        ) from e
    except subprocess.TimeoutExpired as e:
        raise CmdLineError(
            program_and_args, f"The command did not complete within {timeout}s."
        ) from e
    except subprocess.CalledProcessError as e:
        log.debug("[%s] exited with %s", program_and_args, e.returncode)
        error_data = e.output or ""
        if error_data:
            log.debug("\n[stderr]%s", error_data)
        raise CmdLineError(program_and_args, error_data) from e

    log.debug("[%s] exited with 0", program_and_args)
    if output:
        log.debug("\n[stdout]%s", output)
        return output
    return None
