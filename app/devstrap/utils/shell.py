"""Subprocess helpers shared by every external tool wrapper.

Commands always run with captured, decoded output. A missing executable
or a timeout is reported as a devstrap error; a non-zero exit status is
returned to the caller, which decides what it means.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass

from devstrap.core.errors import ExternalCommandFailed, MissingToolError

logger = logging.getLogger(__name__)

# Exit status reported when a command is killed for exceeding its timeout
TIMEOUT_EXIT_CODE = 124


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured outcome of one finished command.

    Attributes:
        stdout: Decoded standard output.
        stderr: Decoded standard error.
        returncode: Exit status.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if the command exited with status 0."""
        return self.returncode == 0


def run_command(
    args: list[str],
    *,
    timeout: float | None = 60.0,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Run ``args`` to completion and capture its output.

    Args:
        args: Executable and arguments; never passed through a shell.
        timeout: Seconds to wait before the command is killed.
        cwd: Working directory, or None for the current one.
        env: Variables added on top of the inherited environment.

    Returns:
        CommandResult, whatever the exit status.

    Raises:
        MissingToolError: If the executable does not exist.
        ExternalCommandFailed: If the command exceeded ``timeout``.
    """
    logger.debug("$ %s", " ".join(args))
    try:
        completed = subprocess.run(
            args,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
            cwd=cwd,
            env={**os.environ, **env} if env else None,
        )
    except FileNotFoundError as e:
        raise MissingToolError([args[0]]) from e
    except subprocess.TimeoutExpired as e:
        raise ExternalCommandFailed(
            " ".join(args), TIMEOUT_EXIT_CODE, f"timed out after {timeout:.0f}s"
        ) from e

    if completed.returncode != 0:
        logger.debug("%s exited with %d", args[0], completed.returncode)
    return CommandResult(completed.stdout, completed.stderr, completed.returncode)


def command_path(name: str) -> str | None:
    """Resolve ``name`` on the PATH, or return None."""
    return shutil.which(name)


def command_exists(name: str) -> bool:
    """Check if ``name`` resolves on the PATH."""
    return command_path(name) is not None


def missing_commands(names: list[str]) -> list[str]:
    """Return every command from ``names`` that is not on the PATH.

    Order is preserved so error messages list tools as declared.
    """
    return [name for name in names if not command_exists(name)]
