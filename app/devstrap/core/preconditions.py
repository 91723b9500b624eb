"""Up-front checks run before any phase mutates the system."""

import logging
import os

from devstrap.core.errors import InsufficientPrivilegeError, MissingToolError
from devstrap.utils.shell import missing_commands

logger = logging.getLogger(__name__)


def check_tools(tools: list[str]) -> None:
    """Verify every tool in ``tools`` is on the PATH.

    Raises:
        MissingToolError: Listing every absent tool, not just the first.
    """
    missing = missing_commands(tools)
    if missing:
        raise MissingToolError(missing)
    logger.debug("All required tools present: %s", ", ".join(tools))


def is_root() -> bool:
    """Check if the effective user is root."""
    return os.geteuid() == 0


def check_root() -> None:
    """Verify the process runs with root privileges.

    Raises:
        InsufficientPrivilegeError: If the effective UID is not 0.
    """
    if not is_root():
        raise InsufficientPrivilegeError()
