"""Intent and plan models.

An invocation resolves exactly one :class:`Intent`, which expands into an
ordered tuple of :class:`Phase` values.
"""

from dataclasses import dataclass
from enum import Enum


class Intent(Enum):
    """What the user asked devstrap to do.

    Attributes:
        INSTALL: Register repositories and install packages.
        PURGE: Remove packages and unregister repositories.
        REPLACE: Purge, then install.
    """

    INSTALL = "install"
    PURGE = "purge"
    REPLACE = "replace"


class Phase(Enum):
    """One ordered step of a provisioning plan."""

    PURGE = "purge"
    INSTALL = "install"


@dataclass(frozen=True, slots=True)
class Plan:
    """A validated, ordered provisioning plan.

    Attributes:
        intent: The resolved intent.
        phases: Phases to execute, in order.
    """

    intent: Intent
    phases: tuple[Phase, ...]

    def __post_init__(self) -> None:
        """Validate plan data after initialization."""
        if not self.phases:
            msg = "A plan must contain at least one phase"
            raise ValueError(msg)

    @property
    def purges(self) -> bool:
        """Check if the plan contains a purge phase."""
        return Phase.PURGE in self.phases

    @property
    def installs(self) -> bool:
        """Check if the plan contains an install phase."""
        return Phase.INSTALL in self.phases
