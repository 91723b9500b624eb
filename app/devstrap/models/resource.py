"""Reconciliation models.

Outcomes reported by the reconciler, the tri-state toggle model, and the
one-line repository registration.
"""

from dataclasses import dataclass
from enum import Enum


class Outcome(Enum):
    """Transition performed by a single reconciliation call.

    Attributes:
        UNCHANGED: Observed state already matched the desired state.
        CREATED: The resource was brought into existence.
        REMOVED: The resource was deleted.
    """

    UNCHANGED = "unchanged"
    CREATED = "created"
    REMOVED = "removed"


class ToggleState(Enum):
    """Observed state of a toggle resource before it was mutated.

    Attributes:
        ENABLED: Entry exists and is active; nothing to do or undo.
        DISABLED: Entry exists but is commented out.
        MISSING: No entry exists at all.
    """

    ENABLED = "enabled"
    DISABLED = "disabled"
    MISSING = "missing"


@dataclass(frozen=True, slots=True)
class ToggleRecord:
    """What a toggle entry action did, so that it can be inverted.

    Attributes:
        state: State observed before the toggle was enabled.
        entry: The active entry line as it reads while enabled.
        prefix: Comment prefix stripped from a disabled entry.
    """

    state: ToggleState
    entry: str = ""
    prefix: str = ""

    @property
    def changed(self) -> bool:
        """Check if enabling the toggle mutated anything."""
        return self.state != ToggleState.ENABLED


@dataclass(frozen=True, slots=True)
class ReconcileRecord:
    """Outcome of one reconciliation, kept for reporting.

    Attributes:
        resource: Human-readable resource name.
        outcome: Transition that was performed.
    """

    resource: str
    outcome: Outcome


@dataclass(frozen=True, slots=True)
class RepositoryRegistration:
    """A one-line APT repository registration.

    Attributes:
        type: Archive type, ``deb`` or ``deb-src``.
        options: Bracketed option list, e.g. ``[arch=amd64 signed-by=...]``.
        uri: Repository base URI.
        suite: Distribution suite.
        components: Space-separated component list.
    """

    type: str
    options: str
    uri: str
    suite: str
    components: str = "main"

    def __post_init__(self) -> None:
        """Validate registration data after initialization."""
        if self.type not in ("deb", "deb-src"):
            msg = f"Unsupported repository type: {self.type}"
            raise ValueError(msg)
        if not self.uri or not self.suite:
            msg = "Repository URI and suite cannot be empty"
            raise ValueError(msg)

    @property
    def line(self) -> str:
        """Render the registration as a single source-list line."""
        parts = [self.type, self.options, self.uri, self.suite, self.components]
        return " ".join(part for part in parts if part)
