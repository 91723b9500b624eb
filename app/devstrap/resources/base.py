"""Abstract base classes for managed resources.

This module defines the interfaces the reconciler drives. A resource only
knows how to observe and mutate itself; deciding whether to mutate is the
reconciler's job.
"""

from abc import ABC, abstractmethod

from devstrap.models.resource import ToggleRecord


class ManagedResource(ABC):
    """An externally observable artifact with present/absent states.

    Example:
        >>> key = KeyringResource(Path("/usr/share/keyrings/llvm.gpg"), url)
        >>> Reconciler().ensure_present(key)
        <Outcome.CREATED: 'created'>
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return a human-readable name for progress and error messages."""

    @abstractmethod
    def exists(self) -> bool:
        """Read the current state of the resource.

        Returns:
            True if the resource is present, False otherwise.
        """

    @abstractmethod
    def create(self) -> None:
        """Bring the resource into existence.

        Raises:
            TransportError: If a download step fails.
            ExternalCommandFailed: If an external tool step fails.
            OSError: If a filesystem step fails.
        """

    @abstractmethod
    def remove(self) -> None:
        """Delete the resource. Only called when :meth:`exists` is True."""

    def discard(self) -> None:
        """Undo whatever a failed :meth:`create` left behind.

        The default removes the resource if anything of it exists.
        """
        if self.exists():
            self.remove()


class ToggleResource(ABC):
    """A resource with enabled, disabled and missing states.

    :meth:`enable` reports what it did as a :class:`ToggleRecord` so
    that :meth:`restore` can apply the exact inverse.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return a human-readable name for progress and error messages."""

    @abstractmethod
    def enable(self) -> ToggleRecord:
        """Observe the current state and make the entry active.

        Returns:
            Record of the pre-toggle state and the restoration data.

        Raises:
            ResourceCreationFailed: If no entry can be enabled or inserted.
        """

    @abstractmethod
    def restore(self, record: ToggleRecord) -> None:
        """Return the resource to the state captured in ``record``."""
