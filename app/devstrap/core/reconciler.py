"""Idempotent reconciliation of managed resources.

The reconciler drives one resource at a time from its observed state to a
desired state. State is read immediately before any write; no locks are
taken, so two devstrap runs against the same host must not overlap.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from devstrap.core.errors import ExternalCommandFailed, ResourceCreationFailed, TransportError
from devstrap.models.resource import Outcome, ReconcileRecord, ToggleRecord, ToggleState
from devstrap.resources.base import ManagedResource, ToggleResource

logger = logging.getLogger(__name__)


class Reconciler:
    """Applies desired states to resources and records the outcomes.

    Attributes:
        records: Outcomes of every ensure call, in order.
    """

    def __init__(self) -> None:
        """Initialize the reconciler with an empty record list."""
        self.records: list[ReconcileRecord] = []

    def _record(self, resource: ManagedResource, outcome: Outcome) -> Outcome:
        self.records.append(ReconcileRecord(resource=resource.name, outcome=outcome))
        return outcome

    def ensure_present(self, resource: ManagedResource) -> Outcome:
        """Create ``resource`` unless it already exists.

        Args:
            resource: Resource to reconcile.

        Returns:
            Outcome.UNCHANGED if already present, Outcome.CREATED otherwise.

        Raises:
            ResourceCreationFailed: If creation failed. Any partial artifact
                has been discarded before this is raised.
        """
        if resource.exists():
            logger.info("%s already present", resource.name)
            return self._record(resource, Outcome.UNCHANGED)

        logger.info("Creating %s", resource.name)
        try:
            resource.create()
        except (TransportError, ExternalCommandFailed) as e:
            self._discard(resource)
            raise ResourceCreationFailed(resource.name, str(e), e.upstream_exit_code) from e
        except OSError as e:
            self._discard(resource)
            raise ResourceCreationFailed(resource.name, str(e)) from e

        return self._record(resource, Outcome.CREATED)

    def ensure_absent(self, resource: ManagedResource) -> Outcome:
        """Remove ``resource`` if it exists.

        Args:
            resource: Resource to reconcile.

        Returns:
            Outcome.UNCHANGED if already absent, Outcome.REMOVED otherwise.
        """
        if not resource.exists():
            logger.info("%s already absent", resource.name)
            return self._record(resource, Outcome.UNCHANGED)

        logger.info("Removing %s", resource.name)
        resource.remove()
        return self._record(resource, Outcome.REMOVED)

    @contextmanager
    def toggle_temporarily(self, toggle: ToggleResource) -> Iterator[ToggleRecord]:
        """Enable ``toggle`` for the duration of the ``with`` block.

        The pre-toggle state is captured before mutation and restored
        exactly once when the block exits, whether it raised or not.

        Yields:
            The record describing what enabling did.
        """
        record = toggle.enable()
        logger.info("%s was %s on entry", toggle.name, record.state.value)
        try:
            yield record
        finally:
            if record.state != ToggleState.ENABLED:
                logger.info("Restoring %s to %s", toggle.name, record.state.value)
            toggle.restore(record)

    def _discard(self, resource: ManagedResource) -> None:
        """Remove partial artifacts left by a failed create."""
        logger.warning("Discarding partial %s", resource.name)
        resource.discard()
