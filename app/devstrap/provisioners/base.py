"""Provisioning orchestration.

A provisioner walks a validated :class:`Plan` through a small state
machine::

    IDLE -> VALIDATING -> {PURGING, INSTALLING} -> DONE
                                     \\-> FAILED

Preconditions are checked once while VALIDATING. Phases then run strictly
in plan order; the first error aborts the rest of the plan. There is no
retry at this layer.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from devstrap.core.errors import DevstrapError
from devstrap.core.preconditions import check_root, check_tools
from devstrap.core.reconciler import Reconciler
from devstrap.models.intent import Phase, Plan
from devstrap.models.resource import ReconcileRecord

logger = logging.getLogger(__name__)


class ProvisionState(Enum):
    """States of a provisioning run."""

    IDLE = "idle"
    VALIDATING = "validating"
    PURGING = "purging"
    INSTALLING = "installing"
    DONE = "done"
    FAILED = "failed"


PHASE_STATES: dict[Phase, ProvisionState] = {
    Phase.PURGE: ProvisionState.PURGING,
    Phase.INSTALL: ProvisionState.INSTALLING,
}


@dataclass(slots=True)
class ProvisionReport:
    """What a provisioning run did.

    Attributes:
        plan: The plan that was executed.
        states: Every state entered, in order, starting with IDLE.
        records: Reconciliation outcomes, in order.
    """

    plan: Plan
    states: list[ProvisionState] = field(default_factory=lambda: [ProvisionState.IDLE])
    records: list[ReconcileRecord] = field(default_factory=list)

    @property
    def final_state(self) -> ProvisionState:
        """Return the last state entered."""
        return self.states[-1]

    @property
    def succeeded(self) -> bool:
        """Check if every phase of the plan completed."""
        return self.final_state == ProvisionState.DONE


class Provisioner(ABC):
    """Abstract base class for provisioning variants.

    Subclasses declare the external tools they need and implement the
    purge and install phases in terms of reconciler calls and operator
    invocations.

    Example:
        >>> provisioner = LlvmProvisioner(config.llvm)
        >>> report = provisioner.run(build_plan(install=True))
        >>> report.succeeded
        True
    """

    required_tools: tuple[str, ...] = ()

    def __init__(self, reconciler: Reconciler | None = None) -> None:
        """Initialize the provisioner.

        Args:
            reconciler: Reconciler to drive resources with. A fresh one is
                created if not given.
        """
        self.reconciler = reconciler or Reconciler()
        self.state = ProvisionState.IDLE

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the human-readable name of what is provisioned."""

    def validate(self) -> None:
        """Run variant-specific checks after tools and privileges.

        The default checks nothing.
        """

    @abstractmethod
    def purge(self) -> None:
        """Remove everything this variant manages."""

    @abstractmethod
    def install(self) -> None:
        """Provision everything this variant manages."""

    def run(self, plan: Plan) -> ProvisionReport:
        """Execute ``plan``.

        Args:
            plan: Validated plan from the action planner.

        Returns:
            Report of the completed run.

        Raises:
            DevstrapError: The first unrecovered error from any step.
        """
        report = ProvisionReport(plan=plan)
        self.state = ProvisionState.IDLE
        first_record = len(self.reconciler.records)

        try:
            self._enter(ProvisionState.VALIDATING, report)
            check_tools(list(self.required_tools))
            check_root()
            self.validate()

            for phase in plan.phases:
                self._enter(PHASE_STATES[phase], report)
                if phase == Phase.PURGE:
                    self.purge()
                else:
                    self.install()
        except DevstrapError:
            self._enter(ProvisionState.FAILED, report)
            raise
        finally:
            report.records = self.reconciler.records[first_record:]

        self._enter(ProvisionState.DONE, report)
        return report

    def _enter(self, state: ProvisionState, report: ProvisionReport) -> None:
        logger.debug("%s: %s -> %s", self.name, self.state.value, state.value)
        self.state = state
        report.states.append(state)
