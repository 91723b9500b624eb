"""Shared Rich display functions for provisioning reports.

Provides the outcome table and summary line printed after a provisioning
command completes.
"""

from rich.table import Table

from devstrap.models.resource import Outcome, ReconcileRecord
from devstrap.provisioners.base import ProvisionReport
from devstrap.utils.formatting import console, print_success

_OUTCOME_STYLES: dict[Outcome, str] = {
    Outcome.CREATED: "added",
    Outcome.REMOVED: "removed",
    Outcome.UNCHANGED: "unchanged",
}


def create_records_table(records: list[ReconcileRecord]) -> Table:
    """Create a Rich table displaying reconciliation outcomes.

    Args:
        records: Outcomes in the order they were reconciled.

    Returns:
        Rich Table with Outcome and Resource columns.
    """
    table = Table(
        title="Resources",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Outcome", width=10, justify="center")
    table.add_column("Resource")

    for record in records:
        style = _OUTCOME_STYLES[record.outcome]
        table.add_row(
            f"[{style}]{record.outcome.value}[/{style}]",
            f"[muted]{record.resource}[/muted]",
        )

    return table


def print_report(name: str, report: ProvisionReport) -> None:
    """Print the outcome table and a closing summary.

    Args:
        name: Human-readable name of what was provisioned.
        report: Completed provisioning report.
    """
    if report.records:
        console.print()
        console.print(create_records_table(report.records))

    phases = " + ".join(phase.value for phase in report.plan.phases)
    print_success(f"{name}: {phases} completed.")
