"""Shared types and utilities for CLI commands.

This module provides the intent options common to every provisioning
command and the helper that runs a provisioner and maps errors to exit
codes.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from devstrap.core.config import load_config
from devstrap.core.errors import DevstrapError
from devstrap.core.planner import build_plan
from devstrap.models.config import DevstrapConfig
from devstrap.models.intent import Plan
from devstrap.provisioners.base import ProvisionReport, Provisioner
from devstrap.utils.formatting import print_error

InstallOption = Annotated[
    bool,
    typer.Option("--install", "-i", help="Install only."),
]
PurgeOption = Annotated[
    bool,
    typer.Option("--purge", "-p", help="Purge only."),
]
ReplaceOption = Annotated[
    bool,
    typer.Option("--replace", "-r", help="Purge, then install (default)."),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to the configuration file.",
        dir_okay=False,
    ),
]


def fail(error: DevstrapError) -> typer.Exit:
    """Report ``error`` and return the exit carrying its code.

    Example:
        >>> raise fail(e) from e
    """
    print_error(escape(str(error)))
    return typer.Exit(code=error.exit_code)


def load_config_or_exit(path: Path | None) -> DevstrapConfig:
    """Load the configuration, exiting with the config error code on failure."""
    try:
        return load_config(path)
    except DevstrapError as e:
        raise fail(e) from e


def plan_or_exit(install: bool, purge: bool, replace: bool) -> Plan:
    """Build the plan for the intent flags, exiting with the usage code on conflict."""
    try:
        return build_plan(install=install, purge=purge, replace=replace)
    except DevstrapError as e:
        raise fail(e) from e


def run_or_exit(provisioner: Provisioner, plan: Plan) -> ProvisionReport:
    """Run ``provisioner`` over ``plan``.

    Raises:
        typer.Exit: With the error's exit code if provisioning fails.
    """
    try:
        return provisioner.run(plan)
    except DevstrapError as e:
        raise fail(e) from e
