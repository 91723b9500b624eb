"""Python command implementation.

Builds CPython from source with the installed Clang/LLVM toolchain, or
purges interpreters previously installed under the prefix.
"""

import typer

from devstrap.cli.display import print_report
from devstrap.cli.types import (
    ConfigOption,
    InstallOption,
    PurgeOption,
    ReplaceOption,
    load_config_or_exit,
    plan_or_exit,
    run_or_exit,
)
from devstrap.provisioners.python import PythonBuildProvisioner

app = typer.Typer(
    help="Build CPython from source with Clang.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def python(
    ctx: typer.Context,
    install: InstallOption = False,
    purge: PurgeOption = False,
    replace: ReplaceOption = False,
    config_path: ConfigOption = None,
) -> None:
    """Build and install CPython, or purge local installs.

    Needs a matching pair of versioned ``llvm-N`` and ``clang-N`` packages;
    run ``devstrap llvm --install`` first. Requires root.

    Examples:
        devstrap python              # Purge, then build and install
        devstrap python --install    # Build and install only
        devstrap python --purge      # Purge only
    """
    if ctx.invoked_subcommand is not None:
        return

    plan = plan_or_exit(install, purge, replace)
    config = load_config_or_exit(config_path)

    provisioner = PythonBuildProvisioner(config.python)
    report = run_or_exit(provisioner, plan)
    print_report(provisioner.name, report)
