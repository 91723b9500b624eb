"""LLVM command implementation.

Registers the apt.llvm.org repository and installs or purges the
versioned LLVM toolchain packages.
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
from devstrap.provisioners.llvm import LlvmProvisioner

app = typer.Typer(
    help="Install or purge the LLVM toolchain from apt.llvm.org.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def llvm(
    ctx: typer.Context,
    install: InstallOption = False,
    purge: PurgeOption = False,
    replace: ReplaceOption = False,
    config_path: ConfigOption = None,
) -> None:
    """Install or purge the LLVM toolchain.

    Without options the installed toolchain is purged and then installed
    again. Requires root.

    Examples:
        devstrap llvm              # Purge, then install
        devstrap llvm --install    # Install only
        devstrap llvm --purge      # Purge only
    """
    if ctx.invoked_subcommand is not None:
        return

    plan = plan_or_exit(install, purge, replace)
    config = load_config_or_exit(config_path)

    provisioner = LlvmProvisioner(config.llvm)
    report = run_or_exit(provisioner, plan)
    print_report(provisioner.name, report)
