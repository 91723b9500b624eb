"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from devstrap import __version__
from devstrap.cli.commands import config, llvm, python
from devstrap.utils.formatting import configure_logging

app = typer.Typer(
    name="devstrap",
    help="Bootstrap LLVM and CPython development toolchains on Debian and Ubuntu.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"devstrap version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log every probe and external command.",
        ),
    ] = False,
) -> None:
    """devstrap - Idempotent development toolchain bootstrap.

    Each command converges the host to the requested state: running it
    twice changes nothing the second time.
    """
    configure_logging(verbose)


app.add_typer(llvm.app, name="llvm")
app.add_typer(python.app, name="python")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
