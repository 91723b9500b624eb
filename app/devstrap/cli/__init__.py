"""CLI package for devstrap.

This package contains the Typer application and all subcommands.
"""

from devstrap.cli.main import app

__all__ = ["app"]
