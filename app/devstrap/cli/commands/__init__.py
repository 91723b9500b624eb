"""CLI commands for devstrap.

This package contains all subcommand implementations.
"""

from devstrap.cli.commands import config, llvm, python

__all__ = ["config", "llvm", "python"]
