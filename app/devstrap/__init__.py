"""devstrap - idempotent development environment bootstrapping for Debian hosts."""

__version__ = "0.1.0"
