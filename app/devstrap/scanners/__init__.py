"""Readers for the package database and the host distribution.

This module exports the scanner classes that observe system state.
"""

from devstrap.scanners.distro import MIRRORS, DistroInfo
from devstrap.scanners.dpkg import DpkgScanner, parse_selection_line

__all__ = ["MIRRORS", "DistroInfo", "DpkgScanner", "parse_selection_line"]
