"""Managed resources driven by the reconciler.

This module exports the resource interfaces and their concrete
implementations for keys, source lists and install artifacts.
"""

from devstrap.resources.artifacts import (
    InstallArtifactResource,
    find_installed_interpreters,
    interpreter_artifacts,
)
from devstrap.resources.base import ManagedResource, ToggleResource
from devstrap.resources.keyring import KeyringResource
from devstrap.resources.sources import (
    SourceEntryResource,
    SourceListResource,
    SourcePackageToggle,
)

__all__ = [
    "InstallArtifactResource",
    "KeyringResource",
    "ManagedResource",
    "SourceEntryResource",
    "SourceListResource",
    "SourcePackageToggle",
    "ToggleResource",
    "find_installed_interpreters",
    "interpreter_artifacts",
]
