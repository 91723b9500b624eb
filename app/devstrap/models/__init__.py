"""Data models for devstrap.

This module exports the core data structures used throughout the application.
"""

from devstrap.models.config import DevstrapConfig, LlvmConfig, PythonConfig
from devstrap.models.intent import Intent, Phase, Plan
from devstrap.models.package import PackageSelection, PackageSpec
from devstrap.models.resource import (
    Outcome,
    ReconcileRecord,
    RepositoryRegistration,
    ToggleRecord,
    ToggleState,
)

__all__ = [
    "DevstrapConfig",
    "Intent",
    "LlvmConfig",
    "Outcome",
    "PackageSelection",
    "PackageSpec",
    "Phase",
    "Plan",
    "PythonConfig",
    "ReconcileRecord",
    "RepositoryRegistration",
    "ToggleRecord",
    "ToggleState",
]
