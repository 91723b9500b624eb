"""Provisioners drive a plan through purge and install phases."""

from devstrap.provisioners.base import ProvisionReport, ProvisionState, Provisioner
from devstrap.provisioners.llvm import LlvmProvisioner
from devstrap.provisioners.python import PythonBuildProvisioner

__all__ = [
    "LlvmProvisioner",
    "ProvisionReport",
    "ProvisionState",
    "Provisioner",
    "PythonBuildProvisioner",
]
