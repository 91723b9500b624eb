"""Operators for external package and build tools.

This module provides the apt-get operator and the CPython native build
operator.
"""

from devstrap.operators.apt import AptOperator
from devstrap.operators.cpython import CPythonBuilder

__all__ = ["AptOperator", "CPythonBuilder"]
