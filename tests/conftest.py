"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest

from devstrap.models.resource import RepositoryRegistration


@pytest.fixture
def mock_selections_output() -> str:
    """Sample dpkg --get-selections output for testing."""
    return """clang-17\t\t\t\t\tinstall
clang-18\t\t\t\t\tinstall
clang-format-18\t\t\t\tinstall
curl\t\t\t\t\t\tinstall
libclang-cpp18:amd64\t\t\tinstall
lld-18\t\t\t\t\t\tinstall
lldb-16\t\t\t\t\t\tdeinstall
llvm-16\t\t\t\t\t\tinstall
llvm-18\t\t\t\t\t\tinstall
python3\t\t\t\t\t\tinstall"""


@pytest.fixture
def mock_empty_output() -> str:
    """Empty output for testing edge cases."""
    return ""


@pytest.fixture
def ubuntu_sources_commented() -> str:
    """sources.list with the deb-src entry commented out."""
    return """# See http://help.ubuntu.com/community/UpgradeNotes
deb http://archive.ubuntu.com/ubuntu/ noble main restricted
# deb-src http://archive.ubuntu.com/ubuntu/ noble main restricted

deb http://archive.ubuntu.com/ubuntu/ noble-updates main restricted
"""


@pytest.fixture
def ubuntu_sources_missing() -> str:
    """sources.list without any deb-src entry."""
    return """deb http://archive.ubuntu.com/ubuntu/ noble main restricted
deb http://archive.ubuntu.com/ubuntu/ noble-updates main restricted
deb http://security.ubuntu.com/ubuntu noble-security main restricted
"""


@pytest.fixture
def ubuntu_sources_enabled() -> str:
    """sources.list with an active deb-src entry."""
    return """deb http://archive.ubuntu.com/ubuntu/ noble main restricted
deb-src http://archive.ubuntu.com/ubuntu/ noble main restricted
"""


@pytest.fixture
def llvm_registration() -> RepositoryRegistration:
    """The apt.llvm.org registration for noble on amd64."""
    return RepositoryRegistration(
        type="deb",
        options="[arch=amd64 signed-by=/usr/share/keyrings/llvm.gpg]",
        uri="https://apt.llvm.org/noble/",
        suite="llvm-toolchain-noble-18",
    )


@pytest.fixture
def write_file(tmp_path: Path):
    """Write ``content`` to ``tmp_path / name`` and return the path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
