"""Unit tests for LlvmProvisioner.

Drives complete plans against temporary keyring and source-list
directories with the package tools mocked out.
"""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from devstrap.core.errors import ExternalCommandFailed, MissingToolError
from devstrap.core.planner import build_plan
from devstrap.models.config import LlvmConfig
from devstrap.models.resource import Outcome
from devstrap.operators.apt import AptOperator
from devstrap.provisioners.base import ProvisionState
from devstrap.provisioners.llvm import LlvmProvisioner
from devstrap.scanners.distro import DistroInfo
from devstrap.scanners.dpkg import DpkgScanner

REGISTRATION_LINE = (
    "deb [arch=amd64 signed-by={keyring}] "
    "https://apt.llvm.org/noble/ llvm-toolchain-noble-18 main"
)


@pytest.fixture(autouse=True)
def preconditions_met() -> Iterator[None]:
    """Pretend every tool is installed and the process runs as root."""
    with (
        patch("devstrap.provisioners.base.check_tools"),
        patch("devstrap.provisioners.base.check_root"),
    ):
        yield


@pytest.fixture
def config(tmp_path: Path) -> LlvmConfig:
    """LLVM settings pointing at temporary directories."""
    return LlvmConfig(
        keyring_dir=tmp_path / "keyrings",
        sources_dir=tmp_path / "sources.list.d",
    )


@pytest.fixture
def apt() -> MagicMock:
    """Mocked apt-get operator."""
    return MagicMock(spec=AptOperator)


@pytest.fixture
def dpkg() -> MagicMock:
    """Mocked dpkg scanner with nothing installed."""
    scanner = MagicMock(spec=DpkgScanner)
    scanner.matching_installed.return_value = []
    return scanner


@pytest.fixture
def distro() -> MagicMock:
    """Mocked Ubuntu noble amd64 host."""
    info = MagicMock(spec=DistroInfo)
    info.codename.return_value = "noble"
    info.architecture.return_value = "amd64"
    return info


@pytest.fixture
def fetched() -> list[str]:
    """URLs passed to the key fetcher."""
    return []


@pytest.fixture
def provisioner(
    config: LlvmConfig, apt: MagicMock, dpkg: MagicMock, distro: MagicMock, fetched: list[str]
) -> LlvmProvisioner:
    """LlvmProvisioner wired to mocks and a fake key fetcher."""

    def fetcher(url: str, destination: Path) -> None:
        fetched.append(url)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(b"key")

    return LlvmProvisioner(config, apt=apt, dpkg=dpkg, distro=distro, key_fetcher=fetcher)


def _seed_repository(config: LlvmConfig) -> None:
    config.keyring_dir.mkdir(parents=True)
    config.keyring_path.write_bytes(b"key")
    config.sources_dir.mkdir(parents=True)
    line = REGISTRATION_LINE.format(keyring=config.keyring_path)
    config.source_list_path.write_text(f"{line}\n")


class TestInstall:
    """Tests for the install phase."""

    def test_fresh_install(
        self, provisioner: LlvmProvisioner, config: LlvmConfig, apt: MagicMock, fetched: list[str]
    ) -> None:
        """Key and entry are created, then the versioned packages installed."""
        report = provisioner.run(build_plan(install=True))

        assert [r.outcome for r in report.records] == [Outcome.CREATED, Outcome.CREATED]
        assert fetched == ["https://apt.llvm.org/llvm-snapshot.gpg.key"]
        assert config.source_list_path.read_text() == (
            REGISTRATION_LINE.format(keyring=config.keyring_path) + "\n"
        )
        apt.update.assert_called_once_with()
        apt.install.assert_called_once_with(["clang-18", "lldb-18", "lld-18"])
        apt.autoremove.assert_called_once_with()
        apt.purge.assert_not_called()

    def test_install_when_registered_is_unchanged(
        self, provisioner: LlvmProvisioner, config: LlvmConfig, apt: MagicMock, fetched: list[str]
    ) -> None:
        """With key and entry present, only apt-get update and install run."""
        _seed_repository(config)
        before = config.source_list_path.read_bytes()

        report = provisioner.run(build_plan(install=True))

        assert [r.outcome for r in report.records] == [Outcome.UNCHANGED, Outcome.UNCHANGED]
        assert fetched == []
        assert config.source_list_path.read_bytes() == before
        assert apt.update.call_count == 1
        assert apt.install.call_count == 1

    def test_configured_version(
        self, tmp_path: Path, apt: MagicMock, dpkg: MagicMock, distro: MagicMock
    ) -> None:
        """The configured version selects both the suite and the package names."""
        config = LlvmConfig(
            version=17,
            packages=["clang", "lld"],
            keyring_dir=tmp_path / "keyrings",
            sources_dir=tmp_path / "sources.list.d",
        )
        provisioner = LlvmProvisioner(
            config, apt=apt, dpkg=dpkg, distro=distro, key_fetcher=lambda u, d: d.write_bytes(b"")
        )
        config.keyring_dir.mkdir()

        provisioner.run(build_plan(install=True))

        assert "llvm-toolchain-noble-17" in config.source_list_path.read_text()
        apt.install.assert_called_once_with(["clang-17", "lld-17"])


class TestPurge:
    """Tests for the purge phase."""

    def test_purge_with_nothing_installed(
        self, provisioner: LlvmProvisioner, apt: MagicMock
    ) -> None:
        """Nothing registered and nothing installed means no apt-get calls."""
        report = provisioner.run(build_plan(purge=True))

        assert [r.outcome for r in report.records] == [Outcome.UNCHANGED, Outcome.UNCHANGED]
        apt.purge.assert_not_called()
        apt.autoremove.assert_not_called()
        assert report.succeeded is True

    def test_purge_removes_repository_and_packages(
        self, provisioner: LlvmProvisioner, config: LlvmConfig, apt: MagicMock, dpkg: MagicMock
    ) -> None:
        """Purging unregisters the repository and purges every installed version."""
        _seed_repository(config)
        dpkg.matching_installed.return_value = ["clang-17", "clang-18", "lld-18"]

        report = provisioner.run(build_plan(purge=True))

        assert [r.outcome for r in report.records] == [Outcome.REMOVED, Outcome.REMOVED]
        assert not config.source_list_path.exists()
        assert not config.keyring_path.exists()
        dpkg.matching_installed.assert_called_once_with(["clang", "lldb", "lld"])
        apt.purge.assert_called_once_with(["clang-17", "clang-18", "lld-18"])
        apt.autoremove.assert_called_once_with()
        apt.autoclean.assert_called_once_with()


class TestRun:
    """Tests for plan execution and state transitions."""

    def test_replace_purges_then_installs(
        self, provisioner: LlvmProvisioner, apt: MagicMock, dpkg: MagicMock
    ) -> None:
        """REPLACE walks PURGING then INSTALLING."""
        dpkg.matching_installed.return_value = ["clang-18"]

        report = provisioner.run(build_plan())

        assert report.states == [
            ProvisionState.IDLE,
            ProvisionState.VALIDATING,
            ProvisionState.PURGING,
            ProvisionState.INSTALLING,
            ProvisionState.DONE,
        ]
        method_names = [c[0] for c in apt.method_calls]
        assert method_names.index("purge") < method_names.index("install")

    def test_failure_stops_plan(self, provisioner: LlvmProvisioner, apt: MagicMock) -> None:
        """The first error moves the provisioner to FAILED and propagates."""
        apt.update.side_effect = ExternalCommandFailed("apt-get update", 100)

        with pytest.raises(ExternalCommandFailed):
            provisioner.run(build_plan(install=True))

        assert provisioner.state == ProvisionState.FAILED
        apt.install.assert_not_called()

    def test_missing_tools_checked_before_mutation(
        self, provisioner: LlvmProvisioner, config: LlvmConfig, apt: MagicMock
    ) -> None:
        """A missing tool aborts before anything is touched."""
        with (
            patch(
                "devstrap.provisioners.base.check_tools",
                side_effect=MissingToolError(["gpg", "wget"]),
            ),
            pytest.raises(MissingToolError),
        ):
            provisioner.run(build_plan())

        assert apt.method_calls == []
        assert not config.keyring_dir.exists()
        assert provisioner.state == ProvisionState.FAILED
