"""Unit tests for PythonBuildProvisioner.

Drives the build and purge phases against a temporary source list,
work directory and prefix with apt, dpkg and the native build mocked out.
"""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from devstrap.core.errors import (
    ExternalCommandFailed,
    MissingToolError,
    NoCompatibleVersion,
    TransportError,
)
from devstrap.core.planner import build_plan
from devstrap.models.config import PythonConfig
from devstrap.operators.apt import AptOperator
from devstrap.operators.cpython import CPythonBuilder
from devstrap.provisioners.base import ProvisionState
from devstrap.provisioners.python import PythonBuildProvisioner
from devstrap.scanners.distro import DistroInfo
from devstrap.scanners.dpkg import DpkgScanner

INSTALLED_VERSIONS = {"llvm": [16, 18], "clang": [17, 18]}


@pytest.fixture(autouse=True)
def preconditions_met() -> Iterator[None]:
    """Pretend every tool is installed and the process runs as root."""
    with (
        patch("devstrap.provisioners.base.check_tools"),
        patch("devstrap.provisioners.base.check_root"),
    ):
        yield


@pytest.fixture
def source_list(tmp_path: Path, ubuntu_sources_commented: str) -> Path:
    """Primary source list with a commented deb-src entry."""
    path = tmp_path / "sources.list"
    path.write_text(ubuntu_sources_commented)
    return path


@pytest.fixture
def config(tmp_path: Path, source_list: Path) -> PythonConfig:
    """Python build settings pointing at temporary directories."""
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    return PythonConfig(
        prefix=tmp_path / "prefix",
        source_list=source_list,
        work_dir=work_dir,
        build_dependencies=["python3", "gdb", "libmpdec-dev"],
    )


@pytest.fixture
def apt() -> MagicMock:
    """Mocked apt-get operator."""
    operator = MagicMock(spec=AptOperator)
    operator.install_each.return_value = []
    return operator


@pytest.fixture
def dpkg() -> MagicMock:
    """Mocked dpkg scanner with llvm 16/18 and clang 17/18 installed."""
    scanner = MagicMock(spec=DpkgScanner)
    scanner.installed_versions.side_effect = lambda base: list(INSTALLED_VERSIONS.get(base, []))
    return scanner


@pytest.fixture
def distro() -> MagicMock:
    """Mocked Ubuntu noble host."""
    info = MagicMock(spec=DistroInfo)
    info.mirror.return_value = "archive.ubuntu.com/ubuntu"
    info.codename.return_value = "noble"
    return info


@pytest.fixture
def builder() -> MagicMock:
    """Mocked native build operator."""
    return MagicMock(spec=CPythonBuilder)


def _fake_fetch(url: str, destination: Path) -> Path:
    destination.write_bytes(b"tgz")
    return destination


def _fake_extract(archive: Path, directory: Path) -> list[Path]:
    source_dir = directory / archive.name.removesuffix(".tgz")
    (source_dir / "Lib").mkdir(parents=True)
    return [source_dir]


@pytest.fixture
def provisioner(
    config: PythonConfig,
    apt: MagicMock,
    dpkg: MagicMock,
    distro: MagicMock,
    builder: MagicMock,
) -> PythonBuildProvisioner:
    """PythonBuildProvisioner wired to mocks and fake transport."""
    return PythonBuildProvisioner(
        config,
        apt=apt,
        dpkg=dpkg,
        distro=distro,
        builder=builder,
        archive_fetcher=_fake_fetch,
        archive_extractor=_fake_extract,
    )


class TestSelectCompilerVersion:
    """Tests for PythonBuildProvisioner.select_compiler_version."""

    def test_highest_common_version(self, provisioner: PythonBuildProvisioner) -> None:
        """The newest clang with a matching llvm is chosen."""
        assert provisioner.select_compiler_version() == 18

    @pytest.mark.parametrize(
        ("installed", "missing"),
        [
            ({"clang": [18]}, ["llvm"]),
            ({"llvm": [18]}, ["clang"]),
            ({}, ["llvm", "clang"]),
        ],
    )
    def test_missing_toolchain(
        self,
        provisioner: PythonBuildProvisioner,
        dpkg: MagicMock,
        installed: dict[str, list[int]],
        missing: list[str],
    ) -> None:
        """No versioned llvm or clang package is a missing tool."""
        dpkg.installed_versions.side_effect = lambda base: installed.get(base, [])

        with pytest.raises(MissingToolError) as exc_info:
            provisioner.select_compiler_version()

        assert exc_info.value.tools == missing

    def test_no_overlap(self, provisioner: PythonBuildProvisioner, dpkg: MagicMock) -> None:
        """Disjoint llvm and clang versions cannot be paired."""
        dpkg.installed_versions.side_effect = lambda base: {"llvm": [16], "clang": [17]}[base]

        with pytest.raises(NoCompatibleVersion):
            provisioner.select_compiler_version()


class TestInstall:
    """Tests for the install phase."""

    def test_full_build(
        self,
        provisioner: PythonBuildProvisioner,
        config: PythonConfig,
        source_list: Path,
        ubuntu_sources_commented: str,
        apt: MagicMock,
        builder: MagicMock,
    ) -> None:
        """Dependencies install with deb-src enabled, then CPython is built."""
        seen_during_build_dep: list[str] = []
        apt.build_dep.side_effect = lambda seed: seen_during_build_dep.append(
            source_list.read_text()
        )
        apt.install_each.return_value = ["libmpdec-dev"]

        report = provisioner.run(build_plan(install=True))

        assert report.succeeded is True
        assert "\ndeb-src http://archive.ubuntu.com/ubuntu/ noble" in seen_during_build_dep[0]
        assert source_list.read_text() == ubuntu_sources_commented
        apt.build_dep.assert_called_once_with("python3")
        apt.install_each.assert_called_once_with(["gdb", "libmpdec-dev"])
        assert apt.update.call_count == 2

        source_dir = config.work_dir / "Python-3.13.0"
        builder.configure.assert_called_once_with(source_dir, 18, config.prefix, True)
        builder.build.assert_called_once_with(source_dir)
        builder.test.assert_called_once_with(source_dir)
        builder.altinstall.assert_called_once_with(source_dir)
        assert list(config.work_dir.iterdir()) == []

    def test_enabled_entry_skips_second_update(
        self,
        provisioner: PythonBuildProvisioner,
        source_list: Path,
        ubuntu_sources_enabled: str,
        apt: MagicMock,
    ) -> None:
        """With deb-src already active the index is refreshed only once."""
        source_list.write_text(ubuntu_sources_enabled)

        provisioner.run(build_plan(install=True))

        assert apt.update.call_count == 1
        assert source_list.read_text() == ubuntu_sources_enabled

    def test_build_dep_failure_restores_source_list(
        self,
        provisioner: PythonBuildProvisioner,
        source_list: Path,
        ubuntu_sources_commented: str,
        apt: MagicMock,
        builder: MagicMock,
    ) -> None:
        """The deb-src entry is re-disabled even when build-dep fails."""
        apt.build_dep.side_effect = ExternalCommandFailed("apt-get build-dep python3", 100)

        with pytest.raises(ExternalCommandFailed):
            provisioner.run(build_plan(install=True))

        assert source_list.read_text() == ubuntu_sources_commented
        assert provisioner.state == ProvisionState.FAILED
        builder.configure.assert_not_called()

    def test_download_failure(
        self, config: PythonConfig, apt: MagicMock, dpkg: MagicMock, distro: MagicMock
    ) -> None:
        """A failed download aborts before any build step."""

        def failing_fetch(url: str, destination: Path) -> Path:
            raise TransportError(url, 22)

        builder = MagicMock(spec=CPythonBuilder)
        provisioner = PythonBuildProvisioner(
            config,
            apt=apt,
            dpkg=dpkg,
            distro=distro,
            builder=builder,
            archive_fetcher=failing_fetch,
            archive_extractor=_fake_extract,
        )

        with pytest.raises(TransportError):
            provisioner.run(build_plan(install=True))

        builder.configure.assert_not_called()

    def test_failed_build_keeps_source_tree(
        self, provisioner: PythonBuildProvisioner, config: PythonConfig, builder: MagicMock
    ) -> None:
        """A failed native build leaves the extracted tree for inspection."""
        builder.test.side_effect = ExternalCommandFailed("make test", 2)

        with pytest.raises(ExternalCommandFailed):
            provisioner.run(build_plan(install=True))

        assert (config.work_dir / "Python-3.13.0").is_dir()
        assert not (config.work_dir / "Python-3.13.0.tgz").exists()
        builder.altinstall.assert_not_called()


class TestPurge:
    """Tests for the purge phase."""

    def test_removes_local_interpreters(
        self, provisioner: PythonBuildProvisioner, config: PythonConfig
    ) -> None:
        """Every altinstalled interpreter under the prefix is removed."""
        bin_dir = config.prefix / "bin"
        bin_dir.mkdir(parents=True)
        for name in ["python3.12", "pip3.12", "python3.13", "python3.13-config", "tool"]:
            (bin_dir / name).write_text("")
        (config.prefix / "lib" / "python3.13").mkdir(parents=True)

        report = provisioner.run(build_plan(purge=True))

        assert len(report.records) == 5
        assert sorted(p.name for p in bin_dir.iterdir()) == ["tool"]
        assert not (config.prefix / "lib" / "python3.13").exists()

    def test_nothing_installed(self, provisioner: PythonBuildProvisioner, apt: MagicMock) -> None:
        """An empty prefix purges nothing."""
        report = provisioner.run(build_plan(purge=True))

        assert report.records == []
        assert report.succeeded is True
        assert apt.method_calls == []
