"""CPython source build provisioning.

Builds a CPython release with the newest Clang/LLVM pair installed on the
host. The distro's ``deb-src`` entry is enabled only while the build
dependencies are installed and is restored on every exit path.
"""

import logging
import shutil
from collections.abc import Callable
from pathlib import Path

from devstrap.core.errors import MissingToolError
from devstrap.core.reconciler import Reconciler
from devstrap.core.versions import find_compatible_version
from devstrap.models.config import PythonConfig
from devstrap.models.resource import Outcome
from devstrap.operators.apt import AptOperator
from devstrap.operators.cpython import CPythonBuilder
from devstrap.provisioners.base import Provisioner
from devstrap.resources.artifacts import find_installed_interpreters, interpreter_artifacts
from devstrap.resources.sources import SourcePackageToggle
from devstrap.scanners.distro import DistroInfo
from devstrap.scanners.dpkg import DpkgScanner
from devstrap.utils.formatting import print_info, print_warning
from devstrap.utils.transport import extract_archive, fetch_archive

logger = logging.getLogger(__name__)

ArchiveFetcher = Callable[[str, Path], Path]
ArchiveExtractor = Callable[[Path, Path], list[Path]]


class PythonBuildProvisioner(Provisioner):
    """Builds CPython from source, or purges local interpreter installs."""

    required_tools = ("apt-get", "curl", "dpkg", "lsb_release", "make", "tar")

    def __init__(
        self,
        config: PythonConfig,
        *,
        reconciler: Reconciler | None = None,
        apt: AptOperator | None = None,
        dpkg: DpkgScanner | None = None,
        distro: DistroInfo | None = None,
        builder: CPythonBuilder | None = None,
        archive_fetcher: ArchiveFetcher = fetch_archive,
        archive_extractor: ArchiveExtractor = extract_archive,
    ) -> None:
        """Initialize the Python build provisioner.

        Args:
            config: Python build settings.
            reconciler: Reconciler to drive resources with.
            apt: apt-get operator.
            dpkg: Package database reader.
            distro: Distribution identity reader.
            builder: Native build operator.
            archive_fetcher: Downloads the source tarball.
            archive_extractor: Unpacks the source tarball.
        """
        super().__init__(reconciler)
        self.config = config
        self.apt = apt or AptOperator()
        self.dpkg = dpkg or DpkgScanner()
        self.distro = distro or DistroInfo()
        self.builder = builder or CPythonBuilder()
        self._fetch_archive = archive_fetcher
        self._extract_archive = archive_extractor
        self._mirror: str | None = None
        self._codename: str | None = None

    @property
    def name(self) -> str:
        """Return the provisioned component name."""
        return f"Python {self.config.version}"

    def validate(self) -> None:
        """Require a supported distribution and remember its mirror.

        Raises:
            UnsupportedDistributionError: If the host is not Debian or Ubuntu.
        """
        self._mirror = self.distro.mirror()
        self._codename = self.distro.codename()

    def select_compiler_version(self) -> int:
        """Pick the newest Clang version with a matching LLVM install.

        Raises:
            MissingToolError: If no versioned llvm or clang package is installed.
            NoCompatibleVersion: If the installed versions do not overlap.
        """
        llvm_versions = self.dpkg.installed_versions("llvm")
        clang_versions = self.dpkg.installed_versions("clang")

        missing = [
            name
            for name, versions in (("llvm", llvm_versions), ("clang", clang_versions))
            if not versions
        ]
        if missing:
            raise MissingToolError(missing)

        version = find_compatible_version(llvm_versions, clang_versions)
        print_info(f"Using Clang/LLVM {version}")
        return version

    def purge(self) -> None:
        """Remove every interpreter ``make altinstall`` left under the prefix."""
        prefix = self.config.prefix
        versions = find_installed_interpreters(prefix)
        if not versions:
            print_info(f"No locally installed Python interpreters under {prefix}")
            return

        for minor in versions:
            removed = 0
            for artifact in interpreter_artifacts(prefix, minor):
                if self.reconciler.ensure_absent(artifact) == Outcome.REMOVED:
                    removed += 1
            print_info(f"Purged Python {minor} from {prefix} ({removed} path(s) removed)")

    def install(self) -> None:
        """Install build dependencies, then build and install CPython."""
        version = self.select_compiler_version()
        self._install_build_dependencies()
        self._build(version)

    def _install_build_dependencies(self) -> None:
        """Install build dependencies with deb-src temporarily enabled."""
        if self._mirror is None or self._codename is None:
            self.validate()
        assert self._mirror is not None and self._codename is not None

        toggle = SourcePackageToggle(self.config.source_list, self._mirror, self._codename)
        seed, *rest = self.config.build_dependencies

        with self.reconciler.toggle_temporarily(toggle) as record:
            if record.changed:
                print_info(f"Enabled deb-src entry in {toggle.path}")
            else:
                print_info(f"Found deb-src entry in {toggle.path}")

            print_info("Running apt-get update...")
            self.apt.update()
            print_info(f"Installing build dependencies of {seed}")
            self.apt.build_dep(seed)
            print_info(f"Installing the following packages: {' '.join(rest)}")
            for skipped in self.apt.install_each(rest):
                print_warning(f"{skipped} not found. Skipping.")
            self.apt.autoremove()

        if record.changed:
            print_info(f"Restored deb-src entry in {toggle.path}")
            self.apt.update()

    def _build(self, version: int) -> None:
        """Download, configure, compile, test and altinstall the release."""
        work_dir = self.config.work_dir
        archive = work_dir / self.config.archive_name

        print_info(f"Fetching {self.config.archive_name} from {self.config.archive_url}")
        self._fetch_archive(self.config.archive_url, archive)
        try:
            print_info(f"Extracting {self.config.archive_name}")
            self._extract_archive(archive, work_dir)
        finally:
            archive.unlink(missing_ok=True)

        source_dir = work_dir / f"Python-{self.config.version}"
        print_info("Configuring python")
        self.builder.configure(source_dir, version, self.config.prefix, self.config.debug_build)
        print_info("Running make")
        self.builder.build(source_dir)
        print_info("Running make test")
        self.builder.test(source_dir)
        print_info(f"Running make altinstall into {self.config.prefix}/")
        self.builder.altinstall(source_dir)

        shutil.rmtree(source_dir)
        logger.info("Removed build tree %s", source_dir)
