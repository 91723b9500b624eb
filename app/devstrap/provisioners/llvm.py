"""LLVM toolchain provisioning from apt.llvm.org."""

import logging

from devstrap.core.reconciler import Reconciler
from devstrap.models.config import LlvmConfig
from devstrap.models.package import PackageSpec
from devstrap.models.resource import Outcome, RepositoryRegistration
from devstrap.operators.apt import AptOperator
from devstrap.provisioners.base import Provisioner
from devstrap.resources.keyring import KeyFetcher, KeyringResource
from devstrap.resources.sources import SourceEntryResource, SourceListResource
from devstrap.scanners.distro import DistroInfo
from devstrap.scanners.dpkg import DpkgScanner
from devstrap.utils.formatting import print_info
from devstrap.utils.transport import fetch_key

logger = logging.getLogger(__name__)


class LlvmProvisioner(Provisioner):
    """Registers the LLVM repository and manages versioned LLVM packages.

    Installing registers the signing key and the source entry, then
    installs ``<package>-<version>`` for every managed package. Purging
    unregisters the repository and purges every installed
    ``<package>-<N>``, whatever N is.
    """

    required_tools = ("apt-get", "dpkg", "gpg", "lsb_release", "wget")

    def __init__(
        self,
        config: LlvmConfig,
        *,
        reconciler: Reconciler | None = None,
        apt: AptOperator | None = None,
        dpkg: DpkgScanner | None = None,
        distro: DistroInfo | None = None,
        key_fetcher: KeyFetcher = fetch_key,
    ) -> None:
        """Initialize the LLVM provisioner.

        Args:
            config: LLVM settings.
            reconciler: Reconciler to drive resources with.
            apt: apt-get operator.
            dpkg: Package database reader.
            distro: Distribution identity reader.
            key_fetcher: Downloads and dearmors the signing key.
        """
        super().__init__(reconciler)
        self.config = config
        self.apt = apt or AptOperator()
        self.dpkg = dpkg or DpkgScanner()
        self.distro = distro or DistroInfo()
        self.key = KeyringResource(config.keyring_path, config.key_url, fetcher=key_fetcher)
        self._registration: RepositoryRegistration | None = None

    @property
    def name(self) -> str:
        """Return the provisioned component name."""
        return f"LLVM {self.config.version}"

    @property
    def packages(self) -> list[str]:
        """Return the versioned package names to install."""
        return [
            PackageSpec(base).bind(self.config.version).resolved_name
            for base in self.config.packages
        ]

    def registration(self) -> RepositoryRegistration:
        """Build the repository registration for this host.

        Reads the architecture and codename on first use.
        """
        if self._registration is None:
            codename = self.distro.codename()
            arch = self.distro.architecture()
            self._registration = RepositoryRegistration(
                type="deb",
                options=f"[arch={arch} signed-by={self.config.keyring_path}]",
                uri=f"{self.config.base_url.rstrip('/')}/{codename}/",
                suite=f"llvm-toolchain-{codename}-{self.config.version}",
                components=self.config.components,
            )
            logger.debug("Repository registration: %s", self._registration.line)
        return self._registration

    def validate(self) -> None:
        """Resolve the registration before anything is mutated."""
        self.registration()

    def purge(self) -> None:
        """Unregister the repository and purge installed LLVM packages."""
        source_list = SourceListResource(self.config.source_list_path)
        if self.reconciler.ensure_absent(source_list) == Outcome.REMOVED:
            print_info(f"Removed {source_list.path}")

        if self.reconciler.ensure_absent(self.key) == Outcome.REMOVED:
            print_info(f"Removed OpenPGP public key from {self.config.keyring_dir}")

        installed = self.dpkg.matching_installed(self.config.packages)
        if not installed:
            print_info("No LLVM packages installed; nothing to purge")
            return

        print_info(f"Purging the following packages: {' '.join(installed)}")
        self.apt.purge(installed)
        self.apt.autoremove()
        self.apt.autoclean()

    def install(self) -> None:
        """Register the repository and install the versioned packages."""
        if self.reconciler.ensure_present(self.key) == Outcome.UNCHANGED:
            print_info(f"Found OpenPGP public key in {self.config.keyring_dir}")
        else:
            print_info(
                f"Added OpenPGP public key from {self.config.key_url} "
                f"to {self.config.keyring_dir}"
            )

        entry = SourceEntryResource(self.config.source_list_path, self.registration())
        if self.reconciler.ensure_present(entry) == Outcome.UNCHANGED:
            print_info(f"Found entry in {entry.path}")
        else:
            print_info(f"Added entry to {entry.path}")

        print_info("Running apt-get update...")
        self.apt.update()
        print_info(f"Installing the following packages: {' '.join(self.packages)}")
        self.apt.install(self.packages)
        self.apt.autoremove()
