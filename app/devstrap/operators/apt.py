"""APT package operator implementation.

Executes repository updates and package installation and removal using
apt-get. devstrap runs as root, so no privilege escalation is added.
"""

import logging

from devstrap.core.errors import ExternalCommandFailed
from devstrap.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)

# apt-get diagnostic for a package name absent from every configured source
NOT_FOUND_DIAGNOSTIC = "Unable to locate package {name}"


class AptOperator:
    """Operator for apt-get.

    Every method blocks until apt-get exits. A non-zero exit status raises
    :class:`ExternalCommandFailed`; callers never see a partial success.
    """

    # Timeout for apt operations (30 minutes; toolchain packages are large)
    _APT_TIMEOUT: float = 1800.0

    _ENV: dict[str, str] = {"DEBIAN_FRONTEND": "noninteractive"}

    def is_available(self) -> bool:
        """Check if apt-get is available."""
        return command_exists("apt-get")

    def update(self) -> None:
        """Refresh the package index."""
        self._run(["update"])

    def install(self, packages: list[str]) -> None:
        """Install packages in a single apt-get transaction.

        Args:
            packages: Package names to install. An empty list is a no-op.
        """
        if not packages:
            return
        self._run(["install", *packages], assume_yes=True)

    def install_each(self, packages: list[str]) -> list[str]:
        """Install packages one at a time, skipping unknown package names.

        A package is only skipped when apt-get's error output carries the
        "Unable to locate package" diagnostic for exactly that name. Any
        other failure is raised.

        Args:
            packages: Package names to install.

        Returns:
            Names that were skipped because apt-get could not locate them.

        Raises:
            ExternalCommandFailed: On any failure other than a missing package.
        """
        skipped: list[str] = []
        for package in packages:
            try:
                self.install([package])
            except ExternalCommandFailed as e:
                if NOT_FOUND_DIAGNOSTIC.format(name=package) not in e.stderr:
                    raise
                logger.warning("Package %s not found, skipping", package)
                skipped.append(package)
        return skipped

    def purge(self, packages: list[str]) -> None:
        """Purge packages, configuration files included.

        Args:
            packages: Package names to purge. An empty list is a no-op.
        """
        if not packages:
            return
        self._run(["purge", *packages], assume_yes=True)

    def autoremove(self) -> None:
        """Remove automatically installed packages that are no longer needed."""
        self._run(["autoremove"], assume_yes=True)

    def autoclean(self) -> None:
        """Clear obsolete package files from the local cache."""
        self._run(["autoclean"], assume_yes=True)

    def build_dep(self, package: str) -> None:
        """Install the build dependencies of a source package."""
        self._run(["build-dep", package], assume_yes=True)

    def _run(self, arguments: list[str], assume_yes: bool = False) -> CommandResult:
        """Execute apt-get with the given arguments.

        Args:
            arguments: apt-get command and its operands.
            assume_yes: Whether to pass --yes.

        Returns:
            CommandResult of a successful run.

        Raises:
            ExternalCommandFailed: If apt-get exits non-zero.
        """
        args = ["apt-get", "--quiet"]
        if assume_yes:
            args.append("--yes")
        args.extend(arguments)

        logger.info("Executing %s", " ".join(args))
        result = run_command(args, timeout=self._APT_TIMEOUT, env=self._ENV)

        if not result.success:
            command = " ".join(["apt-get", *arguments])
            raise ExternalCommandFailed(command, result.returncode, result.stderr.strip())
        return result
