"""Distribution identity reader backed by lsb_release and dpkg."""

import logging

from devstrap.core.errors import ExternalCommandFailed, UnsupportedDistributionError
from devstrap.utils.shell import run_command

logger = logging.getLogger(__name__)

# Primary archive mirror per distributor id, without scheme
MIRRORS: dict[str, str] = {
    "Ubuntu": "archive.ubuntu.com/ubuntu",
    "Debian": "deb.debian.org/debian",
}


class DistroInfo:
    """Reads the host's distributor id, codename and architecture."""

    def codename(self) -> str:
        """Return the release codename, e.g. ``noble``."""
        return self._query(["lsb_release", "--codename", "--short"])

    def distributor_id(self) -> str:
        """Return the distributor id, e.g. ``Ubuntu``."""
        return self._query(["lsb_release", "--id", "--short"])

    def architecture(self) -> str:
        """Return the dpkg architecture, e.g. ``amd64``."""
        return self._query(["dpkg", "--print-architecture"])

    def mirror(self) -> str:
        """Return the primary archive mirror for this distribution.

        Raises:
            UnsupportedDistributionError: If the distributor has no known mirror.
        """
        distributor = self.distributor_id()
        try:
            return MIRRORS[distributor]
        except KeyError:
            raise UnsupportedDistributionError(distributor) from None

    def _query(self, args: list[str]) -> str:
        result = run_command(args)
        if not result.success:
            raise ExternalCommandFailed(" ".join(args), result.returncode, result.stderr.strip())
        value = result.stdout.strip()
        logger.debug("%s -> %s", " ".join(args), value)
        return value
