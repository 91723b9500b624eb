"""Signing key resource.

A repository's OpenPGP key lives as one dearmored file in the keyring
directory and is referenced from the source entry via ``signed-by``.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from devstrap.resources.base import ManagedResource
from devstrap.utils.transport import fetch_key

logger = logging.getLogger(__name__)

KeyFetcher = Callable[[str, Path], None]


class KeyringResource(ManagedResource):
    """A dearmored OpenPGP keyring file fetched from a URL.

    Attributes:
        path: Location of the keyring file.
        url: URL of the armored key.
    """

    def __init__(self, path: Path, url: str, fetcher: KeyFetcher = fetch_key) -> None:
        """Initialize the keyring resource.

        Args:
            path: Location of the keyring file.
            url: URL of the armored key.
            fetcher: Callable downloading ``url`` into ``path``.
        """
        self.path = path
        self.url = url
        self._fetcher = fetcher

    @property
    def name(self) -> str:
        """Return the resource name."""
        return f"OpenPGP public key {self.path}"

    def exists(self) -> bool:
        """Check if the keyring file is present."""
        return self.path.is_file()

    def create(self) -> None:
        """Download and install the key."""
        self._fetcher(self.url, self.path)
        logger.info("Installed key from %s to %s", self.url, self.path)

    def remove(self) -> None:
        """Delete the keyring file."""
        self.path.unlink()

    def discard(self) -> None:
        """Delete a half-written keyring file, if any."""
        self.path.unlink(missing_ok=True)
