"""Key and archive transport.

Thin wrappers around wget, gpg, curl and tar. Failures of the transfer
tools surface as :class:`TransportError` carrying the tool's exit code;
retries, if any, are the transfer tool's business.
"""

import logging
from pathlib import Path

from devstrap.core.errors import ExternalCommandFailed, TransportError
from devstrap.utils.shell import run_command

logger = logging.getLogger(__name__)

# Downloads may be slow; the interpreter source tarball is ~28 MB
_FETCH_TIMEOUT: float = 600.0

KEY_MODE = 0o644


def fetch_key(url: str, destination: Path) -> None:
    """Download an armored OpenPGP key and install it dearmored.

    The armored download is staged next to ``destination`` and always
    removed afterwards. On failure ``destination`` may hold a partial
    file; callers are responsible for discarding it.

    Args:
        url: URL of the armored key.
        destination: Path of the binary keyring to write.

    Raises:
        TransportError: If wget fails.
        ExternalCommandFailed: If gpg cannot dearmor the download.
    """
    staged = destination.with_name(f"{destination.name}.asc")
    logger.debug("Fetching key %s into %s", url, staged)
    try:
        result = run_command(
            ["wget", "--quiet", f"--output-document={staged}", url],
            timeout=_FETCH_TIMEOUT,
        )
        if not result.success:
            raise TransportError(url, result.returncode)

        result = run_command(
            ["gpg", "--batch", "--yes", "--output", str(destination), "--dearmor", str(staged)],
        )
        if not result.success:
            raise ExternalCommandFailed("gpg --dearmor", result.returncode, result.stderr.strip())

        destination.chmod(KEY_MODE)
    finally:
        staged.unlink(missing_ok=True)


def fetch_archive(url: str, destination: Path) -> Path:
    """Download a file with curl.

    Args:
        url: URL to download.
        destination: Path to write the download to.

    Returns:
        The destination path.

    Raises:
        TransportError: If curl fails; the partial download is removed.
    """
    logger.debug("Fetching archive %s into %s", url, destination)
    result = run_command(
        ["curl", "--fail", "--silent", "--location", url, "--output", str(destination)],
        timeout=_FETCH_TIMEOUT,
    )
    if not result.success:
        destination.unlink(missing_ok=True)
        raise TransportError(url, result.returncode)
    return destination


def extract_archive(archive: Path, directory: Path) -> list[Path]:
    """Extract a gzip-compressed tarball.

    Args:
        archive: Path of the ``.tgz`` file.
        directory: Directory to extract into.

    Returns:
        Top-level paths created by the extraction, sorted.

    Raises:
        ExternalCommandFailed: If tar cannot list or extract the archive.
    """
    listing = run_command(["tar", "--list", "--gunzip", f"--file={archive}"])
    if not listing.success:
        raise ExternalCommandFailed("tar --list", listing.returncode, listing.stderr.strip())

    top_level: set[str] = set()
    for member in listing.stdout.splitlines():
        head = member.strip().removeprefix("./").split("/", 1)[0]
        if head:
            top_level.add(head)

    result = run_command(
        ["tar", "--extract", "--gunzip", f"--file={archive}", f"--directory={directory}"],
        timeout=_FETCH_TIMEOUT,
    )
    if not result.success:
        raise ExternalCommandFailed("tar --extract", result.returncode, result.stderr.strip())

    return sorted(directory / name for name in top_level)
