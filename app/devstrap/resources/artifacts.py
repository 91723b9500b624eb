"""Install artifacts left under a prefix by ``make altinstall``."""

import logging
import re
import shutil
from pathlib import Path

from devstrap.resources.base import ManagedResource

logger = logging.getLogger(__name__)

# python3.13, python3.13d, python3.13t ... but not python3.13-config
_INTERPRETER_RE = re.compile(r"^python(?P<minor>\d+\.\d+)[a-z]*$")


class InstallArtifactResource(ManagedResource):
    """A file, symlink or directory produced by a local interpreter install.

    Artifacts are only ever reconciled towards absence; they are created
    by the native build, never by devstrap itself.

    Attributes:
        path: The artifact path.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    @property
    def name(self) -> str:
        """Return the resource name."""
        return str(self.path)

    def exists(self) -> bool:
        """Check if the artifact (or a dangling symlink to it) exists."""
        return self.path.exists() or self.path.is_symlink()

    def create(self) -> None:
        """Install artifacts come from the native build.

        Raises:
            NotImplementedError: Always.
        """
        msg = f"{self.path} is produced by 'make altinstall', not by devstrap"
        raise NotImplementedError(msg)

    def remove(self) -> None:
        """Delete the artifact, recursively for directories."""
        if self.path.is_dir() and not self.path.is_symlink():
            shutil.rmtree(self.path)
        else:
            self.path.unlink()


def find_installed_interpreters(prefix: Path) -> list[str]:
    """Return MAJOR.MINOR versions of interpreters installed under ``prefix``.

    Args:
        prefix: Installation prefix, e.g. ``/usr/local``.

    Returns:
        Sorted, distinct version strings such as ``["3.12", "3.13"]``.
    """
    bin_dir = prefix / "bin"
    if not bin_dir.is_dir():
        return []

    versions: set[str] = set()
    for entry in bin_dir.iterdir():
        match = _INTERPRETER_RE.match(entry.name)
        if match:
            versions.add(match["minor"])
    return sorted(versions, key=lambda v: tuple(int(part) for part in v.split(".")))


def interpreter_artifacts(prefix: Path, minor: str) -> list[InstallArtifactResource]:
    """Collect every artifact ``make altinstall`` leaves for one version.

    Args:
        prefix: Installation prefix.
        minor: MAJOR.MINOR version, e.g. ``"3.13"``.

    Returns:
        Resources for the artifacts that currently exist, in a stable order.
    """
    # Suffix letters cover debug (d) and free-threaded (t) builds; patterns
    # never use a bare "*" after the version so 3.1 cannot match 3.13.
    patterns = [
        f"bin/python{minor}",
        f"bin/python{minor}[a-z]",
        f"bin/python{minor}-config",
        f"bin/python{minor}[a-z]-config",
        f"bin/pip{minor}",
        f"bin/idle{minor}",
        f"bin/pydoc{minor}",
        f"lib/python{minor}",
        f"lib/python{minor}[a-z]",
        f"lib/libpython{minor}.*",
        f"lib/libpython{minor}[a-z].*",
        f"lib/pkgconfig/python-{minor}.pc",
        f"lib/pkgconfig/python-{minor}[a-z].pc",
        f"lib/pkgconfig/python-{minor}-embed.pc",
        f"lib/pkgconfig/python-{minor}[a-z]-embed.pc",
        f"include/python{minor}",
        f"include/python{minor}[a-z]",
        f"share/man/man1/python{minor}.1",
    ]
    seen: set[Path] = set()
    artifacts: list[InstallArtifactResource] = []
    for pattern in patterns:
        for path in sorted(prefix.glob(pattern)):
            if path not in seen:
                seen.add(path)
                artifacts.append(InstallArtifactResource(path))
    logger.debug("Found %d artifact(s) for Python %s under %s", len(artifacts), minor, prefix)
    return artifacts
