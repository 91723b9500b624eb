"""APT source-list resources.

Covers the one-line repository registration appended to a source-list
fragment, the fragment file itself, and the temporarily enabled
``deb-src`` entry in the distro's primary source list.
"""

import logging
import re
from pathlib import Path

from devstrap.core.errors import ResourceCreationFailed
from devstrap.models.resource import RepositoryRegistration, ToggleRecord, ToggleState
from devstrap.resources.base import ManagedResource, ToggleResource

logger = logging.getLogger(__name__)


def _read_lines(path: Path) -> list[str]:
    """Read a file into lines that keep their line endings."""
    return path.read_text(encoding="utf-8").splitlines(keepends=True)


def _write_lines(path: Path, lines: list[str]) -> None:
    path.write_text("".join(lines), encoding="utf-8")


def _line_ending(line: str) -> str:
    return line[len(line.rstrip("\r\n")) :]


class SourceEntryResource(ManagedResource):
    """One exact registration line inside a source-list file.

    Attributes:
        path: Source-list file holding the entry.
        registration: The repository registration.
    """

    def __init__(self, path: Path, registration: RepositoryRegistration) -> None:
        """Initialize the source entry resource.

        Args:
            path: Source-list file holding the entry.
            registration: The repository registration.
        """
        self.path = path
        self.registration = registration

    @property
    def name(self) -> str:
        """Return the resource name."""
        return f"entry in {self.path}"

    @property
    def line(self) -> str:
        """Return the rendered registration line."""
        return self.registration.line

    def exists(self) -> bool:
        """Check if the exact registration line is in the file."""
        if not self.path.is_file():
            return False
        return any(line.rstrip("\r\n") == self.line for line in _read_lines(self.path))

    def create(self) -> None:
        """Append the registration line, creating the file if needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = self.path.read_text(encoding="utf-8") if self.path.exists() else ""
        separator = "\n" if content and not content.endswith("\n") else ""
        with self.path.open(mode="a", encoding="utf-8") as f:
            f.write(f"{separator}{self.line}\n")
        logger.info("Appended %r to %s", self.line, self.path)

    def remove(self) -> None:
        """Remove the registration line; delete the file once it is empty."""
        kept = [line for line in _read_lines(self.path) if line.rstrip("\r\n") != self.line]
        if any(line.strip() for line in kept):
            _write_lines(self.path, kept)
        else:
            self.path.unlink()


class SourceListResource(ManagedResource):
    """A dedicated source-list fragment, e.g. ``sources.list.d/llvm.list``.

    Used when purging: every registration in the fragment belongs to the
    managed repository, whatever version it was written for.

    Attributes:
        path: The fragment file.
        registrations: Lines written when the fragment is created.
    """

    def __init__(self, path: Path, registrations: list[RepositoryRegistration] | None = None):
        self.path = path
        self.registrations = registrations or []

    @property
    def name(self) -> str:
        """Return the resource name."""
        return f"source list {self.path}"

    def exists(self) -> bool:
        """Check if the fragment file is present."""
        return self.path.is_file()

    def create(self) -> None:
        """Write the fragment with its registrations."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        _write_lines(self.path, [f"{r.line}\n" for r in self.registrations])

    def remove(self) -> None:
        """Delete the fragment file."""
        self.path.unlink()


class SourcePackageToggle(ToggleResource):
    """The ``deb-src`` entry for a mirror and codename in a source list.

    Enabling either uncomments an existing entry or inserts a fresh one
    right after the matching binary ``deb`` entry. Restoring locates the
    entry by content, so unrelated edits in between are tolerated.

    Attributes:
        path: Primary source list, usually ``/etc/apt/sources.list``.
        mirror: Mirror host and path, e.g. ``archive.ubuntu.com/ubuntu``.
        codename: Distribution codename, e.g. ``noble``.
    """

    def __init__(self, path: Path, mirror: str, codename: str) -> None:
        """Initialize the toggle.

        Args:
            path: Primary source list.
            mirror: Mirror host and path without scheme.
            codename: Distribution codename.
        """
        self.path = path
        self.mirror = mirror
        self.codename = codename

        tail = rf"{re.escape(mirror)}/? {re.escape(codename)} ([A-Za-z]* )*main.*"
        self._source_re = re.compile(rf"^(?P<prefix>[ \t]*(?:#.*?)?)(?P<entry>deb-src.+{tail})$")
        self._binary_re = re.compile(rf"^[ \t]*deb(?P<options>[ \t].*?){tail}$")

    @property
    def name(self) -> str:
        """Return the resource name."""
        return f"deb-src entry in {self.path}"

    def observe(self) -> ToggleState:
        """Read the current state without mutating anything."""
        for line in _read_lines(self.path):
            match = self._source_re.match(line.rstrip("\r\n"))
            if match:
                return ToggleState.DISABLED if match["prefix"].strip() else ToggleState.ENABLED
        return ToggleState.MISSING

    def enable(self) -> ToggleRecord:
        """Make the deb-src entry active and record how to undo it.

        Raises:
            ResourceCreationFailed: If the source list cannot be read or
                holds no binary entry to derive a deb-src entry from.
        """
        try:
            lines = _read_lines(self.path)
        except OSError as e:
            raise ResourceCreationFailed(self.name, str(e)) from e

        for index, line in enumerate(lines):
            match = self._source_re.match(line.rstrip("\r\n"))
            if match is None:
                continue
            prefix, entry = match["prefix"], match["entry"]
            if not prefix.strip():
                logger.debug("deb-src already enabled on line %d", index + 1)
                return ToggleRecord(state=ToggleState.ENABLED, entry=entry)
            lines[index] = f"{entry}{_line_ending(line)}"
            _write_lines(self.path, lines)
            logger.info("Uncommented deb-src entry on line %d of %s", index + 1, self.path)
            return ToggleRecord(state=ToggleState.DISABLED, entry=entry, prefix=prefix)

        for index, line in enumerate(lines):
            match = self._binary_re.match(line.rstrip("\r\n"))
            if match is None:
                continue
            entry = f"deb-src{match['options']}{self.mirror} {self.codename} main"
            if not line.endswith("\n"):
                lines[index] = f"{line}\n"
                lines.insert(index + 1, entry)
            else:
                lines.insert(index + 1, f"{entry}\n")
            _write_lines(self.path, lines)
            logger.info("Inserted %r after line %d of %s", entry, index + 1, self.path)
            return ToggleRecord(state=ToggleState.MISSING, entry=entry)

        cause = f"no deb entry for {self.mirror} {self.codename} to derive a deb-src entry from"
        raise ResourceCreationFailed(self.name, cause)

    def restore(self, record: ToggleRecord) -> None:
        """Re-disable or delete the entry, according to ``record``."""
        if record.state == ToggleState.ENABLED:
            return

        lines = _read_lines(self.path)
        index = next(
            (i for i, line in enumerate(lines) if line.rstrip("\r\n") == record.entry),
            None,
        )
        if index is None:
            logger.warning("deb-src entry %r no longer in %s", record.entry, self.path)
            return

        if record.state == ToggleState.DISABLED:
            lines[index] = f"{record.prefix}{lines[index]}"
        else:
            removed = lines.pop(index)
            if index == len(lines) and not removed.endswith("\n") and lines:
                lines[-1] = lines[-1].rstrip("\n")
        _write_lines(self.path, lines)
        logger.info("Restored %s to %s", self.name, record.state.value)
