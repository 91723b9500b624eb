"""dpkg selection scanner.

Turns ``dpkg --get-selections`` into typed :class:`PackageSelection`
records so that callers query names, states and version suffixes
instead of pattern-matching the text dump.
"""

import logging
import re
from collections.abc import Iterable

from devstrap.core.errors import ExternalCommandFailed
from devstrap.models.package import PackageSelection
from devstrap.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

# clang-18 -> ("clang", "18"); clang-format-18 -> ("clang-format", "18")
_VERSIONED_NAME_RE = re.compile(r"^(?P<base>[a-z0-9][a-z0-9+.-]*?)-(?P<version>\d+)$")


def parse_selection_line(line: str) -> PackageSelection | None:
    """Parse one line of ``dpkg --get-selections`` output.

    Args:
        line: Whitespace-separated ``name state`` pair.

    Returns:
        PackageSelection if parsing succeeds, None otherwise.
    """
    parts = line.split()
    if len(parts) != 2:
        if line.strip():
            logger.debug("Skipping malformed selection line: %r", line[:100])
        return None

    name, state = parts
    unqualified = name.split(":", 1)[0]
    match = _VERSIONED_NAME_RE.match(unqualified)
    if match:
        return PackageSelection(
            name=name,
            state=state,
            base=match["base"],
            version=int(match["version"]),
        )
    return PackageSelection(name=name, state=state, base=unqualified)


class DpkgScanner:
    """Reader for the dpkg selection database."""

    def is_available(self) -> bool:
        """Check if dpkg is available."""
        return command_exists("dpkg")

    def list_installed_selections(self) -> list[PackageSelection]:
        """Return every selection recorded by dpkg.

        Raises:
            ExternalCommandFailed: If dpkg --get-selections fails.
        """
        result = run_command(["dpkg", "--get-selections"])
        if not result.success:
            raise ExternalCommandFailed(
                "dpkg --get-selections", result.returncode, result.stderr.strip()
            )

        selections: list[PackageSelection] = []
        for line in result.stdout.splitlines():
            selection = parse_selection_line(line)
            if selection is not None:
                selections.append(selection)
        return selections

    def installed_versions(self, base: str) -> list[int]:
        """Return the installed major versions of ``base``, ascending.

        Args:
            base: Unversioned package name, e.g. ``"llvm"``.

        Returns:
            Version set such as ``[15, 17, 18]``.
        """
        versions = [
            s.version
            for s in self.list_installed_selections()
            if s.base == base and s.version is not None and s.is_installed
        ]
        return sorted(versions)

    def matching_installed(self, bases: Iterable[str]) -> list[str]:
        """Return installed package names of the form ``<base>-<N>``.

        Args:
            bases: Unversioned package names of the managed family.

        Returns:
            Matching installed package names, in dpkg order.
        """
        wanted = set(bases)
        return [
            s.name
            for s in self.list_installed_selections()
            if s.base in wanted and s.version is not None and s.is_installed
        ]
