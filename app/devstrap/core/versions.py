"""Version compatibility matching over sorted version sets.

A version set is an ascending, duplicate-free list of integer major
versions as reported by the package database. Duplicates would be an
upstream contract violation and are not removed here.
"""

import logging
from collections.abc import Sequence

from devstrap.core.errors import NoCompatibleVersion

logger = logging.getLogger(__name__)


def binary_search(ordered: Sequence[int], value: int) -> bool:
    """Check whether ``value`` is a member of the ascending ``ordered`` list.

    Args:
        ordered: Ascending sequence of distinct integers.
        value: Value to look for.

    Returns:
        True if found, False otherwise.
    """
    lower = 0
    upper = len(ordered) - 1
    while lower <= upper:
        mid = (lower + upper) // 2
        if ordered[mid] == value:
            return True
        if ordered[mid] < value:
            lower = mid + 1
        else:
            upper = mid - 1
    return False


def find_compatible_version(ordered_a: Sequence[int], ordered_b: Sequence[int]) -> int:
    """Find the greatest version present in both sets.

    Candidates from ``ordered_b`` are tried newest first; each one is
    binary-searched in ``ordered_a``.

    Args:
        ordered_a: Ascending, distinct versions searched against.
        ordered_b: Ascending, distinct versions iterated from the top.

    Returns:
        The highest common version.

    Raises:
        NoCompatibleVersion: If either set is empty or they share no member.
    """
    if not ordered_a or not ordered_b:
        raise NoCompatibleVersion(list(ordered_a), list(ordered_b))

    for candidate in reversed(ordered_b):
        if binary_search(ordered_a, candidate):
            logger.debug("Matched version %d in %s", candidate, list(ordered_a))
            return candidate
        logger.debug("Version %d not present in %s", candidate, list(ordered_a))

    raise NoCompatibleVersion(list(ordered_a), list(ordered_b))
