"""Action planning from intent flags.

Pure business logic: turns the three independent CLI flags into a single
resolved :class:`Intent` and an ordered tuple of phases. Nothing here
touches external state.
"""

from devstrap.core.errors import ConflictingIntentError
from devstrap.models.intent import Intent, Phase, Plan

PHASES: dict[Intent, tuple[Phase, ...]] = {
    Intent.REPLACE: (Phase.PURGE, Phase.INSTALL),
    Intent.INSTALL: (Phase.INSTALL,),
    Intent.PURGE: (Phase.PURGE,),
}


def resolve_intent(install: bool = False, purge: bool = False, replace: bool = False) -> Intent:
    """Resolve the requested flags into exactly one intent.

    ``install`` together with ``purge`` is the long form of ``replace``.
    No flags at all also resolves to ``replace``.

    Args:
        install: --install was given.
        purge: --purge was given.
        replace: --replace was given.

    Returns:
        The resolved Intent.

    Raises:
        ConflictingIntentError: If replace is combined with install or purge.
    """
    if replace and (install or purge):
        flags = ["--replace"]
        if install:
            flags.append("--install")
        if purge:
            flags.append("--purge")
        raise ConflictingIntentError(flags)

    if install and not purge:
        return Intent.INSTALL
    if purge and not install:
        return Intent.PURGE
    return Intent.REPLACE


def plan_phases(intent: Intent) -> tuple[Phase, ...]:
    """Return the ordered phases for an intent."""
    return PHASES[intent]


def build_plan(install: bool = False, purge: bool = False, replace: bool = False) -> Plan:
    """Validate the flags and build the ordered plan.

    Raises:
        ConflictingIntentError: If the flag combination is invalid.
    """
    intent = resolve_intent(install=install, purge=purge, replace=replace)
    return Plan(intent=intent, phases=plan_phases(intent))
