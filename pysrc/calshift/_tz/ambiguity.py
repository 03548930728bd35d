"""Resolving local times that a timezone skips or repeats"""

from __future__ import annotations

import logging

from .._common import ZoneResolutionError
from .._math import IsoDays
from .common import Ambiguous, Disambiguate, Gap, Unambiguous, ZonePeriod
from .database import TimeZoneDatabase

_log = logging.getLogger(__name__)

_DISAMBIGUATE_MODES = ("compatible", "earlier", "later", "raise")


class RepeatedTime(ValueError):
    """A datetime is repeated in a timezone, e.g. because of DST"""

    @classmethod
    def _for_tz(cls, label: str, tz: str) -> RepeatedTime:
        return cls(f"{label} is repeated in timezone {tz!r}")


class SkippedTime(ValueError):
    """A datetime is skipped in a timezone, e.g. because of DST"""

    @classmethod
    def _for_tz(cls, label: str, tz: str) -> SkippedTime:
        return cls(f"{label} is skipped in timezone {tz!r}")


def resolve_ambiguity(
    local: IsoDays,
    tz: str,
    db: TimeZoneDatabase,
    disambiguate: Disambiguate,
    label: str = "local time",
) -> tuple[IsoDays, ZonePeriod]:
    """Pick a period for a newly constructed local time. Times in a gap
    are moved out of it."""
    if disambiguate not in _DISAMBIGUATE_MODES:
        raise ValueError(
            "disambiguate must be 'compatible', 'earlier', 'later', or 'raise'"
        )

    found = db.periods_for_local(local, tz)
    if isinstance(found, Unambiguous):
        return local, found.period
    elif isinstance(found, Ambiguous):
        if disambiguate == "raise":
            raise RepeatedTime._for_tz(label, tz)
        period = found.later if disambiguate == "later" else found.earlier
        _log.debug("%s is repeated in %r, using %r", label, tz, period)
        return local, period
    else:  # Gap
        if disambiguate == "raise":
            raise SkippedTime._for_tz(label, tz)
        shift = found.after.offset - found.before.offset
        if disambiguate == "earlier":
            period = found.before
            shift = -shift
        else:
            period = found.after
        _log.debug("%s is skipped in %r, moving %+ds", label, tz, shift)
        return local + IsoDays.from_offset(shift), period


def resolve_shifted(
    target: IsoDays,
    source: IsoDays,
    source_period: ZonePeriod,
    tz: str,
    db: TimeZoneDatabase,
) -> tuple[IsoDays, ZonePeriod]:
    """Pick a period for a local time reached by shifting ``source``.

    A time in a gap is moved across it in the direction of the shift.
    Of a repeated time, we pick the occurrence in the direction of the
    shift: the later one going forward, the earlier one going back.
    """
    found = db.periods_for_local(target, tz)
    if isinstance(found, Gap):
        if source < target:
            shift = found.after.offset - found.before.offset
        else:
            shift = found.before.offset - found.after.offset
        _log.debug("Shifted into a gap in %r, moving %+ds", tz, shift)
        target = target + IsoDays.from_offset(shift)
        found = db.periods_for_local(target, tz)
        if isinstance(found, Gap):
            raise ZoneResolutionError(
                f"Cannot resolve local time in {tz!r}: "
                "it lands in a gap twice"
            )

    if isinstance(found, Unambiguous):
        return target, found.period

    # Ambiguous
    if source < target:
        period = found.later
    elif source > target:
        period = found.earlier
    else:
        period = source_period
    _log.debug("Shifted into a repeated time in %r, using %r", tz, period)
    return target, period
