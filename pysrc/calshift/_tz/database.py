"""The interface between datetimes and timezone rules.

Datetimes only ever talk to a :class:`TimeZoneDatabase`, which makes it
possible to swap the rules (e.g. for testing) without touching the engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .._common import ZoneResolutionError
from .._math import IsoDays
from .common import UTC_PERIOD, Ambiguity, Unambiguous, ZonePeriod
from .store import get_tz

__all__ = [
    "TimeZoneDatabase",
    "TZifDatabase",
    "UTCOnlyDatabase",
    "TZIF_DATABASE",
]


class TimeZoneDatabase(ABC):
    """Resolves local and UTC values in a timezone.

    Both methods take and return calendar-agnostic day counts, and raise
    :class:`~calshift.ZoneResolutionError` if they cannot resolve.
    """

    __slots__ = ()

    @abstractmethod
    def periods_for_local(self, local: IsoDays, tz: str) -> Ambiguity:
        """Whether the naive local value exists once, not at all (a gap),
        or twice (ambiguous) in the zone"""

    @abstractmethod
    def period_for_utc(self, utc: IsoDays, tz: str) -> ZonePeriod:
        """The period in force at the given UTC value"""


class TZifDatabase(TimeZoneDatabase):
    """IANA timezones, loaded from TZif files in ``TZPATH`` or ``tzdata``"""

    __slots__ = ()

    def periods_for_local(self, local: IsoDays, tz: str) -> Ambiguity:
        return get_tz(tz).ambiguity_for_local(local.to_epoch_seconds())

    def period_for_utc(self, utc: IsoDays, tz: str) -> ZonePeriod:
        return get_tz(tz).period_for_instant(utc.to_epoch_seconds())

    def __repr__(self) -> str:
        return "TZifDatabase()"


TZIF_DATABASE = TZifDatabase()


class UTCOnlyDatabase(TimeZoneDatabase):
    """Knows only UTC. Any other zone raises ZoneResolutionError."""

    __slots__ = ()

    ZONES = frozenset(("UTC", "Etc/UTC"))

    def _check(self, tz: str) -> None:
        if tz not in self.ZONES:
            raise ZoneResolutionError(
                f"Time zone {tz!r} is not supported by {self!r}"
            )

    def periods_for_local(self, local: IsoDays, tz: str) -> Ambiguity:
        self._check(tz)
        return Unambiguous(UTC_PERIOD)

    def period_for_utc(self, utc: IsoDays, tz: str) -> ZonePeriod:
        self._check(tz)
        return UTC_PERIOD

    def __repr__(self) -> str:
        return "UTCOnlyDatabase()"
