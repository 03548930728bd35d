"""Calendar-agnostic day counting and date field arithmetic."""

from __future__ import annotations

from fractions import Fraction
from math import gcd
from typing import TYPE_CHECKING, Any

from ._common import (
    MICROS_PER_DAY,
    MICROS_PER_SECOND,
    SECS_PER_DAY,
    UNIX_EPOCH_ISO_DAYS,
    _ImmutableBase,
    final,
)

if TYPE_CHECKING:
    from ._calendar import CalendarProvider


def _lcm(a: int, b: int) -> int:
    return a * b // gcd(a, b)


@final
class IsoDays(_ImmutableBase):
    """A count of days since 0000-01-01 (proleptic Gregorian), plus a
    fraction of a day.

    The fraction is ``parts / parts_per_day``. It is kept as given on
    construction, so it may be negative or exceed a day. Addition always
    yields a normalized value.

    >>> IsoDays(3, -1, 24).normalized()
    IsoDays(2, 23, 24)
    """

    __slots__ = ("_days", "_parts", "_per_day")

    def __init__(
        self, days: int, parts: int = 0, parts_per_day: int = MICROS_PER_DAY
    ) -> None:
        if parts_per_day < 1:
            raise ValueError("parts_per_day must be positive")
        self._days = days
        self._parts = parts
        self._per_day = parts_per_day

    @property
    def days(self) -> int:
        return self._days

    @property
    def parts(self) -> int:
        return self._parts

    @property
    def parts_per_day(self) -> int:
        return self._per_day

    def normalized(self) -> IsoDays:
        """Fold the fraction into ``[0, parts_per_day)``, flooring into
        the day count."""
        extra, parts = divmod(self._parts, self._per_day)
        if not extra and parts == self._parts:
            return self
        return IsoDays(self._days + extra, parts, self._per_day)

    def __add__(self, other: Any) -> IsoDays:
        if not isinstance(other, IsoDays):
            return NotImplemented
        per_day = _lcm(self._per_day, other._per_day)
        parts = self._parts * (per_day // self._per_day) + other._parts * (
            per_day // other._per_day
        )
        extra, parts = divmod(parts, per_day)
        return IsoDays(self._days + other._days + extra, parts, per_day)

    def __neg__(self) -> IsoDays:
        return IsoDays(-self._days, -self._parts, self._per_day)

    def _exact(self) -> Fraction:
        return self._days + Fraction(self._parts, self._per_day)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IsoDays):
            return NotImplemented
        return self._exact() == other._exact()

    def __lt__(self, other: IsoDays) -> bool:
        if not isinstance(other, IsoDays):
            return NotImplemented
        return self._exact() < other._exact()

    def __le__(self, other: IsoDays) -> bool:
        if not isinstance(other, IsoDays):
            return NotImplemented
        return self._exact() <= other._exact()

    def __gt__(self, other: IsoDays) -> bool:
        if not isinstance(other, IsoDays):
            return NotImplemented
        return self._exact() > other._exact()

    def __ge__(self, other: IsoDays) -> bool:
        if not isinstance(other, IsoDays):
            return NotImplemented
        return self._exact() >= other._exact()

    def __hash__(self) -> int:
        return hash(self._exact())

    def __repr__(self) -> str:
        return f"IsoDays({self._days}, {self._parts}, {self._per_day})"

    def to_epoch_seconds(self) -> int:
        """Whole seconds since 1970-01-01T00:00, flooring any fraction
        of a second."""
        norm = self.normalized()
        return (norm._days - UNIX_EPOCH_ISO_DAYS) * SECS_PER_DAY + (
            norm._parts * SECS_PER_DAY
        ) // norm._per_day

    @classmethod
    def from_epoch_seconds(cls, secs: int) -> IsoDays:
        days, rem = divmod(secs, SECS_PER_DAY)
        return cls(days + UNIX_EPOCH_ISO_DAYS, rem, SECS_PER_DAY)

    @classmethod
    def from_offset(cls, offset_secs: int) -> IsoDays:
        """A signed, unnormalized fraction of ``offset_secs`` seconds"""
        return cls(0, offset_secs, SECS_PER_DAY)


def micros_between(a: IsoDays, b: IsoDays) -> int:
    """Microseconds from ``b`` to ``a``, truncated toward zero"""
    return int((a._exact() - b._exact()) * MICROS_PER_DAY)


def duration_to_time_fraction(
    duration: Any, calendar: CalendarProvider
) -> IsoDays:
    """The time-of-day part of a duration as a (possibly negative, possibly
    multi-day) fraction. Only the units below a day contribute."""
    parts, per_day = calendar.time_to_day_fraction(
        duration.get("hour"),
        duration.get("minute"),
        duration.get("second"),
        duration.get("microsecond") + duration.get("millisecond") * 1_000,
    )
    return IsoDays(0, parts, per_day)


def _clamp_day(
    calendar: CalendarProvider, year: int, month: int, day: int
) -> int:
    return min(day, calendar.days_in_month(year, month))


def shift_date_fields(
    calendar: CalendarProvider,
    year: int,
    month: int,
    day: int,
    years: int = 0,
    months: int = 0,
    days: int = 0,
) -> tuple[int, int, int]:
    """Shift a date in a fixed order: years, then months, then days.

    Year and month shifts clamp the day to the end of the resulting month.
    The day shift is exact. Weeks should be passed as ``days * 7``.
    """
    if years:
        year += years
        day = _clamp_day(calendar, year, month, day)
    if months:
        year_delta, month0 = divmod(
            month - 1 + months, calendar.months_in_year(year)
        )
        year += year_delta
        month = month0 + 1
        day = _clamp_day(calendar, year, month, day)
    if days:
        year, month, day = calendar.add_days(year, month, day, days)
    return year, month, day


def is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


# 1-indexed days per month
_MONTHDAYS = [0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]


def days_in_month(year: int, month: int) -> int:
    return _MONTHDAYS[month] + (month == 2 and is_leap(year))


_UNIT_MICROS = {
    "hour": 3_600 * MICROS_PER_SECOND,
    "minute": 60 * MICROS_PER_SECOND,
    "second": MICROS_PER_SECOND,
    "millisecond": 1_000,
    "microsecond": 1,
}


def micros_to_unit(micros: int, unit: str) -> int:
    """Express a microsecond count in ``unit``, truncating toward zero"""
    q = abs(micros) // check_unit(unit)
    return q if micros >= 0 else -q


def check_unit(unit: str) -> int:
    """The microseconds in one ``unit``. Raises ValueError if unknown."""
    try:
        return _UNIT_MICROS[unit]
    except (KeyError, TypeError):
        raise ValueError(f"Invalid unit: {unit!r}") from None
