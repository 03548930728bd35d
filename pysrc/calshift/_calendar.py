"""Pluggable calendars.

A calendar converts between its own date/time fields and the
calendar-agnostic :class:`~calshift.IsoDays` count. Everything the shift
engine knows about month lengths and day counting goes through here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date as _date
from typing import ClassVar, Union

from ._common import MICROS_PER_DAY, InvalidDate
from ._math import IsoDays, days_in_month, is_leap

__all__ = [
    "CalendarProvider",
    "ISOCalendar",
    "ISO",
    "register_calendar",
    "get_calendar",
]

_MICROS_PER_HOUR = 3_600_000_000
_MICROS_PER_MINUTE = 60_000_000


class CalendarProvider(ABC):
    """Base class for calendars.

    Subclasses set :attr:`calendar_id` and implement the field rules.
    The conversions to and from :class:`~calshift.IsoDays` are shared.
    """

    __slots__ = ()

    calendar_id: ClassVar[str]

    @abstractmethod
    def days_in_month(self, year: int, month: int) -> int: ...

    @abstractmethod
    def months_in_year(self, year: int) -> int: ...

    @abstractmethod
    def is_leap_year(self, year: int) -> bool: ...

    @abstractmethod
    def day_of_week(
        self, year: int, month: int, day: int
    ) -> tuple[int, int, int]:
        """The weekday, and the first and last weekday numbers of the
        calendar's week"""

    @abstractmethod
    def valid_date(self, year: int, month: int, day: int) -> bool: ...

    @abstractmethod
    def valid_time(
        self, hour: int, minute: int, second: int, microsecond: int
    ) -> bool: ...

    @abstractmethod
    def date_to_iso_days(self, year: int, month: int, day: int) -> int:
        """Days since 0000-01-01 (proleptic Gregorian).
        Raises InvalidDate if the date cannot be counted."""

    @abstractmethod
    def date_from_iso_days(self, days: int) -> tuple[int, int, int]:
        """Inverse of :meth:`date_to_iso_days`.
        Raises InvalidDate if the day count is out of range."""

    @abstractmethod
    def time_to_day_fraction(
        self, hour: int, minute: int, second: int, microsecond: int
    ) -> tuple[int, int]:
        """The ``(parts, parts_per_day)`` of a time of day.

        This must be linear in its arguments: it is also called with
        negative and out-of-range magnitudes to express a duration.
        """

    @abstractmethod
    def day_fraction_to_time(
        self, parts: int, parts_per_day: int
    ) -> tuple[int, int, int, int]:
        """Inverse of :meth:`time_to_day_fraction` for a normalized
        fraction. A finer fraction is truncated."""

    def to_iso_days(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        microsecond: int = 0,
    ) -> IsoDays:
        return IsoDays(
            self.date_to_iso_days(year, month, day),
            *self.time_to_day_fraction(hour, minute, second, microsecond),
        )

    def from_iso_days(
        self, iso: IsoDays
    ) -> tuple[int, int, int, int, int, int, int]:
        iso = iso.normalized()
        return (
            *self.date_from_iso_days(iso.days),
            *self.day_fraction_to_time(iso.parts, iso.parts_per_day),
        )

    def add_days(
        self, year: int, month: int, day: int, days: int
    ) -> tuple[int, int, int]:
        return self.date_from_iso_days(
            self.date_to_iso_days(year, month, day) + days
        )

    def __repr__(self) -> str:
        return f"<calendar {self.calendar_id}>"


# The ordinal of 0001-01-01 is 1, while year 0 (a leap year) has 366 days
_ORDINAL_TO_ISO_DAYS = 365


class ISOCalendar(CalendarProvider):
    """The proleptic Gregorian calendar, for years 1-9999"""

    __slots__ = ()

    calendar_id = "ISO"

    def days_in_month(self, year: int, month: int) -> int:
        return days_in_month(year, month)

    def months_in_year(self, year: int) -> int:
        return 12

    def is_leap_year(self, year: int) -> bool:
        return is_leap(year)

    def day_of_week(
        self, year: int, month: int, day: int
    ) -> tuple[int, int, int]:
        return self._to_py_date(year, month, day).isoweekday(), 1, 7

    def valid_date(self, year: int, month: int, day: int) -> bool:
        return (
            1 <= year <= 9999
            and 1 <= month <= 12
            and 1 <= day <= days_in_month(year, month)
        )

    def valid_time(
        self, hour: int, minute: int, second: int, microsecond: int
    ) -> bool:
        return (
            0 <= hour < 24
            and 0 <= minute < 60
            and 0 <= second < 60
            and 0 <= microsecond < 1_000_000
        )

    def date_to_iso_days(self, year: int, month: int, day: int) -> int:
        return (
            self._to_py_date(year, month, day).toordinal()
            + _ORDINAL_TO_ISO_DAYS
        )

    def date_from_iso_days(self, days: int) -> tuple[int, int, int]:
        try:
            d = _date.fromordinal(days - _ORDINAL_TO_ISO_DAYS)
        except (ValueError, OverflowError):
            raise InvalidDate(
                f"Day {days} is out of range of the {self.calendar_id} calendar"
            ) from None
        return d.year, d.month, d.day

    def time_to_day_fraction(
        self, hour: int, minute: int, second: int, microsecond: int
    ) -> tuple[int, int]:
        return (
            hour * _MICROS_PER_HOUR
            + minute * _MICROS_PER_MINUTE
            + second * 1_000_000
            + microsecond
        ), MICROS_PER_DAY

    def day_fraction_to_time(
        self, parts: int, parts_per_day: int
    ) -> tuple[int, int, int, int]:
        micros = parts * MICROS_PER_DAY // parts_per_day
        hour, micros = divmod(micros, _MICROS_PER_HOUR)
        minute, micros = divmod(micros, _MICROS_PER_MINUTE)
        second, microsecond = divmod(micros, 1_000_000)
        return hour, minute, second, microsecond

    def _to_py_date(self, year: int, month: int, day: int) -> _date:
        try:
            return _date(year, month, day)
        except (ValueError, OverflowError):
            raise InvalidDate(
                f"Invalid {self.calendar_id} date: {year:04}-{month:02}-{day:02}"
            ) from None


ISO = ISOCalendar()

_CALENDARS: dict[str, CalendarProvider] = {ISO.calendar_id: ISO}


def register_calendar(provider: CalendarProvider, /) -> None:
    """Make a calendar available by its id, e.g. ``Date(..., calendar="X")``.

    Re-registering an id replaces the previous calendar.
    """
    if not isinstance(provider, CalendarProvider):
        raise TypeError(
            f"Expected a CalendarProvider, got {type(provider).__name__}"
        )
    _CALENDARS[provider.calendar_id] = provider


def get_calendar(
    calendar: Union[str, CalendarProvider], /
) -> CalendarProvider:
    if isinstance(calendar, CalendarProvider):
        return calendar
    try:
        return _CALENDARS[calendar]
    except KeyError:
        raise ValueError(f"Unknown calendar: {calendar!r}") from None
