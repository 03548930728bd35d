# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

# Maintainer's notes:
#
# - Why are all public classes in one file?
#   - They 'know' about each other (shifting a datetime accepts a Period,
#     an Interval holds datetimes) and this avoids circular imports.
#   - Calendar rules, zone rules and day counting live in their own modules,
#     since they don't depend on any of the classes here.
# - All shifts go through calendar-agnostic day counts (IsoDays). Classes
#   never do field arithmetic themselves, except via a CalendarProvider.
# - There is some code duplication between the add/subtract methods. This is
#   intentional: it keeps the signatures explicit for the type checker.
from __future__ import annotations

__version__ = "0.3.0"

import enum
from decimal import Decimal
from math import isfinite
from typing import (
    Any,
    Iterable,
    Literal,
    Optional,
    Union,
    no_type_check,
)

from ._calendar import CalendarProvider, get_calendar
from ._common import (
    MAX_PRECISION,
    InvalidDate,
    InvalidTime,
    ZoneResolutionError,
    _ImmutableBase,
    final,
)
from ._math import (
    IsoDays,
    check_unit,
    duration_to_time_fraction,
    micros_between,
    micros_to_unit,
    shift_date_fields,
)
from ._parse import InvalidFormat, period_fields_from_text, period_text
from ._tz.ambiguity import (
    RepeatedTime,
    SkippedTime,
    resolve_ambiguity,
    resolve_shifted,
)
from ._tz.common import Disambiguate, ZonePeriod
from ._tz.database import TZIF_DATABASE, TimeZoneDatabase

__all__ = [
    # Values
    "Date",
    "Time",
    "LocalDateTime",
    "ZonedDateTime",
    # Amounts of time
    "Unit",
    "Duration",
    "Period",
    "Interval",
    # Functions
    "shift",
    # Exceptions
    "InvalidPeriod",
    "InvalidFormat",
    "InvalidInterval",
    "InvalidDate",
    "InvalidTime",
    "ZoneResolutionError",
    "SkippedTime",
    "RepeatedTime",
]

_object_new = object.__new__
_UTC_IDS = ("UTC", "Etc/UTC")


class InvalidPeriod(ValueError):
    """A period has a negative, non-integral or all-zero magnitude"""


class InvalidInterval(ValueError):
    """An interval's bounds or boundaries are invalid"""


class Unit(enum.Enum):
    """The units of a :class:`Duration`"""

    YEAR = "year"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MILLISECOND = "millisecond"
    MICROSECOND = "microsecond"


# keyword argument -> unit, in the canonical order
_UNIT_KWARGS = {
    "years": Unit.YEAR,
    "months": Unit.MONTH,
    "weeks": Unit.WEEK,
    "days": Unit.DAY,
    "hours": Unit.HOUR,
    "minutes": Unit.MINUTE,
    "seconds": Unit.SECOND,
    "milliseconds": Unit.MILLISECOND,
    "microseconds": Unit.MICROSECOND,
}
_KWARG_FOR_UNIT = {u: k for k, u in _UNIT_KWARGS.items()}


def _check_int(value: object, name: str) -> int:
    if type(value) is not int:
        raise TypeError(f"{name} must be an integer, got {value!r}")
    return value


@final
class Duration(_ImmutableBase):
    """A signed amount of time in calendar units.

    Each unit is kept separately, since e.g. a month is not a fixed number
    of days. Units that are absent read as zero.

    Example
    -------
    >>> d = Duration(months=1, days=-3)
    Duration(months=1, days=-3)
    >>> d.get(Unit.YEAR)
    0
    """

    __slots__ = ("_units",)

    def __init__(
        self,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
    ) -> None:
        values = (
            years,
            months,
            weeks,
            days,
            hours,
            minutes,
            seconds,
            milliseconds,
            microseconds,
        )
        self._units = {
            unit: value
            for (name, unit), value in zip(_UNIT_KWARGS.items(), values)
            if _check_int(value, name)
        }

    @classmethod
    def from_items(cls, items: Iterable[tuple[Unit, int]], /) -> Duration:
        """Create from (unit, value) pairs. Repeated units add up.

        Example
        -------
        >>> Duration.from_items([(Unit.DAY, 2), (Unit.HOUR, 1), (Unit.DAY, 3)])
        Duration(days=5, hours=1)
        """
        units: dict[Unit, int] = {}
        for unit, value in items:
            unit = Unit(unit)
            units[unit] = units.get(unit, 0) + _check_int(value, unit.value)
        return cls._from_units(units)

    @classmethod
    def _from_units(cls, units: dict[Unit, int]) -> Duration:
        self = _object_new(cls)
        self._units = {u: units[u] for u in Unit if units.get(u)}
        return self

    def get(self, unit: Union[Unit, str], /) -> int:
        return self._units.get(Unit(unit), 0)

    def items(self) -> tuple[tuple[Unit, int], ...]:
        """The non-zero (unit, value) pairs, largest unit first"""
        return tuple(self._units.items())

    def normalized(self) -> Duration:
        """Fold milliseconds into microseconds

        >>> Duration(milliseconds=2, microseconds=5).normalized()
        Duration(microseconds=2005)
        """
        units = dict(self._units)
        millis = units.pop(Unit.MILLISECOND, 0)
        units[Unit.MICROSECOND] = (
            units.get(Unit.MICROSECOND, 0) + millis * 1_000
        )
        return Duration._from_units(units)

    def _has_date_part(self) -> bool:
        return any(
            u in self._units
            for u in (Unit.YEAR, Unit.MONTH, Unit.WEEK, Unit.DAY)
        )

    def _precision(self) -> int:
        if Unit.MICROSECOND in self._units:
            return 6
        elif Unit.MILLISECOND in self._units:
            return 3
        return 0

    def __neg__(self) -> Duration:
        return Duration._from_units({u: -v for u, v in self._units.items()})

    def __pos__(self) -> Duration:
        return self

    def __add__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration.from_items((*self.items(), *other.items()))

    def __sub__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return self + -other

    def __bool__(self) -> bool:
        return bool(self._units)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._units == other._units

    def __hash__(self) -> int:
        return hash(self.items())

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{_KWARG_FOR_UNIT[u]}={v}" for u, v in self._units.items()
        )
        return f"Duration({fields})"


_ShiftArg = Union[Duration, "Period", None]


def _duration_arg(duration: _ShiftArg, units: dict[str, Any]) -> Duration:
    if units:
        if duration is not None:
            raise TypeError("Cannot mix positional and keyword arguments")
        return Duration(**units)
    elif duration is None:
        return Duration()
    elif isinstance(duration, Duration):
        return duration
    elif isinstance(duration, Period):
        return duration.to_duration()
    raise TypeError(
        f"Expected Duration or Period, got {type(duration).__name__}"
    )


def _shift_error(
    e: Exception, value: object, duration: Duration
) -> Exception:
    # keep the class, so callers can catch what went wrong
    return type(e)(f"Cannot shift {value} by {duration!r}, reason: {e}")


def _check_date(cal: CalendarProvider, year: int, month: int, day: int):
    if not cal.valid_date(year, month, day):
        raise InvalidDate(
            f"Invalid {cal.calendar_id} date: {year:04}-{month:02}-{day:02}"
        )


def _format_calendar(cal: CalendarProvider) -> str:
    return "" if cal.calendar_id == "ISO" else f", calendar={cal.calendar_id}"


@final
class Date(_ImmutableBase):
    """A date without a time component, in any calendar

    Example
    -------
    >>> d = Date(2021, 1, 2)
    Date(2021-01-02)
    """

    __slots__ = ("_year", "_month", "_day", "_cal")

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        *,
        calendar: Union[str, CalendarProvider] = "ISO",
    ) -> None:
        cal = get_calendar(calendar)
        _check_date(cal, year, month, day)
        self._year = year
        self._month = month
        self._day = day
        self._cal = cal

    @classmethod
    def _from_fields_unchecked(
        cls, year: int, month: int, day: int, cal: CalendarProvider
    ) -> Date:
        self = _object_new(cls)
        self._year = year
        self._month = month
        self._day = day
        self._cal = cal
        return self

    @classmethod
    def _from_iso_days(cls, iso: IsoDays, calendar: CalendarProvider) -> Date:
        return cls._from_fields_unchecked(
            *calendar.date_from_iso_days(iso.normalized().days), calendar
        )

    @property
    def year(self) -> int:
        return self._year

    @property
    def month(self) -> int:
        return self._month

    @property
    def day(self) -> int:
        return self._day

    @property
    def calendar(self) -> CalendarProvider:
        return self._cal

    def day_of_week(self) -> int:
        """The day of the week, numbered by the calendar.
        For ISO, Monday is 1 and Sunday is 7."""
        return self._cal.day_of_week(self._year, self._month, self._day)[0]

    def days_in_month(self) -> int:
        return self._cal.days_in_month(self._year, self._month)

    def is_leap_year(self) -> bool:
        return self._cal.is_leap_year(self._year)

    def to_iso_days(self) -> IsoDays:
        return IsoDays(
            self._cal.date_to_iso_days(self._year, self._month, self._day)
        )

    def at(self, t: Time, /) -> LocalDateTime:
        """Combine with a time of day"""
        return LocalDateTime._from_parts(self, t)

    def add(self, duration: _ShiftArg = None, /, **units: int) -> Date:
        """Add years, months, weeks and days. Smaller units are ignored.

        Years and months are added first, clamping the day to the end of
        the month. Then weeks and days are added.

        Example
        -------
        >>> Date(2020, 1, 31).add(months=1)
        Date(2020-02-29)
        >>> Date(1980, 11, 1).add(years=-2, months=1, days=40)
        Date(1979-01-10)
        """
        return self._shift(1, _duration_arg(duration, units))

    def subtract(self, duration: _ShiftArg = None, /, **units: int) -> Date:
        """Subtract years, months, weeks and days. Inverse of :meth:`add`
        in the arguments, though not always in the result."""
        return self._shift(-1, _duration_arg(duration, units))

    def _shift(self, sign: int, duration: Duration) -> Date:
        if sign < 0:
            duration = -duration
        if not duration._has_date_part():
            return self
        try:
            return Date._from_fields_unchecked(
                *_shift_date(
                    self._cal, self._year, self._month, self._day, duration
                ),
                self._cal,
            )
        except InvalidDate as e:
            raise _shift_error(e, self, duration) from e

    def __add__(self, other: Union[Duration, Period]) -> Date:
        if not isinstance(other, (Duration, Period)):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Union[Duration, Period]) -> Date:
        if not isinstance(other, (Duration, Period)):
            return NotImplemented
        return self.subtract(other)

    def format_common_iso(self) -> str:
        """Format as ``YYYY-MM-DD``

        >>> Date(2021, 1, 2).format_common_iso()
        '2021-01-02'
        """
        return f"{self._year:04}-{self._month:02}-{self._day:02}"

    __str__ = format_common_iso

    def __repr__(self) -> str:
        return f"Date({self}{_format_calendar(self._cal)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return (
            self._year == other._year
            and self._month == other._month
            and self._day == other._day
            and self._cal.calendar_id == other._cal.calendar_id
        )

    def __hash__(self) -> int:
        return hash(
            (self._year, self._month, self._day, self._cal.calendar_id)
        )

    # Ordering is by day count, so dates in different calendars compare too
    def __lt__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self.to_iso_days() < other.to_iso_days()

    def __le__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self.to_iso_days() <= other.to_iso_days()

    def __gt__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self.to_iso_days() > other.to_iso_days()

    def __ge__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self.to_iso_days() >= other.to_iso_days()


def _shift_date(
    cal: CalendarProvider, year: int, month: int, day: int, d: Duration
) -> tuple[int, int, int]:
    year, month, day = shift_date_fields(
        cal,
        year,
        month,
        day,
        years=d.get(Unit.YEAR),
        months=d.get(Unit.MONTH),
        days=d.get(Unit.DAY) + 7 * d.get(Unit.WEEK),
    )
    _check_date(cal, year, month, day)
    return year, month, day


def _default_precision(microsecond: int, precision: Optional[int]) -> int:
    if precision is None:
        return MAX_PRECISION if microsecond else 0
    elif type(precision) is not int or not 0 <= precision <= MAX_PRECISION:
        raise InvalidTime(f"Invalid precision: {precision!r}")
    return precision


@final
class Time(_ImmutableBase):
    """Time of day without a date component

    ``precision`` is the number of decimals shown when formatting.
    It takes no part in comparisons.

    Example
    -------
    >>> t = Time(12, 30, 0)
    Time(12:30:00)
    >>> Time(12, 30, microsecond=500_000, precision=3)
    Time(12:30:00.500)
    """

    __slots__ = (
        "_hour",
        "_minute",
        "_second",
        "_microsecond",
        "_precision",
        "_cal",
    )

    def __init__(
        self,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        microsecond: int = 0,
        precision: Optional[int] = None,
        calendar: Union[str, CalendarProvider] = "ISO",
    ) -> None:
        cal = get_calendar(calendar)
        if not cal.valid_time(hour, minute, second, microsecond):
            raise InvalidTime(
                f"Invalid {cal.calendar_id} time: "
                f"{hour:02}:{minute:02}:{second:02}.{microsecond:06}"
            )
        self._hour = hour
        self._minute = minute
        self._second = second
        self._microsecond = microsecond
        self._precision = _default_precision(microsecond, precision)
        self._cal = cal

    @classmethod
    def _from_fields_unchecked(
        cls,
        hour: int,
        minute: int,
        second: int,
        microsecond: int,
        precision: int,
        cal: CalendarProvider,
    ) -> Time:
        self = _object_new(cls)
        self._hour = hour
        self._minute = minute
        self._second = second
        self._microsecond = microsecond
        self._precision = precision
        self._cal = cal
        return self

    @classmethod
    def _from_iso_days(
        cls, iso: IsoDays, calendar: CalendarProvider, precision: int
    ) -> Time:
        iso = iso.normalized()
        return cls._from_fields_unchecked(
            *calendar.day_fraction_to_time(iso.parts, iso.parts_per_day),
            precision,
            calendar,
        )

    @property
    def hour(self) -> int:
        return self._hour

    @property
    def minute(self) -> int:
        return self._minute

    @property
    def second(self) -> int:
        return self._second

    @property
    def microsecond(self) -> int:
        return self._microsecond

    @property
    def precision(self) -> int:
        return self._precision

    @property
    def calendar(self) -> CalendarProvider:
        return self._cal

    def _day_fraction(self) -> IsoDays:
        return IsoDays(
            0,
            *self._cal.time_to_day_fraction(
                self._hour, self._minute, self._second, self._microsecond
            ),
        )

    def on(self, d: Date, /) -> LocalDateTime:
        """Combine with a date"""
        return LocalDateTime._from_parts(d, self)

    def add(self, duration: _ShiftArg = None, /, **units: int) -> Time:
        """Add hours, minutes, seconds, milliseconds and microseconds,
        wrapping around midnight. Larger units are ignored.

        Example
        -------
        >>> Time(23, 30).add(hours=1)
        Time(00:30:00)
        """
        return self._shift(_duration_arg(duration, units))

    def subtract(self, duration: _ShiftArg = None, /, **units: int) -> Time:
        return self._shift(-_duration_arg(duration, units))

    def _shift(self, duration: Duration) -> Time:
        fraction = duration_to_time_fraction(duration, self._cal)
        if not fraction.parts:
            return self
        return Time._from_iso_days(
            self._day_fraction() + fraction,  # whole days drop off
            self._cal,
            max(self._precision, duration._precision()),
        )

    def __add__(self, other: Union[Duration, Period]) -> Time:
        if not isinstance(other, (Duration, Period)):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Union[Duration, Period]) -> Time:
        if not isinstance(other, (Duration, Period)):
            return NotImplemented
        return self.subtract(other)

    def format_common_iso(self) -> str:
        """Format as ``HH:MM:SS``, with as many decimals as the precision

        >>> Time(12, 30, microsecond=120_000, precision=2).format_common_iso()
        '12:30:00.12'
        """
        hms = f"{self._hour:02}:{self._minute:02}:{self._second:02}"
        if self._precision:
            return f"{hms}.{self._microsecond:06}"[: 9 + self._precision]
        return hms

    __str__ = format_common_iso

    def __repr__(self) -> str:
        return f"Time({self}{_format_calendar(self._cal)})"

    def _key(self) -> tuple[int, int, int, int]:
        return (self._hour, self._minute, self._second, self._microsecond)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return (
            self._key() == other._key()
            and self._cal.calendar_id == other._cal.calendar_id
        )

    def __hash__(self) -> int:
        return hash((self._key(), self._cal.calendar_id))

    def __lt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._day_fraction() < other._day_fraction()

    def __le__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._day_fraction() <= other._day_fraction()

    def __gt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._day_fraction() > other._day_fraction()

    def __ge__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._day_fraction() >= other._day_fraction()


@final
class LocalDateTime(_ImmutableBase):
    """A date and time of day without a timezone

    Example
    -------
    >>> LocalDateTime(2020, 8, 15, hour=23, minute=12)
    LocalDateTime(2020-08-15 23:12:00)
    """

    __slots__ = ("_date", "_time")

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        microsecond: int = 0,
        precision: Optional[int] = None,
        calendar: Union[str, CalendarProvider] = "ISO",
    ) -> None:
        self._date = Date(year, month, day, calendar=calendar)
        self._time = Time(
            hour,
            minute,
            second,
            microsecond=microsecond,
            precision=precision,
            calendar=calendar,
        )

    @classmethod
    def _from_parts(cls, d: Date, t: Time) -> LocalDateTime:
        if d._cal.calendar_id != t._cal.calendar_id:
            raise ValueError("Date and time must share a calendar")
        self = _object_new(cls)
        self._date = d
        self._time = t
        return self

    @classmethod
    def _from_iso_days(
        cls, iso: IsoDays, calendar: CalendarProvider, precision: int
    ) -> LocalDateTime:
        return cls._from_parts(
            Date._from_iso_days(iso, calendar),
            Time._from_iso_days(iso, calendar, precision),
        )

    @property
    def year(self) -> int:
        return self._date._year

    @property
    def month(self) -> int:
        return self._date._month

    @property
    def day(self) -> int:
        return self._date._day

    @property
    def hour(self) -> int:
        return self._time._hour

    @property
    def minute(self) -> int:
        return self._time._minute

    @property
    def second(self) -> int:
        return self._time._second

    @property
    def microsecond(self) -> int:
        return self._time._microsecond

    @property
    def precision(self) -> int:
        return self._time._precision

    @property
    def calendar(self) -> CalendarProvider:
        return self._date._cal

    def date(self) -> Date:
        return self._date

    def time(self) -> Time:
        return self._time

    def to_iso_days(self) -> IsoDays:
        return self._date.to_iso_days() + self._time._day_fraction()

    def assume_tz(
        self,
        tz: str,
        /,
        *,
        disambiguate: Disambiguate = "compatible",
        db: Optional[TimeZoneDatabase] = None,
    ) -> ZonedDateTime:
        """Place this datetime in a timezone

        Example
        -------
        >>> LocalDateTime(2020, 8, 15, 23).assume_tz("Europe/Amsterdam")
        ZonedDateTime(2020-08-15 23:00:00+02:00[Europe/Amsterdam])
        """
        return ZonedDateTime._from_local(self, tz, disambiguate, db)

    def add(
        self, duration: _ShiftArg = None, /, **units: int
    ) -> LocalDateTime:
        """Add a duration, without regard for timezones.

        Calendar units are added first, as in :meth:`Date.add`. The time
        units are then added as an exact amount of time.

        Example
        -------
        >>> LocalDateTime(2020, 1, 31, 23).add(months=1, hours=2)
        LocalDateTime(2020-03-01 01:00:00)
        """
        return self._shift(_duration_arg(duration, units))

    def subtract(
        self, duration: _ShiftArg = None, /, **units: int
    ) -> LocalDateTime:
        return self._shift(-_duration_arg(duration, units))

    def _shift(self, duration: Duration) -> LocalDateTime:
        if not duration:
            return self
        cal = self._date._cal
        try:
            date = self._date
            if duration._has_date_part():
                date = Date._from_fields_unchecked(
                    *_shift_date(
                        cal, date._year, date._month, date._day, duration
                    ),
                    cal,
                )
            return LocalDateTime._from_iso_days(
                date.to_iso_days()
                + self._time._day_fraction()
                + duration_to_time_fraction(duration, cal),
                cal,
                max(self.precision, duration._precision()),
            )
        except (InvalidDate, InvalidTime) as e:
            raise _shift_error(e, self, duration) from e

    def __add__(self, other: Union[Duration, Period]) -> LocalDateTime:
        if not isinstance(other, (Duration, Period)):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Union[Duration, Period]) -> LocalDateTime:
        if not isinstance(other, (Duration, Period)):
            return NotImplemented
        return self.subtract(other)

    def format_common_iso(self) -> str:
        """Format as ``YYYY-MM-DDTHH:MM:SS``, with decimals if the
        precision calls for them"""
        return f"{self._date}T{self._time}"

    __str__ = format_common_iso

    def __repr__(self) -> str:
        return (
            f"LocalDateTime({self._date} {self._time}"
            f"{_format_calendar(self.calendar)})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return self._date == other._date and self._time == other._time

    def __hash__(self) -> int:
        return hash((self._date, self._time))

    def __lt__(self, other: LocalDateTime) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return self.to_iso_days() < other.to_iso_days()

    def __le__(self, other: LocalDateTime) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return self.to_iso_days() <= other.to_iso_days()

    def __gt__(self, other: LocalDateTime) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return self.to_iso_days() > other.to_iso_days()

    def __ge__(self, other: LocalDateTime) -> bool:
        if not isinstance(other, LocalDateTime):
            return NotImplemented
        return self.to_iso_days() >= other.to_iso_days()


def _format_offset(secs: int) -> str:
    sign = "-" if secs < 0 else "+"
    hours, rem = divmod(abs(secs), 3600)
    minutes, seconds = divmod(rem, 60)
    return f"{sign}{hours:02}:{minutes:02}" + (
        f":{seconds:02}" if seconds else ""
    )


@final
class ZonedDateTime(_ImmutableBase):
    """A datetime in a timezone.

    The zone period (offset, DST flag and abbreviation) is determined once,
    on construction. Shifting goes through the timezone database the value
    was created with, unless another one is given.

    Example
    -------
    >>> ZonedDateTime(2020, 8, 15, hour=23, minute=12, tz="Europe/London")
    ZonedDateTime(2020-08-15 23:12:00+01:00[Europe/London])

    Local times that are skipped or repeated (e.g. due to DST) are resolved
    using ``disambiguate``:

    >>> ZonedDateTime(2023, 10, 29, 2, 15, tz="Europe/Amsterdam", disambiguate="later")
    ZonedDateTime(2023-10-29 02:15:00+01:00[Europe/Amsterdam])
    """

    __slots__ = ("_local", "_tz", "_period", "_db")

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        microsecond: int = 0,
        precision: Optional[int] = None,
        tz: str,
        disambiguate: Disambiguate = "compatible",
        calendar: Union[str, CalendarProvider] = "ISO",
        db: Optional[TimeZoneDatabase] = None,
    ) -> None:
        other = ZonedDateTime._from_local(
            LocalDateTime(
                year,
                month,
                day,
                hour,
                minute,
                second,
                microsecond=microsecond,
                precision=precision,
                calendar=calendar,
            ),
            tz,
            disambiguate,
            db,
        )
        self._local = other._local
        self._tz = other._tz
        self._period = other._period
        self._db = other._db

    @classmethod
    def _from_local(
        cls,
        local: LocalDateTime,
        tz: str,
        disambiguate: Disambiguate,
        db: Optional[TimeZoneDatabase],
    ) -> ZonedDateTime:
        if not isinstance(tz, str):
            raise TypeError(f"tz must be a string, got {tz!r}")
        db = db or TZIF_DATABASE
        iso = local.to_iso_days()
        resolved, period = resolve_ambiguity(
            iso, tz, db, disambiguate, label=str(local)
        )
        if resolved != iso:
            local = LocalDateTime._from_iso_days(
                resolved, local.calendar, local.precision
            )
        return cls._from_unchecked(local, tz, period, db)

    @classmethod
    def _from_unchecked(
        cls,
        local: LocalDateTime,
        tz: str,
        period: ZonePeriod,
        db: TimeZoneDatabase,
    ) -> ZonedDateTime:
        self = _object_new(cls)
        self._local = local
        self._tz = tz
        self._period = period
        self._db = db
        return self

    @classmethod
    def _from_utc(
        cls,
        utc: IsoDays,
        tz: str,
        period: ZonePeriod,
        db: TimeZoneDatabase,
        calendar: CalendarProvider,
        precision: int,
    ) -> ZonedDateTime:
        return cls._from_unchecked(
            LocalDateTime._from_iso_days(
                utc + IsoDays.from_offset(period.offset), calendar, precision
            ),
            tz,
            period,
            db,
        )

    @property
    def tz(self) -> str:
        """The timezone ID"""
        return self._tz

    @property
    def offset(self) -> int:
        """The UTC offset in seconds"""
        return self._period.offset

    @property
    def abbreviation(self) -> str:
        """e.g. ``CEST``. May be numeric, e.g. ``-03``."""
        return self._period.abbreviation

    @property
    def is_dst(self) -> bool:
        return self._period.is_dst

    @property
    def zone_period(self) -> ZonePeriod:
        return self._period

    @property
    def db(self) -> TimeZoneDatabase:
        return self._db

    @property
    def year(self) -> int:
        return self._local.year

    @property
    def month(self) -> int:
        return self._local.month

    @property
    def day(self) -> int:
        return self._local.day

    @property
    def hour(self) -> int:
        return self._local.hour

    @property
    def minute(self) -> int:
        return self._local.minute

    @property
    def second(self) -> int:
        return self._local.second

    @property
    def microsecond(self) -> int:
        return self._local.microsecond

    @property
    def precision(self) -> int:
        return self._local.precision

    @property
    def calendar(self) -> CalendarProvider:
        return self._local.calendar

    def local(self) -> LocalDateTime:
        """The date and time of day, without the timezone"""
        return self._local

    def date(self) -> Date:
        return self._local._date

    def time(self) -> Time:
        return self._local._time

    def to_utc_iso_days(self) -> IsoDays:
        return self._local.to_iso_days() + IsoDays.from_offset(
            -self._period.offset
        )

    def to_tz(
        self, tz: str, /, *, db: Optional[TimeZoneDatabase] = None
    ) -> ZonedDateTime:
        """The same moment in another timezone

        >>> ZonedDateTime(2020, 8, 15, 23, tz="Europe/London").to_tz("Asia/Tokyo")
        ZonedDateTime(2020-08-16 07:00:00+09:00[Asia/Tokyo])
        """
        db = db or self._db
        utc = self.to_utc_iso_days()
        return ZonedDateTime._from_utc(
            utc,
            tz,
            db.period_for_utc(utc, tz),
            db,
            self.calendar,
            self.precision,
        )

    def exact_eq(self, other: ZonedDateTime, /) -> bool:
        """Equality on all fields, not just the moment in time

        >>> a = ZonedDateTime(2020, 8, 15, 23, tz="Europe/London")
        >>> b = a.to_tz("Europe/Paris")
        >>> a == b
        True
        >>> a.exact_eq(b)
        False
        """
        if type(other) is not ZonedDateTime:
            raise TypeError("Can't compare different types")
        return (
            self._tz == other._tz
            and self._period == other._period
            and self._local == other._local
        )

    def difference(self, other: ZonedDateTime, /, unit: str = "second") -> int:
        """The time elapsed from ``other`` to this datetime, truncated
        toward zero. Negative if ``other`` is later.

        ``unit`` is one of ``hour``, ``minute``, ``second``, ``millisecond``
        or ``microsecond``.
        """
        if not isinstance(other, ZonedDateTime):
            raise TypeError(
                f"Expected ZonedDateTime, got {type(other).__name__}"
            )
        return micros_to_unit(
            micros_between(self.to_utc_iso_days(), other.to_utc_iso_days()),
            unit,
        )

    def add(
        self,
        duration: _ShiftArg = None,
        /,
        *,
        db: Optional[TimeZoneDatabase] = None,
        **units: int,
    ) -> ZonedDateTime:
        """Add a duration, accounting for timezone transitions.

        Calendar units (years, months, weeks, days) are added to the local
        date, keeping the time of day. Should that local time be skipped
        by a transition, it moves across the gap in the direction of the
        shift. Should it be repeated, the occurrence in the direction of the
        shift is taken. The time units are then added as exact elapsed time.

        Example
        -------
        >>> d = ZonedDateTime(2020, 3, 28, 2, 30, tz="Europe/Berlin")
        >>> d.add(days=1)
        ZonedDateTime(2020-03-29 03:30:00+02:00[Europe/Berlin])
        >>> d.add(hours=24)
        ZonedDateTime(2020-03-29 03:30:00+02:00[Europe/Berlin])
        """
        return self._shift(1, _duration_arg(duration, units), db)

    def subtract(
        self,
        duration: _ShiftArg = None,
        /,
        *,
        db: Optional[TimeZoneDatabase] = None,
        **units: int,
    ) -> ZonedDateTime:
        """Subtract a duration. See :meth:`add` for the rules."""
        return self._shift(-1, _duration_arg(duration, units), db)

    def _shift(
        self, sign: int, duration: Duration, db: Optional[TimeZoneDatabase]
    ) -> ZonedDateTime:
        if sign < 0:
            duration = -duration
        if not duration:
            return self
        try:
            return self._shift_unchecked(duration, db or self._db)
        except (InvalidDate, InvalidTime, ZoneResolutionError) as e:
            raise _shift_error(e, self, duration) from e

    def _shift_unchecked(
        self, duration: Duration, db: TimeZoneDatabase
    ) -> ZonedDateTime:
        local = self._local
        cal = local.calendar
        source = local.to_iso_days()
        period = self._period
        if duration._has_date_part():
            target = Date._from_fields_unchecked(
                *_shift_date(
                    cal, local.year, local.month, local.day, duration
                ),
                cal,
            ).to_iso_days() + local._time._day_fraction()
            target, period = resolve_shifted(
                target, source, period, self._tz, db
            )
        else:
            target = source

        utc = (
            target
            + IsoDays.from_offset(-period.offset)
            + duration_to_time_fraction(duration, cal)
        )
        return ZonedDateTime._from_utc(
            utc,
            self._tz,
            db.period_for_utc(utc, self._tz),
            db,
            cal,
            max(local.precision, duration._precision()),
        )

    def __add__(self, other: Union[Duration, Period]) -> ZonedDateTime:
        if not isinstance(other, (Duration, Period)):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Union[Duration, Period]) -> ZonedDateTime:
        if not isinstance(other, (Duration, Period)):
            return NotImplemented
        return self.subtract(other)

    def _format_local_offset(self) -> str:
        return f"{self._local}{_format_offset(self._period.offset)}"

    def format_common_iso(self) -> str:
        """Format as ``YYYY-MM-DDTHH:MM:SS±HH:MM[TZ_ID]``

        >>> ZonedDateTime(2020, 8, 15, hour=23, minute=12, tz="Europe/London").format_common_iso()
        '2020-08-15T23:12:00+01:00[Europe/London]'
        """
        return f"{self._format_local_offset()}[{self._tz}]"

    def format_iso(self) -> str:
        """Format as ``YYYY-MM-DDTHH:MM:SS±HH:MM``, without the timezone ID.
        In UTC, the offset is written as ``Z``.

        >>> ZonedDateTime(2020, 8, 15, 23, tz="Etc/UTC").format_iso()
        '2020-08-15T23:00:00Z'
        """
        if self._tz in _UTC_IDS:
            return f"{self._local}Z"
        return self._format_local_offset()

    __str__ = format_common_iso

    def __repr__(self) -> str:
        return (
            f"ZonedDateTime({self._local._date} {self._local._time}"
            f"{_format_offset(self._period.offset)}[{self._tz}]"
            f"{_format_calendar(self.calendar)})"
        )

    # Comparisons are by moment in time. See exact_eq() for field equality.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return self.to_utc_iso_days() == other.to_utc_iso_days()

    def __hash__(self) -> int:
        return hash(self.to_utc_iso_days())

    def __lt__(self, other: ZonedDateTime) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return self.to_utc_iso_days() < other.to_utc_iso_days()

    def __le__(self, other: ZonedDateTime) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return self.to_utc_iso_days() <= other.to_utc_iso_days()

    def __gt__(self, other: ZonedDateTime) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return self.to_utc_iso_days() > other.to_utc_iso_days()

    def __ge__(self, other: ZonedDateTime) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return self.to_utc_iso_days() >= other.to_utc_iso_days()


_Shiftable = Union[Date, Time, LocalDateTime, ZonedDateTime]


@no_type_check
def shift(
    value: _Shiftable,
    duration: _ShiftArg = None,
    /,
    *,
    db: Optional[TimeZoneDatabase] = None,
    **units: int,
) -> _Shiftable:
    """Shift any date or time value by a duration.

    Equivalent to ``value.add(...)``. ``db`` only applies to
    :class:`ZonedDateTime`.

    Example
    -------
    >>> shift(Date(2000, 2, 29), years=1)
    Date(2001-02-28)
    """
    if isinstance(value, ZonedDateTime):
        return value.add(duration, db=db, **units)
    elif isinstance(value, (Date, Time, LocalDateTime)):
        if db is not None:
            raise TypeError("db only applies to ZonedDateTime")
        return value.add(duration, **units)
    raise TypeError(f"Cannot shift {type(value).__name__}")


_PERIOD_FIELDS = (
    "years",
    "months",
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
)


@final
class Period(_ImmutableBase):
    """A positive amount of time, in calendar units.

    All magnitudes are zero or more, and at least one is positive.
    Only ``seconds`` may be fractional.

    Example
    -------
    >>> p = Period(years=1, months=3, hours=2)
    Period(P1Y3MT2H)
    >>> Period.parse_common_iso("P1Y3MT2H") == p
    True
    """

    __slots__ = (
        "_years",
        "_months",
        "_weeks",
        "_days",
        "_hours",
        "_minutes",
        "_seconds",
    )

    def __init__(
        self,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: Union[int, float] = 0,
    ) -> None:
        for name, value in (
            ("years", years),
            ("months", months),
            ("weeks", weeks),
            ("days", days),
            ("hours", hours),
            ("minutes", minutes),
        ):
            if type(value) is not int:
                raise InvalidPeriod(
                    f"{name} must be an integer, got {value!r}"
                )
            if value < 0:
                raise InvalidPeriod(
                    f"{name} must not be negative, got {value}"
                )
        if type(seconds) not in (int, float) or not isfinite(seconds):
            raise InvalidPeriod(
                f"seconds must be a finite number, got {seconds!r}"
            )
        if seconds < 0:
            raise InvalidPeriod(f"seconds must not be negative, got {seconds}")
        if not any((years, months, weeks, days, hours, minutes, seconds)):
            raise InvalidPeriod("A period must not be empty")

        self._years = years
        self._months = months
        self._weeks = weeks
        self._days = days
        self._hours = hours
        self._minutes = minutes
        self._seconds = seconds

    @property
    def years(self) -> int:
        return self._years

    @property
    def months(self) -> int:
        return self._months

    @property
    def weeks(self) -> int:
        return self._weeks

    @property
    def days(self) -> int:
        return self._days

    @property
    def hours(self) -> int:
        return self._hours

    @property
    def minutes(self) -> int:
        return self._minutes

    @property
    def seconds(self) -> Union[int, float]:
        return self._seconds

    def _fields(self) -> dict[str, Union[int, float]]:
        return {name: getattr(self, name) for name in _PERIOD_FIELDS}

    def to_duration(self, sign: Literal[1, -1] = 1) -> Duration:
        """Expand into a :class:`Duration`, optionally negated.

        Fractional seconds become microseconds, truncated.

        Example
        -------
        >>> Period.parse("P1Y3MT2H1.123S").to_duration()
        Duration(years=1, months=3, hours=2, seconds=1, microseconds=123000)
        >>> Period(months=1, minutes=1).to_duration(-1)
        Duration(months=-1, minutes=-1)
        """
        if sign not in (1, -1):
            raise ValueError("sign must be 1 or -1")
        seconds = self._seconds
        microseconds = 0
        if isinstance(seconds, float):
            # decimal keeps e.g. 1.123 from becoming 1.12299999...
            exact = Decimal(repr(seconds))
            seconds = int(exact)
            microseconds = int((exact - seconds) * 1_000_000)
        return Duration(
            years=sign * self._years,
            months=sign * self._months,
            weeks=sign * self._weeks,
            days=sign * self._days,
            hours=sign * self._hours,
            minutes=sign * self._minutes,
            seconds=sign * seconds,
            microseconds=sign * microseconds,
        )

    def format_common_iso(self) -> str:
        """Format as ``PnYnMnWnDTnHnMnS``, omitting zero components

        >>> Period(weeks=2, seconds=7.5).format_common_iso()
        'P2WT7.5S'
        """
        return period_text(self._fields())

    @classmethod
    def parse_common_iso(cls, s: str, /) -> Period:
        """Parse the format of :meth:`format_common_iso`. The leading ``P``
        is optional.

        Raises InvalidFormat if the text doesn't match the format, and
        InvalidPeriod if it does but all components are zero.

        >>> Period.parse_common_iso("T12M5.5S")
        Period(PT12M5.5S)
        """
        return cls(**period_fields_from_text(s))

    parse = parse_common_iso

    __str__ = format_common_iso

    def __repr__(self) -> str:
        return f"Period({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        return self._fields() == other._fields()

    def __hash__(self) -> int:
        return hash(tuple(self._fields().values()))

    def __neg__(self) -> Duration:
        return self.to_duration(-1)


Boundaries = Literal["closed", "open", "left_open", "right_open"]
_BOUNDARY_BRACKETS = {
    "closed": ("[", "]"),
    "open": ("]", "["),
    "left_open": ("]", "]"),
    "right_open": ("[", "["),
}
_Bound = Union[ZonedDateTime, Period]


@final
class Interval(_ImmutableBase):
    """A span of time between two bounds.

    One of the bounds may be a :class:`Period`, making it relative to the
    other. ``boundaries`` determines whether the bounds are included.

    Example
    -------
    >>> start = ZonedDateTime(2020, 1, 1, tz="Europe/Berlin")
    >>> i = Interval(start, Period(months=1))
    Interval([2020-01-01T00:00:00+01:00/P1M[)
    >>> i.ending_datetime()
    ZonedDateTime(2020-02-01 00:00:00+01:00[Europe/Berlin])
    """

    __slots__ = ("_start", "_ending", "_boundaries")

    def __init__(
        self,
        start: _Bound,
        ending: _Bound,
        boundaries: Boundaries = "right_open",
    ) -> None:
        if boundaries not in _BOUNDARY_BRACKETS:
            raise InvalidInterval(f"Invalid boundaries: {boundaries!r}")
        for bound in (start, ending):
            if not isinstance(bound, (ZonedDateTime, Period)):
                raise InvalidInterval(
                    f"Bounds must be ZonedDateTime or Period, got {bound!r}"
                )
        if isinstance(start, Period) and isinstance(ending, Period):
            raise InvalidInterval("At most one bound may be a period")
        if (
            isinstance(start, ZonedDateTime)
            and isinstance(ending, ZonedDateTime)
            and not start < ending
        ):
            raise InvalidInterval("The start must be before the ending")
        self._start = start
        self._ending = ending
        self._boundaries = boundaries

    @property
    def start(self) -> _Bound:
        return self._start

    @property
    def ending(self) -> _Bound:
        return self._ending

    @property
    def boundaries(self) -> Boundaries:
        return self._boundaries

    def start_datetime(self) -> ZonedDateTime:
        if isinstance(self._start, Period):
            assert isinstance(self._ending, ZonedDateTime)
            return self._ending.subtract(self._start)
        return self._start

    def ending_datetime(self) -> ZonedDateTime:
        if isinstance(self._ending, Period):
            assert isinstance(self._start, ZonedDateTime)
            return self._start.add(self._ending)
        return self._ending

    def contains(self, dt: ZonedDateTime, /) -> bool:
        """Whether the moment is within the interval, according to the
        boundaries

        >>> i = Interval(
        ...     ZonedDateTime(2020, 1, 1, tz="UTC"),
        ...     ZonedDateTime(2020, 1, 2, tz="UTC"),
        ... )
        >>> i.contains(ZonedDateTime(2020, 1, 1, tz="UTC"))
        True
        >>> i.contains(ZonedDateTime(2020, 1, 2, tz="UTC"))
        False
        """
        start, ending = self.start_datetime(), self.ending_datetime()
        if self._boundaries in ("closed", "right_open"):
            after_start = start <= dt
        else:
            after_start = start < dt
        if self._boundaries in ("closed", "left_open"):
            before_ending = dt <= ending
        else:
            before_ending = dt < ending
        return after_start and before_ending

    __contains__ = contains

    def next(self) -> Interval:
        """The interval of the same length directly after this one.

        A period bound is kept, and the other bound moves by the period.
        With two datetime bounds, both move by the exact time between them.
        """
        return self._step(1)

    def previous(self) -> Interval:
        """The interval of the same length directly before this one.
        See :meth:`next`."""
        return self._step(-1)

    def _step(self, sign: int) -> Interval:
        start, ending = self._start, self._ending
        if isinstance(start, Period):
            assert isinstance(ending, ZonedDateTime)
            return Interval(
                start, ending.add(start.to_duration(sign)), self._boundaries
            )
        elif isinstance(ending, Period):
            return Interval(
                start.add(ending.to_duration(sign)), ending, self._boundaries
            )
        step = Duration(
            microseconds=sign * ending.difference(start, "microsecond")
        )
        return Interval(start.add(step), ending.add(step), self._boundaries)

    def since_start(
        self, dt: ZonedDateTime, /, unit: str = "second"
    ) -> Optional[int]:
        """Time elapsed since the start, or None if ``dt`` is not
        contained in the interval"""
        check_unit(unit)
        if not self.contains(dt):
            return None
        return dt.difference(self.start_datetime(), unit)

    def until_ending(
        self, dt: ZonedDateTime, /, unit: str = "second"
    ) -> Optional[int]:
        """Time remaining until the ending, or None if ``dt`` is not
        contained in the interval"""
        check_unit(unit)
        if not self.contains(dt):
            return None
        return self.ending_datetime().difference(dt, unit)

    def __str__(self) -> str:
        left, right = _BOUNDARY_BRACKETS[self._boundaries]
        return (
            f"{left}{_format_bound(self._start)}"
            f"/{_format_bound(self._ending)}{right}"
        )

    def __repr__(self) -> str:
        return f"Interval({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return (
            type(self._start) is type(other._start)
            and type(self._ending) is type(other._ending)
            and self._start == other._start
            and self._ending == other._ending
            and self._boundaries == other._boundaries
        )

    def __hash__(self) -> int:
        return hash((self._start, self._ending, self._boundaries))


def _format_bound(bound: _Bound) -> str:
    if isinstance(bound, Period):
        return bound.format_common_iso()
    return bound.format_iso()
