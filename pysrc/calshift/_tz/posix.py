"""POSIX TZ strings: the rule that TZif files use beyond their last
transition, e.g. ``CET-1CEST,M3.5.0,M10.5.0/3``."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Union

from .._common import SECS_PER_DAY
from .._math import days_in_month, is_leap
from .common import Ambiguity, Ambiguous, Gap, Unambiguous, ZonePeriod

DEFAULT_DST = 3600
DEFAULT_RULE_TIME = 2 * 3600
MAX_OFFSET = 24 * 3600
Weekday = int  # Sunday=0, Saturday=6 (unlike isoweekday!)

# ordinal() of 1970-01-01
_EPOCH_ORDINAL = 719_163


def year_for_epoch(secs: int) -> int:
    # going through the ordinal avoids platform limits of fromtimestamp()
    return date.fromordinal(secs // SECS_PER_DAY + _EPOCH_ORDINAL).year


def epoch_for_date(d: date) -> int:
    return (d.toordinal() - _EPOCH_ORDINAL) * SECS_PER_DAY


def _posix_weekday(d: date) -> Weekday:
    return d.isoweekday() % 7


class LastWeekday:
    """``M<month>.5.<weekday>``: the last such weekday of the month"""

    __slots__ = ("month", "weekday")

    def __init__(self, month: int, weekday: Weekday):
        self.month = month
        self.weekday = weekday

    def apply(self, year: int) -> date:
        last = date(year, self.month, days_in_month(year, self.month))
        return last - timedelta((_posix_weekday(last) - self.weekday) % 7)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LastWeekday):
            return NotImplemented  # pragma: no cover
        return (self.month, self.weekday) == (other.month, other.weekday)

    def __repr__(self) -> str:
        return f"LastWeekday({self.month}, {self.weekday})"


class NthWeekday:
    """``M<month>.<nth>.<weekday>`` for nth in 1-4"""

    __slots__ = ("month", "nth", "weekday")

    def __init__(self, month: int, nth: int, weekday: Weekday):
        self.month = month
        self.nth = nth
        self.weekday = weekday

    def apply(self, year: int) -> date:
        first = date(year, self.month, 1)
        return first + timedelta(
            (self.weekday - _posix_weekday(first)) % 7 + 7 * (self.nth - 1)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NthWeekday):
            return NotImplemented  # pragma: no cover
        return (self.month, self.nth, self.weekday) == (
            other.month,
            other.nth,
            other.weekday,
        )

    def __repr__(self) -> str:
        return f"NthWeekday({self.month}, {self.nth}, {self.weekday})"


class DayOfYear:
    """``<n>``: zero-based day of the year, counting Feb 29.
    Stored one-based."""

    __slots__ = ("nth",)

    def __init__(self, nth: int):
        self.nth = nth

    def apply(self, year: int) -> date:
        return date(year, 1, 1) + timedelta(
            min(self.nth, 365 + is_leap(year)) - 1
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DayOfYear):
            return NotImplemented  # pragma: no cover
        return self.nth == other.nth

    def __repr__(self) -> str:
        return f"DayOfYear({self.nth})"


class JulianDayOfYear:
    """``J<n>``: one-based day of the year, never counting Feb 29"""

    __slots__ = ("nth",)

    def __init__(self, nth: int):
        self.nth = nth

    def apply(self, year: int) -> date:
        return date(year, 1, 1) + timedelta(
            self.nth - 1 + (is_leap(year) and self.nth > 59)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JulianDayOfYear):
            return NotImplemented  # pragma: no cover
        return self.nth == other.nth

    def __repr__(self) -> str:
        return f"JulianDayOfYear({self.nth})"


Rule = Union[LastWeekday, NthWeekday, DayOfYear, JulianDayOfYear]


class Dst:
    __slots__ = ("period", "start", "end")

    def __init__(
        self,
        period: ZonePeriod,
        start: tuple[Rule, int],
        end: tuple[Rule, int],
    ):
        self.period = period
        self.start = start
        self.end = end

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dst):
            return NotImplemented  # pragma: no cover
        return (self.period, self.start, self.end) == (
            other.period,
            other.start,
            other.end,
        )

    def __repr__(self) -> str:
        return f"Dst({self.period!r}, start={self.start}, end={self.end})"


class TzStr:
    """A parsed POSIX TZ string: a standard period and optional DST rules"""

    __slots__ = ("std", "dst")

    def __init__(self, std: ZonePeriod, dst: Optional[Dst] = None):
        self.std = std
        self.dst = dst

    def _transitions(self, year: int) -> tuple[int, int]:
        """Local epoch seconds of the DST start and end in the given year,
        each expressed in the offset in force just before it."""
        assert self.dst
        (start_rule, start_time), (end_rule, end_time) = (
            self.dst.start,
            self.dst.end,
        )
        return (
            epoch_for_date(start_rule.apply(year)) + start_time,
            epoch_for_date(end_rule.apply(year)) + end_time,
        )

    def period_for_instant(self, epoch: int) -> ZonePeriod:
        if not self.dst:
            return self.std
        # We assume the transitions don't cross the year boundary
        # in a way that matters. zoneinfo assumes the same.
        start, end = self._transitions(year_for_epoch(epoch + self.std.offset))
        start -= self.std.offset
        end -= self.dst.period.offset

        if start < end:
            in_dst = start <= epoch < end
        else:
            in_dst = not (end <= epoch < start)
        return self.dst.period if in_dst else self.std

    def ambiguity_for_local(self, epoch: int) -> Ambiguity:
        """Resolve seconds since the LOCAL epoch"""
        if not self.dst:
            return Unambiguous(self.std)
        start, end = self._transitions(year_for_epoch(epoch))
        std, dst = self.std, self.dst.period

        # p1 is in force at the start of the year, p2 between t1 and t2
        if start < end:
            t1, t2, p1, p2 = start, end, std, dst
        else:
            t1, t2, p1, p2 = end, start, dst, std
        shift = p2.offset - p1.offset

        if shift >= 0:
            if epoch < t1:
                return Unambiguous(p1)
            elif epoch < t1 + shift:
                return Gap(p1, p2)
            elif epoch < t2 - shift:
                return Unambiguous(p2)
            elif epoch < t2:
                return Ambiguous(p2, p1)
            return Unambiguous(p1)
        else:
            if epoch < t1 + shift:
                return Unambiguous(p1)
            elif epoch < t1:
                return Ambiguous(p1, p2)
            elif epoch < t2:
                return Unambiguous(p2)
            elif epoch < t2 - shift:
                return Gap(p2, p1)
            return Unambiguous(p1)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TzStr):
            return NotImplemented  # pragma: no cover
        return self.std == other.std and self.dst == other.dst

    def __repr__(self) -> str:
        return f"TzStr({self.std!r}, dst={self.dst!r})"

    @classmethod
    def parse(cls, s: str) -> TzStr:
        if not s.isascii():
            raise ValueError("Invalid TZ string: non-ASCII characters")

        std_name, s = parse_tzname(s)
        std_offset, s = parse_offset(s)
        std = ZonePeriod(std_offset, False, std_name)
        if not s:
            return cls(std)

        dst_name, s = parse_tzname(s)
        if s[:1] == ",":
            s = s[1:]
            dst_offset = std_offset + DEFAULT_DST
            if dst_offset >= MAX_OFFSET:
                raise ValueError("Invalid TZ string: DST offset out of range")
        else:
            dst_offset, s = parse_offset(s)
            s = expect_char(s, ",")

        start, s = parse_rule(s)
        s = expect_char(s, ",")
        end, s = parse_rule(s)
        if s:
            raise ValueError(f"Invalid TZ string: unexpected trailing {s!r}")
        return cls(
            std, Dst(ZonePeriod(dst_offset, True, dst_name), start, end)
        )


def parse_tzname(s: str) -> tuple[str, str]:
    """Split off the zone abbreviation: letters, or anything in ``<>``"""
    if s[:1] == "<":
        stop = s.find(">")
        if stop < 2:
            raise ValueError("Invalid TZ string: missing or empty name")
        return s[1:stop], s[stop + 1 :]

    stop = 0
    while stop < len(s) and s[stop].isalpha():
        stop += 1
    # a name without an offset is also invalid
    if stop == 0 or stop == len(s):
        raise ValueError("Invalid TZ string: missing or invalid name")
    return s[:stop], s[stop:]


def expect_char(s: str, char: str) -> str:
    if s[:1] != char:
        raise ValueError(f"Invalid TZ string: expected {char!r}")
    return s[1:]


def parse_offset(s: str) -> tuple[int, str]:
    secs, s = parse_hms(s)
    if abs(secs) >= MAX_OFFSET:
        raise ValueError("Invalid TZ string: offset out of range")
    # POSIX offsets are west-positive
    return -secs, s


def parse_hms(s: str) -> tuple[int, str]:
    """Parse ``[+-]h[hh][:mm[:ss]]`` into signed seconds"""
    sign = -1 if s[:1] == "-" else 1
    if s[:1] in ("+", "-"):
        s = s[1:]

    hours, s = parse_digits(s, 3)
    total = hours * 3600
    for factor in (60, 1):
        if s[:1] != ":":
            break
        value, s = s[1:3], s[3:]
        if len(value) != 2 or not value.isdigit() or int(value) > 59:
            raise ValueError(
                f"Invalid TZ string: expected 00-59, got {value!r}"
            )
        total += int(value) * factor
    return sign * total, s


def parse_digits(s: str, max_len: int) -> tuple[int, str]:
    """Parse 1 to max_len leading digits"""
    stop = 0
    while stop < min(max_len, len(s)) and s[stop].isdigit():
        stop += 1
    if not stop:
        raise ValueError(f"Invalid TZ string: expected digits in {s!r}")
    return int(s[:stop]), s[stop:]


def parse_rule(s: str) -> tuple[tuple[Rule, int], str]:
    rule: Rule
    if s[:1] == "M":
        month, s = parse_digits(s[1:], 2)
        s = expect_char(s, ".")
        nth, s = parse_digits(s, 1)
        s = expect_char(s, ".")
        weekday, s = parse_digits(s, 1)
        if not (1 <= month <= 12 and 1 <= nth <= 5 and weekday <= 6):
            raise ValueError("Invalid TZ string: invalid DST rule")
        rule = (
            LastWeekday(month, weekday)
            if nth == 5
            else NthWeekday(month, nth, weekday)
        )
    elif s[:1] == "J":
        nth, s = parse_digits(s[1:], 3)
        if not 1 <= nth <= 365:
            raise ValueError(f"Invalid TZ string: Julian day {nth}")
        rule = JulianDayOfYear(nth)
    else:
        nth, s = parse_digits(s, 3)
        if nth > 365:
            raise ValueError(f"Invalid TZ string: day of year {nth}")
        rule = DayOfYear(nth + 1)

    if s[:1] == "/":
        time, s = parse_hms(s[1:])
    else:
        time = DEFAULT_RULE_TIME
    return (rule, time), s
