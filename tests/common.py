from datetime import datetime, timezone

from calshift import (
    ISO,
    CalendarProvider,
    UTCOnlyDatabase,
    register_calendar,
)

UTC_ONLY = UTCOnlyDatabase()

_HOLOCENE_OFFSET = 10_000


class Holocene(CalendarProvider):
    """The ISO calendar, with 10000 years added. Year 12020 is ISO 2020."""

    __slots__ = ()

    calendar_id = "Holocene"

    def days_in_month(self, year, month):
        return ISO.days_in_month(year - _HOLOCENE_OFFSET, month)

    def months_in_year(self, year):
        return 12

    def is_leap_year(self, year):
        return ISO.is_leap_year(year - _HOLOCENE_OFFSET)

    def day_of_week(self, year, month, day):
        return ISO.day_of_week(year - _HOLOCENE_OFFSET, month, day)

    def valid_date(self, year, month, day):
        return ISO.valid_date(year - _HOLOCENE_OFFSET, month, day)

    def valid_time(self, hour, minute, second, microsecond):
        return ISO.valid_time(hour, minute, second, microsecond)

    def date_to_iso_days(self, year, month, day):
        return ISO.date_to_iso_days(year - _HOLOCENE_OFFSET, month, day)

    def date_from_iso_days(self, days):
        year, month, day = ISO.date_from_iso_days(days)
        return year + _HOLOCENE_OFFSET, month, day

    def time_to_day_fraction(self, hour, minute, second, microsecond):
        return ISO.time_to_day_fraction(hour, minute, second, microsecond)

    def day_fraction_to_time(self, parts, parts_per_day):
        return ISO.day_fraction_to_time(parts, parts_per_day)


HOLOCENE = Holocene()
register_calendar(HOLOCENE)


class AlwaysEqual:
    def __eq__(self, _):
        return True


class NeverEqual:
    def __eq__(self, _):
        return False


class AlwaysLarger:
    def __lt__(self, _):
        return False

    def __le__(self, _):
        return False

    def __gt__(self, _):
        return True

    def __ge__(self, _):
        return True


class AlwaysSmaller:
    def __lt__(self, _):
        return True

    def __le__(self, _):
        return True

    def __gt__(self, _):
        return False

    def __ge__(self, _):
        return False


def mk_epoch(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
) -> int:
    dt = datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
    return int(dt.timestamp())
