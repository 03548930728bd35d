from datetime import date as py_date

import pytest
from hypothesis import given
from hypothesis.strategies import dates

from calshift import (
    ISO,
    CalendarProvider,
    Date,
    InvalidDate,
    IsoDays,
    LocalDateTime,
    Time,
    get_calendar,
    register_calendar,
)

from .common import HOLOCENE, Holocene


class TestRegistry:

    def test_get(self):
        assert get_calendar("ISO") is ISO
        assert get_calendar(ISO) is ISO
        assert get_calendar("Holocene") is HOLOCENE

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown calendar: 'Julian'"):
            get_calendar("Julian")
        with pytest.raises(ValueError, match="Unknown calendar"):
            Date(2020, 1, 1, calendar="Julian")

    def test_register_invalid(self):
        with pytest.raises(TypeError, match="CalendarProvider"):
            register_calendar("Holocene")  # type: ignore[arg-type]

    def test_reregister(self):
        class Replacement(Holocene):
            calendar_id = "Replaced"

        first, second = Replacement(), Replacement()
        register_calendar(first)
        register_calendar(second)
        assert get_calendar("Replaced") is second

    def test_provider_instance_unregistered(self):
        class Unregistered(Holocene):
            calendar_id = "Unregistered"

        cal = Unregistered()
        d = Date(12020, 1, 1, calendar=cal)
        assert d.calendar is cal
        assert d.add(months=1) == Date(12020, 2, 1, calendar=cal)

    def test_abstract(self):
        with pytest.raises(TypeError):
            CalendarProvider()  # type: ignore[abstract]

    def test_repr(self):
        assert repr(ISO) == "<calendar ISO>"


class TestISO:

    def test_epoch(self):
        assert ISO.date_to_iso_days(1970, 1, 1) == 719_528
        assert ISO.date_to_iso_days(1, 1, 1) == 366
        assert ISO.date_from_iso_days(719_528) == (1970, 1, 1)
        assert ISO.date_from_iso_days(366) == (1, 1, 1)

    @pytest.mark.parametrize("days", [365, 0, -1, 3_652_425 + 1_000])
    def test_out_of_range(self, days):
        with pytest.raises(InvalidDate, match="out of range"):
            ISO.date_from_iso_days(days)

    def test_invalid_date(self):
        with pytest.raises(InvalidDate):
            ISO.date_to_iso_days(2021, 2, 29)
        assert not ISO.valid_date(2021, 2, 29)
        assert not ISO.valid_date(0, 1, 1)
        assert not ISO.valid_date(10_000, 1, 1)
        assert ISO.valid_date(2020, 2, 29)

    def test_valid_time(self):
        assert ISO.valid_time(23, 59, 59, 999_999)
        assert not ISO.valid_time(24, 0, 0, 0)
        assert not ISO.valid_time(0, 0, 0, -1)

    def test_with_time(self):
        iso = ISO.to_iso_days(1970, 1, 1, 12)
        assert iso == IsoDays(719_528, 1, 2)
        assert ISO.from_iso_days(iso) == (1970, 1, 1, 12, 0, 0, 0)
        # unnormalized values are normalized first
        assert ISO.from_iso_days(IsoDays(719_528, -1)) == (
            1969,
            12,
            31,
            23,
            59,
            59,
            999_999,
        )

    def test_finer_fraction_truncated(self):
        assert ISO.day_fraction_to_time(1, 3 * 86_400_000_000) == (0, 0, 0, 0)
        assert ISO.day_fraction_to_time(1, 3) == (8, 0, 0, 0)

    def test_add_days(self):
        assert ISO.add_days(2020, 12, 31, 1) == (2021, 1, 1)
        assert ISO.add_days(2020, 3, 1, -1) == (2020, 2, 29)
        assert ISO.add_days(2020, 1, 1, 366) == (2021, 1, 1)

    def test_day_of_week(self):
        assert ISO.day_of_week(2024, 1, 1) == (1, 1, 7)
        assert Date(2024, 1, 7).day_of_week() == 7

    @given(dates())
    def test_matches_ordinals(self, d: py_date):
        iso_days = ISO.date_to_iso_days(d.year, d.month, d.day)
        assert iso_days - 365 == d.toordinal()
        assert ISO.date_from_iso_days(iso_days) == (d.year, d.month, d.day)


class TestOtherCalendar:

    def test_same_day_count(self):
        assert (
            Date(12020, 2, 29, calendar="Holocene").to_iso_days()
            == Date(2020, 2, 29).to_iso_days()
        )

    def test_mixing(self):
        d = Date(12020, 2, 29, calendar="Holocene")
        # equal day counts, but not the same date
        assert d != Date(2020, 2, 29)
        assert not d < Date(2020, 2, 29)
        assert d < Date(2020, 3, 1)

        with pytest.raises(ValueError, match="share a calendar"):
            d.at(Time(12))

    def test_datetime(self):
        d = LocalDateTime(12020, 2, 29, 23, calendar="Holocene")
        assert d.add(days=1, hours=1) == LocalDateTime(
            12020, 3, 2, calendar="Holocene"
        )
