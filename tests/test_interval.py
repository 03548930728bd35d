import pytest

from calshift import (
    Date,
    Interval,
    InvalidInterval,
    Period,
    ZonedDateTime,
)

from .common import AlwaysEqual, NeverEqual

START = ZonedDateTime(2020, 1, 1, tz="UTC")
ENDING = ZonedDateTime(2020, 1, 2, tz="UTC")
MIDDLE = ZonedDateTime(2020, 1, 1, 12, tz="UTC")
BEFORE = ZonedDateTime(2019, 12, 31, 23, tz="UTC")
AFTER = ZonedDateTime(2020, 1, 2, 1, tz="UTC")


def berlin(*args: int) -> ZonedDateTime:
    return ZonedDateTime(*args, tz="Europe/Berlin")


class TestInit:

    def test_defaults(self):
        i = Interval(START, ENDING)
        assert i.start is START
        assert i.ending is ENDING
        assert i.boundaries == "right_open"

    def test_period_bound(self):
        p = Period(days=1)
        assert Interval(START, p).ending is p
        assert Interval(p, ENDING, "closed").start is p

    @pytest.mark.parametrize(
        "args",
        [
            (START, START),
            (ENDING, START),
            (Period(days=1), Period(days=2)),
            (START, ENDING, "half_open"),
            (START, Date(2020, 1, 2)),
            (None, ENDING),
        ],
    )
    def test_invalid(self, args):
        with pytest.raises(InvalidInterval):
            Interval(*args)

    def test_same_moment_other_zone(self):
        with pytest.raises(InvalidInterval):
            Interval(START, START.to_tz("Asia/Tokyo"))


@pytest.mark.parametrize(
    "boundaries, at_start, at_ending",
    [
        ("closed", True, True),
        ("open", False, False),
        ("left_open", False, True),
        ("right_open", True, False),
    ],
)
def test_contains(boundaries, at_start, at_ending):
    i = Interval(START, ENDING, boundaries)
    assert i.contains(START) is at_start
    assert i.contains(ENDING) is at_ending
    assert i.contains(MIDDLE)
    assert not i.contains(BEFORE)
    assert not i.contains(AFTER)
    assert (MIDDLE in i) and (AFTER not in i)
    # the moment counts, not the zone
    assert i.contains(START.to_tz("America/New_York")) is at_start


class TestResolveBounds:

    def test_period_ending(self):
        i = Interval(berlin(2020, 1, 31), Period(months=1))
        assert i.start_datetime() is i.start
        assert i.ending_datetime().exact_eq(berlin(2020, 2, 29))

    def test_period_start(self):
        i = Interval(Period(days=1, hours=1), berlin(2020, 3, 30))
        assert i.ending_datetime() is i.ending
        assert i.start_datetime().exact_eq(berlin(2020, 3, 28, 23))

    def test_across_transition(self):
        start = berlin(2020, 3, 28, 12)
        i = Interval(start, Period(days=1), "closed")
        assert i.ending_datetime().local() == start.local().add(days=1)
        assert i.until_ending(start, "hour") == 23


class TestStep:

    def test_period_ending(self):
        i = Interval(berlin(2020, 1, 31), Period(months=1))
        assert i.next() == Interval(berlin(2020, 2, 29), Period(months=1))
        assert i.previous() == Interval(berlin(2019, 12, 31), Period(months=1))

    def test_period_start(self):
        p = Period(days=1)
        i = Interval(p, berlin(2020, 3, 30), "closed")
        assert i.next() == Interval(p, berlin(2020, 3, 31), "closed")
        assert i.previous() == Interval(p, berlin(2020, 3, 29), "closed")

    def test_datetime_bounds(self):
        start = berlin(2020, 3, 28, 12)
        ending = berlin(2020, 3, 29, 12)
        i = Interval(start, ending, "left_open")

        following = i.next()
        assert following.start == ending
        assert following.ending_datetime().local() == ending.local().add(
            hours=23
        )
        assert following.boundaries == "left_open"

        preceding = i.previous()
        assert preceding.ending == start
        assert preceding.start_datetime().difference(start, "hour") == -23

    def test_next_then_previous(self):
        i = Interval(START, ENDING)
        assert i.next().previous() == i


class TestElapsed:

    def test_contained(self):
        i = Interval(START, ENDING)
        assert i.since_start(MIDDLE) == 12 * 3600
        assert i.until_ending(MIDDLE) == 12 * 3600
        assert i.since_start(MIDDLE, "hour") == 12
        assert i.until_ending(MIDDLE, unit="minute") == 720
        assert i.since_start(START) == 0

    def test_not_contained(self):
        i = Interval(START, ENDING)
        assert i.since_start(BEFORE) is None
        assert i.until_ending(AFTER) is None
        assert i.until_ending(ENDING) is None
        assert Interval(START, ENDING, "closed").until_ending(ENDING) == 0

    def test_invalid_unit(self):
        i = Interval(START, ENDING)
        with pytest.raises(ValueError, match="unit"):
            i.since_start(MIDDLE, "day")
        # also when not contained
        with pytest.raises(ValueError, match="unit"):
            i.until_ending(AFTER, "week")


class TestFormat:

    @pytest.mark.parametrize(
        "i, expect",
        [
            (
                Interval(START, ENDING),
                "[2020-01-01T00:00:00Z/2020-01-02T00:00:00Z[",
            ),
            (
                Interval(START, ENDING, "closed"),
                "[2020-01-01T00:00:00Z/2020-01-02T00:00:00Z]",
            ),
            (
                Interval(START, ENDING, "open"),
                "]2020-01-01T00:00:00Z/2020-01-02T00:00:00Z[",
            ),
            (
                Interval(Period(days=1), ENDING, "left_open"),
                "]P1D/2020-01-02T00:00:00Z]",
            ),
            (
                Interval(berlin(2020, 1, 1), Period(months=1)),
                "[2020-01-01T00:00:00+01:00/P1M[",
            ),
        ],
    )
    def test_str(self, i, expect):
        assert str(i) == expect
        assert repr(i) == f"Interval({expect})"


def test_equality():
    i = Interval(START, Period(days=1))
    same = Interval(START.to_tz("Asia/Tokyo"), Period(days=1))
    assert i == same
    assert hash(i) == hash(same)
    assert i != Interval(START, Period(days=1), "closed")
    assert i != Interval(START, Period(hours=24))
    # a resolved bound isn't the same as a period
    assert i != Interval(START, ENDING)
    assert i == AlwaysEqual()
    assert i != NeverEqual()
    assert not i == START  # type: ignore[comparison-overlap]
