import pytest
from hypothesis import given
from hypothesis.strategies import integers, times

from calshift import Date, Duration, InvalidTime, LocalDateTime, Time

from .common import AlwaysEqual, AlwaysLarger, AlwaysSmaller, NeverEqual


class TestInit:

    def test_all_args(self):
        t = Time(1, 2, 3, microsecond=4_000)
        assert t.hour == 1
        assert t.minute == 2
        assert t.second == 3
        assert t.microsecond == 4_000
        assert t.precision == 6

    def test_all_kwargs(self):
        assert Time(hour=1, minute=2, second=3, microsecond=4) == Time(
            1, 2, 3, microsecond=4
        )

    def test_defaults(self):
        t = Time()
        assert t == Time(0, 0, 0, microsecond=0)
        assert t.precision == 0

    @pytest.mark.parametrize(
        "args, kwargs",
        [
            ((24, 0, 0), {}),
            ((0, 60, 0), {}),
            ((0, 0, 60), {}),
            ((-1, 0, 0), {}),
            ((0, 0, 0), {"microsecond": 1_000_000}),
        ],
    )
    def test_out_of_range(self, args, kwargs):
        with pytest.raises(InvalidTime):
            Time(*args, **kwargs)

    @pytest.mark.parametrize("precision", [-1, 7, 1.5])
    def test_invalid_precision(self, precision):
        with pytest.raises(InvalidTime, match="precision"):
            Time(1, precision=precision)


@pytest.mark.parametrize(
    "t, expect",
    [
        (Time(1, 2, 3, microsecond=40_000), "01:02:03.040000"),
        (Time(1, 2, 3, microsecond=40_000, precision=2), "01:02:03.04"),
        (Time(1, 2, 3, microsecond=45_678, precision=3), "01:02:03.045"),
        (Time(1, 2, 3, precision=1), "01:02:03.0"),
        (Time(1, 2, 3), "01:02:03"),
        (Time(1, 2), "01:02:00"),
        (Time(1), "01:00:00"),
    ],
)
def test_format_common_iso(t, expect):
    assert str(t) == expect
    assert t.format_common_iso() == expect


def test_repr():
    assert repr(Time(1, 2, 3)) == "Time(01:02:03)"
    assert (
        repr(Time(1, 2, 3, calendar="Holocene"))
        == "Time(01:02:03, calendar=Holocene)"
    )


def test_on():
    assert Time(1, 2, 3).on(Date(2021, 1, 2)) == LocalDateTime(
        2021, 1, 2, 1, 2, 3
    )


class TestAdd:

    @pytest.mark.parametrize(
        "t, kwargs, expected",
        [
            (Time(1, 2, 3), dict(hours=1), Time(2, 2, 3)),
            (Time(23, 30), dict(hours=1), Time(0, 30)),
            (Time(0, 30), dict(minutes=-31), Time(23, 59)),
            (Time(0, 30), dict(hours=-49), Time(23, 30)),
            (Time(12), dict(seconds=86_400 * 3 + 1), Time(12, 0, 1)),
            (
                Time(12),
                dict(hours=1, minutes=-1, seconds=1),
                Time(12, 59, 1),
            ),
            # date units are ignored
            (Time(12), dict(days=1, months=3), Time(12)),
        ],
    )
    def test_valid(self, t, kwargs, expected):
        assert t.add(**kwargs) == expected
        assert t + Duration(**kwargs) == expected

    def test_sub_second_units_raise_precision(self):
        t = Time(12).add(milliseconds=1)
        assert t == Time(12, microsecond=1_000)
        assert t.precision == 3
        assert str(t) == "12:00:00.001"

        t = Time(12).add(microseconds=-1)
        assert t == Time(11, 59, 59, microsecond=999_999)
        assert t.precision == 6

        # the precision never drops
        t = Time(12, microsecond=5, precision=6).add(seconds=1)
        assert t.precision == 6

    def test_zero(self):
        t = Time(12)
        assert t.add() is t
        assert t.add(days=3) is t

    def test_subtract(self):
        assert Time(0, 15).subtract(minutes=30) == Time(23, 45)
        assert Time(0, 15) - Duration(hours=-1) == Time(1, 15)

    @given(times(), integers(-10**9, 10**9))
    def test_wraps_around(self, py_t, micros):
        t = Time(
            py_t.hour,
            py_t.minute,
            py_t.second,
            microsecond=py_t.microsecond,
        )
        shifted = t.add(microseconds=micros)
        assert shifted.subtract(microseconds=micros) == t


class TestComparison:

    def test_equality(self):
        t = Time(1, 2, 3, microsecond=4_000)
        same = Time(1, 2, 3, microsecond=4_000, precision=3)
        assert t == same
        assert hash(t) == hash(same)
        assert t != Time(1, 2, 3)
        assert t == AlwaysEqual()
        assert t != NeverEqual()
        assert t != Time(1, 2, 3, microsecond=4_000, calendar="Holocene")

    def test_ordering(self):
        t = Time(1, 2, 3)
        later = Time(1, 2, 4)
        assert t < later
        assert t <= later
        assert later > t
        assert later >= t
        assert t < AlwaysLarger()
        assert t > AlwaysSmaller()

        with pytest.raises(TypeError):
            t < 42  # type: ignore[operator]
