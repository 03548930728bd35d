import pytest
from hypothesis import given
from hypothesis.strategies import builds, integers

from calshift import Duration, InvalidFormat, InvalidPeriod, Period

from .common import AlwaysEqual, NeverEqual


class TestInit:

    def test_fields(self):
        p = Period(years=1, months=2, weeks=3, days=4, hours=5, minutes=6)
        assert p.years == 1
        assert p.months == 2
        assert p.weeks == 3
        assert p.days == 4
        assert p.hours == 5
        assert p.minutes == 6
        assert p.seconds == 0

    def test_fractional_seconds(self):
        assert Period(seconds=0.5).seconds == 0.5

    @pytest.mark.parametrize(
        "kwargs",
        [
            {},
            dict(years=0, seconds=0),
            dict(seconds=0.0),
            dict(days=-1),
            dict(days=2, hours=-1),
            dict(seconds=-0.5),
            dict(months=1.5),
            dict(hours="1"),
            dict(days=True),
            dict(seconds=float("nan")),
            dict(seconds=float("inf")),
            dict(seconds="1"),
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(InvalidPeriod):
            Period(**kwargs)

    def test_keyword_only(self):
        with pytest.raises(TypeError):
            Period(1)  # type: ignore[misc]

    def test_immutable(self):
        p = Period(days=1)
        with pytest.raises(AttributeError):
            p.days = 2  # type: ignore[misc]


class TestToDuration:

    def test_integral(self):
        assert Period(years=1, weeks=2, minutes=3).to_duration() == Duration(
            years=1, weeks=2, minutes=3
        )

    def test_negated(self):
        p = Period(months=1, minutes=1)
        assert p.to_duration(-1) == Duration(months=-1, minutes=-1)
        assert -p == Duration(months=-1, minutes=-1)

    @pytest.mark.parametrize(
        "seconds, expect",
        [
            (1.5, Duration(seconds=1, microseconds=500_000)),
            (1.123, Duration(seconds=1, microseconds=123_000)),
            (0.000_001, Duration(microseconds=1)),
            # beyond microseconds is truncated
            (2.123_456_9, Duration(seconds=2, microseconds=123_456)),
            (3.0, Duration(seconds=3)),
        ],
    )
    def test_fractional_seconds(self, seconds, expect):
        assert Period(seconds=seconds).to_duration() == expect
        assert Period(seconds=seconds).to_duration(-1) == -expect

    def test_invalid_sign(self):
        with pytest.raises(ValueError, match="sign"):
            Period(days=1).to_duration(2)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "p, expect",
    [
        (Period(years=1), "P1Y"),
        (Period(years=1, months=3, hours=2), "P1Y3MT2H"),
        (Period(weeks=2, seconds=7.5), "P2WT7.5S"),
        (Period(minutes=90), "PT90M"),
        (Period(seconds=0.000_000_1), "PT0.0000001S"),
        (
            Period(
                years=1,
                months=2,
                weeks=3,
                days=4,
                hours=5,
                minutes=6,
                seconds=7,
            ),
            "P1Y2M3W4DT5H6M7S",
        ),
    ],
)
def test_format_common_iso(p, expect):
    assert p.format_common_iso() == expect
    assert str(p) == expect
    assert Period.parse_common_iso(expect) == p


class TestParse:

    @pytest.mark.parametrize(
        "s, expect",
        [
            ("P1Y3MT2H", Period(years=1, months=3, hours=2)),
            ("1Y3MT2H", Period(years=1, months=3, hours=2)),
            ("T12M5.5S", Period(minutes=12, seconds=5.5)),
            ("P1W", Period(weeks=1)),
            ("P1YT", Period(years=1)),
            ("PT0H1S", Period(seconds=1)),
            ("P0001D", Period(days=1)),
            ("PT1.123S", Period(seconds=1.123)),
        ],
    )
    def test_valid(self, s, expect):
        assert Period.parse_common_iso(s) == expect
        assert Period.parse(s) == expect

    @pytest.mark.parametrize(
        "s",
        [
            "P1Y1Y",
            "P1M1Y",
            "PT1S2M",
            "P1.5Y",
            "PT1.5M",
            "P1H",
            "PT1D",
            "P-1Y",
            "p1y",
            "P1Y 2M",
            "P1YT2HT3M",
            "P1Y2",
            "PY",
            "PT.5S",
            "P1Ý",
            "P١Y",
        ],
    )
    def test_invalid_format(self, s):
        with pytest.raises(InvalidFormat, match="Invalid period format"):
            Period.parse_common_iso(s)

    @pytest.mark.parametrize("s", ["P", "PT", "", "P0Y", "PT0S", "P0YT0.0S"])
    def test_empty(self, s):
        with pytest.raises(InvalidPeriod):
            Period.parse_common_iso(s)

    def test_not_a_string(self):
        with pytest.raises(TypeError):
            Period.parse_common_iso(1)  # type: ignore[arg-type]

    @given(
        builds(
            Period,
            years=integers(0, 100),
            months=integers(0, 100),
            weeks=integers(0, 100),
            days=integers(0, 1_000),
            hours=integers(1, 1_000),
            minutes=integers(0, 1_000),
            seconds=integers(0, 1_000),
        )
    )
    def test_parse_formatted(self, p):
        assert Period.parse(p.format_common_iso()) == p


def test_repr():
    assert repr(Period(years=1)) == "Period(P1Y)"
    assert repr(Period(hours=1, seconds=0.5)) == "Period(PT1H0.5S)"


def test_equality():
    p = Period(days=1, seconds=2)
    same = Period(days=1, seconds=2.0)
    assert p == same
    assert hash(p) == hash(same)
    # units aren't converted
    assert Period(days=7) != Period(weeks=1)
    assert p != Period(days=1, seconds=2.5)
    assert p == AlwaysEqual()
    assert p != NeverEqual()
    assert not p == Duration(days=1)  # type: ignore[comparison-overlap]
