from typing import Literal, Union

from .._common import _ImmutableBase, final

Disambiguate = Literal["compatible", "earlier", "later", "raise"]


@final
class ZonePeriod(_ImmutableBase):
    """The rules in force in a timezone for a span of time: the total UTC
    offset (seconds), whether it is daylight saving time, and the
    abbreviation (e.g. ``CEST``)."""

    __slots__ = ("_offset", "_is_dst", "_abbreviation")

    def __init__(
        self, offset: int, is_dst: bool = False, abbreviation: str = ""
    ):
        self._offset = offset
        self._is_dst = is_dst
        self._abbreviation = abbreviation

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def is_dst(self) -> bool:
        return self._is_dst

    @property
    def abbreviation(self) -> str:
        return self._abbreviation

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ZonePeriod):
            return (
                self._offset == other._offset
                and self._is_dst == other._is_dst
                and self._abbreviation == other._abbreviation
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._offset, self._is_dst, self._abbreviation))

    def __repr__(self) -> str:
        return (
            f"ZonePeriod({self._offset}, is_dst={self._is_dst}, "
            f"abbreviation={self._abbreviation!r})"
        )


UTC_PERIOD = ZonePeriod(0, False, "UTC")


class Unambiguous:
    period: ZonePeriod

    __slots__ = ("period",)

    def __init__(self, period: ZonePeriod):
        self.period = period

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Unambiguous):
            return self.period == other.period
        return False  # pragma: no cover

    def __repr__(self) -> str:
        return f"Unambiguous({self.period!r})"


class Gap:
    """A local time skipped by a transition. ``before`` is in force up to
    the gap, ``after`` from the end of the gap onwards."""

    before: ZonePeriod
    after: ZonePeriod

    __slots__ = ("before", "after")

    def __init__(self, before: ZonePeriod, after: ZonePeriod):
        self.before = before
        self.after = after

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Gap):
            return self.before == other.before and self.after == other.after
        return False  # pragma: no cover

    def __repr__(self) -> str:
        return f"Gap({self.before!r}, {self.after!r})"


class Ambiguous:
    """A local time that occurs twice. ``earlier`` gives the first
    occurrence, ``later`` the second."""

    earlier: ZonePeriod
    later: ZonePeriod

    __slots__ = ("earlier", "later")

    def __init__(self, earlier: ZonePeriod, later: ZonePeriod):
        self.earlier = earlier
        self.later = later

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Ambiguous):
            return (
                self.earlier == other.earlier and self.later == other.later
            )
        return False  # pragma: no cover

    def __repr__(self) -> str:
        return f"Ambiguous({self.earlier!r}, {self.later!r})"


Ambiguity = Union[Unambiguous, Gap, Ambiguous]
