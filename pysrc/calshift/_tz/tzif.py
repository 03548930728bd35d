"""Parsing of TZif files (RFC 8536)"""

from __future__ import annotations

import struct
from io import BytesIO
from typing import IO, Optional, Sequence, final

from .common import Ambiguity, Ambiguous, Gap, Unambiguous, ZonePeriod
from .posix import TzStr

EpochSecs = int

EPOCH_SECS_MIN = -62135596800  # 0001-01-01T00:00:00Z
EPOCH_SECS_MAX = 253402300799  # 9999-12-31T23:59:59Z


@final
class TimeZone:
    """A complete timezone definition: the transitions from a TZif file,
    plus the POSIX TZ string that applies after the last one.

    A timezone made from a TZ string alone has no transitions.
    """

    __slots__ = (
        "__weakref__",
        "key",
        "_periods_by_utc",
        "_periods_by_local",
        "_end",
    )

    # The IANA tz ID (e.g. "Europe/Amsterdam"). It isn't part of the file,
    # but we always load a file by its ID.
    key: Optional[str]

    # Read (X, P) as "FROM X onwards (UTC epoch seconds), period P applies".
    _periods_by_utc: tuple[tuple[EpochSecs, ZonePeriod], ...]

    # Read (X, (P, Q)) as "UNTIL X (local epoch seconds), period P applies.
    # There, it changes to Q". Local times within |Q - P| before X are
    # skipped or repeated.
    _periods_by_local: tuple[
        tuple[EpochSecs, tuple[ZonePeriod, ZonePeriod]], ...
    ]

    # If absent, there is at least one transition in each of the above.
    _end: Optional[TzStr]

    def __init__(
        self,
        key: Optional[str],
        _periods_by_utc: tuple[tuple[EpochSecs, ZonePeriod], ...],
        _periods_by_local: tuple[
            tuple[EpochSecs, tuple[ZonePeriod, ZonePeriod]], ...
        ],
        _end: Optional[TzStr] = None,
    ):
        self.key = key
        self._periods_by_utc = _periods_by_utc
        self._periods_by_local = _periods_by_local
        self._end = _end

    def period_for_instant(self, t: EpochSecs) -> ZonePeriod:
        """The period in force at the given UTC epoch seconds"""
        idx = bisect(self._periods_by_utc, t)
        if idx is not None:
            return self._periods_by_utc[max(0, idx - 1)][1]
        elif self._end is not None:
            # the rules are only defined for years 1-9999
            return self._end.period_for_instant(clamp_epoch_secs(t))
        return self._periods_by_utc[-1][1]

    def ambiguity_for_local(self, t: EpochSecs) -> Ambiguity:
        """Resolve a local time, expressed in local epoch seconds"""
        idx = bisect(self._periods_by_local, t)
        if idx is not None:
            transition, (prev, next_) = self._periods_by_local[idx]
            change = next_.offset - prev.offset
            if t < transition - abs(change):
                return Unambiguous(prev)
            elif change < 0:
                return Ambiguous(prev, next_)
            return Gap(prev, next_)
        elif self._end is not None:
            return self._end.ambiguity_for_local(clamp_epoch_secs(t))
        return Unambiguous(self._periods_by_utc[-1][1])

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        # Distinct instances may be equal after clearing the cache
        elif type(other) is TimeZone:
            return (
                self.key == other.key
                and self._periods_by_utc == other._periods_by_utc
                and self._periods_by_local == other._periods_by_local
                and self._end == other._end
            )
        return NotImplemented  # pragma: no cover

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"TimeZone({self.key!r})"

    @classmethod
    def parse_posix(cls, s: str) -> TimeZone:
        return TimeZone(None, (), (), TzStr.parse(s))

    @classmethod
    def parse_tzif(cls, data: bytes, key: Optional[str] = None) -> TimeZone:
        read = BytesIO(data)
        return _parse_content(_parse_header(read), read, key)


def bisect(
    arr: Sequence[tuple[EpochSecs, object]], x: EpochSecs
) -> Optional[int]:
    """Index of the first entry later than x, or None if there is none"""
    left, right = 0, len(arr)
    while left < right:
        mid = (left + right) // 2
        if x >= arr[mid][0]:
            left = mid + 1
        else:
            right = mid
    return left if left != len(arr) else None


def clamp_epoch_secs(value: int) -> EpochSecs:
    return max(EPOCH_SECS_MIN, min(EPOCH_SECS_MAX, value))


class Header:
    __slots__ = (
        "version",
        "isutcnt",
        "isstdcnt",
        "leapcnt",
        "timecnt",
        "typecnt",
        "charcnt",
    )

    def __init__(
        self,
        version: int,
        isutcnt: int,
        isstdcnt: int,
        leapcnt: int,
        timecnt: int,
        typecnt: int,
        charcnt: int,
    ):
        self.version = version
        self.isutcnt = isutcnt
        self.isstdcnt = isstdcnt
        self.leapcnt = leapcnt
        self.timecnt = timecnt
        self.typecnt = typecnt
        self.charcnt = charcnt

    def v1_data_size(self) -> int:
        return (
            self.timecnt * 5
            + self.typecnt * 6
            + self.charcnt
            + self.leapcnt * 8
            + self.isstdcnt
            + self.isutcnt
        )


def _parse_header(data: IO[bytes]) -> Header:
    if data.read(4) != b"TZif":
        raise ValueError("Invalid TZif header")

    version_byte = data.read(1)
    if version_byte == b"\x00":
        version = 1
    elif version_byte.isdigit():
        version = int(version_byte)
    else:
        raise ValueError("Invalid TZif version")  # pragma: no cover

    data.read(15)  # reserved
    return Header(version, *struct.unpack(">6i", data.read(24)))


def _parse_content(
    header: Header, data: IO[bytes], key: Optional[str]
) -> TimeZone:
    if header.version >= 2:
        # The v1 block is only there for old readers. Skip to the 64-bit one.
        data.read(header.v1_data_size())
        header = _parse_header(data)
        transition_times = [
            clamp_epoch_secs(t)
            for t in struct.unpack(
                f">{header.timecnt}q", data.read(8 * header.timecnt)
            )
        ]
    else:
        transition_times = list(
            struct.unpack(
                f">{header.timecnt}i", data.read(4 * header.timecnt)
            )
        )

    type_indices = list(data.read(header.timecnt))
    periods = _parse_periods(header.typecnt, header.charcnt, data)

    periods_by_utc = [
        (EPOCH_SECS_MIN, periods[0]),
        *(
            (epoch, periods[idx])
            for epoch, idx in zip(transition_times, type_indices)
        ),
    ]

    end = None
    if header.version >= 2:
        # skip the leap second and indicator blocks, and the newline
        data.read(header.isutcnt + header.isstdcnt + header.leapcnt * 12 + 1)
        tz_string, *_ = data.read().split(b"\n", 1)
        if tz_string:  # pragma: no branch
            end = TzStr.parse(tz_string.decode("ascii"))

    return TimeZone(
        key,
        tuple(periods_by_utc),
        tuple(_local_transitions(periods_by_utc)),
        end,
    )


def _parse_periods(
    typecnt: int, charcnt: int, data: IO[bytes]
) -> Sequence[ZonePeriod]:
    types = list(struct.iter_unpack(">iBB", data.read(6 * typecnt)))
    chars = data.read(charcnt)
    if not types:
        raise ValueError("No local time types in TZif data")
    return [
        ZonePeriod(offset, bool(isdst), _abbreviation(chars, idx))
        for offset, isdst, idx in types
    ]


def _abbreviation(chars: bytes, idx: int) -> str:
    stop = chars.find(b"\x00", idx)
    return chars[idx : stop if stop >= 0 else None].decode("ascii", "replace")


def _local_transitions(
    transitions: Sequence[tuple[EpochSecs, ZonePeriod]],
) -> Sequence[tuple[EpochSecs, tuple[ZonePeriod, ZonePeriod]]]:
    result = []
    (_, prev), *remaining = transitions
    for epoch, period in remaining:
        # The later of the two wall-clock readings at the transition
        local_time = clamp_epoch_secs(epoch + max(prev.offset, period.offset))
        result.append((local_time, (prev, period)))
        prev = period
    return result
