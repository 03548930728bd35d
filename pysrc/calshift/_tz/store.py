"""Finding, loading and caching TZif files by their IANA ID."""

from __future__ import annotations

import logging
import os.path
import sys
from collections import OrderedDict
from typing import TYPE_CHECKING, NewType
from weakref import WeakValueDictionary

from .._common import ZoneResolutionError
from .tzif import TimeZone

__all__ = [
    "TimeZoneNotFoundError",
    "get_tz",
    "validate_tzid",
    "_clear_tz_cache",
    "_clear_tz_cache_by_keys",
    "_set_tzpath",
]

_log = logging.getLogger(__name__)

_NOGIL = hasattr(sys, "_is_gil_enabled") and not sys._is_gil_enabled()

_TZPATH: tuple[str, ...] = ()

# Strong references to the most recently used zones keep them in the
# weak lookup. The same scheme as `zoneinfo`.
_TZCACHE_LRU_SIZE = 8
_tzcache_lru: OrderedDict[str, TimeZone] = OrderedDict()
_tzcache_lookup: WeakValueDictionary[str, TimeZone] = WeakValueDictionary()

# OrderedDict isn't thread-safe under free-threading before 3.14
if TYPE_CHECKING or (
    _NOGIL and sys.version_info < (3, 14)
):  # pragma: no cover
    from threading import Lock as _Lock
else:

    class _Lock:
        def __enter__(self) -> None:
            pass

        def __exit__(self, *args) -> None:
            pass


_tzcache_lru_lock = _Lock()


def _set_tzpath(to: tuple[str, ...]) -> None:
    global _TZPATH
    _TZPATH = to


def _clear_tz_cache() -> None:
    _tzcache_lookup.clear()
    with _tzcache_lru_lock:
        _tzcache_lru.clear()


def _clear_tz_cache_by_keys(keys: tuple[str, ...]) -> None:
    with _tzcache_lru_lock:
        for k in keys:
            _tzcache_lookup.pop(k, None)
            _tzcache_lru.pop(k, None)


def get_tz(key: str) -> TimeZone:
    instance = _tzcache_lookup.get(key)
    if instance is None:
        # Concurrent loads of the same key are harmless: TimeZone is
        # immutable and the last writer wins.
        instance = _tzcache_lookup.setdefault(
            key, _load_tz(validate_tzid(key))
        )

    with _tzcache_lru_lock:
        _tzcache_lru[key] = _tzcache_lru.pop(key, instance)
        if len(_tzcache_lru) > _TZCACHE_LRU_SIZE:
            try:
                _tzcache_lru.popitem(last=False)
            except KeyError:  # pragma: no cover
                pass  # another thread cleared it first

    return instance


# A key confirmed to be free of path traversal and odd characters
SafeTzId = NewType("SafeTzId", str)


def validate_tzid(key: str) -> SafeTzId:
    if (
        isinstance(key, str)
        and key.isascii()
        # IANA sets no limit, but we need one
        and 0 < len(key) < 100
        and all(c.isalnum() or c in "-_+/." for c in key)
        and ".." not in key
        and "//" not in key
        and "/./" not in key
        and key[0] not in ".-+/"
        and key[-1] != "/"
    ):
        return SafeTzId(key)
    raise TimeZoneNotFoundError.for_key(key)


def _tzdata_root() -> str | None:
    try:
        import tzdata.zoneinfo
    except ImportError:  # pragma: no cover
        return None
    return tzdata.zoneinfo.__path__[0]


def _read_tzif(path: str) -> bytes | None:
    # Check first, since the exceptions from open() vary per platform
    if os.path.isfile(path):
        with open(path, "rb") as f:
            return f.read()
    return None


def _load_tz(key: SafeTzId) -> TimeZone:
    sources = [os.path.join(p, key) for p in _TZPATH]
    if (root := _tzdata_root()) is not None:
        sources.append(os.path.join(root, *key.split("/")))

    for path in sources:
        try:
            tzif = _read_tzif(path)
        except UnicodeEncodeError:  # pragma: no cover
            raise TimeZoneNotFoundError.for_key(key)
        if tzif is None:
            continue
        if not tzif.startswith(b"TZif"):
            # A file, but not a TZif one
            raise TimeZoneNotFoundError.for_key(key)
        _log.debug("Loaded timezone %r from %s", key, path)
        return TimeZone.parse_tzif(tzif, key)

    raise TimeZoneNotFoundError.for_key(key)


class TimeZoneNotFoundError(ZoneResolutionError):
    """A timezone with the given ID was not found"""

    @classmethod
    def for_key(cls, key: object) -> TimeZoneNotFoundError:
        return cls(f"No time zone found for key: {key!r}")
