from __future__ import annotations

import os as _os
import sysconfig as _sysconfig
from importlib.resources import files as _resource_files
from pathlib import Path as _Path
from typing import Iterable as _Iterable, Iterator as _Iterator

from ._calendar import (
    ISO,
    CalendarProvider,
    ISOCalendar,
    get_calendar,
    register_calendar,
)
from ._core import *
from ._core import __all__ as _core_all, __version__
from ._math import IsoDays
from ._tz.common import ZonePeriod
from ._tz.database import (
    TZIF_DATABASE,
    TimeZoneDatabase,
    TZifDatabase,
    UTCOnlyDatabase,
)
from ._tz.store import (
    TimeZoneNotFoundError,
    _clear_tz_cache,
    _clear_tz_cache_by_keys,
    _set_tzpath,
)

__all__ = [
    *_core_all,
    "IsoDays",
    "CalendarProvider",
    "ISOCalendar",
    "ISO",
    "register_calendar",
    "get_calendar",
    "ZonePeriod",
    "TimeZoneDatabase",
    "TZifDatabase",
    "UTCOnlyDatabase",
    "TZIF_DATABASE",
    "TimeZoneNotFoundError",
    "TZPATH",
    "reset_tzpath",
    "clear_tzcache",
    "available_timezones",
]

TZPATH: tuple[str, ...] = ()
"""The paths in which ``calshift`` will search for timezone data.
By default, this determined the same way as :data:`zoneinfo.TZPATH`,
although you can override it using :func:`calshift.reset_tzpath`.
"""


def reset_tzpath(target: _Iterable[str | _os.PathLike[str]] | None = None, /):
    """Reset or set the paths in which ``calshift`` will search for timezone data.

    It does not affect the :mod:`zoneinfo` module or other libraries.

    Note
    ----
    Due to caching, you may find that looking up a timezone after setting the tzpath
    doesn't load the timezone data from the new path. Call :func:`clear_tzcache`
    to force loading timezones from the new path.

    Behaves similarly to :func:`zoneinfo.reset_tzpath`
    """
    global TZPATH

    if target is not None:
        # This is such a common mistake, that we raise a descriptive error
        if isinstance(target, (str, bytes)):
            raise TypeError("tzpath must be an iterable of paths")

        target = tuple(target)
        if not all(map(_os.path.isabs, target)):
            raise ValueError("tzpaths must be absolute paths")
        TZPATH = tuple(str(_Path(p)) for p in target)
    else:
        TZPATH = _tzpath_from_env()
    _set_tzpath(TZPATH)


def _tzpath_from_env() -> tuple[str, ...]:
    try:
        env_var = _os.environ["PYTHONTZPATH"]
    except KeyError:
        env_var = _sysconfig.get_config_var("TZPATH")

    if not env_var:
        return ()

    raw_tzpath = env_var.split(_os.pathsep)
    # invalid paths may be silently ignored, as zoneinfo does
    return tuple(filter(_os.path.isabs, raw_tzpath))


def clear_tzcache(*, only_keys: _Iterable[str] | None = None) -> None:
    """Clear the timezone cache. If ``only_keys`` is provided, only the cache for those
    keys will be cleared.

    Existing ``ZonedDateTime`` values keep the zone period they were created
    with. Only later lookups (e.g. when shifting) see the reloaded data.

    Behaves similarly to :meth:`zoneinfo.ZoneInfo.clear_cache`.
    """
    if only_keys is None:
        _clear_tz_cache()
    else:
        _clear_tz_cache_by_keys(tuple(only_keys))


def available_timezones() -> set[str]:
    """Gather the set of all available timezones.

    Each call recalculates the names from the currently configured
    ``TZPATH`` and the ``tzdata`` package.

    Warning
    -------
    This function may open a large number of files, since the first few bytes
    of timezone files must be read to determine if they are valid.

    Note
    ----
    Like :func:`zoneinfo.available_timezones`, this ignores the "special"
    zones (e.g. posixrules, right/posix, etc.)
    """
    zones = set()
    try:
        with _resource_files("tzdata").joinpath("zones").open() as f:
            zones.update(filter(None, map(str.strip, f)))
    except (ImportError, FileNotFoundError):  # pragma: no cover
        pass

    for base in TZPATH:
        zones.update(_find_all_tznames(_Path(base)))

    zones.discard("posixrules")  # a special file that shouldn't be included
    return zones


# Recursion is safe here since the file tree is trusted, and nesting doesn't
# even approach the recursion limit.
def _find_all_tznames(base: _Path) -> _Iterator[str]:
    if not base.is_dir():
        return
    for entry in base.iterdir():
        if entry.is_dir():
            if entry.name in ("right", "posix"):
                continue
            for p in _find_nested_tzfiles(entry):
                yield p.relative_to(base).as_posix()
        elif _is_tzifile(entry):
            yield entry.name


def _find_nested_tzfiles(path: _Path) -> _Iterator[_Path]:
    for entry in path.iterdir():
        if entry.is_dir():
            yield from _find_nested_tzfiles(entry)
        elif _is_tzifile(entry):
            yield entry


def _is_tzifile(p: _Path) -> bool:
    try:
        with p.open("rb") as f:
            return f.read(4) == b"TZif"
    except OSError:
        return False


reset_tzpath()  # populate the tzpath once at startup
