"""Parsing and formatting of period text, e.g. ``P1Y2M3W4DT5H6M7.8S``"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Mapping, NoReturn, Union

PeriodValue = Union[int, float]

# designator -> field name, in the only order allowed
_DATE_DESIGNATORS = {"Y": "years", "M": "months", "W": "weeks", "D": "days"}
_TIME_DESIGNATORS = {"H": "hours", "M": "minutes", "S": "seconds"}

_match_component = re.compile(r"([0-9]+)(?:\.([0-9]+))?([A-Z])").match


class InvalidFormat(ValueError):
    """Text doesn't match the period format"""


def _parse_err(s: str) -> NoReturn:
    raise InvalidFormat(f"Invalid period format: {s!r}") from None


def _parse_components(
    s: str, designators: Mapping[str, str], fullstr: str
) -> dict[str, PeriodValue]:
    order = list(designators)
    result: dict[str, PeriodValue] = {}
    prev = -1
    pos = 0
    while pos < len(s):
        if (match := _match_component(s, pos)) is None:
            _parse_err(fullstr)
        digits, decimals, designator = match.groups()
        try:
            idx = order.index(designator)
        except ValueError:
            _parse_err(fullstr)
        if idx <= prev:
            _parse_err(fullstr)  # duplicated or out of order

        if decimals is None:
            result[designators[designator]] = int(digits)
        elif designator == "S":
            result["seconds"] = float(f"{digits}.{decimals}")
        else:
            _parse_err(fullstr)
        prev = idx
        pos = match.end()
    return result


def period_fields_from_text(s: str) -> dict[str, PeriodValue]:
    """The non-empty fields in period text. The leading ``P`` is optional.
    Raises InvalidFormat."""
    if not isinstance(s, str):
        raise TypeError("Expected a string")
    if not s.isascii():
        _parse_err(s)

    date_part, _, time_part = (s[1:] if s[:1] == "P" else s).partition("T")
    if "T" in time_part:
        _parse_err(s)
    return {
        **_parse_components(date_part, _DATE_DESIGNATORS, s),
        **_parse_components(time_part, _TIME_DESIGNATORS, s),
    }


def _format_value(value: PeriodValue) -> str:
    if isinstance(value, float):
        # avoid the exponent notation of repr(), e.g. 1e-07
        return format(Decimal(repr(value)), "f")
    return str(value)


def period_text(fields: Mapping[str, PeriodValue]) -> str:
    """Canonical text for the given fields, omitting zeros"""
    date = "".join(
        f"{_format_value(v)}{d}"
        for d, name in _DATE_DESIGNATORS.items()
        if (v := fields.get(name, 0))
    )
    time = "".join(
        f"{_format_value(v)}{d}"
        for d, name in _TIME_DESIGNATORS.items()
        if (v := fields.get(name, 0))
    )
    return f"P{date}T{time}" if time else f"P{date}"
