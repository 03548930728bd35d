from .common import Ambiguous, Disambiguate, Gap, Unambiguous, ZonePeriod
from .tzif import TimeZone

__all__ = [
    "TimeZone",
    "Disambiguate",
    "Unambiguous",
    "Gap",
    "Ambiguous",
    "ZonePeriod",
]
