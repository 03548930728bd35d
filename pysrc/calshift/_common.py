from typing import TYPE_CHECKING, no_type_check

SECS_PER_DAY = 86_400
MICROS_PER_SECOND = 1_000_000
MICROS_PER_DAY = SECS_PER_DAY * MICROS_PER_SECOND
# The ISO day number of 1970-01-01, counting 0000-01-01 as day zero
UNIX_EPOCH_ISO_DAYS = 719_528
MAX_PRECISION = 6


class _ImmutableBase:
    __slots__ = ()

    # Immutable classes don't need to be copied
    @no_type_check
    def __copy__(self):
        return self

    @no_type_check
    def __deepcopy__(self, _):
        return self


if TYPE_CHECKING:
    from typing import final
else:

    def final(cls):

        def init_subclass_not_allowed(cls, **kwargs):  # pragma: no cover
            raise TypeError("Subclassing not allowed")

        cls.__init_subclass__ = init_subclass_not_allowed
        return cls


class InvalidDate(ValueError):
    """A date is not valid in its calendar"""


class InvalidTime(ValueError):
    """A time of day is not valid in its calendar"""


class ZoneResolutionError(ValueError):
    """A local or UTC datetime cannot be resolved in a timezone"""
