"""Type definitions for column values."""

from enum import StrEnum, auto


class ValueType(StrEnum):
    """Runtime kind of a column value, fixed when the value is built."""

    BOOLEAN = auto()
    NUMBER = auto()
    TEXT = auto()
    DATE = auto()
    TIME = auto()
    DATE_TIME = auto()
    BYTES = auto()
    NOT_IDENTIFIED = auto()


type ValueTypes = frozenset[ValueType]

# Types a string literal can be parsed into
TEXTUAL_TYPES: ValueTypes = frozenset(
    {
        ValueType.TEXT,
        ValueType.NUMBER,
        ValueType.DATE,
        ValueType.TIME,
        ValueType.DATE_TIME,
    },
)

# Types holding a calendar date
CALENDAR_TYPES: ValueTypes = frozenset({ValueType.DATE, ValueType.DATE_TIME})

# Types that can be placed in time
TEMPORAL_TYPES: ValueTypes = frozenset(
    {ValueType.DATE, ValueType.TIME, ValueType.DATE_TIME},
)
