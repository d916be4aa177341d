"""Classification of raw column values and their canonical comparison form.

Raw values come from database drivers in many representations. Each one is
mapped to a single ``ValueType`` and, for comparisons, to one canonical Python
object per type:

    BOOLEAN   -> bool
    NUMBER    -> Decimal
    TEXT      -> str
    DATE      -> DateValue
    TIME      -> TimeValue
    DATE_TIME -> DateTimeValue
    BYTES     -> bytes
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from numbers import Rational, Real
from typing import Any

from sqlalchemy.types import Boolean, Date, DateTime, Time, TypeEngine

from values.errors import InvalidLiteralError
from values.temporal import DateTimeValue, DateValue, TimeValue, to_temporal
from values.types import ValueType

NUMBER_GRAMMAR = "a decimal number format"

BOOLEAN_NUMBERS = frozenset({0, 1})


def _native_type(raw: object) -> ValueType:  # noqa: PLR0911
    """Classify a raw value from its Python type alone."""
    match raw:
        case None:
            return ValueType.NOT_IDENTIFIED
        # bool is a subclass of int and must be matched first
        case bool():
            return ValueType.BOOLEAN
        case int() | float() | Decimal() | Rational() | Real():
            return ValueType.NUMBER
        # datetime is a subclass of date and must be matched first
        case datetime() | DateTimeValue():
            return ValueType.DATE_TIME
        case date() | DateValue():
            return ValueType.DATE
        case time() | TimeValue():
            return ValueType.TIME
        case bytes() | bytearray() | memoryview():
            return ValueType.BYTES
        case str():
            return ValueType.TEXT
        case _:
            return ValueType.NOT_IDENTIFIED


def _hinted_type(raw: object, sql_type: TypeEngine[Any]) -> ValueType | None:
    """Refine a classification using the declared column type, if it helps."""
    match sql_type:
        case Boolean() if isinstance(raw, int) and raw in BOOLEAN_NUMBERS:
            return ValueType.BOOLEAN
        case DateTime() if isinstance(raw, str):
            return _parses_as(raw, DateTimeValue, ValueType.DATE_TIME)
        case Date() if isinstance(raw, str):
            return _parses_as(raw, DateValue, ValueType.DATE)
        case Time() if isinstance(raw, str):
            return _parses_as(raw, TimeValue, ValueType.TIME)
        case _:
            return None


def _parses_as(
    raw: str,
    literal: type[DateValue | TimeValue | DateTimeValue],
    value_type: ValueType,
) -> ValueType | None:
    # Drivers storing date/times as text commonly use a space separator
    try:
        literal.parse(raw.replace(" ", "T", 1))
    except InvalidLiteralError:
        return None
    return value_type


def classify(raw: object, sql_type: TypeEngine[Any] | None = None) -> ValueType:
    """Classify a raw column value.

    Args:
        raw: Value as returned by the driver; None stands for SQL NULL.
        sql_type: Declared column type, used only to refine values the driver
            hands over in a weaker representation (0/1 for booleans, text for
            dates and times).

    Returns:
        The value type. NULL is always NOT_IDENTIFIED, whatever the declared type.

    """
    if raw is None:
        return ValueType.NOT_IDENTIFIED
    if sql_type is not None and (hinted := _hinted_type(raw, sql_type)):
        return hinted
    return _native_type(raw)


def to_number(obj: object) -> Decimal:
    """Convert a number or a numeric literal to an exact Decimal."""
    match obj:
        case bool():
            msg = f"Cannot convert boolean {obj} to a number"
            raise TypeError(msg)
        case Decimal():
            return obj
        case int():
            return Decimal(obj)
        # The shortest repr of a float is the value its author wrote
        case float():
            return Decimal(repr(obj))
        case Rational():
            return Decimal(obj.numerator) / Decimal(obj.denominator)
        case str():
            try:
                return Decimal(obj.strip())
            except InvalidOperation as err:
                raise InvalidLiteralError(obj, NUMBER_GRAMMAR) from err
        case Real():
            return Decimal(repr(float(obj)))
        case _:
            msg = f"Cannot convert {type(obj).__name__} to a number: {obj}"
            raise TypeError(msg)


def normalize(raw: object, value_type: ValueType) -> Any:  # noqa: ANN401, PLR0911
    """Return the canonical comparison form of a classified raw value."""
    if raw is None:
        return None

    match value_type:
        case ValueType.BOOLEAN:
            return bool(raw)
        case ValueType.NUMBER:
            return to_number(raw)
        case ValueType.TEXT:
            return str(raw)
        case ValueType.BYTES:
            return bytes(raw)  # pyright: ignore[reportArgumentType]
        case ValueType.DATE:
            return to_temporal(raw) or DateValue.parse(str(raw))
        case ValueType.TIME:
            return to_temporal(raw) or TimeValue.parse(str(raw))
        case ValueType.DATE_TIME:
            return to_temporal(raw) or DateTimeValue.parse(
                str(raw).replace(" ", "T", 1),
            )
        case _:
            return raw
