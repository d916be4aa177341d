"""Column value with type-checked comparison predicates."""

from __future__ import annotations

import operator
from datetime import timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Self

from values.classifier import classify, normalize, to_number
from values.errors import (
    InvalidLiteralError,
    MissingArgumentError,
    UnsupportedLiteralError,
    ValueAssertionError,
    ValueTypeMismatchError,
)
from values.temporal import (
    DateTimeValue,
    TimeValue,
    as_date_time,
    parse_temporal,
    to_temporal,
)
from values.types import (
    CALENDAR_TYPES,
    TEMPORAL_TYPES,
    TEXTUAL_TYPES,
    ValueType,
    ValueTypes,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.types import TypeEngine

NANOS_PER_SECOND = 1_000_000_000
SECONDS_PER_DAY = 86_400


def equality_types(expected: object) -> ValueTypes:
    """Value types that can be compared for equality with a literal."""
    literal_type = classify(expected)
    if literal_type is ValueType.TEXT:
        return TEXTUAL_TYPES
    if literal_type in CALENDAR_TYPES:
        return CALENDAR_TYPES
    return frozenset({literal_type})


def ordering_types(operation: str, expected: object) -> ValueTypes:
    """Value types that can be ordered against a numeric literal."""
    if classify(expected) in {ValueType.NUMBER, ValueType.TEXT}:
        return frozenset({ValueType.NUMBER})
    raise UnsupportedLiteralError(operation, expected)


def chronology_types(operation: str, expected: object) -> ValueTypes:
    """Value types that can be placed in time against a literal."""
    literal_type = classify(expected)
    if literal_type is ValueType.TEXT:
        return TEXTUAL_TYPES
    if literal_type in CALENDAR_TYPES:
        return CALENDAR_TYPES
    if literal_type is ValueType.TIME:
        return frozenset({ValueType.TIME})
    raise UnsupportedLiteralError(operation, expected)


def _is_nan(native: object) -> bool:
    return isinstance(native, Decimal) and native.is_nan()


def _nanoseconds(value: TimeValue | DateTimeValue) -> int:
    if isinstance(value, DateTimeValue):
        days = value.date.to_date().toordinal()
        return days * SECONDS_PER_DAY * NANOS_PER_SECOND + _nanoseconds(value.time)
    seconds = value.hour * 3600 + value.minute * 60 + value.second
    return seconds * NANOS_PER_SECOND + value.nanosecond


class Value:
    """A raw column value and its type, classified once at construction.

    Every predicate returns the value itself when the check holds, so checks
    can be chained, and raises otherwise:

    * ``ValueTypeMismatchError`` when the value type is not acceptable,
    * ``ValueAssertionError`` when the type is fine but the check fails,
    * a ``UsageError`` when a literal cannot be used at all.
    """

    __slots__ = ("_column_name", "_native", "_raw", "_type")

    def __init__(
        self,
        raw: object,
        column_name: str | None = None,
        sql_type: TypeEngine[Any] | None = None,
    ) -> None:
        """Initialize from a raw driver value and, optionally, its column."""
        self._raw = raw
        self._column_name = column_name
        self._type = classify(raw, sql_type)
        self._native = normalize(raw, self._type)

    @property
    def raw(self) -> object:
        """Value as handed over by the driver."""
        return self._raw

    @property
    def type(self) -> ValueType:
        """Classified type of the value."""
        return self._type

    @property
    def native(self) -> Any:  # noqa: ANN401
        """Canonical comparison form of the value."""
        return self._native

    @property
    def column_name(self) -> str | None:
        """Name of the column the value was read from."""
        return self._column_name

    @property
    def is_null_value(self) -> bool:
        """Whether the value is SQL NULL."""
        return self._raw is None

    @property
    def type_representation(self) -> str:
        """Type name, with the Python class for values that were not identified."""
        if self._raw is None or self._type is not ValueType.NOT_IDENTIFIED:
            return str(self._type)
        return f"{self._type} : {type(self._raw).__name__}"

    def __eq__(self, other: object) -> bool:
        """Compare type and canonical form; NaN equals NaN."""
        if not isinstance(other, Value):
            return NotImplemented
        if self._type is not other._type:
            return False
        if _is_nan(self._native) or _is_nan(other._native):
            return _is_nan(self._native) and _is_nan(other._native)
        return self._native == other._native

    def __hash__(self) -> int:
        """Hash type and canonical form, so values can form lookup keys."""
        if _is_nan(self._native):
            return hash((self._type, "NaN"))
        try:
            return hash((self._type, self._native))
        except TypeError:
            return hash(self._type)

    def __str__(self) -> str:
        """Render the natural string form of the value."""
        if self._raw is None:
            return "null"
        if self._type in {ValueType.DATE, ValueType.TIME, ValueType.DATE_TIME}:
            return str(self._native)
        return str(self._raw)

    def __repr__(self) -> str:
        """Render the raw value and its type."""
        return f"Value({self._raw!r}, type={self._type})"

    def _require_type(self, accepted: ValueTypes) -> None:
        if self._type not in accepted:
            raise ValueTypeMismatchError(self, accepted)

    def _operands(self, expected: object) -> tuple[Any, Any]:  # noqa: PLR0911
        """Bring the value and a literal to the same canonical domain."""
        match self._type:
            case ValueType.NUMBER:
                return self._native, to_number(expected)
            case ValueType.DATE | ValueType.DATE_TIME:
                if isinstance(expected, str):
                    literal = DateTimeValue.parse(expected)
                else:
                    literal = as_date_time(to_temporal(expected))  # type: ignore[arg-type]
                return as_date_time(self._native), literal
            case ValueType.TIME:
                if isinstance(expected, str):
                    return self._native, TimeValue.parse(expected)
                return self._native, to_temporal(expected)
            case ValueType.BYTES:
                return self._native, bytes(expected)  # type: ignore[call-overload]
            case ValueType.NOT_IDENTIFIED:
                return self._raw, expected
            case _:
                return self._native, expected

    def _check(
        self,
        relation: str,
        expected: object,
        accepted: ValueTypes,
        holds: Callable[[Any, Any], bool],
    ) -> Self:
        self._require_type(accepted)
        actual, literal = self._operands(expected)
        if not holds(actual, literal):
            raise ValueAssertionError(self, relation, actual, literal)
        return self

    def _temporal_operands(self, expected: object) -> tuple[Any, Any]:
        """Bring the value and a literal to one time line.

        A string literal is parsed before anything is ordered. Text takes part
        only when it holds a literal of the same kind, numbers never do.
        """
        if not isinstance(expected, str):
            return self._operands(expected)

        literal = parse_temporal(expected)
        if self._type in TEMPORAL_TYPES:
            return self._operands(expected)
        if self._type is ValueType.TEXT:
            try:
                actual = type(literal).parse(self._native)
            except InvalidLiteralError:
                raise ValueTypeMismatchError(self, TEMPORAL_TYPES) from None
            return actual, literal
        raise ValueTypeMismatchError(self, TEMPORAL_TYPES)

    # Type

    def is_of_type(self, expected: ValueType) -> Self:
        """Check the value has the given type."""
        if expected is None:
            raise MissingArgumentError("expected")
        self._require_type(frozenset({expected}))
        return self

    def is_of_any_type_in(self, *expected: ValueType) -> Self:
        """Check the value has one of the given types."""
        if not expected or None in expected:
            raise MissingArgumentError("expected")
        self._require_type(frozenset(expected))
        return self

    def is_number(self) -> Self:
        """Check the value is a number."""
        return self.is_of_type(ValueType.NUMBER)

    def is_boolean(self) -> Self:
        """Check the value is a boolean."""
        return self.is_of_type(ValueType.BOOLEAN)

    def is_date(self) -> Self:
        """Check the value is a date."""
        return self.is_of_type(ValueType.DATE)

    def is_time(self) -> Self:
        """Check the value is a time."""
        return self.is_of_type(ValueType.TIME)

    def is_date_time(self) -> Self:
        """Check the value is a date/time."""
        return self.is_of_type(ValueType.DATE_TIME)

    def is_bytes(self) -> Self:
        """Check the value is an array of bytes."""
        return self.is_of_type(ValueType.BYTES)

    def is_text(self) -> Self:
        """Check the value is a text."""
        return self.is_of_type(ValueType.TEXT)

    # Nullity

    def is_null(self) -> Self:
        """Check the value is SQL NULL."""
        if self._raw is not None:
            raise ValueAssertionError(self, "to be", self, "null")
        return self

    def is_not_null(self) -> Self:
        """Check the value is not SQL NULL."""
        if self._raw is None:
            raise ValueAssertionError(self, "not to be", self, "null")
        return self

    # Equality

    def is_equal_to(self, expected: object) -> Self:
        """Check the value equals a literal; None expects SQL NULL.

        String literals are parsed into the value's own type: numbers for
        NUMBER, ``yyyy-mm-dd[Thh:mm[:ss[.f]]]`` for DATE and DATE_TIME,
        ``hh:mm[:ss[.f]]`` for TIME. A DATE compares as its midnight.
        """
        if expected is None:
            return self.is_null()
        return self._check(
            "to be equal to",
            expected,
            equality_types(expected),
            operator.eq,
        )

    def is_not_equal_to(self, expected: object) -> Self:
        """Check the value differs from a literal; None expects a non-NULL value."""
        if expected is None:
            return self.is_not_null()
        return self._check(
            "not to be equal to",
            expected,
            equality_types(expected),
            operator.ne,
        )

    def is_true(self) -> Self:
        """Check the value is the boolean true."""
        return self._check(
            "to be",
            True,  # noqa: FBT003
            frozenset({ValueType.BOOLEAN}),
            operator.is_,
        )

    def is_false(self) -> Self:
        """Check the value is the boolean false."""
        return self._check(
            "to be",
            False,  # noqa: FBT003
            frozenset({ValueType.BOOLEAN}),
            operator.is_,
        )

    # Comparison

    def _compare(
        self,
        operation: str,
        relation: str,
        expected: object,
        holds: Callable[[Any, Any], bool],
    ) -> Self:
        if expected is None:
            raise MissingArgumentError("expected")
        return self._check(
            relation,
            expected,
            ordering_types(operation, expected),
            holds,
        )

    def is_less_than(self, expected: object) -> Self:
        """Check the number is strictly less than a numeric literal."""
        return self._compare("is_less_than", "to be less than", expected, operator.lt)

    def is_less_than_or_equal_to(self, expected: object) -> Self:
        """Check the number is less than or equal to a numeric literal."""
        return self._compare(
            "is_less_than_or_equal_to",
            "to be less than or equal to",
            expected,
            operator.le,
        )

    def is_greater_than(self, expected: object) -> Self:
        """Check the number is strictly greater than a numeric literal."""
        return self._compare(
            "is_greater_than",
            "to be greater than",
            expected,
            operator.gt,
        )

    def is_greater_than_or_equal_to(self, expected: object) -> Self:
        """Check the number is greater than or equal to a numeric literal."""
        return self._compare(
            "is_greater_than_or_equal_to",
            "to be greater than or equal to",
            expected,
            operator.ge,
        )

    # Chronology

    def _place(
        self,
        operation: str,
        relation: str,
        expected: object,
        holds: Callable[[Any, Any], bool],
    ) -> Self:
        if expected is None:
            raise MissingArgumentError("expected")
        self._require_type(chronology_types(operation, expected))
        actual, literal = self._temporal_operands(expected)
        if not holds(actual, literal):
            raise ValueAssertionError(self, relation, actual, literal)
        return self

    def is_before(self, expected: object) -> Self:
        """Check the value comes strictly before a literal."""
        return self._place("is_before", "to be before", expected, operator.lt)

    def is_before_or_equal_to(self, expected: object) -> Self:
        """Check the value comes before or at a literal."""
        return self._place(
            "is_before_or_equal_to",
            "to be before or equal to",
            expected,
            operator.le,
        )

    def is_after(self, expected: object) -> Self:
        """Check the value comes strictly after a literal."""
        return self._place("is_after", "to be after", expected, operator.gt)

    def is_after_or_equal_to(self, expected: object) -> Self:
        """Check the value comes after or at a literal."""
        return self._place(
            "is_after_or_equal_to",
            "to be after or equal to",
            expected,
            operator.ge,
        )

    # Closeness

    def is_close_to(self, expected: object, tolerance: object) -> Self:
        """Check the value is within a tolerance of a literal.

        Numbers take a numeric tolerance, dates, times and date/times take a
        ``timedelta``.
        """
        if expected is None:
            raise MissingArgumentError("expected")
        if tolerance is None:
            raise MissingArgumentError("tolerance")

        if isinstance(tolerance, timedelta):
            accepted = chronology_types("is_close_to", expected) & TEMPORAL_TYPES
            self._require_type(accepted)
            actual, literal = self._operands(expected)
            delta = abs(_nanoseconds(actual) - _nanoseconds(literal))
            allowed = tolerance // timedelta(microseconds=1) * 1_000
            close = delta <= allowed
        else:
            self._require_type(ordering_types("is_close_to", expected))
            actual, literal = self._operands(expected)
            close = abs(actual - literal) <= to_number(tolerance)

        if not close:
            relation = f"to be close to (tolerance {tolerance})"
            raise ValueAssertionError(self, relation, actual, literal)
        return self
