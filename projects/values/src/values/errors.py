"""Failure kinds raised while checking column values.

Two families are kept apart:

* ``ValueCheckError`` subclasses are ordinary assertion outcomes. They derive
  from ``AssertionError`` so a test runner reports them as failures.
* ``UsageError`` subclasses signal misuse (an unparsable literal, a missing
  argument). They never derive from ``AssertionError`` and stop the test.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Iterable

    from values.types import ValueType
    from values.value import Value


class Location(NamedTuple):
    """Position of a checked value inside a table or request."""

    label: str
    key: tuple[Any, ...]
    column: str | int

    def __str__(self) -> str:
        """Render as ``label[key].column``."""
        key = ", ".join(str(value) for value in self.key)
        return f"{self.label}[{key}].{self.column}"


class ValueCheckError(AssertionError):
    """A check on a value did not hold."""

    def __init__(self, message: str, value: Value) -> None:
        """Initialize with the failure message and the checked value."""
        super().__init__(message)
        self.value = value
        self.location: Location | None = None

    def locate(self, location: Location) -> None:
        """Attach the position of the checked value."""
        self.location = location
        self.add_note(f"at {location}")


class ValueTypeMismatchError(ValueCheckError):
    """The value type is not one the check accepts."""

    def __init__(
        self,
        value: Value,
        expected_types: Iterable[ValueType],
    ) -> None:
        """Initialize from the checked value and the acceptable types."""
        self.actual_type = value.type
        self.expected_types = frozenset(expected_types)
        self.actual = value.raw
        expected = ", ".join(sorted(self.expected_types))
        msg = (
            f"Expecting value <{value}> to be of type in [{expected}] "
            f"but was of type <{value.type_representation}>"
        )
        super().__init__(msg, value)


class ValueAssertionError(ValueCheckError):
    """The value has an acceptable type but the comparison does not hold."""

    def __init__(
        self,
        value: Value,
        relation: str,
        actual: object,
        expected: object,
    ) -> None:
        """Initialize from both operands and the relation that failed."""
        self.relation = relation
        self.actual = str(actual)
        self.expected = str(expected)
        msg = f"Expecting <{self.actual}> {relation} <{self.expected}>"
        super().__init__(msg, value)


class UsageError(Exception):
    """Misuse of the value API; never an assertion outcome."""


class InvalidLiteralError(UsageError, ValueError):
    """A literal cannot be parsed by any accepted grammar."""

    def __init__(self, literal: str, grammar: str) -> None:
        """Initialize with the rejected literal and the grammar it should follow."""
        self.literal = literal
        self.grammar = grammar
        super().__init__(f"Expected <{literal}> to respect {grammar}")


class MissingArgumentError(UsageError, TypeError):
    """A required argument is None."""

    def __init__(self, name: str) -> None:
        """Initialize with the name of the missing argument."""
        self.name = name
        super().__init__(f"{name} must be not None")


class UnsupportedLiteralError(UsageError, TypeError):
    """A literal of this kind cannot be used with the operation."""

    def __init__(self, operation: str, literal: object) -> None:
        """Initialize with the operation name and the rejected literal."""
        self.operation = operation
        self.literal = literal
        msg = f"{operation} does not support literals of type {type(literal).__name__}"
        super().__init__(msg)
