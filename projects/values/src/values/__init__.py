"""Typed column values, temporal literals and type-checked comparisons."""

from values.classifier import classify, normalize, to_number
from values.errors import (
    InvalidLiteralError,
    Location,
    MissingArgumentError,
    UnsupportedLiteralError,
    UsageError,
    ValueAssertionError,
    ValueCheckError,
    ValueTypeMismatchError,
)
from values.temporal import DateTimeValue, DateValue, TimeValue
from values.types import ValueType
from values.value import Value

__all__ = [
    "DateTimeValue",
    "DateValue",
    "InvalidLiteralError",
    "Location",
    "MissingArgumentError",
    "TimeValue",
    "UnsupportedLiteralError",
    "UsageError",
    "Value",
    "ValueAssertionError",
    "ValueCheckError",
    "ValueType",
    "ValueTypeMismatchError",
    "classify",
    "normalize",
    "to_number",
]
