"""Immutable date, time and date/time literals with strict parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from functools import lru_cache
from typing import Self

from values.errors import InvalidLiteralError, MissingArgumentError

DATE_GRAMMAR = "yyyy-mm-dd format"
TIME_GRAMMAR = "hh:mm, hh:mm:ss or hh:mm:ss.fffffffff format"
DATE_TIME_GRAMMAR = (
    "yyyy-mm-dd, yyyy-mm-ddThh:mm, yyyy-mm-ddThh:mm:ss "
    "or yyyy-mm-ddThh:mm:ss.fffffffff format"
)

DATE_PATTERN = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
TIME_PATTERN = re.compile(r"(\d{2}):(\d{2})(?::(\d{2})(?:\.(\d{1,9}))?)?")

NANOS_PER_MICRO = 1_000
FRACTION_DIGITS = 9

type TemporalValue = DateValue | TimeValue | DateTimeValue


@lru_cache(maxsize=1024)
def _parse_date(text: str) -> tuple[int, int, int]:
    if not (match := DATE_PATTERN.fullmatch(text)):
        raise InvalidLiteralError(text, DATE_GRAMMAR)
    year, month, day = (int(group) for group in match.groups())
    try:
        date(year, month, day)
    except ValueError as err:
        raise InvalidLiteralError(text, DATE_GRAMMAR) from err
    return year, month, day


@lru_cache(maxsize=1024)
def _parse_time(text: str) -> tuple[int, int, int, int]:
    if not (match := TIME_PATTERN.fullmatch(text)):
        raise InvalidLiteralError(text, TIME_GRAMMAR)
    hour, minute, second, fraction = match.groups()
    parsed = (
        int(hour),
        int(minute),
        int(second or 0),
        int((fraction or "").ljust(FRACTION_DIGITS, "0")),
    )
    try:
        time(*parsed[:3])
    except ValueError as err:
        raise InvalidLiteralError(text, TIME_GRAMMAR) from err
    return parsed


def _require(text: str | None, name: str) -> str:
    if text is None:
        raise MissingArgumentError(name)
    return text


@dataclass(frozen=True, order=True, slots=True)
class DateValue:
    """A calendar date without time of day."""

    year: int
    month: int
    day: int

    @classmethod
    def of(cls, year: int, month: int, day: int) -> Self:
        """Build a date from its components."""
        return cls(year, month, day)

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse a ``yyyy-mm-dd`` literal."""
        return cls(*_parse_date(_require(text, "date")))

    @classmethod
    def from_date(cls, value: date) -> Self:
        """Build from a ``date`` (the time of a ``datetime`` is dropped)."""
        return cls(value.year, value.month, value.day)

    @classmethod
    def now(cls) -> Self:
        """Return the current local date."""
        return cls.from_date(date.today())  # noqa: DTZ011

    def to_date(self) -> date:
        """Convert to a ``date``."""
        return date(self.year, self.month, self.day)

    def __str__(self) -> str:
        """Render in canonical ``yyyy-mm-dd`` form."""
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True, order=True, slots=True)
class TimeValue:
    """A time of day with nanosecond precision."""

    hour: int
    minute: int
    second: int = 0
    nanosecond: int = 0

    @classmethod
    def of(cls, hour: int, minute: int, second: int = 0, nanosecond: int = 0) -> Self:
        """Build a time from its components."""
        return cls(hour, minute, second, nanosecond)

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse a ``hh:mm``, ``hh:mm:ss`` or ``hh:mm:ss.f`` literal.

        The fractional part takes one to nine digits and is read as a decimal
        fraction of a second, so ``.5`` is 500000000 nanoseconds.
        """
        return cls(*_parse_time(_require(text, "time")))

    @classmethod
    def from_time(cls, value: time) -> Self:
        """Build from a ``time``."""
        return cls(
            value.hour,
            value.minute,
            value.second,
            value.microsecond * NANOS_PER_MICRO,
        )

    @classmethod
    def now(cls) -> Self:
        """Return the current local time."""
        return cls.from_time(datetime.now().time())  # noqa: DTZ005

    def to_time(self) -> time:
        """Convert to a ``time``, truncating to microseconds."""
        return time(
            self.hour,
            self.minute,
            self.second,
            self.nanosecond // NANOS_PER_MICRO,
        )

    @property
    def is_midnight(self) -> bool:
        """Whether every component is zero."""
        return not (self.hour or self.minute or self.second or self.nanosecond)

    def __str__(self) -> str:
        """Render in canonical ``hh:mm:ss.fffffffff`` form."""
        return (
            f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
            f".{self.nanosecond:09d}"
        )


MIDNIGHT = TimeValue(0, 0)


@dataclass(frozen=True, order=True, slots=True)
class DateTimeValue:
    """A calendar date combined with a time of day."""

    date: DateValue
    time: TimeValue = MIDNIGHT

    @classmethod
    def of(cls, date_value: DateValue, time_value: TimeValue | None = None) -> Self:
        """Combine a date and a time; a missing time means midnight."""
        return cls(date_value, time_value or MIDNIGHT)

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse a ``yyyy-mm-dd`` or ``yyyy-mm-ddThh:mm[:ss[.f]]`` literal."""
        text = _require(text, "date/time")
        date_part, separator, time_part = text.partition("T")
        try:
            date_value = DateValue.parse(date_part)
            if not separator:
                return cls(date_value)
            return cls(date_value, TimeValue.parse(time_part))
        except InvalidLiteralError as err:
            raise InvalidLiteralError(text, DATE_TIME_GRAMMAR) from err

    @classmethod
    def from_datetime(cls, value: datetime) -> Self:
        """Build from a ``datetime``; the timezone, if any, is ignored."""
        return cls(DateValue.from_date(value), TimeValue.from_time(value.time()))

    @classmethod
    def now(cls) -> Self:
        """Return the current local date and time."""
        return cls.from_datetime(datetime.now())  # noqa: DTZ005

    def to_datetime(self) -> datetime:
        """Convert to a naive ``datetime``, truncating to microseconds."""
        return datetime.combine(self.date.to_date(), self.time.to_time())

    @property
    def is_midnight(self) -> bool:
        """Whether the time part is midnight."""
        return self.time.is_midnight

    def __str__(self) -> str:
        """Render in canonical ``yyyy-mm-ddThh:mm:ss.fffffffff`` form."""
        return f"{self.date}T{self.time}"


def to_temporal(obj: object) -> TemporalValue | None:
    """Convert Python date/time objects to literals; other objects give None."""
    match obj:
        case DateValue() | TimeValue() | DateTimeValue():
            return obj
        # datetime is a subclass of date and must be matched first
        case datetime():
            return DateTimeValue.from_datetime(obj)
        case date():
            return DateValue.from_date(obj)
        case time():
            return TimeValue.from_time(obj)
        case _:
            return None


def as_date_time(value: DateValue | DateTimeValue) -> DateTimeValue:
    """Widen a date to its midnight date/time."""
    if isinstance(value, DateValue):
        return DateTimeValue(value)
    return value


def parse_temporal(text: str) -> DateTimeValue | TimeValue:
    """Parse a time of day literal, or else a date/time literal."""
    if TIME_PATTERN.fullmatch(_require(text, "date/time")):
        return TimeValue.parse(text)
    return DateTimeValue.parse(text)
