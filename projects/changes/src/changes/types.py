"""Type definitions for row changes."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Self

from snapshot import DataType, Row
from values import Location, Value, ValueCheckError


class ChangeType(StrEnum):
    """Kind of difference of a row between the start and end points."""

    CREATION = auto()
    MODIFICATION = auto()
    DELETION = auto()


@dataclass(frozen=True, slots=True)
class Change:
    """One row of a table or request that differs between two snapshots."""

    change_type: ChangeType
    label: str
    row_at_start_point: Row | None = None
    row_at_end_point: Row | None = None
    data_type: DataType = DataType.TABLE

    def __post_init__(self) -> None:
        """Check the rows present match the change type."""
        start, end = self.row_at_start_point, self.row_at_end_point
        match self.change_type:
            case ChangeType.CREATION if start is None and end is not None:
                return
            case ChangeType.DELETION if start is not None and end is None:
                return
            case ChangeType.MODIFICATION if start is not None and end is not None:
                if not start.modified_columns(end):
                    msg = f"Modification on {self.label} without any modified column"
                    raise ValueError(msg)
                return
            case _:
                msg = (
                    f"A {self.change_type} on {self.label} cannot have "
                    f"{'a' if start is not None else 'no'} row at start point and "
                    f"{'a' if end is not None else 'no'} row at end point"
                )
                raise ValueError(msg)

    @classmethod
    def creation(cls, label: str, row: Row, data_type: DataType = DataType.TABLE) -> Self:
        """Build the change of a row present only at the end point."""
        return cls(ChangeType.CREATION, label, None, row, data_type)

    @classmethod
    def deletion(cls, label: str, row: Row, data_type: DataType = DataType.TABLE) -> Self:
        """Build the change of a row present only at the start point."""
        return cls(ChangeType.DELETION, label, row, None, data_type)

    @classmethod
    def modification(
        cls,
        label: str,
        start: Row,
        end: Row,
        data_type: DataType = DataType.TABLE,
    ) -> Self:
        """Build the change of a row whose values differ between both points."""
        return cls(ChangeType.MODIFICATION, label, start, end, data_type)

    @property
    def row(self) -> Row:
        """Row at the start point when present, else row at the end point."""
        if self.row_at_start_point is not None:
            return self.row_at_start_point
        return self.row_at_end_point  # type: ignore[return-value]

    @property
    def columns(self) -> tuple[str, ...]:
        """Column names of the changed row."""
        return self.row.columns

    @property
    def primary_keys(self) -> tuple[str, ...]:
        """Names of the primary-key columns."""
        return self.row.primary_keys

    @property
    def primary_key_values(self) -> tuple[Value, ...]:
        """Values of the primary-key columns."""
        return self.row.key

    @property
    def modified_columns(self) -> tuple[int, ...]:
        """Positions of the columns whose values differ between both points.

        Every column counts as modified for creations and deletions.
        """
        if self.row_at_start_point is None or self.row_at_end_point is None:
            return tuple(range(len(self.columns)))
        return self.row_at_start_point.modified_columns(self.row_at_end_point)

    @property
    def modified_column_names(self) -> tuple[str, ...]:
        """Names of the columns whose values differ between both points."""
        return tuple(self.columns[index] for index in self.modified_columns)

    def value_at_start_point(self, column: str | int) -> Value:
        """Value of a column at the start point; NULL for a creation."""
        return self._value(self.row_at_start_point, column)

    def value_at_end_point(self, column: str | int) -> Value:
        """Value of a column at the end point; NULL for a deletion."""
        return self._value(self.row_at_end_point, column)

    def _value(self, row: Row | None, column: str | int) -> Value:
        if row is not None:
            return row.value(column)
        # Resolve the name so unknown columns fail the same way
        return Value(None, self.row.value(column).column_name)

    @contextmanager
    def located(self, column: str | int) -> Iterator[Self]:
        """Attach the position of a column to failures raised while checking it."""
        try:
            yield self
        except ValueCheckError as err:
            key = tuple(value.raw for value in self.primary_key_values)
            err.locate(Location(self.label, key, column))
            raise
