"""Immutable row of typed values."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from values import Value

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from sqlalchemy.types import TypeEngine


def column_index(columns: tuple[str, ...], name: str) -> int:
    """Return the position of a column, matching names case-insensitively."""
    folded = name.casefold()
    for index, column in enumerate(columns):
        if column.casefold() == folded:
            return index
    msg = f"Column <{name}> does not exist among {list(columns)}"
    raise KeyError(msg)


def check_columns(columns: tuple[str, ...], primary_keys: tuple[str, ...]) -> None:
    """Check column names are unique and primary keys are among them."""
    folded = [column.casefold() for column in columns]
    if len(set(folded)) != len(folded):
        msg = f"Column names must be unique: {list(columns)}"
        raise ValueError(msg)
    if unknown := {key for key in primary_keys if key.casefold() not in folded}:
        msg = f"Primary keys {sorted(unknown)} are not columns of {list(columns)}"
        raise ValueError(msg)


class Row:
    """Ordered values positionally aligned with their column names."""

    __slots__ = ("_columns", "_primary_keys", "_values")

    def __init__(
        self,
        columns: Iterable[str],
        values: Iterable[object],
        primary_keys: Iterable[str] = (),
        sql_types: Iterable[TypeEngine[Any] | None] | None = None,
    ) -> None:
        """Initialize from column names and raw values (or prebuilt Values)."""
        self._columns = tuple(columns)
        self._primary_keys = tuple(primary_keys)
        check_columns(self._columns, self._primary_keys)

        raw_values = tuple(values)
        if len(raw_values) != len(self._columns):
            msg = (
                f"Row has {len(raw_values)} values "
                f"for {len(self._columns)} columns {list(self._columns)}"
            )
            raise ValueError(msg)

        types = tuple(sql_types) if sql_types is not None else (None,) * len(raw_values)
        self._values = tuple(
            raw if isinstance(raw, Value) else Value(raw, column, sql_type)
            for column, raw, sql_type in zip(
                self._columns,
                raw_values,
                types,
                strict=True,
            )
        )

    @property
    def columns(self) -> tuple[str, ...]:
        """Column names, in order."""
        return self._columns

    @property
    def values(self) -> tuple[Value, ...]:
        """Values, in column order."""
        return self._values

    @property
    def primary_keys(self) -> tuple[str, ...]:
        """Names of the primary-key columns."""
        return self._primary_keys

    @property
    def key(self) -> tuple[Value, ...]:
        """Values of the primary-key columns; empty without primary keys."""
        return tuple(self.value(name) for name in self._primary_keys)

    def value(self, column: str | int) -> Value:
        """Return the value of a column given by name or position."""
        if isinstance(column, int):
            return self._values[column]
        return self._values[column_index(self._columns, column)]

    __getitem__ = value

    def has_values(self, other: Row) -> bool:
        """Whether both rows hold equal values position by position."""
        return self._values == other.values

    def modified_columns(self, other: Row) -> tuple[int, ...]:
        """Positions of the columns whose values differ in the other row."""
        if len(self._values) != len(other.values):
            msg = "Rows with different numbers of columns cannot be compared"
            raise ValueError(msg)
        return tuple(
            index
            for index, (mine, theirs) in enumerate(
                zip(self._values, other.values, strict=True),
            )
            if mine != theirs
        )

    def as_dict(self) -> dict[str, object]:
        """Map column names to raw values."""
        return {
            column: value.raw
            for column, value in zip(self._columns, self._values, strict=True)
        }

    def __len__(self) -> int:
        """Number of columns."""
        return len(self._values)

    def __iter__(self) -> Iterator[Value]:
        """Iterate over values in column order."""
        return iter(self._values)

    def __eq__(self, other: object) -> bool:
        """Rows are equal with the same columns and values."""
        if not isinstance(other, Row):
            return NotImplemented
        return self._columns == other.columns and self._values == other.values

    def __hash__(self) -> int:
        """Hash columns and values."""
        return hash((self._columns, self._values))

    def __repr__(self) -> str:
        """Render column/value pairs."""
        pairs = ", ".join(
            f"{column}={value}"
            for column, value in zip(self._columns, self._values, strict=True)
        )
        return f"Row({pairs})"
