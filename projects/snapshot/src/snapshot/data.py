"""Immutable snapshot of the rows of a table or request."""

from __future__ import annotations

from functools import cached_property
from logging import getLogger
from typing import TYPE_CHECKING, Any

from snapshot.row import Row, check_columns
from snapshot.types import DataType
from values import Value

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from sqlalchemy.types import TypeEngine

logger = getLogger(__name__)

type Key = tuple[Value, ...]


class Snapshot:
    """Rows of one table or request captured at one instant."""

    def __init__(  # noqa: PLR0913
        self,
        label: str,
        columns: Iterable[str],
        rows: Iterable[Row | Iterable[object]],
        primary_keys: Iterable[str] = (),
        data_type: DataType = DataType.TABLE,
        sql_types: Iterable[TypeEngine[Any] | None] | None = None,
    ) -> None:
        """Initialize the snapshot and check every row shares its columns."""
        self.label = label
        self.data_type = data_type
        self.columns = tuple(columns)
        self.primary_keys = tuple(primary_keys)
        check_columns(self.columns, self.primary_keys)

        types = tuple(sql_types) if sql_types is not None else None
        self.rows = tuple(
            row
            if isinstance(row, Row)
            else Row(self.columns, row, self.primary_keys, types)
            for row in rows
        )
        for row in self.rows:
            if row.columns != self.columns:
                msg = (
                    f"Row columns {list(row.columns)} differ from "
                    f"{label} columns {list(self.columns)}"
                )
                raise ValueError(msg)
            if row.primary_keys != self.primary_keys:
                msg = f"Row primary keys differ from {label} primary keys"
                raise ValueError(msg)

    @classmethod
    def from_mappings(
        cls,
        label: str,
        records: Iterable[Mapping[str, object]],
        primary_keys: Iterable[str] = (),
        data_type: DataType = DataType.TABLE,
    ) -> Snapshot:
        """Build a snapshot from dictionaries sharing the same keys."""
        records = tuple(records)
        columns = tuple(records[0]) if records else tuple(primary_keys)
        return cls(
            label,
            columns,
            (tuple(record[column] for column in columns) for record in records),
            primary_keys,
            data_type,
        )

    @property
    def has_primary_keys(self) -> bool:
        """Whether rows can be matched by primary key."""
        return bool(self.primary_keys)

    @cached_property
    def _rows_by_key(self) -> dict[Key, Row]:
        index: dict[Key, Row] = {}
        for row in self.rows:
            if index.setdefault(row.key, row) is not row:
                logger.warning(
                    "Duplicate primary key %s in %s, keeping the first row",
                    [str(value) for value in row.key],
                    self.label,
                )
        return index

    def keys(self) -> Iterator[Key]:
        """Iterate over the distinct primary-key tuples, in row order."""
        return iter(self._rows_by_key)

    def row_with_key(self, key: Iterable[object]) -> Row | None:
        """Return the first row with the given primary-key values."""
        if not self.primary_keys:
            return None
        values = tuple(
            value if isinstance(value, Value) else Value(value) for value in key
        )
        return self._rows_by_key.get(values)

    def __len__(self) -> int:
        """Number of rows."""
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        """Iterate over rows in capture order."""
        return iter(self.rows)

    def __getitem__(self, index: int) -> Row:
        """Return the row at a position."""
        return self.rows[index]

    def __repr__(self) -> str:
        """Render label, size and primary keys."""
        return (
            f"Snapshot({self.label!r}, rows={len(self.rows)}, "
            f"primary_keys={list(self.primary_keys)})"
        )
