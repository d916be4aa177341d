"""Row-level comparison of two snapshots of the same table or request."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from changes.index import RowIndex
from changes.types import Change, ChangeType
from values import ValueType
from values.temporal import as_date_time

if TYPE_CHECKING:
    from collections.abc import Iterable

    from snapshot import Snapshot
    from values import Value

# Dates and date/times share a rank so they order on one time line
TYPE_RANKS = {
    ValueType.BOOLEAN: 0,
    ValueType.NUMBER: 1,
    ValueType.TEXT: 2,
    ValueType.DATE: 3,
    ValueType.DATE_TIME: 3,
    ValueType.TIME: 4,
    ValueType.BYTES: 5,
    ValueType.NOT_IDENTIFIED: 6,
}

CHANGE_TYPE_ORDER = {
    ChangeType.CREATION: 0,
    ChangeType.MODIFICATION: 1,
    ChangeType.DELETION: 2,
}

type SortKey = tuple[int, int, Any]


def value_sort_key(value: Value) -> SortKey:
    """Order values naturally within a type; NULL last, bytes unordered."""
    if value.is_null_value:
        return (1, 0, 0)

    native: Any
    match value.type:
        # NaN orders after every number
        case ValueType.NUMBER:
            native = (1, 0) if value.native.is_nan() else (0, value.native)
        case ValueType.DATE | ValueType.DATE_TIME:
            native = as_date_time(value.native)
        case ValueType.BYTES:
            native = 0
        case ValueType.NOT_IDENTIFIED:
            native = repr(value.raw)
        case _:
            native = value.native
    return (0, TYPE_RANKS[value.type], native)


def change_sort_key(change: Change) -> tuple[Any, ...]:
    """Order changes by primary key, then row content, then change type."""
    return (
        tuple(value_sort_key(value) for value in change.primary_key_values),
        tuple(value_sort_key(value) for value in change.row),
        CHANGE_TYPE_ORDER[change.change_type],
    )


def check_comparable(start: Snapshot, end: Snapshot) -> None:
    """Check both snapshots share columns and primary keys."""
    if start.columns != end.columns:
        msg = (
            f"Columns of {start.label} changed between start point "
            f"{list(start.columns)} and end point {list(end.columns)}"
        )
        raise ValueError(msg)
    if start.primary_keys != end.primary_keys:
        msg = (
            f"Primary keys of {start.label} changed between start point "
            f"{list(start.primary_keys)} and end point {list(end.primary_keys)}"
        )
        raise ValueError(msg)


def compare_with_keys(label: str, start: Snapshot, end: Snapshot) -> Iterable[Change]:
    """Match rows by primary-key tuple."""
    data_type = start.data_type

    for key in end.keys():
        if start.row_with_key(key) is None:
            yield Change.creation(label, end.row_with_key(key), data_type)  # type: ignore[arg-type]

    for key in start.keys():
        start_row = start.row_with_key(key)
        end_row = end.row_with_key(key)
        if end_row is None:
            yield Change.deletion(label, start_row, data_type)  # type: ignore[arg-type]
        elif not start_row.has_values(end_row):  # type: ignore[union-attr]
            yield Change.modification(label, start_row, end_row, data_type)  # type: ignore[arg-type]


def compare_without_keys(
    label: str,
    start: Snapshot,
    end: Snapshot,
) -> Iterable[Change]:
    """Match rows by full content; each start row matches at most one end row.

    Without a primary key a modified row cannot be told apart from a deleted
    row and a created one, so no modification is ever reported.
    """
    data_type = start.data_type

    index = RowIndex()
    index.extend(start.rows)

    for row in end.rows:
        if index.pop(row) is None:
            yield Change.creation(label, row, data_type)

    for row in index:
        yield Change.deletion(label, row, data_type)


def compare_snapshots(
    start: Snapshot,
    end: Snapshot,
    label: str | None = None,
) -> list[Change]:
    """Compare two snapshots and return their changes in primary-key order."""
    check_comparable(start, end)
    label = label or start.label

    if start.has_primary_keys:
        changes = compare_with_keys(label, start, end)
    else:
        changes = compare_without_keys(label, start, end)

    return sorted(changes, key=change_sort_key)
