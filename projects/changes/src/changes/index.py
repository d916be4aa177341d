"""Multiset index for matching rows that have no primary key."""

from collections import deque
from collections.abc import Callable, Hashable, Iterable, Iterator

from snapshot import Row

type Indexer = Callable[[Row], Hashable]


def content_indexer(row: Row) -> tuple[object, ...]:
    """Index a row by its full content."""
    return row.values


class RowIndex:
    """Index of rows where identical keys are matched first in, first out."""

    def __init__(self, indexer: Indexer = content_indexer) -> None:
        """Initialize the index with an indexer function."""
        self._indexer = indexer
        self._rows: dict[int, Row] = {}
        self._key_to_ids: dict[Hashable, deque[int]] = {}
        self._next_id = 0

    def add(self, row: Row) -> None:
        """Add a row under its key."""
        row_id = self._next_id
        self._next_id += 1

        self._rows[row_id] = row
        self._key_to_ids.setdefault(self._indexer(row), deque()).append(row_id)

    def extend(self, rows: Iterable[Row]) -> None:
        """Add several rows, in order."""
        for row in rows:
            self.add(row)

    def pop(self, row: Row) -> Row | None:
        """Pop the earliest unmatched row sharing the key of the given row."""
        ids = self._key_to_ids.get(self._indexer(row))
        if not ids:
            return None
        return self._rows.pop(ids.popleft())

    def __len__(self) -> int:
        """Number of unmatched rows."""
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        """Iterate over all remaining unmatched rows, in insertion order."""
        return iter(self._rows.values())
