"""Step-by-step navigation through a change result."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from values import MissingArgumentError, ValueCheckError

if TYPE_CHECKING:
    from changes.main import Changes
    from changes.types import Change, ChangeType

logger = getLogger(__name__)

type Filter = tuple[ChangeType | None, str | None]


class ChangeNotFoundError(LookupError):
    """No change exists at the requested position or primary key."""


class ChangeNavigator:
    """Walks through changes, remembering the next index of every filter.

    A filter is a change type and a label, either of which may be absent.
    Each filter has its own counter: reaching a change through ``at`` or
    ``next`` moves the counter of that filter just past it.
    """

    def __init__(self, changes: Changes) -> None:
        """Initialize the navigator on a change result."""
        self._changes = changes
        self._next_index: dict[Filter, int] = {}

    @staticmethod
    def _filter(change_type: ChangeType | None, label: str | None) -> Filter:
        return (change_type, label.casefold() if label is not None else None)

    def next_index(
        self,
        change_type: ChangeType | None = None,
        label: str | None = None,
    ) -> int:
        """Index the next call to ``next`` returns for this filter."""
        return self._next_index.get(self._filter(change_type, label), 0)

    def changes(
        self,
        change_type: ChangeType | None = None,
        label: str | None = None,
    ) -> Changes:
        """Changes matching a filter."""
        changes = self._changes
        if label is not None:
            changes = changes.of_table(label)
        if change_type is not None:
            changes = changes.of_type(change_type)
        return changes

    def at(
        self,
        index: int,
        change_type: ChangeType | None = None,
        label: str | None = None,
    ) -> Change:
        """Return the change at an index among those matching a filter.

        Raises:
            ChangeNotFoundError: If the index is out of the filtered changes

        """
        if index is None:
            raise MissingArgumentError("index")
        changes = self.changes(change_type, label)
        if not 0 <= index < len(changes):
            msg = f"Index {index} out of the limits [0, {len(changes)}["
            raise ChangeNotFoundError(msg)

        self._next_index[self._filter(change_type, label)] = index + 1
        return changes[index]

    def next(
        self,
        change_type: ChangeType | None = None,
        label: str | None = None,
    ) -> Change:
        """Return the change following the last one reached with this filter."""
        return self.at(self.next_index(change_type, label), change_type, label)

    def with_primary_keys(self, label: str, *values: object) -> Change:
        """Return the change of a table whose primary key equals the values.

        Values are compared like ``Value.is_equal_to`` does, so ``"2"`` finds
        the key ``2`` and ``"2024-01-31"`` finds a date key.

        Raises:
            ChangeNotFoundError: If no change of the table has this key

        """
        if label is None:
            raise MissingArgumentError("label")

        for index, change in enumerate(self.changes(label=label)):
            key = change.primary_key_values
            if len(key) != len(values):
                continue
            try:
                for value, expected in zip(key, values, strict=True):
                    value.is_equal_to(expected)
            except ValueCheckError:
                continue
            return self.at(index, label=label)

        msg = f"No change found for table {label} and primary keys {list(values)}"
        raise ChangeNotFoundError(msg)
