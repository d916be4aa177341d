"""Change computation across tables and requests, and its reports."""

from __future__ import annotations

import json
from collections.abc import Sequence
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Any, overload

from jinja2 import Environment, FileSystemLoader, select_autoescape

from changes.comparator import compare_snapshots
from changes.types import Change, ChangeType
from values import MissingArgumentError, ValueType

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from jinja2.environment import TemplateStream

    from snapshot import Row, Snapshot
    from values import Value

logger = getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


class Changes(Sequence[Change]):
    """Ordered, immutable result of a change computation.

    Indices are assigned once by the computation order and never move.
    Filtering returns a new result indexed from zero.
    """

    def __init__(self, changes: Iterable[Change] = (), labels: Iterable[str] = ()) -> None:
        """Initialize from changes in their final order."""
        self._changes = tuple(changes)
        self._labels = tuple(labels) or tuple(
            dict.fromkeys(change.label for change in self._changes),
        )

    @property
    def labels(self) -> tuple[str, ...]:
        """Labels of the compared tables and requests, in processing order."""
        return self._labels

    @overload
    def __getitem__(self, index: int) -> Change: ...

    @overload
    def __getitem__(self, index: slice) -> Changes: ...

    def __getitem__(self, index: int | slice) -> Change | Changes:
        """Return the change at a position, or a slice of the result."""
        if isinstance(index, slice):
            return Changes(self._changes[index], self._labels)
        return self._changes[index]

    def __len__(self) -> int:
        """Number of changes."""
        return len(self._changes)

    def __eq__(self, other: object) -> bool:
        """Results are equal with the same changes in the same order."""
        if not isinstance(other, Changes):
            return NotImplemented
        return self._changes == other._changes

    def __hash__(self) -> int:
        """Hash the ordered changes."""
        return hash(self._changes)

    def __repr__(self) -> str:
        """Render size and counts per change type."""
        counts = ", ".join(
            f"{change_type}={len(self.of_type(change_type))}" for change_type in ChangeType
        )
        return f"Changes({len(self)}: {counts})"

    def of_table(self, label: str) -> Changes:
        """Changes of one table or request, matching the label case-insensitively."""
        if label is None:
            raise MissingArgumentError("label")
        folded = label.casefold()
        return Changes(
            (change for change in self._changes if change.label.casefold() == folded),
            (name for name in self._labels if name.casefold() == folded),
        )

    def of_type(self, change_type: ChangeType) -> Changes:
        """Changes of one type, in their original order."""
        if change_type is None:
            raise MissingArgumentError("change_type")
        return Changes(
            (change for change in self._changes if change.change_type == change_type),
            self._labels,
        )

    @property
    def creations(self) -> Changes:
        """Rows present only at the end point."""
        return self.of_type(ChangeType.CREATION)

    @property
    def modifications(self) -> Changes:
        """Rows whose values differ between both points."""
        return self.of_type(ChangeType.MODIFICATION)

    @property
    def deletions(self) -> Changes:
        """Rows present only at the start point."""
        return self.of_type(ChangeType.DELETION)


def compute_changes(
    start: Mapping[str, Snapshot],
    end: Mapping[str, Snapshot],
    order: Iterable[str] | None = None,
) -> Changes:
    """Compute the changes between two sets of snapshots keyed by label.

    Args:
        start: Snapshots taken at the start point
        end: Snapshots taken at the end point
        order: Labels in processing order, defaults to the order of ``start``

    Returns:
        Changes of every label concatenated in processing order, each label's
        changes sorted by primary key

    Raises:
        ValueError: If both points or the order do not cover the same labels

    """
    labels = tuple(order) if order is not None else tuple(start)

    if start.keys() != end.keys():
        msg = (
            f"Start point labels {sorted(start)} differ from "
            f"end point labels {sorted(end)}"
        )
        raise ValueError(msg)
    if len(set(labels)) != len(labels) or set(labels) != start.keys():
        msg = f"Order {list(labels)} does not cover the labels {sorted(start)}"
        raise ValueError(msg)

    changes: list[Change] = []
    for label in labels:
        label_changes = compare_snapshots(start[label], end[label], label)
        logger.debug("Found %d changes in %s", len(label_changes), label)
        changes.extend(label_changes)

    logger.debug("Found %d changes across %d labels", len(changes), len(labels))
    return Changes(changes, labels)


def value_to_json(value: Value) -> Any:  # noqa: ANN401
    """Convert a value to its JSON representation."""
    if value.is_null_value:
        return None
    match value.type:
        case ValueType.BOOLEAN:
            return value.native
        case ValueType.BYTES:
            return value.native.hex()
        case _:
            return str(value)


def row_to_json(row: Row | None) -> dict[str, Any] | None:
    """Convert a row to a mapping of column names to JSON values."""
    if row is None:
        return None
    return {
        column: value_to_json(value)
        for column, value in zip(row.columns, row.values, strict=True)
    }


def change_to_dict(change: Change) -> dict[str, Any]:
    """Convert a change to plain data."""
    return {
        "label": change.label,
        "data_type": str(change.data_type),
        "change_type": str(change.change_type),
        "primary_keys": dict(
            zip(
                change.primary_keys,
                (value_to_json(value) for value in change.primary_key_values),
                strict=True,
            ),
        ),
        "modified_columns": list(change.modified_column_names),
        "start": row_to_json(change.row_at_start_point),
        "end": row_to_json(change.row_at_end_point),
    }


def changes_to_json(changes: Iterable[Change], **_: str) -> str:
    """Convert changes to a JSON string."""
    return json.dumps(
        [change_to_dict(change) for change in changes],
        ensure_ascii=False,
    )


def changes_to_summary(changes: Changes) -> list[dict[str, Any]]:
    """Count changes per label and change type.

    Every compared label appears, including labels without changes. Each
    dictionary contains the label and one count per change type.
    """
    summary = []
    for label in changes.labels:
        table_changes = changes.of_table(label)
        summary.append(
            {
                "name": label,
                **{
                    str(change_type): len(table_changes.of_type(change_type))
                    for change_type in ChangeType
                },
            },
        )
    return summary


def iter_groups(changes: Changes) -> Iterator[tuple[str, Changes]]:
    """Yield each label that has changes with its changes."""
    for label in changes.labels:
        if table_changes := changes.of_table(label):
            yield label, table_changes


def changes_to_html(changes: Changes) -> TemplateStream:
    """Generate an HTML report of changes."""
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template("report.html")
    env.policies["json.dumps_function"] = changes_to_json

    return template.stream(
        groups=list(iter_groups(changes)),
        summary=changes_to_summary(changes),
        change_types=list(ChangeType),
        changes=changes,
    )
