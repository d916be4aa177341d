"""Tests for change computation across labels and the change result."""

import pytest

from changes import ChangeType, Changes, compute_changes
from snapshot import Snapshot
from values import MissingArgumentError, ValueAssertionError


@pytest.fixture(name="points")
def create_points() -> tuple[dict[str, Snapshot], dict[str, Snapshot]]:
    """Create start and end snapshots of two tables."""
    start = {
        "members": Snapshot("members", ("id", "name"), [(1, "A"), (2, "B")], ("id",)),
        "orders": Snapshot("orders", ("id", "total"), [(1, 10)], ("id",)),
        "logs": Snapshot("logs", ("message",), [("boot",)]),
    }
    end = {
        "members": Snapshot("members", ("id", "name"), [(1, "A"), (3, "C")], ("id",)),
        "orders": Snapshot("orders", ("id", "total"), [(1, 12)], ("id",)),
        "logs": Snapshot("logs", ("message",), [("boot",)]),
    }
    return start, end


def test_labels_concatenate_in_order(
    points: tuple[dict[str, Snapshot], dict[str, Snapshot]],
) -> None:
    """Test each label's changes follow the processing order."""
    start, end = points

    changes = compute_changes(start, end, order=["orders", "logs", "members"])

    assert [(change.label, change.change_type) for change in changes] == [
        ("orders", ChangeType.MODIFICATION),
        ("members", ChangeType.DELETION),
        ("members", ChangeType.CREATION),
    ]
    assert changes.labels == ("orders", "logs", "members")


def test_default_order_is_mapping_order(
    points: tuple[dict[str, Snapshot], dict[str, Snapshot]],
) -> None:
    """Test labels default to the order of the start mapping."""
    changes = compute_changes(*points)

    assert changes[0].label == "members"
    assert changes[-1].label == "orders"


def test_label_without_changes_shifts_nothing(
    points: tuple[dict[str, Snapshot], dict[str, Snapshot]],
) -> None:
    """Test a label without changes contributes no index."""
    start, end = points

    with_logs = compute_changes(start, end)
    without_logs = compute_changes(
        {label: start[label] for label in ("members", "orders")},
        {label: end[label] for label in ("members", "orders")},
    )

    assert list(with_logs) == list(without_logs)


def test_label_sets_must_match(
    points: tuple[dict[str, Snapshot], dict[str, Snapshot]],
) -> None:
    """Test both points and the order cover the same labels."""
    start, end = points

    with pytest.raises(ValueError, match="differ"):
        compute_changes(start, {"members": end["members"]})
    with pytest.raises(ValueError, match="does not cover"):
        compute_changes(start, end, order=["members"])


def test_filters(points: tuple[dict[str, Snapshot], dict[str, Snapshot]]) -> None:
    """Test filtering by label and by change type."""
    changes = compute_changes(*points)

    members = changes.of_table("MEMBERS")
    assert len(members) == 2
    assert members.labels == ("members",)
    assert len(changes.creations) == 1
    assert len(changes.modifications) == 1
    assert changes.deletions[0].label == "members"
    assert changes.of_type(ChangeType.CREATION).of_table("orders") == Changes()


def test_filters_require_arguments(
    points: tuple[dict[str, Snapshot], dict[str, Snapshot]],
) -> None:
    """Test a missing filter is a usage error."""
    changes = compute_changes(*points)

    with pytest.raises(MissingArgumentError):
        changes.of_table(None)  # type: ignore[arg-type]
    with pytest.raises(MissingArgumentError):
        changes.of_type(None)  # type: ignore[arg-type]


def test_sequence_behaviour(
    points: tuple[dict[str, Snapshot], dict[str, Snapshot]],
) -> None:
    """Test indexing, slicing and membership."""
    changes = compute_changes(*points)

    assert isinstance(changes[1:], Changes)
    assert changes.index(changes[2]) == 2
    assert changes[0] in changes
    assert repr(changes).startswith("Changes(3:")


def test_located_failures(points: tuple[dict[str, Snapshot], dict[str, Snapshot]]) -> None:
    """Test a failed check carries the table, key and column of the value."""
    change = compute_changes(*points).of_table("orders")[0]

    with pytest.raises(ValueAssertionError) as excinfo, change.located("total"):
        change.value_at_end_point("total").is_equal_to(10)

    assert str(excinfo.value.location) == "orders[1].total"
    assert excinfo.value.__notes__ == ["at orders[1].total"]
    change.value_at_start_point("total").is_equal_to(10)
