"""Tests for row matching and change ordering."""

from datetime import date

import pytest

from changes import Change, ChangeType, compare_snapshots
from changes.comparator import value_sort_key
from snapshot import Row, Snapshot
from values import Value

COLUMNS = ("pk", "name")


def table(*rows: tuple[object, ...], primary_keys: tuple[str, ...] = ("pk",)) -> Snapshot:
    """Build a snapshot of table T."""
    return Snapshot("T", COLUMNS, rows, primary_keys)


def describe(changes: list[Change]) -> list[tuple[ChangeType, object]]:
    """Reduce changes to their type and first column."""
    return [(change.change_type, change.row.value(0).raw) for change in changes]


def test_deletion_and_creation_by_primary_key() -> None:
    """Test a removed key is a deletion, a new one a creation, an equal row nothing."""
    start = table((1, "A"), (2, "B"))
    end = table((1, "A"), (3, "C"))

    changes = compare_snapshots(start, end)

    assert describe(changes) == [
        (ChangeType.DELETION, 2),
        (ChangeType.CREATION, 3),
    ]
    assert changes[0].row_at_end_point is None
    assert changes[1].row_at_start_point is None


def test_modification_keeps_both_rows() -> None:
    """Test a key whose values differ is a modification."""
    changes = compare_snapshots(table((1, "A")), table((1, "Z")))

    (change,) = changes
    assert change.change_type is ChangeType.MODIFICATION
    assert change.value_at_start_point("name") == Value("A")
    assert change.value_at_end_point("name") == Value("Z")
    assert change.modified_column_names == ("name",)


def test_changes_interleave_in_key_order() -> None:
    """Test changes follow key order, not change type."""
    start = table((1, "A"), (2, "B"), (4, "D"))
    end = table((2, "b"), (3, "C"), (4, "D"), (5, "E"))

    assert describe(compare_snapshots(start, end)) == [
        (ChangeType.DELETION, 1),
        (ChangeType.MODIFICATION, 2),
        (ChangeType.CREATION, 3),
        (ChangeType.CREATION, 5),
    ]


def test_numeric_keys_order_by_magnitude() -> None:
    """Test numbers order naturally rather than as text."""
    changes = compare_snapshots(table(), table((10, "x"), (9, "y"), (100, "z")))

    assert [change.row.value(0).raw for change in changes] == [9, 10, 100]


def test_key_set_completeness() -> None:
    """Test exactly one change per created, deleted or modified key."""
    start = table(*[(key, f"v{key}") for key in range(20)])
    end = table(*[(key, f"v{key}" if key % 3 else "changed") for key in range(10, 30)])

    changes = compare_snapshots(start, end)
    by_type = {
        change_type: {change.row.value(0).raw for change in changes if change.change_type is change_type}
        for change_type in ChangeType
    }

    assert by_type[ChangeType.DELETION] == set(range(10))
    assert by_type[ChangeType.CREATION] == set(range(20, 30))
    assert by_type[ChangeType.MODIFICATION] == {12, 15, 18}


def test_empty_snapshots() -> None:
    """Test an empty start creates everything and an empty end deletes everything."""
    rows = ((1, "A"), (2, "B"))

    assert {change.change_type for change in compare_snapshots(table(), table(*rows))} == {
        ChangeType.CREATION,
    }
    assert {change.change_type for change in compare_snapshots(table(*rows), table())} == {
        ChangeType.DELETION,
    }
    assert compare_snapshots(table(), table()) == []


def test_without_primary_keys_is_multiset_matching() -> None:
    """Test rows without keys match on full content, one for one."""
    start = table((1, "A"), (1, "A"), (2, "B"), primary_keys=())
    end = table((1, "A"), (2, "C"), primary_keys=())

    changes = compare_snapshots(start, end)

    assert sorted(describe(changes), key=str) == sorted(
        [
            (ChangeType.DELETION, 1),
            (ChangeType.DELETION, 2),
            (ChangeType.CREATION, 2),
        ],
        key=str,
    )
    assert all(change.change_type is not ChangeType.MODIFICATION for change in changes)


def test_without_primary_keys_orders_by_content() -> None:
    """Test changes without keys order by row content, then change type."""
    start = table((2, "B"), primary_keys=())
    end = table((2, "C"), (1, "A"), primary_keys=())

    assert [
        (change.change_type, str(change.row.value(1))) for change in compare_snapshots(start, end)
    ] == [
        (ChangeType.CREATION, "A"),
        (ChangeType.DELETION, "B"),
        (ChangeType.CREATION, "C"),
    ]


def test_comparison_is_deterministic() -> None:
    """Test recomputing gives identical changes in identical order."""
    start = table((3, "C"), (1, None), (2, "B"))
    end = table((2, None), (4, "D"), (3, "C"))

    assert compare_snapshots(start, end) == compare_snapshots(start, end)


def test_null_sorts_last() -> None:
    """Test NULL keys come after every other value."""
    assert value_sort_key(Value(None)) > value_sort_key(Value(10**9))
    assert value_sort_key(Value(date(2014, 5, 24))) < value_sort_key(Value(None))


def test_incomparable_snapshots() -> None:
    """Test snapshots of different shape are rejected."""
    other = Snapshot("T", ("pk", "label"), [], ("pk",))

    with pytest.raises(ValueError, match="Columns of T"):
        compare_snapshots(table(), other)
    with pytest.raises(ValueError, match="Primary keys of T"):
        compare_snapshots(table(), table(primary_keys=()))


def test_change_invariants() -> None:
    """Test a change cannot contradict its type."""
    row = table((1, "A")).rows[0]

    with pytest.raises(ValueError, match="creation"):
        Change(ChangeType.CREATION, "T", row_at_start_point=row, row_at_end_point=row)
    with pytest.raises(ValueError, match="without any modified column"):
        Change.modification("T", row, row)


def test_unchanged_nan_rows() -> None:
    """Test a row holding NaN matches itself with and without keys."""
    nan = float("nan")

    assert compare_snapshots(table((1, nan)), table((1, nan))) == []
    assert compare_snapshots(
        table((nan, "A"), (1.0, "B"), primary_keys=()),
        table((nan, "A"), (1.0, "B"), primary_keys=()),
    ) == []


def test_nan_sorts_after_numbers() -> None:
    """Test NaN orders after every number and before NULL."""
    start = table((float("nan"), "A"), (2, "B"), primary_keys=())
    end = table((1, "C"), primary_keys=())

    changes = compare_snapshots(start, end)

    assert [str(change.row.value(1)) for change in changes] == ["C", "B", "A"]
    assert value_sort_key(Value(float("nan"))) > value_sort_key(Value(10**9))
    assert value_sort_key(Value(float("nan"))) < value_sort_key(Value(None))


def test_row_without_columns() -> None:
    """Test a change of a row without columns still has its row."""
    row = Row((), ())

    deletion = Change.deletion("T", row)

    assert deletion.row is row
    assert Change.creation("T", row).row is row
    with pytest.raises(ValueError, match="a row at start point and a row at end point"):
        Change(ChangeType.CREATION, "T", row_at_start_point=row, row_at_end_point=row)
