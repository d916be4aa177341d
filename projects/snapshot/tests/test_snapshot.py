"""Tests for immutable snapshots."""

import logging

import pytest

from snapshot import DataType, Row, Snapshot
from values import Value


def test_from_mappings() -> None:
    """Test building a snapshot from dictionaries."""
    snapshot = Snapshot.from_mappings(
        "members",
        [{"id": 1, "name": "A"}, {"id": 2, "name": "B"}],
        primary_keys=["id"],
    )

    assert snapshot.columns == ("id", "name")
    assert len(snapshot) == 2
    assert snapshot.has_primary_keys
    assert snapshot.data_type is DataType.TABLE


def test_row_with_key_accepts_raw_values() -> None:
    """Test key lookup by raw values or by Values."""
    snapshot = Snapshot("t", ("id", "name"), [(1, "A"), (2, "B")], ("id",))

    assert snapshot.row_with_key([2])["name"] == Value("B")
    assert snapshot.row_with_key((Value(1),)) is snapshot[0]
    assert snapshot.row_with_key([3]) is None


def test_without_primary_keys() -> None:
    """Test a snapshot without primary keys has no key lookup."""
    snapshot = Snapshot("t", ("a",), [(1,)])

    assert not snapshot.has_primary_keys
    assert snapshot.row_with_key([]) is None


def test_duplicate_keys_keep_first_row(caplog: pytest.LogCaptureFixture) -> None:
    """Test the first row of a duplicated key wins, with a warning."""
    snapshot = Snapshot("t", ("id", "name"), [(1, "A"), (1, "B")], ("id",))

    with caplog.at_level(logging.WARNING):
        keys = list(snapshot.keys())

    assert keys == [(Value(1),)]
    assert snapshot.row_with_key([1])["name"] == Value("A")
    assert "Duplicate primary key" in caplog.text


def test_rows_must_share_columns() -> None:
    """Test prebuilt rows must match the snapshot columns."""
    with pytest.raises(ValueError, match="differ"):
        Snapshot("t", ("a",), [Row(("b",), (1,))])
