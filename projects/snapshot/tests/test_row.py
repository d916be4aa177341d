"""Tests for rows of typed values."""

import pytest

from snapshot import Row
from values import Value, ValueType


@pytest.fixture(name="row")
def create_row() -> Row:
    """Create a row with a primary key."""
    return Row(("ID", "name", "age"), (1, "Alice", None), ("ID",))


def test_values_are_classified(row: Row) -> None:
    """Test raw values are wrapped with their type and column."""
    assert [value.type for value in row] == [
        ValueType.NUMBER,
        ValueType.TEXT,
        ValueType.NOT_IDENTIFIED,
    ]
    assert row.value(1).column_name == "name"


def test_lookup_by_name_or_position(row: Row) -> None:
    """Test column names match case-insensitively."""
    assert row.value("id") == row.value(0)
    assert row["NAME"] == Value("Alice")

    with pytest.raises(KeyError):
        row.value("missing")


def test_key(row: Row) -> None:
    """Test the key holds primary-key values in declared order."""
    assert row.key == (Value(1),)
    assert Row(("a",), (1,)).key == ()


def test_structure_is_checked() -> None:
    """Test length, duplicate and unknown column violations."""
    with pytest.raises(ValueError, match="2 values for 1 columns"):
        Row(("a",), (1, 2))
    with pytest.raises(ValueError, match="unique"):
        Row(("a", "A"), (1, 2))
    with pytest.raises(ValueError, match="Primary keys"):
        Row(("a",), (1,), ("b",))


def test_modified_columns(row: Row) -> None:
    """Test positions of differing values, with NULL equal to NULL."""
    other = Row(("ID", "name", "age"), (1, "Alicia", None), ("ID",))

    assert row.modified_columns(other) == (1,)
    assert not row.has_values(other)
    assert row.has_values(Row(("ID", "name", "age"), (1.0, "Alice", None), ("ID",)))


def test_as_dict(row: Row) -> None:
    """Test conversion back to raw values."""
    assert row.as_dict() == {"ID": 1, "name": "Alice", "age": None}
