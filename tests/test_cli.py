"""Tests for the command line commands."""

import json
import tempfile
from collections.abc import Iterator
from io import StringIO
from pathlib import Path
from sqlite3 import connect

import pytest

from dbdelta.cli import compare, resolve_sources, validate_database_location
from snapshot.inspector import SQLITE_EXTENSIONS


def create_database(location: Path, rows: list[tuple[int, str]]) -> None:
    """Create a SQLite database with a members table."""
    conn = connect(location)
    conn.execute("CREATE TABLE members (id INTEGER PRIMARY KEY, name TEXT)")
    conn.executemany("INSERT INTO members VALUES (?, ?)", rows)
    conn.commit()
    conn.close()


@pytest.fixture(name="databases")
def create_databases() -> Iterator[tuple[Path, Path]]:
    """Create an old and a new database."""
    with tempfile.TemporaryDirectory() as temp_dir:
        old_db = Path(temp_dir) / "old.db"
        new_db = Path(temp_dir) / "new.db"
        create_database(old_db, [(1, "A"), (2, "B")])
        create_database(new_db, [(1, "A"), (3, "C")])
        yield old_db, new_db


def test_compare_json(
    databases: tuple[Path, Path],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test the compare command writes changes as JSON to stdout."""
    out = StringIO()
    monkeypatch.setattr("dbdelta.cli.stdout", out)

    compare(*databases, fmt="json")

    output = json.loads(out.getvalue())
    assert [change["change_type"] for change in output] == ["deletion", "creation"]


def test_compare_missing_database(databases: tuple[Path, Path]) -> None:
    """Test a missing database exits with an error."""
    old_db, _ = databases

    with pytest.raises(SystemExit):
        compare(old_db, old_db.with_name("missing.db"))


def test_resolve_sources() -> None:
    """Test table names become table sources and nothing means all tables."""
    assert resolve_sources(None, ["members"]) == [{"name": "members"}]
    assert resolve_sources(None, None) is None


def test_validate_database_extension() -> None:
    """Test a file without a SQLite extension exits with an error."""
    with tempfile.TemporaryDirectory() as temp_dir:
        location = Path(temp_dir) / "members.csv"
        location.touch()

        with pytest.raises(SystemExit):
            validate_database_location(location)

        for suffix in SQLITE_EXTENSIONS:
            database = location.with_suffix(suffix)
            database.touch()
            validate_database_location(database)
