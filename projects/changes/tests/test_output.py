"""Tests for change reports."""

import json
from datetime import date

import pytest

from changes import Changes, changes_to_html, changes_to_json, changes_to_summary, compute_changes
from snapshot import Snapshot


@pytest.fixture(name="changes")
def create_changes() -> Changes:
    """Create changes with a modification, a deletion and an unchanged table."""
    start = {
        "members": Snapshot(
            "members",
            ("id", "name", "joined", "avatar"),
            [(1, "A", date(2024, 1, 31), b"\x01"), (2, "<B>", None, None)],
            ("id",),
        ),
        "logs": Snapshot("logs", ("message",), []),
    }
    end = {
        "members": Snapshot(
            "members",
            ("id", "name", "joined", "avatar"),
            [(1, "A", date(2024, 2, 1), b"\x01")],
            ("id",),
        ),
        "logs": Snapshot("logs", ("message",), []),
    }
    return compute_changes(start, end)


def test_summary_counts_every_label(changes: Changes) -> None:
    """Test counts per label and change type, unchanged labels included."""
    assert changes_to_summary(changes) == [
        {"name": "members", "creation": 0, "modification": 1, "deletion": 1},
        {"name": "logs", "creation": 0, "modification": 0, "deletion": 0},
    ]


def test_json(changes: Changes) -> None:
    """Test changes serialize with typed values."""
    modification, deletion = json.loads(changes_to_json(changes))

    assert modification["change_type"] == "modification"
    assert modification["primary_keys"] == {"id": "1"}
    assert modification["modified_columns"] == ["joined"]
    assert modification["start"]["joined"] == "2024-01-31"
    assert modification["end"]["avatar"] == "01"
    assert deletion["end"] is None
    assert deletion["start"]["joined"] is None


def test_html_report(changes: Changes) -> None:
    """Test the report lists changed tables and escapes values."""
    html = "".join(changes_to_html(changes))

    assert "<h2>members</h2>" in html
    assert "<h2>logs</h2>" not in html
    assert "&lt;B&gt;" in html
    assert "<B>" not in html
    assert 'class="modified"' in html


def test_html_report_without_changes() -> None:
    """Test an empty result still renders."""
    snapshot = Snapshot("t", ("a",), [])

    html = "".join(changes_to_html(compute_changes({"t": snapshot}, {"t": snapshot})))

    assert "No differences found." in html
