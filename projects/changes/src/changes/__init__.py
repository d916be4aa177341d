"""Row-level changes between two snapshots of a database."""

from changes.comparator import compare_snapshots
from changes.main import (
    Changes,
    changes_to_html,
    changes_to_json,
    changes_to_summary,
    compute_changes,
)
from changes.navigation import ChangeNavigator, ChangeNotFoundError
from changes.tracker import ChangeTracker, TrackerStateError
from changes.types import Change, ChangeType

__all__ = [
    "Change",
    "ChangeNavigator",
    "ChangeNotFoundError",
    "ChangeTracker",
    "ChangeType",
    "Changes",
    "TrackerStateError",
    "changes_to_html",
    "changes_to_json",
    "changes_to_summary",
    "compare_snapshots",
    "compute_changes",
]
