"""Capture of a database at a start point and an end point."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from changes.main import Changes, compute_changes

if TYPE_CHECKING:
    from collections.abc import Iterable

    from snapshot import Inspector, Snapshot, Source

logger = getLogger(__name__)


class TrackerStateError(RuntimeError):
    """Points of a tracker were set or read out of order."""


class ChangeTracker:
    """Tracks the changes of tables and requests between two instants.

    Usage::

        tracker = ChangeTracker(Inspector(engine))
        tracker.set_start_point()
        ...  # code under test
        tracker.set_end_point()
        tracker.changes.of_table("members")

    Without sources, every table of the database is tracked.
    """

    def __init__(self, inspector: Inspector, sources: Iterable[Source] | None = None) -> None:
        """Initialize the tracker with the sources to capture."""
        self._inspector = inspector
        self._sources = list(sources) if sources is not None else None
        self._start: dict[str, Snapshot] | None = None
        self._end: dict[str, Snapshot] | None = None
        self._changes: Changes | None = None

    def _capture(self) -> dict[str, Snapshot]:
        # Table names are listed again at each point when no source was given
        return self._inspector.capture_all(self._sources)

    @property
    def has_start_point(self) -> bool:
        """Whether the start point has been captured."""
        return self._start is not None

    @property
    def has_end_point(self) -> bool:
        """Whether the end point has been captured."""
        return self._end is not None

    def set_start_point(self) -> None:
        """Capture the start point, discarding any previous end point."""
        self._start = self._capture()
        self._end = None
        self._changes = None
        logger.debug("Start point set on %d sources", len(self._start))

    def set_end_point(self) -> None:
        """Capture the end point.

        Raises:
            TrackerStateError: If the start point is not set

        """
        if self._start is None:
            msg = "Start point must be set before"
            raise TrackerStateError(msg)
        self._end = self._capture()
        self._changes = None
        logger.debug("End point set on %d sources", len(self._end))

    @property
    def start_point(self) -> dict[str, Snapshot]:
        """Snapshots captured at the start point."""
        if self._start is None:
            msg = "Start point must be set before"
            raise TrackerStateError(msg)
        return self._start

    @property
    def end_point(self) -> dict[str, Snapshot]:
        """Snapshots captured at the end point."""
        if self._end is None:
            msg = "End point must be set before"
            raise TrackerStateError(msg)
        return self._end

    @property
    def changes(self) -> Changes:
        """Changes between the start and end points, computed once.

        Raises:
            TrackerStateError: If either point is not set

        """
        if self._changes is None:
            start, end = self.start_point, self.end_point
            if start.keys() != end.keys():
                # Tables created or dropped between both points
                msg = (
                    f"Tracked tables changed between start point {sorted(start)} "
                    f"and end point {sorted(end)}"
                )
                raise TrackerStateError(msg)
            self._changes = compute_changes(start, end)
        return self._changes
