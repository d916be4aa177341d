"""Immutable snapshots of database tables and requests."""

from snapshot.config import load_sources, parse_sources
from snapshot.data import Snapshot
from snapshot.inspector import (
    Inspector,
    create_engine_for_database,
    source_label,
)
from snapshot.row import Row
from snapshot.types import DataType, RequestSource, Source, TableSource

__all__ = [
    "DataType",
    "Inspector",
    "RequestSource",
    "Row",
    "Snapshot",
    "Source",
    "TableSource",
    "create_engine_for_database",
    "load_sources",
    "parse_sources",
    "source_label",
]
