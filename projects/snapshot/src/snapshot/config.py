"""Loading of snapshot sources from a TOML file.

Example::

    [[tables]]
    name = "members"
    exclude = ["updated_at"]

    [[requests]]
    label = "active members"
    sql = "SELECT id, name FROM members WHERE active = :active"
    parameters = { active = 1 }
    primary_keys = ["id"]
"""

from __future__ import annotations

from tomllib import load
from typing import TYPE_CHECKING, Any

from snapshot.types import RequestSource, Source, TableSource

if TYPE_CHECKING:
    from pathlib import Path

TABLE_KEYS = frozenset(TableSource.__annotations__)
REQUEST_KEYS = frozenset(RequestSource.__annotations__)


def _checked(entry: dict[str, Any], allowed: frozenset[str], required: str) -> None:
    if required not in entry:
        msg = f"Source entry is missing '{required}': {entry}"
        raise ValueError(msg)
    if unknown := entry.keys() - allowed:
        msg = f"Unknown keys {sorted(unknown)} in source entry '{entry[required]}'"
        raise ValueError(msg)


def parse_sources(document: dict[str, Any]) -> list[Source]:
    """Validate a parsed TOML document and return its sources, tables first."""
    if unknown := document.keys() - {"tables", "requests"}:
        msg = f"Unknown sections in sources file: {sorted(unknown)}"
        raise ValueError(msg)

    sources: list[Source] = []
    for entry in document.get("tables", []):
        _checked(entry, TABLE_KEYS, "name")
        sources.append(TableSource(**entry))
    for entry in document.get("requests", []):
        _checked(entry, REQUEST_KEYS, "label")
        if "sql" not in entry:
            msg = f"Request '{entry['label']}' is missing 'sql'"
            raise ValueError(msg)
        sources.append(RequestSource(**entry))

    labels = [entry.get("name") or entry.get("label") for entry in sources]
    if duplicates := {label for label in labels if labels.count(label) > 1}:
        msg = f"Duplicate source labels: {sorted(duplicates)}"  # type: ignore[type-var]
        raise ValueError(msg)
    return sources


def load_sources(location: Path) -> list[Source]:
    """Load snapshot sources from a TOML file."""
    with location.open("rb") as f:
        return parse_sources(load(f))
