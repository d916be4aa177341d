"""Snapshot capture of tables and requests through SQLAlchemy."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import MetaData, Table, create_engine, inspect, select, text

from snapshot.data import Snapshot
from snapshot.types import DataType, RequestSource, Source, TableSource

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy import Column
    from sqlalchemy.engine import Engine

logger = getLogger(__name__)

SQLITE_EXTENSIONS = {".sqlite", ".db", ".sqlite3"}


def create_engine_for_database(database: Path | str) -> Engine:
    """Create a SQLAlchemy engine for a SQLite file or a database URL.

    Args:
        database: Path to a SQLite file, or any SQLAlchemy URL such as
            ``postgresql+psycopg://user@host/db``.

    Returns:
        Engine connected to the database

    Raises:
        ValueError: If a path does not have a SQLite extension

    """
    if isinstance(database, str) and "://" in database:
        return create_engine(database)

    location = Path(database)
    suffix = location.suffix.lower()
    if suffix in SQLITE_EXTENSIONS:
        return create_engine(f"sqlite:///{location}")

    msg = f"Unsupported database extension: {suffix}"
    raise ValueError(msg)


def is_request(source: Source) -> bool:
    """Whether a source describes a SQL request rather than a table."""
    return "sql" in source


def source_label(source: Source) -> str:
    """Label the changes of a source will carry."""
    if is_request(source):
        return source["label"]  # type: ignore[typeddict-item]
    return source["name"]  # type: ignore[typeddict-item]


class Inspector:
    """Captures immutable snapshots from a live database."""

    def __init__(self, engine: Engine) -> None:
        """Initialize the inspector with a SQLAlchemy engine."""
        self._engine = engine
        self._table_cache: dict[str, Table] = {}

    def table_names(self) -> tuple[str, ...]:
        """Return the names of all tables, sorted."""
        return tuple(sorted(inspect(self._engine).get_table_names()))

    def table(self, table_name: str) -> Table:
        """Return the reflected table with the given name."""
        if table_name not in self._table_cache:
            self._table_cache[table_name] = Table(
                table_name,
                MetaData(),
                autoload_with=self._engine,
            )
        return self._table_cache[table_name]

    def capture_table(self, source: TableSource | str) -> Snapshot:
        """Capture every row of a table.

        Rows are ordered by the ``order_by`` columns, or else by the primary key.
        The declared primary key can be overridden by ``primary_keys``.
        """
        if isinstance(source, str):
            source = TableSource(name=source)

        table = self.table(source["name"])
        by_name = {column.name.casefold(): column for column in table.columns}

        def lookup(names: Iterable[str]) -> list[Column[object]]:
            try:
                return [by_name[name.casefold()] for name in names]
            except KeyError as err:
                msg = f"Unknown column {err} in table {table.name}"
                raise ValueError(msg) from err

        excluded = {column.name for column in lookup(source.get("exclude", []))}
        columns = [
            column
            for column in lookup(source.get("columns", [*by_name]))
            if column.name not in excluded
        ]
        primary_keys = [
            column.name
            for column in (
                lookup(source["primary_keys"])
                if "primary_keys" in source
                else table.primary_key.columns
            )
        ]
        order_by = lookup(source.get("order_by", primary_keys))

        statement = select(*columns).order_by(*order_by)
        with self._engine.connect() as connection:
            rows = connection.execute(statement).all()

        logger.debug("Captured %d rows from table %s", len(rows), table.name)
        return Snapshot(
            table.name,
            (column.name for column in columns),
            (tuple(row) for row in rows),
            primary_keys,
            DataType.TABLE,
            [column.type for column in columns],
        )

    def capture_request(self, source: RequestSource) -> Snapshot:
        """Capture the rows returned by a SQL request with bound parameters."""
        with self._engine.connect() as connection:
            result = connection.execute(
                text(source["sql"]),
                source.get("parameters", {}),
            )
            columns = tuple(result.keys())
            rows = result.all()

        logger.debug("Captured %d rows from request %s", len(rows), source["label"])
        return Snapshot(
            source["label"],
            columns,
            (tuple(row) for row in rows),
            source.get("primary_keys", []),
            DataType.REQUEST,
        )

    def capture(self, source: Source) -> Snapshot:
        """Capture a table or a request."""
        if is_request(source):
            return self.capture_request(source)  # type: ignore[arg-type]
        return self.capture_table(source)  # type: ignore[arg-type]

    def capture_all(self, sources: Iterable[Source] | None = None) -> dict[str, Snapshot]:
        """Capture several sources, keyed by label in source order.

        Without sources, every table of the database is captured.
        """
        if sources is None:
            sources = [TableSource(name=name) for name in self.table_names()]
        snapshots = {source_label(source): self.capture(source) for source in sources}
        logger.debug("Captured %d snapshots", len(snapshots))
        return snapshots
