"""Command line interface for dbdelta."""

import logging
import sys
from collections.abc import Iterable
from pathlib import Path
from sys import stdout
from typing import Any, Literal

from changes import (
    Changes,
    ChangeTracker,
    changes_to_html,
    changes_to_json,
    changes_to_summary,
    compute_changes,
)
from cyclopts import App
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from snapshot import (
    Inspector,
    Source,
    TableSource,
    create_engine_for_database,
    load_sources,
)
from snapshot.inspector import SQLITE_EXTENSIONS
from sqlalchemy.exc import SQLAlchemyError

app = App(help="Track row-level changes in relational databases")


type Format = Literal["table", "json", "html"]


console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {message}")


def print_info(message: str) -> None:
    """Print info message to stderr."""
    err_console.print(f"[bold blue]i[/] {message}")


def configure_logging(*, verbose: bool) -> None:
    """Send debug logs to stderr through rich when verbose."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


def validate_database_location(database_location: Path) -> None:
    """Validate a SQLite database file exists with a SQLite extension."""
    if not database_location.exists():
        print_error(f"Database file does not exist: {database_location}")
        sys.exit(1)
    if database_location.suffix.lower() not in SQLITE_EXTENSIONS:
        extensions = ", ".join(sorted(SQLITE_EXTENSIONS))
        print_error(f"Database file has invalid extension: {extensions}")
        sys.exit(1)


def resolve_sources(
    config: Path | None,
    tables: Iterable[str] | None,
) -> list[Source] | None:
    """Sources from a TOML file, or from table names, or None for all tables."""
    if config is not None:
        try:
            return load_sources(config)
        except (OSError, ValueError) as e:
            print_error(f"Invalid sources file {config}: {e}")
            sys.exit(1)
    if tables:
        return [TableSource(name=name) for name in tables]
    return None


def format_changes_table(summary: Iterable[dict[str, Any]]) -> None:
    """Format change counts as a rich table."""
    rows = [entry for entry in summary if any(entry[key] for key in entry if key != "name")]
    if not rows:
        console.print("No differences found.")
        return

    table = Table(title="Database Changes")
    table.add_column("Table", style="bold cyan")
    table.add_column("Creations", style="bold green")
    table.add_column("Modifications", style="bold yellow")
    table.add_column("Deletions", style="bold red")

    for entry in rows:
        table.add_row(
            entry["name"],
            str(entry["creation"]),
            str(entry["modification"]),
            str(entry["deletion"]),
        )

    console.print(table)


def write_changes(changes: Changes, fmt: Format) -> None:
    """Output changes to stdout in the requested format."""
    if fmt == "html":
        for chunk in changes_to_html(changes):
            stdout.write(chunk)

    if fmt == "json":
        stdout.write(changes_to_json(changes))

    if fmt == "table":
        format_changes_table(changes_to_summary(changes))


@app.command
def compare(  # noqa: PLR0913
    old_location: Path,
    new_location: Path,
    fmt: Format = "table",
    *,
    tables: list[str] | None = None,
    config: Path | None = None,
    verbose: bool = False,
) -> None:
    """Compare the rows of two SQLite databases."""
    configure_logging(verbose=verbose)

    validate_database_location(old_location)
    print_info(f"Old database: {old_location}")

    validate_database_location(new_location)
    print_info(f"New database: {new_location}")

    print_info(f"Output format: {fmt}")
    sources = resolve_sources(config, tables)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=err_console,
        ) as progress:
            task = progress.add_task("Capturing databases...", total=None)
            old = Inspector(create_engine_for_database(old_location))
            new = Inspector(create_engine_for_database(new_location))

            if sources is None:
                # Only tables present in both databases have comparable rows
                shared = set(old.table_names()) & set(new.table_names())
                for name in sorted(set(old.table_names()) ^ set(new.table_names())):
                    print_info(f"Skipping table only in one database: {name}")
                sources = [TableSource(name=name) for name in sorted(shared)]

            start = old.capture_all(sources)
            end = new.capture_all(sources)

            progress.update(task, description="Comparing databases...")
            changes = compute_changes(start, end)
    except (SQLAlchemyError, ValueError) as e:
        print_error(f"Comparison failed: {e}")
        sys.exit(1)

    write_changes(changes, fmt)
    print_success(f"Found {len(changes)} changes")


@app.command
def watch(  # noqa: PLR0913
    database: str,
    fmt: Format = "table",
    *,
    tables: list[str] | None = None,
    config: Path | None = None,
    verbose: bool = False,
) -> None:
    """Track the changes made to a database until Enter is pressed.

    DATABASE is a SQLite file or a SQLAlchemy URL.
    """
    configure_logging(verbose=verbose)
    sources = resolve_sources(config, tables)

    try:
        tracker = ChangeTracker(Inspector(create_engine_for_database(database)), sources)
        tracker.set_start_point()
        print_info(f"Start point set on {database}")

        err_console.input("Press [bold]Enter[/] to set the end point...")
        tracker.set_end_point()
        changes = tracker.changes
    except (SQLAlchemyError, ValueError, RuntimeError) as e:
        print_error(f"Tracking failed: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print_error("Tracking interrupted by user")
        sys.exit(1)

    write_changes(changes, fmt)
    print_success(f"Found {len(changes)} changes")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
