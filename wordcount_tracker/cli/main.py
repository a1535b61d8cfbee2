"""
CLI interface for the Word Count Tracker.

Provides command-line access to counting, reporting and ledger inspection.
"""

import logging
import os
import sys
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from wordcount_tracker.config.loader import TrackerConfig, load_tracker_config
from wordcount_tracker.core.report import render_header, render_items
from wordcount_tracker.core.scanner import scan_documents
from wordcount_tracker.storage.db import get_connection
from wordcount_tracker.storage.errors import LedgerError
from wordcount_tracker.storage.repository import WordCountRepository
from wordcount_tracker.storage.schema import current_version, migrate

app = typer.Typer()
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1


def _setup_logging(verbose: bool) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)]
    )


def _resolve_config(config_path: Optional[str], **overrides) -> TrackerConfig:
    """Load the config file if given, then apply explicit CLI options."""
    try:
        config = load_tracker_config(config_path) if config_path else TrackerConfig()
        given = {key: value for key, value in overrides.items() if value is not None}
        return replace(config, **given)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        err_console.print(f"[red]Configuration error:[/] {e}")
        sys.exit(EXIT_CODE_FAIL)


def _open_repository(database: str) -> WordCountRepository:
    """Open the ledger and bring its schema up to date, or exit."""
    try:
        conn = get_connection(database)
        migrate(conn)
    except LedgerError as e:
        err_console.print(f"[red]Database error:[/] {e}")
        sys.exit(EXIT_CODE_FAIL)
    return WordCountRepository(conn)


def _print_line(line: str) -> None:
    console.print(line, markup=False, highlight=False, soft_wrap=True)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """Word Count Tracker CLI."""
    if ctx.invoked_subcommand is None:
        console.print("Word Count Tracker - Use --help to see available commands")


@app.command()
def count(
    paths: Optional[List[str]] = typer.Argument(
        None,
        help="Documents or directories to count (default: current directory)"
    ),
    database: Optional[str] = typer.Option(
        None,
        "--database",
        "-d",
        help="Path to database"
    ),
    goal: Optional[int] = typer.Option(
        None,
        "--goal",
        "-g",
        help="Number of words for daily goal"
    ),
    annotation_pattern: Optional[str] = typer.Option(
        None,
        "--annotation-pattern",
        "-a",
        help="Regexp for text that doesn't count towards the total"
    ),
    accept_file_pattern: Optional[str] = typer.Option(
        None,
        "--accept-file-pattern",
        help="Regexp for file names to accept"
    ),
    ignore_file_pattern: Optional[str] = typer.Option(
        None,
        "--ignore-file-pattern",
        help="Regexp for file names to ignore"
    ),
    update_hook: Optional[str] = typer.Option(
        None,
        "--update-hook",
        help="External script to run whenever a word count changes for a file"
    ),
    format_header: Optional[str] = typer.Option(
        None,
        "--format-header",
        help="Format for header line"
    ),
    format_item: Optional[str] = typer.Option(
        None,
        "--format-item",
        help="Format for item line"
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging"
    )
):
    """
    Count words in documents and report today's progress.

    Every changed word count is recorded in the ledger. Documents that
    cannot be read or recorded are logged and left out of the report.
    """
    _setup_logging(verbose)
    config = _resolve_config(
        config_path,
        database=database,
        goal=goal,
        annotation_pattern=annotation_pattern,
        accept_file_pattern=accept_file_pattern,
        ignore_file_pattern=ignore_file_pattern,
        update_hook=update_hook,
        format_header=format_header,
        format_item=format_item,
    )

    database_path = os.path.abspath(config.database)
    repository = _open_repository(database_path)
    logger.debug("Using ledger %s", database_path)
    try:
        result = scan_documents(
            paths or ["."],
            config,
            repository,
            database_path,
            now=datetime.now(timezone.utc)
        )
    finally:
        repository.conn.close()

    header = render_header(result.snapshots, config)
    if header:
        _print_line(header)
    for line in render_items(result.snapshots, config):
        _print_line(line)

    sys.exit(EXIT_CODE_PASS)


@app.command()
def init(
    database: str = typer.Option("./wc.db", "--database", "-d", help="Path to database")
):
    """Create the database or migrate it to the current schema."""
    repository = _open_repository(database)
    version = current_version(repository.conn)
    repository.conn.close()
    console.print(f"[green]✓[/] Database ready at schema version {version}")
    sys.exit(EXIT_CODE_PASS)


@app.command()
def status(
    database: str = typer.Option("./wc.db", "--database", "-d", help="Path to database")
):
    """Show schema version and number of recorded word counts."""
    repository = _open_repository(database)
    try:
        version = current_version(repository.conn)
        entries = repository.count_entries()
    except LedgerError as e:
        err_console.print(f"[red]Database error:[/] {e}")
        sys.exit(EXIT_CODE_FAIL)
    finally:
        repository.conn.close()
    console.print(f"Schema version: {version}")
    console.print(f"Recorded word counts: {entries}")


@app.command()
def history(
    path: str = typer.Argument(..., help="Document path as stored in the ledger"),
    database: str = typer.Option("./wc.db", "--database", "-d", help="Path to database")
):
    """Show every recorded word count for a document, newest first."""
    repository = _open_repository(database)
    try:
        entries = repository.history(path)
    except LedgerError as e:
        err_console.print(f"[red]Database error:[/] {e}")
        sys.exit(EXIT_CODE_FAIL)
    finally:
        repository.conn.close()

    if not entries:
        console.print(f"[yellow]No word counts recorded for[/] {path}")
        return

    table = Table(title=path)
    table.add_column("Recorded (UTC)")
    table.add_column("Words", justify="right")
    for entry in entries:
        recorded = datetime.fromtimestamp(entry.timestamp, tz=timezone.utc)
        table.add_row(recorded.strftime("%Y-%m-%d %H:%M:%S"), str(entry.words))
    console.print(table)


if __name__ == "__main__":
    app()
