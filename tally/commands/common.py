"""Helpers shared by the command modules."""

import sqlite3
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, NoReturn

from rich.console import Console
from rich.markup import escape

from tally.config import load_config, resolve_db_path
from tally.store.schema import open_database

console = Console()


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]{escape(message)}[/red]", style="bold")
    sys.exit(1)


def load_settings() -> dict[str, Any]:
    """Load config, exiting on a malformed file."""
    try:
        return load_config()
    except (OSError, ValueError) as e:
        fail(f"Could not read config: {e}")


@contextmanager
def database(settings: dict[str, Any]) -> Iterator[sqlite3.Connection]:
    """Open the configured database for the duration of one command."""
    try:
        conn = open_database(resolve_db_path(settings))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")
    except OSError as e:
        fail(f"Filesystem error: {e}")
    try:
        yield conn
    finally:
        conn.close()


def yes_no(value: bool | None) -> str:
    """Render an optional flag for a table cell."""
    if value is None:
        return "[dim]-[/dim]"
    return "✓" if value else "✗"
