"""Admin commands for init and backup."""

import shutil
import sqlite3
import sys
from datetime import datetime
from pathlib import Path

from tally.commands.common import console, fail, load_settings
from tally.config import create_default_config, get_config_path, resolve_db_path
from tally.store.schema import open_database


def backup_command(
    output_dir: str | None = None,
) -> None:
    """Backup database and configuration files."""
    config_path = get_config_path()
    db_path = resolve_db_path(load_settings())

    if not db_path.exists():
        fail("Database not found. Run 'tally init' first.")

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = db_path.parent / "backups"

    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    db_backup = backup_dir / f"tally_{timestamp}.db"
    config_backup = backup_dir / f"config_{timestamp}.toml"

    try:
        shutil.copy2(db_path, db_backup)
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        if config_path.exists():
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

        console.print("\n[green]Backup complete![/green]", style="bold")
        console.print(f"[dim]Backup directory: {backup_dir}[/dim]")

    except OSError as e:
        fail(f"Backup failed: {e}")


def init_command(force: bool = False) -> None:
    """Initialize tally database and configuration.

    The schema step is idempotent, so an existing database is only upgraded
    with missing tables and the system category. The config file is only
    rewritten with --force.
    """
    config_path = get_config_path()

    try:
        if force or not config_path.exists():
            console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
            create_default_config(config_path)
            console.print("[green]✓[/green] Config file created (permissions: 600)")
        else:
            console.print(f"[dim]Keeping existing config: {config_path}[/dim]")

        db_path = resolve_db_path(load_settings())
        console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
        conn = open_database(db_path)
        conn.close()
        console.print("[green]✓[/green] Database initialized")

        console.print("\n[green]Initialization complete![/green]", style="bold")
        console.print(f"[dim]Database: {db_path}[/dim]")
        console.print(f"[dim]Config: {config_path}[/dim]")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)
