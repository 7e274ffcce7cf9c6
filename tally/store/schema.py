"""Database schema initialization and connection setup."""

import logging
import os
import sqlite3
from pathlib import Path

from tally.domain.models import SYSTEM_CATEGORY_NAME

logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_xdg_data_home() / "tally" / "tally.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def connect(db_path: Path | str | None = None) -> sqlite3.Connection:
    """Open a connection with row factory and foreign keys enabled.

    Args:
        db_path: Path to the database file, or ":memory:". If None, uses default location.

    Returns:
        Database connection shared by the stores.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def _execute_ddl(conn: sqlite3.Connection, sql: str) -> None:
    try:
        conn.execute(sql)
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise


def create_accounts_table(conn: sqlite3.Connection) -> None:
    """Create the accounts table if it doesn't exist.

    current_balance is stored in cents. Accounts are soft deleted via archived.

    Raises:
        sqlite3.Error: If the statement fails.
    """
    _execute_ddl(
        conn,
        """
        CREATE TABLE IF NOT EXISTS accounts (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            type TEXT NOT NULL,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            current_balance INTEGER,
            institution TEXT,
            display_order INTEGER,
            archived BOOLEAN DEFAULT FALSE,
            include_in_net_worth BOOLEAN DEFAULT TRUE,
            account_number_last4 TEXT
        )
        """,
    )


def create_categories_table(conn: sqlite3.Connection) -> None:
    """Create the categories table if it doesn't exist.

    parent_category_id references categories(id); cycles are not prevented.

    Raises:
        sqlite3.Error: If the statement fails.
    """
    _execute_ddl(
        conn,
        """
        CREATE TABLE IF NOT EXISTS categories (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            archived BOOLEAN DEFAULT FALSE,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            display_order INTEGER,
            parent_category_id INTEGER REFERENCES categories(id),
            default_discretionary BOOLEAN,
            default_fixed BOOLEAN,
            last_used_date DATETIME,
            is_system_category BOOLEAN DEFAULT FALSE
        )
        """,
    )


def create_transactions_table(conn: sqlite3.Connection) -> None:
    """Create the transactions table if it doesn't exist.

    amount is stored in cents.

    Raises:
        sqlite3.Error: If the statement fails.
    """
    _execute_ddl(
        conn,
        """
        CREATE TABLE IF NOT EXISTS transactions (
            id INTEGER PRIMARY KEY,
            account_id INTEGER NOT NULL REFERENCES accounts(id),
            date DATE NOT NULL,
            amount INTEGER NOT NULL,
            description TEXT,
            category_id INTEGER REFERENCES categories(id),
            pending BOOLEAN DEFAULT FALSE,
            transaction_type TEXT NOT NULL,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            cleared BOOLEAN DEFAULT FALSE,
            reconciled BOOLEAN DEFAULT FALSE,
            import_id TEXT,
            source TEXT,
            payee TEXT,
            original_description TEXT,
            memo TEXT
        )
        """,
    )


def create_transfers_table(conn: sqlite3.Connection) -> None:
    """Create the transfers table if it doesn't exist.

    Raises:
        sqlite3.Error: If the statement fails.
    """
    _execute_ddl(
        conn,
        """
        CREATE TABLE IF NOT EXISTS transfers (
            id INTEGER PRIMARY KEY,
            from_transaction_id INTEGER NOT NULL REFERENCES transactions(id),
            to_transaction_id INTEGER NOT NULL REFERENCES transactions(id),
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            transfer_type TEXT,
            auto_created BOOLEAN DEFAULT FALSE
        )
        """,
    )


def seed_default_categories(conn: sqlite3.Connection) -> bool:
    """Insert the "Uncategorized" system category unless it already exists.

    Args:
        conn: Database connection.

    Returns:
        True if the category was inserted, False if it was already there.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    cursor = conn.cursor()
    try:
        cursor.execute(
            "SELECT COUNT(*) FROM categories WHERE name = ? AND is_system_category = TRUE",
            (SYSTEM_CATEGORY_NAME,),
        )
        if cursor.fetchone()[0] > 0:
            return False

        cursor.execute(
            "INSERT INTO categories (name, is_system_category, display_order, archived) VALUES (?, TRUE, 0, FALSE)",
            (SYSTEM_CATEGORY_NAME,),
        )
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise

    logger.info("Seeded system category %r", SYSTEM_CATEGORY_NAME)
    return True


def init_database(conn: sqlite3.Connection) -> None:
    """Create every table and seed the system category.

    Safe to call on every start; existing tables and rows are left alone.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    create_accounts_table(conn)
    create_categories_table(conn)
    create_transactions_table(conn)
    create_transfers_table(conn)
    seed_default_categories(conn)


def open_database(db_path: Path | str | None = None) -> sqlite3.Connection:
    """Open the database, creating the file and schema if needed.

    Args:
        db_path: Path to the database file, or ":memory:". If None, uses default location.

    Returns:
        Initialized connection. The caller owns it and must close it.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    if db_path is None:
        db_path = get_db_path()
    if db_path != IN_MEMORY:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = connect(db_path)
    try:
        init_database(conn)
    except sqlite3.Error:
        conn.close()
        raise
    logger.info("Database ready at %s", db_path)
    return conn
