"""Database store layer - provides persistence for the application.

This module re-exports the schema functions and store classes for easy importing.
"""

from tally.store.accounts import AccountStore
from tally.store.categories import CategoryStore
from tally.store.schema import (
    connect,
    create_accounts_table,
    create_categories_table,
    create_transactions_table,
    create_transfers_table,
    database_exists,
    get_db_path,
    init_database,
    open_database,
    seed_default_categories,
)
from tally.store.transactions import TransactionStore

__all__ = [
    # Schema
    "connect",
    "create_accounts_table",
    "create_categories_table",
    "create_transactions_table",
    "create_transfers_table",
    "database_exists",
    "get_db_path",
    "init_database",
    "open_database",
    "seed_default_categories",
    # Stores
    "AccountStore",
    "CategoryStore",
    "TransactionStore",
]
