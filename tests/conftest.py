"""Shared fixtures: an initialized in-memory database and its stores."""

import sqlite3
from collections.abc import Iterator

import pytest

from tally.store.accounts import AccountStore
from tally.store.categories import CategoryStore
from tally.store.schema import IN_MEMORY, open_database
from tally.store.transactions import TransactionStore


@pytest.fixture
def conn() -> Iterator[sqlite3.Connection]:
    connection = open_database(IN_MEMORY)
    yield connection
    connection.close()


@pytest.fixture
def accounts(conn: sqlite3.Connection) -> AccountStore:
    return AccountStore(conn)


@pytest.fixture
def categories(conn: sqlite3.Connection) -> CategoryStore:
    return CategoryStore(conn)


@pytest.fixture
def transactions(conn: sqlite3.Connection) -> TransactionStore:
    return TransactionStore(conn)
