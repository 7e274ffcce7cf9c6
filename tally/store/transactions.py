"""Transaction persistence (insert and paginated listing)."""

import logging
import sqlite3
from datetime import date as Date
from decimal import Decimal

from tally.domain.models import (
    MANUAL_SOURCE,
    MANUAL_TRANSACTION_TYPE,
    AccountId,
    CategoryId,
    Transaction,
    TransactionId,
)
from tally.domain.money import to_decimal, to_minor_units

logger = logging.getLogger(__name__)


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    return Transaction(
        id=TransactionId(row["id"]),
        account_id=AccountId(row["account_id"]),
        date=row["date"],
        amount=to_decimal(row["amount"]),
        description=row["description"],
        category_id=row["category_id"],
        pending=bool(row["pending"]),
        cleared=bool(row["cleared"]),
        transaction_type=row["transaction_type"],
        created_at=row["created_at"],
        reconciled=bool(row["reconciled"]),
        import_id=row["import_id"],
        source=row["source"],
        payee=row["payee"],
        original_description=row["original_description"],
        memo=row["memo"],
    )


class TransactionStore:
    """Append-only ledger of transactions.

    Account and category ids are only checked by the foreign keys, so archived
    accounts and categories remain valid targets.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def insert(
        self,
        account_id: int,
        date: Date | str,
        amount: Decimal | int | str | float,
        description: str | None = None,
        payee: str | None = None,
        memo: str | None = None,
        category_id: int | None = None,
        pending: bool = False,
        cleared: bool = False,
    ) -> TransactionId:
        """Record a manually entered transaction.

        Args:
            account_id: Owning account.
            date: Transaction date (date or YYYY-MM-DD string).
            amount: Signed amount in major units; stored as cents.
            description: Optional description.
            payee: Optional payee.
            memo: Optional memo.
            category_id: Optional category.
            pending: Whether the transaction is pending.
            cleared: Whether the transaction has cleared.

        Returns:
            Id of the new transaction.

        Raises:
            sqlite3.IntegrityError: If account_id or category_id doesn't exist.
            sqlite3.Error: If database operation fails.
            ValueError: If amount is not a valid amount.
        """
        date_text = date.isoformat() if isinstance(date, Date) else date
        amount_cents = to_minor_units(amount)

        cursor = self._conn.cursor()
        try:
            cursor.execute(
                "INSERT INTO transactions (account_id, date, amount, description, payee, memo, category_id, "
                "pending, cleared, transaction_type, source) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    account_id,
                    date_text,
                    amount_cents,
                    description,
                    payee,
                    memo,
                    category_id,
                    pending,
                    cleared,
                    MANUAL_TRANSACTION_TYPE,
                    MANUAL_SOURCE,
                ),
            )
            self._conn.commit()
        except sqlite3.Error:
            self._conn.rollback()
            raise

        transaction_id = TransactionId(cursor.lastrowid)
        logger.debug("Inserted transaction %d on account %d (%d cents)", transaction_id, account_id, amount_cents)
        return transaction_id

    def list_by_account(self, account_id: int, limit: int, offset: int = 0) -> list[Transaction]:
        """List one page of an account's transactions, newest first.

        Same-day transactions are ordered by id descending.

        Args:
            account_id: Account to list.
            limit: Maximum rows to return (-1 for no limit).
            offset: Rows to skip.

        Raises:
            sqlite3.Error: If database operation fails.
        """
        rows = self._conn.execute(
            """
            SELECT id, account_id, date, amount, description, category_id, pending, cleared,
                   transaction_type, created_at, reconciled, import_id, source, payee,
                   original_description, memo
            FROM transactions
            WHERE account_id = ?
            ORDER BY date DESC, id DESC
            LIMIT ? OFFSET ?
            """,
            (account_id, limit, offset),
        ).fetchall()
        return [_row_to_transaction(row) for row in rows]
