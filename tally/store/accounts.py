"""Account persistence.

Accounts are never deleted. Archiving hides an account from get and
list_active while its transactions keep pointing at it.
"""

import logging
import sqlite3

from tally.domain.models import Account, AccountId, CreateAccountRequest
from tally.domain.money import to_decimal_optional, to_minor_units_optional

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, name, type, created_at, updated_at, current_balance, institution, "
    "display_order, archived, include_in_net_worth, account_number_last4"
)


def _row_to_account(row: sqlite3.Row) -> Account:
    return Account(
        id=AccountId(row["id"]),
        name=row["name"],
        account_type=row["type"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        current_balance=to_decimal_optional(row["current_balance"]),
        institution=row["institution"],
        display_order=row["display_order"],
        archived=bool(row["archived"]),
        include_in_net_worth=bool(row["include_in_net_worth"]),
        account_number_last4=row["account_number_last4"],
    )


def _request_params(request: CreateAccountRequest) -> tuple[object, ...]:
    include = True if request.include_in_net_worth is None else request.include_in_net_worth
    return (
        request.name,
        request.account_type,
        request.institution,
        to_minor_units_optional(request.current_balance),
        request.display_order,
        include,
        request.account_number_last4,
    )


class AccountStore:
    """CRUD over the accounts table.

    Update and archive only touch active rows. Targeting a missing or archived
    account succeeds without changing anything, so callers can retry freely.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get(self, account_id: int) -> Account | None:
        """Get an active account by id.

        Returns:
            The account, or None if it doesn't exist or is archived.

        Raises:
            sqlite3.Error: If database operation fails.
        """
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM accounts WHERE id = ? AND archived = FALSE",
            (account_id,),
        ).fetchone()
        return _row_to_account(row) if row else None

    def list_active(self) -> list[Account]:
        """List active accounts ordered by display_order (unset last), then name.

        Raises:
            sqlite3.Error: If database operation fails.
        """
        rows = self._conn.execute(
            f"SELECT {_COLUMNS} FROM accounts WHERE archived = FALSE "
            "ORDER BY display_order IS NULL, display_order, name"
        ).fetchall()
        return [_row_to_account(row) for row in rows]

    def insert(self, request: CreateAccountRequest) -> AccountId:
        """Insert a new active account.

        include_in_net_worth defaults to True when the request leaves it unset.
        Timestamps come from the column defaults.

        Returns:
            Id of the new account.

        Raises:
            sqlite3.Error: If database operation fails.
            ValueError: If current_balance is not a valid amount.
        """
        params = _request_params(request)
        cursor = self._conn.cursor()
        try:
            cursor.execute(
                "INSERT INTO accounts (name, type, institution, current_balance, display_order, "
                "include_in_net_worth, account_number_last4) VALUES (?, ?, ?, ?, ?, ?, ?)",
                params,
            )
            self._conn.commit()
        except sqlite3.Error:
            self._conn.rollback()
            raise

        account_id = AccountId(cursor.lastrowid)
        logger.debug("Inserted account %d (%s)", account_id, request.name)
        return account_id

    def update(self, account_id: int, request: CreateAccountRequest) -> bool:
        """Overwrite every user-settable field of an active account.

        Returns:
            True if a row changed, False if the account is missing or archived.

        Raises:
            sqlite3.Error: If database operation fails.
            ValueError: If current_balance is not a valid amount.
        """
        params = _request_params(request)
        cursor = self._conn.cursor()
        try:
            cursor.execute(
                """UPDATE accounts
                   SET name = ?, type = ?, institution = ?, current_balance = ?,
                       display_order = ?, include_in_net_worth = ?, account_number_last4 = ?,
                       updated_at = CURRENT_TIMESTAMP
                   WHERE id = ? AND archived = FALSE""",
                (*params, account_id),
            )
            self._conn.commit()
        except sqlite3.Error:
            self._conn.rollback()
            raise

        changed = cursor.rowcount > 0
        logger.debug("Update account %d: %s", account_id, "changed" if changed else "no-op")
        return changed

    def archive(self, account_id: int) -> bool:
        """Archive an active account.

        Returns:
            True if the account was archived, False if it was missing or already archived.

        Raises:
            sqlite3.Error: If database operation fails.
        """
        cursor = self._conn.cursor()
        try:
            cursor.execute(
                "UPDATE accounts SET archived = TRUE, updated_at = CURRENT_TIMESTAMP "
                "WHERE id = ? AND archived = FALSE",
                (account_id,),
            )
            self._conn.commit()
        except sqlite3.Error:
            self._conn.rollback()
            raise

        changed = cursor.rowcount > 0
        logger.debug("Archive account %d: %s", account_id, "changed" if changed else "no-op")
        return changed
