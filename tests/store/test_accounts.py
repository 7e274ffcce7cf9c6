"""Tests for tally.store.accounts."""

import sqlite3
from decimal import Decimal

import pytest

from tally.domain.models import CreateAccountRequest
from tally.store.accounts import AccountStore


def checking(**overrides: object) -> CreateAccountRequest:
    fields: dict[str, object] = {
        "name": "Checking",
        "account_type": "checking",
        "institution": "Test Bank",
        "current_balance": Decimal("1000.50"),
        "display_order": 1,
        "include_in_net_worth": True,
        "account_number_last4": "1234",
    }
    fields.update(overrides)
    return CreateAccountRequest(**fields)  # type: ignore[arg-type]


class TestInsertAndGet:
    """Tests for insert and get."""

    def test_round_trips_all_fields(self, accounts: AccountStore) -> None:
        """Should return exactly what was inserted."""
        account_id = accounts.insert(checking())

        account = accounts.get(account_id)

        assert account is not None
        assert account.id == account_id
        assert account.name == "Checking"
        assert account.account_type == "checking"
        assert account.institution == "Test Bank"
        assert account.current_balance == Decimal("1000.50")
        assert account.display_order == 1
        assert account.include_in_net_worth is True
        assert account.account_number_last4 == "1234"
        assert account.archived is False
        assert account.created_at
        assert account.updated_at

    def test_stores_balance_in_cents(self, accounts: AccountStore, conn: sqlite3.Connection) -> None:
        """Should write an integer number of cents."""
        account_id = accounts.insert(checking(current_balance=Decimal("-250.50")))

        stored = conn.execute("SELECT current_balance FROM accounts WHERE id = ?", (account_id,)).fetchone()[0]

        assert stored == -25050
        assert isinstance(stored, int)

    def test_float_balance_does_not_drift(self, accounts: AccountStore) -> None:
        """Should store a float balance at exact cent precision."""
        account_id = accounts.insert(checking(current_balance=0.1 + 0.2))

        account = accounts.get(account_id)

        assert account is not None
        assert account.current_balance == Decimal("0.30")

    def test_optional_fields_may_be_empty(self, accounts: AccountStore) -> None:
        """Should allow a bare name and type."""
        account_id = accounts.insert(CreateAccountRequest(name="Cash", account_type="cash"))

        account = accounts.get(account_id)

        assert account is not None
        assert account.current_balance is None
        assert account.institution is None
        assert account.display_order is None
        assert account.account_number_last4 is None

    def test_net_worth_defaults_true(self, accounts: AccountStore) -> None:
        """Should include the account in net worth when unspecified."""
        account_id = accounts.insert(checking(include_in_net_worth=None))

        account = accounts.get(account_id)

        assert account is not None
        assert account.include_in_net_worth is True

    def test_net_worth_false_kept(self, accounts: AccountStore) -> None:
        """Should honour an explicit exclusion."""
        account_id = accounts.insert(checking(include_in_net_worth=False))

        account = accounts.get(account_id)

        assert account is not None
        assert account.include_in_net_worth is False

    def test_oversized_balance_rejected(self, accounts: AccountStore, conn: sqlite3.Connection) -> None:
        """Should raise ValueError for a balance too large to store, writing nothing."""
        with pytest.raises(ValueError):
            accounts.insert(checking(current_balance=Decimal("1e20")))

        assert conn.execute("SELECT COUNT(*) FROM accounts").fetchone()[0] == 0

    def test_oversized_balance_update_rejected(self, accounts: AccountStore) -> None:
        """Should leave the account unchanged when the new balance can't be stored."""
        account_id = accounts.insert(checking())

        with pytest.raises(ValueError):
            accounts.update(account_id, checking(current_balance=Decimal("-1e20")))

        account = accounts.get(account_id)
        assert account is not None
        assert account.current_balance == Decimal("1000.50")

    def test_missing_account_is_none(self, accounts: AccountStore) -> None:
        """Should return None rather than raising."""
        assert accounts.get(99999) is None

    def test_assigns_increasing_ids(self, accounts: AccountStore) -> None:
        """Should give each account its own id."""
        first = accounts.insert(checking())
        second = accounts.insert(checking(name="Savings"))

        assert first > 0
        assert second > first


class TestListActive:
    """Tests for list_active."""

    def test_empty(self, accounts: AccountStore) -> None:
        """Should return an empty list with no accounts."""
        assert accounts.list_active() == []

    def test_orders_by_display_order_then_name(self, accounts: AccountStore) -> None:
        """Should sort by display_order, breaking ties by name."""
        accounts.insert(checking(name="Credit Card", display_order=3))
        accounts.insert(checking(name="Savings", display_order=2))
        accounts.insert(checking(name="Checking", display_order=1))
        accounts.insert(checking(name="Brokerage", display_order=2))

        names = [a.name for a in accounts.list_active()]

        assert names == ["Checking", "Brokerage", "Savings", "Credit Card"]

    def test_unordered_accounts_come_last(self, accounts: AccountStore) -> None:
        """Should put accounts without display_order after ordered ones, by name."""
        accounts.insert(checking(name="Zeta", display_order=None))
        accounts.insert(checking(name="Alpha", display_order=None))
        accounts.insert(checking(name="Main", display_order=5))

        names = [a.name for a in accounts.list_active()]

        assert names == ["Main", "Alpha", "Zeta"]

    def test_result_is_sorted(self, accounts: AccountStore) -> None:
        """Should return rows non-decreasing in (display_order, name)."""
        for order, name in [(2, "b"), (1, "z"), (2, "a"), (0, "m"), (1, "c")]:
            accounts.insert(checking(name=name, display_order=order))

        keys = [(a.display_order, a.name) for a in accounts.list_active()]

        assert keys == sorted(keys)

    def test_excludes_archived(self, accounts: AccountStore) -> None:
        """Should hide archived accounts."""
        keep = accounts.insert(checking(name="Keep"))
        drop = accounts.insert(checking(name="Drop"))
        accounts.archive(drop)

        assert [a.id for a in accounts.list_active()] == [keep]


class TestUpdate:
    """Tests for update."""

    def test_overwrites_every_field(self, accounts: AccountStore) -> None:
        """Should replace all user-settable fields."""
        account_id = accounts.insert(checking())
        request = CreateAccountRequest(
            name="Updated Account Name",
            account_type="savings",
            institution="New Bank",
            current_balance=Decimal("2500.50"),
            display_order=3,
            include_in_net_worth=False,
            account_number_last4="9876",
        )

        assert accounts.update(account_id, request) is True

        account = accounts.get(account_id)
        assert account is not None
        assert account.id == account_id
        assert account.name == "Updated Account Name"
        assert account.account_type == "savings"
        assert account.institution == "New Bank"
        assert account.current_balance == Decimal("2500.50")
        assert account.display_order == 3
        assert account.include_in_net_worth is False
        assert account.account_number_last4 == "9876"
        assert account.archived is False

    def test_clears_fields_left_empty(self, accounts: AccountStore) -> None:
        """Should write None for fields the request leaves unset."""
        account_id = accounts.insert(checking())

        accounts.update(account_id, CreateAccountRequest(name="Checking", account_type="checking"))

        account = accounts.get(account_id)
        assert account is not None
        assert account.institution is None
        assert account.current_balance is None
        assert account.include_in_net_worth is True

    def test_refreshes_updated_at(self, accounts: AccountStore, conn: sqlite3.Connection) -> None:
        """Should stamp updated_at and keep created_at."""
        account_id = accounts.insert(checking())
        conn.execute(
            "UPDATE accounts SET created_at = '2020-01-01 00:00:00', updated_at = '2020-01-01 00:00:00' WHERE id = ?",
            (account_id,),
        )
        conn.commit()

        accounts.update(account_id, checking(name="Renamed"))

        account = accounts.get(account_id)
        assert account is not None
        assert account.created_at == "2020-01-01 00:00:00"
        assert account.updated_at > "2020-01-01 00:00:00"

    def test_missing_account_is_noop(self, accounts: AccountStore) -> None:
        """Should succeed without effect for an unknown id."""
        assert accounts.update(99999, checking()) is False
        assert accounts.list_active() == []

    def test_archived_account_is_noop(self, accounts: AccountStore, conn: sqlite3.Connection) -> None:
        """Should not touch an archived account."""
        account_id = accounts.insert(checking())
        accounts.archive(account_id)

        assert accounts.update(account_id, checking(name="Revived")) is False

        name = conn.execute("SELECT name FROM accounts WHERE id = ?", (account_id,)).fetchone()[0]
        assert name == "Checking"

    def test_missing_name_is_storage_error(self, accounts: AccountStore) -> None:
        """Should surface NOT NULL violations as sqlite3 errors."""
        account_id = accounts.insert(checking())

        with pytest.raises(sqlite3.IntegrityError):
            accounts.update(account_id, checking(name=None))


class TestArchive:
    """Tests for archive."""

    def test_scenario_archive_hides_account(self, accounts: AccountStore) -> None:
        """Should hide the account from get and list_active."""
        account_id = accounts.insert(
            CreateAccountRequest(name="Checking", account_type="checking", current_balance=Decimal("1000.50"))
        )
        account = accounts.get(account_id)
        assert account is not None
        assert account.current_balance == Decimal("1000.50")

        assert accounts.archive(account_id) is True

        assert accounts.get(account_id) is None
        assert account_id not in [a.id for a in accounts.list_active()]

    def test_archive_twice_is_noop(self, accounts: AccountStore) -> None:
        """Should report no change the second time and leave listings alone."""
        keep = accounts.insert(checking(name="Keep"))
        drop = accounts.insert(checking(name="Drop"))

        assert accounts.archive(drop) is True
        after_first = accounts.list_active()

        assert accounts.archive(drop) is False
        assert accounts.list_active() == after_first
        assert [a.id for a in after_first] == [keep]

    def test_missing_account_is_noop(self, accounts: AccountStore) -> None:
        """Should succeed without effect for an unknown id."""
        assert accounts.archive(99999) is False

    def test_row_is_kept(self, accounts: AccountStore, conn: sqlite3.Connection) -> None:
        """Should soft delete rather than remove the row."""
        account_id = accounts.insert(checking())
        accounts.archive(account_id)

        row = conn.execute("SELECT archived FROM accounts WHERE id = ?", (account_id,)).fetchone()
        assert row["archived"] == 1
