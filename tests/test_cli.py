"""End-to-end tests for the tally CLI against a temporary database."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from tally.cli import app
from tally.config import save_config
from tally.store.accounts import AccountStore
from tally.store.schema import open_database

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return tmp_path


def db_file(home: Path) -> Path:
    return home / "data" / "tally" / "tally.db"


class TestInit:
    """Tests for 'tally init'."""

    def test_creates_database_and_config(self, isolated_home: Path) -> None:
        """Should create both files."""
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert db_file(isolated_home).exists()
        assert (isolated_home / "config" / "tally" / "config.toml").exists()

    def test_second_init_keeps_data(self, isolated_home: Path) -> None:
        """Should leave existing accounts alone."""
        runner.invoke(app, ["init"])
        runner.invoke(app, ["accounts", "add", "Checking", "--type", "checking"])

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        conn = open_database(db_file(isolated_home))
        try:
            assert len(AccountStore(conn).list_active()) == 1
        finally:
            conn.close()


class TestBadConfig:
    """Tests for commands run against a broken config file."""

    def test_backup_reports_malformed_config(self, isolated_home: Path) -> None:
        """Should print an error instead of a TOML traceback."""
        runner.invoke(app, ["init"])
        (isolated_home / "config" / "tally" / "config.toml").write_text("currency_symbol = [\n")

        result = runner.invoke(app, ["backup"])

        assert result.exit_code == 1
        assert "Could not read config" in result.output

    def test_list_reports_bad_page_size(self, isolated_home: Path) -> None:
        """Should reject a page_size that isn't a number."""
        save_config({"page_size": "lots"}, isolated_home / "config" / "tally" / "config.toml")
        runner.invoke(app, ["accounts", "add", "Checking", "--type", "checking"])

        result = runner.invoke(app, ["transactions", "list", "1"])

        assert result.exit_code == 1
        assert "Invalid page_size" in result.output

    def test_explicit_limit_ignores_bad_page_size(self, isolated_home: Path) -> None:
        """Should not need page_size when --limit is given."""
        save_config({"page_size": "lots"}, isolated_home / "config" / "tally" / "config.toml")
        runner.invoke(app, ["accounts", "add", "Checking", "--type", "checking"])

        result = runner.invoke(app, ["transactions", "list", "1", "--limit", "5"])

        assert result.exit_code == 0


class TestAccounts:
    """Tests for the accounts sub-commands."""

    def test_add_and_list(self) -> None:
        """Should show an added account."""
        add = runner.invoke(app, ["accounts", "add", "Checking", "--type", "checking", "--balance", "1000.50"])
        listing = runner.invoke(app, ["accounts", "list"])

        assert add.exit_code == 0
        assert "Added account Checking" in add.output
        assert listing.exit_code == 0
        assert "Checking" in listing.output
        assert "1,000.50" in listing.output

    def test_invalid_balance(self) -> None:
        """Should refuse a non-numeric balance."""
        result = runner.invoke(app, ["accounts", "add", "Checking", "--type", "checking", "--balance", "lots"])

        assert result.exit_code == 1
        assert "Invalid amount" in result.output

    def test_oversized_balance(self) -> None:
        """Should refuse a balance too large to store, without a traceback."""
        result = runner.invoke(
            app, ["accounts", "add", "Big", "--type", "checking", "--balance", "100000000000000000000"]
        )

        assert result.exit_code == 1
        assert "Invalid amount" in result.output
        assert not isinstance(result.exception, OverflowError)

    def test_archive_twice(self) -> None:
        """Should succeed both times and say the second did nothing."""
        runner.invoke(app, ["accounts", "add", "Checking", "--type", "checking"])

        first = runner.invoke(app, ["accounts", "archive", "1"])
        second = runner.invoke(app, ["accounts", "archive", "1"])

        assert first.exit_code == 0
        assert "Archived account 1" in first.output
        assert second.exit_code == 0
        assert "already archived" in second.output

    def test_update_keeps_unspecified_fields(self, isolated_home: Path) -> None:
        """Should change only the given options."""
        runner.invoke(app, ["accounts", "add", "Checking", "--type", "checking", "--institution", "Bank"])

        result = runner.invoke(app, ["accounts", "update", "1", "--name", "Main"])

        assert result.exit_code == 0
        conn = open_database(db_file(isolated_home))
        try:
            account = AccountStore(conn).get(1)
        finally:
            conn.close()
        assert account is not None
        assert account.name == "Main"
        assert account.institution == "Bank"


class TestCategories:
    """Tests for the categories sub-commands."""

    def test_system_category_listed(self) -> None:
        """Should list the seeded category."""
        result = runner.invoke(app, ["categories", "list"])

        assert result.exit_code == 0
        assert "Uncategorized" in result.output

    def test_system_category_cannot_be_archived(self) -> None:
        """Should report a no-op without failing."""
        result = runner.invoke(app, ["categories", "archive", "1"])

        assert result.exit_code == 0
        assert "system category" in result.output

    def test_tree(self) -> None:
        """Should render parents and children."""
        runner.invoke(app, ["categories", "add", "Food"])
        runner.invoke(app, ["categories", "add", "Groceries", "--parent", "2"])

        result = runner.invoke(app, ["categories", "tree"])

        assert result.exit_code == 0
        assert "Food" in result.output
        assert "Groceries" in result.output


class TestTransactions:
    """Tests for the transactions sub-commands."""

    def test_add_and_list_newest_first(self) -> None:
        """Should list the later transaction first."""
        runner.invoke(app, ["accounts", "add", "Checking", "--type", "checking"])
        runner.invoke(app, ["transactions", "add", "1", "2024-01-15", "25.50", "-d", "Older"])
        runner.invoke(app, ["transactions", "add", "1", "16/01/2024", "50.00", "-d", "Newer"])

        result = runner.invoke(app, ["transactions", "list", "1"])

        assert result.exit_code == 0
        assert result.output.index("Newer") < result.output.index("Older")

    def test_unknown_account(self) -> None:
        """Should fail with a storage error for an account that doesn't exist."""
        result = runner.invoke(app, ["transactions", "add", "42", "2024-01-15", "5"])

        assert result.exit_code == 1
        assert "Failed to add transaction" in result.output

    def test_bad_date(self) -> None:
        """Should reject a date it can't read."""
        runner.invoke(app, ["accounts", "add", "Checking", "--type", "checking"])

        result = runner.invoke(app, ["transactions", "add", "1", "someday", "5"])

        assert result.exit_code == 1
        assert "Invalid date" in result.output
