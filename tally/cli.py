"""CLI entry point for tally."""

import logging

import typer
from rich.logging import RichHandler

from tally.commands import accounts, categories, transactions
from tally.commands.admin import backup_command, init_command

app = typer.Typer(
    name="tally",
    help="tally - a local ledger of accounts, categories and transactions",
    add_completion=False,
)
accounts_app = typer.Typer(help="Manage your accounts.")
categories_app = typer.Typer(help="Manage your spending categories.")
transactions_app = typer.Typer(help="Record and browse transactions.")

app.add_typer(accounts_app, name="accounts")
app.add_typer(categories_app, name="categories")
app.add_typer(transactions_app, name="transactions")


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """tally - a local ledger of accounts, categories and transactions."""
    configure_logging(verbose)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Initialize the tally database and configuration."""
    init_command(force)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: next to the database)"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


@accounts_app.command(name="list")
def list_accounts() -> None:
    """List your active accounts."""
    accounts.list_command()


@accounts_app.command(name="show")
def show_account(account_id: int) -> None:
    """Show one account."""
    accounts.show_command(account_id)


@accounts_app.command(name="add")
def add_account(
    name: str,
    account_type: str = typer.Option(..., "--type", "-t", help="Account type, e.g. checking, savings, credit"),
    institution: str = typer.Option(None, "--institution", help="Bank or institution name"),
    balance: str = typer.Option(None, "--balance", help="Current balance"),
    display_order: int = typer.Option(None, "--order", help="Sort position in listings"),
    net_worth: bool = typer.Option(None, "--net-worth/--no-net-worth", help="Include in net worth (default: yes)"),
    last4: str = typer.Option(None, "--last4", help="Last 4 digits of the account number"),
) -> None:
    """Add a new account."""
    accounts.add_command(name, account_type, institution, balance, display_order, net_worth, last4)


@accounts_app.command(name="update")
def update_account(
    account_id: int,
    name: str = typer.Option(None, "--name", help="New name"),
    account_type: str = typer.Option(None, "--type", "-t", help="New account type"),
    institution: str = typer.Option(None, "--institution", help="New institution"),
    balance: str = typer.Option(None, "--balance", help="New balance"),
    display_order: int = typer.Option(None, "--order", help="New sort position"),
    net_worth: bool = typer.Option(None, "--net-worth/--no-net-worth", help="Include in net worth"),
    last4: str = typer.Option(None, "--last4", help="Last 4 digits of the account number"),
) -> None:
    """Update an account."""
    accounts.update_command(account_id, name, account_type, institution, balance, display_order, net_worth, last4)


@accounts_app.command(name="archive")
def archive_account(account_id: int) -> None:
    """Archive an account (hides it, keeps its transactions)."""
    accounts.archive_command(account_id)


@categories_app.command(name="list")
def list_categories() -> None:
    """List your active categories."""
    categories.list_command()


@categories_app.command(name="tree")
def category_tree() -> None:
    """Show your categories as a tree."""
    categories.tree_command()


@categories_app.command(name="show")
def show_category(category_id: int) -> None:
    """Show one category."""
    categories.show_command(category_id)


@categories_app.command(name="add")
def add_category(
    name: str,
    parent_id: int = typer.Option(None, "--parent", help="Parent category ID"),
    display_order: int = typer.Option(None, "--order", help="Sort position in listings"),
    discretionary: bool = typer.Option(None, "--discretionary/--essential", help="Default classification"),
    fixed: bool = typer.Option(None, "--fixed/--variable", help="Default classification"),
) -> None:
    """Add a new category."""
    categories.add_command(name, parent_id, display_order, discretionary, fixed)


@categories_app.command(name="update")
def update_category(
    category_id: int,
    name: str = typer.Option(None, "--name", help="New name"),
    parent_id: int = typer.Option(None, "--parent", help="New parent category ID"),
    display_order: int = typer.Option(None, "--order", help="New sort position"),
    discretionary: bool = typer.Option(None, "--discretionary/--essential", help="Default classification"),
    fixed: bool = typer.Option(None, "--fixed/--variable", help="Default classification"),
) -> None:
    """Update a category."""
    categories.update_command(category_id, name, parent_id, display_order, discretionary, fixed)


@categories_app.command(name="archive")
def archive_category(category_id: int) -> None:
    """Archive a category."""
    categories.archive_command(category_id)


@transactions_app.command(name="add")
def add_transaction(
    account_id: int,
    date: str,
    amount: str,
    description: str = typer.Option(None, "--description", "-d", help="Description"),
    payee: str = typer.Option(None, "--payee", help="Payee"),
    memo: str = typer.Option(None, "--memo", help="Memo"),
    category_id: int = typer.Option(None, "--category", "-c", help="Category ID"),
    pending: bool = typer.Option(False, "--pending", help="Mark as pending"),
    cleared: bool = typer.Option(False, "--cleared", help="Mark as cleared"),
) -> None:
    """Record a transaction (negative amounts are money out)."""
    transactions.add_command(account_id, date, amount, description, payee, memo, category_id, pending, cleared)


@transactions_app.command(name="list")
def list_transactions(
    account_id: int,
    limit: int = typer.Option(None, "--limit", "-n", help="Page size (default: page_size from config)"),
    offset: int = typer.Option(0, "--offset", help="Transactions to skip"),
) -> None:
    """List an account's transactions, newest first."""
    transactions.list_command(account_id, limit, offset)


if __name__ == "__main__":
    app()
