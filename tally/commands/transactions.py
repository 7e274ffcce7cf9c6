"""Transaction commands (add, list)."""

import sqlite3

from rich.markup import escape
from rich.table import Table

from tally.commands.accounts import parse_amount
from tally.commands.common import console, database, fail, load_settings
from tally.dates import normalize_date
from tally.domain.money import format_money, to_minor_units
from tally.store.transactions import TransactionStore


def add_command(
    account_id: int,
    date: str,
    amount: str,
    description: str | None = None,
    payee: str | None = None,
    memo: str | None = None,
    category_id: int | None = None,
    pending: bool = False,
    cleared: bool = False,
) -> None:
    """Add a transaction manually.

    Args:
        account_id: Account the money moved on.
        date: Transaction date (YYYY-MM-DD, DD/MM/YYYY, or other formats).
        amount: Amount in major units (negative for expenses, positive for income).
        description: Optional description.
        payee: Optional payee.
        memo: Optional memo.
        category_id: Optional category id.
        pending: Mark as pending.
        cleared: Mark as cleared.
    """
    try:
        normalized_date = normalize_date(date)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        fail("Transaction not added")

    value = parse_amount(amount)
    settings = load_settings()

    with database(settings) as conn:
        try:
            transaction_id = TransactionStore(conn).insert(
                account_id,
                normalized_date,
                value,
                description=description,
                payee=payee,
                memo=memo,
                category_id=category_id,
                pending=pending,
                cleared=cleared,
            )
        except sqlite3.IntegrityError as e:
            fail(f"Failed to add transaction: unknown account or category ({e})")
        except sqlite3.Error as e:
            fail(f"Failed to add transaction: {e}")

    console.print(f"[green]✓[/green] Transaction added (ID: {transaction_id}):")
    console.print(f"  Date: {normalized_date}")
    console.print(f"  Amount: {format_money(to_minor_units(value), settings['currency_symbol'])}")
    if description:
        console.print(f"  Description: {description}")
    if payee:
        console.print(f"  Payee: {payee}")


def list_command(account_id: int, limit: int | None = None, offset: int = 0) -> None:
    """List transactions for one account, newest first."""
    settings = load_settings()
    symbol = settings["currency_symbol"]
    if limit is not None:
        page_size = limit
    else:
        try:
            page_size = int(settings["page_size"])
        except (TypeError, ValueError):
            fail(f"Invalid page_size in config: {settings['page_size']!r}")

    with database(settings) as conn:
        try:
            transactions = TransactionStore(conn).list_by_account(account_id, page_size, offset)
        except sqlite3.Error as e:
            fail(f"Failed to get transactions: {e}")

    if not transactions:
        console.print("[yellow]No transactions found[/yellow]")
        return

    table = Table(title=f"Transactions for account {account_id} (showing {len(transactions)} from {offset + 1})")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Payee")
    table.add_column("Amount", justify="right")
    table.add_column("Category", justify="right", style="magenta")
    table.add_column("Status", justify="center")

    for txn in transactions:
        cents = to_minor_units(txn.amount)
        amount_display = format_money(cents, symbol)
        amount_display = f"[red]{amount_display}[/red]" if cents < 0 else f"[green]{amount_display}[/green]"

        if txn.reconciled:
            status = "R"
        elif txn.cleared:
            status = "✓"
        elif txn.pending:
            status = "…"
        else:
            status = "○"

        table.add_row(
            str(txn.id),
            txn.date,
            txn.description or "[dim]-[/dim]",
            txn.payee or "[dim]-[/dim]",
            amount_display,
            str(txn.category_id) if txn.category_id is not None else "[dim]-[/dim]",
            status,
        )

    console.print(table)
