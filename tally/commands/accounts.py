"""Account commands (list, show, add, update, archive)."""

import sqlite3
from dataclasses import replace
from decimal import Decimal, InvalidOperation

from rich.table import Table

from tally.commands.common import console, database, fail, load_settings, yes_no
from tally.domain.models import Account, CreateAccountRequest
from tally.domain.money import format_money, to_minor_units
from tally.store.accounts import AccountStore


def parse_amount(text: str) -> Decimal:
    """Parse a user-entered amount such as '1,000.50' or '-25'."""
    try:
        amount = Decimal(text.replace(",", "").strip())
        to_minor_units(amount)
    except (InvalidOperation, ValueError):
        fail(f"Invalid amount: {text}")
    return amount


def _balance_display(account: Account, symbol: str) -> str:
    if account.current_balance is None:
        return "[dim]-[/dim]"
    cents = to_minor_units(account.current_balance)
    text = format_money(cents, symbol)
    return f"[red]{text}[/red]" if cents < 0 else f"[green]{text}[/green]"


def list_command() -> None:
    """List active accounts in display order."""
    settings = load_settings()
    symbol = settings["currency_symbol"]

    with database(settings) as conn:
        try:
            accounts = AccountStore(conn).list_active()
        except sqlite3.Error as e:
            fail(f"Failed to get accounts: {e}")

    if not accounts:
        console.print("[yellow]No accounts found[/yellow]")
        return

    table = Table(title=f"Accounts ({len(accounts)})")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Institution")
    table.add_column("Balance", justify="right")
    table.add_column("Net worth", justify="center")

    for account in accounts:
        table.add_row(
            str(account.id),
            account.name,
            account.account_type,
            account.institution or "[dim]-[/dim]",
            _balance_display(account, symbol),
            yes_no(account.include_in_net_worth),
        )

    console.print(table)


def show_command(account_id: int) -> None:
    """Show one active account."""
    settings = load_settings()

    with database(settings) as conn:
        try:
            account = AccountStore(conn).get(account_id)
        except sqlite3.Error as e:
            fail(f"Failed to get account: {e}")

    if account is None:
        console.print(f"[yellow]Account {account_id} not found[/yellow]")
        return

    console.print(f"[bold cyan]{account.name}[/bold cyan] [dim](ID {account.id})[/dim]")
    console.print(f"  Type: {account.account_type}")
    console.print(f"  Institution: {account.institution or '-'}")
    console.print(f"  Balance: {_balance_display(account, settings['currency_symbol'])}")
    console.print(f"  Account number: {'****' + account.account_number_last4 if account.account_number_last4 else '-'}")
    console.print(f"  Display order: {account.display_order if account.display_order is not None else '-'}")
    console.print(f"  Include in net worth: {yes_no(account.include_in_net_worth)}")
    console.print(f"  [dim]Created {account.created_at}, updated {account.updated_at}[/dim]")


def add_command(
    name: str,
    account_type: str,
    institution: str | None = None,
    balance: str | None = None,
    display_order: int | None = None,
    include_in_net_worth: bool | None = None,
    last4: str | None = None,
) -> None:
    """Add a new account."""
    request = CreateAccountRequest(
        name=name,
        account_type=account_type,
        institution=institution,
        current_balance=parse_amount(balance) if balance is not None else None,
        display_order=display_order,
        include_in_net_worth=include_in_net_worth,
        account_number_last4=last4,
    )

    settings = load_settings()
    with database(settings) as conn:
        try:
            account_id = AccountStore(conn).insert(request)
        except sqlite3.Error as e:
            fail(f"Failed to add account: {e}")

    console.print(f"[green]✓[/green] Added account {name} (ID: {account_id})")


def update_command(
    account_id: int,
    name: str | None = None,
    account_type: str | None = None,
    institution: str | None = None,
    balance: str | None = None,
    display_order: int | None = None,
    include_in_net_worth: bool | None = None,
    last4: str | None = None,
) -> None:
    """Update an account, keeping any field that isn't given."""
    settings = load_settings()

    with database(settings) as conn:
        store = AccountStore(conn)
        try:
            current = store.get(account_id)
            if current is None:
                console.print(f"[yellow]Account {account_id} not found or archived; nothing to update[/yellow]")
                return

            request = CreateAccountRequest(
                name=current.name,
                account_type=current.account_type,
                institution=current.institution,
                current_balance=current.current_balance,
                display_order=current.display_order,
                include_in_net_worth=current.include_in_net_worth,
                account_number_last4=current.account_number_last4,
            )
            changes = {
                "name": name,
                "account_type": account_type,
                "institution": institution,
                "current_balance": parse_amount(balance) if balance is not None else None,
                "display_order": display_order,
                "include_in_net_worth": include_in_net_worth,
                "account_number_last4": last4,
            }
            request = replace(request, **{key: value for key, value in changes.items() if value is not None})

            changed = store.update(account_id, request)
        except sqlite3.Error as e:
            fail(f"Failed to update account: {e}")

    if changed:
        console.print(f"[green]✓[/green] Updated account {account_id}")
    else:
        console.print(f"[yellow]Account {account_id} not found or archived; nothing to update[/yellow]")


def archive_command(account_id: int) -> None:
    """Archive an account."""
    settings = load_settings()

    with database(settings) as conn:
        try:
            changed = AccountStore(conn).archive(account_id)
        except sqlite3.Error as e:
            fail(f"Failed to archive account: {e}")

    if changed:
        console.print(f"[green]✓[/green] Archived account {account_id}")
    else:
        console.print(f"[yellow]Account {account_id} not found or already archived[/yellow]")
