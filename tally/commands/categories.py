"""Category commands (list, show, add, update, archive, tree)."""

import sqlite3
from dataclasses import replace

from rich.table import Table
from rich.tree import Tree

from tally.commands.common import console, database, fail, load_settings, yes_no
from tally.domain.categories import find_cycle, walk_tree
from tally.domain.models import CreateCategoryRequest
from tally.store.categories import CategoryStore


def list_command() -> None:
    """List active categories in display order."""
    settings = load_settings()

    with database(settings) as conn:
        try:
            categories = CategoryStore(conn).list_active()
        except sqlite3.Error as e:
            fail(f"Failed to get categories: {e}")

    table = Table(title=f"Categories ({len(categories)})")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Parent", justify="right")
    table.add_column("Order", justify="right")
    table.add_column("Discretionary", justify="center")
    table.add_column("Fixed", justify="center")

    for category in categories:
        name = category.name
        if category.is_system_category:
            name += " [dim](system)[/dim]"
        table.add_row(
            str(category.id),
            name,
            str(category.parent_category_id) if category.parent_category_id is not None else "[dim]-[/dim]",
            str(category.display_order) if category.display_order is not None else "[dim]-[/dim]",
            yes_no(category.default_discretionary),
            yes_no(category.default_fixed),
        )

    console.print(table)


def show_command(category_id: int) -> None:
    """Show one active category."""
    settings = load_settings()

    with database(settings) as conn:
        try:
            category = CategoryStore(conn).get(category_id)
        except sqlite3.Error as e:
            fail(f"Failed to get category: {e}")

    if category is None:
        console.print(f"[yellow]Category {category_id} not found[/yellow]")
        return

    console.print(f"[bold cyan]{category.name}[/bold cyan] [dim](ID {category.id})[/dim]")
    if category.is_system_category:
        console.print("  [dim]System category - cannot be edited or archived[/dim]")
    console.print(f"  Parent: {category.parent_category_id if category.parent_category_id is not None else '-'}")
    console.print(f"  Display order: {category.display_order if category.display_order is not None else '-'}")
    console.print(f"  Discretionary: {yes_no(category.default_discretionary)}")
    console.print(f"  Fixed: {yes_no(category.default_fixed)}")
    console.print(f"  Last used: {category.last_used_date or '-'}")
    console.print(f"  [dim]Created {category.created_at}[/dim]")


def add_command(
    name: str,
    parent_id: int | None = None,
    display_order: int | None = None,
    discretionary: bool | None = None,
    fixed: bool | None = None,
) -> None:
    """Add a user category."""
    request = CreateCategoryRequest(
        name=name,
        display_order=display_order,
        parent_category_id=parent_id,
        default_discretionary=discretionary,
        default_fixed=fixed,
    )

    settings = load_settings()
    with database(settings) as conn:
        try:
            category_id = CategoryStore(conn).insert(request)
        except sqlite3.Error as e:
            fail(f"Failed to add category: {e}")

    console.print(f"[green]✓[/green] Added category {name} (ID: {category_id})")


def update_command(
    category_id: int,
    name: str | None = None,
    parent_id: int | None = None,
    display_order: int | None = None,
    discretionary: bool | None = None,
    fixed: bool | None = None,
) -> None:
    """Update a category, keeping any field that isn't given."""
    settings = load_settings()

    with database(settings) as conn:
        store = CategoryStore(conn)
        try:
            current = store.get(category_id)
            if current is None:
                console.print(f"[yellow]Category {category_id} not found or archived; nothing to update[/yellow]")
                return

            request = CreateCategoryRequest(
                name=current.name,
                display_order=current.display_order,
                parent_category_id=current.parent_category_id,
                default_discretionary=current.default_discretionary,
                default_fixed=current.default_fixed,
            )
            changes = {
                "name": name,
                "parent_category_id": parent_id,
                "display_order": display_order,
                "default_discretionary": discretionary,
                "default_fixed": fixed,
            }
            request = replace(request, **{key: value for key, value in changes.items() if value is not None})

            changed = store.update(category_id, request)
        except sqlite3.Error as e:
            fail(f"Failed to update category: {e}")

    if changed:
        console.print(f"[green]✓[/green] Updated category {category_id}")
    else:
        console.print(f"[yellow]Category {category_id} is a system category; nothing to update[/yellow]")


def archive_command(category_id: int) -> None:
    """Archive a user category."""
    settings = load_settings()

    with database(settings) as conn:
        try:
            changed = CategoryStore(conn).archive(category_id)
        except sqlite3.Error as e:
            fail(f"Failed to archive category: {e}")

    if changed:
        console.print(f"[green]✓[/green] Archived category {category_id}")
    else:
        console.print(f"[yellow]Category {category_id} not found, already archived, or a system category[/yellow]")


def tree_command() -> None:
    """Show active categories as a tree."""
    settings = load_settings()

    with database(settings) as conn:
        try:
            categories = CategoryStore(conn).list_active()
        except sqlite3.Error as e:
            fail(f"Failed to get categories: {e}")

    root = Tree("[bold]Categories[/bold]")
    branches: list[Tree] = [root]
    for depth, category in walk_tree(categories):
        del branches[depth + 1 :]
        label = category.name + (" [dim](system)[/dim]" if category.is_system_category else "")
        branches.append(branches[depth].add(f"{label} [dim]#{category.id}[/dim]"))

    console.print(root)

    cycle = find_cycle(categories)
    if cycle:
        console.print(f"[yellow]Not shown: parent links loop through {' -> '.join(map(str, cycle))}[/yellow]")
