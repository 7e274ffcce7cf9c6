#!/usr/bin/env python3
"""Generate database schema reference documentation from actual schema."""

import sqlite3
from pathlib import Path

from tally.store.schema import IN_MEMORY, get_db_path, open_database

TABLE_DESCRIPTIONS = {
    "accounts": "Financial accounts. Archived accounts are hidden but never deleted.",
    "categories": "Spending categories, optionally nested via parent_category_id.",
    "transactions": "Money movements on one account, optionally categorized.",
    "transfers": "Links the two sides of an account-to-account transfer.",
}

# Column descriptions, keyed by (table, column) with a per-column fallback
COLUMN_DESCRIPTIONS = {
    ("*", "id"): "Unique identifier",
    ("*", "name"): "Display name",
    ("*", "created_at"): "Creation timestamp (UTC)",
    ("*", "archived"): "Soft-delete flag",
    ("*", "display_order"): "Sort key for listings; NULL sorts after explicit orders",
    ("accounts", "type"): "Account type tag (checking, savings, credit, ...)",
    ("accounts", "updated_at"): "Last update timestamp (UTC)",
    ("accounts", "current_balance"): "Balance in cents",
    ("accounts", "institution"): "Bank or institution name",
    ("accounts", "include_in_net_worth"): "Counted in net worth",
    ("accounts", "account_number_last4"): "Last 4 digits of the account number",
    ("categories", "parent_category_id"): "Parent category (cycles are not prevented)",
    ("categories", "default_discretionary"): "Default discretionary classification",
    ("categories", "default_fixed"): "Default fixed-cost classification",
    ("categories", "last_used_date"): "Date the category was last used",
    ("categories", "is_system_category"): "Protected row; cannot be edited or archived",
    ("transactions", "account_id"): "Owning account",
    ("transactions", "date"): "Transaction date (YYYY-MM-DD)",
    ("transactions", "amount"): "Signed amount in cents (negative for money out)",
    ("transactions", "description"): "Free-text description",
    ("transactions", "category_id"): "Category, if any",
    ("transactions", "pending"): "Not yet posted",
    ("transactions", "transaction_type"): "Type tag ('expense' for manual entry)",
    ("transactions", "cleared"): "Cleared by the bank",
    ("transactions", "reconciled"): "Reconciled against a statement",
    ("transactions", "import_id"): "Deduplication key for imported rows",
    ("transactions", "source"): "Where the row came from ('manual' for manual entry)",
    ("transactions", "payee"): "Payee",
    ("transactions", "original_description"): "Description before normalization",
    ("transactions", "memo"): "Memo",
    ("transfers", "from_transaction_id"): "Outgoing side",
    ("transfers", "to_transaction_id"): "Incoming side",
    ("transfers", "transfer_type"): "Transfer type tag",
    ("transfers", "auto_created"): "Created automatically rather than by the user",
}


def describe_column(table: str, column: str) -> str:
    """Look up a column description."""
    return COLUMN_DESCRIPTIONS.get((table, column)) or COLUMN_DESCRIPTIONS.get(("*", column), "")


def generate_table_doc(conn: sqlite3.Connection, table: str) -> str:
    """Generate markdown documentation for a table."""
    references = {
        row["from"]: f"{row['table']}({row['to']})"
        for row in conn.execute(f"PRAGMA foreign_key_list({table})").fetchall()
    }

    lines = [
        f"### {table}",
        "",
        TABLE_DESCRIPTIONS.get(table, ""),
        "",
        "| Column | Type | Constraints | Description |",
        "|--------|------|-------------|-------------|",
    ]

    for col in conn.execute(f"PRAGMA table_info({table})").fetchall():
        constraints = []
        if col["pk"]:
            constraints.append("PRIMARY KEY")
        if col["notnull"]:
            constraints.append("NOT NULL")
        if col["dflt_value"] is not None:
            constraints.append(f"DEFAULT {col['dflt_value']}")
        if col["name"] in references:
            constraints.append(f"REFERENCES {references[col['name']]}")
        lines.append(
            f"| {col['name']} | {col['type']} | {' '.join(constraints) or '—'} | {describe_column(table, col['name'])} |"
        )

    lines.append("")
    return "\n".join(lines)


def generate_schema_reference() -> str:
    """Generate complete schema reference documentation."""
    conn = open_database(IN_MEMORY)
    try:
        tables = [
            row["name"]
            for row in conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY rowid"
            ).fetchall()
        ]

        lines = [
            "---",
            "tags: [reference]",
            "---",
            "",
            "# Database Schema Reference",
            "",
            "tally uses SQLite to store all data locally.",
            "",
            "## Database Location",
            "",
            f"Default: `{get_db_path()}` (override with `database_path` in config.toml)",
            "",
            "## Tables",
            "",
        ]
        lines.extend(generate_table_doc(conn, table) for table in tables)
    finally:
        conn.close()

    lines.extend(
        [
            "## Currency Storage",
            "",
            "All monetary amounts are stored as integers representing cents to prevent floating-point precision errors.",
            "Values are rounded half away from zero when converted, so 1.005 is stored as 101.",
            "Amounts must fit a signed 64-bit INTEGER (about +/-92 quadrillion); larger values are rejected.",
            "",
            "Examples:",
            "- $10.50 is stored as 1050",
            "- $100.00 is stored as 10000",
            "- -$42.99 (expense) is stored as -4299",
            "",
            "## Notes",
            "",
            "- A single `Uncategorized` category with `is_system_category = TRUE` is seeded on first run.",
            "- Updates and archives only affect active rows; requests against missing rows change nothing.",
            "- Foreign keys are enforced per connection with `PRAGMA foreign_keys = ON`.",
            "- Listings use `ORDER BY display_order IS NULL, display_order, name`. A plain `ORDER BY display_order`",
            "  in SQLite would put NULL rows first; here rows without an order come after ordered ones.",
            "",
        ]
    )

    return "\n".join(lines)


def main() -> None:
    """Generate and write schema reference documentation."""
    output_path = Path(__file__).parent.parent / "docs" / "schema.md"
    output_path.parent.mkdir(parents=True, exist_ok=True)

    doc = generate_schema_reference()

    output_path.write_text(doc)
    print(f"Generated schema reference at {output_path}")


if __name__ == "__main__":
    main()
