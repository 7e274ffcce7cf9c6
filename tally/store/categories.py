"""Category persistence.

The seeded "Uncategorized" system category is read-only: update and archive
filter it out, so requests against it succeed and change nothing.
"""

import logging
import sqlite3

from tally.domain.models import SYSTEM_CATEGORY_NAME, Category, CategoryId, CreateCategoryRequest

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, name, archived, created_at, display_order, parent_category_id, "
    "default_discretionary, default_fixed, last_used_date, is_system_category"
)


def _optional_bool(value: int | None) -> bool | None:
    return None if value is None else bool(value)


def _row_to_category(row: sqlite3.Row) -> Category:
    return Category(
        id=CategoryId(row["id"]),
        name=row["name"],
        archived=bool(row["archived"]),
        created_at=row["created_at"],
        display_order=row["display_order"],
        parent_category_id=row["parent_category_id"],
        default_discretionary=_optional_bool(row["default_discretionary"]),
        default_fixed=_optional_bool(row["default_fixed"]),
        last_used_date=row["last_used_date"],
        is_system_category=bool(row["is_system_category"]),
    )


class CategoryStore:
    """CRUD over the categories table."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get(self, category_id: int) -> Category | None:
        """Get an active category by id.

        Returns:
            The category, or None if it doesn't exist or is archived.

        Raises:
            sqlite3.Error: If database operation fails.
        """
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM categories WHERE id = ? AND archived = FALSE",
            (category_id,),
        ).fetchone()
        return _row_to_category(row) if row else None

    def get_system_category(self) -> Category | None:
        """Get the seeded "Uncategorized" category."""
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM categories WHERE name = ? AND is_system_category = TRUE ORDER BY id LIMIT 1",
            (SYSTEM_CATEGORY_NAME,),
        ).fetchone()
        return _row_to_category(row) if row else None

    def list_active(self) -> list[Category]:
        """List active categories ordered by display_order (unset last), then name.

        Raises:
            sqlite3.Error: If database operation fails.
        """
        rows = self._conn.execute(
            f"SELECT {_COLUMNS} FROM categories WHERE archived = FALSE "
            "ORDER BY display_order IS NULL, display_order, name"
        ).fetchall()
        return [_row_to_category(row) for row in rows]

    def insert(self, request: CreateCategoryRequest) -> CategoryId:
        """Insert a user category.

        Returns:
            Id of the new category.

        Raises:
            sqlite3.Error: If database operation fails, including an unknown parent id.
        """
        cursor = self._conn.cursor()
        try:
            cursor.execute(
                "INSERT INTO categories (name, display_order, parent_category_id, default_discretionary, "
                "default_fixed, is_system_category) VALUES (?, ?, ?, ?, ?, FALSE)",
                (
                    request.name,
                    request.display_order,
                    request.parent_category_id,
                    request.default_discretionary,
                    request.default_fixed,
                ),
            )
            self._conn.commit()
        except sqlite3.Error:
            self._conn.rollback()
            raise

        category_id = CategoryId(cursor.lastrowid)
        logger.debug("Inserted category %d (%s)", category_id, request.name)
        return category_id

    def update(self, category_id: int, request: CreateCategoryRequest) -> bool:
        """Overwrite the user-settable fields of an active user category.

        Returns:
            True if a row changed, False if the category is missing, archived or a system category.

        Raises:
            sqlite3.Error: If database operation fails.
        """
        cursor = self._conn.cursor()
        try:
            cursor.execute(
                """UPDATE categories
                   SET name = ?, display_order = ?, parent_category_id = ?,
                       default_discretionary = ?, default_fixed = ?
                   WHERE id = ? AND archived = FALSE AND is_system_category = FALSE""",
                (
                    request.name,
                    request.display_order,
                    request.parent_category_id,
                    request.default_discretionary,
                    request.default_fixed,
                    category_id,
                ),
            )
            self._conn.commit()
        except sqlite3.Error:
            self._conn.rollback()
            raise

        changed = cursor.rowcount > 0
        logger.debug("Update category %d: %s", category_id, "changed" if changed else "no-op")
        return changed

    def archive(self, category_id: int) -> bool:
        """Archive an active user category.

        Returns:
            True if archived, False if missing, already archived or a system category.

        Raises:
            sqlite3.Error: If database operation fails.
        """
        cursor = self._conn.cursor()
        try:
            cursor.execute(
                "UPDATE categories SET archived = TRUE WHERE id = ? AND archived = FALSE AND is_system_category = FALSE",
                (category_id,),
            )
            self._conn.commit()
        except sqlite3.Error:
            self._conn.rollback()
            raise

        changed = cursor.rowcount > 0
        logger.debug("Archive category %d: %s", category_id, "changed" if changed else "no-op")
        return changed
