"""Category service for database operations.

Stores the flat category collection. The tree store reads it with
find_all() and writes it back with replace_all().
"""

from typing import List, Optional, Sequence
from models.category import Category

_COLUMNS = "id, name, description, color, parent_id, sort_order"


def _row_to_category(row) -> Category:
    return Category(
        id=row[0],
        name=row[1],
        description=row[2],
        color=row[3],
        parent_id=row[4],
        order=row[5],
    )


class CategoryService:
    """Service for managing the persisted category collection."""

    def __init__(self, db_manager):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Category]:
        """Get all categories from the database.

        Returns:
            List of Category objects, in the order they were last saved.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_COLUMNS} FROM categories ORDER BY position"
            )
            return [_row_to_category(row) for row in cursor.fetchall()]

    def find(self, category_id: str) -> Optional[Category]:
        """Get a single category by ID.

        Args:
            category_id: The category ID to find.

        Returns:
            Category object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_COLUMNS} FROM categories WHERE id = ?",
                (category_id,),
            )
            row = cursor.fetchone()

            if row:
                return _row_to_category(row)
            return None

    def count(self) -> int:
        with self.db_manager.connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM categories").fetchone()[0]

    def replace_all(self, categories: Sequence[Category]) -> None:
        """Replace the stored collection with the given one.

        Runs as a single transaction; position records list order.

        Args:
            categories: The complete collection to store.

        Raises:
            sqlite3.IntegrityError: If two categories share an id. Nothing is
                written in that case.
        """
        with self.db_manager.connect() as conn:
            try:
                conn.execute("DELETE FROM categories")
                conn.executemany(
                    "INSERT INTO categories "
                    "(id, name, description, color, parent_id, sort_order, position) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?)",
                    [
                        (
                            c.id,
                            c.name,
                            c.description or "",
                            c.color or "",
                            c.parent_id or "",
                            c.order,
                            position,
                        )
                        for position, c in enumerate(categories)
                    ],
                )
                conn.commit()
            except Exception:
                conn.rollback()
                raise
