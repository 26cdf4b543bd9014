"""Helper utilities for tests."""

from pathlib import Path
import sqlite3
from typing import List

from db.migrator import apply_pending
from models.category import Category


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order."""
    apply_pending(conn, migrations_dir)


class CategoryHolder:
    """Owns a category list the way a caller of the tree store would.

    Records every collection handed back so tests can count commits.
    """

    def __init__(self, categories: List[Category] = None):
        self.categories = list(categories or [])
        self.commits: List[List[Category]] = []

    def get(self) -> List[Category]:
        return self.categories

    def set(self, categories: List[Category]) -> None:
        self.categories = categories
        self.commits.append(categories)


class FakeClock:
    """Clock that stays frozen unless advanced."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_category(id, name=None, parent_id="", order=0, **kwargs) -> Category:
    return Category(
        id=id,
        name=name if name is not None else id.title(),
        parent_id=parent_id,
        order=order,
        **kwargs,
    )
