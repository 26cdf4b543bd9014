"""Shared pytest fixtures for all tests."""

import random
import sqlite3
import pytest
from pathlib import Path

from config import Config, get_migrations_dir
from services.base import Services
from services.category_tree import CategoryTreeStore
from tests.helpers import CategoryHolder, FakeClock, run_migrations


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary directory.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "worldsmith",
        db_data_dir=tmp_path / "worldsmith" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "worldsmith" / "logs",
        category_id_prefix="category",
    )


@pytest.fixture
def db_manager_with_schema(test_db):
    """Create a database manager over the in-memory database with migrations applied.

    Args:
        test_db: In-memory database connection fixture.

    Returns:
        A database manager with the same interface as DatabaseManager.
    """
    run_migrations(test_db, get_migrations_dir())

    class TestDatabaseManager:
        """Test database manager that uses in-memory connection."""

        def __init__(self, conn):
            self.conn = conn

        def connect(self):
            return _TestConnectionContext(self.conn)

        def exists(self):
            return True

        def get_db_path(self):
            return Path(":memory:")

        def get_migrations_dir(self):
            return get_migrations_dir()

    class _TestConnectionContext:
        """Context manager that leaves the shared connection open."""

        def __init__(self, conn):
            self.conn = conn

        def __enter__(self):
            return self.conn

        def __exit__(self, exc_type, exc_val, exc_tb):
            pass

    return TestDatabaseManager(test_db)


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Create a Services container with test database.

    Args:
        test_config: Test configuration fixture.
        db_manager_with_schema: Database manager with schema set up.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config, db_manager=db_manager_with_schema)


@pytest.fixture
def holder():
    """An in-memory owner for the category collection."""
    return CategoryHolder()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(holder, clock):
    """A CategoryTreeStore over an empty in-memory collection."""
    return CategoryTreeStore(
        get_categories=holder.get,
        set_categories=holder.set,
        clock=clock,
        rng=random.Random(42),
    )
