"""SQLite access for the world database."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from config import Config, get_migrations_dir


class DatabaseManager:
    """Opens connections to the world database named in the config.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        self.config = config

    def exists(self) -> bool:
        """Whether the database file has been created yet."""
        return self.get_db_path().is_file()

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection, closing it afterwards.

        The data directory is created on first use. Uncommitted work is
        rolled back when the block raises.
        """
        db_path = self.get_db_path()
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path)
        try:
            yield conn
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_db_path(self) -> Path:
        return self.config.db_path

    def get_migrations_dir(self) -> Path:
        return get_migrations_dir()
