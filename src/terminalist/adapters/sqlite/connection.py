"""Database connection management for the local SQLite cache.

Connections are opened in autocommit mode (``isolation_level=None``) so that
transactions are always explicit: ``LocalStorage.transaction()`` issues
BEGIN/COMMIT/ROLLBACK itself.
"""

from __future__ import annotations

import atexit
import logging
import os
import sqlite3
from pathlib import Path

from platformdirs import user_data_dir

from terminalist.adapters.sqlite.migrations import ALL_MIGRATIONS, MigrationRunner

logger = logging.getLogger(__name__)

_APP_NAME = "terminalist"
_DB_FILE = "cache.db"


def default_db_path() -> Path:
    """Return the default cache location inside the user data dir."""
    return Path(user_data_dir(_APP_NAME)) / _DB_FILE


def open_connection(db_path: str | Path) -> sqlite3.Connection:
    """Open and configure a new connection, running pending migrations.

    Args:
        db_path: Path to the database file, or ":memory:"

    Returns:
        sqlite3.Connection configured for terminalist usage
    """
    is_memory = str(db_path) == ":memory:"
    is_new_database = False
    if not is_memory:
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not db_path.exists()

    connection = sqlite3.connect(
        str(db_path),
        check_same_thread=False,
        timeout=30.0,
        isolation_level=None,
    )
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys = ON")
    if not is_memory:
        connection.execute("PRAGMA journal_mode = WAL")

    # Owner read/write only; the backends table holds API tokens
    if is_new_database:
        os.chmod(db_path, 0o600)

    applied = MigrationRunner(connection).run_migrations(ALL_MIGRATIONS)
    if applied:
        logger.info("database %s migrated (%d migrations)", db_path, applied)

    return connection


class DatabaseConnection:
    """Process-wide connection manager.

    Provides:
    - Single connection per process (connection reuse)
    - Automatic directory creation and migrations
    - Graceful cleanup on exit
    """

    _instance: DatabaseConnection | None = None
    _connection: sqlite3.Connection | None = None
    _db_path: Path | None = None

    def __new__(cls) -> DatabaseConnection:
        """Ensure singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def get_connection(cls, db_path: str | Path | None = None) -> sqlite3.Connection:
        """Get or create the shared connection.

        Args:
            db_path: Path to database file. If None, uses default location.
        """
        instance = cls()
        db_path = default_db_path() if db_path is None else Path(db_path)

        if instance._connection is not None and instance._db_path == db_path:
            return instance._connection

        if instance._connection is not None:
            instance._connection.close()

        instance._connection = open_connection(db_path)
        instance._db_path = db_path
        atexit.register(cls.close_connection)
        return instance._connection

    @classmethod
    def close_connection(cls) -> None:
        """Close the shared connection if open."""
        instance = cls()
        if instance._connection is not None:
            try:
                instance._connection.close()
            except sqlite3.Error:
                logger.warning("error while closing database", exc_info=True)
            finally:
                instance._connection = None
                instance._db_path = None

    @classmethod
    def get_db_path(cls) -> Path | None:
        """Get current database path."""
        return cls()._db_path


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Helper function to get the shared database connection."""
    return DatabaseConnection.get_connection(db_path)
