"""Migration framework for the local cache schema.

Migrations are sequential, forward-only and recorded in ``schema_version``.
They run automatically when a connection is opened.
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from datetime import UTC, datetime

logger = logging.getLogger(__name__)


class Migration(ABC):
    """Base class for database migrations."""

    @property
    @abstractmethod
    def version(self) -> int:
        """Migration version number (sequential)."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of the migration."""

    @abstractmethod
    def up(self, connection: sqlite3.Connection) -> None:
        """Execute forward migration.

        Args:
            connection: Database connection, already inside a transaction
        """


class MigrationRunner:
    """Applies pending migrations to a connection."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection
        self.connection.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                description TEXT NOT NULL,
                applied_at DATETIME NOT NULL
            )
        """)

    def get_current_version(self) -> int:
        """Return the highest applied version (0 if none)."""
        result = self.connection.execute("SELECT MAX(version) FROM schema_version").fetchone()[0]
        return result if result is not None else 0

    def run_migration(self, migration: Migration) -> None:
        """Run a single migration inside its own transaction.

        Raises:
            ValueError: If the migration is not newer than the current version
            RuntimeError: If the migration fails (the transaction is rolled back)
        """
        current_version = self.get_current_version()
        if migration.version <= current_version:
            raise ValueError(
                f"Migration version {migration.version} is not greater than "
                f"current version {current_version}"
            )

        self.connection.execute("BEGIN")
        try:
            migration.up(self.connection)
            self.connection.execute(
                "INSERT INTO schema_version (version, description, applied_at) VALUES (?, ?, ?)",
                (migration.version, migration.description, datetime.now(UTC).isoformat()),
            )
            self.connection.execute("COMMIT")
        except Exception as e:
            self.connection.execute("ROLLBACK")
            raise RuntimeError(f"Migration {migration.version} failed: {e}") from e

        logger.info("applied migration %s: %s", migration.version, migration.description)

    def run_migrations(self, migrations: list[Migration]) -> int:
        """Run all pending migrations in version order.

        Returns:
            Number of migrations applied
        """
        current_version = self.get_current_version()
        pending = [m for m in sorted(migrations, key=lambda m: m.version) if m.version > current_version]
        for migration in pending:
            self.run_migration(migration)
        return len(pending)
