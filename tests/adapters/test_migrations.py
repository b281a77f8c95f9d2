"""Tests for connection setup and the migration runner."""

from __future__ import annotations

import sqlite3
import stat

import pytest

from terminalist.adapters.sqlite import DatabaseConnection, default_db_path, open_connection
from terminalist.adapters.sqlite.migrations import ALL_MIGRATIONS, Migration, MigrationRunner


class _AddNotesMigration(Migration):
    @property
    def version(self) -> int:
        return 2

    @property
    def description(self) -> str:
        return "Add notes"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute("CREATE TABLE notes (id INTEGER PRIMARY KEY)")


class _BrokenMigration(Migration):
    @property
    def version(self) -> int:
        return 2

    @property
    def description(self) -> str:
        return "Broken"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute("CREATE TABLE half_done (id INTEGER)")
        connection.execute("THIS IS NOT SQL")


def _tables(conn: sqlite3.Connection) -> set[str]:
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    return {row[0] for row in rows}


# ---------------------------------------------------------------------------
# open_connection
# ---------------------------------------------------------------------------


class TestOpenConnection:
    def test_creates_schema(self, tmp_path):
        conn = open_connection(tmp_path / "cache.db")
        try:
            assert {
                "backends",
                "projects",
                "sections",
                "labels",
                "tasks",
                "task_labels",
                "schema_version",
            } <= _tables(conn)
            assert MigrationRunner(conn).get_current_version() == len(ALL_MIGRATIONS)
        finally:
            conn.close()

    def test_enables_foreign_keys_and_autocommit(self, tmp_path):
        conn = open_connection(tmp_path / "cache.db")
        try:
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
            assert conn.isolation_level is None
        finally:
            conn.close()

    def test_new_database_is_owner_only(self, tmp_path):
        path = tmp_path / "nested" / "cache.db"
        open_connection(path).close()

        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_reopen_does_not_reapply(self, tmp_path):
        open_connection(tmp_path / "cache.db").close()
        conn = open_connection(tmp_path / "cache.db")
        try:
            count = conn.execute("SELECT COUNT(*) FROM schema_version").fetchone()[0]
            assert count == len(ALL_MIGRATIONS)
        finally:
            conn.close()

    def test_in_memory(self):
        conn = open_connection(":memory:")
        try:
            assert "tasks" in _tables(conn)
        finally:
            conn.close()


class TestDatabaseConnection:
    def test_default_path_under_data_dir(self, tmp_path):
        assert default_db_path() == tmp_path / "data" / "cache.db"

    def test_reuses_connection_for_same_path(self, tmp_path):
        first = DatabaseConnection.get_connection(tmp_path / "a.db")
        second = DatabaseConnection.get_connection(tmp_path / "a.db")
        assert first is second
        assert DatabaseConnection.get_db_path() == tmp_path / "a.db"

    def test_switching_path_opens_new_connection(self, tmp_path):
        first = DatabaseConnection.get_connection(tmp_path / "a.db")
        second = DatabaseConnection.get_connection(tmp_path / "b.db")
        assert first is not second
        assert DatabaseConnection.get_db_path() == tmp_path / "b.db"


# ---------------------------------------------------------------------------
# MigrationRunner
# ---------------------------------------------------------------------------


class TestMigrationRunner:
    def test_applies_pending_only(self, tmp_path):
        conn = open_connection(tmp_path / "cache.db")
        try:
            runner = MigrationRunner(conn)
            applied = runner.run_migrations([*ALL_MIGRATIONS, _AddNotesMigration()])
            assert applied == 1
            assert runner.get_current_version() == 2
            assert "notes" in _tables(conn)
        finally:
            conn.close()

    def test_rejects_old_version(self, tmp_path):
        conn = open_connection(tmp_path / "cache.db")
        try:
            with pytest.raises(ValueError, match="not greater"):
                MigrationRunner(conn).run_migration(ALL_MIGRATIONS[0])
        finally:
            conn.close()

    def test_failed_migration_rolls_back(self, tmp_path):
        conn = open_connection(tmp_path / "cache.db")
        try:
            runner = MigrationRunner(conn)
            with pytest.raises(RuntimeError, match="Migration 2 failed"):
                runner.run_migration(_BrokenMigration())
            assert "half_done" not in _tables(conn)
            assert runner.get_current_version() == 1
        finally:
            conn.close()
