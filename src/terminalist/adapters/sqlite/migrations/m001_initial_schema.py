"""Initial cache schema: backends, projects, sections, labels, tasks, task_labels."""

import sqlite3

from terminalist.adapters.sqlite import schema
from .runner import Migration


class InitialSchemaMigration(Migration):
    """Migration 001: Create the initial cache schema."""

    @property
    def version(self) -> int:
        return 1

    @property
    def description(self) -> str:
        return "Create cache tables and remote id indexes"

    def up(self, connection: sqlite3.Connection) -> None:
        for create_statement in schema.ALL_TABLES:
            connection.execute(create_statement)
        for index_statement in schema.ALL_INDEXES:
            connection.execute(index_statement)


initial_migration = InitialSchemaMigration()

ALL_MIGRATIONS = [initial_migration]
