"""SQLite implementation of BackendInstanceRepository."""

from __future__ import annotations

import sqlite3

from terminalist.adapters.sqlite.utils import dump_json, load_json, row_to_dict
from terminalist.models import BackendInstance
from terminalist.repositories import BackendInstanceRepository


def _to_model(row: sqlite3.Row) -> BackendInstance:
    data = row_to_dict(row)
    data["credentials"] = load_json(data.get("credentials"))
    data["settings"] = load_json(data.get("settings"))
    return BackendInstance(**data)


class SqliteBackendInstanceRepository(BackendInstanceRepository):
    """SQLite implementation of backend instance repository.

    Unlike the entity repositories this one is not scoped to a backend; it
    manages the instances themselves.
    """

    def __init__(self, connection: sqlite3.Connection):
        self._connection = connection

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    async def get(self, backend_uuid: str) -> BackendInstance | None:
        row = self.connection.execute(
            "SELECT * FROM backends WHERE uuid = ?", (backend_uuid,)
        ).fetchone()
        return _to_model(row) if row else None

    async def list_all(self, *, enabled_only: bool = False) -> list[BackendInstance]:
        query = "SELECT * FROM backends"
        if enabled_only:
            query += " WHERE is_enabled = 1"
        query += " ORDER BY name ASC"
        return [_to_model(row) for row in self.connection.execute(query).fetchall()]

    async def add(self, instance: BackendInstance) -> BackendInstance:
        self.connection.execute(
            """INSERT INTO backends (
                   uuid, backend_type, name, is_enabled, credentials, settings
               ) VALUES (?, ?, ?, ?, ?, ?)""",
            (
                instance.uuid,
                instance.backend_type,
                instance.name,
                instance.is_enabled,
                dump_json(instance.credentials),
                dump_json(instance.settings),
            ),
        )
        return instance

    async def delete(self, backend_uuid: str) -> None:
        self.connection.execute("DELETE FROM backends WHERE uuid = ?", (backend_uuid,))
