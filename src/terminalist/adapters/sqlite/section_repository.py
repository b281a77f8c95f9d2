"""SQLite implementation of SectionRepository."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable
from typing import Any

from terminalist.adapters.sqlite.utils import generate_uuid, placeholders, row_to_dict
from terminalist.exceptions import NotFoundError
from terminalist.models import Section
from terminalist.repositories import SectionRepository


class SqliteSectionRepository(SectionRepository):
    """SQLite implementation of section repository."""

    def __init__(self, connection: sqlite3.Connection, backend_uuid: str):
        self._connection = connection
        self.backend_uuid = backend_uuid

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    async def get_by_remote_id(self, remote_id: str) -> Section | None:
        row = self.connection.execute(
            "SELECT * FROM sections WHERE backend_uuid = ? AND remote_id = ?",
            (self.backend_uuid, remote_id),
        ).fetchone()
        return Section(**row_to_dict(row)) if row else None

    async def get_remote_id(self, section_uuid: str) -> str | None:
        row = self.connection.execute(
            "SELECT remote_id FROM sections WHERE uuid = ? AND backend_uuid = ?",
            (section_uuid, self.backend_uuid),
        ).fetchone()
        return row["remote_id"] if row else None

    async def list_all(self) -> list[Section]:
        rows = self.connection.execute(
            "SELECT * FROM sections WHERE backend_uuid = ? ORDER BY order_index ASC",
            (self.backend_uuid,),
        ).fetchall()
        return [Section(**row_to_dict(row)) for row in rows]

    async def list_for_project(self, project_uuid: str) -> list[Section]:
        rows = self.connection.execute(
            """SELECT * FROM sections WHERE backend_uuid = ? AND project_uuid = ?
               ORDER BY order_index ASC""",
            (self.backend_uuid, project_uuid),
        ).fetchall()
        return [Section(**row_to_dict(row)) for row in rows]

    async def upsert(self, values: dict[str, Any]) -> Section:
        remote_id = values["remote_id"]
        self.connection.execute(
            """INSERT INTO sections (
                   uuid, backend_uuid, remote_id, name, project_uuid, order_index
               ) VALUES (?, ?, ?, ?, ?, ?)
               ON CONFLICT(backend_uuid, remote_id) DO UPDATE SET
                   name = excluded.name,
                   project_uuid = excluded.project_uuid,
                   order_index = excluded.order_index""",
            (
                generate_uuid(),
                self.backend_uuid,
                remote_id,
                values["name"],
                values["project_uuid"],
                values.get("order_index") or 0,
            ),
        )
        section = await self.get_by_remote_id(remote_id)
        if section is None:
            raise NotFoundError(f"Section {remote_id} missing after upsert")
        return section

    async def delete_missing(self, remote_ids: Iterable[str]) -> int:
        keep = list(remote_ids)
        query = "DELETE FROM sections WHERE backend_uuid = ?"
        if keep:
            query += f" AND remote_id NOT IN ({placeholders(len(keep))})"
        return self.connection.execute(query, (self.backend_uuid, *keep)).rowcount
