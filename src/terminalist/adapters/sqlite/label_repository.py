"""SQLite implementation of LabelRepository."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable
from typing import Any

from terminalist.adapters.sqlite.utils import generate_uuid, placeholders, row_to_dict
from terminalist.exceptions import NotFoundError
from terminalist.models import Label
from terminalist.repositories import LabelRepository


class SqliteLabelRepository(LabelRepository):
    """SQLite implementation of label repository."""

    def __init__(self, connection: sqlite3.Connection, backend_uuid: str):
        self._connection = connection
        self.backend_uuid = backend_uuid

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    async def get_by_id(self, label_uuid: str) -> Label | None:
        row = self.connection.execute(
            "SELECT * FROM labels WHERE uuid = ? AND backend_uuid = ?",
            (label_uuid, self.backend_uuid),
        ).fetchone()
        return Label(**row_to_dict(row)) if row else None

    async def get_by_remote_id(self, remote_id: str) -> Label | None:
        row = self.connection.execute(
            "SELECT * FROM labels WHERE backend_uuid = ? AND remote_id = ?",
            (self.backend_uuid, remote_id),
        ).fetchone()
        return Label(**row_to_dict(row)) if row else None

    async def get_by_name(self, name: str) -> Label | None:
        row = self.connection.execute(
            "SELECT * FROM labels WHERE backend_uuid = ? AND lower(name) = lower(?)",
            (self.backend_uuid, name),
        ).fetchone()
        return Label(**row_to_dict(row)) if row else None

    async def get_remote_id(self, label_uuid: str) -> str:
        row = self.connection.execute(
            "SELECT remote_id FROM labels WHERE uuid = ? AND backend_uuid = ?",
            (label_uuid, self.backend_uuid),
        ).fetchone()
        if row is None:
            raise NotFoundError(f"Label not found: {label_uuid}")
        return row["remote_id"]

    async def list_all(self) -> list[Label]:
        rows = self.connection.execute(
            """SELECT * FROM labels WHERE backend_uuid = ?
               ORDER BY is_favorite DESC, order_index ASC, name ASC""",
            (self.backend_uuid,),
        ).fetchall()
        return [Label(**row_to_dict(row)) for row in rows]

    async def upsert(self, values: dict[str, Any]) -> Label:
        remote_id = values["remote_id"]
        self.connection.execute(
            """INSERT INTO labels (
                   uuid, backend_uuid, remote_id, name, color, order_index, is_favorite
               ) VALUES (?, ?, ?, ?, ?, ?, ?)
               ON CONFLICT(backend_uuid, remote_id) DO UPDATE SET
                   name = excluded.name,
                   color = excluded.color,
                   order_index = excluded.order_index,
                   is_favorite = excluded.is_favorite""",
            (
                generate_uuid(),
                self.backend_uuid,
                remote_id,
                values["name"],
                values.get("color"),
                values.get("order_index") or 0,
                bool(values.get("is_favorite", False)),
            ),
        )
        label = await self.get_by_remote_id(remote_id)
        if label is None:
            raise NotFoundError(f"Label {remote_id} missing after upsert")
        return label

    async def rename(self, label_uuid: str, name: str) -> None:
        self.connection.execute(
            "UPDATE labels SET name = ? WHERE uuid = ? AND backend_uuid = ?",
            (name, label_uuid, self.backend_uuid),
        )

    async def delete(self, label_uuid: str) -> None:
        self.connection.execute(
            "DELETE FROM labels WHERE uuid = ? AND backend_uuid = ?",
            (label_uuid, self.backend_uuid),
        )

    async def delete_missing(self, remote_ids: Iterable[str]) -> int:
        keep = list(remote_ids)
        query = "DELETE FROM labels WHERE backend_uuid = ?"
        if keep:
            query += f" AND remote_id NOT IN ({placeholders(len(keep))})"
        return self.connection.execute(query, (self.backend_uuid, *keep)).rowcount
