"""SQLite implementation of ProjectRepository."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable
from typing import Any

from terminalist.adapters.sqlite.utils import generate_uuid, placeholders, row_to_dict
from terminalist.exceptions import NotFoundError
from terminalist.models import Project
from terminalist.repositories import ProjectRepository


class SqliteProjectRepository(ProjectRepository):
    """SQLite implementation of project repository."""

    def __init__(self, connection: sqlite3.Connection, backend_uuid: str):
        self._connection = connection
        self.backend_uuid = backend_uuid

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    async def get_by_id(self, project_uuid: str) -> Project | None:
        row = self.connection.execute(
            "SELECT * FROM projects WHERE uuid = ? AND backend_uuid = ?",
            (project_uuid, self.backend_uuid),
        ).fetchone()
        return Project(**row_to_dict(row)) if row else None

    async def get_by_remote_id(self, remote_id: str) -> Project | None:
        row = self.connection.execute(
            "SELECT * FROM projects WHERE backend_uuid = ? AND remote_id = ?",
            (self.backend_uuid, remote_id),
        ).fetchone()
        return Project(**row_to_dict(row)) if row else None

    async def get_remote_id(self, project_uuid: str) -> str:
        row = self.connection.execute(
            "SELECT remote_id FROM projects WHERE uuid = ? AND backend_uuid = ?",
            (project_uuid, self.backend_uuid),
        ).fetchone()
        if row is None:
            raise NotFoundError(f"Project not found: {project_uuid}")
        return row["remote_id"]

    async def get_inbox(self) -> Project | None:
        """Get the inbox project.

        Nothing prevents several rows carrying the inbox flag; the one with
        the lowest order index wins.
        """
        row = self.connection.execute(
            """SELECT * FROM projects
               WHERE backend_uuid = ? AND is_inbox_project = 1
               ORDER BY order_index ASC, name ASC
               LIMIT 1""",
            (self.backend_uuid,),
        ).fetchone()
        return Project(**row_to_dict(row)) if row else None

    async def list_all(self) -> list[Project]:
        rows = self.connection.execute(
            """SELECT * FROM projects WHERE backend_uuid = ?
               ORDER BY is_inbox_project DESC, order_index ASC, name ASC""",
            (self.backend_uuid,),
        ).fetchall()
        return [Project(**row_to_dict(row)) for row in rows]

    async def upsert(self, values: dict[str, Any]) -> Project:
        """Insert a project keyed on (backend_uuid, remote_id).

        Args:
            values: remote_id, name and optionally is_favorite,
                is_inbox_project, order_index, parent_uuid

        Returns:
            The stored project
        """
        remote_id = values["remote_id"]
        self.connection.execute(
            """INSERT INTO projects (
                   uuid, backend_uuid, remote_id, name, is_favorite,
                   is_inbox_project, order_index, parent_uuid
               ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
               ON CONFLICT(backend_uuid, remote_id) DO UPDATE SET
                   name = excluded.name,
                   is_favorite = excluded.is_favorite,
                   is_inbox_project = excluded.is_inbox_project,
                   order_index = excluded.order_index,
                   parent_uuid = excluded.parent_uuid""",
            (
                generate_uuid(),
                self.backend_uuid,
                remote_id,
                values["name"],
                bool(values.get("is_favorite", False)),
                bool(values.get("is_inbox_project", False)),
                values.get("order_index") or 0,
                values.get("parent_uuid"),
            ),
        )
        project = await self.get_by_remote_id(remote_id)
        if project is None:
            raise NotFoundError(f"Project {remote_id} missing after upsert")
        return project

    async def set_parent(self, project_uuid: str, parent_uuid: str | None) -> None:
        self.connection.execute(
            "UPDATE projects SET parent_uuid = ? WHERE uuid = ? AND backend_uuid = ?",
            (parent_uuid, project_uuid, self.backend_uuid),
        )

    async def rename(self, project_uuid: str, name: str) -> None:
        self.connection.execute(
            "UPDATE projects SET name = ? WHERE uuid = ? AND backend_uuid = ?",
            (name, project_uuid, self.backend_uuid),
        )

    async def delete(self, project_uuid: str) -> None:
        self.connection.execute(
            "DELETE FROM projects WHERE uuid = ? AND backend_uuid = ?",
            (project_uuid, self.backend_uuid),
        )

    async def delete_missing(self, remote_ids: Iterable[str]) -> int:
        keep = list(remote_ids)
        query = "DELETE FROM projects WHERE backend_uuid = ?"
        if keep:
            query += f" AND remote_id NOT IN ({placeholders(len(keep))})"
        return self.connection.execute(query, (self.backend_uuid, *keep)).rowcount
