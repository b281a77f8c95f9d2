"""SQLite implementation of TaskRepository."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable
from typing import Any

from terminalist.adapters.sqlite.utils import (
    escape_like,
    generate_uuid,
    placeholders,
    row_to_dict,
)
from terminalist.exceptions import NotFoundError
from terminalist.models import Task
from terminalist.repositories import TaskRepository

# Columns written by upsert/update, in table order (uuid excluded)
TASK_COLUMNS = (
    "backend_uuid",
    "remote_id",
    "content",
    "description",
    "project_uuid",
    "section_uuid",
    "parent_uuid",
    "priority",
    "order_index",
    "due_date",
    "due_datetime",
    "is_recurring",
    "deadline",
    "duration",
    "is_completed",
    "is_deleted",
)

_VISIBLE = "t.is_deleted = 0 AND t.is_completed = 0"
_DISPLAY_ORDER = "t.due_date ASC, t.priority DESC, t.order_index ASC"


class SqliteTaskRepository(TaskRepository):
    """SQLite implementation of task repository.

    The repository never acquires the storage lock itself; callers hand it a
    connection obtained from ``LocalStorage.session()`` or
    ``LocalStorage.transaction()``.
    """

    def __init__(self, connection: sqlite3.Connection, backend_uuid: str):
        """Initialize SQLite task repository.

        Args:
            connection: Connection already held under the storage lock
            backend_uuid: Backend instance whose rows this repository sees
        """
        self._connection = connection
        self.backend_uuid = backend_uuid

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    async def get_by_id(self, task_uuid: str) -> Task | None:
        row = self.connection.execute(
            "SELECT * FROM tasks t WHERE t.uuid = ? AND t.backend_uuid = ?",
            (task_uuid, self.backend_uuid),
        ).fetchone()
        if row is None:
            return None
        return self._to_models([row])[0]

    async def get_by_remote_id(self, remote_id: str) -> Task | None:
        row = self.connection.execute(
            "SELECT * FROM tasks t WHERE t.backend_uuid = ? AND t.remote_id = ?",
            (self.backend_uuid, remote_id),
        ).fetchone()
        if row is None:
            return None
        return self._to_models([row])[0]

    async def get_remote_id(self, task_uuid: str) -> str:
        row = self.connection.execute(
            "SELECT remote_id FROM tasks WHERE uuid = ? AND backend_uuid = ?",
            (task_uuid, self.backend_uuid),
        ).fetchone()
        if row is None:
            raise NotFoundError(f"Task not found: {task_uuid}")
        return row["remote_id"]

    async def find_by_id_prefix(self, prefix: str) -> list[Task]:
        return self._select(
            "t.uuid LIKE ? ESCAPE '\\'",
            (f"{escape_like(prefix.lower())}%",),
            order_by="t.uuid ASC",
        )

    async def list_all(self) -> list[Task]:
        return self._select(_VISIBLE, ())

    async def list_for_project(self, project_uuid: str) -> list[Task]:
        return self._select(
            f"{_VISIBLE} AND t.project_uuid = ?",
            (project_uuid,),
            order_by="t.order_index ASC",
        )

    async def list_with_label(self, label_uuid: str) -> list[Task]:
        return self._select(
            f"{_VISIBLE} AND t.uuid IN "
            "(SELECT task_uuid FROM task_labels WHERE label_uuid = ?)",
            (label_uuid,),
        )

    async def search(self, query: str) -> list[Task]:
        """Search task content, case-insensitively.

        Completed tasks are included so they can be found and restored;
        soft-deleted tasks are not.
        """
        pattern = f"%{escape_like(query.lower())}%"
        return self._select(
            "t.is_deleted = 0 AND lower(t.content) LIKE ? ESCAPE '\\'",
            (pattern,),
        )

    async def list_overdue(self, today: str) -> list[Task]:
        return self._select(
            f"{_VISIBLE} AND t.due_date IS NOT NULL AND t.due_date < ?",
            (today,),
        )

    async def list_due_on(self, day: str) -> list[Task]:
        return self._select(
            f"{_VISIBLE} AND t.due_date = ?",
            (day,),
            order_by="t.priority DESC, t.order_index ASC",
        )

    async def list_due_between(self, after: str, until: str) -> list[Task]:
        return self._select(
            f"{_VISIBLE} AND t.due_date > ? AND t.due_date <= ?",
            (after, until),
        )

    async def upsert(self, values: dict[str, Any]) -> Task:
        """Insert a task keyed on (backend_uuid, remote_id).

        An existing row with the same remote id keeps its local uuid and has
        every other column overwritten, including ``is_deleted`` which the
        caller passes as False for freshly created tasks.

        Args:
            values: Column values; ``backend_uuid`` is forced to this
                repository's backend

        Returns:
            The stored task
        """
        data = {column: values.get(column) for column in TASK_COLUMNS}
        data["backend_uuid"] = self.backend_uuid
        for flag in ("is_recurring", "is_completed", "is_deleted"):
            data[flag] = bool(data[flag])
        data["priority"] = data["priority"] or 1
        data["order_index"] = data["order_index"] or 0

        columns = ("uuid",) + TASK_COLUMNS
        updates = ", ".join(
            f"{column} = excluded.{column}"
            for column in TASK_COLUMNS
            if column not in ("backend_uuid", "remote_id")
        )
        self.connection.execute(
            f"""INSERT INTO tasks ({", ".join(columns)})
                VALUES ({placeholders(len(columns))})
                ON CONFLICT(backend_uuid, remote_id) DO UPDATE SET {updates}""",
            (generate_uuid(), *(data[column] for column in TASK_COLUMNS)),
        )
        task = await self.get_by_remote_id(data["remote_id"])
        if task is None:
            raise NotFoundError(f"Task {data['remote_id']} missing after upsert")
        return task

    async def update(self, task: Task) -> None:
        columns = [c for c in TASK_COLUMNS if c not in ("backend_uuid", "remote_id")]
        values = task.model_dump(include=set(columns))
        self.connection.execute(
            f"UPDATE tasks SET {', '.join(f'{c} = ?' for c in columns)} "
            "WHERE uuid = ? AND backend_uuid = ?",
            (*(values[c] for c in columns), task.uuid, self.backend_uuid),
        )

    async def delete(self, task_uuid: str) -> None:
        self.connection.execute(
            "DELETE FROM tasks WHERE uuid = ? AND backend_uuid = ?",
            (task_uuid, self.backend_uuid),
        )

    async def set_labels(self, task_uuid: str, label_uuids: Iterable[str]) -> None:
        self.connection.execute("DELETE FROM task_labels WHERE task_uuid = ?", (task_uuid,))
        self.connection.executemany(
            "INSERT OR IGNORE INTO task_labels (task_uuid, label_uuid) VALUES (?, ?)",
            [(task_uuid, label_uuid) for label_uuid in label_uuids],
        )

    async def delete_missing(self, remote_ids: Iterable[str]) -> int:
        keep = list(remote_ids)
        query = "DELETE FROM tasks WHERE backend_uuid = ?"
        if keep:
            query += f" AND remote_id NOT IN ({placeholders(len(keep))})"
        cursor = self.connection.execute(query, (self.backend_uuid, *keep))
        return cursor.rowcount

    def _select(
        self,
        where: str,
        params: tuple[Any, ...],
        order_by: str = _DISPLAY_ORDER,
    ) -> list[Task]:
        rows = self.connection.execute(
            f"SELECT t.* FROM tasks t WHERE t.backend_uuid = ? AND {where} "
            f"ORDER BY {order_by}",
            (self.backend_uuid, *params),
        ).fetchall()
        return self._to_models(rows)

    def _to_models(self, rows: list[sqlite3.Row]) -> list[Task]:
        """Convert rows to Task models with their label ids attached."""
        if not rows:
            return []
        task_dicts = [row_to_dict(row) for row in rows]
        uuids = [task["uuid"] for task in task_dicts]

        labels: dict[str, list[str]] = {task_uuid: [] for task_uuid in uuids}
        cursor = self.connection.execute(
            f"SELECT task_uuid, label_uuid FROM task_labels "
            f"WHERE task_uuid IN ({placeholders(len(uuids))})",
            uuids,
        )
        for row in cursor.fetchall():
            labels[row["task_uuid"]].append(row["label_uuid"])

        return [Task(**task, labels=labels[task["uuid"]]) for task in task_dicts]
