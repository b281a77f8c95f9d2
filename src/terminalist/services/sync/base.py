"""Shared state and identifier translation for the sync service.

Local uuids and backend remote ids are two separate key spaces. The helpers
in this module are the only place where one is translated into the other.
All of them take a connection that the caller already holds under the
storage lock.
"""

from __future__ import annotations

import logging
import sqlite3

from terminalist.adapters.sqlite import (
    LocalStorage,
    SqliteLabelRepository,
    SqliteProjectRepository,
    SqliteSectionRepository,
    SqliteTaskRepository,
)
from terminalist.backends import Backend, BackendRegistry, BackendTask
from terminalist.exceptions import ResolutionError
from terminalist.models import Task

logger = logging.getLogger(__name__)


class SyncServiceBase:
    """State shared by the sync service mixins.

    Args:
        registry: Registry holding the backend gateway and the local storage
        backend_uuid: Backend instance this service reconciles
    """

    def __init__(self, registry: BackendRegistry, backend_uuid: str):
        self.registry = registry
        self.storage: LocalStorage = registry.storage
        self.backend_uuid = backend_uuid

    def get_backend(self) -> Backend:
        return self.registry.get_backend(self.backend_uuid)

    # ------------------------------------------------------------------
    # Repository factories
    # ------------------------------------------------------------------

    def _tasks(self, conn: sqlite3.Connection) -> SqliteTaskRepository:
        return SqliteTaskRepository(conn, self.backend_uuid)

    def _projects(self, conn: sqlite3.Connection) -> SqliteProjectRepository:
        return SqliteProjectRepository(conn, self.backend_uuid)

    def _sections(self, conn: sqlite3.Connection) -> SqliteSectionRepository:
        return SqliteSectionRepository(conn, self.backend_uuid)

    def _labels(self, conn: sqlite3.Connection) -> SqliteLabelRepository:
        return SqliteLabelRepository(conn, self.backend_uuid)

    # ------------------------------------------------------------------
    # Remote -> local
    # ------------------------------------------------------------------

    async def resolve_local_project(
        self, conn: sqlite3.Connection, remote_project_id: str, operation: str
    ) -> str:
        """Translate a remote project id to the local project uuid.

        Args:
            conn: Connection held under the storage lock
            remote_project_id: Project id assigned by the backend
            operation: What is being done, used in the error message

        Returns:
            Local project uuid

        Raises:
            ResolutionError: If no local project carries this remote id
        """
        project = await self._projects(conn).get_by_remote_id(remote_project_id)
        if project is None:
            raise ResolutionError(
                f"Project with remote_id {remote_project_id} not found locally "
                f"during {operation}. Please sync projects first.",
                remote_id=remote_project_id,
            )
        return project.uuid

    async def resolve_local_section(
        self, conn: sqlite3.Connection, remote_section_id: str | None
    ) -> str | None:
        """Translate a remote section id; unknown sections resolve to None."""
        if not remote_section_id:
            return None
        section = await self._sections(conn).get_by_remote_id(remote_section_id)
        if section is None:
            logger.debug("section %s not cached, dropping link", remote_section_id)
            return None
        return section.uuid

    async def resolve_local_parent_task(
        self, conn: sqlite3.Connection, remote_parent_id: str | None
    ) -> str | None:
        """Translate a remote parent task id; unknown parents resolve to None."""
        if not remote_parent_id:
            return None
        parent = await self._tasks(conn).get_by_remote_id(remote_parent_id)
        return parent.uuid if parent else None

    # ------------------------------------------------------------------
    # Local -> remote
    # ------------------------------------------------------------------

    async def get_project_remote_id(self, project_uuid: str) -> str:
        """Raises NotFoundError for an unknown local project."""
        async with self.storage.session() as conn:
            return await self._projects(conn).get_remote_id(project_uuid)

    async def get_task_remote_id(self, task_uuid: str) -> str:
        """Raises NotFoundError for an unknown local task."""
        async with self.storage.session() as conn:
            return await self._tasks(conn).get_remote_id(task_uuid)

    async def get_label_remote_id(self, label_uuid: str) -> str:
        """Raises NotFoundError for an unknown local label."""
        async with self.storage.session() as conn:
            return await self._labels(conn).get_remote_id(label_uuid)

    # ------------------------------------------------------------------
    # Shared upsert
    # ------------------------------------------------------------------

    async def _upsert_backend_task(
        self,
        conn: sqlite3.Connection,
        backend_task: BackendTask,
        operation: str,
        label_uuids: list[str] | None = None,
    ) -> Task:
        """Store a task as reported by the backend, keyed on its remote id.

        Used by create, restore and full sync. The project link is mandatory
        and fails the call; section and parent links are best-effort. The
        row always comes out with ``is_deleted`` cleared.

        Args:
            conn: Connection inside an open transaction
            backend_task: Remote representation of the task
            operation: Operation name for resolution errors
            label_uuids: Label links to store; None leaves links untouched

        Returns:
            The stored task

        Raises:
            ResolutionError: If the task's project is not cached locally
        """
        project_uuid = await self.resolve_local_project(
            conn, backend_task.project_remote_id, operation
        )
        section_uuid = await self.resolve_local_section(
            conn, backend_task.section_remote_id
        )
        parent_uuid = await self.resolve_local_parent_task(
            conn, backend_task.parent_remote_id
        )

        values = backend_task.model_dump(
            exclude={"project_remote_id", "section_remote_id", "parent_remote_id", "labels"}
        )
        values.update(
            project_uuid=project_uuid,
            section_uuid=section_uuid,
            parent_uuid=parent_uuid,
            is_deleted=False,
        )
        repo = self._tasks(conn)
        task = await repo.upsert(values)
        if label_uuids is not None:
            await repo.set_labels(task.uuid, label_uuids)
            task = task.model_copy(update={"labels": list(label_uuids)})
        return task
