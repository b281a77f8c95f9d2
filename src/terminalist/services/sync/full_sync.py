"""Whole-dataset sync: replace the cached view of one backend instance."""

from __future__ import annotations

import logging
import sqlite3
from enum import Enum

from terminalist.backends import BackendLabel, BackendProject, BackendSection, BackendTask
from terminalist.exceptions import ResolutionError
from terminalist.services.sync.base import SyncServiceBase

logger = logging.getLogger(__name__)


class SyncStatus(str, Enum):
    SUCCESS = "success"
    ALREADY_RUNNING = "already_running"


class FullSyncMixin(SyncServiceBase):
    """Full sync of projects, sections, labels and tasks."""

    _syncing: bool = False

    @property
    def is_syncing(self) -> bool:
        return self._syncing

    async def sync(self) -> SyncStatus:
        """Fetch everything from the backend and reconcile the cache.

        All four collections are fetched before the lock is taken. They are
        then applied in one transaction, in dependency order, and rows whose
        remote ids the backend no longer reports are removed.

        Returns:
            SyncStatus.SUCCESS, or SyncStatus.ALREADY_RUNNING when another
            sync of this service is in flight

        Raises:
            BackendError: If any fetch fails (the cache is left untouched)
        """
        if self._syncing:
            logger.info("sync already running for backend %s", self.backend_uuid)
            return SyncStatus.ALREADY_RUNNING

        self._syncing = True
        try:
            backend = self.get_backend()
            projects = await backend.fetch_projects()
            sections = await backend.fetch_sections()
            labels = await backend.fetch_labels()
            tasks = await backend.fetch_tasks()

            async with self.storage.transaction() as conn:
                await self._store_projects(conn, projects)
                await self._store_sections(conn, sections)
                label_ids = await self._store_labels(conn, labels)
                stored = await self._store_tasks(conn, tasks, label_ids)

            logger.info(
                "sync complete: %d projects, %d sections, %d labels, %d tasks",
                len(projects),
                len(sections),
                len(labels),
                stored,
            )
            return SyncStatus.SUCCESS
        finally:
            self._syncing = False

    async def _store_projects(
        self, conn: sqlite3.Connection, projects: list[BackendProject]
    ) -> None:
        repo = self._projects(conn)
        # First pass creates every row, second pass links parents
        local_ids: dict[str, str] = {}
        for project in projects:
            values = project.model_dump(exclude={"parent_remote_id", "color"})
            local_ids[project.remote_id] = (await repo.upsert(values)).uuid
        for project in projects:
            if project.parent_remote_id:
                await repo.set_parent(
                    local_ids[project.remote_id], local_ids.get(project.parent_remote_id)
                )
        removed = await repo.delete_missing(local_ids)
        if removed:
            logger.info("removed %d stale project(s)", removed)

    async def _store_sections(
        self, conn: sqlite3.Connection, sections: list[BackendSection]
    ) -> None:
        repo = self._sections(conn)
        kept: list[str] = []
        for section in sections:
            project = await self._projects(conn).get_by_remote_id(section.project_remote_id)
            if project is None:
                logger.warning(
                    "skipping section %s: project %s not cached",
                    section.remote_id,
                    section.project_remote_id,
                )
                continue
            values = section.model_dump(exclude={"project_remote_id"})
            values["project_uuid"] = project.uuid
            await repo.upsert(values)
            kept.append(section.remote_id)
        await repo.delete_missing(kept)

    async def _store_labels(
        self, conn: sqlite3.Connection, labels: list[BackendLabel]
    ) -> dict[str, str]:
        """Store labels and return a name -> local uuid map for task links."""
        repo = self._labels(conn)
        by_name: dict[str, str] = {}
        for label in labels:
            by_name[label.name] = (await repo.upsert(label.model_dump())).uuid
        await repo.delete_missing(label.remote_id for label in labels)
        return by_name

    async def _store_tasks(
        self,
        conn: sqlite3.Connection,
        tasks: list[BackendTask],
        label_ids: dict[str, str],
    ) -> int:
        repo = self._tasks(conn)
        kept: list[str] = []
        orphans: list[BackendTask] = []
        for backend_task in tasks:
            links = [label_ids[name] for name in backend_task.labels if name in label_ids]
            try:
                task = await self._upsert_backend_task(conn, backend_task, "sync", links)
            except ResolutionError as e:
                logger.warning("skipping task %s: %s", backend_task.remote_id, e)
                continue
            kept.append(backend_task.remote_id)
            if backend_task.parent_remote_id and task.parent_uuid is None:
                orphans.append(backend_task)

        # Children listed before their parent get linked once every row exists
        for backend_task in orphans:
            parent_uuid = await self.resolve_local_parent_task(
                conn, backend_task.parent_remote_id
            )
            task = await repo.get_by_remote_id(backend_task.remote_id)
            if parent_uuid and task is not None:
                await repo.update(task.model_copy(update={"parent_uuid": parent_uuid}))

        removed = await repo.delete_missing(kept)
        if removed:
            logger.info("removed %d task(s) no longer on the backend", removed)
        return len(kept)
