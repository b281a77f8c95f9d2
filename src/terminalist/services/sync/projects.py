"""Project and section operations of the sync service."""

from __future__ import annotations

import logging

from terminalist.backends import CreateProjectArgs, UpdateProjectArgs
from terminalist.models import Project, Section
from terminalist.services.sync.base import SyncServiceBase

logger = logging.getLogger(__name__)


class ProjectSyncMixin(SyncServiceBase):
    """Project reads and writes."""

    async def get_projects(self) -> list[Project]:
        async with self.storage.session() as conn:
            return await self._projects(conn).list_all()

    async def get_sections(self) -> list[Section]:
        async with self.storage.session() as conn:
            return await self._sections(conn).list_all()

    async def get_sections_for_project(self, project_uuid: str) -> list[Section]:
        async with self.storage.session() as conn:
            return await self._sections(conn).list_for_project(project_uuid)

    async def create_project(self, name: str, parent_uuid: str | None = None) -> Project:
        """Create a project remotely and cache it.

        Args:
            name: Project name
            parent_uuid: Optional local id of the parent project

        Returns:
            The cached project

        Raises:
            NotFoundError: If ``parent_uuid`` is unknown locally
            BackendError: If the backend call fails
        """
        parent_remote_id = None
        if parent_uuid is not None:
            parent_remote_id = await self.get_project_remote_id(parent_uuid)

        backend_project = await self.get_backend().create_project(
            CreateProjectArgs(name=name, parent_remote_id=parent_remote_id)
        )

        async with self.storage.transaction() as conn:
            repo = self._projects(conn)
            parent = None
            if backend_project.parent_remote_id:
                parent = await repo.get_by_remote_id(backend_project.parent_remote_id)
            values = backend_project.model_dump(exclude={"parent_remote_id", "color"})
            values["parent_uuid"] = parent.uuid if parent else None
            project = await repo.upsert(values)
        logger.info("created project %s (remote %s)", project.uuid, project.remote_id)
        return project

    async def update_project_content(self, project_uuid: str, name: str) -> None:
        """Rename a project."""
        remote_id = await self.get_project_remote_id(project_uuid)
        backend_project = await self.get_backend().update_project(
            remote_id, UpdateProjectArgs(name=name)
        )
        async with self.storage.transaction() as conn:
            await self._projects(conn).rename(project_uuid, backend_project.name)

    async def delete_project(self, project_uuid: str) -> None:
        """Delete a project remotely and locally; its cached tasks go with it."""
        remote_id = await self.get_project_remote_id(project_uuid)
        await self.get_backend().delete_project(remote_id)
        async with self.storage.transaction() as conn:
            await self._projects(conn).delete(project_uuid)
        logger.info("deleted project %s", project_uuid)
