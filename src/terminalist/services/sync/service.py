"""The sync service: reconciles one backend instance with the local cache."""

from __future__ import annotations

from terminalist.backends import BackendRegistry
from terminalist.services.sync.full_sync import FullSyncMixin
from terminalist.services.sync.labels import LabelSyncMixin
from terminalist.services.sync.projects import ProjectSyncMixin
from terminalist.services.sync.tasks import TaskSyncMixin


class SyncService(TaskSyncMixin, ProjectSyncMixin, LabelSyncMixin, FullSyncMixin):
    """Remote-then-local write paths, cached read paths and full sync.

    Args:
        registry: Registry holding the backend gateway and the local storage
        backend_uuid: Backend instance this service reconciles
    """

    @classmethod
    def create(cls, registry: BackendRegistry, backend_uuid: str) -> SyncService:
        """Build a service for a registered backend.

        Raises:
            NotFoundError: If ``backend_uuid`` has no registered gateway
        """
        registry.get_backend(backend_uuid)
        return cls(registry, backend_uuid)

    async def load_all(self):
        """Load every collection a view needs, one lock acquisition each."""
        return (
            await self.get_projects(),
            await self.get_labels(),
            await self.get_sections(),
            await self.get_all_tasks(),
        )
