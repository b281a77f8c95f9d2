"""Label operations of the sync service."""

from __future__ import annotations

import logging

from terminalist.backends import CreateLabelArgs, UpdateLabelArgs
from terminalist.models import Label
from terminalist.services.sync.base import SyncServiceBase

logger = logging.getLogger(__name__)


class LabelSyncMixin(SyncServiceBase):
    """Label reads and writes."""

    async def get_labels(self) -> list[Label]:
        async with self.storage.session() as conn:
            return await self._labels(conn).list_all()

    async def get_label_by_name(self, name: str) -> Label | None:
        async with self.storage.session() as conn:
            return await self._labels(conn).get_by_name(name)

    async def create_label(self, name: str) -> Label:
        backend_label = await self.get_backend().create_label(CreateLabelArgs(name=name))
        async with self.storage.transaction() as conn:
            label = await self._labels(conn).upsert(backend_label.model_dump())
        logger.info("created label %s (remote %s)", label.uuid, label.remote_id)
        return label

    async def update_label_content(self, label_uuid: str, name: str) -> None:
        remote_id = await self.get_label_remote_id(label_uuid)
        backend_label = await self.get_backend().update_label(
            remote_id, UpdateLabelArgs(name=name)
        )
        async with self.storage.transaction() as conn:
            await self._labels(conn).rename(label_uuid, backend_label.name)

    async def delete_label(self, label_uuid: str) -> None:
        """Delete a label; task links to it are dropped by cascade."""
        remote_id = await self.get_label_remote_id(label_uuid)
        await self.get_backend().delete_label(remote_id)
        async with self.storage.transaction() as conn:
            await self._labels(conn).delete(label_uuid)
        logger.info("deleted label %s", label_uuid)
