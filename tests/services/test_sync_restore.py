"""Tests for SyncService.restore_task."""

from __future__ import annotations

import pytest
import pytest_asyncio

from fakes import count_rows, local_project, local_task, remote_task
from terminalist.exceptions import BackendError, NotFoundError


@pytest_asyncio.fixture
async def service(sync_service, fake_backend):
    fake_backend.tasks = [
        remote_task(
            "T-1",
            "Renew passport",
            "P-WORK",
            description="bring photos",
            priority=3,
            due_date="2026-06-01",
        ),
    ]
    await sync_service.sync()
    return sync_service


class TestRestoreDeleted:
    @pytest.mark.asyncio
    async def test_recreates_with_new_identity(self, service, fake_backend):
        old = await local_task(service, "T-1")
        await service.delete_task(old.uuid)

        restored = await service.restore_task(old.uuid)

        assert restored.uuid != old.uuid
        assert restored.remote_id != "T-1"
        assert restored.is_deleted is False
        assert await service.get_task_by_id(old.uuid) is None
        assert await count_rows(service, "tasks", "is_deleted = 0") == 1
        assert await count_rows(service, "tasks") == 1

    @pytest.mark.asyncio
    async def test_recreate_carries_cached_fields(self, service, fake_backend):
        old = await local_task(service, "T-1")
        work = await local_project(service, "P-WORK")
        await service.delete_task(old.uuid)

        restored = await service.restore_task(old.uuid)

        (args,), = fake_backend.calls_to("create_task")
        assert args.content == "Renew passport"
        assert args.description == "bring photos"
        assert args.project_remote_id == "P-WORK"
        assert args.priority == 3
        assert args.due_date == "2026-06-01"
        assert restored.project_uuid == work.uuid

    @pytest.mark.asyncio
    async def test_recreate_omits_empty_description(self, service, fake_backend):
        old = await local_task(service, "T-1")
        async with service.storage.session() as conn:
            conn.execute("UPDATE tasks SET description = '' WHERE uuid = ?", (old.uuid,))
        await service.delete_task(old.uuid)

        await service.restore_task(old.uuid)

        (args,), = fake_backend.calls_to("create_task")
        assert args.description is None
        assert args.content == "Renew passport"

    @pytest.mark.asyncio
    async def test_backend_failure_keeps_soft_deleted_row(self, service, fake_backend):
        old = await local_task(service, "T-1")
        await service.delete_task(old.uuid)
        fake_backend.fail_with = BackendError("offline")

        with pytest.raises(BackendError):
            await service.restore_task(old.uuid)

        stored = await service.get_task_by_id(old.uuid)
        assert stored.is_deleted is True


class TestRestoreCompleted:
    @pytest.mark.asyncio
    async def test_reopens_in_place(self, service, fake_backend):
        task = await local_task(service, "T-1")
        await service.complete_task(task.uuid)

        restored = await service.restore_task(task.uuid)

        assert restored.uuid == task.uuid
        assert restored.is_completed is False
        assert fake_backend.calls_to("reopen_task") == [("T-1",)]
        assert fake_backend.calls_to("create_task") == []
        assert (await local_task(service, "T-1")).is_completed is False


class TestRestoreMissing:
    @pytest.mark.asyncio
    async def test_unknown_task_raises(self, service, fake_backend):
        with pytest.raises(NotFoundError):
            await service.restore_task("missing")
        assert fake_backend.calls_to("reopen_task") == []
        assert fake_backend.calls_to("create_task") == []
