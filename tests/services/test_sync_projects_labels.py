"""Tests for the project and label paths of SyncService."""

from __future__ import annotations

import pytest

from fakes import count_rows, local_project, remote_task
from terminalist.backends import BackendLabel
from terminalist.exceptions import BackendError, NotFoundError

# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


class TestProjects:
    @pytest.mark.asyncio
    async def test_inbox_listed_first(self, synced_service):
        projects = await synced_service.get_projects()
        assert [p.remote_id for p in projects] == ["P-INBOX", "P-WORK"]

    @pytest.mark.asyncio
    async def test_create_with_parent(self, synced_service, fake_backend):
        work = await local_project(synced_service, "P-WORK")

        child = await synced_service.create_project("Reports", parent_uuid=work.uuid)

        (args,), = fake_backend.calls_to("create_project")
        assert args.parent_remote_id == "P-WORK"
        assert child.parent_uuid == work.uuid
        assert child.name == "Reports"

    @pytest.mark.asyncio
    async def test_create_with_unknown_parent_fails(self, synced_service, fake_backend):
        with pytest.raises(NotFoundError):
            await synced_service.create_project("Reports", parent_uuid="nope")
        assert fake_backend.calls_to("create_project") == []

    @pytest.mark.asyncio
    async def test_rename(self, synced_service, fake_backend):
        work = await local_project(synced_service, "P-WORK")

        await synced_service.update_project_content(work.uuid, "Office")

        assert fake_backend.calls_to("update_project")[0][0] == "P-WORK"
        assert (await local_project(synced_service, "P-WORK")).name == "Office"

    @pytest.mark.asyncio
    async def test_delete_drops_cached_tasks(self, sync_service, fake_backend):
        fake_backend.tasks = [remote_task("T-1", "a", "P-WORK")]
        await sync_service.sync()
        work = await local_project(sync_service, "P-WORK")

        await sync_service.delete_project(work.uuid)

        assert await local_project(sync_service, "P-WORK") is None
        assert await count_rows(sync_service, "tasks") == 0

    @pytest.mark.asyncio
    async def test_failed_delete_keeps_project(self, synced_service, fake_backend):
        work = await local_project(synced_service, "P-WORK")
        fake_backend.fail_with = BackendError("forbidden", status_code=403)

        with pytest.raises(BackendError):
            await synced_service.delete_project(work.uuid)
        assert await local_project(synced_service, "P-WORK") is not None


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


class TestLabels:
    @pytest.mark.asyncio
    async def test_create_and_lookup_by_name(self, synced_service, fake_backend):
        label = await synced_service.create_label("errands")

        assert (await synced_service.get_label_by_name("errands")).uuid == label.uuid
        assert [lbl.name for lbl in await synced_service.get_labels()] == ["errands"]

    @pytest.mark.asyncio
    async def test_rename(self, synced_service, fake_backend):
        label = await synced_service.create_label("errands")

        await synced_service.update_label_content(label.uuid, "chores")

        assert await synced_service.get_label_by_name("errands") is None
        assert (await synced_service.get_label_by_name("chores")).uuid == label.uuid

    @pytest.mark.asyncio
    async def test_delete_unlinks_tasks(self, sync_service, fake_backend):
        fake_backend.labels = [BackendLabel(remote_id="L-1", name="home")]
        fake_backend.tasks = [remote_task("T-1", "Vacuum", "P-WORK", labels=["home"])]
        await sync_service.sync()
        label = await sync_service.get_label_by_name("home")
        assert len(await sync_service.get_tasks_with_label(label.uuid)) == 1

        await sync_service.delete_label(label.uuid)

        assert fake_backend.calls_to("delete_label") == [("L-1",)]
        assert await count_rows(sync_service, "task_labels") == 0
        assert await count_rows(sync_service, "tasks") == 1

    @pytest.mark.asyncio
    async def test_unknown_label_fails_before_remote_call(self, synced_service, fake_backend):
        with pytest.raises(NotFoundError):
            await synced_service.delete_label("nope")
        assert fake_backend.calls_to("delete_label") == []
