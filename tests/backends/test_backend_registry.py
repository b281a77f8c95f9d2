"""Tests for BackendRegistry."""

from __future__ import annotations

import pytest

from fakes import BACKEND_UUID, FakeBackend
from terminalist.adapters.sqlite import SqliteBackendInstanceRepository
from terminalist.backends import BackendRegistry, TodoistBackend
from terminalist.exceptions import BackendError, NotFoundError
from terminalist.models import BackendInstance


class TestBackendRegistry:
    @pytest.mark.asyncio
    async def test_add_instance_persists_and_registers(self, storage):
        registry = BackendRegistry(storage)

        instance = await registry.add_backend_instance(
            "todoist", "Personal", {"api_token": "tok"}, {"timeout": 5}
        )

        assert isinstance(registry.get_backend(instance.uuid), TodoistBackend)
        stored = {i.uuid: i for i in await registry.list_instances()}
        assert stored[instance.uuid].credentials == {"api_token": "tok"}

    @pytest.mark.asyncio
    async def test_add_unknown_type_fails(self, storage):
        with pytest.raises(BackendError, match="Unknown backend type"):
            await BackendRegistry(storage).add_backend_instance("trello", "x", {})

    @pytest.mark.asyncio
    async def test_add_without_token_fails_and_stores_nothing(self, storage):
        registry = BackendRegistry(storage)

        with pytest.raises(BackendError, match="api_token"):
            await registry.add_backend_instance("todoist", "Empty", {})
        assert [i.uuid for i in await registry.list_instances()] == [BACKEND_UUID]

    @pytest.mark.asyncio
    async def test_load_backends_skips_unknown_and_disabled(self, storage):
        async with storage.transaction() as conn:
            repo = SqliteBackendInstanceRepository(conn)
            await repo.add(
                BackendInstance(
                    uuid="b-todoist", backend_type="todoist", name="T",
                    credentials={"api_token": "tok"},
                )
            )
            await repo.add(
                BackendInstance(
                    uuid="b-off", backend_type="todoist", name="Off",
                    credentials={"api_token": "tok"}, is_enabled=False,
                )
            )

        registry = BackendRegistry(storage)
        loaded = await registry.load_backends()

        # The fixture row has type "fake", which no factory knows
        assert loaded == 1
        assert registry.backend_uuids == ["b-todoist"]
        assert not registry.has_backend("b-off")

    def test_get_unregistered_raises(self, storage):
        with pytest.raises(NotFoundError):
            BackendRegistry(storage).get_backend("missing")

    @pytest.mark.asyncio
    async def test_remove_instance_drops_gateway_and_cache(self, registry, synced_service):
        assert await synced_service.get_projects()

        await registry.remove_backend_instance(BACKEND_UUID)

        assert not registry.has_backend(BACKEND_UUID)
        assert await synced_service.get_projects() == []

    @pytest.mark.asyncio
    async def test_remove_unknown_instance_raises(self, storage):
        registry = BackendRegistry(storage)
        registry.register_backend("ghost", FakeBackend())

        with pytest.raises(NotFoundError):
            await registry.remove_backend_instance("ghost")
        assert registry.has_backend("ghost")
