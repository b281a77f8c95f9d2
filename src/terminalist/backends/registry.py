"""Registry of live backend gateways, one per configured backend instance."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from terminalist.adapters.sqlite import LocalStorage, SqliteBackendInstanceRepository
from terminalist.adapters.sqlite.utils import generate_uuid
from terminalist.backends.base import Backend
from terminalist.backends.todoist import TodoistBackend
from terminalist.exceptions import BackendError, NotFoundError
from terminalist.models import BackendInstance

logger = logging.getLogger(__name__)


def _build_todoist(instance: BackendInstance) -> Backend:
    token = instance.credentials.get("api_token")
    if not token:
        raise BackendError(f"Backend '{instance.name}' has no api_token configured")
    options: dict[str, Any] = {}
    if "base_url" in instance.settings:
        options["base_url"] = instance.settings["base_url"]
    if "timeout" in instance.settings:
        options["timeout"] = float(instance.settings["timeout"])
    return TodoistBackend(token, **options)


BACKEND_FACTORIES: dict[str, Callable[[BackendInstance], Backend]] = {
    "todoist": _build_todoist,
}


class BackendRegistry:
    """Maps backend instance uuids to gateway objects.

    The registry owns the ``LocalStorage`` that sync services built on top of
    it share.
    """

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self._backends: dict[str, Backend] = {}

    async def load_backends(self) -> int:
        """Build gateways for every enabled backend instance.

        Instances of an unknown kind are skipped with a warning.

        Returns:
            Number of gateways loaded
        """
        async with self.storage.session() as conn:
            instances = await SqliteBackendInstanceRepository(conn).list_all(
                enabled_only=True
            )

        loaded = 0
        for instance in instances:
            factory = BACKEND_FACTORIES.get(instance.backend_type)
            if factory is None:
                logger.warning(
                    "skipping backend %s: unknown type %s",
                    instance.uuid,
                    instance.backend_type,
                )
                continue
            self._backends[instance.uuid] = factory(instance)
            loaded += 1
        logger.info("loaded %d backend(s)", loaded)
        return loaded

    def register_backend(self, backend_uuid: str, backend: Backend) -> None:
        self._backends[backend_uuid] = backend

    def get_backend(self, backend_uuid: str) -> Backend:
        """Get the gateway of a backend instance.

        Raises:
            NotFoundError: If no gateway is registered under ``backend_uuid``
        """
        try:
            return self._backends[backend_uuid]
        except KeyError:
            raise NotFoundError(f"Backend not registered: {backend_uuid}") from None

    def has_backend(self, backend_uuid: str) -> bool:
        return backend_uuid in self._backends

    @property
    def backend_uuids(self) -> list[str]:
        return list(self._backends)

    async def add_backend_instance(
        self,
        backend_type: str,
        name: str,
        credentials: dict[str, Any],
        settings: dict[str, Any] | None = None,
    ) -> BackendInstance:
        """Store a new backend instance and register its gateway.

        Raises:
            BackendError: If ``backend_type`` is unknown or credentials are missing
        """
        factory = BACKEND_FACTORIES.get(backend_type)
        if factory is None:
            raise BackendError(f"Unknown backend type: {backend_type}")

        instance = BackendInstance(
            uuid=generate_uuid(),
            backend_type=backend_type,
            name=name,
            credentials=credentials,
            settings=settings or {},
        )
        backend = factory(instance)

        async with self.storage.transaction() as conn:
            await SqliteBackendInstanceRepository(conn).add(instance)

        self._backends[instance.uuid] = backend
        logger.info("added %s backend %s", backend_type, instance.uuid)
        return instance

    async def list_instances(self) -> list[BackendInstance]:
        async with self.storage.session() as conn:
            return await SqliteBackendInstanceRepository(conn).list_all()

    async def remove_backend_instance(self, backend_uuid: str) -> None:
        """Delete a backend instance together with all of its cached rows.

        Raises:
            NotFoundError: If no such instance is stored
        """
        async with self.storage.transaction() as conn:
            repo = SqliteBackendInstanceRepository(conn)
            if await repo.get(backend_uuid) is None:
                raise NotFoundError(f"Backend instance not found: {backend_uuid}")
            await repo.delete(backend_uuid)

        self._backends.pop(backend_uuid, None)
        logger.info("removed backend %s", backend_uuid)
