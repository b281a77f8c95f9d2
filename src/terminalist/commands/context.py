"""Shared plumbing for commands: building the sync service and running operations."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from terminalist.adapters.sqlite import LocalStorage
from terminalist.backends import BackendRegistry
from terminalist.models import Label, Project, Task
from terminalist.services.config_service import get_config_service
from terminalist.services.operations import Operation, describe_operation, execute_operation
from terminalist.services.sync import SyncService
from terminalist.services.task_manager import (
    OperationFailed,
    OperationSucceeded,
    SyncCompleted,
    SyncFailed,
    TaskManager,
)
from terminalist.utils.ui.formatters import format_success

from .decorators import AppError


def open_storage() -> LocalStorage:
    return LocalStorage.shared(get_config_service().config.database_path)


@asynccontextmanager
async def registry_session() -> AsyncIterator[BackendRegistry]:
    registry = BackendRegistry(open_storage())
    await registry.load_backends()
    yield registry


@asynccontextmanager
async def sync_session() -> AsyncIterator[SyncService]:
    """Yield a sync service for the default backend instance.

    The configured ``default_backend`` wins; otherwise the only loaded
    backend is used.
    """
    config = get_config_service().config
    async with registry_session() as registry:
        backend_uuid = config.default_backend
        if backend_uuid is None:
            loaded = registry.backend_uuids
            if not loaded:
                raise AppError("No backend configured. Use 'terminalist backend add' first.")
            if len(loaded) > 1:
                raise AppError(
                    "Several backends configured. Set one with "
                    "'terminalist backend use <id>'."
                )
            backend_uuid = loaded[0]
        if not registry.has_backend(backend_uuid):
            raise AppError(f"Backend {backend_uuid} is not configured or disabled")

        service = SyncService.create(registry, backend_uuid)
        service.upcoming_days = config.sync.upcoming_days
        yield service


async def run_operation(sync_service: SyncService, op: Operation) -> str:
    """Execute an operation in the background runner and print its outcome.

    Raises:
        AppError: With the sanitized failure message
    """
    manager = TaskManager()
    manager.spawn_task_operation(
        lambda: execute_operation(sync_service, op), describe_operation(op)
    )
    await manager.wait_idle()

    for event in manager.drain_events():
        if isinstance(event, OperationSucceeded):
            format_success(event.message)
            return event.message
        if isinstance(event, OperationFailed):
            raise AppError(event.message)
    raise AppError("Operation finished without a result")


async def run_sync(sync_service: SyncService) -> None:
    manager = TaskManager()
    manager.spawn_sync(sync_service)
    await manager.wait_idle()

    for event in manager.drain_events():
        if isinstance(event, SyncCompleted):
            return
        if isinstance(event, SyncFailed):
            raise AppError(event.message)


def _match(ref: str, candidates: list, kind: str):
    """Pick one candidate by exact id, then exact name, then id prefix."""
    for c in candidates:
        if c.uuid == ref:
            return c
    named = [c for c in candidates if getattr(c, "name", None) == ref]
    if len(named) == 1:
        return named[0]
    matches = named or [c for c in candidates if c.uuid.startswith(ref.lower())]
    if not matches:
        raise AppError(f"No {kind} matches '{ref}'")
    if len(matches) > 1:
        raise AppError(f"'{ref}' matches several {kind}s, use a longer id")
    return matches[0]


async def resolve_task(sync_service: SyncService, ref: str) -> Task:
    """Resolve a full or abbreviated task id, in any state."""
    return _match(ref, await sync_service.find_tasks_by_id_prefix(ref), "task")


async def resolve_project(sync_service: SyncService, ref: str) -> Project:
    """Resolve a project by id prefix or exact name."""
    return _match(ref, await sync_service.get_projects(), "project")


async def resolve_label(sync_service: SyncService, ref: str) -> Label:
    """Resolve a label by id prefix or exact name."""
    return _match(ref.lstrip("@"), await sync_service.get_labels(), "label")
