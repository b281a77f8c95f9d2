"""Shared test fixtures and configuration.

Every test runs with config, data and log directories redirected into its own
``tmp_path``. Storage fixtures use real SQLite files; the remote side is a
``FakeBackend``.
"""

from __future__ import annotations

import logging

import pytest
import pytest_asyncio

from fakes import BACKEND_UUID, FakeBackend, remote_project
from terminalist.adapters.sqlite import DatabaseConnection, LocalStorage
from terminalist.backends import BackendRegistry
from terminalist.services.config_service import get_config_service
from terminalist.services.sync import SyncService
from terminalist.utils import logger as logger_module


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------


def _reset_app_logger() -> None:
    app_logger = logging.getLogger("terminalist")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.propagate = True
    app_logger.setLevel(logging.NOTSET)
    logger_module._logger = None


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Point platformdirs lookups at tmp_path and reset process-wide singletons."""
    monkeypatch.setattr(
        "terminalist.services.config_service.user_config_dir",
        lambda *args, **kwargs: str(tmp_path / "config"),
    )
    monkeypatch.setattr(
        "terminalist.adapters.sqlite.connection.user_data_dir",
        lambda *args, **kwargs: str(tmp_path / "data"),
    )
    monkeypatch.setattr(
        "terminalist.utils.logger.user_log_dir",
        lambda *args, **kwargs: str(tmp_path / "logs"),
    )
    get_config_service.cache_clear()
    _reset_app_logger()
    yield
    get_config_service.cache_clear()
    DatabaseConnection.close_connection()
    _reset_app_logger()


# ---------------------------------------------------------------------------
# Storage and services
# ---------------------------------------------------------------------------


@pytest.fixture
def storage(tmp_path):
    """LocalStorage over a fresh cache file holding one backend instance row."""
    storage = LocalStorage.open(tmp_path / "cache.db")
    storage._connection.execute(
        "INSERT INTO backends (uuid, backend_type, name) VALUES (?, ?, ?)",
        (BACKEND_UUID, "fake", "Fake"),
    )
    yield storage
    storage.close()


@pytest.fixture
def fake_backend() -> FakeBackend:
    backend = FakeBackend()
    backend.projects = [
        remote_project("P-INBOX", "Inbox", is_inbox_project=True),
        remote_project("P-WORK", "Work", order_index=1),
    ]
    return backend


@pytest.fixture
def registry(storage, fake_backend) -> BackendRegistry:
    registry = BackendRegistry(storage)
    registry.register_backend(BACKEND_UUID, fake_backend)
    return registry


@pytest.fixture
def sync_service(registry) -> SyncService:
    return SyncService.create(registry, BACKEND_UUID)


@pytest_asyncio.fixture
async def synced_service(sync_service) -> SyncService:
    """Sync service whose cache already mirrors the fake backend."""
    await sync_service.sync()
    return sync_service

