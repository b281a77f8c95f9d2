"""SQLite adapter implementations for the local cache."""

from terminalist.adapters.sqlite.backend_repository import SqliteBackendInstanceRepository
from terminalist.adapters.sqlite.connection import (
    DatabaseConnection,
    default_db_path,
    get_connection,
    open_connection,
)
from terminalist.adapters.sqlite.label_repository import SqliteLabelRepository
from terminalist.adapters.sqlite.project_repository import SqliteProjectRepository
from terminalist.adapters.sqlite.section_repository import SqliteSectionRepository
from terminalist.adapters.sqlite.storage import LocalStorage
from terminalist.adapters.sqlite.task_repository import SqliteTaskRepository

__all__ = [
    "DatabaseConnection",
    "LocalStorage",
    "SqliteBackendInstanceRepository",
    "SqliteLabelRepository",
    "SqliteProjectRepository",
    "SqliteSectionRepository",
    "SqliteTaskRepository",
    "default_db_path",
    "get_connection",
    "open_connection",
]
