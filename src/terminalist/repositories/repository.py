"""Repository abstraction layer for the local cache.

These abstract base classes are the "ports" the sync service talks to. Every
repository is bound to one connection and one backend instance, and every
query is scoped to that backend's namespace.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from terminalist.models import BackendInstance, Label, Project, Section, Task


class TaskRepository(ABC):
    """Persistence operations for cached tasks."""

    @abstractmethod
    async def get_by_id(self, task_uuid: str) -> Task | None:
        """Get a task by local id, including soft-deleted and completed rows."""

    @abstractmethod
    async def get_by_remote_id(self, remote_id: str) -> Task | None:
        """Get a task by its backend-assigned id."""

    @abstractmethod
    async def get_remote_id(self, task_uuid: str) -> str:
        """Translate a local task id to its remote id.

        Raises:
            NotFoundError: If no task has this local id
        """

    @abstractmethod
    async def find_by_id_prefix(self, prefix: str) -> list[Task]:
        """Find tasks whose local id starts with ``prefix``, in any state."""

    @abstractmethod
    async def list_all(self) -> list[Task]:
        """List every visible task."""

    @abstractmethod
    async def list_for_project(self, project_uuid: str) -> list[Task]:
        """List visible tasks of one project."""

    @abstractmethod
    async def list_with_label(self, label_uuid: str) -> list[Task]:
        """List visible tasks carrying a label."""

    @abstractmethod
    async def search(self, query: str) -> list[Task]:
        """Case-insensitive substring search on task content."""

    @abstractmethod
    async def list_overdue(self, today: str) -> list[Task]:
        """List visible tasks due strictly before ``today``."""

    @abstractmethod
    async def list_due_on(self, day: str) -> list[Task]:
        """List visible tasks due exactly on ``day``."""

    @abstractmethod
    async def list_due_between(self, after: str, until: str) -> list[Task]:
        """List visible tasks due after ``after`` and on or before ``until``."""

    @abstractmethod
    async def upsert(self, values: dict[str, Any]) -> Task:
        """Insert a task, or update the row with the same remote id."""

    @abstractmethod
    async def update(self, task: Task) -> None:
        """Write every mutable column of ``task`` back to its row."""

    @abstractmethod
    async def delete(self, task_uuid: str) -> None:
        """Hard-delete a task row."""

    @abstractmethod
    async def set_labels(self, task_uuid: str, label_uuids: Iterable[str]) -> None:
        """Replace the labels attached to a task."""

    @abstractmethod
    async def delete_missing(self, remote_ids: Iterable[str]) -> int:
        """Delete rows whose remote id is not in ``remote_ids``."""


class ProjectRepository(ABC):
    """Persistence operations for cached projects."""

    @abstractmethod
    async def get_by_id(self, project_uuid: str) -> Project | None:
        """Get a project by local id."""

    @abstractmethod
    async def get_by_remote_id(self, remote_id: str) -> Project | None:
        """Get a project by its backend-assigned id."""

    @abstractmethod
    async def get_remote_id(self, project_uuid: str) -> str:
        """Translate a local project id to its remote id.

        Raises:
            NotFoundError: If no project has this local id
        """

    @abstractmethod
    async def get_inbox(self) -> Project | None:
        """Get the project flagged as inbox, if any is cached."""

    @abstractmethod
    async def list_all(self) -> list[Project]:
        """List all projects in display order."""

    @abstractmethod
    async def upsert(self, values: dict[str, Any]) -> Project:
        """Insert a project, or update the row with the same remote id."""

    @abstractmethod
    async def set_parent(self, project_uuid: str, parent_uuid: str | None) -> None:
        """Set the parent project link."""

    @abstractmethod
    async def rename(self, project_uuid: str, name: str) -> None:
        """Rename a project."""

    @abstractmethod
    async def delete(self, project_uuid: str) -> None:
        """Hard-delete a project row (tasks cascade)."""

    @abstractmethod
    async def delete_missing(self, remote_ids: Iterable[str]) -> int:
        """Delete rows whose remote id is not in ``remote_ids``."""


class SectionRepository(ABC):
    """Persistence operations for cached sections."""

    @abstractmethod
    async def get_by_remote_id(self, remote_id: str) -> Section | None:
        """Get a section by its backend-assigned id."""

    @abstractmethod
    async def get_remote_id(self, section_uuid: str) -> str | None:
        """Translate a local section id to its remote id, None if unknown."""

    @abstractmethod
    async def list_all(self) -> list[Section]:
        """List all sections."""

    @abstractmethod
    async def list_for_project(self, project_uuid: str) -> list[Section]:
        """List sections of one project."""

    @abstractmethod
    async def upsert(self, values: dict[str, Any]) -> Section:
        """Insert a section, or update the row with the same remote id."""

    @abstractmethod
    async def delete_missing(self, remote_ids: Iterable[str]) -> int:
        """Delete rows whose remote id is not in ``remote_ids``."""


class LabelRepository(ABC):
    """Persistence operations for cached labels."""

    @abstractmethod
    async def get_by_id(self, label_uuid: str) -> Label | None:
        """Get a label by local id."""

    @abstractmethod
    async def get_by_remote_id(self, remote_id: str) -> Label | None:
        """Get a label by its backend-assigned id."""

    @abstractmethod
    async def get_by_name(self, name: str) -> Label | None:
        """Get a label by name (case-insensitive)."""

    @abstractmethod
    async def get_remote_id(self, label_uuid: str) -> str:
        """Translate a local label id to its remote id.

        Raises:
            NotFoundError: If no label has this local id
        """

    @abstractmethod
    async def list_all(self) -> list[Label]:
        """List all labels."""

    @abstractmethod
    async def upsert(self, values: dict[str, Any]) -> Label:
        """Insert a label, or update the row with the same remote id."""

    @abstractmethod
    async def rename(self, label_uuid: str, name: str) -> None:
        """Rename a label."""

    @abstractmethod
    async def delete(self, label_uuid: str) -> None:
        """Hard-delete a label row."""

    @abstractmethod
    async def delete_missing(self, remote_ids: Iterable[str]) -> int:
        """Delete rows whose remote id is not in ``remote_ids``."""


class BackendInstanceRepository(ABC):
    """Persistence operations for configured backend instances."""

    @abstractmethod
    async def get(self, backend_uuid: str) -> BackendInstance | None:
        """Get a backend instance by id."""

    @abstractmethod
    async def list_all(self, *, enabled_only: bool = False) -> list[BackendInstance]:
        """List configured backend instances."""

    @abstractmethod
    async def add(self, instance: BackendInstance) -> BackendInstance:
        """Store a new backend instance."""

    @abstractmethod
    async def delete(self, backend_uuid: str) -> None:
        """Remove a backend instance and all of its cached rows."""
