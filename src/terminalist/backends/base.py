"""Remote backend gateway interface.

A ``Backend`` addresses remote resources by remote id only. It never sees
local uuids; translation happens in the sync service. Argument structs carry
optional fields and a gateway sends only the fields that are set.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field


class BackendProject(BaseModel):
    """Canonical remote representation of a project."""

    remote_id: str
    name: str
    color: str | None = None
    is_favorite: bool = False
    is_inbox_project: bool = False
    order_index: int = 0
    parent_remote_id: str | None = None


class BackendSection(BaseModel):
    """Canonical remote representation of a section."""

    remote_id: str
    name: str
    project_remote_id: str
    order_index: int = 0


class BackendLabel(BaseModel):
    """Canonical remote representation of a label."""

    remote_id: str
    name: str
    color: str | None = None
    order_index: int = 0
    is_favorite: bool = False


class BackendTask(BaseModel):
    """Canonical remote representation of a task.

    Attributes:
        due_date: Calendar date "YYYY-MM-DD"
        due_datetime: Full date-time string when the due carries a time
        labels: Label names as reported by the backend
    """

    remote_id: str
    content: str
    description: str | None = None
    project_remote_id: str
    section_remote_id: str | None = None
    parent_remote_id: str | None = None
    priority: int = Field(default=1, ge=1, le=4)
    order_index: int = 0
    due_date: str | None = None
    due_datetime: str | None = None
    is_recurring: bool = False
    deadline: str | None = None
    duration: str | None = None
    is_completed: bool = False
    labels: list[str] = Field(default_factory=list)


class CreateTaskArgs(BaseModel):
    """Fields for creating a task.

    An empty ``project_remote_id`` means "let the backend pick the inbox".
    """

    content: str
    description: str | None = None
    project_remote_id: str | None = None
    section_remote_id: str | None = None
    parent_remote_id: str | None = None
    priority: int | None = None
    due_string: str | None = None
    due_date: str | None = None
    due_datetime: str | None = None
    duration: str | None = None
    labels: list[str] | None = None


class UpdateTaskArgs(BaseModel):
    """Fields for updating a task. Unset fields are left untouched remotely."""

    content: str | None = None
    description: str | None = None
    project_remote_id: str | None = None
    priority: int | None = None
    due_string: str | None = None
    due_date: str | None = None
    labels: list[str] | None = None
    clear_due: bool = False


class CreateProjectArgs(BaseModel):
    name: str
    parent_remote_id: str | None = None
    color: str | None = None
    is_favorite: bool | None = None


class UpdateProjectArgs(BaseModel):
    name: str | None = None
    color: str | None = None
    is_favorite: bool | None = None


class CreateLabelArgs(BaseModel):
    name: str
    color: str | None = None
    is_favorite: bool | None = None


class UpdateLabelArgs(BaseModel):
    name: str | None = None
    color: str | None = None
    is_favorite: bool | None = None


class Backend(ABC):
    """Abstract remote gateway for one connected account.

    Every method raises ``BackendError`` on failure; its message is
    human-readable but may contain sensitive detail.
    """

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Backend kind, e.g. "todoist"."""

    @abstractmethod
    async def fetch_projects(self) -> list[BackendProject]:
        """Fetch all projects."""

    @abstractmethod
    async def fetch_tasks(self) -> list[BackendTask]:
        """Fetch all active tasks."""

    @abstractmethod
    async def fetch_labels(self) -> list[BackendLabel]:
        """Fetch all labels."""

    @abstractmethod
    async def fetch_sections(self) -> list[BackendSection]:
        """Fetch all sections."""

    @abstractmethod
    async def create_project(self, args: CreateProjectArgs) -> BackendProject:
        """Create a project."""

    @abstractmethod
    async def update_project(
        self, remote_id: str, args: UpdateProjectArgs
    ) -> BackendProject:
        """Update a project."""

    @abstractmethod
    async def delete_project(self, remote_id: str) -> None:
        """Delete a project and everything in it."""

    @abstractmethod
    async def create_task(self, args: CreateTaskArgs) -> BackendTask:
        """Create a task."""

    @abstractmethod
    async def update_task(self, remote_id: str, args: UpdateTaskArgs) -> BackendTask:
        """Update a task and return its new remote state."""

    @abstractmethod
    async def delete_task(self, remote_id: str) -> None:
        """Permanently delete a task (subtasks included)."""

    @abstractmethod
    async def complete_task(self, remote_id: str) -> None:
        """Mark a task complete (subtasks included)."""

    @abstractmethod
    async def reopen_task(self, remote_id: str) -> None:
        """Reopen a completed task."""

    @abstractmethod
    async def create_label(self, args: CreateLabelArgs) -> BackendLabel:
        """Create a label."""

    @abstractmethod
    async def update_label(self, remote_id: str, args: UpdateLabelArgs) -> BackendLabel:
        """Update a label."""

    @abstractmethod
    async def delete_label(self, remote_id: str) -> None:
        """Delete a label."""
