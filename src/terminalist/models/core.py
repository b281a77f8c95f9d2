"""Local cache data models.

Every entity carries a locally generated ``uuid`` plus the
``(backend_uuid, remote_id)`` pair assigned by the backend instance it was
synced from. The two id spaces are never mixed: code that needs to go from
one to the other goes through the sync service's resolution helpers.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class BackendInstance(BaseModel):
    """A configured connection to one remote account.

    Attributes:
        uuid: Local identifier of the backend instance
        backend_type: Backend kind (e.g. "todoist")
        name: Human-readable name
        is_enabled: Whether the instance is loaded on startup
        credentials: Backend-specific credentials (API token, ...)
        settings: Backend-specific settings
    """

    uuid: str
    backend_type: str
    name: str
    is_enabled: bool = True
    credentials: dict[str, Any] = Field(default_factory=dict)
    settings: dict[str, Any] = Field(default_factory=dict)


class Project(BaseModel):
    """Project row from the local cache.

    Attributes:
        uuid: Local identifier
        backend_uuid: Owning backend instance
        remote_id: Identifier assigned by the backend
        name: Project name
        is_favorite: Whether the project is marked as favorite
        is_inbox_project: Whether this is the backend's inbox
        order_index: Sort position among siblings
        parent_uuid: Optional local id of the parent project
    """

    uuid: str
    backend_uuid: str
    remote_id: str
    name: str
    is_favorite: bool = False
    is_inbox_project: bool = False
    order_index: int = 0
    parent_uuid: str | None = None


class Section(BaseModel):
    """Section row from the local cache."""

    uuid: str
    backend_uuid: str
    remote_id: str
    name: str
    project_uuid: str
    order_index: int = 0


class Label(BaseModel):
    """Label row from the local cache."""

    uuid: str
    backend_uuid: str
    remote_id: str
    name: str
    color: str | None = None
    order_index: int = 0
    is_favorite: bool = False


class Task(BaseModel):
    """Task row from the local cache.

    Attributes:
        uuid: Local identifier
        backend_uuid: Owning backend instance
        remote_id: Identifier assigned by the backend
        content: Task title
        description: Optional longer description
        project_uuid: Local id of the owning project (always set)
        section_uuid: Optional local id of the section
        parent_uuid: Optional local id of the parent task
        priority: 1 (normal) .. 4 (urgent)
        order_index: Sort position inside the project
        due_date: Plain calendar date, "YYYY-MM-DD"
        due_datetime: Date and time string when the due has a time
        is_recurring: Whether the due date recurs
        deadline: Hard deadline date, separate from the due date
        duration: Serialized duration ("30 minute", "1 day")
        is_completed: Completion flag
        is_deleted: Local soft-delete flag
        labels: Local ids of the attached labels
    """

    uuid: str
    backend_uuid: str
    remote_id: str
    content: str
    description: str | None = None
    project_uuid: str
    section_uuid: str | None = None
    parent_uuid: str | None = None
    priority: int = Field(default=1, ge=1, le=4)
    order_index: int = 0
    due_date: str | None = None
    due_datetime: str | None = None
    is_recurring: bool = False
    deadline: str | None = None
    duration: str | None = None
    is_completed: bool = False
    is_deleted: bool = False
    labels: list[str] = Field(default_factory=list)
