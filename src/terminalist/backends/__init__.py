"""Remote backend gateways."""

from terminalist.backends.base import (
    Backend,
    BackendLabel,
    BackendProject,
    BackendSection,
    BackendTask,
    CreateLabelArgs,
    CreateProjectArgs,
    CreateTaskArgs,
    UpdateLabelArgs,
    UpdateProjectArgs,
    UpdateTaskArgs,
)
from terminalist.backends.registry import BackendRegistry
from terminalist.backends.todoist import TodoistBackend

__all__ = [
    "Backend",
    "BackendLabel",
    "BackendProject",
    "BackendRegistry",
    "BackendSection",
    "BackendTask",
    "CreateLabelArgs",
    "CreateProjectArgs",
    "CreateTaskArgs",
    "TodoistBackend",
    "UpdateLabelArgs",
    "UpdateProjectArgs",
    "UpdateTaskArgs",
]
