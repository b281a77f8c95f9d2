"""Repository interfaces for terminalist.

Abstract base classes defining the local cache contract ("ports").
The SQLite implementations ("adapters") live in terminalist.adapters.sqlite.
"""

from .repository import (
    BackendInstanceRepository,
    LabelRepository,
    ProjectRepository,
    SectionRepository,
    TaskRepository,
)

__all__ = [
    "TaskRepository",
    "ProjectRepository",
    "SectionRepository",
    "LabelRepository",
    "BackendInstanceRepository",
]
