"""Terminalist domain models.

Pydantic models for the rows held in the local cache and for the
application configuration.
"""

from .config_models import AppConfig, LoggingConfig, SyncConfig, UIConfig
from .core import BackendInstance, Label, Project, Section, Task

__all__ = [
    # Cache models
    "BackendInstance",
    "Project",
    "Section",
    "Label",
    "Task",
    # Config models
    "AppConfig",
    "UIConfig",
    "SyncConfig",
    "LoggingConfig",
]
