"""Sync service package."""

from terminalist.services.sync.full_sync import SyncStatus
from terminalist.services.sync.service import SyncService
from terminalist.services.sync.tasks import ProjectUpdateIntent, ProjectUpdateKind

__all__ = [
    "ProjectUpdateIntent",
    "ProjectUpdateKind",
    "SyncService",
    "SyncStatus",
]
