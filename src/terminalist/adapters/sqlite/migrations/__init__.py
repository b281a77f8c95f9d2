"""Database migration system for the local cache."""

from .m001_initial_schema import ALL_MIGRATIONS
from .runner import Migration, MigrationRunner

__all__ = [
    "ALL_MIGRATIONS",
    "Migration",
    "MigrationRunner",
]
