"""Configuration models for terminalist."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class UIConfig(BaseModel):
    """UI configuration."""

    default_view: Literal["today", "tomorrow", "upcoming"] = Field(default="today")


class SyncConfig(BaseModel):
    """Sync configuration."""

    before_views: bool = Field(default=False, description="Run a full sync before views")
    upcoming_days: int = Field(default=90, ge=1)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class AppConfig(BaseModel):
    """Main terminalist configuration."""

    database_path: str | None = Field(
        default=None, description="SQLite cache path (defaults to the user data dir)"
    )
    default_backend: str | None = Field(
        default=None, description="Backend instance uuid used by commands"
    )

    ui: UIConfig = Field(default_factory=UIConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
