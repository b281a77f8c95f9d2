"""Configuration service for terminalist.

Loads and saves ``config.json`` in the user config dir, creating defaults on
first run. Values can be read and written by dotted key ("sync.upcoming_days").
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir
from pydantic import ValidationError

from terminalist.models.config_models import AppConfig

_APP_NAME = "terminalist"


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self, config_dir: Path | None = None):
        """Initialize the config service.

        Args:
            config_dir: Override of the config directory (used by tests)
        """
        self.config_dir = config_dir or Path(user_config_dir(_APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from disk, writing defaults on first run."""
        if self._config is not None:
            return self._config

        try:
            self._config = AppConfig.model_validate_json(
                self.config_path.read_text(encoding="utf-8")
            )
        except FileNotFoundError:
            # Expected on first run
            self._config = AppConfig()
            self.save_config()
        except (OSError, ValidationError) as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to disk."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.config_path.write_text(
                self.config.model_dump_json(indent=4), encoding="utf-8"
            )
            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self) -> AppConfig:
        """Reset configuration to defaults."""
        self._config = AppConfig()
        self.save_config()
        return self._config

    def get(self, key: str) -> Any:
        """Get a value by dotted key.

        Raises:
            KeyError: If the key does not exist
        """
        value: Any = self.config.model_dump()
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                raise KeyError(key)
            value = value[part]
        return value

    def set(self, key: str, value: Any) -> AppConfig:
        """Set a value by dotted key and save.

        Raises:
            KeyError: If the key does not exist
            ValueError: If the new value fails validation
        """
        data = self.config.model_dump()
        *parents, leaf = key.split(".")
        target = data
        for part in parents:
            if not isinstance(target.get(part), dict):
                raise KeyError(key)
            target = target[part]
        if leaf not in target:
            raise KeyError(key)
        target[leaf] = value

        try:
            self._config = AppConfig.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid value for {key}: {e}") from e
        self.save_config()
        return self._config


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Return the process-wide config service."""
    return ConfigService()
