"""Tests for ConfigService."""

from __future__ import annotations

import json
import stat

import pytest

from terminalist.models.config_models import AppConfig
from terminalist.services.config_service import ConfigService, get_config_service


@pytest.fixture
def service(tmp_path) -> ConfigService:
    return ConfigService(config_dir=tmp_path / "cfg")


class TestLoad:
    def test_first_run_writes_defaults(self, service):
        config = service.load_config()

        assert config == AppConfig()
        assert service.config_path.exists()
        assert stat.S_IMODE(service.config_path.stat().st_mode) == 0o600

    def test_reads_existing_file(self, service):
        service.config_dir.mkdir(parents=True)
        service.config_path.write_text(
            json.dumps({"default_backend": "b-1", "sync": {"upcoming_days": 14}})
        )

        config = service.load_config()

        assert config.default_backend == "b-1"
        assert config.sync.upcoming_days == 14
        assert config.ui.default_view == "today"

    def test_invalid_file_raises(self, service):
        service.config_dir.mkdir(parents=True)
        service.config_path.write_text("{not json")

        with pytest.raises(RuntimeError, match="Failed to load config"):
            service.load_config()

    def test_default_location_is_user_config_dir(self, tmp_path):
        assert get_config_service().config_path == tmp_path / "config" / "config.json"


class TestGetSet:
    def test_get_dotted_key(self, service):
        assert service.get("sync.upcoming_days") == 90
        assert service.get("logging") == {"level": "INFO"}

    def test_get_unknown_key(self, service):
        with pytest.raises(KeyError):
            service.get("sync.nope")

    def test_set_validates_and_persists(self, service):
        service.set("logging.level", "debug")
        service.set("ui.default_view", "upcoming")

        reloaded = ConfigService(config_dir=service.config_dir).load_config()
        assert reloaded.logging.level == "DEBUG"
        assert reloaded.ui.default_view == "upcoming"

    def test_set_rejects_invalid_value(self, service):
        with pytest.raises(ValueError, match="sync.upcoming_days"):
            service.set("sync.upcoming_days", 0)
        assert service.get("sync.upcoming_days") == 90

    @pytest.mark.parametrize("key", ["nope", "ui.nope", "ui.default_view.deeper"])
    def test_set_unknown_key(self, service, key):
        with pytest.raises(KeyError):
            service.set(key, 1)

    def test_reset(self, service):
        service.set("default_backend", "b-1")

        assert service.reset_config().default_backend is None
        assert ConfigService(config_dir=service.config_dir).load_config() == AppConfig()
