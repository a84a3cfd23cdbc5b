"""Tests for transport_spine.core.config.settings — TransportSettings and its cache."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from transport_spine.core.config import TransportSettings, clear_settings_cache, get_settings
from transport_spine.dbal.dsn import normalize_config


class TestDefaults:
    def test_values(self):
        settings = TransportSettings()
        assert settings.dsn == "mysql:"
        assert settings.table_name == "enqueue"
        assert settings.polling_interval == 1000
        assert settings.lazy is True
        assert settings.transports == ["default"]
        assert settings.log_level == "INFO"
        assert settings.log_format == "console"

    def test_connection_config_normalizes_like_default(self):
        descriptor = normalize_config(TransportSettings().connection_config())
        assert descriptor == normalize_config(None)


class TestEnvironment:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("TRANSPORT_DSN", "pgsql+pdo://queue@db/queue")
        monkeypatch.setenv("TRANSPORT_POLLING_INTERVAL", "250")
        monkeypatch.setenv("TRANSPORT_LAZY", "false")

        settings = TransportSettings()

        assert settings.connection_config() == {
            "dsn": "pgsql+pdo://queue@db/queue",
            "table_name": "enqueue",
            "polling_interval": 250,
            "lazy": False,
        }

    def test_transports_from_json(self, monkeypatch):
        monkeypatch.setenv("TRANSPORT_TRANSPORTS", '["default", "audit"]')
        assert TransportSettings().transports == ["default", "audit"]

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("TRANSPORT_TABLE_NAME=jobs\n")
        assert TransportSettings().table_name == "jobs"

    def test_unrelated_env_ignored(self, monkeypatch):
        monkeypatch.setenv("TRANSPORT_UNKNOWN_OPTION", "x")
        TransportSettings()


class TestValidation:
    def test_negative_polling_interval(self):
        with pytest.raises(ValidationError):
            TransportSettings(polling_interval=-1)

    def test_empty_transport_name(self):
        with pytest.raises(ValidationError, match="transport names must not be empty"):
            TransportSettings(transports=["default", ""])

    def test_log_level_uppercased(self):
        assert TransportSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError, match="log_level"):
            TransportSettings(log_level="LOUD")

    def test_log_format_lowercased(self):
        assert TransportSettings(log_format="JSON").log_format == "json"

    def test_unknown_log_format(self):
        with pytest.raises(ValidationError):
            TransportSettings(log_format="xml")


class TestCache:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("TRANSPORT_TABLE_NAME", "jobs")
        assert get_settings().table_name == "enqueue"
        reloaded = get_settings(_force_reload=True)
        assert reloaded is not first
        assert reloaded.table_name == "jobs"

    def test_clear(self):
        first = get_settings()
        clear_settings_cache()
        assert get_settings() is not first
