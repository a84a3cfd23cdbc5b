"""
Centralized settings for transport-spine.

Manifesto:
    A worker reads its transport configuration from the environment (or a
    ``.env`` file) exactly once.  ``TransportSettings`` validates those values
    and hands the connection factory the same mapping shape a caller would
    pass by hand, so settings-driven and code-driven setups normalize
    identically.

Tags:
    transport-spine, configuration, settings, pydantic, caching, validation

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TransportSettings(BaseSettings):
    """Transport bootstrap configuration.

    All fields can be set via ``TRANSPORT_*`` environment variables (e.g.
    ``TRANSPORT_DSN=pgsql+pdo://queue@db/queue``) or a ``.env`` file.
    List fields take JSON (``TRANSPORT_TRANSPORTS='["default", "audit"]'``).
    """

    model_config = SettingsConfigDict(
        env_prefix="TRANSPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Connection ───────────────────────────────────────────────
    dsn: str = Field(default="mysql:", description="Connection string (scheme: alone means local default)")
    table_name: str = Field(default="enqueue")
    polling_interval: int = Field(default=1000, ge=0, description="Milliseconds between polls")
    lazy: bool = Field(default=True)

    # ── Extensions ───────────────────────────────────────────────
    transports: list[str] = Field(default_factory=lambda: ["default"])

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console", description="console or json")

    @field_validator("transports")
    @classmethod
    def _no_empty_transport_names(cls, value: list[str]) -> list[str]:
        if any(not name for name in value):
            raise ValueError("transport names must not be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return value

    @field_validator("log_format")
    @classmethod
    def _known_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("console", "json"):
            raise ValueError("log_format must be 'console' or 'json'")
        return value

    def connection_config(self) -> dict[str, Any]:
        """Input mapping for :func:`~transport_spine.dbal.dsn.normalize_config`."""
        return {
            "dsn": self.dsn,
            "table_name": self.table_name,
            "polling_interval": self.polling_interval,
            "lazy": self.lazy,
        }


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: TransportSettings | None = None


def get_settings(*, _force_reload: bool = False) -> TransportSettings:
    """Load, validate, and cache a :class:`TransportSettings` instance."""
    global _settings_cache
    if _settings_cache is None or _force_reload:
        _settings_cache = TransportSettings()
    return _settings_cache


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    global _settings_cache
    _settings_cache = None
