"""Tests for transport_spine.core.logging — handler setup, rendering, secret masking."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from transport_spine.core.config import TransportSettings
from transport_spine.core.errors import InvalidArgumentError
from transport_spine.core.logging import (
    LOGGER_NAMESPACE,
    configure_from_settings,
    configure_logging,
    get_logger,
    mask_connection_secrets,
    mask_url_password,
    reset_logging,
    transport_scope,
)


def _json_lines(text: str) -> list[dict]:
    return [json.loads(line) for line in text.splitlines() if line.strip()]


class TestMaskUrlPassword:
    def test_password_masked(self):
        assert mask_url_password("pdo_mysql://user:pw@db:3306/q") == "pdo_mysql://user:***@db:3306/q"

    @pytest.mark.parametrize(
        "value",
        ["mysql://db:3306/q", "mysql://user@db/q", "mysql:", "sqlite:///:memory:"],
    )
    def test_nothing_to_mask(self, value):
        assert mask_url_password(value) == value

    def test_processor_masks_connection_fields_only(self):
        event = mask_connection_secrets(
            None,
            "info",
            {"dsn": "pgsql://u:a@h/db", "url": "mysql://u:b@h/db", "note": "x://u:c@h", "port": 5},
        )
        assert event == {
            "dsn": "pgsql://u:***@h/db",
            "url": "mysql://u:***@h/db",
            "note": "x://u:c@h",
            "port": 5,
        }


class TestConfigureLogging:
    def test_json_output(self, capsys):
        configure_logging(level="DEBUG", json_format=True)

        get_logger(f"{LOGGER_NAMESPACE}.tests").info("connection_established", dsn="mysql://u:secret@db/q")

        [record] = _json_lines(capsys.readouterr().err)
        assert record["event"] == "connection_established"
        assert record["level"] == "info"
        assert record["logger"] == f"{LOGGER_NAMESPACE}.tests"
        assert record["dsn"] == "mysql://u:***@db/q"
        assert "timestamp" in record

    def test_console_output(self, capsys):
        configure_logging(level="INFO", json_format=False)

        get_logger(f"{LOGGER_NAMESPACE}.tests").info("connection_closed", driver_id="pdo_mysql")

        err = capsys.readouterr().err
        assert "connection_closed" in err
        assert "pdo_mysql" in err
        assert not err.lstrip().startswith("{")

    def test_level_filters(self, capsys):
        configure_logging(level="WARNING", json_format=True)

        logger = get_logger(f"{LOGGER_NAMESPACE}.tests")
        logger.info("quiet")
        logger.warning("loud")

        assert [record["event"] for record in _json_lines(capsys.readouterr().err)] == ["loud"]

    def test_reconfigure_replaces_handler(self):
        configure_logging(json_format=True)
        configure_logging(json_format=False)
        assert len(logging.getLogger(LOGGER_NAMESPACE).handlers) == 1

    def test_unknown_level(self):
        with pytest.raises(InvalidArgumentError, match="LOUD"):
            configure_logging(level="LOUD")

    def test_reset(self):
        configure_logging(json_format=True)
        reset_logging()
        namespace = logging.getLogger(LOGGER_NAMESPACE)
        assert namespace.handlers == []
        assert namespace.propagate is True


class TestConfigureFromSettings:
    def test_json_settings(self, capsys):
        configure_from_settings(TransportSettings(log_level="debug", log_format="json"))

        get_logger(f"{LOGGER_NAMESPACE}.tests").debug("slot_defined")

        assert _json_lines(capsys.readouterr().err)[0]["event"] == "slot_defined"
        assert logging.getLogger(LOGGER_NAMESPACE).level == logging.DEBUG

    def test_console_settings(self):
        configure_from_settings(TransportSettings(log_level="ERROR"))
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)
        assert logging.getLogger(LOGGER_NAMESPACE).level == logging.ERROR


class TestTransportScope:
    def test_binds_transport(self):
        with transport_scope("orders"):
            assert structlog.contextvars.get_contextvars()["transport"] == "orders"
        assert "transport" not in structlog.contextvars.get_contextvars()

    def test_unbinds_on_error(self):
        with pytest.raises(RuntimeError):
            with transport_scope("orders"):
                raise RuntimeError("boom")
        assert "transport" not in structlog.contextvars.get_contextvars()

    def test_transport_in_rendered_event(self, capsys):
        configure_logging(json_format=True)
        with transport_scope("audit"):
            get_logger(f"{LOGGER_NAMESPACE}.tests").info("consumption_extensions_built")

        [record] = _json_lines(capsys.readouterr().err)
        assert record["transport"] == "audit"
