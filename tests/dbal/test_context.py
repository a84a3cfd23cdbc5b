"""Tests for transport_spine.dbal.context — DbalContext over live or deferred connections."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from transport_spine.core.errors import InvalidArgumentError
from transport_spine.dbal.context import DbalContext
from transport_spine.dbal.driver import DriverConnection
from transport_spine.dbal.dsn import normalize_config


@pytest.fixture
def descriptor():
    return normalize_config({"dsn": "mysql:", "table_name": "jobs", "polling_interval": 200})


class TestDbalContext:
    def test_live_connection(self, descriptor):
        connection = MagicMock(spec=DriverConnection)
        context = DbalContext(connection, descriptor)
        assert context.is_resolved
        assert context.get_connection() is connection

    def test_connector_invoked_once(self, descriptor):
        connection = MagicMock(spec=DriverConnection)
        connector = MagicMock(return_value=connection)

        context = DbalContext(connector, descriptor)
        assert not context.is_resolved
        connector.assert_not_called()

        assert context.get_connection() is connection
        assert context.get_connection() is connection
        connector.assert_called_once_with()

    def test_connector_must_return_driver_connection(self, descriptor):
        context = DbalContext(lambda: "not a connection", descriptor)
        with pytest.raises(InvalidArgumentError, match="returned str"):
            context.get_connection()
        assert not context.is_resolved

    def test_rejects_non_callable(self, descriptor):
        with pytest.raises(InvalidArgumentError, match="got int"):
            DbalContext(42, descriptor)

    def test_exposes_config(self, descriptor):
        context = DbalContext(MagicMock(spec=DriverConnection), descriptor)
        assert context.config is descriptor
        assert context.table_name == "jobs"
        assert context.polling_interval == 200
        assert "jobs" in repr(context)

    def test_failed_connector_is_retried(self, descriptor):
        connection = MagicMock(spec=DriverConnection)
        connector = MagicMock(side_effect=[ConnectionRefusedError("db down"), connection])
        context = DbalContext(connector, descriptor)

        with pytest.raises(ConnectionRefusedError):
            context.get_connection()
        assert not context.is_resolved

        assert context.get_connection() is connection
        assert connector.call_count == 2
