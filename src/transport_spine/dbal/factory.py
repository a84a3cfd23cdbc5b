"""Database transport connection factory.

:class:`DbalConnectionFactory` owns one normalized
:class:`~transport_spine.dbal.dsn.ConnectionDescriptor` and at most one
live :class:`~transport_spine.dbal.driver.DriverConnection`.

Manifesto:
    Workers construct the factory at startup, often long before they
    consume anything.  With ``lazy=True`` (the default) nothing touches the
    database until the context actually needs the connection; with
    ``lazy=False`` a bad DSN or an unreachable server fails the process at
    boot instead of on the first message.

Features:
    - Accepts a DSN string, an options mapping, or ``None`` (local MySQL)
    - Lazy or eager connection establishment
    - Single-flight cache fill: concurrent first use opens one connection
    - ``close()`` is a no-op when no connection was ever opened

Usage::

    from transport_spine.dbal import DbalConnectionFactory

    factory = DbalConnectionFactory("mysql+pdo://user:pw@db:3306/queue")
    context = factory.create_context()     # nothing connected yet
    conn = context.get_connection()        # connects here
    factory.close()

Tags:
    transport-spine, dbal, connection-factory, lazy-init, sqlalchemy

Doc-Types:
    api-reference
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any

from transport_spine.core.logging import get_logger

from . import driver
from .context import DbalContext
from .driver import DriverConnection
from .dsn import ConnectionDescriptor, normalize_config

logger = get_logger(__name__)


class DbalConnectionFactory:
    """Creates transport contexts over a single cached database connection."""

    def __init__(self, config: Mapping[str, Any] | str | None = "mysql:"):
        self._config: ConnectionDescriptor = normalize_config(config)
        self._connection: DriverConnection | None = None
        self._lock = threading.Lock()

        if not self._config.lazy:
            self._establish_connection()

    @property
    def config(self) -> ConnectionDescriptor:
        return self._config

    @property
    def has_connection(self) -> bool:
        return self._connection is not None

    def create_context(self) -> DbalContext:
        """Return a context over this factory's connection.

        Lazy factories hand out a connector; the connection is opened the
        first time the context asks for it.
        """
        if self._config.lazy:
            return DbalContext(self._establish_connection, self._config)

        return DbalContext(self._establish_connection(), self._config)

    def close(self) -> None:
        """Close the cached connection, if any."""
        with self._lock:
            connection, self._connection = self._connection, None

        if connection is not None:
            connection.close()
            logger.info("connection_closed", driver_id=self._config.driver_id)

    def _establish_connection(self) -> DriverConnection:
        connection = self._connection
        if connection is not None:
            return connection

        with self._lock:
            if self._connection is None:
                connection = driver.get_connection(self._config.connection)
                connection.connect()
                self._connection = connection
                logger.info(
                    "connection_established",
                    driver_id=self._config.driver_id,
                    lazy=self._config.lazy,
                )
            return self._connection

    def __enter__(self) -> DbalConnectionFactory:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"DbalConnectionFactory(driver_id={self._config.driver_id!r}, "
            f"lazy={self._config.lazy}, connected={self.has_connection})"
        )


__all__ = [
    "DbalConnectionFactory",
]
