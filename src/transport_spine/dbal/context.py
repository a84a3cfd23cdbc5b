"""Transport context over a database connection.

A :class:`DbalContext` is what the consumption runtime receives from
:meth:`DbalConnectionFactory.create_context`.  It holds either a live
:class:`~transport_spine.dbal.driver.DriverConnection` or a zero-argument
connector that produces one on first use.
"""

from __future__ import annotations

from collections.abc import Callable

from transport_spine.core.errors import InvalidArgumentError

from .driver import DriverConnection
from .dsn import ConnectionDescriptor

Connector = Callable[[], DriverConnection]


class DbalContext:
    """Queue context bound to one connection descriptor."""

    def __init__(
        self,
        connection: DriverConnection | Connector,
        config: ConnectionDescriptor,
    ):
        if isinstance(connection, DriverConnection):
            live = connection
            self._connector: Connector = lambda: live
            self._connection: DriverConnection | None = live
        elif callable(connection):
            self._connector = connection
            self._connection = None
        else:
            raise InvalidArgumentError(
                f"The connection must be a DriverConnection or a callable returning one, "
                f"got {type(connection).__name__}"
            )
        self._config = config

    @property
    def config(self) -> ConnectionDescriptor:
        return self._config

    @property
    def table_name(self) -> str:
        return self._config.table_name

    @property
    def polling_interval(self) -> int:
        """Milliseconds between polls for new messages."""
        return self._config.polling_interval

    @property
    def is_resolved(self) -> bool:
        """Whether the connection has been obtained (a deferred connector has run)."""
        return self._connection is not None

    def get_connection(self) -> DriverConnection:
        """Return the connection, invoking the deferred connector on first call."""
        if self._connection is None:
            connection = self._connector()
            if not isinstance(connection, DriverConnection):
                raise InvalidArgumentError(
                    f"The connector must return a DriverConnection. It returned {type(connection).__name__}"
                )
            self._connection = connection
        return self._connection

    def __repr__(self) -> str:
        return f"DbalContext(table_name={self.table_name!r}, resolved={self.is_resolved})"
