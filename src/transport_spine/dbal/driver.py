"""SQLAlchemy-backed driver connection.

The connection factory never talks to SQLAlchemy directly: it asks
:func:`get_connection` for a :class:`DriverConnection` built from the
normalized ``connection`` options, then calls :meth:`DriverConnection.connect`.
Building a connection does not touch the network; ``connect()`` does.

Driver ids produced by :mod:`transport_spine.dbal.dsn` are mapped onto
SQLAlchemy dialect names here.  Anything not in the alias table is passed
through unchanged, so native SQLAlchemy URLs such as
``postgresql+psycopg://...`` keep working.

Errors raised by SQLAlchemy or the DBAPI driver propagate unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, Engine, make_url

from transport_spine.core.errors import InvalidArgumentError
from transport_spine.core.logging import get_logger

logger = get_logger(__name__)

# driver id -> SQLAlchemy dialect name
DRIVER_ALIASES: dict[str, str] = {
    "db2": "db2",
    "ibm-db2": "db2",
    "ibm_db2": "db2",
    "mssql": "mssql",
    "pdo_sqlsrv": "mssql",
    "mysql": "mysql",
    "mysql2": "mysql",
    "pdo_mysql": "mysql",
    "pgsql": "postgresql",
    "postgres": "postgresql",
    "pdo_pgsql": "postgresql",
    "sqlite": "sqlite",
    "sqlite3": "sqlite",
    "pdo_sqlite": "sqlite",
}


def _dialect_for(driver_id: str) -> str:
    return DRIVER_ALIASES.get(driver_id.lower(), driver_id)


def build_url(options: Mapping[str, Any]) -> URL:
    """Build a SQLAlchemy :class:`~sqlalchemy.engine.URL` from connection options.

    Parameters
    ----------
    options:
        Either ``{"url": "<driver id>://..."}`` or discrete parameters:
        ``driver``, ``host``, ``port``, ``user``, ``password``, ``dbname``,
        and for SQLite ``path`` / ``memory``.
    """
    if options.get("url"):
        driver_id, sep, rest = str(options["url"]).partition(":")
        url = make_url(f"{_dialect_for(driver_id)}{sep}{rest}")
    elif options.get("driver"):
        port = options.get("port")
        url = URL.create(
            drivername=_dialect_for(str(options["driver"])),
            username=options.get("user"),
            password=options.get("password"),
            host=options.get("host"),
            port=int(port) if port is not None else None,
            database=options.get("dbname") or options.get("path"),
        )
    else:
        raise InvalidArgumentError(
            'The connection options must contain either "url" or "driver".'
        )

    if url.get_backend_name() == "sqlite":
        # SQLite has no server: credentials and host are meaningless
        database = None if options.get("memory") else url.database
        # URL.set() ignores None values, so clear fields through the tuple API
        url = url._replace(username=None, password=None, host=None, port=None, database=database)

    return url


class DriverConnection:
    """A single database connection owned by a connection factory.

    Wraps a SQLAlchemy :class:`~sqlalchemy.engine.Engine` and the one
    :class:`~sqlalchemy.engine.Connection` opened from it.
    """

    def __init__(self, options: Mapping[str, Any]):
        self._options = dict(options)
        self._url = build_url(self._options)
        self._engine: Engine | None = None
        self._connection: Connection | None = None

    @property
    def url(self) -> URL:
        return self._url

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    @property
    def connection(self) -> Connection:
        """The open SQLAlchemy connection, opening it on first access."""
        if self._connection is None:
            self._connection = self._open()
        return self._connection

    def connect(self) -> bool:
        """Open the connection. Returns ``False`` if it was already open."""
        if self._connection is not None:
            return False
        self._connection = self._open()
        return True

    def _open(self) -> Connection:
        engine_kwargs: dict[str, Any] = {}
        if self._options.get("driver_options"):
            engine_kwargs["connect_args"] = dict(self._options["driver_options"])

        engine = create_engine(self._url, **engine_kwargs)
        try:
            connection = engine.connect()
        except Exception:
            engine.dispose()
            raise
        self._engine = engine

        logger.debug("driver_connected", url=self._url.render_as_string(hide_password=True))
        return connection

    def close(self) -> None:
        """Close the connection and dispose the engine. Safe to call twice."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def __repr__(self) -> str:
        return (
            f"DriverConnection(url={self._url.render_as_string(hide_password=True)!r}, "
            f"connected={self.is_connected})"
        )


def get_connection(options: Mapping[str, Any]) -> DriverConnection:
    """Build, but do not open, a connection from *options*."""
    return DriverConnection(options)


__all__ = [
    "DRIVER_ALIASES",
    "DriverConnection",
    "build_url",
    "get_connection",
]
