"""Database-backed transport: DSN normalization and the connection factory.

Architecture::

    dsn.py        normalize_config / parse_dsn -> ConnectionDescriptor
    driver.py     DriverConnection (SQLAlchemy engine + connection)
    context.py    DbalContext over a live or deferred connection
    factory.py    DbalConnectionFactory (lazy / eager, single-flight)
"""

from .context import DbalContext
from .driver import DriverConnection, get_connection
from .dsn import (
    DEFAULTS,
    SUPPORTED_SCHEMES,
    ConnectionDescriptor,
    ParsedDsn,
    deep_replace,
    normalize_config,
    parse_dsn,
)
from .factory import DbalConnectionFactory

__all__ = [
    "DEFAULTS",
    "SUPPORTED_SCHEMES",
    "ConnectionDescriptor",
    "DbalConnectionFactory",
    "DbalContext",
    "DriverConnection",
    "ParsedDsn",
    "deep_replace",
    "get_connection",
    "normalize_config",
    "parse_dsn",
]
