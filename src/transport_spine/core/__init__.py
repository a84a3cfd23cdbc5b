"""Transport Core -- errors, logging, and configuration shared by every layer.

Architecture::

    errors.py          Structured error hierarchy (TransportError, ConfigError)
    logging.py         structlog configuration + get_logger()
    config/            TransportSettings + TransportContainer
"""

from .errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    InvalidArgumentError,
    InvalidDsnError,
    TransportError,
    UnsupportedSchemeError,
)
from .logging import configure_logging, get_logger, transport_scope

__all__ = [
    "ConfigError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidArgumentError",
    "InvalidDsnError",
    "TransportError",
    "UnsupportedSchemeError",
    "configure_logging",
    "get_logger",
    "transport_scope",
]
