"""
Structured error types for transport-spine.

Every failure raised while normalizing a connection descriptor or wiring
consumption extensions is a :class:`TransportError` subclass.  Errors carry
a category, structured context, and an optional chained cause so callers
can log them with ``to_dict()`` instead of parsing messages.

Manifesto:
    - **Typed Error Hierarchy:** Different error types for different failures
    - **Rich Context:** Errors carry metadata for logging
    - **Error Chaining:** Preserve original exceptions while adding context
    - **No silent recovery:** Nothing here is caught internally

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                     TransportError                        │
        │              (category, context, cause)                   │
        ├──────────────────────────────────────────────────────────┤
        │                                                           │
        │  ConfigError (CONFIG)                                     │
        │     ├── InvalidArgumentError   config is not map/str/None │
        │     ├── InvalidDsnError        DSN unparseable            │
        │     └── UnsupportedSchemeError scheme not in the table    │
        └──────────────────────────────────────────────────────────┘

    Driver failures (SQLAlchemy ``OperationalError`` and friends) are not
    wrapped: they reach the caller exactly as the driver raised them.

Examples:
    >>> error = UnsupportedSchemeError("foo", ["mysql", "sqlite"])
    >>> error.scheme
    'foo'
    >>> error.to_dict()["category"]
    'CONFIG'

Tags:
    error-handling, exception-hierarchy, error-context, transport-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    CONFIG = "CONFIG"             # Missing config, invalid settings
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Only fields that are set end up in :meth:`to_dict`, so the context can be
    passed straight to a structlog call.

    Attributes:
        transport: Name of the transport being configured
        dsn: Connection string being parsed (never includes secrets
            beyond what the caller passed in)
        slot_id: Slot being built
        metadata: Additional key-value pairs
    """

    transport: str | None = None
    dsn: str | None = None
    slot_id: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["transport", "dsn", "slot_id"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class TransportError(Exception):
    """
    Base exception for all transport-spine errors.

    Subclasses set ``default_category``; instances carry a message, a
    category, an :class:`ErrorContext` and an optional ``cause`` which is
    also chained as ``__cause__``.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TransportError:
        """
        Add context to this error (fluent API).

        Usage:
            raise InvalidDsnError("Failed").with_context(dsn=dsn)
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIG ERRORS
# =============================================================================


class ConfigError(TransportError):
    """Configuration is missing or malformed. Never retryable."""

    default_category = ErrorCategory.CONFIG


class InvalidArgumentError(ConfigError):
    """A configuration value has the wrong type or is empty where it must not be."""


class InvalidDsnError(ConfigError):
    """A connection string cannot be parsed or has an illegal scheme."""


class UnsupportedSchemeError(ConfigError):
    """The connection string scheme is not in the supported scheme table."""

    def __init__(self, scheme: str, supported: Iterable[str], **kwargs: Any):
        self.scheme = scheme
        self.supported = list(supported)
        message = 'The given DSN scheme "{}" is not supported. Supported schemes: "{}".'.format(
            scheme,
            '", "'.join(self.supported),
        )
        super().__init__(message, **kwargs)


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TransportError",
    "ConfigError",
    "InvalidArgumentError",
    "InvalidDsnError",
    "UnsupportedSchemeError",
]
