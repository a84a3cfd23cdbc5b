"""Consumption extension provider descriptors."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from transport_spine.core.errors import InvalidArgumentError

CONSUMPTION_EXTENSION_TAG = "transport.consumption_extension"

ALL_TRANSPORTS = "all"
DEFAULT_TRANSPORT = "default"


@dataclass(frozen=True)
class Reference:
    """Opaque reference to a registered service, resolved by the runtime."""

    id: str

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class ExtensionProviderDescriptor:
    """One ``transport.consumption_extension`` tag on one service.

    ``transport`` is a transport name, :data:`ALL_TRANSPORTS`, or ``None``
    (the tag applies to the ``"default"`` transport only).
    """

    id: str
    transport: str | None = None
    priority: int = 0

    @classmethod
    def from_tag(cls, service_id: str, attributes: Mapping[str, Any] | None = None) -> ExtensionProviderDescriptor:
        attributes = attributes or {}
        priority = attributes.get("priority") or 0
        try:
            priority = int(priority)
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(
                f'The priority of "{service_id}" must be an integer, got {priority!r}',
                cause=exc,
            ).with_context(service_id=service_id) from exc
        return cls(id=service_id, transport=attributes.get("transport"), priority=priority)

    def applies_to(self, transport_name: str) -> bool:
        if self.transport is None:
            return transport_name == DEFAULT_TRANSPORT
        return self.transport == transport_name or self.transport == ALL_TRANSPORTS

    def reference(self) -> Reference:
        return Reference(self.id)


__all__ = [
    "ALL_TRANSPORTS",
    "CONSUMPTION_EXTENSION_TAG",
    "DEFAULT_TRANSPORT",
    "ExtensionProviderDescriptor",
    "Reference",
]
