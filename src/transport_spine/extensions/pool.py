"""Descriptor pool — explicit registration of tagged services.

Manifesto:
    The build step needs to know which services declared themselves as
    consumption extensions, for which transport, at which priority.  It does
    not need to know how those services are constructed.  The pool therefore
    stores ``(service_id, tag, attributes)`` tuples and nothing else; wiring
    code registers them at bootstrap, before the build step runs.

ARCHITECTURE
────────────
::

    DescriptorPool
      ├── .register(service_id, tag, attributes)   ─ one tag occurrence
      ├── .register_extension(service_id, ...)      ─ consumption extension shorthand
      ├── .find_tagged(tag)                         ─ {service_id: [attributes, ...]}
      └── .extension_descriptors(tag)               ─ flattened descriptors

A service may carry the same tag more than once (e.g. once per transport);
every occurrence becomes its own descriptor.  Registration order is the
discovery order the selector preserves.

Tags:
    transport-spine, extensions, registry, tagging

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from transport_spine.core.errors import InvalidArgumentError
from transport_spine.core.logging import get_logger

from .descriptors import CONSUMPTION_EXTENSION_TAG, ExtensionProviderDescriptor

logger = get_logger(__name__)


class DescriptorPool:
    """In-memory pool of tagged service descriptors.

    Example:
        >>> pool = DescriptorPool()
        >>> pool.register_extension("signal_extension", priority=10)
        >>> pool.register_extension("logger_extension", transport="all")
        >>> [d.id for d in pool.extension_descriptors()]
        ['signal_extension', 'logger_extension']
    """

    def __init__(self):
        self._tags: dict[str, dict[str, list[dict[str, Any]]]] = {}

    def register(
        self,
        service_id: str,
        tag: str,
        attributes: Mapping[str, Any] | None = None,
    ) -> None:
        """Record one occurrence of *tag* on *service_id*."""
        if not service_id:
            raise InvalidArgumentError("The service id could not be empty.")
        if not tag:
            raise InvalidArgumentError("The tag name could not be empty.")

        tagged = self._tags.setdefault(tag, {})
        tagged.setdefault(service_id, []).append(dict(attributes or {}))
        logger.debug("service_tagged", service_id=service_id, tag=tag, attributes=dict(attributes or {}))

    def register_extension(
        self,
        service_id: str,
        *,
        transport: str | None = None,
        priority: int | None = None,
    ) -> None:
        """Tag *service_id* as a consumption extension."""
        attributes: dict[str, Any] = {}
        if transport is not None:
            attributes["transport"] = transport
        if priority is not None:
            attributes["priority"] = priority
        self.register(service_id, CONSUMPTION_EXTENSION_TAG, attributes)

    def find_tagged(self, tag: str) -> dict[str, list[dict[str, Any]]]:
        """Services carrying *tag*, in registration order, with each tag's attributes."""
        return {
            service_id: [dict(attributes) for attributes in occurrences]
            for service_id, occurrences in self._tags.get(tag, {}).items()
        }

    def extension_descriptors(
        self, tag: str = CONSUMPTION_EXTENSION_TAG
    ) -> list[ExtensionProviderDescriptor]:
        """One descriptor per tag occurrence, in discovery order."""
        return [
            ExtensionProviderDescriptor.from_tag(service_id, attributes)
            for service_id, occurrences in self.find_tagged(tag).items()
            for attributes in occurrences
        ]

    def has(self, service_id: str) -> bool:
        return any(service_id in tagged for tagged in self._tags.values())

    def __len__(self) -> int:
        return sum(len(occ) for tagged in self._tags.values() for occ in tagged.values())


__all__ = [
    "DescriptorPool",
]
