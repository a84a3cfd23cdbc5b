"""
Bootstrap container for a transport worker.

:class:`TransportContainer` holds the descriptor pool, the slot store and
the connection factory of one process.  Wiring code registers extensions
and defines slots, calls :meth:`~TransportContainer.build_extensions` once,
and consumers read the finished slots afterwards.

Usage::

    from transport_spine.core.config import TransportContainer

    with TransportContainer() as c:
        c.pool.register_extension("signal_extension", transport="all", priority=10)
        c.define_transport("default")
        c.build_extensions()

        refs = c.extensions_for("default")
        context = c.connection_factory.create_context()
"""

from __future__ import annotations

from typing import Any

from transport_spine.core.logging import configure_from_settings
from transport_spine.dbal.factory import DbalConnectionFactory
from transport_spine.extensions.builder import build_consumption_extensions
from transport_spine.extensions.pool import DescriptorPool
from transport_spine.extensions.slots import SlotStore, consumption_extensions_slot_id

from .settings import TransportSettings, get_settings


class TransportContainer:
    """Lazy-initialised bootstrap container.

    The connection factory is created on first property access and closed
    via :meth:`close` (or the context-manager protocol).  Logging is
    configured from ``settings.log_level`` / ``settings.log_format`` the
    first time the container builds extensions or a connection factory,
    unless *configure_logging* is false.
    """

    def __init__(
        self,
        settings: TransportSettings | None = None,
        pool: DescriptorPool | None = None,
        slots: SlotStore | None = None,
        *,
        configure_logging: bool = True,
    ) -> None:
        self._settings = settings
        self._pool = pool if pool is not None else DescriptorPool()
        self._slots = slots if slots is not None else SlotStore()
        self._connection_factory: DbalConnectionFactory | None = None
        self._logging_pending = configure_logging

    # ── Properties (lazy) ────────────────────────────────────────

    @property
    def settings(self) -> TransportSettings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def pool(self) -> DescriptorPool:
        return self._pool

    @property
    def slots(self) -> SlotStore:
        return self._slots

    @property
    def connection_factory(self) -> DbalConnectionFactory:
        """Connection factory built from :meth:`TransportSettings.connection_config`."""
        if self._connection_factory is None:
            self._ensure_logging()
            self._connection_factory = DbalConnectionFactory(self.settings.connection_config())
        return self._connection_factory

    # ── Extensions ───────────────────────────────────────────────

    def define_transport(self, name: str, extensions: Any = None) -> None:
        """Define the consumption extension slot of transport *name*.

        Pass *extensions* to pre-populate the slot; a non-empty mapping is
        treated as finalized and survives :meth:`build_extensions`.
        """
        slot_id = consumption_extensions_slot_id(name)
        if not self._slots.has(slot_id) or extensions is not None:
            self._slots.define(slot_id, extensions)

    def build_extensions(self) -> None:
        """Run the consumption extension build step for every configured transport."""
        self._ensure_logging()
        names = self.settings.transports
        for name in names:
            self.define_transport(name)
        build_consumption_extensions(names, self._pool, self._slots)

    def extensions_for(self, name: str) -> Any:
        return self._slots.get(consumption_extensions_slot_id(name))

    def _ensure_logging(self) -> None:
        if self._logging_pending:
            self._logging_pending = False
            configure_from_settings(self.settings)

    # ── Lifecycle ────────────────────────────────────────────────

    def close(self) -> None:
        """Close the connection factory, if one was created."""
        if self._connection_factory is not None:
            self._connection_factory.close()

    def __enter__(self) -> TransportContainer:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


# ── Global convenience ───────────────────────────────────────────────────

_global_container: TransportContainer | None = None


def get_container() -> TransportContainer:
    """Get (or create) a module-level :class:`TransportContainer`."""
    global _global_container
    if _global_container is None:
        _global_container = TransportContainer()
    return _global_container


def reset_container() -> None:
    """Close and forget the module-level container (primarily for testing)."""
    global _global_container
    if _global_container is not None:
        _global_container.close()
    _global_container = None
