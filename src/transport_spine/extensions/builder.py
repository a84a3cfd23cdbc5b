"""Consumption extension assembly — select, order, merge.

Manifesto:
    Each transport runs its consumption extensions in a fixed order decided
    once, at bootstrap.  Extensions declare which transport they belong to
    and how early they want to run; this module turns those declarations
    into the ordered reference list stored in the transport's slot.

    - **Selection keeps discovery order:** ordering is a separate step
    - **Higher priority runs earlier:** stable sort, ties keep discovery order
    - **Finalized slots are left alone:** a non-empty keyed collection in the
      slot means someone already customised the list

Architecture:
    ::

        DescriptorPool ──► select_extensions(pool, name)
                                │
                                ▼
                       order_by_priority(selected)
                                │
                                ▼
        Slot ◄────────── build(slot, selected)   (skipped if finalized)

    :class:`BuildConsumptionExtensions` ties the three together for one
    transport name, and :func:`build_consumption_extensions` runs it for
    several.

Guardrails:
    ❌ DON'T: Append to a finalized slot
    ✅ DO: Rebuild sequential slots from scratch

Tags:
    transport-spine, extensions, priority, ordering, bootstrap

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Iterable

from transport_spine.core.errors import InvalidArgumentError, TransportError
from transport_spine.core.logging import get_logger, transport_scope

from .descriptors import CONSUMPTION_EXTENSION_TAG, ExtensionProviderDescriptor
from .pool import DescriptorPool
from .slots import Slot, SlotStore, consumption_extensions_slot_id

logger = get_logger(__name__)


def select_extensions(
    pool: Iterable[ExtensionProviderDescriptor],
    transport_name: str,
) -> list[ExtensionProviderDescriptor]:
    """Descriptors applicable to *transport_name*, in discovery order."""
    return [descriptor for descriptor in pool if descriptor.applies_to(transport_name)]


def order_by_priority(
    selected: Iterable[ExtensionProviderDescriptor],
) -> list[ExtensionProviderDescriptor]:
    """Sort by priority, highest first. Equal priorities keep their order."""
    return sorted(selected, key=lambda descriptor: descriptor.priority, reverse=True)


def build(slot: Slot, selected: Iterable[ExtensionProviderDescriptor]) -> bool:
    """Store the ordered references of *selected* in *slot*.

    Returns ``False`` without touching the slot when it is finalized.
    """
    if slot.is_finalized:
        return False

    slot.value = [descriptor.reference() for descriptor in order_by_priority(selected)]
    return True


class BuildConsumptionExtensions:
    """Build step filling one transport's consumption extension slot.

    Example:
        >>> pool = DescriptorPool()
        >>> pool.register_extension("reply_extension", transport="all", priority=5)
        >>> slots = SlotStore()
        >>> slot = slots.define(consumption_extensions_slot_id("default"))
        >>> BuildConsumptionExtensions("default").process(pool, slots)
        >>> slot.value
        [Reference(id='reply_extension')]
    """

    def __init__(self, name: str, tag: str = CONSUMPTION_EXTENSION_TAG):
        if not name:
            raise InvalidArgumentError("The name could not be empty.")
        self.name = name
        self.tag = tag

    @property
    def slot_id(self) -> str:
        return consumption_extensions_slot_id(self.name)

    def process(self, pool: DescriptorPool, slots: SlotStore) -> None:
        if not slots.has(self.slot_id):
            logger.debug("consumption_extensions_slot_missing", slot_id=self.slot_id)
            return

        with transport_scope(self.name):
            slot = slots.slot(self.slot_id)
            try:
                selected = select_extensions(pool.extension_descriptors(self.tag), self.name)
            except TransportError as exc:
                raise exc.with_context(transport=self.name, slot_id=self.slot_id)

            if not build(slot, selected):
                logger.info(
                    "consumption_extensions_skipped",
                    slot_id=self.slot_id,
                    reason="finalized",
                )
                return

            logger.info(
                "consumption_extensions_built",
                slot_id=self.slot_id,
                extensions=[str(reference) for reference in slot.value],
            )

    def __repr__(self) -> str:
        return f"BuildConsumptionExtensions(name={self.name!r})"


def build_consumption_extensions(
    transport_names: Iterable[str],
    pool: DescriptorPool,
    slots: SlotStore,
) -> None:
    """Run :class:`BuildConsumptionExtensions` for every transport name."""
    for name in transport_names:
        BuildConsumptionExtensions(name).process(pool, slots)


__all__ = [
    "BuildConsumptionExtensions",
    "build",
    "build_consumption_extensions",
    "order_by_priority",
    "select_extensions",
]
