"""Consumption extension wiring.

Architecture::

    descriptors.py   ExtensionProviderDescriptor, Reference, tag constants
    pool.py          DescriptorPool (explicit tag registration)
    slots.py         SlotStore / Slot (per-transport artifacts)
    builder.py       select -> order -> build, BuildConsumptionExtensions
"""

from .builder import (
    BuildConsumptionExtensions,
    build,
    build_consumption_extensions,
    order_by_priority,
    select_extensions,
)
from .descriptors import (
    ALL_TRANSPORTS,
    CONSUMPTION_EXTENSION_TAG,
    DEFAULT_TRANSPORT,
    ExtensionProviderDescriptor,
    Reference,
)
from .pool import DescriptorPool
from .slots import Slot, SlotStore, consumption_extensions_slot_id, is_sequential

__all__ = [
    "ALL_TRANSPORTS",
    "CONSUMPTION_EXTENSION_TAG",
    "DEFAULT_TRANSPORT",
    "BuildConsumptionExtensions",
    "DescriptorPool",
    "ExtensionProviderDescriptor",
    "Reference",
    "Slot",
    "SlotStore",
    "build",
    "build_consumption_extensions",
    "consumption_extensions_slot_id",
    "is_sequential",
    "order_by_priority",
    "select_extensions",
]
