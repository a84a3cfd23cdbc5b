"""Named slot store for per-transport artifacts."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from transport_spine.core.errors import InvalidArgumentError


def consumption_extensions_slot_id(transport_name: str) -> str:
    """Slot id holding the ordered consumption extensions of a transport."""
    return f"transport.{transport_name}.consumption_extensions"


def is_sequential(value: Any) -> bool:
    """Whether *value* is an ordered list rather than a keyed collection.

    A mapping counts as sequential only when its keys are exactly ``0..n-1``
    in order.
    """
    if isinstance(value, Mapping):
        return list(value.keys()) == list(range(len(value)))
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


@dataclass
class Slot:
    """A named, mutable artifact read by runtime consumers."""

    slot_id: str
    value: Any = field(default_factory=list)

    @property
    def is_finalized(self) -> bool:
        """A non-empty keyed collection was put here by someone else; leave it."""
        return bool(self.value) and not is_sequential(self.value)


class SlotStore:
    """Slots keyed by id. Slots must be defined before they are built."""

    def __init__(self):
        self._slots: dict[str, Slot] = {}

    def define(self, slot_id: str, value: Any = None) -> Slot:
        """Create (or reset) slot *slot_id*, empty unless *value* is given."""
        if not slot_id:
            raise InvalidArgumentError("The slot id could not be empty.")
        slot = Slot(slot_id, [] if value is None else value)
        self._slots[slot_id] = slot
        return slot

    def has(self, slot_id: str) -> bool:
        return slot_id in self._slots

    def slot(self, slot_id: str) -> Slot:
        if slot_id not in self._slots:
            raise KeyError(f"Slot '{slot_id}' is not defined. Defined: {', '.join(self._slots) or 'none'}")
        return self._slots[slot_id]

    def get(self, slot_id: str) -> Any:
        return self.slot(slot_id).value

    def set(self, slot_id: str, value: Any) -> None:
        self.slot(slot_id).value = value

    def slot_ids(self) -> list[str]:
        return list(self._slots)


__all__ = [
    "Slot",
    "SlotStore",
    "consumption_extensions_slot_id",
    "is_sequential",
]
