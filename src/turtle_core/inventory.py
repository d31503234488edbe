# src/turtle_core/inventory.py
"""
Inventory Slot Manager for turtle_core.

The slot map is a fixed-size array of role labels. Reserved roles (fuel,
unload) and runtime-registered custom labels sit before the free boundary,
the first slot labelled "free". Everything from the boundary to the end of
the array is working space and gets emptied by unload().

Invariants:
    - exactly `capacity` labels
    - at most one "fuel" and one "unload" slot
    - labels are unique except "free"
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional

from contracts.monitoring import EventSink
from contracts.turtle import TurtleActuator
from contracts.types import Side, SlotLabel, SlotRole
from env.schema import InventoryConfig
from monitoring.events import Severity, log_event
from monitoring.sinks import LoggingEventSink

from .protection import ProtectedBlockRegistry

if TYPE_CHECKING:
    from .state import InitializedAgent

FREE = SlotRole.FREE.value
_RESERVED = {role.value for role in SlotRole}


def _label_str(label: SlotLabel) -> str:
    return label.value if isinstance(label, SlotRole) else str(label)


class SlotMap:
    """Fixed-capacity array of slot role labels (zero-based)."""

    def __init__(self, labels: Iterable[SlotLabel]) -> None:
        self._labels: List[str] = [_label_str(label) for label in labels]
        self._validate()

    @classmethod
    def default(
        cls,
        capacity: int = 16,
        initial_roles: Iterable[SlotLabel] = (SlotRole.FUEL, SlotRole.UNLOAD),
    ) -> "SlotMap":
        roles = [_label_str(r) for r in initial_roles]
        return cls(roles + [FREE] * (capacity - len(roles)))

    @classmethod
    def from_labels(cls, labels: Iterable[str], capacity: int) -> "SlotMap":
        """Rebuild a persisted map, padding with free slots up to capacity."""
        labels = [str(label) for label in labels]
        if len(labels) > capacity:
            raise ValueError(
                f"Persisted inventory has {len(labels)} slots, capacity is {capacity}"
            )
        return cls(labels + [FREE] * (capacity - len(labels)))

    def _validate(self) -> None:
        named = [label for label in self._labels if label != FREE]
        if len(named) != len(set(named)):
            raise ValueError(f"Duplicate slot labels: {self._labels}")
        # Every named slot sits before the free boundary.
        boundary = self.free_boundary()
        if boundary is not None and any(
            label != FREE for label in self._labels[boundary:]
        ):
            raise ValueError(f"Named slot after the free boundary: {self._labels}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def capacity(self) -> int:
        return len(self._labels)

    def labels(self) -> List[str]:
        return list(self._labels)

    def label(self, slot: int) -> str:
        return self._labels[slot]

    def find(self, label: SlotLabel) -> Optional[int]:
        wanted = _label_str(label)
        for index, name in enumerate(self._labels):
            if name == wanted:
                return index
        return None

    def free_boundary(self) -> Optional[int]:
        return self.find(FREE)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def register(self, label: SlotLabel) -> Optional[int]:
        """
        Assign `label` to the first free slot and move the boundary one slot
        on. Returns the assigned slot, or None when no free slot is left.
        """
        index = self.free_boundary()
        if index is None:
            return None
        self._labels[index] = _label_str(label)
        if index + 1 < self.capacity:
            self._labels[index + 1] = FREE
        return index

    def __len__(self) -> int:
        return len(self._labels)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SlotMap):
            return self._labels == other._labels
        return NotImplemented

    def __repr__(self) -> str:
        return f"SlotMap({self._labels!r})"


class InventorySlotManager:
    """
    Role-aware slot operations on top of the actuator.

    Public contract:
      register(agent, label) -> bool
      select(agent, label) -> bool
      select_free(agent) -> bool
      unload(agent) -> bool
      check_inventory(agent) -> bool
      quick_check_inventory(agent) -> bool
    """

    def __init__(
        self,
        actuator: TurtleActuator,
        *,
        config: Optional[InventoryConfig] = None,
        protection: Optional[ProtectedBlockRegistry] = None,
        events: Optional[EventSink] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self._actuator = actuator
        self._cfg = config if config is not None else InventoryConfig()
        self._protection = protection or ProtectedBlockRegistry()
        self._events: EventSink = events or LoggingEventSink()
        self._sleep = sleep or time.sleep

    def _log(self, severity: Severity, message: str, **payload) -> None:
        log_event(self._events, __name__, severity, message, payload or None)

    # ------------------------------------------------------------------
    # Registration / selection
    # ------------------------------------------------------------------

    def register(self, agent: "InitializedAgent", label: SlotLabel) -> bool:
        name = _label_str(label)
        inventory = agent.inventory

        if name in _RESERVED:
            self._log(Severity.ERROR, "register() reserved role cannot be registered", label=name)
            return False
        if inventory.find(name) is not None:
            self._log(Severity.ERROR, "register() label already registered", label=name)
            return False

        slot = inventory.register(name)
        if slot is None:
            self._log(Severity.ERROR, "register() no available free slots", label=name)
            return False

        self._log(Severity.DEBUG, "register() slot assigned", label=name, slot=slot)
        return True

    def select(self, agent: "InitializedAgent", label: SlotLabel) -> bool:
        slot = agent.inventory.find(label)
        if slot is None:
            self._log(Severity.ERROR, "select() slot not found", label=_label_str(label))
            return False
        return bool(self._actuator.select_slot(slot))

    def select_free(self, agent: "InitializedAgent") -> bool:
        return self.select(agent, SlotRole.FREE)

    def working_slot(self, agent: "InitializedAgent") -> int:
        """Slot selected between operations: the free boundary, else the last slot."""
        boundary = agent.inventory.free_boundary()
        return boundary if boundary is not None else agent.inventory.capacity - 1

    # ------------------------------------------------------------------
    # Unloading
    # ------------------------------------------------------------------

    def unload(self, agent: "InitializedAgent") -> bool:
        """
        Empty the working slots into the portal container.

        Places the container from the unload slot above the agent, drops
        every slot from the free boundary to the end into it, and digs the
        container back.
        """
        inventory = agent.inventory
        unload_slot = inventory.find(SlotRole.UNLOAD)
        free_slot = inventory.free_boundary()

        if unload_slot is None:
            self._log(Severity.ERROR, "unload() no unload slot registered")
            return False
        if free_slot is None:
            self._log(Severity.WARNING, "unload() no working slots to unload")
            return False

        if not self._wait_until_breakable(Side.UP):
            self._log(Severity.ERROR, "unload() top blocked by protected block")
            return False

        self._actuator.select_slot(unload_slot)
        if self._actuator.detect(Side.UP) and not self._actuator.dig(Side.UP):
            self._log(Severity.ERROR, "unload() could not clear the cell above")
            self._actuator.select_slot(free_slot)
            return False
        if not self._actuator.place(Side.UP):
            self._log(Severity.ERROR, "unload() could not place container")
            self._actuator.select_slot(free_slot)
            return False

        for slot in range(free_slot, inventory.capacity):
            self._actuator.select_slot(slot)
            self._actuator.drop(Side.UP)

        # Retrieve container.
        self._actuator.select_slot(unload_slot)
        self._actuator.dig(Side.UP)
        self._actuator.select_slot(free_slot)

        self._log(Severity.NOTICE, "Inventory unloaded", slots=inventory.capacity - free_slot)
        return True

    def check_inventory(self, agent: "InitializedAgent") -> bool:
        """
        Full check: unload when every working slot holds at least one item.

        Slower than quick_check_inventory() since it reads every slot.
        Returns True when the inventory was full.
        """
        inventory = agent.inventory
        free_slot = inventory.free_boundary()
        if free_slot is None:
            return False

        full = all(
            self._actuator.get_slot_count(slot) > 0
            for slot in range(free_slot, inventory.capacity)
        )
        if full:
            self.unload(agent)

        self._actuator.select_slot(free_slot)
        return full

    def quick_check_inventory(self, agent: "InitializedAgent") -> bool:
        """
        Heuristic check: the inventory is full once the last slot has items.
        """
        last = agent.inventory.capacity - 1
        full = self._actuator.get_slot_count(last) > 0
        if full:
            self.unload(agent)

        self._actuator.select_slot(self.working_slot(agent))
        return full

    def _wait_until_breakable(self, side: Side) -> bool:
        for attempt in range(self._cfg.blocked_wait_attempts):
            if self._protection.is_breakable(self._actuator, side):
                return True
            self._log(
                Severity.NOTICE,
                "Protected block in the way, waiting",
                side=side.value,
                attempt=attempt + 1,
            )
            self._sleep(self._cfg.blocked_wait_pause_s)
        return self._protection.is_breakable(self._actuator, side)
