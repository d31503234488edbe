# src/turtle_core/testing/fakes.py
"""
Test helpers for turtle_core.

Provides:
- FakeTurtle: in-memory grid world implementing TurtleActuator.
- FakePositioningService: positioning service reading FakeTurtle's true
  position, with scripted outages.
- MemoryStateStore: StateStore keeping the snapshot in memory.
- SleepRecorder / FixedRandom: deterministic pauses and randomness.

No real world, network or filesystem involved.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from contracts.types import (
    DOWN,
    UP,
    CardinalDirection,
    InspectResult,
    MoveDirection,
    Side,
    StateSnapshot,
    TurnDirection,
    Vector3,
)

CONTAINER = "enderstorage:ender_chest"
FUEL_ITEM = "minecraft:coal"
BEDROCK = "minecraft:bedrock"


@dataclass
class FakeTurtle:
    """
    In-memory TurtleActuator over a sparse block grid.

    Ground truth lives here (position, facing, energy, blocks); the core
    only ever sees it through the primitives. Every primitive call is
    appended to `calls` so tests can count actuator traffic.

    Slot 0 and slot 1 start with one container each (fuel and unload
    portals); the paired remote buffer holds `remote_fuel` fuel items.
    """

    position: Vector3 = Vector3(0, 0, 0)
    facing: CardinalDirection = CardinalDirection.NORTH
    energy: int = 10_000
    capacity: int = 16
    blocks: Dict[Vector3, str] = field(default_factory=dict)
    entities: Dict[Vector3, int] = field(default_factory=dict)   # cell -> hits to kill
    unbreakable: Set[str] = field(default_factory=lambda: {BEDROCK})
    respawning: Set[Vector3] = field(default_factory=set)        # dig succeeds, block stays
    remote_fuel: int = 640
    fuel_per_item: int = 80
    fail_turns: int = 0                                           # next N turns fail

    calls: List[Tuple] = field(default_factory=list)
    selected: int = 0
    slot_counts: List[int] = field(default_factory=list)
    slot_items: List[Optional[str]] = field(default_factory=list)
    dropped: List[Tuple[Optional[str], int]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.slot_counts:
            self.slot_counts = [0] * self.capacity
            self.slot_items = [None] * self.capacity
            self.slot_counts[0], self.slot_items[0] = 1, CONTAINER
            self.slot_counts[1], self.slot_items[1] = 1, CONTAINER

    # ------------------------------------------------------------------
    # Test-only helpers
    # ------------------------------------------------------------------

    def cell(self, side: Side) -> Vector3:
        if side is Side.UP:
            return self.position + UP
        if side is Side.DOWN:
            return self.position + DOWN
        return self.position + self.facing.vector

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    def calls_named(self, name: str) -> List[Tuple]:
        return [call for call in self.calls if call[0] == name]

    def fill_slots(self, slots: Iterable[int], item: str = "minecraft:cobblestone") -> None:
        for slot in slots:
            self.slot_counts[slot] = 1
            self.slot_items[slot] = item

    # ------------------------------------------------------------------
    # TurtleActuator protocol
    # ------------------------------------------------------------------

    def move(self, direction: MoveDirection) -> bool:
        self.calls.append(("move", direction))
        if direction is MoveDirection.FORWARD:
            target = self.position + self.facing.vector
        elif direction is MoveDirection.BACK:
            target = self.position - self.facing.vector
        elif direction is MoveDirection.UP:
            target = self.position + UP
        else:
            target = self.position + DOWN

        if self.energy <= 0:
            return False
        if target in self.blocks or target in self.entities:
            return False
        self.position = target
        self.energy -= 1
        return True

    def turn(self, direction: TurnDirection) -> bool:
        self.calls.append(("turn", direction))
        if self.fail_turns > 0:
            self.fail_turns -= 1
            return False
        if direction is TurnDirection.LEFT:
            self.facing = self.facing.left()
        else:
            self.facing = self.facing.right()
        return True

    def dig(self, side: Side) -> bool:
        self.calls.append(("dig", side))
        target = self.cell(side)
        block = self.blocks.get(target)
        if block is None or block in self.unbreakable:
            return False
        if target not in self.respawning:
            del self.blocks[target]
        if block == CONTAINER:
            self.slot_counts[self.selected] += 1
            self.slot_items[self.selected] = CONTAINER
        return True

    def attack(self, side: Side) -> bool:
        self.calls.append(("attack", side))
        target = self.cell(side)
        hits = self.entities.get(target, 0)
        if hits <= 0:
            return False
        if hits == 1:
            del self.entities[target]
        else:
            self.entities[target] = hits - 1
        return True

    def detect(self, side: Side) -> bool:
        self.calls.append(("detect", side))
        return self.cell(side) in self.blocks

    def place(self, side: Side) -> bool:
        self.calls.append(("place", side))
        target = self.cell(side)
        if self.slot_counts[self.selected] == 0 or target in self.blocks:
            return False
        self.blocks[target] = self.slot_items[self.selected] or "minecraft:stone"
        self.slot_counts[self.selected] -= 1
        if self.slot_counts[self.selected] == 0:
            self.slot_items[self.selected] = None
        return True

    def suck(self, side: Side, count: int) -> bool:
        self.calls.append(("suck", side, count))
        if self.blocks.get(self.cell(side)) != CONTAINER:
            return False
        taken = min(count, self.remote_fuel)
        if taken == 0:
            return False
        self.remote_fuel -= taken
        self.slot_counts[self.selected] += taken
        self.slot_items[self.selected] = FUEL_ITEM
        return True

    def drop(self, side: Side) -> bool:
        self.calls.append(("drop", side))
        count = self.slot_counts[self.selected]
        if count == 0:
            return False
        self.dropped.append((self.slot_items[self.selected], count))
        self.slot_counts[self.selected] = 0
        self.slot_items[self.selected] = None
        return True

    def select_slot(self, slot: int) -> bool:
        self.calls.append(("select_slot", slot))
        if not 0 <= slot < self.capacity:
            return False
        self.selected = slot
        return True

    def get_slot_count(self, slot: int) -> int:
        self.calls.append(("get_slot_count", slot))
        return self.slot_counts[slot]

    def get_energy_level(self) -> int:
        self.calls.append(("get_energy_level",))
        return self.energy

    def refuel(self, count: int) -> bool:
        self.calls.append(("refuel", count))
        if self.slot_items[self.selected] != FUEL_ITEM:
            return False
        burned = min(count, self.slot_counts[self.selected])
        self.energy += burned * self.fuel_per_item
        self.slot_counts[self.selected] -= burned
        if self.slot_counts[self.selected] == 0:
            self.slot_items[self.selected] = None
        return burned > 0

    def inspect(self, side: Side) -> InspectResult:
        self.calls.append(("inspect", side))
        block = self.blocks.get(self.cell(side))
        if block is None:
            return InspectResult(present=False)
        return InspectResult(present=True, block_id=block)


class FakePositioningService:
    """
    PositioningService over a FakeTurtle (or a fixed position).

    - `offline=True` makes every request time out.
    - `failures=N` makes the next N requests time out.
    - Every request's timeout is recorded in `requests`.
    """

    def __init__(
        self,
        turtle: Optional[FakeTurtle] = None,
        *,
        fixed: Optional[Vector3] = None,
        failures: int = 0,
        offline: bool = False,
    ) -> None:
        self.turtle = turtle
        self.fixed = fixed
        self.failures = failures
        self.offline = offline
        self.requests: List[float] = []

    def locate(self, timeout: float) -> Optional[Vector3]:
        self.requests.append(timeout)
        if self.offline:
            return None
        if self.failures > 0:
            self.failures -= 1
            return None
        if self.turtle is not None:
            return self.turtle.position
        return self.fixed


class MemoryStateStore:
    """StateStore keeping a deep copy of the last saved snapshot."""

    def __init__(self, snapshot: Optional[StateSnapshot] = None) -> None:
        self.snapshot = copy.deepcopy(snapshot)
        self.saves = 0

    def load(self) -> Optional[StateSnapshot]:
        return copy.deepcopy(self.snapshot)

    def save(self, snapshot: StateSnapshot) -> None:
        self.snapshot = copy.deepcopy(snapshot)
        self.saves += 1


class SleepRecorder:
    """Drop-in for time.sleep that records requested pauses instead of waiting."""

    def __init__(self) -> None:
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FixedRandom:
    """random.Random stand-in whose randint always picks the same (clamped) value."""

    def __init__(self, value: int) -> None:
        self.value = value

    def randint(self, a: int, b: int) -> int:
        return max(a, min(b, self.value))
