# core shared value types: Vector3, directions, sides, slot roles, snapshots
# src/contracts/types.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


# ---------------------------------------------------------------------------
# Grid vectors
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Vector3:
    """Integer block coordinate on the unbounded world grid."""
    x: int
    y: int
    z: int

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vector3":
        return cls(int(data["x"]), int(data["y"]), int(data["z"]))

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"


ORIGIN = Vector3(0, 0, 0)
UP = Vector3(0, 1, 0)
DOWN = Vector3(0, -1, 0)


# ---------------------------------------------------------------------------
# Directions
# ---------------------------------------------------------------------------

class CardinalDirection(str, Enum):
    """
    Horizontal facing of the agent.

    North is -z and east is +x, matching the block grid reported by the
    positioning service.
    """

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @property
    def vector(self) -> Vector3:
        return _DIRECTION_VECTORS[self]

    def left(self) -> "CardinalDirection":
        return _LEFT_OF[self]

    def right(self) -> "CardinalDirection":
        return _RIGHT_OF[self]

    @classmethod
    def from_delta(cls, delta: Vector3) -> Optional["CardinalDirection"]:
        """Map a single-cell horizontal displacement to a direction, else None."""
        for direction, vec in _DIRECTION_VECTORS.items():
            if vec == delta:
                return direction
        return None


_DIRECTION_VECTORS: Dict[CardinalDirection, Vector3] = {
    CardinalDirection.NORTH: Vector3(0, 0, -1),
    CardinalDirection.SOUTH: Vector3(0, 0, 1),
    CardinalDirection.EAST: Vector3(1, 0, 0),
    CardinalDirection.WEST: Vector3(-1, 0, 0),
}

# North -> West -> South -> East -> North
_LEFT_OF: Dict[CardinalDirection, CardinalDirection] = {
    CardinalDirection.NORTH: CardinalDirection.WEST,
    CardinalDirection.WEST: CardinalDirection.SOUTH,
    CardinalDirection.SOUTH: CardinalDirection.EAST,
    CardinalDirection.EAST: CardinalDirection.NORTH,
}
_RIGHT_OF: Dict[CardinalDirection, CardinalDirection] = {
    after: before for before, after in _LEFT_OF.items()
}


class MoveDirection(str, Enum):
    """Primitive translation commands understood by the actuator."""
    FORWARD = "forward"
    BACK = "back"
    UP = "up"
    DOWN = "down"


class TurnDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class Side(str, Enum):
    """Which neighbouring cell a dig/attack/detect/place/inspect acts on."""
    FRONT = "front"
    UP = "up"
    DOWN = "down"


# Movement axis -> side whose neighbour must be free for that move.
SIDE_FOR_MOVE: Dict[MoveDirection, Side] = {
    MoveDirection.FORWARD: Side.FRONT,
    MoveDirection.UP: Side.UP,
    MoveDirection.DOWN: Side.DOWN,
}


# ---------------------------------------------------------------------------
# Inventory roles
# ---------------------------------------------------------------------------

class SlotRole(str, Enum):
    """
    Reserved inventory roles.

    Custom roles registered at runtime are plain strings; since SlotRole is
    a str enum, both kinds compare and serialize the same way.
    """

    FUEL = "fuel"
    UNLOAD = "unload"
    FREE = "free"


SlotLabel = Union[SlotRole, str]


# ---------------------------------------------------------------------------
# Sensor results and persisted state
# ---------------------------------------------------------------------------

@dataclass
class InspectResult:
    """Result of inspecting a neighbouring cell."""
    present: bool                      # False for air / empty cell
    block_id: Optional[str] = None     # e.g. "minecraft:stone"


@dataclass
class StateSnapshot:
    """
    Durable view of the agent belief state.

    Written after initialization and after state-changing commands, read back
    verbatim on the next boot.
    """
    position: Vector3
    direction: CardinalDirection
    inventory: List[str] = field(default_factory=list)
