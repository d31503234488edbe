# capability interfaces consumed by turtle_core
# src/contracts/turtle.py

from __future__ import annotations

from typing import Optional, Protocol

from .types import (
    InspectResult,
    MoveDirection,
    Side,
    StateSnapshot,
    TurnDirection,
    Vector3,
)


class TurtleActuator(Protocol):
    """
    Raw environment interface of a grid-mobile agent body.

    Every primitive reports success with its return value and never raises;
    the core is responsible for interpreting failures. Slot numbers are
    zero-based.
    """

    def move(self, direction: MoveDirection) -> bool:
        ...

    def turn(self, direction: TurnDirection) -> bool:
        ...

    def dig(self, side: Side) -> bool:
        ...

    def attack(self, side: Side) -> bool:
        """Swing at the neighbouring cell; True if an entity was hit."""
        ...

    def detect(self, side: Side) -> bool:
        """True if a solid block occupies the neighbouring cell."""
        ...

    def place(self, side: Side) -> bool:
        ...

    def suck(self, side: Side, count: int) -> bool:
        ...

    def drop(self, side: Side) -> bool:
        ...

    def select_slot(self, slot: int) -> bool:
        ...

    def get_slot_count(self, slot: int) -> int:
        ...

    def get_energy_level(self) -> int:
        ...

    def refuel(self, count: int) -> bool:
        ...

    def inspect(self, side: Side) -> InspectResult:
        ...


class PositioningService(Protocol):
    """External absolute-positioning service (slow and unreliable)."""

    def locate(self, timeout: float) -> Optional[Vector3]:
        """Return the current absolute position, or None on timeout."""
        ...


class StateStore(Protocol):
    """Durable storage for the agent belief state."""

    def load(self) -> Optional[StateSnapshot]:
        """Return the stored snapshot, or None if nothing was saved yet."""
        ...

    def save(self, snapshot: StateSnapshot) -> None:
        ...
