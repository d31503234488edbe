# belief state + readiness gate
# src/turtle_core/state.py
"""
Position Model for turtle_core.

AgentState is the single owned belief state: position, facing direction,
inventory slot map and whether absolute positioning is currently usable.

Readiness is a type, not a flag: components only ever receive an
InitializedAgent, which cannot be constructed without a complete state.
PositionModel is the one place that holds "maybe not ready yet" and turns
that into NotInitializedError for public callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from contracts.monitoring import EventSink
from contracts.types import CardinalDirection, StateSnapshot, Vector3
from monitoring.events import Severity, log_event
from monitoring.sinks import LoggingEventSink

from .errors import NotInitializedError
from .inventory import SlotMap


@dataclass
class AgentState:
    """Mutable belief state of the agent."""

    position: Vector3
    direction: CardinalDirection
    inventory: SlotMap
    positioning_available: bool = False

    def to_snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            position=self.position,
            direction=self.direction,
            inventory=self.inventory.labels(),
        )


class InitializedAgent:
    """
    Readiness token wrapping an AgentState.

    Mutators are narrow: MovementEngine calls advance(),
    PositioningReconciler calls correct_position(), the turn engine calls
    face(). Nothing else writes position or direction.
    """

    __slots__ = ("_state",)

    def __init__(self, state: AgentState) -> None:
        if not isinstance(state.position, Vector3):
            raise NotInitializedError(details={"reason": "position_missing"})
        if not isinstance(state.direction, CardinalDirection):
            raise NotInitializedError(details={"reason": "direction_missing"})
        self._state = state

    @property
    def state(self) -> AgentState:
        return self._state

    @property
    def position(self) -> Vector3:
        return self._state.position

    @property
    def direction(self) -> CardinalDirection:
        return self._state.direction

    @property
    def inventory(self) -> SlotMap:
        return self._state.inventory

    @property
    def positioning_available(self) -> bool:
        return self._state.positioning_available

    @positioning_available.setter
    def positioning_available(self, value: bool) -> None:
        self._state.positioning_available = bool(value)

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def advance(self, delta: Vector3) -> Vector3:
        self._state.position = self._state.position + delta
        return self._state.position

    def correct_position(self, position: Vector3) -> None:
        self._state.position = position

    def face(self, direction: CardinalDirection) -> None:
        self._state.direction = direction

    def snapshot(self) -> StateSnapshot:
        return self._state.to_snapshot()

    def __repr__(self) -> str:
        return (
            f"InitializedAgent(position={self.position}, "
            f"direction={self.direction.value})"
        )


class PositionModel:
    """
    Readiness gate in front of the belief state.

    Accessors raise NotInitializedError until mark_ready() has been called by
    the initialization sequencer.
    """

    def __init__(self, events: Optional[EventSink] = None) -> None:
        self._agent: Optional[InitializedAgent] = None
        self._events: EventSink = events or LoggingEventSink()

    @property
    def ready(self) -> bool:
        return self._agent is not None

    def mark_ready(self, agent: InitializedAgent) -> None:
        self._agent = agent

    def require(self) -> InitializedAgent:
        if self._agent is None:
            log_event(self._events, __name__, Severity.ERROR, "Turtle is not initialized.")
            raise NotInitializedError(details={"reason": "agent_not_initialized"})
        return self._agent

    def get_position(self) -> Vector3:
        return self.require().position

    def get_direction(self) -> CardinalDirection:
        return self.require().direction

    def get_inventory(self) -> List[str]:
        return self.require().inventory.labels()
