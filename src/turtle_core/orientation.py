# src/turtle_core/orientation.py
"""
Turn/Orientation Engine for turtle_core.

Facing changes only as a consequence of a confirmed turn primitive:
left follows North -> West -> South -> East -> North, right the inverse.
A failed primitive leaves the belief direction untouched.

turn_to() is a direct lookup over the 4x4 (current, target) table, never a
search, so it issues 0, 1 or 2 quarter turns. Half turns use two rights.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple, Union

from contracts.monitoring import EventSink
from contracts.turtle import TurtleActuator
from contracts.types import CardinalDirection, TurnDirection
from monitoring.events import Severity, log_event
from monitoring.sinks import LoggingEventSink

from .errors import InvalidDirectionError
from .state import InitializedAgent

N = CardinalDirection.NORTH
S = CardinalDirection.SOUTH
E = CardinalDirection.EAST
W = CardinalDirection.WEST
L = TurnDirection.LEFT
R = TurnDirection.RIGHT

# (current, target) -> turns to issue
TURN_TABLE: Dict[Tuple[CardinalDirection, CardinalDirection], Tuple[TurnDirection, ...]] = {
    (N, N): (), (S, N): (R, R), (E, N): (L,), (W, N): (R,),
    (S, S): (), (N, S): (R, R), (W, S): (L,), (E, S): (R,),
    (W, W): (), (E, W): (R, R), (N, W): (L,), (S, W): (R,),
    (E, E): (), (W, E): (R, R), (S, E): (L,), (N, E): (R,),
}


class TurnEngine:
    """Quarter-turn primitives with belief-direction bookkeeping."""

    def __init__(
        self,
        actuator: TurtleActuator,
        *,
        events: Optional[EventSink] = None,
    ) -> None:
        self._actuator = actuator
        self._events: EventSink = events or LoggingEventSink()

    def turn_left(self, agent: InitializedAgent) -> bool:
        return self._turn(agent, TurnDirection.LEFT)

    def turn_right(self, agent: InitializedAgent) -> bool:
        return self._turn(agent, TurnDirection.RIGHT)

    def turn_around(self, agent: InitializedAgent) -> bool:
        return self.turn_left(agent) and self.turn_left(agent)

    def turn_to(
        self,
        agent: InitializedAgent,
        target: Union[CardinalDirection, str],
    ) -> bool:
        """Face `target` with the minimal number of quarter turns."""
        wanted = self.coerce_direction(target)
        for turn in self.plan_turns(agent.direction, wanted):
            if not self._turn(agent, turn):
                return False
        return True

    @staticmethod
    def plan_turns(
        current: CardinalDirection,
        target: CardinalDirection,
    ) -> Tuple[TurnDirection, ...]:
        return TURN_TABLE[(current, target)]

    def coerce_direction(self, value: Union[CardinalDirection, str]) -> CardinalDirection:
        """Accept a CardinalDirection or its (case-insensitive) name."""
        if isinstance(value, CardinalDirection):
            return value
        try:
            return CardinalDirection(str(value).lower())
        except ValueError:
            log_event(
                self._events,
                __name__,
                Severity.ERROR,
                "Invalid goto direction - turn_to()",
                {"direction": repr(value)},
            )
            raise InvalidDirectionError(details={"direction": repr(value)}) from None

    def _turn(self, agent: InitializedAgent, turn: TurnDirection) -> bool:
        if not self._actuator.turn(turn):
            log_event(
                self._events,
                __name__,
                Severity.WARNING,
                f"Could not turn {turn.value}",
                {"facing": agent.direction.value},
            )
            return False

        if turn is TurnDirection.LEFT:
            agent.face(agent.direction.left())
        else:
            agent.face(agent.direction.right())
        return True
