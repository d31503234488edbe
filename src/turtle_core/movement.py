# src/turtle_core/movement.py
"""
Movement Engine for turtle_core.

Turns one primitive move into a guaranteed-eventual-or-failed single-cell
step. On a failed move it loops, at most `cap` times (50 forward, 30
vertical), classifying the obstruction in priority order:

    1. energy below the low-water mark  -> refuel
    2. entity in the target cell        -> attack until it stops answering
    3. protected block                  -> Blocked(PROTECTED), immediately
    4. removable block                  -> dig; dig failure -> Blocked(IMPASSABLE)

and re-attempts the move after each branch. Running out of iterations is
Blocked(TIMEOUT).

The belief position changes if and only if the primitive move reported
success, by exactly one cell.
"""

from __future__ import annotations

import time
from typing import Callable, Dict, Optional

from contracts.monitoring import EventSink
from contracts.turtle import TurtleActuator
from contracts.types import DOWN, SIDE_FOR_MOVE, UP, MoveDirection, Side, Vector3
from env.schema import MovementConfig
from monitoring.events import Severity, log_event
from monitoring.sinks import LoggingEventSink

from .errors import BlockReason, InvalidDirectionError, StepResult
from .fuel import FuelWatchdog
from .protection import ProtectedBlockRegistry
from .state import InitializedAgent
from .tracing import StepTracer

_VERTICAL: Dict[MoveDirection, Vector3] = {
    MoveDirection.UP: UP,
    MoveDirection.DOWN: DOWN,
}


class MovementEngine:
    """Per-step state machine for forward / up / down."""

    def __init__(
        self,
        actuator: TurtleActuator,
        fuel: FuelWatchdog,
        *,
        config: Optional[MovementConfig] = None,
        protection: Optional[ProtectedBlockRegistry] = None,
        events: Optional[EventSink] = None,
        tracer: Optional[StepTracer] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self._actuator = actuator
        self._fuel = fuel
        self._cfg = config if config is not None else MovementConfig()
        self._protection = protection or ProtectedBlockRegistry()
        self._events: EventSink = events or LoggingEventSink()
        self._tracer = tracer or StepTracer()
        self._sleep = sleep or time.sleep

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def step(self, agent: InitializedAgent, axis: MoveDirection) -> StepResult:
        axis = self._coerce_axis(axis)
        side = SIDE_FOR_MOVE[axis]
        cap = self.retry_cap(axis)

        if self._actuator.move(axis):
            return self._moved(agent, axis, retries=0)

        retries = 0
        while True:
            if retries >= cap:
                self._log(Severity.ERROR, f"Timeout on {axis.value}()", axis=axis.value, retries=retries)
                return self._blocked(agent, axis, BlockReason.TIMEOUT, retries)
            retries += 1

            if self._fuel.needs_fuel():
                self._log(Severity.NOTICE, "Fuel is almost over. Refueling!", axis=axis.value)
                self._fuel.refuel(agent.inventory)

            elif self._actuator.attack(side):
                self._log(Severity.NOTICE, "Mob on my way. Die!", side=side.value)
                self._fight(side)

            elif not self._protection.is_breakable(self._actuator, side):
                self._log(Severity.WARNING, "Unbreakable block in the way!", side=side.value)
                return self._blocked(agent, axis, BlockReason.PROTECTED, retries)

            elif self._actuator.detect(side):
                self._log(Severity.DEBUG, "Block on the way. Dig!", side=side.value)
                if not self._actuator.dig(side):
                    self._log(Severity.ERROR, "Hit bedrock", side=side.value)
                    return self._blocked(agent, axis, BlockReason.IMPASSABLE, retries)

            if self._actuator.move(axis):
                return self._moved(agent, axis, retries=retries)

    def forward(self, agent: InitializedAgent) -> StepResult:
        return self.step(agent, MoveDirection.FORWARD)

    def up(self, agent: InitializedAgent) -> StepResult:
        return self.step(agent, MoveDirection.UP)

    def down(self, agent: InitializedAgent) -> StepResult:
        return self.step(agent, MoveDirection.DOWN)

    def retry_cap(self, axis: MoveDirection) -> int:
        if axis is MoveDirection.FORWARD:
            return self._cfg.forward_retry_cap
        return self._cfg.vertical_retry_cap

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _coerce_axis(self, raw: MoveDirection) -> MoveDirection:
        try:
            axis: Optional[MoveDirection] = MoveDirection(raw)
        except ValueError:
            axis = None
        if axis is None or axis not in SIDE_FOR_MOVE:
            self._log(Severity.ERROR, "step() invalid axis", axis=str(raw))
            raise InvalidDirectionError(details={"axis": str(raw)})
        return axis

    def _fight(self, side: Side) -> None:
        swings = 1
        self._sleep(self._cfg.attack_pause_s)
        while swings < self._cfg.max_attack_swings and self._actuator.attack(side):
            swings += 1
            self._sleep(self._cfg.attack_pause_s)

    def _moved(self, agent: InitializedAgent, axis: MoveDirection, retries: int) -> StepResult:
        delta = agent.direction.vector if axis is MoveDirection.FORWARD else _VERTICAL[axis]
        position = agent.advance(delta)
        result = StepResult.moved(retries)
        self._tracer.record(axis, result, position)
        return result

    def _blocked(
        self,
        agent: InitializedAgent,
        axis: MoveDirection,
        reason: BlockReason,
        retries: int,
    ) -> StepResult:
        result = StepResult.blocked(reason, retries)
        self._tracer.record(axis, result, agent.position)
        return result

    def _log(self, severity: Severity, message: str, **payload) -> None:
        log_event(self._events, __name__, severity, message, payload or None)
