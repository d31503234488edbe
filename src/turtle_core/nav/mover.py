# go N cells along the current facing, routing around obstacles
# src/turtle_core/nav/mover.py
"""
Multi-step helper: go N cells along the current facing.

Obstacles are frequently avoidable by a short lateral jog instead of digging
through a protected block, so a failed step triggers a maneuver:

    detour   (at least two cells of budget left)
        left, step, right, pause, step, step, right, step, left
        -> lands two cells ahead, covering this cell and the next

    retreat  (near the end of the leg)
        left, step, around, pause, step back, left
        -> same cell, same facing, then retry the step

    The closing turn is a left, not the right of the classic nforward
    sequence: after the half turn a right would leave the agent facing
    backwards.

After `retreat_tries` retreats the mover performs a fixed bailout jog
(left, step, right, step, step) and reports failure so the planner can
re-plan from wherever the agent ended up.

Every maneuver goes through MovementEngine / TurnEngine, so the belief state
stays exact even when a maneuver is cut short.
"""

from __future__ import annotations

import random
import time
from typing import Callable, Optional, Sequence

from contracts.monitoring import EventSink
from monitoring.events import Severity, log_event
from monitoring.sinks import LoggingEventSink

from ..movement import MovementEngine
from ..orientation import TurnEngine
from ..state import InitializedAgent

AgentOp = Callable[[InitializedAgent], bool]


class MultiStepMover:
    """Runs forward legs with detour / retreat / bailout maneuvers."""

    def __init__(
        self,
        movement: MovementEngine,
        turns: TurnEngine,
        *,
        retreat_tries: int = 3,
        events: Optional[EventSink] = None,
        sleep: Optional[Callable[[float], None]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._movement = movement
        self._turns = turns
        self._retreat_tries = retreat_tries
        self._events: EventSink = events or LoggingEventSink()
        self._sleep = sleep or time.sleep
        self._rng = rng or random.Random()

    def go_forward(self, agent: InitializedAgent, n: int) -> bool:
        """
        Take |n| forward steps. False if the leg had to be abandoned.
        """
        count = abs(n)
        tries = self._retreat_tries
        i = 1

        while i <= count:
            if self._movement.forward(agent):
                i += 1
                continue

            if i <= count - 2:
                self._log(Severity.NOTICE, "Step blocked, going around", step=i, of=count)
                if not self._detour(agent):
                    self._log(Severity.WARNING, "Detour failed", step=i, of=count)
                    return False
                i += 2
                continue

            self._log(Severity.NOTICE, "Step blocked near leg end, retreating", step=i, of=count)
            self._retreat(agent)
            tries -= 1
            if tries == 0:
                self._log(Severity.WARNING, "Giving up on leg, bailing out", step=i, of=count)
                self._bailout(agent)
                return False

        return True

    # ------------------------------------------------------------------
    # Maneuvers
    # ------------------------------------------------------------------

    def _detour(self, agent: InitializedAgent) -> bool:
        if not self._run(agent, (self._turns.turn_left, self._step, self._turns.turn_right)):
            return False
        self._sleep(self._rng.randint(1, 3))
        return self._run(
            agent,
            (
                self._step,
                self._step,
                self._turns.turn_right,
                self._step,
                self._turns.turn_left,
            ),
        )

    def _retreat(self, agent: InitializedAgent) -> None:
        self._turns.turn_left(agent)
        moved = self._step(agent)
        self._turns.turn_around(agent)
        self._sleep(self._rng.randint(2, 5))
        if moved:
            self._step(agent)
        self._turns.turn_left(agent)

    def _bailout(self, agent: InitializedAgent) -> None:
        self._turns.turn_left(agent)
        self._step(agent)
        self._turns.turn_right(agent)
        self._step(agent)
        self._step(agent)

    def _step(self, agent: InitializedAgent) -> bool:
        return bool(self._movement.forward(agent))

    @staticmethod
    def _run(agent: InitializedAgent, ops: Sequence[AgentOp]) -> bool:
        for op in ops:
            if not op(agent):
                return False
        return True

    def _log(self, severity: Severity, message: str, **payload) -> None:
        log_event(self._events, __name__, severity, message, payload or None)
