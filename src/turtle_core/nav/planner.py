# greedy axis-by-axis path planner
# src/turtle_core/nav/planner.py
"""
Path Planner: move the agent to an arbitrary destination.

Greedy, not shortest-path:
  1. vertical displacement first, one up/down step at a time
  2. the two horizontal axes in a random order per attempt (50/50),
     each as a turn_to + MultiStepMover leg
  3. reconcile with absolute positioning when it is available
  4. if belief position != destination, try again

The retry loop is explicit and bounded by a PlannerPolicy (attempt count
and/or wall-clock). With both limits None it keeps going until it arrives.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any, Callable, Dict, Optional

from contracts.monitoring import EventSink
from contracts.types import CardinalDirection, MoveDirection, Vector3
from env.schema import PlannerConfig
from monitoring.events import Severity, log_event
from monitoring.sinks import LoggingEventSink

from ..errors import UnreachableError
from ..movement import MovementEngine
from ..orientation import TurnEngine
from ..positioning import PositioningReconciler
from ..state import InitializedAgent
from .mover import MultiStepMover


@dataclass
class PlannerPolicy:
    """
    Limits for one move_to() call. None disables a guard.
    """

    max_attempts: Optional[int] = None
    max_duration_s: Optional[float] = None

    @classmethod
    def from_config(cls, config: PlannerConfig) -> "PlannerPolicy":
        return cls(max_attempts=config.max_attempts, max_duration_s=config.max_duration_s)

    def exhausted(self, attempts: int, elapsed_s: float) -> bool:
        if self.max_attempts is not None and attempts >= self.max_attempts:
            return True
        if self.max_duration_s is not None and elapsed_s > self.max_duration_s:
            return True
        return False


@dataclass
class MoveToResult:
    """Structured result of a successful move_to()."""

    destination: Vector3
    attempts: int
    details: Dict[str, Any] = field(default_factory=dict)


class PathPlanner:
    """Composes movement, turning and reconciliation into move_to()."""

    def __init__(
        self,
        movement: MovementEngine,
        turns: TurnEngine,
        mover: MultiStepMover,
        reconciler: Optional[PositioningReconciler] = None,
        *,
        config: Optional[PlannerConfig] = None,
        events: Optional[EventSink] = None,
        sleep: Optional[Callable[[float], None]] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = perf_counter,
    ) -> None:
        self._movement = movement
        self._turns = turns
        self._mover = mover
        self._reconciler = reconciler
        self._cfg = config if config is not None else PlannerConfig()
        self._events: EventSink = events or LoggingEventSink()
        self._sleep = sleep or time.sleep
        self._rng = rng or random.Random()
        self._clock = clock

    def move_to(
        self,
        agent: InitializedAgent,
        destination: Vector3,
        *,
        policy: Optional[PlannerPolicy] = None,
    ) -> MoveToResult:
        """
        Drive the agent to `destination`.

        Returns immediately (no actuator calls) when already there. Raises
        UnreachableError once the policy is exhausted.
        """
        if not isinstance(destination, Vector3):
            log_event(self._events, __name__, Severity.ERROR, "move_to() - Destination not set.")
            raise TypeError(f"destination must be a Vector3, got {destination!r}")

        policy = policy or PlannerPolicy.from_config(self._cfg)
        start = self._clock()
        attempts = 0

        while agent.position != destination:
            elapsed = self._clock() - start
            if policy.exhausted(attempts, elapsed):
                self._log(
                    Severity.ERROR,
                    "move_to() giving up",
                    destination=destination.to_dict(),
                    position=agent.position.to_dict(),
                    attempts=attempts,
                    elapsed_s=round(elapsed, 3),
                )
                raise UnreachableError(
                    details={
                        "destination": destination.to_dict(),
                        "position": agent.position.to_dict(),
                        "attempts": attempts,
                        "elapsed_s": elapsed,
                    }
                )

            attempts += 1
            if not self._attempt(agent, destination):
                self._log(Severity.WARNING, "Move failed, trying again.", attempt=attempts)
            elif agent.position != destination:
                self._log(
                    Severity.WARNING,
                    "Position dont match destination.",
                    position=agent.position.to_dict(),
                    destination=destination.to_dict(),
                )
                self._sleep(self._cfg.mismatch_pause_s)

        return MoveToResult(
            destination=destination,
            attempts=attempts,
            details={"direction": agent.direction.value},
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _attempt(self, agent: InitializedAgent, destination: Vector3) -> bool:
        delta = destination - agent.position

        # Y axis.
        axis = MoveDirection.UP if delta.y > 0 else MoveDirection.DOWN
        for _ in range(abs(delta.y)):
            result = self._movement.step(agent, axis)
            if not result:
                self._log(
                    Severity.WARNING,
                    "Vertical leg blocked",
                    axis=axis.value,
                    reason=result.reason.value if result.reason else None,
                )
                break

        # X and Z in random order.
        legs = [
            (delta.x, CardinalDirection.EAST, CardinalDirection.WEST),
            (delta.z, CardinalDirection.SOUTH, CardinalDirection.NORTH),
        ]
        if self._rng.randint(0, 1) == 0:
            legs.reverse()

        for n, positive, negative in legs:
            if n == 0:
                continue
            if not self._turns.turn_to(agent, positive if n > 0 else negative):
                return False
            if not self._mover.go_forward(agent, n):
                return False

        if (
            self._reconciler is not None
            and self._reconciler.has_service
            and agent.positioning_available
        ):
            self._reconciler.reconcile(agent)

        return True

    def _log(self, severity: Severity, message: str, **payload) -> None:
        log_event(self._events, __name__, severity, message, payload or None)
