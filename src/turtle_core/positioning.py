# src/turtle_core/positioning.py
"""
Positioning Reconciler for turtle_core.

Dead reckoning drifts whenever a primitive lies about its outcome or the
agent is moved externally. The reconciler queries the absolute-positioning
service and, on disagreement, overwrites the belief position outright
(a hard correction, never a blend) with a warning.

The service is slow and intermittently unavailable, so every query is
two-tier: a short probe, then a longer one. When both time out, belief
state is left alone and the agent continues on dead reckoning only.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from contracts.monitoring import EventSink
from contracts.turtle import PositioningService, TurtleActuator
from contracts.types import CardinalDirection, MoveDirection, Side, Vector3
from env.schema import PositioningConfig
from monitoring.events import Severity, log_event
from monitoring.sinks import LoggingEventSink

from .errors import DirectionUnknownError
from .fuel import FuelWatchdog
from .inventory import SlotMap
from .protection import ProtectedBlockRegistry
from .state import InitializedAgent


@dataclass
class DirectionProbe:
    """Outcome of derive_direction()."""

    direction: CardinalDirection
    position: Vector3      # where the agent stands after the probe
    returned: bool         # False if the step back failed


class PositioningReconciler:
    """Absolute-position queries, reconciliation and direction probing."""

    def __init__(
        self,
        actuator: TurtleActuator,
        service: Optional[PositioningService],
        *,
        fuel: Optional[FuelWatchdog] = None,
        config: Optional[PositioningConfig] = None,
        protection: Optional[ProtectedBlockRegistry] = None,
        events: Optional[EventSink] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self._actuator = actuator
        self._service = service
        self._fuel = fuel
        self._cfg = config if config is not None else PositioningConfig()
        self._protection = protection or ProtectedBlockRegistry()
        self._events: EventSink = events or LoggingEventSink()
        self._sleep = sleep or time.sleep

    @property
    def has_service(self) -> bool:
        return self._service is not None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def locate(self) -> Optional[Vector3]:
        """Short probe, then a longer one. None if both time out."""
        if self._service is None:
            return None

        position = self._service.locate(self._cfg.probe_timeout_s)
        if position is None:
            position = self._service.locate(self._cfg.fallback_timeout_s)

        if position is None:
            self._log(Severity.WARNING, "Could not get GPS position.")
            return None

        self._log(Severity.DEBUG, f"GPS = {position}")
        return position

    def reconcile(self, agent: InitializedAgent) -> bool:
        """
        Compare belief position with the service and correct on mismatch.

        Returns False (leaving belief state untouched) when no reading could
        be obtained.
        """
        position = self.locate()
        if position is None:
            agent.positioning_available = False
            return False

        agent.positioning_available = True
        if position == agent.position:
            return True

        self._log(
            Severity.WARNING,
            "Wrong location. Correcting with GPS.",
            belief=agent.position.to_dict(),
            actual=position.to_dict(),
        )
        agent.correct_position(position)
        return True

    # ------------------------------------------------------------------
    # Direction probe
    # ------------------------------------------------------------------

    def derive_direction(self, inventory: Optional[SlotMap] = None) -> DirectionProbe:
        """
        Establish facing from two position samples around a one-cell step.

        Samples, steps forward (digging through non-protected blocks),
        samples again, maps the displacement to a cardinal direction, then
        steps back. Raises DirectionUnknownError when a sample is missing,
        the probe step never succeeds, or the displacement is not one cell.
        """
        if self._fuel is not None and inventory is not None:
            self._fuel.ensure_fuel(inventory)

        first = self.locate()
        if first is None:
            self._log(Severity.WARNING, "GPS position not found.")
            raise DirectionUnknownError(details={"reason": "position_unavailable"})

        if not self._probe_forward():
            self._log(Severity.WARNING, "Direction probe could not move forward.")
            raise DirectionUnknownError(details={"reason": "probe_blocked"})

        second = self.locate()
        returned = bool(self._actuator.move(MoveDirection.BACK))
        if not returned:
            self._log(Severity.WARNING, "Direction probe could not step back.")

        if second is None:
            self._log(Severity.WARNING, "GPS position not found.")
            raise DirectionUnknownError(
                details={"reason": "position_unavailable", "returned": returned}
            )

        direction = CardinalDirection.from_delta(second - first)
        if direction is None:
            self._log(
                Severity.WARNING,
                "Direction probe displacement is not a single cell.",
                first=first.to_dict(),
                second=second.to_dict(),
            )
            raise DirectionUnknownError(
                details={"reason": "bad_displacement", "returned": returned}
            )

        return DirectionProbe(
            direction=direction,
            position=first if returned else second,
            returned=returned,
        )

    def _probe_forward(self) -> bool:
        for _ in range(self._cfg.probe_move_attempts):
            if self._actuator.move(MoveDirection.FORWARD):
                return True
            if self._protection.is_breakable(self._actuator, Side.FRONT):
                self._actuator.dig(Side.FRONT)
            self._sleep(self._cfg.probe_pause_s)
        return False

    def _log(self, severity: Severity, message: str, **payload) -> None:
        log_event(self._events, __name__, severity, message, payload or None)
