# src/turtle_core/bootstrap.py
"""
Initialization Sequencer for turtle_core.

Runs once at boot:

    1. load the persisted snapshot (if any, and if readable)
    2. acquire an absolute position, retrying with pauses
    3. derive the facing direction with a one-cell probe, retrying
    4. fall back to the snapshot, or to origin/north, for whatever could
       not be acquired
    5. open the readiness gate and persist the resulting state

Fallback is not failure: the agent always ends up ready, possibly in
dead-reckoning-only mode.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from contracts.monitoring import EventSink
from contracts.turtle import StateStore
from contracts.types import ORIGIN, CardinalDirection, StateSnapshot, Vector3
from env.schema import InventoryConfig, PositioningConfig
from monitoring.events import Severity, log_event
from monitoring.sinks import LoggingEventSink

from .errors import DirectionUnknownError, StateLoadError
from .inventory import SlotMap
from .positioning import DirectionProbe, PositioningReconciler
from .state import AgentState, InitializedAgent, PositionModel


@dataclass
class InitReport:
    """Where each part of the initial belief state came from."""

    position_source: str      # "gps" | "snapshot" | "default"
    direction_source: str     # "probe" | "snapshot" | "default"
    snapshot_loaded: bool


class InitializationSequencer:
    """Boot-time orchestration ending in PositionModel.mark_ready()."""

    def __init__(
        self,
        reconciler: PositioningReconciler,
        model: PositionModel,
        store: Optional[StateStore] = None,
        *,
        positioning: Optional[PositioningConfig] = None,
        inventory: Optional[InventoryConfig] = None,
        events: Optional[EventSink] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self._reconciler = reconciler
        self._model = model
        self._store = store
        self._pos_cfg = positioning if positioning is not None else PositioningConfig()
        self._inv_cfg = inventory if inventory is not None else InventoryConfig()
        self._events: EventSink = events or LoggingEventSink()
        self._sleep = sleep or time.sleep
        self.report: Optional[InitReport] = None

    def initialize(self) -> InitializedAgent:
        snapshot = self._load_snapshot()
        inventory = self._initial_inventory(snapshot)

        self._log(Severity.DEBUG, "Set position")
        position = self._acquire_position()

        if position is None:
            self._log(Severity.WARNING, "Positioning unavailable, continuing on dead reckoning.")
            if snapshot is not None:
                position, direction = snapshot.position, snapshot.direction
                position_source = direction_source = "snapshot"
            else:
                position, direction = ORIGIN, CardinalDirection.NORTH
                position_source = direction_source = "default"
            available = False
        else:
            position_source = "gps"
            available = True
            if snapshot is not None and snapshot.position != position:
                self._log(
                    Severity.WARNING,
                    "Stored position is stale, using GPS.",
                    stored=snapshot.position.to_dict(),
                    actual=position.to_dict(),
                )

            self._log(Severity.DEBUG, "Set facing")
            probe = self._acquire_direction(inventory)
            if probe is not None:
                direction, position = probe.direction, probe.position
                direction_source = "probe"
            else:
                # A failed probe may have left the agent one cell off.
                position = self._relocate(position)
                if snapshot is not None:
                    direction, direction_source = snapshot.direction, "snapshot"
                else:
                    direction, direction_source = CardinalDirection.NORTH, "default"

        agent = InitializedAgent(
            AgentState(
                position=position,
                direction=direction,
                inventory=inventory,
                positioning_available=available,
            )
        )
        # Unblock every other component.
        self._model.mark_ready(agent)

        self.report = InitReport(
            position_source=position_source,
            direction_source=direction_source,
            snapshot_loaded=snapshot is not None,
        )
        self._log(
            Severity.NOTICE,
            "Turtle initialized",
            position=position.to_dict(),
            direction=direction.value,
            position_source=position_source,
            direction_source=direction_source,
        )

        if self._store is not None:
            self._store.save(agent.snapshot())
        return agent

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _load_snapshot(self) -> Optional[StateSnapshot]:
        if self._store is None:
            return None
        try:
            return self._store.load()
        except StateLoadError as exc:
            self._log(Severity.WARNING, "Ignoring unreadable saved state", error=str(exc))
            return None

    def _initial_inventory(self, snapshot: Optional[StateSnapshot]) -> SlotMap:
        capacity = self._inv_cfg.capacity
        if snapshot is not None and snapshot.inventory:
            try:
                return SlotMap.from_labels(snapshot.inventory, capacity)
            except ValueError as exc:
                self._log(Severity.WARNING, "Ignoring saved inventory map", error=str(exc))
        return SlotMap.default(capacity, self._inv_cfg.initial_roles)

    def _acquire_position(self) -> Optional[Vector3]:
        if not self._reconciler.has_service:
            return None
        for attempt in range(self._pos_cfg.init_attempts):
            position = self._reconciler.locate()
            if position is not None:
                return position
            if attempt + 1 < self._pos_cfg.init_attempts:
                self._sleep(self._pos_cfg.init_pause_s)
        return None

    def _relocate(self, position: Vector3) -> Vector3:
        current = self._reconciler.locate()
        if current is None or current == position:
            return position
        self._log(
            Severity.WARNING,
            "Direction probe moved the turtle, using GPS.",
            before=position.to_dict(),
            actual=current.to_dict(),
        )
        return current

    def _acquire_direction(self, inventory: SlotMap) -> Optional[DirectionProbe]:
        if not self._pos_cfg.probe_direction:
            return None
        for attempt in range(self._pos_cfg.init_attempts):
            try:
                return self._reconciler.derive_direction(inventory)
            except DirectionUnknownError as exc:
                self._log(
                    Severity.WARNING,
                    "Direction probe failed",
                    attempt=attempt + 1,
                    error=str(exc),
                )
            if attempt + 1 < self._pos_cfg.init_attempts:
                self._sleep(self._pos_cfg.init_pause_s)
        return None

    def _log(self, severity: Severity, message: str, **payload) -> None:
        log_event(self._events, __name__, severity, message, payload or None)
