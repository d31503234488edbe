# src/turtle_core/core.py
"""
TurtleCore: the public facade of the navigation and state-recovery engine.

This module wires together:
- PositionModel (belief state + readiness gate)
- MovementEngine / TurnEngine (single steps and turns)
- MultiStepMover / PathPlanner (legs and move_to)
- PositioningReconciler (absolute positioning, direction probe)
- FuelWatchdog / InventorySlotManager
- InitializationSequencer + StateStore (boot and persistence)

Public surface:
    class TurtleCore:
        initialize() -> InitializedAgent
        get_position() / get_direction() / get_inventory() / get_pos_x|y|z()
        step(axis) / forward() / up() / down()
        turn_left() / turn_right() / turn_around() / turn_to(direction)
        go_forward(n) / move_to(destination)
        reconcile() / chunk_origin()
        ensure_fuel() / refuel()
        register(label) / select(label) / select_free() / unload()
        check_inventory() / quick_check_inventory() / is_breakable(side)
        save_state()

Design constraints:
- Every public operation except initialize() requires readiness and raises
  NotInitializedError otherwise.
- Capabilities (actuator, positioning service, storage, event sink) are
  injected; nothing here assumes a transport or storage encoding.
- Pauses and randomness are injected so tests run instantly and
  deterministically.
"""

from __future__ import annotations

import random
import time
from pathlib import Path
from typing import Callable, List, Optional, Union

from contracts.monitoring import EventSink
from contracts.turtle import PositioningService, StateStore, TurtleActuator
from contracts.types import CardinalDirection, MoveDirection, Side, SlotLabel, Vector3
from env.schema import TurtleConfig
from monitoring.sinks import LoggingEventSink

from .bootstrap import InitializationSequencer
from .errors import StepResult
from .fuel import FuelWatchdog
from .inventory import InventorySlotManager
from .movement import MovementEngine
from .nav import MoveToResult, MultiStepMover, PathPlanner, PlannerPolicy
from .orientation import TurnEngine
from .persistence import JsonStateStore
from .positioning import PositioningReconciler
from .protection import ProtectedBlockRegistry
from .state import InitializedAgent, PositionModel
from .tracing import StepTracer

CHUNK_SIZE = 16


def chunk_origin(position: Vector3) -> Vector3:
    """Corner of the 16x16 chunk column containing `position` (y unchanged)."""
    return Vector3(
        (position.x // CHUNK_SIZE) * CHUNK_SIZE,
        position.y,
        (position.z // CHUNK_SIZE) * CHUNK_SIZE,
    )


class TurtleCore:
    """
    Concrete navigation core for one grid-mobile agent.

    Not thread-safe: exactly one command sequence may be in flight.
    """

    def __init__(
        self,
        actuator: TurtleActuator,
        *,
        positioning: Optional[PositioningService] = None,
        store: Optional[StateStore] = None,
        config: Optional[TurtleConfig] = None,
        events: Optional[EventSink] = None,
        tracer: Optional[StepTracer] = None,
        sleep: Optional[Callable[[float], None]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Build a TurtleCore.

        If `store` is None, state is persisted to the JSON file named by
        config.persistence.state_file. Pass a store explicitly to use another
        backend.
        """
        self._cfg = config if config is not None else TurtleConfig()
        self._actuator = actuator
        self._events: EventSink = events or LoggingEventSink()
        self._store: StateStore = (
            store if store is not None else JsonStateStore(Path(self._cfg.persistence.state_file))
        )
        sleep = sleep or time.sleep
        rng = rng or random.Random()

        self._model = PositionModel(self._events)
        self._tracer = tracer or StepTracer()
        self._protection = ProtectedBlockRegistry(self._cfg.protected_blocks)

        self._fuel = FuelWatchdog(
            actuator,
            config=self._cfg.fuel,
            protection=self._protection,
            events=self._events,
        )
        self._movement = MovementEngine(
            actuator,
            self._fuel,
            config=self._cfg.movement,
            protection=self._protection,
            events=self._events,
            tracer=self._tracer,
            sleep=sleep,
        )
        self._turns = TurnEngine(actuator, events=self._events)
        self._reconciler = PositioningReconciler(
            actuator,
            positioning,
            fuel=self._fuel,
            config=self._cfg.positioning,
            protection=self._protection,
            events=self._events,
            sleep=sleep,
        )
        self._mover = MultiStepMover(
            self._movement,
            self._turns,
            retreat_tries=self._cfg.planner.retreat_tries,
            events=self._events,
            sleep=sleep,
            rng=rng,
        )
        self._planner = PathPlanner(
            self._movement,
            self._turns,
            self._mover,
            self._reconciler,
            config=self._cfg.planner,
            events=self._events,
            sleep=sleep,
            rng=rng,
        )
        self._inventory = InventorySlotManager(
            actuator,
            config=self._cfg.inventory,
            protection=self._protection,
            events=self._events,
            sleep=sleep,
        )
        self._sequencer = InitializationSequencer(
            self._reconciler,
            self._model,
            self._store,
            positioning=self._cfg.positioning,
            inventory=self._cfg.inventory,
            events=self._events,
            sleep=sleep,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> InitializedAgent:
        """Run the boot sequence; the agent is ready afterwards."""
        return self._sequencer.initialize()

    @property
    def ready(self) -> bool:
        return self._model.ready

    @property
    def config(self) -> TurtleConfig:
        return self._cfg

    @property
    def tracer(self) -> StepTracer:
        return self._tracer

    def save_state(self) -> None:
        self._store.save(self._model.require().snapshot())

    # ------------------------------------------------------------------
    # Position model
    # ------------------------------------------------------------------

    def get_position(self) -> Vector3:
        return self._model.get_position()

    def get_direction(self) -> CardinalDirection:
        return self._model.get_direction()

    def get_inventory(self) -> List[str]:
        return self._model.get_inventory()

    def get_pos_x(self) -> int:
        return self._model.get_position().x

    def get_pos_y(self) -> int:
        return self._model.get_position().y

    def get_pos_z(self) -> int:
        return self._model.get_position().z

    # ------------------------------------------------------------------
    # Movement and turning
    # ------------------------------------------------------------------

    def step(self, axis: MoveDirection) -> StepResult:
        return self._movement.step(self._model.require(), axis)

    def forward(self) -> StepResult:
        return self.step(MoveDirection.FORWARD)

    def up(self) -> StepResult:
        return self.step(MoveDirection.UP)

    def down(self) -> StepResult:
        return self.step(MoveDirection.DOWN)

    def turn_left(self) -> bool:
        return self._turns.turn_left(self._model.require())

    def turn_right(self) -> bool:
        return self._turns.turn_right(self._model.require())

    def turn_around(self) -> bool:
        return self._turns.turn_around(self._model.require())

    def turn_to(self, direction: Union[CardinalDirection, str]) -> bool:
        return self._turns.turn_to(self._model.require(), direction)

    def go_forward(self, n: int) -> bool:
        return self._mover.go_forward(self._model.require(), n)

    def move_to(
        self,
        destination: Vector3,
        *,
        policy: Optional[PlannerPolicy] = None,
    ) -> MoveToResult:
        agent = self._model.require()
        try:
            return self._planner.move_to(agent, destination, policy=policy)
        finally:
            self._store.save(agent.snapshot())

    # ------------------------------------------------------------------
    # Positioning
    # ------------------------------------------------------------------

    def reconcile(self) -> bool:
        return self._reconciler.reconcile(self._model.require())

    def chunk_origin(self) -> Optional[Vector3]:
        """Chunk corner of the current position; None without positioning."""
        agent = self._model.require()
        if not agent.positioning_available:
            return None
        return chunk_origin(agent.position)

    # ------------------------------------------------------------------
    # Fuel and inventory
    # ------------------------------------------------------------------

    def ensure_fuel(self) -> bool:
        return self._fuel.ensure_fuel(self._model.require().inventory)

    def refuel(self) -> bool:
        return self._fuel.refuel(self._model.require().inventory)

    def register(self, label: SlotLabel) -> bool:
        agent = self._model.require()
        registered = self._inventory.register(agent, label)
        if registered:
            self._store.save(agent.snapshot())
        return registered

    def select(self, label: SlotLabel) -> bool:
        return self._inventory.select(self._model.require(), label)

    def select_free(self) -> bool:
        return self._inventory.select_free(self._model.require())

    def unload(self) -> bool:
        return self._inventory.unload(self._model.require())

    def check_inventory(self) -> bool:
        return self._inventory.check_inventory(self._model.require())

    def quick_check_inventory(self) -> bool:
        return self._inventory.quick_check_inventory(self._model.require())

    def is_breakable(self, side: Union[Side, str] = Side.FRONT) -> bool:
        self._model.require()
        return self._protection.is_breakable(self._actuator, Side(side))
