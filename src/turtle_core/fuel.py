# src/turtle_core/fuel.py
"""
Fuel Watchdog for turtle_core.

Keeps the energy level above the low-water mark. The refuel protocol uses a
paired remote energy buffer (a fuel-source container kept in the fuel slot):

    1. clear the cell in front (never a protected block)
    2. place the container from the fuel slot
    3. suck fuel into the intake slot and burn it
    4. dig the container back and reselect the working slot

RefuelFailedError is raised when energy is still zero afterwards; at that
point no movement is possible and retrying is pointless.
"""

from __future__ import annotations

from typing import Optional

from contracts.monitoring import EventSink
from contracts.turtle import TurtleActuator
from contracts.types import Side, SlotRole
from env.schema import FuelConfig
from monitoring.events import Severity, log_event
from monitoring.sinks import LoggingEventSink

from .errors import RefuelFailedError
from .inventory import SlotMap
from .protection import ProtectedBlockRegistry


class FuelWatchdog:
    """Low-water-mark check plus the refuel protocol."""

    def __init__(
        self,
        actuator: TurtleActuator,
        *,
        config: Optional[FuelConfig] = None,
        protection: Optional[ProtectedBlockRegistry] = None,
        events: Optional[EventSink] = None,
    ) -> None:
        self._actuator = actuator
        self._cfg = config if config is not None else FuelConfig()
        self._protection = protection or ProtectedBlockRegistry()
        self._events: EventSink = events or LoggingEventSink()

    @property
    def low_water_mark(self) -> int:
        return self._cfg.low_water_mark

    def needs_fuel(self) -> bool:
        return self._actuator.get_energy_level() < self._cfg.low_water_mark

    def ensure_fuel(self, inventory: SlotMap) -> bool:
        """Refuel if below the low-water mark. True when fuel is sufficient."""
        if not self.needs_fuel():
            return True
        log_event(
            self._events,
            __name__,
            Severity.NOTICE,
            "Fuel is almost over. Refueling!",
            {"level": self._actuator.get_energy_level()},
        )
        return self.refuel(inventory)

    def refuel(self, inventory: SlotMap) -> bool:
        """
        Run the refuel protocol.

        Returns False when the protocol had to be aborted (no fuel slot,
        protected or impassable block in front, container not placeable)
        while some energy remains. Raises RefuelFailedError when energy ends
        at zero.
        """
        fuel_slot = inventory.find(SlotRole.FUEL)
        if fuel_slot is None:
            return self._abort("refuel() no fuel slot registered")

        if self._actuator.detect(Side.FRONT):
            if not self._protection.is_breakable(self._actuator, Side.FRONT):
                return self._abort("refuel() protected block in front")
            if not self._actuator.dig(Side.FRONT):
                return self._abort("Bedrock stop - refuel()")

        self._actuator.select_slot(fuel_slot)
        if not self._actuator.place(Side.FRONT):
            return self._abort("refuel() could not place fuel container")

        intake = self._intake_slot(inventory)
        self._actuator.select_slot(intake)
        self._actuator.suck(Side.FRONT, self._cfg.suck_count)
        self._actuator.refuel(self._cfg.refuel_count)

        level = self._actuator.get_energy_level()
        log_event(self._events, __name__, Severity.NOTICE, f"Fuel level: {level}", {"level": level})

        # Retrieve container, back to the working slot.
        self._actuator.select_slot(fuel_slot)
        self._actuator.dig(Side.FRONT)
        boundary = inventory.free_boundary()
        self._actuator.select_slot(boundary if boundary is not None else intake)

        if level == 0:
            log_event(self._events, __name__, Severity.ERROR, "Could NOT refuel.")
            raise RefuelFailedError(details={"level": level})
        return True

    def _intake_slot(self, inventory: SlotMap) -> int:
        if self._cfg.intake_slot is not None:
            return self._cfg.intake_slot
        return inventory.capacity - 1

    def _abort(self, message: str) -> bool:
        level = self._actuator.get_energy_level()
        log_event(self._events, __name__, Severity.ERROR, message, {"level": level})
        if level == 0:
            raise RefuelFailedError(details={"level": level, "reason": message})
        return False
