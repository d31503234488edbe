# tests/test_fuel.py
"""
Tests for FuelWatchdog: low-water mark and the portal refuel protocol.
"""

from __future__ import annotations

import pytest

from contracts.types import Side, Vector3
from env.schema import FuelConfig
from monitoring.events import Severity
from turtle_core.errors import RefuelFailedError
from turtle_core.fuel import FuelWatchdog
from turtle_core.inventory import SlotMap
from turtle_core.testing import FakeTurtle
from turtle_core.testing.fakes import CONTAINER, FUEL_ITEM

FRONT = Vector3(0, 0, -1)


def make_watchdog(turtle, events, **cfg) -> FuelWatchdog:
    return FuelWatchdog(turtle, config=FuelConfig(**cfg), events=events)


def test_low_water_mark(events) -> None:
    assert make_watchdog(FakeTurtle(energy=19), events).needs_fuel()
    assert not make_watchdog(FakeTurtle(energy=20), events).needs_fuel()


def test_ensure_fuel_is_noop_above_mark(events) -> None:
    turtle = FakeTurtle(energy=500)
    assert make_watchdog(turtle, events).ensure_fuel(SlotMap.default())
    assert turtle.count("place") == 0


def test_refuel_protocol_retrieves_container(events) -> None:
    turtle = FakeTurtle(energy=5)
    watchdog = make_watchdog(turtle, events)

    assert watchdog.ensure_fuel(SlotMap.default())

    assert turtle.energy == 5 + 64 * 80
    assert FRONT not in turtle.blocks
    assert turtle.slot_counts[0] == 1
    assert turtle.slot_items[0] == CONTAINER
    # back on the free boundary
    assert turtle.selected == 2
    assert turtle.calls_named("suck") == [("suck", Side.FRONT, 64)]
    assert "Fuel is almost over. Refueling!" in events.messages(Severity.NOTICE)


def test_refuel_clears_ordinary_block_first(events) -> None:
    turtle = FakeTurtle(energy=5, blocks={FRONT: "minecraft:stone"})

    assert make_watchdog(turtle, events).refuel(SlotMap.default())

    assert turtle.count("dig") == 2
    assert FRONT not in turtle.blocks


def test_refuel_uses_configured_intake_slot(events) -> None:
    turtle = FakeTurtle(energy=5)

    make_watchdog(turtle, events, intake_slot=4, suck_count=8, refuel_count=8).refuel(
        SlotMap.default()
    )

    assert ("select_slot", 4) in turtle.calls
    assert turtle.energy == 5 + 8 * 80
    assert turtle.slot_counts[4] == 0


def test_protected_block_aborts_while_energy_remains(events) -> None:
    turtle = FakeTurtle(energy=5, blocks={FRONT: "computercraft:turtle_normal"})

    assert not make_watchdog(turtle, events).refuel(SlotMap.default())

    assert turtle.count("place") == 0
    assert turtle.blocks[FRONT] == "computercraft:turtle_normal"
    assert "refuel() protected block in front" in events.messages(Severity.ERROR)


def test_protected_block_with_empty_tank_raises(events) -> None:
    turtle = FakeTurtle(energy=0, blocks={FRONT: "computercraft:turtle_normal"})

    with pytest.raises(RefuelFailedError):
        make_watchdog(turtle, events).refuel(SlotMap.default())


def test_empty_remote_buffer_raises_after_retrieving_container(events) -> None:
    turtle = FakeTurtle(energy=0, remote_fuel=0)

    with pytest.raises(RefuelFailedError) as exc:
        make_watchdog(turtle, events).refuel(SlotMap.default())

    assert exc.value.details["level"] == 0
    assert turtle.slot_counts[0] == 1
    assert FRONT not in turtle.blocks
    assert "Could NOT refuel." in events.messages(Severity.ERROR)


def test_missing_fuel_slot(events) -> None:
    turtle = FakeTurtle(energy=5)
    inventory = SlotMap(["unload", "free", "free"])

    assert not make_watchdog(turtle, events).refuel(inventory)
    assert turtle.count("place") == 0


def test_refuel_fills_intake_from_remote_buffer(events) -> None:
    turtle = FakeTurtle(energy=5, remote_fuel=10)

    make_watchdog(turtle, events).refuel(SlotMap.default())

    assert turtle.remote_fuel == 0
    assert turtle.energy == 5 + 10 * 80
    assert turtle.slot_items[15] is None
    assert FUEL_ITEM not in turtle.slot_items
