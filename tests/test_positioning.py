# tests/test_positioning.py
"""
Tests for PositioningReconciler: two-tier locate, hard corrections and the
one-cell direction probe.
"""

from __future__ import annotations

import pytest

from contracts.types import CardinalDirection, MoveDirection, Vector3
from env.schema import PositioningConfig
from monitoring.events import Severity
from turtle_core.errors import DirectionUnknownError
from turtle_core.inventory import SlotMap
from turtle_core.positioning import PositioningReconciler
from turtle_core.state import AgentState, InitializedAgent
from turtle_core.testing import FakePositioningService, FakeTurtle


def make_reconciler(turtle, service, events, sleeper, **cfg) -> PositioningReconciler:
    return PositioningReconciler(
        turtle,
        service,
        config=PositioningConfig(**cfg),
        events=events,
        sleep=sleeper,
    )


def make_agent(position: Vector3) -> InitializedAgent:
    return InitializedAgent(
        AgentState(position, CardinalDirection.NORTH, SlotMap.default(), positioning_available=True)
    )


def test_short_probe_answers(events, sleeper) -> None:
    turtle = FakeTurtle(position=Vector3(4, 70, -2))
    service = FakePositioningService(turtle)
    reconciler = make_reconciler(turtle, service, events, sleeper)

    assert reconciler.locate() == Vector3(4, 70, -2)
    assert service.requests == [2.0]


def test_long_probe_after_short_timeout(events, sleeper) -> None:
    turtle = FakeTurtle(position=Vector3(1, 2, 3))
    service = FakePositioningService(turtle, failures=1)
    reconciler = make_reconciler(turtle, service, events, sleeper, fallback_timeout_s=7.5)

    assert reconciler.locate() == Vector3(1, 2, 3)
    assert service.requests == [2.0, 7.5]


def test_no_service_or_outage_returns_none(events, sleeper) -> None:
    turtle = FakeTurtle()
    assert make_reconciler(turtle, None, events, sleeper).locate() is None

    service = FakePositioningService(turtle, offline=True)
    assert make_reconciler(turtle, service, events, sleeper).locate() is None
    assert "Could not get GPS position." in events.messages(Severity.WARNING)


def test_reconcile_overwrites_belief_on_mismatch(events, sleeper) -> None:
    turtle = FakeTurtle(position=Vector3(5, 64, 5))
    reconciler = make_reconciler(turtle, FakePositioningService(turtle), events, sleeper)
    agent = make_agent(Vector3(0, 64, 0))

    assert reconciler.reconcile(agent)

    assert agent.position == Vector3(5, 64, 5)
    assert agent.positioning_available
    assert "Wrong location. Correcting with GPS." in events.messages(Severity.WARNING)


def test_reconcile_keeps_belief_when_service_is_down(events, sleeper) -> None:
    turtle = FakeTurtle(position=Vector3(5, 64, 5))
    service = FakePositioningService(turtle, offline=True)
    reconciler = make_reconciler(turtle, service, events, sleeper)
    agent = make_agent(Vector3(0, 64, 0))

    assert not reconciler.reconcile(agent)

    assert agent.position == Vector3(0, 64, 0)
    assert not agent.positioning_available


@pytest.mark.parametrize("facing", list(CardinalDirection))
def test_derive_direction_from_one_cell_probe(events, sleeper, facing) -> None:
    turtle = FakeTurtle(position=Vector3(3, 64, 3), facing=facing)
    reconciler = make_reconciler(turtle, FakePositioningService(turtle), events, sleeper)

    probe = reconciler.derive_direction()

    assert probe.direction is facing
    assert probe.returned
    assert probe.position == Vector3(3, 64, 3)
    assert turtle.position == Vector3(3, 64, 3)


def test_derive_direction_digs_through_ordinary_block(events, sleeper) -> None:
    turtle = FakeTurtle(facing=CardinalDirection.SOUTH, blocks={Vector3(0, 0, 1): "minecraft:dirt"})
    reconciler = make_reconciler(turtle, FakePositioningService(turtle), events, sleeper)

    assert reconciler.derive_direction().direction is CardinalDirection.SOUTH
    assert turtle.count("dig") == 1


def test_derive_direction_never_digs_protected_block(events, sleeper) -> None:
    turtle = FakeTurtle(blocks={Vector3(0, 0, -1): "chickenchunks:chunk_loader"})
    reconciler = make_reconciler(
        turtle,
        FakePositioningService(turtle),
        events,
        sleeper,
        probe_move_attempts=3,
        probe_pause_s=0.25,
    )

    with pytest.raises(DirectionUnknownError) as exc:
        reconciler.derive_direction()

    assert exc.value.details["reason"] == "probe_blocked"
    assert turtle.count("dig") == 0
    assert turtle.count("move") == 3
    assert sleeper.calls == [0.25, 0.25, 0.25]


def test_derive_direction_without_first_sample_does_not_move(events, sleeper) -> None:
    turtle = FakeTurtle()
    service = FakePositioningService(turtle, offline=True)
    reconciler = make_reconciler(turtle, service, events, sleeper)

    with pytest.raises(DirectionUnknownError) as exc:
        reconciler.derive_direction()

    assert exc.value.details["reason"] == "position_unavailable"
    assert turtle.count("move") == 0


def test_derive_direction_steps_back_even_if_second_sample_is_lost(events, sleeper) -> None:
    turtle = FakeTurtle()

    class FlakyService(FakePositioningService):
        def locate(self, timeout: float):
            result = super().locate(timeout)
            # answers only before the probe step
            self.offline = True
            return result

    reconciler = make_reconciler(turtle, FlakyService(turtle), events, sleeper)

    with pytest.raises(DirectionUnknownError):
        reconciler.derive_direction()

    assert [call[1] for call in turtle.calls_named("move")] == [
        MoveDirection.FORWARD,
        MoveDirection.BACK,
    ]
    assert turtle.position == Vector3(0, 0, 0)
