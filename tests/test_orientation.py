# tests/test_orientation.py
"""
Unit tests for TurnEngine: table-driven turn_to and failure handling.
"""

from __future__ import annotations

import pytest

from contracts.types import ORIGIN, CardinalDirection, TurnDirection
from monitoring.events import Severity
from turtle_core.errors import InvalidDirectionError
from turtle_core.inventory import SlotMap
from turtle_core.orientation import TURN_TABLE, TurnEngine
from turtle_core.state import AgentState, InitializedAgent
from turtle_core.testing import FakeTurtle


def make_agent(direction: CardinalDirection) -> InitializedAgent:
    return InitializedAgent(AgentState(ORIGIN, direction, SlotMap.default()))


@pytest.mark.parametrize("current", list(CardinalDirection))
@pytest.mark.parametrize("target", list(CardinalDirection))
def test_turn_table_reaches_target_with_at_most_two_turns(current, target) -> None:
    turns = TurnEngine.plan_turns(current, target)
    assert len(turns) <= 2

    facing = current
    for turn in turns:
        facing = facing.left() if turn is TurnDirection.LEFT else facing.right()
    assert facing is target


def test_turn_table_is_complete() -> None:
    assert len(TURN_TABLE) == 16


def test_turn_to_updates_belief_and_world(events) -> None:
    turtle = FakeTurtle(facing=CardinalDirection.NORTH)
    engine = TurnEngine(turtle, events=events)
    agent = make_agent(CardinalDirection.NORTH)

    assert engine.turn_to(agent, CardinalDirection.SOUTH)
    assert agent.direction is CardinalDirection.SOUTH
    assert turtle.facing is CardinalDirection.SOUTH
    assert turtle.count("turn") == 2

    assert engine.turn_to(agent, "EAST")
    assert agent.direction is CardinalDirection.EAST
    assert turtle.count("turn") == 3


def test_turn_to_same_direction_is_free(events) -> None:
    turtle = FakeTurtle(facing=CardinalDirection.WEST)
    engine = TurnEngine(turtle, events=events)

    assert engine.turn_to(make_agent(CardinalDirection.WEST), "west")
    assert turtle.calls == []


def test_invalid_target_raises_and_logs(events) -> None:
    turtle = FakeTurtle()
    engine = TurnEngine(turtle, events=events)
    agent = make_agent(CardinalDirection.NORTH)

    with pytest.raises(InvalidDirectionError):
        engine.turn_to(agent, "up")

    assert agent.direction is CardinalDirection.NORTH
    assert turtle.calls == []
    assert "Invalid goto direction - turn_to()" in events.messages(Severity.ERROR)


def test_failed_primitive_leaves_direction_unchanged(events) -> None:
    turtle = FakeTurtle(fail_turns=1)
    engine = TurnEngine(turtle, events=events)
    agent = make_agent(CardinalDirection.NORTH)

    assert not engine.turn_left(agent)
    assert agent.direction is CardinalDirection.NORTH
    assert "Could not turn left" in events.messages(Severity.WARNING)

    assert engine.turn_left(agent)
    assert agent.direction is CardinalDirection.WEST


def test_turn_around_faces_opposite(events) -> None:
    turtle = FakeTurtle(facing=CardinalDirection.EAST)
    engine = TurnEngine(turtle, events=events)
    agent = make_agent(CardinalDirection.EAST)

    assert engine.turn_around(agent)
    assert agent.direction is CardinalDirection.WEST
    assert turtle.calls_named("turn") == [("turn", TurnDirection.LEFT)] * 2
