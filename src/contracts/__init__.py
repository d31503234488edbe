# src/contracts/__init__.py

from __future__ import annotations

"""
Public contract surface shared by turtle_core, env and monitoring.

Re-exports value types (vectors, directions, slot roles, snapshots) and the
capability Protocols the navigation core consumes. Concrete implementations
live elsewhere: the engine in turtle_core/, fakes in turtle_core.testing.
"""

from .types import (
    CardinalDirection,
    InspectResult,
    MoveDirection,
    Side,
    SlotLabel,
    SlotRole,
    StateSnapshot,
    TurnDirection,
    Vector3,
)
from .turtle import PositioningService, StateStore, TurtleActuator
from .monitoring import EventSink, event_to_dict

__all__ = [
    # Values
    "CardinalDirection",
    "InspectResult",
    "MoveDirection",
    "Side",
    "SlotLabel",
    "SlotRole",
    "StateSnapshot",
    "TurnDirection",
    "Vector3",
    # Capabilities
    "PositioningService",
    "StateStore",
    "TurtleActuator",
    # Monitoring
    "EventSink",
    "event_to_dict",
]
