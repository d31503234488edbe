# turtle_core package
# src/turtle_core/__init__.py
"""
turtle_core package: navigation and state-recovery engine.

Exports:
    - TurtleCore: facade wiring every component for one agent
    - error taxonomy (TurtleCoreError and subclasses, BlockReason, StepResult)
    - belief-state types (AgentState, InitializedAgent, PositionModel, SlotMap)
"""

from __future__ import annotations

from .core import TurtleCore, chunk_origin
from .errors import (
    BlockReason,
    DirectionUnknownError,
    InvalidDirectionError,
    NotInitializedError,
    RefuelFailedError,
    StateLoadError,
    StepResult,
    TurtleCoreError,
    UnreachableError,
)
from .inventory import SlotMap
from .nav import MoveToResult, PlannerPolicy
from .state import AgentState, InitializedAgent, PositionModel

__all__ = [
    "TurtleCore",
    "chunk_origin",
    "BlockReason",
    "DirectionUnknownError",
    "InvalidDirectionError",
    "NotInitializedError",
    "RefuelFailedError",
    "StateLoadError",
    "StepResult",
    "TurtleCoreError",
    "UnreachableError",
    "SlotMap",
    "MoveToResult",
    "PlannerPolicy",
    "AgentState",
    "InitializedAgent",
    "PositionModel",
]
