"""
Navigation subsystem for turtle_core.

Provides:
- MultiStepMover: forward legs with detour / retreat / bailout maneuvers
- PathPlanner: greedy axis-by-axis move_to with a bounded retry policy
- PlannerPolicy / MoveToResult
"""

from __future__ import annotations

from .mover import MultiStepMover
from .planner import MoveToResult, PathPlanner, PlannerPolicy

__all__ = [
    "MultiStepMover",
    "MoveToResult",
    "PathPlanner",
    "PlannerPolicy",
]
