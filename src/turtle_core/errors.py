# src/turtle_core/errors.py
"""
Error taxonomy for turtle_core.

Step failures (Blocked: protected / impassable / timeout) are values, carried
by StepResult, because callers routinely recover from them. Everything in
this module is raised:

    NotInitializedError    operation invoked before the readiness gate opened
    InvalidDirectionError  unrecognized facing/target direction
    RefuelFailedError      energy still zero after the refuel protocol
    DirectionUnknownError  facing could not be derived from position samples
    UnreachableError       move_to exhausted its PlannerPolicy
    StateLoadError         persisted snapshot is unreadable
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class BlockReason(str, Enum):
    """Why a single-cell step was abandoned."""

    PROTECTED = "protected"
    IMPASSABLE = "impassable"
    TIMEOUT = "timeout"


@dataclass
class StepResult:
    """
    Outcome of MovementEngine.step().

    success is True iff the primitive move reported success and the belief
    position was advanced by exactly one cell.
    """

    success: bool
    reason: Optional[BlockReason] = None
    retries: int = 0

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def moved(cls, retries: int = 0) -> "StepResult":
        return cls(success=True, reason=None, retries=retries)

    @classmethod
    def blocked(cls, reason: BlockReason, retries: int) -> "StepResult":
        return cls(success=False, reason=reason, retries=retries)


@dataclass(eq=False)
class TurtleCoreError(RuntimeError):
    """
    Domain-level error raised by turtle_core.

    `code` is a short stable identifier; `details` carries JSON-safe context.
    """

    code: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, details={self.details!r})"


@dataclass(eq=False)
class NotInitializedError(TurtleCoreError):
    code: str = "not_initialized"


@dataclass(eq=False)
class InvalidDirectionError(TurtleCoreError):
    code: str = "invalid_direction"


@dataclass(eq=False)
class RefuelFailedError(TurtleCoreError):
    code: str = "refuel_failed"


@dataclass(eq=False)
class DirectionUnknownError(TurtleCoreError):
    code: str = "direction_unknown"


@dataclass(eq=False)
class UnreachableError(TurtleCoreError):
    code: str = "unreachable"


@dataclass(eq=False)
class StateLoadError(TurtleCoreError):
    code: str = "state_load_failed"
