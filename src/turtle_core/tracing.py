# src/turtle_core/tracing.py
"""
Step tracing for turtle_core.

A thin, structured record of every single-cell step the MovementEngine
finishes (moved or blocked), so tools and tests can see exactly how the
belief position evolved and why steps were abandoned.

It does NOT:
- Decide anything about movement
- Persist records (see monitoring.sinks for durable logs)
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional

from contracts.types import MoveDirection, Vector3
from monitoring.logging_config import STEP_LOGGER

from .errors import StepResult


@dataclass
class StepTraceRecord:
    """Structured record of a single step attempt."""

    timestamp: float           # wall-clock time (time.time())
    axis: str
    success: bool
    reason: Optional[str]
    retries: int
    position: Vector3          # belief position after the step


class StepTracer:
    """
    In-memory step tracer with optional logging.

    Responsibilities:
    - Keep a rolling buffer of recent StepTraceRecord entries.
    - Emit a single structured debug log line per step.
    """

    def __init__(
        self,
        *,
        logger: Optional[logging.Logger] = None,
        max_records: int = 10_000,
    ) -> None:
        self._logger = logger or logging.getLogger(STEP_LOGGER)
        self._records: Deque[StepTraceRecord] = deque(maxlen=max_records)

    def record(self, axis: MoveDirection, result: StepResult, position: Vector3) -> StepTraceRecord:
        record = StepTraceRecord(
            timestamp=time.time(),
            axis=axis.value,
            success=result.success,
            reason=result.reason.value if result.reason is not None else None,
            retries=result.retries,
            position=position,
        )
        self._records.append(record)

        self._logger.debug(
            "step axis=%s success=%s reason=%s retries=%d pos=%s",
            record.axis,
            record.success,
            record.reason,
            record.retries,
            record.position,
        )
        return record

    def get_records(self) -> List[StepTraceRecord]:
        """Return a snapshot of all currently buffered records."""
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()
