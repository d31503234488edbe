# path: src/monitoring/events.py
"""
Structured log events for the turtle navigation core.

This module defines:
- Severity (NOTICE / WARNING / ERROR / DEBUG) and its logging-level mapping
- TurtleEvent, the single event shape every component emits
- log_event(), the convenience helper components call instead of printing

Presentation (colors, formatting, files) is entirely the sink's concern;
see monitoring.sinks.
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from contracts.monitoring import EventSink


# ============================================================
# Severity
# ============================================================

class Severity(Enum):
    """Severity of a TurtleEvent."""

    NOTICE = "notice"
    WARNING = "warning"
    ERROR = "error"
    DEBUG = "debug"

    @property
    def logging_level(self) -> int:
        return _LEVELS[self]


_LEVELS: Dict[Severity, int] = {
    Severity.NOTICE: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.DEBUG: logging.DEBUG,
}


# ============================================================
# Event structure
# ============================================================

@dataclass
class TurtleEvent:
    """
    Runtime event emitted by a turtle_core component.

    All fields must be JSON-safe.
    """

    ts: float                   # UNIX timestamp (seconds)
    module: str                 # Source module ("turtle_core.movement", ...)
    severity: Severity
    message: str                # Short human-readable description
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dict for loggers."""
        data = asdict(self)
        data["severity"] = self.severity.name  # store name, not enum
        return data


# ============================================================
# Convenience helper for emitting events
# ============================================================

def log_event(
    sink: EventSink,
    module: str,
    severity: Severity,
    message: str,
    payload: Optional[Dict[str, Any]] = None,
) -> TurtleEvent:
    """
    Create a TurtleEvent and hand it to `sink`.

    Intended usage in components:

        log_event(
            self._events,
            module=__name__,
            severity=Severity.WARNING,
            message="Unbreakable block in front",
            payload={"side": side.value},
        )

    Returns the event so callers can attach it to results if they want.
    """
    event = TurtleEvent(
        ts=time.time(),
        module=module,
        severity=severity,
        message=message,
        payload=payload or {},
    )
    sink.emit(event)
    return event
