# src/contracts/monitoring.py
from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Protocol


class EventSink(Protocol):
    """
    Generic structured-event sink.

    Implementations might:
      - forward to the logging module
      - append to a file
      - collect in-memory for tests
    """

    def emit(self, event: Any) -> None:
        """
        Consume a single event object.

        Implementations are expected to handle unknown event types gracefully.
        """
        ...


def event_to_dict(event: Any) -> Dict[str, Any]:
    """
    Best-effort conversion of an event into a dict for logging.

    Prefers the event's own to_dict(), then dataclass conversion.
    """
    to_dict = getattr(event, "to_dict", None)
    if callable(to_dict):
        return dict(to_dict())
    if is_dataclass(event) and not isinstance(event, type):
        return asdict(event)
    if hasattr(event, "__dict__"):
        return dict(event.__dict__)
    return {"repr": repr(event)}
