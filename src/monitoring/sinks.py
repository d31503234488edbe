# EventSink implementations for TurtleEvent
"""
Event sinks for turtle_core.

Provides:
- LoggingEventSink: forwards TurtleEvents to the stdlib logging module.
- MemoryEventSink: keeps events in a list (tests, smoke tools).
- JsonlEventSink: appends TurtleEvents to a JSON-lines file.

Usage patterns:

    from pathlib import Path
    from monitoring.sinks import JsonlEventSink

    sink = JsonlEventSink(Path("logs/turtle/events.log"))
    core = TurtleCore(actuator, events=sink)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

from contracts.monitoring import event_to_dict
from .events import Severity, TurtleEvent


class LoggingEventSink:
    """
    Default sink: one log record per event, on the logger named after the
    emitting module, at the level mapped from the event severity.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger

    def emit(self, event: Any) -> None:
        if isinstance(event, TurtleEvent):
            logger = self._logger or logging.getLogger(event.module)
            if event.payload:
                logger.log(
                    event.severity.logging_level,
                    "%s %s",
                    event.message,
                    event.payload,
                )
            else:
                logger.log(event.severity.logging_level, "%s", event.message)
            return

        (self._logger or logging.getLogger(__name__)).info(
            "TurtleEvent: %s", event_to_dict(event)
        )


class MemoryEventSink:
    """In-memory sink; keeps every event in emission order."""

    def __init__(self) -> None:
        self.events: List[TurtleEvent] = []

    def emit(self, event: Any) -> None:
        self.events.append(event)

    def messages(self, severity: Optional[Severity] = None) -> List[str]:
        """Messages of recorded events, optionally filtered by severity."""
        return [
            e.message
            for e in self.events
            if severity is None or getattr(e, "severity", None) is severity
        ]

    def clear(self) -> None:
        self.events.clear()


class JsonlEventSink:
    """
    JSON-lines sink for TurtleEvent instances.

    - Writes one JSON object per line.
    - Ensures UTF-8 encoding.
    - Ensures parent directory exists.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._ensure_parent_dir(path)
        # Open file in append mode
        self._file = path.open("a", encoding="utf-8")

    @property
    def path(self) -> Path:
        return self._path

    @staticmethod
    def _ensure_parent_dir(path: Path) -> None:
        """
        Create parent directories for `path` if they don't exist.
        """
        parent = path.parent
        if not parent.exists():
            parent.mkdir(parents=True, exist_ok=True)

    def emit(self, event: Any) -> None:
        data = event_to_dict(event)
        line = json.dumps(data, ensure_ascii=False)
        self._file.write(line + "\n")
        self._file.flush()

    def close(self) -> None:
        """
        Close the underlying file handle.

        Should be called at graceful shutdown.
        """
        self._file.close()

    def __enter__(self) -> "JsonlEventSink":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
