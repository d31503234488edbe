# src/monitoring/__init__.py
"""Structured events, sinks and logging setup for turtle_core."""

from __future__ import annotations

from .events import Severity, TurtleEvent, log_event
from .sinks import JsonlEventSink, LoggingEventSink, MemoryEventSink

__all__ = [
    "Severity",
    "TurtleEvent",
    "log_event",
    "JsonlEventSink",
    "LoggingEventSink",
    "MemoryEventSink",
]
