"""Test helpers for turtle_core."""

from __future__ import annotations

from .fakes import (
    FakePositioningService,
    FakeTurtle,
    FixedRandom,
    MemoryStateStore,
    SleepRecorder,
)

__all__ = [
    "FakePositioningService",
    "FakeTurtle",
    "FixedRandom",
    "MemoryStateStore",
    "SleepRecorder",
]
