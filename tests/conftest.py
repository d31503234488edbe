# tests/conftest.py

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure src/ is on sys.path for test imports like `import env`, `import turtle_core`.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


@pytest.fixture
def sleeper():
    from turtle_core.testing import SleepRecorder

    return SleepRecorder()


@pytest.fixture
def events():
    from monitoring.sinks import MemoryEventSink

    return MemoryEventSink()
