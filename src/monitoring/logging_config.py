# src/monitoring/logging_config.py
"""
Logging setup for entrypoints (tools, host scripts).

turtle_core components emit TurtleEvents; the default LoggingEventSink turns
them into records on the emitting module's logger. Per-step trace lines go to
the "turtle_core.step" logger at DEBUG and are muted unless asked for.
"""

from __future__ import annotations

import logging
import sys

STEP_LOGGER = "turtle_core.step"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO, *, trace_steps: bool = False) -> None:
    """
    Install one stdout handler on the root logger, unless one exists already.

    Args:
        level: root logging level (e.g., logging.INFO, logging.DEBUG)
        trace_steps: also show StepTracer lines, one per single-cell step
    """
    logging.getLogger(STEP_LOGGER).setLevel(logging.DEBUG if trace_steps else logging.INFO)

    root = logging.getLogger()
    if root.handlers:
        return

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
