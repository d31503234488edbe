#!/usr/bin/env python3
"""
tools/smoke_turtle.py

Minimal harness to sanity-check TurtleCore wiring.

Runs entirely in memory:
    - FakeTurtle world with a protected block, a bedrock block and a mob
    - FakePositioningService (or none, with --offline)
    - MemoryStateStore
    - Calls:
        - initialize()
        - move_to(destination)
        - register(label) / check_inventory()
    - Prints belief state, step trace and the persisted snapshot
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any

# ---------------------------------------------------------------------------
# Ensure src/ is on sys.path when running as a script
# ---------------------------------------------------------------------------

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# ---------------------------------------------------------------------------
# Imports from the project
# ---------------------------------------------------------------------------

from contracts.types import Vector3  # type: ignore[import]
from env.loader import load_config  # type: ignore[import]
from monitoring.logging_config import configure_logging  # type: ignore[import]
from monitoring.sinks import JsonlEventSink, LoggingEventSink  # type: ignore[import]
from turtle_core import PlannerPolicy, TurtleCore, TurtleCoreError  # type: ignore[import]
from turtle_core.testing import (  # type: ignore[import]
    FakePositioningService,
    FakeTurtle,
    MemoryStateStore,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_dict(obj: Any) -> Any:
    """Best-effort conversion of dataclasses to plain dicts for printing."""
    if is_dataclass(obj):
        return asdict(obj)
    return obj


def _print_header(title: str) -> None:
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)


def _build_world() -> FakeTurtle:
    return FakeTurtle(
        position=Vector3(0, 64, 0),
        blocks={
            Vector3(0, 64, -2): "computercraft:turtle",
            Vector3(3, 64, -4): "minecraft:bedrock",
            Vector3(0, 65, 0): "minecraft:dirt",
        },
        entities={Vector3(0, 64, -5): 2},
    )


def run(args: argparse.Namespace) -> int:
    config = load_config(Path(args.config) if args.config else None)
    turtle = _build_world()
    positioning = None if args.offline else FakePositioningService(turtle)
    store = MemoryStateStore()

    sink = JsonlEventSink(Path(args.events)) if args.events else LoggingEventSink()
    core = TurtleCore(
        turtle,
        positioning=positioning,
        store=store,
        config=config,
        events=sink,
        sleep=lambda _s: None,
    )

    try:
        _print_header(f"initialize() profile={config.name}")
        core.initialize()
        print("position:", core.get_position(), "facing:", core.get_direction().value)

        destination = Vector3(args.x, args.y, args.z)
        _print_header(f"move_to {destination}")
        try:
            result = core.move_to(
                destination,
                policy=PlannerPolicy(max_attempts=args.max_attempts),
            )
            print("MoveToResult:", _to_dict(result))
        except TurtleCoreError as exc:
            print("move_to() failed:", exc)

        print("belief:", core.get_position(), "world:", turtle.position)

        _print_header("register('ore') / check_inventory()")
        print("register:", core.register("ore"))
        print("inventory full:", core.check_inventory())
        print("labels:", core.get_inventory())

        _print_header("Step trace")
        for record in core.tracer.get_records():
            print(f"  - {record.axis:<8} ok={record.success!s:<5} "
                  f"reason={record.reason} retries={record.retries} pos={record.position}")

        _print_header("Persisted snapshot")
        print(_to_dict(store.snapshot))
    finally:
        if isinstance(sink, JsonlEventSink):
            sink.close()

    _print_header("Smoke run completed")
    return 0


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Smoke test harness for turtle_core TurtleCore",
    )
    parser.add_argument("--config", help="Path to turtle.yaml (default: config/turtle.yaml)")
    parser.add_argument("--offline", action="store_true", help="Run without a positioning service")
    parser.add_argument("--events", help="Write events to this JSON-lines file instead of logging")
    parser.add_argument("--max-attempts", type=int, default=8, help="move_to attempt budget")
    parser.add_argument("-x", type=int, default=4)
    parser.add_argument("-y", type=int, default=64)
    parser.add_argument("-z", type=int, default=-6)
    parser.add_argument("--trace-steps", action="store_true", help="Log every single-cell step")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    args = parser.parse_args(argv)
    configure_logging(
        getattr(logging, args.log_level.upper(), logging.INFO),
        trace_steps=args.trace_steps,
    )
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
