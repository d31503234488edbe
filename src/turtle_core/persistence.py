# src/turtle_core/persistence.py
"""
State Persistence Adapter for turtle_core.

Serializes the belief state (position, direction, inventory labels) as a
small versioned JSON document:

    {"version": 1,
     "position": {"x": 0, "y": 64, "z": 0},
     "direction": "north",
     "inventory": ["fuel", "unload", "free", ...]}

A missing "version" is read as version 1. Anything unreadable raises
StateLoadError; the initialization sequencer decides what to do about it.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from contracts.types import CardinalDirection, StateSnapshot, Vector3

from .errors import StateLoadError

SNAPSHOT_VERSION = 1


def snapshot_to_dict(snapshot: StateSnapshot) -> Dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "position": snapshot.position.to_dict(),
        "direction": snapshot.direction.value,
        "inventory": [str(label) for label in snapshot.inventory],
    }


def snapshot_from_dict(data: Any) -> StateSnapshot:
    """Inverse of snapshot_to_dict(); raises StateLoadError on bad shape."""
    if not isinstance(data, dict):
        raise StateLoadError(details={"reason": "not_a_mapping"})

    version = data.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise StateLoadError(details={"reason": "unsupported_version", "version": version})

    try:
        position = Vector3.from_dict(data["position"])
        direction = CardinalDirection(data["direction"])
        inventory = data.get("inventory") or []
    except (KeyError, TypeError, ValueError) as exc:
        raise StateLoadError(details={"reason": "bad_shape", "exception": repr(exc)}) from exc

    if not isinstance(inventory, list):
        raise StateLoadError(details={"reason": "inventory_not_a_list"})

    return StateSnapshot(
        position=position,
        direction=direction,
        inventory=[str(label) for label in inventory],
    )


class JsonStateStore:
    """
    StateStore backed by a single JSON file.

    Writes go to a sibling temp file first and are moved into place, so a
    crash mid-write never leaves a truncated state file behind.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[StateSnapshot]:
        if not self._path.exists():
            return None
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise StateLoadError(
                details={"reason": "invalid_json", "path": str(self._path), "exception": repr(exc)}
            ) from exc
        except OSError as exc:
            raise StateLoadError(
                details={"reason": "unreadable", "path": str(self._path), "exception": repr(exc)}
            ) from exc
        return snapshot_from_dict(data)

    def save(self, snapshot: StateSnapshot) -> None:
        parent = self._path.parent
        if not parent.exists():
            parent.mkdir(parents=True, exist_ok=True)

        tmp = self._path.with_name(self._path.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(snapshot_to_dict(snapshot), f, indent=2)
        os.replace(tmp, self._path)
