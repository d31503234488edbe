from __future__ import annotations

import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

import yaml

from .schema import (
    FuelConfig,
    InventoryConfig,
    MovementConfig,
    PersistenceConfig,
    PlannerConfig,
    PositioningConfig,
    TurtleConfig,
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_ROOT = PROJECT_ROOT / "config"
DEFAULT_CONFIG_PATH = CONFIG_ROOT / "turtle.yaml"

# Overrides the default config location when set.
CONFIG_ENV_VAR = "TURTLE_NAV_CONFIG"

_T = TypeVar("_T")

_SECTIONS: Dict[str, type] = {
    "movement": MovementConfig,
    "fuel": FuelConfig,
    "inventory": InventoryConfig,
    "positioning": PositioningConfig,
    "planner": PlannerConfig,
    "persistence": PersistenceConfig,
}


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML config file and require a mapping at the top."""
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at top of {path}, got {type(data)}")
    return data


def _select_profile(cfg: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """Return (active_profile_name, active_profile_mapping)."""
    profile_name = cfg.get("profile")
    if not profile_name:
        raise ValueError("turtle.yaml must define a 'profile' key.")
    profiles = cfg.get("profiles")
    if not isinstance(profiles, dict):
        raise ValueError("turtle.yaml must define a 'profiles' mapping.")
    if profile_name not in profiles:
        raise KeyError(f"Profile '{profile_name}' not found in turtle.yaml profiles.")
    return profile_name, profiles[profile_name] or {}


def _build_section(cls: Type[_T], raw: Any, section: str) -> _T:
    """Instantiate a config dataclass, rejecting keys it does not declare."""
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise ValueError(f"Section '{section}' must be a mapping, got {type(raw)}")
    known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown keys in section '{section}': {unknown}")
    return cls(**raw)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def resolve_config_path(path: Optional[Path] = None) -> Path:
    """Explicit path, then $TURTLE_NAV_CONFIG, then config/turtle.yaml."""
    if path is not None:
        return Path(path)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def load_config(path: Optional[Path] = None) -> TurtleConfig:
    """Main entry point: returns a fully resolved TurtleConfig."""
    raw = _load_yaml(resolve_config_path(path))
    profile_name, profile = _select_profile(raw)

    if not isinstance(profile, dict):
        raise ValueError(f"Profile '{profile_name}' must be a mapping.")

    unknown = sorted(set(profile) - set(_SECTIONS) - {"protected_blocks"})
    if unknown:
        raise ValueError(f"Unknown sections in profile '{profile_name}': {unknown}")

    sections = {
        name: _build_section(cls, profile.get(name), name)
        for name, cls in _SECTIONS.items()
    }

    config = TurtleConfig(name=profile_name, **sections)
    if "protected_blocks" in profile:
        blocks = profile["protected_blocks"] or []
        if not isinstance(blocks, list):
            raise ValueError("'protected_blocks' must be a list of block ids.")
        config.protected_blocks = [str(b) for b in blocks]

    validate_config(config)
    return config


def validate_config(config: TurtleConfig) -> None:
    """Minimal sanity checks; raises ValueError on the first problem."""
    mv = config.movement
    if mv.forward_retry_cap < 1 or mv.vertical_retry_cap < 1:
        raise ValueError("Retry caps must be >= 1.")
    if mv.max_attack_swings < 1:
        raise ValueError("max_attack_swings must be >= 1.")

    if config.fuel.low_water_mark < 0:
        raise ValueError("fuel.low_water_mark must be >= 0.")

    inv = config.inventory
    # fuel + unload + at least one free slot
    if inv.capacity < 3:
        raise ValueError(f"inventory.capacity must be >= 3, got {inv.capacity}")
    if len(inv.initial_roles) >= inv.capacity:
        raise ValueError("inventory.initial_roles leaves no free slot.")
    roles = [str(role) for role in inv.initial_roles]
    if "free" in roles:
        raise ValueError("inventory.initial_roles must not contain 'free'.")
    if len(roles) != len(set(roles)):
        raise ValueError(f"inventory.initial_roles has duplicates: {roles}")
    if config.fuel.intake_slot is not None and not (
        0 <= config.fuel.intake_slot < inv.capacity
    ):
        raise ValueError("fuel.intake_slot is outside the inventory.")

    pos = config.positioning
    if pos.probe_timeout_s <= 0 or pos.fallback_timeout_s <= 0:
        raise ValueError("Positioning timeouts must be > 0.")
    if pos.init_attempts < 1 or pos.probe_move_attempts < 1:
        raise ValueError("Positioning attempt budgets must be >= 1.")

    pl = config.planner
    if pl.max_attempts is not None and pl.max_attempts < 1:
        raise ValueError("planner.max_attempts must be null or >= 1.")
    if pl.max_duration_s is not None and pl.max_duration_s <= 0:
        raise ValueError("planner.max_duration_s must be null or > 0.")
    if pl.retreat_tries < 1:
        raise ValueError("planner.retreat_tries must be >= 1.")
