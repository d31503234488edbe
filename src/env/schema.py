# TurtleConfig and per-component config dataclasses
# src/env/schema.py

from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_PROTECTED_BLOCKS: List[str] = [
    "computercraft:turtle",
    "computercraft:turtle_normal",
    "computercraft:turtle_advanced",
    "chickenchunks:chunk_loader",
    "enderstorage:ender_chest",
]


@dataclass
class MovementConfig:
    """Retry caps and pauses for single-cell steps."""
    forward_retry_cap: int = 50
    vertical_retry_cap: int = 30
    attack_pause_s: float = 1.0
    max_attack_swings: int = 64   # per retry iteration; a stuck entity ends the burst


@dataclass
class FuelConfig:
    """Low-water mark and refuel protocol quantities."""
    low_water_mark: int = 20
    suck_count: int = 64
    refuel_count: int = 64
    intake_slot: Optional[int] = None   # None -> last slot


@dataclass
class InventoryConfig:
    """Slot array shape and the roles reserved at first boot."""
    capacity: int = 16
    initial_roles: List[str] = field(default_factory=lambda: ["fuel", "unload"])
    blocked_wait_attempts: int = 5
    blocked_wait_pause_s: float = 2.0


@dataclass
class PositioningConfig:
    """Absolute-positioning timeouts and boot-time retry budget."""
    probe_timeout_s: float = 2.0
    fallback_timeout_s: float = 10.0
    init_attempts: int = 10
    init_pause_s: float = 5.0
    probe_direction: bool = True
    probe_move_attempts: int = 10
    probe_pause_s: float = 2.0


@dataclass
class PlannerConfig:
    """move_to retry policy; None disables the corresponding guard."""
    max_attempts: Optional[int] = None
    max_duration_s: Optional[float] = None
    mismatch_pause_s: float = 1.0
    retreat_tries: int = 3


@dataclass
class PersistenceConfig:
    state_file: str = "turtle_state.json"


@dataclass
class TurtleConfig:
    """Resolved configuration for one active profile."""
    name: str = "default"
    movement: MovementConfig = field(default_factory=MovementConfig)
    fuel: FuelConfig = field(default_factory=FuelConfig)
    inventory: InventoryConfig = field(default_factory=InventoryConfig)
    positioning: PositioningConfig = field(default_factory=PositioningConfig)
    planner: PlannerConfig = field(default_factory=PlannerConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    protected_blocks: List[str] = field(
        default_factory=lambda: list(DEFAULT_PROTECTED_BLOCKS)
    )
