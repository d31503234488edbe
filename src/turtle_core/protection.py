# src/turtle_core/protection.py
"""
Protected-block registry for turtle_core.

Decides whether a neighbouring block may be dug. The protected set is an
injected collection of opaque block identifiers (other turtles, chunk
loaders, paired storage portals) checked by membership, so it can be
configured per profile and replaced in tests.

This module does NOT:
    - classify blocks beyond protected / not protected
    - predict which blocks are impassable (dig failure tells us that)
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, Optional

from contracts.turtle import TurtleActuator
from contracts.types import Side
from env.schema import DEFAULT_PROTECTED_BLOCKS


class ProtectedBlockRegistry:
    """Membership test over a fixed set of protected block ids."""

    def __init__(self, block_ids: Optional[Iterable[str]] = None) -> None:
        ids = DEFAULT_PROTECTED_BLOCKS if block_ids is None else block_ids
        self._ids: FrozenSet[str] = frozenset(str(b) for b in ids)

    @property
    def block_ids(self) -> FrozenSet[str]:
        return self._ids

    def is_protected(self, block_id: Optional[str]) -> bool:
        return block_id is not None and block_id in self._ids

    def is_breakable(self, actuator: TurtleActuator, side: Side) -> bool:
        """
        Inspect the cell on `side` and decide whether digging is allowed.

        An empty cell is breakable (there is nothing to protect).
        """
        result = actuator.inspect(side)
        if not result.present:
            return True
        return not self.is_protected(result.block_id)

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)
