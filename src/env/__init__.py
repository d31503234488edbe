# src/env/__init__.py
"""YAML configuration for the turtle navigation core."""

from __future__ import annotations

from .loader import load_config, validate_config
from .schema import TurtleConfig

__all__ = ["TurtleConfig", "load_config", "validate_config"]
