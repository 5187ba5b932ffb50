"""Configuration helpers for positions and runtime settings."""

from .positions import (
    FANTASY_POSITIONS,
    POSITION_ALIASES,
    canonical_position,
    is_fantasy_position,
)
from .settings import BoardSettings

__all__ = [
    "BoardSettings",
    "FANTASY_POSITIONS",
    "POSITION_ALIASES",
    "canonical_position",
    "is_fantasy_position",
]
