"""Canonical models for roster, rankings and draft snapshots."""

from .draft import DraftState, Pick
from .player import Player, RankedPlayer

__all__ = [
    "DraftState",
    "Pick",
    "Player",
    "RankedPlayer",
]
