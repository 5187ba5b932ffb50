"""Reconciliation of live draft picks with the static roster and rankings."""

from .reconcile import (
    NOT_FOUND,
    AvailablePlayer,
    BoardView,
    EnrichedPick,
    available_players,
    drafted_player_ids,
    enrich_picks,
    normalize_position_filter,
    reconcile,
)

__all__ = [
    "NOT_FOUND",
    "AvailablePlayer",
    "BoardView",
    "EnrichedPick",
    "available_players",
    "drafted_player_ids",
    "enrich_picks",
    "normalize_position_filter",
    "reconcile",
]
