"""Loaders and offline converters for the static roster and ranking files."""

from .rankings import (
    RankingsConversionReport,
    clean_player_name,
    convert_rankings_export,
    load_rankings,
    read_rankings_csv,
)
from .roster import (
    RosterConversionReport,
    RosterIndex,
    convert_players_export,
    filter_roster,
    load_roster_index,
)

__all__ = [
    "RankingsConversionReport",
    "RosterConversionReport",
    "RosterIndex",
    "clean_player_name",
    "convert_players_export",
    "convert_rankings_export",
    "filter_roster",
    "load_rankings",
    "load_roster_index",
    "read_rankings_csv",
]
