"""Roster Index: loading, name resolution and the offline players converter."""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from draftboard.config.positions import FANTASY_POSITIONS, has_fantasy_position
from draftboard.errors import ConversionError
from draftboard.models import Player


logger = logging.getLogger(__name__)

ESSENTIAL_FIELDS: Tuple[str, ...] = (
    "player_id",
    "first_name",
    "last_name",
    "team",
    "position",
    "fantasy_positions",
)


class RosterIndex:
    """Read-only identifier -> Player table with a full-name reverse index.

    The reverse index is built once; when two players share a full name the
    first one in iteration order keeps the name.
    """

    def __init__(self, players: Iterable[Player] = ()) -> None:
        self._players: Dict[str, Player] = {}
        self._by_name: Dict[str, str] = {}
        self._duplicate_names: set[str] = set()
        for player in players:
            if player.player_id in self._players:
                logger.debug("Ignoring repeated roster entry for %s", player.player_id)
                continue
            self._players[player.player_id] = player
            name = player.full_name
            if name in self._by_name:
                self._duplicate_names.add(name)
                continue
            self._by_name[name] = player.player_id

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]]) -> "RosterIndex":
        players: List[Player] = []
        skipped = 0
        for key, entry in data.items():
            if not isinstance(entry, Mapping):
                skipped += 1
                continue
            payload = dict(entry)
            if not payload.get("player_id"):
                payload["player_id"] = str(key)
            try:
                players.append(Player.model_validate(payload))
            except ValidationError as exc:
                skipped += 1
                logger.debug("Skipping roster entry %s: %s", key, exc)
        if skipped:
            logger.warning("Skipped %d malformed roster entries", skipped)
        return cls(players)

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._players

    def __iter__(self) -> Iterator[Player]:
        return iter(self._players.values())

    def get(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def resolve(self, name: str) -> Optional[str]:
        """Return the identifier whose full name equals ``name`` exactly."""

        return self._by_name.get(name)

    @property
    def duplicate_names(self) -> frozenset[str]:
        """Full names shared by more than one roster entry."""

        return frozenset(self._duplicate_names)


def load_roster_index(path: Optional[Path]) -> RosterIndex:
    """Load the Roster Index file, degrading to an empty index when absent."""

    if path is None:
        logger.warning("No roster file configured; player names will not resolve")
        return RosterIndex()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Roster file %s not found; player names will not resolve", path)
        return RosterIndex()
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Unable to read roster file %s: %s", path, exc)
        return RosterIndex()
    if not isinstance(data, dict):
        logger.warning("Roster file %s is not a JSON object; ignoring it", path)
        return RosterIndex()
    index = RosterIndex.from_mapping(data)
    logger.info("Loaded %d players from %s", len(index), path)
    return index


@dataclass(frozen=True)
class RosterConversionReport:
    original_players: int
    kept_players: int
    by_position: Dict[str, int] = field(default_factory=dict)

    @property
    def removed_players(self) -> int:
        return self.original_players - self.kept_players


def filter_roster(raw: Mapping[str, Mapping[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Keep rostered fantasy players and strip every non-essential field."""

    cleaned: Dict[str, Dict[str, Any]] = {}
    for player_id, entry in raw.items():
        if not isinstance(entry, Mapping):
            continue
        if entry.get("team") is None:
            continue
        fantasy_positions = entry.get("fantasy_positions")
        if not isinstance(fantasy_positions, list) or not has_fantasy_position(fantasy_positions):
            continue
        cleaned[player_id] = {name: entry.get(name) for name in ESSENTIAL_FIELDS}
    return cleaned


def _position_breakdown(players: Mapping[str, Mapping[str, Any]]) -> Dict[str, int]:
    counts = {position: 0 for position in FANTASY_POSITIONS}
    for entry in players.values():
        for position in FANTASY_POSITIONS:
            if position in (entry.get("fantasy_positions") or []):
                counts[position] += 1
    return counts


def convert_players_export(
    source: Path,
    destination: Path,
    *,
    backup: Optional[Path] = None,
) -> RosterConversionReport:
    """Turn the vendor players export into the Roster Index file."""

    try:
        content = source.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConversionError(f"{source} not found") from None
    try:
        raw = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConversionError(f"{source} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConversionError(f"{source} must contain a JSON object keyed by player id")

    if backup is not None:
        shutil.copyfile(source, backup)
        logger.info("Backed up %s to %s", source, backup)

    filtered = filter_roster(raw)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(json.dumps(filtered), encoding="utf-8")

    report = RosterConversionReport(
        original_players=len(raw),
        kept_players=len(filtered),
        by_position=_position_breakdown(filtered),
    )
    logger.info(
        "Wrote %d of %d players to %s", report.kept_players, report.original_players, destination
    )
    return report
