"""Ranking List: loading and the offline FantasyPros CSV converter."""

from __future__ import annotations

import csv
import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from pydantic import ValidationError

from draftboard.config.positions import canonical_position
from draftboard.errors import ConversionError
from draftboard.models import RankedPlayer


logger = logging.getLogger(__name__)

RANK_COLUMN = "RK"
TIER_COLUMN = "TIERS"
NAME_COLUMN = "PLAYER NAME"
POSITION_COLUMN = "POS"
REQUIRED_COLUMNS = (RANK_COLUMN, TIER_COLUMN, NAME_COLUMN, POSITION_COLUMN)

# Rankings spellings that differ from the roster's first/last name.
NAME_ALIASES: Mapping[str, str] = {
    "Marquise Brown": "Hollywood Brown",
}

_NAME_SUFFIX_PATTERN = re.compile(r"\s+(Jr\.|Sr\.|II|III|IV|V|VI|VII|VIII|IX|X)\s*$")


def clean_player_name(name: str, *, aliases: Mapping[str, str] | None = None) -> str:
    aliases = NAME_ALIASES if aliases is None else aliases
    if name in aliases:
        return aliases[name]
    return _NAME_SUFFIX_PATTERN.sub("", name).strip()


def _parse_int(raw: Optional[str], column: str, line: int) -> int:
    text = (raw or "").strip()
    try:
        return int(text)
    except ValueError:
        raise ConversionError(f"line {line}: {column} value {raw!r} is not an integer") from None


def read_rankings_csv(path: Path) -> List[RankedPlayer]:
    """Parse a FantasyPros rankings export into rank-ordered players."""

    try:
        handle = path.open(newline="", encoding="utf-8-sig")
    except FileNotFoundError:
        raise ConversionError(f"{path} not found") from None

    players: List[RankedPlayer] = []
    with handle as f:
        reader = csv.DictReader(f)
        missing = [column for column in REQUIRED_COLUMNS if column not in (reader.fieldnames or [])]
        if missing:
            raise ConversionError(f"{path} is missing columns: {', '.join(missing)}")
        for line, row in enumerate(reader, start=2):
            try:
                players.append(
                    RankedPlayer(
                        rank=_parse_int(row.get(RANK_COLUMN), RANK_COLUMN, line),
                        tier=_parse_int(row.get(TIER_COLUMN), TIER_COLUMN, line),
                        name=clean_player_name((row.get(NAME_COLUMN) or "").strip()),
                        position=canonical_position(row.get(POSITION_COLUMN)),
                    )
                )
            except ValidationError as exc:
                raise ConversionError(f"line {line}: {exc}") from exc

    players.sort(key=lambda player: player.rank)
    return players


@dataclass(frozen=True)
class RankingsConversionReport:
    players: int
    sample: Sequence[RankedPlayer]


def write_rankings(players: Sequence[RankedPlayer], destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    payload = [player.model_dump() for player in players]
    destination.write_text(json.dumps(payload, indent=1), encoding="utf-8")


def convert_rankings_export(source: Path, destination: Path) -> RankingsConversionReport:
    players = read_rankings_csv(source)
    write_rankings(players, destination)
    logger.info("Wrote %d ranked players to %s", len(players), destination)
    return RankingsConversionReport(players=len(players), sample=tuple(players[:5]))


def load_rankings(path: Optional[Path]) -> List[RankedPlayer]:
    """Load the Ranking List file, degrading to an empty list when absent.

    The file is trusted to be in rank order; no re-sort happens here.
    """

    if path is None:
        logger.warning("No rankings file configured; the available list will be empty")
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Rankings file %s not found; the available list will be empty", path)
        return []
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Unable to read rankings file %s: %s", path, exc)
        return []
    if not isinstance(data, list):
        logger.warning("Rankings file %s is not a JSON array; ignoring it", path)
        return []

    rankings: List[RankedPlayer] = []
    for entry in data:
        try:
            rankings.append(RankedPlayer.model_validate(entry))
        except ValidationError as exc:
            logger.warning("Skipping ranking entry %r: %s", entry, exc)
    logger.info("Loaded %d rankings from %s", len(rankings), path)
    return rankings
