"""Fantasy position tables shared by the converters and the board filter."""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Optional, Tuple


FANTASY_POSITIONS: Tuple[str, ...] = ("QB", "RB", "WR", "TE", "K", "DEF")

# Legacy vendor codes mapped onto the positions Sleeper reports.
POSITION_ALIASES: Mapping[str, str] = {
    "DST": "DEF",
}

_TRAILING_DIGITS = re.compile(r"\d+$")


def canonical_position(raw: Optional[str]) -> str:
    """Strip positional-rank digits ("WR12" -> "WR") and apply aliases."""

    if raw is None:
        return ""
    token = _TRAILING_DIGITS.sub("", raw.strip())
    return POSITION_ALIASES.get(token, token)


def is_fantasy_position(position: Optional[str]) -> bool:
    return position in FANTASY_POSITIONS


def has_fantasy_position(positions: Iterable[str] | None) -> bool:
    if not positions:
        return False
    return any(is_fantasy_position(position) for position in positions)
