"""Runtime settings for the board, resolved from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional, Tuple

SLEEPER_API_BASE_URL = "https://api.sleeper.app/v1"
DEFAULT_POLL_INTERVAL = 10.0
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_DATA_DIR = Path("data")


@dataclass(frozen=True)
class BoardSettings:
    draft_id: str = ""
    players_path: Optional[Path] = DEFAULT_DATA_DIR / "players.json"
    rankings_path: Optional[Path] = DEFAULT_DATA_DIR / "rankings.json"
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    api_base_url: str = SLEEPER_API_BASE_URL
    favorites: Tuple[str, ...] = ()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BoardSettings":
        env = os.environ if environ is None else environ
        settings = cls()
        overrides: dict[str, object] = {}
        if env.get("DRAFTBOARD_DRAFT_ID"):
            overrides["draft_id"] = env["DRAFTBOARD_DRAFT_ID"].strip()
        if env.get("DRAFTBOARD_PLAYERS_PATH"):
            overrides["players_path"] = Path(env["DRAFTBOARD_PLAYERS_PATH"])
        if env.get("DRAFTBOARD_RANKINGS_PATH"):
            overrides["rankings_path"] = Path(env["DRAFTBOARD_RANKINGS_PATH"])
        if env.get("DRAFTBOARD_POLL_INTERVAL"):
            overrides["poll_interval"] = _positive_float(
                env["DRAFTBOARD_POLL_INTERVAL"], "DRAFTBOARD_POLL_INTERVAL"
            )
        if env.get("DRAFTBOARD_REQUEST_TIMEOUT"):
            overrides["request_timeout"] = _positive_float(
                env["DRAFTBOARD_REQUEST_TIMEOUT"], "DRAFTBOARD_REQUEST_TIMEOUT"
            )
        if env.get("DRAFTBOARD_API_BASE_URL"):
            overrides["api_base_url"] = env["DRAFTBOARD_API_BASE_URL"].rstrip("/")
        if env.get("DRAFTBOARD_FAVORITES"):
            overrides["favorites"] = parse_favorites(env["DRAFTBOARD_FAVORITES"])
        return replace(settings, **overrides)

    def with_overrides(self, **changes: object) -> "BoardSettings":
        """Return a copy with every non-None override applied."""

        return replace(self, **{key: value for key, value in changes.items() if value is not None})


def parse_favorites(raw: str) -> Tuple[str, ...]:
    return tuple(name.strip() for name in raw.split(",") if name.strip())


def _positive_float(raw: str, name: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value
