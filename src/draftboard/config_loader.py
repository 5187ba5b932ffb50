"""Persist and load board profiles (target draft and favorites)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass
class BoardProfile:
    draft_id: str = ""
    favorites: List[str] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "BoardProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            draft_id=str(data.get("draft_id", "") or ""),
            favorites=list(data.get("favorites", [])),
        )

    def save(self, path: Path) -> None:
        payload = {
            "draft_id": self.draft_id,
            "favorites": self.favorites,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
