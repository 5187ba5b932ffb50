"""Draft pick and snapshot models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Tuple

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class Pick(BaseModel):
    """Single selection event as reported by the draft source."""

    pick_no: int = Field(..., ge=1)
    player_id: Optional[str] = None
    round: Optional[int] = None
    draft_slot: Optional[int] = None
    picked_by: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("player_id", mode="before")
    @classmethod
    def _blank_player_id(cls, value: object) -> object:
        if value is None:
            return None
        if isinstance(value, int):
            value = str(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("picked_by", mode="before")
    @classmethod
    def _coerce_picked_by(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value or None


class DraftState(BaseModel):
    """Immutable snapshot of every pick returned by the latest poll."""

    draft_id: str
    picks: Tuple[Pick, ...] = ()
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(frozen=True)

    @classmethod
    def empty(cls, draft_id: str) -> "DraftState":
        return cls(draft_id=draft_id, picks=())
