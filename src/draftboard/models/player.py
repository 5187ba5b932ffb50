"""Static player models shared by ingestion, the engine and presenters."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class Player(BaseModel):
    """Roster entry keyed by the Sleeper player identifier."""

    player_id: str = Field(..., min_length=1)
    first_name: Optional[str] = ""
    last_name: Optional[str] = ""
    team: Optional[str] = None
    position: Optional[str] = None
    fantasy_positions: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("fantasy_positions", mode="before")
    @classmethod
    def _null_positions(cls, value: object) -> object:
        return [] if value is None else value

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class RankedPlayer(BaseModel):
    """One row of the ranking list; names and positions are already cleaned."""

    rank: int = Field(..., ge=1)
    tier: int = Field(..., ge=1)
    name: str
    position: str

    model_config = ConfigDict(frozen=True, extra="ignore")
