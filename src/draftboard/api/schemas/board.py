from __future__ import annotations

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, Field

from draftboard.engine import AvailablePlayer, EnrichedPick


class PickResponse(BaseModel):
    pick_no: int
    player_id: str
    known: bool
    name: str
    position: str | None = None
    team: str | None = None
    round: int | None = None
    draft_slot: int | None = None

    @classmethod
    def from_pick(cls, pick: EnrichedPick) -> "PickResponse":
        return cls(
            pick_no=pick.pick_no,
            player_id=pick.player_id,
            known=pick.known,
            name=pick.display_name,
            position=pick.position,
            team=pick.team,
            round=pick.round,
            draft_slot=pick.draft_slot,
        )


class AvailablePlayerResponse(BaseModel):
    rank: int
    tier: int
    name: str
    position: str
    player_id: str
    favorite: bool

    @classmethod
    def from_available(cls, player: AvailablePlayer) -> "AvailablePlayerResponse":
        return cls(
            rank=player.ranked.rank,
            tier=player.ranked.tier,
            name=player.ranked.name,
            position=player.ranked.position,
            player_id=player.display_id,
            favorite=player.favorite,
        )


class BoardResponse(BaseModel):
    draft_id: str
    status: Literal["idle", "fetching"]
    last_refreshed_at: datetime | None = None
    error: str | None = None
    position: str | None = None
    drafted_count: int
    picks: List[PickResponse]
    available: List[AvailablePlayerResponse]


class DraftChangeRequest(BaseModel):
    draft_id: str = Field(..., min_length=1)


class FilterRequest(BaseModel):
    position: str | None = None
