"""Merge a draft snapshot with the Roster Index and the Ranking List."""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Iterable, List, Optional, Sequence

from draftboard.ingest.roster import RosterIndex
from draftboard.models import DraftState, RankedPlayer

NOT_FOUND = "Not found"
UNKNOWN_PLAYER = "Unknown player"


@dataclass(frozen=True)
class EnrichedPick:
    """Pick joined with its roster entry, if the identifier is known."""

    pick_no: int
    player_id: str
    known: bool
    name: Optional[str] = None
    position: Optional[str] = None
    team: Optional[str] = None
    round: Optional[int] = None
    draft_slot: Optional[int] = None

    @property
    def display_name(self) -> str:
        if self.known and self.name:
            return self.name
        return f"{UNKNOWN_PLAYER} ({self.player_id})"


@dataclass(frozen=True)
class AvailablePlayer:
    """Ranked player that no pick in the current snapshot has taken."""

    ranked: RankedPlayer
    player_id: Optional[str]
    favorite: bool = False

    @property
    def display_id(self) -> str:
        return self.player_id if self.player_id is not None else NOT_FOUND


@dataclass(frozen=True)
class BoardView:
    """Everything a presenter needs for one refresh."""

    draft_id: str
    position: Optional[str]
    picks: tuple[EnrichedPick, ...]
    available: tuple[AvailablePlayer, ...]
    drafted_count: int


def normalize_position_filter(position: Optional[str]) -> Optional[str]:
    """Blank filters mean "all positions"."""

    if position is None:
        return None
    position = position.strip()
    return position or None


def drafted_player_ids(state: DraftState) -> frozenset[str]:
    return frozenset(pick.player_id for pick in state.picks if pick.player_id is not None)


def enrich_picks(state: DraftState, roster: RosterIndex) -> List[EnrichedPick]:
    """Return the picks that name a player, most recent first."""

    enriched: List[EnrichedPick] = []
    for pick in state.picks:
        if pick.player_id is None:
            continue
        player = roster.get(pick.player_id)
        if player is None:
            enriched.append(
                EnrichedPick(
                    pick_no=pick.pick_no,
                    player_id=pick.player_id,
                    known=False,
                    round=pick.round,
                    draft_slot=pick.draft_slot,
                )
            )
            continue
        enriched.append(
            EnrichedPick(
                pick_no=pick.pick_no,
                player_id=pick.player_id,
                known=True,
                name=player.full_name,
                position=player.position,
                team=player.team,
                round=pick.round,
                draft_slot=pick.draft_slot,
            )
        )
    return sorted(enriched, key=lambda pick: pick.pick_no, reverse=True)


def available_players(
    rankings: Sequence[RankedPlayer],
    roster: RosterIndex,
    drafted: AbstractSet[str],
    *,
    position: Optional[str] = None,
    favorites: Iterable[str] = (),
) -> List[AvailablePlayer]:
    """Filter the ranking list down to undrafted players, keeping rank order.

    A ranked name that does not resolve to a roster identifier cannot be
    proven drafted and is always reported as available.
    """

    position = normalize_position_filter(position)
    favorite_names = frozenset(favorites)
    available: List[AvailablePlayer] = []
    for ranked in rankings:
        if position is not None and ranked.position != position:
            continue
        player_id = roster.resolve(ranked.name)
        if player_id is not None and player_id in drafted:
            continue
        available.append(
            AvailablePlayer(
                ranked=ranked,
                player_id=player_id,
                favorite=ranked.name in favorite_names,
            )
        )
    return available


def reconcile(
    state: DraftState,
    roster: RosterIndex,
    rankings: Sequence[RankedPlayer],
    *,
    position: Optional[str] = None,
    favorites: Iterable[str] = (),
) -> BoardView:
    drafted = drafted_player_ids(state)
    position = normalize_position_filter(position)
    return BoardView(
        draft_id=state.draft_id,
        position=position,
        picks=tuple(enrich_picks(state, roster)),
        available=tuple(
            available_players(
                rankings,
                roster,
                drafted,
                position=position,
                favorites=favorites,
            )
        ),
        drafted_count=len(drafted),
    )
