"""Per-board session state: target draft, filter, snapshot and refresh status."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence

from draftboard.engine import (
    BoardView,
    available_players,
    drafted_player_ids,
    normalize_position_filter,
    reconcile,
)
from draftboard.ingest.roster import RosterIndex
from draftboard.models import DraftState, RankedPlayer


logger = logging.getLogger(__name__)


class RefreshStatus(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"


class RefreshOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    STALE = "stale"


SessionListener = Callable[["DraftSession"], None]


class DraftSession:
    """Mutable context for one board.

    Only the refresh cycle writes snapshots. A fetch result is accepted only
    when its generation is newer than the last accepted one. Changing the
    draft settles every generation issued so far.
    """

    def __init__(
        self,
        *,
        draft_id: str,
        roster: RosterIndex,
        rankings: Sequence[RankedPlayer],
        position: Optional[str] = None,
        favorites: Iterable[str] = (),
    ) -> None:
        self.roster = roster
        self.rankings = tuple(rankings)
        self.favorites = tuple(favorites)
        self._draft_id = draft_id.strip()
        self._position = normalize_position_filter(position)
        self._state = DraftState.empty(self._draft_id)
        self._generation = 0
        self._settled = 0
        self._in_flight = 0
        self._listeners: List[SessionListener] = []
        self.last_refreshed_at: Optional[datetime] = None
        self.error: Optional[str] = None
        self._view = self._reconcile()

    @property
    def draft_id(self) -> str:
        return self._draft_id

    @property
    def position(self) -> Optional[str]:
        return self._position

    @property
    def state(self) -> DraftState:
        return self._state

    @property
    def view(self) -> BoardView:
        return self._view

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def status(self) -> RefreshStatus:
        return RefreshStatus.FETCHING if self._in_flight else RefreshStatus.IDLE

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def begin_fetch(self) -> int:
        self._generation += 1
        self._in_flight += 1
        return self._generation

    def end_fetch(self) -> None:
        self._in_flight = max(0, self._in_flight - 1)

    def accepts(self, generation: int) -> bool:
        return generation > self._settled

    def apply_snapshot(self, state: DraftState, *, generation: int) -> bool:
        if not self.accepts(generation) or state.draft_id != self._draft_id:
            return False
        self._settled = generation
        self._state = state
        self._view = self._reconcile()
        self.last_refreshed_at = datetime.now(timezone.utc)
        self.error = None
        self._notify()
        return True

    def record_failure(self, message: str, *, generation: int) -> bool:
        if not self.accepts(generation):
            return False
        self._settled = generation
        self.error = message
        self._notify()
        return True

    def set_position(self, position: Optional[str]) -> BoardView:
        """Change the filter; only the availability list is recomputed."""

        self._position = normalize_position_filter(position)
        available = available_players(
            self.rankings,
            self.roster,
            drafted_player_ids(self._state),
            position=self._position,
            favorites=self.favorites,
        )
        self._view = replace(self._view, position=self._position, available=tuple(available))
        self._notify()
        return self._view

    def change_draft(self, draft_id: str) -> None:
        draft_id = draft_id.strip()
        if not draft_id:
            raise ValueError("draft_id must not be blank")
        logger.info("Switching board from draft %r to %r", self._draft_id, draft_id)
        self._draft_id = draft_id
        self._generation += 1
        self._settled = self._generation
        self._state = DraftState.empty(draft_id)
        self.last_refreshed_at = None
        self.error = None
        self._view = self._reconcile()
        self._notify()

    def _reconcile(self) -> BoardView:
        return reconcile(
            self._state,
            self.roster,
            self.rankings,
            position=self._position,
            favorites=self.favorites,
        )

    def _notify(self) -> None:
        for listener in self._listeners:
            try:
                listener(self)
            except Exception:  # pragma: no cover - presenter errors never stop polling
                logger.exception("Board listener %r failed", listener)
