"""Timer-driven refresh cycle for a draft session."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Set

from draftboard.config.settings import DEFAULT_POLL_INTERVAL
from draftboard.errors import DraftFetchError
from draftboard.models import DraftState

from .client import PickSource
from .session import DraftSession, RefreshOutcome


logger = logging.getLogger(__name__)


class RefreshCycle:
    """Poll the pick source and push snapshots into a session.

    Ticks never wait for an earlier fetch to finish. Each fetch carries the
    generation it was issued under; a response older than the last one the
    session accepted is discarded.
    """

    def __init__(
        self,
        session: DraftSession,
        source: PickSource,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.session = session
        self.source = source
        self.interval = interval
        self._tasks: Set[asyncio.Task[RefreshOutcome]] = set()

    async def refresh(self) -> RefreshOutcome:
        session = self.session
        draft_id = session.draft_id
        generation = session.begin_fetch()
        try:
            if not draft_id:
                raise DraftFetchError("No draft id configured")
            picks = await self.source.fetch_picks(draft_id)
        except DraftFetchError as exc:
            if not session.record_failure(str(exc), generation=generation):
                logger.debug("Discarding stale failure for draft %s (generation %d)", draft_id, generation)
                return RefreshOutcome.STALE
            logger.warning("Error fetching draft %s: %s", draft_id or "<unset>", exc)
            return RefreshOutcome.FAILURE
        finally:
            session.end_fetch()

        state = DraftState(draft_id=draft_id, picks=tuple(picks))
        if not session.apply_snapshot(state, generation=generation):
            logger.debug("Discarding stale snapshot for draft %s (generation %d)", draft_id, generation)
            return RefreshOutcome.STALE
        logger.info("Loaded %d picks for draft %s", len(state.picks), draft_id)
        return RefreshOutcome.SUCCESS

    def request_refresh(self) -> "asyncio.Task[RefreshOutcome]":
        """Start a refresh in the background without waiting on earlier ones."""

        task = asyncio.create_task(self.refresh())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def run(self, stop: Optional[asyncio.Event] = None) -> None:
        stop = stop or asyncio.Event()
        logger.info("Auto-refresh enabled every %.1f seconds", self.interval)
        try:
            while not stop.is_set():
                self.request_refresh()
                try:
                    await asyncio.wait_for(stop.wait(), timeout=self.interval)
                except asyncio.TimeoutError:
                    continue
        finally:
            await self.aclose()
            logger.info("Auto-refresh stopped")

    async def aclose(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
