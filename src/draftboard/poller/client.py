"""Async client for the Sleeper draft picks endpoint."""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from draftboard.config.settings import DEFAULT_REQUEST_TIMEOUT, SLEEPER_API_BASE_URL
from draftboard.errors import DraftFetchError
from draftboard.models import Pick


logger = logging.getLogger(__name__)


class PickSource(Protocol):
    async def fetch_picks(self, draft_id: str) -> List[Pick]:
        ...


class SleeperDraftClient:
    """Fetch ``GET /draft/{draft_id}/picks``; every failure becomes DraftFetchError."""

    def __init__(
        self,
        *,
        base_url: str = SLEEPER_API_BASE_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def fetch_picks(self, draft_id: str) -> List[Pick]:
        url = f"{self.base_url}/draft/{quote(draft_id, safe='')}/picks"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise DraftFetchError(f"Request failed: {exc}") from exc

        if not response.is_success:
            raise DraftFetchError(f"HTTP error! status: {response.status_code}")

        try:
            payload = response.json()
        except ValueError:
            raise DraftFetchError("Invalid response format") from None
        if not isinstance(payload, list):
            raise DraftFetchError("Invalid response format")

        picks: List[Pick] = []
        skipped = 0
        for item in payload:
            try:
                picks.append(Pick.model_validate(item))
            except ValidationError as exc:
                skipped += 1
                logger.debug("Skipping malformed pick %r: %s", item, exc)
        if skipped:
            logger.warning("Skipped %d malformed picks for draft %s", skipped, draft_id)
        logger.debug("Fetched %d picks for draft %s", len(picks), draft_id)
        return picks
