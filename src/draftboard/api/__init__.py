"""REST API and HTML board for a live draft."""

from __future__ import annotations

import asyncio
import logging
import urllib.parse
from contextlib import asynccontextmanager
from dataclasses import replace
from html import escape
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Form, HTTPException, Query
from fastapi.responses import HTMLResponse, RedirectResponse

from draftboard.api.schemas import (
    AvailablePlayerResponse,
    BoardResponse,
    DraftChangeRequest,
    FilterRequest,
    PickResponse,
)
from draftboard.config import FANTASY_POSITIONS, BoardSettings
from draftboard.engine import (
    BoardView,
    available_players,
    drafted_player_ids,
    normalize_position_filter,
)
from draftboard.ingest import load_rankings, load_roster_index
from draftboard.poller import (
    DraftSession,
    PickSource,
    RefreshCycle,
    SleeperDraftClient,
)


logger = logging.getLogger(__name__)


def _view_for(session: DraftSession, position: Optional[str]) -> BoardView:
    """Session view, or a one-off availability list for another position."""

    if position is None:
        return session.view
    position = normalize_position_filter(position)
    if position == session.position:
        return session.view
    available = available_players(
        session.rankings,
        session.roster,
        drafted_player_ids(session.state),
        position=position,
        favorites=session.favorites,
    )
    return replace(session.view, position=position, available=tuple(available))


def board_to_response(session: DraftSession, view: BoardView) -> BoardResponse:
    return BoardResponse(
        draft_id=session.draft_id,
        status=session.status.value,
        last_refreshed_at=session.last_refreshed_at,
        error=session.error,
        position=view.position,
        drafted_count=view.drafted_count,
        picks=[PickResponse.from_pick(pick) for pick in view.picks],
        available=[AvailablePlayerResponse.from_available(player) for player in view.available],
    )


def _render_page(body: str, *, refresh_seconds: Optional[float] = None) -> str:
    refresh_tag = ""
    if refresh_seconds:
        refresh_tag = f"<meta http-equiv=\"refresh\" content=\"{int(max(1, refresh_seconds))}\">"
    return f"""<!DOCTYPE html>
<html lang=\"en\">
<head>
    <meta charset=\"utf-8\">
    {refresh_tag}
    <title>Draft Board</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 2rem; background: #f5f7fa; }}
        main {{ background: #fff; padding: 2rem; border-radius: 12px; box-shadow: 0 2px 6px rgba(0,0,0,0.08); }}
        nav a {{ margin-right: 1rem; color: #2563eb; text-decoration: none; }}
        form {{ display: flex; gap: 0.75rem; align-items: center; flex-wrap: wrap; margin-bottom: 1rem; }}
        label {{ font-weight: 600; }}
        input[type=\"text\"], select {{ padding: 0.4rem; border-radius: 6px; border: 1px solid #cbd5e1; }}
        button {{ padding: 0.5rem 1rem; border-radius: 6px; border: none; background: #2563eb; color: #fff; cursor: pointer; }}
        .columns {{ display: grid; grid-template-columns: 1fr 2fr; gap: 2rem; }}
        table {{ border-collapse: collapse; width: 100%; margin-top: 1rem; }}
        th, td {{ padding: 0.5rem; border: 1px solid #e2e8f0; text-align: left; }}
        .flash {{ padding: 1rem; border-radius: 6px; margin-bottom: 1rem; }}
        .flash.success {{ background: #ecfdf5; color: #047857; }}
        .flash.loading {{ background: #eff6ff; color: #1d4ed8; }}
        .flash.error {{ background: #fef2f2; color: #b91c1c; }}
        .favorite td.player-name {{ font-weight: 700; }}
        .unknown td.player-name {{ color: #b91c1c; }}
        tr.tier-odd {{ background: #f8fafc; }}
    </style>
</head>
<body>
    <nav><a href=\"/ui\">Board</a></nav>
    <main>{body}</main>
</body>
</html>"""


def _render_status(session: DraftSession) -> str:
    if session.error:
        return f"<div class=\"flash error\">Error: {escape(session.error)}</div>"
    if session.last_refreshed_at is None:
        return "<div class=\"flash loading\">Fetching draft status...</div>"
    updated = session.last_refreshed_at.astimezone().strftime("%H:%M:%S")
    return (
        f"<div class=\"flash success\">Loaded {len(session.state.picks)} picks. "
        f"Last updated: {updated}</div>"
    )


def _render_picks(view: BoardView) -> str:
    if not view.picks:
        return "<p>No picks yet.</p>"
    rows = "".join(
        f"<tr class=\"{'known' if pick.known else 'unknown'}\"><td>{pick.pick_no}</td>"
        f"<td class=\"player-name\">{escape(pick.display_name)}</td>"
        f"<td>{escape(pick.position or '')}</td><td>{escape(pick.team or '')}</td></tr>"
        for pick in view.picks
    )
    return (
        "<table class=\"picks-table\"><thead><tr><th>Pick</th><th>Player</th><th>Pos</th><th>Team</th></tr></thead>"
        f"<tbody>{rows}</tbody></table>"
    )


def _render_available(session: DraftSession, view: BoardView) -> str:
    if not session.rankings:
        return "<p>No rankings data available.</p>"
    if not view.available:
        return "<p>No available players match this filter.</p>"
    rows = []
    for player in view.available:
        ranked = player.ranked
        classes = [f"tier-{ranked.tier}", "tier-odd" if ranked.tier % 2 else "tier-even"]
        if player.favorite:
            classes.append("favorite")
        rows.append(
            f"<tr class=\"{' '.join(classes)}\"><td class=\"rank-number\">{ranked.rank}</td>"
            f"<td class=\"player-name\">{escape(ranked.name)}</td>"
            f"<td class=\"position\">{escape(ranked.position)}</td>"
            f"<td class=\"tier\">{ranked.tier}</td>"
            f"<td class=\"player-id\">{escape(player.display_id)}</td></tr>"
        )
    return (
        "<table class=\"rankings-table\"><thead><tr><th class=\"rank-number\">Rank</th>"
        "<th class=\"player-name\">Player Name</th><th class=\"position\">Pos</th>"
        "<th class=\"tier\">Tier</th><th class=\"player-id\">Player ID</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table>"
    )


def _render_board_page(session: DraftSession, view: BoardView, *, refresh_seconds: Optional[float]) -> str:
    options = ["<option value=\"\">All positions</option>"]
    for position in FANTASY_POSITIONS:
        selected = " selected" if view.position == position else ""
        options.append(f"<option value=\"{position}\"{selected}>{position}</option>")
    body = (
        "<h1>Draft Board</h1>"
        f"{_render_status(session)}"
        "<form method=\"post\" action=\"/ui/draft\">"
        "<label for=\"draft_id\">Draft ID</label>"
        f"<input type=\"text\" id=\"draft_id\" name=\"draft_id\" value=\"{escape(session.draft_id)}\">"
        "<button type=\"submit\">Load draft</button></form>"
        "<form method=\"post\" action=\"/ui/filter\">"
        "<label for=\"position\">Position</label>"
        f"<select id=\"position\" name=\"position\">{''.join(options)}</select>"
        "<button type=\"submit\">Filter</button></form>"
        "<div class=\"columns\">"
        f"<section><h2>Recent picks</h2>{_render_picks(view)}</section>"
        f"<section><h2>Available players ({len(view.available)})</h2>{_render_available(session, view)}</section>"
        "</div>"
    )
    return _render_page(body, refresh_seconds=refresh_seconds)


def create_app(
    settings: BoardSettings | None = None,
    *,
    source: PickSource | None = None,
    poll: bool = True,
) -> FastAPI:
    settings = settings or BoardSettings.from_env()
    session = DraftSession(
        draft_id=settings.draft_id,
        roster=load_roster_index(settings.players_path),
        rankings=load_rankings(settings.rankings_path),
        favorites=settings.favorites,
    )
    if source is None:
        source = SleeperDraftClient(base_url=settings.api_base_url, timeout=settings.request_timeout)
    cycle = RefreshCycle(session, source, interval=settings.poll_interval)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        stop = asyncio.Event()
        runner = asyncio.create_task(cycle.run(stop)) if poll else None
        try:
            yield
        finally:
            stop.set()
            if runner is not None:
                await runner

    app = FastAPI(title="draftboard", lifespan=lifespan)
    app.state.settings = settings
    app.state.session = session
    app.state.refresh_cycle = cycle

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/board", response_model=BoardResponse)
    async def board(position: str | None = Query(None)) -> BoardResponse:
        return board_to_response(session, _view_for(session, position))

    @app.get("/picks", response_model=list[PickResponse])
    async def picks() -> list[PickResponse]:
        return [PickResponse.from_pick(pick) for pick in session.view.picks]

    @app.get("/available", response_model=list[AvailablePlayerResponse])
    async def available(position: str | None = Query(None)) -> list[AvailablePlayerResponse]:
        view = _view_for(session, position)
        return [AvailablePlayerResponse.from_available(player) for player in view.available]

    @app.post("/refresh", response_model=BoardResponse)
    async def refresh() -> BoardResponse:
        await cycle.refresh()
        return board_to_response(session, session.view)

    @app.post("/draft", response_model=BoardResponse)
    async def change_draft(payload: DraftChangeRequest) -> BoardResponse:
        try:
            session.change_draft(payload.draft_id)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        await cycle.refresh()
        return board_to_response(session, session.view)

    @app.post("/filter", response_model=BoardResponse)
    async def set_filter(payload: FilterRequest) -> BoardResponse:
        view = session.set_position(payload.position)
        return board_to_response(session, view)

    @app.get("/ui", response_class=HTMLResponse)
    async def ui_index(position: str | None = Query(None)):
        view = _view_for(session, position)
        content = _render_board_page(
            session,
            view,
            refresh_seconds=settings.poll_interval if poll else None,
        )
        return HTMLResponse(content)

    @app.post("/ui/draft")
    async def ui_change_draft(draft_id: str = Form("")):
        try:
            session.change_draft(draft_id)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        await cycle.refresh()
        return RedirectResponse(url="/ui", status_code=303)

    @app.post("/ui/filter")
    async def ui_set_filter(position: str = Form("")):
        session.set_position(position)
        query = f"?{urllib.parse.urlencode({'position': position})}" if position else ""
        return RedirectResponse(url=f"/ui{query}", status_code=303)

    return app
