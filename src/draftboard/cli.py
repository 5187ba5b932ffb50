"""Command-line interface for the draft board and its data converters."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from draftboard.config import BoardSettings
from draftboard.config.settings import parse_favorites
from draftboard.config_loader import BoardProfile
from draftboard.engine import BoardView
from draftboard.errors import ConversionError
from draftboard.ingest import (
    convert_players_export,
    convert_rankings_export,
    load_rankings,
    load_roster_index,
)
from draftboard.poller import DraftSession, RefreshCycle, RefreshOutcome, SleeperDraftClient


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Live fantasy draft board for Sleeper drafts")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    players = subparsers.add_parser("convert-players", help="Build the roster file from a Sleeper players export")
    players.add_argument("source", type=Path, help="Path to the raw players JSON export")
    players.add_argument("--output", type=Path, default=Path("data/players.json"), help="Roster file to write")
    players.add_argument("--backup", type=Path, default=None, help="Optional copy of the raw export")

    rankings = subparsers.add_parser("convert-rankings", help="Build the rankings file from a FantasyPros CSV")
    rankings.add_argument("source", type=Path, help="Path to the FantasyPros rankings CSV")
    rankings.add_argument("--output", type=Path, default=Path("data/rankings.json"), help="Rankings file to write")

    for name, help_text in (
        ("board", "Fetch the draft once and print picks and available players"),
        ("serve", "Run the board web app with automatic refresh"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--draft-id", default=None, help="Sleeper draft identifier")
        sub.add_argument("--players", type=Path, default=None, help="Roster file (players.json)")
        sub.add_argument("--rankings", type=Path, default=None, help="Rankings file (rankings.json)")
        sub.add_argument(
            "--favorite",
            action="append",
            default=[],
            help="Ranked player name to highlight (repeat or comma separate)",
        )
        sub.add_argument("--load-profile", type=Path, default=None, help="Load draft id and favorites JSON")
        sub.add_argument("--save-profile", type=Path, default=None, help="Save draft id and favorites JSON")
        if name == "board":
            sub.add_argument("--position", default=None, help="Only list available players at this position")
            sub.add_argument("--limit", type=int, default=25, help="Maximum rows per table")
        else:
            sub.add_argument("--host", default="127.0.0.1", help="Interface to bind")
            sub.add_argument("--port", type=int, default=8000, help="Port to bind")
            sub.add_argument("--interval", type=float, default=None, help="Seconds between refreshes")

    return parser.parse_args(argv)


def _resolve_settings(args: argparse.Namespace) -> BoardSettings:
    settings = BoardSettings.from_env()
    favorites: list[str] = []
    draft_id = args.draft_id

    if args.load_profile:
        profile = BoardProfile.load(args.load_profile)
        favorites.extend(profile.favorites)
        draft_id = draft_id or profile.draft_id or None

    for entry in args.favorite:
        favorites.extend(parse_favorites(entry))

    settings = settings.with_overrides(
        draft_id=draft_id,
        players_path=args.players,
        rankings_path=args.rankings,
        poll_interval=getattr(args, "interval", None),
        favorites=tuple(favorites) if favorites else None,
    )
    if args.save_profile:
        BoardProfile(settings.draft_id, list(settings.favorites)).save(args.save_profile)
        print(f"Saved board profile to {args.save_profile}")
    return settings


def _print_board(view: BoardView, *, limit: int) -> None:
    print(f"Draft {view.draft_id}: {len(view.picks)} picks, {view.drafted_count} players drafted")
    print()
    print("Recent picks")
    if not view.picks:
        print("  No picks yet.")
    for pick in view.picks[:limit]:
        print(f"  {pick.pick_no:>4}  {pick.display_name:<28} {pick.position or '-':<4} {pick.team or '-'}")
    print()
    heading = f"Available players ({view.position})" if view.position else "Available players"
    print(heading)
    if not view.available:
        print("  No available players.")
    for player in view.available[:limit]:
        ranked = player.ranked
        marker = "*" if player.favorite else " "
        print(
            f" {marker}{ranked.rank:>4}  {ranked.name:<28} {ranked.position:<4} "
            f"T{ranked.tier:<3} {player.display_id}"
        )
    remaining = len(view.available) - limit
    if remaining > 0:
        print(f"  +{remaining} more")


def _run_board(args: argparse.Namespace, settings: BoardSettings) -> int:
    session = DraftSession(
        draft_id=settings.draft_id,
        roster=load_roster_index(settings.players_path),
        rankings=load_rankings(settings.rankings_path),
        position=args.position,
        favorites=settings.favorites,
    )
    client = SleeperDraftClient(base_url=settings.api_base_url, timeout=settings.request_timeout)
    outcome = asyncio.run(RefreshCycle(session, client, interval=settings.poll_interval).refresh())
    if outcome is RefreshOutcome.FAILURE:
        print(f"Error: {session.error}", file=sys.stderr)
        return 1
    _print_board(session.view, limit=max(1, args.limit))
    return 0


def _run_serve(args: argparse.Namespace, settings: BoardSettings) -> int:
    import uvicorn

    from draftboard.api import create_app

    uvicorn.run(create_app(settings), host=args.host, port=args.port)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "convert-players":
            report = convert_players_export(args.source, args.output, backup=args.backup)
            print(f"Original player count: {report.original_players}")
            print(f"Filtered player count: {report.kept_players}")
            print(f"Removed {report.removed_players} players (null team or non-fantasy positions)")
            print("Breakdown by fantasy position:")
            for position, count in report.by_position.items():
                print(f"  {position}: {count} players")
            return 0
        if args.command == "convert-rankings":
            report = convert_rankings_export(args.source, args.output)
            print(f"Successfully converted {report.players} players to {args.output}")
            for player in report.sample:
                print(f"{player.rank}. {player.name} ({player.position}) - Tier {player.tier}")
            return 0
    except ConversionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        settings = _resolve_settings(args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if args.command == "board":
        return _run_board(args, settings)
    return _run_serve(args, settings)


if __name__ == "__main__":
    sys.exit(main())
