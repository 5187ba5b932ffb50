"""Lightweight REST client for a running draftboard server."""

from __future__ import annotations

import argparse
import json

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the draftboard REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--position", default=None, help="Position filter for the available list")
    parser.add_argument("--set-filter", action="store_true", help="Store --position as the board filter")
    parser.add_argument("--draft-id", default=None, help="Switch the board to another draft")
    parser.add_argument("--refresh", action="store_true", help="Trigger a manual refresh first")
    parser.add_argument("--limit", type=int, default=10, help="Rows to print per list")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.draft_id:
            resp = client.post("/draft", json={"draft_id": args.draft_id})
            if resp.status_code == 400:
                raise SystemExit(resp.json().get("detail", "invalid draft id"))
            resp.raise_for_status()
        if args.set_filter:
            resp = client.post("/filter", json={"position": args.position})
            resp.raise_for_status()
        if args.refresh:
            resp = client.post("/refresh")
            resp.raise_for_status()

        params = {"position": args.position} if args.position else None
        resp = client.get("/board", params=params)
        resp.raise_for_status()
        board = resp.json()

    if board["error"]:
        print(f"Last refresh failed: {board['error']}")
    print(f"Draft {board['draft_id']} ({board['status']}), last refreshed {board['last_refreshed_at']}")
    print("Recent picks:", json.dumps(board["picks"][: args.limit], indent=2))
    print("Available:", json.dumps(board["available"][: args.limit], indent=2))


if __name__ == "__main__":
    main()
