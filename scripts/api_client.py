"""Lightweight REST client for the fmsquad API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the fmsquad REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("report", type=Path, nargs="?", help="Exported HTML report")
    parser.add_argument("--preview-only", action="store_true", help="Parse the report without storing it")
    parser.add_argument("--list-players", action="store_true", help="List stored players and exit")
    parser.add_argument("--get-player", metavar="PLAYER_ID", type=int, help="Fetch a stored player and exit")
    parser.add_argument("--stats", action="store_true", help="Show squad statistics and exit")
    args = parser.parse_args()

    if args.list_players or args.stats or args.get_player is not None:
        with httpx.Client(base_url=args.base_url) as client:
            if args.list_players:
                resp = client.get("/players")
                resp.raise_for_status()
                print(json.dumps(resp.json(), indent=2))
            if args.stats:
                resp = client.get("/squad/stats")
                resp.raise_for_status()
                print(json.dumps(resp.json(), indent=2))
            if args.get_player is not None:
                resp = client.get(f"/players/{args.get_player}")
                if resp.status_code == 404:
                    raise SystemExit(f"player {args.get_player} not found")
                resp.raise_for_status()
                print(json.dumps(resp.json(), indent=2))
        return

    if args.report is None:
        raise SystemExit("a report file is required unless using --list-players/--stats/--get-player")

    files = {"html": (args.report.name, args.report.read_bytes(), "text/html")}

    with httpx.Client(base_url=args.base_url) as client:
        endpoint = "/preview" if args.preview_only else "/import-html"
        resp = client.post(endpoint, files=files)
        if resp.status_code == 400:
            raise SystemExit(resp.json().get("detail", "import rejected"))
        resp.raise_for_status()
        payload = resp.json()
        if args.preview_only:
            print("Preview report:", json.dumps(payload["report"], indent=2))
            print(f"Parsed {len(payload['players'])} players")
            return
        print(f"Imported {payload['successful_imports']}/{payload['total_players']} players")
        for error in payload["errors"]:
            print(f"  {error}")


if __name__ == "__main__":
    main()
