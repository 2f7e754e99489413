"""Lightweight REST client for the waiveriq API."""

from __future__ import annotations

import argparse
import json

import httpx


def _print(resp: httpx.Response) -> None:
    if resp.status_code == 404:
        raise SystemExit(f"not found: {resp.json().get('detail')}")
    resp.raise_for_status()
    print(json.dumps(resp.json(), indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the waiveriq REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("league_id", help="League to query")
    parser.add_argument("--week", type=int, default=None, help="NFL week (server defaults to the current week)")
    parser.add_argument("--season", type=int, default=None, help="Season year")
    parser.add_argument("--max", type=int, default=None, dest="max_recommendations", help="Recommendations to generate")
    parser.add_argument("--list-only", action="store_true", help="List stored recommendations without regenerating")
    parser.add_argument("--needs", action="store_true", help="Show positional needs and exit")
    parser.add_argument("--bid", metavar="PLAYER_ID", help="Calculate a FAAB bid for one player and exit")
    parser.add_argument("--claim", metavar="RECOMMENDATION_ID", help="Mark a recommendation as claimed and exit")
    args = parser.parse_args()

    week_season = {key: value for key, value in (("week", args.week), ("season", args.season)) if value is not None}

    with httpx.Client(base_url=args.base_url) as client:
        if args.needs:
            _print(client.get("/waivers/positional-needs", params={"league_id": args.league_id, **week_season}))
            return
        if args.bid:
            _print(
                client.post(
                    "/waivers/calculate-bid",
                    json={"league_id": args.league_id, "player_id": args.bid, **week_season},
                )
            )
            return
        if args.claim:
            _print(client.post("/waivers/track-claim", json={"recommendation_id": args.claim, "action": "claimed"}))
            return

        if not args.list_only:
            resp = client.post(
                "/waivers/recommendations/generate",
                json={"league_id": args.league_id, "max_recommendations": args.max_recommendations, **week_season},
            )
            if resp.status_code == 404:
                raise SystemExit(f"league {args.league_id} not found")
            resp.raise_for_status()
            payload = resp.json()
            print(payload["message"])
            week_season = {"week": payload["week"], "season": payload["season"]}

        _print(client.get("/waivers/recommendations", params={"league_id": args.league_id, **week_season}))


if __name__ == "__main__":
    main()
