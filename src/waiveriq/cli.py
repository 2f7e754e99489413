"""Command-line interface for generating waiver recommendations."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from dataclasses import asdict, replace
from pathlib import Path

from waiveriq.errors import LeagueNotFoundError, SleeperSyncError
from waiveriq.ingest import SleeperClient
from waiveriq.ingest.sync import SleeperSync
from waiveriq.persistence import LeagueStore
from waiveriq.projections import ProjectionCache
from waiveriq.settings import Settings
from waiveriq.waivers import RecommendationGenerator, current_week_and_season


logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fantasy football waiver recommendations")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database path")
    parser.add_argument("--log-level", default="INFO", help="Logging level (e.g., DEBUG, INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate and store recommendations for a league")
    generate.add_argument("league_id", help="League identifier")
    generate.add_argument("--week", type=int, default=None, help="NFL week (defaults to the current week)")
    generate.add_argument("--season", type=int, default=None, help="Season year (defaults to the current season)")
    generate.add_argument("--max", type=int, default=None, dest="max_recommendations", help="Recommendations to keep")
    generate.add_argument("--no-faab", action="store_true", help="Rank by waiver priority instead of FAAB bids")

    sync = subparsers.add_parser("sync-projections", help="Write baseline projections for a week")
    sync.add_argument("week", type=int, help="NFL week (0 for season-long)")
    sync.add_argument("season", type=int, help="Season year")

    subparsers.add_parser("sync-players", help="Load NFL players from Sleeper")

    league = subparsers.add_parser("sync-league", help="Load a league, its roster and transactions from Sleeper")
    league.add_argument("league_id", help="League identifier")
    league.add_argument("--platform-league-id", default=None, help="Sleeper league id (defaults to the stored one, then league_id)")
    league.add_argument("--owner-id", default=None, help="Sleeper user id owning the roster to track")
    league.add_argument("--season", type=int, default=None, help="Season year (defaults to the league's season)")
    league.add_argument("--through-week", type=int, default=None, help="Last week of transactions to load")

    stats = subparsers.add_parser("sync-stats", help="Load weekly player stats from Sleeper")
    stats.add_argument("week", type=int, help="NFL week")
    stats.add_argument("season", type=int, help="Season year")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser.parse_args(argv)


def _build_generator(settings: Settings) -> RecommendationGenerator:
    store = LeagueStore(settings.db_path)
    cache = None
    if settings.redis_url:
        cache = ProjectionCache.from_url(settings.redis_url, ttl=settings.projection_ttl)
    sleeper = SleeperClient(settings.sleeper_base_url, timeout=settings.sleeper_timeout)
    return RecommendationGenerator.build(store, cache=cache, sleeper=sleeper)


def _build_syncer(settings: Settings) -> SleeperSync:
    store = LeagueStore(settings.db_path)
    sleeper = SleeperClient(settings.sleeper_base_url, timeout=settings.sleeper_timeout)
    return SleeperSync(store, sleeper)


def _generate(args: argparse.Namespace, settings: Settings) -> None:
    generator = _build_generator(settings)
    current_week, current_season = current_week_and_season()
    week = args.week if args.week is not None else current_week
    season = args.season if args.season is not None else current_season
    try:
        recommendations = asyncio.run(
            generator.generate(
                args.league_id,
                season,
                week,
                use_faab=False if args.no_faab else None,
                max_recommendations=args.max_recommendations or settings.max_recommendations,
            )
        )
    except LeagueNotFoundError as exc:
        raise SystemExit(str(exc)) from exc
    stored = generator.save_recommendations(args.league_id, week, season, recommendations)
    logger.info("Stored %d recommendations for league %s", len(stored), args.league_id)
    print(json.dumps([asdict(rec) for rec in stored], indent=2, default=str))


def _sync_projections(args: argparse.Namespace, settings: Settings) -> None:
    generator = _build_generator(settings)
    counts = generator.projections.sync_week_projections(args.week, args.season)
    print(json.dumps({"week": args.week, "season": args.season, **counts}))


def _sync(args: argparse.Namespace, settings: Settings) -> None:
    syncer = _build_syncer(settings)
    if args.command == "sync-players":
        job = syncer.sync_players()
    elif args.command == "sync-league":
        job = syncer.sync_league(
            args.league_id,
            platform_league_id=args.platform_league_id,
            owner_id=args.owner_id,
            season=args.season,
            through_week=args.through_week,
        )
    else:
        job = syncer.sync_week_stats(args.season, args.week)
    try:
        summary = asyncio.run(job)
    except (SleeperSyncError, ValueError) as exc:
        raise SystemExit(str(exc)) from exc
    print(json.dumps(summary))


def _serve(args: argparse.Namespace, settings: Settings) -> None:
    import uvicorn

    from waiveriq.api import create_app

    uvicorn.run(create_app(settings), host=args.host, port=args.port)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = Settings.from_env()
    if args.db is not None:
        settings = replace(settings, db_path=args.db)

    if args.command == "generate":
        _generate(args, settings)
    elif args.command == "sync-projections":
        _sync_projections(args, settings)
    elif args.command in {"sync-players", "sync-league", "sync-stats"}:
        _sync(args, settings)
    elif args.command == "serve":
        _serve(args, settings)


if __name__ == "__main__":
    main()
