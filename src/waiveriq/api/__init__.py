"""REST API for waiver recommendations."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, List

from fastapi import FastAPI, HTTPException, Query

from waiveriq.api.schemas import (
    BidRequest,
    BidResponse,
    DropCandidateResponse,
    GenerateRecommendationsRequest,
    GenerateRecommendationsResponse,
    LeagueRequest,
    LeagueSyncRequest,
    LeagueSyncResponse,
    PlayerDetailResponse,
    PlayerResponse,
    PlayerSyncResponse,
    PositionalNeedResponse,
    ProjectionResponse,
    ProjectionSyncRequest,
    ProjectionSyncResponse,
    RecommendationResponse,
    RosterRequest,
    StatsSyncRequest,
    StatsSyncResponse,
    StoredRecommendationResponse,
    TargetResponse,
    TrackClaimRequest,
    TrendingPlayerResponse,
    WaiverHistoryResponse,
)
from waiveriq.errors import SleeperSyncError
from waiveriq.ingest import SleeperClient, trend_percentages
from waiveriq.ingest.sync import SleeperSync
from waiveriq.models import League, Player, RosterEntry, StoredRecommendation, WaiverRecommendation
from waiveriq.persistence import LeagueStore
from waiveriq.projections import ProjectionCache
from waiveriq.settings import Settings
from waiveriq.waivers import RecommendationGenerator, current_week_and_season


logger = logging.getLogger(__name__)

SUMMARY_RECOMMENDATIONS = 5
MAX_TARGETS = 20
DEFAULT_TRENDING_LIMIT = 25


def _error_detail(exc: Exception) -> str:
    return str(exc.args[0]) if exc.args else str(exc)


def _week_and_season(week: int | None, season: int | None) -> tuple[int, int]:
    current_week, current_season = current_week_and_season()
    return (week if week is not None else current_week, season if season is not None else current_season)


def recommendation_to_response(rec: WaiverRecommendation) -> RecommendationResponse:
    player = rec.player
    drop = rec.suggested_drop
    return RecommendationResponse(
        player_id=player.player_id,
        player_name=player.player_name,
        position=player.position,
        team=player.team,
        opportunity_score=player.opportunity_score,
        projected_points=player.projected_points,
        positional_need=rec.positional_need,
        would_start_immediately=rec.would_start_immediately,
        recommended_bid=rec.recommended_bid,
        min_bid=rec.min_bid,
        max_bid=rec.max_bid,
        priority_rank=rec.priority_rank,
        should_claim=rec.should_claim,
        suggested_drop=DropCandidateResponse(**asdict(drop)) if drop else None,
        reasoning=rec.reasoning,
        confidence=rec.confidence,
        urgency=rec.urgency,
    )


def stored_to_response(rec: StoredRecommendation) -> StoredRecommendationResponse:
    return StoredRecommendationResponse.model_validate(asdict(rec))


def player_to_response(player: Player) -> PlayerResponse:
    return PlayerResponse(**player.model_dump())


def create_app(
    settings: Settings | None = None,
    *,
    store: LeagueStore | None = None,
    sleeper: SleeperClient | None = None,
    cache: ProjectionCache | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    store = store or LeagueStore(settings.db_path)
    if cache is None and settings.redis_url:
        cache = ProjectionCache.from_url(settings.redis_url, ttl=settings.projection_ttl)
    if sleeper is None:
        sleeper = SleeperClient(settings.sleeper_base_url, timeout=settings.sleeper_timeout)
    generator = RecommendationGenerator.build(store, cache=cache, sleeper=sleeper)
    syncer = SleeperSync(store, sleeper)

    app = FastAPI(title="waiveriq")
    app.state.settings = settings
    app.state.store = store
    app.state.generator = generator
    app.state.syncer = syncer

    def _fetch_league_or_404(league_id: str) -> League:
        league = store.get_league(league_id)
        if league is None:
            raise HTTPException(status_code=404, detail="League not found")
        return league

    @app.get("/health")
    async def health() -> dict[str, Any]:
        status: dict[str, Any] = {"status": "ok"}
        if cache is not None:
            status["cache"] = "ok" if cache.healthy() else "unavailable"
        return status

    @app.post("/leagues")
    async def register_league(payload: LeagueRequest):
        league = store.save_league(League(**payload.model_dump()))
        logger.info("Registered league %s", league.league_id)
        return league.model_dump()

    @app.get("/leagues/{league_id}")
    async def get_league(league_id: str):
        league = _fetch_league_or_404(league_id)
        roster = store.list_roster(league_id)
        return {**league.model_dump(), "roster": [entry.model_dump() for entry in roster]}

    @app.post("/leagues/{league_id}/roster")
    async def add_roster(league_id: str, payload: RosterRequest):
        _fetch_league_or_404(league_id)
        missing = [entry.player_id for entry in payload.entries if store.get_player(entry.player_id) is None]
        if missing:
            raise HTTPException(status_code=404, detail=f"Unknown players: {', '.join(missing)}")
        saved = [
            store.add_roster_entry(RosterEntry(league_id=league_id, **entry.model_dump()))
            for entry in payload.entries
        ]
        return {"league_id": league_id, "roster": [entry.model_dump() for entry in saved]}

    @app.post("/leagues/{league_id}/sync", response_model=LeagueSyncResponse)
    async def sync_league(league_id: str, payload: LeagueSyncRequest | None = None):
        payload = payload or LeagueSyncRequest()
        try:
            summary = await syncer.sync_league(
                league_id,
                platform_league_id=payload.platform_league_id,
                owner_id=payload.owner_id,
                season=payload.season,
                through_week=payload.through_week,
            )
        except SleeperSyncError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return LeagueSyncResponse(**summary)

    @app.post("/waivers/recommendations/generate", response_model=GenerateRecommendationsResponse)
    async def generate_recommendations(payload: GenerateRecommendationsRequest):
        league = _fetch_league_or_404(payload.league_id)
        week, season = _week_and_season(payload.week, payload.season)
        recommendations = await generator.generate(
            league.league_id,
            season,
            week,
            max_recommendations=payload.max_recommendations or settings.max_recommendations,
        )
        generator.save_recommendations(league.league_id, week, season, recommendations)
        return GenerateRecommendationsResponse(
            message=f"Generated {len(recommendations)} waiver recommendations",
            count=len(recommendations),
            week=week,
            season=season,
            use_faab=league.uses_faab,
            recommendations=[
                recommendation_to_response(rec) for rec in recommendations[:SUMMARY_RECOMMENDATIONS]
            ],
        )

    @app.get("/waivers/recommendations", response_model=List[StoredRecommendationResponse])
    async def list_recommendations(
        league_id: str,
        week: int | None = Query(default=None, ge=1, le=18),
        season: int | None = None,
        status: str = "pending",
    ):
        week, season = _week_and_season(week, season)
        return [
            stored_to_response(rec)
            for rec in generator.get_recommendations(league_id, week, season, status=status)
        ]

    @app.get("/waivers/recommendations/{recommendation_id}", response_model=StoredRecommendationResponse)
    async def get_recommendation(recommendation_id: str):
        rec = store.get_waiver_recommendation(recommendation_id)
        if rec is None:
            raise HTTPException(status_code=404, detail="Recommendation not found")
        return stored_to_response(rec)

    @app.post("/waivers/calculate-bid", response_model=BidResponse)
    async def calculate_bid(payload: BidRequest):
        week, season = _week_and_season(payload.week, payload.season)
        try:
            player, positional_need, bid = generator.bid_for_player(
                payload.league_id,
                payload.player_id,
                season,
                week,
                add_trend_pct=payload.add_trend_percentage,
            )
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=_error_detail(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=_error_detail(exc)) from exc
        return BidResponse(
            player_id=player.player_id,
            player_name=player.player_name,
            position=player.position,
            opportunity_score=player.opportunity_score,
            positional_need=positional_need,
            **asdict(bid),
        )

    @app.get("/waivers/targets", response_model=List[TargetResponse])
    async def waiver_targets(
        league_id: str,
        week: int | None = Query(default=None, ge=1, le=18),
        season: int | None = None,
        position: str | None = None,
        min_opportunity: float = Query(default=0.0, ge=0.0, le=1.0),
    ):
        _fetch_league_or_404(league_id)
        week, season = _week_and_season(week, season)
        targets = await generator.identify_targets(league_id, season, week)
        filtered = [
            target
            for target in targets
            if (position is None or target.position == position.upper())
            and target.opportunity_score >= min_opportunity
        ]
        return [
            TargetResponse.model_validate(asdict(target))
            for target in filtered[:MAX_TARGETS]
        ]

    @app.get("/waivers/positional-needs", response_model=List[PositionalNeedResponse])
    async def positional_needs(
        league_id: str,
        week: int | None = Query(default=None, ge=1, le=18),
        season: int | None = None,
    ):
        _fetch_league_or_404(league_id)
        week, season = _week_and_season(week, season)
        return [
            PositionalNeedResponse(**asdict(need))
            for need in generator.positional_needs(league_id, season, week)
        ]

    @app.post("/waivers/track-claim", response_model=StoredRecommendationResponse)
    async def track_claim(payload: TrackClaimRequest):
        try:
            updated = store.track_recommendation_action(payload.recommendation_id, payload.action)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=_error_detail(exc)) from exc
        logger.info("Recommendation %s marked %s", payload.recommendation_id, payload.action)
        return stored_to_response(updated)

    @app.get("/waivers/history", response_model=WaiverHistoryResponse)
    async def waiver_history(league_id: str, season: int | None = None):
        _fetch_league_or_404(league_id)
        _, season = _week_and_season(None, season)
        history = store.waiver_history(league_id, season)
        claimed = sum(1 for rec in history if rec.status == "claimed")
        missed = sum(1 for rec in history if rec.status == "missed")
        return WaiverHistoryResponse(
            league_id=league_id,
            season=season,
            total=len(history),
            claimed=claimed,
            missed=missed,
            success_rate=claimed / len(history) if history else 0.0,
            history=[stored_to_response(rec) for rec in history],
        )

    @app.post("/projections/sync", response_model=ProjectionSyncResponse)
    async def sync_projections(payload: ProjectionSyncRequest):
        counts = generator.projections.sync_week_projections(payload.week, payload.season)
        return ProjectionSyncResponse(week=payload.week, season=payload.season, **counts)

    @app.get("/projections/top", response_model=List[ProjectionResponse])
    async def top_projections(
        week: int | None = Query(default=None, ge=0, le=18),
        season: int | None = None,
        position: str | None = None,
        limit: int = Query(default=50, ge=1, le=500),
    ):
        week, season = _week_and_season(week, season)
        projections = generator.projections.get_top_projected(
            week,
            season,
            position=position.upper() if position else None,
            limit=limit,
        )
        return [ProjectionResponse(**projection.model_dump()) for projection in projections]

    @app.post("/players/sync", response_model=PlayerSyncResponse)
    async def sync_players():
        try:
            counts = await syncer.sync_players()
        except SleeperSyncError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return PlayerSyncResponse(**counts)

    @app.post("/stats/sync", response_model=StatsSyncResponse)
    async def sync_stats(payload: StatsSyncRequest):
        try:
            summary = await syncer.sync_week_stats(payload.season, payload.week)
        except SleeperSyncError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return StatsSyncResponse(**summary)

    @app.get("/players/search", response_model=List[PlayerResponse])
    async def search_players(
        query: str = Query(..., min_length=2),
        position: str | None = None,
        team: str | None = None,
        limit: int = Query(default=20, ge=1, le=100),
    ):
        players = store.search_players(
            query,
            position=position.upper() if position else None,
            team=team.upper() if team else None,
            limit=limit,
        )
        return [player_to_response(player) for player in players]

    @app.get("/players/trending", response_model=List[TrendingPlayerResponse])
    async def trending_players(limit: int = Query(default=DEFAULT_TRENDING_LIMIT, ge=1, le=200)):
        trending = await sleeper.get_trending_players(limit=limit)
        percentages = trend_percentages(trending)
        results = []
        for item in trending or []:
            player_id = str(item.get("player_id")) if isinstance(item, dict) else None
            if player_id not in percentages:
                continue
            player = store.get_player(player_id)
            results.append(
                TrendingPlayerResponse(
                    player_id=player_id,
                    count=float(item.get("count") or 0),
                    add_trend_percentage=percentages[player_id],
                    player=player_to_response(player) if player else None,
                )
            )
        return results

    @app.get("/players/{player_id}", response_model=PlayerDetailResponse)
    async def get_player(
        player_id: str,
        week: int | None = Query(default=None, ge=0, le=18),
        season: int | None = None,
    ):
        player = store.get_player(player_id)
        if player is None:
            raise HTTPException(status_code=404, detail="Player not found")
        projection = None
        if week is not None:
            _, season = _week_and_season(week, season)
            found = generator.projections.get_player_projection(player_id, week, season)
            projection = ProjectionResponse(**found.model_dump()) if found else None
        return PlayerDetailResponse(player=player_to_response(player), projection=projection)

    @app.get("/players/{player_id}/projections", response_model=List[ProjectionResponse])
    async def player_projections(player_id: str, season: int | None = None):
        if store.get_player(player_id) is None:
            raise HTTPException(status_code=404, detail="Player not found")
        _, season = _week_and_season(None, season)
        return [
            ProjectionResponse(**projection.model_dump())
            for projection in store.list_player_projections(player_id, season)
        ]

    return app
