"""Projection reads (cache first, then database) and the baseline projection sync."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from waiveriq.models import AVAILABLE_STATUSES, PlayerProjection
from waiveriq.persistence import LeagueStore

from .cache import (
    ProjectionCache,
    player_projection_key,
    week_projections_key,
)


logger = logging.getLogger(__name__)

BASIC_SOURCE = "basic_algorithm"
SEASON_WEEK = 0

# Position baseline points and the stat line that produces them.
_BASELINES: Dict[str, Tuple[float, Dict[str, float]]] = {
    "QB": (
        18.5,
        {"passing_yards": 250, "passing_tds": 1.8, "interceptions": 0.8, "rushing_yards": 15, "rushing_tds": 0.2},
    ),
    "RB": (
        12.0,
        {
            "rushing_yards": 65,
            "rushing_tds": 0.5,
            "receptions": 3,
            "receiving_yards": 25,
            "receiving_tds": 0.15,
            "targets": 4,
        },
    ),
    "WR": (11.0, {"receptions": 5, "receiving_yards": 65, "receiving_tds": 0.5, "targets": 7}),
    "TE": (8.5, {"receptions": 4, "receiving_yards": 45, "receiving_tds": 0.4, "targets": 5}),
    "K": (8.0, {"field_goals_made": 1.5, "field_goals_attempted": 2, "extra_points_made": 2.5}),
    "DEF": (
        7.0,
        {
            "sacks": 2.5,
            "interceptions": 0.8,
            "fumbles_recovered": 0.6,
            "safeties": 0.05,
            "touchdowns": 0.3,
            "points_allowed": 21,
        },
    ),
}


class ProjectionService:
    def __init__(self, store: LeagueStore, cache: ProjectionCache | None = None):
        self.store = store
        self.cache = cache

    def get_player_projection(self, player_id: str, week: int, season: int) -> Optional[PlayerProjection]:
        key = player_projection_key(player_id, week, season)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached:
                return PlayerProjection.model_validate(cached)

        projection = self.store.get_projection(player_id, week, season)
        if projection is not None and self.cache is not None:
            self.cache.set(key, projection.model_dump(mode="json"))
        return projection

    def projected_points(self, player_id: str, week: int, season: int) -> float:
        """Weekly projected points, falling back to the season-long projection."""

        projection = self.get_player_projection(player_id, week, season)
        if projection is None and week != SEASON_WEEK:
            projection = self.get_player_projection(player_id, SEASON_WEEK, season)
        return projection.projected_points if projection is not None else 0.0

    def get_week_projections(self, week: int, season: int) -> List[PlayerProjection]:
        key = week_projections_key(week, season)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached:
                return [PlayerProjection.model_validate(item) for item in cached]

        projections = self.store.list_projections(week, season)
        if projections and self.cache is not None:
            self.cache.set(key, [p.model_dump(mode="json") for p in projections])
        return projections

    def get_top_projected(
        self,
        week: int,
        season: int,
        *,
        position: str | None = None,
        limit: int = 50,
    ) -> List[PlayerProjection]:
        return self.store.list_projections(week, season, position=position, limit=limit)

    def sync_week_projections(self, week: int, season: int) -> dict[str, int]:
        """Write position-baseline projections for every available player."""

        logger.info("Starting projection sync for week %d, season %d", week, season)
        players = self.store.list_players(statuses=AVAILABLE_STATUSES)
        if not players:
            logger.warning("No available players found; skipping projection sync")
            return {"created": 0, "updated": 0}

        created = 0
        updated = 0
        for player in players:
            baseline = _BASELINES.get(player.position)
            points, stats = baseline if baseline else (0.0, {})
            projection = PlayerProjection(
                player_id=player.player_id,
                week=week,
                season=season,
                projected_points=points,
                stats=dict(stats),
                confidence=0.5,
                source=BASIC_SOURCE,
            )
            if self.store.upsert_projection(projection):
                created += 1
            else:
                updated += 1
            if self.cache is not None:
                self.cache.set(
                    player_projection_key(player.player_id, week, season),
                    projection.model_dump(mode="json"),
                )

        if self.cache is not None:
            self.invalidate_week_cache(week, season)
            self.get_week_projections(week, season)

        logger.info("Projection sync complete: %d created, %d updated (week %d, season %d)", created, updated, week, season)
        return {"created": created, "updated": updated}

    def invalidate_week_cache(self, week: int, season: int) -> None:
        if self.cache is not None:
            self.cache.delete(week_projections_key(week, season))
