"""Projection access with an optional redis read-through cache."""

from .cache import ProjectionCache, player_projection_key, week_projections_key
from .service import BASIC_SOURCE, SEASON_WEEK, ProjectionService

__all__ = [
    "BASIC_SOURCE",
    "SEASON_WEEK",
    "ProjectionCache",
    "ProjectionService",
    "player_projection_key",
    "week_projections_key",
]
