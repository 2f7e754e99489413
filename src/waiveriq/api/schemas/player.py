from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel

from .projection import ProjectionResponse


class PlayerResponse(BaseModel):
    player_id: str
    full_name: str
    position: str
    team: str | None = None
    status: str | None = None
    injury_designation: str | None = None
    bye_week: int | None = None
    metadata: Dict[str, Any] = {}


class PlayerDetailResponse(BaseModel):
    player: PlayerResponse
    projection: ProjectionResponse | None = None


class TrendingPlayerResponse(BaseModel):
    player_id: str
    count: float
    add_trend_percentage: float
    player: PlayerResponse | None = None
