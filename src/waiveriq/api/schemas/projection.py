from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field


class ProjectionSyncRequest(BaseModel):
    week: int = Field(..., ge=0, le=18)
    season: int


class ProjectionSyncResponse(BaseModel):
    week: int
    season: int
    created: int
    updated: int


class ProjectionResponse(BaseModel):
    player_id: str
    week: int
    season: int
    projected_points: float
    source: str
    confidence: float
    stats: Dict[str, float]
