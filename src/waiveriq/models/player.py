"""Player, projection and weekly stat rows."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


AVAILABLE_STATUSES = ("Active", "Questionable")
INJURED_STATUSES = frozenset({"Out", "IR", "Doubtful", "PUP"})


class Player(BaseModel):
    """Player identity as synced from the data provider."""

    player_id: str = Field(..., min_length=1)
    full_name: str
    position: str
    team: Optional[str] = None
    status: Optional[str] = None
    injury_designation: Optional[str] = None
    bye_week: Optional[int] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class PlayerProjection(BaseModel):
    """Projected scoring line for one player, week, season and source.

    Week ``0`` holds the season-long projection.
    """

    player_id: str = Field(..., min_length=1)
    week: int = Field(..., ge=0, le=18)
    season: int
    projected_points: float
    source: str = "basic_algorithm"
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    stats: Dict[str, float] = Field(default_factory=dict)
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)


class PlayerWeekStats(BaseModel):
    player_id: str = Field(..., min_length=1)
    week: int = Field(..., ge=1, le=18)
    season: int
    ppr_points: Optional[float] = None
    half_ppr_points: Optional[float] = None
    std_points: Optional[float] = None
    stats: Dict[str, Any] = Field(default_factory=dict)
    source: str = "sleeper"

    model_config = ConfigDict(frozen=True)
