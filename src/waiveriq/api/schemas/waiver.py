from __future__ import annotations

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, Field


class GenerateRecommendationsRequest(BaseModel):
    league_id: str = Field(..., min_length=1)
    week: int | None = Field(default=None, ge=1, le=18)
    season: int | None = None
    max_recommendations: int | None = Field(default=None, ge=1, le=20)


class DropCandidateResponse(BaseModel):
    player_id: str
    player_name: str
    value: float


class RecommendationResponse(BaseModel):
    player_id: str
    player_name: str
    position: str
    team: str | None
    opportunity_score: float
    projected_points: float
    positional_need: float
    would_start_immediately: bool
    recommended_bid: int | None = None
    min_bid: int | None = None
    max_bid: int | None = None
    priority_rank: int | None = None
    should_claim: bool | None = None
    suggested_drop: DropCandidateResponse | None = None
    reasoning: str
    confidence: float
    urgency: str


class GenerateRecommendationsResponse(BaseModel):
    message: str
    count: int
    week: int
    season: int
    use_faab: bool
    recommendations: List[RecommendationResponse]


class StoredRecommendationResponse(BaseModel):
    recommendation_id: str
    league_id: str
    week: int
    season: int
    player_id: str
    player_name: str
    position: str
    team: str | None
    opportunity_score: float
    projected_points: float
    recent_performance: float
    injury_impact: bool
    positional_need: float
    would_start_immediately: bool
    bench_depth_score: float
    recommended_bid: int | None
    min_bid: int | None
    max_bid: int | None
    median_historical_bid: int | None
    add_trend_percentage: float | None
    priority_rank: int
    should_claim: bool
    suggested_drop_player_id: str | None
    suggested_drop_player_name: str | None
    drop_player_value: float | None
    reasoning: str
    confidence: float
    urgency: str
    status: str
    created_at: datetime
    updated_at: datetime
    viewed_at: datetime | None = None
    claimed_at: datetime | None = None


class BidRequest(BaseModel):
    league_id: str = Field(..., min_length=1)
    player_id: str = Field(..., min_length=1)
    week: int | None = Field(default=None, ge=1, le=18)
    season: int | None = None
    add_trend_percentage: float | None = Field(default=None, ge=0.0)


class BidResponse(BaseModel):
    player_id: str
    player_name: str
    position: str
    opportunity_score: float
    positional_need: float
    recommended_bid: int
    min_bid: int
    max_bid: int
    median_historical_bid: int


class TargetResponse(BaseModel):
    player_id: str
    player_name: str
    position: str
    team: str | None
    opportunity_score: float
    projected_points: float
    recent_performance: float
    injury_impact: bool
    add_trend_percentage: float


class PositionalNeedResponse(BaseModel):
    position: str
    need_score: float
    current_starters: int
    required_starters: int
    bench_depth: int
    avg_starter_value: float


class TrackClaimRequest(BaseModel):
    recommendation_id: str = Field(..., min_length=1)
    action: Literal["viewed", "claimed", "missed", "dismissed"]


class WaiverHistoryResponse(BaseModel):
    league_id: str
    season: int
    total: int
    claimed: int
    missed: int
    success_rate: float
    history: List[StoredRecommendationResponse]
