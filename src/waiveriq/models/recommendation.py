"""Intermediate and output records of the waiver recommendation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional


Urgency = Literal["low", "medium", "high", "critical"]


@dataclass(frozen=True)
class OpportunityBreakdown:
    projection_score: float
    performance_score: float
    opportunity_factors: float
    injury_opportunity: bool
    total: float


@dataclass
class PlayerOpportunity:
    """Waiver-eligible player with its opportunity score."""

    player_id: str
    player_name: str
    position: str
    opportunity_score: float
    projected_points: float
    team: Optional[str] = None
    recent_performance: float = 0.0
    target_share: Optional[float] = None
    snap_share: Optional[float] = None
    injury_impact: bool = False
    is_available: bool = True
    owned_percentage: Optional[float] = None
    add_trend_percentage: float = 0.0


@dataclass(frozen=True)
class PositionalNeed:
    position: str
    need_score: float
    current_starters: int
    required_starters: int
    bench_depth: int
    avg_starter_value: float


@dataclass(frozen=True)
class BidCalculation:
    recommended_bid: int
    min_bid: int
    max_bid: int
    median_historical_bid: int


@dataclass(frozen=True)
class DropCandidate:
    player_id: str
    player_name: str
    value: float


@dataclass
class WaiverRecommendation:
    player: PlayerOpportunity
    positional_need: float
    would_start_immediately: bool
    bench_depth_score: float
    reasoning: str
    confidence: float
    urgency: Urgency
    recommended_bid: Optional[int] = None
    min_bid: Optional[int] = None
    max_bid: Optional[int] = None
    median_historical_bid: Optional[int] = None
    priority_rank: Optional[int] = None
    should_claim: Optional[bool] = None
    suggested_drop: Optional[DropCandidate] = None

    @property
    def ranking_score(self) -> float:
        return self.player.opportunity_score * self.confidence


@dataclass
class StoredRecommendation:
    """A persisted waiver recommendation row."""

    recommendation_id: str
    league_id: str
    week: int
    season: int
    player_id: str
    player_name: str
    position: str
    team: Optional[str]
    opportunity_score: float
    projected_points: float
    recent_performance: float
    target_share: Optional[float]
    snap_share: Optional[float]
    injury_impact: bool
    positional_need: float
    would_start_immediately: bool
    bench_depth_score: float
    recommended_bid: Optional[int]
    min_bid: Optional[int]
    max_bid: Optional[int]
    median_historical_bid: Optional[int]
    add_trend_percentage: Optional[float]
    priority_rank: int
    should_claim: bool
    suggested_drop_player_id: Optional[str]
    suggested_drop_player_name: Optional[str]
    drop_player_value: Optional[float]
    reasoning: str
    confidence: float
    urgency: str
    status: str
    created_at: datetime
    updated_at: datetime
    viewed_at: Optional[datetime] = None
    claimed_at: Optional[datetime] = None
