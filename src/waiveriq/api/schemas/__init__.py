"""Pydantic models for API I/O."""

from .league import LeagueRequest, RosterEntryRequest, RosterRequest
from .player import PlayerDetailResponse, PlayerResponse, TrendingPlayerResponse
from .projection import ProjectionResponse, ProjectionSyncRequest, ProjectionSyncResponse
from .sync import LeagueSyncRequest, LeagueSyncResponse, PlayerSyncResponse, StatsSyncRequest, StatsSyncResponse
from .waiver import (
    BidRequest,
    BidResponse,
    DropCandidateResponse,
    GenerateRecommendationsRequest,
    GenerateRecommendationsResponse,
    PositionalNeedResponse,
    RecommendationResponse,
    StoredRecommendationResponse,
    TargetResponse,
    TrackClaimRequest,
    WaiverHistoryResponse,
)

__all__ = [
    "BidRequest",
    "BidResponse",
    "DropCandidateResponse",
    "GenerateRecommendationsRequest",
    "GenerateRecommendationsResponse",
    "LeagueRequest",
    "LeagueSyncRequest",
    "LeagueSyncResponse",
    "PlayerDetailResponse",
    "PlayerResponse",
    "PlayerSyncResponse",
    "PositionalNeedResponse",
    "ProjectionResponse",
    "ProjectionSyncRequest",
    "ProjectionSyncResponse",
    "RecommendationResponse",
    "RosterEntryRequest",
    "RosterRequest",
    "StatsSyncRequest",
    "StatsSyncResponse",
    "StoredRecommendationResponse",
    "TargetResponse",
    "TrackClaimRequest",
    "TrendingPlayerResponse",
    "WaiverHistoryResponse",
]
