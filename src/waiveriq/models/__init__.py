"""Canonical records shared across persistence, scoring and API layers."""

from .league import League, RosterEntry, Transaction
from .player import AVAILABLE_STATUSES, INJURED_STATUSES, Player, PlayerProjection, PlayerWeekStats
from .recommendation import (
    BidCalculation,
    DropCandidate,
    OpportunityBreakdown,
    PlayerOpportunity,
    PositionalNeed,
    StoredRecommendation,
    WaiverRecommendation,
)

__all__ = [
    "AVAILABLE_STATUSES",
    "INJURED_STATUSES",
    "BidCalculation",
    "DropCandidate",
    "League",
    "OpportunityBreakdown",
    "Player",
    "PlayerOpportunity",
    "PlayerProjection",
    "PlayerWeekStats",
    "PositionalNeed",
    "RosterEntry",
    "StoredRecommendation",
    "Transaction",
    "WaiverRecommendation",
]
