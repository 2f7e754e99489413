"""Waiver-wire scoring pipeline."""

from .bidding import FaabBidCalculator, median_bid, round_half_up
from .calendar import current_week_and_season
from .drops import DropCandidateSelector
from .generator import RecommendationGenerator, build_reasoning, classify_urgency
from .needs import PositionalNeedAnalyzer, league_requirements, need_score
from .scorer import OpportunityScorer
from .signals import OpportunitySignals, StoreSignals

__all__ = [
    "DropCandidateSelector",
    "FaabBidCalculator",
    "OpportunityScorer",
    "OpportunitySignals",
    "PositionalNeedAnalyzer",
    "RecommendationGenerator",
    "StoreSignals",
    "build_reasoning",
    "classify_urgency",
    "current_week_and_season",
    "league_requirements",
    "median_bid",
    "need_score",
    "round_half_up",
]
