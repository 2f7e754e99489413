"""Opportunity score for waiver-eligible players."""

from __future__ import annotations

from typing import Dict, Optional

from waiveriq.models import OpportunityBreakdown, Player
from waiveriq.persistence import LeagueStore
from waiveriq.projections import ProjectionService

from .signals import OpportunitySignals


AVERAGE_POINTS_BY_POSITION: Dict[str, float] = {
    "QB": 18.5,
    "RB": 12.0,
    "WR": 11.0,
    "TE": 8.5,
    "K": 8.0,
    "DEF": 7.0,
}
DEFAULT_AVERAGE_POINTS = 10.0

PROJECTION_WEIGHT = 0.4
PERFORMANCE_WEIGHT = 0.3
FACTORS_WEIGHT = 0.3

HEALTH_BONUS = {"Active": 0.7, "Questionable": 0.4}
SCARCITY_BONUS = {"RB": 0.6, "TE": 0.6, "WR": 0.5}
INJURY_OPPORTUNITY_BONUS = 0.8
NEUTRAL_FACTORS = 0.5


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def projection_score(position: str, projected_points: float) -> float:
    average = AVERAGE_POINTS_BY_POSITION.get(position, DEFAULT_AVERAGE_POINTS)
    return _clamp(min(1.0, projected_points / (average * 1.5)))


def opportunity_factors(player: Player, injury_opportunity: bool) -> float:
    """Mean of the indicators that apply; neutral when none do."""

    factors = []
    health = HEALTH_BONUS.get(player.status or "")
    if health is not None:
        factors.append(health)
    scarcity = SCARCITY_BONUS.get(player.position)
    if scarcity is not None:
        factors.append(scarcity)
    if injury_opportunity:
        factors.append(INJURY_OPPORTUNITY_BONUS)
    if not factors:
        return NEUTRAL_FACTORS
    return _clamp(sum(factors) / len(factors))


class OpportunityScorer:
    def __init__(self, store: LeagueStore, projections: ProjectionService, signals: OpportunitySignals):
        self.store = store
        self.projections = projections
        self.signals = signals

    def score(self, player_id: str, season: int, week: int) -> float:
        """Opportunity score in [0, 1]; exactly 0 when the player or projection is missing."""

        breakdown = self.score_breakdown(player_id, season, week)
        return breakdown.total if breakdown is not None else 0.0

    def score_breakdown(self, player_id: str, season: int, week: int) -> Optional[OpportunityBreakdown]:
        player = self.store.get_player(player_id)
        if player is None:
            return None
        projection = self.projections.get_player_projection(player_id, week, season)
        if projection is None and week != 0:
            projection = self.projections.get_player_projection(player_id, 0, season)
        if projection is None:
            return None

        points = projection.projected_points
        proj = projection_score(player.position, points)
        perf = _clamp(self.signals.recent_performance(player, points, season, week))
        injury_opportunity = bool(self.signals.teammate_injury_opportunity(player, season, week))
        factors = opportunity_factors(player, injury_opportunity)

        total = _clamp(proj * PROJECTION_WEIGHT + perf * PERFORMANCE_WEIGHT + factors * FACTORS_WEIGHT)
        return OpportunityBreakdown(
            projection_score=proj,
            performance_score=perf,
            opportunity_factors=factors,
            injury_opportunity=injury_opportunity,
            total=total,
        )
