"""Deterministic inputs for the opportunity score.

The scorer depends on the :class:`OpportunitySignals` protocol instead of
reaching for live data itself, so any source (stored stats, a provider feed,
a fixed table in tests) can be plugged in.
"""

from __future__ import annotations

from statistics import fmean
from typing import Mapping, Protocol

from waiveriq.models import INJURED_STATUSES, Player
from waiveriq.persistence import LeagueStore


NEUTRAL_PERFORMANCE = 0.5
RECENT_WEEKS = 3


class OpportunitySignals(Protocol):
    def recent_performance(self, player: Player, projected_points: float, season: int, week: int) -> float:
        """Recent production relative to projection, on a 0-1 scale."""

    def teammate_injury_opportunity(self, player: Player, season: int, week: int) -> bool:
        """Whether an injured teammate at the same position opens up volume."""

    def add_trend(self, player_id: str) -> float:
        """Percentage of leagues currently adding the player."""


class StoreSignals:
    """Signals derived from stored weekly stats, player statuses and add trends."""

    def __init__(self, store: LeagueStore, trends: Mapping[str, float] | None = None):
        self.store = store
        self.trends = dict(trends or {})

    def recent_performance(self, player: Player, projected_points: float, season: int, week: int) -> float:
        # Ratio 1.0 (meeting projection) maps to 0.5; 2x projection saturates at 1.0.
        if projected_points <= 0:
            return NEUTRAL_PERFORMANCE
        recent = self.store.recent_week_stats(player.player_id, season, before_week=week, limit=RECENT_WEEKS)
        points = [line.ppr_points for line in recent if line.ppr_points is not None]
        if not points:
            return NEUTRAL_PERFORMANCE
        ratio = fmean(points) / projected_points
        return min(1.0, max(0.0, 0.5 * ratio))

    def teammate_injury_opportunity(self, player: Player, season: int, week: int) -> bool:
        if not player.team:
            return False
        teammates = self.store.list_players(team=player.team, position=player.position)
        return any(
            mate.player_id != player.player_id and (mate.status or "") in INJURED_STATUSES
            for mate in teammates
        )

    def add_trend(self, player_id: str) -> float:
        return float(self.trends.get(player_id, 0.0))
