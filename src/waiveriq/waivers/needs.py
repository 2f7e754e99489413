"""Positional need assessment for a league roster."""

from __future__ import annotations

from typing import Dict, List

from waiveriq.config import POSITIONS, STANDARD_REQUIREMENTS, StarterRequirements, starter_requirements
from waiveriq.models import PositionalNeed
from waiveriq.persistence import LeagueStore
from waiveriq.projections import ProjectionService


CRITICAL_NEED = 1.0
NO_DEPTH_NEED = 0.8
MINIMAL_DEPTH_NEED = 0.5
LOW_QUALITY_NEED = 0.6
ADEQUATE_NEED = 0.2
LOW_QUALITY_THRESHOLD = 8.0


def need_score(rostered: int, required: int, avg_starter_value: float) -> float:
    """First matching rule wins."""

    if rostered < required:
        return CRITICAL_NEED
    if rostered == required:
        return NO_DEPTH_NEED
    if rostered == required + 1:
        return MINIMAL_DEPTH_NEED
    if avg_starter_value < LOW_QUALITY_THRESHOLD:
        return LOW_QUALITY_NEED
    return ADEQUATE_NEED


def assess_position(position: str, values: List[float], required: int) -> PositionalNeed:
    ranked = sorted(values, reverse=True)
    starters = ranked[:required]
    avg_starter_value = sum(starters) / len(starters) if starters else 0.0
    return PositionalNeed(
        position=position,
        need_score=need_score(len(values), required, avg_starter_value),
        current_starters=min(len(values), required),
        required_starters=required,
        bench_depth=max(0, len(values) - required),
        avg_starter_value=avg_starter_value,
    )


def league_requirements(store: LeagueStore, league_id: str) -> StarterRequirements:
    """Starter requirements configured for a league; the standard table when unknown."""

    league = store.get_league(league_id)
    if league is None:
        return STANDARD_REQUIREMENTS
    return starter_requirements(league.roster_settings)


class PositionalNeedAnalyzer:
    def __init__(self, store: LeagueStore, projections: ProjectionService):
        self.store = store
        self.projections = projections

    def analyze(self, league_id: str, season: int, week: int) -> Dict[str, PositionalNeed]:
        requirements = league_requirements(self.store, league_id)
        roster = self.store.list_rostered_players(league_id)

        values_by_position: Dict[str, List[float]] = {position: [] for position in POSITIONS}
        for player in roster:
            if player.position not in values_by_position:
                continue
            values_by_position[player.position].append(
                self.projections.projected_points(player.player_id, week, season)
            )

        return {
            position: assess_position(position, values_by_position[position], requirements.required(position))
            for position in POSITIONS
        }
