"""Drop suggestion for a waiver claim."""

from __future__ import annotations

from collections import Counter
from typing import List, Optional, Tuple

from waiveriq.models import DropCandidate, Player
from waiveriq.persistence import LeagueStore
from waiveriq.projections import ProjectionService

from .needs import league_requirements


class DropCandidateSelector:
    """Picks the lowest-value rostered player to release.

    Players whose release would leave their position short of its starter
    requirement are kept off the list unless every rostered player is in that
    situation. Among equal values, a player at the claimed position goes first.
    """

    def __init__(self, store: LeagueStore, projections: ProjectionService):
        self.store = store
        self.projections = projections

    def find_drop_candidate(
        self,
        league_id: str,
        target_position: str,
        season: int,
        week: int,
    ) -> Optional[DropCandidate]:
        roster = self.store.list_rostered_players(league_id)
        if not roster:
            return None

        requirements = league_requirements(self.store, league_id)
        counts = Counter(player.position for player in roster)
        valued: List[Tuple[float, Player]] = [
            (self.projections.projected_points(player.player_id, week, season), player) for player in roster
        ]

        expendable = [
            (value, player)
            for value, player in valued
            if counts[player.position] > requirements.required(player.position)
        ]
        pool = expendable or valued
        value, player = min(
            pool,
            key=lambda item: (item[0], item[1].position != target_position, item[1].player_id),
        )
        return DropCandidate(player_id=player.player_id, player_name=player.full_name, value=value)
