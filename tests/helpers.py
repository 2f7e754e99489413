"""Shared builders for test data."""

from __future__ import annotations

from waiveriq.models import League, Player, PlayerProjection, PlayerWeekStats, RosterEntry, Transaction
from waiveriq.persistence import LeagueStore


SEASON = 2024
WEEK = 5


def add_player(
    store: LeagueStore,
    player_id: str,
    position: str,
    points: float | None,
    *,
    team: str = "KC",
    status: str = "Active",
    week: int = WEEK,
    season: int = SEASON,
) -> Player:
    player = store.upsert_player(
        Player(player_id=player_id, full_name=f"Player {player_id}", position=position, team=team, status=status)
    )
    if points is not None:
        store.upsert_projection(
            PlayerProjection(player_id=player_id, week=week, season=season, projected_points=points)
        )
    return player


def add_league(store: LeagueStore, league_id: str = "L1", **kwargs) -> League:
    kwargs.setdefault("faab_budget", 100)
    kwargs.setdefault("current_faab", 100)
    return store.save_league(League(league_id=league_id, **kwargs))


def add_roster(store: LeagueStore, league_id: str, *player_ids: str) -> None:
    for player_id in player_ids:
        store.add_roster_entry(RosterEntry(league_id=league_id, player_id=player_id))


def add_waiver_bid(store: LeagueStore, league_id: str, transaction_id: str, bid: float, *, season: int = SEASON) -> None:
    store.record_transaction(
        Transaction(
            transaction_id=transaction_id,
            league_id=league_id,
            transaction_type="waiver",
            week=2,
            season=season,
            metadata={"settings": {"waiver_bid": bid}},
        )
    )


def add_week_points(store: LeagueStore, player_id: str, week: int, ppr_points: float, *, season: int = SEASON) -> None:
    store.upsert_week_stats(PlayerWeekStats(player_id=player_id, week=week, season=season, ppr_points=ppr_points))


class FixedSignals:
    """Constant opportunity signals."""

    def __init__(self, performance: float = 0.5, injury: bool = False, trend: float = 0.0):
        self.performance = performance
        self.injury = injury
        self.trend = trend

    def recent_performance(self, player, projected_points, season, week):
        return self.performance

    def teammate_injury_opportunity(self, player, season, week):
        return self.injury

    def add_trend(self, player_id):
        return self.trend
