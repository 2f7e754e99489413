"""FAAB bid sizing from historical league bids and player signals."""

from __future__ import annotations

import math
from typing import Iterable

from waiveriq.models import BidCalculation
from waiveriq.persistence import LeagueStore


DEFAULT_MEDIAN_BID = 5
DEFAULT_CURRENT_FAAB = 100
MAX_BUDGET_SHARE = 0.4
HOT_ADD_TREND = 20.0
HOT_ADD_MULTIPLIER = 1.2
WAIVER_TRANSACTION = "waiver"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def median_bid(bids: Iterable[float], default: int = DEFAULT_MEDIAN_BID) -> float:
    """Median of historical bids; ``default`` when there is no history."""

    ordered = sorted(bids)
    if not ordered:
        return default
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


class FaabBidCalculator:
    def __init__(self, store: LeagueStore):
        self.store = store

    def median_historical_bid(self, league_id: str, season: int) -> int:
        transactions = self.store.list_transactions(
            league_id, season=season, transaction_type=WAIVER_TRANSACTION
        )
        bids = [txn.waiver_bid for txn in transactions if txn.waiver_bid is not None]
        return round_half_up(median_bid(bids))

    def calculate_bid(
        self,
        league_id: str,
        player_id: str,
        opportunity_score: float,
        positional_need: float,
        add_trend_pct: float,
        season: int,
        week: int,
    ) -> BidCalculation:
        league = self.store.get_league(league_id)
        current_faab = DEFAULT_CURRENT_FAAB
        if league is not None and league.current_faab is not None:
            current_faab = league.current_faab

        median = self.median_historical_bid(league_id, season)
        if current_faab <= 0:
            # Spent budget: nothing can be bid.
            return BidCalculation(recommended_bid=0, min_bid=0, max_bid=0, median_historical_bid=median)

        bid = float(median)
        bid *= 1 + opportunity_score * 0.5
        bid *= 1 + positional_need * 0.3
        if add_trend_pct > HOT_ADD_TREND:
            bid *= HOT_ADD_MULTIPLIER

        ceiling = current_faab * MAX_BUDGET_SHARE
        capped = min(bid, ceiling)
        # Rounding must not push the bid back over the budget ceiling.
        rounded = min(round_half_up(capped), max(1, math.floor(ceiling)))
        recommended = max(1, rounded)
        return BidCalculation(
            recommended_bid=recommended,
            min_bid=max(0, round_half_up(recommended * 0.5)),
            max_bid=rounded,
            median_historical_bid=median,
        )
