"""Waiver recommendation pipeline: targets, needs, bids, drops, persistence."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from waiveriq.errors import FaabDisabledError, LeagueNotFoundError, PlayerNotFoundError
from waiveriq.ingest import SleeperClient, rostered_player_ids, trend_percentages
from waiveriq.models import (
    AVAILABLE_STATUSES,
    BidCalculation,
    League,
    PlayerOpportunity,
    PositionalNeed,
    StoredRecommendation,
    WaiverRecommendation,
)
from waiveriq.models.recommendation import Urgency
from waiveriq.persistence import LeagueStore
from waiveriq.projections import ProjectionCache, ProjectionService

from .bidding import FaabBidCalculator, round_half_up
from .drops import DropCandidateSelector
from .needs import PositionalNeedAnalyzer
from .scorer import OpportunityScorer
from .signals import OpportunitySignals, StoreSignals


logger = logging.getLogger(__name__)

MIN_OPPORTUNITY_SCORE = 0.3
DEFAULT_POSITIONAL_NEED = 0.5
START_IMMEDIATELY_NEED = 0.7
CLAIM_THRESHOLD = 0.4
DEFAULT_MAX_RECOMMENDATIONS = 10


def classify_urgency(opportunity_score: float, add_trend_pct: float) -> Urgency:
    if opportunity_score > 0.8 or add_trend_pct > 30:
        return "critical"
    if opportunity_score > 0.6:
        return "high"
    if opportunity_score < 0.4:
        return "low"
    return "medium"


def build_reasoning(
    player: PlayerOpportunity,
    positional_need: float,
    would_start: bool,
    bid: Optional[int] = None,
) -> str:
    parts = [f"{player.player_name} ({player.position})"]

    if player.opportunity_score > 0.7:
        parts.append(" has excellent opportunity with high projected value.")
    elif player.opportunity_score > 0.5:
        parts.append(" shows strong upside potential.")
    else:
        parts.append(" presents a solid waiver option.")

    if would_start:
        parts.append(" Would start immediately based on roster needs.")
    elif positional_need > 0.5:
        parts.append(f" Fills a need at {player.position}.")

    if player.injury_impact:
        parts.append(" Benefiting from teammate injury.")

    if bid == 0:
        parts.append(" No FAAB budget left to bid.")
    elif bid is not None:
        parts.append(f" Recommended FAAB bid: ${bid}.")

    return "".join(parts)


def priority_composite(opportunity_score: float, positional_need: float, projected_points: float) -> float:
    return opportunity_score * 0.5 + positional_need * 0.3 + projected_points / 20 * 0.2


class RecommendationGenerator:
    """Builds, ranks and stores waiver recommendations for a league week."""

    def __init__(
        self,
        store: LeagueStore,
        projections: ProjectionService,
        scorer: OpportunityScorer,
        analyzer: PositionalNeedAnalyzer,
        bids: FaabBidCalculator,
        drops: DropCandidateSelector,
        *,
        signals: OpportunitySignals,
        sleeper: SleeperClient | None = None,
    ):
        self.store = store
        self.projections = projections
        self.scorer = scorer
        self.analyzer = analyzer
        self.bids = bids
        self.drops = drops
        self.signals = signals
        self.sleeper = sleeper

    @classmethod
    def build(
        cls,
        store: LeagueStore,
        *,
        cache: ProjectionCache | None = None,
        sleeper: SleeperClient | None = None,
        signals: OpportunitySignals | None = None,
    ) -> "RecommendationGenerator":
        """Wire the default services around one store."""

        projections = ProjectionService(store, cache)
        signals = signals or StoreSignals(store)
        return cls(
            store,
            projections,
            OpportunityScorer(store, projections, signals),
            PositionalNeedAnalyzer(store, projections),
            FaabBidCalculator(store),
            DropCandidateSelector(store, projections),
            signals=signals,
            sleeper=sleeper,
        )

    def _require_league(self, league_id: str) -> League:
        league = self.store.get_league(league_id)
        if league is None:
            raise LeagueNotFoundError(league_id)
        return league

    async def _rostered_ids(self, league: League) -> set[str]:
        rostered = {entry.player_id for entry in self.store.list_roster(league.league_id)}
        if self.sleeper is not None and league.platform_league_id:
            rosters = await self.sleeper.get_rosters(league.platform_league_id)
            if rosters is None:
                logger.warning(
                    "No rosters returned for platform league %s; using stored rosters only",
                    league.platform_league_id,
                )
            rostered |= rostered_player_ids(rosters)
        return rostered

    async def _trends(self) -> Dict[str, float]:
        if self.sleeper is None:
            return {}
        return trend_percentages(await self.sleeper.get_trending_players())

    async def identify_targets(self, league_id: str, season: int, week: int) -> List[PlayerOpportunity]:
        """Unrostered Active/Questionable players scoring above the opportunity floor."""

        league = self._require_league(league_id)
        rostered = await self._rostered_ids(league)
        trends = await self._trends()

        targets: List[PlayerOpportunity] = []
        for player in self.store.list_players(statuses=AVAILABLE_STATUSES):
            if player.player_id in rostered:
                continue
            breakdown = self.scorer.score_breakdown(player.player_id, season, week)
            if breakdown is None or breakdown.total <= MIN_OPPORTUNITY_SCORE:
                continue
            add_trend = trends.get(player.player_id)
            if add_trend is None:
                add_trend = self.signals.add_trend(player.player_id)
            targets.append(
                PlayerOpportunity(
                    player_id=player.player_id,
                    player_name=player.full_name,
                    position=player.position,
                    team=player.team,
                    opportunity_score=breakdown.total,
                    projected_points=self.projections.projected_points(player.player_id, week, season),
                    recent_performance=breakdown.performance_score,
                    injury_impact=breakdown.injury_opportunity,
                    add_trend_percentage=add_trend,
                )
            )

        targets.sort(key=lambda target: target.opportunity_score, reverse=True)
        return targets

    async def generate(
        self,
        league_id: str,
        season: int,
        week: int,
        *,
        use_faab: bool | None = None,
        max_recommendations: int = DEFAULT_MAX_RECOMMENDATIONS,
    ) -> List[WaiverRecommendation]:
        logger.info("Generating waiver recommendations for league %s (week %d, season %d)", league_id, week, season)
        league = self._require_league(league_id)
        if use_faab is None:
            use_faab = league.uses_faab

        targets = await self.identify_targets(league_id, season, week)
        needs = self.analyzer.analyze(league_id, season, week)

        recommendations = [
            self._recommend(league_id, target, needs, use_faab, season, week)
            for target in targets[: max_recommendations * 2]
        ]
        recommendations.sort(key=lambda rec: rec.ranking_score, reverse=True)
        selected = recommendations[:max_recommendations]
        logger.info(
            "Built %d waiver recommendations for league %s from %d targets",
            len(selected),
            league_id,
            len(targets),
        )
        return selected

    def _recommend(
        self,
        league_id: str,
        target: PlayerOpportunity,
        needs: Dict[str, PositionalNeed],
        use_faab: bool,
        season: int,
        week: int,
    ) -> WaiverRecommendation:
        need = needs.get(target.position)
        positional_need = need.need_score if need is not None else DEFAULT_POSITIONAL_NEED
        would_start = positional_need > START_IMMEDIATELY_NEED
        bench_depth_score = target.opportunity_score * (1 - positional_need * 0.3)

        recommendation = WaiverRecommendation(
            player=target,
            positional_need=positional_need,
            would_start_immediately=would_start,
            bench_depth_score=bench_depth_score,
            reasoning="",
            confidence=target.opportunity_score * 0.7 + positional_need * 0.3,
            urgency=classify_urgency(target.opportunity_score, target.add_trend_percentage),
        )

        if use_faab:
            bid = self.bids.calculate_bid(
                league_id,
                target.player_id,
                target.opportunity_score,
                positional_need,
                target.add_trend_percentage,
                season,
                week,
            )
            recommendation.recommended_bid = bid.recommended_bid
            recommendation.min_bid = bid.min_bid
            recommendation.max_bid = bid.max_bid
            recommendation.median_historical_bid = bid.median_historical_bid
        else:
            composite = priority_composite(target.opportunity_score, positional_need, target.projected_points)
            recommendation.priority_rank = round_half_up(composite * 100)
            recommendation.should_claim = composite > CLAIM_THRESHOLD

        recommendation.suggested_drop = self.drops.find_drop_candidate(league_id, target.position, season, week)
        recommendation.reasoning = build_reasoning(
            target,
            positional_need,
            would_start,
            recommendation.recommended_bid if use_faab else None,
        )
        return recommendation

    def save_recommendations(
        self,
        league_id: str,
        week: int,
        season: int,
        recommendations: Sequence[WaiverRecommendation],
    ) -> List[StoredRecommendation]:
        """Replace the stored set; output order fills in missing priority ranks."""

        ranked = [
            replace(rec, priority_rank=rec.priority_rank or index + 1)
            for index, rec in enumerate(recommendations)
        ]
        return self.store.replace_waiver_recommendations(league_id, week, season, ranked)

    def get_recommendations(
        self,
        league_id: str,
        week: int,
        season: int,
        *,
        status: str = "pending",
    ) -> List[StoredRecommendation]:
        return self.store.list_waiver_recommendations(league_id, week, season, status=status)

    def positional_needs(self, league_id: str, season: int, week: int) -> List[PositionalNeed]:
        self._require_league(league_id)
        needs = self.analyzer.analyze(league_id, season, week)
        return sorted(needs.values(), key=lambda need: need.need_score, reverse=True)

    def bid_for_player(
        self,
        league_id: str,
        player_id: str,
        season: int,
        week: int,
        *,
        add_trend_pct: float | None = None,
    ) -> Tuple[PlayerOpportunity, float, BidCalculation]:
        """Price a single FAAB claim outside of a full generation run."""

        league = self._require_league(league_id)
        if not league.uses_faab:
            raise FaabDisabledError(f"League {league_id} does not use FAAB")
        player = self.store.get_player(player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)

        breakdown = self.scorer.score_breakdown(player_id, season, week)
        if add_trend_pct is None:
            add_trend_pct = self.signals.add_trend(player_id)
        opportunity = PlayerOpportunity(
            player_id=player.player_id,
            player_name=player.full_name,
            position=player.position,
            team=player.team,
            opportunity_score=breakdown.total if breakdown else 0.0,
            projected_points=self.projections.projected_points(player_id, week, season),
            recent_performance=breakdown.performance_score if breakdown else 0.0,
            injury_impact=breakdown.injury_opportunity if breakdown else False,
            add_trend_percentage=add_trend_pct,
        )
        need = self.analyzer.analyze(league_id, season, week).get(player.position)
        positional_need = need.need_score if need is not None else DEFAULT_POSITIONAL_NEED
        bid = self.bids.calculate_bid(
            league_id,
            player_id,
            opportunity.opportunity_score,
            positional_need,
            add_trend_pct,
            season,
            week,
        )
        return opportunity, positional_need, bid
