import pytest

from waiveriq.projections import ProjectionService
from waiveriq.waivers import OpportunityScorer, StoreSignals
from waiveriq.waivers.scorer import opportunity_factors, projection_score

from tests.helpers import SEASON, WEEK, FixedSignals, add_player, add_week_points


def _scorer(store, signals=None) -> OpportunityScorer:
    return OpportunityScorer(store, ProjectionService(store), signals or FixedSignals())


def test_projection_score_saturates():
    assert projection_score("RB", 18.0) == pytest.approx(1.0)
    assert projection_score("RB", 9.0) == pytest.approx(0.5)
    assert projection_score("RB", 40.0) == 1.0
    assert projection_score("LB", 7.5) == pytest.approx(0.5)


def test_known_score(store):
    add_player(store, "rb1", "RB", 9.0)
    # 0.5 * 0.4 + 0.5 * 0.3 + mean(0.7 active, 0.6 scarcity) * 0.3
    assert _scorer(store).score("rb1", SEASON, WEEK) == pytest.approx(0.545)


def test_injury_opportunity_lifts_factors(store):
    player = add_player(store, "rb1", "RB", 9.0)
    assert opportunity_factors(player, True) == pytest.approx((0.7 + 0.6 + 0.8) / 3)
    lifted = _scorer(store, FixedSignals(injury=True)).score("rb1", SEASON, WEEK)
    assert lifted > _scorer(store).score("rb1", SEASON, WEEK)


def test_missing_player_or_projection_scores_zero(store):
    add_player(store, "rb1", "RB", None)
    scorer = _scorer(store)
    assert scorer.score("rb1", SEASON, WEEK) == 0.0
    assert scorer.score("nobody", SEASON, WEEK) == 0.0


@pytest.mark.parametrize("position", ["QB", "RB", "WR", "TE", "K", "DEF"])
def test_score_bounded(store, position):
    add_player(store, "p1", position, 80.0)
    scorer = _scorer(store, FixedSignals(performance=3.0, injury=True))
    assert 0.0 <= scorer.score("p1", SEASON, WEEK) <= 1.0


def test_weekly_projection_preferred_over_season(store):
    add_player(store, "rb1", "RB", 18.0, week=WEEK)
    add_player(store, "rb1", "RB", 2.0, week=0)
    breakdown = _scorer(store).score_breakdown("rb1", SEASON, WEEK)
    assert breakdown.projection_score == pytest.approx(1.0)


def test_store_signals_recent_performance(store):
    player = add_player(store, "rb1", "RB", 10.0)
    signals = StoreSignals(store)
    assert signals.recent_performance(player, 10.0, SEASON, WEEK) == 0.5

    for week, points in [(2, 10.0), (3, 15.0), (4, 20.0)]:
        add_week_points(store, "rb1", week, points)
    assert signals.recent_performance(player, 10.0, SEASON, WEEK) == pytest.approx(0.75)
    assert signals.recent_performance(player, 5.0, SEASON, WEEK) == 1.0


def test_store_signals_teammate_injury(store):
    player = add_player(store, "rb1", "RB", 10.0, team="KC")
    add_player(store, "wr1", "WR", 10.0, team="KC", status="Out")
    signals = StoreSignals(store, trends={"rb1": 25.0})
    assert signals.teammate_injury_opportunity(player, SEASON, WEEK) is False

    add_player(store, "rb2", "RB", 10.0, team="KC", status="IR")
    assert signals.teammate_injury_opportunity(player, SEASON, WEEK) is True
    assert signals.add_trend("rb1") == 25.0
    assert signals.add_trend("rb2") == 0.0
