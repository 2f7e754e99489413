import pytest

from waiveriq.projections import ProjectionService
from waiveriq.waivers import PositionalNeedAnalyzer, need_score
from waiveriq.waivers.needs import assess_position

from tests.helpers import SEASON, WEEK, add_league, add_player, add_roster


@pytest.mark.parametrize(
    ("rostered", "required", "avg", "expected"),
    [
        (0, 1, 30.0, 1.0),
        (1, 2, 25.0, 1.0),
        (2, 2, 25.0, 0.8),
        (3, 2, 25.0, 0.5),
        (4, 2, 6.0, 0.6),
        (4, 2, 12.0, 0.2),
    ],
)
def test_need_rules(rostered, required, avg, expected):
    assert need_score(rostered, required, avg) == expected


def test_assess_position_averages_top_starters():
    need = assess_position("WR", [4.0, 12.0, 10.0, 3.0, 2.0], 2)
    assert need.avg_starter_value == pytest.approx(11.0)
    assert need.current_starters == 2
    assert need.bench_depth == 3
    assert need.need_score == 0.2


def test_understaffed_position_is_critical(store):
    add_league(store)
    add_player(store, "rb1", "RB", 30.0)
    add_roster(store, "L1", "rb1")

    needs = PositionalNeedAnalyzer(store, ProjectionService(store)).analyze("L1", SEASON, WEEK)
    assert needs["RB"].need_score == 1.0
    assert needs["RB"].current_starters == 1
    assert needs["QB"].need_score == 1.0
    assert set(needs) == {"QB", "RB", "WR", "TE", "K", "DEF"}


def test_league_roster_settings_drive_requirements(store):
    add_league(store, roster_settings=["QB", "RB", "WR", "WR", "BN"])
    add_player(store, "rb1", "RB", 10.0)
    add_roster(store, "L1", "rb1")

    needs = PositionalNeedAnalyzer(store, ProjectionService(store)).analyze("L1", SEASON, WEEK)
    assert needs["RB"].need_score == 0.8
    assert needs["TE"].required_starters == 0
    assert needs["TE"].need_score == 0.8
