from waiveriq.projections import ProjectionService
from waiveriq.waivers import DropCandidateSelector

from tests.helpers import SEASON, WEEK, add_league, add_player, add_roster


def _selector(store) -> DropCandidateSelector:
    return DropCandidateSelector(store, ProjectionService(store))


def test_empty_roster_has_no_candidate(store):
    add_league(store)
    assert _selector(store).find_drop_candidate("L1", "RB", SEASON, WEEK) is None


def test_lowest_value_surplus_player_is_dropped(store):
    add_league(store)
    add_player(store, "qb1", "QB", 2.0)
    add_player(store, "wr1", "WR", 9.0)
    add_player(store, "wr2", "WR", 8.0)
    add_player(store, "wr3", "WR", 4.0)
    add_roster(store, "L1", "qb1", "wr1", "wr2", "wr3")

    drop = _selector(store).find_drop_candidate("L1", "RB", SEASON, WEEK)
    # The lone QB scores lowest but is the only one at its position.
    assert drop.player_id == "wr3"
    assert drop.player_name == "Player wr3"
    assert drop.value == 4.0


def test_ties_prefer_claimed_position(store):
    add_league(store)
    for player_id, position in [("rb1", "RB"), ("rb2", "RB"), ("rb3", "RB"), ("wr1", "WR"), ("wr2", "WR"), ("wr3", "WR")]:
        add_player(store, player_id, position, 5.0)
    add_roster(store, "L1", "rb1", "rb2", "rb3", "wr1", "wr2", "wr3")

    selector = _selector(store)
    assert selector.find_drop_candidate("L1", "WR", SEASON, WEEK).player_id == "wr1"
    assert selector.find_drop_candidate("L1", "RB", SEASON, WEEK).player_id == "rb1"


def test_falls_back_to_whole_roster_when_nothing_is_surplus(store):
    add_league(store)
    add_player(store, "qb1", "QB", 15.0)
    add_player(store, "te1", "TE", 3.0)
    add_roster(store, "L1", "qb1", "te1")

    assert _selector(store).find_drop_candidate("L1", "QB", SEASON, WEEK).player_id == "te1"


def test_players_without_projection_are_worth_zero(store):
    add_league(store)
    add_player(store, "wr1", "WR", 6.0)
    add_player(store, "wr2", "WR", 7.0)
    add_player(store, "wr3", "WR", None)
    add_roster(store, "L1", "wr1", "wr2", "wr3")

    drop = _selector(store).find_drop_candidate("L1", "WR", SEASON, WEEK)
    assert drop.player_id == "wr3"
    assert drop.value == 0.0
