from datetime import date, datetime

from waiveriq.waivers import current_week_and_season
from waiveriq.waivers.calendar import current_nfl_season, current_nfl_week, season_start


def test_season_starts_first_thursday_of_september():
    assert season_start(2024) == date(2024, 9, 5)
    assert season_start(2022) == date(2022, 9, 1)


def test_week_counts_from_kickoff():
    assert current_nfl_week(date(2024, 9, 4)) == 0
    assert current_nfl_week(date(2024, 9, 5)) == 1
    assert current_nfl_week(date(2024, 9, 11)) == 1
    assert current_nfl_week(date(2024, 9, 12)) == 2
    assert current_nfl_week(datetime(2024, 12, 31, 20, 0)) == 17
    assert current_nfl_week(date(2024, 12, 31)) == 17


def test_week_capped_at_eighteen():
    assert current_nfl_week(date(2024, 12, 31)) <= 18
    assert current_nfl_week(date(2025, 1, 1)) == 0


def test_season_rolls_over_in_august():
    assert current_nfl_season(date(2025, 1, 15)) == 2024
    assert current_nfl_season(date(2025, 7, 31)) == 2024
    assert current_nfl_season(date(2025, 8, 1)) == 2025


def test_current_week_and_season():
    assert current_week_and_season(date(2025, 1, 15)) == (18, 2024)
    assert current_week_and_season(date(2024, 8, 20)) == (1, 2024)
    assert current_week_and_season(date(2024, 10, 1)) == (4, 2024)
