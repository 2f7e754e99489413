"""NFL calendar helpers."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Tuple


REGULAR_SEASON_WEEKS = 18


def season_start(year: int) -> date:
    """Week 1 kicks off on the first Thursday of September."""

    first = date(year, 9, 1)
    return first + timedelta(days=(3 - first.weekday()) % 7)


def current_nfl_week(today: date | datetime | None = None) -> int:
    """Current regular-season week (1-18), or 0 before the season starts."""

    today = _as_date(today)
    start = season_start(today.year)
    if today < start:
        return 0
    week = (today - start).days // 7 + 1
    return min(week, REGULAR_SEASON_WEEKS)


def current_nfl_season(today: date | datetime | None = None) -> int:
    """January through July still belong to the previous season."""

    today = _as_date(today)
    return today.year - 1 if today.month < 8 else today.year


def current_week_and_season(today: date | datetime | None = None) -> Tuple[int, int]:
    today = _as_date(today)
    season = current_nfl_season(today)
    if season != today.year:
        # Playoffs and offseason: the regular season of ``season`` is over.
        return REGULAR_SEASON_WEEKS, season
    return max(1, current_nfl_week(today)), season


def _as_date(value: date | datetime | None) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value
