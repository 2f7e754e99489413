"""Exceptions raised by the recommendation pipeline."""

from __future__ import annotations


class WaiverIQError(Exception):
    """Base class for waiveriq errors."""


class LeagueNotFoundError(WaiverIQError, KeyError):
    def __init__(self, league_id: str):
        super().__init__(f"League {league_id} not found")
        self.league_id = league_id

    def __str__(self) -> str:
        return self.args[0]


class PlayerNotFoundError(WaiverIQError, KeyError):
    def __init__(self, player_id: str):
        super().__init__(f"Player {player_id} not found")
        self.player_id = player_id

    def __str__(self) -> str:
        return self.args[0]


class FaabDisabledError(WaiverIQError, ValueError):
    """Raised when a FAAB bid is requested for a league without a FAAB budget."""


class SleeperSyncError(WaiverIQError, RuntimeError):
    """Raised when Sleeper data needed by a sync job cannot be fetched."""
