"""Adapters for external league data providers."""

from .sleeper import SleeperClient, rostered_player_ids, trend_percentages

__all__ = ["SleeperClient", "rostered_player_ids", "trend_percentages"]
