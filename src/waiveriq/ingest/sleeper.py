"""Async client for the public Sleeper API."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Mapping, Optional

import httpx

from waiveriq.settings import DEFAULT_SLEEPER_BASE_URL


logger = logging.getLogger(__name__)

# The most-added player maps to this add-trend percentage; others scale linearly.
TOP_TREND_PERCENTAGE = 40.0


class SleeperClient:
    """Thin wrapper over the Sleeper REST endpoints used by the recommender.

    Failed requests are logged and surface as ``None`` so callers can degrade
    to local data.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_SLEEPER_BASE_URL,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _get(self, endpoint: str, params: Mapping[str, Any] | None = None) -> Any | None:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.get(endpoint, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Sleeper API request to %s failed: %s", endpoint, exc)
            return None
        if resp.status_code != 200:
            logger.warning("Sleeper API error %d for %s", resp.status_code, endpoint)
            return None
        try:
            return resp.json()
        except ValueError:
            logger.warning("Sleeper API returned invalid JSON for %s", endpoint)
            return None

    async def get_league(self, league_id: str) -> Optional[Dict[str, Any]]:
        return await self._get(f"/league/{league_id}")

    async def get_rosters(self, league_id: str) -> Optional[List[Dict[str, Any]]]:
        return await self._get(f"/league/{league_id}/rosters")

    async def get_transactions(self, league_id: str, week: int) -> Optional[List[Dict[str, Any]]]:
        return await self._get(f"/league/{league_id}/transactions/{week}")

    async def get_players(self) -> Optional[Dict[str, Dict[str, Any]]]:
        """Every NFL player keyed by Sleeper player id (a large payload)."""

        return await self._get("/players/nfl")

    async def get_week_stats(self, season: int, week: int) -> Optional[Dict[str, Dict[str, Any]]]:
        return await self._get(f"/stats/nfl/regular/{season}/{week}")

    async def get_trending_players(
        self,
        kind: str = "add",
        lookback_hours: int = 24,
        limit: int = 200,
    ) -> Optional[List[Dict[str, Any]]]:
        return await self._get(
            f"/players/nfl/trending/{kind}",
            params={"lookback_hours": lookback_hours, "limit": limit},
        )


def rostered_player_ids(rosters: Any) -> set[str]:
    """Union of player ids across every roster payload; malformed entries are skipped."""

    player_ids: set[str] = set()
    if rosters is None:
        return player_ids
    if not isinstance(rosters, list):
        logger.warning("Ignoring Sleeper rosters payload of type %s", type(rosters).__name__)
        return player_ids
    for roster in rosters:
        if not isinstance(roster, Mapping):
            logger.warning("Skipping malformed Sleeper roster entry: %r", roster)
            continue
        players = roster.get("players")
        if players is None:
            continue
        if not isinstance(players, list):
            logger.warning("Skipping Sleeper roster %s with non-list players", roster.get("roster_id"))
            continue
        player_ids.update(str(player_id) for player_id in players if player_id is not None)
    return player_ids


def trend_percentages(trending: Any) -> Dict[str, float]:
    """Normalize trending add counts so the most-added player sits at 40%."""

    if not trending:
        return {}
    if not isinstance(trending, list):
        logger.warning("Ignoring Sleeper trending payload of type %s", type(trending).__name__)
        return {}
    counts: Dict[str, float] = {}
    for item in trending:
        if not isinstance(item, Mapping) or item.get("player_id") is None:
            continue
        try:
            count = float(item.get("count") or 0)
        except (TypeError, ValueError):
            count = math.nan
        if not math.isfinite(count):
            logger.warning("Skipping trending player %s with count %r", item["player_id"], item.get("count"))
            continue
        counts[str(item["player_id"])] = count
    max_count = max(counts.values(), default=0.0)
    if max_count <= 0:
        return {player_id: 0.0 for player_id in counts}
    return {player_id: count / max_count * TOP_TREND_PERCENTAGE for player_id, count in counts.items()}
