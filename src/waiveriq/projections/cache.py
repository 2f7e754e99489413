"""Read-through cache for projections backed by redis."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import redis

from waiveriq.settings import DEFAULT_PROJECTION_TTL


logger = logging.getLogger(__name__)


def player_projection_key(player_id: str, week: int, season: int) -> str:
    return f"projection:{player_id}:{week}:{season}"


def week_projections_key(week: int, season: int) -> str:
    return f"projections:week:{week}:{season}"


class ProjectionCache:
    """JSON get/set wrapper around a redis client.

    Every operation tolerates redis failures: errors are logged and reads
    behave as misses, so callers always fall back to the database.
    """

    def __init__(self, client: "redis.Redis", ttl: int = DEFAULT_PROJECTION_TTL):
        self.client = client
        self.ttl = ttl

    @classmethod
    def from_url(cls, url: str, ttl: int = DEFAULT_PROJECTION_TTL) -> "ProjectionCache":
        return cls(redis.Redis.from_url(url, decode_responses=True), ttl=ttl)

    def get(self, key: str) -> Optional[Any]:
        try:
            cached = self.client.get(key)
        except redis.RedisError as exc:
            logger.warning("Cache get failed for %s: %s", key, exc)
            return None
        if not cached:
            return None
        try:
            return json.loads(cached)
        except (TypeError, ValueError):
            logger.warning("Discarding undecodable cache entry %s", key)
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        try:
            self.client.setex(key, ttl or self.ttl, json.dumps(value, default=str))
        except redis.RedisError as exc:
            logger.warning("Cache set failed for %s: %s", key, exc)
            return False
        return True

    def delete(self, key: str) -> bool:
        try:
            self.client.delete(key)
        except redis.RedisError as exc:
            logger.warning("Cache delete failed for %s: %s", key, exc)
            return False
        return True

    def healthy(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as exc:
            logger.warning("Redis health check failed: %s", exc)
            return False
