"""Environment-driven runtime settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger(__name__)

_DB_PATH_ENV = "WAIVERIQ_DB_PATH"
_REDIS_URL_ENV = "WAIVERIQ_REDIS_URL"
_SLEEPER_BASE_URL_ENV = "WAIVERIQ_SLEEPER_BASE_URL"
_SLEEPER_TIMEOUT_ENV = "WAIVERIQ_SLEEPER_TIMEOUT"
_PROJECTION_TTL_ENV = "WAIVERIQ_PROJECTION_TTL"
_MAX_RECOMMENDATIONS_ENV = "WAIVERIQ_MAX_RECOMMENDATIONS"

DEFAULT_DB_PATH = Path(__file__).resolve().parent / "waiveriq.sqlite"
DEFAULT_SLEEPER_BASE_URL = "https://api.sleeper.app/v1"
DEFAULT_PROJECTION_TTL = 24 * 60 * 60
DEFAULT_MAX_RECOMMENDATIONS = 10


def _env_float(name: str, default: float, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    if max_value is not None:
        value = min(max_value, value)
    return value


@dataclass(frozen=True)
class Settings:
    db_path: str | Path = DEFAULT_DB_PATH
    redis_url: str | None = None
    sleeper_base_url: str = DEFAULT_SLEEPER_BASE_URL
    sleeper_timeout: float = 10.0
    projection_ttl: int = DEFAULT_PROJECTION_TTL
    max_recommendations: int = DEFAULT_MAX_RECOMMENDATIONS

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``WAIVERIQ_*`` variables, falling back to defaults."""

        return cls(
            db_path=os.getenv(_DB_PATH_ENV) or DEFAULT_DB_PATH,
            redis_url=os.getenv(_REDIS_URL_ENV) or None,
            sleeper_base_url=os.getenv(_SLEEPER_BASE_URL_ENV, DEFAULT_SLEEPER_BASE_URL).rstrip("/"),
            sleeper_timeout=_env_float(_SLEEPER_TIMEOUT_ENV, 10.0, clamp_min=0.5),
            projection_ttl=_env_int(_PROJECTION_TTL_ENV, DEFAULT_PROJECTION_TTL, min_value=1),
            max_recommendations=_env_int(
                _MAX_RECOMMENDATIONS_ENV, DEFAULT_MAX_RECOMMENDATIONS, min_value=1, max_value=20
            ),
        )
