from __future__ import annotations

from pydantic import BaseModel, Field


class PlayerSyncResponse(BaseModel):
    total: int
    created: int
    updated: int
    skipped: int


class LeagueSyncRequest(BaseModel):
    platform_league_id: str | None = Field(default=None, min_length=1)
    owner_id: str | None = Field(default=None, min_length=1)
    season: int | None = None
    through_week: int | None = Field(default=None, ge=1, le=18)


class LeagueSyncResponse(BaseModel):
    league_id: str
    platform_league_id: str
    season: int
    roster: int
    transactions: int


class StatsSyncRequest(BaseModel):
    season: int
    week: int = Field(..., ge=1, le=18)


class StatsSyncResponse(BaseModel):
    season: int
    week: int
    processed: int
    stored: int
