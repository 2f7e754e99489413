from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class LeagueRequest(BaseModel):
    league_id: str = Field(..., min_length=1)
    platform: str = Field(default="sleeper")
    platform_league_id: str = ""
    platform_team_id: str | None = None
    name: str | None = None
    faab_budget: int | None = Field(default=None, ge=0)
    current_faab: int | None = Field(default=None, ge=0)
    waiver_priority: int | None = None
    scoring_settings: Dict[str, Any] = Field(default_factory=dict)
    roster_settings: Dict[str, Any] | List[str] = Field(default_factory=dict)


class RosterEntryRequest(BaseModel):
    player_id: str = Field(..., min_length=1)
    roster_slot: str = Field(default="BN")
    is_starting: bool = False


class RosterRequest(BaseModel):
    entries: List[RosterEntryRequest] = Field(..., min_length=1)
