"""League, roster and transaction rows."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class League(BaseModel):
    league_id: str = Field(..., min_length=1)
    platform: str = "sleeper"
    platform_league_id: str = ""
    platform_team_id: Optional[str] = None
    name: Optional[str] = None
    faab_budget: Optional[int] = Field(default=None, ge=0)
    current_faab: Optional[int] = Field(default=None, ge=0)
    waiver_priority: Optional[int] = None
    scoring_settings: Dict[str, Any] = Field(default_factory=dict)
    roster_settings: Dict[str, Any] | List[str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def uses_faab(self) -> bool:
        return self.faab_budget is not None and self.faab_budget > 0


class RosterEntry(BaseModel):
    """A player owned in a league."""

    league_id: str = Field(..., min_length=1)
    player_id: str = Field(..., min_length=1)
    roster_slot: str = "BN"
    is_starting: bool = False

    model_config = ConfigDict(frozen=True)


class Transaction(BaseModel):
    transaction_id: str = Field(..., min_length=1)
    league_id: str = Field(..., min_length=1)
    transaction_type: str
    week: int
    season: int
    status: str = "complete"
    players_moved: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def waiver_bid(self) -> Optional[float]:
        """FAAB amount recorded under ``metadata.settings.waiver_bid``, if any."""

        settings = self.metadata.get("settings") if isinstance(self.metadata, dict) else None
        if not isinstance(settings, dict):
            return None
        bid = settings.get("waiver_bid")
        if isinstance(bid, bool) or not isinstance(bid, (int, float)):
            return None
        return float(bid)
