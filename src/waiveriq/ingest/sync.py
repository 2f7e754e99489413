"""Sleeper ingestion jobs: player identities, league state and weekly stats."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional

from waiveriq.errors import SleeperSyncError
from waiveriq.models import League, Player, PlayerWeekStats, RosterEntry, Transaction
from waiveriq.persistence import LeagueStore
from waiveriq.waivers.calendar import current_week_and_season

from .sleeper import SleeperClient


logger = logging.getLogger(__name__)

RELEVANT_POSITIONS = frozenset({"QB", "RB", "WR", "TE", "K", "DEF"})
STATS_SOURCE = "sleeper"
FINAL_WEEK = 18
STARTER_SLOT = "ST"
BENCH_SLOT = "BN"

_METADATA_FIELDS = (
    "first_name",
    "last_name",
    "age",
    "years_exp",
    "number",
    "height",
    "weight",
    "college",
    "birth_date",
    "depth_chart_order",
    "fantasy_positions",
    "search_rank",
    "injury_start_date",
)


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_points(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def sleeper_player_to_player(player_id: str, payload: Any) -> Optional[Player]:
    """Canonical player row for a fantasy-relevant Sleeper player, else ``None``."""

    if not isinstance(payload, Mapping):
        return None
    position = payload.get("position")
    if position not in RELEVANT_POSITIONS:
        return None
    full_name = payload.get("full_name")
    if not full_name:
        # Team defenses carry only first/last name ("Kansas City", "Chiefs").
        full_name = " ".join(str(part) for part in (payload.get("first_name"), payload.get("last_name")) if part)
    if not full_name:
        return None

    injury_status = payload.get("injury_status") or None
    if injury_status:
        status = injury_status
    elif payload.get("active"):
        status = "Active"
    else:
        status = "Inactive"
    injury_designation = None
    if injury_status:
        body_part = payload.get("injury_body_part")
        injury_designation = f"{injury_status} ({body_part})" if body_part else injury_status

    return Player(
        player_id=str(player_id),
        full_name=full_name,
        position=position,
        team=payload.get("team") or None,
        status=status,
        injury_designation=injury_designation,
        metadata={key: payload[key] for key in _METADATA_FIELDS if payload.get(key) is not None},
    )


def sleeper_transaction_to_record(league_id: str, season: int, week: int, payload: Any) -> Optional[Transaction]:
    if not isinstance(payload, Mapping):
        return None
    transaction_id = payload.get("transaction_id")
    transaction_type = payload.get("type")
    if not transaction_id or not transaction_type:
        return None
    settings = payload.get("settings")
    return Transaction(
        transaction_id=str(transaction_id),
        league_id=league_id,
        transaction_type=str(transaction_type),
        week=week,
        season=season,
        status=str(payload.get("status") or "complete"),
        players_moved={
            "adds": payload.get("adds") or {},
            "drops": payload.get("drops") or {},
        },
        metadata={
            "settings": dict(settings) if isinstance(settings, Mapping) else {},
            "roster_ids": payload.get("roster_ids") or [],
            "creator": payload.get("creator"),
        },
    )


def sleeper_stats_to_week_stats(player_id: str, season: int, week: int, payload: Any) -> Optional[PlayerWeekStats]:
    if not isinstance(payload, Mapping) or not payload:
        return None
    return PlayerWeekStats(
        player_id=str(player_id),
        week=week,
        season=season,
        source=STATS_SOURCE,
        ppr_points=_as_points(payload.get("pts_ppr")),
        half_ppr_points=_as_points(payload.get("pts_half_ppr")),
        std_points=_as_points(payload.get("pts_std")),
        stats=dict(payload),
    )


def _owner_roster(rosters: List[Mapping[str, Any]], owner_id: str | None) -> Optional[Mapping[str, Any]]:
    if owner_id is None:
        return rosters[0] if rosters else None
    for roster in rosters:
        if str(roster.get("owner_id")) == owner_id:
            return roster
    return None


def _id_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


class SleeperSync:
    """Pulls Sleeper data into the store so the pipeline has something to score."""

    def __init__(self, store: LeagueStore, sleeper: SleeperClient):
        self.store = store
        self.sleeper = sleeper

    async def sync_players(self) -> Dict[str, int]:
        logger.info("Starting player sync from Sleeper")
        payload = await self.sleeper.get_players()
        if not isinstance(payload, Mapping):
            raise SleeperSyncError("Failed to fetch players from Sleeper")

        known = self.store.known_player_ids()
        players: List[Player] = []
        for player_id, item in payload.items():
            player = sleeper_player_to_player(player_id, item)
            if player is not None:
                players.append(player)
        self.store.upsert_players(players)

        created = sum(1 for player in players if player.player_id not in known)
        counts = {
            "total": len(payload),
            "created": created,
            "updated": len(players) - created,
            "skipped": len(payload) - len(players),
        }
        logger.info(
            "Player sync complete: %d created, %d updated, %d skipped",
            counts["created"],
            counts["updated"],
            counts["skipped"],
        )
        return counts

    async def sync_league(
        self,
        league_id: str,
        *,
        platform_league_id: str | None = None,
        owner_id: str | None = None,
        season: int | None = None,
        through_week: int | None = None,
    ) -> Dict[str, Any]:
        """Refresh a league row, the owner's roster and the season's transactions.

        The platform league id and owner default to what an earlier sync
        stored, then to ``league_id`` and the first roster.
        """

        existing = self.store.get_league(league_id)
        if platform_league_id is None:
            platform_league_id = existing.platform_league_id if existing and existing.platform_league_id else league_id
        if owner_id is None and existing is not None:
            owner_id = existing.platform_team_id

        payload = await self.sleeper.get_league(platform_league_id)
        if not isinstance(payload, Mapping):
            raise SleeperSyncError(f"Failed to fetch league {platform_league_id} from Sleeper")
        rosters = await self.sleeper.get_rosters(platform_league_id)
        if not isinstance(rosters, list):
            raise SleeperSyncError(f"Failed to fetch rosters for league {platform_league_id} from Sleeper")
        roster = _owner_roster([item for item in rosters if isinstance(item, Mapping)], owner_id)
        if owner_id is not None and roster is None:
            raise SleeperSyncError(f"No roster owned by {owner_id} in league {platform_league_id}")

        current_week, current_season = current_week_and_season()
        if season is None:
            season = _as_int(payload.get("season")) or current_season
        if through_week is None:
            through_week = current_week if season == current_season else FINAL_WEEK

        league = self._league_from_payload(league_id, platform_league_id, payload, roster, existing)
        self.store.save_league(league)
        entries = await self._sync_roster(league_id, roster)
        transactions = await self._sync_transactions(league_id, platform_league_id, season, through_week)

        logger.info(
            "Synced league %s: %d roster players, %d transactions through week %d",
            league_id,
            len(entries),
            transactions,
            through_week,
        )
        return {
            "league_id": league_id,
            "platform_league_id": platform_league_id,
            "season": season,
            "roster": len(entries),
            "transactions": transactions,
        }

    def _league_from_payload(
        self,
        league_id: str,
        platform_league_id: str,
        payload: Mapping[str, Any],
        roster: Optional[Mapping[str, Any]],
        existing: Optional[League],
    ) -> League:
        settings = payload.get("settings") if isinstance(payload.get("settings"), Mapping) else {}
        roster_settings = roster.get("settings") if roster and isinstance(roster.get("settings"), Mapping) else {}
        budget = _as_int(settings.get("waiver_budget"))
        current_faab = None
        if roster is not None and budget:
            current_faab = max(0, budget - (_as_int(roster_settings.get("waiver_budget_used")) or 0))
        positions = payload.get("roster_positions")
        scoring = payload.get("scoring_settings")
        return League(
            league_id=league_id,
            platform="sleeper",
            platform_league_id=platform_league_id,
            platform_team_id=str(roster["owner_id"]) if roster and roster.get("owner_id") else None,
            name=payload.get("name") or (existing.name if existing else None),
            faab_budget=budget,
            current_faab=current_faab,
            waiver_priority=_as_int(roster_settings.get("waiver_position")),
            scoring_settings=dict(scoring) if isinstance(scoring, Mapping) else {},
            roster_settings={"roster_positions": list(positions)} if isinstance(positions, list) else {},
        )

    async def _sync_roster(self, league_id: str, roster: Optional[Mapping[str, Any]]) -> List[RosterEntry]:
        player_ids = _id_list(roster.get("players")) if roster else []
        known = self.store.known_player_ids()
        if any(player_id not in known for player_id in player_ids):
            try:
                await self.sync_players()
            except SleeperSyncError as exc:
                logger.warning("Could not refresh players for league %s: %s", league_id, exc)
            known = self.store.known_player_ids()

        starters = set(_id_list(roster.get("starters"))) if roster else set()
        entries = []
        for player_id in player_ids:
            if player_id not in known:
                logger.warning("Skipping unknown player %s on league %s roster", player_id, league_id)
                continue
            is_starting = player_id in starters
            entries.append(
                RosterEntry(
                    league_id=league_id,
                    player_id=player_id,
                    roster_slot=STARTER_SLOT if is_starting else BENCH_SLOT,
                    is_starting=is_starting,
                )
            )
        return self.store.replace_roster(league_id, entries)

    async def _sync_transactions(self, league_id: str, platform_league_id: str, season: int, through_week: int) -> int:
        weeks = list(range(1, max(0, through_week) + 1))
        results = await asyncio.gather(
            *(self.sleeper.get_transactions(platform_league_id, week) for week in weeks)
        )
        stored = 0
        for week, items in zip(weeks, results):
            if items is None:
                continue
            if not isinstance(items, list):
                logger.warning("Ignoring malformed transactions payload for league %s week %d", league_id, week)
                continue
            for item in items:
                record = sleeper_transaction_to_record(league_id, season, week, item)
                if record is None:
                    continue
                self.store.record_transaction(record)
                stored += 1
        return stored

    async def sync_week_stats(self, season: int, week: int) -> Dict[str, int]:
        """Store Sleeper's weekly stat lines for players already in the store."""

        if not 1 <= week <= FINAL_WEEK:
            raise ValueError(f"Week must be between 1 and {FINAL_WEEK}, got {week}")
        logger.info("Syncing week %d stats for season %d", week, season)
        payload = await self.sleeper.get_week_stats(season, week)
        if not isinstance(payload, Mapping):
            raise SleeperSyncError(f"Failed to fetch week {week} stats for season {season} from Sleeper")

        known = self.store.known_player_ids()
        stored = 0
        for player_id, item in payload.items():
            if str(player_id) not in known:
                continue
            stats = sleeper_stats_to_week_stats(player_id, season, week, item)
            if stats is None:
                continue
            self.store.upsert_week_stats(stats)
            stored += 1

        logger.info("Stored week %d stats for %d of %d players", week, stored, len(payload))
        return {"season": season, "week": week, "processed": len(payload), "stored": stored}
