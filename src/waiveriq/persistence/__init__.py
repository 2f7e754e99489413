"""Persistence layer for league state, projections and waiver recommendations."""

from __future__ import annotations

import json
import os
import sqlite3
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Sequence
from uuid import uuid4

from waiveriq.models import (
    League,
    Player,
    PlayerProjection,
    PlayerWeekStats,
    RosterEntry,
    StoredRecommendation,
    Transaction,
    WaiverRecommendation,
)
from waiveriq.settings import DEFAULT_DB_PATH


_CLAIM_ACTIONS = {"viewed", "claimed", "missed", "dismissed"}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class LeagueStore:
    """SQLite-backed store for players, leagues, projections and recommendations."""

    def __init__(self, db_path: Path | str | None = None):
        self._use_uri = False
        env_db = os.getenv('WAIVERIQ_DB_PATH')
        if db_path is not None:
            db_path = str(db_path)
            if db_path.startswith('file:'):
                self.db_path = db_path
                self._use_uri = True
            else:
                self.db_path = Path(db_path)
        elif env_db:
            if env_db.startswith('file:'):
                self.db_path = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        elif os.getenv('PYTEST_CURRENT_TEST'):
            test_dir = Path(tempfile.gettempdir()) / 'waiveriq-test'
            test_dir.mkdir(parents=True, exist_ok=True)
            self.db_path = test_dir / 'waiveriq.sqlite'
        else:
            self.db_path = DEFAULT_DB_PATH
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            try:
                conn = sqlite3.connect(self.db_path)
            except sqlite3.OperationalError:
                fallback_dir = Path(tempfile.gettempdir()) / 'waiveriq-runtime'
                fallback_dir.mkdir(parents=True, exist_ok=True)
                fallback = fallback_dir / 'waiveriq.sqlite'
                conn = sqlite3.connect(fallback)
                self.db_path = fallback
                self._create_schema(conn)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS players (
                id TEXT PRIMARY KEY,
                full_name TEXT NOT NULL,
                position TEXT NOT NULL,
                team TEXT,
                status TEXT,
                injury_designation TEXT,
                bye_week INTEGER,
                metadata_json TEXT NOT NULL DEFAULT '{}',
                last_updated TEXT NOT NULL
            );
            CREATE INDEX IF NOT EXISTS players_status_idx ON players (status);

            CREATE TABLE IF NOT EXISTS leagues (
                id TEXT PRIMARY KEY,
                platform TEXT NOT NULL,
                platform_league_id TEXT NOT NULL,
                platform_team_id TEXT,
                name TEXT,
                faab_budget INTEGER,
                current_faab INTEGER,
                waiver_priority INTEGER,
                scoring_settings_json TEXT NOT NULL DEFAULT '{}',
                roster_settings_json TEXT NOT NULL DEFAULT '{}',
                created_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS rosters (
                league_id TEXT NOT NULL REFERENCES leagues (id) ON DELETE CASCADE,
                player_id TEXT NOT NULL REFERENCES players (id),
                roster_slot TEXT NOT NULL,
                is_starting INTEGER NOT NULL DEFAULT 0,
                PRIMARY KEY (league_id, player_id)
            );

            CREATE TABLE IF NOT EXISTS transactions (
                id TEXT PRIMARY KEY,
                league_id TEXT NOT NULL REFERENCES leagues (id) ON DELETE CASCADE,
                transaction_type TEXT NOT NULL,
                week INTEGER NOT NULL,
                season INTEGER NOT NULL,
                status TEXT NOT NULL,
                players_moved_json TEXT NOT NULL DEFAULT '{}',
                metadata_json TEXT NOT NULL DEFAULT '{}'
            );
            CREATE INDEX IF NOT EXISTS transactions_league_idx
                ON transactions (league_id, season, transaction_type);

            CREATE TABLE IF NOT EXISTS player_projections (
                player_id TEXT NOT NULL,
                week INTEGER NOT NULL,
                season INTEGER NOT NULL,
                source TEXT NOT NULL,
                projected_points REAL NOT NULL,
                confidence REAL NOT NULL DEFAULT 0.5,
                stats_json TEXT NOT NULL DEFAULT '{}',
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (player_id, week, season, source)
            );
            CREATE INDEX IF NOT EXISTS player_projections_week_idx
                ON player_projections (week, season);

            CREATE TABLE IF NOT EXISTS player_week_stats (
                player_id TEXT NOT NULL,
                week INTEGER NOT NULL,
                season INTEGER NOT NULL,
                source TEXT NOT NULL,
                ppr_points REAL,
                half_ppr_points REAL,
                std_points REAL,
                stats_json TEXT NOT NULL DEFAULT '{}',
                updated_at TEXT NOT NULL,
                PRIMARY KEY (player_id, week, season, source)
            );

            CREATE TABLE IF NOT EXISTS waiver_recommendations (
                id TEXT PRIMARY KEY,
                league_id TEXT NOT NULL REFERENCES leagues (id) ON DELETE CASCADE,
                week INTEGER NOT NULL,
                season INTEGER NOT NULL,
                player_id TEXT NOT NULL,
                player_name TEXT NOT NULL,
                position TEXT NOT NULL,
                team TEXT,
                opportunity_score REAL NOT NULL,
                projected_points REAL NOT NULL,
                recent_performance REAL NOT NULL,
                target_share REAL,
                snap_share REAL,
                injury_impact INTEGER NOT NULL DEFAULT 0,
                positional_need REAL NOT NULL,
                would_start_immediately INTEGER NOT NULL DEFAULT 0,
                bench_depth_score REAL NOT NULL,
                recommended_bid INTEGER,
                min_bid INTEGER,
                max_bid INTEGER,
                median_historical_bid INTEGER,
                add_trend_percentage REAL,
                priority_rank INTEGER NOT NULL DEFAULT 0,
                should_claim INTEGER NOT NULL DEFAULT 0,
                suggested_drop_player_id TEXT,
                suggested_drop_player_name TEXT,
                drop_player_value REAL,
                reasoning TEXT NOT NULL,
                confidence REAL NOT NULL DEFAULT 0.5,
                urgency TEXT NOT NULL DEFAULT 'medium',
                status TEXT NOT NULL DEFAULT 'pending',
                viewed_at TEXT,
                claimed_at TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                UNIQUE (league_id, week, season, player_id)
            );
            CREATE INDEX IF NOT EXISTS waiver_recommendations_lookup_idx
                ON waiver_recommendations (league_id, week, season, status);
            """
        )
        conn.commit()

    # Players -------------------------------------------------------------

    def upsert_player(self, player: Player) -> Player:
        self.upsert_players([player])
        return player

    def upsert_players(self, players: Iterable[Player]) -> int:
        """Insert or update player identity rows in a single transaction."""

        now = _now_iso()
        rows = [
            (
                player.player_id,
                player.full_name,
                player.position,
                player.team,
                player.status,
                player.injury_designation,
                player.bye_week,
                json.dumps(player.metadata),
                now,
            )
            for player in players
        ]
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO players (
                    id, full_name, position, team, status, injury_designation,
                    bye_week, metadata_json, last_updated
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (id) DO UPDATE SET
                    full_name = excluded.full_name,
                    position = excluded.position,
                    team = excluded.team,
                    status = excluded.status,
                    injury_designation = excluded.injury_designation,
                    bye_week = COALESCE(excluded.bye_week, players.bye_week),
                    metadata_json = excluded.metadata_json,
                    last_updated = excluded.last_updated
                """,
                rows,
            )
            conn.commit()
        return len(rows)

    def known_player_ids(self) -> set[str]:
        with self._connect() as conn:
            rows = conn.execute("SELECT id FROM players").fetchall()
        return {row["id"] for row in rows}

    def get_player(self, player_id: str) -> Optional[Player]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM players WHERE id = ?", (player_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_player(row)

    def list_players(
        self,
        *,
        statuses: Sequence[str] | None = None,
        team: str | None = None,
        position: str | None = None,
    ) -> List[Player]:
        query = "SELECT * FROM players"
        conditions: list[str] = []
        params: list[str] = []
        if statuses:
            conditions.append(f"status IN ({', '.join('?' for _ in statuses)})")
            params.extend(statuses)
        if team:
            conditions.append("team = ?")
            params.append(team)
        if position:
            conditions.append("position = ?")
            params.append(position)
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY id"
        with self._connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [self._row_to_player(row) for row in rows]

    def search_players(
        self,
        query: str,
        *,
        position: str | None = None,
        team: str | None = None,
        limit: int = 20,
    ) -> List[Player]:
        """Case-insensitive name search ordered by full name."""

        escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        sql = "SELECT * FROM players WHERE full_name LIKE ? ESCAPE '\\'"
        params: list[str | int] = [f"%{escaped}%"]
        if position:
            sql += " AND position = ?"
            params.append(position)
        if team:
            sql += " AND team = ?"
            params.append(team)
        sql += " ORDER BY full_name, id LIMIT ?"
        params.append(limit)
        with self._connect() as conn:
            rows = conn.execute(sql, tuple(params)).fetchall()
        return [self._row_to_player(row) for row in rows]

    # Leagues and rosters -------------------------------------------------

    def save_league(self, league: League) -> League:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO leagues (
                    id, platform, platform_league_id, platform_team_id, name, faab_budget,
                    current_faab, waiver_priority, scoring_settings_json, roster_settings_json,
                    created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (id) DO UPDATE SET
                    platform = excluded.platform,
                    platform_league_id = excluded.platform_league_id,
                    platform_team_id = excluded.platform_team_id,
                    name = excluded.name,
                    faab_budget = excluded.faab_budget,
                    current_faab = excluded.current_faab,
                    waiver_priority = excluded.waiver_priority,
                    scoring_settings_json = excluded.scoring_settings_json,
                    roster_settings_json = excluded.roster_settings_json
                """,
                (
                    league.league_id,
                    league.platform,
                    league.platform_league_id,
                    league.platform_team_id,
                    league.name,
                    league.faab_budget,
                    league.current_faab,
                    league.waiver_priority,
                    json.dumps(league.scoring_settings),
                    json.dumps(league.roster_settings),
                    _now_iso(),
                ),
            )
            conn.commit()
        return league

    def get_league(self, league_id: str) -> Optional[League]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM leagues WHERE id = ?", (league_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_league(row)

    def add_roster_entry(self, entry: RosterEntry) -> RosterEntry:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO rosters (league_id, player_id, roster_slot, is_starting)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (league_id, player_id) DO UPDATE SET
                    roster_slot = excluded.roster_slot,
                    is_starting = excluded.is_starting
                """,
                (entry.league_id, entry.player_id, entry.roster_slot, int(entry.is_starting)),
            )
            conn.commit()
        return entry

    def remove_roster_entry(self, league_id: str, player_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM rosters WHERE league_id = ? AND player_id = ?",
                (league_id, player_id),
            )
            conn.commit()
        return cursor.rowcount > 0

    def replace_roster(self, league_id: str, entries: Iterable[RosterEntry]) -> List[RosterEntry]:
        """Swap a league's roster for ``entries`` in one transaction."""

        entries = list(entries)
        with self._connect() as conn:
            conn.execute("DELETE FROM rosters WHERE league_id = ?", (league_id,))
            conn.executemany(
                "INSERT INTO rosters (league_id, player_id, roster_slot, is_starting) VALUES (?, ?, ?, ?)",
                [(league_id, entry.player_id, entry.roster_slot, int(entry.is_starting)) for entry in entries],
            )
            conn.commit()
        return self.list_roster(league_id)

    def list_roster(self, league_id: str) -> List[RosterEntry]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM rosters WHERE league_id = ? ORDER BY player_id",
                (league_id,),
            ).fetchall()
        return [
            RosterEntry(
                league_id=row["league_id"],
                player_id=row["player_id"],
                roster_slot=row["roster_slot"],
                is_starting=bool(row["is_starting"]),
            )
            for row in rows
        ]

    def list_rostered_players(self, league_id: str) -> List[Player]:
        """Players owned in a league, joined with their identity rows."""

        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT p.* FROM rosters r
                JOIN players p ON p.id = r.player_id
                WHERE r.league_id = ?
                ORDER BY p.id
                """,
                (league_id,),
            ).fetchall()
        return [self._row_to_player(row) for row in rows]

    # Transactions --------------------------------------------------------

    def record_transaction(self, transaction: Transaction) -> Transaction:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO transactions (
                    id, league_id, transaction_type, week, season, status,
                    players_moved_json, metadata_json
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    transaction.transaction_id,
                    transaction.league_id,
                    transaction.transaction_type,
                    transaction.week,
                    transaction.season,
                    transaction.status,
                    json.dumps(transaction.players_moved),
                    json.dumps(transaction.metadata),
                ),
            )
            conn.commit()
        return transaction

    def list_transactions(
        self,
        league_id: str,
        *,
        season: int | None = None,
        transaction_type: str | None = None,
    ) -> List[Transaction]:
        query = "SELECT * FROM transactions WHERE league_id = ?"
        params: list[str | int] = [league_id]
        if season is not None:
            query += " AND season = ?"
            params.append(season)
        if transaction_type:
            query += " AND transaction_type = ?"
            params.append(transaction_type)
        query += " ORDER BY season, week, id"
        with self._connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [self._row_to_transaction(row) for row in rows]

    # Projections and weekly stats -----------------------------------------

    def upsert_projection(self, projection: PlayerProjection) -> bool:
        """Insert or update a projection; returns ``True`` when a row was created."""

        now = _now_iso()
        with self._connect() as conn:
            existing = conn.execute(
                """
                SELECT 1 FROM player_projections
                WHERE player_id = ? AND week = ? AND season = ? AND source = ?
                """,
                (projection.player_id, projection.week, projection.season, projection.source),
            ).fetchone()
            conn.execute(
                """
                INSERT INTO player_projections (
                    player_id, week, season, source, projected_points, confidence,
                    stats_json, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (player_id, week, season, source) DO UPDATE SET
                    projected_points = excluded.projected_points,
                    confidence = excluded.confidence,
                    stats_json = excluded.stats_json,
                    updated_at = excluded.updated_at
                """,
                (
                    projection.player_id,
                    projection.week,
                    projection.season,
                    projection.source,
                    projection.projected_points,
                    projection.confidence,
                    json.dumps(projection.stats),
                    now,
                    now,
                ),
            )
            conn.commit()
        return existing is None

    def get_projection(
        self,
        player_id: str,
        week: int,
        season: int,
        *,
        source: str | None = None,
    ) -> Optional[PlayerProjection]:
        query = "SELECT * FROM player_projections WHERE player_id = ? AND week = ? AND season = ?"
        params: list[str | int] = [player_id, week, season]
        if source:
            query += " AND source = ?"
            params.append(source)
        query += " ORDER BY updated_at DESC LIMIT 1"
        with self._connect() as conn:
            row = conn.execute(query, tuple(params)).fetchone()
            if row is None:
                return None
            return self._row_to_projection(row)

    def list_projections(
        self,
        week: int,
        season: int,
        *,
        position: str | None = None,
        limit: int | None = None,
    ) -> List[PlayerProjection]:
        query = (
            "SELECT pp.* FROM player_projections pp"
            " JOIN players p ON p.id = pp.player_id"
            " WHERE pp.week = ? AND pp.season = ?"
        )
        params: list[str | int] = [week, season]
        if position:
            query += " AND p.position = ?"
            params.append(position)
        query += " ORDER BY pp.projected_points DESC, pp.player_id"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)
        with self._connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [self._row_to_projection(row) for row in rows]

    def list_player_projections(self, player_id: str, season: int) -> List[PlayerProjection]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM player_projections
                WHERE player_id = ? AND season = ?
                ORDER BY week, source
                """,
                (player_id, season),
            ).fetchall()
        return [self._row_to_projection(row) for row in rows]

    def upsert_week_stats(self, stats: PlayerWeekStats) -> PlayerWeekStats:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO player_week_stats (
                    player_id, week, season, source, ppr_points, half_ppr_points,
                    std_points, stats_json, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (player_id, week, season, source) DO UPDATE SET
                    ppr_points = excluded.ppr_points,
                    half_ppr_points = excluded.half_ppr_points,
                    std_points = excluded.std_points,
                    stats_json = excluded.stats_json,
                    updated_at = excluded.updated_at
                """,
                (
                    stats.player_id,
                    stats.week,
                    stats.season,
                    stats.source,
                    stats.ppr_points,
                    stats.half_ppr_points,
                    stats.std_points,
                    json.dumps(stats.stats),
                    _now_iso(),
                ),
            )
            conn.commit()
        return stats

    def recent_week_stats(
        self,
        player_id: str,
        season: int,
        *,
        before_week: int,
        limit: int = 3,
    ) -> List[PlayerWeekStats]:
        """Most recent weekly stat lines strictly before ``before_week``, newest first."""

        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM player_week_stats
                WHERE player_id = ? AND season = ? AND week < ?
                ORDER BY week DESC
                LIMIT ?
                """,
                (player_id, season, before_week, limit),
            ).fetchall()
        return [
            PlayerWeekStats(
                player_id=row["player_id"],
                week=row["week"],
                season=row["season"],
                source=row["source"],
                ppr_points=row["ppr_points"],
                half_ppr_points=row["half_ppr_points"],
                std_points=row["std_points"],
                stats=json.loads(row["stats_json"]),
            )
            for row in rows
        ]

    # Waiver recommendations ----------------------------------------------

    def replace_waiver_recommendations(
        self,
        league_id: str,
        week: int,
        season: int,
        recommendations: Iterable[WaiverRecommendation],
    ) -> List[StoredRecommendation]:
        """Swap the recommendation set for (league, week, season) in one transaction.

        Readers never observe an empty or mixed set; if any insert fails the
        previous rows are kept.
        """

        now = _now_iso()
        payload = []
        for rec in recommendations:
            drop = rec.suggested_drop
            player = rec.player
            payload.append(
                (
                    uuid4().hex,
                    league_id,
                    week,
                    season,
                    player.player_id,
                    player.player_name,
                    player.position,
                    player.team,
                    player.opportunity_score,
                    player.projected_points,
                    player.recent_performance,
                    player.target_share,
                    player.snap_share,
                    int(player.injury_impact),
                    rec.positional_need,
                    int(rec.would_start_immediately),
                    rec.bench_depth_score,
                    rec.recommended_bid,
                    rec.min_bid,
                    rec.max_bid,
                    rec.median_historical_bid,
                    player.add_trend_percentage,
                    rec.priority_rank or 0,
                    int(bool(rec.should_claim)),
                    drop.player_id if drop else None,
                    drop.player_name if drop else None,
                    drop.value if drop else None,
                    rec.reasoning,
                    rec.confidence,
                    rec.urgency,
                    "pending",
                    now,
                    now,
                )
            )
        with self._connect() as conn:
            conn.execute(
                "DELETE FROM waiver_recommendations WHERE league_id = ? AND week = ? AND season = ?",
                (league_id, week, season),
            )
            conn.executemany(
                """
                INSERT INTO waiver_recommendations (
                    id, league_id, week, season, player_id, player_name, position, team,
                    opportunity_score, projected_points, recent_performance, target_share,
                    snap_share, injury_impact, positional_need, would_start_immediately,
                    bench_depth_score, recommended_bid, min_bid, max_bid, median_historical_bid,
                    add_trend_percentage, priority_rank, should_claim, suggested_drop_player_id,
                    suggested_drop_player_name, drop_player_value, reasoning, confidence,
                    urgency, status, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                payload,
            )
            conn.commit()
        return self.list_waiver_recommendations(league_id, week, season, status=None)

    def list_waiver_recommendations(
        self,
        league_id: str,
        week: int,
        season: int,
        *,
        status: str | None = "pending",
    ) -> List[StoredRecommendation]:
        query = "SELECT * FROM waiver_recommendations WHERE league_id = ? AND week = ? AND season = ?"
        params: list[str | int] = [league_id, week, season]
        if status:
            query += " AND status = ?"
            params.append(status)
        query += " ORDER BY priority_rank ASC, created_at ASC"
        with self._connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [self._row_to_recommendation(row) for row in rows]

    def get_waiver_recommendation(self, recommendation_id: str) -> Optional[StoredRecommendation]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM waiver_recommendations WHERE id = ?",
                (recommendation_id,),
            ).fetchone()
            if row is None:
                return None
            return self._row_to_recommendation(row)

    def track_recommendation_action(self, recommendation_id: str, action: str) -> StoredRecommendation:
        """Record a user action; viewing keeps the row pending."""

        if action not in _CLAIM_ACTIONS:
            raise ValueError(f"Unsupported action {action!r}")
        now = _now_iso()
        if action == "viewed":
            assignments, params = "status = 'pending', viewed_at = ?", [now]
        elif action == "claimed":
            assignments, params = "status = 'claimed', claimed_at = ?", [now]
        else:
            assignments, params = "status = ?", [action]
        with self._connect() as conn:
            cursor = conn.execute(
                f"UPDATE waiver_recommendations SET {assignments}, updated_at = ? WHERE id = ?",
                (*params, now, recommendation_id),
            )
            conn.commit()
        if cursor.rowcount == 0:
            raise KeyError(f"Recommendation {recommendation_id} not found")
        updated = self.get_waiver_recommendation(recommendation_id)
        if updated is None:  # pragma: no cover
            raise KeyError(f"Recommendation {recommendation_id} not found after update")
        return updated

    def waiver_history(self, league_id: str, season: int) -> List[StoredRecommendation]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM waiver_recommendations
                WHERE league_id = ? AND season = ? AND status IN ('claimed', 'missed')
                ORDER BY datetime(created_at) DESC
                """,
                (league_id, season),
            ).fetchall()
        return [self._row_to_recommendation(row) for row in rows]

    # Row conversion ------------------------------------------------------

    def _row_to_player(self, row: sqlite3.Row) -> Player:
        return Player(
            player_id=row["id"],
            full_name=row["full_name"],
            position=row["position"],
            team=row["team"],
            status=row["status"],
            injury_designation=row["injury_designation"],
            bye_week=row["bye_week"],
            metadata=json.loads(row["metadata_json"]) if row["metadata_json"] else {},
        )

    def _row_to_league(self, row: sqlite3.Row) -> League:
        return League(
            league_id=row["id"],
            platform=row["platform"],
            platform_league_id=row["platform_league_id"],
            platform_team_id=row["platform_team_id"],
            name=row["name"],
            faab_budget=row["faab_budget"],
            current_faab=row["current_faab"],
            waiver_priority=row["waiver_priority"],
            scoring_settings=json.loads(row["scoring_settings_json"]) if row["scoring_settings_json"] else {},
            roster_settings=json.loads(row["roster_settings_json"]) if row["roster_settings_json"] else {},
        )

    def _row_to_transaction(self, row: sqlite3.Row) -> Transaction:
        return Transaction(
            transaction_id=row["id"],
            league_id=row["league_id"],
            transaction_type=row["transaction_type"],
            week=row["week"],
            season=row["season"],
            status=row["status"],
            players_moved=json.loads(row["players_moved_json"]) if row["players_moved_json"] else {},
            metadata=json.loads(row["metadata_json"]) if row["metadata_json"] else {},
        )

    def _row_to_projection(self, row: sqlite3.Row) -> PlayerProjection:
        return PlayerProjection(
            player_id=row["player_id"],
            week=row["week"],
            season=row["season"],
            source=row["source"],
            projected_points=row["projected_points"],
            confidence=row["confidence"],
            stats=json.loads(row["stats_json"]) if row["stats_json"] else {},
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _row_to_recommendation(self, row: sqlite3.Row) -> StoredRecommendation:
        return StoredRecommendation(
            recommendation_id=row["id"],
            league_id=row["league_id"],
            week=row["week"],
            season=row["season"],
            player_id=row["player_id"],
            player_name=row["player_name"],
            position=row["position"],
            team=row["team"],
            opportunity_score=row["opportunity_score"],
            projected_points=row["projected_points"],
            recent_performance=row["recent_performance"],
            target_share=row["target_share"],
            snap_share=row["snap_share"],
            injury_impact=bool(row["injury_impact"]),
            positional_need=row["positional_need"],
            would_start_immediately=bool(row["would_start_immediately"]),
            bench_depth_score=row["bench_depth_score"],
            recommended_bid=row["recommended_bid"],
            min_bid=row["min_bid"],
            max_bid=row["max_bid"],
            median_historical_bid=row["median_historical_bid"],
            add_trend_percentage=row["add_trend_percentage"],
            priority_rank=row["priority_rank"],
            should_claim=bool(row["should_claim"]),
            suggested_drop_player_id=row["suggested_drop_player_id"],
            suggested_drop_player_name=row["suggested_drop_player_name"],
            drop_player_value=row["drop_player_value"],
            reasoning=row["reasoning"],
            confidence=row["confidence"],
            urgency=row["urgency"],
            status=row["status"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
            viewed_at=_parse_ts(row["viewed_at"]),
            claimed_at=_parse_ts(row["claimed_at"]),
        )
