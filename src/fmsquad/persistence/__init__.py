"""Persistence layer for imported players, snapshots and attributes."""

from __future__ import annotations

import json
import logging
import math
import os
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from fmsquad.models import PlayerRecord


logger = logging.getLogger(__name__)

DB_PATH_ENV = "FMSQUAD_DB_PATH"


@dataclass
class StoredPlayer:
    player_id: int
    name: str
    age: int
    positions: List[str]
    created_at: datetime
    snapshot_id: Optional[int] = None
    current_ability: Optional[int] = None
    potential_ability: Optional[int] = None
    import_date: Optional[datetime] = None
    attributes: List[dict] = field(default_factory=list)


@dataclass
class StoredSnapshot:
    snapshot_id: int
    player_id: int
    import_date: datetime
    current_ability: Optional[int] = None
    potential_ability: Optional[int] = None
    attributes: List[dict] = field(default_factory=list)


@dataclass
class SquadStats:
    total_players: int
    average_age: float
    average_current_ability: int


@dataclass
class ImportResult:
    total_players: int
    successful_imports: int = 0
    failed_imports: int = 0
    errors: List[str] = field(default_factory=list)
    players: List[StoredPlayer] = field(default_factory=list)


class SquadStore:
    """SQLite-backed store for imported squad data."""

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        env_db = os.getenv(DB_PATH_ENV)
        if env_db:
            if env_db.startswith("file:"):
                self.db_path: Path | str = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        elif isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                age INTEGER NOT NULL,
                positions_json TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS snapshots (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                player_id INTEGER NOT NULL REFERENCES players(id) ON DELETE CASCADE,
                current_ability INTEGER,
                potential_ability INTEGER,
                import_date TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS attributes (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                snapshot_id INTEGER NOT NULL REFERENCES snapshots(id) ON DELETE CASCADE,
                name TEXT NOT NULL,
                value INTEGER NOT NULL,
                category TEXT NOT NULL
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_snapshots_player ON snapshots(player_id)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_attributes_snapshot ON attributes(snapshot_id)")
        conn.commit()

    def save_player_record(
        self,
        record: PlayerRecord,
        *,
        imported_at: Optional[datetime] = None,
    ) -> StoredPlayer:
        """Upsert the player by name and attach a new snapshot of the record."""

        imported_at = imported_at or datetime.now(timezone.utc)
        now_iso = imported_at.isoformat()
        positions_json = json.dumps(list(record.positions))
        with self._connect() as conn:
            existing = conn.execute(
                "SELECT id FROM players WHERE name = ?",
                (record.name,),
            ).fetchone()
            if existing is None:
                cursor = conn.execute(
                    "INSERT INTO players (name, age, positions_json, created_at) VALUES (?, ?, ?, ?)",
                    (record.name, record.age, positions_json, now_iso),
                )
                player_id = int(cursor.lastrowid)
            else:
                player_id = int(existing["id"])
                conn.execute(
                    "UPDATE players SET age = ?, positions_json = ? WHERE id = ?",
                    (record.age, positions_json, player_id),
                )
            cursor = conn.execute(
                """
                INSERT INTO snapshots (player_id, current_ability, potential_ability, import_date)
                VALUES (?, ?, ?, ?)
                """,
                (
                    player_id,
                    record.current_ability or None,
                    record.potential_ability or None,
                    now_iso,
                ),
            )
            snapshot_id = int(cursor.lastrowid)
            conn.executemany(
                "INSERT INTO attributes (snapshot_id, name, value, category) VALUES (?, ?, ?, ?)",
                [(snapshot_id, attr.name, attr.value, attr.category) for attr in record.attributes],
            )
            conn.commit()

        stored = self.get_player(player_id)
        if stored is None:  # pragma: no cover
            raise KeyError(f"Player {player_id} not found after insert")
        return stored

    def import_records(self, records: Iterable[PlayerRecord]) -> ImportResult:
        records = list(records)
        result = ImportResult(total_players=len(records))
        imported_at = datetime.now(timezone.utc)
        for record in records:
            try:
                stored = self.save_player_record(record, imported_at=imported_at)
            except (sqlite3.Error, ValueError, OverflowError) as exc:
                logger.warning("Failed to import %s: %s", record.name, exc)
                result.failed_imports += 1
                result.errors.append(f"Failed to import {record.name}: {exc}")
                continue
            result.successful_imports += 1
            result.players.append(stored)
        logger.info(
            "Imported %s/%s players into %s",
            result.successful_imports,
            result.total_players,
            self.db_path,
        )
        return result

    def get_player(self, player_id: int) -> Optional[StoredPlayer]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM players WHERE id = ?", (player_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_player(conn, row)

    def list_players(self, limit: int = 100) -> List[StoredPlayer]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM players ORDER BY name COLLATE NOCASE LIMIT ?",
                (limit,),
            ).fetchall()
            return [self._row_to_player(conn, row) for row in rows]

    def list_snapshots(self, player_id: int) -> List[StoredSnapshot]:
        """Return every snapshot of a player, oldest first, with its attributes."""

        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM snapshots WHERE player_id = ? ORDER BY id",
                (player_id,),
            ).fetchall()
            return [self._row_to_snapshot(conn, row) for row in rows]

    def delete_snapshot(self, snapshot_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM snapshots WHERE id = ?", (snapshot_id,))
            conn.commit()
        return cursor.rowcount > 0

    def squad_stats(self) -> SquadStats:
        """Average age and current ability across players, using each latest snapshot.

        Players whose latest snapshot has no current ability count as 0.
        """

        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT
                    COUNT(*) AS total,
                    COALESCE(SUM(p.age), 0) AS age_sum,
                    COALESCE(SUM(COALESCE(s.current_ability, 0)), 0) AS ca_sum
                FROM players AS p
                LEFT JOIN snapshots AS s ON s.id = (
                    SELECT MAX(id) FROM snapshots WHERE player_id = p.id
                )
                """
            ).fetchone()
        total = int(row["total"])
        if not total:
            return SquadStats(total_players=0, average_age=0.0, average_current_ability=0)
        return SquadStats(
            total_players=total,
            average_age=math.floor(row["age_sum"] * 10 / total + 0.5) / 10,
            average_current_ability=math.floor(row["ca_sum"] / total + 0.5),
        )

    def delete_player(self, player_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM players WHERE id = ?", (player_id,))
            conn.commit()
        return cursor.rowcount > 0

    def _row_to_player(self, conn: sqlite3.Connection, row: sqlite3.Row) -> StoredPlayer:
        player = StoredPlayer(
            player_id=row["id"],
            name=row["name"],
            age=row["age"],
            positions=json.loads(row["positions_json"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
        snapshot = conn.execute(
            "SELECT * FROM snapshots WHERE player_id = ? ORDER BY id DESC LIMIT 1",
            (player.player_id,),
        ).fetchone()
        if snapshot is None:
            return player
        latest = self._row_to_snapshot(conn, snapshot)
        player.snapshot_id = latest.snapshot_id
        player.current_ability = latest.current_ability
        player.potential_ability = latest.potential_ability
        player.import_date = latest.import_date
        player.attributes = latest.attributes
        return player

    def _row_to_snapshot(self, conn: sqlite3.Connection, row: sqlite3.Row) -> StoredSnapshot:
        attribute_rows = conn.execute(
            "SELECT name, value, category FROM attributes WHERE snapshot_id = ? ORDER BY id",
            (row["id"],),
        ).fetchall()
        return StoredSnapshot(
            snapshot_id=row["id"],
            player_id=row["player_id"],
            import_date=datetime.fromisoformat(row["import_date"]),
            current_ability=row["current_ability"],
            potential_ability=row["potential_ability"],
            attributes=[
                {"name": attr["name"], "value": attr["value"], "category": attr["category"]}
                for attr in attribute_rows
            ],
        )
