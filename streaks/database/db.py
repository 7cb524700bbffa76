"""Database handle and write helpers for the player game log store."""

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Generator, Iterable, Optional

from loguru import logger

from ..models.game_log import GameRecord, format_toi
from ..models.player import PlayerIdentity

# Default database path
DEFAULT_DB_PATH = Path("data") / "streaks.db"
SCHEMA_PATH = Path(__file__).parent / "schema.sql"


class Database:
    """
    SQLite handle for player identities and game logs.

    The handle holds no open connection. Each ``connect()`` block acquires
    its own connection and releases it on exit, so one handle can be
    passed to concurrent requests.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize the handle.

        Args:
            db_path: Path to SQLite database file. Defaults to data/streaks.db
        """
        self.db_path = Path(db_path) if db_path is not None else DEFAULT_DB_PATH

    def exists(self) -> bool:
        """Check if the database file is present."""
        return self.db_path.exists()

    @contextmanager
    def connect(self) -> Generator[sqlite3.Connection, None, None]:
        """Acquire a connection for the duration of the block."""
        connection = sqlite3.connect(str(self.db_path))
        try:
            connection.row_factory = sqlite3.Row
            connection.execute("PRAGMA foreign_keys = ON")
            yield connection
        finally:
            connection.close()

    @contextmanager
    def cursor(self) -> Generator[sqlite3.Cursor, None, None]:
        """Cursor on a scoped connection with commit on success."""
        with self.connect() as connection:
            cur = connection.cursor()
            try:
                yield cur
                connection.commit()
            except Exception:
                connection.rollback()
                raise
            finally:
                cur.close()

    def initialize(self) -> None:
        """Create the schema from schema.sql."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        schema_sql = SCHEMA_PATH.read_text()
        with self.cursor() as cur:
            cur.executescript(schema_sql)
        logger.info(f"Initialized database at {self.db_path}")

    def is_initialized(self) -> bool:
        """Check if database has been initialized with schema."""
        if not self.exists():
            return False
        with self.cursor() as cur:
            cur.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='player_game_logs'"
            )
            return cur.fetchone() is not None

    # -------------------------------------------------------------------------
    # Player operations
    # -------------------------------------------------------------------------

    def insert_players(self, players: Iterable[PlayerIdentity | dict[str, Any]]) -> int:
        """Insert or update player identity rows.

        Position is stored as given so that mixed source encodings survive.

        Args:
            players: PlayerIdentity models or raw row dictionaries

        Returns:
            Number of rows written
        """
        now = datetime.now().isoformat()
        rows = []
        for player in players:
            data = player.model_dump() if isinstance(player, PlayerIdentity) else player
            rows.append(
                (
                    data.get("player_id"),
                    data.get("first_name") or "",
                    data.get("last_name") or "",
                    data.get("team_abbrev") or "",
                    data.get("position") or "",
                    now,
                )
            )

        with self.cursor() as cur:
            cur.executemany(
                """
                INSERT INTO players (
                    player_id, first_name, last_name, team_abbrev, position, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(player_id) DO UPDATE SET
                    first_name = excluded.first_name,
                    last_name = excluded.last_name,
                    team_abbrev = excluded.team_abbrev,
                    position = excluded.position,
                    updated_at = excluded.updated_at
                """,
                rows,
            )
        return len(rows)

    def get_player(self, player_id: int) -> Optional[dict[str, Any]]:
        """Get a player row by ID, or None if not found."""
        with self.cursor() as cur:
            cur.execute("SELECT * FROM players WHERE player_id = ?", (player_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    # -------------------------------------------------------------------------
    # Game log operations
    # -------------------------------------------------------------------------

    def insert_game_logs(self, records: Iterable[GameRecord]) -> int:
        """Append game records.

        Game records are immutable: a second record for the same player
        and date is ignored.

        Returns:
            Number of new rows stored
        """
        rows = [
            (
                r.player_id,
                r.game_date.isoformat(),
                r.goals,
                r.assists,
                r.shots,
                format_toi(r.toi_seconds),
            )
            for r in records
        ]
        with self.cursor() as cur:
            before = cur.connection.total_changes
            cur.executemany(
                """
                INSERT INTO player_game_logs (
                    player_id, game_date, goals, assists, shots, toi
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(player_id, game_date) DO NOTHING
                """,
                rows,
            )
            return cur.connection.total_changes - before

    # -------------------------------------------------------------------------
    # Statistics and summaries
    # -------------------------------------------------------------------------

    def get_database_stats(self) -> dict[str, Any]:
        """Get summary counts about database contents."""
        with self.cursor() as cur:
            cur.execute("SELECT COUNT(*) as count FROM players")
            total_players = cur.fetchone()["count"]

            cur.execute("SELECT COUNT(*) as count FROM player_game_logs")
            total_logs = cur.fetchone()["count"]

            cur.execute(
                "SELECT MIN(game_date) as first, MAX(game_date) as last FROM player_game_logs"
            )
            span = cur.fetchone()

            return {
                "total_players": total_players,
                "total_game_logs": total_logs,
                "first_game_date": span["first"],
                "last_game_date": span["last"],
            }
