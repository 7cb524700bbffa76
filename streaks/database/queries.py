"""Event log queries: player game logs paired with identities."""

from typing import Any, Iterator, Optional

from ..models.game_log import GameRecord, PlayerGameLog
from ..models.player import PlayerIdentity, source_spellings
from ..processors.filters import PlayerFilter
from .db import Database

_GAMES_SQL = """
    WITH ranked AS (
        SELECT
            pgl.log_id,
            pgl.player_id,
            pgl.game_date,
            pgl.goals,
            pgl.assists,
            pgl.shots,
            pgl.toi,
            ROW_NUMBER() OVER (
                PARTITION BY pgl.player_id
                ORDER BY pgl.game_date DESC, pgl.log_id DESC
            ) AS row_num
        FROM player_game_logs pgl
    )
    SELECT
        p.player_id,
        p.first_name,
        p.last_name,
        p.team_abbrev,
        p.position,
        r.game_date,
        r.goals,
        r.assists,
        r.shots,
        r.toi
    FROM ranked r
    JOIN players p ON r.player_id = p.player_id
    WHERE 1 = 1
    {conditions}
    ORDER BY p.player_id, r.game_date, r.log_id
"""


def _build_conditions(
    player_filter: Optional[PlayerFilter],
    per_player_limit: Optional[int],
) -> tuple[str, list[Any]]:
    """Translate a filter and row limit into SQL conditions and params."""
    clauses: list[str] = []
    params: list[Any] = []

    if per_player_limit is not None:
        clauses.append("AND r.row_num <= ?")
        params.append(per_player_limit)

    if player_filter is not None:
        code = player_filter.position_code
        if code is not None:
            spellings = source_spellings(code)
            if spellings is None:
                clauses.append("AND TRIM(p.position) = ?")
                params.append(code)
            else:
                placeholders = ", ".join("?" for _ in spellings)
                clauses.append(f"AND UPPER(TRIM(p.position)) IN ({placeholders})")
                params.extend(spellings)

        # SQLite only folds ASCII case; other terms are left to the engine
        term = player_filter.search_term
        if term is not None and term.isascii():
            clauses.append("AND (LOWER(p.first_name) LIKE ? OR LOWER(p.last_name) LIKE ?)")
            params.extend([f"%{term}%", f"%{term}%"])

    return "\n    ".join(clauses), params


def iter_games(
    db: Database,
    player_filter: Optional[PlayerFilter] = None,
    per_player_limit: Optional[int] = None,
) -> Iterator[PlayerGameLog]:
    """
    Stream player game logs from the store.

    Rows are read in (player, date, arrival) order and a player's log is
    yielded only once all of their rows have been read. The connection is
    held until the iterator is exhausted or closed.

    Args:
        db: Database handle
        player_filter: Optional position/name restriction pushed into SQL
        per_player_limit: Keep only each player's N most recent games

    Yields:
        PlayerGameLog per player, games oldest first
    """
    conditions, params = _build_conditions(player_filter, per_player_limit)
    sql = _GAMES_SQL.format(conditions=conditions)

    with db.cursor() as cur:
        cur.execute(sql, params)

        current: Optional[PlayerGameLog] = None
        for row in cur:
            if current is None or current.player_id != row["player_id"]:
                if current is not None:
                    yield current
                current = PlayerGameLog(
                    identity=PlayerIdentity(
                        player_id=row["player_id"],
                        first_name=row["first_name"],
                        last_name=row["last_name"],
                        team_abbrev=row["team_abbrev"],
                        position=row["position"],
                    )
                )
            current.games.append(
                GameRecord(
                    player_id=row["player_id"],
                    game_date=row["game_date"],
                    goals=row["goals"],
                    assists=row["assists"],
                    shots=row["shots"],
                    time_on_ice=row["toi"],
                )
            )

        if current is not None:
            yield current


def fetch_games(
    db: Database,
    player_filter: Optional[PlayerFilter] = None,
    per_player_limit: Optional[int] = None,
) -> list[PlayerGameLog]:
    """Bulk form of :func:`iter_games`, one consistent snapshot."""
    return list(iter_games(db, player_filter, per_player_limit))
