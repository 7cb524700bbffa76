"""CSV import of player identities and game logs into the store."""

import csv
from pathlib import Path

from loguru import logger

from ..models.game_log import GameRecord
from .db import Database

PLAYER_COLUMNS = ("player_id", "first_name", "last_name", "team_abbrev", "position")
GAME_COLUMNS = ("player_id", "game_date", "goals", "assists", "shots", "toi")


def _check_columns(path: Path, header: list[str] | None, required: tuple[str, ...]) -> None:
    missing = [c for c in required if c not in (header or [])]
    if missing:
        raise ValueError(f"{path} is missing columns: {', '.join(missing)}")


def import_csv(db: Database, players_csv: str | Path, games_csv: str | Path) -> dict[str, int]:
    """
    Load players and their game logs from CSV files.

    Players are written first so game rows can reference them. Game rows
    already stored for the same player and date are skipped.

    Args:
        db: Database handle (initialized if needed)
        players_csv: CSV with player_id, first_name, last_name, team_abbrev, position
        games_csv: CSV with player_id, game_date, goals, assists, shots, toi

    Returns:
        Counts of players written and new game rows stored

    Raises:
        ValueError: If a CSV lacks required columns or a game row names a
            player in neither players_csv nor the store. Nothing is written.
    """
    players_path = Path(players_csv)
    games_path = Path(games_csv)

    if not db.is_initialized():
        db.initialize()

    with open(players_path, newline="") as f:
        reader = csv.DictReader(f)
        _check_columns(players_path, reader.fieldnames, PLAYER_COLUMNS)
        players = [{k: row[k] for k in PLAYER_COLUMNS} for row in reader]

    with open(games_path, newline="") as f:
        reader = csv.DictReader(f)
        _check_columns(games_path, reader.fieldnames, GAME_COLUMNS)
        games = [
            GameRecord(
                player_id=int(row["player_id"]),
                game_date=row["game_date"],
                goals=row["goals"],
                assists=row["assists"],
                shots=row["shots"],
                time_on_ice=row["toi"],
            )
            for row in reader
        ]

    roster = {int(p["player_id"]) for p in players}
    unknown = sorted(
        pid
        for pid in {g.player_id for g in games} - roster
        if db.get_player(pid) is None
    )
    if unknown:
        raise ValueError(
            f"{games_path} has game rows for unknown players: {', '.join(map(str, unknown))}"
        )

    written_players = db.insert_players(players)
    stored_games = db.insert_game_logs(games)

    logger.info(
        f"Imported {written_players} players and {stored_games} game logs "
        f"({len(games) - stored_games} duplicates skipped)"
    )
    return {"players": written_players, "game_logs": stored_games}
