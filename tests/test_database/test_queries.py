"""
Tests for the Game Log Store

Tests for the SQLite handle, snapshot queries and CSV import.
"""

import sqlite3
from datetime import date, timedelta

import pytest

from streaks.database import Database, fetch_games, import_csv, iter_games
from streaks.models.game_log import GameRecord
from streaks.processors.filters import PlayerFilter


def _games(player_id, goals, start=date(2024, 1, 1), assists=None):
    assists = assists or [0] * len(goals)
    return [
        GameRecord(
            player_id=player_id,
            game_date=start + timedelta(days=i),
            goals=g,
            assists=a,
            shots=2,
            time_on_ice="17:30",
        )
        for i, (g, a) in enumerate(zip(goals, assists))
    ]


@pytest.fixture
def populated_db(temp_db_path, sample_players_rows) -> Database:
    """Database with four players and their game logs."""
    db = Database(temp_db_path)
    db.initialize()
    db.insert_players(sample_players_rows)
    # Inserted newest first to check ordering does not rely on arrival
    db.insert_game_logs(list(reversed(_games(8477946, [1, 0, 1, 1, 2], assists=[0, 1, 0, 1, 0]))))
    db.insert_game_logs(_games(8478402, [2, 1, 1, 0], assists=[1, 1, 0, 2]))
    db.insert_game_logs(_games(8480069, [0, 0, 1], assists=[1, 2, 0]))
    db.insert_game_logs(_games(8478550, [1, 1], assists=[0, 1]))
    return db


class TestDatabase:
    """Tests for the Database handle."""

    def test_initialize(self, temp_db_path):
        """Test schema creation and detection."""
        db = Database(temp_db_path)
        assert db.is_initialized() is False

        db.initialize()
        assert db.is_initialized() is True

    def test_duplicate_game_is_ignored(self, populated_db):
        """Test a second record for the same player and date is not stored."""
        stored = populated_db.insert_game_logs(_games(8478550, [5]))
        assert stored == 0

        stats = populated_db.get_database_stats()
        assert stats["total_players"] == 4
        assert stats["total_game_logs"] == 14
        assert stats["first_game_date"] == "2024-01-01"
        assert stats["last_game_date"] == "2024-01-05"

    def test_positions_stored_as_given(self, populated_db):
        """Test mixed source encodings are kept in the table."""
        assert populated_db.get_player(8477946)["position"] == "Center"
        assert populated_db.get_player(8478402)["position"] == "C"
        assert populated_db.get_player(1) is None

    def test_connection_released(self, populated_db):
        """Test each block closes its connection."""
        with populated_db.connect() as conn:
            conn.execute("SELECT 1")
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")


class TestFetchGames:
    """Tests for snapshot queries."""

    def test_snapshot_ordering(self, populated_db):
        """Test players by id and games oldest first."""
        logs = fetch_games(populated_db)

        assert [log.player_id for log in logs] == [8477946, 8478402, 8478550, 8480069]
        larkin = logs[0]
        assert [g.goals for g in larkin.games] == [1, 0, 1, 1, 2]
        assert larkin.identity.position == "C"
        assert larkin.games[0].toi_seconds == 17 * 60 + 30

    def test_per_player_limit(self, populated_db):
        """Test the row limit keeps each player's most recent games."""
        logs = fetch_games(populated_db, per_player_limit=2)

        assert all(len(log.games) <= 2 for log in logs)
        assert [g.goals for g in logs[0].games] == [1, 2]

    @pytest.mark.parametrize("token", ["C", "center", "CENTER"])
    def test_position_pushdown_matches_mixed_encodings(self, populated_db, token):
        """Test 'C' and 'Center' rows are both found."""
        logs = fetch_games(populated_db, PlayerFilter(position=token))
        assert [log.player_id for log in logs] == [8477946, 8478402]

    def test_word_position_pushdown(self, populated_db):
        """Test a code request finds rows stored as full words."""
        logs = fetch_games(populated_db, PlayerFilter(position="L"))
        assert [log.player_id for log in logs] == [8478550]

    def test_unknown_position_returns_nothing(self, populated_db):
        """Test unrecognized tokens fail closed."""
        assert fetch_games(populated_db, PlayerFilter(position="G")) == []

    def test_name_pushdown(self, populated_db):
        """Test case-insensitive name search in SQL."""
        logs = fetch_games(populated_db, PlayerFilter(name_query="LARK"))
        assert [log.player_id for log in logs] == [8477946]

    def test_iter_games_streams_complete_players(self, populated_db):
        """Test each yielded player already holds all of their games."""
        counts = {log.player_id: len(log.games) for log in iter_games(populated_db)}
        assert counts == {8477946: 5, 8478402: 4, 8478550: 2, 8480069: 3}

    def test_iter_games_early_close(self, populated_db):
        """Test abandoning the stream releases the connection."""
        stream = iter_games(populated_db)
        first = next(stream)
        stream.close()
        assert first.player_id == 8477946


class TestImportCsv:
    """Tests for CSV import."""

    def test_import(self, temp_db_path, tmp_path):
        """Test players and games load from CSV files."""
        players_csv = tmp_path / "players.csv"
        players_csv.write_text(
            "player_id,first_name,last_name,team_abbrev,position\n"
            "8477946,Dylan,Larkin,DET,Center\n"
        )
        games_csv = tmp_path / "games.csv"
        games_csv.write_text(
            "player_id,game_date,goals,assists,shots,toi\n"
            "8477946,2024-01-01,1,0,3,19:45\n"
            "8477946,2024-01-02,-1,1,2,20:15\n"
            "8477946,2024-01-02,3,3,3,20:15\n"
        )

        db = Database(temp_db_path)
        counts = import_csv(db, players_csv, games_csv)

        assert counts == {"players": 1, "game_logs": 2}
        logs = fetch_games(db)
        assert [g.goals for g in logs[0].games] == [1, 0]

    def test_missing_columns(self, temp_db_path, tmp_path):
        """Test a CSV without required columns is rejected."""
        players_csv = tmp_path / "players.csv"
        players_csv.write_text("player_id,first_name\n1,A\n")
        games_csv = tmp_path / "games.csv"
        games_csv.write_text("player_id,game_date,goals,assists,shots,toi\n")

        with pytest.raises(ValueError, match="missing columns"):
            import_csv(Database(temp_db_path), players_csv, games_csv)

    def test_unknown_player_rejected_before_writing(self, temp_db_path, tmp_path):
        """Test games for players missing from both CSV and store leave the store untouched."""
        players_csv = tmp_path / "players.csv"
        players_csv.write_text(
            "player_id,first_name,last_name,team_abbrev,position\n"
            "1,Dylan,Larkin,DET,C\n"
        )
        games_csv = tmp_path / "games.csv"
        games_csv.write_text(
            "player_id,game_date,goals,assists,shots,toi\n"
            "1,2024-01-01,1,0,3,19:45\n"
            "2,2024-01-01,0,1,2,18:00\n"
        )

        db = Database(temp_db_path)
        with pytest.raises(ValueError, match="unknown players: 2"):
            import_csv(db, players_csv, games_csv)

        stats = db.get_database_stats()
        assert stats["total_players"] == 0
        assert stats["total_game_logs"] == 0

    def test_games_for_stored_players(self, populated_db, tmp_path):
        """Test a games-only import may reference players already in the store."""
        players_csv = tmp_path / "players.csv"
        players_csv.write_text("player_id,first_name,last_name,team_abbrev,position\n")
        games_csv = tmp_path / "games.csv"
        games_csv.write_text(
            "player_id,game_date,goals,assists,shots,toi\n"
            "8478550,2024-01-09,2,0,4,16:10\n"
        )

        assert import_csv(populated_db, players_csv, games_csv) == {"players": 0, "game_logs": 1}
