"""
Pytest Configuration and Fixtures

Shared fixtures and configuration for the streak tracker test suite.
"""

from datetime import date, timedelta
from pathlib import Path
from typing import Any, Callable

import pytest

from streaks.models.game_log import GameRecord, PlayerGameLog
from streaks.models.player import PlayerIdentity


def build_log(
    player_id: int,
    goals: list[int],
    assists: list[int] | None = None,
    shots: list[int] | None = None,
    first_name: str = "Test",
    last_name: str = "Player",
    position: str = "C",
    team_abbrev: str = "DET",
    start: date = date(2024, 1, 1),
    day_step: int = 1,
    toi: str = "18:00",
) -> PlayerGameLog:
    """Build a player log with one game per ``day_step`` days, oldest first."""
    assists = assists if assists is not None else [0] * len(goals)
    shots = shots if shots is not None else [2] * len(goals)
    identity = PlayerIdentity(
        player_id=player_id,
        first_name=first_name,
        last_name=last_name,
        team_abbrev=team_abbrev,
        position=position,
    )
    games = [
        GameRecord(
            player_id=player_id,
            game_date=start + timedelta(days=i * day_step),
            goals=g,
            assists=a,
            shots=s,
            time_on_ice=toi,
        )
        for i, (g, a, s) in enumerate(zip(goals, assists, shots))
    ]
    return PlayerGameLog(identity=identity, games=games)


@pytest.fixture
def make_log() -> Callable[..., PlayerGameLog]:
    """Factory for player game logs."""
    return build_log


@pytest.fixture
def sample_logs() -> list[PlayerGameLog]:
    """A small roster with a mix of active and broken streaks."""
    return [
        # Goal streak of 3 at the end
        build_log(8477946, [1, 0, 1, 1, 2], assists=[0, 1, 0, 1, 0],
                  first_name="Dylan", last_name="Larkin", position="Center"),
        # Latest game has no goal, but an assist
        build_log(8478402, [2, 1, 1, 0], assists=[1, 1, 0, 2],
                  first_name="Connor", last_name="McDavid", position="C", team_abbrev="EDM"),
        # Goal streak of 3
        build_log(8479318, [0, 1, 1, 1], assists=[0, 0, 0, 0],
                  first_name="Auston", last_name="Matthews", position="C", team_abbrev="TOR"),
        # Defenseman, points in every game
        build_log(8480069, [0, 0, 1], assists=[1, 2, 0],
                  first_name="Cale", last_name="Makar", position="Defense", team_abbrev="COL"),
        # Left wing, only two games
        build_log(8478550, [1, 1], assists=[0, 1],
                  first_name="Artemi", last_name="Panarin", position="L", team_abbrev="NYR"),
    ]


@pytest.fixture
def sample_players_rows() -> list[dict[str, Any]]:
    """Raw identity rows with the mixed position encodings seen at the source."""
    return [
        {"player_id": 8477946, "first_name": "Dylan", "last_name": "Larkin",
         "team_abbrev": "DET", "position": "Center"},
        {"player_id": 8478402, "first_name": "Connor", "last_name": "McDavid",
         "team_abbrev": "EDM", "position": "C"},
        {"player_id": 8480069, "first_name": "Cale", "last_name": "Makar",
         "team_abbrev": "COL", "position": "Defense"},
        {"player_id": 8478550, "first_name": "Artemi", "last_name": "Panarin",
         "team_abbrev": "NYR", "position": "Left Wing"},
    ]


@pytest.fixture
def sample_schedule() -> dict[str, Any]:
    """Trimmed /v1/schedule/now payload."""
    return {
        "gameWeek": [
            {
                "date": "2024-01-05",
                "games": [
                    {
                        "id": 2023020601,
                        "startTimeUTC": "2024-01-06T00:00:00Z",
                        "awayTeam": {"abbrev": "DET"},
                        "homeTeam": {"abbrev": "TOR"},
                    },
                ],
            },
            {
                "date": "2024-01-06",
                "games": [
                    {
                        "id": 2023020615,
                        "startTimeUTC": "2024-01-07T03:00:00Z",
                        "awayTeam": {"abbrev": "COL"},
                        "homeTeam": {"abbrev": "EDM"},
                    },
                    {
                        "id": 2023020616,
                        "startTimeUTC": "2024-01-07T00:00:00Z",
                        "awayTeam": {"abbrev": "TOR"},
                        "homeTeam": {"abbrev": "DET"},
                    },
                ],
            },
        ]
    }


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Path for a throwaway SQLite database."""
    return tmp_path / "data" / "streaks.db"
