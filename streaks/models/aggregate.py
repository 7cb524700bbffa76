"""
Aggregate Row Model

Output row shared by recency-window and active-streak leaderboards.
"""

from datetime import date
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict

from .game_log import GameRecord, format_toi
from .player import PlayerIdentity

# Sortable stat name -> AggregateRow attribute
STAT_FIELDS: dict[str, str] = {
    "goals": "total_goals",
    "assists": "total_assists",
    "points": "total_points",
    "shots": "total_shots",
}


class AggregateRow(BaseModel):
    """Totals for one player over a window or an active streak."""

    model_config = ConfigDict(frozen=True)

    player_id: int | str
    first_name: str = ""
    last_name: str = ""
    team_abbrev: str = ""
    position: str = ""

    games_played: int = 0
    streak_length: int | None = None

    total_goals: int = 0
    total_assists: int = 0
    total_points: int = 0
    total_shots: int = 0
    avg_toi_seconds: float = 0.0

    streak_start: date | None = None
    streak_end: date | None = None

    @classmethod
    def from_games(
        cls,
        identity: PlayerIdentity,
        games: Sequence[GameRecord],
        streak: bool = False,
    ) -> "AggregateRow":
        """
        Aggregate a slice of games for one player.

        Args:
            identity: Player the games belong to
            games: Date-ascending games to total
            streak: Fill streak_length/start/end from the slice

        Returns:
            AggregateRow with summed counts and mean time on ice
        """
        count = len(games)
        goals = sum(g.goals for g in games)
        assists = sum(g.assists for g in games)
        avg_toi = sum(g.toi_seconds for g in games) / count if count else 0.0

        return cls(
            player_id=identity.player_id,
            first_name=identity.first_name,
            last_name=identity.last_name,
            team_abbrev=identity.team_abbrev,
            position=identity.position,
            games_played=count,
            streak_length=count if streak else None,
            total_goals=goals,
            total_assists=assists,
            total_points=goals + assists,
            total_shots=sum(g.shots for g in games),
            avg_toi_seconds=avg_toi,
            streak_start=games[0].game_date if streak and games else None,
            streak_end=games[-1].game_date if streak and games else None,
        )

    @property
    def avg_toi(self) -> str:
        """Average time on ice as HH:MM:SS."""
        return format_toi(self.avg_toi_seconds)

    def stat(self, name: str) -> int:
        """Total for a sortable stat name (goals, assists, points, shots)."""
        return getattr(self, STAT_FIELDS[name])

    def to_record(self) -> dict[str, Any]:
        """Serialize with the field names the presentation layer reads."""
        return {
            "id": str(self.player_id),
            "first_name": self.first_name,
            "last_name": self.last_name,
            "team_abbrev": self.team_abbrev,
            "position": self.position,
            "games_played": self.games_played,
            "streak_length": self.streak_length,
            "total_goals": self.total_goals,
            "total_assists": self.total_assists,
            "total_points": self.total_points,
            "total_shots": self.total_shots,
            "avg_toi": self.avg_toi,
            "streak_start": self.streak_start.isoformat() if self.streak_start else None,
            "streak_end": self.streak_end.isoformat() if self.streak_end else None,
        }
