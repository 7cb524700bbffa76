"""
Game Log Model

Per-game skater statistics and the per-player chronological log built
from them.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, field_validator

from .player import PlayerIdentity


def parse_toi_seconds(value: Any) -> int:
    """
    Convert a time-on-ice value to whole seconds.

    Accepts "MM:SS" (game log convention), "HH:MM:SS", integer seconds
    or a timedelta. Anything unparsable or negative counts as zero.

    Args:
        value: Raw time-on-ice value

    Returns:
        Non-negative seconds
    """
    if value is None:
        return 0
    if isinstance(value, timedelta):
        return max(int(value.total_seconds()), 0)
    if isinstance(value, (int, float)):
        return max(int(value), 0)

    text = str(value).strip()
    if not text:
        return 0

    try:
        parts = [int(p) for p in text.split(":")]
    except ValueError:
        logger.debug(f"Unparsable time on ice {text!r}, treating as 0")
        return 0

    if len(parts) == 1:
        seconds = parts[0]
    elif len(parts) == 2:
        seconds = parts[0] * 60 + parts[1]
    elif len(parts) == 3:
        seconds = parts[0] * 3600 + parts[1] * 60 + parts[2]
    else:
        logger.debug(f"Unparsable time on ice {text!r}, treating as 0")
        return 0
    return max(seconds, 0)


def format_toi(seconds: float) -> str:
    """Render seconds as HH:MM:SS, truncating fractional seconds."""
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


class GameRecord(BaseModel):
    """One player's statistics for one game."""

    model_config = ConfigDict(frozen=True)

    player_id: int | str
    game_date: date
    goals: int = 0
    assists: int = 0
    shots: int = 0
    time_on_ice: timedelta = timedelta(0)

    @field_validator("game_date", mode="before")
    @classmethod
    def _date_only(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value

    @field_validator("goals", "assists", "shots", mode="before")
    @classmethod
    def _clamp_count(cls, value: Any) -> int:
        # Source rows are not validated upstream
        try:
            count = int(value)
        except (TypeError, ValueError):
            return 0
        return max(count, 0)

    @field_validator("time_on_ice", mode="before")
    @classmethod
    def _parse_toi(cls, value: Any) -> timedelta:
        return timedelta(seconds=parse_toi_seconds(value))

    @property
    def points(self) -> int:
        """Goals plus assists."""
        return self.goals + self.assists

    @property
    def toi_seconds(self) -> int:
        """Time on ice in whole seconds."""
        return int(self.time_on_ice.total_seconds())


@dataclass
class PlayerGameLog:
    """A player's identity with their games in chronological order."""

    identity: PlayerIdentity
    games: list[GameRecord] = field(default_factory=list)

    @property
    def player_id(self) -> int | str:
        return self.identity.player_id

    def chronological(self) -> list[GameRecord]:
        """Games sorted oldest first; same-date games keep arrival order."""
        return sorted(self.games, key=lambda g: g.game_date)

    def most_recent(self, count: int) -> list[GameRecord]:
        """
        The ``count`` most recent games, oldest first.

        Args:
            count: Maximum number of games to keep

        Returns:
            Date-ascending slice ending at the player's latest game
        """
        if count <= 0:
            return []
        return self.chronological()[-count:]
