"""
Data Models Module

This module contains Pydantic models for representing streak tracker data.

Models:
    - PlayerIdentity: Roster identity with normalized position
    - GameRecord: One player's statistics for one game
    - PlayerGameLog: A player's identity paired with their games
    - AggregateRow: Leaderboard output row
"""

from streaks.models.player import (
    PlayerIdentity,
    PlayerPosition,
    normalize_position,
    source_spellings,
)
from streaks.models.game_log import (
    GameRecord,
    PlayerGameLog,
    format_toi,
    parse_toi_seconds,
)
from streaks.models.aggregate import AggregateRow, STAT_FIELDS

__all__ = [
    "PlayerIdentity",
    "PlayerPosition",
    "normalize_position",
    "source_spellings",
    "GameRecord",
    "PlayerGameLog",
    "format_toi",
    "parse_toi_seconds",
    "AggregateRow",
    "STAT_FIELDS",
]
