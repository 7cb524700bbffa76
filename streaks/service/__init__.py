"""
Service Module

Engine entry points and the database-backed leaderboard service.
"""

from streaks.service.engine import (
    RECENCY_WINDOWS,
    aggregate_active_streak,
    aggregate_recency,
)
from streaks.service.leaderboard import (
    STREAK_FILTERS,
    LeaderboardRequest,
    LeaderboardService,
)

__all__ = [
    "RECENCY_WINDOWS",
    "aggregate_active_streak",
    "aggregate_recency",
    "STREAK_FILTERS",
    "LeaderboardRequest",
    "LeaderboardService",
]
