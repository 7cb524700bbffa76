"""
Data Processors Module

Pure pipeline stages that turn player game logs into leaderboard rows.

Processors:
    - PlayerFilter / apply_filters: Position and name narrowing
    - aggregate_windows: Last-N-games totals with exact-count windows
    - detect_active_streaks: Active run detection and aggregation
    - rank_rows / paginate: Deterministic ordering and page slicing
"""

from streaks.processors.filters import PlayerFilter, apply_filters
from streaks.processors.recency_window import aggregate_windows, select_window
from streaks.processors.streak_detector import (
    DEFAULT_LOOKBACK,
    PredicateKind,
    StreakRun,
    detect_active_streaks,
    find_active_run,
    group_runs,
)
from streaks.processors.ranking import SortKey, paginate, rank_rows

__all__ = [
    "PlayerFilter",
    "apply_filters",
    "aggregate_windows",
    "select_window",
    "DEFAULT_LOOKBACK",
    "PredicateKind",
    "StreakRun",
    "detect_active_streaks",
    "find_active_run",
    "group_runs",
    "SortKey",
    "paginate",
    "rank_rows",
]
