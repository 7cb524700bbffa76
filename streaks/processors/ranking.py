"""
Ranking & Pagination Stage

Deterministic leaderboard ordering and page slicing.
"""

from enum import Enum
from typing import Sequence

from ..models.aggregate import AggregateRow


class SortKey(str, Enum):
    """Caller-selectable leaderboard stat."""

    GOALS = "goals"
    ASSISTS = "assists"
    POINTS = "points"
    SHOTS = "shots"


def rank_rows(
    rows: Sequence[AggregateRow],
    sort_key: SortKey,
    by_streak_length: bool = False,
) -> list[AggregateRow]:
    """
    Order rows best first.

    Streak leaderboards sort by streak length and then the selected stat;
    window leaderboards sort by the selected stat alone. Both keys are
    descending. ``sorted`` is stable, so rows tied on every key keep the
    order they arrived in.

    Args:
        rows: Unsorted aggregate rows
        sort_key: Stat used as the tie-break (or sole key)
        by_streak_length: Use streak length as the primary key

    Returns:
        New sorted list
    """
    stat = SortKey(sort_key).value

    if by_streak_length:
        return sorted(rows, key=lambda row: (-(row.streak_length or 0), -row.stat(stat)))
    return sorted(rows, key=lambda row: -row.stat(stat))


def paginate(rows: Sequence[AggregateRow], page: int, limit: int) -> list[AggregateRow]:
    """
    Slice one page out of sorted rows.

    No total count is returned; a short page means there is no more data.

    Args:
        rows: Sorted rows
        page: 1-based page number
        limit: Page size

    Returns:
        At most ``limit`` rows starting at ``(page - 1) * limit``
    """
    offset = (page - 1) * limit
    return list(rows[offset:offset + limit])
