"""
Recency Window Aggregator

Totals each player's N most recent games ("last N") and drops anyone
without a full window.
"""

from typing import Iterable

from loguru import logger

from ..models.aggregate import AggregateRow
from ..models.game_log import GameRecord, PlayerGameLog


def select_window(log: PlayerGameLog, window_size: int) -> list[GameRecord] | None:
    """
    Pick exactly ``window_size`` most recent games for one player.

    Games are ranked by date descending (rank 1 = most recent) and ranks
    above the window are discarded. Date gaps between the games do not
    matter, only the count does.

    Returns:
        Date-ascending window, or None when fewer games exist
    """
    ranked = list(reversed(log.chronological()))
    window = [game for rank, game in enumerate(ranked, start=1) if rank <= window_size]
    if len(window) != window_size:
        return None
    window.reverse()
    return window


def aggregate_windows(
    logs: Iterable[PlayerGameLog],
    window_size: int,
) -> list[AggregateRow]:
    """
    Aggregate the last ``window_size`` games for every player.

    Args:
        logs: Filtered player game logs
        window_size: Number of most recent games per player

    Returns:
        One row per qualifying player, in input order
    """
    rows: list[AggregateRow] = []
    skipped = 0

    for log in logs:
        window = select_window(log, window_size)
        if window is None:
            skipped += 1
            continue
        rows.append(AggregateRow.from_games(log.identity, window))

    logger.debug(
        f"Last {window_size} games: {len(rows)} players aggregated, "
        f"{skipped} with a partial window excluded"
    )
    return rows
