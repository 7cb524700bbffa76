"""
Streak & Recency Engine

Entry points for the two leaderboard modes. Both take an in-memory
snapshot of player game logs, so they hold no state and need no storage
access; callers fetch the snapshot first.

Pipeline: filter -> aggregate (window or active streak) -> rank -> page.
"""

from typing import Iterable

from loguru import logger

from diagnostics import diag

from ..errors import InvalidParameterError
from ..models.aggregate import AggregateRow
from ..models.game_log import PlayerGameLog
from ..processors.filters import PlayerFilter, apply_filters
from ..processors.ranking import SortKey, paginate, rank_rows
from ..processors.recency_window import aggregate_windows
from ..processors.streak_detector import (
    DEFAULT_LOOKBACK,
    PredicateKind,
    detect_active_streaks,
)

RECENCY_WINDOWS: tuple[int, ...] = (3, 5, 10)

# Accepted as "use the mode's default sort"
DEFAULT_SORT_TOKEN = "streak_length"


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _rank_events(key: SortKey, page: int, limit: int, page_rows: list[AggregateRow]) -> None:
    diag.event("RANK", {"page": page, "returned": len(page_rows)})
    diag.event("RANK", {"sort_key": key.value, "offset": (page - 1) * limit}, level="normal")
    diag.event(
        "RANK",
        {"rows": [(row.player_id, row.streak_length, row.stat(key.value)) for row in page_rows]},
        level="verbose",
    )


def validate_page(page: int, limit: int, max_limit: int | None = None) -> None:
    """Reject non-positive pages and out-of-range limits."""
    if not _is_int(page) or page < 1:
        raise InvalidParameterError("page", page, "must be an integer >= 1")
    if not _is_int(limit) or limit < 1:
        raise InvalidParameterError("limit", limit, "must be an integer >= 1")
    if max_limit is not None and limit > max_limit:
        raise InvalidParameterError("limit", limit, f"must be <= {max_limit}")


def resolve_sort_key(value: SortKey | str | None, default: SortKey) -> SortKey:
    """
    Turn a caller sort token into a SortKey.

    None and "streak_length" select the mode default.
    """
    if value is None:
        return default
    if isinstance(value, SortKey):
        return value
    token = str(value).strip().lower()
    if not token or token == DEFAULT_SORT_TOKEN:
        return default
    try:
        return SortKey(token)
    except ValueError:
        allowed = ", ".join(k.value for k in SortKey)
        raise InvalidParameterError(
            "sort_key", value, f"expected one of {allowed} or {DEFAULT_SORT_TOKEN}"
        ) from None


def resolve_predicate(value: PredicateKind | str) -> PredicateKind:
    """Turn a caller predicate token into a PredicateKind."""
    if isinstance(value, PredicateKind):
        return value
    try:
        return PredicateKind(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(k.value for k in PredicateKind)
        raise InvalidParameterError(
            "predicate_kind", value, f"expected one of {allowed}"
        ) from None


def aggregate_recency(
    players: Iterable[PlayerGameLog],
    window_size: int,
    sort_key: SortKey | str | None = None,
    page: int = 1,
    limit: int = 25,
    player_filter: PlayerFilter | None = None,
    allowed_windows: tuple[int, ...] = RECENCY_WINDOWS,
    max_limit: int | None = None,
) -> list[AggregateRow]:
    """
    Build one page of the "last N games" leaderboard.

    Only players with at least ``window_size`` games appear, each totalled
    over exactly their ``window_size`` most recent games. Rows are ordered
    by the selected stat (points by default), descending.

    Args:
        players: Snapshot of player game logs
        window_size: N, one of ``allowed_windows``
        sort_key: goals, assists, points or shots
        page: 1-based page number
        limit: Page size
        player_filter: Optional position/name restriction
        allowed_windows: Accepted window sizes
        max_limit: Largest accepted page size

    Returns:
        Sorted page of AggregateRow

    Raises:
        InvalidParameterError: If any parameter is out of range
    """
    if not _is_int(window_size) or window_size not in allowed_windows:
        raise InvalidParameterError(
            "window_size", window_size, f"expected one of {list(allowed_windows)}"
        )
    validate_page(page, limit, max_limit)
    key = resolve_sort_key(sort_key, SortKey.POINTS)

    with diag.timer("FILTER"):
        logs = apply_filters(players, player_filter)
    diag.event("FILTER", {"players": len(logs)})

    with diag.timer("AGGREGATE"):
        rows = aggregate_windows(logs, window_size)
    diag.event("AGGREGATE", {"rows": len(rows), "window_size": window_size})
    diag.event("AGGREGATE", {"qualified": [row.player_id for row in rows]}, level="normal")

    with diag.timer("RANK"):
        page_rows = paginate(rank_rows(rows, key), page, limit)
    _rank_events(key, page, limit, page_rows)

    logger.debug(
        f"Last {window_size} leaderboard sorted by {key.value}: "
        f"page {page} has {len(page_rows)} rows"
    )
    return page_rows


def aggregate_active_streak(
    players: Iterable[PlayerGameLog],
    predicate_kind: PredicateKind | str,
    lookback: int = DEFAULT_LOOKBACK,
    sort_key: SortKey | str | None = None,
    page: int = 1,
    limit: int = 25,
    player_filter: PlayerFilter | None = None,
    max_limit: int | None = None,
) -> list[AggregateRow]:
    """
    Build one page of the active streak leaderboard.

    Rows are ordered by streak length, then by the selected stat (the
    predicate's own stat by default), descending; remaining ties keep
    snapshot order.

    Args:
        players: Snapshot of player game logs
        predicate_kind: goal, assist or point
        lookback: Most recent games per player eligible for a streak
        sort_key: goals, assists, points or shots
        page: 1-based page number
        limit: Page size
        player_filter: Optional position/name restriction
        max_limit: Largest accepted page size

    Returns:
        Sorted page of AggregateRow with streak fields filled

    Raises:
        InvalidParameterError: If any parameter is out of range
    """
    kind = resolve_predicate(predicate_kind)
    if not _is_int(lookback) or lookback < 1:
        raise InvalidParameterError("lookback", lookback, "must be an integer >= 1")
    validate_page(page, limit, max_limit)
    key = resolve_sort_key(sort_key, SortKey(kind.stat))

    with diag.timer("FILTER"):
        logs = apply_filters(players, player_filter)
    diag.event("FILTER", {"players": len(logs)})

    with diag.timer("AGGREGATE"):
        rows = detect_active_streaks(logs, kind, lookback)
    diag.event("AGGREGATE", {"rows": len(rows), "lookback": lookback})
    diag.event(
        "AGGREGATE",
        {"streaks": {str(row.player_id): row.streak_length for row in rows}},
        level="normal",
    )

    with diag.timer("RANK"):
        page_rows = paginate(rank_rows(rows, key, by_streak_length=True), page, limit)
    _rank_events(key, page, limit, page_rows)

    logger.debug(
        f"Active {kind.value} streaks sorted by {key.value}: "
        f"page {page} has {len(page_rows)} rows"
    )
    return page_rows
