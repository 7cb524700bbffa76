"""
Leaderboard Service

Maps a leaderboard request (active filter, position, name search, sort,
page) onto the engine, fetching the event log snapshot through an
explicitly passed database handle.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any

from loguru import logger

from diagnostics import diag

from ..config import EngineConfig
from ..database.db import Database
from ..database.queries import fetch_games
from ..errors import InvalidParameterError, UpstreamUnavailableError
from ..models.aggregate import AggregateRow
from ..models.game_log import PlayerGameLog
from ..processors.filters import PlayerFilter
from ..processors.ranking import SortKey
from ..processors.streak_detector import PredicateKind
from .engine import (
    DEFAULT_SORT_TOKEN,
    aggregate_active_streak,
    aggregate_recency,
    resolve_sort_key,
    validate_page,
)

STREAK_FILTERS: dict[str, PredicateKind] = {
    "goalStreak": PredicateKind.GOAL,
    "assistStreak": PredicateKind.ASSIST,
    "pointStreak": PredicateKind.POINT,
}


@dataclass
class LeaderboardRequest:
    """Caller parameters for one leaderboard page."""

    active_filter: str | None = None
    position: str | None = None
    search: str | None = None
    sort_by: str = DEFAULT_SORT_TOKEN
    page: int = 1
    limit: int | None = None

    @property
    def player_filter(self) -> PlayerFilter:
        return PlayerFilter(position=self.position, name_query=self.search)


class LeaderboardService:
    """
    Runs leaderboard requests against the game log store.

    Each request acquires its own connection from the handle, reads one
    snapshot, and releases the connection before aggregation starts.
    """

    def __init__(self, db: Database, config: EngineConfig | None = None) -> None:
        """
        Initialize the service.

        Args:
            db: Database handle for the event log
            config: Engine configuration (defaults if not provided)
        """
        self.db = db
        self.config = config or EngineConfig()
        self.recency_filters: dict[str, int] = {
            f"last{n}": n for n in self.config.recency_windows
        }
        logger.info(f"Leaderboard service ready on {db.db_path}")

    @property
    def active_filters(self) -> list[str]:
        """Every accepted active filter token."""
        return [*self.recency_filters, *STREAK_FILTERS]

    def get_rows(self, request: LeaderboardRequest) -> list[AggregateRow]:
        """
        Compute one leaderboard page.

        Args:
            request: Leaderboard parameters

        Returns:
            Sorted page of rows; empty when no filter is selected

        Raises:
            InvalidParameterError: If a parameter is out of range
            UpstreamUnavailableError: If the game log store cannot be read
        """
        if not request.active_filter:
            return []

        limit = request.limit if request.limit is not None else self.config.default_limit
        validate_page(request.page, limit, self.config.max_limit)

        if request.active_filter in self.recency_filters:
            window_size = self.recency_filters[request.active_filter]
            sort_key = resolve_sort_key(request.sort_by, SortKey.POINTS)
            snapshot = self._load_snapshot(request.player_filter, window_size)
            return aggregate_recency(
                snapshot,
                window_size,
                sort_key=sort_key,
                page=request.page,
                limit=limit,
                player_filter=request.player_filter,
                allowed_windows=self.config.recency_windows,
                max_limit=self.config.max_limit,
            )

        if request.active_filter in STREAK_FILTERS:
            kind = STREAK_FILTERS[request.active_filter]
            sort_key = resolve_sort_key(request.sort_by, SortKey(kind.stat))
            lookback = self.config.streak_lookback
            snapshot = self._load_snapshot(request.player_filter, lookback)
            return aggregate_active_streak(
                snapshot,
                kind,
                lookback=lookback,
                sort_key=sort_key,
                page=request.page,
                limit=limit,
                player_filter=request.player_filter,
                max_limit=self.config.max_limit,
            )

        raise InvalidParameterError(
            "active_filter",
            request.active_filter,
            f"expected one of {', '.join(self.active_filters)}",
        )

    def get_leaderboard(
        self,
        active_filter: str | None = None,
        position: str | None = None,
        search: str | None = None,
        sort_by: str = DEFAULT_SORT_TOKEN,
        page: int = 1,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Compute one page and serialize it as presentation records."""
        request = LeaderboardRequest(
            active_filter=active_filter,
            position=position,
            search=search,
            sort_by=sort_by,
            page=page,
            limit=limit,
        )
        return [row.to_record() for row in self.get_rows(request)]

    def _load_snapshot(
        self,
        player_filter: PlayerFilter,
        per_player_limit: int,
    ) -> list[PlayerGameLog]:
        """Read the filtered, per-player-limited snapshot."""
        if not self.db.exists():
            raise UpstreamUnavailableError(f"Game log database not found at {self.db.db_path}")

        try:
            with diag.timer("FETCH"):
                snapshot = fetch_games(self.db, player_filter, per_player_limit)
        except sqlite3.Error as e:
            logger.error(f"Game log fetch failed: {e}")
            raise UpstreamUnavailableError(f"Game log fetch failed: {e}") from e

        diag.event("FETCH", {"players": len(snapshot), "per_player_limit": per_player_limit})
        return snapshot
