"""
Streak Detector

Finds each player's currently active run of games satisfying a stat
predicate (scored a goal, recorded an assist, recorded a point) within a
bounded lookback of their most recent games.

Runs are found with the rank-difference identity: number the lookback
games 1..K by date, number the predicate-true games 1..M by date, and
every predicate-true game in one unbroken run shares the same
``seq_rank - pred_rank``. A predicate-false game between two true games
bumps the difference, splitting them into separate runs.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable

from loguru import logger

from ..models.aggregate import AggregateRow
from ..models.game_log import GameRecord, PlayerGameLog

DEFAULT_LOOKBACK = 15


class PredicateKind(str, Enum):
    """Per-game test that forms a streak."""

    GOAL = "goal"
    ASSIST = "assist"
    POINT = "point"

    def holds(self, game: GameRecord) -> bool:
        """Check if the game satisfies this predicate."""
        if self is PredicateKind.GOAL:
            return game.goals > 0
        if self is PredicateKind.ASSIST:
            return game.assists > 0
        return game.points > 0

    @property
    def stat(self) -> str:
        """Stat category the predicate is about (default tie-break)."""
        return {
            PredicateKind.GOAL: "goals",
            PredicateKind.ASSIST: "assists",
            PredicateKind.POINT: "points",
        }[self]


@dataclass
class StreakRun:
    """Maximal run of consecutive predicate-true games for one player."""

    player_id: int | str
    run_key: int
    games: list[GameRecord] = field(default_factory=list)

    @property
    def length(self) -> int:
        return len(self.games)

    @property
    def start(self) -> date:
        return self.games[0].game_date

    @property
    def end(self) -> date:
        return self.games[-1].game_date


def group_runs(
    player_id: int | str,
    games: list[GameRecord],
    kind: PredicateKind,
) -> list[StreakRun]:
    """
    Partition date-ascending games into predicate-true runs.

    Args:
        player_id: Owner of the games
        games: Games sorted oldest first
        kind: Predicate forming the runs

    Returns:
        Runs in chronological order
    """
    # Pass 1: sequence rank over every game
    sequenced = list(enumerate(games, start=1))

    # Pass 2: rank within the predicate-true subset, keyed by the difference
    runs: dict[int, StreakRun] = {}
    pred_rank = 0
    for seq_rank, game in sequenced:
        if not kind.holds(game):
            continue
        pred_rank += 1
        run_key = seq_rank - pred_rank
        run = runs.setdefault(run_key, StreakRun(player_id=player_id, run_key=run_key))
        run.games.append(game)

    return list(runs.values())


def find_active_run(
    log: PlayerGameLog,
    kind: PredicateKind,
    lookback: int = DEFAULT_LOOKBACK,
) -> StreakRun | None:
    """
    Find the run that includes the player's most recent game.

    Args:
        log: Player's game log
        kind: Predicate forming the runs
        lookback: Most recent games eligible for detection

    Returns:
        The active run, or None if the latest game fails the predicate
        or there are no games
    """
    window = log.most_recent(lookback)
    if not window:
        return None

    latest = window[-1].game_date
    for run in group_runs(log.player_id, window, kind):
        if run.end == latest:
            return run
    return None


def detect_active_streaks(
    logs: Iterable[PlayerGameLog],
    kind: PredicateKind,
    lookback: int = DEFAULT_LOOKBACK,
) -> list[AggregateRow]:
    """
    Aggregate every player's active streak.

    Players whose most recent game fails the predicate are left out
    entirely rather than reported with a zero-length streak.

    Args:
        logs: Filtered player game logs
        kind: Predicate forming the runs
        lookback: Most recent games per player eligible for detection

    Returns:
        One row per player holding an active streak, in input order
    """
    rows: list[AggregateRow] = []
    players = 0

    for log in logs:
        players += 1
        run = find_active_run(log, kind, lookback)
        if run is None:
            continue
        rows.append(AggregateRow.from_games(log.identity, run.games, streak=True))

    logger.debug(
        f"Active {kind.value} streaks (lookback {lookback}): "
        f"{len(rows)}/{players} players"
    )
    return rows
