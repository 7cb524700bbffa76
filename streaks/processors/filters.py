"""
Filter Stage

Narrows the candidate player set by position group and name search
before any aggregation runs.
"""

from dataclasses import dataclass
from typing import Iterable

from loguru import logger

from ..models.game_log import PlayerGameLog
from ..models.player import PlayerIdentity, normalize_position


@dataclass(frozen=True)
class PlayerFilter:
    """Optional, conjunctive position and name restrictions."""

    position: str | None = None
    name_query: str | None = None

    @property
    def position_code(self) -> str | None:
        """Canonical position code, or the literal token if unrecognized."""
        return normalize_position(self.position)

    @property
    def search_term(self) -> str | None:
        """Lower-cased name query, None when blank."""
        if self.name_query is None:
            return None
        term = self.name_query.strip().lower()
        return term or None

    @property
    def is_empty(self) -> bool:
        return self.position_code is None and self.search_term is None

    def matches(self, identity: PlayerIdentity) -> bool:
        """Check if a player passes both filters."""
        code = self.position_code
        if code is not None and identity.position != code:
            return False

        term = self.search_term
        if term is not None:
            return term in identity.first_name.lower() or term in identity.last_name.lower()

        return True


def apply_filters(
    logs: Iterable[PlayerGameLog],
    player_filter: PlayerFilter | None = None,
) -> list[PlayerGameLog]:
    """
    Keep the game logs whose player passes the filter.

    Input order is preserved.

    Args:
        logs: Player game logs from the event log source
        player_filter: Restrictions to apply (None keeps everyone)

    Returns:
        Filtered list of game logs
    """
    logs = list(logs)
    if player_filter is None or player_filter.is_empty:
        return logs

    kept = [log for log in logs if player_filter.matches(log.identity)]
    logger.debug(
        f"Filter position={player_filter.position_code!r} "
        f"search={player_filter.search_term!r}: {len(kept)}/{len(logs)} players kept"
    )
    return kept
