"""
Player Identity Model

Pydantic model for roster identity records and position normalization.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class PlayerPosition(str, Enum):
    """Skater position enumeration."""

    CENTER = "C"
    LEFT_WING = "L"
    RIGHT_WING = "R"
    DEFENSE = "D"


# Accepted spellings, keyed by upper-cased token. Source rows mix codes and
# full words; request tokens also arrive as enum-style names.
POSITION_ALIASES: dict[str, PlayerPosition] = {
    "C": PlayerPosition.CENTER,
    "CENTER": PlayerPosition.CENTER,
    "L": PlayerPosition.LEFT_WING,
    "LW": PlayerPosition.LEFT_WING,
    "LEFT_WING": PlayerPosition.LEFT_WING,
    "LEFT WING": PlayerPosition.LEFT_WING,
    "R": PlayerPosition.RIGHT_WING,
    "RW": PlayerPosition.RIGHT_WING,
    "RIGHT_WING": PlayerPosition.RIGHT_WING,
    "RIGHT WING": PlayerPosition.RIGHT_WING,
    "D": PlayerPosition.DEFENSE,
    "DEFENSE": PlayerPosition.DEFENSE,
}



def normalize_position(token: str | None) -> str | None:
    """
    Normalize a position token to its canonical code.

    Unrecognized tokens are returned unchanged so that matching against
    them simply finds nothing.

    Args:
        token: Position spelling such as "C", "center" or "Left Wing"

    Returns:
        Canonical code ("C", "L", "R", "D"), the literal token, or None
    """
    if token is None:
        return None
    stripped = token.strip()
    if not stripped:
        return None
    position = POSITION_ALIASES.get(stripped.upper())
    return position.value if position else stripped


def source_spellings(token: str) -> tuple[str, ...] | None:
    """
    Upper-cased spellings that normalize to the same position as ``token``.

    Returns None for unrecognized tokens, which only match literally.
    """
    position = POSITION_ALIASES.get(token.strip().upper())
    if position is None:
        return None
    return tuple(alias for alias, pos in POSITION_ALIASES.items() if pos is position)


class PlayerIdentity(BaseModel):
    """Roster identity for one player."""

    model_config = ConfigDict(frozen=True)

    player_id: int | str
    first_name: str = ""
    last_name: str = ""
    team_abbrev: str = ""
    position: str = ""

    @field_validator("first_name", "last_name", "team_abbrev", mode="before")
    @classmethod
    def _blank_if_missing(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("position", mode="before")
    @classmethod
    def _normalize_position(cls, value: object) -> str:
        if value is None:
            return ""
        return normalize_position(str(value)) or ""

    @property
    def full_name(self) -> str:
        """First and last name joined with a space."""
        return f"{self.first_name} {self.last_name}".strip()
