"""Database module for the player game log store."""

from .db import Database
from .importer import import_csv
from .queries import fetch_games, iter_games

__all__ = ["Database", "fetch_games", "import_csv", "iter_games"]
