#!/usr/bin/env python3
"""
Command line interface for the streak tracker.

Usage:
    python -m cli.main init-db
    python -m cli.main import data/players.csv data/game_logs.csv
    python -m cli.main leaders --filter goalStreak
    python -m cli.main leaders --filter last5 --position C --search larkin --sort-by shots
    python -m cli.main leaders --filter pointStreak --page 2 --limit 10 --json
    python -m cli.main next-game DET
"""

from __future__ import annotations

import argparse
import json
import sqlite3
import sys
from pathlib import Path
from typing import Any

import httpx
from loguru import logger

from diagnostics import DiagConfig, diag
from streaks.collectors.schedule import ScheduleClient
from streaks.config import EngineConfig, load_config
from streaks.database import Database, import_csv
from streaks.errors import InvalidParameterError, StreakEngineError
from streaks.service.leaderboard import STREAK_FILTERS, LeaderboardService


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI usage."""
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG")
    else:
        logger.add(sys.stderr, level="WARNING")


def _database(args: argparse.Namespace, config: EngineConfig) -> Database:
    return Database(Path(args.db) if args.db else config.database_path)


def print_table(records: list[dict[str, Any]], streak_mode: bool) -> None:
    """Print leaderboard records as a fixed-width table."""
    if not records:
        print("No players found.")
        return

    length_label = "STRK" if streak_mode else "GP"
    print(
        f"{'#':<4} {'Player':<24} {'Team':<5} {'Pos':<4} {length_label:<5} "
        f"{'G':<4} {'A':<4} {'P':<4} {'S':<5} {'Avg TOI':<9}"
    )
    print("-" * 76)
    for i, rec in enumerate(records, start=1):
        name = f"{rec['first_name']} {rec['last_name']}".strip()
        length = rec["streak_length"] if streak_mode else rec["games_played"]
        print(
            f"{i:<4} {name[:24]:<24} {rec['team_abbrev']:<5} {rec['position']:<4} {length:<5} "
            f"{rec['total_goals']:<4} {rec['total_assists']:<4} {rec['total_points']:<4} "
            f"{rec['total_shots']:<5} {rec['avg_toi']:<9}"
        )
        if streak_mode:
            print(f"     {rec['streak_start']} -> {rec['streak_end']}")


def cmd_init_db(args: argparse.Namespace, config: EngineConfig) -> int:
    """Create the game log schema."""
    db = _database(args, config)
    db.initialize()
    print(f"Database ready at {db.db_path}")
    return 0


def cmd_import(args: argparse.Namespace, config: EngineConfig) -> int:
    """Import players and game logs from CSV."""
    db = _database(args, config)
    try:
        counts = import_csv(db, args.players_csv, args.games_csv)
    except (OSError, ValueError, sqlite3.Error) as e:
        print(f"ERROR: Import failed: {e}", file=sys.stderr)
        return 1
    print(f"Imported {counts['players']} players, {counts['game_logs']} new game logs")

    stats = db.get_database_stats()
    print(
        f"Store: {stats['total_players']} players, {stats['total_game_logs']} game logs "
        f"({stats['first_game_date']} to {stats['last_game_date']})"
    )
    return 0


def cmd_leaders(args: argparse.Namespace, config: EngineConfig) -> int:
    """Print one leaderboard page."""
    if args.diagnostics:
        diag.configure(DiagConfig(enabled=True, level=args.diag_level, jsonl_path=args.diag_log))

    service = LeaderboardService(_database(args, config), config)
    try:
        records = service.get_leaderboard(
            active_filter=args.filter,
            position=args.position,
            search=args.search,
            sort_by=args.sort_by,
            page=args.page,
            limit=args.limit,
        )
    finally:
        diag.print_checklist()
        diag.close()

    if args.json:
        print(json.dumps(records, indent=2))
    else:
        print_table(records, streak_mode=args.filter in STREAK_FILTERS)
    return 0


def cmd_next_game(args: argparse.Namespace, config: EngineConfig) -> int:
    """Print a team's next game from the schedule feed."""
    try:
        with ScheduleClient(config.schedule) as client:
            game = client.next_game(args.team)
    except httpx.HTTPError as e:
        print(f"ERROR: Schedule feed unavailable: {e}", file=sys.stderr)
        return 1

    if game is None:
        print(f"No game this week for {args.team.upper()}")
        return 0

    where = "vs" if game.is_home else "@"
    when = "today" if game.is_today else game.date.isoformat()
    print(f"{game.team_abbrev} {where} {game.opponent} ({when})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(description="NHL player streaks and recent form")
    parser.add_argument("--config", default=None, help="Path to engine.yaml")
    parser.add_argument("--db", default=None, help="Path to SQLite database (overrides config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init-db", help="Create the database schema")
    init_parser.set_defaults(func=cmd_init_db)

    import_parser = subparsers.add_parser("import", help="Import players and game logs from CSV")
    import_parser.add_argument("players_csv", help="CSV of player identities")
    import_parser.add_argument("games_csv", help="CSV of per-game stats")
    import_parser.set_defaults(func=cmd_import)

    leaders_parser = subparsers.add_parser("leaders", help="Show a leaderboard page")
    leaders_parser.add_argument(
        "--filter",
        required=True,
        help="last3, last5, last10, goalStreak, assistStreak or pointStreak",
    )
    leaders_parser.add_argument("--position", default=None, help="C, L, R or D (or full name)")
    leaders_parser.add_argument("--search", default=None, help="Name substring")
    leaders_parser.add_argument(
        "--sort-by",
        default="streak_length",
        help="goals, assists, points, shots or streak_length (mode default)",
    )
    leaders_parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    leaders_parser.add_argument("--limit", type=int, default=None, help="Page size")
    leaders_parser.add_argument("--json", action="store_true", help="Print JSON records")
    leaders_parser.add_argument("--diagnostics", action="store_true", help="Print stage diagnostics")
    leaders_parser.add_argument(
        "--diag-level", choices=["lite", "normal", "verbose"], default="lite",
        help="Diagnostics verbosity level (default: lite)",
    )
    leaders_parser.add_argument("--diag-log", default=None, help="Path to write JSONL diagnostics log")
    leaders_parser.set_defaults(func=cmd_leaders)

    next_parser = subparsers.add_parser("next-game", help="Show a team's next game")
    next_parser.add_argument("team", help="Team abbreviation (e.g. DET)")
    next_parser.set_defaults(func=cmd_next_game)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    config = load_config(args.config)

    try:
        return args.func(args, config)
    except InvalidParameterError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except StreakEngineError as e:
        print(f"ERROR [{e.stage}]: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
