"""
CLI Module for the Streak Tracker

Command-line access to leaderboards, data import and the schedule feed.

Usage:
    python -m cli.main leaders --filter goalStreak
"""

from cli.main import main

__all__ = ["main"]
