"""
NHL Streak Tracker

Recent-form and active-streak leaderboards computed from per-game
player logs.
"""

__version__ = "0.1.0"
__author__ = "NHL Analytics Team"
