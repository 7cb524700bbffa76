"""
Data Collectors Module

Clients for external feeds consumed alongside the leaderboards.

Collectors:
    - ScheduleClient: Current game week from the NHL web API
"""

from streaks.collectors.schedule import ScheduleClient, ScheduleGame, find_team_game

__all__ = ["ScheduleClient", "ScheduleGame", "find_team_game"]
