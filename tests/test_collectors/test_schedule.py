"""
Tests for Schedule Feed Client

Tests for next-game lookup and request handling.
"""

from datetime import date, datetime, timedelta, timezone

import httpx
import pytest

from streaks.collectors.schedule import ScheduleClient, find_team_game
from streaks.config import ScheduleSettings

EASTERN = timezone(timedelta(hours=-5))


def _settings(tmp_path, cache_enabled=False) -> ScheduleSettings:
    return ScheduleSettings(
        base_url="https://schedule.test/v1",
        max_retries=2,
        retry_delay=0.0,
        retry_backoff=1.0,
        cache_enabled=cache_enabled,
        cache_directory=str(tmp_path / "cache"),
    )


class TestFindTeamGame:
    """Tests for find_team_game."""

    def test_away_game(self, sample_schedule):
        """Test the first listed game for a team is returned from its side."""
        game = find_team_game(sample_schedule, "det", today=date(2024, 1, 5), tz=EASTERN)

        assert game.opponent == "TOR"
        assert game.is_home is False
        assert game.is_today is True
        assert game.game_id == 2023020601
        assert game.start_time_utc == datetime(2024, 1, 6, tzinfo=timezone.utc)

    def test_home_game_later_in_week(self, sample_schedule):
        """Test a home game on a later day."""
        game = find_team_game(sample_schedule, "EDM", today=date(2024, 1, 5), tz=EASTERN)

        assert game.opponent == "COL"
        assert game.is_home is True
        assert game.is_today is False
        assert game.date == date(2024, 1, 6)

    def test_date_follows_local_start_time(self, sample_schedule):
        """Test an evening game is dated by its local start, not the feed day."""
        utc_game = find_team_game(sample_schedule, "DET", today=date(2024, 1, 5), tz=timezone.utc)
        assert utc_game.date == date(2024, 1, 6)
        assert utc_game.is_today is False

        local_game = find_team_game(sample_schedule, "DET", today=date(2024, 1, 5), tz=EASTERN)
        assert local_game.date == date(2024, 1, 5)
        assert local_game.is_today is True

    def test_feed_day_without_start_time(self):
        """Test the gameWeek day is used when no start time is given."""
        schedule = {
            "gameWeek": [
                {
                    "date": "2024-01-05",
                    "games": [{"id": 1, "awayTeam": {"abbrev": "DET"}, "homeTeam": {"abbrev": "TOR"}}],
                }
            ]
        }
        game = find_team_game(schedule, "DET", today=date(2024, 1, 5))
        assert game.date == date(2024, 1, 5)
        assert game.start_time_utc is None

    def test_team_without_game(self, sample_schedule):
        """Test None for a team not on the schedule."""
        assert find_team_game(sample_schedule, "SEA") is None
        assert find_team_game({}, "DET") is None


class TestScheduleClient:
    """Tests for ScheduleClient."""

    def test_fetch_current_schedule(self, tmp_path, sample_schedule):
        """Test the schedule endpoint is requested and parsed."""
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json=sample_schedule)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        with ScheduleClient(_settings(tmp_path), client=client) as schedule:
            game = schedule.next_game("TOR", today=date(2024, 1, 5), tz=EASTERN)

        assert requested == ["https://schedule.test/v1/schedule/now"]
        assert game.opponent == "DET"
        assert game.is_home is True

    def test_retries_then_succeeds(self, tmp_path, sample_schedule):
        """Test transient failures are retried."""
        calls = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["count"] += 1
            if calls["count"] < 3:
                return httpx.Response(503)
            return httpx.Response(200, json=sample_schedule)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        with ScheduleClient(_settings(tmp_path), client=client) as schedule:
            data = schedule.get_current_schedule()

        assert calls["count"] == 3
        assert len(data["gameWeek"]) == 2

    def test_raises_after_last_attempt(self, tmp_path):
        """Test the error surfaces once retries are exhausted."""
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
        with ScheduleClient(_settings(tmp_path), client=client) as schedule:
            with pytest.raises(httpx.HTTPStatusError):
                schedule.get_current_schedule()

    def test_cached_response(self, tmp_path, sample_schedule):
        """Test a cached schedule is served without a second request."""
        calls = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["count"] += 1
            return httpx.Response(200, json=sample_schedule)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        with ScheduleClient(_settings(tmp_path, cache_enabled=True), client=client) as schedule:
            schedule.get_current_schedule()
            schedule.get_current_schedule()

        assert calls["count"] == 1
