"""
Schedule Feed Client

Fetches the current NHL game week and finds a team's next game so a
leaderboard row can show its upcoming opponent.
"""

import time
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import Any

import httpx
from diskcache import Cache
from loguru import logger

from ..config import ScheduleSettings

SCHEDULE_NOW_ENDPOINT = "/schedule/now"


@dataclass
class ScheduleGame:
    """A team's upcoming game as seen from that team."""

    game_id: int | None
    team_abbrev: str
    opponent: str
    is_home: bool
    date: date
    is_today: bool
    start_time_utc: datetime | None = None


def _parse_start_time(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparsable startTimeUTC {value!r}")
        return None


def find_team_game(
    schedule: dict[str, Any],
    team_abbrev: str,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> ScheduleGame | None:
    """
    Find the first game in a game-week payload involving a team.

    Args:
        schedule: Payload with a ``gameWeek`` list of days
        team_abbrev: Team abbreviation (e.g., 'DET')
        today: Reference date for ``is_today`` (defaults to the local date)
        tz: Zone the start time is read in (defaults to the local zone)

    Returns:
        ScheduleGame, or None if the team has no game that week
    """
    today = today or date.today()
    team = team_abbrev.upper()

    for day in schedule.get("gameWeek", []):
        for game in day.get("games", []):
            home = game.get("homeTeam", {}).get("abbrev", "")
            away = game.get("awayTeam", {}).get("abbrev", "")
            if team not in (home, away):
                continue

            is_home = home == team
            start_time = _parse_start_time(game.get("startTimeUTC"))
            if start_time is not None:
                game_date = start_time.astimezone(tz).date()
            else:
                game_date = date.fromisoformat(day["date"])
            return ScheduleGame(
                game_id=game.get("id"),
                team_abbrev=team,
                opponent=away if is_home else home,
                is_home=is_home,
                date=game_date,
                is_today=game_date == today,
                start_time_utc=start_time,
            )
    return None


class ScheduleClient:
    """
    Client for the NHL web schedule feed.

    Responses are cached on disk for a few minutes; failed requests are
    retried with exponential backoff and re-raised after the last attempt.
    """

    def __init__(
        self,
        settings: ScheduleSettings | None = None,
        client: httpx.Client | None = None,
    ):
        """
        Initialize the schedule client.

        Args:
            settings: Feed URL, retry and cache settings
            client: Preconfigured httpx client (created if not provided)
        """
        self.settings = settings or ScheduleSettings()
        self.client = client or httpx.Client(timeout=self.settings.timeout)

        if self.settings.cache_enabled:
            cache_dir = Path(self.settings.cache_directory)
            cache_dir.mkdir(parents=True, exist_ok=True)
            self.cache: Cache | None = Cache(str(cache_dir))
        else:
            self.cache = None

    def __enter__(self) -> "ScheduleClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release the HTTP client and cache."""
        self.client.close()
        if self.cache is not None:
            self.cache.close()

    def _make_request(self, url: str) -> dict[str, Any]:
        """
        GET a JSON document with caching and retry logic.

        Raises:
            httpx.HTTPError: If request fails after all retries
        """
        if self.cache is not None:
            cached = self.cache.get(url)
            if cached is not None:
                logger.debug(f"Cache hit for {url}")
                return cached

        max_retries = self.settings.max_retries
        last_error: httpx.HTTPError | None = None
        for attempt in range(max_retries + 1):
            try:
                response = self.client.get(url)
                response.raise_for_status()
                data = response.json()

                if self.cache is not None:
                    self.cache.set(url, data, expire=self.settings.cache_ttl_seconds)
                return data

            except httpx.HTTPError as e:
                last_error = e
                if attempt < max_retries:
                    sleep_time = self.settings.retry_delay * (self.settings.retry_backoff**attempt)
                    logger.warning(
                        f"Schedule request failed (attempt {attempt + 1}/{max_retries + 1}), "
                        f"retrying in {sleep_time}s: {e}"
                    )
                    time.sleep(sleep_time)

        logger.error(f"Schedule request failed after {max_retries + 1} attempts: {url}")
        raise last_error  # type: ignore[misc]

    def get_current_schedule(self) -> dict[str, Any]:
        """Fetch the current game week."""
        return self._make_request(f"{self.settings.base_url}{SCHEDULE_NOW_ENDPOINT}")

    def next_game(
        self,
        team_abbrev: str,
        today: date | None = None,
        tz: tzinfo | None = None,
    ) -> ScheduleGame | None:
        """Fetch the current week and find the team's next game."""
        return find_team_game(self.get_current_schedule(), team_abbrev, today, tz)
