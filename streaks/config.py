"""
Engine Configuration

Loads engine, pagination, database and schedule settings from
config/engine.yaml, falling back to built-in defaults.
"""

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

DEFAULT_CONFIG_PATH = Path("config/engine.yaml")

DEFAULT_CONFIG: dict[str, Any] = {
    "engine": {
        "recency_windows": [3, 5, 10],
        "streak_lookback": 15,
    },
    "pagination": {
        "default_limit": 25,
        "max_limit": 100,
    },
    "database": {
        "path": "data/streaks.db",
    },
    "schedule": {
        "base_url": "https://api-web.nhle.com/v1",
        "timeout": 10.0,
        "max_retries": 2,
        "retry_delay": 1.0,
        "retry_backoff": 2.0,
        "cache": {
            "enabled": True,
            "directory": "data/cache/schedule",
            "ttl_seconds": 300,
        },
    },
}


@dataclass
class ScheduleSettings:
    """Settings for the schedule feed client."""

    base_url: str = "https://api-web.nhle.com/v1"
    timeout: float = 10.0
    max_retries: int = 2
    retry_delay: float = 1.0
    retry_backoff: float = 2.0
    cache_enabled: bool = True
    cache_directory: str = "data/cache/schedule"
    cache_ttl_seconds: int = 300


@dataclass
class EngineConfig:
    """Resolved configuration for a streak tracker process."""

    recency_windows: tuple[int, ...] = (3, 5, 10)
    streak_lookback: int = 15
    default_limit: int = 25
    max_limit: int = 100
    database_path: Path = Path("data/streaks.db")
    schedule: ScheduleSettings = field(default_factory=ScheduleSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineConfig":
        """Build from a (merged) configuration mapping."""
        engine = data.get("engine", {})
        pagination = data.get("pagination", {})
        schedule = data.get("schedule", {})
        cache = schedule.get("cache", {})

        return cls(
            recency_windows=tuple(int(n) for n in engine.get("recency_windows", (3, 5, 10))),
            streak_lookback=int(engine.get("streak_lookback", 15)),
            default_limit=int(pagination.get("default_limit", 25)),
            max_limit=int(pagination.get("max_limit", 100)),
            database_path=Path(data.get("database", {}).get("path", "data/streaks.db")),
            schedule=ScheduleSettings(
                base_url=schedule.get("base_url", ScheduleSettings.base_url),
                timeout=float(schedule.get("timeout", ScheduleSettings.timeout)),
                max_retries=int(schedule.get("max_retries", ScheduleSettings.max_retries)),
                retry_delay=float(schedule.get("retry_delay", ScheduleSettings.retry_delay)),
                retry_backoff=float(schedule.get("retry_backoff", ScheduleSettings.retry_backoff)),
                cache_enabled=bool(cache.get("enabled", ScheduleSettings.cache_enabled)),
                cache_directory=cache.get("directory", ScheduleSettings.cache_directory),
                cache_ttl_seconds=int(cache.get("ttl_seconds", ScheduleSettings.cache_ttl_seconds)),
            ),
        )


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: str | Path | None = None) -> EngineConfig:
    """
    Load engine configuration from YAML.

    Args:
        config_path: Path to the YAML file. Defaults to config/engine.yaml

    Returns:
        EngineConfig with file values layered over the defaults
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    if not path.exists():
        logger.warning(f"Engine config not found at {path}, using defaults")
        return EngineConfig.from_dict(DEFAULT_CONFIG)

    with open(path) as f:
        loaded = yaml.safe_load(f) or {}

    return EngineConfig.from_dict(_merge(DEFAULT_CONFIG, loaded))
