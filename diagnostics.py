"""
Streak Tracker Diagnostics Module

Opt-in observability for the leaderboard pipeline. Emits checkpoint
events at fixed pipeline boundaries: FETCH, FILTER, AGGREGATE, RANK.

Usage:
    from diagnostics import diag, DiagConfig

    diag.configure(DiagConfig(enabled=True, level="normal"))

    with diag.timer("FETCH"):
        logs = fetch_games(db)
    diag.event("FETCH", {"players": len(logs)})

    diag.print_checklist()
"""

from __future__ import annotations

import json
import logging
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Generator

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

VALID_LEVELS = ("lite", "normal", "verbose")
STAGE_ORDER = ("FETCH", "FILTER", "AGGREGATE", "RANK")


@dataclass
class DiagConfig:
    """Central diagnostics configuration."""

    enabled: bool = False
    level: str = "lite"  # lite | normal | verbose
    jsonl_path: str | None = None

    def __post_init__(self) -> None:
        if self.level not in VALID_LEVELS:
            self.level = "lite"


# ---------------------------------------------------------------------------
# Logger setup  (stdlib logging, separate from the loguru application log)
# ---------------------------------------------------------------------------

_diag_logger = logging.getLogger("streaks.diagnostics")
_diag_logger.propagate = False

_console_handler: logging.StreamHandler | None = None


def _ensure_handler() -> None:
    """Attach the console handler once."""
    global _console_handler
    if _console_handler is None:
        _console_handler = logging.StreamHandler()
        _console_handler.setFormatter(
            logging.Formatter("[DIAG][%(levelname)s] %(message)s")
        )
        _diag_logger.addHandler(_console_handler)
        _diag_logger.setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Core Diagnostics Engine
# ---------------------------------------------------------------------------


@dataclass
class _StageRecord:
    """Timings and events for one pipeline stage."""

    stage: str
    start_time: float = 0.0
    end_time: float = 0.0
    events: list[dict[str, Any]] = field(default_factory=list)

    @property
    def duration(self) -> float:
        if self.end_time > 0 and self.start_time > 0:
            return self.end_time - self.start_time
        return 0.0


class DiagnosticsEngine:
    """Records stage timings and checkpoint events for one CLI run."""

    def __init__(self) -> None:
        self._config = DiagConfig()
        self._run_start: float = 0.0
        self._stages: dict[str, _StageRecord] = {}
        self._jsonl_fh: Any = None

    def configure(self, config: DiagConfig) -> None:
        """Apply a new diagnostics configuration."""
        self.close()
        self._config = config
        if config.enabled:
            _ensure_handler()
            self.reset()
            if config.jsonl_path:
                self._jsonl_fh = open(config.jsonl_path, "w")

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def reset(self) -> None:
        """Reset all state for a fresh run."""
        self._run_start = time.time()
        self._stages = {}

    @contextmanager
    def timer(self, stage: str) -> Generator[None, None, None]:
        """Record wall-clock duration for *stage*."""
        if not self.enabled:
            yield
            return

        rec = self._stages.setdefault(stage, _StageRecord(stage=stage))
        rec.start_time = time.time()
        try:
            yield
        finally:
            rec.end_time = time.time()
            _diag_logger.info(f"[{stage}] completed in {rec.duration:.3f}s")

    def event(self, stage: str, summary: dict[str, Any], level: str = "lite") -> None:
        """
        Emit a structured checkpoint event.

        Args:
            stage: Pipeline stage name (FETCH, FILTER, AGGREGATE, RANK).
            summary: Key-value summary dict.
            level: Minimum diag level required to emit.
        """
        if not self.enabled:
            return
        if VALID_LEVELS.index(level) > VALID_LEVELS.index(self._config.level):
            return

        entry = {
            "stage": stage,
            "level": level,
            "elapsed": time.time() - self._run_start,
            **summary,
        }
        self._stages.setdefault(stage, _StageRecord(stage=stage)).events.append(entry)
        _diag_logger.info(f"[{stage}] {_format_summary(summary)}")

        if self._jsonl_fh:
            self._jsonl_fh.write(json.dumps(entry, default=str) + "\n")
            self._jsonl_fh.flush()

    def stage_events(self, stage: str) -> list[dict[str, Any]]:
        """Events recorded for a stage so far."""
        rec = self._stages.get(stage)
        return list(rec.events) if rec else []

    def print_checklist(self) -> None:
        """Print the end-of-run timings and counts to stderr."""
        if not self.enabled:
            return

        lines = [
            "",
            "=" * 50,
            "  DIAGNOSTICS CHECKLIST",
            "=" * 50,
            f"  Total runtime:  {time.time() - self._run_start:.3f}s",
            "",
            "  Stage timings:",
        ]
        for stage_name in STAGE_ORDER:
            rec = self._stages.get(stage_name)
            if rec:
                lines.append(f"    [{stage_name:>9}]  {rec.duration:.3f}s")
            else:
                lines.append(f"    [{stage_name:>9}]  (not recorded)")

        lines.append("")
        lines.append("  Key counts:")
        for stage_name in STAGE_ORDER:
            for ev in self.stage_events(stage_name):
                for k, v in ev.items():
                    if k in ("stage", "level", "elapsed"):
                        continue
                    if isinstance(v, int) and not isinstance(v, bool):
                        lines.append(f"    {stage_name.lower()}.{k}: {v}")
        lines.append("=" * 50)

        print("\n".join(lines), file=sys.stderr)

    def close(self) -> None:
        """Close the JSONL file if one is open."""
        if self._jsonl_fh:
            self._jsonl_fh.close()
            self._jsonl_fh = None


def _format_summary(summary: dict[str, Any], max_width: int = 200) -> str:
    """Format a summary dict into a compact, human-readable string."""
    parts = []
    for k, v in summary.items():
        if isinstance(v, list):
            parts.append(f"{k}=[{len(v)} items]")
        elif isinstance(v, float):
            parts.append(f"{k}={v:.4f}")
        else:
            parts.append(f"{k}={v}")
    line = " | ".join(parts)
    if len(line) > max_width:
        line = line[:max_width] + "..."
    return line


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

diag = DiagnosticsEngine()
