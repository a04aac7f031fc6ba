"""
Runtime knobs, read from the environment.

STACKSTATS_MINIMUM_GAMES  minimum games per slot for filtered recommendations (default 3)
STACKSTATS_Z_SCORE        z used for win-rate confidence intervals (default 1.96)
STACKSTATS_LOG_LEVEL      loguru level for the stderr sink (default INFO)
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

DEFAULT_MINIMUM_GAMES = 3
DEFAULT_Z_SCORE = 1.96
DEFAULT_LOG_LEVEL = "INFO"

# Stack report views by game count (stacksAtLeast5 / stacksAtLeast10)
STACK_GAME_THRESHOLDS = (5, 10)


@dataclass(frozen=True)
class FilterConfig:
    """Minimum-sample filter for recommendations."""
    minimum_number_of_games: int = DEFAULT_MINIMUM_GAMES

    @classmethod
    def from_env(cls) -> FilterConfig:
        raw = os.environ.get("STACKSTATS_MINIMUM_GAMES", "").strip()
        if not raw:
            return cls()
        return cls(minimum_number_of_games=int(raw))

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> FilterConfig:
        """Shape of a filter file: {"minimumNumberOfGames": n}."""
        return cls(minimum_number_of_games=int(d.get("minimumNumberOfGames", DEFAULT_MINIMUM_GAMES)))


def get_z_score() -> float:
    raw = os.environ.get("STACKSTATS_Z_SCORE", "").strip()
    return float(raw) if raw else DEFAULT_Z_SCORE


def get_log_level() -> str:
    return os.environ.get("STACKSTATS_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL
