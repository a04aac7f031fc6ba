"""
Shared fixtures: a tracked roster and a match builder producing Riot match-v5 shaped records.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

# Run from project root: python -m pytest stackstats/tests
import sys
_root = Path(__file__).resolve().parent.parent.parent
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from stackstats.roster import Roster
from stackstats.schemas import Match

HANDLES = {
    "Zed#NA1": "puuid-zed",
    "Ashe#NA1": "puuid-ashe",
    "Lux#NA1": "puuid-lux",
    "Jinx#NA1": "puuid-jinx",
    "Braum#NA1": "puuid-braum",
    "Sona#NA1": "puuid-sona",
    "ZedAlt#NA1": "puuid-zed-alt",
}
ALIASES = {"ZedAlt#NA1": "Zed#NA1"}

DEFAULT_LINEUP = {
    "Zed#NA1": "TOP",
    "Ashe#NA1": "JUNGLE",
    "Lux#NA1": "MIDDLE",
    "Jinx#NA1": "BOTTOM",
    "Braum#NA1": "UTILITY",
}
ENEMY_POSITIONS = ["TOP", "JUNGLE", "MIDDLE", "BOTTOM", "UTILITY"]


def participant(puuid: str, team_id: int, position: str, win: bool, **extra: Any) -> dict[str, Any]:
    d: dict[str, Any] = {
        "puuid": puuid,
        "teamId": team_id,
        "teamPosition": position,
        "win": win,
        "kills": 5,
        "deaths": 2,
        "assists": 7,
        "visionScore": 20,
        "goldEarned": 10000,
        "totalDamageDealtToChampions": 15000,
        "turretTakedowns": 2,
        "baronKills": 0,
        "dragonKills": 1,
        "objectivesStolen": 0,
        "firstBloodKill": False,
        "firstBloodAssist": False,
        "firstTowerKill": False,
        "firstTowerAssist": False,
    }
    d.update(extra)
    return d


@pytest.fixture
def roster() -> Roster:
    return Roster(handles=dict(HANDLES), aliases=dict(ALIASES))


@pytest.fixture
def build_match():
    """
    build_match(match_id, lineup=None, win=True, overrides=None, enemy_positions=None) -> Match
    lineup: roster display name -> position, all on team 100.
    overrides: display name -> participant field overrides.
    """
    def _build(
        match_id: str = "NA1_1",
        lineup: dict[str, str] | None = None,
        win: bool = True,
        overrides: dict[str, dict[str, Any]] | None = None,
        enemy_positions: list[str] | None = None,
    ) -> Match:
        lineup = lineup if lineup is not None else DEFAULT_LINEUP
        overrides = overrides or {}
        participants = [
            participant(HANDLES[name], 100, position, win, **overrides.get(name, {}))
            for name, position in lineup.items()
        ]
        positions = enemy_positions if enemy_positions is not None else ENEMY_POSITIONS
        for i, position in enumerate(positions):
            participants.append(participant(f"enemy-{i}", 200, position, not win, kills=3, deaths=4))
        return Match.model_validate({
            "metadata": {"matchId": match_id, "participants": [p["puuid"] for p in participants]},
            "info": {"gameDuration": 1800, "queueId": 440, "participants": participants},
        })
    return _build
