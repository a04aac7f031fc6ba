"""
Match record schema (Riot match-v5 shape).
Validated with pydantic; unknown keys are ignored so full API payloads load as-is.
Only the counters the extractor reads are declared; the richer per-participant
"challenges" sub-record stays a plain mapping because its key set varies by patch.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _RiotModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class MatchParticipant(_RiotModel):
    """One of the 10 participants in a match: base counters plus optional challenges."""
    puuid: str
    team_id: int = 0
    team_position: str = ""
    win: bool = False
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    vision_score: float | None = None
    total_damage_dealt_to_champions: float | None = None
    gold_earned: float | None = None
    objectives_stolen: float | None = None
    turret_takedowns: float | None = None
    baron_kills: float | None = None
    dragon_kills: float | None = None
    first_blood_kill: bool = False
    first_blood_assist: bool = False
    first_tower_kill: bool = False
    first_tower_assist: bool = False
    summoner_name: str | None = None
    riot_id_game_name: str | None = None
    riot_id_tagline: str | None = None
    challenges: dict[str, Any] | None = None

    def challenge(self, key: str) -> Any:
        """Value from the challenges sub-record, None when the record or key is missing."""
        if not self.challenges:
            return None
        return self.challenges.get(key)


class MatchMetadata(_RiotModel):
    match_id: str = ""
    participants: list[str] = Field(default_factory=list)


class MatchInfo(_RiotModel):
    game_duration: int = 0
    queue_id: int | None = None
    participants: list[MatchParticipant] = Field(default_factory=list)


class Match(_RiotModel):
    metadata: MatchMetadata = Field(default_factory=MatchMetadata)
    info: MatchInfo

    @property
    def match_id(self) -> str:
        return self.metadata.match_id

    def participant(self, puuid: str) -> MatchParticipant | None:
        for p in self.info.participants:
            if p.puuid == puuid:
                return p
        return None
