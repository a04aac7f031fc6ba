"""
Per-match statistic extraction.
Maps one match record to a statistic sample for each tracked participant, including the
lane opponent's sample. Pure: no I/O, no shared state, safe to run per match in any order.

Best effort per field: a missing counter or challenge value leaves that statistic absent
instead of failing the match.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from stackstats.models import (
    PlayerRoleAndAggregateStatistics,
    PlayerStatistics,
    PlayerStatisticsWithEnemy,
)
from stackstats.roles import parse_role
from stackstats.roster import Roster
from stackstats.schemas import Match, MatchParticipant
from stackstats.statistics import new_boolean, new_numeric

# ---------- Fields read straight from the challenges sub-record ----------
# attribute on PlayerStatistics -> challenge key
CHALLENGE_FIELDS: dict[str, str] = {
    "rift_herald": "riftHeraldTakedowns",
    "damage_per_minute": "damagePerMinute",
    "earliest_baron": "earliestBaron",
    "earliest_dragon_takedown": "earliestDragonTakedown",
    "epic_monster_steals": "epicMonsterSteals",
    "first_turret_killed": "firstTurretKilled",
    "first_turret_killed_time": "firstTurretKilledTime",
    "game_length": "gameLength",
    "gold_per_minute": "goldPerMinute",
    "kill_participation": "killParticipation",
    "lane_minions_first_10_minutes": "laneMinionsFirst10Minutes",
    "laning_phase_gold_exp_advantage": "laningPhaseGoldExpAdvantage",
    "max_cs_advantage_on_lane_opponent": "maxCsAdvantageOnLaneOpponent",
    "max_kill_deficit": "maxKillDeficit",
    "max_level_lead_lane_opponent": "maxLevelLeadLaneOpponent",
    "solo_kills": "soloKills",
    "solo_turrets_lategame": "soloTurretsLategame",
    "stealth_wards_placed": "stealthWardsPlaced",
    "takedown_on_first_turret": "takedownOnFirstTurret",
    "takedowns": "takedowns",
    "takedowns_first_x_minutes": "takedownsFirstXMinutes",
    "team_damage_percentage": "teamDamagePercentage",
    "turret_plates_taken": "turretPlatesTaken",
    "turret_takedowns": "turretTakedowns",
    "vision_score_advantage_lane_opponent": "visionScoreAdvantageLaneOpponent",
    "vision_score_per_minute": "visionScorePerMinute",
    "ward_takedowns": "wardTakedowns",
    "ward_takedowns_before_20m": "wardTakedownsBefore20M",
    "wards_guarded": "wardsGuarded",
}


def _numeric_or_none(value: object) -> float | None:
    # challenges occasionally carry non-numeric entries; those count as missing
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _challenge_or(p: MatchParticipant, key: str, fallback: float | None) -> float | None:
    """Challenge value when present and non-zero, otherwise the base counter."""
    return _numeric_or_none(p.challenge(key)) or fallback


def _local_kda(p: MatchParticipant) -> float:
    """(kills + assists) / deaths; a deathless game counts kills + assists."""
    if p.deaths == 0:
        return float(p.kills + p.assists)
    return (p.kills + p.assists) / p.deaths


def parse_player_statistics(p: MatchParticipant) -> PlayerStatistics:
    """Build one sample for one participant, preferring challenge values over base counters."""
    values = {
        attr: new_numeric(_numeric_or_none(p.challenge(key)))
        for attr, key in CHALLENGE_FIELDS.items()
    }
    return PlayerStatistics(
        number_of_games=new_boolean(True),
        win=new_boolean(p.win),
        kda=new_numeric(_challenge_or(p, "kda", _local_kda(p))),
        kills=new_numeric(p.kills),
        deaths=new_numeric(p.deaths),
        assists=new_numeric(p.assists),
        vision_score=new_numeric(p.vision_score),
        total_damage_dealt_to_champions=new_numeric(p.total_damage_dealt_to_champions),
        first_tower=new_boolean(p.first_tower_kill or p.first_tower_assist),
        first_blood=new_boolean(p.first_blood_kill or p.first_blood_assist),
        objectives_stolen=new_numeric(p.objectives_stolen),
        gold_earned=new_numeric(p.gold_earned),
        towers=new_numeric(p.turret_takedowns),
        dragons=new_numeric(_challenge_or(p, "dragonTakedowns", p.dragon_kills)),
        barons=new_numeric(_challenge_or(p, "baronTakedowns", p.baron_kills)),
        **values,
    )


def find_enemy_laner(match: Match, p: MatchParticipant) -> MatchParticipant | None:
    """Opposing participant with the same declared position; None when nobody matches."""
    if not p.team_position:
        return None
    for other in match.info.participants:
        if other.team_position == p.team_position and other.team_id != p.team_id:
            return other
    return None


@dataclass
class MatchSamples:
    """
    Samples from one match: canonical name -> {that player's role: sample, aggregate: sample}.
    teams records each tracked player's side so pairs can be restricted to teammates.
    """
    match_id: str
    players: dict[str, PlayerRoleAndAggregateStatistics] = field(default_factory=dict)
    teams: dict[str, int] = field(default_factory=dict)

    def names(self) -> list[str]:
        return list(self.players)


def parse_match_statistics(match: Match, roster: Roster) -> MatchSamples:
    """
    One sample per tracked participant present in the match. Players absent from the match
    produce no entry. A participant without a recognised position contributes to aggregate only.
    """
    samples = MatchSamples(match_id=match.match_id)
    for name, p in roster.tracked_participants(match):
        enemy = find_enemy_laner(match, p)
        if enemy is None:
            logger.debug("No lane opponent for {} in {} (position={!r})", name, match.match_id, p.team_position)
        sample = PlayerStatisticsWithEnemy(
            **vars(parse_player_statistics(p)),
            enemy_laner=parse_player_statistics(enemy) if enemy is not None else None,
        )
        role = parse_role(p.team_position)
        entry = PlayerRoleAndAggregateStatistics(aggregate=sample)
        if role is not None:
            entry.roles[role] = sample
        samples.players[name] = entry
        samples.teams[name] = p.team_id
    return samples
