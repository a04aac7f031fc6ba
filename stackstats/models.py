"""
Statistic entities for tracked players and their typed merges.
Domain objects only: no extraction, no indexing, no API logic.

PlayerStatistics is a fixed set of named fields. Every field is declared with its report
key and its kind; merges dispatch field by field on the declared kind, never on the
runtime shape of the values.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable, TypeVar

from stackstats.roles import ROLE_ORDER, Role, parse_role
from stackstats.statistics import (
    BooleanStatistic,
    NumericStatistic,
    merge_boolean,
    merge_numeric,
)

BOOLEAN = "boolean"
NUMERIC = "numeric"


def _boolean(key: str) -> Any:
    return field(default_factory=BooleanStatistic, metadata={"key": key, "kind": BOOLEAN})


def _numeric(key: str) -> Any:
    return field(default=None, metadata={"key": key, "kind": NUMERIC})


# ---------- PlayerStatistics ----------


@dataclass
class PlayerStatistics:
    """One player's statistics: a single match sample, or many samples folded together."""
    # numberOfGames is a counter: every sample is new_boolean(True)
    number_of_games: BooleanStatistic = _boolean("numberOfGames")
    win: BooleanStatistic = _boolean("win")
    kda: NumericStatistic | None = _numeric("kda")
    kills: NumericStatistic | None = _numeric("kills")
    deaths: NumericStatistic | None = _numeric("deaths")
    assists: NumericStatistic | None = _numeric("assists")
    vision_score: NumericStatistic | None = _numeric("visionScore")
    total_damage_dealt_to_champions: NumericStatistic | None = _numeric("totalDamageDealtToChampions")
    first_tower: BooleanStatistic = _boolean("firstTower")
    first_blood: BooleanStatistic = _boolean("firstBlood")
    objectives_stolen: NumericStatistic | None = _numeric("objectivesStolen")
    gold_earned: NumericStatistic | None = _numeric("goldEarned")
    towers: NumericStatistic | None = _numeric("towers")
    dragons: NumericStatistic | None = _numeric("dragons")
    barons: NumericStatistic | None = _numeric("barons")
    rift_herald: NumericStatistic | None = _numeric("riftHerald")
    damage_per_minute: NumericStatistic | None = _numeric("damagePerMinute")
    earliest_baron: NumericStatistic | None = _numeric("earliestBaron")
    earliest_dragon_takedown: NumericStatistic | None = _numeric("earliestDragonTakedown")
    epic_monster_steals: NumericStatistic | None = _numeric("epicMonsterSteals")
    first_turret_killed: NumericStatistic | None = _numeric("firstTurretKilled")
    first_turret_killed_time: NumericStatistic | None = _numeric("firstTurretKilledTime")
    game_length: NumericStatistic | None = _numeric("gameLength")
    gold_per_minute: NumericStatistic | None = _numeric("goldPerMinute")
    kill_participation: NumericStatistic | None = _numeric("killParticipation")
    lane_minions_first_10_minutes: NumericStatistic | None = _numeric("laneMinionsFirst10Minutes")
    laning_phase_gold_exp_advantage: NumericStatistic | None = _numeric("laningPhaseGoldExpAdvantage")
    max_cs_advantage_on_lane_opponent: NumericStatistic | None = _numeric("maxCsAdvantageOnLaneOpponent")
    max_kill_deficit: NumericStatistic | None = _numeric("maxKillDeficit")
    max_level_lead_lane_opponent: NumericStatistic | None = _numeric("maxLevelLeadLaneOpponent")
    solo_kills: NumericStatistic | None = _numeric("soloKills")
    solo_turrets_lategame: NumericStatistic | None = _numeric("soloTurretsLategame")
    stealth_wards_placed: NumericStatistic | None = _numeric("stealthWardsPlaced")
    takedown_on_first_turret: NumericStatistic | None = _numeric("takedownOnFirstTurret")
    takedowns: NumericStatistic | None = _numeric("takedowns")
    takedowns_first_x_minutes: NumericStatistic | None = _numeric("takedownsFirstXMinutes")
    team_damage_percentage: NumericStatistic | None = _numeric("teamDamagePercentage")
    turret_plates_taken: NumericStatistic | None = _numeric("turretPlatesTaken")
    turret_takedowns: NumericStatistic | None = _numeric("turretTakedowns")
    vision_score_advantage_lane_opponent: NumericStatistic | None = _numeric("visionScoreAdvantageLaneOpponent")
    vision_score_per_minute: NumericStatistic | None = _numeric("visionScorePerMinute")
    ward_takedowns: NumericStatistic | None = _numeric("wardTakedowns")
    ward_takedowns_before_20m: NumericStatistic | None = _numeric("wardTakedownsBefore20M")
    wards_guarded: NumericStatistic | None = _numeric("wardsGuarded")

    def to_dict(self) -> dict[str, Any]:
        """Report shape: camelCase keys, absent numerics omitted."""
        d: dict[str, Any] = {}
        for f in STATISTIC_FIELDS:
            value = getattr(self, f.name)
            if value is not None:
                d[f.metadata["key"]] = value.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PlayerStatistics:
        return cls(**_field_values_from_dict(d))


# Declaration order of PlayerStatistics; subclasses add non-statistic fields after these.
STATISTIC_FIELDS = fields(PlayerStatistics)

# Report keys in declaration order, e.g. "numberOfGames", "win", "kda", ...
STATISTIC_KEYS: tuple[str, ...] = tuple(f.metadata["key"] for f in STATISTIC_FIELDS)


def _field_values_from_dict(d: dict[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for f in STATISTIC_FIELDS:
        raw = d.get(f.metadata["key"])
        if f.metadata["kind"] == BOOLEAN:
            values[f.name] = BooleanStatistic.from_dict(raw)
        else:
            values[f.name] = NumericStatistic.from_dict(raw)
    return values


def _merge_field_values(a: PlayerStatistics, b: PlayerStatistics) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for f in STATISTIC_FIELDS:
        x = getattr(a, f.name)
        y = getattr(b, f.name)
        if f.metadata["kind"] == BOOLEAN:
            values[f.name] = merge_boolean(x, y)
        else:
            values[f.name] = merge_numeric(x, y)
    return values


def statistic_by_key(stats: PlayerStatistics, key: str) -> BooleanStatistic | NumericStatistic | None:
    """Look up a field by its report key (e.g. "visionScore")."""
    return getattr(stats, _ATTRIBUTE_BY_KEY[key])


_ATTRIBUTE_BY_KEY: dict[str, str] = {f.metadata["key"]: f.name for f in STATISTIC_FIELDS}


# ---------- PlayerStatisticsWithEnemy ----------


@dataclass
class PlayerStatisticsWithEnemy(PlayerStatistics):
    """PlayerStatistics plus the lane opponent sampled in the same matches (if any was found)."""
    enemy_laner: PlayerStatistics | None = None

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        if self.enemy_laner is not None:
            d["enemyLaner"] = self.enemy_laner.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PlayerStatisticsWithEnemy:
        enemy = d.get("enemyLaner")
        return cls(
            **_field_values_from_dict(d),
            enemy_laner=PlayerStatistics.from_dict(enemy) if enemy else None,
        )


T = TypeVar("T")


def _merge_optional(a: T | None, b: T | None, merge: Callable[[T, T], T]) -> T | None:
    """Merge when both sides are present, otherwise take whichever side is."""
    if a is not None and b is not None:
        return merge(a, b)
    return a if a is not None else b


def merge_player_statistics(a: PlayerStatistics, b: PlayerStatistics) -> PlayerStatistics:
    return PlayerStatistics(**_merge_field_values(a, b))


def merge_player_statistics_with_enemy(
    a: PlayerStatisticsWithEnemy, b: PlayerStatisticsWithEnemy
) -> PlayerStatisticsWithEnemy:
    """enemy_laner merges independently of the player's own fields."""
    return PlayerStatisticsWithEnemy(
        **_merge_field_values(a, b),
        enemy_laner=_merge_optional(a.enemy_laner, b.enemy_laner, merge_player_statistics),
    )


# ---------- PlayerRoleAndAggregateStatistics ----------


@dataclass
class PlayerRoleAndAggregateStatistics:
    """
    Per-role statistics for one player plus the aggregate across every role they occupied.
    roles only ever holds the 5 Role values; a role the player never played is missing.
    """
    aggregate: PlayerStatisticsWithEnemy
    roles: dict[Role, PlayerStatisticsWithEnemy] = field(default_factory=dict)

    def get(self, role: Role) -> PlayerStatisticsWithEnemy | None:
        return self.roles.get(role)

    def populated_roles(self) -> list[Role]:
        """Roles with data, in fixed role order."""
        return [r for r in ROLE_ORDER if r in self.roles]

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"aggregate": self.aggregate.to_dict()}
        for role in self.populated_roles():
            d[role.value] = self.roles[role].to_dict()
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PlayerRoleAndAggregateStatistics:
        roles: dict[Role, PlayerStatisticsWithEnemy] = {}
        for key, value in d.items():
            role = parse_role(key) if key != "aggregate" else None
            if role is not None and value:
                roles[role] = PlayerStatisticsWithEnemy.from_dict(value)
        return cls(aggregate=PlayerStatisticsWithEnemy.from_dict(d["aggregate"]), roles=roles)


def merge_player_role_and_aggregate_statistics(
    a: PlayerRoleAndAggregateStatistics, b: PlayerRoleAndAggregateStatistics
) -> PlayerRoleAndAggregateStatistics:
    """Aggregate and each role slot merge independently with the same rule."""
    roles: dict[Role, PlayerStatisticsWithEnemy] = {}
    for role in ROLE_ORDER:
        merged = _merge_optional(a.get(role), b.get(role), merge_player_statistics_with_enemy)
        if merged is not None:
            roles[role] = merged
    return PlayerRoleAndAggregateStatistics(
        aggregate=merge_player_statistics_with_enemy(a.aggregate, b.aggregate),
        roles=roles,
    )
