"""
Overall reporting views derived from a completed AggregationIndex.
Read-only: consumes per-player and per-stack aggregates, returns structured reports.
No extraction, no folding, no persistence.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from loguru import logger

from stackstats.config import DEFAULT_Z_SCORE
from stackstats.models import (
    STATISTIC_KEYS,
    PlayerRoleAndAggregateStatistics,
    statistic_by_key,
)
from stackstats.recommender import (
    Recommendation,
    RoleWinRate,
    candidates_from_win_rates,
    recommend_positions,
)
from stackstats.roles import Role, parse_role
from stackstats.roster import Roster, stack_key
from stackstats.statistics import (
    EMPTY_BOOLEAN,
    BooleanStatistic,
    NumericStatistic,
    merge_boolean,
)

StackMembers = Mapping[str, PlayerRoleAndAggregateStatistics]

WINNINGEST_STACK_LIMIT = 5
WINNINGEST_STACK_MIN_GAMES = 5


# ---------- Per-player views ----------


def is_better_statistic(
    a: BooleanStatistic | NumericStatistic | None,
    b: BooleanStatistic | NumericStatistic | None,
) -> bool:
    """Is a strictly better than b. No data is worse than any data."""
    if a is None:
        return False
    if b is None:
        return True
    if isinstance(a, BooleanStatistic):
        return a.percent > b.percent
    return a.average > b.average


def best_role_by_metric(stats: PlayerRoleAndAggregateStatistics) -> dict[str, Role | None]:
    """For every statistic key, the role with the best value; ties keep the earlier role."""
    out: dict[str, Role | None] = {}
    for key in STATISTIC_KEYS:
        best_role: Role | None = None
        best_value = None
        for role in stats.populated_roles():
            value = statistic_by_key(stats.roles[role], key)
            if is_better_statistic(value, best_value):
                best_role, best_value = role, value
        out[key] = best_role
    return out


def role_win_rates(stats: PlayerRoleAndAggregateStatistics) -> dict[Role, RoleWinRate]:
    """{percent, numberOfGames} for each populated role."""
    return {
        role: RoleWinRate(percent=stats.roles[role].win.percent, number_of_games=stats.roles[role].win.count)
        for role in stats.populated_roles()
    }


def rank_positions(stats: PlayerRoleAndAggregateStatistics, descending: bool = True) -> list[Role]:
    rates = role_win_rates(stats)
    sign = -1 if descending else 1
    return sorted(rates, key=lambda role: sign * rates[role].percent)


def best_position(stats: PlayerRoleAndAggregateStatistics) -> Role | None:
    ranked = rank_positions(stats, descending=True)
    return ranked[0] if ranked else None


def worst_position(stats: PlayerRoleAndAggregateStatistics) -> Role | None:
    ranked = rank_positions(stats, descending=False)
    return ranked[0] if ranked else None


@dataclass
class TeammateRecord:
    player: str
    win_percent: float
    number_of_games: int

    def to_dict(self) -> dict[str, Any]:
        return {"player": self.player, "winPercent": self.win_percent, "numberOfGames": self.number_of_games}


def best_teammates(player: str, per_stack: Mapping[str, StackMembers]) -> list[TeammateRecord]:
    """
    Fold every stack the player appears in, keyed by teammate, weighting each stack by the
    player's game count in it. Sorted by win percent, highest first.
    """
    by_teammate: dict[str, BooleanStatistic] = {}
    for members in per_stack.values():
        own = members.get(player)
        if own is None:
            continue
        sample = BooleanStatistic(count=own.aggregate.number_of_games.count, percent=own.aggregate.win.percent)
        for teammate in members:
            if teammate == player:
                continue
            by_teammate[teammate] = merge_boolean(by_teammate.get(teammate, EMPTY_BOOLEAN), sample)
    records = [
        TeammateRecord(player=name, win_percent=s.percent, number_of_games=s.count)
        for name, s in by_teammate.items()
    ]
    return sorted(records, key=lambda r: -r.win_percent)


def winningest_stacks(
    player: str,
    per_stack: Mapping[str, StackMembers],
    minimum_games: int = 0,
    limit: int = WINNINGEST_STACK_LIMIT,
) -> list[str]:
    """Stack keys containing the player, by the player's win percent in them, highest first."""
    keys = [
        key for key, members in per_stack.items()
        if player in members and members[player].aggregate.number_of_games.count >= minimum_games
    ]
    keys.sort(key=lambda key: -per_stack[key][player].aggregate.win.percent)
    return keys[:limit]


@dataclass
class OverallPlayerStatistics:
    best_by_lane: dict[str, Role | None]
    winningest_stack: list[str]
    winningest_stack_at_least_5: list[str]
    best_teammates: list[TeammateRecord]
    win_percent_by_role: dict[Role, RoleWinRate]
    aggregate_win_percent: float
    number_of_games: int
    aggregate_win_interval: tuple[float, float] = (0.0, 0.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "bestByLane": {k: (r.value if r is not None else None) for k, r in self.best_by_lane.items()},
            "winningestStack": list(self.winningest_stack),
            "winningestStackAtLeast5": list(self.winningest_stack_at_least_5),
            "bestTeammates": [t.to_dict() for t in self.best_teammates],
            "winPercentByRole": {r.value: w.to_dict() for r, w in self.win_percent_by_role.items()},
            "aggregateWinPercent": self.aggregate_win_percent,
            "aggregateWinInterval": list(self.aggregate_win_interval),
            "numberOfGames": self.number_of_games,
        }


def build_overall_player_statistics(
    per_player: Mapping[str, PlayerRoleAndAggregateStatistics],
    per_stack: Mapping[str, StackMembers],
    z: float = DEFAULT_Z_SCORE,
) -> dict[str, OverallPlayerStatistics]:
    out: dict[str, OverallPlayerStatistics] = {}
    for player, stats in per_player.items():
        out[player] = OverallPlayerStatistics(
            best_by_lane=best_role_by_metric(stats),
            winningest_stack=winningest_stacks(player, per_stack),
            winningest_stack_at_least_5=winningest_stacks(
                player, per_stack, minimum_games=WINNINGEST_STACK_MIN_GAMES
            ),
            best_teammates=best_teammates(player, per_stack),
            win_percent_by_role=role_win_rates(stats),
            aggregate_win_percent=stats.aggregate.win.percent,
            number_of_games=stats.aggregate.number_of_games.count,
            aggregate_win_interval=stats.aggregate.win.confidence_interval(z),
        )
    return out


def group_aggregate_win_rate(overall_players: Mapping[str, OverallPlayerStatistics]) -> BooleanStatistic:
    """Count-weighted win rate across every player's aggregate."""
    total = EMPTY_BOOLEAN
    for p in overall_players.values():
        total = merge_boolean(total, BooleanStatistic(count=p.number_of_games, percent=p.aggregate_win_percent))
    return total


# ---------- Per-stack views ----------


@dataclass
class StackBasis:
    """basedOnStack: recommendation from the stack's own per-role data."""
    recommendation: Recommendation
    number_of_games: int
    win_percent: float
    player_best_positions: dict[str, Role | None]
    player_worst_positions: dict[str, Role | None]
    # whether some complete assignment has every slot at the minimum games
    threshold_satisfiable: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "numberOfGames": self.number_of_games,
            "winPercent": self.win_percent,
            "playerBestPositions": {p: (r.value if r else None) for p, r in self.player_best_positions.items()},
            "playerWorstPositions": {p: (r.value if r else None) for p, r in self.player_worst_positions.items()},
            "thresholdSatisfiable": self.threshold_satisfiable,
            **self.recommendation.to_dict(),
        }


@dataclass
class OverallStackStatistics:
    based_on_stack: StackBasis
    based_on_players: Recommendation
    based_on_players_filtered: Recommendation

    def to_dict(self) -> dict[str, Any]:
        return {
            "basedOnStack": self.based_on_stack.to_dict(),
            "basedOnPlayers": self.based_on_players.to_dict(),
            "basedOnPlayersFiltered": self.based_on_players_filtered.to_dict(),
        }


def _player_win_rates(
    overall_players: Mapping[str, OverallPlayerStatistics],
) -> dict[str, dict[Role, RoleWinRate]]:
    return {name: p.win_percent_by_role for name, p in overall_players.items()}


def build_overall_stack_statistics(
    per_stack: Mapping[str, StackMembers],
    overall_players: Mapping[str, OverallPlayerStatistics],
    minimum_games: int,
) -> dict[str, OverallStackStatistics]:
    """
    Three recommendations per stack: from the stack's own data (unfiltered), from each
    member's cross-stack data (unfiltered), and the same with the minimum-games filter.
    """
    player_rates = _player_win_rates(overall_players)
    out: dict[str, OverallStackStatistics] = {}
    for key, members in per_stack.items():
        stack_candidates = candidates_from_win_rates(
            {name: role_win_rates(stats) for name, stats in members.items()}
        )
        player_candidates = candidates_from_win_rates(player_rates, names=members)
        any_member = next(iter(members.values()))
        out[key] = OverallStackStatistics(
            based_on_stack=StackBasis(
                recommendation=recommend_positions(stack_candidates, apply_filter=False),
                number_of_games=any_member.aggregate.number_of_games.count,
                win_percent=any_member.aggregate.win.percent,
                player_best_positions={name: best_position(s) for name, s in members.items()},
                player_worst_positions={name: worst_position(s) for name, s in members.items()},
                threshold_satisfiable=recommend_positions(
                    stack_candidates, apply_filter=True, minimum_games=minimum_games
                ).is_filtered,
            ),
            based_on_players=recommend_positions(player_candidates, apply_filter=False),
            based_on_players_filtered=recommend_positions(
                player_candidates, apply_filter=True, minimum_games=minimum_games
            ),
        )
    logger.info("Built overall statistics for {} stacks", len(out))
    return out


def stacks_with_min_games(
    stack_reports: Mapping[str, OverallStackStatistics], minimum_games: int
) -> dict[str, OverallStackStatistics]:
    return {
        key: report for key, report in stack_reports.items()
        if report.based_on_stack.number_of_games >= minimum_games
    }


# ---------- Lineup query ----------


@dataclass(frozen=True)
class LineupEntry:
    """One requested lineup member, optionally pinned to a position."""
    player: str
    position: Role | None = None


@dataclass
class LineupRecommendation:
    stack_key: str
    constrained: Recommendation
    unconstrained: Recommendation
    stack: OverallStackStatistics | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "stack": self.stack_key,
            "found": self.stack is not None,
            "stackStatistics": self.stack.to_dict() if self.stack is not None else None,
            "withPositions": self.constrained.to_dict(),
            "withoutPositions": self.unconstrained.to_dict(),
        }


def parse_lineup(entries: Sequence[Mapping[str, Any]]) -> list[LineupEntry]:
    """[{"player": "Zed#NA1", "position": "MIDDLE"}, ...]; unknown positions are unpinned."""
    return [LineupEntry(player=e["player"], position=parse_role(e.get("position"))) for e in entries]


def recommend_lineup(
    lineup: Sequence[LineupEntry],
    roster: Roster,
    overall_players: Mapping[str, OverallPlayerStatistics],
    stack_reports: Mapping[str, OverallStackStatistics],
    minimum_games: int,
) -> LineupRecommendation:
    """
    Recommend positions for a requested group: once with requested positions pinned and the
    minimum-games filter on, once unconstrained and unfiltered.
    """
    names = [roster.require_canonical(e.player) for e in lineup]
    prefilled = {e.position: name for e, name in zip(lineup, names) if e.position is not None}
    key = stack_key(names)
    candidates = candidates_from_win_rates(_player_win_rates(overall_players), names=names)
    stack = stack_reports.get(key)
    if stack is None:
        logger.info("No games found for stack {}", key)
    return LineupRecommendation(
        stack_key=key,
        constrained=recommend_positions(
            candidates, prefilled=prefilled, apply_filter=True, minimum_games=minimum_games
        ),
        unconstrained=recommend_positions(candidates, apply_filter=False),
        stack=stack,
    )
