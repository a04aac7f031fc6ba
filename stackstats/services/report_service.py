"""
Batch reporting: matches + roster -> aggregation index -> overall player and stack reports.
Pure orchestration over already-qualified matches. Does not fetch, filter or persist.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from loguru import logger

from stackstats.aggregation import AggregationIndex
from stackstats.analytics import (
    LineupEntry,
    LineupRecommendation,
    OverallPlayerStatistics,
    OverallStackStatistics,
    build_overall_player_statistics,
    build_overall_stack_statistics,
    group_aggregate_win_rate,
    recommend_lineup,
    stacks_with_min_games,
)
from stackstats.config import STACK_GAME_THRESHOLDS, FilterConfig, get_z_score
from stackstats.roster import Roster
from stackstats.schemas import Match
from stackstats.statistics import BooleanStatistic


@dataclass
class ReportBundle:
    """Everything one batch produces, ready to hand to a writer."""
    index: AggregationIndex
    overall_players: dict[str, OverallPlayerStatistics]
    overall_stacks: dict[str, OverallStackStatistics]
    group_win_rate: BooleanStatistic
    filter_config: FilterConfig

    def stacks_at_least(self, minimum_games: int) -> dict[str, OverallStackStatistics]:
        return stacks_with_min_games(self.overall_stacks, minimum_games)

    def to_dict(self) -> dict[str, Any]:
        overall_stacks = {key: s.to_dict() for key, s in self.overall_stacks.items()}
        return {
            **self.index.to_dict(),
            "overall": {
                "players": {name: p.to_dict() for name, p in self.overall_players.items()},
                "stacks": overall_stacks,
                **{
                    f"stacksAtLeast{n}": sorted(self.stacks_at_least(n))
                    for n in STACK_GAME_THRESHOLDS
                },
            },
            "groupAggregateWinPercent": self.group_win_rate.percent,
            "matchesFolded": self.index.matches_folded,
        }


def build_reports(
    matches: Iterable[Match],
    roster: Roster,
    filter_config: FilterConfig | None = None,
    z: float | None = None,
) -> ReportBundle:
    """
    Fold every match (input order) and derive the overall reports.
    Matches are assumed deduplicated and qualifying; ones without 5 tracked players still
    count for per-player and per-duo data but not for stacks.
    """
    config = filter_config or FilterConfig.from_env()
    index = AggregationIndex().fold_all(matches, roster)
    overall_players = build_overall_player_statistics(
        index.per_player, index.per_stack, z=z if z is not None else get_z_score()
    )
    overall_stacks = build_overall_stack_statistics(
        index.per_stack, overall_players, minimum_games=config.minimum_number_of_games
    )
    group = group_aggregate_win_rate(overall_players)
    logger.info("Group aggregate win percent {:.3f} over {} player-games", group.percent, group.count)
    return ReportBundle(
        index=index,
        overall_players=overall_players,
        overall_stacks=overall_stacks,
        group_win_rate=group,
        filter_config=config,
    )


def build_lineup(bundle: ReportBundle, roster: Roster, lineup: Sequence[LineupEntry]) -> LineupRecommendation:
    return recommend_lineup(
        lineup,
        roster,
        bundle.overall_players,
        bundle.overall_stacks,
        minimum_games=bundle.filter_config.minimum_number_of_games,
    )
