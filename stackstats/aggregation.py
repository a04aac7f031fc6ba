"""
Batch aggregation index: folds per-match samples into per-player, per-stack and per-duo maps.

The index is owned by one caller and mutated only through fold(); reports are read after
the batch is complete. Folding is sequential in input order, which keeps the numeric
midpoint merges deterministic.
"""
from __future__ import annotations

from itertools import combinations
from typing import Any, Iterable

from loguru import logger

from stackstats.extraction import MatchSamples, parse_match_statistics
from stackstats.models import (
    PlayerRoleAndAggregateStatistics,
    merge_player_role_and_aggregate_statistics,
)
from stackstats.roster import Roster, stack_key
from stackstats.schemas import Match
from stackstats.statistics import BooleanStatistic, merge_boolean

STACK_SIZE = 5

DUO_KEY_SEPARATOR = "-"
DUO_SIGNATURE_SEPARATOR = ":"


def duo_key(a: str, b: str) -> str:
    """Unordered pair identity: "Ashe#NA1-Zed#NA1"."""
    return DUO_KEY_SEPARATOR.join(sorted((a, b)))


def duo_signature(a: str, role_a: str, b: str, role_b: str) -> str:
    """Sorted "player-role:player-role" signature for one role pairing."""
    return DUO_SIGNATURE_SEPARATOR.join(sorted((f"{a}-{role_a}", f"{b}-{role_b}")))


def _fold_into(
    target: dict[str, PlayerRoleAndAggregateStatistics],
    name: str,
    stats: PlayerRoleAndAggregateStatistics,
) -> None:
    current = target.get(name)
    if current is None:
        target[name] = stats
    else:
        target[name] = merge_player_role_and_aggregate_statistics(current, stats)


class AggregationIndex:
    """
    per_player: name -> PlayerRoleAndAggregateStatistics over the whole batch.
    per_stack:  stack key -> (name -> PlayerRoleAndAggregateStatistics), full 5-stacks only.
    per_duo:    duo key -> (role-pair signature -> BooleanStatistic of the pair's win rate).
    """

    def __init__(self) -> None:
        self.per_player: dict[str, PlayerRoleAndAggregateStatistics] = {}
        self.per_stack: dict[str, dict[str, PlayerRoleAndAggregateStatistics]] = {}
        self.per_duo: dict[str, dict[str, BooleanStatistic]] = {}
        self.matches_folded = 0

    def fold(self, samples: MatchSamples) -> None:
        """Merge one match's samples into all three maps."""
        names = samples.names()
        if len(names) == STACK_SIZE:
            stack = self.per_stack.setdefault(stack_key(names), {})
            for name in names:
                _fold_into(stack, name, samples.players[name])
        else:
            logger.debug(
                "Match {} has {} tracked players; not folded into stacks",
                samples.match_id, len(names),
            )

        for name in names:
            _fold_into(self.per_player, name, samples.players[name])

        for a, b in combinations(names, 2):
            if samples.teams.get(a) != samples.teams.get(b):
                continue
            self._fold_duo(a, samples.players[a], b, samples.players[b])

        self.matches_folded += 1

    def _fold_duo(
        self,
        a: str,
        stats_a: PlayerRoleAndAggregateStatistics,
        b: str,
        stats_b: PlayerRoleAndAggregateStatistics,
    ) -> None:
        # Stores A's win. Only valid because teammates share the outcome.
        duo = self.per_duo.setdefault(duo_key(a, b), {})
        for role_a in stats_a.populated_roles():
            win = stats_a.roles[role_a].win
            for role_b in stats_b.populated_roles():
                signature = duo_signature(a, role_a.value, b, role_b.value)
                current = duo.get(signature)
                duo[signature] = win if current is None else merge_boolean(current, win)

    def fold_match(self, match: Match, roster: Roster) -> MatchSamples:
        samples = parse_match_statistics(match, roster)
        self.fold(samples)
        return samples

    def fold_all(self, matches: Iterable[Match], roster: Roster) -> AggregationIndex:
        for match in matches:
            self.fold_match(match, roster)
        logger.info(
            "Folded {} matches: {} players, {} stacks, {} duos",
            self.matches_folded, len(self.per_player), len(self.per_stack), len(self.per_duo),
        )
        return self

    def merge(self, other: AggregationIndex) -> AggregationIndex:
        """New index combining two independently folded batches (self first, then other)."""
        merged = AggregationIndex()
        for source in (self, other):
            for name, stats in source.per_player.items():
                _fold_into(merged.per_player, name, stats)
            for key, members in source.per_stack.items():
                stack = merged.per_stack.setdefault(key, {})
                for name, stats in members.items():
                    _fold_into(stack, name, stats)
            for key, signatures in source.per_duo.items():
                duo = merged.per_duo.setdefault(key, {})
                for signature, win in signatures.items():
                    current = duo.get(signature)
                    duo[signature] = win if current is None else merge_boolean(current, win)
            merged.matches_folded += source.matches_folded
        return merged

    def to_dict(self) -> dict[str, Any]:
        return {
            "players": {name: s.to_dict() for name, s in self.per_player.items()},
            "stacks": {
                key: {name: s.to_dict() for name, s in members.items()}
                for key, members in self.per_stack.items()
            },
            "duos": {
                key: {sig: win.to_dict() for sig, win in signatures.items()}
                for key, signatures in self.per_duo.items()
            },
        }
