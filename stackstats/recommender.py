"""
Role-assignment recommender.

Given 5 candidates, each paired with a per-role {percent, numberOfGames} win statistic,
find the assignment of the 5 roles (one role per candidate) whose count-weighted
combined win rate is highest.

Search: every way to pick one role per candidate, in candidate order, is generated lazily;
only picks that cover all 5 roles exactly once survive. Pinned roles and the optional
minimum-games filter narrow the survivors. The highest combined percent wins and ties keep
the first assignment generated, so the result depends on candidate order and role order.

Precondition: exactly 5 candidates. With any other count no complete assignment exists and
NoAssignmentError is raised.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from itertools import product
from typing import Any, Iterable, Iterator, Mapping, Sequence

from loguru import logger

from stackstats.roles import ROLE_COUNT, ROLE_ORDER, Role
from stackstats.statistics import EMPTY_BOOLEAN, BooleanStatistic, merge_boolean


class NoAssignmentError(ValueError):
    """No complete role assignment satisfies the inputs (wrong candidate count or pins)."""


@dataclass(frozen=True)
class RoleWinRate:
    """Win statistic for one candidate in one role."""
    percent: float = 0.0
    number_of_games: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"percent": self.percent, "numberOfGames": self.number_of_games}

    def as_boolean(self) -> BooleanStatistic:
        return BooleanStatistic(count=self.number_of_games, percent=self.percent)


@dataclass(frozen=True)
class Candidate:
    """A candidate identity paired directly with its per-role statistics."""
    name: str
    win_rates: Mapping[Role, RoleWinRate] = field(default_factory=dict)


@dataclass(frozen=True)
class Slot:
    """One pick in an assignment: this candidate plays this role."""
    name: str
    role: Role
    win_rate: RoleWinRate


Assignment = tuple[Slot, ...]


@dataclass
class Recommendation:
    positions: dict[Role, str]
    win_percent: float
    is_filtered: bool
    number_of_games: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "recommendedPositions": {
                role.value: self.positions[role] for role in ROLE_ORDER if role in self.positions
            },
            "recommendedPositionsWinPercent": self.win_percent,
            "isFiltered": self.is_filtered,
        }


# ---------- Search ----------


def candidate_slots(candidate: Candidate) -> list[Slot]:
    """One slot per role, fixed role order; roles without data get {0, 0}."""
    return [
        Slot(candidate.name, role, candidate.win_rates.get(role) or RoleWinRate())
        for role in ROLE_ORDER
    ]


def is_complete(assignment: Assignment) -> bool:
    """Exactly 5 picks covering all 5 roles with no duplicates."""
    return len(assignment) == ROLE_COUNT and len({slot.role for slot in assignment}) == ROLE_COUNT


def generate_assignments(candidates: Sequence[Candidate]) -> Iterator[Assignment]:
    """
    Lazily yield complete assignments, depth-first: first candidate's role varies slowest.
    Restartable: each call starts a fresh generator.
    """
    rows = [candidate_slots(c) for c in candidates]
    for assignment in product(*rows):
        if is_complete(assignment):
            yield assignment


def satisfies_prefilled(assignment: Assignment, prefilled: Mapping[Role, str]) -> bool:
    """Every pinned role is held by the pinned candidate."""
    for slot in assignment:
        required = prefilled.get(slot.role)
        if required is not None and required != slot.name:
            return False
    return True


def passes_minimum_games(assignment: Assignment, minimum_games: int) -> bool:
    """Every slot has data and at least minimum_games games."""
    return all(
        slot.win_rate.number_of_games and slot.win_rate.number_of_games >= minimum_games
        for slot in assignment
    )


def combined_win_rate(assignment: Iterable[Slot]) -> BooleanStatistic:
    total = EMPTY_BOOLEAN
    for slot in assignment:
        total = merge_boolean(total, slot.win_rate.as_boolean())
    return total


def _to_recommendation(assignment: Assignment, total: BooleanStatistic, is_filtered: bool) -> Recommendation:
    return Recommendation(
        positions={slot.role: slot.name for slot in assignment},
        win_percent=total.percent,
        is_filtered=is_filtered,
        number_of_games=total.count,
    )


def recommend_positions(
    candidates: Sequence[Candidate],
    prefilled: Mapping[Role, str] | None = None,
    apply_filter: bool = False,
    minimum_games: int = 0,
) -> Recommendation:
    """
    Best role assignment for exactly 5 candidates.
    With apply_filter, assignments containing a slot under minimum_games are skipped; if that
    leaves nothing, the unfiltered best is returned with is_filtered=False.
    """
    prefilled = prefilled or {}
    best: tuple[Assignment, BooleanStatistic] | None = None
    best_filtered: tuple[Assignment, BooleanStatistic] | None = None

    for assignment in generate_assignments(candidates):
        if not satisfies_prefilled(assignment, prefilled):
            continue
        total = combined_win_rate(assignment)
        # strict > keeps the first assignment on ties
        if best is None or total.percent > best[1].percent:
            best = (assignment, total)
        if apply_filter and passes_minimum_games(assignment, minimum_games):
            if best_filtered is None or total.percent > best_filtered[1].percent:
                best_filtered = (assignment, total)

    if best is None:
        raise NoAssignmentError(
            f"No complete assignment for {len(candidates)} candidates "
            f"(need exactly {ROLE_COUNT}) with pinned roles {sorted(r.value for r in prefilled)}"
        )
    if best_filtered is not None:
        return _to_recommendation(*best_filtered, is_filtered=True)
    if apply_filter:
        logger.debug(
            "No assignment has every slot at >= {} games; falling back to unfiltered",
            minimum_games,
        )
    return _to_recommendation(*best, is_filtered=False)


def candidates_from_win_rates(
    win_rates: Mapping[str, Mapping[Role, RoleWinRate]],
    names: Iterable[str] | None = None,
) -> list[Candidate]:
    """Candidates in mapping order, optionally restricted to names."""
    wanted = set(names) if names is not None else None
    return [
        Candidate(name=name, win_rates=rates)
        for name, rates in win_rates.items()
        if wanted is None or name in wanted
    ]
