"""
Stack statistics engine: per-player, per-role, per-stack and per-duo running statistics for
a fixed roster of tracked players, plus win-rate maximizing role recommendations.
"""
from .aggregation import AggregationIndex
from .recommender import Candidate, NoAssignmentError, Recommendation, RoleWinRate, recommend_positions
from .roles import Role
from .roster import Roster, UnknownPlayerError, stack_key
from .services import ReportBundle, build_lineup, build_reports

__all__ = [
    "AggregationIndex",
    "Candidate",
    "NoAssignmentError",
    "Recommendation",
    "ReportBundle",
    "Role",
    "RoleWinRate",
    "Roster",
    "UnknownPlayerError",
    "build_lineup",
    "build_reports",
    "recommend_positions",
    "stack_key",
]
