"""
REST API for the stack statistics engine.
Thin wrappers around the batch service and the recommender. Stateless: every request
carries its own roster and matches; nothing is stored between requests.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from stackstats.analytics import LineupEntry
from stackstats.config import FilterConfig
from stackstats.log import configure_logging
from stackstats.recommender import (
    Candidate,
    NoAssignmentError,
    RoleWinRate,
    recommend_positions,
)
from stackstats.roles import Role, list_all_roles, parse_role
from stackstats.roster import Roster, UnknownPlayerError
from stackstats.schemas import Match
from stackstats.services.report_service import build_lineup, build_reports


# ---------- Lifespan ----------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging()
    yield


# ---------- FastAPI app ----------
app = FastAPI(
    title="Stack Statistics API",
    description="Per-player, per-stack and per-duo statistics with role recommendations",
    version="0.1.0",
    lifespan=lifespan,
)


# ---------- Request models ----------


class RosterPayload(BaseModel):
    players: dict[str, str] = Field(..., description="Display name (e.g. Zed#NA1) -> puuid")
    aliases: dict[str, str] = Field(default_factory=dict, description="Alternate name -> canonical name")

    def to_roster(self) -> Roster:
        return Roster(handles=dict(self.players), aliases=dict(self.aliases))


class ReportsRequest(BaseModel):
    roster: RosterPayload
    matches: list[Match]
    minimum_games: int | None = Field(None, ge=0, description="Overrides STACKSTATS_MINIMUM_GAMES")

    def filter_config(self) -> FilterConfig:
        if self.minimum_games is None:
            return FilterConfig.from_env()
        return FilterConfig(minimum_number_of_games=self.minimum_games)


class LineupEntryPayload(BaseModel):
    player: str
    position: str | None = Field(None, description="One of TOP, JUNGLE, MIDDLE, BOTTOM, UTILITY")


class LineupRequest(ReportsRequest):
    query: list[LineupEntryPayload] = Field(..., min_length=5, max_length=5)


class RoleWinRatePayload(BaseModel):
    percent: float = Field(0.0, ge=0.0, le=1.0)
    numberOfGames: int = Field(0, ge=0)


class CandidatePayload(BaseModel):
    name: str
    roles: dict[str, RoleWinRatePayload] = Field(default_factory=dict)


class RecommendRequest(BaseModel):
    candidates: list[CandidatePayload]
    prefilled: dict[str, str] = Field(default_factory=dict, description="Role -> candidate name")
    apply_filter: bool = False
    minimum_games: int | None = Field(None, ge=0)


def _require_role(value: str) -> Role:
    role = parse_role(value)
    if role is None:
        raise HTTPException(status_code=400, detail=f"Unknown role: {value}")
    return role


def _to_candidate(payload: CandidatePayload) -> Candidate:
    return Candidate(
        name=payload.name,
        win_rates={
            _require_role(role): RoleWinRate(percent=r.percent, number_of_games=r.numberOfGames)
            for role, r in payload.roles.items()
        },
    )


# ---------- Endpoints ----------


@app.get("/roles")
def list_roles() -> dict[str, Any]:
    """List the 5 roles in iteration (tie-break) order."""
    return {"roles": [r.value for r in list_all_roles()]}


@app.post("/reports")
def create_reports(req: ReportsRequest) -> dict[str, Any]:
    """Fold the given (already qualified) matches and return every report."""
    bundle = build_reports(req.matches, req.roster.to_roster(), filter_config=req.filter_config())
    return bundle.to_dict()


@app.post("/recommend")
def recommend(req: RecommendRequest) -> dict[str, Any]:
    """Best 5-role assignment for exactly 5 candidates."""
    if len(req.candidates) != 5:
        raise HTTPException(status_code=400, detail="Exactly 5 candidates are required")
    candidates = [_to_candidate(c) for c in req.candidates]
    prefilled = {_require_role(role): name for role, name in req.prefilled.items()}
    minimum_games = (
        req.minimum_games if req.minimum_games is not None
        else FilterConfig.from_env().minimum_number_of_games
    )
    try:
        result = recommend_positions(
            candidates, prefilled=prefilled, apply_filter=req.apply_filter, minimum_games=minimum_games
        )
    except NoAssignmentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return result.to_dict()


@app.post("/lineup")
def lineup(req: LineupRequest) -> dict[str, Any]:
    """Recommended positions for a requested 5-player lineup, with and without pinned positions."""
    roster = req.roster.to_roster()
    entries = [
        LineupEntry(player=e.player, position=_require_role(e.position) if e.position else None)
        for e in req.query
    ]
    bundle = build_reports(req.matches, roster, filter_config=req.filter_config())
    try:
        result = build_lineup(bundle, roster, entries)
    except UnknownPlayerError as e:
        raise HTTPException(status_code=400, detail=f"Player not in roster: {e.args[0]}")
    except NoAssignmentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return result.to_dict()


# ---------- Run with: uvicorn stackstats.api:app --reload ----------
