"""
API integration tests.
Uses TestClient to avoid starting a server.
Requires: pip install httpx (for TestClient)
"""
from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure project root on path
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from stackstats.api import app

MAIN_STACK = "Ashe#NA1-Braum#NA1-Jinx#NA1-Lux#NA1-Zed#NA1"


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def roster_payload(roster):
    return {"players": roster.handles, "aliases": roster.aliases}


@pytest.fixture
def match_payloads(build_match):
    return [build_match(f"NA1_{i}", win=i != 2).model_dump(by_alias=True) for i in range(1, 5)]


def _candidates(names: str = "ABCDE") -> list[dict]:
    return [
        {"name": n, "roles": {r: {"percent": 0.5, "numberOfGames": 4} for r in ("TOP", "JUNGLE", "MIDDLE", "BOTTOM", "UTILITY")}}
        for n in names
    ]


def test_list_roles(client):
    """GET /roles returns the 5 roles in iteration order."""
    resp = client.get("/roles")
    assert resp.status_code == 200
    assert resp.json() == {"roles": ["TOP", "JUNGLE", "MIDDLE", "BOTTOM", "UTILITY"]}


def test_reports(client, roster_payload, match_payloads):
    """POST /reports folds the batch and returns every report."""
    resp = client.post("/reports", json={"roster": roster_payload, "matches": match_payloads, "minimum_games": 2})
    assert resp.status_code == 200
    data = resp.json()
    assert data["matchesFolded"] == 4
    assert data["groupAggregateWinPercent"] == pytest.approx(0.75)
    assert list(data["stacks"]) == [MAIN_STACK]
    stack = data["overall"]["stacks"][MAIN_STACK]
    assert stack["basedOnPlayersFiltered"]["isFiltered"] is True
    assert stack["basedOnPlayersFiltered"]["recommendedPositions"]["JUNGLE"] == "Ashe#NA1"
    assert data["overall"]["players"]["Zed#NA1"]["winPercentByRole"]["TOP"]["numberOfGames"] == 4


def test_reports_ignores_unknown_match_keys(client, roster_payload, match_payloads):
    match_payloads[0]["info"]["gameMode"] = "CLASSIC"
    match_payloads[0]["info"]["participants"][0]["championName"] = "Zed"
    resp = client.post("/reports", json={"roster": roster_payload, "matches": match_payloads})
    assert resp.status_code == 200


def test_reports_rejects_malformed_match(client, roster_payload):
    resp = client.post("/reports", json={"roster": roster_payload, "matches": [{"metadata": {}}]})
    assert resp.status_code == 422


def test_recommend(client):
    """POST /recommend returns the best assignment; ties keep candidate order."""
    resp = client.post("/recommend", json={"candidates": _candidates()})
    assert resp.status_code == 200
    data = resp.json()
    assert data["recommendedPositions"] == {"TOP": "A", "JUNGLE": "B", "MIDDLE": "C", "BOTTOM": "D", "UTILITY": "E"}
    assert data["recommendedPositionsWinPercent"] == pytest.approx(0.5)
    assert data["isFiltered"] is False


def test_recommend_prefilled_and_filter(client):
    resp = client.post("/recommend", json={
        "candidates": _candidates(),
        "prefilled": {"middle": "A"},
        "apply_filter": True,
        "minimum_games": 4,
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["recommendedPositions"]["MIDDLE"] == "A"
    assert data["isFiltered"] is True


def test_recommend_wrong_candidate_count(client):
    resp = client.post("/recommend", json={"candidates": _candidates("ABCD")})
    assert resp.status_code == 400


def test_recommend_unknown_role(client):
    resp = client.post("/recommend", json={"candidates": _candidates(), "prefilled": {"SUPPORT": "A"}})
    assert resp.status_code == 400
    assert "Unknown role" in resp.json()["detail"]


def test_recommend_impossible_prefill(client):
    resp = client.post("/recommend", json={"candidates": _candidates(), "prefilled": {"TOP": "Z"}})
    assert resp.status_code == 400


def test_lineup(client, roster_payload, match_payloads):
    """POST /lineup pins requested positions and reports the stack when it has history."""
    query = [
        {"player": "ZedAlt#NA1", "position": "TOP"},
        {"player": "Ashe#NA1"},
        {"player": "Lux#NA1"},
        {"player": "Jinx#NA1"},
        {"player": "Braum#NA1", "position": "UTILITY"},
    ]
    resp = client.post("/lineup", json={
        "roster": roster_payload, "matches": match_payloads, "minimum_games": 2, "query": query,
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["stack"] == MAIN_STACK
    assert data["found"] is True
    assert data["withPositions"]["recommendedPositions"]["TOP"] == "Zed#NA1"
    assert data["withPositions"]["isFiltered"] is True
    assert data["withoutPositions"]["isFiltered"] is False


def test_lineup_unknown_player(client, roster_payload, match_payloads):
    query = [{"player": n} for n in ("Nobody#NA1", "Ashe#NA1", "Lux#NA1", "Jinx#NA1", "Braum#NA1")]
    resp = client.post("/lineup", json={"roster": roster_payload, "matches": match_payloads, "query": query})
    assert resp.status_code == 400
    assert "Nobody#NA1" in resp.json()["detail"]


def test_lineup_requires_five(client, roster_payload, match_payloads):
    query = [{"player": "Zed#NA1"}]
    resp = client.post("/lineup", json={"roster": roster_payload, "matches": match_payloads, "query": query})
    assert resp.status_code == 422
