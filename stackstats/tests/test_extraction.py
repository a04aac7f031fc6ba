"""
Per-match extraction: challenge-vs-base field sourcing, lane opponents, alias canonicalization.
"""
from __future__ import annotations

from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from stackstats.extraction import find_enemy_laner, parse_match_statistics, parse_player_statistics
from stackstats.roles import Role
from stackstats.schemas import MatchParticipant
from stackstats.statistics import BooleanStatistic, NumericStatistic


def _participant(**kwargs) -> MatchParticipant:
    base = {"puuid": "p", "teamId": 100, "teamPosition": "TOP", "win": True, "kills": 5, "deaths": 2, "assists": 7}
    base.update(kwargs)
    return MatchParticipant.model_validate(base)


class TestParsePlayerStatistics:
    def test_counters_and_outcome(self):
        stats = parse_player_statistics(_participant(visionScore=22, goldEarned=9000))
        assert stats.number_of_games == BooleanStatistic(count=1, percent=1.0)
        assert stats.win == BooleanStatistic(count=1, percent=1.0)
        assert stats.kills == NumericStatistic(5, 5, 5)
        assert stats.vision_score.average == 22
        assert stats.gold_earned.average == 9000

    def test_loss_still_counts_a_game(self):
        stats = parse_player_statistics(_participant(win=False))
        assert stats.number_of_games.count == 1
        assert stats.win == BooleanStatistic(count=1, percent=0.0)

    def test_challenge_preferred_over_base(self):
        stats = parse_player_statistics(_participant(
            baronKills=1, dragonKills=3,
            challenges={"baronTakedowns": 2, "kda": 4.5, "dragonTakedowns": 4},
        ))
        assert stats.barons.average == 2
        assert stats.dragons.average == 4
        assert stats.kda.average == 4.5

    def test_zero_challenge_falls_back_to_base(self):
        stats = parse_player_statistics(_participant(dragonKills=3, challenges={"dragonTakedowns": 0}))
        assert stats.dragons.average == 3

    def test_local_kda_without_challenges(self):
        stats = parse_player_statistics(_participant(kills=5, deaths=2, assists=7))
        assert stats.kda.average == pytest.approx(6.0)

    def test_deathless_kda(self):
        stats = parse_player_statistics(_participant(kills=4, deaths=0, assists=6))
        assert stats.kda.average == 10
        # zero deaths is no observation
        assert stats.deaths is None

    def test_first_blood_and_tower_from_kill_or_assist(self):
        stats = parse_player_statistics(_participant(firstBloodAssist=True, firstTowerKill=True))
        assert stats.first_blood.percent == 1.0
        assert stats.first_tower.percent == 1.0
        plain = parse_player_statistics(_participant())
        assert plain.first_blood == BooleanStatistic(count=1, percent=0.0)

    def test_challenge_only_fields(self):
        stats = parse_player_statistics(_participant(challenges={
            "riftHeraldTakedowns": 1,
            "soloKills": 3,
            "wardTakedownsBefore20M": 2,
            "teamDamagePercentage": 0.31,
        }))
        assert stats.rift_herald.average == 1
        assert stats.solo_kills.average == 3
        assert stats.ward_takedowns_before_20m.average == 2
        assert stats.team_damage_percentage.average == pytest.approx(0.31)
        assert stats.gold_per_minute is None

    def test_non_numeric_challenge_is_missing(self):
        stats = parse_player_statistics(_participant(challenges={"soloKills": "n/a", "gameLength": True}))
        assert stats.solo_kills is None
        assert stats.game_length is None


class TestEnemyLaner:
    def test_found_on_other_team(self, build_match):
        match = build_match()
        zed = match.participant("puuid-zed")
        enemy = find_enemy_laner(match, zed)
        assert enemy is not None
        assert enemy.team_id == 200
        assert enemy.team_position == "TOP"

    def test_missing_opponent_is_absent(self, build_match, roster):
        match = build_match(enemy_positions=["TOP", "JUNGLE", "BOTTOM", "UTILITY", ""])
        samples = parse_match_statistics(match, roster)
        lux = samples.players["Lux#NA1"]
        assert lux.roles[Role.MIDDLE].enemy_laner is None
        zed = samples.players["Zed#NA1"]
        assert zed.roles[Role.TOP].enemy_laner.kills.average == 3

    def test_no_position_has_no_opponent(self, build_match):
        match = build_match(lineup={"Zed#NA1": ""}, enemy_positions=["", "TOP"])
        assert find_enemy_laner(match, match.participant("puuid-zed")) is None


class TestParseMatchStatistics:
    def test_one_entry_per_tracked_player(self, build_match, roster):
        samples = parse_match_statistics(build_match(), roster)
        assert sorted(samples.names()) == ["Ashe#NA1", "Braum#NA1", "Jinx#NA1", "Lux#NA1", "Zed#NA1"]
        assert set(samples.teams.values()) == {100}

    def test_sample_in_role_and_aggregate(self, build_match, roster):
        samples = parse_match_statistics(build_match(), roster)
        jinx = samples.players["Jinx#NA1"]
        assert jinx.populated_roles() == [Role.BOTTOM]
        assert jinx.roles[Role.BOTTOM] == jinx.aggregate

    def test_absent_players_produce_no_entry(self, build_match, roster):
        match = build_match(lineup={"Zed#NA1": "TOP", "Ashe#NA1": "JUNGLE"})
        samples = parse_match_statistics(match, roster)
        assert samples.names() == ["Zed#NA1", "Ashe#NA1"]

    def test_unrecognised_position_is_aggregate_only(self, build_match, roster):
        match = build_match(lineup={"Zed#NA1": "Invalid"})
        zed = parse_match_statistics(match, roster).players["Zed#NA1"]
        assert zed.roles == {}
        assert zed.aggregate.number_of_games.count == 1

    def test_alias_is_canonicalized(self, build_match, roster):
        match = build_match(lineup={"ZedAlt#NA1": "MIDDLE"})
        samples = parse_match_statistics(match, roster)
        assert samples.names() == ["Zed#NA1"]
        assert samples.players["Zed#NA1"].populated_roles() == [Role.MIDDLE]
