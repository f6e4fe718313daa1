"""Tests for MatchSimulator.

Tests verify:
1. Map selection rebalances teams and refreshes advantages
2. Halftime swap after exactly 12 rounds
3. First to 13 wins in regulation; 12-12 goes to overtime
4. Overtime swaps sides every round and ends on a 2-round margin
5. Per-match counters reset, running tallies survive
6. Seeded simulators are reproducible
"""

from itertools import chain, repeat

import pytest

from valsim.engine import match_engine
from valsim.engine.match_engine import MatchPhase, MatchSimulator
from valsim.models.state import AdvantageSnapshot

TEAM_ONE = ["Jett", "Sova", "Omen", "Killjoy", "KAY/O"]
TEAM_TWO = ["Raze", "Fade", "Viper", "Cypher", "Neon"]


def script_winners(monkeypatch, winners):
    """Replace the round draw with a fixed sequence of winners."""
    sequence = iter(winners)

    def scripted(team1_chance, rng, epsilon=0.0):
        return next(sequence), False

    monkeypatch.setattr(match_engine, "resolve_round", scripted)


@pytest.fixture
def simulator(team_one, team_two):
    return MatchSimulator(team_one, team_two, random_seed=7)


class TestConfiguration:
    """Tests for map and attacker setup."""

    def test_defaults(self, simulator):
        assert simulator.map_name == "ascent"
        assert simulator.attacker_map_advantage == -5.05
        assert simulator.attacking_team == 1
        assert simulator.current_round == 1
        assert simulator.phase == MatchPhase.IDLE

    def test_default_map_rebalances_teams(self, simulator):
        """Ascent: team one 56 power, team two 46."""
        assert simulator.team1.total_relative_power == 56
        assert simulator.team2.total_relative_power == 46
        assert simulator.relative_power_advantage == pytest.approx(2.0)

    def test_set_map(self, simulator):
        snapshot = simulator.set_map(" BIND ")
        assert snapshot.map_name == "bind"
        assert simulator.attacker_map_advantage == -3.81
        # 0.2 * (35 - 56)
        assert simulator.relative_power_advantage == pytest.approx(-4.2)

    def test_unknown_map_degrades(self, simulator):
        snapshot = simulator.set_map("atlantis")
        assert snapshot.map_name == "N/A"
        assert snapshot.attacker_map_advantage == 0.0
        # Baseline powers: 0.2 * (43 - 46)
        assert snapshot.relative_power_advantage == pytest.approx(-0.6)

    def test_refresh_advantages_keeps_map(self, simulator):
        simulator.set_map("split")
        assert simulator.refresh_advantages().map_name == "split"

    @pytest.mark.parametrize("team", [0, 3, "1"])
    def test_invalid_attacker_rejected(self, simulator, team):
        with pytest.raises(ValueError):
            simulator.set_attacking_team(team)
        assert simulator.attacking_team == 1

    def test_invalid_attacker_in_engine_is_fatal(self, simulator):
        simulator.state.attacking_team = 3
        with pytest.raises(RuntimeError):
            simulator.simulate_round()


class TestRound:
    """Tests for a single round."""

    def test_simulate_round(self, simulator):
        record = simulator.simulate_round()
        assert record.round_number == 1
        assert record.winner in (1, 2)
        assert record.team1_rounds + record.team2_rounds == 1
        assert record.team1_style in ("AGGRO", "CONTROL", "MIDRANGE")
        assert simulator.current_round == 2

    def test_overwhelming_edge_wins(self, simulator):
        simulator.snapshot = AdvantageSnapshot(relative_power_advantage=60.0)
        for _ in range(50):
            assert simulator.simulate_round().winner == 1

    def test_identical_teams_neutral_map_tie_breaks(self, team_factory):
        simulator = MatchSimulator(
            team_factory(TEAM_ONE), team_factory(TEAM_ONE), map_name="none", random_seed=3
        )
        assert simulator.relative_power_advantage == 0.0
        records = [simulator.simulate_round() for _ in range(200)]
        tie_breaks = [r for r in records if r.tie_break]
        assert tie_breaks
        assert all(r.team1_chance == 50.0 for r in tie_breaks)


class TestMatchFlow:
    """Tests for halves, overtime and tallies, with scripted round winners."""

    def test_halftime_after_twelve_rounds(self, simulator, monkeypatch):
        script_winners(monkeypatch, repeat(1))
        record = simulator.simulate_match(detailed=True)

        assert record.winner == 1
        assert (record.team1_rounds, record.team2_rounds) == (13, 0)
        attackers = [r.attacking_team for r in record.rounds]
        assert attackers[:12] == [1] * 12
        assert attackers[12] == 2
        assert not record.went_to_overtime

    def test_second_half_comeback(self, simulator, monkeypatch):
        """Team 2 leads 11-1 at the half, team 1 wins the next 12: 13-11."""
        script_winners(monkeypatch, chain(repeat(2, 11), repeat(1)))
        record = simulator.simulate_match(detailed=True)

        assert (record.team1_rounds, record.team2_rounds) == (13, 11)
        assert record.rounds_played == 24
        assert not record.went_to_overtime
        assert record.winner == 1

    def test_twelve_all_forces_overtime(self, simulator, monkeypatch):
        """Team 2 wins the first half 12-0, team 1 wins everything after."""
        script_winners(monkeypatch, chain(repeat(2, 12), repeat(1)))
        record = simulator.simulate_match(detailed=True)

        assert record.went_to_overtime
        assert (record.team1_rounds, record.team2_rounds) == (14, 12)
        assert record.rounds_played == 26

    def test_overtime(self, simulator, monkeypatch):
        """12-12 in regulation, then 1-1, 1-1, then team 1 twice: 16-14."""
        script_winners(monkeypatch, chain([1, 2] * 12, [1, 2, 1, 2, 1, 1]))
        record = simulator.simulate_match(detailed=True)

        assert record.went_to_overtime
        assert (record.team1_rounds, record.team2_rounds) == (16, 14)
        assert record.winner == 1
        assert len(record.rounds) == 30

        overtime = [r for r in record.rounds if r.overtime]
        assert len(overtime) == 6
        assert overtime[0].attacking_team != record.rounds[23].attacking_team
        for previous, current in zip(overtime, overtime[1:]):
            assert previous.attacking_team != current.attacking_team

    def test_overtime_loser_can_win(self, simulator, monkeypatch):
        script_winners(monkeypatch, chain([1, 2] * 12, [2, 2]))
        record = simulator.simulate_match()
        assert record.winner == 2
        assert (record.team1_rounds, record.team2_rounds) == (12, 14)

    def test_reset_after_match(self, simulator, monkeypatch):
        simulator.set_attacking_team(2)
        script_winners(monkeypatch, repeat(2))
        simulator.simulate_match()

        assert simulator.current_round == 1
        assert simulator.state.rounds_played == 0
        assert simulator.attacking_team == 2
        assert simulator.state.team2_match_wins == 1
        assert simulator.state.team2_total_rounds == 13
        assert simulator.phase == MatchPhase.COMPLETE

    def test_starting_attacker_two(self, simulator, monkeypatch):
        simulator.set_attacking_team(2)
        script_winners(monkeypatch, repeat(1))
        record = simulator.simulate_match(detailed=True)
        assert [r.attacking_team for r in record.rounds[:13]] == [2] * 12 + [1]


class TestRandomMatches:
    """Properties of unscripted matches."""

    def test_match_invariants(self, simulator):
        records = simulator.simulate_matches(200, detailed=True)

        for record in records:
            winner_rounds = max(record.team1_rounds, record.team2_rounds)
            loser_rounds = min(record.team1_rounds, record.team2_rounds)
            assert winner_rounds > loser_rounds
            assert record.winner == (1 if record.team1_rounds > record.team2_rounds else 2)
            assert len(record.rounds) == record.rounds_played
            assert [r.round_number for r in record.rounds] == list(range(1, record.rounds_played + 1))
            if record.went_to_overtime:
                assert winner_rounds - loser_rounds == 2
                assert loser_rounds >= 12
            else:
                assert winner_rounds == 13
                assert loser_rounds <= 11

        state = simulator.state
        assert state.matches_played == 200
        assert state.team1_total_rounds == sum(r.team1_rounds for r in records)
        assert state.team2_total_rounds == sum(r.team2_rounds for r in records)
        assert state.team1_tie_breaks == sum(r.team1_tie_breaks for r in records)

    def test_overtime_happens_for_even_teams(self, team_factory):
        simulator = MatchSimulator(
            team_factory(TEAM_ONE), team_factory(TEAM_ONE), map_name="none", random_seed=21
        )
        records = simulator.simulate_matches(300)
        assert any(r.went_to_overtime for r in records)

    def test_fast_mode_has_no_rounds(self, simulator):
        assert simulator.simulate_match().rounds == []

    def test_seeded_reproducible(self, team_factory):
        def run():
            simulator = MatchSimulator(
                team_factory(TEAM_ONE), team_factory(TEAM_TWO), map_name="lotus", random_seed=42
            )
            return [r.to_dict() for r in simulator.simulate_matches(20, detailed=True)]

        assert run() == run()

    def test_reset_tallies(self, simulator):
        simulator.simulate_matches(3)
        simulator.reset_tallies()
        assert simulator.state.matches_played == 0
        assert simulator.phase == MatchPhase.IDLE

    @pytest.mark.slow
    def test_identical_teams_near_even(self, team_factory):
        simulator = MatchSimulator(
            team_factory(TEAM_TWO), team_factory(TEAM_TWO), map_name="none", random_seed=8
        )
        records = simulator.simulate_matches(2000)
        team1_wins = sum(1 for r in records if r.winner == 1)
        assert team1_wins / 2000 == pytest.approx(0.5, abs=0.05)
