"""Tests for CLI text formatting and trace files."""

import json

from valsim.cli.trace import format_match, format_round, format_summary, format_team_stats, save_trace
from valsim.models.state import MatchRecord, RoundRecord
from valsim.simulation.batch_runner import BatchResult


def _round(**overrides):
    values = dict(
        round_number=3,
        attacking_team=2,
        team1_chance=47.5,
        winner=2,
        team1_rounds=1,
        team2_rounds=2,
        team1_style="MIDRANGE",
        team2_style="AGGRO",
    )
    values.update(overrides)
    return RoundRecord(**values)


def _result(**overrides):
    values = dict(
        team1_wins=1234,
        team2_wins=766,
        team1_rounds=30000,
        team2_rounds=25000,
        team1_tie_breaks=10,
        team2_tie_breaks=12,
        matches_requested=2000,
        matches_simulated=2000,
        map_name="N/A",
    )
    values.update(overrides)
    return BatchResult(**values)


class TestFormatting:
    """Tests for the text renderings."""

    def test_round(self):
        text = format_round(_round())
        assert "Current Round: 3" in text
        assert "Attackers: Team 2" in text
        assert "Team 1's odds: 47.50%" in text
        assert "Team 2's odds: 52.50%" in text
        assert "Styles: MIDRANGE vs AGGRO" in text
        assert "50/50" not in text

    def test_tie_break_round(self):
        assert "(50/50)" in format_round(_round(team1_chance=50.0, tie_break=True))

    def test_overtime_round(self):
        assert "Overtime" in format_round(_round(overtime=True))

    def test_match(self):
        record = MatchRecord(winner=1, team1_rounds=13, team2_rounds=4, map_name="bind", rounds=[_round()])
        text = format_match(record, 2)
        assert text.startswith("Match 2 (BIND)")
        assert text.endswith("Winner of the match: Team 1 (13-4)")

    def test_team_stats(self):
        summary = {
            "aggro": 25.0,
            "control": 24.0,
            "midrange": 8.0,
            "relative_power": 43.0,
            "agents": ["Jett, 11.0/2.0/0.0, Relative Power: 7.0"],
        }
        text = format_team_stats(1, summary)
        assert "Aggro: 25.0" in text
        assert "Total Relative Power: 43.0" in text
        assert text.endswith("Jett, 11.0/2.0/0.0, Relative Power: 7.0")

    def test_summary_uses_separators(self):
        text = format_summary(_result())
        assert "Number of matches simulated: 2,000" in text
        assert "Team 1 match record vs Team 2: 1,234-766" in text
        assert "Total rounds won by Team 1 vs Team 2: 30,000-25,000" in text
        assert "50/50 rounds won by Team 1 vs Team 2: 10-12" in text
        assert "Map: N/A" in text
        assert "Stopped early" not in text

    def test_summary_cancelled(self):
        text = format_summary(_result(matches_simulated=500, cancelled=True))
        assert "Stopped early: 500 of 2,000 matches" in text


def test_save_trace(tmp_path):
    path = save_trace(_result(), tmp_path / "traces")
    assert path.exists()
    assert "batch_na_" in path.name
    assert json.loads(path.read_text())["team1_wins"] == 1234
