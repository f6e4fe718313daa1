"""Tests for the valsim command-line interface."""

import json

import pytest

from valsim.cli.app import build_parser, main
from valsim.engine.match_engine import MatchSimulator
from valsim.simulation import batch_runner

TEAM_ONE = "Jett,Sova,Omen,Killjoy,KAY/O"
TEAM_TWO = "Raze,Fade,Viper,Cypher,Neon"


def _args(*extra):
    return ["--team1", TEAM_ONE, "--team2", TEAM_TWO, "--seed", "3", "--workers", "2", *extra]


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.map == "ascent"
        assert args.attacker == 1
        assert args.matches == 1000
        assert args.executor is None

    def test_invalid_attacker(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--attacker", "3"])

    def test_log_level_case_insensitive(self):
        assert build_parser().parse_args(["--log-level", "debug"]).log_level == "DEBUG"


class TestMain:
    """Tests for full CLI runs."""

    def test_list_agents(self, capsys):
        assert main(["--list-agents"]) == 0
        out = capsys.readouterr().out
        assert "Jett, 9.0/2.0/0.0" in out
        assert len(out.strip().splitlines()) == 27

    def test_summary(self, capsys):
        assert main(_args("--matches", "20", "--map", "bind")) == 0
        out = capsys.readouterr().out
        assert "Team 1 stats:" in out
        assert "Team 2 stats:" in out
        assert "Number of matches simulated: 20" in out
        assert "Map: BIND" in out

    def test_json(self, capsys):
        assert main(_args("--matches", "12", "--json")) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["matches_simulated"] == 12
        assert data["team1_wins"] + data["team2_wins"] == 12
        assert data["map"] == "ascent"

    def test_detailed(self, capsys):
        assert main(_args("--matches", "1", "--detailed")) == 0
        out = capsys.readouterr().out
        assert "Current Round: 1" in out
        assert "Winner of the match: Team" in out

    def test_output_dir(self, tmp_path, capsys):
        assert main(_args("--matches", "5", "--output", str(tmp_path))) == 0
        files = list(tmp_path.glob("*.json"))
        assert len(files) == 1
        assert json.loads(files[0].read_text())["matches_simulated"] == 5

    @pytest.mark.parametrize(
        "argv",
        [
            ["--team1", TEAM_ONE],
            ["--team1", TEAM_ONE, "--team2", "Raze,Fade,Viper,Cypher,Bob"],
            ["--team1", TEAM_ONE, "--team2", "Raze,Fade,Viper,Cypher"],
            ["--team1", TEAM_ONE, "--team2", TEAM_TWO + ",Sage"],
            ["--team1", TEAM_ONE, "--team2", TEAM_TWO, "--matches", "0"],
            ["--team1", TEAM_ONE, "--team2", TEAM_TWO, "--map", " "],
        ],
    )
    def test_invalid_input(self, argv, capsys):
        assert main(argv) == 2
        assert "Error:" in capsys.readouterr().err

    def test_interrupted_worker_reports_partial_result(self, monkeypatch, capsys):
        original = batch_runner.run_worker

        def interrupted(worker_index, *args, **kwargs):
            if worker_index == 0:
                raise KeyboardInterrupt
            return original(worker_index, *args, **kwargs)

        monkeypatch.setattr(batch_runner, "run_worker", interrupted)
        assert main(_args("--matches", "10", "--json")) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["cancelled"] is True
        assert data["matches_simulated"] <= 5

    def test_worker_failure(self, monkeypatch, capsys):
        def explode(self, detailed=False):
            raise RuntimeError("boom")

        monkeypatch.setattr(MatchSimulator, "simulate_match", explode)
        assert main(_args("--matches", "4")) == 1
        assert "boom" in capsys.readouterr().err
