"""Match engine module for valsim.

This module contains the match logic:
- advantage: Round-win probability model (power, map and style edges)
- match_engine: Round loop, halves, overtime and match tallies

Usage:
    from valsim.engine import MatchSimulator
    from valsim.models import TeamComposition

    team1 = TeamComposition("bind")
    team2 = TeamComposition("bind")
    ...  # add five agents to each

    simulator = MatchSimulator(team1, team2, map_name="bind", random_seed=7)
    record = simulator.simulate_match(detailed=True)
    print(f"Team {record.winner} won {record.team1_rounds}-{record.team2_rounds}")
"""

from valsim.engine.advantage import (
    VALID_ATTACKERS,
    attacker_map_advantage,
    build_snapshot,
    is_tie_break,
    relative_power_advantage,
    resolve_round,
    style_advantage,
    team1_advantage,
    team1_win_chance,
)
from valsim.engine.match_engine import MatchPhase, MatchSimulator

__all__ = [
    # Advantage model
    "VALID_ATTACKERS",
    "attacker_map_advantage",
    "build_snapshot",
    "is_tie_break",
    "relative_power_advantage",
    "resolve_round",
    "style_advantage",
    "team1_advantage",
    "team1_win_chance",
    # Simulator
    "MatchPhase",
    "MatchSimulator",
]
