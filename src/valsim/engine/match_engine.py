"""Match simulator for valsim.

This module implements MatchSimulator, which drives one match at a time to
completion and keeps running tallies across every match it plays.

Match Sequence:
1. FIRST HALF - 12 rounds with the starting attacker, regardless of score
2. SIDE SWAP
3. SECOND HALF - until a team reaches 13, or the score is 12-12
4. OVERTIME - swap before every round until one team leads by 2
5. TALLY - record the match winner and rounds, reset the per-match score

Round Sequence:
1. Both teams draw their round style
2. Team 1's chance = 50 + power edge + map edge + style edge
3. Exactly 50: unweighted coin flip, counted as a tie-break
4. Otherwise weighted draw against team 1's chance
5. Winner's round count and the round number advance
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Optional

from valsim.engine.advantage import (
    VALID_ATTACKERS,
    build_snapshot,
    resolve_round,
    style_advantage,
    team1_win_chance,
)
from valsim.models.state import AdvantageSnapshot, MatchRecord, MatchState, RoundRecord
from valsim.models.team import TeamComposition
from valsim.parameters import (
    DEFAULT_MAP,
    MAX_REGULATION_ROUNDS,
    NO_MAP_SENTINEL,
    REGULATION_HALF_ROUNDS,
    TIE_BREAK_EPSILON,
)

logger = logging.getLogger(__name__)


class MatchPhase(Enum):
    """Where the simulator is in its lifecycle."""

    IDLE = "idle"
    SIMULATING = "simulating"
    COMPLETE = "complete"


class MatchSimulator:
    """Round-by-round match simulator bound to two team compositions.

    The simulator owns its teams for the duration of a simulation and its
    own random generator. It is not thread-safe; concurrent batches give
    every worker its own simulator (see simulation.batch_runner).

    Attributes:
        team1: Team composition for team 1
        team2: Team composition for team 2
        state: Current score, attacker and running tallies
        snapshot: Advantage values used by the round loop
        phase: Lifecycle phase
    """

    def __init__(
        self,
        team1: TeamComposition,
        team2: TeamComposition,
        map_name: Optional[str] = DEFAULT_MAP,
        attacking_team: int = 1,
        random_seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        tie_break_epsilon: float = TIE_BREAK_EPSILON,
    ) -> None:
        """Initialize the simulator.

        Args:
            team1: Team 1's composition
            team2: Team 2's composition
            map_name: Map to play on; unknown names mean no map advantage
            attacking_team: Team attacking first (1 or 2)
            random_seed: Seed for a private generator (ignored if rng is given)
            rng: Generator to use instead of creating one
            tie_break_epsilon: Band around 50% treated as a coin flip

        Raises:
            ValueError: If attacking_team is not 1 or 2
        """
        self.team1 = team1
        self.team2 = team2
        self._random = rng or random.Random(random_seed)
        self._tie_break_epsilon = tie_break_epsilon
        self._starting_attacker = 1
        self.state = MatchState()
        self.phase = MatchPhase.IDLE
        self.snapshot = AdvantageSnapshot()
        self.set_attacking_team(attacking_team)
        self.set_map(map_name)

    # Configuration
    def set_map(self, map_name: Optional[str]) -> AdvantageSnapshot:
        """Select a map, rebalance both teams for it and refresh advantages.

        Unknown map names are not an error: they leave agents at baseline,
        give no map advantage and report the map as "N/A".
        """
        self.team1.set_map(map_name)
        self.team2.set_map(map_name)
        self.snapshot = build_snapshot(self.team1, self.team2, map_name)
        logger.debug(
            f"Map set to {self.snapshot.map_name}: power edge "
            f"{self.snapshot.relative_power_advantage:+.2f}, attacker edge "
            f"{self.snapshot.attacker_map_advantage:+.2f}"
        )
        return self.snapshot

    def refresh_advantages(self) -> AdvantageSnapshot:
        """Recompute advantages after a composition change (map unchanged)."""
        self.team1.recalculate_stats()
        self.team2.recalculate_stats()
        map_name = None if self.snapshot.map_name == NO_MAP_SENTINEL else self.snapshot.map_name
        self.snapshot = build_snapshot(self.team1, self.team2, map_name)
        return self.snapshot

    def set_attacking_team(self, team: int) -> None:
        """Set the team attacking first in every match.

        Raises:
            ValueError: If team is not 1 or 2
        """
        if team not in VALID_ATTACKERS:
            raise ValueError(f"Attacking team must be 1 or 2, got {team!r}")
        self._starting_attacker = team
        self.state.attacking_team = team

    # Read-only views
    @property
    def map_name(self) -> str:
        return self.snapshot.map_name

    @property
    def relative_power_advantage(self) -> float:
        return self.snapshot.relative_power_advantage

    @property
    def attacker_map_advantage(self) -> float:
        return self.snapshot.attacker_map_advantage

    @property
    def starting_attacker(self) -> int:
        return self._starting_attacker

    @property
    def current_round(self) -> int:
        return self.state.current_round

    @property
    def attacking_team(self) -> int:
        return self.state.attacking_team

    @property
    def match_winner(self) -> int:
        """Team currently ahead in the match (2 on a tie)."""
        return self.state.leader

    # Round
    def simulate_round(self) -> RoundRecord:
        """Play a single round and return its trace."""
        return self._play_round(detailed=True)

    def _play_round(self, detailed: bool) -> Optional[RoundRecord]:
        state = self.state
        overtime = state.rounds_played >= MAX_REGULATION_ROUNDS

        style1 = self.team1.choose_round_style(self._random)
        style2 = self.team2.choose_round_style(self._random)
        style_adv = style_advantage(
            self.team1.counters(self.team2),
            self.team2.counters(self.team1),
            self._random,
        )
        chance = team1_win_chance(self.snapshot, state.attacking_team, style_adv)
        winner, tie_break = resolve_round(chance, self._random, self._tie_break_epsilon)

        round_number = state.current_round
        state.record_round(winner, tie_break)
        if not detailed:
            return None
        return RoundRecord(
            round_number=round_number,
            attacking_team=state.attacking_team,
            team1_chance=chance,
            winner=winner,
            team1_rounds=state.team1_rounds,
            team2_rounds=state.team2_rounds,
            team1_style=style1.value,
            team2_style=style2.value,
            tie_break=tie_break,
            overtime=overtime,
        )

    # Match
    def simulate_match(self, detailed: bool = False) -> MatchRecord:
        """Play one full match.

        Args:
            detailed: If True, the returned record carries every round

        Returns:
            MatchRecord for the finished match. The simulator's running
            tallies are updated and the per-match score is reset.
        """
        state = self.state
        self.phase = MatchPhase.SIMULATING
        rounds: list[RoundRecord] = []
        tie_breaks_before = (state.team1_tie_breaks, state.team2_tie_breaks)

        def play() -> None:
            record = self._play_round(detailed)
            if record is not None:
                rounds.append(record)

        for _ in range(REGULATION_HALF_ROUNDS):
            play()

        state.switch_sides()

        while not state.regulation_decided and not state.overtime_reached:
            play()

        went_to_overtime = state.overtime_reached
        if went_to_overtime:
            while not state.overtime_decided:
                state.switch_sides()
                play()

        team1_rounds, team2_rounds = state.team1_rounds, state.team2_rounds
        winner = state.record_match()
        record = MatchRecord(
            winner=winner,
            team1_rounds=team1_rounds,
            team2_rounds=team2_rounds,
            team1_tie_breaks=state.team1_tie_breaks - tie_breaks_before[0],
            team2_tie_breaks=state.team2_tie_breaks - tie_breaks_before[1],
            map_name=self.snapshot.map_name,
            rounds=rounds,
            went_to_overtime=went_to_overtime,
        )
        logger.debug(f"Match won by team {winner} ({team1_rounds}-{team2_rounds})")

        state.reset_match(self._starting_attacker)
        self.phase = MatchPhase.COMPLETE
        return record

    def simulate_matches(self, count: int, detailed: bool = False) -> list[MatchRecord]:
        """Play `count` matches back to back."""
        return [self.simulate_match(detailed=detailed) for _ in range(count)]

    def reset_tallies(self) -> None:
        """Clear running tallies and the per-match score."""
        self.state = MatchState(attacking_team=self._starting_attacker)
        self.phase = MatchPhase.IDLE
