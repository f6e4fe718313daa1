"""Match state models for valsim.

MatchState holds everything the round loop mutates: the round number, the
per-match score, which team is attacking, and running tallies across every
match this simulator has played. AdvantageSnapshot is the frozen pair of
advantage values the round loop reads; it is rebuilt explicitly whenever the
map or a composition changes.

Match format (see parameters.py):
- 12 rounds, then sides swap
- First to 13 wins
- 12-12 triggers overtime: sides swap every round, win by 2
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from valsim.parameters import (
    NO_MAP_SENTINEL,
    OVERTIME_MARGIN,
    OVERTIME_TRIGGER,
    ROUNDS_TO_WIN,
)


class AdvantageSnapshot(BaseModel):
    """Precomputed advantage inputs for the round loop.

    Attributes:
        map_name: Normalized map key, or "N/A" when the map is unknown
        relative_power_advantage: Team 1's edge from relative power, in
            percentage points (negative when team 2 is stronger)
        attacker_map_advantage: Map edge for whichever team attacks, in
            percentage points (negative when the map favors defenders)
    """

    model_config = ConfigDict(frozen=True)

    map_name: str = NO_MAP_SENTINEL
    relative_power_advantage: float = 0.0
    attacker_map_advantage: float = 0.0


class MatchState(BaseModel):
    """Mutable match state.

    Per-match fields (reset after every match):
        current_round: Round about to be played (starts at 1)
        team1_rounds / team2_rounds: Rounds won this match
        attacking_team: 1 or 2

    Running tallies (kept across matches):
        team1_match_wins / team2_match_wins
        team1_total_rounds / team2_total_rounds
        team1_tie_breaks / team2_tie_breaks: rounds won on a 50/50 coin flip
    """

    current_round: int = Field(default=1, ge=1)
    team1_rounds: int = Field(default=0, ge=0)
    team2_rounds: int = Field(default=0, ge=0)
    attacking_team: int = 1

    team1_match_wins: int = Field(default=0, ge=0)
    team2_match_wins: int = Field(default=0, ge=0)
    team1_total_rounds: int = Field(default=0, ge=0)
    team2_total_rounds: int = Field(default=0, ge=0)
    team1_tie_breaks: int = Field(default=0, ge=0)
    team2_tie_breaks: int = Field(default=0, ge=0)

    @property
    def rounds_played(self) -> int:
        return self.team1_rounds + self.team2_rounds

    @property
    def round_delta(self) -> int:
        return abs(self.team1_rounds - self.team2_rounds)

    @property
    def regulation_decided(self) -> bool:
        """True once either team has 13 rounds."""
        return self.team1_rounds >= ROUNDS_TO_WIN or self.team2_rounds >= ROUNDS_TO_WIN

    @property
    def overtime_reached(self) -> bool:
        """True at exactly 12-12."""
        return self.team1_rounds == OVERTIME_TRIGGER and self.team2_rounds == OVERTIME_TRIGGER

    @property
    def overtime_decided(self) -> bool:
        return self.round_delta == OVERTIME_MARGIN

    @property
    def leader(self) -> int:
        """Team with more rounds this match (2 on a tie, as in the match tally)."""
        return 1 if self.team1_rounds > self.team2_rounds else 2

    @property
    def matches_played(self) -> int:
        return self.team1_match_wins + self.team2_match_wins

    def switch_sides(self) -> None:
        self.attacking_team = 2 if self.attacking_team == 1 else 1

    def record_round(self, winner: int, tie_break: bool) -> None:
        if winner == 1:
            self.team1_rounds += 1
            if tie_break:
                self.team1_tie_breaks += 1
        else:
            self.team2_rounds += 1
            if tie_break:
                self.team2_tie_breaks += 1
        self.current_round += 1

    def record_match(self) -> int:
        """Tally the finished match and return the winning team."""
        winner = self.leader
        if winner == 1:
            self.team1_match_wins += 1
        else:
            self.team2_match_wins += 1
        self.team1_total_rounds += self.team1_rounds
        self.team2_total_rounds += self.team2_rounds
        return winner

    def reset_match(self, attacking_team: int = 1) -> None:
        """Clear per-match fields; running tallies are kept."""
        self.current_round = 1
        self.team1_rounds = 0
        self.team2_rounds = 0
        self.attacking_team = attacking_team


@dataclass
class RoundRecord:
    """One simulated round, for detailed traces.

    Attributes:
        round_number: 1-indexed round within the match
        attacking_team: Team attacking this round
        team1_chance: Team 1's win chance in percent
        winner: 1 or 2
        team1_rounds / team2_rounds: Score after this round
        team1_style / team2_style: Styles drawn this round
        tie_break: True if resolved by an unweighted coin flip
        overtime: True if played at or after 12-12
    """

    round_number: int
    attacking_team: int
    team1_chance: float
    winner: int
    team1_rounds: int
    team2_rounds: int
    team1_style: str
    team2_style: str
    tie_break: bool = False
    overtime: bool = False

    @property
    def team2_chance(self) -> float:
        return 100.0 - self.team1_chance

    def to_dict(self) -> dict:
        return {
            "round_number": self.round_number,
            "attacking_team": self.attacking_team,
            "team1_chance": round(self.team1_chance, 2),
            "team2_chance": round(self.team2_chance, 2),
            "winner": self.winner,
            "team1_rounds": self.team1_rounds,
            "team2_rounds": self.team2_rounds,
            "team1_style": self.team1_style,
            "team2_style": self.team2_style,
            "tie_break": self.tie_break,
            "overtime": self.overtime,
        }


@dataclass
class MatchRecord:
    """Result of one completed match."""

    winner: int
    team1_rounds: int
    team2_rounds: int
    team1_tie_breaks: int = 0
    team2_tie_breaks: int = 0
    map_name: str = NO_MAP_SENTINEL
    rounds: list[RoundRecord] = field(default_factory=list)
    went_to_overtime: bool = False

    @property
    def rounds_played(self) -> int:
        return self.team1_rounds + self.team2_rounds

    def to_dict(self) -> dict:
        return {
            "winner": self.winner,
            "team1_rounds": self.team1_rounds,
            "team2_rounds": self.team2_rounds,
            "team1_tie_breaks": self.team1_tie_breaks,
            "team2_tie_breaks": self.team2_tie_breaks,
            "map_name": self.map_name,
            "went_to_overtime": self.went_to_overtime,
            "rounds": [r.to_dict() for r in self.rounds],
        }
