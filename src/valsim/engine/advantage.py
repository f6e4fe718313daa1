"""Round-win probability model for valsim.

Team 1's chance to win a round is anchored at 50% and shifted by three
independent advantages, all in percentage points:

- Relative power: 0.2 per unit of total relative power difference, toward
  the stronger team
- Map: the map's attacker advantage, added when team 1 attacks and
  subtracted when team 2 attacks
- Style: a fresh uniform bonus in [1, 5) toward the team whose round style
  counters the other's (nothing if neither counters)

Formula:
    Team1_chance = 50 + Power_adv + (+/-)Map_adv + (+/-)Style_bonus

A chance of exactly 50 means nobody holds any edge; the round is settled by
an unweighted coin flip and counted as a tie-break.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Optional

from valsim.models.state import AdvantageSnapshot
from valsim.parameters import (
    BASE_WIN_CHANCE,
    NO_MAP_SENTINEL,
    RELATIVE_POWER_RATE,
    STYLE_BONUS_MAX,
    STYLE_BONUS_MIN,
    TIE_BREAK_EPSILON,
)
from valsim.roster import MAP_ATTACKER_ADVANTAGE, normalize_name

if TYPE_CHECKING:
    from valsim.models.team import TeamComposition

logger = logging.getLogger(__name__)

VALID_ATTACKERS = (1, 2)


def relative_power_advantage(team1_power: float, team2_power: float) -> float:
    """Team 1's edge from relative power.

    Formula:
        Power_adv = 0.2 * (Team1_power - Team2_power)

    Examples:
        >>> relative_power_advantage(40, 30)
        2.0
        >>> relative_power_advantage(30, 40)
        -2.0
        >>> relative_power_advantage(35, 35)
        0.0
    """
    if team1_power == team2_power:
        return 0.0
    return RELATIVE_POWER_RATE * (team1_power - team2_power)


def attacker_map_advantage(map_name: Optional[str]) -> tuple[str, float]:
    """Look up a map's attacker advantage.

    Unknown or empty map names are not an error: they resolve to zero
    advantage and the "N/A" map key.

    Returns:
        Tuple of (normalized map key, attacker advantage)

    Examples:
        >>> attacker_map_advantage(" Ascent ")
        ('ascent', -5.05)
        >>> attacker_map_advantage("atlantis")
        ('N/A', 0.0)
    """
    key = normalize_name(map_name)
    advantage = MAP_ATTACKER_ADVANTAGE.get(key)
    if advantage is None:
        return NO_MAP_SENTINEL, 0.0
    return key, advantage


def style_advantage(team1_counters: bool, team2_counters: bool, rng: random.Random) -> float:
    """Team 1's edge from the style triangle this round.

    Draws a bonus in [1, 5) only when exactly one team counters.
    """
    if team1_counters == team2_counters:
        return 0.0
    bonus = rng.uniform(STYLE_BONUS_MIN, STYLE_BONUS_MAX)
    return bonus if team1_counters else -bonus


def team1_advantage(
    snapshot: AdvantageSnapshot,
    attacking_team: int,
    style_adv: float = 0.0,
) -> float:
    """Combine the snapshot and style edge into team 1's total advantage.

    Raises:
        RuntimeError: If attacking_team is not 1 or 2. This can only happen
            through a bug in the caller, so it is never handled.
    """
    if attacking_team == 1:
        map_adv = snapshot.attacker_map_advantage
    elif attacking_team == 2:
        map_adv = -snapshot.attacker_map_advantage
    else:
        logger.critical(f"Invalid attacking team {attacking_team!r} reached the round model")
        raise RuntimeError(f"Attacking team must be one of {VALID_ATTACKERS}, got {attacking_team!r}")
    return snapshot.relative_power_advantage + map_adv + style_adv


def team1_win_chance(snapshot: AdvantageSnapshot, attacking_team: int, style_adv: float = 0.0) -> float:
    """Team 1's round-win chance in percent."""
    return BASE_WIN_CHANCE + team1_advantage(snapshot, attacking_team, style_adv)


def is_tie_break(team1_chance: float, epsilon: float = TIE_BREAK_EPSILON) -> bool:
    """True if the chance is a pure 50/50 (within epsilon)."""
    if epsilon <= 0.0:
        return team1_chance == BASE_WIN_CHANCE
    return abs(team1_chance - BASE_WIN_CHANCE) <= epsilon


def resolve_round(
    team1_chance: float,
    rng: random.Random,
    epsilon: float = TIE_BREAK_EPSILON,
) -> tuple[int, bool]:
    """Pick the round winner.

    Returns:
        Tuple of (winning team, whether it was a tie-break)
    """
    if is_tie_break(team1_chance, epsilon):
        return (1 if rng.random() < 0.5 else 2), True
    return (1 if rng.random() < team1_chance / 100.0 else 2), False


def build_snapshot(
    team1: TeamComposition,
    team2: TeamComposition,
    map_name: Optional[str],
) -> AdvantageSnapshot:
    """Compute a fresh advantage snapshot for two teams on a map."""
    map_key, map_adv = attacker_map_advantage(map_name)
    return AdvantageSnapshot(
        map_name=map_key,
        relative_power_advantage=relative_power_advantage(
            team1.total_relative_power, team2.total_relative_power
        ),
        attacker_map_advantage=map_adv,
    )
