"""Simulation parameters for valsim.

This module is the SINGLE SOURCE OF TRUTH for all tunable match constants.

Parameter Categories:
- Match Format: halves, win condition, overtime
- Round Model: how relative power, map and style shift round odds
- Team Styles: splash bonuses applied to agent style scores
- Maps: default map and the sentinel used for unknown maps

Usage:
    from valsim.parameters import ROUNDS_TO_WIN, RELATIVE_POWER_RATE
"""

# =============================================================================
# MATCH FORMAT PARAMETERS
# =============================================================================

REGULATION_HALF_ROUNDS = 12
"""Rounds played before the first side swap.

Current: 12

Analysis:
    The first half is always played out in full, regardless of score.
    A 12-0 first half still swaps sides before round 13.
"""

ROUNDS_TO_WIN = 13
"""Round wins required to take a match in regulation.

Current: 13

Related: OVERTIME_TRIGGER
"""

OVERTIME_TRIGGER = 12
"""Score at which both sides tied triggers overtime (12-12).

Current: 12 (= ROUNDS_TO_WIN - 1)
"""

OVERTIME_MARGIN = 2
"""Round lead required to close out an overtime.

Current: 2

Analysis:
    Sides swap before every overtime round, so each pair of overtime
    rounds gives both teams one attack. The match ends the first time
    the margin hits exactly 2.
"""

MAX_REGULATION_ROUNDS = 2 * REGULATION_HALF_ROUNDS
"""Upper bound on rounds played before overtime (24)."""


# =============================================================================
# ROUND MODEL PARAMETERS
# =============================================================================

BASE_WIN_CHANCE = 50.0
"""Team 1 round-win percentage with no advantage on either side.

Current: 50.0

All advantages are expressed in percentage points on top of this anchor.
"""

RELATIVE_POWER_RATE = 0.2
"""Percentage points of round-win chance per unit of relative power delta.

Current: 0.2

Analysis:
    Relative power totals for a five-agent team typically range 30-45.
    A 10 point gap gives the stronger team +2.0 points per round, which
    compounds over a ~24 round match into a noticeable match win rate
    shift without making the weaker team hopeless.

Tuning:
    - If stronger compositions win too rarely: increase toward 0.3
    - If the style triangle never matters: decrease toward 0.15
"""

STYLE_BONUS_MIN = 1.0
"""Lower bound of the counter-style bonus (percentage points, inclusive)."""

STYLE_BONUS_MAX = 5.0
"""Upper bound of the counter-style bonus (percentage points, exclusive).

Current: [1.0, 5.0)

Analysis:
    Drawn fresh every round when exactly one team's style counters the
    other. Averages 3 points, slightly more than a 10 power gap.

Related: STYLE_BONUS_MIN
"""

TIE_BREAK_EPSILON = 0.0
"""Band around BASE_WIN_CHANCE treated as a pure coin flip.

Current: 0.0 (exact equality only)

Analysis:
    Rounds whose computed chance is exactly 50 are resolved by an
    unweighted coin flip and counted as tie-breaks. Widening this band
    folds near-even rounds into the tie-break tally as well.
"""


# =============================================================================
# TEAM STYLE PARAMETERS
# =============================================================================

AGGRO_SPLASH_BONUS = 2.0
"""Aggro points added once to an agent with an AGGRO splash."""

CONTROL_SPLASH_BONUS = 2.0
"""Control points added once to an agent with a CONTROL splash."""

MIDRANGE_SPLASH_BONUS = 3.0
"""Midrange points added once to an agent with a MIDRANGE splash.

Current: 3.0

Midrange agents tend to have lower raw midrange scores, so the splash is
one point larger than the other two.
"""

TEAM_SIZE = 5
"""Agents per team composition."""


# =============================================================================
# MAP PARAMETERS
# =============================================================================

DEFAULT_MAP = "ascent"
"""Map a new simulator starts on."""

NO_MAP_SENTINEL = "N/A"
"""Map key reported when the selected map is unknown (zero advantage)."""
