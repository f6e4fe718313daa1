"""valsim models.

This module exports the core data structures for the simulator.
"""

from .agent import SPLASH_BONUSES, Agent, Role, SplashStyle
from .state import AdvantageSnapshot, MatchRecord, MatchState, RoundRecord
from .team import COUNTERS, AddAgentResult, Style, TeamComposition, style_counters

__all__ = [
    # Agent
    "Agent",
    "Role",
    "SplashStyle",
    "SPLASH_BONUSES",
    # Team
    "TeamComposition",
    "AddAgentResult",
    "Style",
    "COUNTERS",
    "style_counters",
    # State
    "MatchState",
    "AdvantageSnapshot",
    "RoundRecord",
    "MatchRecord",
]
