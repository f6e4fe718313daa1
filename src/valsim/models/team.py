"""Team composition model for valsim.

A team composition is exactly five distinct agents. Aggregate style and
relative power totals only exist once the fifth agent has been added; before
that every aggregate reads 0.

Team styles follow a rock-paper-scissors triangle:
- aggro beats control
- control beats midrange
- midrange beats aggro

Each round a team draws one style, weighted by its true (post-splash) style
totals.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import TYPE_CHECKING, Optional

from valsim.models.agent import Agent
from valsim.parameters import TEAM_SIZE

if TYPE_CHECKING:
    from valsim.roster import AgentRegistry

logger = logging.getLogger(__name__)


class Style(str, Enum):
    """Tactical style a team plays in a round."""

    AGGRO = "AGGRO"
    CONTROL = "CONTROL"
    MIDRANGE = "MIDRANGE"


# attacker style -> style it beats
COUNTERS: dict[Style, Style] = {
    Style.AGGRO: Style.CONTROL,
    Style.CONTROL: Style.MIDRANGE,
    Style.MIDRANGE: Style.AGGRO,
}


def style_counters(style: Style, other: Style) -> bool:
    """True if `style` beats `other` in the style triangle."""
    return COUNTERS[style] == other


class AddAgentResult(Enum):
    """Outcome of TeamComposition.add_agent()."""

    ADDED = "added"
    INVALID_NAME = "invalid_name"
    DUPLICATE = "duplicate"
    TEAM_FULL = "team_full"

    @property
    def ok(self) -> bool:
        return self is AddAgentResult.ADDED


class TeamComposition:
    """Five distinct agents and their derived style/power totals.

    Each composition owns its own AgentRegistry, so balancing one team for a
    map never touches agents held by another team.

    Usage:
        team = TeamComposition("bind")
        for name in ["Jett", "Sova", "Omen", "Killjoy", "KAY/O"]:
            team.add_agent(name)
        style = team.choose_round_style(random.Random(7))
    """

    def __init__(self, map_name: Optional[str] = None, registry: Optional[AgentRegistry] = None):
        from valsim.roster import AgentRegistry

        self._registry = registry or AgentRegistry(map_name)
        if registry is not None and map_name:
            self._registry.balance_for_map(map_name)
        self._agents: list[Agent] = []
        self.style: Optional[Style] = None
        self._clear_stats()

    def _clear_stats(self) -> None:
        self._aggro = 0.0
        self._control = 0.0
        self._midrange = 0.0
        self._true_aggro = 0.0
        self._true_control = 0.0
        self._true_midrange = 0.0
        self._relative_power = 0.0

    # Composition
    @property
    def agents(self) -> list[Agent]:
        return list(self._agents)

    @property
    def agent_names(self) -> list[str]:
        return [agent.name for agent in self._agents]

    @property
    def size(self) -> int:
        return len(self._agents)

    @property
    def is_complete(self) -> bool:
        return len(self._agents) == TEAM_SIZE

    @property
    def map_name(self) -> str:
        return self._registry.map_name

    def can_add_agent(self, name: Optional[str]) -> bool:
        """True if the name resolves to a known agent."""
        return self._registry.get(name) is not None

    def add_agent(self, name: Optional[str]) -> AddAgentResult:
        """Add an agent by name.

        Rejections are reported, not raised, and leave the team untouched.
        Adding the fifth agent applies every member's splash and computes the
        aggregate totals.
        """
        agent = self._registry.get(name)
        if agent is None:
            logger.warning(f"Invalid agent name: {name!r}")
            return AddAgentResult.INVALID_NAME
        if self.is_complete:
            logger.warning(f"Team already has {TEAM_SIZE} agents, rejected {agent.name}")
            return AddAgentResult.TEAM_FULL
        if any(member.key == agent.key for member in self._agents):
            logger.warning(f"{agent.name} is already on this team")
            return AddAgentResult.DUPLICATE

        self._agents.append(agent)
        if self.is_complete:
            for member in self._agents:
                member.apply_splash()
            self.recalculate_stats()
        return AddAgentResult.ADDED

    def get_agent(self, name: Optional[str]) -> Optional[Agent]:
        """Look up a member of this team by name (None if not on the team)."""
        agent = self._registry.get(name)
        if agent is None or not any(member is agent for member in self._agents):
            return None
        return agent

    def set_map(self, map_name: Optional[str]) -> None:
        """Rebalance this team's agents for a map and refresh totals."""
        self._registry.balance_for_map(map_name)
        if self.is_complete:
            self.recalculate_stats()

    def recalculate_stats(self) -> None:
        """Recompute aggregate totals from the current members."""
        self._clear_stats()
        if not self.is_complete:
            return
        for agent in self._agents:
            self._aggro += agent.aggro
            self._control += agent.control
            self._midrange += agent.midrange
            self._true_aggro += agent.true_aggro
            self._true_control += agent.true_control
            self._true_midrange += agent.true_midrange
            self._relative_power += agent.current_relative_power

    # Aggregates (all 0 until the team is complete)
    @property
    def total_aggro(self) -> float:
        return self._aggro

    @property
    def total_control(self) -> float:
        return self._control

    @property
    def total_midrange(self) -> float:
        return self._midrange

    @property
    def total_true_aggro(self) -> float:
        return self._true_aggro

    @property
    def total_true_control(self) -> float:
        return self._true_control

    @property
    def total_true_midrange(self) -> float:
        return self._true_midrange

    @property
    def total_style_points(self) -> float:
        """Sum of the three true style totals."""
        return self._true_aggro + self._true_control + self._true_midrange

    @property
    def total_relative_power(self) -> float:
        return self._relative_power

    # Round style
    def choose_round_style(self, rng: random.Random) -> Style:
        """Draw this round's style weighted by the true style totals.

        A roll in [0, total) falls into:
        - aggro: [0, A)
        - control: [A, A + C)
        - midrange: [A + C, total)

        Raises:
            ValueError: If the team is not complete
        """
        if not self.is_complete:
            raise ValueError(f"Team has {self.size} agents, needs {TEAM_SIZE} to play")

        roll = rng.random() * self.total_style_points
        if roll < self._true_aggro:
            self.style = Style.AGGRO
        elif roll < self.total_style_points - self._true_midrange:
            self.style = Style.CONTROL
        else:
            self.style = Style.MIDRANGE
        return self.style

    def counters(self, other: TeamComposition) -> bool:
        """True if this team's current round style beats the other's."""
        if self.style is None or other.style is None:
            return False
        return style_counters(self.style, other.style)

    def stats_summary(self) -> dict:
        """Totals and per-agent descriptions for display."""
        return {
            "aggro": round(self.total_true_aggro, 1),
            "control": round(self.total_true_control, 1),
            "midrange": round(self.total_true_midrange, 1),
            "relative_power": round(self.total_relative_power, 1),
            "agents": [agent.describe() for agent in self._agents],
        }
