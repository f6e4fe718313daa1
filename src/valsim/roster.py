"""Agent and map data for valsim.

Static tables:
- AGENT_TABLE: name -> (role, aggro, control, midrange, relative power, splash)
- MAP_POWER_DELTAS: map -> {agent name: relative power delta}
- MAP_ATTACKER_ADVANTAGE: map -> attacker round-win advantage (percentage points)

AgentRegistry builds fresh Agent instances from AGENT_TABLE. Every team
composition owns its own registry, so map balancing on one team never leaks
into another team or another worker.

Usage:
    registry = AgentRegistry("bind")
    jett = registry.get("  JETT ")
"""

from __future__ import annotations

import logging
from typing import Optional

from valsim.models.agent import Agent, Role, SplashStyle

logger = logging.getLogger(__name__)

C, I, S, D = Role.CONTROLLER, Role.INITIATOR, Role.SENTINEL, Role.DUELIST
AG, CO, MI, NO = SplashStyle.AGGRO, SplashStyle.CONTROL, SplashStyle.MIDRANGE, SplashStyle.NONE

# name: (role, aggro, control, midrange, relative power, splash)
AGENT_TABLE: dict[str, tuple[Role, float, float, float, float, SplashStyle]] = {
    "Astra": (C, 2, 3, 6, 8, CO),
    "Breach": (I, 7, 3, 1, 2, AG),
    "Brimstone": (C, 7, 2, 2, 6, NO),
    "Chamber": (S, 5, 6, 0, 7, NO),
    "Clove": (C, 5, 1, 5, 5, NO),
    "Cypher": (S, 1, 7, 3, 7, CO),
    "Deadlock": (S, 1, 5, 5, 7, NO),
    "Fade": (I, 3, 3, 5, 10, MI),
    "Gekko": (I, 3, 1, 7, 7, MI),
    "Harbor": (C, 5, 3, 3, 3, NO),
    "Iso": (D, 7, 1, 3, 6, AG),
    "Jett": (D, 9, 2, 0, 7, AG),
    "KAY/O": (I, 7, 3, 1, 9, NO),
    "Killjoy": (S, 3, 7, 1, 7, NO),
    "Neon": (D, 8, 0, 3, 10, MI),
    "Omen": (C, 3, 6, 2, 10, NO),
    "Phoenix": (D, 6, 2, 3, 4, NO),
    "Raze": (D, 7, 1, 3, 9, AG),
    "Reyna": (D, 9, 0, 2, 4, NO),
    "Sage": (S, 1, 5, 5, 6, NO),
    "Skye": (I, 3, 2, 6, 5, NO),
    "Sova": (I, 1, 6, 4, 10, NO),
    "Tejo": (I, 7, 1, 3, 7, NO),
    "Viper": (C, 3, 5, 3, 10, MI),
    "Vyse": (S, 1, 4, 6, 8, CO),
    "Waylay": (D, 8, 2, 1, 6, NO),
    "Yoru": (D, 5, 3, 3, 10, AG),
}

# Agents missing from a map's entry keep their baseline power on that map.
MAP_POWER_DELTAS: dict[str, dict[str, float]] = {
    "abyss": {
        "Astra": 1, "Breach": -1, "Brimstone": -2, "Chamber": 1, "Clove": -1,
        "Cypher": 1, "Deadlock": 2, "Gekko": 1, "Harbor": 1, "Jett": 2,
        "KAY/O": 1, "Killjoy": -1, "Omen": -1, "Raze": -2, "Sova": 2,
        "Vyse": 2, "Yoru": -1,
    },
    "ascent": {
        "Breach": 1, "Brimstone": -2, "Chamber": 2, "Clove": 1, "Gekko": -1,
        "Jett": 3, "KAY/O": 3, "Killjoy": 3, "Omen": 2, "Phoenix": 1,
        "Raze": -2, "Sage": 1, "Sova": 2, "Viper": 2, "Vyse": 2, "Waylay": 1,
    },
    "bind": {
        "Astra": 1, "Brimstone": 4, "Chamber": 2, "Clove": 1, "Cypher": 1,
        "Deadlock": 1, "Fade": 2, "Gekko": 1, "Iso": 2, "Jett": -1,
        "Killjoy": -4, "Neon": -1, "Omen": -2, "Phoenix": 1, "Raze": 4,
        "Skye": 1, "Sova": -1, "Tejo": 1, "Viper": 4, "Vyse": 3, "Yoru": 2,
    },
    "breeze": {
        "Astra": -1, "Breach": -2, "Brimstone": -3, "Chamber": 1, "Clove": -2,
        "Cypher": 2, "Deadlock": -1, "Fade": -1, "Gekko": 1, "Harbor": 1,
        "Jett": 2, "KAY/O": 1, "Killjoy": -2, "Neon": -1, "Omen": -2,
        "Phoenix": -2, "Raze": -2, "Reyna": -1, "Sage": -3, "Sova": 2,
        "Tejo": -1, "Viper": 2, "Vyse": 1, "Waylay": -1, "Yoru": 1,
    },
    "corrode": {
        "Brimstone": 1, "Chamber": 2, "Cypher": 2, "Deadlock": 2, "Fade": 1,
        "Gekko": 1, "KAY/O": 1, "Killjoy": -1, "Neon": 2, "Omen": 1,
        "Phoenix": 1, "Raze": 1, "Sage": 2, "Skye": 2, "Sova": 1, "Tejo": -1,
        "Viper": 1, "Vyse": 3, "Waylay": 1,
    },
    "fracture": {
        "Breach": 2, "Brimstone": 4, "Chamber": 1, "Clove": 1, "Cypher": 2,
        "Deadlock": 2, "Fade": 1, "Gekko": -1, "KAY/O": 2, "Killjoy": 1,
        "Neon": 2, "Omen": -2, "Raze": 3, "Sova": 1, "Tejo": 1, "Viper": -1,
        "Vyse": 2, "Yoru": -2,
    },
    "haven": {
        "Astra": 2, "Breach": 4, "Brimstone": -2, "Chamber": 1, "Clove": -1,
        "Cypher": 3, "Fade": -1, "Gekko": -2, "Iso": 4, "KAY/O": -2,
        "Killjoy": 2, "Neon": 1, "Omen": 3, "Phoenix": 1, "Raze": -2,
        "Reyna": -2, "Sage": -2, "Skye": -2, "Sova": 3, "Tejo": 1, "Viper": 3,
        "Vyse": 2, "Waylay": 1, "Yoru": 3,
    },
    "icebox": {
        "Astra": -2, "Breach": -2, "Brimstone": -3, "Chamber": 1, "Cypher": -4,
        "Deadlock": -2, "Fade": -1, "Gekko": 2, "Harbor": 2, "Iso": 1,
        "Jett": 1, "KAY/O": 2, "Killjoy": 3, "Neon": -1, "Omen": -1,
        "Phoenix": -1, "Raze": -1, "Reyna": 2, "Sage": 5, "Skye": -2,
        "Sova": 3, "Tejo": -2, "Viper": 4, "Vyse": -1, "Waylay": -2, "Yoru": -2,
    },
    "lotus": {
        "Astra": 1, "Breach": -1, "Brimstone": -3, "Chamber": 2, "Clove": 1,
        "Cypher": 1, "Deadlock": 2, "Fade": 4, "Gekko": 1, "Harbor": -2,
        "KAY/O": 1, "Killjoy": 1, "Neon": 1, "Omen": 2, "Phoenix": -1,
        "Raze": 3, "Reyna": -1, "Sage": -1, "Skye": -2, "Sova": -2, "Tejo": 2,
        "Viper": 3, "Vyse": 3, "Yoru": 1,
    },
    "pearl": {
        "Astra": 3, "Breach": -2, "Brimstone": -2, "Clove": -2, "Fade": 1,
        "Gekko": -1, "Harbor": 1, "Jett": 1, "KAY/O": 2, "Killjoy": 2,
        "Neon": 2, "Omen": -2, "Phoenix": 2, "Raze": -1, "Reyna": -1,
        "Sage": 1, "Skye": -1, "Sova": 1, "Tejo": -2, "Viper": 1, "Vyse": 2,
        "Yoru": 1,
    },
    "split": {
        "Astra": 2, "Brimstone": -1, "Chamber": 1, "Cypher": 1, "Fade": 2,
        "Harbor": 2, "KAY/O": 2, "Killjoy": -2, "Neon": -1, "Omen": 1,
        "Phoenix": 1, "Raze": 4, "Reyna": -2, "Sage": 1, "Skye": 1, "Sova": -3,
        "Tejo": 1, "Viper": 3, "Vyse": 1, "Yoru": 2,
    },
    "sunset": {
        "Breach": 1, "Chamber": 2, "Cypher": 2, "Deadlock": 2, "Fade": 2,
        "Gekko": 1, "Harbor": 2, "KAY/O": 2, "Killjoy": -3, "Neon": 2,
        "Omen": 1, "Raze": 1, "Reyna": -1, "Sage": 2, "Sova": 2, "Tejo": 1,
        "Viper": 2, "Vyse": 2, "Yoru": 1,
    },
}

# Positive values favor the attacking side.
MAP_ATTACKER_ADVANTAGE: dict[str, float] = {
    "abyss": -0.1,
    "ascent": -5.05,
    "bind": -3.81,
    "breeze": 1.11,
    "corrode": -0.96,
    "fracture": 1.0,
    "haven": -1.68,
    "icebox": -1.35,
    "lotus": 0.57,
    "pearl": -1.6,
    "split": -3.3,
    "sunset": -1.39,
}

NO_MAP_INPUT = "none"

VALID_MAP_INPUTS: tuple[str, ...] = tuple(MAP_ATTACKER_ADVANTAGE) + (NO_MAP_INPUT,)


def normalize_name(name: Optional[str]) -> str:
    """Trim and lower-case a lookup name (None becomes empty)."""
    if name is None:
        return ""
    return name.strip().lower()


def is_valid_map(name: Optional[str]) -> bool:
    """True for a known map name or 'none' (case-insensitive)."""
    return normalize_name(name) in VALID_MAP_INPUTS


def list_agent_names() -> list[str]:
    """All agent display names in table order."""
    return list(AGENT_TABLE)


def create_agent(name: str) -> Agent:
    """Build a fresh Agent from AGENT_TABLE by exact display name.

    Raises:
        KeyError: If the name is not in the table
    """
    role, aggro, control, midrange, power, splash = AGENT_TABLE[name]
    return Agent(
        name=name,
        role=role,
        aggro=aggro,
        control=control,
        midrange=midrange,
        baseline_relative_power=power,
        splash=splash,
    )


class AgentRegistry:
    """Owned set of Agent instances, balanced for one map at a time.

    Attributes:
        map_name: Normalized map the agents are currently balanced for
            (empty string when at baseline)
    """

    def __init__(self, map_name: Optional[str] = None):
        self._agents: dict[str, Agent] = {}
        for display_name in AGENT_TABLE:
            agent = create_agent(display_name)
            self._agents[agent.key] = agent
        self.map_name = ""
        if map_name:
            self.balance_for_map(map_name)

    def __len__(self) -> int:
        return len(self._agents)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name) in self._agents

    def get(self, name: Optional[str]) -> Optional[Agent]:
        """Case-insensitive, trimmed lookup. Returns None for unknown names."""
        return self._agents.get(normalize_name(name))

    def agents(self) -> list[Agent]:
        """All agents in table order (a new list; the agents are shared)."""
        return list(self._agents.values())

    def reset_to_baseline(self) -> None:
        for agent in self._agents.values():
            agent.reset_relative_power()

    def balance_for_map(self, map_name: Optional[str]) -> bool:
        """Reset every agent to baseline, then apply the map's power deltas.

        Unknown maps (including 'none') leave every agent at baseline.

        Returns:
            True if map-specific deltas were applied
        """
        self.reset_to_baseline()
        key = normalize_name(map_name)
        deltas = MAP_POWER_DELTAS.get(key)
        if deltas is None:
            self.map_name = ""
            if key and key != NO_MAP_INPUT:
                logger.info(f"No balance data for map '{key}', agents kept at baseline")
            return False

        for display_name, delta in deltas.items():
            self._agents[normalize_name(display_name)].change_relative_power(delta)
        self.map_name = key
        return True
