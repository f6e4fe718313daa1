"""Caller-facing session for building two teams and running batches.

The session keeps the two compositions the caller is editing, the selected
map and the starting attacker. Batches never simulate on these objects:
run_batch() hands agent names to the orchestrator and every worker builds
its own copies.
"""

from __future__ import annotations

import logging
from typing import Optional

from valsim.config import ExecutorKind
from valsim.engine.advantage import build_snapshot
from valsim.engine.match_engine import MatchSimulator
from valsim.models.state import AdvantageSnapshot, MatchRecord
from valsim.models.team import AddAgentResult, TeamComposition
from valsim.parameters import DEFAULT_MAP, TEAM_SIZE
from valsim.simulation.batch_runner import BatchOrchestrator, BatchRequest, BatchResult, build_team

logger = logging.getLogger(__name__)

VALID_SLOTS = (1, 2)


class SimulationSession:
    """Two team slots, a map and a starting attacker.

    Usage:
        session = SimulationSession()
        for name in ["Jett", "Sova", "Omen", "Killjoy", "KAY/O"]:
            session.add_agent(1, name)
        ...
        session.set_map("bind")
        result = session.run_batch(1000, attacking_team=1, seed=7)
    """

    def __init__(self, map_name: str = DEFAULT_MAP, executor: Optional[ExecutorKind] = None):
        self.map_name = map_name
        self.attacking_team = 1
        self._teams: dict[int, TeamComposition] = {slot: TeamComposition(map_name) for slot in VALID_SLOTS}
        self.orchestrator = BatchOrchestrator(executor)

    def team(self, slot: int) -> TeamComposition:
        """Composition in a slot.

        Raises:
            ValueError: If slot is not 1 or 2
        """
        if slot not in VALID_SLOTS:
            raise ValueError(f"Team slot must be 1 or 2, got {slot!r}")
        return self._teams[slot]

    def add_agent(self, team_slot: int, name: str) -> AddAgentResult:
        return self.team(team_slot).add_agent(name)

    def reset_team(self, slot: int) -> None:
        """Empty a slot (a fresh composition on the current map)."""
        self.team(slot)
        self._teams[slot] = TeamComposition(self.map_name)

    def set_map(self, name: str) -> str:
        """Select the map for both teams.

        Unknown names are accepted and simply give no map advantage.

        Returns:
            Normalized map key, or "N/A" for an unknown map

        Raises:
            ValueError: If name is empty
        """
        if name is None or not name.strip():
            raise ValueError("Map name must not be empty (use 'none' for no map)")
        self.map_name = name.strip()
        for team in self._teams.values():
            team.set_map(self.map_name)
        return self.advantages().map_name

    def set_attacking_team(self, team: int) -> None:
        """Set the team attacking first.

        Raises:
            ValueError: If team is not 1 or 2
        """
        if team not in VALID_SLOTS:
            raise ValueError(f"Attacking team must be 1 or 2, got {team!r}")
        self.attacking_team = team

    def advantages(self) -> AdvantageSnapshot:
        """Advantage values the current teams would play with."""
        return build_snapshot(self._teams[1], self._teams[2], self.map_name)

    def team_stats(self, slot: int) -> dict:
        """Totals and agent descriptions for a slot (zeros until complete)."""
        team = self.team(slot)
        summary = team.stats_summary()
        summary["size"] = team.size
        summary["complete"] = team.is_complete
        return summary

    def _require_complete(self) -> None:
        for slot, team in self._teams.items():
            if not team.is_complete:
                raise ValueError(f"Team {slot} has {team.size} agents, needs {TEAM_SIZE}")

    def build_request(
        self,
        match_count: int,
        attacking_team: Optional[int] = None,
        detailed: bool = False,
        seed: Optional[int] = None,
        workers: Optional[int] = None,
    ) -> BatchRequest:
        """Snapshot the session into a batch request.

        Raises:
            ValueError: If either team is incomplete or any value is invalid
        """
        self._require_complete()
        return BatchRequest(
            team1=self._teams[1].agent_names,
            team2=self._teams[2].agent_names,
            map_name=self.map_name,
            attacking_team=attacking_team if attacking_team is not None else self.attacking_team,
            match_count=match_count,
            detailed=detailed,
            seed=seed,
            workers=workers,
        )

    def run_batch(
        self,
        match_count: int,
        attacking_team: Optional[int] = None,
        detailed: bool = False,
        seed: Optional[int] = None,
        workers: Optional[int] = None,
    ) -> BatchResult:
        """Run `match_count` matches across the worker pool.

        Raises:
            ValueError: If the request is invalid
            BatchExecutionError: If any worker failed
        """
        request = self.build_request(match_count, attacking_team, detailed, seed, workers)
        return self.orchestrator.run(request)

    def simulate_match(self, detailed: bool = True, seed: Optional[int] = None) -> MatchRecord:
        """Play a single match on fresh copies of the current teams."""
        request = self.build_request(1, detailed=detailed, seed=seed, workers=1)
        simulator = MatchSimulator(
            build_team(request.team1, request.map_name),
            build_team(request.team2, request.map_name),
            map_name=request.map_name,
            attacking_team=request.attacking_team,
            random_seed=seed,
        )
        return simulator.simulate_match(detailed=detailed)
