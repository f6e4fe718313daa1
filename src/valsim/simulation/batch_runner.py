"""Batch runner for parallel match simulation.

This module splits a requested number of matches across a pool of workers
and merges their counts into one AggregateStatistics.

Each worker:
1. Builds its own team compositions from agent names (nothing is shared
   with other workers or the caller)
2. Builds its own MatchSimulator and random generator
3. Plays its share of matches, checking the stop flag between matches
4. Merges its tally into the shared statistics (thread pool) or returns it
   for the parent to merge (process pool)

The runner joins every worker before reporting. A failure in any worker is
raised as BatchExecutionError once all workers are done, never swallowed.
"""

from __future__ import annotations

import json
import logging
import multiprocessing
import signal
import threading
import time
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Literal, Optional, Protocol

from pydantic import BaseModel, Field, field_validator

from valsim.config import ExecutorKind, get_default_seed, get_default_worker_count, get_executor_kind
from valsim.engine.match_engine import MatchSimulator
from valsim.models.state import MatchRecord
from valsim.models.team import TeamComposition
from valsim.parameters import DEFAULT_MAP, TEAM_SIZE
from valsim.roster import AgentRegistry, normalize_name
from valsim.simulation.statistics import AggregateStatistics, WorkerTally

logger = logging.getLogger(__name__)


class StopFlag(Protocol):
    """threading.Event or a manager Event proxy."""

    def is_set(self) -> bool: ...

    def set(self) -> None: ...


class BatchExecutionError(RuntimeError):
    """One or more workers failed during a batch run.

    Attributes:
        failures: (worker index, exception) for every failed worker
        partial: Statistics merged by the workers that did finish
    """

    def __init__(self, failures: list[tuple[int, BaseException]], partial: AggregateStatistics):
        self.failures = failures
        self.partial = partial
        details = "; ".join(f"worker {idx}: {exc!r}" for idx, exc in failures)
        super().__init__(f"{len(failures)} worker(s) failed: {details}")


# =============================================================================
# Work partitioning
# =============================================================================


def partition_matches(total: int, workers: int) -> list[int]:
    """Split `total` matches across `workers` as evenly as possible.

    The first `total % workers` workers get one extra match. Workers that
    would get zero matches are dropped, so the result never has more
    entries than `total`.

    Raises:
        ValueError: If total < 1 or workers < 1

    Examples:
        >>> partition_matches(10, 3)
        [4, 3, 3]
        >>> partition_matches(2, 4)
        [1, 1]
    """
    if total < 1:
        raise ValueError(f"Number of matches must be at least 1, got {total}")
    if workers < 1:
        raise ValueError(f"Number of workers must be at least 1, got {workers}")

    per_worker, remainder = divmod(total, workers)
    shares = [per_worker + 1 if i < remainder else per_worker for i in range(workers)]
    return [share for share in shares if share > 0]


def resolve_worker_count(total: int, requested: Optional[int] = None) -> int:
    """Worker count for a batch: requested or configured, capped at `total`."""
    workers = requested if requested is not None else get_default_worker_count()
    return max(1, min(workers, total))


# =============================================================================
# Request / result
# =============================================================================


class BatchRequest(BaseModel):
    """Everything a worker needs to build its own match, as plain values.

    Attributes:
        team1: Agent names for team 1 (exactly 5, distinct)
        team2: Agent names for team 2 (exactly 5, distinct)
        map_name: Map to play on; unknown names mean no map advantage
        attacking_team: Team attacking first in every match
        match_count: Total matches to simulate
        detailed: Keep per-round traces for every match
        seed: Base seed; worker i uses seed + i
        workers: Worker count override
    """

    team1: list[str]
    team2: list[str]
    map_name: str = DEFAULT_MAP
    attacking_team: Literal[1, 2] = 1
    match_count: int = Field(ge=1)
    detailed: bool = False
    seed: Optional[int] = None
    workers: Optional[int] = Field(default=None, ge=1)

    @field_validator("team1", "team2")
    @classmethod
    def validate_team(cls, names: list[str]) -> list[str]:
        """Require five distinct, known agent names."""
        registry = AgentRegistry()
        cleaned = [name.strip() for name in names]
        if len(cleaned) != TEAM_SIZE:
            raise ValueError(f"A team needs exactly {TEAM_SIZE} agents, got {len(cleaned)}")
        unknown = [name for name in cleaned if name not in registry]
        if unknown:
            raise ValueError(f"Unknown agent(s): {', '.join(unknown)}")
        keys = [normalize_name(name) for name in cleaned]
        if len(set(keys)) != len(keys):
            raise ValueError(f"Duplicate agent in team: {', '.join(cleaned)}")
        return cleaned

    @field_validator("map_name")
    @classmethod
    def validate_map(cls, map_name: str) -> str:
        if not map_name or not map_name.strip():
            raise ValueError("Map name must not be empty (use 'none' for no map)")
        return map_name.strip()


@dataclass
class BatchResult:
    """Aggregated results of a batch run."""

    team1_wins: int
    team2_wins: int
    team1_rounds: int
    team2_rounds: int
    team1_tie_breaks: int
    team2_tie_breaks: int
    matches_requested: int
    matches_simulated: int
    overtimes: int = 0
    map_name: str = ""
    workers: int = 1
    duration_seconds: float = 0.0
    cancelled: bool = False
    matches: list[MatchRecord] = field(default_factory=list)

    @property
    def team1_win_rate(self) -> float:
        return self.team1_wins / self.matches_simulated if self.matches_simulated > 0 else 0.0

    @property
    def team2_win_rate(self) -> float:
        return self.team2_wins / self.matches_simulated if self.matches_simulated > 0 else 0.0

    @classmethod
    def from_statistics(cls, stats: AggregateStatistics, requested: int, **kwargs) -> BatchResult:
        counts = stats.snapshot()
        return cls(
            team1_wins=counts["team1_wins"],
            team2_wins=counts["team2_wins"],
            team1_rounds=counts["team1_rounds"],
            team2_rounds=counts["team2_rounds"],
            team1_tie_breaks=counts["team1_tie_breaks"],
            team2_tie_breaks=counts["team2_tie_breaks"],
            overtimes=counts["overtimes"],
            matches_requested=requested,
            matches_simulated=counts["matches"],
            **kwargs,
        )

    def to_dict(self, include_matches: bool = True) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "team1_wins": self.team1_wins,
            "team2_wins": self.team2_wins,
            "team1_rounds": self.team1_rounds,
            "team2_rounds": self.team2_rounds,
            "team1_tie_breaks": self.team1_tie_breaks,
            "team2_tie_breaks": self.team2_tie_breaks,
            "matches_requested": self.matches_requested,
            "matches_simulated": self.matches_simulated,
            "overtimes": self.overtimes,
            "team1_win_rate": round(self.team1_win_rate, 4),
            "team2_win_rate": round(self.team2_win_rate, 4),
            "map": self.map_name,
            "workers": self.workers,
            "duration_seconds": round(self.duration_seconds, 3),
            "cancelled": self.cancelled,
        }
        if include_matches and self.matches:
            data["matches"] = [m.to_dict() for m in self.matches]
        return data

    def to_json(self, indent: int = 2, include_matches: bool = True) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(include_matches=include_matches), indent=indent)


# =============================================================================
# Worker
# =============================================================================


def build_team(names: list[str], map_name: Optional[str] = None) -> TeamComposition:
    """Build a fresh composition (with its own agent registry) from names.

    Raises:
        ValueError: If any name is rejected
    """
    team = TeamComposition(map_name)
    for name in names:
        result = team.add_agent(name)
        if not result.ok:
            raise ValueError(f"Could not add {name!r} to team: {result.value}")
    return team


def run_worker(
    worker_index: int,
    match_count: int,
    request: BatchRequest,
    stop_flag: Optional[StopFlag] = None,
    stats: Optional[AggregateStatistics] = None,
) -> WorkerTally:
    """Play one worker's share of a batch.

    Module-level so it can be shipped to a process pool.

    Args:
        worker_index: Position of this worker (also offsets the seed)
        match_count: Matches this worker must play
        request: Batch request (plain, picklable values only)
        stop_flag: Checked between matches; stop early when set
        stats: Shared statistics to merge into when done (thread pool only)

    Returns:
        This worker's tally
    """
    seed = request.seed + worker_index if request.seed is not None else None

    team1 = build_team(request.team1, request.map_name)
    team2 = build_team(request.team2, request.map_name)
    simulator = MatchSimulator(
        team1,
        team2,
        map_name=request.map_name,
        attacking_team=request.attacking_team,
        random_seed=seed,
    )

    tally = WorkerTally(worker_index=worker_index)
    for _ in range(match_count):
        if stop_flag is not None and stop_flag.is_set():
            logger.info(f"Worker {worker_index} stopping early after {tally.matches} matches")
            break
        record = simulator.simulate_match(detailed=request.detailed)
        tally.add_match(record, keep_record=request.detailed)

    if stats is not None:
        stats.merge(tally)
    logger.debug(f"Worker {worker_index} finished {tally.matches}/{match_count} matches")
    return tally


# =============================================================================
# Orchestrator
# =============================================================================


class BatchOrchestrator:
    """Runs batches of matches across a worker pool.

    Usage:
        orchestrator = BatchOrchestrator()
        request = BatchRequest(
            team1=["Jett", "Sova", "Omen", "Killjoy", "KAY/O"],
            team2=["Raze", "Fade", "Viper", "Cypher", "Neon"],
            map_name="bind",
            match_count=10_000,
        )
        result = orchestrator.run(request)
        print(result.team1_win_rate)

    request_stop() may be called from another thread; workers finish the
    match they are on and stop. A stop requested while no batch is running
    is ignored. A worker interrupted by KeyboardInterrupt counts as a stop
    request, not a failure.
    """

    def __init__(self, executor: Optional[ExecutorKind] = None):
        """Initialize the orchestrator.

        Args:
            executor: Worker pool type (default: VALSIM_EXECUTOR, else threads)
        """
        self.executor_kind = executor or get_executor_kind()
        self._stop_lock = threading.Lock()
        self._running = False
        self._stop_requested = False
        self._active_flag: Optional[StopFlag] = None

    @property
    def running(self) -> bool:
        return self._running

    def request_stop(self) -> bool:
        """Ask running workers to stop after their current match.

        Returns:
            True if a batch was running and will stop, False if idle
        """
        with self._stop_lock:
            if not self._running:
                logger.debug("Stop requested with no batch running, ignored")
                return False
            self._stop_requested = True
            flag = self._active_flag
        if flag is not None:
            flag.set()
        return True

    def run(self, request: BatchRequest) -> BatchResult:
        """Run a full batch and block until every worker has finished.

        Raises:
            BatchExecutionError: If any worker raised
        """
        if request.seed is None:
            default_seed = get_default_seed()
            if default_seed is not None:
                request = request.model_copy(update={"seed": default_seed})

        workers = resolve_worker_count(request.match_count, request.workers)
        shares = partition_matches(request.match_count, workers)
        stats = AggregateStatistics()

        with self._stop_lock:
            if self._running:
                raise RuntimeError("A batch is already running on this orchestrator")
            self._running = True
            self._stop_requested = False

        logger.info(
            f"Running {request.match_count:,} simulations across {len(shares)} "
            f"{self.executor_kind.value} worker(s)..."
        )
        start_time = time.time()

        try:
            if len(shares) == 1:
                # Sequential: pool overhead is not worth it for one worker
                tallies, failures = self._run_inline(shares, request, stats)
            elif self.executor_kind is ExecutorKind.PROCESS:
                tallies, failures = self._run_process_pool(shares, request, stats)
            else:
                tallies, failures = self._run_thread_pool(shares, request, stats)
        finally:
            with self._stop_lock:
                self._running = False
                self._active_flag = None
                stopped = self._stop_requested
                self._stop_requested = False

        duration = time.time() - start_time

        if failures:
            for idx, exc in failures:
                logger.error(f"Worker {idx} failed: {exc!r}")
            raise BatchExecutionError(sorted(failures, key=lambda f: f[0]), stats)

        records: list[MatchRecord] = []
        for tally in sorted(tallies, key=lambda t: t.worker_index):
            records.extend(tally.records)

        result = BatchResult.from_statistics(
            stats,
            request.match_count,
            map_name=_display_map(request.map_name),
            workers=len(shares),
            duration_seconds=duration,
            cancelled=stopped and stats.matches < request.match_count,
            matches=records,
        )
        logger.info(
            f"{result.matches_simulated:,} matches simulated in {duration * 1000:.0f} ms "
            f"({duration:.3f} seconds)"
        )
        return result

    def _new_flag(self, flag: StopFlag) -> StopFlag:
        with self._stop_lock:
            self._active_flag = flag
            if self._stop_requested:
                flag.set()
        return flag

    def _worker_interrupted(self, idx: int) -> None:
        logger.warning(f"Worker {idx} interrupted, stopping the batch")
        self.request_stop()

    def _run_inline(self, shares, request, stats):
        flag = self._new_flag(threading.Event())
        try:
            tally = run_worker(0, shares[0], request, flag, stats)
        except KeyboardInterrupt:
            self._worker_interrupted(0)
            return [], []
        except BaseException as exc:
            return [], [(0, exc)]
        return [tally], []

    def _run_thread_pool(self, shares, request, stats):
        flag = self._new_flag(threading.Event())
        with ThreadPoolExecutor(max_workers=len(shares), thread_name_prefix="valsim-worker") as executor:
            return self._collect(executor, shares, request, flag, stats, merge_in_parent=False)

    def _run_process_pool(self, shares, request, stats):
        with multiprocessing.Manager() as manager:
            flag = self._new_flag(manager.Event())
            with ProcessPoolExecutor(max_workers=len(shares), initializer=_ignore_sigint) as executor:
                return self._collect(executor, shares, request, flag, stats, merge_in_parent=True)

    def _collect(
        self,
        executor: Executor,
        shares: list[int],
        request: BatchRequest,
        flag: StopFlag,
        stats: AggregateStatistics,
        merge_in_parent: bool,
    ) -> tuple[list[WorkerTally], list[tuple[int, BaseException]]]:
        worker_stats = None if merge_in_parent else stats
        futures = {
            executor.submit(run_worker, idx, share, request, flag, worker_stats): idx
            for idx, share in enumerate(shares)
        }

        tallies: list[WorkerTally] = []
        failures: list[tuple[int, BaseException]] = []
        for future in as_completed(futures):
            idx = futures[future]
            try:
                tally = future.result()
            except KeyboardInterrupt:
                self._worker_interrupted(idx)
                continue
            except BaseException as exc:
                failures.append((idx, exc))
                continue
            if merge_in_parent:
                stats.merge(tally)
            tallies.append(tally)
        return tallies, failures


def _ignore_sigint() -> None:
    # Ctrl-C reaches the whole process group; the parent stops workers via the flag
    signal.signal(signal.SIGINT, signal.SIG_IGN)


def _display_map(map_name: str) -> str:
    from valsim.engine.advantage import attacker_map_advantage

    return attacker_map_advantage(map_name)[0]
