"""Batch simulation for valsim.

- statistics: Per-worker tallies and lock-protected batch totals
- batch_runner: Partitioning, worker pool and BatchResult
- session: Two-team session used by the CLI and callers
"""

from valsim.simulation.batch_runner import (
    BatchExecutionError,
    BatchOrchestrator,
    BatchRequest,
    BatchResult,
    build_team,
    partition_matches,
    resolve_worker_count,
    run_worker,
)
from valsim.simulation.session import SimulationSession
from valsim.simulation.statistics import AggregateStatistics, WorkerTally

__all__ = [
    "AggregateStatistics",
    "BatchExecutionError",
    "BatchOrchestrator",
    "BatchRequest",
    "BatchResult",
    "SimulationSession",
    "WorkerTally",
    "build_team",
    "partition_matches",
    "resolve_worker_count",
    "run_worker",
]
