"""Runtime configuration for valsim.

Configuration comes from environment variables, with module-level defaults.
Game balance constants live in parameters.py, not here.

Environment variables:
- VALSIM_WORKER_FRACTION: share of CPUs used for workers (default 0.8)
- VALSIM_MAX_WORKERS: hard worker count override (default: unset)
- VALSIM_EXECUTOR: "thread" or "process" (default "thread")
- VALSIM_SEED: base random seed for batches (default: unset)
- VALSIM_LOG_LEVEL: logging level name for the CLI (default "WARNING")
"""

import logging
import os
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ExecutorKind(Enum):
    """Available worker pool types."""

    THREAD = "thread"
    PROCESS = "process"


DEFAULT_WORKER_FRACTION = 0.8
DEFAULT_EXECUTOR = ExecutorKind.THREAD
DEFAULT_LOG_LEVEL = "WARNING"


def _read_int(name: str) -> Optional[int]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}")
        return None


def get_worker_fraction() -> float:
    """Share of available CPUs to use as workers, clamped to (0, 1]."""
    raw = os.environ.get("VALSIM_WORKER_FRACTION", "").strip()
    if not raw:
        return DEFAULT_WORKER_FRACTION
    try:
        fraction = float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric VALSIM_WORKER_FRACTION={raw!r}")
        return DEFAULT_WORKER_FRACTION
    if fraction <= 0:
        return DEFAULT_WORKER_FRACTION
    return min(fraction, 1.0)


def get_max_workers() -> Optional[int]:
    """Explicit worker count from the environment, if any."""
    value = _read_int("VALSIM_MAX_WORKERS")
    if value is not None and value < 1:
        return None
    return value


def get_default_worker_count() -> int:
    """Worker count used when a caller does not ask for one.

    VALSIM_MAX_WORKERS if set, otherwise a fraction of the CPU count,
    never below 1.
    """
    explicit = get_max_workers()
    if explicit is not None:
        return explicit
    cpus = os.cpu_count() or 1
    return max(1, int(cpus * get_worker_fraction()))


def get_executor_kind() -> ExecutorKind:
    """Configured worker pool type."""
    raw = os.environ.get("VALSIM_EXECUTOR", DEFAULT_EXECUTOR.value).strip().lower()
    if raw == "process":
        return ExecutorKind.PROCESS
    return ExecutorKind.THREAD


def get_default_seed() -> Optional[int]:
    """Base seed from the environment, if any."""
    return _read_int("VALSIM_SEED")


def get_log_level() -> str:
    """Configured log level name (validated against the logging module)."""
    raw = os.environ.get("VALSIM_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if raw not in logging.getLevelNamesMapping():
        return DEFAULT_LOG_LEVEL
    return raw
