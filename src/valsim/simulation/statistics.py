"""Match statistics for valsim batch runs.

WorkerTally is a plain per-worker counter set; only its owning worker
touches it. AggregateStatistics is the one object shared across workers.
Every update goes through a lock, so concurrent merges never lose counts.
Totals are only meaningful once all workers have been joined.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from valsim.models.state import MatchRecord


@dataclass
class WorkerTally:
    """Counts accumulated by a single worker."""

    worker_index: int = 0
    matches: int = 0
    team1_wins: int = 0
    team2_wins: int = 0
    team1_rounds: int = 0
    team2_rounds: int = 0
    team1_tie_breaks: int = 0
    team2_tie_breaks: int = 0
    overtimes: int = 0
    records: list[MatchRecord] = field(default_factory=list)

    def add_match(self, record: MatchRecord, keep_record: bool = False) -> None:
        """Add one finished match."""
        self.matches += 1
        if record.winner == 1:
            self.team1_wins += 1
        else:
            self.team2_wins += 1
        self.team1_rounds += record.team1_rounds
        self.team2_rounds += record.team2_rounds
        self.team1_tie_breaks += record.team1_tie_breaks
        self.team2_tie_breaks += record.team2_tie_breaks
        if record.went_to_overtime:
            self.overtimes += 1
        if keep_record:
            self.records.append(record)


class AggregateStatistics:
    """Batch-wide counters shared by every worker.

    Usage:
        stats = AggregateStatistics()
        stats.merge(tally)          # from any thread
        stats.team1_wins            # read after all workers are joined
    """

    _FIELDS = (
        "matches",
        "team1_wins",
        "team2_wins",
        "team1_rounds",
        "team2_rounds",
        "team1_tie_breaks",
        "team2_tie_breaks",
        "overtimes",
    )

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: dict[str, int] = {name: 0 for name in self._FIELDS}

    def add(self, name: str, amount: int = 1) -> None:
        """Add to a single counter.

        Raises:
            KeyError: If name is not a known counter
        """
        if name not in self._counts:
            raise KeyError(f"Unknown statistic: {name}")
        with self._lock:
            self._counts[name] += amount

    def merge(self, tally: WorkerTally) -> None:
        """Add every counter from a worker's tally in one locked step."""
        with self._lock:
            for name in self._FIELDS:
                self._counts[name] += getattr(tally, name)

    def reset(self) -> None:
        with self._lock:
            for name in self._FIELDS:
                self._counts[name] = 0

    def snapshot(self) -> dict[str, int]:
        """Consistent copy of all counters."""
        with self._lock:
            return dict(self._counts)

    @property
    def matches(self) -> int:
        return self._counts["matches"]

    @property
    def team1_wins(self) -> int:
        return self._counts["team1_wins"]

    @property
    def team2_wins(self) -> int:
        return self._counts["team2_wins"]

    @property
    def team1_rounds(self) -> int:
        return self._counts["team1_rounds"]

    @property
    def team2_rounds(self) -> int:
        return self._counts["team2_rounds"]

    @property
    def team1_tie_breaks(self) -> int:
        return self._counts["team1_tie_breaks"]

    @property
    def team2_tie_breaks(self) -> int:
        return self._counts["team2_tie_breaks"]

    @property
    def overtimes(self) -> int:
        return self._counts["overtimes"]
