"""Text and JSON output for valsim runs.

Formats everything the CLI shows:
- Team stats (style totals, relative power, agent lines)
- Per-round traces for detailed runs
- The batch summary (match record, rounds, tie-breaks, map, time)

save_trace() writes a batch result to a timestamped JSON file.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from valsim.models.state import MatchRecord, RoundRecord
from valsim.simulation.batch_runner import BatchResult

SEPARATOR = "-" * 42
WIDE_SEPARATOR = "=" * 80


def format_team_stats(slot: int, summary: dict) -> str:
    """Render a TeamComposition.stats_summary() dict."""
    lines = [
        f"Team {slot} stats:",
        "Total Points in Each Style:",
        f"Aggro: {summary['aggro']:.1f}",
        f"Control: {summary['control']:.1f}",
        f"Midrange: {summary['midrange']:.1f}",
        f"Total Relative Power: {summary['relative_power']:.1f}",
        "",
        "Agent Stats:",
    ]
    lines.extend(summary["agents"])
    return "\n".join(lines)


def format_round(record: RoundRecord) -> str:
    lines = [
        f"Current Round: {record.round_number}",
        f"Attackers: Team {record.attacking_team}",
        f"Team 1's odds: {record.team1_chance:.2f}%",
        f"Team 2's odds: {record.team2_chance:.2f}%",
        f"Round Winner: Team {record.winner}" + (" (50/50)" if record.tie_break else ""),
        f"Team 1 rounds: {record.team1_rounds}",
        f"Team 2 rounds: {record.team2_rounds}",
        f"Styles: {record.team1_style} vs {record.team2_style}",
    ]
    if record.overtime:
        lines.insert(1, "Overtime")
    return "\n".join(lines)


def format_match(record: MatchRecord, index: Optional[int] = None) -> str:
    """Every round of a detailed match, then the winner."""
    header = f"Match {index}" if index is not None else "Match"
    blocks = [f"{header} ({record.map_name.upper()})"]
    blocks.extend(format_round(r) for r in record.rounds)
    blocks.append(
        f"Winner of the match: Team {record.winner} "
        f"({record.team1_rounds}-{record.team2_rounds})"
    )
    return "\n\n".join(blocks)


def format_summary(result: BatchResult) -> str:
    """Aggregate results of a batch, numbers with thousands separators."""
    lines = [
        WIDE_SEPARATOR,
        "BATCH SIMULATION RESULTS",
        WIDE_SEPARATOR,
        f"Number of matches simulated: {result.matches_simulated:,}",
        f"Team 1 match record vs Team 2: {result.team1_wins:,}-{result.team2_wins:,}",
        f"Team 1 win rate: {result.team1_win_rate * 100:.2f}%",
        f"Total rounds won by Team 1 vs Team 2: {result.team1_rounds:,}-{result.team2_rounds:,}",
        f"50/50 rounds won by Team 1 vs Team 2: {result.team1_tie_breaks:,}-{result.team2_tie_breaks:,}",
        f"Matches to overtime: {result.overtimes:,}",
        f"Map: {result.map_name.upper()}",
        f"Workers: {result.workers}",
        f"Duration: {result.duration_seconds:.2f} seconds",
    ]
    if result.cancelled:
        lines.append(f"Stopped early: {result.matches_simulated:,} of {result.matches_requested:,} matches")
    return "\n".join(lines)


def save_trace(result: BatchResult, output_dir: Path, label: str = "batch") -> Path:
    """Write a batch result (with any match records) to a JSON file.

    Returns:
        Path of the written file
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    map_label = result.map_name.lower().replace("/", "")
    path = output_dir / f"{label}_{map_label}_{timestamp}.json"
    path.write_text(result.to_json())
    return path
