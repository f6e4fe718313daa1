"""Command-line entry point for valsim.

Usage:
    valsim --team1 Jett,Sova,Omen,Killjoy,KAY/O \\
           --team2 Raze,Fade,Viper,Cypher,Neon \\
           --map bind --attacker 1 --matches 10000 --seed 7

Or directly:
    python -m valsim.cli.app --list-agents

Exit codes: 0 on success, 2 on invalid input, 1 if a worker failed.
"""

import argparse
import logging
import sys
import threading
from pathlib import Path
from typing import Optional

from valsim.cli.trace import SEPARATOR, format_match, format_summary, format_team_stats, save_trace
from valsim.config import ExecutorKind, get_log_level
from valsim.parameters import DEFAULT_MAP
from valsim.roster import AgentRegistry, VALID_MAP_INPUTS
from valsim.simulation.batch_runner import BatchExecutionError, BatchRequest, BatchResult
from valsim.simulation.session import SimulationSession

logger = logging.getLogger(__name__)


def _split_names(raw: str) -> list[str]:
    return [name.strip() for name in raw.split(",") if name.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="valsim",
        description="Simulate 5v5 tactical shooter matches between two team compositions",
    )
    parser.add_argument("--team1", type=str, help="Comma-separated list of 5 agents for team 1")
    parser.add_argument("--team2", type=str, help="Comma-separated list of 5 agents for team 2")
    parser.add_argument(
        "--map",
        type=str,
        default=DEFAULT_MAP,
        help=f"Map to play on, one of {', '.join(VALID_MAP_INPUTS)} (default: {DEFAULT_MAP})",
    )
    parser.add_argument(
        "--attacker",
        type=int,
        choices=[1, 2],
        default=1,
        help="Team attacking first (default: 1)",
    )
    parser.add_argument(
        "--matches",
        type=int,
        default=1000,
        help="Number of matches to simulate (default: 1000)",
    )
    parser.add_argument("--detailed", action="store_true", help="Print every round of every match")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--workers", type=int, default=None, help="Number of parallel workers")
    parser.add_argument(
        "--executor",
        choices=[kind.value for kind in ExecutorKind],
        default=None,
        help="Worker pool type (default: VALSIM_EXECUTOR, else thread)",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--output", type=str, default=None, help="Directory to save a JSON trace in")
    parser.add_argument("--list-agents", action="store_true", help="List available agents and exit")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (default: VALSIM_LOG_LEVEL, else WARNING)",
    )
    return parser


def list_agents() -> str:
    registry = AgentRegistry()
    return "\n".join(f"{agent.role.value:<11} {agent.describe()}" for agent in registry.agents())


def build_session(args: argparse.Namespace) -> SimulationSession:
    """Fill both team slots, map and attacker from parsed arguments.

    Raises:
        ValueError: If a team is missing, incomplete or has a rejected agent
    """
    executor = ExecutorKind(args.executor) if args.executor else None
    session = SimulationSession(executor=executor)
    session.set_map(args.map)
    session.set_attacking_team(args.attacker)

    for slot, raw in ((1, args.team1), (2, args.team2)):
        if not raw:
            raise ValueError(f"--team{slot} is required")
        for name in _split_names(raw):
            result = session.add_agent(slot, name)
            if not result.ok:
                raise ValueError(f"Team {slot}: cannot add {name!r} ({result.value})")
    return session


def run_interruptible(session: SimulationSession, request: BatchRequest) -> BatchResult:
    """Run a batch in a background thread so Ctrl-C can stop it cleanly.

    On KeyboardInterrupt the workers are asked to stop after their current
    match and the partial result is returned.
    """
    outcome: dict = {}

    def target() -> None:
        try:
            outcome["result"] = session.orchestrator.run(request)
        except BaseException as exc:
            outcome["error"] = exc

    thread = threading.Thread(target=target, name="valsim-batch")
    thread.start()
    while thread.is_alive():
        try:
            thread.join(0.2)
        except KeyboardInterrupt:
            logger.warning("Interrupted, stopping workers after their current match")
            session.orchestrator.request_stop()

    if "error" in outcome:
        raise outcome["error"]
    if "result" not in outcome:
        raise RuntimeError("Batch thread exited without a result")
    return outcome["result"]


def main(argv: Optional[list[str]] = None) -> int:
    """Command-line interface for running simulations."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level or get_log_level(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.list_agents:
        print(list_agents())
        return 0

    try:
        session = build_session(args)
        request = session.build_request(
            args.matches,
            detailed=args.detailed,
            seed=args.seed,
            workers=args.workers,
        )
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if not args.json:
        print(format_team_stats(1, session.team_stats(1)))
        print(SEPARATOR)
        print(format_team_stats(2, session.team_stats(2)))
        print()

    try:
        result = run_interruptible(session, request)
    except BatchExecutionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(result.to_json(include_matches=args.detailed))
    else:
        for index, record in enumerate(result.matches, start=1):
            print(format_match(record, index))
            print()
        print(format_summary(result))

    if args.output:
        path = save_trace(result, Path(args.output))
        if not args.json:
            print(f"\nResults saved to: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
