"""valsim CLI module.

Provides the argparse batch command.

Usage:
    valsim --team1 ... --team2 ... --matches 1000

Or directly:
    python -m valsim.cli.app
"""

from valsim.cli.app import main

__all__ = ["main"]
