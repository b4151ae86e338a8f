#!/usr/bin/env python3
"""
Headless Arena Grinder runner.

Autoplays a run from a YAML config and prints a progression summary.
"""

import argparse
import sys
from dataclasses import replace

from arena_grinder.core.errors import ArenaError
from arena_grinder.core.events import EventManager
from arena_grinder.core.random_source import NumpyRandomSource
from arena_grinder.game.config import DEFAULT_CONFIG_PATH, load_config
from arena_grinder.game.autoplay import run_autoplay
from arena_grinder.game.log_manager import LogManager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Autoplay an Arena Grinder run")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to YAML config")
    parser.add_argument("--seed", type=int, default=None, help="Seed for enemy damage rolls")
    parser.add_argument("--max-rounds", type=int, default=10_000, help="Round budget")
    parser.add_argument("--curve", choices=["linear", "quadratic", "logarithmic"],
                        help="Override the XP curve (coefficient from the config table)")
    parser.add_argument("--target-level", type=int, help="Override the target level")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print the run log")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        progression, combat = load_config(args.config)
        if args.curve:
            progression = progression.select_curve(args.curve)
        if args.target_level is not None:
            progression = replace(progression, target_level=args.target_level)

        event_manager = EventManager()
        log_manager = LogManager(event_manager)
        summary = run_autoplay(
            progression,
            combat,
            NumpyRandomSource(args.seed),
            max_rounds=args.max_rounds,
            event_manager=event_manager,
        )
    except (ArenaError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.verbose:
        for line in log_manager.get_formatted():
            print(line)
        print()

    status = "reached" if summary.completed else "NOT reached"
    print(f"Curve={progression.curve.name} | Target level {progression.target_level} {status}")
    print(f"Rounds: {summary.rounds} | Wins: {summary.wins} | Losses: {summary.losses} "
          f"| Win rate: {summary.win_rate:.1%}")
    print(f"Attacks: {summary.attacks} | Enemy crits: {summary.crits_received} "
          f"| Final level: {summary.final_level} | Total XP: {summary.total_xp}")
    for level, rounds in enumerate(summary.rounds_per_level, start=1):
        print(f"  L{level}: {rounds} rounds")
    return 0


if __name__ == "__main__":
    sys.exit(main())
