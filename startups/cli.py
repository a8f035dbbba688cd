"""
Startups CLI - Command-line interface for the engine.

Usage:
    startups play [--players a,b,c] [--seed N] [--policy random|first] [--json]

Settings not given on the command line are read from the STARTUPS_*
environment variables.
"""

import argparse
import logging
import sys

from pydantic import ValidationError


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Startups - Card drafting rules engine",
        prog="startups",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a bot-only match")
    play_parser.add_argument("--players", help="Comma separated player ids (3 to 7)")
    play_parser.add_argument("--seed", type=int, help="Random seed")
    play_parser.add_argument("--policy", choices=["random", "first"], help="Bot policy")
    play_parser.add_argument("--timeout", type=float, help="Seconds allowed per decision")
    play_parser.add_argument("--parallel", action="store_true", help="Collect decisions on threads")
    play_parser.add_argument("--json", action="store_true", help="Print the score report as JSON")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        return cmd_play(args)

    parser.print_help()
    return 1


def cmd_play(args) -> int:
    """Run one match and print the scores."""
    from .engine_core.errors import EngineError
    from .schemas import MatchConfig, ScoreReport
    from .session import SessionManager

    try:
        config = MatchConfig.from_env(
            player_ids=args.players.split(",") if args.players else None,
            seed=args.seed,
            policy=args.policy,
            decision_timeout=args.timeout,
            parallel_decisions=args.parallel or None,
        )
    except ValidationError as e:
        print(f"Error: invalid match configuration\n{e}", file=sys.stderr)
        return 2

    manager = SessionManager()
    session = manager.create_session(config)
    try:
        scores = manager.run(session.session_id)
    except EngineError as e:
        print(f"Error: match aborted: {e}", file=sys.stderr)
        return 1
    finally:
        manager.end_session(session.session_id)

    report = ScoreReport.from_scores(config.seed, scores)
    if args.json:
        print(report.model_dump_json(indent=2))
        return 0

    print(f"Seed: {report.seed}")
    for player in report.players:
        details = ", ".join(f"{name} {points}" for name, points in sorted(player.categories.items()))
        print(f"  {player.player_id:<12} {player.total:>4}  ({details})")
    print(f"Winner(s): {', '.join(report.winners)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
