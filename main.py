#!/usr/bin/env python3
"""
PUSHIN' - Main Entry Point

Blocks distracting apps until you complete a workout, then grants
the screen time you earned.

Usage:
    python main.py                    # Interactive CLI with default settings
    python main.py --grace 5 --plan pro
    python main.py --targets my_blocklist.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import config
from core.engine import PushinEngine
from core.state import AccessState
from screen.blocklist import BlocklistManager
from tracking.analytics import format_duration

logger = logging.getLogger(__name__)

HELP_TEXT = """
Commands:
  start <workout> <reps>   Start a workout (e.g. "start push-ups 20")
  rep [count]              Record completed reps
  done                     Complete the workout and unlock
  cancel                   Cancel the workout
  lock                     Lock immediately
  status                   Show current state
  history                  Show streak and recent workouts
  reward <workout> <reps>  Show what a workout would earn
  help                     Show this help
  quit                     Exit
"""


class PushinCli:
    """
    Interactive terminal front end for the engine.
    """

    def __init__(self, engine: PushinEngine):
        """Initialize the CLI around a configured engine."""
        self.engine = engine
        self.running = False
        self.engine.on_state_change = self._on_state_change
        self.engine.on_alert = self._on_alert

    def display_welcome(self) -> None:
        """Display welcome message and instructions."""
        status = self.engine.get_status()
        print("\n" + "=" * 60)
        print("💪 PUSHIN' - Earn your screen time")
        print("=" * 60)
        print(f"\nBlocking {len(status['blocked'])} apps until you work out.")
        print(f"Plan: {status['usage']['plan_tier']} (daily cap: {status['usage']['cap_text']})")
        print(HELP_TEXT)

    def run(self) -> None:
        """Read commands until quit or EOF while the engine ticks in the background."""
        self.running = True
        self.engine.start()
        try:
            while self.running:
                try:
                    line = input("pushin> ")
                except EOFError:
                    break
                self.handle_command(line)
        except KeyboardInterrupt:
            print()
        finally:
            self.engine.stop()
            print("\n👋 Goodbye!")

    def handle_command(self, line: str) -> None:
        """
        Execute one command line.

        Args:
            line: Raw user input.
        """
        parts = line.strip().split()
        if not parts:
            return
        command, args = parts[0].lower(), parts[1:]

        if command in ("quit", "exit", "q"):
            self.running = False
        elif command == "help":
            print(HELP_TEXT)
        elif command == "start":
            workout_type, reps = self._parse_workout_args(args)
            if workout_type is None:
                return
            result = self.engine.start_workout(workout_type, reps)
            self._print_result(result, f"Started {reps} {workout_type}")
        elif command == "rep":
            count = self._parse_int(args[0]) if args else 1
            if count is None:
                return
            if count < 1:
                print("Usage: rep [count] (count must be at least 1)")
                return
            progress = self.engine.record_reps(count)
            print(f"Progress: {progress:.0%}")
        elif command == "done":
            result = self.engine.complete_workout()
            self._print_result(result, "Workout complete!")
        elif command == "cancel":
            self._print_result(self.engine.cancel_workout(), "Workout cancelled")
        elif command == "lock":
            self._print_result(self.engine.lock(), "Locked")
        elif command == "status":
            self.print_status()
        elif command == "history":
            self.print_history()
        elif command == "reward":
            workout_type, reps = self._parse_workout_args(args)
            if workout_type is not None:
                print(self.engine.get_workout_reward_description(workout_type, reps))
        else:
            print(f"Unknown command: {command} (type 'help')")

    def print_status(self) -> None:
        status = self.engine.get_status()
        usage = status["usage"]
        print(f"State: {status['state'].value} - {status['text']}")
        print(f"Blocked: {', '.join(status['blocked']) or '-'}")
        print(f"Accessible: {', '.join(status['accessible']) or '-'}")
        if status["state"] is AccessState.EARNING:
            print(f"Workout progress: {status['workout_progress']:.0%}")
        print(
            f"Today: earned {usage['earned_text']}, used {usage['consumed_text']}"
            f" (cap {usage['cap_text']})"
        )

    def print_history(self) -> None:
        status = self.engine.get_status()
        streak = status["streak"]
        print(
            f"Streak: {streak['current_streak']} day(s) (best {streak['best_streak']}),"
            f" {streak['total_workouts']} workouts total"
        )
        if not status["recent_workouts"]:
            print("No workouts yet")
        for record in status["recent_workouts"]:
            print(
                f"  {record['display_name']}: {record['reps_completed']} reps,"
                f" {format_duration(record['earned_time_seconds'])} earned"
            )

    def _parse_workout_args(self, args: List[str]):
        if len(args) != 2:
            print("Usage: <command> <workout> <reps>")
            return None, 0
        reps = self._parse_int(args[1])
        if reps is None:
            return None, 0
        return args[0].lower(), reps

    @staticmethod
    def _parse_int(raw: str) -> Optional[int]:
        try:
            return int(raw)
        except ValueError:
            print(f"Not a number: {raw}")
            return None

    @staticmethod
    def _print_result(result: dict, success_text: str) -> None:
        if result["success"]:
            print(f"✓ {success_text}")
        else:
            print(f"✗ Ignored ({result['error_type']}) - state is {result['state'].value}")

    def _on_state_change(self, state: AccessState, text: str) -> None:
        if state is AccessState.UNLOCKED:
            remaining = self.engine.controller.get_unlock_time_remaining(self.engine.clock())
            print(f"\n🔓 {text} for {format_duration(remaining)}")
        elif state is AccessState.EXPIRED:
            print(f"\n⏰ {text}")
        elif state is AccessState.LOCKED:
            print(f"\n🔒 {text}")

    def _on_alert(self, reason: str, message: str) -> None:
        print(f"\n⚠️  {message}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="PUSHIN' - Earn screen time with workouts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                     Run with settings from .env
  python main.py --grace 5           Re-lock 5 seconds after time runs out
  python main.py --plan advanced     No daily cap
        """,
    )
    parser.add_argument(
        "--grace",
        type=int,
        default=config.GRACE_PERIOD_SECONDS,
        help=f"Grace period in seconds (default: {config.GRACE_PERIOD_SECONDS})",
    )
    parser.add_argument(
        "--plan",
        choices=[config.PLAN_FREE, config.PLAN_PRO, config.PLAN_ADVANCED],
        default=config.PLAN_TIER if config.PLAN_TIER in config.DAILY_CAP_SECONDS else config.PLAN_FREE,
        help="Plan tier for the daily cap",
    )
    parser.add_argument(
        "--targets",
        type=Path,
        default=config.BLOCKLIST_FILE,
        help="JSON file with block targets",
    )
    parser.add_argument(
        "--log-level",
        default=config.LOG_LEVEL,
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point - parses arguments and runs the interactive CLI.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format=config.LOG_FORMAT
    )

    if args.grace < 0:
        print("❌ Grace period must be non-negative")
        return 2

    targets = BlocklistManager(args.targets).load()
    engine = PushinEngine(
        block_targets=targets,
        grace_period_seconds=args.grace,
        plan_tier=args.plan,
    )

    cli = PushinCli(engine)
    cli.display_welcome()
    cli.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
