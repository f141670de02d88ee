"""
Utility script to run a race in the console.

Usage:
    python scripts/run_race.py
    python scripts/run_race.py --track-id hairpin --autopilot
    python scripts/run_race.py --track-file racetracks/track1.txt --verbose

Car 1 focuses on speed, car 2 on maneuvering and car 3 is driven from the
keyboard (or by the maneuver policy with --autopilot). The track file comes
from --track-file, --track-id, RACETRACK_TRACK_FILE or configs/race_config.json,
in that order; any unreadable track falls back to the built-in default.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

# Ensure repo root is on sys.path when script is executed from anywhere
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.append(REPO_ROOT)

from racetrack_game import console  # noqa: E402
from racetrack_game.config import get_config, max_rounds_setting, track_file_setting  # noqa: E402
from racetrack_game.engine import (  # noqa: E402
    InteractivePolicy,
    ManeuverFocusedPolicy,
    RaceLoop,
    SpeedFocusedPolicy,
    TelemetryCollector,
    build_cars,
    load_track_or_default,
)
from racetrack_game.engine.constants import DEFAULT_COL_VELOCITY, DEFAULT_MAX_SPEED, DEFAULT_ROW_VELOCITY  # noqa: E402
from racetrack_game.engine.track_registry import TrackRegistry  # noqa: E402


def _load_track(args: argparse.Namespace):
    if args.track_id:
        registry = TrackRegistry()
        try:
            return registry.load(args.track_id)
        except KeyError as exc:
            print(f"{exc}. Falling back to the configured track.")
    path = args.track_file or track_file_setting()
    return load_track_or_default(path)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a turn-based racetrack game.")
    parser.add_argument("--track-file", help="Path to a text track map.")
    parser.add_argument("--track-id", help="Track id from the racetracks/ directory.")
    parser.add_argument(
        "--autopilot",
        action="store_true",
        help="Let the maneuver policy drive car 3 instead of prompting for moves.",
    )
    parser.add_argument("--max-rounds", type=int, help="Stop the race after this many rounds.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every resolved move and print a collision summary at the end.",
    )
    parser.add_argument("--list-tracks", action="store_true", help="List the bundled tracks and exit.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_tracks:
        registry = TrackRegistry()
        for descriptor in registry.list_tracks():
            print(descriptor.summary())
        for file_name, reason in sorted(registry.rejected.items()):
            print(f"skipped {file_name}: {reason}")
        return

    track = _load_track(args)

    if args.autopilot:
        third = ManeuverFocusedPolicy()
    else:
        third = InteractivePolicy(console.prompt_offset, console.report_rejected_move())

    cars = build_cars(
        track,
        [("1", SpeedFocusedPolicy()), ("2", ManeuverFocusedPolicy()), ("3", third)],
        row_velocity=int(get_config("cars.row_velocity", DEFAULT_ROW_VELOCITY)),
        col_velocity=int(get_config("cars.col_velocity", DEFAULT_COL_VELOCITY)),
        max_speed=int(get_config("cars.max_speed", DEFAULT_MAX_SPEED)),
    )
    telemetry = TelemetryCollector()
    loop = RaceLoop(track, cars, telemetry=telemetry)

    def _print_outcome(outcome) -> None:
        message = console.describe_outcome(outcome)
        if message:
            print(message)

    def _print_round(result) -> None:
        print()
        print(console.render_track(track, loop.cars))
        print()

    print("Starting Race!")
    print()
    print(console.render_track(track, loop.cars))
    print()

    max_rounds = args.max_rounds if args.max_rounds is not None else max_rounds_setting()
    winner = loop.run_until_finished(on_round=_print_round, on_move=_print_outcome, max_rounds=max_rounds)

    if winner is None:
        print(f"No car reached the finish within {max_rounds} rounds.")
    else:
        print()
        print(console.render_winning_path(track, loop.cars, winner))
        print()

    if args.verbose:
        print(console.render_race_summary(telemetry, loop.cars))


if __name__ == "__main__":
    main()
