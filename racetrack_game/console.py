"""
Console collaborators for the race: text frames, turn narration, and the
prompt used by the interactive car. The engine never prints; everything
user-facing is formatted here.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from racetrack_game.engine import (
    CarState,
    InvalidMoveRequest,
    MoveOutcome,
    ObstructionKind,
    OutcomeKind,
    TelemetryCollector,
    Track,
)


def _grid_to_text(grid: Sequence[Sequence[str]]) -> str:
    return "\n".join("".join(f"{ch} " for ch in row) for row in grid)


def _base_grid(track: Track) -> List[List[str]]:
    return [[track.display_char(row, col) for col in range(track.width)] for row in range(track.height)]


def _overlay_cars(track: Track, grid: List[List[str]], cars: Sequence[CarState]) -> None:
    for car in cars:
        if not track.is_out_of_bounds(car.position):
            grid[car.position.row][car.position.col] = car.car_id


def render_track(track: Track, cars: Sequence[CarState]) -> str:
    """Current frame with car ids drawn over the track."""
    grid = _base_grid(track)
    _overlay_cars(track, grid, cars)
    return _grid_to_text(grid)


def render_winning_path(track: Track, cars: Sequence[CarState], winner: CarState) -> str:
    grid = _base_grid(track)
    for pos in winner.path_history:
        if not track.is_wall(pos):
            grid[pos.row][pos.col] = winner.car_id
    _overlay_cars(track, grid, cars)
    return f"Final Track - CAR {winner.car_id} WINS!\n\n" + _grid_to_text(grid)


def describe_outcome(outcome: MoveOutcome) -> str:
    """Narration for blocked and winning moves; empty for everything else."""
    car_name = f"Car {outcome.car_id}"

    if outcome.kind is OutcomeKind.BLOCKED:
        if outcome.obstruction is ObstructionKind.CAR:
            obstacle = f"car {outcome.blocking_car_id}"
        else:
            obstacle = outcome.obstruction.value
        return (
            f"{car_name} attempts to move to {outcome.destination}.\n"
            f"Before reaching the space, {car_name} passes a {obstacle} at {outcome.obstruction_pos}.\n"
            f"This means {car_name} will not reach its destination and will land on "
            f"the previous safe spot {outcome.landed}."
        )

    if outcome.kind is OutcomeKind.WON:
        return (
            f"{car_name} attempts to move to {outcome.destination}.\n"
            f"Before reaching the space, {car_name} passes the finish line at {outcome.landed}.\n"
            f"CAR {outcome.car_id} WINS!"
        )

    return ""


def describe_rejected_move(error: InvalidMoveRequest) -> str:
    profile = error.profile
    return "\n".join(
        [
            "",
            "INVALID MOVE!",
            f"Your attempted move: ({error.d_row}, {error.d_col})",
            f"Rules for User Car {profile.car_id}:",
            f" - Vertical movement allowed:  -{profile.row_velocity} to +{profile.row_velocity}",
            f" - Horizontal movement allowed: -{profile.col_velocity} to +{profile.col_velocity}",
            f" - |vertical| + |horizontal| must be <= {profile.max_speed}",
            "This move was rejected. Your turn is skipped.",
            "",
        ]
    )


def _read_int(prompt: str, read: Callable[[str], str], write: Callable[[str], None]) -> int:
    while True:
        raw = read(prompt)
        try:
            return int(raw.strip())
        except ValueError:
            write(f"'{raw}' is not a whole number, try again.")


def prompt_offset(
    car: CarState,
    read: Optional[Callable[[str], str]] = None,
    write: Optional[Callable[[str], None]] = None,
) -> Tuple[int, int]:
    """Asks the human for a vertical and horizontal move."""
    read = read or input
    write = write or print
    write(f"User Car {car.car_id} is currently at {car.position}")
    d_row = _read_int("Enter vertical move (negative = up, positive = down): ", read, write)
    d_col = _read_int("Enter horizontal move (negative = left, positive = right): ", read, write)
    return d_row, d_col


def report_rejected_move(write: Optional[Callable[[str], None]] = None) -> Callable[[CarState, InvalidMoveRequest], None]:
    sink = write or print

    def _report(car: CarState, error: InvalidMoveRequest) -> None:
        sink(describe_rejected_move(error))

    return _report


def render_race_summary(telemetry: TelemetryCollector, cars: Sequence[CarState]) -> str:
    """Rounds played plus each car's collisions and remaining distance."""
    frames = telemetry.export()
    collisions = telemetry.collisions_by_car()
    lines = [f"Race summary after {len(frames)} rounds:"]
    for car in sorted(cars, key=lambda c: c.profile.move_order):
        trace = telemetry.weight_trace(car.car_id)
        remaining = trace[-1] if trace else car.weight_position
        status = "finished" if car.has_won else f"{remaining} from the finish"
        lines.append(f" - Car {car.car_id}: {collisions.get(car.car_id, 0)} collisions, {status}")
    return "\n".join(lines)
