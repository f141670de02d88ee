from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from .data_models import (
    CarProfile,
    CarState,
    InvalidMoveRequest,
    MoveOutcome,
    ObstructionKind,
    OutcomeKind,
    Position,
)
from .geometry import rasterize
from .track import Track

logger = logging.getLogger(__name__)


def validate_move(profile: CarProfile, d_row: int, d_col: int) -> None:
    """Raises InvalidMoveRequest when the offset breaks the car's limits."""
    if not profile.allows(d_row, d_col):
        raise InvalidMoveRequest(profile, d_row, d_col)


def find_car_at(cars: Sequence[CarState], position: Position, exclude: Optional[CarState] = None) -> Optional[CarState]:
    for other in cars:
        if other is exclude:
            continue
        if other.position == position:
            return other
    return None


def obstruction_at(
    track: Track,
    cars: Sequence[CarState],
    car: CarState,
    cell: Position,
) -> Tuple[Optional[ObstructionKind], Optional[CarState]]:
    """Checks boundary, wall and other cars in that order."""
    if track.is_out_of_bounds(cell):
        return ObstructionKind.BOUNDARY, None
    if track.is_wall(cell):
        return ObstructionKind.WALL, None
    other = find_car_at(cars, cell, exclude=car)
    if other is not None:
        return ObstructionKind.CAR, other
    return None, None


def resolve_move(
    car: CarState,
    destination: Optional[Position],
    track: Track,
    cars: Sequence[CarState],
) -> MoveOutcome:
    """
    Replays the straight-line path towards destination and applies it to car.

    The first obstruction rolls the car back to the previous safe cell; a
    finish cell reached before any obstruction wins the race. Invalid or empty
    requests leave the car untouched.
    """
    start = car.position
    no_move = MoveOutcome(kind=OutcomeKind.NO_MOVE, car_id=car.car_id, start=start, landed=start, destination=destination)

    if car.has_won or destination is None or destination == start:
        return no_move

    d_row, d_col = start.delta_to(destination)
    try:
        validate_move(car.profile, d_row, d_col)
    except InvalidMoveRequest as exc:
        logger.debug("Ignoring move request: %s", exc)
        return no_move

    path = rasterize(start, destination)
    previous = start

    for cell in path[1:]:
        kind, other = obstruction_at(track, cars, car, cell)
        if kind is not None:
            car.move_to(previous)
            logger.debug("Car %s blocked by %s at %s, lands on %s", car.car_id, kind.value, cell, previous)
            return MoveOutcome(
                kind=OutcomeKind.BLOCKED,
                car_id=car.car_id,
                start=start,
                landed=previous,
                destination=destination,
                obstruction=kind,
                obstruction_pos=cell,
                blocking_car_id=other.car_id if other is not None else None,
            )

        if track.is_finish(cell):
            car.move_to(cell)
            car.has_won = True
            logger.debug("Car %s crosses the finish at %s", car.car_id, cell)
            return MoveOutcome(
                kind=OutcomeKind.WON,
                car_id=car.car_id,
                start=start,
                landed=cell,
                destination=destination,
            )

        car.move_to(cell)
        previous = cell

    logger.debug("Car %s advances %s -> %s", car.car_id, start, destination)
    return MoveOutcome(
        kind=OutcomeKind.ADVANCED,
        car_id=car.car_id,
        start=start,
        landed=car.position,
        destination=destination,
    )
