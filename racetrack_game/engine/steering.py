from __future__ import annotations

from typing import Callable, Dict, Iterable, Iterator, Optional, Protocol, Sequence, Tuple, Type

from .data_models import CarState, InvalidMoveRequest, Position
from .geometry import rasterize
from .movement import obstruction_at, validate_move
from .track import Track

OffsetReader = Callable[[CarState], Tuple[int, int]]
RejectionHandler = Callable[[CarState, InvalidMoveRequest], None]


class SteeringPolicy(Protocol):
    name: str

    def propose_destination(self, car: CarState, track: Track, cars: Sequence[CarState]) -> Optional[Position]:
        ...


def candidate_destinations(car: CarState, track: Track) -> Iterator[Position]:
    """Reachable non-wall cells, scanned row offset first then column offset."""
    profile = car.profile
    for d_row in range(-profile.row_velocity, profile.row_velocity + 1):
        for d_col in range(-profile.col_velocity, profile.col_velocity + 1):
            if d_row == 0 and d_col == 0:
                continue
            if abs(d_row) + abs(d_col) > profile.max_speed:
                continue
            candidate = car.position.offset(d_row, d_col)
            # is_wall also covers out-of-bounds cells
            if track.is_wall(candidate):
                continue
            yield candidate


def lowest_weight_destination(car: CarState, track: Track, candidates: Iterable[Position]) -> Position:
    best_weight = track.weight_at(car.position.row, car.position.col)
    best_pos = car.position
    for candidate in candidates:
        weight = track.weight_at(candidate.row, candidate.col)
        if weight < best_weight:
            best_weight = weight
            best_pos = candidate
    return best_pos


def path_is_clear(car: CarState, destination: Position, track: Track, cars: Sequence[CarState]) -> bool:
    """True when nothing blocks the straight line before a finish cell or the destination."""
    for cell in rasterize(car.position, destination)[1:]:
        kind, _ = obstruction_at(track, cars, car, cell)
        if kind is not None:
            return False
        if track.is_finish(cell):
            return True
    return True


class SpeedFocusedPolicy:
    """Always heads for the lowest-weight reachable cell, crashes included."""

    name = "speed"

    def propose_destination(self, car: CarState, track: Track, cars: Sequence[CarState]) -> Optional[Position]:
        return lowest_weight_destination(car, track, candidate_destinations(car, track))


class ManeuverFocusedPolicy:
    """Lowest-weight cell among those whose whole path is collision free."""

    name = "maneuver"

    def propose_destination(self, car: CarState, track: Track, cars: Sequence[CarState]) -> Optional[Position]:
        safe = (
            candidate
            for candidate in candidate_destinations(car, track)
            if path_is_clear(car, candidate, track, cars)
        )
        return lowest_weight_destination(car, track, safe)


class InteractivePolicy:
    """Delegates the offset to a human; rejected offsets skip the turn."""

    name = "interactive"

    def __init__(self, read_offset: OffsetReader, on_rejected: Optional[RejectionHandler] = None) -> None:
        self._read_offset = read_offset
        self._on_rejected = on_rejected

    def propose_destination(self, car: CarState, track: Track, cars: Sequence[CarState]) -> Optional[Position]:
        d_row, d_col = self._read_offset(car)
        try:
            validate_move(car.profile, d_row, d_col)
        except InvalidMoveRequest as exc:
            if self._on_rejected is not None:
                self._on_rejected(car, exc)
            return car.position
        return car.position.offset(d_row, d_col)


AUTOMATED_POLICIES: Dict[str, Type[SteeringPolicy]] = {
    SpeedFocusedPolicy.name: SpeedFocusedPolicy,
    ManeuverFocusedPolicy.name: ManeuverFocusedPolicy,
}


def automated_policy(name: str) -> SteeringPolicy:
    key = name.lower()
    if key not in AUTOMATED_POLICIES:
        raise ValueError(f"Unknown steering policy: {name}")
    return AUTOMATED_POLICIES[key]()
