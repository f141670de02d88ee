from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Set, Tuple

from .constants import DEFAULT_COL_VELOCITY, DEFAULT_MAX_ROUNDS, DEFAULT_MAX_SPEED, DEFAULT_ROW_VELOCITY
from .data_models import CarProfile, CarState, MoveOutcome, OutcomeKind, Position
from .movement import resolve_move
from .steering import SteeringPolicy
from .telemetry import CarFrame, RoundFrame, TelemetryCollector
from .track import Track

logger = logging.getLogger(__name__)

MoveCallback = Callable[[MoveOutcome], None]


@dataclass
class RoundResult:
    round_number: int
    outcomes: List[MoveOutcome] = field(default_factory=list)
    winner: Optional[CarState] = None


def build_cars(
    track: Track,
    entries: Sequence[Tuple[str, SteeringPolicy]],
    row_velocity: int = DEFAULT_ROW_VELOCITY,
    col_velocity: int = DEFAULT_COL_VELOCITY,
    max_speed: int = DEFAULT_MAX_SPEED,
) -> List[CarState]:
    """
    Places one car per (car_id, policy) entry on the furthest free open cells.

    Move order follows the entry order, starting at 1.
    """
    used: Set[Position] = set()
    cars: List[CarState] = []
    for move_order, (car_id, policy) in enumerate(entries, start=1):
        start = track.find_highest_weight_open_cell(used)
        if start is None:
            raise ValueError(f"Track '{track.track_id}' has no free open cell for car {car_id}.")
        used.add(start)
        profile = CarProfile(
            car_id=car_id,
            row_velocity=row_velocity,
            col_velocity=col_velocity,
            max_speed=max_speed,
            move_order=move_order,
        )
        car = CarState(profile=profile, position=start, policy=policy)
        car.update_weight_position(track)
        cars.append(car)
    return cars


class RaceLoop:
    """Turn-based orchestration: order the cars, ask each policy, resolve the move."""

    def __init__(
        self,
        track: Track,
        cars: Sequence[CarState],
        telemetry: Optional[TelemetryCollector] = None,
    ) -> None:
        if not cars:
            raise ValueError("A race needs at least one car.")

        self.track = track
        self.telemetry = telemetry
        self.round_number = 0
        self.winner: Optional[CarState] = None
        self._cars: List[CarState] = list(cars)

    @property
    def cars(self) -> Sequence[CarState]:
        return self._cars

    def ordered_cars(self) -> List[CarState]:
        """Refreshes cached weights and stably sorts by (move order, weight)."""
        for car in self._cars:
            car.update_weight_position(self.track)
        self._cars = sorted(self._cars, key=lambda car: (car.profile.move_order, car.weight_position))
        return list(self._cars)

    def play_round(self, on_move: Optional[MoveCallback] = None) -> RoundResult:
        self.round_number += 1
        result = RoundResult(round_number=self.round_number)
        acted: List[str] = []

        for car in self.ordered_cars():
            if car.has_won:
                continue
            destination = car.policy.propose_destination(car, self.track, self._cars) if car.policy else None
            outcome = resolve_move(car, destination, self.track, self._cars)
            acted.append(car.car_id)
            result.outcomes.append(outcome)
            if on_move:
                on_move(outcome)

            if outcome.kind is OutcomeKind.WON:
                result.winner = car
                self.winner = car
                break

        if self.telemetry is not None:
            self.telemetry.record_frame(
                RoundFrame(
                    round_number=self.round_number,
                    move_order=acted,
                    outcomes=list(result.outcomes),
                    cars=[
                        CarFrame(
                            car_id=car.car_id,
                            position=car.position,
                            weight=self.track.weight_at(car.position.row, car.position.col),
                            has_won=car.has_won,
                        )
                        for car in self._cars
                    ],
                )
            )
        return result

    def run_until_finished(
        self,
        on_round: Optional[Callable[[RoundResult], None]] = None,
        on_move: Optional[MoveCallback] = None,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
    ) -> Optional[CarState]:
        """Plays rounds until a car wins; returns None if max_rounds runs out first."""
        while self.winner is None and self.round_number < max_rounds:
            result = self.play_round(on_move=on_move)
            if on_round:
                on_round(result)

        if self.winner is None:
            logger.warning("Race on track '%s' exceeded max rounds (%d) without a winner.", self.track.track_id, max_rounds)
        return self.winner
