from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .data_models import MoveOutcome, OutcomeKind, Position


@dataclass
class CarFrame:
    car_id: str
    position: Position
    weight: int
    has_won: bool


@dataclass
class RoundFrame:
    round_number: int
    move_order: List[str] = field(default_factory=list)
    outcomes: List[MoveOutcome] = field(default_factory=list)
    cars: List[CarFrame] = field(default_factory=list)


class TelemetryCollector:
    """Per-round snapshots of a race, queried after the finish."""

    def __init__(self) -> None:
        self.frames: List[RoundFrame] = []

    def record_frame(self, frame: RoundFrame) -> None:
        self.frames.append(frame)

    def export(self) -> Sequence[RoundFrame]:
        return tuple(self.frames)

    def clear(self) -> None:
        self.frames.clear()

    def collisions(self) -> List[MoveOutcome]:
        return [outcome for frame in self.frames for outcome in frame.outcomes if outcome.kind is OutcomeKind.BLOCKED]

    def collisions_by_car(self) -> Dict[str, int]:
        return dict(Counter(outcome.car_id for outcome in self.collisions()))

    def weight_trace(self, car_id: str) -> List[int]:
        """Distance to the finish at the end of each recorded round."""
        return [car.weight for frame in self.frames for car in frame.cars if car.car_id == car_id]
