from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

from .constants import FINISH, WALL

if TYPE_CHECKING:
    from .steering import SteeringPolicy
    from .track import Track


class TrackFormatError(ValueError):
    """Raised when a track source is missing, empty, or has ragged rows."""


class CellType(Enum):
    """Classification of a single grid character."""

    OPEN = "open"
    WALL = "wall"
    FINISH = "finish"

    @classmethod
    def from_char(cls, value: str) -> "CellType":
        if value == WALL:
            return cls.WALL
        if value == FINISH:
            return cls.FINISH
        return cls.OPEN


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    def offset(self, d_row: int, d_col: int) -> "Position":
        return Position(self.row + d_row, self.col + d_col)

    def delta_to(self, other: "Position") -> Tuple[int, int]:
        return other.row - self.row, other.col - self.col

    def __str__(self) -> str:
        return f"({self.row},{self.col})"


@dataclass(frozen=True)
class CarProfile:
    """Static per-car limits; move_order is assigned once by race setup."""

    car_id: str
    row_velocity: int
    col_velocity: int
    max_speed: int
    move_order: int

    def allows(self, d_row: int, d_col: int) -> bool:
        return (
            abs(d_row) <= self.row_velocity
            and abs(d_col) <= self.col_velocity
            and abs(d_row) + abs(d_col) <= self.max_speed
        )


class InvalidMoveRequest(ValueError):
    """Requested offset breaks a car's velocity or speed-budget limits."""

    def __init__(self, profile: CarProfile, d_row: int, d_col: int) -> None:
        self.profile = profile
        self.d_row = d_row
        self.d_col = d_col
        super().__init__(
            f"Car {profile.car_id} cannot move ({d_row}, {d_col}): "
            f"rows ±{profile.row_velocity}, cols ±{profile.col_velocity}, "
            f"combined ≤ {profile.max_speed}"
        )


@dataclass
class CarState:
    """Mutable per-turn car state."""

    profile: CarProfile
    position: Position
    policy: Optional["SteeringPolicy"] = None
    weight_position: int = 0
    has_won: bool = False
    path_history: List[Position] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.path_history:
            self.path_history.append(self.position)

    @property
    def car_id(self) -> str:
        return self.profile.car_id

    def update_weight_position(self, track: "Track") -> None:
        self.weight_position = track.weight_at(self.position.row, self.position.col)

    def move_to(self, position: Position) -> None:
        self.position = position
        self.path_history.append(position)


class OutcomeKind(Enum):
    NO_MOVE = "no_move"
    ADVANCED = "advanced"
    BLOCKED = "blocked"
    WON = "won"


class ObstructionKind(Enum):
    BOUNDARY = "boundary"
    WALL = "wall"
    CAR = "car"


@dataclass(frozen=True)
class MoveOutcome:
    """Authoritative result of one car's turn."""

    kind: OutcomeKind
    car_id: str
    start: Position
    landed: Position
    destination: Optional[Position] = None
    obstruction: Optional[ObstructionKind] = None
    obstruction_pos: Optional[Position] = None
    blocking_car_id: Optional[str] = None

    @property
    def is_narrated(self) -> bool:
        return self.kind in (OutcomeKind.BLOCKED, OutcomeKind.WON)
