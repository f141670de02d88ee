"""
Turn-based grid racetrack engine.

The package is split into data models, the track and its weight field, line
rasterization, move resolution and steering policies. The race loop composes
these pieces; console rendering and input live outside the engine.
"""

from .data_models import (  # noqa: F401
    CarProfile,
    CarState,
    CellType,
    InvalidMoveRequest,
    MoveOutcome,
    ObstructionKind,
    OutcomeKind,
    Position,
    TrackFormatError,
)
from .geometry import rasterize  # noqa: F401
from .track import Track, default_track, load_track, load_track_file, load_track_or_default  # noqa: F401
from .movement import resolve_move, validate_move  # noqa: F401
from .steering import (  # noqa: F401
    InteractivePolicy,
    ManeuverFocusedPolicy,
    SpeedFocusedPolicy,
    SteeringPolicy,
    automated_policy,
)
from .telemetry import CarFrame, RoundFrame, TelemetryCollector  # noqa: F401
from .race_loop import RaceLoop, RoundResult, build_cars  # noqa: F401

__all__ = [
    "CarProfile",
    "CarState",
    "CellType",
    "InvalidMoveRequest",
    "MoveOutcome",
    "ObstructionKind",
    "OutcomeKind",
    "Position",
    "TrackFormatError",
    "rasterize",
    "Track",
    "default_track",
    "load_track",
    "load_track_file",
    "load_track_or_default",
    "resolve_move",
    "validate_move",
    "InteractivePolicy",
    "ManeuverFocusedPolicy",
    "SpeedFocusedPolicy",
    "SteeringPolicy",
    "automated_policy",
    "CarFrame",
    "RoundFrame",
    "TelemetryCollector",
    "RaceLoop",
    "RoundResult",
    "build_cars",
]
