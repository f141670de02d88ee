from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .constants import FINISH, NEIGHBOUR_OFFSETS, WALL, WALL_WEIGHT
from .data_models import CellType, Position, TrackFormatError

logger = logging.getLogger(__name__)

DEFAULT_TRACK_ROWS: Tuple[str, ...] = (
    "XXXXXXXXXX",
    "XTTTTTTTFX",
    "XTXXXTXTTX",
    "XTTTTTXTTX",
    "XTXXXTTTTX",
    "XTTTTTXTTX",
    "XTXTXTTTTX",
    "XTTTTTTTFX",
    "XTTTTTTTTX",
    "XXXXXXXXXX",
)


@dataclass(frozen=True, eq=False)
class Track:
    """Immutable character grid plus its distance-to-finish weight field."""

    track_id: str
    rows: Tuple[str, ...]
    weights: np.ndarray
    relaxation_passes: int = 0

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0])

    def _check_bounds(self, row: int, col: int) -> None:
        # negative indices would otherwise wrap to the far side of the grid
        if self.is_out_of_bounds(Position(row, col)):
            raise IndexError(f"Cell ({row},{col}) is outside the {self.height}x{self.width} track.")

    def cell(self, row: int, col: int) -> CellType:
        self._check_bounds(row, col)
        return CellType.from_char(self.rows[row][col])

    def weight_at(self, row: int, col: int) -> int:
        self._check_bounds(row, col)
        return int(self.weights[row, col])

    def is_out_of_bounds(self, pos: Position) -> bool:
        return pos.row < 0 or pos.row >= self.height or pos.col < 0 or pos.col >= self.width

    def is_wall(self, pos: Position) -> bool:
        if self.is_out_of_bounds(pos):
            return True
        return self.rows[pos.row][pos.col] == WALL

    def is_finish(self, pos: Position) -> bool:
        if self.is_out_of_bounds(pos):
            return False
        return self.rows[pos.row][pos.col] == FINISH

    def display_char(self, row: int, col: int) -> str:
        if self.cell(row, col) is CellType.OPEN:
            return " "
        return self.rows[row][col]

    def finish_cells(self) -> List[Position]:
        return [
            Position(row, col)
            for row in range(self.height)
            for col in range(self.width)
            if self.rows[row][col] == FINISH
        ]

    def find_highest_weight_open_cell(self, excluding: Iterable[Position] = ()) -> Optional[Position]:
        """Furthest open cell from the finish, first in row-major order on ties."""
        excluded = set(excluding)
        best = -1
        best_pos: Optional[Position] = None
        for row in range(self.height):
            for col in range(self.width):
                if self.cell(row, col) is not CellType.OPEN:
                    continue
                pos = Position(row, col)
                if pos in excluded:
                    continue
                weight = self.weight_at(row, col)
                if weight < WALL_WEIGHT and weight > best:
                    best = weight
                    best_pos = pos
        return best_pos


def compute_weights(rows: Sequence[str]) -> Tuple[np.ndarray, int]:
    """
    Relaxes 8-neighbour hop counts to the nearest finish until a full pass
    changes nothing.

    Finish cells start at 0, everything else at WALL_WEIGHT. A pass lowers
    each non-wall cell to min(neighbour + 1); walls are pinned back to
    WALL_WEIGHT so they never relay a smaller value. Values only decrease and
    are bounded below by 0, so the loop terminates without an iteration cap.
    Returns the weights and the number of passes including the final idle one.
    """
    grid = np.array([list(row) for row in rows])
    walls = grid == WALL
    height, width = grid.shape

    weights = np.full(grid.shape, WALL_WEIGHT, dtype=np.int64)
    weights[grid == FINISH] = 0

    passes = 0
    changed = True
    while changed:
        passes += 1
        padded = np.pad(weights, 1, mode="constant", constant_values=WALL_WEIGHT)
        relaxed = weights.copy()
        for d_row, d_col in NEIGHBOUR_OFFSETS:
            neighbour = padded[1 + d_row : 1 + d_row + height, 1 + d_col : 1 + d_col + width]
            np.minimum(relaxed, neighbour + 1, out=relaxed)
        relaxed[walls] = WALL_WEIGHT
        changed = bool((relaxed < weights).any())
        weights = relaxed

    weights.setflags(write=False)
    return weights, passes


def load_track(raw_lines: Iterable[str], *, track_id: str = "custom") -> Track:
    """Builds a Track from text rows, skipping blank lines."""
    rows = tuple(line.strip() for line in raw_lines if line.strip())
    if not rows:
        raise TrackFormatError("Track source is empty.")

    width = len(rows[0])
    for index, row in enumerate(rows):
        if len(row) != width:
            raise TrackFormatError(
                f"All rows must have the same length: row {index} has {len(row)} cells, expected {width}."
            )

    weights, passes = compute_weights(rows)
    logger.debug("Track %s: %dx%d weights settled after %d passes", track_id, len(rows), width, passes)
    return Track(track_id=track_id, rows=rows, weights=weights, relaxation_passes=passes)


def load_track_file(path: Path | str, *, track_id: Optional[str] = None) -> Track:
    track_path = Path(path)
    try:
        text = track_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TrackFormatError(f"Could not read track file {track_path}: {exc}") from exc
    return load_track(text.splitlines(), track_id=track_id or track_path.stem.lower())


def default_track() -> Track:
    return load_track(DEFAULT_TRACK_ROWS, track_id="default")


def load_track_or_default(path: Optional[Path | str]) -> Track:
    """Loads a track file, falling back to the built-in track on any format error."""
    if path is None:
        return default_track()
    try:
        return load_track_file(path)
    except TrackFormatError as exc:
        logger.warning("Could not load track file (%s). Using default track.", exc)
        return default_track()
