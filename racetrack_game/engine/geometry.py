from __future__ import annotations

from typing import List

from .data_models import Position


def _step(start: int, end: int) -> int:
    return 1 if start < end else -1


def rasterize(start: Position, end: Position) -> List[Position]:
    """
    Returns every grid cell visited on a straight line from start to end.

    Integer Bresenham walk over (row, col). Both endpoints are included and
    consecutive cells differ by at most one unit per axis.
    """
    d_row = abs(end.row - start.row)
    d_col = abs(end.col - start.col)
    s_row = _step(start.row, end.row)
    s_col = _step(start.col, end.col)
    err = d_row - d_col

    row, col = start.row, start.col
    path: List[Position] = []
    while True:
        path.append(Position(row, col))
        if row == end.row and col == end.col:
            break

        e2 = err * 2
        if e2 > -d_col:
            err -= d_col
            row += s_row
        if e2 < d_row:
            err += d_row
            col += s_col

    return path
