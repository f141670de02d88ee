WALL = "X"
TRACK = "T"
FINISH = "F"

# Larger than any reachable hop count; walls and unreachable cells keep it.
WALL_WEIGHT = 9999

NEIGHBOUR_OFFSETS = tuple(
    (d_row, d_col)
    for d_row in (-1, 0, 1)
    for d_col in (-1, 0, 1)
    if (d_row, d_col) != (0, 0)
)

DEFAULT_ROW_VELOCITY = 3
DEFAULT_COL_VELOCITY = 3
DEFAULT_MAX_SPEED = 5
DEFAULT_MAX_ROUNDS = 500
