import itertools

from racetrack_game.engine import Position, rasterize


def _assert_connected(path):
    for a, b in zip(path, path[1:]):
        assert abs(a.row - b.row) <= 1
        assert abs(a.col - b.col) <= 1
        assert a != b


def test_rasterize_endpoints_and_eight_connected_steps():
    coords = [-3, 0, 2, 5]
    for r0, c0, r1, c1 in itertools.product(coords, repeat=4):
        start = Position(r0, c0)
        end = Position(r1, c1)
        path = rasterize(start, end)
        assert path[0] == start
        assert path[-1] == end
        assert len(path) == max(abs(r1 - r0), abs(c1 - c0)) + 1
        _assert_connected(path)


def test_rasterize_same_cell_is_single_point():
    assert rasterize(Position(4, 4), Position(4, 4)) == [Position(4, 4)]


def test_rasterize_horizontal_and_diagonal_lines():
    assert rasterize(Position(8, 1), Position(8, 4)) == [
        Position(8, 1),
        Position(8, 2),
        Position(8, 3),
        Position(8, 4),
    ]
    assert rasterize(Position(0, 0), Position(3, 3)) == [Position(i, i) for i in range(4)]


def test_rasterize_shallow_slope_matches_bresenham():
    path = rasterize(Position(2, 1), Position(1, 4))
    assert path == [Position(2, 1), Position(2, 2), Position(1, 3), Position(1, 4)]


def test_rasterize_reverse_symmetry_on_straight_and_diagonal_lines():
    pairs = [
        (Position(1, 1), Position(1, 6)),
        (Position(0, 3), Position(5, 3)),
        (Position(2, 2), Position(6, 6)),
        (Position(5, 0), Position(1, 4)),
    ]
    for a, b in pairs:
        assert list(reversed(rasterize(a, b))) == rasterize(b, a)


def test_rasterize_is_deterministic():
    a, b = Position(0, 0), Position(3, 5)
    assert rasterize(a, b) == rasterize(a, b)
