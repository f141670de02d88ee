from unittest.mock import MagicMock

import pytest

from racetrack_game.engine import (
    CarProfile,
    CarState,
    InteractivePolicy,
    InvalidMoveRequest,
    ManeuverFocusedPolicy,
    ObstructionKind,
    OutcomeKind,
    Position,
    SpeedFocusedPolicy,
    automated_policy,
    default_track,
    load_track,
    resolve_move,
)
from racetrack_game.engine.steering import candidate_destinations, path_is_clear

CORRIDOR = ["XXXXXX", "XTTTFX", "XXXXXX"]


def _car(car_id: str, row: int, col: int, move_order: int = 1) -> CarState:
    profile = CarProfile(car_id=car_id, row_velocity=3, col_velocity=3, max_speed=5, move_order=move_order)
    return CarState(profile=profile, position=Position(row, col))


def test_candidates_skip_walls_bounds_and_budget():
    track = default_track()
    car = _car("1", 1, 1)
    candidates = list(candidate_destinations(car, track))

    assert Position(1, 1) not in candidates
    assert all(not track.is_wall(c) for c in candidates)
    assert all(abs(c.row - 1) + abs(c.col - 1) <= 5 for c in candidates)
    assert Position(2, 3) not in candidates  # wall
    assert Position(1, 4) in candidates


def test_speed_policy_picks_lowest_weight_in_scan_order():
    track = default_track()
    car = _car("1", 1, 1)
    # (1,4) and (3,4) both weigh 4; the first scanned wins
    assert SpeedFocusedPolicy().propose_destination(car, track, [car]) == Position(1, 4)


def test_speed_policy_ignores_cars_in_the_way():
    track = load_track(CORRIDOR)
    car = _car("1", 1, 1)
    blocker = _car("2", 1, 2, move_order=2)
    cars = [car, blocker]

    destination = SpeedFocusedPolicy().propose_destination(car, track, cars)
    assert destination == Position(1, 4)

    outcome = resolve_move(car, destination, track, cars)
    assert outcome.kind is OutcomeKind.BLOCKED
    assert outcome.obstruction is ObstructionKind.CAR
    assert car.position == Position(1, 1)


def test_maneuver_policy_stays_put_when_every_improvement_is_blocked():
    track = load_track(CORRIDOR)
    car = _car("1", 1, 1)
    blocker = _car("2", 1, 2, move_order=2)

    destination = ManeuverFocusedPolicy().propose_destination(car, track, [car, blocker])

    assert destination == car.position
    assert resolve_move(car, destination, track, [car, blocker]).kind is OutcomeKind.NO_MOVE


def test_maneuver_policy_avoids_wall_crossings():
    track = load_track(
        [
            "XXXXXXX",
            "XTTXTFX",
            "XTTTTTX",
            "XXXXXXX",
        ]
    )
    car = _car("1", 1, 1)

    speed_pick = SpeedFocusedPolicy().propose_destination(car, track, [car])
    safe_pick = ManeuverFocusedPolicy().propose_destination(car, track, [car])

    assert not path_is_clear(car, speed_pick, track, [car])
    assert path_is_clear(car, safe_pick, track, [car])
    assert track.weight_at(safe_pick.row, safe_pick.col) < track.weight_at(1, 1)


def test_finish_on_path_marks_candidate_safe():
    track = load_track(["XXXXXXX", "XTTFTXX", "XXXXXXX"])
    car = _car("1", 1, 1)
    parked = _car("2", 1, 4, move_order=2)
    assert path_is_clear(car, Position(1, 4), track, [car, parked])


def test_interactive_policy_offsets_from_current_position():
    track = default_track()
    car = _car("3", 8, 1)
    policy = InteractivePolicy(lambda _car: (-1, 3))
    assert policy.propose_destination(car, track, [car]) == Position(7, 4)


def test_interactive_policy_rejects_and_skips_turn():
    track = default_track()
    car = _car("3", 8, 1)
    rejected = MagicMock()
    policy = InteractivePolicy(lambda _car: (2, 4), on_rejected=rejected)

    assert policy.propose_destination(car, track, [car]) == car.position

    rejected.assert_called_once()
    reported_car, error = rejected.call_args[0]
    assert reported_car is car
    assert isinstance(error, InvalidMoveRequest)
    assert (error.d_row, error.d_col) == (2, 4)


def test_automated_policy_lookup():
    assert isinstance(automated_policy("Speed"), SpeedFocusedPolicy)
    assert isinstance(automated_policy("maneuver"), ManeuverFocusedPolicy)
    with pytest.raises(ValueError):
        automated_policy("teleport")
