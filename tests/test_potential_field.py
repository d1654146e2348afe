import math

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from motionplan.geometry import Vector2D, euclidean_distance
from motionplan.potential_field import PotentialField, descent_direction, obstacle_polygons

coords = st.floats(min_value=-100, max_value=100, allow_nan=False)
vectors = st.builds(Vector2D, coords, coords)

BAR = [Vector2D(-0.5, 0.2), Vector2D(0.5, 0.2), Vector2D(0.5, 0.4), Vector2D(-0.5, 0.4)]


def make_field(obs_map=(), eps=0.15, step=0.1):
    return PotentialField(list(obs_map), eps, step, 2.0, 0.5, 1.0, 1.0)


@given(vectors, vectors)
def test_descent_direction_is_unit(a, b):
    assume((a + b).norm() > 1e-6)
    d = descent_direction(a, b)
    assert math.isclose(d.norm(), 1.0, rel_tol=1e-9)


def test_descent_direction_rejects_zero_gradient():
    with pytest.raises(ValueError):
        descent_direction(Vector2D(1, 0), Vector2D(-1, 0))


def test_path_starts_at_start():
    field = make_field()
    field.init_path(Vector2D(0, 0), Vector2D(1, 0))
    assert field.path == [Vector2D(0, 0)]
    assert field.position == Vector2D(0, 0)


def test_each_step_has_step_length():
    field = make_field()
    field.init_path(Vector2D(0, 0), Vector2D(1, 0))
    before = field.position
    assert field.plan_path()
    assert math.isclose(euclidean_distance(before, field.position), field.step)
    assert field.path[-1] == field.position


def test_reaches_goal_without_obstacles_and_stays_done():
    field = make_field()
    goal = Vector2D(1, 0)
    field.init_path(Vector2D(0, 0), goal)
    steps = 0
    while field.plan_path():
        steps += 1
        assert steps < 100
    assert euclidean_distance(field.position, goal) < field.eps
    assert field.goal_reached
    assert not field.plan_path()
    assert len(field.path) == steps + 1


def test_obstacle_pushes_path_away():
    free = make_field()
    free.init_path(Vector2D(0, 0), Vector2D(1, 0))
    free.plan_path()

    blocked = make_field([BAR])
    blocked.init_path(Vector2D(0, 0), Vector2D(1, 0))
    blocked.plan_path()

    assert free.position.y == 0.0
    assert blocked.position.y < 0.0
    assert blocked.position.x > 0.0


def test_distant_obstacle_has_no_effect():
    far_bar = [v + Vector2D(0, 50) for v in BAR]
    free = make_field()
    blocked = make_field([far_bar])
    for field in (free, blocked):
        field.init_path(Vector2D(0, 0), Vector2D(1, 0))
        field.plan_path()
    assert free.position == blocked.position


def test_obstacle_polygons_scales_vertices():
    polys = obstacle_polygons([[[1, 2], [3, 4]]], 0.5)
    assert polys == [[Vector2D(0.5, 1.0), Vector2D(1.5, 2.0)]]