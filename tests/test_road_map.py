import math
import random

import pytest
from hypothesis import given
from hypothesis import strategies as st

from motionplan.geometry import Vector2D, euclidean_distance
from motionplan.road_map import Edge, Node, RoadMap, segment_intersects_polygon

UNIT_SQUARE = [Vector2D(0, 0), Vector2D(1, 0), Vector2D(1, 1), Vector2D(0, 1)]
CENTRE_BLOCK = [Vector2D(4, 4), Vector2D(6, 4), Vector2D(6, 6), Vector2D(4, 6)]


def _road_map(obstacles, nodes=30, neighbors=5, seed=3, bnd_rad=0.1):
    return RoadMap(0.0, 10.0, 0.0, 10.0, bnd_rad, neighbors, nodes, obstacles, random.Random(seed))


def test_segment_through_square_intersects():
    assert segment_intersects_polygon(UNIT_SQUARE, Vector2D(-1, 0.5), Vector2D(2, 0.5))


def test_parallel_segment_outside_square_misses():
    assert not segment_intersects_polygon(UNIT_SQUARE, Vector2D(-1, 2), Vector2D(2, 2))


def test_diagonal_segment_outside_square_misses():
    assert not segment_intersects_polygon(UNIT_SQUARE, Vector2D(2, 2), Vector2D(3, 3))


@given(
    st.floats(-10, -0.5), st.floats(-10, 10),
    st.floats(-10, -0.5), st.floats(-10, 10),
)
def test_segment_left_of_square_never_intersects(x1, y1, x2, y2):
    assert not segment_intersects_polygon(UNIT_SQUARE, Vector2D(x1, y1), Vector2D(x2, y2))


@given(
    st.floats(0.1, 0.9), st.floats(0.1, 0.9),
    st.floats(0.1, 0.9), st.floats(0.1, 0.9),
)
def test_segment_inside_square_always_intersects(x1, y1, x2, y2):
    assert segment_intersects_polygon(UNIT_SQUARE, Vector2D(x1, y1), Vector2D(x2, y2))


def test_node_edge_exists():
    node = Node(id=0)
    node.id_set.add(4)
    node.edges.append(Edge(id=4, d=1.5))
    assert node.edge_exists(4)
    assert not node.edge_exists(5)


def test_too_few_nodes_rejected():
    with pytest.raises(ValueError):
        RoadMap(0, 10, 0, 10, 0.1, 5, 5, [])


def test_straight_line_free_blocked_by_obstacle():
    prm = _road_map([CENTRE_BLOCK])
    assert not prm.straight_line_free(Vector2D(1, 5), Vector2D(9, 5))


def test_straight_line_free_clear_path():
    prm = _road_map([CENTRE_BLOCK])
    assert prm.straight_line_free(Vector2D(1, 1), Vector2D(9, 1))


def test_straight_line_free_too_close_to_vertex():
    prm = _road_map([CENTRE_BLOCK], bnd_rad=0.5)
    assert not prm.straight_line_free(Vector2D(1, 3.8), Vector2D(9, 3.8))


def test_start_inside_obstacle_rejected():
    prm = _road_map([CENTRE_BLOCK])
    with pytest.raises(ValueError):
        prm.construct(Vector2D(5, 5), Vector2D(9, 9))


def test_goal_inside_obstacle_rejected():
    prm = _road_map([CENTRE_BLOCK])
    with pytest.raises(ValueError):
        prm.construct(Vector2D(1, 1), Vector2D(5, 5))


def test_construct_without_obstacles_is_connected():
    prm = _road_map([])
    start, goal = Vector2D(1, 1), Vector2D(9, 9)
    assert prm.construct(start, goal) is True
    assert len(prm.nodes) == 32
    assert prm.nodes[-2].point == start
    assert prm.nodes[-1].point == goal
    assert prm.nodes[-2].edges
    assert prm.nodes[-1].edges


def test_construct_edges_are_symmetric_and_consistent():
    prm = _road_map([CENTRE_BLOCK])
    prm.construct(Vector2D(1, 1), Vector2D(9, 9))
    for index, node in enumerate(prm.nodes):
        assert node.id == index
        ids = [edge.id for edge in node.edges]
        assert len(ids) == len(set(ids))
        assert node.id not in ids
        assert set(ids) == node.id_set
        for edge in node.edges:
            other = prm.nodes[edge.id]
            assert other.edge_exists(node.id)
            assert math.isclose(edge.d, euclidean_distance(node.point, other.point))


def test_construct_samples_and_edges_avoid_obstacle():
    prm = _road_map([CENTRE_BLOCK])
    prm.construct(Vector2D(1, 1), Vector2D(9, 9))
    for node in prm.nodes[:-2]:
        p = node.point
        assert 0.0 <= p.x <= 10.0 and 0.0 <= p.y <= 10.0
        assert not (4.0 <= p.x <= 6.0 and 4.0 <= p.y <= 6.0)
        for edge in node.edges:
            assert not segment_intersects_polygon(CENTRE_BLOCK, p, prm.nodes[edge.id].point)


def test_construct_is_reproducible_with_seed():
    first = _road_map([CENTRE_BLOCK], seed=11)
    second = _road_map([CENTRE_BLOCK], seed=11)
    first.construct(Vector2D(1, 1), Vector2D(9, 9))
    second.construct(Vector2D(1, 1), Vector2D(9, 9))
    assert [n.point for n in first.nodes] == [n.point for n in second.nodes]
    assert first.format_road_map() == second.format_road_map()


def test_format_road_map_lines():
    prm = _road_map([])
    prm.construct(Vector2D(1, 1), Vector2D(9, 9))
    lines = prm.format_road_map().split("\n")
    assert len(lines) == len(prm.nodes)
    for node, line in zip(prm.nodes, lines):
        expected = f"{node.id}| " + "".join(f"id: {e.id} " for e in node.edges)
        assert line == expected


def test_format_empty_road_map():
    prm = _road_map([])
    assert prm.format_road_map() == ""