"""Probabilistic road maps: random collision-free samples joined to their
nearest neighbours by straight, collision-free edges."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from motionplan.geometry import (
    ObstacleMap,
    Polygon,
    Vector2D,
    almost_equal,
    euclidean_distance,
    polygon_edges,
)
from motionplan.utilities import min_dist_line_seg_pt, sign_min_dist_to_line

logger = logging.getLogger(__name__)


@dataclass
class Edge:
    """Edge to the node ``id``, of length ``d``."""

    id: int = -1
    d: float = 0.0


@dataclass
class Node:
    """A node of the road map with its adjacency and planning costs."""

    id: int = -1
    point: Vector2D = field(default_factory=Vector2D)
    edges: list[Edge] = field(default_factory=list)
    id_set: set[int] = field(default_factory=set)
    parent_id: int = -1
    f: float = 0.0
    g: float = 0.0

    def edge_exists(self, node_id: int) -> bool:
        """True when this node already has an edge to ``node_id``."""
        return node_id in self.id_set


def segment_intersects_polygon(poly: Polygon, p1: Vector2D, p2: Vector2D) -> bool:
    """True when the segment p1 -> p2 meets the convex, counter-clockwise ``poly``."""
    t_enter = 0.0
    t_leave = 1.0
    ds = p2 - p1

    for v1, v2 in polygon_edges(poly):
        e = v2 - v1
        outward = Vector2D(e.y, -e.x)
        pv = p1 - v1
        numerator = -(pv.x * outward.x + pv.y * outward.y)
        denominator = ds.x * outward.x + ds.y * outward.y

        if almost_equal(denominator, 0.0):
            # Parallel to this edge: outside it means outside the polygon.
            if numerator < 0.0:
                return False
            continue

        t = numerator / denominator
        if denominator < 0.0:
            if t > t_enter:
                t_enter = t
                if t_enter > t_leave:
                    return False
        elif t < t_leave:
            t_leave = t
            if t_leave < t_enter:
                return False

    return True


class RoadMap:
    """A graph of collision-free configurations in a rectangular world.

    After :meth:`construct` the start node is second to last in ``nodes``
    and the goal node is last.
    """

    def __init__(
        self,
        xmin: float,
        xmax: float,
        ymin: float,
        ymax: float,
        bnd_rad: float,
        neighbors: int,
        num_nodes: int,
        obs_map: ObstacleMap,
        rng: random.Random | None = None,
    ) -> None:
        if num_nodes <= neighbors:
            raise ValueError("number of nodes in road map must exceed nearest neighbors")
        self.xmin = xmin
        self.xmax = xmax
        self.ymin = ymin
        self.ymax = ymax
        self.bnd_rad = bnd_rad
        self.k = neighbors
        self.n = num_nodes
        self.obs_map: list[list[Vector2D]] = [list(poly) for poly in obs_map]
        self.rng = rng if rng is not None else random.Random()
        self.nodes: list[Node] = []

    def construct(self, start: Vector2D, goal: Vector2D) -> bool:
        """Build the road map and join ``start`` and ``goal`` to it.

        Raises ValueError for an invalid start or goal. Returns False when
        the start or goal could not be connected to the graph.
        """
        self.nodes = []

        if not self._is_free_space(start) and not self._collide_walls(start):
            raise ValueError("starting position not valid")
        if not self._is_free_space(goal) and not self._collide_walls(goal):
            raise ValueError("goal position not valid")

        while len(self.nodes) < self.n:
            q = self._random_point()
            if not self._collide_walls(q) and self._is_free_space(q):
                self._add_node(q)

        for node in self.nodes:
            for neighbor_id in self._nearest_neighbors(node):
                if self.straight_line_free(node.point, self.nodes[neighbor_id].point):
                    self._add_edge(node.id, neighbor_id)

        connected = self._add_start_goal(start, goal)
        if not connected:
            logger.error("Disconnected graph")
        return connected

    def format_road_map(self) -> str:
        """One line per node: its ID followed by the IDs it connects to."""
        lines = []
        for node in self.nodes:
            targets = "".join(f"id: {edge.id} " for edge in node.edges)
            lines.append(f"{node.id}| {targets}")
        return "\n".join(lines)

    def straight_line_free(self, p1: Vector2D, p2: Vector2D) -> bool:
        """True when the segment p1 -> p2 stays clear of every obstacle."""
        return not any(
            segment_intersects_polygon(poly, p1, p2)
            or self._segment_close_to_polygon(poly, p1, p2)
            for poly in self.obs_map
        )

    def _add_start_goal(self, start: Vector2D, goal: Vector2D) -> bool:
        start_id = self._add_node(start)
        goal_id = self._add_node(goal)

        for node_id, label in ((start_id, "start"), (goal_id, "goal")):
            node = self.nodes[node_id]
            for neighbor_id in self._nearest_neighbors(node):
                if self.straight_line_free(node.point, self.nodes[neighbor_id].point):
                    self._add_edge(node_id, neighbor_id)
            if not node.edges:
                logger.error("%s node not connected to road map", label)
                return False
        return True

    def _nearest_neighbors(self, query: Node) -> list[int]:
        # Equal distances map to the first node found at that distance.
        by_distance: dict[float, int] = {}
        distances = []
        for node in self.nodes:
            if node.id == query.id:
                continue
            d = euclidean_distance(node.point, query.point)
            distances.append(d)
            by_distance.setdefault(d, node.id)
        distances.sort()
        return [by_distance[d] for d in distances[: self.k]]

    def _collide_walls(self, q: Vector2D) -> bool:
        corners = [
            Vector2D(self.xmin, self.ymin),
            Vector2D(self.xmax, self.ymin),
            Vector2D(self.xmax, self.ymax),
            Vector2D(self.xmin, self.ymax),
        ]
        for v1, v2 in polygon_edges(corners):
            dist, on_seg = min_dist_line_seg_pt(v1, v2, q)
            if on_seg and dist < self.bnd_rad:
                return True
        return False

    def _is_free_space(self, q: Vector2D) -> bool:
        return not any(self._point_inside_polygon(poly, q) for poly in self.obs_map)

    def _point_inside_polygon(self, poly: Polygon, q: Vector2D) -> bool:
        for v1, v2 in polygon_edges(poly):
            clpt = sign_min_dist_to_line(v1, v2, q)
            if not (clpt.sign_d < 0.0 and not almost_equal(clpt.sign_d, 0.0)):
                continue
            if clpt.on_seg:
                return abs(clpt.sign_d) <= self.bnd_rad
            if clpt.t < 0.0:
                return euclidean_distance(v1, q) <= self.bnd_rad
            if clpt.t > 1.0:
                return euclidean_distance(v2, q) <= self.bnd_rad
        return True

    def _segment_close_to_polygon(self, poly: Polygon, p1: Vector2D, p2: Vector2D) -> bool:
        for vertex in poly:
            clpt = sign_min_dist_to_line(p1, p2, vertex)
            if clpt.on_seg and abs(clpt.sign_d) < self.bnd_rad:
                return True
        return False

    def _add_node(self, q: Vector2D) -> int:
        node = Node(id=len(self.nodes), point=q)
        self.nodes.append(node)
        return node.id

    def _add_edge(self, id1: int, id2: int) -> None:
        if id1 == id2:
            return
        a = self.nodes[id1]
        b = self.nodes[id2]
        d = euclidean_distance(a.point, b.point)
        if not a.edge_exists(id2):
            a.edges.append(Edge(id=id2, d=d))
            a.id_set.add(id2)
        if not b.edge_exists(id1):
            b.edges.append(Edge(id=id1, d=d))
            b.id_set.add(id1)

    def _random_point(self) -> Vector2D:
        return Vector2D(
            self.rng.uniform(self.xmin, self.xmax),
            self.rng.uniform(self.ymin, self.ymax),
        )