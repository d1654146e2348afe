"""Any-angle shortest paths over a probabilistic road map."""

from __future__ import annotations

import copy
import logging

from motionplan.geometry import Vector2D, euclidean_distance
from motionplan.road_map import Edge, Node, RoadMap

logger = logging.getLogger(__name__)


class PRMPlanner:
    """Theta* search from the start node to the goal node of a road map.

    The road map must already be constructed: its second to last node is the
    start and its last node is the goal. The planner works on its own copy of
    the nodes, so the road map itself is left untouched.
    """

    def __init__(self, prm: RoadMap) -> None:
        if len(prm.nodes) < 2:
            raise ValueError("road map must hold at least the start and goal nodes")
        self.prm = prm
        self.roadmap: list[Node] = copy.deepcopy(prm.nodes)
        self.start_id = self.roadmap[-2].id
        self.goal_id = self.roadmap[-1].id
        self.curr_id = self.start_id

        start = self.roadmap[self.start_id]
        start.f = 0.0
        start.g = 0.0

        # Insertion-ordered set of node IDs awaiting expansion.
        self._open: dict[int, None] = {self.start_id: None}
        self._closed: set[int] = set()

    def plan_path(self) -> bool:
        """Search for a path; return True when the goal is reached."""
        while self._open:
            min_id = min(self._open, key=lambda node_id: self.roadmap[node_id].f)
            del self._open[min_id]
            self.curr_id = min_id

            if min_id == self.goal_id:
                logger.info("Goal reached!")
                return True

            self._closed.add(min_id)
            self._explore_neighbors()
        return False

    def path(self) -> list[Vector2D]:
        """Points from the start to the last node expanded by the search."""
        points: list[Vector2D] = []
        seen: set[int] = set()
        node_id = self.curr_id
        while node_id != -1:
            if node_id in seen:
                raise RuntimeError("path contains a cycle")
            seen.add(node_id)
            node = self.roadmap[node_id]
            points.append(node.point)
            node_id = node.parent_id
        points.reverse()
        return points

    def _explore_neighbors(self) -> None:
        for edge in list(self.roadmap[self.curr_id].edges):
            if edge.id in self._closed:
                continue
            self._update_node(edge)

    def _update_node(self, edge: Edge) -> None:
        current = self.roadmap[self.curr_id]
        candidate = copy.deepcopy(self.roadmap[edge.id])
        candidate.g = current.g + edge.d
        candidate.f = candidate.g + self._heuristic(edge.id)
        candidate.parent_id = self.curr_id

        parent_id = current.parent_id
        at_start = parent_id == -1
        if at_start:
            parent_id = self.curr_id

        neighbor_point = self.roadmap[edge.id].point
        parent = self.roadmap[parent_id]

        if self.prm.straight_line_free(parent.point, neighbor_point):
            through_parent = parent.g + euclidean_distance(parent.point, neighbor_point)
            if through_parent < candidate.g or at_start:
                candidate.g = through_parent
                candidate.f = through_parent + self._heuristic(edge.id)
                candidate.parent_id = parent_id
                self._store(candidate)
        elif edge.id in self._open:
            if candidate.g < self.roadmap[edge.id].g:
                self._store(candidate)
        else:
            self._store(candidate)

    def _store(self, node: Node) -> None:
        self.roadmap[node.id] = node
        self._open.setdefault(node.id, None)

    def _heuristic(self, node_id: int) -> float:
        return euclidean_distance(self.roadmap[node_id].point, self.roadmap[self.goal_id].point)