"""Incremental shortest-path planning on a grid with simulated map updates.

The planner starts out assuming every cell is free. As the simulated robot
moves, cells within its visibility window are revealed from the fully
labelled reference grid and the affected costs are repaired before the path
is replanned.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from functools import cmp_to_key

from motionplan.geometry import Vector2D, almost_equal
from motionplan.grid_map import Cell, CellState, GridMap, occupancy_grid

logger = logging.getLogger(__name__)

_LARGE_COST = 1e12
_OCCUPIED_COST = 1000.0
_BLOCKED = (CellState.OCCUPIED, CellState.INFLATION)

# Moves to the eight neighbouring cells, in the order they are examined.
_ACTIONS = (
    (0, -1), (0, 1),
    (-1, 0), (1, 0),
    (-1, -1), (-1, 1),
    (1, -1), (1, 1),
)


def _compare_keys(a: Cell, b: Cell) -> int:
    def less(u: Cell, v: Cell) -> bool:
        if u.k1 < v.k1:
            return True
        return almost_equal(u.k1, v.k1) and u.k2 < v.k2

    if less(a, b):
        return -1
    if less(b, a):
        return 1
    return 0


_KEY_ORDER = cmp_to_key(_compare_keys)


class DStarLight:
    """Replanning grid planner that discovers obstacles as it travels."""

    def __init__(self, gridmap: GridMap, vizd: float) -> None:
        self.gridmap = gridmap
        self.vizd = int(vizd)
        # Fully labelled grid standing in for sensor measurements.
        self._ref_grid = gridmap.cells()
        # The planner's own belief about the grid: everything free at first.
        self._grid = gridmap.cells()
        for cell in self._grid:
            cell.state = CellState.FREE

        self.occu_cost = _OCCUPIED_COST
        self.start_id = 0
        self.goal_id = 0
        self.curr_id = 0
        self.goal_reached = False
        self.traversed: list[Vector2D] = []
        self.visited: list[int] = []
        self._open: list[Cell] = []

    def init_path(self, start: Vector2D, goal: Vector2D) -> None:
        """Set the start and goal positions and seed the open list."""
        gc = self.gridmap.world_to_grid(start.x, start.y)
        self.start_id = self.gridmap.grid_to_row_major(gc.i, gc.j)
        gc = self.gridmap.world_to_grid(goal.x, goal.y)
        self.goal_id = self.gridmap.grid_to_row_major(gc.i, gc.j)

        goal_cell = self._grid[self.goal_id]
        goal_cell.rhs = 0.0
        goal_cell.h = self._heuristic(self.start_id)
        goal_cell.calculate_keys()
        self._open.append(dataclasses.replace(goal_cell))

    def plan_path(self) -> None:
        """Repair cell costs until the start cell is consistent."""
        self.visited.clear()
        while self._planning():
            min_cell = self._open.pop(0)
            self.curr_id = min_cell.id
            cell = self._grid[min_cell.id]

            if min_cell.g > min_cell.rhs:
                cell.g = cell.rhs
                for nid in self._neighbors(min_cell):
                    self._update_cell(nid)
                    self.visited.append(nid)
            else:
                cell.g = _LARGE_COST
                for nid in self._neighbors(min_cell):
                    self._update_cell(nid)
                    self.visited.append(nid)
                self._update_cell(min_cell.id)
                self.visited.append(min_cell.id)

    def path_traversal(self) -> bool:
        """Move one cell along the path, sense, and replan if needed.

        Returns True once the goal has been reached.
        """
        if self.start_id == self.goal_id and not self.goal_reached:
            logger.info("Goal Reached")
            self.goal_reached = True
            return True

        self.start_id = self._min_neighbor(self.start_id, exclude_obstacles=True)
        self.traversed.append(self._grid[self.start_id].p)

        changed = self._simulate_grid_update()
        if changed:
            for cid in changed:
                for nid in self._neighbors(self._grid[cid]):
                    self._update_cell(nid)
            for cell in self._open:
                cell.h = self._heuristic(cell.id)
                cell.calculate_keys()
            self.plan_path()
        return self.goal_reached

    def full_path(self) -> list[Vector2D]:
        """Cells travelled so far followed by the planned remainder."""
        points = list(self.traversed)
        seen: set[int] = set()
        cell_id = self.start_id
        while cell_id != -1:
            if cell_id in seen:
                raise RuntimeError("planned path contains a cycle")
            seen.add(cell_id)
            cell = self._grid[cell_id]
            points.append(cell.p)
            cell_id = cell.parent_id
        return points

    def visited_points(self) -> list[Vector2D]:
        """Centres of the cells examined during the last planning pass."""
        return [self._grid[cell_id].p for cell_id in self.visited]

    def grid_viz(self) -> list[int]:
        """Occupancy values of the planner's grid in display order."""
        xsize, ysize = self.gridmap.size
        return occupancy_grid(self._grid, xsize, ysize)

    def _update_cell(self, cell_id: int) -> None:
        cell = self._grid[cell_id]
        if cell_id != self.goal_id:
            min_id = self._min_neighbor(cell_id, exclude_obstacles=False)
            cell.rhs = self._grid[min_id].g + self._edge_cost(cell_id, min_id)
            cell.parent_id = min_id

        for index, queued in enumerate(self._open):
            if queued.id == cell_id:
                del self._open[index]
                break

        if cell.rhs != cell.g:
            cell.h = self._heuristic(cell_id)
            cell.calculate_keys()
            self._open.append(dataclasses.replace(cell))

    def _planning(self) -> bool:
        start = self._grid[self.start_id]
        start.h = self._heuristic(self.start_id)
        start.calculate_keys()

        if not self._open:
            return False
        self._open.sort(key=_KEY_ORDER)
        head = self._open[0]

        inconsistent = start.rhs != start.g
        if almost_equal(head.k1, start.k1):
            return head.k2 < start.k2 or inconsistent
        return head.k1 < start.k1 or inconsistent

    def _simulate_grid_update(self) -> list[int]:
        centre = self._grid[self.start_id]
        xsize, ysize = self.gridmap.size
        i_min = max(centre.i - self.vizd, 0)
        i_max = min(centre.i + self.vizd, xsize - 1)
        j_min = max(centre.j - self.vizd, 0)
        j_max = min(centre.j + self.vizd, ysize - 1)

        changed = []
        for i in range(i_min, i_max + 1):
            for j in range(j_min, j_max + 1):
                cell_id = self.gridmap.grid_to_row_major(i, j)
                cell = self._grid[cell_id]
                if not cell.updated:
                    cell.updated = True
                    cell.state = self._ref_grid[cell_id].state
                    changed.append(cell_id)
        return changed

    def _neighbors(self, cell: Cell) -> list[int]:
        return [
            self.gridmap.grid_to_row_major(cell.i + di, cell.j + dj)
            for di, dj in _ACTIONS
            if self.gridmap.in_bounds(cell.i + di, cell.j + dj)
        ]

    def _min_neighbor(self, cell_id: int, exclude_obstacles: bool) -> int:
        candidates = [
            (nid, self._grid[nid].g + self._edge_cost(cell_id, nid))
            for nid in self._neighbors(self._grid[cell_id])
            if not (exclude_obstacles and self._grid[nid].state in _BLOCKED)
        ]
        if not candidates:
            raise RuntimeError(f"cell {cell_id} has no usable neighbour")
        return min(candidates, key=lambda pair: pair[1])[0]

    def _heuristic(self, cell_id: int) -> float:
        start = self._grid[self.start_id]
        cell = self._grid[cell_id]
        return math.hypot(cell.i - start.i, cell.j - start.j)

    def _edge_cost(self, id1: int, id2: int) -> float:
        a = self._grid[id1]
        b = self._grid[id2]
        if b.state in _BLOCKED:
            return self.occu_cost
        return math.hypot(a.i - b.i, a.j - b.j)