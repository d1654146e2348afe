"""A two-dimensional grid over the planning space, with cells labelled as
free, occupied or inside the inflation zone around obstacles and walls."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Sequence

from motionplan.geometry import (
    ObstacleMap,
    Polygon,
    Vector2D,
    almost_equal,
    euclidean_distance,
    polygon_edges,
)
from motionplan.utilities import sign_min_dist_to_line

_LARGE_COST = 1e12


class CellState(IntEnum):
    """Occupancy label of a grid cell."""

    UNKNOWN = -1
    FREE = 0
    OCCUPIED = 1
    INFLATION = 2


_VIZ_VALUES = {
    CellState.INFLATION: 30,
    CellState.OCCUPIED: 100,
    CellState.FREE: 0,
}


@dataclass(frozen=True)
class GridCoordinates:
    """Row and column of a cell in the grid."""

    i: int = -1
    j: int = -1

    def __str__(self) -> str:
        return f"Grid Coordinates: [{self.i} {self.j}]"


@dataclass
class Cell:
    """A grid cell together with the bookkeeping used by incremental planners."""

    state: CellState = CellState.UNKNOWN
    i: int = -1
    j: int = -1
    id: int = -1
    updated: bool = False
    parent_id: int = -1
    p: Vector2D = field(default_factory=Vector2D)
    g: float = _LARGE_COST
    rhs: float = _LARGE_COST
    h: float = 0.0
    k1: float = 0.0
    k2: float = 0.0

    def calculate_keys(self) -> None:
        """Set the priority keys from the current costs and heuristic."""
        best = min(self.g, self.rhs)
        self.k1 = best + self.h
        self.k2 = best

    def locally_consistent(self) -> bool:
        """True when ``g`` equals ``rhs``."""
        return almost_equal(self.g, self.rhs)


def _round_half_away(value: float) -> int:
    magnitude = math.floor(abs(value) + 0.5)
    return int(magnitude if value >= 0 else -magnitude)


def grid_size(lower: float, upper: float, resolution: float) -> int:
    """Number of cells spanning ``lower`` to ``upper`` at ``resolution``."""
    return _round_half_away((upper - lower) / resolution)


def bounding_radius(inflation: float, resolution: float) -> float:
    """Distance within which a cell centre counts as near an obstacle."""
    return inflation + 0.5 * math.sqrt(resolution * resolution)


def occupancy_grid(cells: Sequence[Cell], xsize: int, ysize: int) -> list[int]:
    """Occupancy values of ``cells`` reordered with x along the rows.

    Inflation cells map to 30, occupied to 100, free to 0 and unknown to -1.
    """
    values = [0] * len(cells)
    for index, cell in enumerate(cells):
        row, col = divmod(index, ysize)
        values[col * xsize + row] = _VIZ_VALUES.get(cell.state, -1)
    return values


class GridMap:
    """A grid of square cells covering a rectangular world with obstacles."""

    def __init__(
        self,
        xmin: float,
        xmax: float,
        ymin: float,
        ymax: float,
        resolution: float,
        inflation: float,
        obs_map: ObstacleMap,
    ) -> None:
        self.xmin = xmin
        self.xmax = xmax
        self.ymin = ymin
        self.ymax = ymax
        self.resolution = resolution
        self.bnd_rad = bounding_radius(inflation, resolution)
        self.xsize = grid_size(xmin, xmax, resolution)
        self.ysize = grid_size(ymin, ymax, resolution)
        self._grid = [Cell() for _ in range(max(self.xsize * self.ysize, 0))]
        # Snap every obstacle vertex to the centre of the cell that holds it.
        self.obs_map: list[list[Vector2D]] = [
            [self._snap(vertex) for vertex in poly] for poly in obs_map
        ]

    @property
    def size(self) -> tuple[int, int]:
        """Number of cells along x and along y."""
        return self.xsize, self.ysize

    def _snap(self, vertex: Vector2D) -> Vector2D:
        gc = self.world_to_grid(vertex.x, vertex.y)
        return self.grid_to_world(gc.i, gc.j)

    def grid_viz(self) -> list[int]:
        """Occupancy values of the grid in display order."""
        return occupancy_grid(self._grid, self.xsize, self.ysize)

    def cells(self) -> list[Cell]:
        """Independent copies of every cell, indexed by cell ID."""
        return [dataclasses.replace(cell) for cell in self._grid]

    def label_cells(self) -> None:
        """Place every cell in the world and determine its occupancy."""
        walls = self._wall_corners()
        for index, cell in enumerate(self._grid):
            row, col = divmod(index, self.ysize)
            cell.i = row
            cell.j = col
            cell.id = self.grid_to_row_major(row, col)
            cell.p = self.grid_to_world(row, col)

            self._collide_walls(walls, cell)
            for poly in self.obs_map:
                self._collision_cell(poly, cell)

            if cell.state == CellState.UNKNOWN:
                cell.state = CellState.FREE

    def in_bounds(self, i: int, j: int) -> bool:
        """True when row ``i`` and column ``j`` lie inside the grid."""
        return 0 <= i <= self.xsize - 1 and 0 <= j <= self.ysize - 1

    def grid_to_world(self, i: int, j: int) -> Vector2D:
        """World coordinates of the centre of cell (``i``, ``j``)."""
        if not 0 <= i <= self.xsize - 1:
            raise ValueError(f"row {i} out of grid bounds")
        if not 0 <= j <= self.ysize - 1:
            raise ValueError(f"column {j} out of grid bounds")
        half = self.resolution / 2.0
        return Vector2D(
            i * self.resolution + half + self.xmin,
            j * self.resolution + half + self.ymin,
        )

    def world_to_grid(self, x: float, y: float) -> GridCoordinates:
        """Cell containing the world point (``x``, ``y``)."""
        if not self.xmin <= x <= self.xmax:
            raise ValueError("x position not within the bounds of the world")
        if not self.ymin <= y <= self.ymax:
            raise ValueError("y position not within the bounds of the world")

        i = math.floor((x - self.xmin) / self.resolution)
        if i == self.xsize:
            i -= 1
        j = math.floor((y - self.ymin) / self.resolution)
        if j == self.ysize:
            j -= 1
        return GridCoordinates(int(i), int(j))

    def grid_to_row_major(self, i: int, j: int) -> int:
        """Cell ID of row ``i`` and column ``j``."""
        return i * self.ysize + j

    def _wall_corners(self) -> list[Vector2D]:
        gc_min = self.world_to_grid(self.xmin, self.ymin)
        low = self.grid_to_world(gc_min.i, gc_min.j)
        gc_max = self.world_to_grid(self.xmax, self.ymax)
        high = self.grid_to_world(gc_max.i, gc_max.j)
        return [low, Vector2D(high.x, low.y), high, Vector2D(low.x, high.y)]

    def _collide_walls(self, walls: Polygon, cell: Cell) -> None:
        for v1, v2 in polygon_edges(walls):
            clpt = sign_min_dist_to_line(v1, v2, cell.p)
            if almost_equal(clpt.sign_d, 0.0) and clpt.on_seg:
                cell.state = CellState.OCCUPIED
            elif abs(clpt.sign_d) < self.bnd_rad and cell.state != CellState.OCCUPIED:
                cell.state = CellState.INFLATION

    def _inflate(self, cell: Cell) -> None:
        if cell.state != CellState.OCCUPIED:
            cell.state = CellState.INFLATION

    def _near_vertex(self, vertex: Vector2D, cell: Cell) -> None:
        if euclidean_distance(vertex, cell.p) <= self.bnd_rad:
            self._inflate(cell)

    def _collision_cell(self, poly: Polygon, cell: Cell) -> None:
        inside = True
        for v1, v2 in polygon_edges(poly):
            clpt = sign_min_dist_to_line(v1, v2, cell.p)
            on_line = almost_equal(clpt.sign_d, 0.0)

            if on_line and clpt.on_seg:
                cell.state = CellState.OCCUPIED
                inside = False
            elif on_line or (clpt.sign_d < 0.0 and not clpt.on_seg):
                if clpt.t < 0.0:
                    self._near_vertex(v1, cell)
                    inside = False
                elif clpt.t > 0.0:
                    self._near_vertex(v2, cell)
                    inside = False
            elif clpt.sign_d < 0.0:
                if abs(clpt.sign_d) <= self.bnd_rad:
                    self._inflate(cell)
                inside = False

        if inside:
            cell.state = CellState.OCCUPIED