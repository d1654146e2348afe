"""Planar vectors, polygons and the comparisons the planners share."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Sequence

DEFAULT_EPSILON = 1.0e-12


@dataclass(frozen=True)
class Vector2D:
    """An immutable two-dimensional vector or point."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector2D) -> Vector2D:
        if not isinstance(other, Vector2D):
            return NotImplemented
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2D) -> Vector2D:
        if not isinstance(other, Vector2D):
            return NotImplemented
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2D:
        if isinstance(scalar, Vector2D):
            return NotImplemented
        return Vector2D(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> Vector2D:
        return Vector2D(-self.x, -self.y)

    def norm(self) -> float:
        """Euclidean length of the vector."""
        return math.hypot(self.x, self.y)


Polygon = Sequence[Vector2D]
ObstacleMap = Sequence[Polygon]


def almost_equal(a: float, b: float, epsilon: float = DEFAULT_EPSILON) -> bool:
    """True when ``a`` and ``b`` differ by less than ``epsilon``."""
    return abs(a - b) < epsilon


def euclidean_distance(p: Vector2D, q: Vector2D) -> float:
    """Straight-line distance between two points."""
    return math.hypot(p.x - q.x, p.y - q.y)


def polygon_edges(poly: Polygon) -> Iterator[tuple[Vector2D, Vector2D]]:
    """Yield each edge of a closed polygon, the last vertex joining the first."""
    count = len(poly)
    for index, vertex in enumerate(poly):
        yield vertex, poly[(index + 1) % count]