"""Distances between points and line segments."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from motionplan.geometry import Vector2D, almost_equal, euclidean_distance

_NAN = math.nan


@dataclass
class ClosePoint:
    """Where a point projects onto the line through a segment.

    ``t`` parameterises the line (0 at the first bound, 1 at the second),
    ``sign_d`` is positive on the left of the direction p1 -> p2, ``p`` is the
    projected point and ``on_seg`` tells whether it lies on the segment.
    """

    t: float = 0.0
    sign_d: float = 0.0
    p: Vector2D = field(default_factory=Vector2D)
    on_seg: bool = False


def _within_unit(t: float) -> bool:
    return (0.0 < t < 1.0) or almost_equal(t, 0.0) or almost_equal(t, 1.0)


def min_dist_line_seg_pt(p1: Vector2D, p2: Vector2D, p3: Vector2D) -> tuple[float, bool]:
    """Distance from ``p3`` to the line through ``p1`` and ``p2``.

    Returns the distance and whether the closest point lies on the segment.
    A degenerate segment yields a NaN distance and ``False``.
    """
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    denom = dx * dx + dy * dy
    if denom == 0.0:
        return _NAN, False

    u = ((p3.x - p1.x) * dx + (p3.y - p1.y) * dy) / denom
    foot = Vector2D(p1.x + u * dx, p1.y + u * dy)
    return euclidean_distance(foot, p3), _within_unit(u)


def signed_distance_to_line(p1: Vector2D, p2: Vector2D, p3: Vector2D) -> float:
    """Signed distance from ``p3`` to the line p1 -> p2, positive on the left."""
    vx = p2.x - p1.x
    vy = p2.y - p1.y
    unorm = math.hypot(vx, vy)
    if unorm == 0.0:
        return _NAN
    nx, ny = -vy / unorm, vx / unorm
    return (p3.x - p1.x) * nx + (p3.y - p1.y) * ny


def sign_min_dist_to_line(p1: Vector2D, p2: Vector2D, p3: Vector2D) -> ClosePoint:
    """Project ``p3`` onto the line p1 -> p2 and describe the result."""
    vx = p2.x - p1.x
    vy = p2.y - p1.y
    denom = vx * vx + vy * vy
    if denom == 0.0:
        return ClosePoint(_NAN, _NAN, Vector2D(_NAN, _NAN), False)

    t = ((p3.x - p1.x) * vx + (p3.y - p1.y) * vy) / denom
    return ClosePoint(
        t=t,
        sign_d=signed_distance_to_line(p1, p2, p3),
        p=Vector2D(p1.x + t * vx, p1.y + t * vy),
        on_seg=_within_unit(t),
    )