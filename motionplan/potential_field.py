"""Global planning in continuous space with attractive and repulsive fields."""

from __future__ import annotations

import logging
import math
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

logger = logging.getLogger(__name__)

_FAR = 1e12


def descent_direction(urep: Vector2D, uatt: Vector2D) -> Vector2D:
    """Unit vector along the combined repulsive and attractive gradient."""
    total = urep + uatt
    magnitude = total.norm()
    if magnitude == 0.0:
        raise ValueError("gradient vanishes; no descent direction")
    return total * (1.0 / magnitude)


class PotentialField:
    """Gradient-descent planner on a weighted sum of potential fields."""

    def __init__(
        self,
        obs_map: ObstacleMap,
        eps: float,
        step: float,
        dthresh: float,
        qthresh: float,
        w_att: float,
        w_rep: float,
    ) -> None:
        self.obs_map: list[list[Vector2D]] = [list(poly) for poly in obs_map]
        self.eps = eps
        self.step = step
        self.dthresh = dthresh
        self.qthresh = qthresh
        self.w_att = w_att
        self.w_rep = w_rep
        self.position = Vector2D()
        self.goal = Vector2D()
        self.path: list[Vector2D] = []
        self.goal_reached = False

    def init_path(self, start: Vector2D, goal: Vector2D) -> None:
        """Begin a new path at ``start`` heading for ``goal``."""
        logger.info("Start: %s", start)
        logger.info("Goal: %s", goal)
        self.position = start
        self.goal = goal
        self.path = [start]
        self.goal_reached = False

    def plan_path(self) -> bool:
        """Take one descent step; return False once the goal is reached."""
        if self._at_goal():
            return False
        direction = descent_direction(self._repulsive_total(), self._attractive())
        self.position = self.position - direction * self.step
        self.path.append(self.position)
        return True

    def _at_goal(self) -> bool:
        if self.goal_reached:
            return True
        if euclidean_distance(self.position, self.goal) < self.eps:
            logger.info("Goal Reached")
            self.goal_reached = True
        return self.goal_reached

    def _closest_point(self, poly: Polygon) -> tuple[Vector2D, float]:
        q = self.position
        closest = Vector2D()
        min_dist = _FAR
        for v1, v2 in polygon_edges(poly):
            clpt = sign_min_dist_to_line(v1, v2, q)
            if clpt.on_seg and abs(clpt.sign_d) < min_dist:
                closest, min_dist = clpt.p, abs(clpt.sign_d)
            elif clpt.t < 0.0:
                dist = euclidean_distance(v1, q)
                if dist < min_dist:
                    closest, min_dist = v1, dist
            else:
                dist = euclidean_distance(v2, q)
                if dist < min_dist:
                    closest, min_dist = v2, dist
        return closest, min_dist

    def _repulsive_total(self) -> Vector2D:
        total = Vector2D()
        for poly in self.obs_map:
            total = total + self._repulsive(*self._closest_point(poly))
        return total

    def _repulsive(self, q0: Vector2D, d: float) -> Vector2D:
        if not (d < self.qthresh or almost_equal(d, self.qthresh)):
            return Vector2D()
        unit = (q0 - self.position) * (1.0 / d)
        gap = self.qthresh - d
        scale = self.w_rep / gap if gap != 0.0 else math.inf
        return unit * scale

    def _attractive(self) -> Vector2D:
        dg = euclidean_distance(self.position, self.goal)
        gradient = (self.position - self.goal) * self.w_att
        if dg > self.dthresh:
            gradient = gradient * (self.dthresh / dg)
        return gradient


def obstacle_polygons(obstacles: Sequence[Sequence[Sequence[float]]], resolution: float) -> list[list[Vector2D]]:
    """Scale nested ``[[x, y], ...]`` obstacle lists into polygons of vectors."""
    return [
        [Vector2D(float(x) * resolution, float(y) * resolution) for x, y in poly]
        for poly in obstacles
    ]