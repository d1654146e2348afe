# motionplan

Planners for a point robot moving among convex polygonal obstacles in a
rectangular 2D world. The package has no dependencies beyond the Python
standard library.

Obstacles are lists of `Vector2D` vertices in counter-clockwise order. An
obstacle map is a list of such polygons.

## Modules

- `motionplan.geometry`: the immutable `Vector2D` (with `+`, `-`, scalar
  `*` and `norm()`), `almost_equal`, `euclidean_distance` and
  `polygon_edges`, which yields each edge of a closed polygon.
- `motionplan.utilities`: point-to-line distances.
  `min_dist_line_seg_pt` returns the distance and whether the foot of the
  perpendicular lies on the segment. `signed_distance_to_line` is positive
  on the left of the direction p1 -> p2. `sign_min_dist_to_line` returns a
  `ClosePoint` with the line parameter `t`, the signed distance `sign_d`,
  the projected point `p` and `on_seg`. A degenerate segment gives NaN
  values.
- `motionplan.potential_field`: `PotentialField`, which plans by gradient
  descent over an attractive goal field and repulsive obstacle fields.
  `descent_direction` combines two gradients into a unit vector and raises
  `ValueError` when they cancel. `obstacle_polygons` scales nested
  `[[x, y], ...]` lists into polygons.
- `motionplan.grid_map`: `GridMap`, a grid of square cells. `label_cells()`
  marks each `Cell` with a `CellState` (`FREE`, `OCCUPIED`, `INFLATION`,
  `UNKNOWN`). `world_to_grid` and `grid_to_world` convert between
  coordinates and raise `ValueError` outside the grid. `grid_viz()` and
  `occupancy_grid` give occupancy values (inflation 30, occupied 100,
  free 0, unknown -1), reordered with x along the rows.
- `motionplan.dstar_light`: `DStarLight`, a replanning grid planner. It
  starts by assuming every cell is free. While a simulated robot moves, it
  uncovers the true cell states within `vizd` cells of its position and
  repairs the path.
- `motionplan.road_map`: `RoadMap`, a probabilistic road map of random
  collision-free nodes, each joined to its nearest neighbours by
  collision-free edges. It also provides `segment_intersects_polygon`.
- `motionplan.prm_planner`: `PRMPlanner`, a Theta* search over a
  constructed road map.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Example: grid planning with D* Lite

```python
from motionplan.geometry import Vector2D
from motionplan.grid_map import GridMap
from motionplan.dstar_light import DStarLight

square = [Vector2D(2.0, 2.0), Vector2D(3.0, 2.0),
          Vector2D(3.0, 3.0), Vector2D(2.0, 3.0)]

grid = GridMap(0.0, 5.0, 0.0, 5.0, 0.25, 0.1, [square])
grid.label_cells()

planner = DStarLight(grid, 2)
planner.init_path(Vector2D(0.5, 0.5), Vector2D(4.5, 4.5))
planner.plan_path()
for _ in range(200):
    if planner.path_traversal():
        break

print(planner.full_path())
```

Each call to `path_traversal()` moves the robot one cell and returns `True`
once the goal has been reached. `full_path()` returns the cells travelled
so far, followed by the planned remainder. `visited_points()` returns the
cells examined during the last planning pass. `grid_viz()` returns the
planner's own view of the grid.

## Example: road map and Theta*

```python
import random

from motionplan.geometry import Vector2D
from motionplan.road_map import RoadMap
from motionplan.prm_planner import PRMPlanner

square = [Vector2D(2.0, 2.0), Vector2D(3.0, 2.0),
          Vector2D(3.0, 3.0), Vector2D(2.0, 3.0)]

prm = RoadMap(0.0, 5.0, 0.0, 5.0, 0.1, 6, 60, [square],
              rng=random.Random(0))
if prm.construct(Vector2D(0.5, 0.5), Vector2D(4.5, 4.5)):
    planner = PRMPlanner(prm)
    if planner.plan_path():
        print(planner.path())

print(prm.format_road_map())
```

`RoadMap` raises `ValueError` when the number of nodes does not exceed the
number of neighbours. `construct` raises `ValueError` for an invalid start
or goal. It returns `False` when the start or goal cannot be connected to
the graph.

After construction, the start node is second to last in `prm.nodes` and
the goal node is last. `PRMPlanner` searches its own copy of the nodes, so
the road map is left untouched.

## Example: potential field

```python
from motionplan.geometry import Vector2D
from motionplan.potential_field import PotentialField

square = [Vector2D(2.0, 2.0), Vector2D(3.0, 2.0),
          Vector2D(3.0, 3.0), Vector2D(2.0, 3.0)]

field = PotentialField([square], eps=0.1, step=0.01, dthresh=1.0,
                       qthresh=0.5, w_att=1.0, w_rep=0.1)
field.init_path(Vector2D(0.5, 4.5), Vector2D(4.5, 4.5))
for _ in range(10_000):
    if not field.plan_path():
        break

print(field.path[-1])
```

`plan_path` takes one descent step per call and returns `False` once the
position is within `eps` of the goal. The field can have local minima, so
bound the number of steps. The positions visited are kept in `field.path`.

## What the package does not do

The package is a library only. It installs no commands and publishes no
visualisation markers. It also does not read maps or parameters from files
or a parameter server. Build the obstacle polygons yourself, for example
with `obstacle_polygons`, and pass them to the planners.