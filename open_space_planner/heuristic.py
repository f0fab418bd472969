"""Holonomic-with-obstacles heuristic on a coarse occupancy grid."""

from __future__ import annotations

import math
from typing import Iterable, List, Tuple

import numpy as np
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import dijkstra

from .geometry import Box2d
from .pose import Pose

# Worst-case ratio of 8-connected grid distance to Euclidean distance
OCTILE_OVERESTIMATE = math.sqrt(4 - 2 * math.sqrt(2))


class HolonomicHeuristicGrid:
    """
    Cost-to-goal for a point robot that ignores kinematics but not obstacles.

    Cells completely covered by an obstacle are blocked; the distance from
    every free cell to the goal cell is computed once with Dijkstra over
    the 8-connected grid. Queries are shrunk by the worst-case octile
    overestimate and by one cell diagonal so that they stay below the true
    driving distance of the rear axle.
    """

    def __init__(
        self,
        obstacles: Iterable[Box2d],
        goal: Pose,
        resolution: float,
        bounds: Tuple[float, float, float, float]
    ):
        self.obstacles: List[Box2d] = list(obstacles)
        self.goal = goal
        self.resolution = resolution
        self.x_min, self.x_max, self.y_min, self.y_max = bounds

        self.x_cells = max(1, math.ceil((self.x_max - self.x_min) / resolution))
        self.y_cells = max(1, math.ceil((self.y_max - self.y_min) / resolution))

        # Binary occupancy grid (True = fully covered by an obstacle)
        self.blocked = self._rasterize()
        self.distance_map = self._compute_distances()

    @classmethod
    def around(
        cls,
        obstacles: Iterable[Box2d],
        start: Pose,
        goal: Pose,
        resolution: float,
        padding: float
    ) -> HolonomicHeuristicGrid:
        """Grid spanning start, goal and all obstacles plus a margin."""
        obstacles = list(obstacles)
        xs = [start.x, goal.x]
        ys = [start.y, goal.y]
        for obstacle in obstacles:
            x_min, x_max, y_min, y_max = obstacle.bounds()
            xs.extend((x_min, x_max))
            ys.extend((y_min, y_max))

        bounds = (min(xs) - padding, max(xs) + padding,
                  min(ys) - padding, max(ys) + padding)
        return cls(obstacles, goal, resolution, bounds)

    def world_to_grid(self, x: float, y: float) -> Tuple[int, int]:
        """Convert world coordinates to grid indices."""
        gx = math.floor((x - self.x_min) / self.resolution)
        gy = math.floor((y - self.y_min) / self.resolution)
        return gx, gy

    def in_bounds(self, x: float, y: float) -> bool:
        """Check if world position falls on the grid."""
        gx, gy = self.world_to_grid(x, y)
        return 0 <= gx < self.x_cells and 0 <= gy < self.y_cells

    def estimate(self, pose: Pose) -> float:
        """Lower bound on the remaining travel distance from pose to the goal."""
        euclidean = pose.distance_to(self.goal)
        if self.distance_map is None or not self.in_bounds(pose.x, pose.y):
            return euclidean

        gx, gy = self.world_to_grid(pose.x, pose.y)
        grid_distance = self.distance_map[gy, gx]
        if math.isinf(grid_distance):
            return math.inf

        relaxed = grid_distance / OCTILE_OVERESTIMATE - math.sqrt(2) * self.resolution
        return max(euclidean, relaxed)

    def _rasterize(self) -> np.ndarray:
        """Mark cells whose four corners all lie in the same (convex) obstacle."""
        blocked = np.zeros((self.y_cells, self.x_cells), dtype=bool)
        if not self.obstacles:
            return blocked

        xs = self.x_min + np.arange(self.x_cells + 1) * self.resolution
        ys = self.y_min + np.arange(self.y_cells + 1) * self.resolution
        gx, gy = np.meshgrid(xs, ys)
        corners = np.column_stack([gx.ravel(), gy.ravel()])

        for obstacle in self.obstacles:
            inside = obstacle.contains_points(corners).reshape(self.y_cells + 1, self.x_cells + 1)
            blocked |= inside[:-1, :-1] & inside[1:, :-1] & inside[:-1, 1:] & inside[1:, 1:]

        return blocked

    def _compute_distances(self) -> np.ndarray | None:
        """Dijkstra distances (m) from the goal cell; inf where unreachable."""
        if not self.in_bounds(self.goal.x, self.goal.y):
            return None

        goal_x, goal_y = self.world_to_grid(self.goal.x, self.goal.y)
        if self.blocked[goal_y, goal_x]:
            return None

        free = ~self.blocked
        ids = np.arange(self.y_cells * self.x_cells).reshape(self.y_cells, self.x_cells)

        rows, cols, weights = [], [], []
        diagonal = math.sqrt(2) * self.resolution
        for dx, dy, cost in ((1, 0, self.resolution), (0, 1, self.resolution),
                             (1, 1, diagonal), (1, -1, diagonal)):
            src, dst = _shifted_pairs(ids, free, dx, dy)
            rows.append(src)
            cols.append(dst)
            weights.append(np.full(src.shape, cost))

        n = self.y_cells * self.x_cells
        graph = coo_matrix(
            (np.concatenate(weights), (np.concatenate(rows), np.concatenate(cols))),
            shape=(n, n)
        ).tocsr()

        distances = dijkstra(graph, directed=False, indices=int(ids[goal_y, goal_x]))
        return distances.reshape(self.y_cells, self.x_cells)


def _shifted_pairs(
    ids: np.ndarray,
    free: np.ndarray,
    dx: int,
    dy: int
) -> Tuple[np.ndarray, np.ndarray]:
    """Ids of free cells and their free neighbour at offset (dx, dy)."""
    h, w = ids.shape
    src_rows = slice(max(0, -dy), h - max(0, dy))
    dst_rows = slice(max(0, dy), h - max(0, -dy))
    src_cols = slice(0, w - dx)
    dst_cols = slice(dx, w)

    both_free = free[src_rows, src_cols] & free[dst_rows, dst_cols]
    return ids[src_rows, src_cols][both_free], ids[dst_rows, dst_cols][both_free]
