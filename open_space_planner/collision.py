"""Footprint-vs-obstacle validity checks."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .geometry import Box2d
from .pose import Pose
from .vehicle import Vehicle


class CollisionChecker:
    """
    Tests the vehicle footprint against a fixed set of obstacle boxes.

    The obstacle list is captured once per search and must not change
    while the search runs.
    """

    def __init__(
        self,
        vehicle: Vehicle,
        obstacles: Iterable[Box2d],
        xy_bounds: Tuple[float, float, float, float] | None = None
    ):
        self.vehicle = vehicle
        self.obstacles: List[Box2d] = list(obstacles)
        self.xy_bounds = xy_bounds

    def is_valid(self, pose: Pose) -> bool:
        """True if the footprint at pose is inside bounds and overlaps no obstacle."""
        footprint = self.vehicle.footprint(pose)

        if self.xy_bounds is not None and not self._within_bounds(footprint):
            return False

        for obstacle in self.obstacles:
            if footprint.has_overlap(obstacle):
                return False
        return True

    def is_segment_valid(self, segment: Sequence[Pose]) -> bool:
        """
        Check every sampled pose of a segment.

        Only the sampled poses are tested, so the sampling step must be
        small relative to the thinnest obstacle.
        """
        return all(self.is_valid(pose) for pose in segment)

    def _within_bounds(self, footprint: Box2d) -> bool:
        x_min, x_max, y_min, y_max = self.xy_bounds
        fx_min, fx_max, fy_min, fy_max = footprint.bounds()
        return (fx_min >= x_min and fx_max <= x_max and
                fy_min >= y_min and fy_max <= y_max)
