"""Analytic expansion: direct Reeds-Shepp connection to the goal."""

from __future__ import annotations

import logging

from .collision import CollisionChecker
from .config import PlannerConfig
from .reeds_shepp import ReedsSheppGenerator
from .search import SearchNode

logger = logging.getLogger(__name__)


class AnalyticShortcut:
    """
    Try to connect a node straight to the goal with a Reeds-Shepp curve.

    This is the "analytic expansion": instead of searching cell by cell all
    the way to the goal, draw the shortest curve the vehicle could drive
    and accept it if every sampled pose is collision-free.
    """

    def __init__(
        self,
        curve_generator: ReedsSheppGenerator,
        checker: CollisionChecker,
        config: PlannerConfig
    ):
        self.curve_generator = curve_generator
        self.checker = checker
        self.config = config
        self.attempts = 0
        self.failures = 0

    def try_shortcut(self, node: SearchNode, goal: SearchNode) -> SearchNode | None:
        """
        Build the terminal node for a collision-free curve from node to goal.

        Returns:
            Uncosted terminal node whose parent is node, or None if no curve
            exists or the curve collides
        """
        self.attempts += 1

        path = self.curve_generator.shortest_curve(node.pose, goal.pose)
        if path is None:
            self.failures += 1
            logger.debug("No Reeds-Shepp curve from %s", node.pose)
            return None

        poses, gears = path.sample(step_size=self.config.shortcut_step_size)
        if not self.checker.is_segment_valid(poses):
            self.failures += 1
            logger.debug("Reeds-Shepp %s from %s collides", path.word, node.pose)
            return None

        return SearchNode.create(
            poses,
            gears,
            self.config.xy_grid_resolution,
            self.config.heading_resolution,
            parent=node.handle
        )
