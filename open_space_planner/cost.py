"""Edge costs and heuristic for Hybrid A*."""

from __future__ import annotations

import math

from .config import PlannerConfig
from .heuristic import HolonomicHeuristicGrid
from .pose import Gear, Pose
from .reeds_shepp import ReedsSheppGenerator
from .search import SearchNode


class CostModel:
    """
    Assigns cost-to-come and heuristic estimates to search nodes.

    Edge costs never drop below the arc length driven. The holonomic term is
    a lower bound on that length. The Reeds-Shepp term is exact for true
    arcs but primitives are Euler integrated, so it can overshoot the driven
    length by a small margin. The heuristic is near-admissible, not strictly
    admissible.
    """

    def __init__(
        self,
        config: PlannerConfig,
        curve_generator: ReedsSheppGenerator,
        holonomic: HolonomicHeuristicGrid | None,
        goal: Pose
    ):
        self.config = config
        self.curve_generator = curve_generator
        self.holonomic = holonomic
        self.goal = goal

    def edge_cost(self, parent: SearchNode, child: SearchNode) -> float:
        """
        Cost of driving child's segment after arriving at parent.

        Combines the weighted arc length, a penalty for every change of
        gear (including the switch relative to the parent) and steering
        usage and steering change penalties.
        """
        cfg = self.config
        cost = 0.0

        for prev, pose, gear in zip(child.segment, child.segment[1:], child.gears[1:]):
            distance = prev.distance_to(pose)
            if gear is Gear.FORWARD:
                cost += cfg.traj_forward_penalty * distance
            else:
                cost += cfg.traj_back_penalty * distance

        # The start node has no direction of its own yet
        switches = 0
        if parent.parent is not None and child.gears[1:] and child.gears[1] is not parent.gear:
            switches += 1
        motion_gears = child.gears[1:]
        switches += sum(1 for a, b in zip(motion_gears, motion_gears[1:]) if a is not b)
        cost += cfg.traj_gear_switch_penalty * switches

        cost += cfg.traj_steer_penalty * abs(child.steering)
        cost += cfg.traj_steer_change_penalty * abs(child.steering - parent.steering)

        return cost

    def heuristic(self, node: SearchNode) -> float:
        """Max of the holonomic-with-obstacles and Reeds-Shepp estimates."""
        non_holonomic = self.curve_generator.path_length(node.pose, self.goal)
        if self.holonomic is None:
            return non_holonomic
        return max(self.holonomic.estimate(node.pose), non_holonomic)

    def assign(self, parent: SearchNode, child: SearchNode) -> SearchNode:
        """Fill in child's g and h from its parent."""
        child.cost_to_come = parent.cost_to_come + self.edge_cost(parent, child)
        child.heuristic_estimate = self.heuristic(child)
        return child

    def seed(self, node: SearchNode) -> SearchNode:
        """Costs for the start node."""
        node.cost_to_come = 0.0
        node.heuristic_estimate = self.heuristic(node)
        return node

    @staticmethod
    def is_finite(node: SearchNode) -> bool:
        return not math.isinf(node.priority)
