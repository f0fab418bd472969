"""Hybrid A* path planning algorithm for open-space maneuvers."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List

from .collision import CollisionChecker
from .config import PlannerConfig
from .cost import CostModel
from .geometry import Box2d
from .heuristic import HolonomicHeuristicGrid
from .pose import Pose, TrajectoryPoint
from .primitives import MotionPrimitiveExpander
from .reeds_shepp import ReedsSheppGenerator
from .search import ClosedSet, EmptyFrontierError, NodeArena, SearchFrontier, SearchNode
from .shortcut import AnalyticShortcut
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


class SearchState(Enum):
    """Lifecycle of one plan() call."""

    SEEDED = "seeded"
    SEARCHING = "searching"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


class FailureReason(Enum):
    """Why a search ended in EXHAUSTED."""

    INVALID_POSE = "start or goal pose is not finite"
    START_IN_COLLISION = "start pose is in collision"
    GOAL_IN_COLLISION = "goal pose is in collision"
    OPEN_SET_EMPTY = "open set is empty"
    ITERATION_BUDGET = "iteration budget exceeded"
    TIME_BUDGET = "time budget exceeded"


@dataclass
class PlanResult:
    """Outcome of a planning request."""

    status: SearchState
    trajectory: List[TrajectoryPoint] = field(default_factory=list)
    reason: FailureReason | None = None
    cost: float = math.inf  # Cost-to-come of the terminal node
    iterations: int = 0  # Nodes popped from the open set
    expanded_nodes: int = 0  # Nodes expanded with motion primitives
    shortcut_attempts: int = 0
    shortcut_failures: int = 0
    planning_time: float = 0.0  # Wall-clock time (s)

    @property
    def success(self) -> bool:
        return self.status is SearchState.SUCCEEDED

    @property
    def poses(self) -> List[Pose]:
        return [point.pose for point in self.trajectory]

    def __str__(self) -> str:
        if not self.success:
            return f"Hybrid A*: FAILED ({self.reason.value}) after {self.iterations} iterations"
        return (f"Hybrid A*: {len(self.trajectory)} points, cost={self.cost:.2f}, "
                f"iterations={self.iterations}, time={self.planning_time*1000:.1f}ms")


class HybridAStar:
    """
    Hybrid A* path planner for car-like vehicles in open space.

    Combines grid-based A* search with continuous state tracking: nodes are
    bucketed by grid cell for open/closed bookkeeping but keep the exact
    pose reached by integrating the vehicle model, so the final trajectory
    is drivable. Every popped node first tries a direct Reeds-Shepp
    connection to the goal.
    """

    def __init__(
        self,
        vehicle: Vehicle | None = None,
        config: PlannerConfig | None = None
    ):
        self.vehicle = vehicle or Vehicle()
        self.config = config or PlannerConfig()
        self.config.validate()

        self.expander = MotionPrimitiveExpander(self.vehicle, self.config)
        self.min_turn_radius = self.vehicle.min_turn_radius(self.config.max_steering)
        self.curve_generator = ReedsSheppGenerator(
            self.min_turn_radius,
            step_size=self.config.shortcut_step_size
        )
        self.state = SearchState.SEEDED

    def plan(
        self,
        start: Pose,
        goal: Pose,
        obstacles: Iterable[Box2d] = ()
    ) -> PlanResult:
        """
        Plan a path from start to goal.

        Args:
            start: Start pose (x, y, heading)
            goal: Goal pose (x, y, heading)
            obstacles: Obstacle boxes, fixed for the duration of the search

        Returns:
            PlanResult; on success its trajectory runs from start to goal
        """
        t0 = time.perf_counter()
        cfg = self.config
        obstacles = list(obstacles)
        checker = CollisionChecker(self.vehicle, obstacles, cfg.xy_bounds)

        logger.info("Plan requested: %s -> %s with %d obstacles", start, goal, len(obstacles))

        # Validate start and goal
        if not (start.is_finite and goal.is_finite):
            logger.warning("Rejecting non-finite pose: %s -> %s", start, goal)
            return self._exhausted(FailureReason.INVALID_POSE, t0)
        if not checker.is_valid(start):
            logger.warning("Start pose %s is in collision", start)
            return self._exhausted(FailureReason.START_IN_COLLISION, t0)
        if not checker.is_valid(goal):
            logger.warning("Goal pose %s is in collision", goal)
            return self._exhausted(FailureReason.GOAL_IN_COLLISION, t0)

        cost_model = CostModel(cfg, self.curve_generator,
                               self._holonomic_grid(obstacles, start, goal), goal)
        shortcut = AnalyticShortcut(self.curve_generator, checker, cfg)

        # Initialize search
        arena = NodeArena()
        frontier = SearchFrontier()
        closed = ClosedSet()

        start_node = SearchNode.seed(start, cfg.xy_grid_resolution, cfg.heading_resolution)
        goal_node = SearchNode.seed(goal, cfg.xy_grid_resolution, cfg.heading_resolution)
        cost_model.seed(start_node)
        arena.add(start_node)
        frontier.insert_or_improve(start_node)
        self.state = SearchState.SEEDED

        iterations = 0
        expanded = 0
        self.state = SearchState.SEARCHING

        while True:
            if cfg.max_iterations is not None and iterations >= cfg.max_iterations:
                reason = FailureReason.ITERATION_BUDGET
                break
            if cfg.max_search_time is not None and time.perf_counter() - t0 > cfg.max_search_time:
                reason = FailureReason.TIME_BUDGET
                break

            # Pop node with lowest priority
            try:
                current = frontier.pop_best()
            except EmptyFrontierError:
                reason = FailureReason.OPEN_SET_EMPTY
                break
            iterations += 1

            terminal = shortcut.try_shortcut(current, goal_node)
            if terminal is not None:
                closed.add(current)
                terminal.cost_to_come = current.cost_to_come + cost_model.edge_cost(current, terminal)
                terminal.heuristic_estimate = 0.0
                arena.add(terminal)
                close_terminal(terminal, frontier, closed)

                self.state = SearchState.SUCCEEDED
                result = PlanResult(
                    status=SearchState.SUCCEEDED,
                    trajectory=reconstruct_path(arena, terminal),
                    cost=terminal.cost_to_come,
                    iterations=iterations,
                    expanded_nodes=expanded,
                    shortcut_attempts=shortcut.attempts,
                    shortcut_failures=shortcut.failures,
                    planning_time=time.perf_counter() - t0
                )
                logger.info("Reached goal with Reeds-Shepp shortcut: %s", result)
                return result

            closed.add(current)
            expanded += 1

            # Expand neighbors using motion primitives
            for child in self.expander.expand(current):
                if child.index in closed:
                    continue
                if not checker.is_segment_valid(child.segment):
                    continue

                cost_model.assign(current, child)
                # Goal unreachable from this cell even ignoring kinematics
                if not cost_model.is_finite(child):
                    continue

                if frontier.insert_or_improve(child):
                    arena.add(child)

        result = self._exhausted(reason, t0, iterations, expanded, shortcut)
        logger.info("%s", result)
        logger.debug("Open set size %d, closed set size %d, nodes created %d",
                     len(frontier), len(closed), len(arena))
        return result

    def _holonomic_grid(
        self,
        obstacles: List[Box2d],
        start: Pose,
        goal: Pose
    ) -> HolonomicHeuristicGrid:
        cfg = self.config
        if cfg.xy_bounds is not None:
            return HolonomicHeuristicGrid(obstacles, goal, cfg.xy_grid_resolution, cfg.xy_bounds)
        return HolonomicHeuristicGrid.around(
            obstacles, start, goal, cfg.xy_grid_resolution, cfg.heuristic_grid_padding
        )

    def _exhausted(
        self,
        reason: FailureReason,
        t0: float,
        iterations: int = 0,
        expanded: int = 0,
        shortcut: AnalyticShortcut | None = None
    ) -> PlanResult:
        self.state = SearchState.EXHAUSTED
        return PlanResult(
            status=SearchState.EXHAUSTED,
            reason=reason,
            iterations=iterations,
            expanded_nodes=expanded,
            shortcut_attempts=shortcut.attempts if shortcut else 0,
            shortcut_failures=shortcut.failures if shortcut else 0,
            planning_time=time.perf_counter() - t0
        )


def close_terminal(
    terminal: SearchNode,
    frontier: SearchFrontier,
    closed: ClosedSet
) -> bool:
    """
    Put the shortcut terminal into the closed set if its index is free.

    The goal cell may already be closed (a node there whose own shortcut
    failed) or still open, and an index lives in at most one of the two.

    Returns:
        True if terminal was added to the closed set
    """
    if terminal.index in closed or terminal.index in frontier:
        return False
    closed.add(terminal)
    return True


def reconstruct_path(arena: NodeArena, terminal: SearchNode) -> List[TrajectoryPoint]:
    """
    Reconstruct the trajectory by following parent handles.

    Segments are concatenated from the start node to terminal. Each segment
    after the first begins with its parent's pose, which is dropped so that
    junction poses appear once.
    """
    chain = list(arena.ancestors(terminal))
    chain.reverse()

    trajectory: List[TrajectoryPoint] = []
    for i, node in enumerate(chain):
        offset = 0 if i == 0 else 1
        for pose, gear in zip(node.segment[offset:], node.gears[offset:]):
            trajectory.append(TrajectoryPoint(pose.x, pose.y, pose.heading, gear))

    # The start pose is driven away from in the gear of the first motion
    if len(trajectory) > 1:
        first = trajectory[0]
        trajectory[0] = TrajectoryPoint(first.x, first.y, first.heading, trajectory[1].gear)

    return trajectory
