"""Hybrid A* Open-Space Path Planning."""

from .hybrid_astar import (
    HybridAStar,
    PlanResult,
    SearchState,
    FailureReason,
    reconstruct_path,
)
from .config import PlannerConfig, ConfigError, load_planner_config
from .pose import Pose, TrajectoryPoint, Gear, discretize, normalize_angle
from .vehicle import Vehicle, VehicleConfig
from .geometry import Box2d
from .collision import CollisionChecker
from .reeds_shepp import ReedsSheppPath, ReedsSheppGenerator, compute_reeds_shepp_path
from .search import SearchNode, NodeArena, SearchFrontier, ClosedSet, EmptyFrontierError
from .visualization import Visualizer, create_scenario

__all__ = [
    # Core planner
    "HybridAStar",
    "PlanResult",
    "SearchState",
    "FailureReason",
    "reconstruct_path",
    # Configuration
    "PlannerConfig",
    "ConfigError",
    "load_planner_config",
    # Poses
    "Pose",
    "TrajectoryPoint",
    "Gear",
    "discretize",
    "normalize_angle",
    # Vehicle and collision
    "Vehicle",
    "VehicleConfig",
    "Box2d",
    "CollisionChecker",
    # Reeds-Shepp curves
    "ReedsSheppPath",
    "ReedsSheppGenerator",
    "compute_reeds_shepp_path",
    # Search bookkeeping
    "SearchNode",
    "NodeArena",
    "SearchFrontier",
    "ClosedSet",
    "EmptyFrontierError",
    # Visualization
    "Visualizer",
    "create_scenario",
]
