"""Planner configuration, validated once at construction."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from numbers import Real
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

import yaml


class ConfigError(ValueError):
    """Raised when planner or vehicle configuration is invalid."""


@dataclass
class PlannerConfig:
    """Hybrid A* planner configuration."""

    # Motion primitives
    next_node_num: int = 10  # Primitives per expansion, half forward / half reverse
    max_steering: float = math.radians(35)  # Steering sweep limit (rad)
    step_size: float = 0.5  # Kinematic integration step (m)

    # State space discretization
    xy_grid_resolution: float = 1.0  # Cell size (m)
    heading_resolution: float = math.radians(5)  # Heading bucket (rad)

    # World limits (x_min, x_max, y_min, y_max); None = unbounded
    xy_bounds: Tuple[float, float, float, float] | None = None

    # Cost weights
    traj_forward_penalty: float = 1.0  # Per meter driven forward
    traj_back_penalty: float = 2.0  # Per meter driven in reverse
    traj_gear_switch_penalty: float = 10.0  # Per change of direction
    traj_steer_penalty: float = 0.5  # Per radian of steering used
    traj_steer_change_penalty: float = 1.0  # Per radian of steering change

    # Heuristic grid margin around start/goal/obstacles when unbounded (m)
    heuristic_grid_padding: float = 10.0

    # Sampling step along analytic curves (m); None = step_size
    shortcut_step_size: float | None = None

    # Search limits; None = unbounded
    max_iterations: int | None = 50000
    max_search_time: float | None = None  # Wall-clock budget (s)

    def __post_init__(self):
        if isinstance(self.xy_bounds, list):
            self.xy_bounds = tuple(self.xy_bounds)
        if self.shortcut_step_size is None:
            self.shortcut_step_size = self.step_size

    @property
    def primitive_arc_length(self) -> float:
        """Arc length of one motion primitive, long enough to leave the cell."""
        return math.sqrt(2) * self.xy_grid_resolution

    def validate(self) -> None:
        """Raise ConfigError describing the first invalid field."""
        for name in ("max_steering", "step_size", "xy_grid_resolution",
                     "heading_resolution", "shortcut_step_size"):
            _require_positive(name, getattr(self, name))

        if (isinstance(self.next_node_num, bool) or not isinstance(self.next_node_num, int)
                or self.next_node_num < 4 or self.next_node_num % 2):
            raise ConfigError(
                f"next_node_num must be an even integer >= 4, got {self.next_node_num!r}"
            )
        if self.max_steering >= math.pi / 2:
            raise ConfigError(f"max_steering must be below pi/2, got {self.max_steering}")
        if self.heading_resolution > 2 * math.pi:
            raise ConfigError(
                f"heading_resolution must not exceed 2*pi, got {self.heading_resolution}"
            )

        # Weights below 1 would let the Reeds-Shepp length overestimate cost
        for name in ("traj_forward_penalty", "traj_back_penalty"):
            value = getattr(self, name)
            _require_real(name, value)
            if value < 1.0:
                raise ConfigError(f"{name} must be >= 1.0, got {value}")
        for name in ("traj_gear_switch_penalty", "traj_steer_penalty",
                     "traj_steer_change_penalty", "heuristic_grid_padding"):
            value = getattr(self, name)
            _require_real(name, value)
            if value < 0:
                raise ConfigError(f"{name} must be non-negative, got {value}")

        if self.xy_bounds is not None:
            if not isinstance(self.xy_bounds, tuple) or len(self.xy_bounds) != 4:
                raise ConfigError(
                    f"xy_bounds must be (x_min, x_max, y_min, y_max), got {self.xy_bounds!r}"
                )
            for value in self.xy_bounds:
                _require_real("xy_bounds", value)
            x_min, x_max, y_min, y_max = self.xy_bounds
            if x_min >= x_max or y_min >= y_max:
                raise ConfigError(f"xy_bounds are empty: {self.xy_bounds!r}")

        if self.max_iterations is not None:
            if (isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, int)
                    or self.max_iterations <= 0):
                raise ConfigError(
                    f"max_iterations must be a positive integer, got {self.max_iterations!r}"
                )
        if self.max_search_time is not None:
            _require_positive("max_search_time", self.max_search_time)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PlannerConfig:
        """
        Build a validated config from a plain mapping.

        Unknown keys are rejected so that typos do not silently fall back
        to defaults.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown planner config keys: {', '.join(unknown)}")

        config = cls(**dict(data))
        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_planner_config(path: str | Path) -> PlannerConfig:
    """
    Load a planner config from a YAML file.

    Args:
        path: YAML file with a mapping of PlannerConfig fields, optionally
            nested under a top-level `planner` key

    Returns:
        Validated PlannerConfig
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Malformed planner config {path}: {exc}") from exc

    if data is None:
        data = {}
    if isinstance(data, dict) and isinstance(data.get("planner"), dict):
        data = data["planner"]
    if not isinstance(data, dict):
        raise ConfigError(f"Planner config {path} must contain a mapping")

    return PlannerConfig.from_dict(data)


def _require_real(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, Real) or math.isnan(value):
        raise ConfigError(f"{name} must be a number, got {value!r}")


def _require_positive(name: str, value: Any) -> None:
    _require_real(name, value)
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
