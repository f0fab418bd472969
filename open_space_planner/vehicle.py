"""Vehicle geometry and kinematic model for open-space planning."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .config import ConfigError
from .geometry import Box2d
from .pose import Pose, normalize_angle


@dataclass
class VehicleConfig:
    """Vehicle configuration parameters."""

    wheelbase: float = 2.5  # Distance between front and rear axles (m)
    length: float = 4.5  # Vehicle length (m)
    width: float = 1.8  # Vehicle width (m)
    back_edge_to_center: float | None = None  # Rear bumper to rear axle (m)

    def __post_init__(self):
        # Rear axle sits a quarter of the body length from the rear bumper
        if self.back_edge_to_center is None:
            self.back_edge_to_center = self.length * 0.25

    def validate(self) -> None:
        """Raise ConfigError if the geometry is not physically meaningful."""
        if self.wheelbase <= 0:
            raise ConfigError(f"wheelbase must be positive, got {self.wheelbase}")
        if self.length <= 0 or self.width <= 0:
            raise ConfigError(
                f"vehicle length and width must be positive, got {self.length} x {self.width}"
            )
        if not 0 <= self.back_edge_to_center <= self.length:
            raise ConfigError(
                f"back_edge_to_center must lie within the body length, got {self.back_edge_to_center}"
            )


class Vehicle:
    """
    Bicycle kinematic model for a car-like vehicle.

    Poses refer to the rear axle center, so the footprint box is shifted
    forward along the heading from the pose.
    """

    def __init__(self, config: VehicleConfig | None = None):
        self.config = config or VehicleConfig()
        self.config.validate()

    def step(self, pose: Pose, steering: float, distance: float) -> Pose:
        """
        Advance one kinematic integration step.

        Args:
            pose: Current pose
            steering: Steering angle (rad), positive = left turn
            distance: Signed distance (m), negative = reverse

        Returns:
            Pose after the step
        """
        x = pose.x + distance * math.cos(pose.heading)
        y = pose.y + distance * math.sin(pose.heading)
        heading = normalize_angle(
            pose.heading + distance / self.config.wheelbase * math.tan(steering)
        )
        return Pose(x, y, heading)

    def min_turn_radius(self, max_steering: float) -> float:
        """Turning radius of the rear axle at full steering lock."""
        return self.config.wheelbase / math.tan(max_steering)

    def footprint(self, pose: Pose) -> Box2d:
        """Oriented bounding box of the vehicle body at pose."""
        cfg = self.config
        # Offset from rear axle to the geometric center of the body
        shift = cfg.length / 2 - cfg.back_edge_to_center
        c, s = math.cos(pose.heading), math.sin(pose.heading)

        return Box2d(
            center_x=pose.x + shift * c,
            center_y=pose.y + shift * s,
            heading=pose.heading,
            length=cfg.length,
            width=cfg.width
        )

    def footprint_corners(self, pose: Pose) -> np.ndarray:
        """Footprint corners, 4x2 [front-left, front-right, rear-right, rear-left]."""
        return self.footprint(pose).corners()
