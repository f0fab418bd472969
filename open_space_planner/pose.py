"""Continuous poses and their discretization into search cells."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


Index = Tuple[int, int, int]

# Cell coordinates saturate here; NaN maps one past the negative limit
_INDEX_LIMIT = 2 ** 62
_NAN_BUCKET = -_INDEX_LIMIT - 1


def normalize_angle(angle: float) -> float:
    """Normalize angle to (-pi, pi]. Non-finite angles are returned unchanged."""
    if not math.isfinite(angle):
        return angle
    angle = math.fmod(angle, 2 * math.pi)
    if angle <= -math.pi:
        angle += 2 * math.pi
    elif angle > math.pi:
        angle -= 2 * math.pi
    return angle


class Gear(Enum):
    """Direction of travel along a trajectory segment."""

    FORWARD = 1
    REVERSE = -1

    @classmethod
    def from_sign(cls, value: float) -> Gear:
        return cls.REVERSE if value < 0 else cls.FORWARD


@dataclass(frozen=True)
class Pose:
    """Vehicle pose: rear axle position and heading."""

    x: float
    y: float
    heading: float  # Heading angle (rad), (-pi, pi]

    def __post_init__(self):
        # Frozen dataclass, so bypass __setattr__ to store the normalized value
        object.__setattr__(self, "heading", normalize_angle(self.heading))

    def __iter__(self):
        return iter((self.x, self.y, self.heading))

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.x, self.y, self.heading))

    def distance_to(self, other: Pose) -> float:
        """Euclidean distance to another pose."""
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class TrajectoryPoint:
    """One point of a planned trajectory, tagged with its gear."""

    x: float
    y: float
    heading: float
    gear: Gear

    @property
    def pose(self) -> Pose:
        return Pose(self.x, self.y, self.heading)


def discretize(pose: Pose, xy_resolution: float, heading_resolution: float) -> Index:
    """
    Map a continuous pose onto its search cell.

    The result is a bucketing key for open/closed set membership, not a
    distance metric: neighbouring cells say nothing about how far apart two
    poses are.

    Args:
        pose: Continuous pose
        xy_resolution: Cell size (m)
        heading_resolution: Heading bucket size (rad)

    Returns:
        (ix, iy, iheading) cell key
    """
    ix = _bucket(pose.x, xy_resolution)
    iy = _bucket(pose.y, xy_resolution)
    iheading = _bucket(normalize_angle(pose.heading), heading_resolution)
    return (ix, iy, iheading)


def _bucket(value: float, resolution: float) -> int:
    scaled = value / resolution
    if math.isnan(scaled):
        return _NAN_BUCKET
    if math.isinf(scaled):
        return _INDEX_LIMIT if scaled > 0 else -_INDEX_LIMIT
    return max(-_INDEX_LIMIT, min(_INDEX_LIMIT, math.floor(scaled)))
