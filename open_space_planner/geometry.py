"""Oriented bounding boxes and separating-axis overlap tests."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Box2d:
    """
    Oriented rectangle in the world frame.

    Used both for obstacle bounding shapes and for the vehicle footprint.
    `length` runs along `heading`, `width` across it.
    """

    center_x: float
    center_y: float
    heading: float  # Orientation of the length axis (rad)
    length: float  # Extent along heading (m)
    width: float  # Extent across heading (m)

    @classmethod
    def from_extents(
        cls,
        x_min: float,
        x_max: float,
        y_min: float,
        y_max: float
    ) -> Box2d:
        """Axis-aligned box from its extents."""
        return cls(
            center_x=(x_min + x_max) / 2,
            center_y=(y_min + y_max) / 2,
            heading=0.0,
            length=x_max - x_min,
            width=y_max - y_min
        )

    def corners(self) -> np.ndarray:
        """
        Box corners in the world frame.

        Returns:
            4x2 array [front-left, front-right, rear-right, rear-left]
        """
        hl, hw = self.length / 2, self.width / 2
        corners_local = np.array([
            [hl, hw],
            [hl, -hw],
            [-hl, -hw],
            [-hl, hw],
        ])

        c, s = math.cos(self.heading), math.sin(self.heading)
        R = np.array([[c, -s], [s, c]])

        return corners_local @ R.T + np.array([self.center_x, self.center_y])

    def axes(self) -> np.ndarray:
        """Unit normals of the box edges (2x2, one per row)."""
        c, s = math.cos(self.heading), math.sin(self.heading)
        return np.array([[c, s], [-s, c]])

    def bounds(self) -> Tuple[float, float, float, float]:
        """Axis-aligned extents (x_min, x_max, y_min, y_max)."""
        corners = self.corners()
        x_min, y_min = corners.min(axis=0)
        x_max, y_max = corners.max(axis=0)
        return float(x_min), float(x_max), float(y_min), float(y_max)

    def contains_points(self, points: np.ndarray) -> np.ndarray:
        """
        Test which points lie inside the box (boundary included).

        Args:
            points: Nx2 array of world coordinates

        Returns:
            Boolean array of length N
        """
        rel = np.asarray(points, dtype=float) - np.array([self.center_x, self.center_y])
        local = rel @ self.axes().T
        return ((np.abs(local[:, 0]) <= self.length / 2 + 1e-9) &
                (np.abs(local[:, 1]) <= self.width / 2 + 1e-9))

    def has_overlap(self, other: Box2d) -> bool:
        """True if the two boxes intersect (touching counts as overlap)."""
        # Cheap rejection on circumscribed circles
        dx = other.center_x - self.center_x
        dy = other.center_y - self.center_y
        reach = (math.hypot(self.length, self.width) +
                 math.hypot(other.length, other.width)) / 2
        if dx * dx + dy * dy > reach * reach:
            return False

        return check_sat_overlap(self.corners(), other.corners(),
                                 np.vstack([self.axes(), other.axes()]))


def check_sat_overlap(poly1: np.ndarray, poly2: np.ndarray, axes: np.ndarray) -> bool:
    """
    Separating axis test for two convex polygons.

    Args:
        poly1: (N, 2) vertices
        poly2: (M, 2) vertices
        axes: (K, 2) candidate separating axes (edge normals of both polygons)

    Returns:
        True if no axis separates the polygons
    """
    proj1 = poly1 @ axes.T
    proj2 = poly2 @ axes.T

    separated = (proj1.max(axis=0) < proj2.min(axis=0)) | (proj2.max(axis=0) < proj1.min(axis=0))
    return not bool(np.any(separated))
