"""Tests for the vehicle kinematic model."""

import math
import pytest
import numpy as np

from open_space_planner.config import ConfigError
from open_space_planner.pose import Pose
from open_space_planner.vehicle import Vehicle, VehicleConfig


class TestVehicleConfig:
    """Tests for vehicle geometry validation."""

    def test_default_rear_overhang(self):
        """Rear axle defaults to a quarter of the body length."""
        config = VehicleConfig(length=4.0)
        assert config.back_edge_to_center == pytest.approx(1.0)

    def test_rejects_non_positive_wheelbase(self):
        # WHY: A zero wheelbase makes the turning radius zero and the
        # kinematic update divides by it.
        with pytest.raises(ConfigError):
            Vehicle(VehicleConfig(wheelbase=0.0))

    def test_rejects_axle_outside_body(self):
        with pytest.raises(ConfigError):
            Vehicle(VehicleConfig(length=4.0, back_edge_to_center=5.0))


class TestVehicle:
    """Tests for the Vehicle kinematic model."""

    def setup_method(self):
        """Create a default vehicle before each test."""
        # WHY: Every test needs a car, so we make one here instead of
        # repeating it in every single test function.
        self.vehicle = Vehicle()

    def test_straight_line_forward(self):
        """Driving straight with zero steering should move along heading."""
        # WHY: The simplest possible move. If this fails, nothing else works.
        start = Pose(0.0, 0.0, 0.0)
        result = self.vehicle.step(start, steering=0.0, distance=5.0)

        assert result.x == pytest.approx(5.0, abs=1e-6)
        assert result.y == pytest.approx(0.0, abs=1e-6)
        assert result.heading == pytest.approx(0.0, abs=1e-6)

    def test_straight_line_reverse(self):
        """A negative distance should move backward along heading."""
        # WHY: Reverse is used in parking. The car should go backward
        # (negative x direction when facing right) without turning around.
        start = Pose(5.0, 0.0, 0.0)
        result = self.vehicle.step(start, steering=0.0, distance=-3.0)

        assert result.x == pytest.approx(2.0, abs=1e-6)
        assert result.heading == pytest.approx(0.0, abs=1e-6)

    def test_left_steer_turns_left(self):
        """Positive steering should increase heading when driving forward."""
        start = Pose(0.0, 0.0, 0.0)
        result = self.vehicle.step(start, steering=0.3, distance=1.0)

        expected = 1.0 / self.vehicle.config.wheelbase * math.tan(0.3)
        assert result.heading == pytest.approx(expected)

    def test_reverse_with_left_steer_turns_right(self):
        # WHY: Reversing with the wheels turned left swings the nose the
        # other way. Primitives rely on this to cover both turn directions.
        start = Pose(0.0, 0.0, 0.0)
        result = self.vehicle.step(start, steering=0.3, distance=-1.0)
        assert result.heading < 0

    def test_position_uses_heading_before_step(self):
        """The position update is an explicit Euler step from the old heading."""
        start = Pose(0.0, 0.0, math.pi / 2)
        result = self.vehicle.step(start, steering=0.5, distance=1.0)

        assert result.x == pytest.approx(0.0, abs=1e-9)
        assert result.y == pytest.approx(1.0)

    def test_heading_stays_normalized(self):
        pose = Pose(0.0, 0.0, 3.1)
        for _ in range(20):
            pose = self.vehicle.step(pose, steering=0.6, distance=0.5)
            assert -math.pi < pose.heading <= math.pi

    def test_min_turn_radius(self):
        radius = self.vehicle.min_turn_radius(math.radians(35))
        assert radius == pytest.approx(2.5 / math.tan(math.radians(35)))


class TestFootprint:
    """Tests for the vehicle body box."""

    def setup_method(self):
        self.vehicle = Vehicle(VehicleConfig(length=4.0, width=2.0, back_edge_to_center=1.0))

    def test_footprint_shifted_ahead_of_rear_axle(self):
        # WHY: Poses are at the rear axle. The body extends 1 m behind it
        # and 3 m ahead, so its center is 1 m ahead of the pose.
        box = self.vehicle.footprint(Pose(0.0, 0.0, 0.0))
        assert box.center_x == pytest.approx(1.0)
        assert box.bounds() == pytest.approx((-1.0, 3.0, -1.0, 1.0))

    def test_footprint_rotates_with_heading(self):
        box = self.vehicle.footprint(Pose(0.0, 0.0, math.pi / 2))
        assert box.center_x == pytest.approx(0.0, abs=1e-9)
        assert box.center_y == pytest.approx(1.0)

    def test_footprint_corners(self):
        corners = self.vehicle.footprint_corners(Pose(0.0, 0.0, 0.0))
        assert corners.shape == (4, 2)
        np.testing.assert_allclose(corners[0], [3.0, 1.0])
