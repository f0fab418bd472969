"""Tests for Reeds-Shepp curves."""

import math
import pytest

from open_space_planner.pose import Gear, Pose
from open_space_planner.reeds_shepp import ReedsSheppGenerator, compute_reeds_shepp_path


class TestReedsSheppPath:
    """Tests for shortest-curve computation."""

    RADIUS = 3.0

    def test_straight_forward(self):
        """Collinear poses should be joined by a straight forward line."""
        path = compute_reeds_shepp_path(Pose(0, 0, 0), Pose(5, 0, 0), self.RADIUS)

        assert path is not None
        assert path.total_length == pytest.approx(5.0)
        assert path.gears() == [Gear.FORWARD]

    def test_straight_reverse(self):
        # WHY: This is what separates Reeds-Shepp from Dubins: a goal
        # directly behind the car is reached by backing up, not by a loop.
        path = compute_reeds_shepp_path(Pose(0, 0, 0), Pose(-4, 0, 0), self.RADIUS)

        assert path is not None
        assert path.total_length == pytest.approx(4.0)
        assert path.gears() == [Gear.REVERSE]
        assert path.gear_switches() == 0

    def test_start_equals_goal(self):
        pose = Pose(2.0, 3.0, 0.7)
        path = compute_reeds_shepp_path(pose, pose, self.RADIUS)

        assert path is not None
        assert path.total_length == pytest.approx(0.0, abs=1e-9)

    def test_length_at_least_euclidean(self):
        start = Pose(0, 0, 0)
        for goal in [Pose(3, 4, 1.0), Pose(-2, 6, -2.5), Pose(1, -1, math.pi)]:
            path = compute_reeds_shepp_path(start, goal, self.RADIUS)
            assert path is not None
            assert path.total_length >= start.distance_to(goal) - 1e-9

    def test_quarter_turn(self):
        # WHY: A goal exactly one quarter circle to the left is reached by
        # a single left arc of length pi/2 * radius. Nothing shorter exists.
        goal = Pose(self.RADIUS, self.RADIUS, math.pi / 2)
        path = compute_reeds_shepp_path(Pose(0, 0, 0), goal, self.RADIUS)

        assert path is not None
        assert path.total_length == pytest.approx(math.pi / 2 * self.RADIUS)

    def test_symmetric_length(self):
        """Reversing start and goal should not change the shortest length."""
        a = Pose(1.0, 2.0, 0.3)
        b = Pose(6.0, -1.0, 2.0)
        forward = compute_reeds_shepp_path(a, b, self.RADIUS)
        backward = compute_reeds_shepp_path(b, a, self.RADIUS)
        assert forward.total_length == pytest.approx(backward.total_length)

    def test_translation_invariant(self):
        a = compute_reeds_shepp_path(Pose(0, 0, 0.2), Pose(3, 5, -1.0), self.RADIUS)
        b = compute_reeds_shepp_path(Pose(10, -7, 0.2), Pose(13, -2, -1.0), self.RADIUS)
        assert a.total_length == pytest.approx(b.total_length)
        assert a.word == b.word


class TestSampling:
    """Tests for sampling poses along a curve."""

    RADIUS = 3.0

    @pytest.mark.parametrize("goal", [
        Pose(5, 0, 0),
        Pose(-4, 1, 0.5),
        Pose(2, 3, math.pi),
        Pose(0.5, -0.5, -2.0),
        Pose(-6, -6, 1.5),
    ])
    def test_endpoints_exact(self, goal):
        """Samples must start at the start pose and end exactly at the goal."""
        start = Pose(0, 0, 0)
        path = compute_reeds_shepp_path(start, goal, self.RADIUS)
        poses, gears = path.sample(step_size=0.2)

        assert poses[0] == start
        assert poses[-1] == goal
        assert len(poses) == len(gears)

    @pytest.mark.parametrize("goal", [
        Pose(-4, 1, 0.5),
        Pose(0.5, -0.5, -2.0),
        Pose(-6, -6, 1.5),
    ])
    def test_samples_are_continuous(self, goal):
        # WHY: Collision checking only looks at samples, so consecutive
        # samples must not be further apart than the step size.
        path = compute_reeds_shepp_path(Pose(0, 0, 0), goal, self.RADIUS)
        poses, _ = path.sample(step_size=0.2)

        for a, b in zip(poses, poses[1:]):
            assert a.distance_to(b) <= 0.2 + 1e-5

    def test_gears_follow_segments(self):
        path = compute_reeds_shepp_path(Pose(0, 0, 0), Pose(-4, 0, 0), self.RADIUS)
        _, gears = path.sample(step_size=0.5)
        assert set(gears) == {Gear.REVERSE}

    def test_zero_length_path_has_two_samples(self):
        pose = Pose(1.0, 1.0, 0.0)
        path = compute_reeds_shepp_path(pose, pose, self.RADIUS)
        poses, gears = path.sample(step_size=0.5)

        assert len(poses) == 2
        assert poses[0] == pose and poses[-1] == pose
        assert gears == [Gear.FORWARD, Gear.FORWARD]


class TestReedsSheppGenerator:
    """Tests for the generator wrapper."""

    def setup_method(self):
        self.generator = ReedsSheppGenerator(min_turn_radius=3.0, step_size=0.25)

    def test_connect(self):
        poses, gears = self.generator.connect(Pose(0, 0, 0), Pose(5, 2, 0.5))
        assert poses[-1] == Pose(5, 2, 0.5)
        assert len(gears) == len(poses)

    def test_path_length_matches_curve(self):
        start, goal = Pose(0, 0, 0), Pose(4, -3, 1.2)
        curve = self.generator.shortest_curve(start, goal)
        assert self.generator.path_length(start, goal) == pytest.approx(curve.total_length)
