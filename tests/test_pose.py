"""Tests for poses and cell discretization."""

import math
import pytest

from open_space_planner.pose import Gear, Pose, TrajectoryPoint, discretize, normalize_angle


class TestNormalizeAngle:
    """Tests for angle wrapping."""

    def test_already_normalized(self):
        assert normalize_angle(0.5) == pytest.approx(0.5)

    def test_wraps_large_positive(self):
        assert normalize_angle(3 * math.pi) == pytest.approx(math.pi)

    def test_wraps_large_negative(self):
        # WHY: -pi and pi are the same heading; we keep the half-open
        # range (-pi, pi] so a heading has exactly one representation.
        assert normalize_angle(-math.pi) == pytest.approx(math.pi)
        assert normalize_angle(-2.5 * math.pi) == pytest.approx(-0.5 * math.pi)

    def test_non_finite_passes_through(self):
        assert math.isnan(normalize_angle(math.nan))
        assert normalize_angle(math.inf) == math.inf
        assert normalize_angle(-math.inf) == -math.inf


class TestPose:
    """Tests for the Pose value type."""

    def test_heading_normalized_on_construction(self):
        pose = Pose(1.0, 2.0, 2 * math.pi + 0.25)
        assert pose.heading == pytest.approx(0.25)

    def test_unpacks_like_tuple(self):
        x, y, heading = Pose(1.0, 2.0, 0.5)
        assert (x, y, heading) == (1.0, 2.0, 0.5)

    def test_distance_ignores_heading(self):
        a = Pose(0.0, 0.0, 0.0)
        b = Pose(3.0, 4.0, 1.0)
        assert a.distance_to(b) == pytest.approx(5.0)

    def test_trajectory_point_pose(self):
        point = TrajectoryPoint(1.0, 2.0, 0.3, Gear.REVERSE)
        assert point.pose == Pose(1.0, 2.0, 0.3)

    def test_gear_from_sign(self):
        assert Gear.from_sign(-0.1) is Gear.REVERSE
        assert Gear.from_sign(0.1) is Gear.FORWARD

    def test_is_finite(self):
        assert Pose(1.0, -2.0, 0.5).is_finite
        assert not Pose(math.nan, 0.0, 0.0).is_finite
        assert not Pose(0.0, math.inf, 0.0).is_finite
        assert not Pose(0.0, 0.0, -math.inf).is_finite

    def test_infinite_heading_constructs(self):
        # WHY: A bad heading must be caught by the planner's validation,
        # not crash while the pose is being built.
        pose = Pose(0.0, 0.0, math.inf)
        assert not pose.is_finite


class TestDiscretize:
    """Tests for mapping poses to search cells."""

    def test_floor_not_truncation(self):
        # WHY: Truncating toward zero would put x=-0.5 and x=0.5 in the
        # same cell, doubling the width of the cells around the origin.
        assert discretize(Pose(-0.5, 0.5, 0.0), 1.0, 0.1)[:2] == (-1, 0)
        assert discretize(Pose(0.5, -0.5, 0.0), 1.0, 0.1)[:2] == (0, -1)

    def test_same_cell_for_close_poses(self):
        a = discretize(Pose(2.1, 3.1, 0.01), 1.0, 0.1)
        b = discretize(Pose(2.9, 3.9, 0.05), 1.0, 0.1)
        assert a == b

    def test_heading_buckets(self):
        res = math.radians(30)
        assert discretize(Pose(0, 0, math.radians(10)), 1.0, res)[2] == 0
        assert discretize(Pose(0, 0, math.radians(40)), 1.0, res)[2] == 1
        assert discretize(Pose(0, 0, math.radians(-10)), 1.0, res)[2] == -1

    def test_equivalent_headings_share_cell(self):
        # WHY: A heading of 2*pi + a is the same direction as a, so it
        # must not open up a separate search cell.
        a = discretize(Pose(1.0, 1.0, 0.2), 0.5, 0.1)
        b = discretize(Pose(1.0, 1.0, 0.2 + 2 * math.pi), 0.5, 0.1)
        assert a == b

    def test_deterministic(self):
        pose = Pose(12.345, -6.789, -2.5)
        assert discretize(pose, 0.3, 0.07) == discretize(pose, 0.3, 0.07)

    def test_returns_integers(self):
        index = discretize(Pose(1e6, -1e6, 3.0), 0.25, 0.01)
        assert all(isinstance(i, int) for i in index)

    @pytest.mark.parametrize("pose", [
        Pose(math.nan, 0.0, 0.0),
        Pose(0.0, math.nan, math.nan),
        Pose(math.inf, -math.inf, 0.0),
        Pose(0.0, 0.0, math.inf),
        Pose(1e308, -1e308, 0.0),
    ])
    def test_total_for_non_finite_and_huge(self, pose):
        index = discretize(pose, 1e-10, 0.1)
        assert len(index) == 3
        assert all(isinstance(i, int) for i in index)

    def test_huge_coordinates_saturate(self):
        # WHY: 1e308 / 1e-10 overflows to inf. Both ends must still map to
        # distinct, ordered cells.
        high = discretize(Pose(1e308, 0.0, 0.0), 1e-10, 0.1)
        low = discretize(Pose(-1e308, 0.0, 0.0), 1e-10, 0.1)
        assert high[0] > 0 > low[0]
        assert discretize(Pose(math.inf, 0.0, 0.0), 1.0, 0.1)[0] == high[0]

    def test_nan_never_shares_a_finite_cell(self):
        nan_index = discretize(Pose(math.nan, math.nan, math.nan), 1.0, 0.1)
        for pose in (Pose(0.0, 0.0, 0.0), Pose(-1e308, -1e308, -3.0), Pose(-math.inf, -math.inf, 0.0)):
            assert discretize(pose, 1.0, 0.1) != nan_index

    def test_nan_cells_are_stable(self):
        a = discretize(Pose(math.nan, 2.0, 0.0), 1.0, 0.1)
        b = discretize(Pose(math.nan, 2.0, 0.0), 1.0, 0.1)
        assert a == b
