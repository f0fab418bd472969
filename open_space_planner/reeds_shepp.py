"""
Reeds-Shepp curve computation for car-like vehicles.

Reeds-Shepp curves are the shortest paths for a vehicle that can drive
both forward and in reverse with a minimum turning radius. Each curve is
a word of at most 5 segments made of Left arcs, Right arcs and Straight
lines, where every segment carries its own direction of travel.

Words are computed for a unit turning radius in the start frame, in the
five families CSC, CCC, CCCC, CCSC and CCSCC. Each base formula is
expanded with the timeflip (drive the word in the other gear), reflect
(swap left and right) and backwards (drive the word in reverse order)
symmetries.

Reference:
    Reeds, J.A. and Shepp, L.A. (1990). "Optimal paths for a car that
    goes both forwards and backwards"
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from .pose import Gear, Pose, normalize_angle

logger = logging.getLogger(__name__)

_ZERO = 1e-9
_ENDPOINT_TOLERANCE = 1e-6
_HALF_PI = 0.5 * math.pi


class SegmentType(Enum):
    """Reeds-Shepp segment types."""
    LEFT = 'L'
    STRAIGHT = 'S'
    RIGHT = 'R'


L, S, R = SegmentType.LEFT, SegmentType.STRAIGHT, SegmentType.RIGHT

_REFLECTED = {L: R, S: S, R: L}

Word = Tuple[Tuple[SegmentType, ...], Tuple[float, ...]]


@dataclass
class ReedsSheppPath:
    """
    A complete Reeds-Shepp curve.

    Segment lengths are signed and normalized by the turning radius:
    positive drives forward, negative drives in reverse.
    """

    segments: Tuple[SegmentType, ...]
    lengths: Tuple[float, ...]  # Signed, in units of radius
    radius: float  # Turning radius (m)
    start: Pose
    goal: Pose

    @property
    def total_length(self) -> float:
        """Total path length in world units."""
        return sum(abs(length) for length in self.lengths) * self.radius

    @property
    def word(self) -> str:
        """Segment letters with direction, e.g. 'L+S+R-'."""
        return "".join(
            f"{seg.value}{'+' if length >= 0 else '-'}"
            for seg, length in zip(self.segments, self.lengths)
            if abs(length) > _ZERO
        )

    def gears(self) -> List[Gear]:
        """Gear of each non-empty segment, in driving order."""
        return [Gear.from_sign(length) for length in self.lengths if abs(length) > _ZERO]

    def gear_switches(self) -> int:
        """Number of direction changes along the curve."""
        gears = self.gears()
        return sum(1 for a, b in zip(gears, gears[1:]) if a is not b)

    def sample(self, step_size: float = 0.1) -> Tuple[List[Pose], List[Gear]]:
        """
        Sample poses along the curve.

        Args:
            step_size: Maximum distance between samples (meters)

        Returns:
            (poses, gears): poses from start to goal inclusive, and the gear
            driven to reach each pose. The first pose takes the gear of the
            first motion. The last pose is exactly the goal.
        """
        x, y, theta = self.start.x, self.start.y, self.start.heading
        gears = self.gears()
        first_gear = gears[0] if gears else Gear.FORWARD

        poses = [Pose(x, y, theta)]
        pose_gears = [first_gear]

        for seg_type, seg_len in zip(self.segments, self.lengths):
            if abs(seg_len) <= _ZERO:
                continue

            # Number of samples for this segment
            arc_length = abs(seg_len) * self.radius
            num_samples = max(1, math.ceil(arc_length / step_size - 1e-9))
            ds = seg_len / num_samples
            gear = Gear.from_sign(seg_len)

            for _ in range(num_samples):
                x, y, theta = _advance(x, y, theta, seg_type, ds, self.radius)
                poses.append(Pose(x, y, theta))
                pose_gears.append(gear)

        # Replace the integrated endpoint with the exact goal
        if len(poses) > 1:
            poses[-1] = self.goal
        else:
            poses.append(self.goal)
            pose_gears.append(first_gear)

        return poses, pose_gears


def compute_reeds_shepp_path(
    start: Pose,
    goal: Pose,
    radius: float
) -> ReedsSheppPath | None:
    """
    Compute the shortest Reeds-Shepp curve between two poses.

    Args:
        start: Starting pose (x, y, heading)
        goal: Goal pose (x, y, heading)
        radius: Minimum turning radius

    Returns:
        Shortest ReedsSheppPath, or None if no word connects the poses
    """
    # Express goal in the start frame, normalized to unit turning radius
    dx = goal.x - start.x
    dy = goal.y - start.y
    c, s = math.cos(start.heading), math.sin(start.heading)
    x = (c * dx + s * dy) / radius
    y = (-s * dx + c * dy) / radius
    phi = normalize_angle(goal.heading - start.heading)

    best_word = None
    best_length = float('inf')

    for segments, lengths in _candidate_words(x, y, phi):
        total = sum(abs(length) for length in lengths)
        if total >= best_length:
            continue
        if not _reaches(segments, lengths, x, y, phi):
            logger.debug("Discarding Reeds-Shepp word %s: endpoint mismatch",
                         "".join(seg.value for seg in segments))
            continue
        best_word = (segments, lengths)
        best_length = total

    if best_word is None:
        return None

    return ReedsSheppPath(
        segments=best_word[0],
        lengths=best_word[1],
        radius=radius,
        start=start,
        goal=goal
    )


def _advance(
    x: float,
    y: float,
    theta: float,
    seg_type: SegmentType,
    length: float,
    radius: float
) -> Tuple[float, float, float]:
    """Drive a signed normalized length along one segment type."""
    if seg_type == SegmentType.STRAIGHT:
        d = length * radius
        return x + d * math.cos(theta), y + d * math.sin(theta), theta

    if seg_type == SegmentType.LEFT:
        # Arc center is to the left
        new_theta = theta + length
        new_x = x + radius * (math.sin(new_theta) - math.sin(theta))
        new_y = y - radius * (math.cos(new_theta) - math.cos(theta))
    else:
        # Arc center is to the right
        new_theta = theta - length
        new_x = x - radius * (math.sin(new_theta) - math.sin(theta))
        new_y = y + radius * (math.cos(new_theta) - math.cos(theta))

    return new_x, new_y, normalize_angle(new_theta)


def _reaches(
    segments: Sequence[SegmentType],
    lengths: Sequence[float],
    x: float,
    y: float,
    phi: float
) -> bool:
    """Check that a unit-radius word starting at the origin ends at (x, y, phi)."""
    px, py, ptheta = 0.0, 0.0, 0.0
    for seg_type, length in zip(segments, lengths):
        px, py, ptheta = _advance(px, py, ptheta, seg_type, length, 1.0)

    return (abs(px - x) < _ENDPOINT_TOLERANCE and
            abs(py - y) < _ENDPOINT_TOLERANCE and
            abs(normalize_angle(ptheta - phi)) < _ENDPOINT_TOLERANCE)


def _mod2pi(angle: float) -> float:
    """Wrap angle to [-pi, pi]."""
    v = math.fmod(angle, 2 * math.pi)
    if v < -math.pi:
        v += 2 * math.pi
    elif v > math.pi:
        v -= 2 * math.pi
    return v


def _polar(x: float, y: float) -> Tuple[float, float]:
    return math.hypot(x, y), math.atan2(y, x)


def _tau_omega(
    u: float,
    v: float,
    xi: float,
    eta: float,
    phi: float
) -> Tuple[float, float]:
    delta = _mod2pi(u - v)
    a = math.sin(u) - math.sin(delta)
    b = math.cos(u) - math.cos(delta) - 1.0
    t1 = math.atan2(eta * a - xi * b, xi * a + eta * b)
    t2 = 2.0 * (math.cos(delta) - math.cos(v) - math.cos(u)) + 3.0
    tau = _mod2pi(t1 + math.pi) if t2 < 0 else _mod2pi(t1)
    omega = _mod2pi(tau - u + v - phi)
    return tau, omega


# Base formulas. Each returns the (t, u, v) parameters of its word or None.

def _lp_sp_lp(x: float, y: float, phi: float) -> Optional[Tuple[float, float, float]]:
    u, t = _polar(x - math.sin(phi), y - 1.0 + math.cos(phi))
    if t >= -_ZERO:
        v = _mod2pi(phi - t)
        if v >= -_ZERO:
            return t, u, v
    return None


def _lp_sp_rp(x: float, y: float, phi: float) -> Optional[Tuple[float, float, float]]:
    u1, t1 = _polar(x + math.sin(phi), y - 1.0 - math.cos(phi))
    u1 = u1 * u1
    if u1 >= 4.0:
        u = math.sqrt(u1 - 4.0)
        theta = math.atan2(2.0, u)
        t = _mod2pi(t1 + theta)
        v = _mod2pi(t - phi)
        if t >= -_ZERO and v >= -_ZERO:
            return t, u, v
    return None


def _lp_rm_l(x: float, y: float, phi: float) -> Optional[Tuple[float, float, float]]:
    xi = x - math.sin(phi)
    eta = y - 1.0 + math.cos(phi)
    u1, theta = _polar(xi, eta)
    if u1 <= 4.0:
        u = -2.0 * math.asin(0.25 * u1)
        t = _mod2pi(theta + 0.5 * u + math.pi)
        v = _mod2pi(phi - t + u)
        if t >= -_ZERO and u <= _ZERO:
            return t, u, v
    return None


def _lp_rup_lum_rm(x: float, y: float, phi: float) -> Optional[Tuple[float, float, float]]:
    xi = x + math.sin(phi)
    eta = y - 1.0 - math.cos(phi)
    rho = 0.25 * (2.0 + math.hypot(xi, eta))
    if rho <= 1.0:
        u = math.acos(rho)
        t, v = _tau_omega(u, -u, xi, eta, phi)
        if t >= -_ZERO and v <= _ZERO:
            return t, u, v
    return None


def _lp_rum_lum_rp(x: float, y: float, phi: float) -> Optional[Tuple[float, float, float]]:
    xi = x + math.sin(phi)
    eta = y - 1.0 - math.cos(phi)
    rho = (20.0 - xi * xi - eta * eta) / 16.0
    if 0.0 <= rho <= 1.0:
        u = -math.acos(rho)
        if u >= -_HALF_PI:
            t, v = _tau_omega(u, u, xi, eta, phi)
            if t >= -_ZERO and v >= -_ZERO:
                return t, u, v
    return None


def _lp_rm_sm_lm(x: float, y: float, phi: float) -> Optional[Tuple[float, float, float]]:
    xi = x - math.sin(phi)
    eta = y - 1.0 + math.cos(phi)
    rho, theta = _polar(xi, eta)
    if rho >= 2.0:
        r = math.sqrt(rho * rho - 4.0)
        u = 2.0 - r
        t = _mod2pi(theta + math.atan2(r, -2.0))
        v = _mod2pi(phi - _HALF_PI - t)
        if t >= -_ZERO and u <= _ZERO and v <= _ZERO:
            return t, u, v
    return None


def _lp_rm_sm_rm(x: float, y: float, phi: float) -> Optional[Tuple[float, float, float]]:
    xi = x + math.sin(phi)
    eta = y - 1.0 - math.cos(phi)
    rho, theta = _polar(-eta, xi)
    if rho >= 2.0:
        t = theta
        u = 2.0 - rho
        v = _mod2pi(t + _HALF_PI - phi)
        if t >= -_ZERO and u <= _ZERO and v <= _ZERO:
            return t, u, v
    return None


def _lp_rm_s_lm_rp(x: float, y: float, phi: float) -> Optional[Tuple[float, float, float]]:
    xi = x + math.sin(phi)
    eta = y - 1.0 - math.cos(phi)
    rho, _ = _polar(xi, eta)
    if rho >= 2.0:
        u = 4.0 - math.sqrt(rho * rho - 4.0)
        if u <= _ZERO:
            t = _mod2pi(math.atan2((4.0 - u) * xi - 2.0 * eta, -2.0 * xi + (u - 4.0) * eta))
            v = _mod2pi(t - phi)
            if t >= -_ZERO and v >= -_ZERO:
                return t, u, v
    return None


# (formula, segment letters, lengths built from (t, u, v), has backwards variant)
_Family = Tuple[
    Callable[[float, float, float], Optional[Tuple[float, float, float]]],
    Tuple[SegmentType, ...],
    Callable[[float, float, float], Tuple[float, ...]],
    bool,
]

_FAMILIES: List[_Family] = [
    # CSC
    (_lp_sp_lp, (L, S, L), lambda t, u, v: (t, u, v), False),
    (_lp_sp_rp, (L, S, R), lambda t, u, v: (t, u, v), False),
    # CCC
    (_lp_rm_l, (L, R, L), lambda t, u, v: (t, u, v), True),
    # CCCC
    (_lp_rup_lum_rm, (L, R, L, R), lambda t, u, v: (t, u, -u, v), False),
    (_lp_rum_lum_rp, (L, R, L, R), lambda t, u, v: (t, u, u, v), False),
    # CCSC
    (_lp_rm_sm_lm, (L, R, S, L), lambda t, u, v: (t, -_HALF_PI, u, v), True),
    (_lp_rm_sm_rm, (L, R, S, R), lambda t, u, v: (t, -_HALF_PI, u, v), True),
    # CCSCC
    (_lp_rm_s_lm_rp, (L, R, S, L, R), lambda t, u, v: (t, -_HALF_PI, u, -_HALF_PI, v), False),
]


def _candidate_words(x: float, y: float, phi: float) -> List[Word]:
    """All words produced by the base formulas and their symmetries, in a fixed order."""
    words: List[Word] = []
    xb = x * math.cos(phi) + y * math.sin(phi)
    yb = x * math.sin(phi) - y * math.cos(phi)

    for formula, segments, build, has_backwards in _FAMILIES:
        reflected = tuple(_REFLECTED[seg] for seg in segments)
        variants = [(x, y, False)]
        if has_backwards:
            variants.append((xb, yb, True))

        for vx, vy, backwards in variants:
            for sx, sy, sphi, flip, reflect in (
                (vx, vy, phi, False, False),
                (-vx, vy, -phi, True, False),  # timeflip
                (vx, -vy, -phi, False, True),  # reflect
                (-vx, -vy, phi, True, True),  # timeflip + reflect
            ):
                params = formula(sx, sy, sphi)
                if params is None:
                    continue

                lengths = build(*params)
                if flip:
                    lengths = tuple(-length for length in lengths)
                segs = reflected if reflect else segments
                if backwards:
                    segs = tuple(reversed(segs))
                    lengths = tuple(reversed(lengths))
                words.append((segs, lengths))

    return words


class ReedsSheppGenerator:
    """
    Analytic curve generator for goal connection.

    Wraps the Reeds-Shepp computation with the vehicle's turning radius
    and the sampling step used for collision checking.
    """

    def __init__(self, min_turn_radius: float, step_size: float = 0.1):
        self.min_turn_radius = min_turn_radius
        self.step_size = step_size

    def shortest_curve(self, start: Pose, goal: Pose) -> ReedsSheppPath | None:
        """Shortest curve from start to goal, or None if none exists."""
        return compute_reeds_shepp_path(start, goal, self.min_turn_radius)

    def connect(self, start: Pose, goal: Pose) -> Tuple[List[Pose], List[Gear]] | None:
        """
        Sampled Reeds-Shepp curve between two poses.

        Returns:
            (poses, gears) along the curve, or None if no curve exists
        """
        path = self.shortest_curve(start, goal)
        if path is None:
            return None

        return path.sample(step_size=self.step_size)

    def path_length(self, start: Pose, goal: Pose) -> float:
        """Reeds-Shepp path length (obstacle-free lower bound on travel)."""
        path = self.shortest_curve(start, goal)
        if path is None:
            return float('inf')
        return path.total_length
