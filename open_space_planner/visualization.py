"""Visualization utilities for open-space Hybrid A* planning."""

from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple

import matplotlib.pyplot as plt
import matplotlib.patches as patches
from matplotlib.animation import FuncAnimation

from .geometry import Box2d
from .pose import Gear, Pose, TrajectoryPoint
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

Bounds = Tuple[float, float, float, float]


class Visualizer:
    """Visualization tools for path planning."""

    # Color scheme
    COLORS = {
        'obstacle': '#2c3e50',
        'forward': '#e74c3c',
        'reverse': '#2980b9',
        'start': '#3498db',
        'goal': '#9b59b6',
        'vehicle': '#f39c12',
        'bounds': '#7f8c8d',
    }

    def __init__(
        self,
        vehicle: Vehicle,
        obstacles: Sequence[Box2d],
        xy_bounds: Bounds | None = None
    ):
        self.vehicle = vehicle
        self.obstacles = list(obstacles)
        self.xy_bounds = xy_bounds

    def plot_environment(self, ax: plt.Axes | None = None) -> plt.Axes:
        """Plot obstacle boxes and world bounds."""
        if ax is None:
            fig, ax = plt.subplots(figsize=(10, 10))

        for obstacle in self.obstacles:
            ax.add_patch(patches.Polygon(
                obstacle.corners(),
                closed=True,
                facecolor=self.COLORS['obstacle'],
                edgecolor='black',
                alpha=0.8
            ))

        if self.xy_bounds is not None:
            x_min, x_max, y_min, y_max = self.xy_bounds
            ax.add_patch(patches.Rectangle(
                (x_min, y_min), x_max - x_min, y_max - y_min,
                fill=False,
                edgecolor=self.COLORS['bounds'],
                linestyle='--',
                linewidth=1.5
            ))
            ax.set_xlim(x_min - 1, x_max + 1)
            ax.set_ylim(y_min - 1, y_max + 1)

        ax.set_xlabel('X (m)')
        ax.set_ylabel('Y (m)')
        ax.set_aspect('equal')
        ax.grid(True, alpha=0.3)

        return ax

    def plot_vehicle(
        self,
        pose: Pose,
        ax: plt.Axes,
        color: str | None = None,
        alpha: float = 1.0,
        label: str | None = None
    ) -> None:
        """Plot vehicle at given pose."""
        color = color or self.COLORS['vehicle']
        footprint = self.vehicle.footprint_corners(pose)

        # Vehicle body
        ax.add_patch(patches.Polygon(
            footprint,
            closed=True,
            facecolor=color,
            edgecolor='black',
            alpha=alpha,
            linewidth=1.5,
            label=label
        ))

        # Direction arrow
        arrow_len = self.vehicle.config.length * 0.4
        ax.arrow(
            pose.x, pose.y,
            arrow_len * math.cos(pose.heading),
            arrow_len * math.sin(pose.heading),
            head_width=0.3,
            head_length=0.2,
            fc='white',
            ec='black',
            alpha=alpha
        )

    def plot_trajectory(
        self,
        trajectory: List[TrajectoryPoint],
        ax: plt.Axes,
        linewidth: float = 2.0,
        alpha: float = 1.0
    ) -> None:
        """Plot trajectory, colored by gear."""
        if not trajectory:
            return

        labelled = set()
        gear = trajectory[1].gear if len(trajectory) > 1 else trajectory[0].gear

        # Split into runs of constant gear sharing their junction point
        run = [trajectory[0]]
        for point in trajectory[1:]:
            if point.gear is not gear:
                self._plot_run(run, gear, ax, linewidth, alpha, labelled)
                run = [run[-1]]
                gear = point.gear
            run.append(point)
        self._plot_run(run, gear, ax, linewidth, alpha, labelled)

    def _plot_run(self, run, gear, ax, linewidth, alpha, labelled) -> None:
        key = 'forward' if gear is Gear.FORWARD else 'reverse'
        label = None if key in labelled else key.title()
        labelled.add(key)
        ax.plot([p.x for p in run], [p.y for p in run],
                color=self.COLORS[key], linewidth=linewidth, alpha=alpha, label=label)

    def plot_start_goal(self, start: Pose, goal: Pose, ax: plt.Axes) -> None:
        """Plot start and goal poses."""
        self.plot_vehicle(start, ax, color=self.COLORS['start'], alpha=0.6, label='Start')
        self.plot_vehicle(goal, ax, color=self.COLORS['goal'], alpha=0.6, label='Goal')

    def plot_planning_result(
        self,
        start: Pose,
        goal: Pose,
        trajectory: List[TrajectoryPoint] | None = None,
        title: str = "Hybrid A* Path Planning",
        footprint_every: int = 0
    ) -> plt.Figure:
        """Create complete visualization of planning result."""
        fig, ax = plt.subplots(figsize=(12, 10))

        # Environment
        self.plot_environment(ax)

        if trajectory:
            self.plot_trajectory(trajectory, ax)
            if footprint_every > 0:
                for point in trajectory[::footprint_every]:
                    self.plot_vehicle(point.pose, ax, alpha=0.15)

        # Start and goal
        self.plot_start_goal(start, goal, ax)

        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.legend(loc='upper right')

        plt.tight_layout()
        return fig

    def create_animation(
        self,
        trajectory: List[TrajectoryPoint],
        start: Pose,
        goal: Pose,
        interval: int = 100,
        save_path: str | None = None
    ) -> FuncAnimation:
        """
        Create animation of vehicle following a trajectory.

        Args:
            trajectory: Trajectory to animate
            start: Start pose
            goal: Goal pose
            interval: Frame interval in ms
            save_path: If provided, save animation to file

        Returns:
            Animation object
        """
        fig, ax = plt.subplots(figsize=(12, 10))

        def init():
            ax.clear()
            self.plot_environment(ax)
            self.plot_trajectory(trajectory, ax, alpha=0.3)
            self.plot_start_goal(start, goal, ax)
            ax.set_title('Hybrid A* Path Planning', fontsize=14, fontweight='bold')
            return []

        def animate(frame):
            ax.clear()
            self.plot_environment(ax)

            # Trajectory driven so far
            if frame > 0:
                self.plot_trajectory(trajectory[:frame + 1], ax)

            # Current vehicle pose
            point = trajectory[frame]
            self.plot_vehicle(point.pose, ax, color=self.COLORS['vehicle'])

            # Start and goal (faded)
            self.plot_vehicle(start, ax, color=self.COLORS['start'], alpha=0.3)
            self.plot_vehicle(goal, ax, color=self.COLORS['goal'], alpha=0.3)

            gear = 'R' if point.gear is Gear.REVERSE else 'D'
            ax.set_title(f'Hybrid A* Path Planning - Step {frame + 1}/{len(trajectory)} [{gear}]',
                         fontsize=14, fontweight='bold')
            return []

        anim = FuncAnimation(
            fig, animate, init_func=init,
            frames=len(trajectory), interval=interval, blit=False
        )

        if save_path:
            anim.save(save_path, writer='pillow', fps=1000 // interval)
            logger.info("Animation saved to %s", save_path)

        return anim


def create_scenario(
    scenario: str = "parking"
) -> Tuple[List[Box2d], Pose, Pose, Bounds]:
    """
    Create predefined test scenarios.

    Args:
        scenario: One of "open_field", "wall", "parking", "u_turn", "enclosed"

    Returns:
        (obstacles, start_pose, goal_pose, xy_bounds)
    """
    if scenario == "open_field":
        obstacles = []
        start = Pose(0.0, 0.0, 0.0)
        goal = Pose(5.0, 0.0, 0.0)
        bounds = (-10.0, 15.0, -10.0, 10.0)

    elif scenario == "wall":
        # Wide wall straight across the line from start to goal
        obstacles = [Box2d(8.0, 0.0, 0.0, 1.0, 8.0)]
        start = Pose(0.0, 0.0, 0.0)
        goal = Pose(16.0, 0.0, 0.0)
        bounds = (-6.0, 22.0, -12.0, 12.0)

    elif scenario == "parking":
        # Reverse into a bay between two parked cars
        obstacles = [
            Box2d.from_extents(0.0, 30.0, -1.0, 0.0),  # Curb
            Box2d(10.0, 2.5, math.pi / 2, 4.5, 2.0),  # Parked car, left of bay
            Box2d(16.0, 2.5, math.pi / 2, 4.5, 2.0),  # Parked car, right of bay
        ]
        start = Pose(6.0, 9.0, 0.0)
        goal = Pose(13.0, 1.5, math.pi / 2)
        bounds = (0.0, 30.0, -1.0, 16.0)

    elif scenario == "u_turn":
        # Central block forcing a turn around
        obstacles = [Box2d(15.0, 15.0, 0.0, 18.0, 8.0)]
        start = Pose(5.0, 6.0, 0.0)
        goal = Pose(5.0, 24.0, math.pi)
        bounds = (0.0, 32.0, 0.0, 30.0)

    elif scenario == "enclosed":
        # Goal boxed in on all sides
        obstacles = [
            Box2d.from_extents(10.0, 20.0, 7.0, 9.0),
            Box2d.from_extents(10.0, 20.0, -9.0, -7.0),
            Box2d.from_extents(10.0, 12.0, -9.0, 9.0),
            Box2d.from_extents(18.0, 20.0, -9.0, 9.0),
        ]
        start = Pose(0.0, 0.0, 0.0)
        goal = Pose(15.0, 0.0, math.pi / 2)
        bounds = (-6.0, 24.0, -12.0, 12.0)

    else:
        raise ValueError(f"Unknown scenario: {scenario}")

    return obstacles, start, goal, bounds
