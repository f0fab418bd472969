"""Simple example of Hybrid A* open-space planning."""

import math

import matplotlib.pyplot as plt

from open_space_planner import Box2d, HybridAStar, PlannerConfig, Pose, Vehicle, Visualizer
from open_space_planner.vehicle import VehicleConfig


def main():
    print("Simple Hybrid A* Planning Example")
    print("=" * 40)

    # 1. Describe the world with obstacle boxes
    bounds = (0.0, 40.0, 0.0, 40.0)
    obstacles = [
        Box2d.from_extents(16.0, 24.0, 13.0, 17.0),   # Rectangle obstacle
        Box2d.from_extents(12.0, 18.0, 26.5, 29.5),   # Another rectangle
        Box2d(30.0, 25.0, math.radians(30), 6.0, 2.0),  # Rotated block
        Box2d(10.0, 10.0, math.radians(45), 3.0, 3.0),  # Small diamond
    ]

    print(f"World: {bounds[1] - bounds[0]:.0f}m x {bounds[3] - bounds[2]:.0f}m")
    print(f"Obstacles: {len(obstacles)}")

    # 2. Create vehicle
    vehicle_config = VehicleConfig(
        wheelbase=2.5,   # 2.5m wheelbase
        width=1.8,       # 1.8m wide
        length=4.5,      # 4.5m long
    )
    vehicle = Vehicle(vehicle_config)

    # 3. Configure the planner
    config = PlannerConfig(
        xy_grid_resolution=1.0,
        heading_resolution=math.radians(10),
        max_steering=math.radians(35),
        xy_bounds=bounds
    )

    print(f"\nVehicle: {vehicle_config.length}m x {vehicle_config.width}m")
    print(f"Min turn radius: {vehicle.min_turn_radius(config.max_steering):.1f}m")

    # 4. Define start and goal
    start = Pose(x=5, y=5, heading=0.5)      # Bottom-left, facing NE
    goal = Pose(x=34, y=34, heading=0.5)     # Top-right, facing NE

    print(f"\nStart: ({start.x}, {start.y}), heading={start.heading:.2f} rad")
    print(f"Goal:  ({goal.x}, {goal.y}), heading={goal.heading:.2f} rad")

    # 5. Create planner and find path
    planner = HybridAStar(vehicle, config)

    print("\nPlanning...")
    result = planner.plan(start, goal, obstacles)

    if not result.success:
        print(f"No path found: {result.reason.value}")
        return

    print(f"Found path with {len(result.trajectory)} points")
    print(f"Expanded {result.expanded_nodes} nodes in {result.planning_time * 1000:.0f} ms")

    # 6. Visualize
    viz = Visualizer(vehicle, obstacles, bounds)
    fig = viz.plot_planning_result(
        start, goal,
        trajectory=result.trajectory,
        title="Hybrid A* - Simple Example"
    )

    plt.show()


if __name__ == "__main__":
    main()
