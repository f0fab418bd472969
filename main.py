"""Demo script for Hybrid A* open-space path planning."""

from __future__ import annotations

import argparse
import logging
import math
from dataclasses import replace

import matplotlib.pyplot as plt

from open_space_planner import HybridAStar, PlannerConfig, Vehicle, Visualizer
from open_space_planner.config import load_planner_config
from open_space_planner.pose import Gear
from open_space_planner.visualization import create_scenario


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Hybrid A* Open-Space Planning Demo")

    p.add_argument(
        "--scenario",
        type=str,
        default="parking",
        choices=["open_field", "wall", "parking", "u_turn", "enclosed"],
        help="Predefined scenario to run"
    )
    p.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file with planner parameters"
    )
    p.add_argument(
        "--save",
        type=str,
        default=None,
        help="Save result to image file"
    )
    p.add_argument(
        "--animate",
        action="store_true",
        help="Create animation"
    )
    p.add_argument(
        "--save_gif",
        type=str,
        default=None,
        help="Save animation as GIF"
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Log search details"
    )

    return p.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    print("=" * 60)
    print("HYBRID A* OPEN-SPACE PLANNING")
    print("=" * 60)
    print(f"Scenario: {args.scenario}")
    print()

    # Setup scenario
    obstacles, start, goal, bounds = create_scenario(args.scenario)
    config = load_planner_config(args.config) if args.config else PlannerConfig()
    if config.xy_bounds is None:
        config = replace(config, xy_bounds=bounds)

    vehicle = Vehicle()
    planner = HybridAStar(vehicle, config)

    print(f"Start: ({start.x:.1f}, {start.y:.1f}, {math.degrees(start.heading):.0f} deg)")
    print(f"Goal:  ({goal.x:.1f}, {goal.y:.1f}, {math.degrees(goal.heading):.0f} deg)")
    print(f"Obstacles: {len(obstacles)}")
    print()

    # Plan path
    print("Planning...")
    result = planner.plan(start, goal, obstacles)
    print(result)

    if not result.success:
        print("Failed to find path!")
        return

    switches = sum(
        1 for a, b in zip(result.trajectory, result.trajectory[1:]) if a.gear is not b.gear
    )
    reverse = sum(1 for p in result.trajectory if p.gear is Gear.REVERSE)
    print(f"Path found with {len(result.trajectory)} points, "
          f"{reverse} in reverse, {switches} gear switches")

    # Visualize
    viz = Visualizer(vehicle, obstacles, config.xy_bounds)

    if args.animate or args.save_gif:
        anim = viz.create_animation(
            result.trajectory, start, goal,
            interval=80,
            save_path=args.save_gif
        )
        if not args.save_gif:
            plt.show()
    else:
        fig = viz.plot_planning_result(
            start, goal,
            trajectory=result.trajectory,
            title=f"Hybrid A* - {args.scenario.replace('_', ' ').title()} Scenario",
            footprint_every=8
        )

        if args.save:
            fig.savefig(args.save, dpi=150, bbox_inches='tight')
            print(f"Result saved to {args.save}")
        else:
            plt.show()

    print("\nDone!")


if __name__ == "__main__":
    main()
