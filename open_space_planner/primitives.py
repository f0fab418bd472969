"""Motion primitive expansion for Hybrid A*."""

from __future__ import annotations

import math
from typing import List, Tuple

from .config import PlannerConfig
from .pose import Gear
from .search import SearchNode
from .vehicle import Vehicle


class MotionPrimitiveExpander:
    """
    Generates kinematically feasible children of a search node.

    Half of the primitives drive forward and half in reverse; within each
    gear the steering angle sweeps linearly across [-max_steer, max_steer].
    Every primitive covers an arc of sqrt(2) * xy_grid_resolution so the
    child reliably lands in a neighbouring cell.
    """

    def __init__(self, vehicle: Vehicle, config: PlannerConfig):
        self.vehicle = vehicle
        self.config = config
        self.primitives = self._build_primitives()

    def _build_primitives(self) -> List[Tuple[float, int]]:
        """(steering, direction) per primitive index."""
        half = self.config.next_node_num // 2
        max_steer = self.config.max_steering
        spacing = 2 * max_steer / (half - 1)

        primitives = []
        for i in range(self.config.next_node_num):
            if i < half:
                steering = -max_steer + spacing * i
                direction = 1
            else:
                j = i - half
                steering = -max_steer + spacing * j
                direction = -1
            primitives.append((steering, direction))
        return primitives

    def _step_distances(self) -> List[float]:
        """Unsigned integration steps, with a partial last step to meet the arc exactly."""
        arc = self.config.primitive_arc_length
        step = self.config.step_size

        full_steps = int(math.floor(arc / step + 1e-9))
        distances = [step] * full_steps
        remainder = arc - full_steps * step
        if remainder > 1e-9:
            distances.append(remainder)
        return distances

    def expand(self, node: SearchNode) -> List[SearchNode]:
        """
        Integrate every primitive from node.

        Args:
            node: Node to expand; must already be stored in the arena

        Returns:
            next_node_num children, uncosted, with parent set to node
        """
        distances = self._step_distances()
        children = []

        for steering, direction in self.primitives:
            gear = Gear.FORWARD if direction > 0 else Gear.REVERSE
            pose = node.pose
            segment = [pose]

            for distance in distances:
                pose = self.vehicle.step(pose, steering, direction * distance)
                segment.append(pose)

            children.append(SearchNode.create(
                segment,
                [gear] * len(segment),
                self.config.xy_grid_resolution,
                self.config.heading_resolution,
                steering=steering,
                parent=node.handle
            ))

        return children
