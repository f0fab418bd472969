"""Search nodes and the open/closed bookkeeping of Hybrid A*."""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Sequence, Tuple

from .pose import Gear, Index, Pose, discretize


@dataclass
class SearchNode:
    """
    Search node for Hybrid A*.

    `segment` runs from the parent's pose to `pose` and is what gets
    collision checked and emitted on reconstruction. Parent links are arena
    handles, so the node graph is a tree owned by a single NodeArena.
    """

    pose: Pose
    segment: List[Pose]
    gears: List[Gear]  # Gear driven to reach each pose of segment
    index: Index
    steering: float = 0.0  # Steering used to reach this node (rad)
    cost_to_come: float = 0.0  # g
    heuristic_estimate: float = 0.0  # h
    parent: int | None = None  # Arena handle of the parent
    handle: int | None = field(default=None, compare=False)

    @classmethod
    def create(
        cls,
        segment: Sequence[Pose],
        gears: Sequence[Gear],
        xy_resolution: float,
        heading_resolution: float,
        steering: float = 0.0,
        parent: int | None = None
    ) -> SearchNode:
        """Build a node ending at the last pose of segment."""
        if not segment or len(segment) != len(gears):
            raise ValueError("segment must be non-empty with one gear per pose")

        pose = segment[-1]
        return cls(
            pose=pose,
            segment=list(segment),
            gears=list(gears),
            index=discretize(pose, xy_resolution, heading_resolution),
            steering=steering,
            parent=parent
        )

    @classmethod
    def seed(
        cls,
        pose: Pose,
        xy_resolution: float,
        heading_resolution: float
    ) -> SearchNode:
        """Single-pose node for the start or goal configuration."""
        return cls.create([pose], [Gear.FORWARD], xy_resolution, heading_resolution)

    @property
    def gear(self) -> Gear:
        """Gear of the last motion into this node."""
        return self.gears[-1]

    @property
    def priority(self) -> float:
        return self.cost_to_come + self.heuristic_estimate


class NodeArena:
    """Append-only node storage; handles are list positions."""

    def __init__(self):
        self._nodes: List[SearchNode] = []

    def add(self, node: SearchNode) -> int:
        if node.handle is not None:
            raise ValueError(f"node already stored with handle {node.handle}")
        if node.parent is not None and not 0 <= node.parent < len(self._nodes):
            raise ValueError(f"unknown parent handle {node.parent}")

        node.handle = len(self._nodes)
        self._nodes.append(node)
        return node.handle

    def get(self, handle: int) -> SearchNode:
        return self._nodes[handle]

    def parent_of(self, node: SearchNode) -> SearchNode | None:
        if node.parent is None:
            return None
        return self._nodes[node.parent]

    def ancestors(self, node: SearchNode) -> Iterator[SearchNode]:
        """Yield node, its parent, ... up to the start node."""
        current: SearchNode | None = node
        while current is not None:
            yield current
            current = self.parent_of(current)

    def __len__(self) -> int:
        return len(self._nodes)


class EmptyFrontierError(LookupError):
    """Raised when popping from an exhausted frontier."""


class SearchFrontier:
    """
    Open set: one node per index plus a min-priority queue.

    Decrease-key is done by lazy deletion: improving a node pushes a fresh
    heap entry and stale entries are skipped on pop. Ties on priority go to
    the entry pushed first.
    """

    def __init__(self):
        self._entries: Dict[Index, Tuple[SearchNode, int]] = {}
        self._heap: List[Tuple[float, int, Index]] = []
        self._counter = itertools.count()

    def insert_or_improve(self, node: SearchNode) -> bool:
        """
        Store node unless an equal-or-better one already holds its index.

        Returns:
            True if node was stored (inserted or replaced a worse one)
        """
        stored = self._entries.get(node.index)
        if stored is not None and stored[0].priority <= node.priority:
            return False

        seq = next(self._counter)
        self._entries[node.index] = (node, seq)
        heapq.heappush(self._heap, (node.priority, seq, node.index))
        return True

    def pop_best(self) -> SearchNode:
        """Remove and return the lowest-priority node."""
        while self._heap:
            _, seq, index = heapq.heappop(self._heap)
            stored = self._entries.get(index)
            if stored is None or stored[1] != seq:
                continue  # Stale entry

            del self._entries[index]
            return stored[0]

        raise EmptyFrontierError("open set is empty")

    def get(self, index: Index) -> SearchNode | None:
        stored = self._entries.get(index)
        return stored[0] if stored is not None else None

    def __contains__(self, index: Index) -> bool:
        return index in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class ClosedSet:
    """Finalized nodes by index. Each index can be written once."""

    def __init__(self):
        self._nodes: Dict[Index, SearchNode] = {}

    def add(self, node: SearchNode) -> None:
        if node.index in self._nodes:
            raise ValueError(f"index {node.index} is already closed")
        self._nodes[node.index] = node

    def get(self, index: Index) -> SearchNode | None:
        return self._nodes.get(index)

    def __contains__(self, index: Index) -> bool:
        return index in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)
