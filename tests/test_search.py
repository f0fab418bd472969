"""Tests for search nodes and open/closed bookkeeping."""

import pytest

from open_space_planner.pose import Gear, Pose
from open_space_planner.search import (
    ClosedSet,
    EmptyFrontierError,
    NodeArena,
    SearchFrontier,
    SearchNode,
)


def _node(x, y, heading=0.0, g=0.0, h=0.0):
    node = SearchNode.seed(Pose(x, y, heading), 1.0, 0.1)
    node.cost_to_come = g
    node.heuristic_estimate = h
    return node


class TestSearchNode:
    """Tests for node construction."""

    def test_create_uses_last_pose(self):
        segment = [Pose(0.0, 0.0, 0.0), Pose(0.5, 0.0, 0.0), Pose(1.2, 0.3, 0.1)]
        node = SearchNode.create(segment, [Gear.REVERSE] * 3, 1.0, 0.1, steering=0.2)

        assert node.pose == segment[-1]
        assert node.index == (1, 0, 1)
        assert node.gear is Gear.REVERSE
        assert node.steering == pytest.approx(0.2)

    def test_create_rejects_empty_segment(self):
        with pytest.raises(ValueError):
            SearchNode.create([], [], 1.0, 0.1)

    def test_create_rejects_gear_mismatch(self):
        with pytest.raises(ValueError):
            SearchNode.create([Pose(0, 0, 0)], [Gear.FORWARD, Gear.FORWARD], 1.0, 0.1)

    def test_priority(self):
        assert _node(0, 0, g=2.0, h=3.5).priority == pytest.approx(5.5)


class TestNodeArena:
    """Tests for handle-based parent links."""

    def test_handles_are_sequential(self):
        arena = NodeArena()
        assert arena.add(_node(0, 0)) == 0
        assert arena.add(_node(1, 0)) == 1
        assert len(arena) == 2

    def test_rejects_double_add(self):
        arena = NodeArena()
        node = _node(0, 0)
        arena.add(node)
        with pytest.raises(ValueError):
            arena.add(node)

    def test_rejects_unknown_parent(self):
        # WHY: A dangling parent handle would make path reconstruction
        # read some unrelated node, or crash halfway through.
        arena = NodeArena()
        orphan = _node(0, 0)
        orphan.parent = 5
        with pytest.raises(ValueError):
            arena.add(orphan)

    def test_ancestors_walk_to_root(self):
        arena = NodeArena()
        root = _node(0, 0)
        arena.add(root)
        middle = _node(1, 0)
        middle.parent = root.handle
        arena.add(middle)
        leaf = _node(2, 0)
        leaf.parent = middle.handle
        arena.add(leaf)

        chain = list(arena.ancestors(leaf))
        assert chain == [leaf, middle, root]
        assert arena.parent_of(root) is None
        assert arena.get(middle.handle) is middle


class TestSearchFrontier:
    """Tests for the open set priority queue."""

    def setup_method(self):
        self.frontier = SearchFrontier()

    def test_pops_lowest_priority(self):
        self.frontier.insert_or_improve(_node(0, 0, g=5.0))
        self.frontier.insert_or_improve(_node(1, 0, g=1.0))
        self.frontier.insert_or_improve(_node(2, 0, g=3.0))

        popped = [self.frontier.pop_best().priority for _ in range(3)]
        assert popped == [1.0, 3.0, 5.0]

    def test_empty_pop_raises(self):
        with pytest.raises(EmptyFrontierError):
            self.frontier.pop_best()

    def test_decrease_key(self):
        # WHY: When a cheaper way into the same cell turns up, the frontier
        # must hold only the cheaper node and pop it at its new priority.
        worse = _node(0.2, 0.2, g=10.0)
        better = _node(0.7, 0.7, g=2.0)
        other = _node(5.0, 5.0, g=4.0)
        assert worse.index == better.index

        self.frontier.insert_or_improve(worse)
        self.frontier.insert_or_improve(other)
        assert self.frontier.insert_or_improve(better)

        assert len(self.frontier) == 2
        assert self.frontier.get(better.index) is better
        assert self.frontier.pop_best() is better
        assert self.frontier.pop_best() is other
        with pytest.raises(EmptyFrontierError):
            self.frontier.pop_best()

    def test_worse_duplicate_ignored(self):
        better = _node(0.2, 0.2, g=2.0)
        worse = _node(0.7, 0.7, g=10.0)

        self.frontier.insert_or_improve(better)
        assert not self.frontier.insert_or_improve(worse)
        assert self.frontier.get(better.index) is better

    def test_equal_priority_duplicate_keeps_first(self):
        first = _node(0.2, 0.2, g=3.0)
        second = _node(0.7, 0.7, g=3.0)

        self.frontier.insert_or_improve(first)
        assert not self.frontier.insert_or_improve(second)

    def test_ties_pop_in_insertion_order(self):
        # WHY: Equal priorities are common on open ground. Breaking ties by
        # insertion order keeps the search deterministic run to run.
        nodes = [_node(float(i), 0, g=1.0) for i in range(5)]
        for node in nodes:
            self.frontier.insert_or_improve(node)

        assert [self.frontier.pop_best() for _ in nodes] == nodes

    def test_contains(self):
        node = _node(3.0, 3.0)
        self.frontier.insert_or_improve(node)
        assert node.index in self.frontier
        self.frontier.pop_best()
        assert node.index not in self.frontier


class TestClosedSet:
    """Tests for the write-once closed set."""

    def test_add_and_lookup(self):
        closed = ClosedSet()
        node = _node(1.0, 1.0)
        closed.add(node)

        assert node.index in closed
        assert closed.get(node.index) is node
        assert len(closed) == 1

    def test_write_once(self):
        closed = ClosedSet()
        closed.add(_node(1.2, 1.2))
        with pytest.raises(ValueError):
            closed.add(_node(1.8, 1.8))
