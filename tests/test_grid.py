"""Tests for grid measurement utilities."""

from conftest import build_network

from ladderir.analysis import (
    GridBounds,
    GridSize,
    all_positions,
    bounds,
    count_by_column,
    count_by_row,
    grid_size,
    is_occupied,
    leaf_nodes,
    node_at,
    nodes_at,
    nodes_of_kind,
)
from ladderir.model import Network

# Two series branches in parallel, each two cells wide, plus one coil:
#
#   row 0: M0001 M0002 | OUT M0010
#   row 1: M0003 M0004 |
NESTED = ("LOAD M0001", "AND M0002", "LOAD M0003", "AND M0004", "ORB", "OUT M0010")


class TestSize:
    def test_nested(self):
        assert grid_size(build_network(*NESTED)) == GridSize(width=3, height=2)

    def test_single_contact(self):
        assert grid_size(build_network("LOAD M0001")) == GridSize(1, 1)

    def test_empty(self):
        assert grid_size(Network(id="n", step=0)) == GridSize(0, 0)


class TestLookup:
    def test_node_at(self):
        net = build_network(*NESTED)
        assert str(node_at(net, 1, 1).address) == "M0004"
        assert str(node_at(net, 0, 2).address) == "M0010"

    def test_containers_ignored(self):
        net = build_network(*NESTED)
        # Root and both series blocks sit at (0, 0) or (1, 0) too
        assert len(nodes_at(net, 0, 0)) == 1
        assert node_at(net, 0, 0).kind == "contact"

    def test_occupancy(self):
        net = build_network(*NESTED)
        assert is_occupied(net, 1, 0)
        assert not is_occupied(net, 1, 2)
        assert not is_occupied(net, 5, 5)

    def test_all_positions(self):
        net = build_network(*NESTED)
        assert all_positions(net) == [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1)]

    def test_nodes_of_kind(self):
        net = build_network(*NESTED)
        assert len(nodes_of_kind(net, "block")) == 3
        assert len(nodes_of_kind(net, "coil")) == 1

    def test_leaf_nodes(self):
        assert len(leaf_nodes(build_network(*NESTED))) == 5


class TestCounts:
    def test_by_row(self):
        assert count_by_row(build_network(*NESTED)) == {0: 3, 1: 2}

    def test_by_column(self):
        assert count_by_column(build_network(*NESTED)) == {0: 2, 1: 2, 2: 1}


class TestBounds:
    def test_subset(self):
        net = build_network(*NESTED)
        subset = [node_at(net, 0, 1), node_at(net, 1, 0)]
        assert bounds(subset) == GridBounds(min_row=0, min_col=0, max_row=1, max_col=1)

    def test_empty(self):
        assert bounds([]) == GridBounds(0, 0, 0, 0)

    def test_blocks_only(self):
        net = build_network(*NESTED)
        assert bounds(nodes_of_kind(net, "block")) == GridBounds(0, 0, 0, 0)
