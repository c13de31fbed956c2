"""Read-only measurements over a positioned network.

Container (block) nodes share their first child's cell and are ignored
by the size and occupancy queries.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from ladderir.model.nodes import LogicNode, is_block
from ladderir.model.program import Network


class GridSize(NamedTuple):
    width: int
    height: int


class GridBounds(NamedTuple):
    min_row: int
    min_col: int
    max_row: int
    max_col: int


def leaf_nodes(network: Network) -> list[LogicNode]:
    return [n for n in network.nodes if not is_block(n)]


def grid_size(network: Network) -> GridSize:
    """Width and height as max occupied column/row + 1 (0 x 0 if empty)."""
    leaves = leaf_nodes(network)
    if not leaves:
        return GridSize(0, 0)
    return GridSize(
        width=max(n.grid.col for n in leaves) + 1,
        height=max(n.grid.row for n in leaves) + 1,
    )


def nodes_at(network: Network, row: int, col: int) -> list[LogicNode]:
    return [n for n in leaf_nodes(network) if n.grid.row == row and n.grid.col == col]


def node_at(network: Network, row: int, col: int) -> LogicNode | None:
    found = nodes_at(network, row, col)
    return found[0] if found else None


def is_occupied(network: Network, row: int, col: int) -> bool:
    return node_at(network, row, col) is not None


def all_positions(network: Network) -> list[tuple[int, int]]:
    """Occupied ``(row, col)`` cells, sorted row-major."""
    return sorted({(n.grid.row, n.grid.col) for n in leaf_nodes(network)})


def nodes_of_kind(network: Network, kind: str) -> list[LogicNode]:
    return [n for n in network.nodes if n.kind == kind]


def count_by_row(network: Network) -> dict[int, int]:
    counts: dict[int, int] = {}
    for n in leaf_nodes(network):
        counts[n.grid.row] = counts.get(n.grid.row, 0) + 1
    return dict(sorted(counts.items()))


def count_by_column(network: Network) -> dict[int, int]:
    counts: dict[int, int] = {}
    for n in leaf_nodes(network):
        counts[n.grid.col] = counts.get(n.grid.col, 0) + 1
    return dict(sorted(counts.items()))


def bounds(nodes: Iterable[LogicNode]) -> GridBounds:
    """Bounding box of the non-block nodes given; all zeros if none."""
    leaves = [n for n in nodes if not is_block(n)]
    if not leaves:
        return GridBounds(0, 0, 0, 0)
    return GridBounds(
        min_row=min(n.grid.row for n in leaves),
        min_col=min(n.grid.col for n in leaves),
        max_row=max(n.grid.row for n in leaves),
        max_col=max(n.grid.col for n in leaves),
    )
