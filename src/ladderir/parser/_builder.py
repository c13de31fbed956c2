"""Program builder: rows to a positioned Program tree."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import NamedTuple

from ladderir.model.devices import parse_device_address
from ladderir.model.nodes import BlockNode, BlockType, GridPosition, LogicNode, is_tap, iter_nodes
from ladderir.model.program import (
    DataType,
    Network,
    Program,
    ProgramMetadata,
    SymbolEntry,
    SymbolTable,
)

from ._instructions import InstructionParser
from ._rows import Row, RowReader, group_by_step

logger = logging.getLogger(__name__)


class GridSpan(NamedTuple):
    """Number of rows and columns a laid-out subtree occupies."""

    rows: int
    cols: int


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

def layout(
    root: LogicNode, nodes: Mapping[str, LogicNode], row: int = 0, col: int = 0,
) -> tuple[dict[str, LogicNode], GridSpan]:
    """Position the tree under *root* and return its nodes and span.

    Returns copies of every node in the tree, keyed by id in pre-order,
    each with its grid position assigned.  Series children advance left
    to right from the parent's column on the parent's row; parallel
    children advance top to bottom from the parent's row in the
    parent's column.
    """
    order = list(iter_nodes(root, nodes))

    # Children come after their parent in pre-order, so a reverse pass
    # sees every subtree before the block that contains it.
    spans: dict[str, GridSpan] = {}
    for node in reversed(order):
        if not isinstance(node, BlockNode):
            spans[node.id] = GridSpan(1, 1)
            continue
        child_spans = [spans[child_id] for child_id in node.children]
        if node.block_type == BlockType.SERIES:
            spans[node.id] = GridSpan(
                rows=max((s.rows for s in child_spans), default=1),
                cols=max(sum(s.cols for s in child_spans), 1),
            )
        else:
            spans[node.id] = GridSpan(
                rows=max(sum(s.rows for s in child_spans), 1),
                cols=max((s.cols for s in child_spans), default=1),
            )

    grids = {root.id: GridPosition(row=row, col=col)}
    placed: dict[str, LogicNode] = {}
    for node in order:
        grid = grids[node.id]
        placed[node.id] = node.model_copy(update={"grid": grid})
        if not isinstance(node, BlockNode):
            continue
        r, c = grid.row, grid.col
        for child_id in node.children:
            grids[child_id] = GridPosition(row=r, col=c)
            if node.block_type == BlockType.SERIES:
                c += spans[child_id].cols
            else:
                r += spans[child_id].rows
    return placed, spans[root.id]


def flatten(root: LogicNode, nodes: Mapping[str, LogicNode]) -> list[LogicNode]:
    """Pre-order list of *root* and all its descendants."""
    return list(iter_nodes(root, nodes))


# ---------------------------------------------------------------------------
# ProgramBuilder
# ---------------------------------------------------------------------------

class ProgramBuilder:
    """Drives the row reader and instruction parser over a whole listing."""

    def __init__(self) -> None:
        self.parser = InstructionParser()

    def build_program(self, text: str, metadata: ProgramMetadata | None = None) -> Program:
        return self.build_from_rows(RowReader(text).read_all(), metadata)

    def build_from_rows(self, rows: list[Row], metadata: ProgramMetadata | None = None) -> Program:
        self.parser.reset_all()
        groups = group_by_step(rows)
        networks = [self.build_network(step, groups[step]) for step in sorted(groups)]
        symbol_table = build_symbol_table(rows)

        logger.info(
            "Built program with %d networks and %d symbols",
            len(networks), len(symbol_table),
        )
        return Program(
            metadata=metadata or ProgramMetadata(),
            networks=networks,
            symbol_table=symbol_table,
        )

    def build_network(self, step: int, rows: list[Row]) -> Network:
        self.parser.reset()

        taps: list[LogicNode] = []
        comment: str | None = None
        for row in rows:
            node = self.parser.parse_instruction(row)
            if node is not None and is_tap(node):
                taps.append(node)
            if comment is None and row.comment and row.comment.strip():
                comment = row.comment.strip()

        root = self.parser.result()
        nodes: list[LogicNode] = []
        width = 0
        if root is not None:
            placed, span = layout(root, self.parser.nodes)
            width = span.cols
            nodes.extend(placed.values())

        for i, tap in enumerate(taps):
            nodes.append(tap.model_copy(update={"grid": GridPosition(row=i, col=width)}))

        logger.debug(
            "Network %d: %d rows, %d nodes, %d taps", step, len(rows), len(nodes), len(taps),
        )
        return Network(
            id=f"network_{step}",
            step=step,
            nodes=nodes,
            root_id=root.id if root is not None else None,
            comment=comment,
        )

    def build_single_network(self, text: str, step: int = 0) -> Network:
        """Parse *text* as one network, ignoring its step column."""
        return self.build_network(step, RowReader(text).read_all())


def build_symbol_table(rows: list[Row]) -> SymbolTable:
    """Collect every referenced device address with its first comment."""
    entries: dict[str, SymbolEntry] = {}
    for row in rows:
        for operand in row.operands:
            if not operand or not operand[0].isalpha():
                continue
            addr = parse_device_address(operand)
            if addr is None:
                continue
            key = str(addr)
            if key in entries:
                continue
            is_bool = addr.device.is_bit or addr.bit_index is not None
            entries[key] = SymbolEntry(
                address=addr,
                comment=row.comment.strip() if row.comment else None,
                data_type=DataType.BOOL if is_bool else DataType.WORD,
            )
    return SymbolTable(entries=entries)
