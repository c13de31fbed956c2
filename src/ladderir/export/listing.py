"""Mnemonic listing export.

Walks a built Program (or single Network) and regenerates rows in the
7-column listing format accepted by the parser.  Re-parsing the output
yields the same series/parallel structure.
"""

from __future__ import annotations

import csv
from collections.abc import Generator, Mapping
from io import StringIO
from typing import Union

from ladderir.model.nodes import (
    BlockNode,
    BlockType,
    CoilNode,
    CoilType,
    ComparisonNode,
    ContactNode,
    ContactType,
    CounterNode,
    LogicNode,
    MathNode,
    TimeBase,
    TimerNode,
)
from ladderir.model.program import Network, Program

HEADER = ("No", "Step", "Instruction", "Operand1", "Operand2", "Operand3", "Comment")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def to_listing(target: Union[Program, Network], *, header: bool = True) -> str:
    """Emit the mnemonic listing for a Program or single Network."""
    w = ListingWriter(header=header)
    if isinstance(target, Program):
        w.write_program(target)
    elif isinstance(target, Network):
        w.write_network(target)
    else:
        raise TypeError(
            f"to_listing() expects Program or Network, got {type(target).__name__}"
        )
    return w.getvalue()


# ---------------------------------------------------------------------------
# Mnemonic maps
# ---------------------------------------------------------------------------

_CONTACT_SUFFIX: dict[ContactType, str] = {
    ContactType.NO: "",
    ContactType.NC: "N",
    ContactType.RISING: "P",
    ContactType.FALLING: "F",
}

_COIL_MNEMONIC: dict[CoilType, str] = {
    CoilType.OUT: "OUT",
    CoilType.SET: "SET",
    CoilType.RST: "RST",
}


# ---------------------------------------------------------------------------
# ListingWriter
# ---------------------------------------------------------------------------

class ListingWriter:
    """Emits listing rows into an internal buffer."""

    def __init__(self, *, header: bool = True) -> None:
        self._buf = StringIO()
        self._csv = csv.writer(self._buf, lineterminator="\n")
        self._seq = 0
        self._step = 0
        if header:
            self._csv.writerow(HEADER)

    def getvalue(self) -> str:
        return self._buf.getvalue()

    def _row(self, instruction: str, op1: object = None, op2: object = None,
             op3: object = None, comment: str | None = None) -> None:
        self._seq += 1
        self._csv.writerow([
            self._seq,
            self._step,
            instruction,
            "" if op1 is None else str(op1),
            "" if op2 is None else str(op2),
            "" if op3 is None else str(op3),
            comment or "",
        ])

    # -- Program / network --------------------------------------------------

    def write_program(self, program: Program) -> None:
        for network in program.networks:
            self.write_network(network)

    def write_network(self, network: Network) -> None:
        self._step = network.step
        root = network.root
        if root is not None:
            self._write_load(root, network.node_map())
        for tap in network.taps:
            self._write_tap(tap)

    # -- Logic --------------------------------------------------------------

    def _write_load(self, root: LogicNode, nodes: Mapping[str, LogicNode]) -> bool:
        """Emit *root* as one new stack item.  False if nothing was pushed.

        Each block is handled by a :meth:`_load_steps` generator that
        yields the child subtrees it needs loaded; the driver loop keeps
        those generators on an explicit stack instead of recursing.
        """
        pending = [self._load_steps(root, nodes)]
        sent: bool | None = None
        while pending:
            try:
                child = pending[-1].send(sent)
            except StopIteration as done:
                pending.pop()
                sent = done.value
                continue
            pending.append(self._load_steps(child, nodes))
            sent = None
        return bool(sent)

    def _load_steps(
        self, node: LogicNode, nodes: Mapping[str, LogicNode],
    ) -> Generator[LogicNode, bool | None, bool]:
        if not isinstance(node, BlockNode):
            self._write_condition(node, "LOAD")
            return True

        pushed = False
        for child_id in node.children:
            child = nodes[child_id]
            if not pushed:
                pushed = yield child
            elif node.block_type == BlockType.SERIES and not isinstance(child, BlockNode):
                self._write_condition(child, "AND")
            elif (yield child):
                self._row("ANDB" if node.block_type == BlockType.SERIES else "ORB")
        return pushed

    def _write_condition(self, node: LogicNode, prefix: str) -> None:
        if isinstance(node, ContactNode):
            self._row(prefix + _CONTACT_SUFFIX[node.contact_type], node.address, comment=node.comment)
        elif isinstance(node, ComparisonNode):
            # Comparisons load with "LD", not "LOAD"
            head = "LD" if prefix == "LOAD" else prefix
            self._row(head + node.operator.value, node.left, node.right, comment=node.comment)
        else:
            raise TypeError(f"Cannot emit {node.kind} node on the logic path")

    # -- Taps ---------------------------------------------------------------

    def _write_tap(self, node: LogicNode) -> None:
        if isinstance(node, CoilNode):
            mnemonic = _COIL_MNEMONIC[node.coil_type]
            if node.negated:
                mnemonic += "N"
            self._row(mnemonic, node.address, comment=node.comment)
        elif isinstance(node, TimerNode):
            base = "s" if node.time_base == TimeBase.S else "ms"
            self._row(node.timer_type.value, node.address, node.preset, base, comment=node.comment)
        elif isinstance(node, CounterNode):
            self._row(node.counter_type.value, node.address, node.preset, comment=node.comment)
        elif isinstance(node, MathNode):
            if node.is_move:
                self._row(node.operator.value, node.source, node.destination, comment=node.comment)
            else:
                self._row(
                    node.operator.value, node.source, node.source2, node.destination,
                    comment=node.comment,
                )
        else:
            raise TypeError(f"Cannot emit {node.kind} node as an output")
