"""Stack-machine instruction parser.

Rebuilds the series/parallel structure of one rung from its linear
mnemonic stream.  LOAD pushes, AND combines with the stack top in
series, OR registers a pending parallel branch, ANDB/ORB combine the
two topmost items.  Outputs, timers, counters and arithmetic nodes are
taps: they are returned to the caller but never enter the stack.

Parsing is lenient.  Unknown mnemonics and unusable operands produce no
node; AND on an empty stack degrades to LOAD; ANDB/ORB on a stack
holding fewer than two items produce nothing.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from ladderir.model.devices import DeviceAddress, parse_device_address
from ladderir.model.nodes import (
    AddressOperand,
    BlockNode,
    BlockType,
    CoilNode,
    ComparisonNode,
    ContactNode,
    CounterNode,
    ImmediateOperand,
    LogicNode,
    MathNode,
    MathOperator,
    Operand,
    TimeBase,
    TimerNode,
)

from ._mnemonics import Family, MnemonicInfo, lookup
from ._rows import Row

logger = logging.getLogger(__name__)

_DECIMAL_RE = re.compile(r"^-?\d+$")
_HEX_RE = re.compile(r"^(?:H|0x)([0-9A-F]+)$", re.IGNORECASE)

_SECONDS_UNITS = frozenset({"s", "sec", "second"})


# ---------------------------------------------------------------------------
# Operand helpers
# ---------------------------------------------------------------------------

def parse_operand(text: str | None) -> Operand | None:
    """Interpret an operand as decimal, hex, or a device address.

    The first interpretation that succeeds wins.
    """
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None
    if _DECIMAL_RE.match(text):
        return ImmediateOperand(value=int(text))
    m = _HEX_RE.match(text)
    if m:
        return ImmediateOperand(value=int(m.group(1), 16))
    addr = parse_device_address(text)
    if addr is not None:
        return AddressOperand(address=addr)
    return None


def _parse_address(text: str | None) -> DeviceAddress | None:
    if text is None:
        return None
    return parse_device_address(text)


def _parse_preset(text: str | None) -> int:
    if text is not None and _DECIMAL_RE.match(text.strip()):
        return int(text.strip())
    return 0


def _parse_time_base(text: str | None) -> TimeBase:
    if text is not None and text.strip().lower() in _SECONDS_UNITS:
        return TimeBase.S
    return TimeBase.MS


# ---------------------------------------------------------------------------
# Parser state
# ---------------------------------------------------------------------------

@dataclass
class ParserState:
    """Mutable state for one network; the id counter outlives resets.

    *nodes* holds every contact, comparison and block built for the
    current network, keyed by id, so block children can be resolved.
    """

    stack: list[LogicNode] = field(default_factory=list)
    pending_or: list[LogicNode] = field(default_factory=list)
    nodes: dict[str, LogicNode] = field(default_factory=dict)
    node_count: int = 0


# ---------------------------------------------------------------------------
# InstructionParser
# ---------------------------------------------------------------------------

class InstructionParser:
    """Consumes the rows of one network and builds its logic tree.

    Call :meth:`reset` between networks.  Node ids (``node_<n>``) keep
    increasing across resets until :meth:`reset_all` is called.
    """

    def __init__(self) -> None:
        self.state = ParserState()

    # -- Public API ---------------------------------------------------------

    def parse_instruction(self, row: Row) -> LogicNode | None:
        """Apply one row.  Returns the node it produced, if any."""
        info = lookup(row.instruction)
        if info is None:
            logger.debug("Unrecognised mnemonic %r at sequence %d", row.instruction, row.sequence)
            return None
        handler = _HANDLERS[info.family]
        return handler(self, row, info)

    def result(self) -> LogicNode | None:
        """Fold pending OR branches into the stack and return its top.

        Pending branches are folded last-registered first, each one
        combined in parallel with the item popped from the stack.
        """
        state = self.state
        while state.pending_or:
            or_node = state.pending_or.pop()
            if state.stack:
                top = state.stack.pop()
                state.stack.append(self._block(BlockType.PARALLEL, [top, or_node]))
            else:
                state.stack.append(or_node)
        return state.stack[-1] if state.stack else None

    def stack_contents(self) -> list[LogicNode]:
        """Finalise pending ORs and return the stack, bottom first."""
        self.result()
        return list(self.state.stack)

    @property
    def nodes(self) -> Mapping[str, LogicNode]:
        """Logic-path nodes of the current network, by id."""
        return self.state.nodes

    def node(self, node_id: str) -> LogicNode | None:
        return self.state.nodes.get(node_id)

    @property
    def stack_size(self) -> int:
        return len(self.state.stack)

    @property
    def pending_or_count(self) -> int:
        return len(self.state.pending_or)

    def reset(self) -> None:
        """Clear stack, pending branches and nodes; keep the id counter."""
        self.state.stack.clear()
        self.state.pending_or.clear()
        self.state.nodes = {}

    def reset_all(self) -> None:
        self.state = ParserState()

    # -- Node construction --------------------------------------------------

    def _next_id(self) -> str:
        self.state.node_count += 1
        return f"node_{self.state.node_count}"

    def _register(self, node: LogicNode) -> LogicNode:
        self.state.nodes[node.id] = node
        return node

    def _block(self, block_type: BlockType, children: list[LogicNode]) -> BlockNode:
        block = BlockNode(
            id=self._next_id(),
            block_type=block_type,
            children=[child.id for child in children],
        )
        self._register(block)
        return block

    def _condition(self, row: Row, info: MnemonicInfo) -> LogicNode | None:
        """Build the contact or comparison node of a LOAD/AND/OR row."""
        if info.comparison is not None:
            left = parse_operand(row.operand1)
            right = parse_operand(row.operand2)
            if left is None or right is None:
                logger.debug("Comparison %s at sequence %d lacks operands", row.instruction, row.sequence)
                return None
            return self._register(ComparisonNode(
                id=self._next_id(),
                comment=row.comment,
                operator=info.comparison,
                left=left,
                right=right,
            ))

        addr = _parse_address(row.operand1)
        if addr is None:
            logger.debug("Contact %s at sequence %d has no device operand", row.instruction, row.sequence)
            return None
        return self._register(ContactNode(
            id=self._next_id(),
            comment=row.comment,
            contact_type=info.contact_type,
            address=addr,
        ))


# ---------------------------------------------------------------------------
# Family handlers
# ---------------------------------------------------------------------------

def _handle_load(p: InstructionParser, row: Row, info: MnemonicInfo) -> LogicNode | None:
    node = p._condition(row, info)
    if node is not None:
        p.state.stack.append(node)
    return node


def _handle_and(p: InstructionParser, row: Row, info: MnemonicInfo) -> LogicNode | None:
    node = p._condition(row, info)
    if node is None:
        return None
    if not p.state.stack:
        logger.debug("%s at sequence %d on empty stack, treated as LOAD", row.instruction, row.sequence)
        p.state.stack.append(node)
        return node
    top = p.state.stack.pop()
    block = p._block(BlockType.SERIES, [top, node])
    p.state.stack.append(block)
    return block


def _handle_or(p: InstructionParser, row: Row, info: MnemonicInfo) -> LogicNode | None:
    node = p._condition(row, info)
    if node is not None:
        p.state.pending_or.append(node)
    return node


def _combine_top_two(p: InstructionParser, row: Row, block_type: BlockType) -> LogicNode | None:
    stack = p.state.stack
    if len(stack) < 2:
        logger.debug(
            "%s at sequence %d needs two stack items, found %d",
            row.instruction, row.sequence, len(stack),
        )
        return None
    newer = stack.pop()
    older = stack.pop()
    block = p._block(block_type, [older, newer])
    stack.append(block)
    return block


def _handle_andb(p: InstructionParser, row: Row, info: MnemonicInfo) -> LogicNode | None:
    return _combine_top_two(p, row, BlockType.SERIES)


def _handle_orb(p: InstructionParser, row: Row, info: MnemonicInfo) -> LogicNode | None:
    return _combine_top_two(p, row, BlockType.PARALLEL)


def _handle_output(p: InstructionParser, row: Row, info: MnemonicInfo) -> LogicNode | None:
    addr = _parse_address(row.operand1)
    if addr is None:
        logger.debug("Output %s at sequence %d has no device operand", row.instruction, row.sequence)
        return None
    return CoilNode(
        id=p._next_id(),
        comment=row.comment,
        coil_type=info.coil_type,
        address=addr,
        negated=info.negated,
    )


def _handle_timer(p: InstructionParser, row: Row, info: MnemonicInfo) -> LogicNode | None:
    addr = _parse_address(row.operand1)
    if addr is None:
        logger.debug("Timer %s at sequence %d has no device operand", row.instruction, row.sequence)
        return None
    return TimerNode(
        id=p._next_id(),
        comment=row.comment,
        timer_type=info.timer_type,
        address=addr,
        preset=_parse_preset(row.operand2),
        time_base=_parse_time_base(row.operand3),
    )


def _handle_counter(p: InstructionParser, row: Row, info: MnemonicInfo) -> LogicNode | None:
    addr = _parse_address(row.operand1)
    if addr is None:
        logger.debug("Counter %s at sequence %d has no device operand", row.instruction, row.sequence)
        return None
    return CounterNode(
        id=p._next_id(),
        comment=row.comment,
        counter_type=info.counter_type,
        address=addr,
        preset=_parse_preset(row.operand2),
    )


def _handle_math(p: InstructionParser, row: Row, info: MnemonicInfo) -> LogicNode | None:
    source = parse_operand(row.operand1)
    if info.math_operator == MathOperator.MOV:
        source2 = None
        destination = _parse_address(row.operand2)
    else:
        source2 = parse_operand(row.operand2)
        destination = _parse_address(row.operand3)
    if source is None or destination is None:
        logger.debug("%s at sequence %d lacks source or destination", row.instruction, row.sequence)
        return None
    return MathNode(
        id=p._next_id(),
        comment=row.comment,
        operator=info.math_operator,
        source=source,
        source2=source2,
        destination=destination,
    )


_HANDLERS: dict[Family, Callable[[InstructionParser, Row, MnemonicInfo], LogicNode | None]] = {
    Family.LOAD: _handle_load,
    Family.AND: _handle_and,
    Family.OR: _handle_or,
    Family.ANDB: _handle_andb,
    Family.ORB: _handle_orb,
    Family.OUTPUT: _handle_output,
    Family.TIMER: _handle_timer,
    Family.COUNTER: _handle_counter,
    Family.MATH: _handle_math,
}
