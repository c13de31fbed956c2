"""Logic node AST for the ladder IR.

A rung is a tree: Block nodes combine their children in series (AND,
left to right) or in parallel (OR, stacked); every other node is a leaf.
Contacts and comparisons sit on the logic path, while coils, timers,
counters and arithmetic nodes are output taps fed by that path.

Nodes live in a flat arena: a block lists the ids of its children, and
the tree is resolved through an id-to-node mapping such as the node
list of a Network.  All nodes are frozen; layout assigns grid positions
by building copies with ``model_copy``, never by mutating in place.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Annotated, Literal, Self, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .devices import DeviceAddress


class GridPosition(BaseModel):
    """Cell coordinates of a node (0-based)."""

    model_config = ConfigDict(frozen=True)

    row: int = 0
    col: int = 0


# ---------------------------------------------------------------------------
# Operands
# ---------------------------------------------------------------------------

class AddressOperand(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["address"] = "address"
    address: DeviceAddress

    def __str__(self) -> str:
        return str(self.address)


class ImmediateOperand(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["immediate"] = "immediate"
    value: int

    def __str__(self) -> str:
        return str(self.value)


Operand = Annotated[
    Union[AddressOperand, ImmediateOperand],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Node enums
# ---------------------------------------------------------------------------

class ContactType(str, Enum):
    NO = "no"
    NC = "nc"
    RISING = "rising"
    FALLING = "falling"


class CoilType(str, Enum):
    OUT = "out"
    SET = "set"
    RST = "rst"


class TimerType(str, Enum):
    TON = "TON"
    TOF = "TOF"
    TMR = "TMR"


class CounterType(str, Enum):
    CTU = "CTU"
    CTD = "CTD"
    CTUD = "CTUD"


class TimeBase(str, Enum):
    MS = "ms"
    S = "s"


class ComparisonOperator(str, Enum):
    EQ = "="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    NE = "<>"


class MathOperator(str, Enum):
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    MOV = "MOV"


class BlockType(str, Enum):
    SERIES = "series"
    PARALLEL = "parallel"


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

class _NodeBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    comment: str | None = None
    grid: GridPosition = GridPosition()


class ContactNode(_NodeBase):
    kind: Literal["contact"] = "contact"
    contact_type: ContactType = ContactType.NO
    address: DeviceAddress


class CoilNode(_NodeBase):
    kind: Literal["coil"] = "coil"
    coil_type: CoilType = CoilType.OUT
    address: DeviceAddress
    negated: bool = False


class TimerNode(_NodeBase):
    kind: Literal["timer"] = "timer"
    timer_type: TimerType = TimerType.TON
    address: DeviceAddress
    preset: int = 0
    time_base: TimeBase = TimeBase.MS


class CounterNode(_NodeBase):
    kind: Literal["counter"] = "counter"
    counter_type: CounterType = CounterType.CTU
    address: DeviceAddress
    preset: int = 0


class ComparisonNode(_NodeBase):
    kind: Literal["comparison"] = "comparison"
    operator: ComparisonOperator
    left: Operand
    right: Operand


class MathNode(_NodeBase):
    """Arithmetic (ADD/SUB/MUL/DIV) or move (MOV) into *destination*."""

    kind: Literal["math"] = "math"
    operator: MathOperator
    source: Operand
    source2: Operand | None = None
    destination: DeviceAddress

    @property
    def is_move(self) -> bool:
        return self.operator == MathOperator.MOV

    @model_validator(mode="after")
    def _move_has_single_source(self) -> Self:
        if self.operator == MathOperator.MOV and self.source2 is not None:
            raise ValueError("MOV takes a single source operand")
        return self


class BlockNode(_NodeBase):
    """Series or parallel combination of child nodes, referenced by id.

    Well-formed blocks have at least two children; smaller blocks are
    representable and reported by the validator.
    """

    kind: Literal["block"] = "block"
    block_type: BlockType
    children: list[str] = []


LogicNode = Annotated[
    Union[
        ContactNode,
        CoilNode,
        TimerNode,
        CounterNode,
        ComparisonNode,
        MathNode,
        BlockNode,
    ],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Node helpers
# ---------------------------------------------------------------------------

OUTPUT_KINDS = frozenset({"coil", "timer", "counter"})
TAP_KINDS = frozenset({"coil", "timer", "counter", "math"})
CONDITION_KINDS = frozenset({"contact", "comparison"})


def is_block(node: LogicNode) -> bool:
    return node.kind == "block"


def is_output(node: LogicNode) -> bool:
    """True for coil, timer and counter nodes."""
    return node.kind in OUTPUT_KINDS


def is_tap(node: LogicNode) -> bool:
    """True for nodes that hang off the logic path rather than joining it."""
    return node.kind in TAP_KINDS


def iter_nodes(root: LogicNode, nodes: Mapping[str, LogicNode]) -> Iterator[LogicNode]:
    """Pre-order traversal from *root*, containers included.

    Child ids are resolved through *nodes*.  The walk keeps an explicit
    stack, so arbitrarily deep rungs are fine.
    """
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, BlockNode):
            stack.extend(nodes[child_id] for child_id in reversed(node.children))


def iter_leaves(root: LogicNode, nodes: Mapping[str, LogicNode]) -> Iterator[LogicNode]:
    """Leaves in left-to-right (series) / top-to-bottom (parallel) order."""
    for node in iter_nodes(root, nodes):
        if not isinstance(node, BlockNode):
            yield node


def node_addresses(node: LogicNode) -> list[DeviceAddress]:
    """Every device address a node references directly (not its children)."""
    if isinstance(node, (ContactNode, CoilNode, TimerNode, CounterNode)):
        return [node.address]
    if isinstance(node, ComparisonNode):
        operands = [node.left, node.right]
    elif isinstance(node, MathNode):
        operands = [node.source, node.source2]
    else:
        return []
    addrs = [op.address for op in operands if isinstance(op, AddressOperand)]
    if isinstance(node, MathNode):
        addrs.append(node.destination)
    return addrs
