"""Shared test helpers for the ladderir test suite."""

from ladderir.model import (
    BlockNode,
    CoilNode,
    ContactNode,
    DeviceAddress,
    LogicNode,
    Network,
    Program,
    iter_leaves,
)
from ladderir.parser import ProgramBuilder


def addr(text: str) -> DeviceAddress:
    """Shorthand for DeviceAddress.parse(text)."""
    return DeviceAddress.parse(text)


def listing(*instructions: str, step: int = 0) -> str:
    """Build listing text from ``"MNEMONIC op1 op2 ..."`` strings.

    Every instruction lands in *step*; sequence numbers start at 1.
    """
    lines = []
    for i, instr in enumerate(instructions, start=1):
        parts = instr.split()
        fields = parts + [""] * (4 - len(parts))
        lines.append(",".join([str(i), str(step), *fields, "", ""][:7]))
    return "\n".join(lines)


def build_network(*instructions: str) -> Network:
    """Parse instructions as a single network."""
    return ProgramBuilder().build_single_network(listing(*instructions))


def build_program(text: str) -> Program:
    return ProgramBuilder().build_program(text)


def leaf_names(node, nodes) -> list[str]:
    """Formatted addresses of a subtree's leaves, in tree order."""
    return [str(leaf.address) for leaf in iter_leaves(node, nodes)]


def index(*nodes: LogicNode) -> dict[str, LogicNode]:
    """Id-to-node mapping over *nodes*."""
    return {node.id: node for node in nodes}


def contact(node_id: str, address: str, **kwargs) -> ContactNode:
    return ContactNode(id=node_id, address=addr(address), **kwargs)


def coil(node_id: str, address: str, **kwargs) -> CoilNode:
    return CoilNode(id=node_id, address=addr(address), **kwargs)


def series(node_id: str, *children, **kwargs) -> BlockNode:
    return BlockNode(id=node_id, block_type="series", children=[child.id for child in children], **kwargs)


def parallel(node_id: str, *children, **kwargs) -> BlockNode:
    return BlockNode(id=node_id, block_type="parallel", children=[child.id for child in children], **kwargs)
