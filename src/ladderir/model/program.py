"""Program-level containers for the ladder IR."""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import Self

from pydantic import BaseModel, ConfigDict, model_validator

from .devices import DeviceAddress
from .nodes import BlockNode, LogicNode, is_tap, iter_nodes


class Network(BaseModel):
    """A single rung.

    *nodes* is the pre-order flattening of the logic tree rooted at
    *root_id* (containers included), followed by the output taps in
    source order.  Blocks refer to their children by id, so the list is
    the whole arena and serializes without nesting.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    step: int
    nodes: list[LogicNode] = []
    root_id: str | None = None
    comment: str | None = None

    @model_validator(mode="after")
    def _check_node_ids(self) -> Self:
        seen: set[str] = set()
        for node in self.nodes:
            if node.id in seen:
                raise ValueError(f"Duplicate node id {node.id!r} in network {self.id!r}")
            seen.add(node.id)
        if self.root_id is not None and self.root_id not in seen:
            raise ValueError(f"root_id {self.root_id!r} is not a node of network {self.id!r}")
        for node in self.nodes:
            if isinstance(node, BlockNode):
                for child_id in node.children:
                    if child_id not in seen:
                        raise ValueError(
                            f"Block {node.id!r} references unknown child {child_id!r}"
                        )
        return self

    @property
    def root(self) -> LogicNode | None:
        if self.root_id is None:
            return None
        return self.find(self.root_id)

    @property
    def taps(self) -> list[LogicNode]:
        return [n for n in self.top_level_nodes() if n.id != self.root_id and is_tap(n)]

    def node_map(self) -> dict[str, LogicNode]:
        return {node.id: node for node in self.nodes}

    def find(self, node_id: str) -> LogicNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def children(self, node: LogicNode) -> list[LogicNode]:
        """Resolved children of a block; empty for leaves."""
        if not isinstance(node, BlockNode):
            return []
        by_id = self.node_map()
        return [by_id[child_id] for child_id in node.children]

    def walk(self, node: LogicNode | None = None) -> Iterator[LogicNode]:
        """Pre-order traversal from *node* (the root by default)."""
        start = node if node is not None else self.root
        if start is None:
            return iter(())
        return iter_nodes(start, self.node_map())

    def leaves(self, node: LogicNode | None = None) -> list[LogicNode]:
        return [n for n in self.walk(node) if not isinstance(n, BlockNode)]

    def top_level_nodes(self) -> list[LogicNode]:
        """Nodes not contained in any block of this network."""
        child_ids = {
            child_id
            for node in self.nodes
            if isinstance(node, BlockNode)
            for child_id in node.children
        }
        return [n for n in self.nodes if n.id not in child_ids]


class DataType(str, Enum):
    BOOL = "BOOL"
    INT = "INT"
    WORD = "WORD"
    DWORD = "DWORD"
    REAL = "REAL"


class SymbolEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: DeviceAddress
    symbol: str | None = None
    comment: str | None = None
    data_type: DataType | None = None


class SymbolTable(BaseModel):
    """Referenced addresses keyed by their canonical string form."""

    model_config = ConfigDict(frozen=True)

    entries: dict[str, SymbolEntry] = {}

    @model_validator(mode="after")
    def _keys_are_canonical(self) -> Self:
        for key, entry in self.entries.items():
            if key != str(entry.address):
                raise ValueError(
                    f"Symbol key {key!r} does not match address {entry.address}"
                )
        return self

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, DeviceAddress):
            key = str(key)
        return key in self.entries

    def get(self, key: str | DeviceAddress) -> SymbolEntry | None:
        return self.entries.get(str(key))


class ProgramMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = "Untitled Program"
    description: str | None = None
    author: str | None = None
    created_at: str | None = None
    modified_at: str | None = None
    version: str = "1.0.0"
    plc_model: str | None = None


class Program(BaseModel):
    model_config = ConfigDict(frozen=True)

    metadata: ProgramMetadata = ProgramMetadata()
    networks: list[Network] = []
    symbol_table: SymbolTable = SymbolTable()

    def network(self, network_id: str) -> Network | None:
        for net in self.networks:
            if net.id == network_id:
                return net
        return None

    def iter_nodes(self) -> Iterator[tuple[Network, LogicNode]]:
        for net in self.networks:
            for node in net.nodes:
                yield net, node
