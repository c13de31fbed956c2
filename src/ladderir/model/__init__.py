"""ladderir model: the ladder program IR.

Public API::

    from ladderir.model import Program, Network, ContactNode, DeviceAddress
"""

from .devices import (
    BIT_DEVICES,
    MAX_BIT_INDEX,
    WORD_DEVICES,
    DeviceAddress,
    DeviceType,
    format_device_address,
    parse_device_address,
)
from .nodes import (
    AddressOperand,
    BlockNode,
    BlockType,
    CoilNode,
    CoilType,
    ComparisonNode,
    ComparisonOperator,
    ContactNode,
    ContactType,
    CounterNode,
    CounterType,
    GridPosition,
    ImmediateOperand,
    LogicNode,
    MathNode,
    MathOperator,
    Operand,
    TimeBase,
    TimerNode,
    TimerType,
    is_block,
    is_output,
    is_tap,
    iter_leaves,
    iter_nodes,
    node_addresses,
)
from .program import (
    DataType,
    Network,
    Program,
    ProgramMetadata,
    SymbolEntry,
    SymbolTable,
)
from .target import (
    COUNTER_VALUE_OFFSET,
    DEFAULT_MAPPING_RULES,
    MAX_TARGET_ADDRESS,
    TIMER_VALUE_OFFSET,
    MappingRule,
    MemoryType,
    TargetAddress,
    format_target_address,
    parse_target_address,
)

__all__ = [
    "AddressOperand",
    "BIT_DEVICES",
    "BlockNode",
    "BlockType",
    "COUNTER_VALUE_OFFSET",
    "CoilNode",
    "CoilType",
    "ComparisonNode",
    "ComparisonOperator",
    "ContactNode",
    "ContactType",
    "CounterNode",
    "CounterType",
    "DEFAULT_MAPPING_RULES",
    "DataType",
    "DeviceAddress",
    "DeviceType",
    "GridPosition",
    "ImmediateOperand",
    "LogicNode",
    "MAX_BIT_INDEX",
    "MAX_TARGET_ADDRESS",
    "MappingRule",
    "MathNode",
    "MathOperator",
    "MemoryType",
    "Network",
    "Operand",
    "Program",
    "ProgramMetadata",
    "SymbolEntry",
    "SymbolTable",
    "TIMER_VALUE_OFFSET",
    "TargetAddress",
    "TimeBase",
    "TimerNode",
    "TimerType",
    "WORD_DEVICES",
    "format_device_address",
    "format_target_address",
    "is_block",
    "is_output",
    "is_tap",
    "iter_leaves",
    "iter_nodes",
    "node_addresses",
    "parse_device_address",
    "parse_target_address",
]
