"""ladderir: mnemonic ladder listings to a validated program IR.

Public API::

    from ladderir import parse_program, AddressMapper, DeviceAddress

    result = parse_program(text)
    result.program.networks
    result.validation.errors
"""

from ._facade import LadderParser, ParseResult, parse_program
from .analysis import (
    Finding,
    GridSize,
    ProgramValidator,
    ValidationReport,
    grid_size,
    validate_program,
)
from .config import DeviceLimits, LadderConfig, MapperConfig, ValidatorConfig
from .errors import AddressError, ConfigError, LadderError
from .export import to_listing
from .mapping import AddressMapper, MappingResult
from .model import (
    BlockNode,
    CoilNode,
    ComparisonNode,
    ContactNode,
    CounterNode,
    DeviceAddress,
    DeviceType,
    LogicNode,
    MappingRule,
    MathNode,
    MemoryType,
    Network,
    Program,
    ProgramMetadata,
    SymbolTable,
    TargetAddress,
    TimerNode,
    format_device_address,
    format_target_address,
    parse_device_address,
    parse_target_address,
)
from .parser import InstructionParser, ProgramBuilder, RowReader

__all__ = [
    "AddressError",
    "AddressMapper",
    "BlockNode",
    "CoilNode",
    "ComparisonNode",
    "ConfigError",
    "ContactNode",
    "CounterNode",
    "DeviceAddress",
    "DeviceLimits",
    "DeviceType",
    "Finding",
    "GridSize",
    "InstructionParser",
    "LadderConfig",
    "LadderError",
    "LadderParser",
    "LogicNode",
    "MapperConfig",
    "MappingResult",
    "MappingRule",
    "MathNode",
    "MemoryType",
    "Network",
    "ParseResult",
    "Program",
    "ProgramBuilder",
    "ProgramMetadata",
    "ProgramValidator",
    "RowReader",
    "SymbolTable",
    "TargetAddress",
    "TimerNode",
    "ValidationReport",
    "ValidatorConfig",
    "format_device_address",
    "format_target_address",
    "grid_size",
    "parse_device_address",
    "parse_program",
    "parse_target_address",
    "to_listing",
    "validate_program",
]
