"""ladderir analysis: validation and grid measurements.

Public API::

    from ladderir.analysis import ProgramValidator, validate_program, grid_size
"""

from ._grid import (
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
from ._validator import (
    ADDRESS_OUT_OF_RANGE,
    BIT_INDEX_OUT_OF_RANGE,
    BLOCK_TOO_SMALL,
    COUNTER_DEVICE_MISMATCH,
    DUPLICATE_OUTPUT,
    EMPTY_NETWORK,
    INDEX_REGISTER_OUT_OF_RANGE,
    NO_OUTPUT,
    NON_POSITIVE_PRESET,
    READ_ONLY_WRITE,
    TIMER_DEVICE_MISMATCH,
    WORD_CONTACT_WITHOUT_BIT,
    Category,
    Finding,
    ProgramValidator,
    Severity,
    ValidationReport,
    validate_program,
)

__all__ = [
    "ADDRESS_OUT_OF_RANGE",
    "BIT_INDEX_OUT_OF_RANGE",
    "BLOCK_TOO_SMALL",
    "COUNTER_DEVICE_MISMATCH",
    "Category",
    "DUPLICATE_OUTPUT",
    "EMPTY_NETWORK",
    "Finding",
    "GridBounds",
    "GridSize",
    "INDEX_REGISTER_OUT_OF_RANGE",
    "NON_POSITIVE_PRESET",
    "NO_OUTPUT",
    "ProgramValidator",
    "READ_ONLY_WRITE",
    "Severity",
    "TIMER_DEVICE_MISMATCH",
    "ValidationReport",
    "WORD_CONTACT_WITHOUT_BIT",
    "all_positions",
    "bounds",
    "count_by_column",
    "count_by_row",
    "grid_size",
    "is_occupied",
    "leaf_nodes",
    "node_at",
    "nodes_at",
    "nodes_of_kind",
    "validate_program",
]
