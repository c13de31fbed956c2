"""ladderir parser: mnemonic listing to Program tree.

Public API::

    from ladderir.parser import ProgramBuilder, RowReader, InstructionParser
"""

from ._builder import GridSpan, ProgramBuilder, build_symbol_table, flatten, layout
from ._instructions import InstructionParser, ParserState, parse_operand
from ._mnemonics import (
    MNEMONIC_TABLE,
    Family,
    Mnemonic,
    MnemonicInfo,
    extract_comparison_operator,
    lookup,
)
from ._rows import Row, RowReader, group_by_step, group_rows, parse_row, read_rows

__all__ = [
    "Family",
    "GridSpan",
    "InstructionParser",
    "MNEMONIC_TABLE",
    "Mnemonic",
    "MnemonicInfo",
    "ParserState",
    "ProgramBuilder",
    "Row",
    "RowReader",
    "build_symbol_table",
    "extract_comparison_operator",
    "flatten",
    "group_by_step",
    "group_rows",
    "layout",
    "lookup",
    "parse_operand",
    "parse_row",
    "read_rows",
]
