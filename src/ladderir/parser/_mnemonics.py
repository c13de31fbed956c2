"""Closed instruction table for the mnemonic listing format."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from ladderir.model.nodes import (
    CoilType,
    ComparisonOperator,
    ContactType,
    CounterType,
    MathOperator,
    TimerType,
)


class Family(str, Enum):
    """How an instruction interacts with the parser stack."""

    LOAD = "load"        # push
    AND = "and"          # combine with stack top in series
    OR = "or"            # register as pending parallel branch
    ANDB = "andb"        # combine two stack items in series
    ORB = "orb"          # combine two stack items in parallel
    OUTPUT = "output"
    TIMER = "timer"
    COUNTER = "counter"
    MATH = "math"


class Mnemonic(str, Enum):
    LOAD = "LOAD"
    LOADN = "LOADN"
    LOADP = "LOADP"
    LOADF = "LOADF"
    LOADA = "LOADA"
    AND = "AND"
    ANDN = "ANDN"
    ANDP = "ANDP"
    ANDF = "ANDF"
    OR = "OR"
    ORN = "ORN"
    ORP = "ORP"
    ORF = "ORF"
    ANDB = "ANDB"
    ORB = "ORB"
    OUT = "OUT"
    OUTN = "OUTN"
    SET = "SET"
    RST = "RST"
    TON = "TON"
    TOF = "TOF"
    TMR = "TMR"
    CTU = "CTU"
    CTD = "CTD"
    CTUD = "CTUD"
    LD_EQ = "LD="
    LD_GT = "LD>"
    LD_LT = "LD<"
    LD_GE = "LD>="
    LD_LE = "LD<="
    LD_NE = "LD<>"
    AND_EQ = "AND="
    AND_GT = "AND>"
    AND_LT = "AND<"
    AND_GE = "AND>="
    AND_LE = "AND<="
    AND_NE = "AND<>"
    OR_EQ = "OR="
    OR_GT = "OR>"
    OR_LT = "OR<"
    OR_GE = "OR>="
    OR_LE = "OR<="
    OR_NE = "OR<>"
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    MOV = "MOV"


class MnemonicInfo(NamedTuple):
    """Decoded meaning of one mnemonic.

    Exactly one of the type fields is set for families that build a
    node; ANDB and ORB set none.
    """

    family: Family
    contact_type: ContactType | None = None
    comparison: ComparisonOperator | None = None
    coil_type: CoilType | None = None
    negated: bool = False
    timer_type: TimerType | None = None
    counter_type: CounterType | None = None
    math_operator: MathOperator | None = None


# Longest operators first so ">=" is not read as ">".
_OPERATORS_LONGEST_FIRST: tuple[ComparisonOperator, ...] = tuple(
    sorted(ComparisonOperator, key=lambda op: len(op.value), reverse=True)
)


def extract_comparison_operator(text: str) -> ComparisonOperator | None:
    """Return the comparison operator contained in *text*, if any."""
    for op in _OPERATORS_LONGEST_FIRST:
        if op.value in text:
            return op
    return None


_COMPARISON_PREFIXES: tuple[tuple[str, Family], ...] = (
    ("LD", Family.LOAD),
    ("AND", Family.AND),
    ("OR", Family.OR),
)

_SUFFIX_CONTACT: dict[str, ContactType] = {
    "": ContactType.NO,
    "N": ContactType.NC,
    "P": ContactType.RISING,
    "F": ContactType.FALLING,
}


def _build_table() -> dict[Mnemonic, MnemonicInfo]:
    table: dict[Mnemonic, MnemonicInfo] = {}

    for prefix, family in (("LOAD", Family.LOAD), ("AND", Family.AND), ("OR", Family.OR)):
        for suffix, contact_type in _SUFFIX_CONTACT.items():
            table[Mnemonic(prefix + suffix)] = MnemonicInfo(family, contact_type=contact_type)

    table[Mnemonic.LOADA] = MnemonicInfo(Family.LOAD, contact_type=ContactType.NO)

    for mnemonic in Mnemonic:
        op = extract_comparison_operator(mnemonic.value)
        if op is None:
            continue
        family = next(f for prefix, f in _COMPARISON_PREFIXES if mnemonic.value.startswith(prefix))
        table[mnemonic] = MnemonicInfo(family, comparison=op)

    table[Mnemonic.ANDB] = MnemonicInfo(Family.ANDB)
    table[Mnemonic.ORB] = MnemonicInfo(Family.ORB)

    table[Mnemonic.OUT] = MnemonicInfo(Family.OUTPUT, coil_type=CoilType.OUT)
    table[Mnemonic.OUTN] = MnemonicInfo(Family.OUTPUT, coil_type=CoilType.OUT, negated=True)
    table[Mnemonic.SET] = MnemonicInfo(Family.OUTPUT, coil_type=CoilType.SET)
    table[Mnemonic.RST] = MnemonicInfo(Family.OUTPUT, coil_type=CoilType.RST)

    for timer_type in TimerType:
        table[Mnemonic(timer_type.value)] = MnemonicInfo(Family.TIMER, timer_type=timer_type)
    for counter_type in CounterType:
        table[Mnemonic(counter_type.value)] = MnemonicInfo(Family.COUNTER, counter_type=counter_type)
    for math_op in MathOperator:
        table[Mnemonic(math_op.value)] = MnemonicInfo(Family.MATH, math_operator=math_op)

    return table


MNEMONIC_TABLE: dict[Mnemonic, MnemonicInfo] = _build_table()


def lookup(instruction: str) -> MnemonicInfo | None:
    """Decode *instruction* (case-insensitive), or None if unrecognised."""
    try:
        mnemonic = Mnemonic(instruction.strip().upper())
    except ValueError:
        return None
    return MNEMONIC_TABLE[mnemonic]
