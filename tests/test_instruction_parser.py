"""Tests for the mnemonic table and stack-machine instruction parser."""

import logging

import pytest

from conftest import leaf_names

from ladderir.model import (
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
    ImmediateOperand,
    MathNode,
    MathOperator,
    TimeBase,
    TimerNode,
    TimerType,
)
from ladderir.parser import (
    MNEMONIC_TABLE,
    Family,
    InstructionParser,
    Mnemonic,
    Row,
    extract_comparison_operator,
    lookup,
    parse_operand,
)


def row(instruction: str, op1=None, op2=None, op3=None, comment=None, seq=1) -> Row:
    return Row(
        sequence=seq, step=0, instruction=instruction,
        operand1=op1, operand2=op2, operand3=op3, comment=comment,
    )


def run(parser: InstructionParser, *instructions: str):
    """Feed ``"MNEMONIC op1 op2 op3"`` strings and return produced nodes."""
    produced = []
    for i, text in enumerate(instructions, start=1):
        parts = text.split()
        produced.append(parser.parse_instruction(row(parts[0], *parts[1:], seq=i)))
    return produced


# ===========================================================================
# Mnemonic table
# ===========================================================================


class TestMnemonics:
    def test_every_mnemonic_has_an_entry(self):
        assert set(MNEMONIC_TABLE) == set(Mnemonic)

    @pytest.mark.parametrize("text,contact_type", [
        ("LOAD", ContactType.NO),
        ("LOADN", ContactType.NC),
        ("ANDP", ContactType.RISING),
        ("ORF", ContactType.FALLING),
    ])
    def test_contact_suffixes(self, text, contact_type):
        assert lookup(text).contact_type == contact_type

    def test_lookup_case_insensitive(self):
        assert lookup("andb").family == Family.ANDB

    def test_unknown(self):
        assert lookup("JMP") is None

    def test_comparison_families(self):
        assert lookup("LD>=").family == Family.LOAD
        assert lookup("AND<>").family == Family.AND
        assert lookup("OR=").comparison == ComparisonOperator.EQ

    def test_outn_is_negated_out(self):
        info = lookup("OUTN")
        assert info.coil_type == CoilType.OUT
        assert info.negated

    @pytest.mark.parametrize("text,op", [
        ("LD>=", ComparisonOperator.GE),
        ("AND<=", ComparisonOperator.LE),
        ("OR<>", ComparisonOperator.NE),
        ("LD>", ComparisonOperator.GT),
        ("LD=", ComparisonOperator.EQ),
        ("LOAD", None),
    ])
    def test_extract_operator_longest_first(self, text, op):
        assert extract_comparison_operator(text) == op

    def test_loada_is_plain_load(self):
        info = lookup("LOADA")
        assert info.family == Family.LOAD
        assert info.contact_type == ContactType.NO

    def test_comparison_entries_match_extraction(self):
        for mnemonic, info in MNEMONIC_TABLE.items():
            assert info.comparison == extract_comparison_operator(mnemonic.value)


# ===========================================================================
# Operands
# ===========================================================================


class TestParseOperand:
    def test_decimal(self):
        assert parse_operand("100") == ImmediateOperand(value=100)

    def test_negative_decimal(self):
        assert parse_operand("-5") == ImmediateOperand(value=-5)

    @pytest.mark.parametrize("text", ["H1F", "h1f", "0x1F", "0X1f"])
    def test_hex(self, text):
        assert parse_operand(text) == ImmediateOperand(value=31)

    def test_device(self):
        op = parse_operand("D0100")
        assert isinstance(op, AddressOperand)
        assert str(op) == "D0100"

    def test_decimal_wins_over_device(self):
        assert isinstance(parse_operand("0100"), ImmediateOperand)

    @pytest.mark.parametrize("text", [None, "", "???", "Q0001"])
    def test_unparseable(self, text):
        assert parse_operand(text) is None


# ===========================================================================
# Stack construction
# ===========================================================================


class TestSeries:
    def test_load_and_and(self):
        p = InstructionParser()
        run(p, "LOAD M0001", "AND M0002", "AND M0003")
        root = p.result()
        assert isinstance(root, BlockNode)
        assert root.block_type == BlockType.SERIES
        assert leaf_names(root, p.nodes) == ["M0001", "M0002", "M0003"]

    def test_and_returns_block(self):
        p = InstructionParser()
        _, block = run(p, "LOAD M0001", "ANDN M0002")
        assert isinstance(block, BlockNode)
        assert p.node(block.children[1]).contact_type == ContactType.NC
        assert p.stack_size == 1

    def test_and_on_empty_stack_acts_as_load(self, caplog):
        p = InstructionParser()
        with caplog.at_level(logging.DEBUG, logger="ladderir.parser._instructions"):
            (node,) = run(p, "AND M0001")
        assert isinstance(node, ContactNode)
        assert p.stack_size == 1
        assert "treated as LOAD" in caplog.text


class TestParallel:
    def test_or_is_pending(self):
        p = InstructionParser()
        run(p, "LOAD M0001", "OR M0002", "OR M0003")
        assert p.stack_size == 1
        assert p.pending_or_count == 2

    def test_result_folds_pending_in_reverse(self):
        p = InstructionParser()
        run(p, "LOAD M0001", "OR M0002", "OR M0003")
        root = p.result()
        assert root.block_type == BlockType.PARALLEL
        assert sorted(leaf_names(root, p.nodes)) == ["M0001", "M0002", "M0003"]
        # Last registered OR folds first
        inner, last = [p.node(c) for c in root.children]
        assert inner.block_type == BlockType.PARALLEL
        assert leaf_names(inner, p.nodes) == ["M0001", "M0003"]
        assert last.address.number == 2
        assert p.pending_or_count == 0

    def test_or_without_stack(self):
        p = InstructionParser()
        run(p, "OR M0001")
        root = p.result()
        assert isinstance(root, ContactNode)


class TestBlocks:
    def test_nested_orb(self):
        p = InstructionParser()
        run(p, "LOAD M0001", "AND M0002", "LOAD M0003", "AND M0004", "ORB")
        root = p.result()
        assert root.block_type == BlockType.PARALLEL
        children = [p.node(c) for c in root.children]
        assert [c.block_type for c in children] == [BlockType.SERIES, BlockType.SERIES]
        assert [leaf_names(c, p.nodes) for c in children] == [["M0001", "M0002"], ["M0003", "M0004"]]

    def test_andb_order(self):
        p = InstructionParser()
        *_, block = run(p, "LOAD M0001", "LOAD M0002", "ANDB")
        assert block.block_type == BlockType.SERIES
        assert leaf_names(block, p.nodes) == ["M0001", "M0002"]

    @pytest.mark.parametrize("mnemonic", ["ANDB", "ORB"])
    def test_insufficient_stack(self, mnemonic):
        p = InstructionParser()
        assert run(p, "LOAD M0001", mnemonic)[-1] is None
        assert p.stack_size == 1

    @pytest.mark.parametrize("mnemonic", ["ANDB", "ORB"])
    def test_empty_stack(self, mnemonic):
        p = InstructionParser()
        assert run(p, mnemonic) == [None]
        assert p.result() is None


# ===========================================================================
# Leaf instructions
# ===========================================================================


class TestLeaves:
    def test_coil_does_not_touch_stack(self):
        p = InstructionParser()
        _, out = run(p, "LOAD M0001", "OUT M0100")
        assert isinstance(out, CoilNode)
        assert out.coil_type == CoilType.OUT
        assert p.stack_size == 1

    def test_outn(self):
        (out,) = run(InstructionParser(), "OUTN M0100")
        assert out.negated

    def test_set_rst(self):
        s, r = run(InstructionParser(), "SET M0100", "RST M0100")
        assert s.coil_type == CoilType.SET
        assert r.coil_type == CoilType.RST

    def test_timer(self):
        (t,) = run(InstructionParser(), "TON T0001 50 sec")
        assert isinstance(t, TimerNode)
        assert t.timer_type == TimerType.TON
        assert t.preset == 50
        assert t.time_base == TimeBase.S

    def test_timer_defaults(self):
        (t,) = run(InstructionParser(), "TMR T0002 abc")
        assert t.preset == 0
        assert t.time_base == TimeBase.MS

    def test_timer_on_wrong_device_still_built(self):
        (t,) = run(InstructionParser(), "TON M0001 10")
        assert t.address.device.value == "M"

    def test_counter(self):
        (c,) = run(InstructionParser(), "CTUD C0003 10")
        assert isinstance(c, CounterNode)
        assert c.counter_type == CounterType.CTUD
        assert c.preset == 10

    def test_comparison_load(self):
        p = InstructionParser()
        (cmp,) = run(p, "LD>= D0001 100")
        assert isinstance(cmp, ComparisonNode)
        assert cmp.operator == ComparisonOperator.GE
        assert cmp.right == ImmediateOperand(value=100)
        assert p.stack_size == 1

    def test_comparison_and_joins_series(self):
        p = InstructionParser()
        run(p, "LOAD M0001", "AND<> D0001 H10")
        root = p.result()
        assert root.block_type == BlockType.SERIES
        assert p.node(root.children[1]).right.value == 16

    def test_comparison_missing_operand(self):
        assert run(InstructionParser(), "LD= D0001") == [None]

    def test_mov(self):
        p = InstructionParser()
        (mov,) = run(p, "MOV 5 D0010")
        assert isinstance(mov, MathNode)
        assert mov.operator == MathOperator.MOV
        assert mov.source2 is None
        assert str(mov.destination) == "D0010"
        assert p.stack_size == 0

    def test_add(self):
        (add,) = run(InstructionParser(), "ADD D0001 D0002 D0003")
        assert str(add.source) == "D0001"
        assert str(add.source2) == "D0002"
        assert str(add.destination) == "D0003"

    def test_math_needs_device_destination(self):
        assert run(InstructionParser(), "ADD D0001 D0002 100") == [None]

    def test_unparseable_device(self):
        assert run(InstructionParser(), "LOAD ???", "OUT 5") == [None, None]

    def test_unknown_mnemonic(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="ladderir.parser._instructions"):
            assert run(InstructionParser(), "JMP L1") == [None]
        assert "Unrecognised mnemonic" in caplog.text

    def test_comment_carried(self):
        node = InstructionParser().parse_instruction(row("LOAD", "M0001", comment="Start"))
        assert node.comment == "Start"


# ===========================================================================
# State management
# ===========================================================================


class TestState:
    def test_ids_increase(self):
        p = InstructionParser()
        a, block = run(p, "LOAD M0001", "AND M0002")
        assert a.id == "node_1"
        assert block.children == ["node_1", "node_2"]
        assert block.id == "node_3"

    def test_reset_keeps_counter(self):
        p = InstructionParser()
        run(p, "LOAD M0001")
        p.reset()
        assert p.stack_size == 0
        (node,) = run(p, "LOAD M0002")
        assert node.id == "node_2"

    def test_reset_all_clears_counter(self):
        p = InstructionParser()
        run(p, "LOAD M0001", "OR M0002")
        p.reset_all()
        assert p.pending_or_count == 0
        (node,) = run(p, "LOAD M0003")
        assert node.id == "node_1"

    def test_stack_contents(self):
        p = InstructionParser()
        run(p, "LOAD M0001", "LOAD M0002", "OR M0003")
        contents = p.stack_contents()
        assert len(contents) == 2
        assert str(contents[0].address) == "M0001"
        assert contents[1].block_type == BlockType.PARALLEL

    def test_nodes_registry(self):
        p = InstructionParser()
        run(p, "LOAD M0001", "AND M0002", "OUT M0003")
        assert list(p.nodes) == ["node_1", "node_2", "node_3"]
        assert p.node("node_4") is None

    def test_reset_clears_registry(self):
        p = InstructionParser()
        run(p, "LOAD M0001", "AND M0002")
        held = p.nodes
        p.reset()
        assert dict(p.nodes) == {}
        assert len(held) == 3
