"""Tests for the mnemonic listing exporter (ladderir.export.listing)."""

import pytest

from conftest import build_network, build_program, listing

from ladderir.export import to_listing
from ladderir.model import BlockNode, Network
from ladderir.parser import ProgramBuilder, read_rows


def shape(node, network: Network):
    """Structure of a subtree without ids or positions."""
    if isinstance(node, BlockNode):
        return (node.block_type.value, [shape(c, network) for c in network.children(node)])
    return node.model_dump(exclude={"id", "grid"})


def instructions(text: str) -> list[str]:
    return [r.instruction for r in read_rows(text)]


def reparse(network: Network) -> Network:
    return ProgramBuilder().build_single_network(to_listing(network), step=network.step)


# ===========================================================================
# Output format
# ===========================================================================


class TestFormat:
    def test_header(self):
        text = to_listing(build_network("LOAD M0001", "OUT M0002"))
        assert text.splitlines()[0] == "No,Step,Instruction,Operand1,Operand2,Operand3,Comment"

    def test_no_header(self):
        text = to_listing(build_network("LOAD M0001", "OUT M0002"), header=False)
        assert text.splitlines() == ["1,0,LOAD,M0001,,,", "2,0,OUT,M0002,,,"]

    def test_comment_quoted(self):
        net = ProgramBuilder().build_single_network('1,0,LOAD,M0001,,,"Start, main"')
        text = to_listing(net, header=False)
        assert text == '1,0,LOAD,M0001,,,"Start, main"\n'

    def test_sequence_runs_across_program(self):
        prog = build_program("1,0,LOAD,M0001\n2,0,OUT,M0002\n3,4,LOAD,M0003\n4,4,OUT,M0004")
        rows = read_rows(to_listing(prog))
        assert [r.sequence for r in rows] == [1, 2, 3, 4]
        assert [r.step for r in rows] == [0, 0, 4, 4]

    def test_series_uses_and(self):
        net = build_network("LOAD M0001", "ANDN M0002", "OUT M0003")
        assert instructions(to_listing(net)) == ["LOAD", "ANDN", "OUT"]

    def test_parallel_uses_orb(self):
        net = build_network("LOAD M0001", "OR M0002", "OUT M0003")
        assert instructions(to_listing(net)) == ["LOAD", "LOAD", "ORB", "OUT"]

    def test_comparison_loads_with_ld(self):
        net = build_network("LD>= D0001 10", "AND<> D0002 H1F", "OUT M0001")
        rows = read_rows(to_listing(net))
        assert [r.instruction for r in rows] == ["LD>=", "AND<>", "OUT"]
        assert rows[1].operand2 == "31"

    def test_taps(self):
        net = build_network(
            "LOAD M0001", "OUTN M0002", "TON T0001 50 s", "CTU C0001 3",
            "MOV 7 D0001", "SUB D0001 1 D0002",
        )
        rows = read_rows(to_listing(net))
        assert [r.instruction for r in rows] == ["LOAD", "OUTN", "TON", "CTU", "MOV", "SUB"]
        assert (rows[2].operand2, rows[2].operand3) == ("50", "s")
        assert (rows[4].operand1, rows[4].operand2) == ("7", "D0001")

    def test_wrong_target(self):
        with pytest.raises(TypeError, match="expects Program or Network"):
            to_listing("LOAD M0001")


# ===========================================================================
# Re-parse equivalence
# ===========================================================================


class TestRoundTrip:
    @pytest.mark.parametrize("program", [
        ("LOAD M0001", "AND M0002", "AND M0003", "OUT M0004"),
        ("LOAD M0001", "OR M0002", "OR M0003", "OUT M0004"),
        ("LOAD M0001", "AND M0002", "LOAD M0003", "AND M0004", "ORB", "OUT M0010"),
        ("LOADP P0001", "LOAD M0001", "ORF M0002", "ANDB", "AND<= D0001 5", "SET M0003"),
        ("LOAD M0001", "LOAD M0002", "AND M0003", "OR M0004", "ANDB", "TOF T0002 1 ms"),
    ])
    def test_structure_preserved(self, program):
        net = build_network(*program)
        again = reparse(net)
        assert shape(again.root, again) == shape(net.root, net)
        assert [shape(t, again) for t in again.taps] == [shape(t, net) for t in net.taps]

    def test_layout_preserved(self):
        net = build_network("LOAD M0001", "AND M0002", "LOAD M0003", "AND M0004", "ORB", "OUT M0010")
        again = reparse(net)
        assert [n.grid for n in again.walk()] == [n.grid for n in net.walk()]

    def test_helper_listing_matches(self):
        text = listing("LOAD M0001", "OUT M0002")
        assert to_listing(build_program(text), header=False) == text + "\n"

    def test_long_series_chain(self):
        count = 1500
        net = build_network("LOAD M0000", *[f"AND M{i:04d}" for i in range(1, count)], "OUT M9000")
        rows = read_rows(to_listing(net))
        assert [r.instruction for r in rows] == ["LOAD"] + ["AND"] * (count - 1) + ["OUT"]
        again = reparse(net)
        assert [str(n.address) for n in again.leaves()] == [str(n.address) for n in net.leaves()]

    def test_long_parallel_chain(self):
        count = 1500
        net = build_network("LOAD M0000", *[f"OR M{i:04d}" for i in range(1, count)], "OUT M9000")
        again = reparse(net)
        assert [n.grid for n in again.walk()] == [n.grid for n in net.walk()]
