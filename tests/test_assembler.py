from quantity_taxonomy.assembler import GraphAssembler
from quantity_taxonomy.registry import NodeRegistry


def _assembler():
    return GraphAssembler(NodeRegistry())


def test_chain_roots_and_links():
    asm = _assembler()
    asm.add_edge("A", "B")
    asm.add_edge("B", "C")
    g = asm.finalize()

    assert g.roots == {"C"}
    assert g["C"].children == {"B"}
    assert g["B"].parents == {"C"}
    assert g["B"].children == {"A"}
    assert g["A"].parents == {"B"}
    assert g.leaves() == {"A"}


def test_every_endpoint_exists_once():
    asm = _assembler()
    edges = [("A", "B"), ("C", "B"), ("B", "D"), ("A", "D")]
    for child, parent in edges:
        asm.add_edge(child, parent)
    g = asm.finalize()
    assert sorted(g.nodes) == ["A", "B", "C", "D"]


def test_parent_child_mutuality():
    asm = _assembler()
    for child, parent in [("A", "B"), ("C", "B"), ("B", "D"), ("A", "D"), ("E", "A")]:
        asm.add_edge(child, parent)
    g = asm.finalize()
    for a in g:
        for b in a.children:
            assert a.id in g[b].parents
        for p in a.parents:
            assert a.id in g[p].children


def test_duplicate_edge_is_idempotent():
    once = _assembler()
    once.add_edge("A", "B")
    twice = _assembler()
    twice.add_edge("A", "B")
    twice.add_edge("A", "B")
    assert once.finalize() == twice.finalize()


def test_self_loop_is_dropped():
    asm = _assembler()
    asm.add_edge("X", "Y")
    assert asm.add_edge("X", "X") is False
    g = asm.finalize()
    assert g["X"].parents == {"Y"}
    assert g["X"].children == frozenset()
    assert asm.self_loops == 1


def test_cycles_pass_through():
    asm = _assembler()
    asm.add_edge("A", "B")
    asm.add_edge("B", "A")
    g = asm.finalize()
    assert g.roots == frozenset()
    assert g["A"].parents == {"B"} and g["B"].parents == {"A"}


def test_finalize_snapshot_is_independent():
    asm = _assembler()
    asm.add_edge("A", "B")
    first = asm.finalize()
    assert asm.finalize() == first

    asm.add_edge("B", "C")
    assert "C" not in first
    assert first.roots == {"B"}
    assert asm.finalize().roots == {"C"}
