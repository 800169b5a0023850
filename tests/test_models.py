from quantity_taxonomy.assembler import GraphAssembler
from quantity_taxonomy.models import QuantityGraph
from quantity_taxonomy.registry import NodeRegistry


def _graph():
    reg = NodeRegistry()
    asm = GraphAssembler(reg)
    for child, parent in [("A", "B"), ("B", "C"), ("D", "C")]:
        asm.add_edge(child, parent)
    reg.merge_label(reg.ensure("B"), "Length")
    reg.merge_units(reg.ensure("B"), ["metre", "foot"])
    reg.merge_symbol(reg.ensure("B"), "l")
    return asm.finalize(warnings=("unit row 3: missing",))


def test_traversal_helpers():
    g = _graph()
    assert g.descendants("C") == {"A", "B", "D"}
    assert g.ancestors("A") == {"B", "C"}
    assert [n.id for n in g.children_of("C")] == ["B", "D"]
    assert [n.id for n in g.parents_of("A")] == ["B"]
    assert [n.id for n in g.find_by_label("length")] == ["B"]
    assert g.get("Z") is None


def test_traversal_tolerates_cycles():
    asm = GraphAssembler(NodeRegistry())
    asm.add_edge("A", "B")
    asm.add_edge("B", "A")
    g = asm.finalize()
    assert g.descendants("A") == {"B"}
    assert g.ancestors("A") == {"B"}


def test_dict_round_trip():
    g = _graph()
    data = g.to_dict()
    assert data["roots"] == ["C"]
    assert data["nodes"][1] == {
        "id": "B",
        "label": "Length",
        "symbol": "l",
        "units": ["foot", "metre"],
        "concepts": [],
        "parents": ["C"],
        "children": ["A"],
    }
    assert QuantityGraph.from_dict(data) == g


def test_to_networkx_edges_point_at_parents():
    nxg = _graph().to_networkx()
    assert set(nxg.edges) == {("A", "B"), ("B", "C"), ("D", "C")}
    assert nxg.nodes["B"]["label"] == "Length"
