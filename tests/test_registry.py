from quantity_taxonomy.registry import NodeRegistry


def test_ensure_returns_same_instance():
    reg = NodeRegistry()
    a = reg.ensure("Q1")
    assert reg.ensure("Q1") is a
    assert len(reg) == 1
    assert "Q1" in reg


def test_ensure_creates_bare_node():
    node = NodeRegistry().ensure("Q1")
    assert node.label == ""
    assert node.symbol is None
    assert node.units == set()
    assert node.parents == set() and node.children == set()


def test_label_first_non_empty_wins():
    reg = NodeRegistry()
    node = reg.ensure("Q1")
    reg.merge_label(node, "")
    reg.merge_label(node, None)
    reg.merge_label(node, "Length")
    assert node.label == "Length"
    reg.merge_label(node, "Width")
    assert node.label == "Length"


def test_symbol_first_non_empty_wins():
    reg = NodeRegistry()
    node = reg.ensure("Q1")
    reg.merge_symbol(node, None)
    reg.merge_symbol(node, "l")
    reg.merge_symbol(node, "L")
    assert node.symbol == "l"


def test_units_union():
    reg = NodeRegistry()
    node = reg.ensure("Q1")
    reg.merge_units(node, {"m", "kg"})
    reg.merge_units(node, {"kg", "s"})
    assert node.units == {"m", "kg", "s"}


def test_units_and_concepts_are_trimmed_and_case_sensitive():
    reg = NodeRegistry()
    node = reg.ensure("Q1")
    reg.merge_units(node, [" metre", "Metre", "", "  "])
    reg.merge_concepts(node, None)
    reg.merge_concepts(node, ["mechanics ", "mechanics"])
    assert node.units == {"metre", "Metre"}
    assert node.concepts == {"mechanics"}
