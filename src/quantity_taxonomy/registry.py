from __future__ import annotations

from collections.abc import Iterable, Iterator

from .models import QuantityId, QuantityNode


class NodeRegistry:
    """Single owner of every QuantityNode during a build.

    Nodes are created on first mention and only ever enriched, never removed.
    Not safe for concurrent mutation; feed rows from one task.
    """

    def __init__(self) -> None:
        self._nodes: dict[QuantityId, QuantityNode] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, qid: object) -> bool:
        return qid in self._nodes

    def __iter__(self) -> Iterator[QuantityNode]:
        return iter(self._nodes.values())

    def get(self, qid: QuantityId) -> QuantityNode | None:
        return self._nodes.get(qid)

    def ensure(self, qid: QuantityId) -> QuantityNode:
        """Return the node for `qid`, creating a bare one if needed."""
        node = self._nodes.get(qid)
        if node is None:
            node = self._nodes[qid] = QuantityNode(id=qid)
        return node

    # First non-empty value wins.
    @staticmethod
    def merge_label(node: QuantityNode, label: str | None) -> None:
        label = (label or "").strip()
        if label and not node.label:
            node.label = label

    @staticmethod
    def merge_symbol(node: QuantityNode, symbol: str | None) -> None:
        symbol = (symbol or "").strip()
        if symbol and not node.symbol:
            node.symbol = symbol

    @staticmethod
    def merge_units(node: QuantityNode, units: Iterable[str] | None) -> None:
        node.units.update(_clean(units))

    @staticmethod
    def merge_concepts(node: QuantityNode, concepts: Iterable[str] | None) -> None:
        node.concepts.update(_clean(concepts))


def _clean(values: Iterable[str] | None) -> set[str]:
    if not values:
        return set()
    return {v.strip() for v in values if v and v.strip()}
