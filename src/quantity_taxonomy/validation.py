"""Optional structural checks on a finished QuantityGraph.

The builder passes cycles in the source data through untouched; call these
after `finalize()` when downstream code needs a DAG.
"""

from __future__ import annotations

import networkx as nx

from .errors import TaxonomyCycleError
from .models import QuantityGraph, QuantityId


def find_cycle(graph: QuantityGraph) -> list[QuantityId] | None:
    """Return the ids along one subclass cycle, or None for an acyclic graph."""
    try:
        edges = nx.find_cycle(graph.to_networkx())
    except nx.NetworkXNoCycle:
        return None
    return [src for src, _dst in edges] + [edges[0][0]]


def check_acyclic(graph: QuantityGraph) -> None:
    cycle = find_cycle(graph)
    if cycle is not None:
        raise TaxonomyCycleError(cycle)


def topological_order(graph: QuantityGraph) -> list[QuantityId]:
    """Ids ordered parents first; raises TaxonomyCycleError on cyclic data."""
    g = graph.to_networkx().reverse(copy=False)
    try:
        return list(nx.lexicographical_topological_sort(g))
    except nx.NetworkXUnfeasible:
        cycle = find_cycle(graph)
        raise TaxonomyCycleError(cycle or []) from None
