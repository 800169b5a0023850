from __future__ import annotations

import logging

from .models import QuantityGraph, QuantityId
from .registry import NodeRegistry

logger = logging.getLogger(__name__)


class GraphAssembler:
    """Attaches subclass edges between registry nodes.

    Cycles coming from the source are passed through untouched; see
    `quantity_taxonomy.validation` for an explicit check.
    """

    def __init__(self, registry: NodeRegistry):
        self.registry = registry
        self.self_loops = 0

    def add_edge(self, child_id: QuantityId, parent_id: QuantityId) -> bool:
        """Link `child_id` as a direct subclass of `parent_id`.

        Returns False for a self-loop, which is dropped (both ids are still
        registered as nodes).
        """
        child = self.registry.ensure(child_id)
        parent = self.registry.ensure(parent_id)
        if child_id == parent_id:
            self.self_loops += 1
            logger.debug("Dropping self-loop on %s", child_id)
            return False
        child.parents.add(parent_id)
        parent.children.add(child_id)
        return True

    def finalize(self, warnings: tuple[str, ...] = ()) -> QuantityGraph:
        """Freeze the registry into an independent snapshot.

        Safe to call repeatedly; each call copies the current state, so the
        returned graph never aliases registry nodes.
        """
        nodes = {node.id: node.freeze() for node in self.registry}
        return QuantityGraph.from_nodes(nodes, warnings=warnings)
