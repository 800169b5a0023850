from __future__ import annotations

from collections import deque
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    import networkx as nx

QuantityId = str


class LinkRow(BaseModel):
    """One "item is a direct subclass of link_to" edge."""

    model_config = ConfigDict(frozen=True)

    item: QuantityId = Field(min_length=1)
    item_label: str | None = None
    link_to: QuantityId = Field(min_length=1)

    @field_validator("item", "link_to", mode="before")
    @classmethod
    def _strip_id(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("item_label", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class UnitRow(BaseModel):
    """One quantity with its pre-aggregated units and concepts.

    `None` means the source did not bind the field at all.
    """

    model_config = ConfigDict(frozen=True)

    quantity: QuantityId = Field(min_length=1)
    quantity_label: str | None = None
    symbol: str | None = None
    units: frozenset[str] | None = None
    concepts: frozenset[str] | None = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _strip_id(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("quantity_label", "symbol", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


@dataclass(eq=False, slots=True)
class QuantityNode:
    """A quantity while a build is in progress.

    Owned by the NodeRegistry; compared by identity so that `ensure()` callers
    can rely on getting the very same instance back.
    """

    id: QuantityId
    label: str = ""
    symbol: str | None = None
    units: set[str] = field(default_factory=set)
    concepts: set[str] = field(default_factory=set)
    parents: set[QuantityId] = field(default_factory=set)
    children: set[QuantityId] = field(default_factory=set)

    def freeze(self) -> FrozenQuantityNode:
        return FrozenQuantityNode(
            id=self.id,
            label=self.label,
            symbol=self.symbol,
            units=frozenset(self.units),
            concepts=frozenset(self.concepts),
            parents=frozenset(self.parents),
            children=frozenset(self.children),
        )


@dataclass(frozen=True, slots=True)
class FrozenQuantityNode:
    """Read-only view of a quantity inside a finished QuantityGraph."""

    id: QuantityId
    label: str
    symbol: str | None
    units: frozenset[str]
    concepts: frozenset[str]
    parents: frozenset[QuantityId]
    children: frozenset[QuantityId]

    @property
    def is_root(self) -> bool:
        return not self.parents

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "symbol": self.symbol,
            "units": sorted(self.units),
            "concepts": sorted(self.concepts),
            "parents": sorted(self.parents),
            "children": sorted(self.children),
        }


@dataclass(frozen=True)
class QuantityGraph:
    """Immutable snapshot of the quantity taxonomy.

    `nodes` maps every id to its node; `roots` holds the ids without parents;
    `warnings` lists the rows that were skipped while building.

    The source data is not guaranteed acyclic, so every traversal here keeps a
    visited set. Use `quantity_taxonomy.validation` to reject cyclic data.
    """

    nodes: Mapping[QuantityId, FrozenQuantityNode]
    roots: frozenset[QuantityId]
    warnings: tuple[str, ...] = ()

    @classmethod
    def from_nodes(
        cls, nodes: Mapping[QuantityId, FrozenQuantityNode], warnings: tuple[str, ...] = ()
    ) -> QuantityGraph:
        roots = frozenset(qid for qid, node in nodes.items() if not node.parents)
        return cls(nodes=MappingProxyType(dict(nodes)), roots=roots, warnings=tuple(warnings))

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, qid: object) -> bool:
        return qid in self.nodes

    def __getitem__(self, qid: QuantityId) -> FrozenQuantityNode:
        return self.nodes[qid]

    def __iter__(self) -> Iterator[FrozenQuantityNode]:
        return iter(self.nodes.values())

    def get(self, qid: QuantityId) -> FrozenQuantityNode | None:
        return self.nodes.get(qid)

    def leaves(self) -> frozenset[QuantityId]:
        return frozenset(qid for qid, node in self.nodes.items() if not node.children)

    def children_of(self, qid: QuantityId) -> list[FrozenQuantityNode]:
        return [self.nodes[c] for c in sorted(self.nodes[qid].children)]

    def parents_of(self, qid: QuantityId) -> list[FrozenQuantityNode]:
        return [self.nodes[p] for p in sorted(self.nodes[qid].parents)]

    def descendants(self, qid: QuantityId) -> set[QuantityId]:
        return self._reach(qid, "children")

    def ancestors(self, qid: QuantityId) -> set[QuantityId]:
        return self._reach(qid, "parents")

    def _reach(self, qid: QuantityId, attr: str) -> set[QuantityId]:
        seen: set[QuantityId] = set()
        queue = deque(getattr(self.nodes[qid], attr))
        while queue:
            cur = queue.popleft()
            if cur in seen:
                continue
            seen.add(cur)
            queue.extend(getattr(self.nodes[cur], attr))
        # A cycle through qid would otherwise report it as its own relative.
        seen.discard(qid)
        return seen

    def find_by_label(self, label: str) -> list[FrozenQuantityNode]:
        needle = label.strip().lower()
        return sorted(
            (n for n in self.nodes.values() if n.label.lower() == needle), key=lambda n: n.id
        )

    def to_networkx(self) -> nx.DiGraph:
        """Directed graph with one child -> parent edge per subclass link."""
        import networkx as nx

        g = nx.DiGraph()
        for node in self.nodes.values():
            g.add_node(
                node.id,
                label=node.label,
                symbol=node.symbol,
                units=sorted(node.units),
                concepts=sorted(node.concepts),
            )
        for node in self.nodes.values():
            for parent in node.parents:
                g.add_edge(node.id, parent)
        return g

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> QuantityGraph:
        """Inverse of `to_dict`; roots are recomputed from the parent links."""
        nodes = {}
        for d in data.get("nodes") or []:
            nodes[d["id"]] = FrozenQuantityNode(
                id=d["id"],
                label=d.get("label") or "",
                symbol=d.get("symbol"),
                units=frozenset(d.get("units") or ()),
                concepts=frozenset(d.get("concepts") or ()),
                parents=frozenset(d.get("parents") or ()),
                children=frozenset(d.get("children") or ()),
            )
        return cls.from_nodes(nodes, warnings=tuple(data.get("warnings") or ()))

    def to_dict(self) -> dict[str, Any]:
        return {
            "roots": sorted(self.roots),
            "nodes": [self.nodes[qid].to_dict() for qid in sorted(self.nodes)],
            "warnings": list(self.warnings),
        }
