from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .assembler import GraphAssembler
from .errors import FetchError
from .models import LinkRow, QuantityGraph, UnitRow
from .normalizer import RowShape, normalize_bindings
from .registry import NodeRegistry
from .sources.sparql import QuerySource

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IntakeStats:
    rows: int
    skipped: int


class TaxonomyBuilder:
    """Builds one QuantityGraph from link rows and unit rows.

    Both intake methods accept raw SPARQL bindings or already typed rows and
    may be called in either order, any number of times, before `finalize()`.
    A builder is single-task: merge concurrently fetched result sets one
    after the other.
    """

    def __init__(self, *, entity_prefix: str | None = None):
        self.entity_prefix = entity_prefix
        self.registry = NodeRegistry()
        self.assembler = GraphAssembler(self.registry)
        self.warnings: list[str] = []

    def build_from_link_rows(self, rows: Iterable[LinkRow | Any]) -> IntakeStats:
        normalized = normalize_bindings(rows, RowShape.LINK, entity_prefix=self.entity_prefix)
        self.warnings.extend(normalized.warnings)
        for row in normalized.rows:
            self.registry.merge_label(self.registry.ensure(row.item), row.item_label)
            self.assembler.add_edge(row.item, row.link_to)
        return self._stats("link", normalized.rows, normalized.errors)

    def build_from_unit_rows(self, rows: Iterable[UnitRow | Any]) -> IntakeStats:
        normalized = normalize_bindings(rows, RowShape.UNIT, entity_prefix=self.entity_prefix)
        self.warnings.extend(normalized.warnings)
        for row in normalized.rows:
            node = self.registry.ensure(row.quantity)
            self.registry.merge_label(node, row.quantity_label)
            self.registry.merge_symbol(node, row.symbol)
            self.registry.merge_units(node, row.units)
            self.registry.merge_concepts(node, row.concepts)
        return self._stats("unit", normalized.rows, normalized.errors)

    def finalize(self) -> QuantityGraph:
        graph = self.assembler.finalize(warnings=tuple(self.warnings))
        logger.info(
            "Built taxonomy: %d quantities, %d roots, %d warnings",
            len(graph),
            len(graph.roots),
            len(graph.warnings),
        )
        return graph

    @staticmethod
    def _stats(kind: str, rows: list, errors: list) -> IntakeStats:
        logger.info("Merged %d %s rows (%d skipped)", len(rows), kind, len(errors))
        return IntakeStats(rows=len(rows), skipped=len(errors))


async def fetch_taxonomy(
    source: QuerySource,
    *,
    links_query: str,
    units_query: str,
    allow_partial: bool = False,
    entity_prefix: str | None = None,
) -> QuantityGraph:
    """Run both queries concurrently, then merge their rows sequentially.

    With `allow_partial`, a stream whose fetch failed contributes nothing and
    the failure is recorded as a warning; otherwise the FetchError propagates
    and no graph is returned.
    """
    link_res, unit_res = await asyncio.gather(
        source.execute(links_query), source.execute(units_query), return_exceptions=True
    )

    builder = TaxonomyBuilder(entity_prefix=entity_prefix)
    for kind, res, intake in (
        ("link", link_res, builder.build_from_link_rows),
        ("unit", unit_res, builder.build_from_unit_rows),
    ):
        if isinstance(res, FetchError) and allow_partial:
            logger.warning("Continuing without %s rows: %s", kind, res.reason)
            builder.warnings.append(f"{kind} query failed: {res.reason}")
            continue
        if isinstance(res, BaseException):
            raise res
        intake(res)
    return builder.finalize()
