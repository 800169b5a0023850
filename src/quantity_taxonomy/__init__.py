"""Quantity taxonomy graph builder.

This package provides:
- A SPARQL query source for the Wikidata Query Service
- A normalizer turning raw result bindings into typed rows
- A registry + assembler building a deduplicated subclass graph
- An optional acyclicity check for the finished graph
"""

from .builder import IntakeStats, TaxonomyBuilder, fetch_taxonomy
from .errors import FetchError, MalformedRowError, QuantityTaxonomyError, TaxonomyCycleError
from .models import FrozenQuantityNode, LinkRow, QuantityGraph, QuantityNode, UnitRow
from .sources import QuerySource, SparqlQuerySource

__version__ = "0.1.0"

__all__ = [
    "FetchError",
    "FrozenQuantityNode",
    "IntakeStats",
    "LinkRow",
    "MalformedRowError",
    "QuantityGraph",
    "QuantityNode",
    "QuantityTaxonomyError",
    "QuerySource",
    "SparqlQuerySource",
    "TaxonomyBuilder",
    "TaxonomyCycleError",
    "UnitRow",
    "fetch_taxonomy",
]
