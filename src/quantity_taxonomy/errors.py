from __future__ import annotations

from typing import Any


class QuantityTaxonomyError(Exception):
    """Base class for every error raised by this package."""


class FetchError(QuantityTaxonomyError):
    """The query source could not retrieve or parse a result envelope.

    Surfaced to the caller unchanged; the builder never retries it.
    """

    def __init__(self, reason: str, *, query: str | None = None):
        super().__init__(reason)
        self.reason = reason
        self.query = query


class MalformedRowError(QuantityTaxonomyError):
    """A binding record lacked a required field.

    Non-fatal: the normalizer records it and skips the row.
    """

    def __init__(self, reason: str, binding: Any = None):
        super().__init__(reason)
        self.reason = reason
        self.binding = binding


class TaxonomyCycleError(QuantityTaxonomyError):
    def __init__(self, cycle: list[str]):
        self.cycle = list(cycle)
        super().__init__("Taxonomy contains a cycle: " + " -> ".join(self.cycle))
