"""Turn raw SPARQL JSON bindings into typed rows.

A binding maps a variable name to a term object such as
``{"type": "uri", "value": "http://www.wikidata.org/entity/Q11379"}``.
Variables the query left unbound are simply missing from the mapping.

Multi-valued fields arrive pre-aggregated by ``GROUP_CONCAT(...; SEPARATOR=", ")``.
Splitting them is best effort: a label that itself contains ", " over-splits.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from .errors import MalformedRowError
from .models import LinkRow, UnitRow
from .settings import settings

logger = logging.getLogger(__name__)

SEPARATOR = ", "

RowT = TypeVar("RowT", LinkRow, UnitRow)


class RowShape(str, Enum):
    LINK = "link"
    UNIT = "unit"


@dataclass(slots=True)
class NormalizedRows(Generic[RowT]):
    rows: list[RowT] = field(default_factory=list)
    errors: list[MalformedRowError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def split_multi_value(raw: str | None) -> frozenset[str] | None:
    """Split a delimited field into a set of trimmed, non-empty pieces.

    >>> sorted(split_multi_value("metre, kilogram, metre"))
    ['kilogram', 'metre']
    """
    if raw is None:
        return None
    pieces = frozenset(p.strip() for p in raw.split(SEPARATOR))
    pieces = pieces - {""}
    return pieces or None


def binding_value(binding: Mapping[str, Any], name: str) -> str | None:
    term = binding.get(name)
    if not isinstance(term, Mapping):
        return None
    value = term.get("value")
    return value if isinstance(value, str) else None


def entity_id(value: str | None, prefix: str | None = None) -> str | None:
    """Reduce an entity URI to its local id (``.../entity/Q11379`` -> ``Q11379``)."""
    if value is None:
        return None
    prefix = settings.entity_prefix if prefix is None else prefix
    value = value.strip()
    if prefix and value.startswith(prefix):
        value = value[len(prefix):]
    return value or None


def normalize_link_binding(binding: Any, *, entity_prefix: str | None = None) -> LinkRow:
    if not isinstance(binding, Mapping):
        raise MalformedRowError("link binding is not a mapping", binding)
    item = entity_id(binding_value(binding, "item"), entity_prefix)
    link_to = entity_id(binding_value(binding, "linkTo"), entity_prefix)
    if item is None:
        raise MalformedRowError("link row is missing 'item'", binding)
    if link_to is None:
        raise MalformedRowError(f"link row for {item} is missing 'linkTo'", binding)
    try:
        return LinkRow(item=item, item_label=binding_value(binding, "itemLabel"), link_to=link_to)
    except ValidationError as e:
        raise MalformedRowError(f"invalid link row for {item}: {e}", binding) from e


def normalize_unit_binding(binding: Any, *, entity_prefix: str | None = None) -> UnitRow:
    if not isinstance(binding, Mapping):
        raise MalformedRowError("unit binding is not a mapping", binding)
    quantity = entity_id(binding_value(binding, "quantity"), entity_prefix)
    if quantity is None:
        raise MalformedRowError("unit row is missing 'quantity'", binding)
    try:
        return UnitRow(
            quantity=quantity,
            quantity_label=binding_value(binding, "quantityLabel"),
            symbol=binding_value(binding, "symbol"),
            units=split_multi_value(binding_value(binding, "units")),
            concepts=split_multi_value(binding_value(binding, "concepts")),
        )
    except ValidationError as e:
        raise MalformedRowError(f"invalid unit row for {quantity}: {e}", binding) from e


_NORMALIZERS = {
    RowShape.LINK: (LinkRow, normalize_link_binding),
    RowShape.UNIT: (UnitRow, normalize_unit_binding),
}


def normalize_bindings(
    bindings: Iterable[Any], shape: RowShape | str, *, entity_prefix: str | None = None
) -> NormalizedRows:
    """Normalize a whole result set, skipping rows that fail validation.

    Rows that are already of the target type pass through untouched.
    """
    shape = RowShape(shape)
    row_type, fn = _NORMALIZERS[shape]
    out: NormalizedRows = NormalizedRows()
    for i, binding in enumerate(bindings):
        if isinstance(binding, row_type):
            out.rows.append(binding)
            continue
        try:
            out.rows.append(fn(binding, entity_prefix=entity_prefix))
        except MalformedRowError as e:
            logger.warning("Skipping %s row %d: %s", shape.value, i, e.reason)
            out.errors.append(e)
            out.warnings.append(f"{shape.value} row {i}: {e.reason}")
    return out
