"""The two query texts the builder's row shapes correspond to.

They are plain strings handed to a QuerySource; the builder never sees them.
"""

from __future__ import annotations

import re
from string import Template

from .settings import settings

# Q11473 is "physics": only quantities studied there (or subclasses thereof).
DEFAULT_DISCIPLINE = "Q11473"

_LINKS = Template("""
PREFIX wd: <http://www.wikidata.org/entity/>
PREFIX wdt: <http://www.wikidata.org/prop/direct/>
PREFIX wikibase: <http://wikiba.se/ontology#>
PREFIX bd: <http://www.bigdata.com/rdf#>

SELECT DISTINCT ?item ?itemLabel ?linkTo WHERE {
  ?baseQuantity (wdt:P279*) wd:$base;
                (wdt:P2579*) wd:$discipline.
  ?item (wdt:P279*) ?baseQuantity;
        (wdt:P279) ?linkTo.
  ?linkTo (wdt:P279*) wd:$base.
  SERVICE wikibase:label { bd:serviceParam wikibase:language "$language". }
}
""")

_UNITS = Template("""
PREFIX wd: <http://www.wikidata.org/entity/>
PREFIX wdt: <http://www.wikidata.org/prop/direct/>
PREFIX wikibase: <http://wikiba.se/ontology#>
PREFIX bd: <http://www.bigdata.com/rdf#>
PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>

SELECT DISTINCT ?quantity ?quantityLabel ?symbol
  (GROUP_CONCAT(DISTINCT ?unitLabel; SEPARATOR = ", ") AS ?units)
  (GROUP_CONCAT(DISTINCT ?conceptLabel; SEPARATOR = ", ") AS ?concepts)
WHERE {
  ?baseQuantity (wdt:P279*) wd:$base;
                (wdt:P2579*) wd:$discipline.
  ?quantity (wdt:P279*) ?baseQuantity.
  OPTIONAL { ?quantity wdt:P361 ?concept. }
  OPTIONAL { ?quantity wdt:P7973 ?symbol. }
  OPTIONAL {
    { ?quantity wdt:P8111 ?unit. }
    UNION
    { ?quantity wdt:P5061 ?unit. }
    UNION
    { ?quantity wdt:P2370 ?unit. }
  }
  SERVICE wikibase:label {
    bd:serviceParam wikibase:language "[AUTO_LANGUAGE],$language".
    ?quantity rdfs:label ?quantityLabel.
    ?unit rdfs:label ?unitLabel.
    ?concept rdfs:label ?conceptLabel.
  }
  FILTER(BOUND(?quantityLabel))
}
GROUP BY ?quantity ?quantityLabel ?symbol
ORDER BY ?quantityLabel
""")


_ENTITY_ID = re.compile(r"Q\d+")
_LANGUAGE = re.compile(r"[A-Za-z]{2,8}(-[A-Za-z0-9]{1,8})*")


def _params(base: str | None, discipline: str, language: str | None) -> dict[str, str]:
    base = base or settings.base_quantity
    language = language or settings.label_language
    for name, value in (("base", base), ("discipline", discipline)):
        if not _ENTITY_ID.fullmatch(value):
            raise ValueError(f"{name} must be a Wikidata item id like Q107715, got {value!r}")
    if not _LANGUAGE.fullmatch(language):
        raise ValueError(f"language must be a language tag like 'en' or 'pt-br', got {language!r}")
    return {"base": base, "discipline": discipline, "language": language}


def links_query(
    base: str | None = None, *, discipline: str = DEFAULT_DISCIPLINE, language: str | None = None
) -> str:
    """Query producing (item, itemLabel, linkTo) subclass edges.

    Raises:
        ValueError: if an id or the language tag is not well-formed
    """
    return _LINKS.substitute(_params(base, discipline, language))


def units_query(
    base: str | None = None, *, discipline: str = DEFAULT_DISCIPLINE, language: str | None = None
) -> str:
    """Query producing one row per quantity with units/concepts joined by ", "."""
    return _UNITS.substitute(_params(base, discipline, language))
