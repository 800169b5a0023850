from .sparql import QuerySource, SparqlQuerySource, parse_envelope

__all__ = ["QuerySource", "SparqlQuerySource", "parse_envelope"]
