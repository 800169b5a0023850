from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from quantity_taxonomy.errors import FetchError, TaxonomyCycleError
from quantity_taxonomy.models import QuantityGraph, QuantityId
from quantity_taxonomy.settings import settings

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    level = (settings.log_level or "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


async def _fetch(args: argparse.Namespace) -> QuantityGraph:
    from quantity_taxonomy.builder import fetch_taxonomy
    from quantity_taxonomy.queries import links_query, units_query
    from quantity_taxonomy.sources import SparqlQuerySource

    async with SparqlQuerySource(args.endpoint) as source:
        return await fetch_taxonomy(
            source,
            links_query=links_query(args.base, language=args.language),
            units_query=units_query(args.base, language=args.language),
            allow_partial=args.allow_partial,
        )


def _load_dump(path: str) -> QuantityGraph:
    try:
        return QuantityGraph.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"cannot read graph dump {path}: {e!r}") from e


def _load_or_fetch(args: argparse.Namespace) -> QuantityGraph:
    if getattr(args, "input", None):
        return _load_dump(args.input)
    return asyncio.run(_fetch(args))


def render_tree(
    graph: QuantityGraph, roots: list[QuantityId] | None = None, *, max_depth: int | None = None
) -> list[str]:
    """Indented outline of the hierarchy; a node already on the path is marked, not expanded.

    Without explicit `roots`, groups of nodes only reachable through a cycle
    are printed too, each starting from its lowest id.
    """
    lines: list[str] = []

    def walk(qid: QuantityId, depth: int, path: frozenset[QuantityId]) -> None:
        node = graph[qid]
        name = node.label or qid
        suffix = f" [{node.symbol}]" if node.symbol else ""
        if qid in path:
            lines.append("  " * depth + f"{name} ({qid}) <cycle>")
            return
        lines.append("  " * depth + f"{name} ({qid}){suffix}")
        if max_depth is not None and depth >= max_depth:
            return
        for child in graph.children_of(qid):
            walk(child.id, depth + 1, path | {qid})

    if roots is not None:
        for root in roots:
            walk(root, 0, frozenset())
        return lines

    for root in sorted(graph.roots):
        walk(root, 0, frozenset())
    covered = set(graph.roots).union(*(graph.descendants(r) for r in graph.roots))
    for qid in sorted(graph.nodes):
        if qid not in covered:
            walk(qid, 0, frozenset())
            covered |= {qid} | graph.descendants(qid)
    return lines


def cmd_version() -> int:
    from quantity_taxonomy import __version__

    print(__version__)
    return 0


def cmd_fetch(args: argparse.Namespace) -> int:
    _configure_logging()
    try:
        graph = _load_or_fetch(args)
        if args.validate:
            from quantity_taxonomy.validation import check_acyclic

            check_acyclic(graph)
    except (FetchError, TaxonomyCycleError, ValueError) as e:
        logger.error("%s", e)
        return 1

    for w in graph.warnings:
        logger.warning("%s", w)
    if args.output:
        Path(args.output).write_text(json.dumps(graph.to_dict(), indent=2), encoding="utf-8")
        print(f"wrote {len(graph)} quantities to {args.output}")
    else:
        print(
            {
                "quantities": len(graph),
                "roots": len(graph.roots),
                "leaves": len(graph.leaves()),
                "warnings": len(graph.warnings),
            }
        )
    return 0


def cmd_tree(args: argparse.Namespace) -> int:
    _configure_logging()
    try:
        graph = _load_or_fetch(args)
    except (FetchError, ValueError) as e:
        logger.error("%s", e)
        return 1

    roots = None
    if args.root:
        if args.root not in graph:
            print(f"unknown quantity: {args.root}", file=sys.stderr)
            return 2
        roots = [args.root]
    for line in render_tree(graph, roots, max_depth=args.max_depth):
        print(line)
    return 0


def _add_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--endpoint", default=None, help="SPARQL endpoint URL")
    p.add_argument("--base", default=None, help="Base quantity id (default from settings)")
    p.add_argument("--language", default=None, help="Label language")
    p.add_argument("--allow-partial", action="store_true", help="Keep going if one query fails")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="quantity-taxonomy")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version").set_defaults(func=lambda _a: cmd_version())

    fetch = sub.add_parser("fetch", help="Fetch both result sets and build the taxonomy")
    _add_source_args(fetch)
    fetch.add_argument("--input", default=None, help="Load a previous JSON dump instead of fetching")
    fetch.add_argument("--output", default=None, help="Write the graph as JSON")
    fetch.add_argument("--validate", action="store_true", help="Fail if the taxonomy has a cycle")
    fetch.set_defaults(func=cmd_fetch)

    tree = sub.add_parser("tree", help="Print the subclass hierarchy")
    _add_source_args(tree)
    tree.add_argument("--input", default=None, help="JSON dump written by `fetch --output`")
    tree.add_argument("--root", default=None, help="Only print below this quantity id")
    tree.add_argument("--max-depth", type=int, default=None)
    tree.set_defaults(func=cmd_tree)

    return p


def app() -> None:
    parser = build_parser()
    args = parser.parse_args()
    rc = args.func(args)
    raise SystemExit(rc)


if __name__ == "__main__":
    app()
