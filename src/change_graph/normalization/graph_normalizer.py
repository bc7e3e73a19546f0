"""Turn ``terraform graph`` DOT output into a canonical address graph."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..models import Graph, GraphEdge, iter_edge_pairs
from ..models.plan import plan_addresses

logger = logging.getLogger(__name__)

EDGE_PATTERN = re.compile(r'"([^"]+)"\s*->\s*"([^"]+)"')

ResolveFn = Callable[[str], Optional[str]]


def parse(raw_graph_text: str | None) -> Graph:
    """Extract ``"A" -> "B"`` edges from DOT text.

    Lines without an edge are ignored, so malformed input produces an empty
    or partial graph rather than an error.
    """

    nodes: dict[str, None] = {}
    edges: dict[GraphEdge, None] = {}

    for line in (raw_graph_text or "").splitlines():
        match = EDGE_PATTERN.search(line)
        if match is None:
            continue
        source, target = match.group(1), match.group(2)
        edges.setdefault(GraphEdge(source, target), None)
        nodes.setdefault(source, None)
        nodes.setdefault(target, None)

    return Graph(nodes=tuple(nodes), edges=tuple(edges))


def resolve_address(raw_label: str, canonical_addresses: Sequence[str]) -> str:
    """Map a DOT node label onto a canonical resource address.

    An exact match wins. Otherwise the canonical addresses are scanned in
    order and the first one that ``raw_label`` ends with, contains, or is
    contained in is returned. With no match ``raw_label`` comes back unchanged.

    Several addresses can match; iteration order decides, not which test
    matched. Use :func:`resolution_candidates` to see every match.
    """

    if not raw_label or raw_label in canonical_addresses:
        return raw_label

    for address in canonical_addresses:
        if not address:
            continue
        if raw_label.endswith(address) or address in raw_label or raw_label in address:
            return address

    return raw_label


def resolution_candidates(raw_label: str, canonical_addresses: Sequence[str]) -> Tuple[str, ...]:
    """Return every canonical address that could resolve ``raw_label``."""

    if not raw_label:
        return ()
    return tuple(
        address
        for address in canonical_addresses
        if address
        and (
            address == raw_label
            or raw_label.endswith(address)
            or address in raw_label
            or raw_label in address
        )
    )


def build_canonical_graph(
    raw_edges: Iterable[Any],
    resolve_fn: ResolveFn,
    plan_addresses: Iterable[str] = (),
) -> Graph:
    """Resolve edge endpoints and union in every planned resource address.

    Edges with an endpoint that resolves to nothing are dropped. Planned
    addresses absent from the DOT text still become nodes so isolated
    resources remain selectable.
    """

    nodes: dict[str, None] = {}
    edges: dict[GraphEdge, None] = {}

    for raw_source, raw_target in iter_edge_pairs(raw_edges):
        source = resolve_fn(raw_source)
        target = resolve_fn(raw_target)
        if not source or not target:
            continue
        edges.setdefault(GraphEdge(source, target), None)
        nodes.setdefault(source, None)
        nodes.setdefault(target, None)

    for address in plan_addresses:
        if address:
            nodes.setdefault(address, None)

    return Graph(nodes=tuple(nodes), edges=tuple(edges))


def normalize_graph(raw_graph_text: str | None, plan: Mapping[str, Any] | None) -> Graph:
    """Parse DOT text and resolve it against the plan's resource addresses."""

    parsed = parse(raw_graph_text)
    canonical: List[str] = plan_addresses(plan)

    def resolve(label: str) -> str:
        candidates = resolution_candidates(label, canonical)
        if len(candidates) > 1 and label not in candidates:
            logger.debug("Ambiguous graph label %s matches %s", label, ", ".join(candidates))
        return resolve_address(label, canonical)

    graph = build_canonical_graph(parsed.edges, resolve, canonical)
    logger.debug("Normalized graph: %d nodes, %d edges", len(graph.nodes), len(graph.edges))
    return graph


__all__ = [
    "EDGE_PATTERN",
    "build_canonical_graph",
    "normalize_graph",
    "parse",
    "resolution_candidates",
    "resolve_address",
]
