"""Canonical dependency graph models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Tuple

import networkx as nx


@dataclass(slots=True, frozen=True)
class GraphEdge:
    """Directed edge pointing from a dependency to its dependent."""

    source: str
    target: str

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target


@dataclass(slots=True, frozen=True)
class Graph:
    """Canonical node and edge set built from plan data and DOT text."""

    nodes: Tuple[str, ...] = ()
    edges: Tuple[GraphEdge, ...] = ()

    def __contains__(self, address: object) -> bool:
        return address in self.nodes

    def to_digraph(self) -> nx.DiGraph:
        """Return a :class:`networkx.DiGraph` with every node and edge."""

        digraph = as_digraph(self.edges)
        digraph.add_nodes_from(self.nodes)
        return digraph


def iter_edge_pairs(edges: Iterable[Any]) -> Iterator[Tuple[str, str]]:
    """Yield ``(source, target)`` pairs from edges, tuples or mappings.

    Entries that do not carry two non-empty string endpoints are skipped.
    """

    for edge in edges or ():
        if isinstance(edge, GraphEdge):
            source, target = edge.source, edge.target
        elif isinstance(edge, Mapping):
            source, target = edge.get("source"), edge.get("target")
        elif isinstance(edge, (tuple, list)) and len(edge) == 2:
            source, target = edge
        else:
            continue

        if isinstance(source, str) and isinstance(target, str) and source and target:
            yield source, target


def as_digraph(edges: Iterable[Any] | nx.DiGraph) -> nx.DiGraph:
    """Build a directed graph whose successor order follows edge order.

    Parallel edges collapse into one; self-loops are kept in the graph and
    skipped by the traversal helpers.
    """

    if isinstance(edges, nx.DiGraph):
        return edges

    digraph = nx.DiGraph()
    digraph.add_edges_from(iter_edge_pairs(edges))
    return digraph
