"""Breadth-first traversal helpers shared by the analyzers.

All helpers follow edges in the ``source -> target`` direction only, skip
self-loops and visit successors in edge order so results are reproducible.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import networkx as nx

from ..models import as_digraph


def _successors(digraph: nx.DiGraph, node: str) -> Iterator[str]:
    if node not in digraph:
        return iter(())
    return (successor for successor in digraph.successors(node) if successor != node)


def bfs_layers(
    source: str, edges: Iterable[Any] | nx.DiGraph
) -> List[Tuple[str, int, str]]:
    """Return ``(node, depth, parent)`` for every node downstream of ``source``.

    The source itself is not included. A node is recorded the first time it
    is reached, which is its shortest distance from ``source``.
    """

    digraph = as_digraph(edges)
    visited = {source}
    queue: deque[Tuple[str, int]] = deque([(source, 0)])
    reached: List[Tuple[str, int, str]] = []

    while queue:
        current, depth = queue.popleft()
        for successor in _successors(digraph, current):
            if successor in visited:
                continue
            visited.add(successor)
            reached.append((successor, depth + 1, current))
            queue.append((successor, depth + 1))

    return reached


def downstream_closure(
    sources: Iterable[str], edges: Iterable[Any] | nx.DiGraph
) -> List[str]:
    """Multi-source BFS returning newly reached nodes in visit order."""

    digraph = as_digraph(edges)
    starts = list(dict.fromkeys(sources))
    visited = set(starts)
    queue: deque[str] = deque(starts)
    reached: List[str] = []

    while queue:
        current = queue.popleft()
        for successor in _successors(digraph, current):
            if successor in visited:
                continue
            visited.add(successor)
            reached.append(successor)
            queue.append(successor)

    return reached


def find_path(
    source: str, target: str, edges: Iterable[Any] | nx.DiGraph
) -> Optional[Tuple[str, ...]]:
    """Return the shortest ``source -> target`` path, or ``None``."""

    if source == target:
        return (source,)

    digraph = as_digraph(edges)
    parents: Dict[str, Optional[str]] = {source: None}
    queue: deque[str] = deque([source])

    while queue:
        current = queue.popleft()
        for successor in _successors(digraph, current):
            if successor in parents:
                continue
            parents[successor] = current
            if successor == target:
                return _unwind(parents, successor)
            queue.append(successor)

    return None


def _unwind(parents: Dict[str, Optional[str]], node: str) -> Tuple[str, ...]:
    path: List[str] = []
    current: Optional[str] = node
    while current is not None:
        path.append(current)
        current = parents[current]
    return tuple(reversed(path))


__all__ = ["bfs_layers", "downstream_closure", "find_path"]
