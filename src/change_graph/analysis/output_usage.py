"""Find consumers of a module or output identifier."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping

import networkx as nx

from ..models import OutputUsageResult
from .expressions import ExpressionEntry, build_expression_index
from .traversal import downstream_closure

logger = logging.getLogger(__name__)


def reference_matches(reference: str, identifier: str) -> bool:
    """Return ``True`` when ``reference`` and ``identifier`` name the same object.

    Either side may be a dotted child of the other, so ``module.network``
    matches ``module.network.vpc_id`` and vice versa.
    """

    return (
        reference == identifier
        or reference.startswith(identifier + ".")
        or identifier.startswith(reference + ".")
    )


def _entry_matches(entry: ExpressionEntry, identifier: str) -> bool:
    return any(reference_matches(reference, identifier) for reference in entry.references)


def analyze_output_usage(
    plan: Mapping[str, Any] | None,
    identifier: str,
    edges: Iterable[Any] | nx.DiGraph,
) -> OutputUsageResult:
    """Return the modules and resources consuming ``identifier``.

    Direct consumers come from the expression index; transitive consumers
    are everything downstream of a direct resource in the dependency graph.
    """

    if not isinstance(plan, Mapping) or not identifier:
        return OutputUsageResult(identifier=identifier)

    modules: dict[str, None] = {}
    resources: dict[str, None] = {}
    for entry in build_expression_index(plan):
        if not _entry_matches(entry, identifier):
            continue
        if entry.container.startswith("module."):
            modules.setdefault(entry.container, None)
        elif entry.container.startswith("output."):
            continue
        else:
            resources.setdefault(entry.container, None)

    direct_resources = list(resources)
    transitive: List[str] = [
        address
        for address in downstream_closure(direct_resources, edges)
        if address not in resources
    ]

    logger.debug(
        "Usage of %s: %d modules, %d resources, %d transitive",
        identifier,
        len(modules),
        len(direct_resources),
        len(transitive),
    )
    return OutputUsageResult(
        identifier=identifier,
        direct_modules=tuple(modules),
        direct_resources=tuple(direct_resources),
        transitive_resources=tuple(transitive),
    )


__all__ = ["analyze_output_usage", "reference_matches"]
