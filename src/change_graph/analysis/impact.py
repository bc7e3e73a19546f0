"""Blast-radius analysis downstream of a selected resource."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

import networkx as nx

from ..models import ChangeAction, ImpactNode, ImpactResult, ImpactWarning
from .traversal import bfs_layers

logger = logging.getLogger(__name__)


def severity_warnings(
    action: Optional[ChangeAction], depth: int, has_draft: bool
) -> List[str]:
    """Return the warnings for a node reached at ``depth`` with ``action``."""

    warnings: List[str] = []

    if has_draft:
        warnings.append(ImpactWarning.DRAFT.value)

    if action is ChangeAction.DELETE:
        warnings.append(ImpactWarning.DESTRUCTIVE.value)
        if depth > 1:
            warnings.append(ImpactWarning.FORCED_DELETION.value)
    elif action is ChangeAction.REPLACE:
        warnings.append(ImpactWarning.REPLACEMENT.value)
        if depth > 1:
            warnings.append(ImpactWarning.FORCED_REPLACEMENT.value)
    elif action is ChangeAction.UPDATE and depth > 1:
        warnings.append(ImpactWarning.TRIGGERED_UPDATE.value)

    return warnings


def _coerce_action(value: Any) -> Optional[ChangeAction]:
    if value is None or isinstance(value, ChangeAction):
        return value
    try:
        return ChangeAction(str(value).strip().lower())
    except ValueError:
        return None


def analyze_impact(
    source: str,
    edges: Iterable[Any] | nx.DiGraph,
    action_map: Mapping[str, Any] | None = None,
    drafted_addresses: Iterable[str] | None = None,
) -> ImpactResult:
    """Compute the nodes downstream of ``source``.

    Nodes are annotated with their planned action, draft status and severity
    warnings, then split into direct (depth 1) and transitive (depth 2+)
    dependents. A source with no outgoing edges, or one that is absent from
    the graph, yields an empty result rather than an error.
    """

    actions = action_map or {}
    drafted = set(drafted_addresses or ())

    direct: List[ImpactNode] = []
    transitive: List[ImpactNode] = []

    for address, depth, _parent in bfs_layers(source, edges):
        action = _coerce_action(actions.get(address))
        has_draft = address in drafted
        node = ImpactNode(
            address=address,
            depth=depth,
            action=action,
            has_draft=has_draft,
            warnings=tuple(severity_warnings(action, depth, has_draft)),
        )
        if depth == 1:
            direct.append(node)
        else:
            transitive.append(node)

    logger.debug(
        "Impact of %s: %d direct, %d transitive", source, len(direct), len(transitive)
    )
    return ImpactResult(source=source, direct=tuple(direct), transitive=tuple(transitive))


__all__ = ["analyze_impact", "severity_warnings"]
