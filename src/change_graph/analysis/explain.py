"""Explain why resources are affected by a change.

Explanations combine a shortest dependency path from the graph with an
attribute-level reference from the configuration's expression index when one
can be found. Nothing here raises: missing data produces an ``unknown``
explanation instead.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Tuple

import networkx as nx

from ..models import Explanation, ImpactResult, ReasonType, as_digraph
from .expressions import ExpressionEntry, build_expression_index
from .traversal import find_path

logger = logging.getLogger(__name__)

ARROW = " → "

NO_PATH = "Explanation unavailable: no dependency path found in graph"
NO_PREDECESSOR = "No predecessor found in path"
NO_SUBJECT = "Refactor warning has no identifiable subject"
NO_CONSUMERS = (
    "No consuming resources or references found in plan configuration. "
    "Explanation unavailable."
)

_SUBJECT_KEYS = ("subject_address", "subjectAddress", "target", "name")


def _parent_reference(reference: str) -> str:
    return reference.rsplit(".", 1)[0] if "." in reference else ""


def _address_matches(container: str, address: str) -> bool:
    return container == address or container.endswith(address) or address.endswith(container)


def find_attribute_reference(
    from_address: str,
    to_address: str,
    entries: Iterable[ExpressionEntry],
) -> Optional[Tuple[str, str]]:
    """Return ``(attribute, reference)`` on ``to_address`` that points at ``from_address``."""

    entries = tuple(entries)
    for entry in entries:
        if not _address_matches(entry.container, to_address):
            continue
        for reference in entry.references:
            if not reference:
                continue
            if (
                from_address in reference
                or reference in from_address
                or from_address in _parent_reference(reference)
            ):
                return entry.attribute, reference

    # Any expression that mentions both ends of the edge.
    for entry in entries:
        hits = [ref for ref in entry.references if ref and from_address in ref]
        if hits and any(to_address in ref for ref in entry.references):
            return entry.attribute, hits[0]

    return None


def explain_why_for_impact(
    impact_result: ImpactResult | None,
    plan: Mapping[str, Any] | None,
    edges: Iterable[Any] | nx.DiGraph,
) -> List[Explanation]:
    """Return one explanation per node in ``impact_result.all``."""

    if impact_result is None or not isinstance(plan, Mapping):
        return []

    digraph = as_digraph(edges)
    entries = build_expression_index(plan)
    explanations: List[Explanation] = []

    for node in impact_result.all:
        subject = node.address
        path = find_path(impact_result.source, subject, digraph)
        if path is None:
            explanations.append(Explanation(subject, ReasonType.UNKNOWN, NO_PATH))
            continue

        if len(path) < 2:
            explanations.append(Explanation(subject, ReasonType.UNKNOWN, NO_PREDECESSOR, path))
            continue

        predecessor = path[-2]
        found = find_attribute_reference(predecessor, subject, entries)
        if found is not None:
            attribute, reference = found
            text = (
                f"Depends on {predecessor} via {subject}.{attribute}, "
                f"which references {reference}"
            )
        else:
            text = (
                f"Dependency path: {ARROW.join(path)}. "
                "No attribute-level reference exposed in plan configuration."
            )
        explanations.append(Explanation(subject, ReasonType.DEPENDENCY, text, path))

    return explanations


def _warning_subject(warning: Any) -> Optional[str]:
    for key in _SUBJECT_KEYS:
        if isinstance(warning, Mapping):
            value = warning.get(key)
        else:
            value = getattr(warning, key, None)
        if isinstance(value, str) and value:
            return value
    return None


def _reason_for(subject: str) -> ReasonType:
    if subject.startswith("var."):
        return ReasonType.VARIABLE
    if subject.startswith("output."):
        return ReasonType.OUTPUT
    return ReasonType.DEPENDENCY


def explain_refactor_warning(
    warning: Any,
    plan: Mapping[str, Any] | None,
    edges: Iterable[Any] | nx.DiGraph,
) -> List[Explanation]:
    """Explain which configuration consumes the subject of a refactor warning.

    ``warning`` may be a mapping or an object exposing ``subject_address``,
    ``target`` or ``name``. One explanation is returned per consuming
    reference; a subject nobody references yields a single ``unknown`` entry.
    """

    if warning is None or not isinstance(plan, Mapping):
        return []

    subject = _warning_subject(warning)
    if subject is None:
        return [Explanation("unknown", ReasonType.UNKNOWN, NO_SUBJECT)]

    consumers: List[Tuple[ExpressionEntry, str]] = []
    for entry in build_expression_index(plan):
        for reference in entry.references:
            if reference and (subject in reference or reference in subject):
                consumers.append((entry, reference))

    if not consumers:
        logger.debug("No consumers found for refactor subject %s", subject)
        return [Explanation(subject, ReasonType.UNKNOWN, NO_CONSUMERS)]

    digraph = as_digraph(edges)
    reason = _reason_for(subject)
    explanations: List[Explanation] = []
    for entry, reference in consumers:
        path = find_path(subject, entry.container, digraph)
        text = (
            f"Referenced by {entry.container}.{entry.attribute} "
            f"(expression reference: {reference})"
        )
        if path:
            text += f" via path {ARROW.join(path)}"
        explanations.append(Explanation(subject, reason, text, path))

    return explanations


__all__ = [
    "explain_refactor_warning",
    "explain_why_for_impact",
    "find_attribute_reference",
]
