"""Drift detection between configuration, prior state and planned actions."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping

from ..models import DriftEntry, DriftResult
from ..models.plan import change_actions, change_address, resource_changes
from .expressions import configuration_addresses, state_addresses

logger = logging.getLogger(__name__)

UPDATE_REASON = "Configuration differs from state (update)"
REPLACE_REASON = "Resource will be replaced (replace/force)"
ORPHANED_REASON = "Resource present in state but not in configuration (orphaned)"


def analyze_drift(plan: Mapping[str, Any] | None) -> DriftResult:
    """Return drifted and orphaned resources for ``plan``.

    A resource drifts when its planned actions include ``update`` or a
    replacement. A resource is orphaned when the prior state records it but
    no configuration block declares it any more. The same address may be
    reported in both lists.
    """

    if not isinstance(plan, Mapping):
        return DriftResult()

    drifted: List[DriftEntry] = []
    for change in resource_changes(plan):
        actions = set(change_actions(change))
        address = change_address(change)
        if "update" in actions:
            drifted.append(DriftEntry(address=address, reason=UPDATE_REASON))
        elif "replace" in actions or {"create", "delete"} <= actions:
            drifted.append(DriftEntry(address=address, reason=REPLACE_REASON))

    declared = set(configuration_addresses(plan))
    orphaned = [
        DriftEntry(address=address, reason=ORPHANED_REASON)
        for address in state_addresses(plan)
        if address not in declared
    ]

    logger.debug("Drift analysis: %d drifted, %d orphaned", len(drifted), len(orphaned))
    return DriftResult(drifted=tuple(drifted), orphaned=tuple(orphaned))


__all__ = ["ORPHANED_REASON", "REPLACE_REASON", "UPDATE_REASON", "analyze_drift"]
