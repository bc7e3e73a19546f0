"""Reduce Terraform action lists to a single effective action."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

from ..models import ChangeAction, PlanSummary
from ..models.plan import change_actions, change_address, resource_changes


def classify(actions: Iterable[str] | None) -> ChangeAction:
    """Return the effective action for a raw action list.

    The first matching rule wins:

    1. ``create`` without ``delete`` -> create
    2. ``delete`` without ``create`` -> delete
    3. ``update``, or ``create`` together with ``delete`` -> update
    4. ``no-op`` or no actions at all -> no-op
    5. anything else (``read`` and unknown values) -> no-op
    """

    action_set = set(actions or ())
    has_create = "create" in action_set
    has_delete = "delete" in action_set

    if has_create and not has_delete:
        return ChangeAction.CREATE
    if has_delete and not has_create:
        return ChangeAction.DELETE
    if "update" in action_set or (has_create and has_delete):
        return ChangeAction.UPDATE
    return ChangeAction.NOOP


def build_action_map(plan: Mapping[str, Any] | None) -> Dict[str, ChangeAction]:
    """Map every ``resource_changes`` address to its effective action.

    A later entry for the same address replaces an earlier one so the map
    holds exactly one action per address.
    """

    action_map: Dict[str, ChangeAction] = {}
    for change in resource_changes(plan):
        address = change_address(change)
        if not address:
            continue
        action_map[address] = classify(change_actions(change))
    return action_map


def summarize_plan(plan: Mapping[str, Any] | None) -> PlanSummary:
    """Count effective actions across all resource changes."""

    counts = {action: 0 for action in ChangeAction}
    for change in resource_changes(plan):
        counts[classify(change_actions(change))] += 1

    return PlanSummary(
        create=counts[ChangeAction.CREATE],
        update=counts[ChangeAction.UPDATE],
        delete=counts[ChangeAction.DELETE],
        no_change=counts[ChangeAction.NOOP],
    )


__all__ = ["build_action_map", "classify", "summarize_plan"]
