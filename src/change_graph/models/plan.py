"""Read-only accessors over a parsed Terraform plan document.

Every accessor treats a missing or malformed section as empty so analyzers
can work on partial plans without special casing.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence, Tuple


def _as_mapping(value: Any) -> Optional[Mapping[str, Any]]:
    return value if isinstance(value, Mapping) else None


def resource_changes(plan: Mapping[str, Any] | None) -> List[Mapping[str, Any]]:
    """Return the plan's ``resource_changes`` entries that are mappings."""

    if not isinstance(plan, Mapping):
        return []
    changes = plan.get("resource_changes") or []
    if not isinstance(changes, Sequence) or isinstance(changes, (str, bytes)):
        return []
    return [change for change in changes if isinstance(change, Mapping)]


def change_actions(change: Mapping[str, Any]) -> Tuple[str, ...]:
    """Return the raw action list of a single resource change."""

    body = _as_mapping(change.get("change")) or {}
    actions = body.get("actions") or []
    if not isinstance(actions, Sequence) or isinstance(actions, (str, bytes)):
        return ()
    return tuple(action for action in actions if isinstance(action, str))


def change_address(change: Mapping[str, Any]) -> str:
    address = change.get("address")
    return address if isinstance(address, str) else ""


def plan_addresses(plan: Mapping[str, Any] | None) -> List[str]:
    """Return resource change addresses in plan order, without duplicates."""

    seen: dict[str, None] = {}
    for change in resource_changes(plan):
        address = change_address(change)
        if address:
            seen.setdefault(address, None)
    return list(seen)


def configuration_root(plan: Mapping[str, Any] | None) -> Optional[Mapping[str, Any]]:
    """Return ``configuration.root_module`` when present."""

    if not isinstance(plan, Mapping):
        return None
    configuration = _as_mapping(plan.get("configuration"))
    if configuration is None:
        return None
    return _as_mapping(configuration.get("root_module"))


def prior_state_root(plan: Mapping[str, Any] | None) -> Optional[Mapping[str, Any]]:
    """Return the root module of the prior state.

    Accepts ``prior_state`` or ``state``, with the module tree either under
    ``values.root_module`` (state JSON) or directly under ``root_module``.
    """

    if not isinstance(plan, Mapping):
        return None
    prior = _as_mapping(plan.get("prior_state")) or _as_mapping(plan.get("state"))
    if prior is None:
        return None

    values = _as_mapping(prior.get("values"))
    if values is not None and _as_mapping(values.get("root_module")) is not None:
        return _as_mapping(values.get("root_module"))
    return _as_mapping(prior.get("root_module"))


def module_resources(module: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    resources = module.get("resources") or []
    if not isinstance(resources, Sequence) or isinstance(resources, (str, bytes)):
        return []
    return [resource for resource in resources if isinstance(resource, Mapping)]


def module_calls(module: Mapping[str, Any]) -> List[Tuple[str, Mapping[str, Any]]]:
    """Return ``(name, call)`` pairs from a configuration module."""

    calls = _as_mapping(module.get("module_calls")) or {}
    return [(str(name), call) for name, call in calls.items() if isinstance(call, Mapping)]


def child_modules(module: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    children = module.get("child_modules") or []
    if not isinstance(children, Sequence) or isinstance(children, (str, bytes)):
        return []
    return [child for child in children if isinstance(child, Mapping)]


def qualify(prefix: str, address: str) -> str:
    """Join a module prefix and a relative address."""

    return f"{prefix}.{address}" if prefix else address
