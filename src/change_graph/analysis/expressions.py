"""Module tree walks and the flattened expression index.

Terraform's plan JSON describes configuration as nested modules. The walkers
here flatten both the configuration tree (``module_calls``) and the prior
state tree (``child_modules``) while guarding against module objects that
re-enter their own ancestry, which would otherwise recurse forever.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterator, List, Mapping, Tuple

from ..models.plan import (
    child_modules,
    configuration_root,
    module_calls,
    module_resources,
    prior_state_root,
    qualify,
)

logger = logging.getLogger(__name__)

RESOURCE = "resource"
OUTPUT = "output"
MODULE_CALL = "module_call"


@dataclass(slots=True, frozen=True)
class ExpressionEntry:
    """One attribute expression and the references it exposes."""

    container: str
    attribute: str
    references: Tuple[str, ...]
    kind: str = RESOURCE


def iter_configuration_modules(
    plan: Mapping[str, Any] | None,
) -> Iterator[Tuple[str, Mapping[str, Any]]]:
    """Yield ``(prefix, module)`` for every module reachable via ``module_calls``."""

    root = configuration_root(plan)
    if root is not None:
        yield from _walk_configuration(root, "", frozenset())


def _walk_configuration(
    module: Mapping[str, Any], prefix: str, ancestors: FrozenSet[int]
) -> Iterator[Tuple[str, Mapping[str, Any]]]:
    if id(module) in ancestors:
        logger.warning("Module cycle detected at %s; skipping nested walk", prefix or "root")
        return

    yield prefix, module

    lineage = ancestors | {id(module)}
    for name, call in module_calls(module):
        nested = call.get("module")
        if isinstance(nested, Mapping):
            yield from _walk_configuration(nested, qualify(prefix, f"module.{name}"), lineage)


def iter_state_modules(
    plan: Mapping[str, Any] | None,
) -> Iterator[Tuple[str, Mapping[str, Any]]]:
    """Yield ``(prefix, module)`` for the prior state tree via ``child_modules``."""

    root = prior_state_root(plan)
    if root is not None:
        yield from _walk_state(root, "", frozenset())


def _walk_state(
    module: Mapping[str, Any], prefix: str, ancestors: FrozenSet[int]
) -> Iterator[Tuple[str, Mapping[str, Any]]]:
    if id(module) in ancestors:
        logger.warning("State module cycle detected at %s; skipping nested walk", prefix or "root")
        return

    yield prefix, module

    lineage = ancestors | {id(module)}
    for child in child_modules(module):
        child_address = child.get("address")
        child_prefix = child_address if isinstance(child_address, str) else ""
        yield from _walk_state(child, child_prefix, lineage)


def configuration_addresses(plan: Mapping[str, Any] | None) -> List[str]:
    """Return every declared resource address, module-qualified."""

    addresses: dict[str, None] = {}
    for prefix, module in iter_configuration_modules(plan):
        for resource in module_resources(module):
            address = resource.get("address")
            if isinstance(address, str) and address:
                addresses.setdefault(qualify(prefix, address), None)
    return list(addresses)


def state_addresses(plan: Mapping[str, Any] | None) -> List[str]:
    """Return every resource address recorded in the prior state."""

    addresses: dict[str, None] = {}
    for prefix, module in iter_state_modules(plan):
        for resource in module_resources(module):
            address = resource.get("address")
            if not isinstance(address, str) or not address:
                continue
            # State JSON already reports module resources fully qualified.
            if prefix and not address.startswith(prefix + "."):
                address = qualify(prefix, address)
            addresses.setdefault(address, None)
    return list(addresses)


def collect_references(expression: Any) -> Tuple[str, ...]:
    """Return the references exposed by an expression, including nested blocks."""

    found: dict[str, None] = {}
    _collect(expression, found)
    return tuple(found)


def _collect(value: Any, found: dict[str, None]) -> None:
    if isinstance(value, Mapping):
        references = value.get("references")
        if isinstance(references, list):
            for reference in references:
                if isinstance(reference, str):
                    found.setdefault(reference, None)
        for key, nested in value.items():
            if key in ("references", "constant_value"):
                continue
            if isinstance(nested, (Mapping, list)):
                _collect(nested, found)
    elif isinstance(value, list):
        for item in value:
            _collect(item, found)


def build_expression_index(plan: Mapping[str, Any] | None) -> Tuple[ExpressionEntry, ...]:
    """Flatten the configuration tree into expression entries.

    Emits one entry per resource attribute expression, one per module output
    (container ``output.<name>``) and one per module call input (container
    ``module.<name>``), each qualified by the enclosing module prefix.
    """

    entries: List[ExpressionEntry] = []
    for prefix, module in iter_configuration_modules(plan):
        for resource in module_resources(module):
            address = resource.get("address")
            if not isinstance(address, str) or not address:
                continue
            container = qualify(prefix, address)
            expressions = resource.get("expressions")
            if not isinstance(expressions, Mapping):
                continue
            for attribute, expression in expressions.items():
                entries.append(
                    ExpressionEntry(
                        container=container,
                        attribute=str(attribute),
                        references=collect_references(expression),
                    )
                )

        outputs = module.get("outputs")
        if isinstance(outputs, Mapping):
            for name, output in outputs.items():
                if not isinstance(output, Mapping):
                    continue
                value = output.get("expression") or output.get("value")
                if not value:
                    continue
                entries.append(
                    ExpressionEntry(
                        container=qualify(prefix, f"output.{name}"),
                        attribute="value",
                        references=collect_references(value),
                        kind=OUTPUT,
                    )
                )

        for name, call in module_calls(module):
            inputs = call.get("expressions")
            if not isinstance(inputs, Mapping):
                continue
            container = qualify(prefix, f"module.{name}")
            for attribute, expression in inputs.items():
                entries.append(
                    ExpressionEntry(
                        container=container,
                        attribute=str(attribute),
                        references=collect_references(expression),
                        kind=MODULE_CALL,
                    )
                )

    return tuple(entries)


__all__ = [
    "ExpressionEntry",
    "MODULE_CALL",
    "OUTPUT",
    "RESOURCE",
    "build_expression_index",
    "collect_references",
    "configuration_addresses",
    "iter_configuration_modules",
    "iter_state_modules",
    "state_addresses",
]
