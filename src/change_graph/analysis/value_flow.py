"""Heuristic tracing of where a planned attribute value comes from."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Sequence

from ..models import FlowKind, FlowStep, ValueFlowExplanation
from ..models.plan import change_address, resource_changes
from .expressions import OUTPUT, ExpressionEntry, build_expression_index

_MISSING = object()

UNAVAILABLE = "Explanation unavailable"


def classify_reference(reference: str) -> FlowStep:
    if reference.startswith("var."):
        return FlowStep(FlowKind.VARIABLE, reference)
    if reference.startswith("module."):
        return FlowStep(FlowKind.MODULE_OUTPUT, reference)
    if "." in reference:
        return FlowStep(FlowKind.RESOURCE_ATTRIBUTE, reference)
    return FlowStep(FlowKind.UNKNOWN, reference)


def _after_values(change: Mapping[str, Any]) -> Mapping[str, Any]:
    body = change.get("change")
    after = body.get("after") if isinstance(body, Mapping) else None
    return after if isinstance(after, Mapping) else {}


def _literal_detail(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return f"[array {len(value)}]"
    if isinstance(value, Mapping):
        return "[object]"
    return str(value)


def _matches_resource(entry: ExpressionEntry, address: str) -> bool:
    return (
        entry.container == address
        or address.endswith(entry.container)
        or entry.container.endswith(address)
    )


def get_value_flow(
    plan: Mapping[str, Any] | None, address: str, attribute: str
) -> List[FlowStep]:
    """Return the steps that explain how ``address.attribute`` gets its value."""

    if not isinstance(plan, Mapping):
        return [FlowStep(FlowKind.UNKNOWN, "No plan data available")]

    changes = resource_changes(plan)
    change = next((item for item in changes if change_address(item) == address), None)
    value = _after_values(change).get(attribute, _MISSING) if change else _MISSING

    steps: List[FlowStep] = []
    if value is _MISSING:
        steps.append(FlowStep(FlowKind.UNKNOWN, "Attribute not present in plan change.after"))
    else:
        steps.append(FlowStep(FlowKind.LITERAL, _literal_detail(value)))

    entries = build_expression_index(plan)
    matches = [
        entry
        for entry in entries
        if entry.kind != OUTPUT
        and entry.attribute == attribute
        and _matches_resource(entry, address)
    ]

    if matches:
        for entry in matches:
            if not entry.references:
                steps.append(
                    FlowStep(FlowKind.UNKNOWN, "Expression present but no references exposed")
                )
            steps.extend(classify_reference(reference) for reference in entry.references)
    else:
        qualified = f"{address}.{attribute}"
        for entry in entries:
            if any(address in ref or qualified in ref for ref in entry.references):
                steps.extend(classify_reference(reference) for reference in entry.references)

    if len(steps) == 1 and steps[0].kind is FlowKind.LITERAL:
        literal = steps[0].detail
        for other in changes:
            if change_address(other) == address:
                continue
            found = next(
                (
                    key
                    for key, candidate in _after_values(other).items()
                    if _literal_detail(candidate) == literal
                ),
                None,
            )
            if found is not None:
                steps.append(
                    FlowStep(FlowKind.RESOURCE_ATTRIBUTE, f"{change_address(other)}.{found}")
                )
                break

    if len(steps) == 1 and steps[0].kind is FlowKind.LITERAL:
        steps.append(
            FlowStep(
                FlowKind.UNKNOWN,
                "Value appears to be a literal or resolved value; "
                "origin not traceable from plan JSON",
            )
        )

    return steps


def explain_value_flow(
    steps: Sequence[FlowStep] | Iterable[FlowStep], address: str, attribute: str
) -> ValueFlowExplanation:
    """Turn flow steps into short sentences."""

    steps = list(steps or ())
    if not steps:
        return ValueFlowExplanation(explanation=UNAVAILABLE)

    items: List[str] = []
    first = steps[0]
    if first.kind is FlowKind.LITERAL:
        items.append(f"`{attribute}` appears to be a literal or resolved value: {first.detail}")

    for step in steps[1:]:
        if step.kind is FlowKind.VARIABLE:
            items.append(f"Because it references variable `{step.detail}`.")
        elif step.kind in (FlowKind.MODULE_INPUT, FlowKind.MODULE_OUTPUT):
            items.append(f"Because it flows through module reference `{step.detail}`.")
        elif step.kind is FlowKind.RESOURCE_ATTRIBUTE:
            items.append(f"Because it references resource attribute `{step.detail}`.")
        elif step.kind is FlowKind.UNKNOWN:
            items.append(f"Origin not traceable from plan JSON: `{step.detail}`.")
        else:
            items.append(f"Reference: `{step.detail}` (type: {step.kind.value})")

    explanation = " ".join(items) if items else UNAVAILABLE
    return ValueFlowExplanation(explanation=explanation, items=tuple(items))


__all__ = ["classify_reference", "explain_value_flow", "get_value_flow"]
