"""Command-line interface implementation for the change-graph tooling."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Sequence

from ..adapters import PlanLoader, PlanLoaderError, SchemaCache
from ..drafts import DraftManager, DraftManifestError
from ..models import (
    DriftResult,
    Explanation,
    FlowStep,
    ImpactNode,
    ImpactResult,
    OutputUsageResult,
    PlanSummary,
    ValueFlowExplanation,
)
from ..service import AnalysisContext, ChangeGraphService

FAIL_ON_CHOICES = ("none", "destructive", "any")
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]], empty: str) -> str:
    """Render rows as a simple text table for terminal output."""

    if not rows:
        return empty

    table = [tuple(headers)] + [tuple(str(value) for value in row) for row in rows]
    widths = [max(len(row[idx]) for row in table) for idx in range(len(headers))]

    def format_row(values: Sequence[str]) -> str:
        return "  ".join(value.ljust(width) for value, width in zip(values, widths, strict=True))

    lines = [format_row(table[0])]
    lines.append("  ".join("=" * width for width in widths))
    for row in table[1:]:
        lines.append(format_row(row))
    return "\n".join(lines)


# Serialization ------------------------------------------------------------------
def _serialize_summary(summary: PlanSummary) -> dict[str, int]:
    return {
        "create": summary.create,
        "update": summary.update,
        "delete": summary.delete,
        "no_change": summary.no_change,
    }


def _serialize_impact_node(node: ImpactNode) -> dict[str, Any]:
    return {
        "address": node.address,
        "depth": node.depth,
        "action": node.action.value if node.action else None,
        "has_draft": node.has_draft,
        "warnings": list(node.warnings),
    }


def _serialize_impact(result: ImpactResult) -> dict[str, Any]:
    return {
        "source": result.source,
        "direct": [_serialize_impact_node(node) for node in result.direct],
        "transitive": [_serialize_impact_node(node) for node in result.transitive],
    }


def _serialize_drift(result: DriftResult) -> dict[str, Any]:
    return {
        "drifted": [{"address": e.address, "reason": e.reason} for e in result.drifted],
        "orphaned": [{"address": e.address, "reason": e.reason} for e in result.orphaned],
    }


def _serialize_usage(result: OutputUsageResult) -> dict[str, Any]:
    return {
        "identifier": result.identifier,
        "direct_modules": list(result.direct_modules),
        "direct_resources": list(result.direct_resources),
        "transitive_resources": list(result.transitive_resources),
    }


def _serialize_explanation(explanation: Explanation) -> dict[str, Any]:
    return {
        "subject": explanation.subject,
        "reason_type": explanation.reason_type.value,
        "explanation": explanation.explanation,
        "path": list(explanation.path) if explanation.path is not None else None,
    }


# Table rendering -------------------------------------------------------------------
def _impact_table(result: ImpactResult) -> str:
    rows = [
        (
            "direct" if node.depth == 1 else "transitive",
            str(node.depth),
            node.address,
            node.action.value if node.action else "-",
            "; ".join(node.warnings) or "-",
        )
        for node in result.all
    ]
    header = f"Impact of {result.source}"
    body = render_table(
        ("Impact", "Depth", "Resource", "Action", "Warnings"),
        rows,
        "No downstream impact.",
    )
    return f"{header}\n{body}"


def _drift_table(result: DriftResult) -> str:
    rows = [("drifted", entry.address, entry.reason) for entry in result.drifted]
    rows += [("orphaned", entry.address, entry.reason) for entry in result.orphaned]
    return render_table(("Kind", "Resource", "Reason"), rows, "No drift detected.")


def _usage_table(result: OutputUsageResult) -> str:
    rows = [("module", address) for address in result.direct_modules]
    rows += [("direct", address) for address in result.direct_resources]
    rows += [("transitive", address) for address in result.transitive_resources]
    return render_table(
        ("Usage", "Address"), rows, f"No consumers of {result.identifier} found."
    )


def _explanation_table(explanations: Sequence[Explanation]) -> str:
    rows = [
        (item.subject, item.reason_type.value, item.explanation) for item in explanations
    ]
    return render_table(("Subject", "Reason", "Explanation"), rows, "Nothing to explain.")


def _summary_table(context: AnalysisContext) -> str:
    summary = context.summary
    lines = [
        f"Create: {summary.create}  Update: {summary.update}  "
        f"Delete: {summary.delete}  No change: {summary.no_change}",
        "",
    ]
    rows = [
        (resource.address, resource.change_action.value, ",".join(resource.actions) or "-")
        for resource in context.resources
    ]
    lines.append(
        render_table(("Resource", "Action", "Planned actions"), rows, "No resource changes.")
    )
    return "\n".join(lines)


def _value_flow_table(steps: Sequence[FlowStep], explanation: ValueFlowExplanation) -> str:
    table = render_table(
        ("Kind", "Detail"),
        [(step.kind.value, step.detail) for step in steps],
        "No value flow steps.",
    )
    return f"{table}\n\n{explanation.explanation}"


# Parser ----------------------------------------------------------------------------
def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=Path.cwd(),
        help="Directory containing plan.json and graph.dot artifacts.",
    )
    parser.add_argument(
        "--plan-json",
        type=Path,
        default=None,
        help="Path to a Terraform plan exported with `terraform show -json`.",
    )
    parser.add_argument(
        "--graph",
        type=Path,
        default=None,
        help="Path to DOT output captured from `terraform graph`.",
    )
    parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format for analysis results.",
    )


def _add_draft_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--draft",
        dest="drafts",
        action="append",
        default=None,
        metavar="ADDRESS",
        help="Resource address carrying a hypothetical pending edit.",
    )
    parser.add_argument(
        "--draft-manifest",
        dest="draft_manifests",
        action="append",
        type=Path,
        default=None,
        help="YAML/JSON manifest listing draft changes.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser."""

    parser = argparse.ArgumentParser(
        prog="iac-change-graph", description="Terraform change-graph analysis CLI"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity written to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command")

    summary_parser = subparsers.add_parser("summary", help="Summarize planned actions.")
    _add_common_arguments(summary_parser)

    impact_parser = subparsers.add_parser(
        "impact", help="Show the blast radius downstream of a resource."
    )
    impact_parser.add_argument("source", help="Resource address to analyze from.")
    _add_common_arguments(impact_parser)
    _add_draft_arguments(impact_parser)
    impact_parser.add_argument(
        "--fail-on",
        choices=FAIL_ON_CHOICES,
        default="none",
        help="Exit with status 1 when impacted resources carry matching warnings.",
    )

    drift_parser = subparsers.add_parser("drift", help="Report drifted and orphaned resources.")
    _add_common_arguments(drift_parser)

    outputs_parser = subparsers.add_parser(
        "outputs", help="Find consumers of a module or output identifier."
    )
    outputs_parser.add_argument("identifier", help="Identifier such as module.network.")
    _add_common_arguments(outputs_parser)

    explain_parser = subparsers.add_parser(
        "explain", help="Explain why each downstream resource is impacted."
    )
    explain_parser.add_argument("source", help="Resource address to analyze from.")
    _add_common_arguments(explain_parser)
    _add_draft_arguments(explain_parser)

    refactor_parser = subparsers.add_parser(
        "refactor", help="Explain which configuration consumes a variable, output or resource."
    )
    refactor_parser.add_argument("subject", help="Address such as var.region or output.vpc_id.")
    _add_common_arguments(refactor_parser)

    flow_parser = subparsers.add_parser(
        "value-flow", help="Trace where a planned attribute value comes from."
    )
    flow_parser.add_argument("address", help="Resource address.")
    flow_parser.add_argument("attribute", help="Attribute name.")
    _add_common_arguments(flow_parser)

    schema_parser = subparsers.add_parser("schema", help="Look up a resource type schema.")
    schema_parser.add_argument("resource_type", help="Resource type such as aws_instance.")
    schema_parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=Path.cwd(),
        help="Directory containing providers-schema.json.",
    )
    schema_parser.add_argument(
        "--schema-file",
        type=Path,
        default=None,
        help="Output of `terraform providers schema -json`.",
    )

    return parser


def create_service() -> ChangeGraphService:
    """Create a change-graph service backed by the on-disk plan loader."""

    return ChangeGraphService(plan_loader_factory=PlanLoader)


def _load_context(service: ChangeGraphService, args: argparse.Namespace) -> AnalysisContext:
    working_dir = args.path.resolve()
    return service.load(
        working_dir,
        plan_json_path=args.plan_json.resolve() if args.plan_json else None,
        graph_path=args.graph.resolve() if args.graph else None,
    )


def _resolve_drafts(args: argparse.Namespace) -> list[str]:
    drafted = list(args.drafts or [])
    if args.draft_manifests:
        drafted.extend(DraftManager().drafted_addresses(args.draft_manifests))
    return list(dict.fromkeys(drafted))


def _should_fail(result: ImpactResult, fail_on: str) -> bool:
    if fail_on == "destructive":
        return any(node.is_destructive for node in result.all)
    if fail_on == "any":
        return any(node.warnings for node in result.all)
    return False


def _emit(payload: Any, table: str, output_format: str) -> None:
    if output_format == "json":
        print(json.dumps(payload, indent=2))
    else:
        print(table)


# Handlers --------------------------------------------------------------------------
def _handle_summary(service: ChangeGraphService, args: argparse.Namespace) -> int:
    context = _load_context(service, args)
    payload = {
        "metadata": dict(context.metadata),
        "summary": _serialize_summary(context.summary),
        "resources": [
            {
                "address": resource.address,
                "action": resource.change_action.value,
                "actions": list(resource.actions),
            }
            for resource in context.resources
        ],
    }
    _emit(payload, _summary_table(context), args.format)
    return 0


def _handle_impact(service: ChangeGraphService, args: argparse.Namespace) -> int:
    context = _load_context(service, args)
    result = service.impact(context, args.source, drafted_addresses=_resolve_drafts(args))
    _emit(_serialize_impact(result), _impact_table(result), args.format)
    return 1 if _should_fail(result, args.fail_on) else 0


def _handle_drift(service: ChangeGraphService, args: argparse.Namespace) -> int:
    context = _load_context(service, args)
    result = service.drift(context)
    _emit(_serialize_drift(result), _drift_table(result), args.format)
    return 0


def _handle_outputs(service: ChangeGraphService, args: argparse.Namespace) -> int:
    context = _load_context(service, args)
    result = service.output_usage(context, args.identifier)
    _emit(_serialize_usage(result), _usage_table(result), args.format)
    return 0


def _handle_explain(service: ChangeGraphService, args: argparse.Namespace) -> int:
    context = _load_context(service, args)
    impact = service.impact(context, args.source, drafted_addresses=_resolve_drafts(args))
    explanations = service.explain_impact(context, impact)
    payload = {
        "impact": _serialize_impact(impact),
        "explanations": [_serialize_explanation(item) for item in explanations],
    }
    _emit(payload, _explanation_table(explanations), args.format)
    return 0


def _handle_refactor(service: ChangeGraphService, args: argparse.Namespace) -> int:
    context = _load_context(service, args)
    explanations = service.explain_refactor(context, {"subject_address": args.subject})
    payload = [_serialize_explanation(item) for item in explanations]
    _emit(payload, _explanation_table(explanations), args.format)
    return 0


def _handle_value_flow(service: ChangeGraphService, args: argparse.Namespace) -> int:
    context = _load_context(service, args)
    steps, explanation = service.value_flow(context, args.address, args.attribute)
    payload = {
        "address": args.address,
        "attribute": args.attribute,
        "steps": [{"kind": step.kind.value, "detail": step.detail} for step in steps],
        "explanation": explanation.explanation,
    }
    _emit(payload, _value_flow_table(steps, explanation), args.format)
    return 0


def _handle_schema(args: argparse.Namespace) -> int:
    loader = PlanLoader(args.path, schema_path=args.schema_file)
    cache = SchemaCache(lambda _workspace: loader.load_provider_schemas())
    schema = cache.resource_schema(loader.workspace, args.resource_type)
    if schema is None:
        print(f"No schema found for {args.resource_type}")
        return 1
    print(json.dumps(schema, indent=2, sort_keys=True))
    return 0


_HANDLERS: Dict[str, Callable[[ChangeGraphService, argparse.Namespace], int]] = {
    "summary": _handle_summary,
    "impact": _handle_impact,
    "drift": _handle_drift,
    "outputs": _handle_outputs,
    "explain": _handle_explain,
    "refactor": _handle_refactor,
    "value-flow": _handle_value_flow,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by tests and the ``python -m`` invocation."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    try:
        if args.command == "schema":
            return _handle_schema(args)

        handler = _HANDLERS.get(args.command)
        if handler is None:
            parser.print_help()
            return 0
        return handler(create_service(), args)
    except (PlanLoaderError, DraftManifestError) as exc:
        print(f"Error: {exc}")
        return 2


def run() -> None:  # pragma: no cover - thin wrapper for module execution
    """Execute the CLI and exit with the produced status code."""

    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover - module execution guard
    run()
