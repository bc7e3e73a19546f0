"""Orchestration layer used by the CLI to run change-graph analyses."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, MutableMapping

from .adapters import PlanLoader
from .analysis import (
    analyze_drift,
    analyze_impact,
    analyze_output_usage,
    build_action_map,
    explain_refactor_warning,
    explain_value_flow,
    explain_why_for_impact,
    get_value_flow,
    summarize_plan,
)
from .models import (
    ChangeAction,
    DriftResult,
    Explanation,
    FlowStep,
    Graph,
    ImpactResult,
    NormalizedResource,
    OutputUsageResult,
    PlanSummary,
    ValueFlowExplanation,
)
from .normalization import ResourceNormalizer, normalize_graph

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AnalysisContext:
    """Plan, canonical graph and derived lookups shared by every analysis."""

    plan: Mapping[str, Any]
    graph: Graph
    action_map: Dict[str, ChangeAction]
    summary: PlanSummary
    resources: List[NormalizedResource] = field(default_factory=list)
    metadata: Mapping[str, Any] = field(default_factory=dict)


PlanLoaderFactory = Callable[..., PlanLoader]


class ChangeGraphService:
    """High level service responsible for plan ingestion and graph analysis."""

    def __init__(
        self,
        *,
        plan_loader_factory: PlanLoaderFactory | None = None,
        normalizer: ResourceNormalizer | None = None,
    ) -> None:
        self._plan_loader_factory = plan_loader_factory or PlanLoader
        self._normalizer = normalizer or ResourceNormalizer()

    # ------------------------------------------------------------------
    def load(
        self,
        working_dir: Path,
        *,
        plan_json_path: Path | None = None,
        graph_path: Path | None = None,
    ) -> AnalysisContext:
        """Load plan and graph artifacts and build the shared analysis context."""

        loader_kwargs: MutableMapping[str, Any] = {"working_dir": working_dir}
        if plan_json_path:
            loader_kwargs["plan_json_path"] = plan_json_path
        if graph_path:
            loader_kwargs["graph_path"] = graph_path

        loader = self._plan_loader_factory(**loader_kwargs)
        plan = loader.load_plan()
        graph_text = loader.load_graph()

        return self.build_context(plan, graph_text, metadata={"working_dir": str(working_dir)})

    def build_context(
        self,
        plan: Mapping[str, Any],
        graph_text: str | None,
        *,
        metadata: Mapping[str, Any] | None = None,
    ) -> AnalysisContext:
        """Build an :class:`AnalysisContext` from already loaded artifacts."""

        graph = normalize_graph(graph_text, plan)
        resources = self._normalizer.normalize(plan)
        summary = summarize_plan(plan)

        context_metadata: Dict[str, Any] = dict(metadata or {})
        context_metadata.update(
            {
                "resource_count": len(resources),
                "node_count": len(graph.nodes),
                "edge_count": len(graph.edges),
            }
        )
        logger.info(
            "Loaded plan with %d resource changes and %d graph edges",
            len(resources),
            len(graph.edges),
        )

        return AnalysisContext(
            plan=plan,
            graph=graph,
            action_map=build_action_map(plan),
            summary=summary,
            resources=resources,
            metadata=context_metadata,
        )

    # ------------------------------------------------------------------
    def impact(
        self,
        context: AnalysisContext,
        source: str,
        *,
        drafted_addresses: Iterable[str] | None = None,
    ) -> ImpactResult:
        """Run impact analysis with replacements reported as ``replace``."""

        return analyze_impact(
            source,
            context.graph.edges,
            self.severity_actions(context),
            drafted_addresses,
        )

    def severity_actions(self, context: AnalysisContext) -> Dict[str, ChangeAction]:
        """Return a copy of the action map with replacements set to ``replace``."""

        actions = dict(context.action_map)
        for resource in context.resources:
            if resource.is_replacement and resource.address in actions:
                actions[resource.address] = ChangeAction.REPLACE
        return actions

    def drift(self, context: AnalysisContext) -> DriftResult:
        return analyze_drift(context.plan)

    def output_usage(self, context: AnalysisContext, identifier: str) -> OutputUsageResult:
        return analyze_output_usage(context.plan, identifier, context.graph.edges)

    def explain_impact(
        self, context: AnalysisContext, impact_result: ImpactResult
    ) -> List[Explanation]:
        return explain_why_for_impact(impact_result, context.plan, context.graph.edges)

    def explain_refactor(self, context: AnalysisContext, warning: Any) -> List[Explanation]:
        return explain_refactor_warning(warning, context.plan, context.graph.edges)

    def value_flow(
        self, context: AnalysisContext, address: str, attribute: str
    ) -> tuple[List[FlowStep], ValueFlowExplanation]:
        steps = get_value_flow(context.plan, address, attribute)
        return steps, explain_value_flow(steps, address, attribute)


__all__ = ["AnalysisContext", "ChangeGraphService"]
