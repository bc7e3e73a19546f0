"""Data models for Terraform plans, dependency graphs and analysis results."""

from .analysis import (
    DESTRUCTIVE_WARNINGS,
    DriftEntry,
    DriftResult,
    Explanation,
    FlowKind,
    FlowStep,
    ImpactNode,
    ImpactResult,
    ImpactWarning,
    OutputUsageResult,
    PlanSummary,
    ReasonType,
    ValueFlowExplanation,
)
from .graph import Graph, GraphEdge, as_digraph, iter_edge_pairs
from .resource import ChangeAction, NormalizedResource

__all__ = [
    "ChangeAction",
    "DESTRUCTIVE_WARNINGS",
    "DriftEntry",
    "DriftResult",
    "Explanation",
    "FlowKind",
    "FlowStep",
    "Graph",
    "GraphEdge",
    "ImpactNode",
    "ImpactResult",
    "ImpactWarning",
    "NormalizedResource",
    "OutputUsageResult",
    "PlanSummary",
    "ReasonType",
    "ValueFlowExplanation",
    "as_digraph",
    "iter_edge_pairs",
]
