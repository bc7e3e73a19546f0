"""Change-graph analyzers: classification, impact, drift, usage and explanations."""

from .classifier import build_action_map, classify, summarize_plan
from .drift import analyze_drift
from .explain import explain_refactor_warning, explain_why_for_impact
from .expressions import ExpressionEntry, build_expression_index
from .impact import analyze_impact, severity_warnings
from .output_usage import analyze_output_usage
from .traversal import bfs_layers, downstream_closure, find_path
from .value_flow import explain_value_flow, get_value_flow

__all__ = [
    "ExpressionEntry",
    "analyze_drift",
    "analyze_impact",
    "analyze_output_usage",
    "bfs_layers",
    "build_action_map",
    "build_expression_index",
    "classify",
    "downstream_closure",
    "explain_refactor_warning",
    "explain_value_flow",
    "explain_why_for_impact",
    "find_path",
    "get_value_flow",
    "severity_warnings",
    "summarize_plan",
]
