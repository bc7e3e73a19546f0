"""Normalization of Terraform plan resources and dependency graphs."""

from .graph_normalizer import (
    build_canonical_graph,
    normalize_graph,
    parse,
    resolution_candidates,
    resolve_address,
)
from .resource_normalizer import ResourceNormalizer

__all__ = [
    "ResourceNormalizer",
    "build_canonical_graph",
    "normalize_graph",
    "parse",
    "resolution_candidates",
    "resolve_address",
]
