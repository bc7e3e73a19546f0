"""Change-graph analysis for Terraform plans."""

from .service import AnalysisContext, ChangeGraphService

__all__ = ["AnalysisContext", "ChangeGraphService"]
