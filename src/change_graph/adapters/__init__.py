"""Adapter layer package for reading plan artifacts and provider schemas."""

from .plan_loader import PlanLoader, PlanLoaderError
from .schema_cache import SchemaCache

__all__ = [
    "PlanLoader",
    "PlanLoaderError",
    "SchemaCache",
]
