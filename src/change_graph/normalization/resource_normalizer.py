"""Conversion helpers that turn raw Terraform plan JSON into service models."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from ..analysis.classifier import classify
from ..models import NormalizedResource
from ..models.plan import change_actions, resource_changes


class ResourceNormalizer:
    """Normalize Terraform plan JSON into :class:`NormalizedResource` instances."""

    def normalize(self, plan: Mapping[str, Any] | None) -> List[NormalizedResource]:
        """Return normalized resources for the supplied plan structure."""

        return [self._normalize_change(change) for change in resource_changes(plan)]

    # ------------------------------------------------------------------
    def _normalize_change(self, change: Mapping[str, Any]) -> NormalizedResource:
        body = change.get("change")
        if not isinstance(body, Mapping):
            body = {}
        actions = change_actions(change)

        return NormalizedResource(
            address=change.get("address", ""),
            module_path=self._module_path(change.get("module_address")),
            type=change.get("type", ""),
            name=change.get("name", ""),
            provider_name=change.get("provider_name"),
            mode=change.get("mode", "managed"),
            index=change.get("index"),
            actions=actions,
            change_action=classify(actions),
            before=self._values(body.get("before")),
            after=self._values(body.get("after")),
        )

    def _module_path(self, module_address: str | None) -> List[str]:
        if not module_address:
            return []

        parts: List[str] = []
        for segment in module_address.split("."):
            if segment == "module":
                continue
            parts.append(segment)
        return parts

    def _values(self, values: Any) -> Dict[str, Any] | None:
        return dict(values) if isinstance(values, Mapping) else None
