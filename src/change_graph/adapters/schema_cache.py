"""Provider schema lookups backed by an explicit, caller-owned cache."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

SchemaLoader = Callable[[str], Optional[Mapping[str, Any]]]


class SchemaCache:
    """Cache provider schema documents per workspace.

    The cache lives exactly as long as the instance. ``loader`` receives a
    workspace identifier and returns the parsed output of ``terraform
    providers schema -json`` (or ``None`` when unavailable).
    """

    def __init__(self, loader: SchemaLoader) -> None:
        self._loader = loader
        self._entries: Dict[str, Mapping[str, Any]] = {}

    def __contains__(self, workspace: object) -> bool:
        return workspace in self._entries

    # ------------------------------------------------------------------
    def load(self, workspace: str, *, force: bool = False) -> Optional[Mapping[str, Any]]:
        """Return the schema document for ``workspace``, loading it when needed."""

        if not force and workspace in self._entries:
            return self._entries[workspace]

        document = self._loader(workspace)
        if not isinstance(document, Mapping):
            logger.warning("No provider schemas available for workspace %s", workspace)
            return None

        # ``{"schema": {...}}`` envelopes are unwrapped.
        schema = document.get("schema")
        if isinstance(schema, Mapping):
            document = schema

        self._entries[workspace] = document
        return document

    def provider_schema(self, workspace: str, provider: str) -> Optional[Mapping[str, Any]]:
        """Return a provider schema by exact or suffix match on its address."""

        providers = self._providers(workspace)
        if provider in providers:
            return providers[provider]
        for key, schema in providers.items():
            if key.endswith(provider) or provider.endswith(key):
                return schema
        return None

    def resource_schema(self, workspace: str, resource_type: str) -> Optional[Mapping[str, Any]]:
        """Return the schema of ``resource_type`` from the first provider declaring it."""

        for provider in self._providers(workspace).values():
            if not isinstance(provider, Mapping):
                continue
            resources = provider.get("resource_schemas")
            if not isinstance(resources, Mapping):
                continue
            if resource_type in resources:
                return resources[resource_type]
            for key, schema in resources.items():
                if (
                    key.endswith(resource_type)
                    or resource_type.endswith(key)
                    or resource_type in key
                    or key in resource_type
                ):
                    return schema
        return None

    def clear(self, workspace: str | None = None) -> None:
        """Drop one workspace, or every workspace when none is given."""

        if workspace is None:
            self._entries.clear()
        else:
            self._entries.pop(workspace, None)

    # ------------------------------------------------------------------
    def _providers(self, workspace: str) -> Mapping[str, Any]:
        document = self.load(workspace)
        if document is None:
            return {}
        providers = document.get("provider_schemas")
        return providers if isinstance(providers, Mapping) else {}


__all__ = ["SchemaCache", "SchemaLoader"]
