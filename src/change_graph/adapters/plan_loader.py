from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping

logger = logging.getLogger(__name__)

DEFAULT_PLAN_FILENAME = "plan.json"
DEFAULT_GRAPH_FILENAME = "graph.dot"
DEFAULT_SCHEMA_FILENAME = "providers-schema.json"


class PlanLoaderError(RuntimeError):
    """Exception raised when plan, graph or schema artifacts cannot be read."""


class PlanLoader:
    """Load Terraform plan JSON, graph DOT text and provider schemas from disk.

    Artifacts are produced beforehand with ``terraform show -json``,
    ``terraform graph`` and ``terraform providers schema -json``. When no
    explicit path is given the loader looks for default file names inside
    ``working_dir``.
    """

    def __init__(
        self,
        working_dir: str | os.PathLike[str] = ".",
        *,
        plan_json_path: str | os.PathLike[str] | None = None,
        graph_path: str | os.PathLike[str] | None = None,
        schema_path: str | os.PathLike[str] | None = None,
    ) -> None:
        self.working_dir = Path(working_dir).resolve()
        self.plan_json_path = Path(plan_json_path).resolve() if plan_json_path else None
        self.graph_path = Path(graph_path).resolve() if graph_path else None
        self.schema_path = Path(schema_path).resolve() if schema_path else None

    @property
    def workspace(self) -> str:
        return str(self.working_dir)

    def load_plan(self) -> Mapping[str, Any]:
        """Load the plan JSON artifact."""

        path = self.plan_json_path or self.working_dir / DEFAULT_PLAN_FILENAME
        data = self._load_json_artifact(path, "Terraform plan JSON artifact")
        if not isinstance(data, Mapping):
            raise PlanLoaderError(f"Plan artifact must contain a JSON object: {path}")
        return data

    def load_graph(self) -> str:
        """Load DOT text, or an empty graph when the default file is absent."""

        if self.graph_path is not None:
            if not self.graph_path.exists():
                raise PlanLoaderError(f"Terraform graph file not found: {self.graph_path}")
            return self._read_text(self.graph_path)

        default = self.working_dir / DEFAULT_GRAPH_FILENAME
        if not default.exists():
            logger.info("No graph file at %s; continuing with plan addresses only", default)
            return ""
        return self._read_text(default)

    def load_provider_schemas(self) -> Mapping[str, Any]:
        """Load provider schemas exported with ``terraform providers schema -json``."""

        path = self.schema_path or self.working_dir / DEFAULT_SCHEMA_FILENAME
        data = self._load_json_artifact(path, "Provider schema artifact")
        if not isinstance(data, Mapping):
            raise PlanLoaderError(f"Provider schema artifact must contain a JSON object: {path}")
        return data

    # Artifact ingestion helpers -------------------------------------------------
    def _load_json_artifact(self, path: Path, label: str) -> Any:
        if not path.exists():
            raise PlanLoaderError(f"{label} not found: {path}")

        with path.open("r", encoding="utf-8") as handle:
            try:
                return json.load(handle)
            except json.JSONDecodeError as exc:
                raise PlanLoaderError(f"Invalid JSON in {label.lower()}: {path}") from exc

    def _read_text(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PlanLoaderError(f"Failed to read {path}") from exc


__all__ = ["PlanLoader", "PlanLoaderError"]
