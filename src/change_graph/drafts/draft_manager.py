"""Utilities for loading and merging draft change manifest files."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping, Sequence, Tuple

import yaml

DRAFT_SOURCES = ("resource", "variable")


class DraftManifestError(RuntimeError):
    """Raised when draft manifests cannot be loaded or parsed."""


@dataclass(slots=True)
class Draft:
    """A pending, hypothetical edit to one attribute of a resource or variable."""

    resource_address: str
    attribute_path: str = ""
    old_value: Any = None
    new_value: Any = None
    source: str = "resource"
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def key(self) -> Tuple[str, str]:
        return self.resource_address, self.attribute_path


class DraftManager:
    """Load draft manifests and expose the drafted addresses for impact analysis."""

    def __init__(self, default_manifests: Sequence[Path | str] | None = None) -> None:
        self._default_manifests = [Path(path) for path in default_manifests or []]

    # ------------------------------------------------------------------
    def load(self, manifests: Sequence[Path | str] | None = None) -> List[Draft]:
        """Return the drafts defined by the default and supplied manifests.

        A later draft for the same resource attribute replaces the earlier one.
        """

        manifest_paths = list(self._default_manifests)
        if manifests:
            manifest_paths.extend(Path(path) for path in manifests)

        drafts: MutableMapping[Tuple[str, str], Draft] = {}
        for manifest_path in manifest_paths:
            data = self._load_manifest(manifest_path)
            entries = data.get("drafts") or []
            if not isinstance(entries, list):
                raise DraftManifestError(
                    f"Draft manifest 'drafts' must be a list: {manifest_path}"
                )
            for entry in entries:
                draft = self._parse_draft(entry)
                if draft is None:
                    continue
                drafts.pop(draft.key, None)
                drafts[draft.key] = draft

        return list(drafts.values())

    # ------------------------------------------------------------------
    def drafted_addresses(self, manifests: Sequence[Path | str] | None = None) -> List[str]:
        """Return the distinct resource addresses that carry a draft."""

        return list(dict.fromkeys(draft.resource_address for draft in self.load(manifests)))

    # ------------------------------------------------------------------
    def _parse_draft(self, entry: Any) -> Draft | None:
        if isinstance(entry, str) and entry.strip():
            return Draft(resource_address=entry.strip())
        if not isinstance(entry, Mapping):
            return None

        address = entry.get("resource_address") or entry.get("address")
        if not isinstance(address, str) or not address.strip():
            return None

        source = str(entry.get("source") or "resource").strip().lower()
        if source not in DRAFT_SOURCES:
            raise DraftManifestError(f"Unsupported draft source '{source}' for {address}")

        draft = Draft(
            resource_address=address.strip(),
            attribute_path=str(entry.get("attribute_path") or "").strip(),
            old_value=entry.get("old_value"),
            new_value=entry.get("new_value"),
            source=source,
        )
        if entry.get("id"):
            draft.id = str(entry["id"])
        return draft

    # ------------------------------------------------------------------
    def _load_manifest(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise DraftManifestError(f"Draft manifest not found: {path}")

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:  # pragma: no cover - filesystem errors surfaced to caller
            raise DraftManifestError(f"Failed to read draft manifest {path}") from exc

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as exc:
            raise DraftManifestError(f"Invalid YAML in draft manifest {path}") from exc

        if not isinstance(data, Mapping):
            raise DraftManifestError(f"Draft manifest must be a mapping: {path}")

        return dict(data)
