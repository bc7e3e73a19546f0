"""Draft change manifest management."""

from .draft_manager import Draft, DraftManager, DraftManifestError

__all__ = [
    "Draft",
    "DraftManager",
    "DraftManifestError",
]
