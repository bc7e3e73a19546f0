"""Resource models used by the change-graph analyzers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ChangeAction(str, Enum):
    """Effective action planned for a Terraform resource."""

    NOOP = "no-op"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    REPLACE = "replace"


@dataclass(slots=True)
class NormalizedResource:
    """Normalized representation of a Terraform resource change."""

    address: str
    module_path: List[str] = field(default_factory=list)
    type: str = ""
    name: str = ""
    provider_name: Optional[str] = None
    mode: str = "managed"
    index: Optional[str | int] = None
    actions: Tuple[str, ...] = ()
    change_action: ChangeAction = ChangeAction.NOOP
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None

    @property
    def is_module_root(self) -> bool:
        """Return ``True`` when the resource is defined at the root module."""

        return not self.module_path

    @property
    def is_replacement(self) -> bool:
        return "replace" in self.actions or (
            "create" in self.actions and "delete" in self.actions
        )
