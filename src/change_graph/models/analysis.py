"""Result models produced by the change-graph analyzers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .resource import ChangeAction


class ImpactWarning(str, Enum):
    """Severity warnings attached to impacted nodes."""

    DRAFT = "Based on draft change"
    DESTRUCTIVE = "Destructive change"
    FORCED_DELETION = "Forced deletion of dependent resource"
    REPLACEMENT = "Resource replacement"
    FORCED_REPLACEMENT = "Forced replacement of dependent resource"
    TRIGGERED_UPDATE = "Triggered update"


DESTRUCTIVE_WARNINGS = frozenset(
    {
        ImpactWarning.DESTRUCTIVE.value,
        ImpactWarning.FORCED_DELETION.value,
        ImpactWarning.REPLACEMENT.value,
        ImpactWarning.FORCED_REPLACEMENT.value,
    }
)


@dataclass(slots=True, frozen=True)
class PlanSummary:
    """Counts of effective actions across a plan."""

    create: int = 0
    update: int = 0
    delete: int = 0
    no_change: int = 0

    @property
    def total(self) -> int:
        return self.create + self.update + self.delete + self.no_change


@dataclass(slots=True, frozen=True)
class ImpactNode:
    """A resource reached downstream of an impact source."""

    address: str
    depth: int
    action: Optional[ChangeAction] = None
    has_draft: bool = False
    warnings: Tuple[str, ...] = ()

    @property
    def is_destructive(self) -> bool:
        return any(warning in DESTRUCTIVE_WARNINGS for warning in self.warnings)


@dataclass(slots=True, frozen=True)
class ImpactResult:
    """Blast radius of a source node split by distance."""

    source: str
    direct: Tuple[ImpactNode, ...] = ()
    transitive: Tuple[ImpactNode, ...] = ()

    @property
    def all(self) -> Tuple[ImpactNode, ...]:
        return self.direct + self.transitive

    def impact_class(self, address: str) -> str:
        """Classify ``address`` as ``source``, ``direct``, ``transitive`` or ``none``."""

        if address == self.source:
            return "source"
        if any(node.address == address for node in self.direct):
            return "direct"
        if any(node.address == address for node in self.transitive):
            return "transitive"
        return "none"


@dataclass(slots=True, frozen=True)
class DriftEntry:
    address: str
    reason: str


@dataclass(slots=True, frozen=True)
class DriftResult:
    """Drifted and orphaned resources detected in a plan."""

    drifted: Tuple[DriftEntry, ...] = ()
    orphaned: Tuple[DriftEntry, ...] = ()


@dataclass(slots=True, frozen=True)
class OutputUsageResult:
    """Consumers of a module or output identifier."""

    identifier: str
    direct_modules: Tuple[str, ...] = ()
    direct_resources: Tuple[str, ...] = ()
    transitive_resources: Tuple[str, ...] = ()


class ReasonType(str, Enum):
    DEPENDENCY = "dependency"
    VARIABLE = "variable"
    OUTPUT = "output"
    UNKNOWN = "unknown"


@dataclass(slots=True, frozen=True)
class Explanation:
    """Human readable justification for why a subject is affected."""

    subject: str
    reason_type: ReasonType
    explanation: str
    path: Optional[Tuple[str, ...]] = None


class FlowKind(str, Enum):
    LITERAL = "literal"
    VARIABLE = "var"
    MODULE_INPUT = "module_input"
    MODULE_OUTPUT = "module_output"
    RESOURCE_ATTRIBUTE = "resource_attribute"
    UNKNOWN = "unknown"


@dataclass(slots=True, frozen=True)
class FlowStep:
    kind: FlowKind
    detail: str


@dataclass(slots=True, frozen=True)
class ValueFlowExplanation:
    explanation: str
    items: Tuple[str, ...] = ()
