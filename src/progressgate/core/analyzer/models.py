"""Data models for the corpus validator: Severity, FindingKind, Finding, CorpusReport.

These are decoupled from the validation engine so that CLI formatters and
build tooling can import them without pulling in the graph or rule tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any


# ---------------------------------------------------------------------------
# Severity / FindingKind
# ---------------------------------------------------------------------------


class Severity(IntEnum):
    """Two-level severity scale: WARNING < ERROR.

    Errors are structural corpus defects that must be fixed before data
    ships; warnings are consistency concerns that do not block.
    """

    WARNING = 1
    ERROR = 2


class FindingKind(Enum):
    """What a finding is about."""

    CIRCULAR_DEPENDENCY = "circular_dependency"
    MISSING_PREREQUISITE = "missing_prerequisite"
    MISSING_STAGE_GATE = "missing_stage_gate"
    MISSING_TOOL_GATE = "missing_tool_gate"
    UNREACHABLE_MATERIAL = "unreachable_material"
    BOOTSTRAP_FAILURE = "bootstrap_failure"
    PROGRESSION_BLOCK = "progression_block"

    @property
    def is_critical(self) -> bool:
        """Circular dependencies and bootstrap failures make the game unwinnable."""
        return self in (FindingKind.CIRCULAR_DEPENDENCY, FindingKind.BOOTSTRAP_FAILURE)


# ---------------------------------------------------------------------------
# Finding
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Finding:
    """A single corpus validation finding.

    Attributes:
        kind: What the finding is about.
        severity: WARNING or ERROR.
        message: Human-readable description.
        entity_id: The offending entity id (or material name for
            reachability findings).
        suggestion: How to fix it, when there is an obvious fix.
        details: Structured payload, e.g. ``{"cycle": [...]}`` or
            ``{"cost": 75, "starting_gold": 50, "shortfall": 25}``.
    """

    kind: FindingKind
    severity: Severity
    message: str
    entity_id: str
    suggestion: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable dict."""
        return {
            "kind": self.kind.value,
            "severity": self.severity.name,
            "message": self.message,
            "entity_id": self.entity_id,
            "suggestion": self.suggestion,
            "details": self.details,
        }


# ---------------------------------------------------------------------------
# CorpusReport / QuickCheck
# ---------------------------------------------------------------------------


@dataclass
class CorpusReport:
    """Complete result of validating a corpus.

    Attributes:
        findings: All findings, in check order.
        dependency_tree: Entity id -> direct entity prerequisites.
    """

    findings: list[Finding] = field(default_factory=list)
    dependency_tree: dict[str, list[str]] = field(default_factory=dict)

    @property
    def errors(self) -> list[Finding]:
        return [f for f in self.findings if f.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Finding]:
        return [f for f in self.findings if f.severity is Severity.WARNING]

    @property
    def valid(self) -> bool:
        """True iff there are no error-level findings."""
        return not self.errors

    def by_kind(self, kind: FindingKind) -> list[Finding]:
        """Return findings of one kind."""
        return [f for f in self.findings if f.kind is kind]

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable dict."""
        return {
            "valid": self.valid,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "findings": [f.to_dict() for f in self.findings],
            "dependency_tree": self.dependency_tree,
        }


@dataclass(frozen=True)
class QuickCheck:
    """Summary used to gate a data build."""

    has_critical_errors: bool
    error_count: int
