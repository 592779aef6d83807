"""Data models for action validation.

Errors are tagged with an ``IssueCategory`` at the point they are created;
``ActionValidationResult`` derives its categorised views (resource issues,
location issues) from those tags instead of inspecting message text.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class ActionKind(Enum):
    """Kinds of player actions the service can validate."""

    PLANT = "plant"
    WATER = "water"
    PUMP = "pump"
    HARVEST = "harvest"
    ADVENTURE = "adventure"
    CRAFT = "craft"
    PURCHASE = "purchase"
    BUILD = "build"
    CLEANUP = "cleanup"
    MOVE = "move"
    MINE = "mine"
    RESCUE = "rescue"
    WAIT = "wait"


class IssueCategory(Enum):
    """Category tag attached to every validation error."""

    RESOURCE = "resource"
    LOCATION = "location"
    PREREQUISITE = "prerequisite"
    RULE = "rule"


@dataclass(frozen=True)
class GameAction:
    """An action a player (or AI persona) wants to perform.

    Attributes:
        id: Action id.
        kind: Action kind.
        target: Catalog entity id, crop type, route, etc. depending on kind.
        screen: Screen the action must be performed from, if any.
        energy_cost: Energy spent.
        gold_cost: Gold spent.
        water_cost: Water spent; watering actions cost at least 1.
        material_costs: Material -> amount spent.
    """

    id: str
    kind: ActionKind
    target: str | None = None
    screen: str | None = None
    energy_cost: int = 0
    gold_cost: int = 0
    water_cost: int = 0
    material_costs: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class ValidationIssue:
    """A single categorised validation error."""

    category: IssueCategory
    message: str


@dataclass(frozen=True)
class ResourceCheck:
    """Requirement vs. availability of one resource."""

    resource: str
    required: int
    available: int

    @property
    def sufficient(self) -> bool:
        return self.available >= self.required


@dataclass
class ResourceValidation:
    """Per-resource breakdown of an action's costs."""

    energy: ResourceCheck
    gold: ResourceCheck
    water: ResourceCheck
    materials: list[ResourceCheck] = field(default_factory=list)
    seeds: list[ResourceCheck] = field(default_factory=list)

    def checks(self) -> list[ResourceCheck]:
        """Return every check, scalar resources first."""
        return [self.energy, self.gold, self.water, *self.materials, *self.seeds]

    @property
    def sufficient(self) -> bool:
        return all(check.sufficient for check in self.checks())


@dataclass
class ActionValidationResult:
    """Structured verdict for one action attempt.

    Attributes:
        issues: Every error with its category, in the order produced.
        warnings: Non-blocking messages.
        missing_prerequisites: Unmet prerequisite tokens of the target entity.
    """

    issues: list[ValidationIssue] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    missing_prerequisites: list[str] = field(default_factory=list)

    @property
    def can_perform(self) -> bool:
        """True iff there are no errors; warnings never block."""
        return not self.issues

    @property
    def errors(self) -> list[str]:
        """All error messages."""
        return [issue.message for issue in self.issues]

    @property
    def resource_issues(self) -> list[str]:
        return self._messages(IssueCategory.RESOURCE)

    @property
    def location_issues(self) -> list[str]:
        return self._messages(IssueCategory.LOCATION)

    @property
    def prerequisite_issues(self) -> list[str]:
        return self._messages(IssueCategory.PREREQUISITE)

    def _messages(self, category: IssueCategory) -> list[str]:
        return [i.message for i in self.issues if i.category is category]

    def add_error(self, category: IssueCategory, message: str) -> None:
        self.issues.append(ValidationIssue(category, message))

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serialisable dict."""
        return {
            "can_perform": self.can_perform,
            "errors": self.errors,
            "warnings": list(self.warnings),
            "missing_prerequisites": list(self.missing_prerequisites),
            "resource_issues": self.resource_issues,
            "location_issues": self.location_issues,
            "issues": [
                {"category": i.category.value, "message": i.message} for i in self.issues
            ],
        }


@dataclass
class SnapshotValidation:
    """Result of sanity-checking a progression snapshot."""

    issues: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues
