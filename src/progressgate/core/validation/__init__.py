"""Validation Facade.

Composes resource sufficiency, location, prerequisite resolution and
action-kind rules into one ``ActionValidationResult`` per action attempt.

    from progressgate.core.validation import ValidationService, GameAction, ActionKind
"""

from progressgate.core.validation.models import (
    ActionKind,
    ActionValidationResult,
    GameAction,
    IssueCategory,
    ResourceCheck,
    ResourceValidation,
    SnapshotValidation,
    ValidationIssue,
)
from progressgate.core.validation.service import (
    DependencyInfo,
    ServiceStats,
    ValidationService,
)

__all__ = [
    "ActionKind",
    "ActionValidationResult",
    "DependencyInfo",
    "GameAction",
    "IssueCategory",
    "ResourceCheck",
    "ResourceValidation",
    "ServiceStats",
    "SnapshotValidation",
    "ValidationIssue",
    "ValidationService",
]
