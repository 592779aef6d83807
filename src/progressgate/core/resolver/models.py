"""Resolver result type.

``PrerequisiteResult`` is returned by every resolution call, never raised.
It is frozen and built from tuples, so cached instances can be shared between
callers without copying.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class PrerequisiteResult:
    """Outcome of resolving one token or all tokens of an entity.

    Attributes:
        satisfied: True iff every requirement is met.
        missing_tokens: Normalised tokens that are not satisfied.
        reasons: Human-readable reason per unmet requirement, in token order.
            Callers surface these verbatim.
    """

    satisfied: bool
    missing_tokens: tuple[str, ...] = ()
    reasons: tuple[str, ...] = ()

    @classmethod
    def ok(cls) -> PrerequisiteResult:
        """Return a satisfied result."""
        return cls(satisfied=True)

    @classmethod
    def unmet(cls, token: str, reason: str) -> PrerequisiteResult:
        """Return an unsatisfied result for one token."""
        return cls(satisfied=False, missing_tokens=(token,), reasons=(reason,))

    @classmethod
    def merge(cls, results: Iterable[PrerequisiteResult]) -> PrerequisiteResult:
        """Combine per-token results; satisfied iff all are."""
        missing: list[str] = []
        reasons: list[str] = []
        for result in results:
            if not result.satisfied:
                missing.extend(result.missing_tokens)
                reasons.extend(result.reasons)
        return cls(satisfied=not missing and not reasons, missing_tokens=tuple(missing),
                   reasons=tuple(reasons))

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serialisable dict."""
        return {
            "satisfied": self.satisfied,
            "missing_tokens": list(self.missing_tokens),
            "reasons": list(self.reasons),
        }
