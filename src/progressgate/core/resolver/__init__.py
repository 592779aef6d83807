"""Prerequisite Resolver.

Interprets raw prerequisite tokens against a read-only progression snapshot,
aggregates them per entity, and caches entity results by progression
fingerprint.

    from progressgate.core.resolver import PrerequisiteResolver, ProgressionSnapshot
"""

from progressgate.core.resolver.cache import CacheStats, ResultCache
from progressgate.core.resolver.models import PrerequisiteResult
from progressgate.core.resolver.resolver import PrerequisiteResolver
from progressgate.core.resolver.snapshot import (
    ProcessState,
    ProgressionSnapshot,
    ResourcePool,
    load_snapshot,
)
from progressgate.core.resolver.tokens import ParsedToken, TokenKind, parse_token

__all__ = [
    "CacheStats",
    "ParsedToken",
    "PrerequisiteResolver",
    "PrerequisiteResult",
    "ProcessState",
    "ProgressionSnapshot",
    "ResourcePool",
    "ResultCache",
    "TokenKind",
    "load_snapshot",
    "parse_token",
]
