"""Fingerprint-partitioned result cache.

Results are stored per ``(fingerprint, entity_id)``. With the default single
generation, storing under a new fingerprint evicts the previous fingerprint's
partition. A larger ``max_generations`` keeps an LRU of that many partitions,
which helps when progression oscillates between a few states.

Callers own invalidation triggers; the cache never decides on its own that a
snapshot changed beyond seeing a new fingerprint.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass

from progressgate.core.resolver.models import PrerequisiteResult


@dataclass(frozen=True)
class CacheStats:
    """Cache counters at a point in time."""

    size: int
    generations: int
    hits: int
    misses: int

    @property
    def hit_rate(self) -> float:
        """Return hits / lookups, or 0.0 before any lookup."""
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0


class ResultCache:
    """Thread-safe cache of prerequisite results keyed by progression fingerprint.

    Every read-check-then-write sequence runs under one ``threading.Lock``,
    so concurrent validation requests see consistent partitions.

    Args:
        max_generations: Fingerprint partitions to retain (>= 1).
    """

    def __init__(self, max_generations: int = 1) -> None:
        if max_generations < 1:
            raise ValueError(f"max_generations must be at least 1, got {max_generations}")
        self._max_generations = max_generations
        self._partitions: OrderedDict[str, dict[str, PrerequisiteResult]] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def max_generations(self) -> int:
        """Return the number of fingerprint partitions retained."""
        return self._max_generations

    def get(self, fingerprint: str, entity_id: str) -> PrerequisiteResult | None:
        """Return the cached result, or None on a miss."""
        with self._lock:
            partition = self._partitions.get(fingerprint)
            result = partition.get(entity_id) if partition is not None else None
            if result is None:
                self._misses += 1
                return None
            self._hits += 1
            self._partitions.move_to_end(fingerprint)
            return result

    def put(self, fingerprint: str, entity_id: str, result: PrerequisiteResult) -> None:
        """Store a result, evicting the oldest partitions beyond the limit."""
        with self._lock:
            partition = self._partitions.get(fingerprint)
            if partition is None:
                partition = self._partitions[fingerprint] = {}
            self._partitions.move_to_end(fingerprint)
            partition[entity_id] = result
            while len(self._partitions) > self._max_generations:
                self._partitions.popitem(last=False)

    def fingerprints(self) -> list[str]:
        """Return retained fingerprints, least recently used first."""
        with self._lock:
            return list(self._partitions)

    def clear(self) -> None:
        """Drop every partition and reset the counters."""
        with self._lock:
            self._partitions.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> CacheStats:
        """Return current cache statistics."""
        with self._lock:
            return CacheStats(
                size=sum(len(p) for p in self._partitions.values()),
                generations=len(self._partitions),
                hits=self._hits,
                misses=self._misses,
            )
