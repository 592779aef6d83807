"""Prerequisite token resolution against a progression snapshot.

Resolution of a single token runs a fixed priority chain:

1. **Completion override** -- a token present in ``completed_cleanups`` or
   ``unlocked_upgrades`` is satisfied whatever its grammar.
2. **Variant dispatch** -- the token is parsed into a ``TokenKind`` and the
   handler for that kind decides (crafted item, farm stage, hero level,
   blueprint, deed, named stage, entity reference).
3. **Fail closed** -- ``UNKNOWN`` tokens, missing snapshot fields and
   malformed counters all resolve to unsatisfied with a reason. Nothing is
   raised.

The resolver holds a corpus reference (for entity references and display
names) and a ``ResultCache``. It never reads the dependency graph and never
mutates the snapshot.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from progressgate.config import RuleTables
from progressgate.core.corpus import Corpus, Entity, normalize_id
from progressgate.core.resolver.cache import CacheStats, ResultCache
from progressgate.core.resolver.models import PrerequisiteResult
from progressgate.core.resolver.tokens import ParsedToken, TokenKind, parse_token

logger = logging.getLogger(__name__)

_MISSING = object()


class _SnapshotFieldError(Exception):
    """Internal: a snapshot field is absent or of the wrong type."""


def _read(snapshot: Any, name: str) -> Any:
    value = getattr(snapshot, name, _MISSING)
    if value is _MISSING or value is None:
        raise _SnapshotFieldError(f"Progression snapshot has no '{name}' field")
    return value


def _read_counter(snapshot: Any, name: str) -> int:
    value = _read(snapshot, name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise _SnapshotFieldError(f"Progression snapshot field '{name}' is not an integer")
    return value


def _read_set(snapshot: Any, name: str) -> Any:
    """Return a membership container; absent sets read as empty."""
    value = getattr(snapshot, name, None)
    return value if value is not None else frozenset()


def _sorted_strings(values: Any) -> list[str]:
    return sorted(str(v) for v in values)


class PrerequisiteResolver:
    """Resolves prerequisite tokens and entities against progression snapshots.

    Usage::

        resolver = PrerequisiteResolver(corpus)
        result = resolver.check_entity("till_soil", snapshot)
        if not result.satisfied:
            for reason in result.reasons:
                print(reason)

    Args:
        corpus: The entity corpus, used for entity references and names.
        rules: Injected rule tables; defaults to the shipped game tables.
        cache: Result cache; a new one sized by ``rules.cache_generations``
            is created when omitted.
    """

    def __init__(
        self,
        corpus: Corpus,
        rules: RuleTables | None = None,
        cache: ResultCache | None = None,
    ) -> None:
        self._corpus = corpus
        self._rules = rules or RuleTables()
        self._cache = cache if cache is not None else ResultCache(self._rules.cache_generations)
        self._handlers: dict[TokenKind, Callable[[ParsedToken, Any], PrerequisiteResult]] = {
            TokenKind.CRAFTED: self._resolve_crafted,
            TokenKind.FARM_STAGE: self._resolve_farm_stage,
            TokenKind.HERO_LEVEL: self._resolve_hero_level,
            TokenKind.BLUEPRINT: self._resolve_blueprint,
            TokenKind.DEED: self._resolve_deed,
            TokenKind.STAGE_NAME: self._resolve_stage_name,
            TokenKind.ENTITY_REF: self._resolve_entity_ref,
            TokenKind.UNKNOWN: self._resolve_unknown,
        }

    @property
    def corpus(self) -> Corpus:
        """Return the corpus this resolver was built for."""
        return self._corpus

    @property
    def cache(self) -> ResultCache:
        """Return the result cache."""
        return self._cache

    # -- Parsing --

    def parse(self, token: str) -> ParsedToken:
        """Normalise and parse a raw token against this resolver's corpus and tables."""
        return parse_token(
            normalize_id(token), self._corpus.ids, self._rules.stage_plot_thresholds
        )

    # -- Single token --

    def resolve(self, token: str, snapshot: Any) -> PrerequisiteResult:
        """Resolve one raw prerequisite token.

        Args:
            token: The raw token; normalised before matching.
            snapshot: A ``ProgressionSnapshot`` or any object exposing the
                same read-only attributes.

        Returns:
            A ``PrerequisiteResult``. A blank token is satisfied; unknown
            tokens and unreadable snapshots are unsatisfied with a reason.
        """
        parsed = self.parse(token)
        if not parsed.normalized:
            return PrerequisiteResult.ok()

        if (parsed.normalized in _read_set(snapshot, "completed_cleanups")
                or parsed.normalized in _read_set(snapshot, "unlocked_upgrades")):
            return PrerequisiteResult.ok()

        try:
            return self._handlers[parsed.kind](parsed, snapshot)
        except _SnapshotFieldError as exc:
            return PrerequisiteResult.unmet(parsed.normalized, str(exc))

    def _resolve_crafted(self, token: ParsedToken, snapshot: Any) -> PrerequisiteResult:
        name = token.value
        if name in _read_set(snapshot, "owned_tools"):
            return PrerequisiteResult.ok()
        weapons = getattr(snapshot, "weapon_levels", None) or {}
        level = weapons.get(name, 0)
        if isinstance(level, int) and level > 0:
            return PrerequisiteResult.ok()
        return PrerequisiteResult.unmet(token.normalized, f"Tool/weapon '{name}' not crafted yet")

    def _resolve_farm_stage(self, token: ParsedToken, snapshot: Any) -> PrerequisiteResult:
        current = _read_counter(snapshot, "farm_stage")
        if current >= token.threshold:
            return PrerequisiteResult.ok()
        return PrerequisiteResult.unmet(
            token.normalized,
            f"Farm stage {token.threshold} required (current: {current})",
        )

    def _resolve_hero_level(self, token: ParsedToken, snapshot: Any) -> PrerequisiteResult:
        current = _read_counter(snapshot, "hero_level")
        if current >= token.threshold:
            return PrerequisiteResult.ok()
        return PrerequisiteResult.unmet(
            token.normalized,
            f"Hero level {token.threshold} required (current: {current})",
        )

    def _resolve_blueprint(self, token: ParsedToken, snapshot: Any) -> PrerequisiteResult:
        # Reaching here means the completion override already missed.
        return PrerequisiteResult.unmet(
            token.normalized, f"Blueprint '{token.normalized}' not purchased yet"
        )

    def _resolve_deed(self, token: ParsedToken, snapshot: Any) -> PrerequisiteResult:
        return PrerequisiteResult.unmet(
            token.normalized, f"Deed '{token.normalized}' not acquired yet"
        )

    def _resolve_stage_name(self, token: ParsedToken, snapshot: Any) -> PrerequisiteResult:
        current = _read_counter(snapshot, "farm_plots")
        if current >= token.threshold:
            return PrerequisiteResult.ok()
        return PrerequisiteResult.unmet(
            token.normalized,
            f"{token.threshold} farm plots required for '{token.normalized}' "
            f"(current: {current})",
        )

    def _resolve_entity_ref(self, token: ParsedToken, snapshot: Any) -> PrerequisiteResult:
        entity = self._corpus.get(token.normalized)
        name = entity.display_name if entity else token.normalized
        return PrerequisiteResult.unmet(
            token.normalized, f"Item '{name}' ({token.normalized}) not unlocked yet"
        )

    def _resolve_unknown(self, token: ParsedToken, snapshot: Any) -> PrerequisiteResult:
        logger.debug("Unknown prerequisite token: %s", token.normalized)
        return PrerequisiteResult.unmet(
            token.normalized, f"Unknown prerequisite token '{token.normalized}'"
        )

    # -- Whole entity --

    def check_entity(self, entity: Entity | str, snapshot: Any) -> PrerequisiteResult:
        """Resolve every prerequisite token of an entity.

        Tokens are resolved independently with no short-circuit, so the
        result lists every unmet requirement. Results for corpus entities are
        cached per ``(fingerprint(snapshot), entity.id)``.

        Args:
            entity: An ``Entity`` or an entity id from the corpus.
            snapshot: The progression snapshot.

        Returns:
            The aggregate ``PrerequisiteResult``. An id absent from the corpus
            is unsatisfied.
        """
        if isinstance(entity, str):
            entity_id = normalize_id(entity)
            found = self._corpus.get(entity_id)
            if found is None:
                return PrerequisiteResult.unmet(
                    entity_id, f"Entity '{entity_id}' is not in the corpus"
                )
            entity = found

        cacheable = self._corpus.get(entity.id) == entity
        fingerprint = self.fingerprint(snapshot)
        if cacheable:
            cached = self._cache.get(fingerprint, entity.id)
            if cached is not None:
                return cached

        result = PrerequisiteResult.merge(
            self.resolve(token, snapshot) for token in entity.raw_prerequisites
        )
        if cacheable:
            self._cache.put(fingerprint, entity.id, result)
        return result

    def check_tool_requirement(self, tool: str | None, snapshot: Any) -> PrerequisiteResult:
        """Check a ``tool_required`` field; no tool or ``hands`` is always met."""
        normalized = normalize_id(tool)
        if not normalized or normalized == "hands":
            return PrerequisiteResult.ok()
        if normalized in _read_set(snapshot, "owned_tools"):
            return PrerequisiteResult.ok()
        return PrerequisiteResult.unmet(normalized, f"Tool '{tool}' required but not owned")

    # -- Cache --

    @staticmethod
    def fingerprint(snapshot: Any) -> str:
        """Return a cheap deterministic digest of the snapshot's mutable fields.

        Counters followed by sorted set contents and sorted ``[weapon, level]``
        pairs, encoded as a JSON array so no member value can collide with a
        separator. Two snapshots with the same fingerprint resolve every token
        identically.
        """
        weapons = getattr(snapshot, "weapon_levels", None) or {}
        return json.dumps(
            [
                getattr(snapshot, "hero_level", None),
                getattr(snapshot, "farm_stage", None),
                getattr(snapshot, "farm_plots", None),
                _sorted_strings(_read_set(snapshot, "unlocked_upgrades")),
                _sorted_strings(_read_set(snapshot, "completed_cleanups")),
                _sorted_strings(_read_set(snapshot, "owned_tools")),
                sorted([str(name), str(level)] for name, level in weapons.items()),
            ],
            default=str,
        )

    def cache_stats(self) -> CacheStats:
        """Return result cache statistics."""
        return self._cache.stats()

    def clear_cache(self) -> None:
        """Drop all cached results."""
        self._cache.clear()
