"""Validation service: the single entry point for "can this action be performed?".

``ValidationService.can_perform`` composes, in order:

1. **Resource sufficiency** -- energy, gold, water and material costs.
2. **Location** -- the action's screen vs. the snapshot's current screen.
3. **Prerequisites** -- for action kinds that target a catalog entity
   (purchase, build, cleanup by default), the entity's tokens are resolved.
4. **Action-kind rules** -- planting, watering, pumping, harvesting,
   adventure, crafting and movement constraints from
   ``progressgate.core.validation.rules``. Some rules only add warnings.

Every error is tagged with its category when created. The service owns its
corpus, graph and resolver; ``rebuild`` swaps all three at once so concurrent
readers see either the old or the new corpus, never a mix.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

from progressgate.config import RuleTables
from progressgate.core.corpus import Corpus, normalize_id
from progressgate.core.graph import DependencyGraph, DependencyPath, GraphStats
from progressgate.core.resolver import CacheStats, PrerequisiteResolver, PrerequisiteResult
from progressgate.core.validation.models import (
    ActionKind,
    ActionValidationResult,
    GameAction,
    IssueCategory,
    ResourceCheck,
    ResourceValidation,
    SnapshotValidation,
)
from progressgate.core.validation.rules import ACTION_RULES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _EngineState:
    corpus: Corpus
    graph: DependencyGraph
    resolver: PrerequisiteResolver


@dataclass(frozen=True)
class DependencyInfo:
    """Dependency context of one entity."""

    entity_id: str
    dependencies: list[str]
    dependents: list[str]
    depth: int | None
    cycles: list[DependencyPath]


@dataclass(frozen=True)
class ServiceStats:
    """Cache and graph statistics of a service instance."""

    cache: CacheStats
    graph: GraphStats

    @property
    def circular_dependencies(self) -> int:
        return self.graph.cycles


class ValidationService:
    """Composes resource, location, prerequisite and rule checks per action.

    Instances are explicitly constructed and own their corpus reference,
    graph, resolver and cache; create one per corpus (or call ``rebuild``).

    Usage::

        service = ValidationService(corpus)
        verdict = service.can_perform(action, snapshot)
        if not verdict.can_perform:
            show(verdict.errors)

    Args:
        corpus: The entity corpus.
        rules: Injected rule tables; defaults to the shipped game tables.
    """

    def __init__(self, corpus: Corpus, rules: RuleTables | None = None) -> None:
        self._rules = rules or RuleTables()
        self._rules.validate()
        self._lock = threading.Lock()
        self._state = self._build_state(corpus)

    def _build_state(self, corpus: Corpus) -> _EngineState:
        graph = DependencyGraph(corpus)
        resolver = PrerequisiteResolver(corpus, self._rules)
        logger.info("Validation service ready: %d entities", len(corpus))
        return _EngineState(corpus=corpus, graph=graph, resolver=resolver)

    @property
    def rules(self) -> RuleTables:
        return self._rules

    @property
    def corpus(self) -> Corpus:
        return self._state.corpus

    @property
    def graph(self) -> DependencyGraph:
        return self._state.graph

    @property
    def resolver(self) -> PrerequisiteResolver:
        return self._state.resolver

    def rebuild(self, corpus: Corpus) -> None:
        """Replace corpus, graph and resolver (with a fresh cache) atomically.

        The new state is fully built before the reference swap, so in-flight
        calls finish against the state they started with.
        """
        state = self._build_state(corpus)
        with self._lock:
            self._state = state

    # -- Main interface --

    def can_perform(self, action: GameAction, snapshot: Any) -> ActionValidationResult:
        """Decide whether an action can be performed from a snapshot.

        Never raises: an unreadable snapshot becomes a ``Validation error``
        entry in ``errors``.

        Args:
            action: The action attempt.
            snapshot: The player's progression snapshot.

        Returns:
            An ``ActionValidationResult``; ``can_perform`` iff no errors.
        """
        state = self._state
        result = ActionValidationResult()
        try:
            self._check_resources(action, snapshot, result)
            self._check_location(action, snapshot, result)
            self._check_prerequisites(state, action, snapshot, result)
            rule = ACTION_RULES.get(action.kind)
            if rule is not None:
                rule(action, snapshot, self._rules, result)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Validation of %s failed", action.id, exc_info=True)
            result.add_error(IssueCategory.RULE, f"Validation error: {exc}")
        return result

    def _check_resources(
        self, action: GameAction, snapshot: Any, result: ActionValidationResult
    ) -> None:
        validation = self.validate_resources(action, snapshot)
        for check in [validation.energy, validation.gold, validation.water, *validation.materials]:
            if not check.sufficient:
                result.add_error(
                    IssueCategory.RESOURCE,
                    f"Insufficient {check.resource}: need {check.required}, "
                    f"have {check.available}",
                )

    @staticmethod
    def _check_location(
        action: GameAction, snapshot: Any, result: ActionValidationResult
    ) -> None:
        current = snapshot.current_screen
        if action.screen and current != action.screen:
            result.add_error(
                IssueCategory.LOCATION,
                f"Wrong location: need {action.screen}, at {current or 'unknown'}",
            )

    def _check_prerequisites(
        self,
        state: _EngineState,
        action: GameAction,
        snapshot: Any,
        result: ActionValidationResult,
    ) -> None:
        if action.kind.value not in self._rules.prerequisite_action_kinds:
            return
        if not action.target:
            result.add_error(
                IssueCategory.PREREQUISITE,
                f"{action.kind.value.capitalize()} action requires a target entity",
            )
            return

        target = normalize_id(action.target)
        entity = state.corpus.get(target)
        if entity is None:
            result.add_error(IssueCategory.PREREQUISITE, f"Could not find item data for {target}")
            result.missing_prerequisites.append(target)
            return

        checks = [state.resolver.check_entity(entity, snapshot)]
        if action.kind is ActionKind.CLEANUP:
            checks.append(state.resolver.check_tool_requirement(entity.tool_required, snapshot))
        prereqs = PrerequisiteResult.merge(checks)
        for reason in prereqs.reasons:
            result.add_error(IssueCategory.PREREQUISITE, reason)
        result.missing_prerequisites.extend(prereqs.missing_tokens)

    # -- Supporting interfaces --

    def validate_resources(self, action: GameAction, snapshot: Any) -> ResourceValidation:
        """Break down an action's resource costs against what is available."""
        resources = snapshot.resources
        water_required = action.water_cost
        if action.kind is ActionKind.WATER:
            water_required = max(water_required, 1)

        validation = ResourceValidation(
            energy=ResourceCheck("energy", max(action.energy_cost, 0), resources.energy),
            gold=ResourceCheck("gold", max(action.gold_cost, 0), resources.gold),
            water=ResourceCheck("water", water_required, resources.water),
        )
        for material, amount in sorted(action.material_costs.items()):
            validation.materials.append(
                ResourceCheck(material, amount, resources.materials.get(material, 0))
            )
        if action.kind is ActionKind.PLANT and action.target:
            validation.seeds.append(
                ResourceCheck(
                    f"{action.target} seeds", 1, resources.seeds.get(action.target, 0)
                )
            )
        return validation

    def validate_item_prerequisites(self, entity_id: str, snapshot: Any) -> PrerequisiteResult:
        """Resolve every prerequisite of a corpus entity."""
        return self._state.resolver.check_entity(entity_id, snapshot)

    def validate_snapshot(self, snapshot: Any) -> SnapshotValidation:
        """Sanity-check a snapshot's resources and counters.

        Never raises: an unreadable snapshot becomes a ``Validation error``
        issue.
        """
        issues: list[str] = []
        try:
            self._check_snapshot(snapshot, issues)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Snapshot validation failed", exc_info=True)
            issues.append(f"Validation error: {exc}")
        return SnapshotValidation(issues=issues)

    @staticmethod
    def _check_snapshot(snapshot: Any, issues: list[str]) -> None:
        res = snapshot.resources
        if res.energy < 0:
            issues.append("Energy cannot be negative")
        if res.energy_max is not None and res.energy > res.energy_max:
            issues.append("Energy cannot exceed maximum")
        if res.gold < 0:
            issues.append("Gold cannot be negative")
        if res.water < 0:
            issues.append("Water cannot be negative")
        if res.water_max is not None and res.water > res.water_max:
            issues.append("Water cannot exceed maximum")
        if snapshot.hero_level < 1:
            issues.append("Hero level must be at least 1")
        if snapshot.farm_stage < 1:
            issues.append("Farm stage must be at least 1")
        if snapshot.farm_plots < 0:
            issues.append("Farm plots cannot be negative")

    def dependency_info(self, entity_id: str) -> DependencyInfo:
        """Return the dependency chain, dependents, depth and cycles of an entity."""
        graph = self._state.graph
        entity_id = normalize_id(entity_id)
        return DependencyInfo(
            entity_id=entity_id,
            dependencies=sorted(graph.get_all_prerequisites(entity_id)),
            dependents=sorted(graph.get_all_dependents(entity_id)),
            depth=graph.get_depth(entity_id),
            cycles=[
                c for c in graph.detect_circular_dependencies() if entity_id in c.path
            ],
        )

    def clear_cache(self) -> None:
        """Drop cached prerequisite results."""
        self._state.resolver.clear_cache()

    def stats(self) -> ServiceStats:
        """Return cache and graph statistics."""
        state = self._state
        return ServiceStats(cache=state.resolver.cache_stats(), graph=state.graph.stats())
