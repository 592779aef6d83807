"""Whole-corpus static validation.

``CorpusValidator`` runs once over a corpus, offline and independent of any
progression snapshot, and reports structured findings:

- **Circular dependencies** (error) -- via ``DependencyGraph``.
- **Dangling prerequisites** (error) -- tokens that are not a typed gate, an
  entity id, a milestone, a stage gate token or a marked gate token.
- **Stage-gate consistency** (warning) -- an implied farm stage without its
  gate token.
- **Tool-gate consistency** (warning) -- gated actions that do not require
  their tool.
- **Material reachability** (warning) -- essential materials nobody produces.
- **Bootstrap economy** (error) -- the bootstrap entity must be affordable
  with the starting gold.

No check raises on malformed data; every defect becomes a finding.
"""

from __future__ import annotations

import logging

from progressgate.config import RuleTables
from progressgate.core.analyzer.models import (
    CorpusReport,
    Finding,
    FindingKind,
    QuickCheck,
    Severity,
)
from progressgate.core.corpus import Corpus, Entity
from progressgate.core.graph import DependencyGraph
from progressgate.core.resolver import parse_token

logger = logging.getLogger(__name__)


class CorpusValidator:
    """Static analyzer for a complete entity corpus.

    Usage::

        report = CorpusValidator(corpus).validate_all()
        for finding in report.errors:
            print(f"[{finding.kind.value}] {finding.message}")

    Args:
        corpus: The corpus to validate.
        rules: Injected rule tables; defaults to the shipped game tables.
    """

    def __init__(self, corpus: Corpus, rules: RuleTables | None = None) -> None:
        self._corpus = corpus
        self._rules = rules or RuleTables()
        self._graph = DependencyGraph(corpus)

    def validate_all(self) -> CorpusReport:
        """Run every check and return the combined report."""
        logger.info("Validating corpus of %d entities", len(self._corpus))
        findings: list[Finding] = []
        findings.extend(self.check_circular_dependencies())
        findings.extend(self.check_dangling_prerequisites())
        findings.extend(self.check_stage_gating())
        findings.extend(self.check_tool_gating())
        findings.extend(self.check_material_reachability())
        findings.extend(self.validate_bootstrap_economy())

        report = CorpusReport(findings=findings, dependency_tree=self._graph.dependency_tree())
        logger.info(
            "Corpus validation complete: %d errors, %d warnings",
            len(report.errors), len(report.warnings),
        )
        return report

    def quick_check(self) -> QuickCheck:
        """Return whether the corpus has critical errors, plus the error count."""
        report = self.validate_all()
        return QuickCheck(
            has_critical_errors=any(f.kind.is_critical for f in report.errors),
            error_count=len(report.errors),
        )

    # -- Structural checks (errors) --

    def check_circular_dependencies(self) -> list[Finding]:
        """Report every cycle found by the graph's cycle detector."""
        findings: list[Finding] = []
        for cycle in self._graph.detect_circular_dependencies():
            findings.append(Finding(
                kind=FindingKind.CIRCULAR_DEPENDENCY,
                severity=Severity.ERROR,
                message=f"Circular dependency detected: {' -> '.join(cycle.path)}",
                entity_id=cycle.path[0],
                details={"cycle": list(cycle.path)},
            ))
        return findings

    def check_dangling_prerequisites(self) -> list[Finding]:
        """Report tokens that name nothing the resolver could ever satisfy by grammar."""
        findings: list[Finding] = []
        known = self._corpus.ids
        recognised = set(self._rules.milestone_tokens) | set(self._rules.stage_gates.values())
        markers = self._rules.gate_token_markers
        for entity in self._corpus:
            for token in entity.raw_prerequisites:
                if token in recognised or any(m in token for m in markers):
                    continue
                parsed = parse_token(token, known, self._rules.stage_plot_thresholds)
                if parsed.is_typed_gate or token in known:
                    continue
                findings.append(Finding(
                    kind=FindingKind.MISSING_PREREQUISITE,
                    severity=Severity.ERROR,
                    message=f'Item "{entity.id}" requires "{token}" which doesn\'t exist',
                    entity_id=entity.id,
                    details={"token": token},
                ))
        return findings

    def validate_bootstrap_economy(self) -> list[Finding]:
        """Check that a cold-start player can afford the bootstrap entity.

        Also warns when the first adventure requires anything beyond the
        milestone tokens.
        """
        findings: list[Finding] = []
        rules = self._rules
        bootstrap = self._corpus.get(rules.bootstrap_entity_id)
        if bootstrap is None:
            findings.append(Finding(
                kind=FindingKind.PROGRESSION_BLOCK,
                severity=Severity.WARNING,
                message=f'Bootstrap entity "{rules.bootstrap_entity_id}" is not in the corpus',
                entity_id=rules.bootstrap_entity_id,
            ))
        elif bootstrap.gold_cost > rules.starting_gold:
            shortfall = bootstrap.gold_cost - rules.starting_gold
            findings.append(Finding(
                kind=FindingKind.BOOTSTRAP_FAILURE,
                severity=Severity.ERROR,
                message=(
                    f"{bootstrap.display_name} costs {bootstrap.gold_cost}g, but players "
                    f"start with only {rules.starting_gold}g ({shortfall}g short)"
                ),
                entity_id=bootstrap.id,
                suggestion=f"Lower the cost to at most {rules.starting_gold}g",
                details={
                    "cost": bootstrap.gold_cost,
                    "starting_gold": rules.starting_gold,
                    "shortfall": shortfall,
                },
            ))

        adventure = self._corpus.get(rules.first_adventure_id)
        if adventure is not None:
            blocking = [t for t in adventure.raw_prerequisites if t not in rules.milestone_tokens]
            if blocking:
                findings.append(Finding(
                    kind=FindingKind.PROGRESSION_BLOCK,
                    severity=Severity.WARNING,
                    message="First adventure may be blocked by complex prerequisites",
                    entity_id=adventure.id,
                    suggestion="Ensure tutorial prerequisites are easily obtainable",
                    details={"prerequisites": blocking},
                ))
        return findings

    # -- Consistency checks (warnings) --

    def check_stage_gating(self) -> list[Finding]:
        """Warn when an entity's implied farm stage lacks that stage's gate token."""
        findings: list[Finding] = []
        for entity in self._corpus:
            stage = self._implied_stage(entity)
            if stage is None:
                continue
            gate = self._rules.stage_gates.get(stage)
            if gate is None or _has_token(entity, gate):
                continue
            findings.append(Finding(
                kind=FindingKind.MISSING_STAGE_GATE,
                severity=Severity.WARNING,
                message=f'Item "{entity.id}" may require {stage} stage but lacks prerequisite',
                entity_id=entity.id,
                suggestion=f"Add prerequisite: {gate}",
                details={"required_stage": stage, "gate": gate},
            ))
        return findings

    def _implied_stage(self, entity: Entity) -> str | None:
        for category in entity.categories:
            stage = self._rules.category_stages.get(category)
            if stage is not None:
                return stage
        for stage in self._rules.stages_by_priority():
            if any(stage in token for token in entity.raw_prerequisites):
                return stage
        return None

    def check_tool_gating(self) -> list[Finding]:
        """Warn when a tool-gated action neither requires nor crafts its tool."""
        findings: list[Finding] = []
        for action_id, tool in self._rules.tool_gates.items():
            entity = self._corpus.get(action_id)
            if entity is None:
                continue
            if _has_token(entity, f"craft_{tool}") or entity.tool_required == tool:
                continue
            findings.append(Finding(
                kind=FindingKind.MISSING_TOOL_GATE,
                severity=Severity.WARNING,
                message=f'Cleanup "{action_id}" should require {tool} tool',
                entity_id=action_id,
                suggestion=f"Add prerequisite: craft_{tool} or set tool_required: {tool}",
                details={"tool": tool},
            ))
        return findings

    def check_material_reachability(self) -> list[Finding]:
        """Warn for each essential material with zero producers."""
        findings: list[Finding] = []
        for material in self._rules.essential_materials:
            producers = [e.id for e in self._corpus if material in e.materials_gain]
            if producers:
                continue
            findings.append(Finding(
                kind=FindingKind.UNREACHABLE_MATERIAL,
                severity=Severity.WARNING,
                message=f'Essential material "{material}" has no obtainable sources',
                entity_id=material,
                suggestion="Add cleanup actions or mining sources for this material",
            ))
        return findings


def _has_token(entity: Entity, expected: str) -> bool:
    """True if any token equals or contains ``expected``."""
    return any(expected in token for token in entity.raw_prerequisites)
