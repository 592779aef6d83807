"""Injectable rule tables for resolution, action validation and corpus checks.

The resolver, the validation service and the corpus validator never hard-code
game tables. They receive a ``RuleTables`` instance whose defaults reproduce
the shipped farming game; non-gameplay variants supply their own tables,
either in code or from a YAML file via ``load_rules``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from progressgate.exceptions import RuleConfigError

# Named farm stages -> minimum farm plot count.
DEFAULT_STAGE_PLOT_THRESHOLDS: dict[str, int] = {
    "small_hold": 20,
    "homestead": 40,
    "homestead_deed": 40,
    "manor_grounds": 65,
    "manor_grounds_deed": 65,
    "great_estate": 90,
    "great_estate_deed": 90,
}

# Cleanup action id -> tool it must be gated on.
DEFAULT_TOOL_GATES: dict[str, str] = {
    "clear_small_boulders": "hammer",
    "crack_small_boulders": "hammer",
    "break_boulders": "hammer",
    "crack_boulders": "hammer_plus",
    "break_mineral_depost": "hammer_plus",
    "break_stone_monoliths": "stone_breaker",
    "split_small_stumps": "axe",
    "remove_stumps": "axe",
    "clear_thickets": "axe_plus",
    "buck_fallen_trunks": "axe_plus",
    "cut_ancient_roots": "world_splitter",
    "level_molehills": "shovel",
    "dig_buried_stones": "shovel",
    "eliminate_molehills": "shovel_plus",
    "landscape_section": "shovel_plus",
    "flatten_hill": "earth_mover",
    "small_hold_till_soil_1": "hoe",
    "small_hold_till_soil_2": "hoe",
    "small_hold_till_soil_3": "hoe",
    "small_hold_till_soil_4": "hoe",
    "homestead_till_soil_4": "hoe_plus",
    "homestead_till_soil_5": "hoe_plus",
    "homestead_till_soil_6": "hoe_plus",
    "till_manor_grounds_4": "terra_former",
    "till_manor_grounds_5": "terra_former",
    "till_manor_grounds_6": "terra_former",
}

# Farm stage -> token that unlocks it.
DEFAULT_STAGE_GATES: dict[str, str] = {
    "small_hold": "small_hold_complete",
    "homestead": "homestead_deed",
    "manor_grounds": "manor_grounds_deed",
    "great_estate": "great_estate_deed",
}

# Entity category -> farm stage it implies.
DEFAULT_CATEGORY_STAGES: dict[str, str] = {
    "farm_clean_up_route_1": "homestead",
}

DEFAULT_ESSENTIAL_MATERIALS: tuple[str, ...] = (
    "wood", "stone", "copper", "iron", "silver",
)

# Substrings that mark a token as a recognised progression gate.
DEFAULT_GATE_TOKEN_MARKERS: tuple[str, ...] = ("_complete", "tower_reach_")

_TABLE_FIELDS = ("stage_plot_thresholds", "tool_gates", "stage_gates", "category_stages")


@dataclass(frozen=True)
class RuleTables:
    """Configuration data consumed by the core.

    The mapping tables are wrapped read-only on construction, so one instance
    can be shared by services without any of them changing the others.

    Attributes:
        stage_plot_thresholds: Stage-name token -> minimum ``farm_plots``.
        tool_gates: Action id -> tool the action should require.
        stage_gates: Farm stage -> gate token an entity of that stage needs.
        category_stages: Entity category -> implied farm stage.
        essential_materials: Materials at least one entity must produce.
        starting_gold: Gold a fresh player starts with.
        bootstrap_entity_id: Entity that must be affordable from a cold start.
        first_adventure_id: Entity that should only need milestone tokens.
        milestone_tokens: Tokens granted through completion overrides alone
            (e.g. ``tutorial``); never reported as dangling.
        gate_token_markers: Substrings that mark a token as a recognised
            progression gate (e.g. ``_complete``); never reported as dangling.
        crafting_capacity: Maximum concurrent crafting processes.
        prerequisite_action_kinds: Action kinds whose target is a catalog
            entity whose prerequisites must be resolved.
        cache_generations: Fingerprint partitions kept by the result cache.
            1 is a single-generation cache.
    """

    stage_plot_thresholds: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_STAGE_PLOT_THRESHOLDS))
    )
    tool_gates: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_TOOL_GATES))
    )
    stage_gates: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_STAGE_GATES))
    )
    category_stages: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_CATEGORY_STAGES))
    )
    essential_materials: tuple[str, ...] = DEFAULT_ESSENTIAL_MATERIALS
    starting_gold: int = 50
    bootstrap_entity_id: str = "blueprint_sword_1"
    first_adventure_id: str = "meadow_path_short"
    milestone_tokens: tuple[str, ...] = ("tutorial",)
    gate_token_markers: tuple[str, ...] = DEFAULT_GATE_TOKEN_MARKERS
    crafting_capacity: int = 3
    prerequisite_action_kinds: frozenset[str] = frozenset({"purchase", "build", "cleanup"})
    cache_generations: int = 1

    def __post_init__(self) -> None:
        for name in _TABLE_FIELDS:
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def validate(self) -> None:
        """Validate that the tables are internally consistent.

        Raises:
            RuleConfigError: If any threshold is negative, or the crafting
                capacity or cache generation count is below one.
        """
        for stage, plots in self.stage_plot_thresholds.items():
            if plots < 0:
                raise RuleConfigError(
                    f"Plot threshold for {stage!r} must be non-negative, got {plots}"
                )
        if self.starting_gold < 0:
            raise RuleConfigError(
                f"Starting gold must be non-negative, got {self.starting_gold}"
            )
        if self.crafting_capacity < 1:
            raise RuleConfigError(
                f"Crafting capacity must be at least 1, got {self.crafting_capacity}"
            )
        if self.cache_generations < 1:
            raise RuleConfigError(
                f"Cache generations must be at least 1, got {self.cache_generations}"
            )

    def stages_by_priority(self) -> list[str]:
        """Return gated stage names, latest (highest plot threshold) first."""
        return sorted(
            self.stage_gates,
            key=lambda stage: self.stage_plot_thresholds.get(stage, 0),
            reverse=True,
        )

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> RuleTables:
        """Build rule tables from a plain mapping, overriding only given keys.

        Args:
            data: Mapping of field name -> value, typically parsed YAML.

        Returns:
            A validated ``RuleTables``.

        Raises:
            RuleConfigError: On unknown keys, wrong value shapes, or values
                rejected by ``validate()``.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise RuleConfigError(f"Unknown rule table keys: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        try:
            for key, value in data.items():
                if key == "stage_plot_thresholds":
                    kwargs[key] = {str(k): int(v) for k, v in dict(value).items()}
                elif key in ("tool_gates", "stage_gates", "category_stages"):
                    kwargs[key] = {str(k): str(v) for k, v in dict(value).items()}
                elif key in ("essential_materials", "milestone_tokens", "gate_token_markers"):
                    kwargs[key] = tuple(str(v) for v in value)
                elif key == "prerequisite_action_kinds":
                    kwargs[key] = frozenset(str(v) for v in value)
                elif key in ("starting_gold", "crafting_capacity", "cache_generations"):
                    kwargs[key] = int(value)
                else:
                    kwargs[key] = str(value)
        except (TypeError, ValueError) as exc:
            raise RuleConfigError(f"Invalid rule table value: {exc}") from exc

        rules = cls(**kwargs)
        rules.validate()
        return rules


def load_rules(path: Path | str) -> RuleTables:
    """Load rule tables from a YAML file.

    Keys absent from the file keep their defaults.

    Raises:
        RuleConfigError: If the file is unreadable, not a mapping, or invalid.
    """
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise RuleConfigError(f"Could not read rule tables from {path}: {exc}") from exc
    if data is None:
        return RuleTables()
    if not isinstance(data, dict):
        raise RuleConfigError(f"Rule tables in {path} must be a mapping")
    return RuleTables.from_mapping(data)
