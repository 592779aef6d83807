"""Action-kind-specific validation rules.

Each rule inspects one action kind against the snapshot's running processes
and appends categorised errors or warnings to the result. Rules are looked up
by ``ActionKind``; kinds without a rule pass through.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from progressgate.config import RuleTables
from progressgate.core.validation.models import (
    ActionKind,
    ActionValidationResult,
    GameAction,
    IssueCategory,
)

ActionRule = Callable[[GameAction, Any, RuleTables, ActionValidationResult], None]


def check_plant(
    action: GameAction, snapshot: Any, rules: RuleTables, result: ActionValidationResult
) -> None:
    """Planting needs a crop, a seed of that crop and a free plot."""
    if not action.target:
        result.add_error(IssueCategory.RULE, "Plant action requires a crop type")
        return
    if snapshot.resources.seeds.get(action.target, 0) <= 0:
        result.add_error(IssueCategory.RESOURCE, f"No seeds available for {action.target}")
    if snapshot.processes.available_plots <= 0:
        result.add_error(IssueCategory.RULE, "No available farm plots for planting")


def check_harvest(
    action: GameAction, snapshot: Any, rules: RuleTables, result: ActionValidationResult
) -> None:
    if snapshot.processes.ready_harvests <= 0:
        result.add_error(IssueCategory.RULE, "No crops ready to harvest")


def check_adventure(
    action: GameAction, snapshot: Any, rules: RuleTables, result: ActionValidationResult
) -> None:
    if snapshot.processes.adventure_active:
        result.add_error(IssueCategory.RULE, "An adventure is already in progress")


def check_craft(
    action: GameAction, snapshot: Any, rules: RuleTables, result: ActionValidationResult
) -> None:
    if snapshot.processes.active_crafting >= rules.crafting_capacity:
        result.add_error(
            IssueCategory.RULE,
            f"Forge is at capacity ({snapshot.processes.active_crafting}/"
            f"{rules.crafting_capacity} concurrent crafting processes)",
        )


def check_water(
    action: GameAction, snapshot: Any, rules: RuleTables, result: ActionValidationResult
) -> None:
    if snapshot.processes.crops_needing_water <= 0:
        result.add_warning("No crops need watering")


def check_pump(
    action: GameAction, snapshot: Any, rules: RuleTables, result: ActionValidationResult
) -> None:
    pool = snapshot.resources
    if pool.water_max is not None and pool.water >= pool.water_max:
        result.add_warning("Water is already at maximum capacity")


def check_move(
    action: GameAction, snapshot: Any, rules: RuleTables, result: ActionValidationResult
) -> None:
    """Moving needs a destination; moving to the current screen only warns."""
    if not action.target:
        result.add_error(IssueCategory.RULE, "Move action requires a target screen")
        return
    if snapshot.current_screen == action.target:
        result.add_warning(f"Already at {action.target}")


ACTION_RULES: dict[ActionKind, ActionRule] = {
    ActionKind.PLANT: check_plant,
    ActionKind.WATER: check_water,
    ActionKind.PUMP: check_pump,
    ActionKind.HARVEST: check_harvest,
    ActionKind.ADVENTURE: check_adventure,
    ActionKind.CRAFT: check_craft,
    ActionKind.MOVE: check_move,
}
