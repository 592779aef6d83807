"""Tests for RuleTables defaults, validation and YAML loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from progressgate.config import RuleTables, load_rules
from progressgate.exceptions import ProgressGateError, RuleConfigError


class TestDefaults:
    """The default tables reproduce the shipped game."""

    def test_game_constants(self) -> None:
        rules = RuleTables()
        assert rules.starting_gold == 50
        assert rules.bootstrap_entity_id == "blueprint_sword_1"
        assert rules.crafting_capacity == 3
        assert rules.stage_plot_thresholds["homestead"] == 40
        assert rules.tool_gates["remove_stumps"] == "axe"
        assert rules.essential_materials == ("wood", "stone", "copper", "iron", "silver")

    def test_defaults_validate(self) -> None:
        RuleTables().validate()

    def test_stages_by_priority_latest_first(self) -> None:
        assert RuleTables().stages_by_priority() == [
            "great_estate", "manor_grounds", "homestead", "small_hold",
        ]

    def test_instances_do_not_share_tables(self) -> None:
        a, b = RuleTables(), RuleTables()
        assert a.tool_gates is not b.tool_gates


class TestValidate:
    """RuleTables.validate rejects nonsensical values."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"stage_plot_thresholds": {"homestead": -1}},
            {"starting_gold": -5},
            {"crafting_capacity": 0},
            {"cache_generations": 0},
        ],
    )
    def test_invalid_values(self, kwargs: dict) -> None:
        with pytest.raises(RuleConfigError):
            RuleTables(**kwargs).validate()

    def test_error_is_a_progressgate_error(self) -> None:
        assert issubclass(RuleConfigError, ProgressGateError)


class TestFromMapping:
    """Partial overrides from plain mappings."""

    def test_partial_override_keeps_defaults(self) -> None:
        rules = RuleTables.from_mapping({"starting_gold": "75", "milestone_tokens": ["tutorial", "intro"]})
        assert rules.starting_gold == 75
        assert rules.milestone_tokens == ("tutorial", "intro")
        assert rules.crafting_capacity == 3

    def test_unknown_key(self) -> None:
        with pytest.raises(RuleConfigError, match="Unknown rule table keys: bogus"):
            RuleTables.from_mapping({"bogus": 1})

    def test_bad_shape(self) -> None:
        with pytest.raises(RuleConfigError, match="Invalid rule table value"):
            RuleTables.from_mapping({"crafting_capacity": "many"})

    def test_action_kinds_become_frozenset(self) -> None:
        rules = RuleTables.from_mapping({"prerequisite_action_kinds": ["craft"]})
        assert rules.prerequisite_action_kinds == frozenset({"craft"})


class TestLoadRules:
    """YAML rule files."""

    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("starting_gold: 100\ntool_gates:\n  chop_tree: axe\n")
        rules = load_rules(path)
        assert rules.starting_gold == 100
        assert rules.tool_gates == {"chop_tree": "axe"}

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("")
        assert load_rules(path) == RuleTables()

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("- 1\n")
        with pytest.raises(RuleConfigError, match="must be a mapping"):
            load_rules(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RuleConfigError, match="Could not read"):
            load_rules(tmp_path / "nope.yaml")


class TestReadOnlyTables:
    """Rule tables cannot be changed after construction."""

    def test_item_assignment_rejected(self) -> None:
        rules = RuleTables()
        with pytest.raises(TypeError):
            rules.stage_plot_thresholds["homestead"] = 0  # type: ignore[index]
        with pytest.raises(TypeError):
            rules.tool_gates["remove_stumps"] = "spoon"  # type: ignore[index]

    def test_caller_dict_is_copied(self) -> None:
        gates = {"small_hold": "small_hold_complete"}
        rules = RuleTables(stage_gates=gates)
        gates["homestead"] = "homestead_deed"
        assert dict(rules.stage_gates) == {"small_hold": "small_hold_complete"}

    def test_loaded_tables_are_read_only(self) -> None:
        rules = RuleTables.from_mapping({"category_stages": {"orchard": "homestead"}})
        with pytest.raises(TypeError):
            rules.category_stages["orchard"] = "great_estate"  # type: ignore[index]

    def test_gate_token_markers_override(self) -> None:
        rules = RuleTables.from_mapping({"gate_token_markers": ["_done"]})
        assert rules.gate_token_markers == ("_done",)
