"""Tests for id normalisation, Entity records and the Corpus collection."""

from __future__ import annotations

import logging

import pytest

from progressgate.core.corpus import Corpus, Entity, normalize_id, split_prerequisites


class TestNormalizeId:
    """Tests for normalize_id."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("  Homestead Deed ", "homestead_deed"),
            ("Craft: Hoe!", "craft_hoe"),
            ("__a__b__", "a_b"),
            ("farm-stage", "farm-stage"),
            ("Hero\tLevel  3", "hero_level_3"),
        ],
    )
    def test_normalisation(self, raw: str, expected: str) -> None:
        assert normalize_id(raw) == expected

    def test_none_and_non_strings_are_blank(self) -> None:
        assert normalize_id(None) == ""
        assert normalize_id(123) == ""  # type: ignore[arg-type]

    def test_idempotent(self) -> None:
        once = normalize_id("  Great Estate   Deed ")
        assert normalize_id(once) == once


class TestSplitPrerequisites:
    """Tests for split_prerequisites."""

    def test_semicolon_string(self) -> None:
        assert split_prerequisites("hoe; Farm Stage 1;;") == ("hoe", "farm_stage_1")

    def test_list_input_is_normalised(self) -> None:
        assert split_prerequisites(["Hoe", " ", "craft_axe"]) == ("hoe", "craft_axe")

    def test_none_is_empty(self) -> None:
        assert split_prerequisites(None) == ()


class TestEntity:
    """Tests for Entity.from_mapping and display names."""

    def test_from_mapping_full_record(self) -> None:
        entity = Entity.from_mapping({
            "id": "Remove Stumps",
            "name": "Remove Stumps",
            "type": "clean_up",
            "prerequisites": "craft_axe;small_hold",
            "categories": ["farm_clean_up_route_1"],
            "tool_required": "Axe",
            "materials_gain": ["Wood"],
            "gold_cost": "75",
        })
        assert entity.id == "remove_stumps"
        assert entity.raw_prerequisites == ("craft_axe", "small_hold")
        assert entity.kind == "clean_up"
        assert entity.categories == ("farm_clean_up_route_1",)
        assert entity.tool_required == "axe"
        assert entity.materials_gain == ("wood",)
        assert entity.gold_cost == 75

    def test_missing_id_raises(self) -> None:
        with pytest.raises(ValueError, match="no usable id"):
            Entity.from_mapping({"name": "Nameless"})

    def test_display_name_falls_back_to_id(self) -> None:
        assert Entity("hoe").display_name == "hoe"
        assert Entity("hoe", name="Hoe").display_name == "Hoe"

    def test_blank_tool_is_none(self) -> None:
        assert Entity.from_mapping({"id": "x", "tool_required": ""}).tool_required is None


class TestCorpus:
    """Tests for Corpus lookup and duplicate handling."""

    def test_lookup_and_membership(self, sample_corpus: Corpus) -> None:
        assert "hoe" in sample_corpus
        assert sample_corpus.get("hoe").name == "Hoe"
        assert sample_corpus.get("nope") is None
        assert len(sample_corpus) == 8

    def test_iteration_preserves_feed_order(self, sample_corpus: Corpus) -> None:
        assert [e.id for e in sample_corpus][:3] == ["hoe", "till_soil", "blueprint_sword_1"]

    def test_duplicate_first_wins(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            corpus = Corpus([Entity("a", name="first"), Entity("a", name="second")])
        assert corpus.get("a").name == "first"
        assert len(corpus) == 2
        assert corpus.ids == frozenset({"a"})
        assert "Duplicate entity id" in caplog.text


class TestDirectConstruction:
    """Entities built in code are normalised the same way as feed records."""

    def test_fields_are_normalised(self) -> None:
        entity = Entity(
            "Till Soil", ("Hoe", " ", "Farm Stage 1"),
            tool_required="Hoe", materials_gain=("Wood", ""),
        )
        assert entity.id == "till_soil"
        assert entity.raw_prerequisites == ("hoe", "farm_stage_1")
        assert entity.tool_required == "hoe"
        assert entity.materials_gain == ("wood",)

    def test_semicolon_string_prerequisites(self) -> None:
        entity = Entity("x", "hoe; craft_axe")  # type: ignore[arg-type]
        assert entity.raw_prerequisites == ("hoe", "craft_axe")

    def test_matches_from_mapping(self) -> None:
        built = Entity("till_soil", ("Hoe",))
        loaded = Entity.from_mapping({"id": "till_soil", "prerequisites": ["Hoe"]})
        assert built == loaded
