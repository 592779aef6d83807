"""Shared fixtures for progressgate tests.

The sample corpus is a small slice of the farming game that passes every
corpus check: no cycles, no dangling tokens, gated stages and tools in
place, every essential material produced, and an affordable bootstrap
blueprint.
"""

from __future__ import annotations

import pathlib

import pytest
import yaml

from progressgate.core.corpus import Corpus
from progressgate.core.resolver import ProgressionSnapshot

SAMPLE_RECORDS: list[dict] = [
    {"id": "hoe", "name": "Hoe", "type": "tool", "gold_cost": 10},
    {"id": "till_soil", "name": "Till Soil", "prerequisites": ["hoe", "farm_stage_1"]},
    {"id": "blueprint_sword_1", "name": "Sword Blueprint", "type": "blueprint", "gold_cost": 50},
    {"id": "meadow_path_short", "type": "adventure", "prerequisites": ["tutorial"]},
    {"id": "clear_weeds", "type": "clean_up", "materials_gain": ["wood", "stone"]},
    {
        "id": "mine_shaft",
        "prerequisites": "hero_level_3;craft_pickaxe",
        "materials_gain": ["copper", "iron", "silver"],
    },
    {
        "id": "small_hold_till_soil_1",
        "type": "clean_up",
        "prerequisites": ["craft_hoe"],
        "tool_required": "hoe",
    },
    {"id": "farmhouse", "type": "building", "prerequisites": ["till_soil", "homestead_deed"]},
]


@pytest.fixture
def sample_records() -> list[dict]:
    """Return raw feed records for the sample corpus."""
    return [dict(r) for r in SAMPLE_RECORDS]


@pytest.fixture
def sample_corpus() -> Corpus:
    """Return the sample corpus."""
    return Corpus.from_records(SAMPLE_RECORDS)


@pytest.fixture
def fresh_snapshot() -> ProgressionSnapshot:
    """Return a cold-start snapshot: level 1, stage 1, nothing unlocked."""
    return ProgressionSnapshot()


@pytest.fixture
def corpus_file(tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the sample corpus to a YAML feed file."""
    path = tmp_path / "corpus.yaml"
    path.write_text(yaml.safe_dump({"entities": SAMPLE_RECORDS}))
    return path


@pytest.fixture
def snapshot_file(tmp_path: pathlib.Path) -> pathlib.Path:
    """Write a cold-start snapshot standing on the farm with some resources."""
    path = tmp_path / "snapshot.yaml"
    path.write_text(yaml.safe_dump({
        "hero_level": 1,
        "farm_stage": 1,
        "farm_plots": 4,
        "current_screen": "farm",
        "resources": {"gold": 50, "energy": 10, "energy_max": 100, "water": 5},
    }))
    return path
