"""Shared fixtures for CLI tests.

Provides corpus feed files with specific defects (a cycle, an unaffordable
bootstrap blueprint, warnings only) and a malformed feed for load errors.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

_PRODUCER = {"id": "quarry", "materials_gain": ["wood", "stone", "copper", "iron", "silver"]}


def _write(path: Path, records: list[dict]) -> Path:
    path.write_text(yaml.safe_dump(records))
    return path


@pytest.fixture
def cyclic_corpus_file(tmp_path: Path) -> Path:
    """A corpus whose a -> b -> c -> a cycle is a critical error."""
    return _write(tmp_path / "cyclic.yaml", [
        {"id": "a", "prerequisites": ["b"]},
        {"id": "b", "prerequisites": ["c"]},
        {"id": "c", "prerequisites": ["a"]},
        {"id": "blueprint_sword_1", "gold_cost": 50},
        _PRODUCER,
    ])


@pytest.fixture
def warning_corpus_file(tmp_path: Path) -> Path:
    """A corpus with a single tool-gating warning and no errors."""
    return _write(tmp_path / "warnings.yaml", [
        {"id": "remove_stumps"},
        {"id": "blueprint_sword_1", "gold_cost": 50},
        _PRODUCER,
    ])


@pytest.fixture
def malformed_corpus_file(tmp_path: Path) -> Path:
    """A feed whose second record has no id."""
    path = tmp_path / "malformed.yaml"
    path.write_text("- id: hoe\n- name: Orphan\n")
    return path
