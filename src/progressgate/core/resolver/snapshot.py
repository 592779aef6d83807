"""Read-only progression snapshot consumed by the resolver and validation service.

The snapshot is owned by the caller (the simulation, the UI); the core only
reads it. ``from_mapping`` accepts the plain dict shape a snapshot file or a
JSON payload would have, and ``load_snapshot`` reads one from disk.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from progressgate.core.corpus import normalize_id
from progressgate.exceptions import SnapshotLoadError


def _frozen_counts(value: Mapping[str, Any] | None) -> Mapping[str, int]:
    return MappingProxyType({str(k): int(v) for k, v in (value or {}).items()})


def _frozen_set(value: Iterable[str] | None) -> frozenset[str]:
    ids = (normalize_id(str(v)) for v in (value or ()))
    return frozenset(v for v in ids if v)


@dataclass(frozen=True)
class ResourcePool:
    """Spendable resources."""

    gold: int = 0
    energy: int = 0
    energy_max: int | None = None
    water: int = 0
    water_max: int | None = None
    materials: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    seeds: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class ProcessState:
    """Running processes the action rules look at.

    Attributes:
        available_plots: Free farm plots for planting.
        ready_harvests: Crop processes ready to harvest.
        adventure_active: True while an adventure is in progress.
        active_crafting: Number of crafting processes running at the forge.
        crops_needing_water: Planted crops whose water level is below full.
    """

    available_plots: int = 0
    ready_harvests: int = 0
    adventure_active: bool = False
    active_crafting: int = 0
    crops_needing_water: int = 0


@dataclass(frozen=True)
class ProgressionSnapshot:
    """Immutable view of a player's progression.

    Attributes:
        hero_level: Current hero level.
        farm_stage: Current farm stage number.
        farm_plots: Total farm plots owned.
        unlocked_upgrades: Upgrade, blueprint and deed ids unlocked.
        completed_cleanups: Cleanup action ids completed.
        owned_tools: Tool ids owned.
        weapon_levels: Weapon id -> level (0 = not crafted).
        resources: Spendable resources.
        processes: Running process counts.
        current_screen: Screen the player is on, if known.
    """

    hero_level: int = 1
    farm_stage: int = 1
    farm_plots: int = 0
    unlocked_upgrades: frozenset[str] = frozenset()
    completed_cleanups: frozenset[str] = frozenset()
    owned_tools: frozenset[str] = frozenset()
    weapon_levels: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    resources: ResourcePool = field(default_factory=ResourcePool)
    processes: ProcessState = field(default_factory=ProcessState)
    current_screen: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ProgressionSnapshot:
        """Build a snapshot from a plain mapping.

        Missing keys take their defaults. Set-like fields accept any iterable
        of strings, and their members are normalised like entity ids.
        ``resources`` and ``processes`` are nested mappings.

        Raises:
            ValueError: If a numeric field is not a number.
            TypeError: If a field has the wrong shape.
        """
        res = dict(data.get("resources") or {})
        proc = dict(data.get("processes") or {})
        resources = ResourcePool(
            gold=int(res.get("gold", 0)),
            energy=int(res.get("energy", 0)),
            energy_max=None if res.get("energy_max") is None else int(res["energy_max"]),
            water=int(res.get("water", 0)),
            water_max=None if res.get("water_max") is None else int(res["water_max"]),
            materials=_frozen_counts(res.get("materials")),
            seeds=_frozen_counts(res.get("seeds")),
        )
        processes = ProcessState(
            available_plots=int(proc.get("available_plots", 0)),
            ready_harvests=int(proc.get("ready_harvests", 0)),
            adventure_active=bool(proc.get("adventure_active", False)),
            active_crafting=int(proc.get("active_crafting", 0)),
            crops_needing_water=int(proc.get("crops_needing_water", 0)),
        )
        return cls(
            hero_level=int(data.get("hero_level", 1)),
            farm_stage=int(data.get("farm_stage", 1)),
            farm_plots=int(data.get("farm_plots", 0)),
            unlocked_upgrades=_frozen_set(data.get("unlocked_upgrades")),
            completed_cleanups=_frozen_set(data.get("completed_cleanups")),
            owned_tools=_frozen_set(data.get("owned_tools")),
            weapon_levels=_frozen_counts(data.get("weapon_levels")),
            resources=resources,
            processes=processes,
            current_screen=data.get("current_screen"),
        )


def load_snapshot(path: Path | str) -> ProgressionSnapshot:
    """Load a progression snapshot from a YAML or JSON file.

    Raises:
        SnapshotLoadError: If the file cannot be read or has the wrong shape.
    """
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise SnapshotLoadError(f"Could not read snapshot from {path}: {exc}") from exc
    if data is None:
        return ProgressionSnapshot()
    if not isinstance(data, dict):
        raise SnapshotLoadError(f"Snapshot in {path} must be a mapping")
    try:
        return ProgressionSnapshot.from_mapping(data)
    except (TypeError, ValueError) as exc:
        raise SnapshotLoadError(f"Invalid snapshot in {path}: {exc}") from exc
