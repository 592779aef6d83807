"""Property-based tests for prerequisite resolution invariants.

Verifies over random snapshots:
- Determinism: resolving twice gives the same result.
- Cache coherence: a cached result equals a fresh uncached one for the same
  fingerprint.
- Fail closed: unknown tokens are never satisfied unless overridden.
- Aggregation: an entity is satisfied iff every one of its tokens is.
"""
from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from progressgate.core.corpus import Corpus
from progressgate.core.resolver import PrerequisiteResolver, ProgressionSnapshot

SAMPLE: list[dict] = [
    {"id": "hoe", "name": "Hoe"},
    {"id": "till_soil", "prerequisites": ["hoe", "farm_stage_1"]},
    {"id": "blueprint_sword_1", "gold_cost": 50},
    {"id": "mine_shaft", "prerequisites": ["hero_level_3", "craft_pickaxe"]},
    {"id": "farmhouse", "prerequisites": ["till_soil", "homestead_deed", "homestead"]},
    {"id": "odd_one", "prerequisites": ["totally_bogus_token", "small_hold"]},
]

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

known_tokens = st.sampled_from([
    "hoe", "till_soil", "craft_hoe", "craft_pickaxe", "farm_stage_2", "hero_level_3",
    "blueprint_sword_1", "homestead_deed", "homestead", "small_hold",
])

snapshots = st.builds(
    ProgressionSnapshot,
    hero_level=st.integers(min_value=1, max_value=10),
    farm_stage=st.integers(min_value=1, max_value=5),
    farm_plots=st.integers(min_value=0, max_value=100),
    unlocked_upgrades=st.frozensets(known_tokens, max_size=3),
    completed_cleanups=st.frozensets(known_tokens, max_size=2),
    owned_tools=st.frozensets(st.sampled_from(["hoe", "pickaxe", "axe"]), max_size=3),
)

entity_ids = st.sampled_from([r["id"] for r in SAMPLE])


def _resolver(**kwargs) -> PrerequisiteResolver:
    return PrerequisiteResolver(Corpus.from_records(SAMPLE), **kwargs)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


@given(token=known_tokens, snapshot=snapshots)
@settings(max_examples=200)
def test_resolution_is_deterministic(token: str, snapshot: ProgressionSnapshot) -> None:
    resolver = _resolver()
    assert resolver.resolve(token, snapshot) == resolver.resolve(token, snapshot)


@given(entity_id=entity_ids, snapshot=snapshots)
@settings(max_examples=200)
def test_cached_equals_fresh(entity_id: str, snapshot: ProgressionSnapshot) -> None:
    cached = _resolver()
    cached.check_entity(entity_id, snapshot)
    from_cache = cached.check_entity(entity_id, snapshot)
    assert cached.cache_stats().hits == 1
    assert from_cache == _resolver().check_entity(entity_id, snapshot)


@given(
    token=st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=3, max_size=12),
    snapshot=snapshots,
)
@settings(max_examples=200)
def test_unknown_tokens_fail_closed(token: str, snapshot: ProgressionSnapshot) -> None:
    resolver = _resolver()
    parsed = resolver.parse(token)
    if parsed.is_typed_gate or token in resolver.corpus:
        return
    result = resolver.resolve(token, snapshot)
    overridden = token in snapshot.unlocked_upgrades or token in snapshot.completed_cleanups
    assert result.satisfied is overridden


@given(entity_id=entity_ids, snapshot=snapshots)
@settings(max_examples=200)
def test_entity_satisfied_iff_all_tokens(entity_id: str, snapshot: ProgressionSnapshot) -> None:
    resolver = _resolver()
    entity = resolver.corpus.get(entity_id)
    expected = all(resolver.resolve(t, snapshot).satisfied for t in entity.raw_prerequisites)
    assert resolver.check_entity(entity_id, snapshot).satisfied is expected
