"""Tests for dependency graph construction, closures, cycle detection and depths.

Validates two-pass construction (entity edges only), forward and reverse
closures, iterative DFS cycle detection, ready-queue depth assignment, path
finding and statistics.
"""

from __future__ import annotations

from progressgate.core.corpus import Corpus, Entity
from progressgate.core.graph import DependencyGraph, DependencyPath


# ===========================================================================
# Helpers: common graph topologies
# ===========================================================================


def _graph(*rows: tuple[str, tuple[str, ...]]) -> DependencyGraph:
    """Build a graph from (id, prerequisite tokens) pairs."""
    return DependencyGraph(Entity(entity_id, tokens) for entity_id, tokens in rows)


def _chain() -> DependencyGraph:
    """C <- B <- A (A requires B, B requires C)."""
    return _graph(("a", ("b",)), ("b", ("c",)), ("c", ()))


def _diamond() -> DependencyGraph:
    """A requires B and C; both require D."""
    return _graph(("a", ("b", "c")), ("b", ("d",)), ("c", ("d",)), ("d", ()))


def _triangle() -> DependencyGraph:
    """A -> B -> C -> A."""
    return _graph(("a", ("b",)), ("b", ("c",)), ("c", ("a",)))


# ===========================================================================
# Construction
# ===========================================================================


class TestGraphConstruction:
    """Tests for nodes and edges built from a corpus."""

    def test_only_entity_tokens_become_edges(self, sample_corpus: Corpus) -> None:
        graph = DependencyGraph(sample_corpus)
        assert graph.node_count == 8
        assert graph.get_prerequisites("till_soil") == ["hoe"]
        assert graph.get_prerequisites("mine_shaft") == []
        assert graph.get_prerequisites("farmhouse") == ["till_soil"]

    def test_reverse_edges(self, sample_corpus: Corpus) -> None:
        graph = DependencyGraph(sample_corpus)
        assert graph.get_dependents("hoe") == ["till_soil"]
        assert graph.get_dependents("till_soil") == ["farmhouse"]

    def test_dangling_tokens_do_not_crash(self) -> None:
        graph = _graph(("a", ("ghost", "craft_hoe")))
        assert graph.node_count == 1
        assert graph.get_prerequisites("a") == []
        assert graph.get_depth("a") == 0

    def test_duplicate_ids_merge(self) -> None:
        graph = _graph(("a", ("b",)), ("a", ("c",)), ("b", ()), ("c", ()))
        assert graph.node_count == 3
        assert graph.get_prerequisites("a") == ["b", "c"]

    def test_unknown_ids(self) -> None:
        graph = _chain()
        assert graph.get_node("zzz") is None
        assert not graph.has_entity("zzz")
        assert graph.get_prerequisites("zzz") == []
        assert graph.get_depth("zzz") is None

    def test_node_snapshot(self) -> None:
        node = _chain().get_node("b")
        assert node.prerequisites == frozenset({"c"})
        assert node.dependents == frozenset({"a"})
        assert node.depth == 1

    def test_dependency_tree(self) -> None:
        assert _diamond().dependency_tree() == {
            "a": ["b", "c"], "b": ["d"], "c": ["d"], "d": [],
        }

    def test_mixed_case_tokens_become_edges(self) -> None:
        graph = DependencyGraph(Corpus([Entity("hoe"), Entity("Till Soil", ("Hoe",))]))
        assert graph.get_prerequisites("till_soil") == ["hoe"]
        assert graph.get_depth("till_soil") == 1


# ===========================================================================
# Closures
# ===========================================================================


class TestClosures:
    """Tests for transitive prerequisite and dependent sets."""

    def test_all_prerequisites_of_chain(self) -> None:
        assert _chain().get_all_prerequisites("a") == {"b", "c"}

    def test_all_prerequisites_of_diamond(self) -> None:
        assert _diamond().get_all_prerequisites("a") == {"b", "c", "d"}

    def test_all_dependents(self) -> None:
        assert _diamond().get_all_dependents("d") == {"a", "b", "c"}

    def test_closure_terminates_on_cycle(self) -> None:
        closure = _triangle().get_all_prerequisites("a")
        assert closure == {"a", "b", "c"}

    def test_root_closure_is_empty(self) -> None:
        assert _chain().get_all_prerequisites("c") == set()


# ===========================================================================
# Cycles
# ===========================================================================


class TestCycleDetection:
    """Tests for iterative DFS cycle detection."""

    def test_acyclic_graph(self) -> None:
        assert _diamond().detect_circular_dependencies() == []

    def test_three_cycle_reported_once_with_closing_repeat(self) -> None:
        cycles = _triangle().detect_circular_dependencies()
        assert cycles == [DependencyPath(("a", "b", "c", "a"), True)]

    def test_self_loop(self) -> None:
        cycles = _graph(("a", ("a",))).detect_circular_dependencies()
        assert [c.path for c in cycles] == [("a", "a")]

    def test_cycle_below_entry_point(self) -> None:
        graph = _graph(("top", ("x",)), ("x", ("y",)), ("y", ("x",)))
        cycles = graph.detect_circular_dependencies()
        assert len(cycles) == 1
        assert cycles[0].path == ("x", "y", "x")

    def test_deep_chain_does_not_hit_recursion_limit(self) -> None:
        n = 5000
        rows = [(f"n{i}", (f"n{i + 1}",)) for i in range(n)] + [(f"n{n}", ())]
        graph = _graph(*rows)
        assert graph.detect_circular_dependencies() == []
        assert graph.get_depth("n0") == n


# ===========================================================================
# Depths
# ===========================================================================


class TestDepths:
    """Tests for ready-queue depth assignment."""

    def test_root_depth_zero(self) -> None:
        assert _chain().get_depth("c") == 0

    def test_depth_is_longest_path(self) -> None:
        graph = _graph(("a", ("b", "d")), ("b", ("c",)), ("c", ()), ("d", ()))
        assert graph.get_depth("a") == 2  # via b -> c

    def test_cycle_members_have_no_depth(self) -> None:
        depths = _triangle().calculate_depths()
        assert depths == {"a": None, "b": None, "c": None}

    def test_dependents_of_cycle_have_no_depth(self) -> None:
        graph = _graph(("x", ("y",)), ("y", ("x",)), ("after", ("x",)), ("free", ()))
        assert graph.get_depth("after") is None
        assert graph.get_depth("free") == 0

    def test_items_at_depth_and_max_depth(self, sample_corpus: Corpus) -> None:
        graph = DependencyGraph(sample_corpus)
        assert graph.items_at_depth(1) == ["till_soil"]
        assert graph.items_at_depth(2) == ["farmhouse"]
        assert graph.max_depth == 2

    def test_max_depth_none_when_everything_cycles(self) -> None:
        assert _triangle().max_depth is None

    def test_empty_graph(self) -> None:
        graph = DependencyGraph([])
        assert graph.node_count == 0
        assert graph.max_depth is None
        assert graph.detect_circular_dependencies() == []


# ===========================================================================
# Paths & stats
# ===========================================================================


class TestPathsAndStats:
    """Tests for find_path and stats."""

    def test_path_follows_prerequisites(self) -> None:
        assert _chain().find_path("a", "c") == ["a", "b", "c"]

    def test_path_follows_dependents(self) -> None:
        assert _chain().find_path("c", "a") == ["c", "b", "a"]

    def test_path_to_self(self) -> None:
        assert _chain().find_path("b", "b") == ["b"]

    def test_disconnected_or_unknown(self) -> None:
        graph = _graph(("a", ()), ("b", ()))
        assert graph.find_path("a", "b") is None
        assert graph.find_path("a", "zzz") is None

    def test_stats(self, sample_corpus: Corpus) -> None:
        stats = DependencyGraph(sample_corpus).stats()
        assert stats.total_nodes == 8
        assert stats.total_dependencies == 2
        assert stats.max_depth == 2
        assert stats.items_without_prereqs == 6
        assert stats.cycles == 0
        assert stats.items_without_depth == 0

    def test_stats_counts_cycles(self) -> None:
        stats = _triangle().stats()
        assert stats.cycles == 1
        assert stats.items_without_depth == 3
