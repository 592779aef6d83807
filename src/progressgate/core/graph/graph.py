"""Entity dependency graph and graph algorithms.

Models entity-to-entity prerequisite edges only: a token becomes an edge iff
it equals an existing entity id exactly. Typed gates (``farm_stage_3``,
``craft_hoe``) are a resolver concern, and tokens naming nothing are dropped
here and reported by the corpus validator as dangling.

Implements forward/reverse adjacency, transitive closures (BFS with a visited
set), cycle detection (iterative DFS with a recursion stack) and topological
depth assignment (ready-queue propagation from zero-prerequisite roots).
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from collections.abc import Iterable
from dataclasses import dataclass

from progressgate.core.corpus import Entity

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# GraphNode / DependencyPath / GraphStats
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GraphNode:
    """A vertex in the dependency graph.

    Attributes:
        id: Entity id.
        prerequisites: Entity ids this entity directly requires.
        dependents: Entity ids that directly require this entity.
        depth: Topological depth from the nearest root, or None when the node
            is on a cycle or depends on one. None is never a stand-in for 0.
    """

    id: str
    prerequisites: frozenset[str]
    dependents: frozenset[str]
    depth: int | None


@dataclass(frozen=True)
class DependencyPath:
    """A path through the graph; ``is_cycle`` paths repeat their first id last."""

    path: tuple[str, ...]
    is_cycle: bool


@dataclass(frozen=True)
class GraphStats:
    """Summary statistics of a built graph."""

    total_nodes: int
    total_dependencies: int
    max_depth: int | None
    items_without_prereqs: int
    cycles: int
    items_without_depth: int


# ---------------------------------------------------------------------------
# DependencyGraph
# ---------------------------------------------------------------------------


class DependencyGraph:
    """Immutable dependency graph built once from an entity corpus.

    Construction runs two passes (create nodes, then add edges for tokens that
    name an existing entity) followed by depth calculation. The instance is
    only handed out once fully built and is never patched afterwards: a corpus
    change means building a new graph and swapping the reference, so readers
    can never observe a half-built graph.

    Malformed input never raises. Duplicate ids merge into one node and tokens
    that do not name an entity are dropped (and logged at debug level).

    Thread safety: read-only after construction; safe for concurrent readers.

    Args:
        entities: The corpus records (any iterable of ``Entity``).
    """

    def __init__(self, entities: Iterable[Entity]) -> None:
        entities = list(entities)

        # Pass 1: one node per entity id.
        prereqs: dict[str, set[str]] = {}
        for entity in entities:
            if entity.id in prereqs:
                logger.warning("Duplicate entity id %s merged into one node", entity.id)
            prereqs.setdefault(entity.id, set())

        # Pass 2: entity-to-entity edges only.
        dependents: dict[str, set[str]] = {node_id: set() for node_id in prereqs}
        dropped = 0
        for entity in entities:
            for token in entity.raw_prerequisites:
                if token in prereqs:
                    prereqs[entity.id].add(token)
                    dependents[token].add(entity.id)
                else:
                    dropped += 1

        self._prereqs = {k: frozenset(v) for k, v in prereqs.items()}
        self._dependents = {k: frozenset(v) for k, v in dependents.items()}
        depths = self.calculate_depths()
        self._nodes: dict[str, GraphNode] = {
            node_id: GraphNode(
                id=node_id,
                prerequisites=self._prereqs[node_id],
                dependents=self._dependents[node_id],
                depth=depths[node_id],
            )
            for node_id in self._prereqs
        }
        logger.debug(
            "Built dependency graph: %d nodes, %d non-entity tokens left to the resolver",
            len(self._nodes), dropped,
        )

    # -- Lookup --

    @property
    def node_count(self) -> int:
        """Return the number of nodes."""
        return len(self._nodes)

    @property
    def nodes(self) -> dict[str, GraphNode]:
        """Return a copy of the id -> node mapping."""
        return dict(self._nodes)

    def get_node(self, entity_id: str) -> GraphNode | None:
        """Return the node for an entity id, or None."""
        return self._nodes.get(entity_id)

    def has_entity(self, entity_id: str) -> bool:
        """Return True if the entity is a node in this graph."""
        return entity_id in self._nodes

    def get_prerequisites(self, entity_id: str) -> list[str]:
        """Return direct prerequisite ids, sorted. Empty if unknown."""
        return sorted(self._prereqs.get(entity_id, ()))

    def get_dependents(self, entity_id: str) -> list[str]:
        """Return ids that directly depend on this entity, sorted."""
        return sorted(self._dependents.get(entity_id, ()))

    def get_depth(self, entity_id: str) -> int | None:
        """Return the node's depth, or None if it has none (or is unknown)."""
        node = self._nodes.get(entity_id)
        return node.depth if node else None

    # -- Closures --

    def get_all_prerequisites(self, entity_id: str) -> set[str]:
        """Return the transitive closure of prerequisites.

        Expansion stops at already-visited nodes, so cycles terminate. An
        entity on a cycle appears in its own closure.
        """
        return self._closure(entity_id, self._prereqs)

    def get_all_dependents(self, entity_id: str) -> set[str]:
        """Return every entity that transitively depends on this one."""
        return self._closure(entity_id, self._dependents)

    @staticmethod
    def _closure(start: str, adjacency: dict[str, frozenset[str]]) -> set[str]:
        result: set[str] = set()
        visited: set[str] = {start}
        queue: deque[str] = deque([start])
        while queue:
            current = queue.popleft()
            for nxt in adjacency.get(current, ()):
                result.add(nxt)
                if nxt not in visited:
                    visited.add(nxt)
                    queue.append(nxt)
        return result

    # -- Cycles --

    def detect_circular_dependencies(self) -> list[DependencyPath]:
        """Detect circular dependencies using iterative DFS.

        A DFS is started from every node not yet visited, following
        prerequisite edges. Whenever an edge reaches a node that is still on
        the recursion stack, the cycle is emitted as the stack slice from that
        node's occurrence through the current node, closed by the revisited
        node (``A -> B -> C -> A`` yields ``("A", "B", "C", "A")``).

        Node and edge order are sorted, so output is deterministic.

        Returns:
            One ``DependencyPath`` per back edge found. Empty if acyclic.
        """
        cycles: list[DependencyPath] = []
        visited: set[str] = set()

        for root in sorted(self._prereqs):
            if root in visited:
                continue
            path: list[str] = [root]
            on_stack: set[str] = {root}
            visited.add(root)
            stack = [iter(sorted(self._prereqs[root]))]

            while stack:
                nxt = next(stack[-1], None)
                if nxt is None:
                    stack.pop()
                    on_stack.discard(path.pop())
                    continue
                if nxt in on_stack:
                    start = path.index(nxt)
                    cycles.append(DependencyPath(tuple(path[start:]) + (nxt,), True))
                elif nxt not in visited:
                    visited.add(nxt)
                    on_stack.add(nxt)
                    path.append(nxt)
                    stack.append(iter(sorted(self._prereqs[nxt])))

        return cycles

    # -- Depths --

    def calculate_depths(self) -> dict[str, int | None]:
        """Compute topological depth for every node.

        Roots (no prerequisite edges) get depth 0. A node is finalised once
        all of its prerequisites are, at ``max(prerequisite depths) + 1``.
        Nodes never finalised (on a cycle, or downstream of one) map to None.
        """
        remaining = {node_id: len(p) for node_id, p in self._prereqs.items()}
        depths: dict[str, int | None] = {node_id: None for node_id in self._prereqs}
        queue: deque[str] = deque()
        for node_id in sorted(self._prereqs):
            if remaining[node_id] == 0:
                depths[node_id] = 0
                queue.append(node_id)

        while queue:
            current = queue.popleft()
            for dependent in self._dependents[current]:
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    depths[dependent] = max(depths[p] for p in self._prereqs[dependent]) + 1
                    queue.append(dependent)

        return depths

    def items_at_depth(self, depth: int) -> list[str]:
        """Return sorted ids of nodes at the given depth."""
        return sorted(n.id for n in self._nodes.values() if n.depth == depth)

    @property
    def max_depth(self) -> int | None:
        """Return the deepest finalised depth, or None if no node has one."""
        depths = [n.depth for n in self._nodes.values() if n.depth is not None]
        return max(depths) if depths else None

    # -- Paths & stats --

    def find_path(self, from_id: str, to_id: str) -> list[str] | None:
        """Find the shortest path between two entities.

        The search walks prerequisite and dependent edges alike, so it answers
        "how are these two related" rather than "what unlocks what".

        Returns:
            The id sequence from ``from_id`` to ``to_id`` inclusive, or None if
            either id is unknown or they are disconnected.
        """
        if from_id not in self._nodes or to_id not in self._nodes:
            return None

        parent: dict[str, str | None] = {from_id: None}
        queue: deque[str] = deque([from_id])
        while queue:
            current = queue.popleft()
            if current == to_id:
                path = [current]
                while parent[path[-1]] is not None:
                    path.append(parent[path[-1]])
                return list(reversed(path))
            neighbours = self._prereqs[current] | self._dependents[current]
            for nxt in sorted(neighbours):
                if nxt not in parent:
                    parent[nxt] = current
                    queue.append(nxt)
        return None

    def stats(self) -> GraphStats:
        """Return summary statistics for the graph."""
        nodes = self._nodes.values()
        return GraphStats(
            total_nodes=len(self._nodes),
            total_dependencies=sum(len(n.prerequisites) for n in nodes),
            max_depth=self.max_depth,
            items_without_prereqs=sum(1 for n in nodes if not n.prerequisites),
            cycles=len(self.detect_circular_dependencies()),
            items_without_depth=sum(1 for n in nodes if n.depth is None),
        )

    def dependency_tree(self) -> dict[str, list[str]]:
        """Return id -> sorted direct prerequisites for every node."""
        return {node_id: sorted(p) for node_id, p in self._prereqs.items()}
