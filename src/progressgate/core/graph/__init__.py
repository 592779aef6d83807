"""Entity Dependency Graph.

Pure in-memory graph built once per corpus version. Edges exist only between
entities; typed prerequisite gates are left to the resolver.

    from progressgate.core.graph import DependencyGraph, DependencyPath, GraphNode
"""

from progressgate.core.graph.graph import (
    DependencyGraph,
    DependencyPath,
    GraphNode,
    GraphStats,
)

__all__ = [
    "DependencyGraph",
    "DependencyPath",
    "GraphNode",
    "GraphStats",
]
