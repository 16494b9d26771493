"""Insertion-ordered dependency graph abstraction."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Iterator
from dataclasses import dataclass, field

from ._algorithms import Cycle, detect_cycle, topological_sort

logger = logging.getLogger(__name__)


class GraphBuilder[T: Hashable]:
    """Accumulates directed edges before freezing them into a DependencyGraph.

    A node is registered the first time its name is seen, in either position
    of an edge, and keeps that position in the node order. Repeated edges are
    recorded once.

    Example:
        >>> builder = GraphBuilder()
        >>> builder.add_edge("a", "b")
        >>> builder.add_edge("a", "b")
        >>> builder.build().in_degree("b")
        1

    """

    def __init__(self) -> None:
        # Dicts with None values keep insertion order and drop duplicates
        self._successors: dict[T, dict[T, None]] = {}
        self._predecessors: dict[T, dict[T, None]] = {}

    def _register(self, node: T) -> None:
        if node not in self._successors:
            self._successors[node] = {}
            self._predecessors[node] = {}

    def add_edge(self, source: T, target: T) -> None:
        """Record the edge ``source -> target`` ("source depends on target")."""
        self._register(source)
        self._register(target)
        self._successors[source][target] = None
        self._predecessors[target][source] = None

    def build(self) -> DependencyGraph[T]:
        """Freeze the accumulated edges into an immutable graph."""
        return DependencyGraph(
            _successors={node: tuple(succ) for node, succ in self._successors.items()},
            _predecessors={node: tuple(pred) for node, pred in self._predecessors.items()},
        )


@dataclass(frozen=True, slots=True)
class DependencyGraph[T: Hashable]:
    """A directed graph representing dependencies between nodes.

    This is a pure, immutable data structure with query methods. All queries
    answer in insertion order so that the algorithms built on top of them are
    deterministic.

    The graph represents "depends on" relationships:
    - successors[a] = (b,) means "a depends on b" (edge a -> b)
    - predecessors[b] = (a,) means "b is depended on by a"

    Attributes:
        _successors: Mapping from node to its direct dependencies.
        _predecessors: Mapping from node to nodes that depend on it.

    """

    _successors: dict[T, tuple[T, ...]] = field(default_factory=dict)
    _predecessors: dict[T, tuple[T, ...]] = field(default_factory=dict)

    @classmethod
    def from_edges(cls, edges: Iterable[tuple[T, T]]) -> DependencyGraph[T]:
        """Build a graph from (source, target) edges.

        An edge (a, b) means "a depends on b" (a -> b in the graph).

        Args:
            edges: Iterable of (source, target) tuples.

        Returns:
            A new DependencyGraph instance.

        Example:
            >>> graph = DependencyGraph.from_edges([("a", "b"), ("b", "c")])
            >>> graph.nodes
            ('a', 'b', 'c')

        """
        builder: GraphBuilder[T] = GraphBuilder()
        for source, target in edges:
            builder.add_edge(source, target)
        graph = builder.build()
        logger.debug("Built graph with %d nodes and %d edges", len(graph), len(graph.edges))
        return graph

    @property
    def nodes(self) -> tuple[T, ...]:
        """All nodes in the graph, in the order they were first seen."""
        return tuple(self._successors)

    @property
    def edges(self) -> tuple[tuple[T, T], ...]:
        """Distinct edges, grouped by source in node order."""
        return tuple((source, target) for source, targets in self._successors.items() for target in targets)

    def successors(self, node: T) -> tuple[T, ...]:
        """Get direct dependencies of a node (targets of its outgoing edges).

        Args:
            node: The node to query.

        Returns:
            Nodes this node depends on, in edge-insertion order.

        """
        return self._successors.get(node, ())

    def predecessors(self, node: T) -> tuple[T, ...]:
        """Get direct dependents of a node (sources of its incoming edges).

        Args:
            node: The node to query.

        Returns:
            Nodes that depend on this node, in edge-insertion order.

        """
        return self._predecessors.get(node, ())

    def in_degree(self, node: T) -> int:
        """Number of distinct edges pointing into ``node``."""
        return len(self.predecessors(node))

    def out_degree(self, node: T) -> int:
        """Number of distinct edges leaving ``node``."""
        return len(self.successors(node))

    def roots(self) -> tuple[T, ...]:
        """Get nodes with no incoming edges (nothing depends on them)."""
        return tuple(n for n in self.nodes if not self._predecessors.get(n))

    def leaves(self) -> tuple[T, ...]:
        """Get nodes with no outgoing edges (they depend on nothing)."""
        return tuple(n for n in self.nodes if not self._successors.get(n))

    def ancestors(self, node: T) -> frozenset[T]:
        """Get all nodes that transitively depend on a node.

        Args:
            node: The node to query.

        Returns:
            Set of all nodes with a path leading to this node.

        """
        visited: set[T] = set()
        stack = list(self.predecessors(node))
        while stack:
            current = stack.pop()
            if current not in visited:
                visited.add(current)
                stack.extend(self.predecessors(current))
        return frozenset(visited)

    def descendants(self, node: T) -> frozenset[T]:
        """Get all transitive dependencies of a node.

        Args:
            node: The node to query.

        Returns:
            Set of all nodes reachable from this node.

        """
        visited: set[T] = set()
        stack = list(self.successors(node))
        while stack:
            current = stack.pop()
            if current not in visited:
                visited.add(current)
                stack.extend(self.successors(current))
        return frozenset(visited)

    def find_cycle(self) -> Cycle[T] | None:
        """Return a representative cycle, or None if the graph is acyclic."""
        return detect_cycle(self)

    def has_cycle(self) -> bool:
        """Check if the graph contains a cycle."""
        return self.find_cycle() is not None

    def topological_order(self) -> list[T]:
        """Return nodes in topological order (dependencies before dependents).

        Raises:
            CycleDetectedError: If the graph contains a cycle.

        """
        return topological_sort(self)

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._successors)

    def __contains__(self, node: object) -> bool:
        """Check if a node is in the graph."""
        return node in self._successors

    def __iter__(self) -> Iterator[T]:
        """Iterate over nodes in insertion order."""
        return iter(self._successors)
