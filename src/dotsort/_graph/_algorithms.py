"""Graph algorithms for dependency graph operations."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Hashable
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._dependency_graph import DependencyGraph

logger = logging.getLogger(__name__)


class _Mark(StrEnum):
    """Traversal state of a node. Unvisited nodes carry no mark."""

    IN_PROGRESS = auto()  # On the active traversal path
    DONE = auto()  # Fully explored, never entered again


@dataclass(frozen=True, slots=True)
class Cycle[T: Hashable]:
    """A cycle found by a depth-first traversal.

    Attributes:
        node: The node being explored when the back-edge was found.
        back_to: The in-progress node the back-edge points to.
        path: The nodes along the cycle, starting and ending with ``back_to``.

    """

    node: T
    back_to: T
    path: tuple[T, ...]

    @property
    def message(self) -> str:
        """Human-readable description naming the two culprits."""
        return f"Circular dependency detected between {self.back_to} and {self.node}"


class CycleDetectedError(ValueError):
    """Raised when a graph cannot be ordered because it contains a cycle."""

    def __init__(self, cycle: Cycle) -> None:
        super().__init__(cycle.message)
        self.cycle = cycle


def detect_cycle[T: Hashable](graph: DependencyGraph[T]) -> Cycle[T] | None:
    """Find a cycle using a three-colour depth-first traversal.

    Every node is used as a traversal root in insertion order, and successors
    are followed in edge-insertion order, so the reported cycle is the same on
    every run for the same graph. A node marked done is never entered again.

    Args:
        graph: The graph to inspect.

    Returns:
        The first cycle found, or None if the graph is acyclic.

    Example:
        >>> from dotsort import DependencyGraph
        >>> detect_cycle(DependencyGraph.from_edges([("a", "b"), ("b", "a")]))
        Cycle(node='b', back_to='a', path=('a', 'b', 'a'))

    """
    marks: dict[T, _Mark] = {}

    for root in graph.nodes:
        if root in marks:
            continue

        marks[root] = _Mark.IN_PROGRESS
        path: list[T] = [root]
        pending = [iter(graph.successors(root))]

        while pending:
            node = path[-1]
            for successor in pending[-1]:
                mark = marks.get(successor)
                if mark is None:
                    marks[successor] = _Mark.IN_PROGRESS
                    path.append(successor)
                    pending.append(iter(graph.successors(successor)))
                    break
                if mark is _Mark.IN_PROGRESS:
                    start = path.index(successor)
                    cycle = Cycle(node=node, back_to=successor, path=(*path[start:], successor))
                    logger.debug("Back-edge %r -> %r closes a cycle of length %d", node, successor, len(cycle.path) - 1)
                    return cycle
            else:
                marks[node] = _Mark.DONE
                path.pop()
                pending.pop()

    return None


def topological_sort[T: Hashable](graph: DependencyGraph[T]) -> list[T]:
    """Sort a graph topologically (dependencies before dependents).

    An edge (a -> b) means "a depends on b", so b is emitted before a. This is
    Kahn's algorithm: nodes with no unresolved dependencies form a FIFO
    frontier, seeded in node insertion order. Emitting a node releases its
    dependents in edge-insertion order.

    Args:
        graph: The graph to sort.

    Returns:
        List of all nodes in topological order.

    Raises:
        CycleDetectedError: If the graph contains a cycle. No partial order
            is returned.

    Example:
        >>> from dotsort import DependencyGraph
        >>> topological_sort(DependencyGraph.from_edges([("a", "b"), ("b", "c")]))
        ['c', 'b', 'a']

    """
    # Unresolved dependencies per node
    remaining = {node: graph.out_degree(node) for node in graph.nodes}

    frontier = deque(node for node, count in remaining.items() if count == 0)
    order: list[T] = []

    while frontier:
        node = frontier.popleft()
        order.append(node)
        for dependent in graph.predecessors(node):
            remaining[dependent] -= 1
            if remaining[dependent] == 0:
                frontier.append(dependent)

    if len(order) != len(remaining):
        cycle = detect_cycle(graph)
        assert cycle is not None
        logger.debug("Sort stalled after %d of %d nodes", len(order), len(remaining))
        raise CycleDetectedError(cycle)

    return order
