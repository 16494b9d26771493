"""Graph module providing dependency graph abstractions.

This module contains:
- DependencyGraph[T]: A generic, immutable, insertion-ordered directed graph
- GraphBuilder[T]: Edge accumulator that produces a DependencyGraph
- detect_cycle: Three-colour depth-first cycle detection
- topological_sort: Kahn's algorithm ordering dependencies first
"""

from ._algorithms import Cycle, CycleDetectedError, detect_cycle, topological_sort
from ._dependency_graph import DependencyGraph, GraphBuilder

__all__ = [
    "Cycle",
    "CycleDetectedError",
    "DependencyGraph",
    "GraphBuilder",
    "detect_cycle",
    "topological_sort",
]
