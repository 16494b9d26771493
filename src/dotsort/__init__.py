"""Cycle detection and topological sorting for DOT dependency graphs."""

__all__ = [
    "Cycle",
    "CycleDetectedError",
    "DependencyGraph",
    "GraphBuilder",
    "MalformedInputError",
    "detect_cycle",
    "load_graph",
    "parse_dot",
    "topological_sort",
]

from ._dot import MalformedInputError, load_graph, parse_dot
from ._graph import Cycle, CycleDetectedError, DependencyGraph, GraphBuilder, detect_cycle, topological_sort
