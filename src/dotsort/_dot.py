"""Reading dependency graphs written in a subset of the Graphviz DOT language."""

import contextlib
import io
import logging
import re
from pathlib import Path

import pydot
from pyparsing import ParseBaseException

from ._graph import DependencyGraph

logger = logging.getLogger(__name__)

_QUOTED_ID = re.compile(r'"(?:[^"\\]|\\.)*"')


class MalformedInputError(ValueError):
    """The DOT text is invalid or uses constructs outside the supported subset."""


def _unquote(dot_id: str) -> str:
    """Strip DOT double quotes from an ID, undoing escaped quotes."""
    if len(dot_id) >= 2 and dot_id.startswith('"') and dot_id.endswith('"'):  # noqa: PLR2004
        return dot_id[1:-1].replace('\\"', '"')
    return dot_id


def _strip_port(endpoint: str) -> str:
    """Drop a `:port[:compass]` suffix so ports share their node's identity."""
    if endpoint.startswith('"'):
        match = _QUOTED_ID.match(endpoint)
        return match.group(0) if match else endpoint
    if endpoint.startswith("<"):
        return endpoint[: endpoint.rfind(">") + 1] or endpoint
    return endpoint.partition(":")[0]


def _endpoint_name(endpoint: object) -> str:
    if not isinstance(endpoint, str):
        msg = "Subgraphs are not supported as edge endpoints"
        raise MalformedInputError(msg)
    name = _unquote(_strip_port(endpoint))
    if not name:
        msg = "Node names cannot be empty"
        raise MalformedInputError(msg)
    return name


def _parse_graphs(text: str) -> list[pydot.Dot]:
    # pydot 1.x and 2.x print parse errors to stdout and return None; releases
    # that raise the pyparsing error instead are handled by the except clause
    captured = io.StringIO()
    try:
        with contextlib.redirect_stdout(captured):
            graphs = pydot.graph_from_dot_data(text)
    except ParseBaseException as e:
        msg = f"Invalid DOT syntax: {e}"
        raise MalformedInputError(msg) from e

    if not graphs:
        detail = captured.getvalue().strip().splitlines()
        msg = f"Invalid DOT syntax: {detail[-1]}" if detail else "No graph found in DOT input"
        raise MalformedInputError(msg)
    return graphs


def parse_dot(text: str) -> list[tuple[str, str]]:
    """Extract the edges of a single DOT digraph.

    Only edge statements are supported. Chains such as ``a -> b -> c`` are
    expanded into consecutive pairs, and attribute lists attached to edges
    are ignored.

    Args:
        text: DOT source text.

    Returns:
        List of (source, target) node-name pairs in statement order.

    Raises:
        MalformedInputError: If the text cannot be parsed, holds more than one
            graph, is undirected, or contains node, attribute or subgraph
            statements.

    Example:
        >>> parse_dot("digraph { a -> b -> c }")
        [('a', 'b'), ('b', 'c')]

    """
    graphs = _parse_graphs(text)
    if len(graphs) != 1:
        msg = f"Expected exactly one graph, found {len(graphs)}"
        raise MalformedInputError(msg)

    graph = graphs[0]
    if graph.get_type() != "digraph":
        msg = "Only directed graphs are supported"
        raise MalformedInputError(msg)

    if graph.get_subgraphs():
        msg = "Subgraphs are not supported"
        raise MalformedInputError(msg)

    if graph.get_attributes():
        msg = f"Graph attributes are not supported: {', '.join(graph.get_attributes())}"
        raise MalformedInputError(msg)

    # pydot reports `graph [...]`, `node [...]` and `edge [...]` as nodes too
    nodes = graph.get_nodes()
    if nodes:
        msg = f"Statement is not supported: {nodes[0].to_string()}"
        raise MalformedInputError(msg)

    edges = [(_endpoint_name(edge.get_source()), _endpoint_name(edge.get_destination())) for edge in graph.get_edges()]
    logger.debug("Parsed %d edges from DOT input", len(edges))
    return edges


def load_graph(path: Path) -> DependencyGraph[str]:
    """Read a DOT file and build its dependency graph.

    Args:
        path: Path to a UTF-8 encoded DOT file.

    Returns:
        The graph described by the file's edges.

    Raises:
        OSError: If the file cannot be read.
        MalformedInputError: If the contents are not UTF-8 text or not a
            supported DOT digraph.

    """
    logger.debug("Reading graph from %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        msg = f"Not a UTF-8 text file: {e.reason} at byte {e.start}"
        raise MalformedInputError(msg) from e
    return DependencyGraph.from_edges(parse_dot(text))
