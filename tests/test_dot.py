"""Tests for reading DOT digraphs."""

from pathlib import Path

import pytest

from dotsort import DependencyGraph, MalformedInputError, load_graph, parse_dot


class TestParseDot:
    def test_single_edge(self) -> None:
        assert parse_dot("digraph { a -> b }") == [("a", "b")]

    def test_named_graph_with_semicolons(self) -> None:
        text = """
digraph deps {
    Chicken -> Egg;
    Egg -> Chicken;
}
"""
        assert parse_dot(text) == [("Chicken", "Egg"), ("Egg", "Chicken")]

    def test_edges_keep_statement_order(self) -> None:
        text = "digraph { c -> d; a -> b; b -> c }"
        assert parse_dot(text) == [("c", "d"), ("a", "b"), ("b", "c")]

    def test_chain_is_expanded(self) -> None:
        assert parse_dot("digraph { a -> b -> c }") == [("a", "b"), ("b", "c")]

    def test_quoted_names_are_unquoted(self) -> None:
        assert parse_dot('digraph { "build step" -> "fetch sources" }') == [("build step", "fetch sources")]

    def test_numeric_names(self) -> None:
        assert parse_dot("digraph { 1 -> 2 }") == [("1", "2")]

    def test_edge_attributes_are_ignored(self) -> None:
        assert parse_dot('digraph { a -> b [label="needs"] }') == [("a", "b")]

    def test_ports_are_ignored(self) -> None:
        assert parse_dot("digraph { a:p1 -> b:n }") == [("a", "b")]

    def test_port_with_compass_point_is_ignored(self) -> None:
        assert parse_dot("digraph { a:p1:ne -> b }") == [("a", "b")]

    def test_port_on_quoted_name(self) -> None:
        assert parse_dot('digraph { "x y":p -> "a:b" }') == [("x y", "a:b")]

    def test_cycle_through_port_is_detected(self) -> None:
        graph = DependencyGraph.from_edges(parse_dot("digraph { a:p1 -> b; b -> a }"))

        assert graph.nodes == ("a", "b")
        assert graph.has_cycle()

    def test_empty_digraph(self) -> None:
        assert parse_dot("digraph {}") == []

    def test_comments_are_ignored(self) -> None:
        text = """
digraph {
    // a depends on b
    a -> b  /* and nothing else */
}
"""
        assert parse_dot(text) == [("a", "b")]

    def test_undirected_graph_rejected(self) -> None:
        with pytest.raises(MalformedInputError, match="Only directed graphs"):
            parse_dot("graph { a -- b }")

    def test_node_statement_rejected(self) -> None:
        with pytest.raises(MalformedInputError, match="not supported"):
            parse_dot("digraph { a; a -> b }")

    def test_default_attribute_statement_rejected(self) -> None:
        with pytest.raises(MalformedInputError, match="not supported"):
            parse_dot("digraph { node [shape=box]; a -> b }")

    def test_graph_attribute_rejected(self) -> None:
        with pytest.raises(MalformedInputError, match="not supported"):
            parse_dot("digraph { rankdir=LR; a -> b }")

    def test_subgraph_rejected(self) -> None:
        with pytest.raises(MalformedInputError, match="Subgraphs"):
            parse_dot("digraph { subgraph cluster_x { a -> b } }")

    def test_empty_quoted_name_rejected(self) -> None:
        with pytest.raises(MalformedInputError, match="empty"):
            parse_dot('digraph { "" -> b }')

    def test_syntax_error_rejected(self) -> None:
        with pytest.raises(MalformedInputError):
            parse_dot("digraph { a -> }")

    def test_empty_text_rejected(self) -> None:
        with pytest.raises(MalformedInputError):
            parse_dot("")

    def test_malformed_input_is_value_error(self) -> None:
        with pytest.raises(ValueError):  # noqa: PT011
            parse_dot("not dot at all {")


class TestLoadGraph:
    def test_load_graph(self, tmp_path: Path) -> None:
        path = tmp_path / "deps.dot"
        path.write_text("digraph { A -> B; B -> C; A -> B }", encoding="utf-8")

        graph = load_graph(path)

        assert isinstance(graph, DependencyGraph)
        assert graph.nodes == ("A", "B", "C")
        assert graph.topological_order() == ["C", "B", "A"]

    def test_load_graph_utf8_names(self, tmp_path: Path) -> None:
        path = tmp_path / "deps.dot"
        path.write_text('digraph { "café" -> "crème" }', encoding="utf-8")

        assert load_graph(path).nodes == ("café", "crème")

    def test_non_utf8_file_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "deps.dot"
        path.write_bytes(b"digraph { caf\xe9 -> b }")

        with pytest.raises(MalformedInputError, match="UTF-8"):
            load_graph(path)

    def test_missing_file_raises_os_error(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_graph(tmp_path / "missing.dot")
