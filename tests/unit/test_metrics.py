"""Unit tests for the metrics engine."""

import pytest

from mermaid_sonar.analyzers import build_graph, compute_metrics
from mermaid_sonar.analyzers.metrics import (
    graph_density,
    longest_path,
    max_depth,
)
from mermaid_sonar.analyzers.parsers import (
    parse_class_diagram,
    parse_er_diagram,
    parse_flowchart,
    parse_mindmap,
    parse_sequence,
    parse_state_diagram,
)
from mermaid_sonar.models import CanonicalGraph, Metrics


def flowchart_metrics(content: str) -> Metrics:
    parse = parse_flowchart(content)
    return compute_metrics(build_graph(parse), parse)


def graph_of(*edges: tuple[str, str]) -> CanonicalGraph:
    graph = CanonicalGraph()
    for source, target in edges:
        graph.add_edge(source, target)
    return graph


class TestGraphMeasures:
    """Tests for the graph-level measures."""

    def test_density_is_clamped(self) -> None:
        """Test that multi-edges cannot push density above 1."""
        assert graph_density(graph_of(("A", "B"), ("A", "B"), ("A", "B"))) == 1.0

    def test_density_of_tiny_graphs(self) -> None:
        """Test density with zero or one node."""
        single = CanonicalGraph()
        single.add_node("A")

        assert graph_density(CanonicalGraph()) == 0.0
        assert graph_density(single) == 0.0

    def test_cycle_terminates(self) -> None:
        """Test longest path over a cycle without sources."""
        graph = graph_of(("A", "B"), ("B", "C"), ("C", "A"))

        assert longest_path(graph) == 2
        assert max_depth(graph) == 2

    def test_self_edge_is_ignored_by_paths(self) -> None:
        """Test that a self-edge does not extend any path."""
        assert longest_path(graph_of(("A", "A"), ("A", "B"))) == 1

    def test_diamond(self) -> None:
        """Test reconverging branches."""
        graph = graph_of(("A", "B"), ("A", "C"), ("B", "D"), ("C", "D"))

        assert longest_path(graph) == 2
        assert max_depth(graph) == 2

    def test_depth_is_measured_from_sources(self) -> None:
        """Test that max depth only starts at nodes without predecessors."""
        graph = graph_of(("A", "B"), ("B", "C"), ("C", "D"), ("D", "B"))

        assert max_depth(graph) == 3

    def test_depth_includes_cycles_without_sources(self) -> None:
        """Test that a cycle no source reaches still counts toward depth."""
        graph = graph_of(("A", "B"), ("C", "D"), ("D", "E"), ("E", "F"), ("F", "C"))

        assert longest_path(graph) == 3
        assert max_depth(graph) == 3

    def test_long_chain_is_iterative(self) -> None:
        """Test a chain longer than the default recursion limit."""
        graph = graph_of(*[(f"N{i}", f"N{i + 1}") for i in range(3000)])

        assert longest_path(graph) == 3000


class TestComputeMetrics:
    """Tests for compute_metrics."""

    def test_flowchart_metrics(self, simple_flowchart: str) -> None:
        """Test every core metric on a small flowchart."""
        metrics = flowchart_metrics(simple_flowchart)

        assert metrics.node_count == 4
        assert metrics.edge_count == 3
        assert metrics.graph_density == pytest.approx(0.25)
        assert metrics.max_branch_width == 2
        assert metrics.average_degree == pytest.approx(1.5)
        assert metrics.longest_path == 2
        assert metrics.max_depth == 2
        assert metrics.decision_count == 1
        assert metrics.cyclomatic_complexity == 2
        assert metrics.average_label_length == pytest.approx(5.0)
        assert metrics.direction == "TD"
        assert metrics.participant_count is None

    def test_subgraph_nesting(self) -> None:
        """Test that subgraph depth becomes nesting depth."""
        metrics = flowchart_metrics(
            "graph TD\n  subgraph a\n    subgraph b\n      X --> Y\n    end\n  end\n"
        )

        assert metrics.nesting_depth == 2

    def test_empty_flowchart(self) -> None:
        """Test a header with no body."""
        metrics = flowchart_metrics("graph TD\n")

        assert metrics.node_count == 0
        assert metrics.average_degree == 0.0
        assert metrics.dimensions is None

    def test_unstructured_diagram(self) -> None:
        """Test that dialects without a parser get empty metrics."""
        metrics = compute_metrics(CanonicalGraph(), None)

        assert metrics == Metrics.empty()
        assert metrics.cyclomatic_complexity == 1

    def test_sequence_extensions(self, sequence_source: str) -> None:
        """Test participant and message counts."""
        parse = parse_sequence(sequence_source)
        metrics = compute_metrics(build_graph(parse), parse)

        assert metrics.participant_count == 3
        assert metrics.message_count == 5
        assert metrics.nesting_depth == 2
        assert metrics.direction is None

    def test_state_decisions_and_nesting(self, state_source: str) -> None:
        """Test choice states count as decisions."""
        parse = parse_state_diagram(state_source)
        metrics = compute_metrics(build_graph(parse), parse)

        assert metrics.decision_count == 1
        assert metrics.cyclomatic_complexity == 2
        assert metrics.nesting_depth == 1
        assert metrics.direction == "LR"

    def test_class_extensions(self, class_source: str) -> None:
        """Test entity counts and inheritance depth."""
        parse = parse_class_diagram(class_source)
        metrics = compute_metrics(build_graph(parse), parse)

        assert metrics.entity_count == 4
        assert metrics.relationship_count == 3
        assert metrics.relationship_density == pytest.approx(0.75)
        assert metrics.inheritance_depth == 3

    def test_class_without_inheritance(self) -> None:
        """Test that a lone class has inheritance depth 1."""
        parse = parse_class_diagram("classDiagram\n    class Lonely\n")

        assert compute_metrics(build_graph(parse), parse).inheritance_depth == 1

    def test_er_extensions(self, er_source: str) -> None:
        """Test ER entity and relationship counts."""
        parse = parse_er_diagram(er_source)
        metrics = compute_metrics(build_graph(parse), parse)

        assert metrics.entity_count == 4
        assert metrics.relationship_count == 3
        assert metrics.inheritance_depth is None
        assert metrics.direction is None

    def test_mindmap(self, mindmap_source: str) -> None:
        """Test mindmap tree metrics."""
        parse = parse_mindmap(mindmap_source)
        metrics = compute_metrics(build_graph(parse), parse)

        assert metrics.node_count == 4
        assert metrics.edge_count == 3
        assert metrics.max_depth == 2
        assert metrics.max_branch_width == 2

    def test_to_dict_drops_unset_extensions(self, simple_flowchart: str) -> None:
        """Test serialization of metrics."""
        data = flowchart_metrics(simple_flowchart).to_dict()

        assert data["node_count"] == 4
        assert data["direction"] == "TD"
        assert "participant_count" not in data
        assert data["dimensions"] == {"width": 220, "height": 320, "layout": "vertical"}
