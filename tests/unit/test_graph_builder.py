"""Unit tests for canonical graph construction."""

from mermaid_sonar.analyzers import build_graph
from mermaid_sonar.analyzers.graph_builder import average_label_length, node_labels
from mermaid_sonar.analyzers.parsers import (
    parse_class_diagram,
    parse_er_diagram,
    parse_flowchart,
    parse_mindmap,
    parse_sequence,
    parse_state_diagram,
)
from mermaid_sonar.models import CanonicalGraph


class TestCanonicalGraph:
    """Tests for the CanonicalGraph structure."""

    def test_adjacency_is_kept_in_sync(self) -> None:
        """Test that every edge updates both adjacency maps."""
        graph = CanonicalGraph()
        graph.add_edge("A", "B")
        graph.add_edge("A", "C", "label")
        graph.add_node("D")

        assert graph.nodes == ["A", "B", "C", "D"]
        assert graph.successors("A") == ["B", "C"]
        assert graph.predecessors("C") == ["A"]
        assert graph.out_degree("D") == 0
        assert graph.sources() == ["A", "D"]
        assert sum(graph.out_degree(n) for n in graph.nodes) == graph.edge_count

    def test_multi_edges_and_self_edges(self) -> None:
        """Test that repeated and self edges are all stored."""
        graph = CanonicalGraph()
        graph.add_edge("A", "A")
        graph.add_edge("A", "B")
        graph.add_edge("A", "B")

        assert graph.edge_count == 3
        assert graph.node_count == 2
        assert graph.edges[0].is_self_edge

    def test_add_node_is_idempotent(self) -> None:
        """Test that re-adding a node keeps its edges."""
        graph = CanonicalGraph()
        graph.add_edge("A", "B")
        graph.add_node("A")

        assert graph.nodes == ["A", "B"]
        assert graph.successors("A") == ["B"]

    def test_to_dict(self) -> None:
        """Test serialization."""
        graph = CanonicalGraph()
        graph.add_edge("A", "B", "go")

        assert graph.to_dict() == {
            "nodes": ["A", "B"],
            "edges": [{"source": "A", "target": "B", "label": "go"}],
            "adjacency": {"A": ["B"], "B": []},
            "reverse_adjacency": {"A": [], "B": ["A"]},
        }


class TestBuildGraph:
    """Tests for build_graph across dialects."""

    def test_unstructured_diagram(self) -> None:
        """Test that no parse yields an empty graph."""
        graph = build_graph(None)

        assert graph.node_count == 0
        assert graph.edge_count == 0

    def test_flowchart(self, simple_flowchart: str) -> None:
        """Test nodes and edges from a flowchart."""
        graph = build_graph(parse_flowchart(simple_flowchart))

        assert graph.nodes == ["A", "B", "C", "D"]
        assert graph.successors("B") == ["C", "D"]
        assert graph.edges[1].label == "yes"

    def test_state_diagram_has_no_pseudo_state(self, state_source: str) -> None:
        """Test that ``[*]`` never becomes a node."""
        graph = build_graph(parse_state_diagram(state_source))

        assert "[*]" not in graph.nodes
        assert graph.node_count == 6
        assert graph.edge_count == 4

    def test_sequence_participants_are_nodes(self, sequence_source: str) -> None:
        """Test that messages become edges between participants."""
        graph = build_graph(parse_sequence(sequence_source))

        assert graph.nodes == ["A", "B", "C"]
        assert graph.edge_count == 5
        assert graph.successors("A") == ["B", "B", "B", "C"]

    def test_class_inheritance_points_to_supertype(self, class_source: str) -> None:
        """Test logical direction of inheritance edges."""
        graph = build_graph(parse_class_diagram(class_source))

        assert graph.successors("Mallard") == ["Duck"]
        assert sorted(graph.predecessors("Animal")) == ["Duck", "Fish"]

    def test_er_diagram(self, er_source: str) -> None:
        """Test entities and relationships."""
        graph = build_graph(parse_er_diagram(er_source))

        assert graph.node_count == 4
        assert graph.successors("CUSTOMER") == ["ORDER", "DELIVERY-ADDRESS"]

    def test_mindmap_edges_point_to_children(self, mindmap_source: str) -> None:
        """Test parent -> child edges."""
        graph = build_graph(parse_mindmap(mindmap_source))

        assert graph.edge_count == 3
        assert graph.successors("root") == ["Goals", "Risks"]
        assert graph.sources() == ["root"]


class TestLabels:
    """Tests for node label extraction."""

    def test_labels_fall_back_to_identifiers(self) -> None:
        """Test that unlabeled nodes contribute their identifier."""
        parse = parse_flowchart("graph TD\n    A[Alpha] --> Bee\n")

        assert node_labels(parse) == ["Alpha", "Bee"]
        assert average_label_length(parse) == 4.0

    def test_multiline_label_uses_widest_line(self) -> None:
        """Test that ``<br>`` splits a label into rendered lines."""
        parse = parse_flowchart("graph TD\n    A[short<br>much longer]\n")

        assert average_label_length(parse) == len("much longer")

    def test_no_labels(self) -> None:
        """Test the average of nothing."""
        assert average_label_length(None) == 0.0
