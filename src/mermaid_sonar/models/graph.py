"""Canonical graph format.

Every dialect parser's output is normalized into this one structure, and all
metrics are computed from it. Uses a hybrid format: an ordered node list,
an edge list (a multiset, self-edges allowed), and forward/reverse adjacency
lists for traversal.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Edge:
    """A directed edge between two node identifiers.

    Attributes:
        source: Node the edge leaves
        target: Node the edge enters
        label: Optional edge label text
    """

    source: str
    target: str
    label: str | None = None

    @property
    def is_self_edge(self) -> bool:
        """Return True if the edge loops back to its source."""
        return self.source == self.target


@dataclass
class CanonicalGraph:
    """Dialect-independent directed graph.

    Example:
        {
            "nodes": ["A", "B", "C"],
            "edges": [{"source": "A", "target": "B"}, {"source": "A", "target": "C"}],
            "adjacency": {"A": ["B", "C"], "B": [], "C": []},
            "reverse_adjacency": {"A": [], "B": ["A"], "C": ["A"]}
        }

    Invariants:
        - node identifiers are unique (case-sensitive)
        - every node has an entry in both adjacency maps, possibly empty
        - len(adjacency[n]) == outdegree(n), and the outdegrees sum to the edge count

    Attributes:
        nodes: Node identifiers in first-seen order
        edges: Edge list in source order
        adjacency: Node -> ordered successors
        reverse_adjacency: Node -> ordered predecessors
    """

    nodes: list[str] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    adjacency: dict[str, list[str]] = field(default_factory=dict)
    reverse_adjacency: dict[str, list[str]] = field(default_factory=dict)

    def add_node(self, node_id: str) -> None:
        """Add a node to the graph (no-op if already present)."""
        if node_id in self.adjacency:
            return
        self.nodes.append(node_id)
        self.adjacency[node_id] = []
        self.reverse_adjacency[node_id] = []

    def add_edge(self, source: str, target: str, label: str | None = None) -> None:
        """Add an edge, registering both endpoints as nodes."""
        self.add_node(source)
        self.add_node(target)
        self.edges.append(Edge(source=source, target=target, label=label))
        self.adjacency[source].append(target)
        self.reverse_adjacency[target].append(source)

    def successors(self, node_id: str) -> list[str]:
        """Get all direct successors of a node."""
        return self.adjacency.get(node_id, [])

    def predecessors(self, node_id: str) -> list[str]:
        """Get all direct predecessors of a node."""
        return self.reverse_adjacency.get(node_id, [])

    def out_degree(self, node_id: str) -> int:
        """Return the number of edges leaving a node."""
        return len(self.successors(node_id))

    def in_degree(self, node_id: str) -> int:
        """Return the number of edges entering a node."""
        return len(self.predecessors(node_id))

    def sources(self) -> list[str]:
        """Get nodes with no incoming edges, in node order."""
        return [node for node in self.nodes if not self.reverse_adjacency[node]]

    @property
    def node_count(self) -> int:
        """Return total number of nodes."""
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        """Return total number of edges."""
        return len(self.edges)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "nodes": list(self.nodes),
            "edges": [
                {"source": e.source, "target": e.target, "label": e.label}
                for e in self.edges
            ],
            "adjacency": {k: list(v) for k, v in self.adjacency.items()},
            "reverse_adjacency": {k: list(v) for k, v in self.reverse_adjacency.items()},
        }
