"""Metrics entities.

- DimensionEstimate: Heuristic rendered size of a diagram
- Metrics: Read-only structural snapshot of one diagram
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class DimensionEstimate:
    """Approximate rendered size in pixels.

    This is a heuristic, expected to land within roughly 20-30% of the real
    rendered size depending on dialect. It never comes from a real layout.

    Attributes:
        width: Estimated width in pixels
        height: Estimated height in pixels
        layout: Layout family used ("horizontal", "vertical", "grid", "sequence")
    """

    width: int
    height: int
    layout: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"width": self.width, "height": self.height, "layout": self.layout}


@dataclass(frozen=True)
class Metrics:
    """Structural metrics of one diagram.

    Computed fresh for every diagram; nothing is cached between diagrams.
    Dialect-specific fields are None when they do not apply.

    Attributes:
        node_count: Number of canonical graph nodes
        edge_count: Number of canonical graph edges
        graph_density: edges / (nodes * (nodes - 1)), 0 when nodes <= 1, clamped to [0, 1]
        max_branch_width: Largest outdegree of any node
        average_degree: 2 * edges / nodes, 0 for an empty graph
        longest_path: Longest simple directed path, in edges
        max_depth: Longest path starting at a source node, in edges
        decision_count: Number of decision-shaped nodes
        cyclomatic_complexity: decision_count + 1
        nesting_depth: Deepest block nesting (subgraphs, composite states, sequence blocks)
        participant_count: Sequence participants
        message_count: Sequence messages
        entity_count: Classes or ER entities
        relationship_count: Class or ER relationships
        relationship_density: relationship_count / entity_count
        inheritance_depth: Classes along the longest inheritance chain
        average_label_length: Mean label length in characters
        direction: Layout direction token, when the dialect has one
        dimensions: Estimated rendered size
    """

    node_count: int
    edge_count: int
    graph_density: float
    max_branch_width: int
    average_degree: float
    longest_path: int = 0
    max_depth: int = 0
    decision_count: int = 0
    cyclomatic_complexity: int = 1
    nesting_depth: int = 0
    participant_count: int | None = None
    message_count: int | None = None
    entity_count: int | None = None
    relationship_count: int | None = None
    relationship_density: float | None = None
    inheritance_depth: int | None = None
    average_label_length: float = 0.0
    direction: str | None = None
    dimensions: DimensionEstimate | None = None

    @classmethod
    def empty(cls) -> "Metrics":
        """Metrics for a diagram with no recognized structure."""
        return cls(
            node_count=0,
            edge_count=0,
            graph_density=0.0,
            max_branch_width=0,
            average_degree=0.0,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization, dropping unset extensions."""
        result: dict[str, Any] = {
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "graph_density": round(self.graph_density, 4),
            "max_branch_width": self.max_branch_width,
            "average_degree": round(self.average_degree, 4),
            "longest_path": self.longest_path,
            "max_depth": self.max_depth,
            "decision_count": self.decision_count,
            "cyclomatic_complexity": self.cyclomatic_complexity,
            "nesting_depth": self.nesting_depth,
            "average_label_length": round(self.average_label_length, 2),
        }
        optional = {
            "participant_count": self.participant_count,
            "message_count": self.message_count,
            "entity_count": self.entity_count,
            "relationship_count": self.relationship_count,
            "relationship_density": self.relationship_density,
            "inheritance_depth": self.inheritance_depth,
            "direction": self.direction,
        }
        result.update({k: v for k, v in optional.items() if v is not None})
        if self.dimensions is not None:
            result["dimensions"] = self.dimensions.to_dict()
        return result
