"""Canonical graph builder.

Normalizes every dialect parse into a CanonicalGraph so the metrics engine
has a single structure to work from. Direction is logical:

- flowchart: link source -> link target
- class: subtype -> supertype for inheritance, whole -> part for
  composition/aggregation, otherwise as written
- sequence: message sender -> receiver, participants as nodes
- state: transition source -> target (``[*]`` never appears)
- ER: left entity -> right entity
- mindmap: parent -> child
"""

from mermaid_sonar.analyzers.parsers.scanner import label_length
from mermaid_sonar.models.dialects import (
    ClassDiagramParse,
    DialectParse,
    ErDiagramParse,
    FlowchartParse,
    MindmapParse,
    SequenceParse,
    StateDiagramParse,
)
from mermaid_sonar.models.graph import CanonicalGraph


def build_graph(parse: DialectParse | None) -> CanonicalGraph:
    """Build the canonical graph for a dialect parse.

    Args:
        parse: Dialect parse result, or None for unstructured diagrams

    Returns:
        CanonicalGraph (empty when there is nothing to build from)
    """
    graph = CanonicalGraph()

    if isinstance(parse, FlowchartParse):
        for node_id in parse.nodes:
            graph.add_node(node_id)
        for edge in parse.edges:
            graph.add_edge(edge.source, edge.target, edge.label)

    elif isinstance(parse, ClassDiagramParse):
        for name in parse.classes:
            graph.add_node(name)
        for relationship in parse.relationships:
            graph.add_edge(relationship.source, relationship.target, relationship.label)

    elif isinstance(parse, SequenceParse):
        for name in parse.participants:
            graph.add_node(name)
        for message in parse.messages:
            graph.add_edge(message.source, message.target, message.text)

    elif isinstance(parse, StateDiagramParse):
        for state_id in parse.states:
            graph.add_node(state_id)
        for transition in parse.transitions:
            graph.add_edge(transition.source, transition.target, transition.label)

    elif isinstance(parse, ErDiagramParse):
        for name in parse.entities:
            graph.add_node(name)
        for relationship in parse.relationships:
            graph.add_edge(relationship.source, relationship.target, relationship.label)

    elif isinstance(parse, MindmapParse):
        for node in parse.nodes:
            graph.add_node(node.id)
        for node in parse.nodes:
            if node.parent is not None:
                graph.add_edge(node.parent, node.id)

    return graph


def node_labels(parse: DialectParse | None) -> list[str]:
    """Get the rendered text of every node, falling back to its identifier.

    Args:
        parse: Dialect parse result

    Returns:
        One label per node, in node order
    """
    if isinstance(parse, FlowchartParse):
        return [node.label or node.id for node in parse.nodes.values()]
    if isinstance(parse, ClassDiagramParse):
        return [node.label or node.name for node in parse.classes.values()]
    if isinstance(parse, SequenceParse):
        return [participant.display_name for participant in parse.participants.values()]
    if isinstance(parse, StateDiagramParse):
        return [state.description or state.id for state in parse.states.values()]
    if isinstance(parse, ErDiagramParse):
        return [entity.alias or entity.name for entity in parse.entities.values()]
    if isinstance(parse, MindmapParse):
        return [node.label or node.id for node in parse.nodes]
    return []


def average_label_length(parse: DialectParse | None) -> float:
    """Mean rendered label length in characters (widest line per label)."""
    labels = node_labels(parse)
    if not labels:
        return 0.0
    return sum(label_length(label) for label in labels) / len(labels)
