"""Metrics engine.

Computes the structural metrics of one diagram from its canonical graph and
dialect parse. Graph traversals are iterative so very large diagrams cannot
hit the interpreter recursion limit, and cycles are handled by never
following an edge back onto the current path.
"""

import logging

from mermaid_sonar.analyzers.dimensions import EstimationConstants, estimate_dimensions
from mermaid_sonar.analyzers.graph_builder import average_label_length
from mermaid_sonar.models.dialects import (
    ClassDiagramParse,
    DialectParse,
    ErDiagramParse,
    FlowchartParse,
    RelationshipType,
    SequenceParse,
    StateDiagramParse,
)
from mermaid_sonar.models.graph import CanonicalGraph
from mermaid_sonar.models.metrics import Metrics

logger = logging.getLogger(__name__)


# =============================================================================
# Graph measures
# =============================================================================


def graph_density(graph: CanonicalGraph) -> float:
    """edges / (n * (n - 1)), 0 for n <= 1, clamped to [0, 1]."""
    n = graph.node_count
    if n <= 1:
        return 0.0
    return min(1.0, graph.edge_count / (n * (n - 1)))


def max_branch_width(graph: CanonicalGraph) -> int:
    """Largest outdegree of any node."""
    return max((graph.out_degree(node) for node in graph.nodes), default=0)


def average_degree(graph: CanonicalGraph) -> float:
    """2 * edges / nodes, 0 for an empty graph."""
    if graph.node_count == 0:
        return 0.0
    return 2 * graph.edge_count / graph.node_count


def _longest_from(graph: CanonicalGraph, start: str, memo: dict[str, int]) -> int:
    """Longest simple path (in edges) starting at ``start``.

    Depth-first with memoization; successors already on the current path are
    back-edges and are skipped, so cycles terminate.
    """
    if start in memo:
        return memo[start]

    on_path = {start}
    best = {start: 0}
    stack = [(start, iter(graph.successors(start)))]

    while stack:
        node, children = stack[-1]
        descended = False
        for child in children:
            if child in on_path:
                continue
            if child in memo:
                best[node] = max(best[node], memo[child] + 1)
                continue
            on_path.add(child)
            best[child] = 0
            stack.append((child, iter(graph.successors(child))))
            descended = True
            break
        if descended:
            continue

        stack.pop()
        on_path.discard(node)
        memo[node] = best[node]
        if stack:
            parent = stack[-1][0]
            best[parent] = max(best[parent], memo[node] + 1)

    return memo[start]


def longest_path(graph: CanonicalGraph) -> int:
    """Longest simple directed path in edges (0 for a single node)."""
    memo: dict[str, int] = {}
    return max((_longest_from(graph, node, memo) for node in graph.nodes), default=0)


def _reachable(graph: CanonicalGraph, starts: list[str]) -> set[str]:
    seen = set(starts)
    stack = list(starts)
    while stack:
        for child in graph.successors(stack.pop()):
            if child not in seen:
                seen.add(child)
                stack.append(child)
    return seen


def max_depth(graph: CanonicalGraph) -> int:
    """Longest path from any source node (indegree 0).

    Cycles that no source reaches have no entry point, so every node in them
    is a start as well. A graph made only of cycles thus gets its longest
    path.
    """
    sources = graph.sources()
    reached = _reachable(graph, sources)
    starts = sources + [node for node in graph.nodes if node not in reached]
    memo: dict[str, int] = {}
    return max((_longest_from(graph, node, memo) for node in starts), default=0)


def inheritance_depth(parse: ClassDiagramParse) -> int:
    """Number of classes along the longest inheritance chain."""
    if not parse.classes:
        return 0
    hierarchy = CanonicalGraph()
    for relationship in parse.relationships:
        if relationship.type == RelationshipType.INHERITANCE:
            hierarchy.add_edge(relationship.source, relationship.target)
    return longest_path(hierarchy) + 1


# =============================================================================
# Dialect measures
# =============================================================================


def decision_count(parse: DialectParse | None) -> int:
    """Decision-shaped nodes: flowchart diamonds, state ``<<choice>>`` states."""
    if isinstance(parse, FlowchartParse):
        return len(parse.decision_nodes)
    if isinstance(parse, StateDiagramParse):
        return len(parse.choice_states)
    return 0


def nesting_depth(parse: DialectParse | None) -> int:
    """Deepest block nesting: subgraphs, composite states or sequence blocks."""
    if isinstance(parse, FlowchartParse):
        return parse.max_subgraph_depth
    if isinstance(parse, StateDiagramParse | SequenceParse):
        return parse.max_nesting_depth
    return 0


def compute_metrics(
    graph: CanonicalGraph,
    parse: DialectParse | None,
    constants: EstimationConstants | None = None,
) -> Metrics:
    """Compute all metrics for one diagram.

    Args:
        graph: Canonical graph of the diagram
        parse: Dialect parse the graph was built from (None if unstructured)
        constants: Dimension estimation constants

    Returns:
        Metrics snapshot including the dimension estimate
    """
    if parse is None:
        return Metrics.empty()

    branch_width = max_branch_width(graph)
    depth = max_depth(graph)
    decisions = decision_count(parse)
    label_average = average_label_length(parse)

    extensions: dict[str, object] = {}
    if isinstance(parse, SequenceParse):
        extensions["participant_count"] = len(parse.participants)
        extensions["message_count"] = len(parse.messages)
    elif isinstance(parse, ClassDiagramParse | ErDiagramParse):
        entities = len(parse.classes) if isinstance(parse, ClassDiagramParse) else len(parse.entities)
        relationships = len(parse.relationships)
        extensions["entity_count"] = entities
        extensions["relationship_count"] = relationships
        extensions["relationship_density"] = relationships / entities if entities else 0.0
        if isinstance(parse, ClassDiagramParse):
            extensions["inheritance_depth"] = inheritance_depth(parse)

    if isinstance(parse, FlowchartParse | StateDiagramParse | ClassDiagramParse):
        extensions["direction"] = parse.direction.value

    dimensions = estimate_dimensions(
        parse,
        graph,
        average_label=label_average,
        max_branch_width=branch_width,
        max_depth=depth,
        constants=constants,
    )

    metrics = Metrics(
        node_count=graph.node_count,
        edge_count=graph.edge_count,
        graph_density=graph_density(graph),
        max_branch_width=branch_width,
        average_degree=average_degree(graph),
        longest_path=longest_path(graph),
        max_depth=depth,
        decision_count=decisions,
        cyclomatic_complexity=decisions + 1,
        nesting_depth=nesting_depth(parse),
        average_label_length=label_average,
        dimensions=dimensions,
        **extensions,  # type: ignore[arg-type]
    )
    logger.debug(
        "Metrics: %d nodes, %d edges, density %.3f",
        metrics.node_count,
        metrics.edge_count,
        metrics.graph_density,
    )
    return metrics

