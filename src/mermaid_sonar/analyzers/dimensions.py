"""Dimension estimator.

Approximates the rendered pixel size of a diagram without running a layout
engine. Every formula has the shape ``count x (label width + spacing) +
padding``, with the count chosen by layout family:

- horizontal (LR/RL): width follows node count, height follows branch width
- vertical (TB/TD/BT): width follows branch width, height follows depth
- sequence: width follows participants, height follows messages and notes
- grid (class, ER, mindmap): ``ceil(sqrt(n))`` boxes per row

The constants are calibrations, not measurements. Expect results within
roughly 20-30% of the real rendering.
"""

import math
from dataclasses import dataclass, fields
from typing import Any

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
from mermaid_sonar.models.diagram import LayoutDirection
from mermaid_sonar.models.graph import CanonicalGraph
from mermaid_sonar.models.metrics import DimensionEstimate


@dataclass(frozen=True)
class EstimationConstants:
    """Pixel constants used by the estimator (tunable via ``estimation:``)."""

    char_width: float = 8.0
    node_spacing: int = 45
    rank_spacing: int = 50
    node_height: int = 40
    layout_padding: int = 50
    message_spacing: int = 50
    participant_min_width: int = 150
    class_line_height: int = 24
    class_header_height: int = 40

    def __post_init__(self) -> None:
        """Validate constants."""
        for item in fields(self):
            value = getattr(self, item.name)
            if value < 0:
                raise ValueError(f"{item.name} must be >= 0 (got {value})")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {item.name: getattr(self, item.name) for item in fields(self)}


def estimate_dimensions(
    parse: DialectParse | None,
    graph: CanonicalGraph,
    average_label: float,
    max_branch_width: int,
    max_depth: int,
    constants: EstimationConstants | None = None,
) -> DimensionEstimate | None:
    """Estimate the rendered size of a parsed diagram.

    Args:
        parse: Dialect parse result
        graph: Canonical graph built from the parse
        average_label: Mean label length in characters
        max_branch_width: Largest outdegree in the graph
        max_depth: Longest path from a source node, in edges
        constants: Pixel constants (defaults if None)

    Returns:
        DimensionEstimate, or None for unstructured or empty diagrams
    """
    constants = constants or EstimationConstants()
    if parse is None or graph.node_count == 0:
        return None

    if isinstance(parse, SequenceParse):
        return _estimate_sequence(parse, average_label, constants)
    if isinstance(parse, ClassDiagramParse):
        return _estimate_class_grid(parse, constants)
    if isinstance(parse, ErDiagramParse):
        return _estimate_er_grid(parse, constants)
    if isinstance(parse, MindmapParse):
        box_width = average_label * constants.char_width
        return _grid(graph.node_count, box_width, constants.node_height, constants)
    if isinstance(parse, FlowchartParse | StateDiagramParse):
        return _estimate_directional(
            parse.direction, graph, average_label, max_branch_width, max_depth, constants
        )
    return None


# =============================================================================
# Directional layouts (flowchart, state)
# =============================================================================


def _estimate_directional(
    direction: LayoutDirection,
    graph: CanonicalGraph,
    average_label: float,
    max_branch_width: int,
    max_depth: int,
    constants: EstimationConstants,
) -> DimensionEstimate:
    node_width = average_label * constants.char_width + constants.node_spacing
    rank_height = constants.node_height + constants.rank_spacing
    branches = max(1, max_branch_width)

    if direction.is_horizontal:
        width = graph.node_count * node_width + constants.layout_padding
        height = branches * rank_height + constants.layout_padding
        layout = "horizontal"
    else:
        width = branches * node_width + constants.layout_padding
        height = (max_depth + 1) * rank_height + constants.layout_padding
        layout = "vertical"

    return DimensionEstimate(width=round(width), height=round(height), layout=layout)


# =============================================================================
# Sequence layout
# =============================================================================


def _estimate_sequence(
    parse: SequenceParse,
    average_label: float,
    constants: EstimationConstants,
) -> DimensionEstimate:
    column_width = max(
        constants.participant_min_width,
        average_label * constants.char_width + constants.node_spacing,
    )
    width = len(parse.participants) * column_width + constants.layout_padding

    rows = len(parse.messages) + parse.note_count
    # Participant boxes are drawn above and below the lifelines
    height = rows * constants.message_spacing + 2 * constants.node_height + constants.layout_padding

    return DimensionEstimate(width=round(width), height=round(height), layout="sequence")


# =============================================================================
# Grid layouts (class, ER, mindmap)
# =============================================================================


def _grid(
    count: int,
    box_width: float,
    box_height: float,
    constants: EstimationConstants,
) -> DimensionEstimate:
    columns = math.ceil(math.sqrt(count))
    rows = math.ceil(count / columns)
    width = columns * (box_width + constants.node_spacing) + constants.layout_padding
    height = rows * (box_height + constants.rank_spacing) + constants.layout_padding
    return DimensionEstimate(width=round(width), height=round(height), layout="grid")


def _estimate_class_grid(parse: ClassDiagramParse, constants: EstimationConstants) -> DimensionEstimate:
    widest = 0
    tallest = 0
    for node in parse.classes.values():
        lines = [node.label or node.name, *node.attributes, *node.methods]
        widest = max(widest, max(label_length(line) for line in lines))
        tallest = max(tallest, node.member_count)

    box_width = widest * constants.char_width
    box_height = constants.class_header_height + tallest * constants.class_line_height
    return _grid(len(parse.classes), box_width, box_height, constants)


def _estimate_er_grid(parse: ErDiagramParse, constants: EstimationConstants) -> DimensionEstimate:
    widest = 0
    tallest = 0
    for entity in parse.entities.values():
        lines = [entity.alias or entity.name]
        for attribute in entity.attributes:
            keys = ",".join(key.value for key in attribute.keys)
            lines.append(f"{attribute.type} {attribute.name} {keys}".strip())
        widest = max(widest, max(len(line) for line in lines))
        tallest = max(tallest, len(entity.attributes))

    box_width = widest * constants.char_width
    box_height = constants.class_header_height + tallest * constants.class_line_height
    return _grid(len(parse.entities), box_width, box_height, constants)
