"""Dialect parsers.

Each structured dialect has a parser producing its own parse result; the
graph builder then normalizes that into a CanonicalGraph. Parsers are pure:
they never raise on unrecognized lines and keep no state between calls.
"""

from collections.abc import Callable

from mermaid_sonar.analyzers.parsers.class_diagram import ClassDiagramParser, parse_class_diagram
from mermaid_sonar.analyzers.parsers.er import ErDiagramParser, parse_er_diagram
from mermaid_sonar.analyzers.parsers.flowchart import FlowchartParser, parse_flowchart
from mermaid_sonar.analyzers.parsers.mindmap import MindmapParser, parse_mindmap
from mermaid_sonar.analyzers.parsers.sequence import SequenceParser, parse_sequence
from mermaid_sonar.analyzers.parsers.state import StateDiagramParser, parse_state_diagram
from mermaid_sonar.models.diagram import DiagramType
from mermaid_sonar.models.dialects import DialectParse

__all__ = [
    "ClassDiagramParser",
    "ErDiagramParser",
    "FlowchartParser",
    "MindmapParser",
    "SequenceParser",
    "StateDiagramParser",
    "PARSERS",
    "parse_dialect",
]

PARSERS: dict[DiagramType, Callable[[str], DialectParse]] = {
    DiagramType.FLOWCHART: parse_flowchart,
    DiagramType.STATE: parse_state_diagram,
    DiagramType.CLASS: parse_class_diagram,
    DiagramType.SEQUENCE: parse_sequence,
    DiagramType.ER: parse_er_diagram,
    DiagramType.MINDMAP: parse_mindmap,
}


def parse_dialect(diagram_type: DiagramType, content: str) -> DialectParse | None:
    """Parse diagram source with the parser for its dialect.

    Args:
        diagram_type: Detected dialect
        content: Raw diagram source

    Returns:
        Dialect parse result, or None for dialects without structure
    """
    parser = PARSERS.get(diagram_type)
    if parser is None:
        return None
    return parser(content)
