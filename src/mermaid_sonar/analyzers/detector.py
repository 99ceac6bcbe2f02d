"""Diagram type detection.

Classifies raw Mermaid source by its header line only. Comment lines
(``%% ...``), init directives (``%%{init: ...}%%``) and a YAML front-matter
block are skipped; the first remaining non-blank line is matched against an
ordered list of dialect signatures. First match wins.
"""

import logging
import re

from mermaid_sonar.models.diagram import DiagramType, LayoutDirection

logger = logging.getLogger(__name__)

# Ordered: structural dialects first, then chart dialects
DIALECT_SIGNATURES: list[tuple[re.Pattern[str], DiagramType]] = [
    (re.compile(r"^(?:graph|flowchart)(?:\s|$)", re.IGNORECASE), DiagramType.FLOWCHART),
    (re.compile(r"^statediagram(?:-v2)?(?:\s|$)", re.IGNORECASE), DiagramType.STATE),
    (re.compile(r"^classdiagram(?:-v2)?(?:\s|$)", re.IGNORECASE), DiagramType.CLASS),
    (re.compile(r"^sequencediagram(?:\s|$)", re.IGNORECASE), DiagramType.SEQUENCE),
    (re.compile(r"^erdiagram(?:\s|$)", re.IGNORECASE), DiagramType.ER),
    (re.compile(r"^mindmap(?:\s|$)", re.IGNORECASE), DiagramType.MINDMAP),
    (re.compile(r"^gantt(?:\s|$)", re.IGNORECASE), DiagramType.GANTT),
    (re.compile(r"^pie(?:\s|$)", re.IGNORECASE), DiagramType.PIE),
    (re.compile(r"^journey(?:\s|$)", re.IGNORECASE), DiagramType.JOURNEY),
    (re.compile(r"^gitgraph(?:\s|:|$)", re.IGNORECASE), DiagramType.GITGRAPH),
    (re.compile(r"^timeline(?:\s|$)", re.IGNORECASE), DiagramType.TIMELINE),
    (re.compile(r"^quadrantchart(?:\s|$)", re.IGNORECASE), DiagramType.QUADRANT),
    (re.compile(r"^xychart(?:-beta)?(?:\s|$)", re.IGNORECASE), DiagramType.XYCHART),
    (re.compile(r"^sankey(?:-beta)?(?:\s|$)", re.IGNORECASE), DiagramType.SANKEY),
]


def header_line(content: str) -> str | None:
    """Return the first meaningful line of a diagram, stripped.

    Args:
        content: Raw diagram source

    Returns:
        Header line, or None if the diagram has no content lines
    """
    in_front_matter = False

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if line == "---":
            in_front_matter = not in_front_matter
            continue
        if in_front_matter:
            continue
        if line.startswith("%%"):
            continue
        return line

    return None


def detect_diagram_type(content: str) -> DiagramType:
    """Classify diagram source into a dialect.

    Never raises; unrecognized source is DiagramType.UNKNOWN.

    Args:
        content: Raw diagram source

    Returns:
        Detected dialect
    """
    header = header_line(content)
    if header is None:
        return DiagramType.UNKNOWN

    for pattern, diagram_type in DIALECT_SIGNATURES:
        if pattern.match(header):
            return diagram_type

    logger.debug("Unrecognized diagram header: %s", header[:40])
    return DiagramType.UNKNOWN


def detect_header_direction(content: str) -> LayoutDirection | None:
    """Read the direction token from a ``graph``/``flowchart`` header.

    Args:
        content: Raw diagram source

    Returns:
        Declared direction, or None when the header has none
    """
    header = header_line(content)
    if header is None:
        return None

    parts = header.split()
    if len(parts) < 2:
        return None
    return LayoutDirection.parse(parts[1].rstrip(";"))
