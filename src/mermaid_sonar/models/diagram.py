"""Diagram entities.

This module contains the input side of the analysis:
- DiagramType: Dialect tag assigned by the type detector
- LayoutDirection: Layout direction declared by (or implied for) a diagram
- Diagram: One fenced diagram block, located in its source file
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DiagramType(Enum):
    """Mermaid dialect of a diagram."""

    FLOWCHART = "flowchart"
    STATE = "state"
    CLASS = "class"
    SEQUENCE = "sequence"
    ER = "er"
    MINDMAP = "mindmap"
    GANTT = "gantt"
    PIE = "pie"
    JOURNEY = "journey"
    GITGRAPH = "gitgraph"
    TIMELINE = "timeline"
    QUADRANT = "quadrant"
    XYCHART = "xychart"
    SANKEY = "sankey"
    UNKNOWN = "unknown"

    @property
    def has_structure(self) -> bool:
        """Return True if the dialect has a structural parser."""
        return self in STRUCTURED_TYPES


STRUCTURED_TYPES = frozenset(
    {
        DiagramType.FLOWCHART,
        DiagramType.STATE,
        DiagramType.CLASS,
        DiagramType.SEQUENCE,
        DiagramType.ER,
        DiagramType.MINDMAP,
    }
)


class LayoutDirection(Enum):
    """Rank direction of a diagram layout."""

    TB = "TB"
    TD = "TD"
    BT = "BT"
    LR = "LR"
    RL = "RL"

    @property
    def is_horizontal(self) -> bool:
        """Return True for left-right / right-left layouts."""
        return self in (LayoutDirection.LR, LayoutDirection.RL)

    @property
    def is_vertical(self) -> bool:
        """Return True for top-down / bottom-up layouts."""
        return not self.is_horizontal

    @classmethod
    def parse(cls, token: str | None) -> "LayoutDirection | None":
        """Parse a direction token (case-insensitive), None if unrecognized."""
        if not token:
            return None
        try:
            return cls(token.strip().upper())
        except ValueError:
            return None


@dataclass(frozen=True)
class Diagram:
    """A single Mermaid diagram found in a document.

    Identity is positional: two diagrams are the same diagram when they come
    from the same file at the same line, regardless of content.

    Attributes:
        content: Raw diagram source (without the code fence lines)
        type: Dialect tag from the type detector
        file_path: File the diagram was extracted from
        start_line: 1-indexed line of the diagram in that file
    """

    content: str = field(compare=False)
    type: DiagramType = field(compare=False)
    file_path: str
    start_line: int = 1

    def __post_init__(self) -> None:
        """Validate diagram location."""
        if self.start_line < 1:
            raise ValueError(f"start_line must be >= 1 (got {self.start_line})")

    @property
    def location(self) -> str:
        """Return ``file:line`` for messages."""
        return f"{self.file_path}:{self.start_line}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type.value,
            "file_path": self.file_path,
            "start_line": self.start_line,
            "line_count": len(self.content.splitlines()),
        }
