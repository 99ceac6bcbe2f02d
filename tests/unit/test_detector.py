"""Unit tests for diagram type detection."""

import pytest

from mermaid_sonar.analyzers.detector import (
    detect_diagram_type,
    detect_header_direction,
    header_line,
)
from mermaid_sonar.models import DiagramType, LayoutDirection


class TestDetectDiagramType:
    """Tests for header-based dialect detection."""

    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            ("graph TD\n  A --> B", DiagramType.FLOWCHART),
            ("flowchart LR\n  A --> B", DiagramType.FLOWCHART),
            ("stateDiagram-v2\n  [*] --> A", DiagramType.STATE),
            ("stateDiagram\n  [*] --> A", DiagramType.STATE),
            ("classDiagram\n  A <|-- B", DiagramType.CLASS),
            ("sequenceDiagram\n  A->>B: hi", DiagramType.SEQUENCE),
            ("erDiagram\n  A ||--o{ B : has", DiagramType.ER),
            ("mindmap\n  root", DiagramType.MINDMAP),
            ("pie title Pets\n  \"Dogs\" : 3", DiagramType.PIE),
            ("gantt\n  title Plan", DiagramType.GANTT),
            ("gitGraph\n  commit", DiagramType.GITGRAPH),
            ("xychart-beta\n  title Sales", DiagramType.XYCHART),
        ],
    )
    def test_detects_dialects(self, content: str, expected: DiagramType) -> None:
        """Test that each dialect header is recognized."""
        assert detect_diagram_type(content) == expected

    def test_header_is_case_insensitive(self) -> None:
        """Test that header keywords ignore case."""
        assert detect_diagram_type("FLOWCHART TD\nA-->B") == DiagramType.FLOWCHART

    def test_skips_comments_and_init_directives(self) -> None:
        """Test that %% lines before the header are ignored."""
        content = "%%{init: {'theme': 'dark'}}%%\n%% comment\nsequenceDiagram\nA->>B: hi"

        assert detect_diagram_type(content) == DiagramType.SEQUENCE

    def test_skips_front_matter(self) -> None:
        """Test that a YAML front-matter block is ignored."""
        content = "---\ntitle: Demo\n---\nclassDiagram\nA <|-- B"

        assert detect_diagram_type(content) == DiagramType.CLASS

    def test_unknown_header(self) -> None:
        """Test that unrecognized source is UNKNOWN."""
        assert detect_diagram_type("A --> B") == DiagramType.UNKNOWN

    def test_empty_content(self) -> None:
        """Test that empty or comment-only source is UNKNOWN."""
        assert detect_diagram_type("") == DiagramType.UNKNOWN
        assert detect_diagram_type("%% nothing here\n") == DiagramType.UNKNOWN

    def test_prefix_is_not_a_match(self) -> None:
        """Test that a keyword prefix alone does not match."""
        assert detect_diagram_type("graphical\nA --> B") == DiagramType.UNKNOWN

    def test_structured_types(self) -> None:
        """Test which dialects have a structural parser."""
        assert DiagramType.FLOWCHART.has_structure
        assert DiagramType.MINDMAP.has_structure
        assert not DiagramType.PIE.has_structure
        assert not DiagramType.UNKNOWN.has_structure


class TestHeaderDirection:
    """Tests for header direction detection."""

    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            ("graph LR\nA-->B", LayoutDirection.LR),
            ("flowchart TD\nA-->B", LayoutDirection.TD),
            ("graph rl;\nA-->B", LayoutDirection.RL),
            ("flowchart\nA-->B", None),
            ("graph XY\nA-->B", None),
        ],
    )
    def test_direction(self, content: str, expected: LayoutDirection | None) -> None:
        """Test reading the direction token."""
        assert detect_header_direction(content) == expected

    def test_horizontal_and_vertical(self) -> None:
        """Test direction orientation helpers."""
        assert LayoutDirection.LR.is_horizontal
        assert LayoutDirection.RL.is_horizontal
        assert LayoutDirection.TB.is_vertical
        assert LayoutDirection.BT.is_vertical

    def test_header_line(self) -> None:
        """Test that the header line is stripped."""
        assert header_line("\n\n   graph TD   \nA-->B") == "graph TD"
        assert header_line("   \n") is None
