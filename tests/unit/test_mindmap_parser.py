"""Unit tests for the mindmap parser."""

from mermaid_sonar.analyzers.parsers import parse_mindmap


class TestMindmapParser:
    """Tests for MindmapParser."""

    def test_tree_from_indentation(self, mindmap_source: str) -> None:
        """Test that parents come from indentation."""
        parse = parse_mindmap(mindmap_source)

        assert [(n.id, n.depth, n.parent) for n in parse.nodes] == [
            ("root", 0, None),
            ("Goals", 1, "root"),
            ("Ship", 2, "Goals"),
            ("Risks", 1, "root"),
        ]
        assert parse.nodes[0].label == "Project"
        assert parse.max_depth == 2

    def test_duplicate_labels_get_unique_ids(self) -> None:
        """Test that repeated text still yields distinct nodes."""
        parse = parse_mindmap("mindmap\n  Topic\n    Idea\n    Idea\n")

        assert [n.id for n in parse.nodes] == ["Topic", "Idea", "Idea~2"]
        assert [n.label for n in parse.nodes] == ["Topic", "Idea", "Idea"]

    def test_icons_and_classes_are_skipped(self) -> None:
        """Test that decoration lines are not nodes."""
        parse = parse_mindmap("mindmap\n  Root\n    ::icon(fa fa-book)\n    Child\n")

        assert [n.id for n in parse.nodes] == ["Root", "Child"]

    def test_empty_mindmap(self) -> None:
        """Test a header without nodes."""
        parse = parse_mindmap("mindmap\n")

        assert parse.nodes == []
        assert parse.max_depth == 0
