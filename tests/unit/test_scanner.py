"""Unit tests for the statement tokenizer and line scanner."""

from mermaid_sonar.analyzers.parsers.scanner import (
    LineScanner,
    clean_label,
    label_length,
    label_lines,
    logical_lines,
)
from mermaid_sonar.analyzers.parsers.statements import body_statements, strip_front_matter


class TestLogicalLines:
    """Tests for splitting source into statements."""

    def test_splits_lines_and_drops_blanks(self) -> None:
        """Test that each non-empty line is one stripped statement."""
        assert logical_lines("  A --> B\n\n  B --> C  \n") == ["A --> B", "B --> C"]

    def test_drops_comment_lines(self) -> None:
        """Test that %% comment lines are removed."""
        assert logical_lines("%% a comment\nA --> B\n  %% indented") == ["A --> B"]

    def test_semicolon_separates_statements(self) -> None:
        """Test that top-level semicolons split statements."""
        assert logical_lines("A --> B; B --> C;") == ["A --> B", "B --> C"]

    def test_semicolon_inside_brackets_or_quotes_is_kept(self) -> None:
        """Test that semicolons inside labels do not split."""
        assert logical_lines("A[a;b] --> B") == ["A[a;b] --> B"]
        assert logical_lines('A["x;y"] --> B') == ['A["x;y"] --> B']

    def test_semicolon_splitting_can_be_disabled(self) -> None:
        """Test split_semicolons=False keeps the line whole."""
        assert logical_lines("a; b", split_semicolons=False) == ["a; b"]

    def test_quoted_label_continues_across_lines(self) -> None:
        """Test that a newline inside quotes continues the statement."""
        statements = logical_lines('A["line one\nline two"] --> B\nB --> C')

        assert statements == ['A["line one\nline two"] --> B', "B --> C"]

    def test_unterminated_quote_falls_back_to_lines(self) -> None:
        """Test that an unclosed quote does not swallow the rest of the diagram."""
        statements = logical_lines('A --> B\nC["oops --> D\nE --> F')

        assert statements == ["A --> B", 'C["oops --> D', "E --> F"]


class TestLineScanner:
    """Tests for the statement cursor."""

    def test_read_identifier(self) -> None:
        """Test reading identifier characters."""
        scanner = LineScanner("node_1-->B")

        assert scanner.read_identifier() == "node_1"
        assert scanner.rest() == "-->B"

    def test_read_identifier_with_extra_chars(self) -> None:
        """Test that extra characters extend identifiers."""
        assert LineScanner("my-node x").read_identifier(extra="-") == "my-node"

    def test_read_identifier_returns_none_without_moving(self) -> None:
        """Test that a failed read leaves the position unchanged."""
        scanner = LineScanner("--> B")

        assert scanner.read_identifier() is None
        assert scanner.pos == 0

    def test_read_quoted(self) -> None:
        """Test reading a double-quoted string."""
        scanner = LineScanner('"hello world" rest')

        assert scanner.read_quoted() == "hello world"
        assert scanner.rest() == " rest"

    def test_read_until_skips_quoted_text(self) -> None:
        """Test that terminators inside quotes are ignored."""
        scanner = LineScanner('say "a|b" | rest')

        assert scanner.read_until("|") == 'say "a|b" '
        assert scanner.rest() == " rest"

    def test_read_until_any_picks_earliest(self) -> None:
        """Test that the earliest terminator wins."""
        scanner = LineScanner("label\\] tail /]")

        assert scanner.read_until_any(("/]", "\\]")) == ("label", "\\]")

    def test_consume_keyword_requires_word_boundary(self) -> None:
        """Test that keywords only match whole words."""
        assert LineScanner("endpoint").consume_keyword("end") is False
        assert LineScanner("END here").consume_keyword("end") is True

    def test_read_run(self) -> None:
        """Test reading a run of characters."""
        scanner = LineScanner("-.-> B")

        assert scanner.read_run("-=.~") == "-.-"
        assert scanner.peek() == ">"


class TestLabels:
    """Tests for label normalization and measurement."""

    def test_clean_label_strips_quotes_and_backticks(self) -> None:
        """Test label cleanup."""
        assert clean_label('  "quoted"  ') == "quoted"
        assert clean_label("`**markdown**`") == "**markdown**"

    def test_clean_label_empty_is_none(self) -> None:
        """Test that blank labels become None."""
        assert clean_label("   ") is None
        assert clean_label(None) is None

    def test_label_lines_splits_on_br(self) -> None:
        """Test that <br> variants split label lines."""
        assert label_lines("one<br>two<br/>three") == ["one", "two", "three"]

    def test_label_length_is_longest_line(self) -> None:
        """Test that multi-line labels are as wide as their widest line."""
        assert label_length("ab<br>abcde\nabc") == 5
        assert label_length("") == 0


class TestStatements:
    """Tests for header and front-matter handling."""

    def test_strip_front_matter_keeps_line_positions(self) -> None:
        """Test that front matter is blanked, not removed."""
        content = "---\ntitle: Demo\n---\ngraph TD\nA --> B"
        stripped = strip_front_matter(content)

        assert "title" not in stripped
        assert stripped.splitlines()[3] == "graph TD"

    def test_strip_front_matter_without_block(self) -> None:
        """Test that content without front matter is unchanged."""
        assert strip_front_matter("graph TD\nA --> B") == "graph TD\nA --> B"

    def test_body_statements_drops_header(self) -> None:
        """Test that the header statement is not returned."""
        statements = body_statements("flowchart LR\n  A --> B", ("graph", "flowchart"))

        assert statements == ["A --> B"]

    def test_body_statements_header_case_insensitive(self) -> None:
        """Test header keyword matching ignores case."""
        statements = body_statements("sequenceDiagram\nA->>B: hi", ("sequencediagram",))

        assert statements == ["A->>B: hi"]
