"""Flowchart / graph dialect parser.

Grammar handled per statement (after ``logical_lines`` splitting):

    statement   := node_group (link node_group)*
    node_group  := node_ref ("&" node_ref)*
    node_ref    := identifier [shape] [":::" class]
    link        := [head] body [tail] ["|" text "|"]
                 | body text closing_body      (inline text form)

Subgraph blocks and directive lines (``style``, ``classDef``, ``class``,
``click``, ``linkStyle``, ``direction``) are recognized and skipped. Any
statement that does not start with a node reference is ignored.
"""

import logging
import re
from dataclasses import dataclass

from mermaid_sonar.analyzers.detector import detect_header_direction
from mermaid_sonar.analyzers.parsers.scanner import LineScanner, clean_label
from mermaid_sonar.analyzers.parsers.statements import body_statements
from mermaid_sonar.models.diagram import LayoutDirection
from mermaid_sonar.models.dialects import (
    FlowchartEdge,
    FlowchartNode,
    FlowchartParse,
    LinkStyle,
    NodeShape,
)

logger = logging.getLogger(__name__)

# Lines that reference nodes without declaring them
DIRECTIVE_KEYWORDS = frozenset(
    {"style", "classDef", "class", "click", "linkStyle", "direction", "accTitle", "accDescr", "title"}
)

# (opener, closers, shape), longest opener first
SHAPE_DELIMITERS: list[tuple[str, tuple[str, ...], NodeShape]] = [
    ("(((", (")))",), NodeShape.DOUBLE_CIRCLE),
    ("((", ("))",), NodeShape.CIRCLE),
    ("([", ("])",), NodeShape.STADIUM),
    ("[[", ("]]",), NodeShape.SUBROUTINE),
    ("[(", (")]",), NodeShape.CYLINDER),
    ("[/", ("/]", "\\]"), NodeShape.PARALLELOGRAM),
    ("[\\", ("\\]", "/]"), NodeShape.PARALLELOGRAM),
    ("{{", ("}}",), NodeShape.HEXAGON),
    ("(", (")",), NodeShape.ROUND),
    ("[", ("]",), NodeShape.RECTANGLE),
    ("{", ("}",), NodeShape.DIAMOND),
    (">", ("]",), NodeShape.ASYMMETRIC),
]

# ``A@{ shape: diamond }`` shape names that map onto the classic shapes
NAMED_SHAPES = {
    "diamond": NodeShape.DIAMOND,
    "decision": NodeShape.DIAMOND,
    "diam": NodeShape.DIAMOND,
    "question": NodeShape.DIAMOND,
    "rect": NodeShape.RECTANGLE,
    "rounded": NodeShape.ROUND,
    "stadium": NodeShape.STADIUM,
    "circle": NodeShape.CIRCLE,
    "circ": NodeShape.CIRCLE,
    "dbl-circ": NodeShape.DOUBLE_CIRCLE,
    "cyl": NodeShape.CYLINDER,
    "database": NodeShape.CYLINDER,
    "hex": NodeShape.HEXAGON,
    "hexagon": NodeShape.HEXAGON,
    "subproc": NodeShape.SUBROUTINE,
}

LINK_CHARS = "-=.~"

# Closing run of an inline-text link, keyed by its opening run
TEXT_LINK_CLOSERS = {
    "--": re.compile(r"\s*(-{2,}>|-{3,}|--[ox](?=\s|$))"),
    "==": re.compile(r"\s*(={2,}>|={3,}|==[ox](?=\s|$))"),
    "-.": re.compile(r"\s*(\.-+>|\.-+)"),
}


@dataclass
class _Link:
    label: str | None
    style: LinkStyle
    has_arrowhead: bool


def _link_style(body: str) -> LinkStyle:
    if "~" in body:
        return LinkStyle.INVISIBLE
    if "=" in body:
        return LinkStyle.THICK
    if "." in body:
        return LinkStyle.DOTTED
    return LinkStyle.SOLID


class FlowchartParser:
    """Parses ``graph`` / ``flowchart`` diagrams into a FlowchartParse."""

    def parse(self, content: str) -> FlowchartParse:
        """Parse flowchart source.

        Args:
            content: Raw diagram source

        Returns:
            FlowchartParse with nodes, edges and subgraph nesting
        """
        result = FlowchartParse(
            direction=detect_header_direction(content) or LayoutDirection.TB,
        )
        depth = 0

        for statement in body_statements(content, ("graph", "flowchart")):
            first_word = statement.split(maxsplit=1)[0]

            if first_word == "subgraph":
                depth += 1
                result.max_subgraph_depth = max(result.max_subgraph_depth, depth)
                result.subgraphs.append(self._subgraph_id(statement))
                continue

            if statement == "end":
                depth = max(0, depth - 1)
                continue

            if first_word in DIRECTIVE_KEYWORDS or first_word.rstrip(":") in DIRECTIVE_KEYWORDS:
                continue

            self._parse_statement(statement, result)

        logger.debug(
            "Parsed flowchart: %d nodes, %d edges, %d subgraphs",
            len(result.nodes),
            len(result.edges),
            len(result.subgraphs),
        )
        return result

    # =========================================================================
    # Statements
    # =========================================================================

    def _subgraph_id(self, statement: str) -> str:
        scanner = LineScanner(statement)
        scanner.consume("subgraph")
        scanner.skip_ws()
        quoted = scanner.read_quoted()
        if quoted is not None:
            return quoted
        identifier = scanner.read_identifier(extra="-.")
        return identifier or f"subgraph_{scanner.pos}"

    def _parse_statement(self, statement: str, result: FlowchartParse) -> None:
        scanner = LineScanner(statement)
        left = self._read_node_group(scanner, result)
        if not left:
            return

        while True:
            scanner.skip_ws()
            link = self._read_link(scanner)
            if link is None:
                break
            scanner.skip_ws()
            right = self._read_node_group(scanner, result)
            if not right:
                break
            for source in left:
                for target in right:
                    result.edges.append(
                        FlowchartEdge(
                            source=source,
                            target=target,
                            label=link.label,
                            style=link.style,
                            has_arrowhead=link.has_arrowhead,
                        )
                    )
            left = right

    # =========================================================================
    # Nodes
    # =========================================================================

    def _read_node_group(self, scanner: LineScanner, result: FlowchartParse) -> list[str]:
        node_ids: list[str] = []
        while True:
            scanner.skip_ws()
            node_id = self._read_node_ref(scanner, result)
            if node_id is None:
                break
            node_ids.append(node_id)
            saved = scanner.pos
            scanner.skip_ws()
            if not scanner.consume("&"):
                scanner.pos = saved
                break
        return node_ids

    def _read_node_ref(self, scanner: LineScanner, result: FlowchartParse) -> str | None:
        node_id = scanner.read_identifier()
        if node_id is None:
            return None

        label: str | None = None
        shape: NodeShape | None = None

        if scanner.consume("@{"):
            properties = scanner.read_until("}") or ""
            shape, label = self._read_shape_properties(properties)
        else:
            for opener, closers, candidate in SHAPE_DELIMITERS:
                if not scanner.startswith(opener):
                    continue
                saved = scanner.pos
                scanner.consume(opener)
                found = self._read_delimited(scanner, opener, closers)
                if found is None:
                    scanner.pos = saved
                    continue
                text, closer = found
                label = clean_label(text)
                shape = candidate
                if candidate == NodeShape.PARALLELOGRAM and closer != closers[0]:
                    shape = NodeShape.TRAPEZOID
                break

        if scanner.consume(":::"):
            scanner.read_identifier(extra="-")

        self._register(result, node_id, label, shape)
        return node_id

    def _read_delimited(
        self,
        scanner: LineScanner,
        opener: str,
        closers: tuple[str, ...],
    ) -> tuple[str, str] | None:
        """Read a shape label up to its closer, honoring quotes and nesting.

        Returns:
            (label text, closer matched), or None if the shape is unterminated
        """
        scanner.skip_ws()
        if scanner.peek() == '"':
            saved = scanner.pos
            quoted = scanner.read_quoted()
            if quoted is not None:
                scanner.skip_ws()
                for closer in closers:
                    if scanner.consume(closer):
                        return quoted, closer
            scanner.pos = saved

        if len(closers) == 1 and len(closers[0]) == 1 and len(opener) == 1 and opener != ">":
            text = self._read_balanced(scanner, opener, closers[0])
            return (text, closers[0]) if text is not None else None

        return scanner.read_until_any(closers)

    def _read_balanced(self, scanner: LineScanner, opener: str, closer: str) -> str | None:
        start = scanner.pos
        depth = 0
        index = start
        text = scanner.text
        while index < len(text):
            char = text[index]
            if char == '"':
                closing = text.find('"', index + 1)
                if closing == -1:
                    return None
                index = closing + 1
                continue
            if char == opener:
                depth += 1
            elif char == closer:
                if depth == 0:
                    scanner.pos = index + 1
                    return text[start:index]
                depth -= 1
            index += 1
        return None

    def _read_shape_properties(self, properties: str) -> tuple[NodeShape | None, str | None]:
        shape: NodeShape | None = None
        label: str | None = None
        for part in properties.split(","):
            key, _, value = part.partition(":")
            key = key.strip()
            value = value.strip()
            if key == "shape":
                shape = NAMED_SHAPES.get(value, NodeShape.RECTANGLE)
            elif key == "label":
                label = clean_label(value)
        return shape, label

    def _register(
        self,
        result: FlowchartParse,
        node_id: str,
        label: str | None,
        shape: NodeShape | None,
    ) -> None:
        node = result.nodes.get(node_id)
        if node is None:
            result.nodes[node_id] = FlowchartNode(
                id=node_id,
                label=label,
                shape=shape or NodeShape.BARE,
            )
            return
        if label is not None:
            node.label = label
        if shape is not None:
            node.shape = shape

    # =========================================================================
    # Links
    # =========================================================================

    def _read_link(self, scanner: LineScanner) -> _Link | None:
        start = scanner.pos

        # Edge ids: ``A e1@--> B``
        edge_id = scanner.read_identifier()
        if edge_id is None or not scanner.consume("@"):
            scanner.pos = start

        bidirectional = False
        if scanner.peek() == "<":
            scanner.consume("<")
            bidirectional = True
        elif scanner.peek() in ("o", "x") and scanner.peek(2)[1:] in ("-", "="):
            scanner.pos += 1
            bidirectional = True

        body = scanner.read_run(LINK_CHARS)
        if len(body) < 2 or body[0] not in "-=~":
            scanner.pos = start
            return None

        style = _link_style(body)
        label: str | None = None

        if body in TEXT_LINK_CLOSERS and scanner.peek() not in (">", "o", "x", "|"):
            match = TEXT_LINK_CLOSERS[body].search(scanner.rest())
            if match is None:
                scanner.pos = start
                return None
            label = clean_label(scanner.rest()[: match.start()])
            closer = match.group(1)
            scanner.pos += match.end()
            has_arrowhead = closer[-1] in ">ox"
        else:
            has_arrowhead = False
            if scanner.consume(">"):
                has_arrowhead = True
            elif scanner.peek() in ("o", "x") and scanner.peek(2)[1:] in ("", " ", "\t", "|"):
                scanner.pos += 1
                has_arrowhead = True
            elif len(body) < 3 and style != LinkStyle.INVISIBLE:
                scanner.pos = start
                return None

        saved = scanner.pos
        scanner.skip_ws()
        if scanner.consume("|"):
            text = scanner.read_until("|")
            if text is None:
                scanner.pos = saved
            else:
                label = clean_label(text)
        else:
            scanner.pos = saved

        return _Link(
            label=label,
            style=style,
            has_arrowhead=has_arrowhead or bidirectional,
        )


def parse_flowchart(content: str) -> FlowchartParse:
    """Parse flowchart source.

    Convenience function for flowchart parsing.

    Args:
        content: Raw diagram source

    Returns:
        FlowchartParse
    """
    return FlowchartParser().parse(content)
