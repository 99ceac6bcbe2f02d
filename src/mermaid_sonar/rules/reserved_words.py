"""Reserved word rule.

Flags flowchart node identifiers that collide with Mermaid keywords
(``end``, ``click``, ...) or with link syntax (``o1``, ``x2`` read as circle
and cross arrowheads). Identifiers come from the flowchart parser, so
directive lines and structural keywords are never mistaken for nodes.
"""

import re

from mermaid_sonar.analyzers.parsers.flowchart import parse_flowchart
from mermaid_sonar.config import ResolvedConfig
from mermaid_sonar.models.diagram import Diagram, DiagramType
from mermaid_sonar.models.issue import Issue, Severity
from mermaid_sonar.models.metrics import Metrics
from mermaid_sonar.rules.base import Rule

RESERVED_WORDS = frozenset({"end", "click", "call", "style", "class", "classdef", "direction"})

PROBLEMATIC_PATTERN = re.compile(r"^[ox]\d+$", re.IGNORECASE)


def is_reserved_word(node_id: str) -> bool:
    return node_id.lower() in RESERVED_WORDS


def has_problematic_pattern(node_id: str) -> bool:
    """Return True for ``o``/``x`` followed only by digits."""
    return PROBLEMATIC_PATTERN.match(node_id) is not None


class ReservedWordsRule(Rule):
    """Flags node identifiers that break or confuse the Mermaid grammar."""

    name = "reserved-words"
    default_severity = Severity.WARNING
    description = "Node identifiers that are Mermaid keywords or arrowhead-like"

    def check(self, diagram: Diagram, metrics: Metrics, config: ResolvedConfig) -> Issue | None:
        if diagram.type != DiagramType.FLOWCHART:
            return None

        node_ids = list(parse_flowchart(diagram.content).nodes)
        reserved = [node_id for node_id in node_ids if is_reserved_word(node_id)]
        problematic = [node_id for node_id in node_ids if has_problematic_pattern(node_id)]

        if not reserved and not problematic:
            return None

        sections = ["Avoid reserved words and conflicting patterns:"]
        if reserved:
            sections.append(
                "Reserved words:\n"
                + "\n".join(f"  - {word} (use {word}Node or _{word} instead)" for word in reserved)
            )
        if problematic:
            sections.append(
                "Problematic patterns:\n"
                + "\n".join(
                    f"  - {word} (conflicts with Mermaid syntax, use {word}_node instead)"
                    for word in problematic
                )
            )
        sections.append(
            "Suggestions:\n"
            "- Prefix with underscore: _end, _click\n"
            "- Use descriptive names: endNode, clickHandler\n"
            "- Avoid o/x followed by digits: use item_o1 instead of o1"
        )

        return self.make_issue(
            diagram,
            f"Found {len(reserved) + len(problematic)} reserved/problematic node ID(s)",
            self.severity(config),
            suggestion="\n\n".join(sections),
        )
