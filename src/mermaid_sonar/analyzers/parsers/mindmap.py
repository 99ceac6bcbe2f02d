"""Mindmap parser.

Mindmaps are indentation trees: every content line is a node, and its parent
is the nearest preceding node with smaller indentation.
"""

import logging
import re

from mermaid_sonar.analyzers.parsers.scanner import clean_label
from mermaid_sonar.analyzers.parsers.statements import strip_front_matter
from mermaid_sonar.models.dialects import MindmapNode, MindmapParse

logger = logging.getLogger(__name__)

_SHAPED_NODE = re.compile(r"^(?P<id>[^\[\](){}]*?)\s*(?P<open>\[|\(\(|\(|\)\)|\)|\{\{)(?P<label>.*?)(?:\]|\)\)|\)|\(\(|\(|\}\})$")


class MindmapParser:
    """Parses ``mindmap`` source into a MindmapParse."""

    def parse(self, content: str) -> MindmapParse:
        result = MindmapParse()
        stack: list[tuple[int, MindmapNode]] = []
        seen_ids: set[str] = set()
        header_seen = False

        for raw_line in strip_front_matter(content).splitlines():
            stripped = raw_line.strip()
            if not stripped or stripped.startswith("%%"):
                continue
            if not header_seen:
                header_seen = True
                if stripped.lower() == "mindmap":
                    continue
            if stripped.startswith("::icon(") or stripped.startswith(":::"):
                continue

            indent = len(raw_line.expandtabs(4)) - len(raw_line.expandtabs(4).lstrip())
            while stack and stack[-1][0] >= indent:
                stack.pop()

            node_id, label = self._read_node(stripped)
            node_id = self._unique_id(node_id, seen_ids)
            parent = stack[-1][1] if stack else None
            node = MindmapNode(
                id=node_id,
                label=label,
                depth=len(stack),
                parent=parent.id if parent else None,
            )
            result.nodes.append(node)
            stack.append((indent, node))

        logger.debug("Parsed mindmap: %d nodes, depth %d", len(result.nodes), result.max_depth)
        return result

    def _read_node(self, text: str) -> tuple[str, str]:
        match = _SHAPED_NODE.match(text)
        if match is None:
            label = clean_label(text) or text
            return label, label
        label = clean_label(match.group("label")) or ""
        node_id = match.group("id").strip() or label
        return node_id, label

    def _unique_id(self, node_id: str, seen_ids: set[str]) -> str:
        candidate = node_id
        suffix = 2
        while candidate in seen_ids:
            candidate = f"{node_id}~{suffix}"
            suffix += 1
        seen_ids.add(candidate)
        return candidate


def parse_mindmap(content: str) -> MindmapParse:
    """Parse mindmap source.

    Args:
        content: Raw diagram source

    Returns:
        MindmapParse
    """
    return MindmapParser().parse(content)
