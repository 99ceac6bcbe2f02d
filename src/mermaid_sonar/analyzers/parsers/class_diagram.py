"""Class diagram parser.

Extracts classes with their members and typed relationships. Relationship
operators are ``[left head] body [right head]`` where the body is ``--``
(solid) or ``..`` (dashed) and the heads are ``<|`` / ``|>`` (inheritance,
realization), ``*`` (composition), ``o`` (aggregation), ``<`` / ``>`` or
``()`` (lollipop).
"""

import logging
import re

from mermaid_sonar.analyzers.parsers.scanner import clean_label
from mermaid_sonar.analyzers.parsers.statements import body_statements
from mermaid_sonar.models.diagram import LayoutDirection
from mermaid_sonar.models.dialects import (
    ClassDiagramParse,
    ClassRelationship,
    RelationshipType,
)

logger = logging.getLogger(__name__)

HEADER_KEYWORDS = ("classdiagram", "classdiagram-v2")

SKIPPED_KEYWORDS = frozenset(
    {"note", "style", "classDef", "cssClass", "click", "callback", "link", "accTitle", "accDescr", "title"}
)

_NAME = re.compile(r"\s*(`[^`]+`|\w+(?:~[^~]*~)?)")
_MULTIPLICITY = re.compile(r'\s*"([^"]*)"')
_OPERATOR = re.compile(r"\s*((?:<\||\*|o(?=[-.])|<|\(\))?(?:--|\.\.)(?:\|>|\*|o(?!\w)|>|\(\))?)")
_CLASS_DECLARATION = re.compile(
    r'^class\s+(`[^`]+`|\w+)(?:~[^~]*~)?\s*(?:\["([^"]*)"\])?\s*(?::::\w+)?\s*(\{.*)?$'
)
_ANNOTATION = re.compile(r"^<<\s*([^>]+?)\s*>>\s*(\w+)?$")
_MEMBER = re.compile(r"^(`[^`]+`|\w+)(?:~[^~]*~)?\s*:\s*(.+)$")


def _class_name(token: str) -> str:
    """Strip generic parameters and backticks from a class token."""
    return token.split("~", 1)[0].strip("`")


class ClassDiagramParser:
    """Parses ``classDiagram`` source into a ClassDiagramParse."""

    def parse(self, content: str) -> ClassDiagramParse:
        result = ClassDiagramParse()
        direction_seen = False
        current_class: str | None = None
        namespace_depth = 0

        for statement in body_statements(content, HEADER_KEYWORDS, split_semicolons=False):
            if current_class is not None:
                if statement.startswith("}"):
                    current_class = None
                    continue
                self._add_block_member(result, current_class, statement)
                continue

            first_word = statement.split(maxsplit=1)[0]

            if first_word == "direction":
                parts = statement.split()
                direction = LayoutDirection.parse(parts[1]) if len(parts) > 1 else None
                if direction is not None and not direction_seen:
                    result.direction = direction
                    direction_seen = True
                continue

            if first_word == "namespace":
                namespace_depth += 1
                continue

            if statement == "}":
                namespace_depth = max(0, namespace_depth - 1)
                continue

            if first_word in SKIPPED_KEYWORDS:
                continue

            if first_word == "class":
                current_class = self._parse_class_declaration(statement, result)
                continue

            annotation = _ANNOTATION.match(statement)
            if annotation:
                if annotation.group(2):
                    result.ensure_class(annotation.group(2)).annotations.append(annotation.group(1))
                continue

            if self._parse_relationships(statement, result):
                continue

            member = _MEMBER.match(statement)
            if member:
                result.ensure_class(_class_name(member.group(1))).add_member(member.group(2))

        logger.debug(
            "Parsed class diagram: %d classes, %d relationships",
            len(result.classes),
            len(result.relationships),
        )
        return result

    # =========================================================================
    # Classes
    # =========================================================================

    def _parse_class_declaration(self, statement: str, result: ClassDiagramParse) -> str | None:
        """Register a ``class`` statement; returns the class name if a block opens."""
        match = _CLASS_DECLARATION.match(statement)
        if match is None:
            return None

        node = result.ensure_class(_class_name(match.group(1)))
        if match.group(2):
            node.label = clean_label(match.group(2))

        body = match.group(3)
        if not body:
            return None

        inner = body[1:]
        if "}" in inner:
            # Single-line body: class Name { +field }
            for member in inner.split("}", 1)[0].split(";"):
                self._add_block_member(result, node.name, member)
            return None

        if inner.strip():
            self._add_block_member(result, node.name, inner)
        return node.name

    def _add_block_member(self, result: ClassDiagramParse, class_name: str, line: str) -> None:
        line = line.strip()
        if not line:
            return
        node = result.ensure_class(class_name)
        if line.startswith("<<") and line.endswith(">>"):
            node.annotations.append(line[2:-2].strip())
            return
        node.add_member(line)

    # =========================================================================
    # Relationships
    # =========================================================================

    def _parse_relationships(self, statement: str, result: ClassDiagramParse) -> bool:
        """Parse a relationship statement, including chains; False if not one."""
        name_match = _NAME.match(statement)
        if name_match is None:
            return False

        left = _class_name(name_match.group(1))
        pos = name_match.end()
        parsed: list[ClassRelationship] = []

        while True:
            left_multiplicity, pos = self._read_multiplicity(statement, pos)
            operator = _OPERATOR.match(statement, pos)
            if operator is None:
                break
            right_multiplicity, after_operator = self._read_multiplicity(statement, operator.end())
            name_match = _NAME.match(statement, after_operator)
            if name_match is None:
                break
            right = _class_name(name_match.group(1))
            pos = name_match.end()
            parsed.append(
                self._relationship(
                    left, right, operator.group(1), left_multiplicity, right_multiplicity
                )
            )
            left = right

        if not parsed:
            return False

        remainder = statement[pos:].strip()
        if remainder.startswith(":"):
            parsed[-1].label = clean_label(remainder[1:])

        for relationship in parsed:
            result.ensure_class(relationship.source)
            result.ensure_class(relationship.target)
            result.relationships.append(relationship)
        return True

    def _read_multiplicity(self, statement: str, pos: int) -> tuple[str | None, int]:
        match = _MULTIPLICITY.match(statement, pos)
        if match is None:
            return None, pos
        return match.group(1), match.end()

    def _relationship(
        self,
        left: str,
        right: str,
        operator: str,
        left_multiplicity: str | None,
        right_multiplicity: str | None,
    ) -> ClassRelationship:
        """Build a relationship with logical (not syntactic) direction."""
        body_index = operator.find("--")
        if body_index == -1:
            body_index = operator.find("..")
        left_head = operator[:body_index]
        right_head = operator[body_index + 2 :]
        dashed = operator[body_index] == "."

        if left_head == "<|" or right_head == "|>":
            kind = RelationshipType.INHERITANCE
            reverse = left_head == "<|"
        elif "*" in (left_head, right_head):
            kind = RelationshipType.COMPOSITION
            reverse = right_head == "*"
        elif "o" in (left_head, right_head):
            kind = RelationshipType.AGGREGATION
            reverse = right_head == "o"
        else:
            kind = RelationshipType.DEPENDENCY if dashed else RelationshipType.ASSOCIATION
            reverse = left_head == "<" and right_head != ">"

        if reverse:
            return ClassRelationship(
                source=right,
                target=left,
                type=kind,
                multiplicity=(right_multiplicity, left_multiplicity),
            )
        return ClassRelationship(
            source=left,
            target=right,
            type=kind,
            multiplicity=(left_multiplicity, right_multiplicity),
        )


def parse_class_diagram(content: str) -> ClassDiagramParse:
    """Parse class diagram source.

    Args:
        content: Raw diagram source

    Returns:
        ClassDiagramParse
    """
    return ClassDiagramParser().parse(content)
