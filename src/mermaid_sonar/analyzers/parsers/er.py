"""Entity-relationship diagram parser."""

import logging
import re

from mermaid_sonar.analyzers.parsers.scanner import clean_label
from mermaid_sonar.analyzers.parsers.statements import body_statements
from mermaid_sonar.models.dialects import (
    Cardinality,
    ErAttribute,
    ErDiagramParse,
    ErRelationship,
    KeyType,
)

logger = logging.getLogger(__name__)

HEADER_KEYWORDS = ("erdiagram",)

SKIPPED_KEYWORDS = frozenset({"direction", "style", "classDef", "class", "accTitle", "accDescr", "title"})

LEFT_CARDINALITY = {
    "|o": Cardinality.ZERO_OR_ONE,
    "||": Cardinality.EXACTLY_ONE,
    "}o": Cardinality.ZERO_OR_MORE,
    "}|": Cardinality.ONE_OR_MORE,
}

RIGHT_CARDINALITY = {
    "o|": Cardinality.ZERO_OR_ONE,
    "||": Cardinality.EXACTLY_ONE,
    "o{": Cardinality.ZERO_OR_MORE,
    "|{": Cardinality.ONE_OR_MORE,
}

_ENTITY_NAME = r'(?:[\w-]+|"[^"]+")'
_RELATIONSHIP = re.compile(
    rf"^(?P<source>{_ENTITY_NAME})\s*"
    r"(?P<left>\|o|\|\||\}o|\}\|)(?P<line>--|\.\.)(?P<right>o\||\|\||o\{|\|\{)\s*"
    rf"(?P<target>{_ENTITY_NAME})\s*"
    r"(?::\s*(?P<label>.*))?$"
)
_ENTITY_BLOCK = re.compile(rf'^(?P<name>{_ENTITY_NAME})\s*(?:\["(?P<alias>[^"]*)"\])?\s*\{{(?P<inline>.*)$')
_ENTITY_ALONE = re.compile(rf'^(?P<name>{_ENTITY_NAME})\s*(?:\["(?P<alias>[^"]*)"\])?$')
_ATTRIBUTE = re.compile(
    r"^(?P<type>[\w\[\]()<>,.-]+)\s+(?P<name>[\w\[\]()*-]+)"
    r"(?:\s+(?P<keys>(?:PK|FK|UK)(?:\s*,\s*(?:PK|FK|UK))*))?"
    r'(?:\s+"(?P<comment>[^"]*)")?$'
)


def _entity_name(token: str) -> str:
    return token.strip('"')


class ErDiagramParser:
    """Parses ``erDiagram`` source into an ErDiagramParse."""

    def parse(self, content: str) -> ErDiagramParse:
        result = ErDiagramParse()
        current_entity: str | None = None

        for statement in body_statements(content, HEADER_KEYWORDS):
            if current_entity is not None:
                if statement.startswith("}"):
                    current_entity = None
                    continue
                self._add_attribute(result, current_entity, statement)
                continue

            first_word = statement.split(maxsplit=1)[0]
            if first_word in SKIPPED_KEYWORDS:
                continue

            relationship = _RELATIONSHIP.match(statement)
            if relationship:
                self._add_relationship(result, relationship)
                continue

            block = _ENTITY_BLOCK.match(statement)
            if block:
                entity = result.ensure_entity(_entity_name(block.group("name")))
                if block.group("alias"):
                    entity.alias = block.group("alias")
                inline = block.group("inline").strip()
                if "}" in inline:
                    body = inline.split("}", 1)[0]
                    if body.strip():
                        self._add_attribute(result, entity.name, body)
                else:
                    if inline:
                        self._add_attribute(result, entity.name, inline)
                    current_entity = entity.name
                continue

            alone = _ENTITY_ALONE.match(statement)
            if alone:
                entity = result.ensure_entity(_entity_name(alone.group("name")))
                if alone.group("alias"):
                    entity.alias = alone.group("alias")

        logger.debug(
            "Parsed ER diagram: %d entities, %d relationships",
            len(result.entities),
            len(result.relationships),
        )
        return result

    def _add_relationship(self, result: ErDiagramParse, match: re.Match[str]) -> None:
        source = _entity_name(match.group("source"))
        target = _entity_name(match.group("target"))
        result.ensure_entity(source)
        result.ensure_entity(target)
        result.relationships.append(
            ErRelationship(
                source=source,
                target=target,
                source_cardinality=LEFT_CARDINALITY[match.group("left")],
                target_cardinality=RIGHT_CARDINALITY[match.group("right")],
                identifying=match.group("line") == "--",
                label=clean_label(match.group("label")),
            )
        )

    def _add_attribute(self, result: ErDiagramParse, entity_name: str, line: str) -> None:
        match = _ATTRIBUTE.match(line.strip())
        if match is None:
            logger.debug("Unrecognized attribute in %s: %s", entity_name, line[:40])
            return

        keys: tuple[KeyType, ...] = ()
        if match.group("keys"):
            keys = tuple(KeyType(key.strip()) for key in match.group("keys").split(","))

        result.ensure_entity(entity_name).attributes.append(
            ErAttribute(
                type=match.group("type"),
                name=match.group("name"),
                keys=keys,
                comment=match.group("comment"),
            )
        )


def parse_er_diagram(content: str) -> ErDiagramParse:
    """Parse ER diagram source.

    Args:
        content: Raw diagram source

    Returns:
        ErDiagramParse
    """
    return ErDiagramParser().parse(content)
