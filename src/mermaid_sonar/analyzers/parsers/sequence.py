"""Sequence diagram parser.

Tracks participants (declared or implied by messages), messages with their
kind, notes, and the nesting of ``loop``/``alt``/``opt``/``par``/
``critical``/``break`` blocks. ``rect`` and ``box`` blocks are balanced
against ``end`` but are purely visual and do not add nesting depth.
"""

import logging
import re

from mermaid_sonar.analyzers.parsers.scanner import clean_label
from mermaid_sonar.analyzers.parsers.statements import body_statements
from mermaid_sonar.models.dialects import Message, MessageType, Participant, SequenceParse

logger = logging.getLogger(__name__)

HEADER_KEYWORDS = ("sequencediagram",)

NESTING_BLOCKS = frozenset({"loop", "alt", "opt", "par", "critical", "break"})
VISUAL_BLOCKS = frozenset({"rect", "box"})
BLOCK_CONTINUATIONS = frozenset({"else", "and", "option"})

SKIPPED_KEYWORDS = frozenset(
    {"activate", "deactivate", "autonumber", "title", "link", "links", "destroy", "accTitle", "accDescr"}
)

_PARTICIPANT = re.compile(
    r"^(?:create\s+)?(participant|actor)\s+(.+?)(?:\s+as\s+(.+))?$", re.IGNORECASE
)
_MESSAGE = re.compile(
    r"^(?P<source>[^<>:;+]+?)\s*"
    r"(?P<arrow><<--?>>|--?>>|--?>|--?x|--?\))\s*"
    r"[+-]?\s*"
    r"(?P<target>[^:;]+?)\s*"
    r"(?::\s*(?P<text>.*))?$"
)


def _message_type(arrow: str) -> MessageType:
    if arrow.endswith(")"):
        return MessageType.ASYNC
    if arrow.startswith("--"):
        return MessageType.RETURN
    return MessageType.SYNC


class SequenceParser:
    """Parses ``sequenceDiagram`` source into a SequenceParse."""

    def parse(self, content: str) -> SequenceParse:
        result = SequenceParse()
        # One entry per open block: True if it adds nesting depth
        blocks: list[bool] = []

        for statement in body_statements(content, HEADER_KEYWORDS):
            first_word = statement.split(maxsplit=1)[0]
            keyword = first_word.lower()

            if keyword in NESTING_BLOCKS:
                blocks.append(True)
                result.block_counts[keyword] = result.block_counts.get(keyword, 0) + 1
                depth = sum(1 for counted in blocks if counted)
                result.max_nesting_depth = max(result.max_nesting_depth, depth)
                continue

            if keyword in VISUAL_BLOCKS:
                blocks.append(False)
                continue

            if keyword == "end":
                if blocks:
                    blocks.pop()
                else:
                    logger.debug("Unbalanced 'end' in sequence diagram")
                continue

            if keyword in BLOCK_CONTINUATIONS:
                continue

            if keyword == "note":
                result.note_count += 1
                continue

            if first_word in SKIPPED_KEYWORDS:
                continue

            participant = _PARTICIPANT.match(statement)
            if participant:
                self._declare(result, participant)
                continue

            message = _MESSAGE.match(statement)
            if message:
                self._add_message(result, message)

        logger.debug(
            "Parsed sequence diagram: %d participants, %d messages",
            len(result.participants),
            len(result.messages),
        )
        return result

    def _declare(self, result: SequenceParse, match: re.Match[str]) -> None:
        kind = match.group(1).lower()
        name = match.group(2).strip()
        # participant API@{ "type": "boundary" }
        name = name.split("@{", 1)[0].strip()
        alias = clean_label(match.group(3))

        existing = result.participants.get(name)
        if existing is not None:
            existing.explicit = True
            existing.kind = kind
            existing.alias = alias or existing.alias
            return
        result.participants[name] = Participant(name=name, alias=alias, explicit=True, kind=kind)

    def _add_message(self, result: SequenceParse, match: re.Match[str]) -> None:
        source = match.group("source").strip()
        target = match.group("target").strip()
        for name in (source, target):
            if name not in result.participants:
                result.participants[name] = Participant(name=name)

        result.messages.append(
            Message(
                source=source,
                target=target,
                type=_message_type(match.group("arrow")),
                text=clean_label(match.group("text")),
            )
        )


def parse_sequence(content: str) -> SequenceParse:
    """Parse sequence diagram source.

    Args:
        content: Raw diagram source

    Returns:
        SequenceParse
    """
    return SequenceParser().parse(content)
