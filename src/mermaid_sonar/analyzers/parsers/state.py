"""State diagram parser.

Handles state declarations, descriptions, stereotypes (``<<choice>>``,
``<<fork>>``, ``<<join>>``), composite states and transitions. The ``[*]``
pseudo-state is never registered as a state: transitions from it are counted
as start transitions and transitions to it as end transitions.
"""

import logging
import re

from mermaid_sonar.analyzers.parsers.scanner import clean_label
from mermaid_sonar.analyzers.parsers.statements import body_statements
from mermaid_sonar.models.diagram import LayoutDirection
from mermaid_sonar.models.dialects import State, StateDiagramParse, StateTransition

logger = logging.getLogger(__name__)

HEADER_KEYWORDS = ("statediagram", "statediagram-v2")

PSEUDO_STATE = "[*]"

SKIPPED_KEYWORDS = frozenset({"classDef", "class", "style", "accTitle", "accDescr", "title"})

_STATE_ID = r"(?:\[\*\]|[\w.]+)"
_TRANSITION = re.compile(
    rf"^(?P<source>{_STATE_ID})(?::::\w+)?\s*-->\s*(?P<target>{_STATE_ID})(?::::\w+)?\s*"
    r"(?::\s*(?P<label>.*))?$"
)
_ALIASED_STATE = re.compile(r'^state\s+"([^"]*)"\s+as\s+([\w.]+)\s*(\{)?$')
_STATE_DECLARATION = re.compile(r"^state\s+([\w.]+)\s*(?:<<\s*(\w+)\s*>>)?\s*(\{)?$")
_DESCRIPTION = re.compile(r"^([\w.]+)\s*:\s*(.+)$")
_NOTE = re.compile(r"^note\s+", re.IGNORECASE)


class StateDiagramParser:
    """Parses ``stateDiagram`` / ``stateDiagram-v2`` source."""

    def parse(self, content: str) -> StateDiagramParse:
        result = StateDiagramParse()
        direction_seen = False
        composites: list[str] = []
        in_note = False

        for statement in body_statements(content, HEADER_KEYWORDS):
            if in_note:
                if statement.lower() == "end note":
                    in_note = False
                continue

            if _NOTE.match(statement):
                # Multi-line notes have no ":" on the opening line
                in_note = ":" not in statement
                continue

            first_word = statement.split(maxsplit=1)[0]

            if first_word == "direction":
                parts = statement.split()
                direction = LayoutDirection.parse(parts[1]) if len(parts) > 1 else None
                if direction is not None and not direction_seen:
                    result.direction = direction
                    direction_seen = True
                continue

            if statement == "}":
                if composites:
                    composites.pop()
                continue

            if statement == "--" or first_word in SKIPPED_KEYWORDS:
                continue

            parent = composites[-1] if composites else None

            if first_word == "state":
                opened = self._parse_state_declaration(statement, result, parent)
                if opened is not None:
                    composites.append(opened)
                    result.max_nesting_depth = max(result.max_nesting_depth, len(composites))
                continue

            transition = _TRANSITION.match(statement)
            if transition:
                self._add_transition(result, transition, parent)
                continue

            description = _DESCRIPTION.match(statement)
            if description:
                state = self._ensure_state(result, description.group(1), parent)
                state.description = clean_label(description.group(2))
                continue

            if re.fullmatch(r"[\w.]+", statement):
                self._ensure_state(result, statement, parent)

        logger.debug(
            "Parsed state diagram: %d states, %d transitions",
            len(result.states),
            len(result.transitions),
        )
        return result

    def _ensure_state(self, result: StateDiagramParse, state_id: str, parent: str | None) -> State:
        state = result.states.get(state_id)
        if state is None:
            state = State(id=state_id, parent=parent)
            result.states[state_id] = state
        return state

    def _parse_state_declaration(
        self,
        statement: str,
        result: StateDiagramParse,
        parent: str | None,
    ) -> str | None:
        """Register a ``state`` statement; returns the id if a composite body opens."""
        aliased = _ALIASED_STATE.match(statement)
        if aliased:
            state = self._ensure_state(result, aliased.group(2), parent)
            state.description = clean_label(aliased.group(1))
            opens = aliased.group(3) is not None
        else:
            declared = _STATE_DECLARATION.match(statement)
            if declared is None:
                logger.debug("Unrecognized state statement: %s", statement[:40])
                return None
            state = self._ensure_state(result, declared.group(1), parent)
            if declared.group(2):
                state.stereotype = declared.group(2).lower()
            opens = declared.group(3) is not None

        if opens:
            state.is_composite = True
            return state.id
        return None

    def _add_transition(
        self,
        result: StateDiagramParse,
        match: re.Match[str],
        parent: str | None,
    ) -> None:
        source = match.group("source")
        target = match.group("target")

        if source == PSEUDO_STATE:
            result.start_count += 1
        else:
            self._ensure_state(result, source, parent)
        if target == PSEUDO_STATE:
            result.end_count += 1
        else:
            self._ensure_state(result, target, parent)

        if PSEUDO_STATE in (source, target):
            return
        result.transitions.append(
            StateTransition(source=source, target=target, label=clean_label(match.group("label")))
        )


def parse_state_diagram(content: str) -> StateDiagramParse:
    """Parse state diagram source.

    Args:
        content: Raw diagram source

    Returns:
        StateDiagramParse
    """
    return StateDiagramParser().parse(content)
