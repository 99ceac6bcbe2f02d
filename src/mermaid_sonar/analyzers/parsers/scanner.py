"""Tokenizer shared by the dialect parsers.

Parsing happens in two steps:
1. ``logical_lines`` splits raw source into statements. Comment lines are
   dropped, a newline inside an open quoted label continues the statement
   (multi-line labels), and ``;`` outside quotes and brackets separates
   statements.
2. ``LineScanner`` walks a single statement character by character, so each
   dialect parser can be written as a small recursive-descent parser over
   identifiers, quoted strings, delimited labels and operator runs.
"""

WORD_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")

_OPENERS = "[({"
_CLOSERS = "])}"


def is_word_char(char: str) -> bool:
    """Return True for identifier characters (ASCII word chars or non-ASCII letters)."""
    return char in WORD_CHARS or (not char.isascii() and char.isalnum())


def logical_lines(content: str, split_semicolons: bool = True) -> list[str]:
    """Split diagram source into stripped, non-empty statements.

    Args:
        content: Raw diagram source
        split_semicolons: Treat top-level ``;`` as a statement separator

    Returns:
        Statements in source order, comments removed
    """
    statements: list[str] = []
    pending: list[str] = []
    buffer: list[str] = []
    in_quote = False

    def flush() -> None:
        text = "".join(buffer).strip()
        buffer.clear()
        if text:
            statements.append(text)

    for raw_line in content.splitlines():
        if not in_quote and raw_line.strip().startswith("%%"):
            continue

        depth = 0
        for char in raw_line:
            if char == '"':
                in_quote = not in_quote
            elif not in_quote:
                if char in _OPENERS:
                    depth += 1
                elif char in _CLOSERS:
                    depth = max(0, depth - 1)
                elif char == ";" and split_semicolons and depth == 0:
                    flush()
                    continue
            buffer.append(char)

        if in_quote:
            # Quoted label continues on the next line
            pending.append(raw_line)
            buffer.append("\n")
            continue

        pending.clear()
        flush()

    if in_quote and pending:
        # Unterminated quote: fall back to plain line splitting
        buffer.clear()
        for raw_line in pending:
            text = raw_line.strip()
            if text and not text.startswith("%%"):
                statements.append(text)
    else:
        flush()

    return statements


class LineScanner:
    """Cursor over one statement.

    Every ``read_*`` method either consumes what it recognized and returns
    it, or returns None and leaves the position unchanged.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, length: int = 1) -> str:
        return self.text[self.pos : self.pos + length]

    def startswith(self, literal: str) -> bool:
        return self.text.startswith(literal, self.pos)

    def rest(self) -> str:
        """Return the unconsumed remainder without consuming it."""
        return self.text[self.pos :]

    def skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def consume(self, literal: str) -> bool:
        """Consume ``literal`` if it is next."""
        if self.text.startswith(literal, self.pos):
            self.pos += len(literal)
            return True
        return False

    def consume_keyword(self, keyword: str) -> bool:
        """Consume a whole word, case-insensitively."""
        end = self.pos + len(keyword)
        if self.text[self.pos : end].lower() != keyword.lower():
            return False
        if end < len(self.text) and is_word_char(self.text[end]):
            return False
        self.pos = end
        return True

    def read_identifier(self, extra: str = "") -> str | None:
        """Read a run of identifier characters (plus ``extra`` characters)."""
        start = self.pos
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if is_word_char(char) or char in extra:
                self.pos += 1
            else:
                break
        if self.pos == start:
            return None
        return self.text[start : self.pos]

    def read_run(self, chars: str) -> str:
        """Read a (possibly empty) run of characters from ``chars``."""
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in chars:
            self.pos += 1
        return self.text[start : self.pos]

    def read_quoted(self) -> str | None:
        """Read a double-quoted string, returning its content."""
        if self.peek() != '"':
            return None
        end = self.text.find('"', self.pos + 1)
        if end == -1:
            return None
        value = self.text[self.pos + 1 : end]
        self.pos = end + 1
        return value

    def read_until(self, terminator: str) -> str | None:
        """Read up to ``terminator`` and consume it; quoted text is skipped over."""
        index = self.pos
        while index < len(self.text):
            if self.text[index] == '"':
                closing = self.text.find('"', index + 1)
                if closing == -1:
                    break
                index = closing + 1
                continue
            if self.text.startswith(terminator, index):
                value = self.text[self.pos : index]
                self.pos = index + len(terminator)
                return value
            index += 1
        return None

    def read_until_any(self, terminators: tuple[str, ...]) -> tuple[str, str] | None:
        """Read up to the earliest of several terminators.

        Returns:
            (text before terminator, terminator matched), or None
        """
        best: tuple[int, str] | None = None
        for terminator in terminators:
            saved = self.pos
            value = self.read_until(terminator)
            if value is not None:
                index = self.pos - len(terminator)
                if best is None or index < best[0]:
                    best = (index, terminator)
            self.pos = saved
        if best is None:
            return None
        index, terminator = best
        value = self.text[self.pos : index]
        self.pos = index + len(terminator)
        return value, terminator

    def read_rest(self) -> str:
        """Consume and return the remainder, stripped."""
        value = self.text[self.pos :].strip()
        self.pos = len(self.text)
        return value


def clean_label(text: str | None) -> str | None:
    """Normalize label text: strip quotes, markdown backticks and whitespace."""
    if text is None:
        return None
    label = text.strip()
    if len(label) >= 2 and label[0] == label[-1] == '"':
        label = label[1:-1]
    if len(label) >= 2 and label[0] == label[-1] == "`":
        label = label[1:-1]
    label = label.strip()
    return label or None


def label_lines(label: str) -> list[str]:
    """Split a label into rendered lines (newlines and ``<br>`` tags)."""
    normalized = label
    for tag in ("<br/>", "<br />", "<br>", "<BR/>", "<BR>"):
        normalized = normalized.replace(tag, "\n")
    return [line.strip() for line in normalized.split("\n")] or [""]


def label_length(label: str) -> int:
    """Rendered width of a label in characters: its longest line."""
    return max((len(line) for line in label_lines(label)), default=0)
