"""Statement iteration common to every dialect parser."""

from mermaid_sonar.analyzers.parsers.scanner import logical_lines


def strip_front_matter(content: str) -> str:
    """Remove a leading ``---`` YAML front-matter block, if any."""
    lines = content.splitlines()
    index = 0
    while index < len(lines) and not lines[index].strip():
        index += 1
    if index >= len(lines) or lines[index].strip() != "---":
        return content

    for closing in range(index + 1, len(lines)):
        if lines[closing].strip() == "---":
            # Keep line positions stable for anything that reports them
            return "\n" * (closing + 1) + "\n".join(lines[closing + 1 :])
    return content


def body_statements(
    content: str,
    header_keywords: tuple[str, ...],
    split_semicolons: bool = True,
) -> list[str]:
    """Get the statements of a diagram without its header.

    Args:
        content: Raw diagram source
        header_keywords: Lowercase header keywords of the dialect
        split_semicolons: Treat top-level ``;`` as a statement separator

    Returns:
        Statements following the header line
    """
    statements = logical_lines(strip_front_matter(content), split_semicolons=split_semicolons)
    if statements:
        first_word = statements[0].split(maxsplit=1)[0].lower()
        if first_word in header_keywords:
            statements = statements[1:]
    return statements
