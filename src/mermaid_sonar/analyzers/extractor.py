"""Diagram extraction from documents.

Finds Mermaid diagrams in Markdown (fenced ```` ```mermaid ```` or
``~~~mermaid`` blocks) and treats standalone ``.mmd`` / ``.mermaid`` files
as one diagram each. Every diagram is tagged with its dialect and located by
file and 1-indexed line.
"""

import logging
import re
from pathlib import Path

from mermaid_sonar.analyzers.detector import detect_diagram_type
from mermaid_sonar.models.diagram import Diagram

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = frozenset({".md", ".markdown", ".mdx"})
MERMAID_EXTENSIONS = frozenset({".mmd", ".mermaid"})
SUPPORTED_EXTENSIONS = MARKDOWN_EXTENSIONS | MERMAID_EXTENSIONS

SKIP_DIRS = frozenset({"node_modules", "__pycache__", "venv", "site-packages"})

_FENCE_OPEN = re.compile(r"^(?P<fence>`{3,}|~{3,})\s*mermaid\b", re.IGNORECASE)


def extract_diagrams(text: str, file_path: str) -> list[Diagram]:
    """Extract every Mermaid diagram from a document.

    Args:
        text: Document content
        file_path: Path reported on each diagram

    Returns:
        Diagrams in document order
    """
    if Path(file_path).suffix.lower() in MERMAID_EXTENSIONS:
        if not text.strip():
            return []
        return [
            Diagram(
                content=text,
                type=detect_diagram_type(text),
                file_path=file_path,
                start_line=1,
            )
        ]

    return _extract_fenced(text, file_path)


def _extract_fenced(text: str, file_path: str) -> list[Diagram]:
    diagrams: list[Diagram] = []
    fence: str | None = None
    start_line = 0
    block: list[str] = []

    for line_number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()

        if fence is None:
            match = _FENCE_OPEN.match(stripped)
            if match:
                fence = match.group("fence")
                start_line = line_number
                block = []
            continue

        if stripped.startswith(fence) and not stripped.lstrip(fence[0]):
            content = "\n".join(block)
            diagrams.append(
                Diagram(
                    content=content,
                    type=detect_diagram_type(content),
                    file_path=file_path,
                    start_line=start_line,
                )
            )
            fence = None
            continue

        block.append(line)

    if fence is not None:
        logger.debug("Unclosed mermaid fence at %s:%d", file_path, start_line)

    return diagrams


def discover_files(paths: list[Path]) -> list[Path]:
    """Expand files and directories into a sorted list of supported files.

    Directories are walked recursively; hidden directories and common
    dependency folders are skipped. Explicitly named files are always kept.

    Args:
        paths: Files and/or directories

    Returns:
        De-duplicated files, sorted by path

    Raises:
        FileNotFoundError: If a path does not exist
    """
    found: set[Path] = set()

    for path in paths:
        if not path.exists():
            raise FileNotFoundError(f"Path not found: {path}")

        if path.is_file():
            found.add(path)
            continue

        for candidate in path.rglob("*"):
            if not candidate.is_file():
                continue
            if candidate.suffix.lower() not in SUPPORTED_EXTENSIONS:
                continue
            relative = candidate.relative_to(path)
            if _should_skip(relative):
                continue
            found.add(candidate)

    return sorted(found)


def _should_skip(relative: Path) -> bool:
    """Check whether any directory on a relative path is hidden or ignored."""
    for part in relative.parts[:-1]:
        if part.startswith(".") or part in SKIP_DIRS:
            return True
    return False
