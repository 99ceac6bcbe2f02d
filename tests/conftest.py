"""Shared pytest fixtures for Mermaid Sonar tests.

Fixtures are organized by category:
- Path fixtures: sample documents under tests/fixtures
- Diagram fixtures: diagram sources for each supported dialect
- Analysis fixtures: configs, metrics and diagrams for rule tests
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import replace
from pathlib import Path
from typing import Any

import pytest

from mermaid_sonar.config import ResolvedConfig
from mermaid_sonar.models import Diagram, DiagramType, Metrics
from mermaid_sonar.utils.logging import get_logger

# =============================================================================
# Logging isolation
# =============================================================================


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    """Undo CLI logging setup so later tests see default propagation."""
    logger = get_logger()
    yield
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def docs_dir(fixtures_dir: Path) -> Path:
    """Return the path to the sample markdown documents."""
    return fixtures_dir / "docs"


@pytest.fixture
def architecture_doc(docs_dir: Path) -> Path:
    """Markdown document with one small diagram of every dialect."""
    return docs_dir / "architecture.md"


@pytest.fixture
def wide_doc(docs_dir: Path) -> Path:
    """Markdown document with a 30-step left-to-right flowchart."""
    return docs_dir / "wide.md"


# =============================================================================
# Diagram Fixtures
# =============================================================================


@pytest.fixture
def simple_flowchart() -> str:
    """Four-node top-down flowchart with one decision."""
    return """flowchart TD
    A[Start] --> B{Decide}
    B -->|yes| C[Do it]
    B -->|no| D[Skip]
"""


@pytest.fixture
def chain_flowchart() -> Callable[[int, str], str]:
    """Build a linear flowchart of ``StepNN`` nodes."""

    def build(count: int, direction: str = "LR") -> str:
        lines = [f"graph {direction}"]
        for index in range(1, count):
            lines.append(f"    Step{index:02d} --> Step{index + 1:02d}")
        return "\n".join(lines) + "\n"

    return build


@pytest.fixture
def sequence_source() -> str:
    """Sequence diagram with aliases, nested blocks and a note."""
    return """sequenceDiagram
    participant A as Alice
    actor B as Bob
    A->>B: Hello
    loop Every minute
        B-->>A: Pong
        alt ok
            A-)B: async
        else fail
            A-xB: cross
        end
    end
    Note right of A: thinking
    A->>C: new
"""


@pytest.fixture
def state_source() -> str:
    """State diagram with a choice state and a composite state."""
    return """stateDiagram-v2
    direction LR
    [*] --> Idle
    Idle --> Check
    state Check <<choice>>
    Check --> Running : ok
    Check --> Failed : error
    state Running {
        [*] --> Warmup
        Warmup --> Steady
    }
    Running --> [*]
    Failed --> [*]
    note right of Idle : waiting
"""


@pytest.fixture
def class_source() -> str:
    """Class diagram with a three-level inheritance chain."""
    return """classDiagram
    Animal <|-- Duck
    Animal <|-- Fish
    Duck <|-- Mallard
    class Animal {
        +String name
        +move() void
    }
"""


@pytest.fixture
def er_source() -> str:
    """ER diagram with identifying and non-identifying relationships."""
    return """erDiagram
    CUSTOMER ||--o{ ORDER : places
    ORDER ||--|{ LINE-ITEM : contains
    CUSTOMER }|..|{ DELIVERY-ADDRESS : uses
    CUSTOMER {
        string name
        string email PK "login"
    }
"""


@pytest.fixture
def mindmap_source() -> str:
    """Mindmap with three levels."""
    return """mindmap
  root((Project))
    Goals
      Ship
    Risks
"""


# =============================================================================
# Analysis Fixtures
# =============================================================================


@pytest.fixture
def default_config() -> ResolvedConfig:
    """Resolved configuration with every default."""
    return ResolvedConfig()


@pytest.fixture
def make_diagram() -> Callable[..., Diagram]:
    """Build a Diagram located in docs/example.md."""

    def build(
        content: str = "graph TD\n    A --> B\n",
        type: DiagramType = DiagramType.FLOWCHART,
        start_line: int = 3,
    ) -> Diagram:
        return Diagram(content=content, type=type, file_path="docs/example.md", start_line=start_line)

    return build


@pytest.fixture
def make_metrics() -> Callable[..., Metrics]:
    """Build Metrics from empty defaults plus overrides."""

    def build(**overrides: Any) -> Metrics:
        return replace(Metrics.empty(), **overrides)

    return build
