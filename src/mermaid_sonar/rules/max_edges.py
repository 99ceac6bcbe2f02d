"""Max edges rule.

Mermaid layout cost grows roughly quadratically with connections, and
flowcharts become slow to render and hard to read beyond about 100 edges.
"""

from mermaid_sonar.config import ResolvedConfig
from mermaid_sonar.models.diagram import Diagram
from mermaid_sonar.models.issue import Issue, Severity
from mermaid_sonar.models.metrics import Metrics
from mermaid_sonar.rules.base import Rule, format_threshold

CITATION = (
    "Mermaid Official Docs: https://docs.mermaidchart.com/blog/posts/"
    "flow-charts-are-on2-complex-so-dont-go-over-100-connections"
)


class MaxEdgesRule(Rule):
    """Flags diagrams with more connections than the threshold."""

    name = "max-edges"
    default_severity = Severity.ERROR
    default_threshold = 100
    description = "Too many connections between nodes"

    def check(self, diagram: Diagram, metrics: Metrics, config: ResolvedConfig) -> Issue | None:
        threshold = self.threshold(config)
        if metrics.edge_count <= threshold:
            return None

        return self.make_issue(
            diagram,
            f"Too many connections ({metrics.edge_count} > {format_threshold(threshold)})",
            self.severity(config),
            suggestion=(
                "Split into multiple diagrams or use subgraphs to reduce complexity. "
                "Consider breaking down into logical components with separate diagrams."
            ),
            citation=CITATION,
        )
