"""Cyclomatic complexity rule.

Complexity is the number of decision nodes plus one, after McCabe. Decision
nodes are diamond-shaped flowchart nodes and ``<<choice>>`` states. This is
a count of shapes, not a control-flow analysis.
"""

from mermaid_sonar.config import ResolvedConfig
from mermaid_sonar.models.diagram import Diagram
from mermaid_sonar.models.issue import Issue, Severity
from mermaid_sonar.models.metrics import Metrics
from mermaid_sonar.rules.base import Rule, format_threshold

CITATION = "McCabe's Cyclomatic Complexity - Software Engineering Standards (IEEE)"


class CyclomaticComplexityRule(Rule):
    """Flags diagrams with too many decision points."""

    name = "cyclomatic-complexity"
    default_severity = Severity.WARNING
    default_threshold = 10
    description = "Too many decision nodes"

    def check(self, diagram: Diagram, metrics: Metrics, config: ResolvedConfig) -> Issue | None:
        threshold = self.threshold(config)
        if metrics.cyclomatic_complexity <= threshold:
            return None

        return self.make_issue(
            diagram,
            f"High cyclomatic complexity ({metrics.cyclomatic_complexity} > "
            f"{format_threshold(threshold)}) with {metrics.decision_count} decision nodes",
            self.severity(config),
            suggestion=(
                "High decision complexity makes diagrams hard to follow. "
                "Consider extracting decision logic into separate sub-diagrams or "
                "simplifying the flow."
            ),
            citation=CITATION,
        )
