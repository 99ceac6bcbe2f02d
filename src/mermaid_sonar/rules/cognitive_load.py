"""Cognitive load rules.

Diagram comprehension degrades once node count passes a limit, and the limit
is lower for dense diagrams:

- density > 0.3: more than 50 nodes is too many
- density <= 0.3: more than 100 nodes is too many
"""

from mermaid_sonar.config import ResolvedConfig
from mermaid_sonar.models.diagram import Diagram
from mermaid_sonar.models.issue import Issue, Severity
from mermaid_sonar.models.metrics import Metrics
from mermaid_sonar.rules.base import Rule, format_threshold

CITATION = "Research: arXiv:2008.07944 - Cognitive Load in Diagram Comprehension"

DEFAULT_DENSITY_THRESHOLD = 0.3


def density_threshold(config: ResolvedConfig) -> float:
    """Density boundary between the two regimes (configured on the high-density rule)."""
    value = config.rule(MaxNodesHighDensityRule.name).options.get(
        "density_threshold", DEFAULT_DENSITY_THRESHOLD
    )
    return float(value)


class MaxNodesHighDensityRule(Rule):
    """Flags dense diagrams with too many nodes."""

    name = "max-nodes-high-density"
    default_severity = Severity.WARNING
    default_threshold = 50
    description = "Too many nodes for a densely connected diagram"

    def applies(self, metrics: Metrics, config: ResolvedConfig) -> bool:
        """Check the rule condition without building an issue."""
        if not self.settings(config).enabled:
            return False
        return (
            metrics.node_count > self.threshold(config)
            and metrics.graph_density > density_threshold(config)
        )

    def check(self, diagram: Diagram, metrics: Metrics, config: ResolvedConfig) -> Issue | None:
        if not self.applies(metrics, config):
            return None

        return self.make_issue(
            diagram,
            f"High cognitive load: {metrics.node_count} nodes with "
            f"{metrics.graph_density * 100:.1f}% density",
            self.severity(config),
            suggestion=(
                "High-density diagrams with many nodes are difficult to comprehend. "
                "Consider splitting into multiple smaller diagrams or reducing connections "
                "between nodes."
            ),
            citation=CITATION,
        )


class MaxNodesLowDensityRule(Rule):
    """Flags sparse diagrams that still have too many nodes."""

    name = "max-nodes-low-density"
    default_severity = Severity.WARNING
    default_threshold = 100
    description = "Too many nodes even for a sparse diagram"

    def applies(self, metrics: Metrics, config: ResolvedConfig) -> bool:
        """Check the rule condition without building an issue."""
        if not self.settings(config).enabled:
            return False
        return (
            metrics.node_count > self.threshold(config)
            and metrics.graph_density <= density_threshold(config)
        )

    def check(self, diagram: Diagram, metrics: Metrics, config: ResolvedConfig) -> Issue | None:
        if not self.applies(metrics, config):
            return None

        threshold = format_threshold(self.threshold(config))
        return self.make_issue(
            diagram,
            f"Too many nodes ({metrics.node_count} > {threshold}) even with low density",
            self.severity(config),
            suggestion=(
                "Even sparse diagrams become hard to navigate with too many nodes. "
                "Consider organizing into hierarchical diagrams or multiple views."
            ),
            citation=CITATION,
        )


def node_count_rule_fires(metrics: Metrics, config: ResolvedConfig) -> bool:
    """Check whether either node-count rule already reports this diagram."""
    return MaxNodesHighDensityRule().applies(metrics, config) or MaxNodesLowDensityRule().applies(
        metrics, config
    )
