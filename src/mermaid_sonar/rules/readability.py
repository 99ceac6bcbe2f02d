"""Width and height readability rules.

Compare the estimated rendered size against the resolved viewport. A rule
fires when the estimate exceeds the viewport limit; its severity comes from
the viewport's info/warning/error ladder unless the config pins one.

Both rules stay silent when a node-count rule already reports the diagram,
since too many nodes is then the root cause. Suggestions depend on the
layout: horizontal layouts are told to go vertical, vertical layouts are told
to restructure, and nothing is ever told to go horizontal.
"""

from abc import abstractmethod

from mermaid_sonar.config import ResolvedConfig, Tiers
from mermaid_sonar.models.diagram import Diagram
from mermaid_sonar.models.issue import Issue, Severity
from mermaid_sonar.models.metrics import DimensionEstimate, Metrics
from mermaid_sonar.rules.base import Rule
from mermaid_sonar.rules.cognitive_load import node_count_rule_fires


class _ReadabilityRule(Rule):
    """Shared flow of the two dimension rules."""

    dimension = ""

    @abstractmethod
    def measure(self, dimensions: DimensionEstimate) -> int:
        """Pick the estimated dimension this rule checks."""

    @abstractmethod
    def limits(self, config: ResolvedConfig) -> tuple[int, Tiers]:
        """Return the viewport limit and severity ladder for the dimension."""

    @abstractmethod
    def suggest(self, metrics: Metrics, dimensions: DimensionEstimate) -> str:
        """Remediation text for the diagram's layout."""

    def check(self, diagram: Diagram, metrics: Metrics, config: ResolvedConfig) -> Issue | None:
        dimensions = metrics.dimensions
        if dimensions is None:
            return None

        if node_count_rule_fires(metrics, config):
            return None

        limit, tiers = self.limits(config)
        value = self.measure(dimensions)
        if value <= limit:
            return None

        severity = self.settings(config).severity or tiers.severity_for(value)
        return self.make_issue(
            diagram,
            f"Diagram {self.dimension} (~{value}px) exceeds the "
            f"{config.viewport.name} viewport {self.dimension} ({limit}px)",
            severity,
            suggestion=self.suggest(metrics, dimensions),
        )


class HorizontalWidthRule(_ReadabilityRule):
    """Flags diagrams too wide for the viewport."""

    name = "horizontal-width-readability"
    default_severity = Severity.WARNING
    description = "Estimated width exceeds the viewport"
    dimension = "width"

    def measure(self, dimensions: DimensionEstimate) -> int:
        return dimensions.width

    def limits(self, config: ResolvedConfig) -> tuple[int, Tiers]:
        return config.viewport.max_width, config.viewport.width_thresholds

    def suggest(self, metrics: Metrics, dimensions: DimensionEstimate) -> str:
        if dimensions.layout == "horizontal":
            return (
                f"Convert to a vertical layout (flowchart TD): {metrics.node_count} nodes "
                "laid out left to right make the diagram grow sideways."
            )
        if dimensions.layout == "vertical":
            return (
                f"The widest level has {metrics.max_branch_width} parallel branches. "
                "Group related branches into subgraphs or split the diagram at its "
                "branching points."
            )
        if dimensions.layout == "sequence":
            return (
                f"Reduce the number of participants ({metrics.participant_count}) or split "
                "the interaction into separate diagrams per participant group."
            )
        return "Split into smaller, domain-focused diagrams with fewer entities each."


class VerticalHeightRule(_ReadabilityRule):
    """Flags diagrams too tall for the viewport."""

    name = "vertical-height-readability"
    default_severity = Severity.WARNING
    description = "Estimated height exceeds the viewport"
    dimension = "height"

    def measure(self, dimensions: DimensionEstimate) -> int:
        return dimensions.height

    def limits(self, config: ResolvedConfig) -> tuple[int, Tiers]:
        return config.viewport.max_height, config.viewport.height_thresholds

    def suggest(self, metrics: Metrics, dimensions: DimensionEstimate) -> str:
        if dimensions.layout == "vertical":
            return (
                f"The longest chain is {metrics.max_depth} steps deep. Split the flow into "
                "stages with separate diagrams, or collapse linear runs of steps."
            )
        if dimensions.layout == "horizontal":
            return (
                f"Up to {metrics.max_branch_width} branches stack vertically. Group parallel "
                "branches into subgraphs or split the diagram."
            )
        if dimensions.layout == "sequence":
            return (
                f"Split the {metrics.message_count} messages into phases (one diagram per "
                "phase) or move detail into notes elsewhere."
            )
        return "Split into smaller, domain-focused diagrams with fewer entities each."
