"""Abstract base class for analysis rules.

All rules MUST implement this interface. Each rule:
1. Declares its identifier, default severity and (optionally) threshold
2. Reads its own settings from the resolved configuration
3. Returns at most one Issue per diagram, or None
4. Keeps no state between calls, so one instance serves every diagram
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from mermaid_sonar.config import ResolvedConfig, RuleConfig
from mermaid_sonar.models.diagram import Diagram
from mermaid_sonar.models.issue import Issue, Severity
from mermaid_sonar.models.metrics import Metrics


class Rule(ABC):
    """Interface for pluggable diagram rules.

    Adding a rule MUST NOT require changes to any existing rule: implement
    this class and register an instance in a RuleRegistry.

    Attributes:
        name: Rule identifier (e.g., "max-edges")
        default_severity: Severity used when the config sets none
        default_threshold: Threshold used when the config sets none (optional)
        description: One-line summary for listings
    """

    name: ClassVar[str]
    default_severity: ClassVar[Severity]
    default_threshold: ClassVar[float | None] = None
    description: ClassVar[str] = ""

    @abstractmethod
    def check(self, diagram: Diagram, metrics: Metrics, config: ResolvedConfig) -> Issue | None:
        """Evaluate the rule against one diagram.

        Args:
            diagram: Diagram being analyzed
            metrics: Metrics computed for the diagram
            config: Resolved configuration

        Returns:
            Issue if the rule is violated, None otherwise
        """
        pass

    # =========================================================================
    # Configuration helpers
    # =========================================================================

    def settings(self, config: ResolvedConfig) -> RuleConfig:
        """Get this rule's configuration."""
        return config.rule(self.name)

    def severity(self, config: ResolvedConfig) -> Severity:
        """Configured severity, or the rule default."""
        return self.settings(config).severity or self.default_severity

    def threshold(self, config: ResolvedConfig) -> float:
        """Configured threshold, or the rule default.

        Raises:
            ValueError: If the rule has no threshold at all
        """
        configured = self.settings(config).threshold
        if configured is not None:
            return configured
        if self.default_threshold is None:
            raise ValueError(f"Rule {self.name} has no threshold")
        return self.default_threshold

    def option(self, config: ResolvedConfig, key: str, default: Any) -> Any:
        """Rule-specific option value."""
        return self.settings(config).options.get(key, default)

    def make_issue(
        self,
        diagram: Diagram,
        message: str,
        severity: Severity,
        suggestion: str | None = None,
        citation: str | None = None,
    ) -> Issue:
        """Build an Issue located at the diagram."""
        return Issue(
            rule=self.name,
            severity=severity,
            message=message,
            file_path=diagram.file_path,
            line=diagram.start_line,
            suggestion=suggestion,
            citation=citation,
        )

    def get_metadata(self) -> dict[str, Any]:
        """Get rule metadata for listings and debugging.

        Returns:
            Dictionary with rule info
        """
        return {
            "name": self.name,
            "default_severity": self.default_severity.value,
            "default_threshold": self.default_threshold,
            "description": self.description,
        }


def format_threshold(value: float) -> str:
    """Render a threshold without a trailing ``.0`` for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
