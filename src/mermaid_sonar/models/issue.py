"""Analysis result entities.

This module contains entities related to analysis output:
- Severity: Issue severity tiers
- Issue: One rule's finding against one diagram
- RuleFailure: Non-fatal fault recorded instead of an issue
- DiagramResult: Diagram + metrics + issues, one per analyzed diagram
- AnalysisReport: Aggregated results of a run
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from mermaid_sonar.models.diagram import Diagram
from mermaid_sonar.models.metrics import Metrics


class Severity(Enum):
    """Issue severity, ordered info < warning < error."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def parse(cls, value: "str | Severity") -> "Severity":
        """Parse a severity name (case-insensitive).

        Raises:
            ValueError: If the name is not a known severity
        """
        if isinstance(value, Severity):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = [s.value for s in cls]
            raise ValueError(f"Invalid severity: {value}. Valid: {valid}") from None


_SEVERITY_RANK = {Severity.INFO: 0, Severity.WARNING: 1, Severity.ERROR: 2}


@dataclass(frozen=True)
class Issue:
    """A finding reported by one rule against one diagram.

    Attributes:
        rule: Rule identifier
        severity: info, warning or error
        message: Human-readable description
        file_path: File containing the diagram
        line: Line of the diagram in that file
        suggestion: Optional remediation advice
        citation: Optional source backing the threshold
    """

    rule: str
    severity: Severity
    message: str
    file_path: str
    line: int
    suggestion: str | None = None
    citation: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "rule": self.rule,
            "severity": self.severity.value,
            "message": self.message,
            "file_path": self.file_path,
            "line": self.line,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.citation:
            result["citation"] = self.citation
        return result


@dataclass(frozen=True)
class RuleFailure:
    """Non-fatal fault encountered while analyzing a diagram or file.

    Attributes:
        rule: Rule that raised, or "<io>" for file-level faults
        message: Error description
        file_path: File being analyzed
        line: Diagram line (0 for file-level faults)
    """

    rule: str
    message: str
    file_path: str
    line: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "rule": self.rule,
            "message": self.message,
            "file_path": self.file_path,
            "line": self.line,
        }


@dataclass
class DiagramResult:
    """Everything known about one analyzed diagram."""

    diagram: Diagram
    metrics: Metrics
    issues: list[Issue] = field(default_factory=list)
    failures: list[RuleFailure] = field(default_factory=list)

    def has_severity(self, severity: Severity) -> bool:
        """Check if any issue has exactly the given severity."""
        return any(issue.severity == severity for issue in self.issues)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "diagram": self.diagram.to_dict(),
            "metrics": self.metrics.to_dict(),
            "issues": [issue.to_dict() for issue in self.issues],
            "failures": [failure.to_dict() for failure in self.failures],
        }


@dataclass
class AnalysisReport:
    """Aggregated results of an analysis run.

    Attributes:
        results: One entry per diagram, in file then line order
        files: Files that were analyzed (including those with no diagrams)
        failures: File-level faults (unreadable files and the like)
        timestamp: Run timestamp (UTC)
    """

    results: list[DiagramResult] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    failures: list[RuleFailure] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def issues(self) -> list[Issue]:
        """Get all issues across diagrams, in result order."""
        return [issue for result in self.results for issue in result.issues]

    def count(self, severity: Severity) -> int:
        """Count issues of the given severity."""
        return sum(1 for issue in self.issues if issue.severity == severity)

    @property
    def has_errors(self) -> bool:
        return self.count(Severity.ERROR) > 0

    @property
    def has_warnings(self) -> bool:
        return self.count(Severity.WARNING) > 0

    def results_by_file(self) -> dict[str, list[DiagramResult]]:
        """Group diagram results by file, keeping file order."""
        grouped: dict[str, list[DiagramResult]] = {path: [] for path in self.files}
        for result in self.results:
            grouped.setdefault(result.diagram.file_path, []).append(result)
        return grouped

    def summary(self) -> dict[str, int]:
        """Return headline counts."""
        return {
            "files": len(self.files),
            "diagrams": len(self.results),
            "issues": len(self.issues),
            "errors": self.count(Severity.ERROR),
            "warnings": self.count(Severity.WARNING),
            "info": self.count(Severity.INFO),
            "failures": len(self.failures)
            + sum(len(result.failures) for result in self.results),
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "summary": self.summary(),
            "results": [result.to_dict() for result in self.results],
            "failures": [failure.to_dict() for failure in self.failures],
        }
