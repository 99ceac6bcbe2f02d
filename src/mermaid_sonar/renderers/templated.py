"""Template-based reporters (JUnit XML, Markdown).

Reports are rendered from Jinja2 templates shipped in the package. Output is
deterministic: the same report always renders to the same text.
"""

import logging
from typing import Any

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape

from mermaid_sonar.models import AnalysisReport, Severity
from mermaid_sonar.renderers.filters import (
    format_datetime,
    severity_icon,
    severity_label,
    table_cell,
)

logger = logging.getLogger(__name__)

JUNIT_TEMPLATE = "junit.xml.j2"
MARKDOWN_TEMPLATE = "report.md.j2"

# Issue severities that count as JUnit failures
JUNIT_FAILURE_SEVERITIES = frozenset({Severity.ERROR, Severity.WARNING})


class ReportRenderer:
    """Renders an AnalysisReport through a packaged template.

    Usage:
        renderer = ReportRenderer()
        xml = renderer.render(report, JUNIT_TEMPLATE)
    """

    def __init__(self) -> None:
        self._env = Environment(
            loader=PackageLoader("mermaid_sonar", "templates"),
            autoescape=select_autoescape(["html", "xml", "xml.j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        self._env.filters["format_datetime"] = format_datetime
        self._env.filters["severity_label"] = severity_label
        self._env.filters["severity_icon"] = severity_icon
        self._env.filters["table_cell"] = table_cell

    def render(self, report: AnalysisReport, template_name: str) -> str:
        """Render a report with the named template.

        Args:
            report: Analysis report
            template_name: Template file inside the package

        Returns:
            Rendered text

        Raises:
            ValueError: If the template cannot be loaded or rendered
        """
        try:
            template = self._env.get_template(template_name)
        except TemplateError as e:
            logger.error("Failed to load template %s: %s", template_name, e)
            raise ValueError(f"Template not found: {template_name}") from e

        try:
            return template.render(**self._build_context(report))
        except TemplateError as e:
            logger.error("Template rendering failed: %s", e)
            raise ValueError(f"Template rendering failed: {e}") from e

    def _build_context(self, report: AnalysisReport) -> dict[str, Any]:
        """Build the template rendering context.

        Files are listed in report order; each carries its diagrams and the
        counts a JUnit testsuite needs.
        """
        files: list[dict[str, Any]] = []
        for file_path, results in report.results_by_file().items():
            diagrams = []
            for result in results:
                diagrams.append(
                    {
                        "name": f"{result.diagram.type.value} diagram at line {result.diagram.start_line}",
                        "location": result.diagram.location,
                        "type": result.diagram.type.value,
                        "line": result.diagram.start_line,
                        "metrics": result.metrics.to_dict(),
                        "issues": [issue.to_dict() for issue in result.issues],
                        "failures": [
                            issue.to_dict()
                            for issue in result.issues
                            if issue.severity in JUNIT_FAILURE_SEVERITIES
                        ],
                        "errors": [failure.to_dict() for failure in result.failures],
                    }
                )
            files.append(
                {
                    "path": file_path,
                    "diagrams": diagrams,
                    "tests": len(diagrams),
                    "failures": sum(1 for d in diagrams if d["failures"]),
                    "errors": sum(1 for d in diagrams if d["errors"]),
                    "issue_count": sum(len(d["issues"]) for d in diagrams),
                }
            )

        return {
            "timestamp": report.timestamp,
            "summary": report.summary(),
            "files": files,
            "failures": [failure.to_dict() for failure in report.failures],
        }


def render_junit(report: AnalysisReport) -> str:
    return ReportRenderer().render(report, JUNIT_TEMPLATE)


def render_markdown(report: AnalysisReport) -> str:
    return ReportRenderer().render(report, MARKDOWN_TEMPLATE)
