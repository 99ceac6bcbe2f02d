"""Mermaid Sonar reporters.

Every reporter turns an AnalysisReport into text:
- text: terminal output with metrics and suggestions
- json: machine-readable report
- junit: JUnit XML for CI test dashboards (Jinja2 template)
- github: GitHub Actions workflow annotations
- markdown: summary table for pull request comments (Jinja2 template)
"""

from mermaid_sonar.models import AnalysisReport
from mermaid_sonar.renderers.json_report import render_json
from mermaid_sonar.renderers.templated import ReportRenderer, render_junit, render_markdown
from mermaid_sonar.renderers.text import render_github, render_text


def render_report(report: AnalysisReport, output_format: str, color: bool = False) -> str:
    """Render a report in the requested format.

    Args:
        report: Analysis report
        output_format: text, json, junit, github or markdown
        color: Add ANSI styling (text format only)

    Returns:
        Rendered report

    Raises:
        ValueError: If the format is unknown
    """
    if output_format == "text":
        return render_text(report, color=color)
    if output_format == "json":
        return render_json(report)
    if output_format == "junit":
        return render_junit(report)
    if output_format == "github":
        return render_github(report)
    if output_format == "markdown":
        return render_markdown(report)
    raise ValueError(f"Unknown output format: {output_format}")


__all__ = [
    "ReportRenderer",
    "render_github",
    "render_json",
    "render_junit",
    "render_markdown",
    "render_report",
    "render_text",
]
