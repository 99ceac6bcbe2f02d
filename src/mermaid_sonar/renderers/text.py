"""Plain-text and GitHub Actions reporters."""

import typer

from mermaid_sonar.models import AnalysisReport, DiagramResult, Issue, RuleFailure, Severity
from mermaid_sonar.renderers.filters import severity_label

SEVERITY_COLORS = {
    Severity.ERROR: typer.colors.RED,
    Severity.WARNING: typer.colors.YELLOW,
    Severity.INFO: typer.colors.BLUE,
}


def _style(text: str, color: bool, **styles: object) -> str:
    return typer.style(text, **styles) if color else text


def format_metrics(result: DiagramResult) -> list[str]:
    """Format the headline metrics of one diagram."""
    m = result.metrics
    lines = [
        f"  Nodes:          {m.node_count}",
        f"  Edges:          {m.edge_count}",
        f"  Density:        {m.graph_density:.3f}",
        f"  Max Branch:     {m.max_branch_width}",
        f"  Avg Degree:     {m.average_degree:.2f}",
    ]
    if m.cyclomatic_complexity > 1:
        lines.append(f"  Complexity:     {m.cyclomatic_complexity}")
    if m.dimensions is not None:
        d = m.dimensions
        lines.append(f"  Est. Size:      ~{d.width}x{d.height}px ({d.layout})")
    return lines


def format_issue(issue: Issue, color: bool = False) -> list[str]:
    """Format one issue with its suggestion and citation."""
    label = _style(
        f"{severity_label(issue.severity.value)}:",
        color,
        fg=SEVERITY_COLORS[issue.severity],
        bold=True,
    )
    lines = [
        "",
        f"{label} {issue.message} [{issue.rule}]",
        f"  File: {issue.file_path}:{issue.line}",
    ]
    if issue.suggestion:
        lines.append(f"  {_style('Suggestion:', color, fg=typer.colors.CYAN)} {issue.suggestion}")
    if issue.citation:
        lines.append(f"  {issue.citation}")
    return lines


def _format_failure(failure: RuleFailure) -> str:
    where = f"{failure.file_path}:{failure.line}" if failure.line else failure.file_path
    return f"FAILED: {failure.rule} on {where}: {failure.message}"


def render_text(report: AnalysisReport, color: bool = False) -> str:
    """Render a report for the terminal.

    Args:
        report: Analysis report
        color: Add ANSI styling

    Returns:
        Report text
    """
    lines: list[str] = []

    for file_path, results in report.results_by_file().items():
        if not results:
            continue
        lines.append(f"Analyzed {len(results)} diagram(s) in {file_path}")
        lines.append("")
        for index, result in enumerate(results, start=1):
            header = f"Diagram #{index} ({result.diagram.type.value}, line {result.diagram.start_line}):"
            lines.append(_style(header, color, bold=True))
            lines.extend(format_metrics(result))
            for issue in result.issues:
                lines.extend(format_issue(issue, color))
            for failure in result.failures:
                lines.append(_format_failure(failure))
            lines.append("")

    for failure in report.failures:
        lines.append(_format_failure(failure))

    summary = report.summary()
    if summary["diagrams"] == 0:
        lines.append("No Mermaid diagrams found.")
    else:
        lines.append(
            f"Found {summary['issues']} issue(s) in {summary['diagrams']} diagram(s) "
            f"across {summary['files']} file(s): {summary['errors']} error(s), "
            f"{summary['warnings']} warning(s), {summary['info']} info"
        )

    return "\n".join(lines) + "\n"


# =============================================================================
# GitHub Actions workflow commands
# =============================================================================

GITHUB_COMMANDS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "notice",
}


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


def render_github(report: AnalysisReport) -> str:
    """Render issues as GitHub Actions annotations.

    Each issue becomes one ``::error file=...,line=...,title=...::message``
    line; info issues use ``::notice``.
    """
    lines: list[str] = []
    for issue in report.issues:
        message = issue.message
        if issue.suggestion:
            message = f"{message}\n{issue.suggestion}"
        lines.append(
            f"::{GITHUB_COMMANDS[issue.severity]} "
            f"file={_escape_property(issue.file_path)},"
            f"line={issue.line},"
            f"title={_escape_property(issue.rule)}::{_escape_data(message)}"
        )

    for result in report.results:
        for failure in result.failures:
            lines.append(
                f"::warning file={_escape_property(failure.file_path)},line={failure.line},"
                f"title={_escape_property(failure.rule)}::{_escape_data(failure.message)}"
            )
    for failure in report.failures:
        lines.append(
            f"::error file={_escape_property(failure.file_path)},"
            f"title={_escape_property(failure.rule)}::{_escape_data(failure.message)}"
        )

    return "\n".join(lines) + "\n" if lines else ""
