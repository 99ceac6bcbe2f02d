"""JSON reporter."""

import json

from mermaid_sonar.models import AnalysisReport


def render_json(report: AnalysisReport) -> str:
    """Render a report as indented JSON with stable key order."""
    return json.dumps(report.to_dict(), indent=2) + "\n"
