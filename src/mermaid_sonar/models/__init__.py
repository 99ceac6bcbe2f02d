"""Mermaid Sonar data models.

This module exports all core entities used throughout the application:
- Diagram: One fenced diagram block and its location
- CanonicalGraph: Dialect-independent node/edge/adjacency structure
- Metrics: Structural metrics and dimension estimate of a diagram
- Issue: One rule's finding against one diagram
- DiagramResult / AnalysisReport: Pipeline output
"""

from mermaid_sonar.models.diagram import Diagram, DiagramType, LayoutDirection
from mermaid_sonar.models.graph import CanonicalGraph, Edge
from mermaid_sonar.models.issue import (
    AnalysisReport,
    DiagramResult,
    Issue,
    RuleFailure,
    Severity,
)
from mermaid_sonar.models.metrics import DimensionEstimate, Metrics

__all__ = [
    "Diagram",
    "DiagramType",
    "LayoutDirection",
    "CanonicalGraph",
    "Edge",
    "Metrics",
    "DimensionEstimate",
    "Issue",
    "RuleFailure",
    "Severity",
    "DiagramResult",
    "AnalysisReport",
]
