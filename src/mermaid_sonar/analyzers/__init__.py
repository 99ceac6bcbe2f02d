"""Mermaid Sonar analyzers - deterministic diagram analysis.

Each diagram flows through these stages, strictly in order:
- Extractor: finds diagrams in documents
- Detector: tags each diagram with its dialect from the header line
- Parsers: dialect-specific structural extraction
- Graph Builder: normalizes any parse into a CanonicalGraph
- Metrics Engine: structural metrics from the graph and parse
- Dimension Estimator: approximate rendered size
"""

from mermaid_sonar.analyzers.detector import detect_diagram_type, detect_header_direction
from mermaid_sonar.analyzers.dimensions import EstimationConstants, estimate_dimensions
from mermaid_sonar.analyzers.extractor import discover_files, extract_diagrams
from mermaid_sonar.analyzers.graph_builder import build_graph
from mermaid_sonar.analyzers.metrics import compute_metrics
from mermaid_sonar.analyzers.parsers import parse_dialect

__all__ = [
    "EstimationConstants",
    "build_graph",
    "compute_metrics",
    "detect_diagram_type",
    "detect_header_direction",
    "discover_files",
    "estimate_dimensions",
    "extract_diagrams",
    "parse_dialect",
]
