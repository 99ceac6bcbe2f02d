"""Mermaid Sonar rules.

Rules are stateless checks of ``(diagram, metrics, config)``:
- Threshold rules: max-edges, node count under two density regimes, cyclomatic complexity
- Lexical rules: reserved identifiers
- Composite readability rules: estimated width and height against the viewport
"""

from mermaid_sonar.rules.base import Rule
from mermaid_sonar.rules.cognitive_load import MaxNodesHighDensityRule, MaxNodesLowDensityRule
from mermaid_sonar.rules.cyclomatic import CyclomaticComplexityRule
from mermaid_sonar.rules.engine import evaluate_rules
from mermaid_sonar.rules.max_edges import MaxEdgesRule
from mermaid_sonar.rules.readability import HorizontalWidthRule, VerticalHeightRule
from mermaid_sonar.rules.registry import RuleRegistry, default_registry
from mermaid_sonar.rules.reserved_words import ReservedWordsRule

__all__ = [
    "CyclomaticComplexityRule",
    "HorizontalWidthRule",
    "MaxEdgesRule",
    "MaxNodesHighDensityRule",
    "MaxNodesLowDensityRule",
    "ReservedWordsRule",
    "Rule",
    "RuleRegistry",
    "VerticalHeightRule",
    "default_registry",
    "evaluate_rules",
]
