"""Rule engine.

Evaluates every enabled rule against one diagram, in registry order. Rules
are independent: a rule that raises is logged and recorded as a
RuleFailure, and the remaining rules still run.
"""

import logging

from mermaid_sonar.config import ResolvedConfig
from mermaid_sonar.models.diagram import Diagram
from mermaid_sonar.models.issue import Issue, RuleFailure
from mermaid_sonar.models.metrics import Metrics
from mermaid_sonar.rules.registry import RuleRegistry

logger = logging.getLogger(__name__)


def evaluate_rules(
    registry: RuleRegistry,
    diagram: Diagram,
    metrics: Metrics,
    config: ResolvedConfig,
) -> tuple[list[Issue], list[RuleFailure]]:
    """Run all enabled rules against a diagram.

    Args:
        registry: Rules to evaluate
        diagram: Diagram being analyzed
        metrics: Metrics of the diagram
        config: Resolved configuration

    Returns:
        (issues in registry order, failures of rules that raised)
    """
    issues: list[Issue] = []
    failures: list[RuleFailure] = []

    for rule in registry:
        if not config.rule(rule.name).enabled:
            continue

        try:
            issue = rule.check(diagram, metrics, config)
        except Exception as e:
            logger.warning("Rule %s failed on %s: %s", rule.name, diagram.location, e)
            failures.append(
                RuleFailure(
                    rule=rule.name,
                    message=str(e),
                    file_path=diagram.file_path,
                    line=diagram.start_line,
                )
            )
            continue

        if issue is not None:
            issues.append(issue)

    return issues, failures
