"""Rule registry.

The registry is an immutable, ordered collection of rule instances. It is
built once (``default_registry``) and passed explicitly into the pipeline;
extending it yields a new registry rather than mutating the existing one, so
it is safe to share across worker threads.
"""

from collections.abc import Iterable, Iterator
from typing import Any

from mermaid_sonar.models.issue import Severity
from mermaid_sonar.rules.base import Rule
from mermaid_sonar.rules.cognitive_load import MaxNodesHighDensityRule, MaxNodesLowDensityRule
from mermaid_sonar.rules.cyclomatic import CyclomaticComplexityRule
from mermaid_sonar.rules.max_edges import MaxEdgesRule
from mermaid_sonar.rules.readability import HorizontalWidthRule, VerticalHeightRule
from mermaid_sonar.rules.reserved_words import ReservedWordsRule


def _validate(rule: Rule) -> None:
    """Check a rule satisfies the interface contract."""
    name = getattr(rule, "name", None)
    if not isinstance(name, str) or not name:
        raise TypeError(f"Rule {type(rule).__name__} must define a non-empty 'name'")
    if not isinstance(getattr(rule, "default_severity", None), Severity):
        raise TypeError(f"Rule {name} must define 'default_severity' as a Severity")


class RuleRegistry:
    """Ordered, immutable set of rules.

    Adding a rule:
        1. Implement the Rule interface
        2. ``registry.with_rule(MyRule())`` (returns a new registry)
        3. No changes needed to existing rules

    Attributes:
        rules: Rules in evaluation order
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        """Initialize the registry.

        Args:
            rules: Rules in evaluation order

        Raises:
            TypeError: If a rule does not satisfy the interface
            ValueError: If two rules share a name
        """
        ordered = tuple(rules)
        seen: set[str] = set()
        for rule in ordered:
            _validate(rule)
            if rule.name in seen:
                raise ValueError(f"Duplicate rule name: {rule.name}")
            seen.add(rule.name)
        self._rules = ordered

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return any(rule.name == name for rule in self._rules)

    # =========================================================================
    # Retrieval
    # =========================================================================

    def get(self, name: str) -> Rule:
        """Get a rule by name.

        Raises:
            KeyError: If the rule is not registered
        """
        for rule in self._rules:
            if rule.name == name:
                return rule
        raise KeyError(f"Rule '{name}' not registered. Available: {self.names()}")

    def names(self) -> list[str]:
        """Get rule names in evaluation order."""
        return [rule.name for rule in self._rules]

    # =========================================================================
    # Extension
    # =========================================================================

    def with_rule(self, rule: Rule) -> "RuleRegistry":
        """Return a new registry with ``rule`` appended."""
        return RuleRegistry((*self._rules, rule))

    def without(self, *names: str) -> "RuleRegistry":
        """Return a new registry without the named rules."""
        return RuleRegistry(rule for rule in self._rules if rule.name not in names)

    def get_metadata(self) -> list[dict[str, Any]]:
        """Get metadata for every rule, in order."""
        return [rule.get_metadata() for rule in self._rules]


def default_registry() -> RuleRegistry:
    """Build the registry of built-in rules.

    Returns:
        RuleRegistry in evaluation order
    """
    return RuleRegistry(
        [
            MaxEdgesRule(),
            MaxNodesHighDensityRule(),
            MaxNodesLowDensityRule(),
            CyclomaticComplexityRule(),
            ReservedWordsRule(),
            HorizontalWidthRule(),
            VerticalHeightRule(),
        ]
    )
