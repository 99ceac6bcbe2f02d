"""Unit tests for RuleRegistry."""

import pytest

from mermaid_sonar.config import ResolvedConfig
from mermaid_sonar.models import Diagram, Issue, Metrics, Severity
from mermaid_sonar.rules import MaxEdgesRule, ReservedWordsRule, Rule, RuleRegistry, default_registry


class MockRule(Rule):
    """Mock rule that never reports anything."""

    name = "mock-rule"
    default_severity = Severity.INFO

    def check(self, diagram: Diagram, metrics: Metrics, config: ResolvedConfig) -> Issue | None:
        return None


class NamelessRule(Rule):
    """Mock rule missing its identifier."""

    default_severity = Severity.INFO

    def check(self, diagram: Diagram, metrics: Metrics, config: ResolvedConfig) -> Issue | None:
        return None


class BadSeverityRule(Rule):
    """Mock rule with a string severity."""

    name = "bad-severity"
    default_severity = "warning"  # type: ignore[assignment]

    def check(self, diagram: Diagram, metrics: Metrics, config: ResolvedConfig) -> Issue | None:
        return None


class TestDefaultRegistry:
    """Tests for the built-in rule set."""

    def test_evaluation_order(self) -> None:
        """Test that built-in rules come in their fixed order."""
        assert default_registry().names() == [
            "max-edges",
            "max-nodes-high-density",
            "max-nodes-low-density",
            "cyclomatic-complexity",
            "reserved-words",
            "horizontal-width-readability",
            "vertical-height-readability",
        ]

    def test_get(self) -> None:
        """Test lookup by name."""
        registry = default_registry()

        assert isinstance(registry.get("max-edges"), MaxEdgesRule)
        assert "reserved-words" in registry
        assert "nope" not in registry

    def test_get_unknown(self) -> None:
        """Test that unknown names raise KeyError."""
        with pytest.raises(KeyError, match="not registered"):
            default_registry().get("nope")

    def test_metadata(self) -> None:
        """Test metadata for every rule."""
        metadata = default_registry().get_metadata()

        assert len(metadata) == 7
        assert all({"name", "default_severity", "description"} <= set(m) for m in metadata)


class TestRegistryConstruction:
    """Tests for building and extending registries."""

    def test_duplicate_names_rejected(self) -> None:
        """Test that two rules cannot share a name."""
        with pytest.raises(ValueError, match="Duplicate rule name: max-edges"):
            RuleRegistry([MaxEdgesRule(), MaxEdgesRule()])

    def test_nameless_rule_rejected(self) -> None:
        """Test that a rule without a name is refused."""
        with pytest.raises(TypeError, match="name"):
            RuleRegistry([NamelessRule()])

    def test_bad_severity_rejected(self) -> None:
        """Test that default_severity must be a Severity."""
        with pytest.raises(TypeError, match="default_severity"):
            RuleRegistry([BadSeverityRule()])

    def test_with_rule_returns_new_registry(self) -> None:
        """Test that extension leaves the original untouched."""
        base = default_registry()
        extended = base.with_rule(MockRule())

        assert len(base) == 7
        assert len(extended) == 8
        assert extended.names()[-1] == "mock-rule"

    def test_without(self) -> None:
        """Test removing rules by name."""
        registry = default_registry().without("max-edges", "reserved-words")

        assert "max-edges" not in registry
        assert len(registry) == 5

    def test_iteration_order(self) -> None:
        """Test that iteration follows construction order."""
        rules = [ReservedWordsRule(), MaxEdgesRule()]

        assert list(RuleRegistry(rules)) == rules
        assert RuleRegistry(rules).rules == tuple(rules)
