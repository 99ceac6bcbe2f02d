"""Unit tests for the ER diagram parser."""

from mermaid_sonar.analyzers.parsers import parse_er_diagram
from mermaid_sonar.models.dialects import Cardinality, KeyType


class TestErDiagramParser:
    """Tests for ErDiagramParser."""

    def test_entities(self, er_source: str) -> None:
        """Test that hyphenated entity names are kept whole."""
        parse = parse_er_diagram(er_source)

        assert list(parse.entities) == ["CUSTOMER", "ORDER", "LINE-ITEM", "DELIVERY-ADDRESS"]

    def test_relationships(self, er_source: str) -> None:
        """Test cardinalities, identification and labels."""
        relationships = parse_er_diagram(er_source).relationships

        assert len(relationships) == 3
        places = relationships[0]
        assert places.source_cardinality == Cardinality.EXACTLY_ONE
        assert places.target_cardinality == Cardinality.ZERO_OR_MORE
        assert places.identifying is True
        assert places.label == "places"

        uses = relationships[2]
        assert uses.source_cardinality == Cardinality.ONE_OR_MORE
        assert uses.target_cardinality == Cardinality.ONE_OR_MORE
        assert uses.identifying is False

    def test_attributes(self, er_source: str) -> None:
        """Test attribute types, keys and comments."""
        customer = parse_er_diagram(er_source).entities["CUSTOMER"]

        assert [a.name for a in customer.attributes] == ["name", "email"]
        email = customer.attributes[1]
        assert email.type == "string"
        assert email.keys == (KeyType.PK,)
        assert email.is_primary_key
        assert not email.is_foreign_key
        assert email.comment == "login"

    def test_multiple_keys_and_alias(self) -> None:
        """Test comma-separated keys and entity aliases."""
        content = """erDiagram
    p["Person"] {
        int id PK, FK
    }
"""
        entity = parse_er_diagram(content).entities["p"]

        assert entity.alias == "Person"
        assert entity.attributes[0].keys == (KeyType.PK, KeyType.FK)
