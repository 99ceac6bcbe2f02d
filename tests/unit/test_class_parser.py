"""Unit tests for the class diagram parser."""

from mermaid_sonar.analyzers.parsers import parse_class_diagram
from mermaid_sonar.models import LayoutDirection
from mermaid_sonar.models.dialects import RelationshipType


class TestClassDiagramParser:
    """Tests for ClassDiagramParser."""

    def test_inheritance_direction_is_logical(self, class_source: str) -> None:
        """Test that inheritance points from subtype to supertype."""
        parse = parse_class_diagram(class_source)

        assert set(parse.classes) == {"Animal", "Duck", "Fish", "Mallard"}
        assert [(r.source, r.target, r.type) for r in parse.relationships] == [
            ("Duck", "Animal", RelationshipType.INHERITANCE),
            ("Fish", "Animal", RelationshipType.INHERITANCE),
            ("Mallard", "Duck", RelationshipType.INHERITANCE),
        ]

    def test_class_block_members(self, class_source: str) -> None:
        """Test that block members are split into attributes and methods."""
        animal = parse_class_diagram(class_source).classes["Animal"]

        assert animal.attributes == ["+String name"]
        assert animal.methods == ["+move() void"]
        assert animal.member_count == 2

    def test_relationship_kinds(self) -> None:
        """Test every relationship operator family."""
        content = """classDiagram
    Car *-- Wheel
    Pond o-- Duck
    Service ..> Repository
    Shape ..|> Drawable
    Customer "1" --> "*" Order : places
"""
        relationships = parse_class_diagram(content).relationships

        assert [(r.source, r.target, r.type) for r in relationships] == [
            ("Car", "Wheel", RelationshipType.COMPOSITION),
            ("Pond", "Duck", RelationshipType.AGGREGATION),
            ("Service", "Repository", RelationshipType.DEPENDENCY),
            ("Shape", "Drawable", RelationshipType.INHERITANCE),
            ("Customer", "Order", RelationshipType.ASSOCIATION),
        ]
        assert relationships[-1].multiplicity == ("1", "*")
        assert relationships[-1].label == "places"

    def test_members_annotations_and_generics(self) -> None:
        """Test colon members, stereotypes and generic class names."""
        content = """classDiagram
    direction RL
    class Box~T~
    <<interface>> Drawable
    Duck : +swim()
    Duck : +int age
"""
        parse = parse_class_diagram(content)

        assert "Box" in parse.classes
        assert parse.classes["Drawable"].annotations == ["interface"]
        assert parse.classes["Duck"].methods == ["+swim()"]
        assert parse.classes["Duck"].attributes == ["+int age"]
        assert parse.direction == LayoutDirection.RL
