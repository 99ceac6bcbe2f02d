"""Dialect-specific parse results.

Each dialect parser produces one of these structures. They keep the
information the canonical graph throws away (shapes, members, cardinalities,
message kinds, block nesting) because the dimension estimator and some rules
need it.

- FlowchartParse: nodes with shapes, links with styles, subgraphs
- ClassDiagramParse: classes with members, typed relationships
- SequenceParse: participants, messages, block nesting
- StateDiagramParse: states (possibly composite), transitions
- ErDiagramParse: entities with keyed attributes, cardinality relationships
- MindmapParse: indentation tree
"""

from dataclasses import dataclass, field
from enum import Enum

from mermaid_sonar.models.diagram import LayoutDirection

# =============================================================================
# Flowchart
# =============================================================================


class NodeShape(Enum):
    """Flowchart node shape, keyed by its delimiter pair."""

    RECTANGLE = "rectangle"
    ROUND = "round"
    STADIUM = "stadium"
    SUBROUTINE = "subroutine"
    CYLINDER = "cylinder"
    CIRCLE = "circle"
    DOUBLE_CIRCLE = "double_circle"
    DIAMOND = "diamond"
    HEXAGON = "hexagon"
    ASYMMETRIC = "asymmetric"
    PARALLELOGRAM = "parallelogram"
    TRAPEZOID = "trapezoid"
    BARE = "bare"


class LinkStyle(Enum):
    """Visual style of a flowchart link."""

    SOLID = "solid"
    DOTTED = "dotted"
    THICK = "thick"
    INVISIBLE = "invisible"


@dataclass
class FlowchartNode:
    """A flowchart node.

    Attributes:
        id: Node identifier
        label: Explicit label text (None when only the identifier is shown)
        shape: Node shape
    """

    id: str
    label: str | None = None
    shape: NodeShape = NodeShape.BARE

    @property
    def is_decision(self) -> bool:
        """Return True for diamond (decision) nodes."""
        return self.shape == NodeShape.DIAMOND


@dataclass
class FlowchartEdge:
    """A flowchart link between two nodes."""

    source: str
    target: str
    label: str | None = None
    style: LinkStyle = LinkStyle.SOLID
    has_arrowhead: bool = True


@dataclass
class FlowchartParse:
    """Structured content of a flowchart / graph diagram.

    Attributes:
        direction: Declared layout direction
        nodes: Node identifier -> node, in first-seen order
        edges: Links in source order
        subgraphs: Subgraph identifiers in declaration order
        max_subgraph_depth: Deepest subgraph nesting reached
    """

    direction: LayoutDirection = LayoutDirection.TB
    nodes: dict[str, FlowchartNode] = field(default_factory=dict)
    edges: list[FlowchartEdge] = field(default_factory=list)
    subgraphs: list[str] = field(default_factory=list)
    max_subgraph_depth: int = 0

    @property
    def decision_nodes(self) -> list[str]:
        """Get identifiers of diamond-shaped nodes."""
        return [node.id for node in self.nodes.values() if node.is_decision]


# =============================================================================
# Class diagram
# =============================================================================


class RelationshipType(Enum):
    """Kind of class-diagram relationship."""

    INHERITANCE = "inheritance"
    COMPOSITION = "composition"
    AGGREGATION = "aggregation"
    ASSOCIATION = "association"
    DEPENDENCY = "dependency"


@dataclass
class ClassNode:
    """A class with its members.

    Attributes:
        name: Class name (generic parameters stripped)
        attributes: Attribute member lines
        methods: Method member lines (anything containing "(")
        annotations: Stereotypes such as "interface"
        label: Optional display label (``class Name["Label"]``)
    """

    name: str
    attributes: list[str] = field(default_factory=list)
    methods: list[str] = field(default_factory=list)
    annotations: list[str] = field(default_factory=list)
    label: str | None = None

    def add_member(self, member: str) -> None:
        """Classify and store a member declaration."""
        member = member.strip()
        if not member:
            return
        if "(" in member:
            self.methods.append(member)
        else:
            self.attributes.append(member)

    @property
    def member_count(self) -> int:
        """Return attribute plus method count."""
        return len(self.attributes) + len(self.methods)


@dataclass
class ClassRelationship:
    """A typed relationship between two classes.

    ``source`` and ``target`` are logical, not syntactic: for inheritance the
    source is the subtype and the target its supertype, whichever way the
    arrow was written.

    Attributes:
        source: Logical origin class
        target: Logical destination class
        type: Relationship kind
        label: Optional relationship label
        multiplicity: (source side, target side) quoted multiplicities
    """

    source: str
    target: str
    type: RelationshipType
    label: str | None = None
    multiplicity: tuple[str | None, str | None] = (None, None)


@dataclass
class ClassDiagramParse:
    """Structured content of a class diagram."""

    direction: LayoutDirection = LayoutDirection.TB
    classes: dict[str, ClassNode] = field(default_factory=dict)
    relationships: list[ClassRelationship] = field(default_factory=list)

    def ensure_class(self, name: str) -> ClassNode:
        """Get a class, creating it on first reference."""
        if name not in self.classes:
            self.classes[name] = ClassNode(name=name)
        return self.classes[name]


# =============================================================================
# Sequence diagram
# =============================================================================


class MessageType(Enum):
    """Kind of sequence-diagram message."""

    SYNC = "sync"
    ASYNC = "async"
    RETURN = "return"


@dataclass
class Participant:
    """A sequence-diagram lifeline.

    Attributes:
        name: Identifier used in messages
        alias: Display text from ``participant X as Alias``
        explicit: True if declared, False if first seen in a message
        kind: "participant" or "actor"
    """

    name: str
    alias: str | None = None
    explicit: bool = False
    kind: str = "participant"

    @property
    def display_name(self) -> str:
        """Return the text rendered in the participant box."""
        return self.alias or self.name


@dataclass
class Message:
    """A message arrow between two participants."""

    source: str
    target: str
    type: MessageType = MessageType.SYNC
    text: str | None = None


@dataclass
class SequenceParse:
    """Structured content of a sequence diagram.

    Attributes:
        participants: Name -> participant, in first-seen order
        messages: Messages in source order
        note_count: Number of notes
        max_nesting_depth: Deepest loop/alt/par-style block nesting
        block_counts: Block keyword -> number of blocks opened
    """

    participants: dict[str, Participant] = field(default_factory=dict)
    messages: list[Message] = field(default_factory=list)
    note_count: int = 0
    max_nesting_depth: int = 0
    block_counts: dict[str, int] = field(default_factory=dict)

    @property
    def has_loop(self) -> bool:
        return self.block_counts.get("loop", 0) > 0

    @property
    def has_alt(self) -> bool:
        return self.block_counts.get("alt", 0) > 0

    @property
    def has_par(self) -> bool:
        return self.block_counts.get("par", 0) > 0


# =============================================================================
# State diagram
# =============================================================================


@dataclass
class State:
    """A state, possibly composite.

    Attributes:
        id: State identifier
        description: Display text (``state "Text" as Id`` or ``Id : Text``)
        stereotype: ``choice``, ``fork``, ``join`` and the like
        parent: Enclosing composite state, None at top level
        is_composite: True if the state has a ``{ ... }`` body
    """

    id: str
    description: str | None = None
    stereotype: str | None = None
    parent: str | None = None
    is_composite: bool = False

    @property
    def is_choice(self) -> bool:
        return self.stereotype == "choice"


@dataclass
class StateTransition:
    """A transition between two regular states."""

    source: str
    target: str
    label: str | None = None


@dataclass
class StateDiagramParse:
    """Structured content of a state diagram.

    Transitions from or to the ``[*]`` pseudo-state are only counted
    (``start_count`` / ``end_count``), never stored as transitions.
    """

    direction: LayoutDirection = LayoutDirection.TB
    states: dict[str, State] = field(default_factory=dict)
    transitions: list[StateTransition] = field(default_factory=list)
    start_count: int = 0
    end_count: int = 0
    max_nesting_depth: int = 0

    @property
    def choice_states(self) -> list[str]:
        """Get identifiers of ``<<choice>>`` states."""
        return [state.id for state in self.states.values() if state.is_choice]


# =============================================================================
# Entity-relationship diagram
# =============================================================================


class Cardinality(Enum):
    """Crow's-foot cardinality."""

    ZERO_OR_ONE = "zero-or-one"
    EXACTLY_ONE = "exactly-one"
    ZERO_OR_MORE = "zero-or-more"
    ONE_OR_MORE = "one-or-more"


class KeyType(Enum):
    """Attribute key marker."""

    PK = "PK"
    FK = "FK"
    UK = "UK"


@dataclass
class ErAttribute:
    """A typed entity attribute."""

    type: str
    name: str
    keys: tuple[KeyType, ...] = ()
    comment: str | None = None

    @property
    def is_primary_key(self) -> bool:
        return KeyType.PK in self.keys

    @property
    def is_foreign_key(self) -> bool:
        return KeyType.FK in self.keys


@dataclass
class ErEntity:
    """An entity with its attributes."""

    name: str
    alias: str | None = None
    attributes: list[ErAttribute] = field(default_factory=list)


@dataclass
class ErRelationship:
    """A relationship between two entities.

    Attributes:
        source: Left-hand entity
        target: Right-hand entity
        source_cardinality: Cardinality marker next to the source
        target_cardinality: Cardinality marker next to the target
        identifying: True for ``--``, False for ``..``
        label: Relationship verb
    """

    source: str
    target: str
    source_cardinality: Cardinality
    target_cardinality: Cardinality
    identifying: bool = True
    label: str | None = None


@dataclass
class ErDiagramParse:
    """Structured content of an entity-relationship diagram."""

    entities: dict[str, ErEntity] = field(default_factory=dict)
    relationships: list[ErRelationship] = field(default_factory=list)

    def ensure_entity(self, name: str) -> ErEntity:
        """Get an entity, creating it on first reference."""
        if name not in self.entities:
            self.entities[name] = ErEntity(name=name)
        return self.entities[name]


# =============================================================================
# Mindmap
# =============================================================================


@dataclass
class MindmapNode:
    """A mindmap node positioned by indentation."""

    id: str
    label: str
    depth: int = 0
    parent: str | None = None


@dataclass
class MindmapParse:
    """Structured content of a mindmap."""

    nodes: list[MindmapNode] = field(default_factory=list)

    @property
    def max_depth(self) -> int:
        return max((node.depth for node in self.nodes), default=0)


DialectParse = (
    FlowchartParse
    | ClassDiagramParse
    | SequenceParse
    | StateDiagramParse
    | ErDiagramParse
    | MindmapParse
)
