"""Graph pattern store.

Accumulates node and relationship declarations tagged with the intent they
were registered under (match, optional match, merge or create). At most one
live element exists per variable name: registering a name again merges into
the existing element and the later intent wins.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from cypher_builder.core.errors import ConfigurationError, PatternConflictError
from cypher_builder.core.logging import get_logger
from cypher_builder.expressions import PropertyAssignment, RawFragment, Variable
from cypher_builder.pattern.decoding import (
    Direction,
    NameSequence,
    coalesce,
    coalesce_strict,
    decode,
    default_node_name,
    default_relationship_name,
    extract_direction,
)

logger = get_logger(__name__)

LabelArgument = str | list[str] | tuple[str, ...] | None


class IntentMode(str, Enum):
    MATCH = "match"
    OPTIONAL_MATCH = "optional-match"
    MERGE = "merge"
    CREATE = "create"


class ChunkKind(str, Enum):
    """Views over the store consumed by the grammar passes."""

    MATCH = "match"
    MATCH_STRICT = "match-strict"
    MATCH_OPTIONAL = "match-optional"
    MERGE = "merge"
    CREATE = "create"


_CHUNK_MODES: dict[ChunkKind, frozenset[IntentMode]] = {
    ChunkKind.MATCH: frozenset({IntentMode.MATCH, IntentMode.OPTIONAL_MATCH}),
    ChunkKind.MATCH_STRICT: frozenset({IntentMode.MATCH}),
    ChunkKind.MATCH_OPTIONAL: frozenset({IntentMode.OPTIONAL_MATCH}),
    ChunkKind.MERGE: frozenset({IntentMode.MERGE}),
    ChunkKind.CREATE: frozenset({IntentMode.CREATE}),
}


@dataclass
class Node:
    name: Variable
    labels: list[str] = field(default_factory=list)
    properties: list[PropertyAssignment] = field(default_factory=list)


@dataclass
class Relationship:
    name: Variable
    left: Variable
    right: Variable
    types: list[str] = field(default_factory=list)
    properties: list[PropertyAssignment] = field(default_factory=list)
    direction: Direction = Direction.LEFT_TO_RIGHT


PatternElement = Node | Relationship | RawFragment

# Raw fragments render first, then nodes, then relationships
_RENDER_RANK: dict[type, int] = {RawFragment: 0, Node: 1, Relationship: 2}


@dataclass
class _Entry:
    element: PatternElement
    mode: IntentMode


class GraphPatternStore:
    """Registry of pattern elements for one query.

    Args:
        names: Anonymous name sequence; forks of this store share it
    """

    def __init__(self, names: NameSequence | None = None) -> None:
        self._names = names or NameSequence()
        self._entries: list[_Entry] = []
        self._by_name: dict[str, _Entry] = {}

    def fork(self) -> "GraphPatternStore":
        """Create an empty store for a sub-query sharing the anonymous name sequence."""
        return GraphPatternStore(self._names)

    @property
    def names(self) -> NameSequence:
        return self._names

    # Nodes

    def add_matching_node(self, label: LabelArgument = None, name: str | None = None, optional: bool = False) -> Node:
        """Register a node to MATCH, or OPTIONAL MATCH when ``optional``."""
        mode = IntentMode.OPTIONAL_MATCH if optional else IntentMode.MATCH
        return self._register_node(label, name, mode)

    def add_creating_node(
        self,
        label: LabelArgument,
        name: str | None = None,
        properties: Iterable[PropertyAssignment] = (),
    ) -> Node:
        return self._register_node(coalesce_strict(label, "creating_node"), name, IntentMode.CREATE, properties)

    def add_merging_node(
        self,
        label: LabelArgument,
        name: str | None = None,
        properties: Iterable[PropertyAssignment] = (),
    ) -> Node:
        return self._register_node(coalesce_strict(label, "merging_node"), name, IntentMode.MERGE, properties)

    # Relationships

    def add_matching_relationship(
        self,
        left: str | None,
        right: str | None,
        type_: LabelArgument = None,
        name: str | None = None,
        direction: Direction | None = None,
        optional: bool = False,
    ) -> Relationship:
        mode = IntentMode.OPTIONAL_MATCH if optional else IntentMode.MATCH
        return self._register_relationship(left, right, type_, name, direction, mode)

    def add_creating_relationship(
        self,
        left: str | None,
        right: str | None,
        type_: LabelArgument,
        name: str | None = None,
        properties: Iterable[PropertyAssignment] = (),
        direction: Direction | None = None,
    ) -> Relationship:
        """Register a relationship to CREATE; unlabelled endpoints are not registered."""
        return self._register_relationship(
            left, right, coalesce_strict(type_, "creating_relationship"), name, direction, IntentMode.CREATE, properties
        )

    def add_merging_relationship(
        self,
        left: str | None,
        right: str | None,
        type_: LabelArgument,
        name: str | None = None,
        properties: Iterable[PropertyAssignment] = (),
        direction: Direction | None = None,
    ) -> Relationship:
        return self._register_relationship(
            left, right, coalesce_strict(type_, "merging_relationship"), name, direction, IntentMode.MERGE, properties
        )

    # Raw fragments

    def add_matching_raw(self, cypher: str, optional: bool = False) -> RawFragment:
        return self._register_raw(cypher, IntentMode.OPTIONAL_MATCH if optional else IntentMode.MATCH)

    def add_creating_raw(self, cypher: str) -> RawFragment:
        return self._register_raw(cypher, IntentMode.CREATE)

    def add_merging_raw(self, cypher: str) -> RawFragment:
        """Raw fragments are never merged by name."""
        return self._register_raw(cypher, IntentMode.MERGE)

    # Access

    def assign(self, name: str, properties: Iterable[PropertyAssignment], mode: IntentMode) -> PatternElement:
        """Append properties to a registered element and switch it to ``mode``."""
        entry = self._by_name.get(name)
        if entry is None:
            raise ConfigurationError.for_argument(
                f"No node or relationship named '{name}' has been declared",
                operation="assign",
                field="name",
                actual_value=name,
            )

        entry.element.properties.extend(properties)
        entry.mode = mode
        return entry.element

    def get(self, name: str) -> Node | Relationship | None:
        """Element registered under ``name``, if any."""
        entry = self._by_name.get(name)
        if entry is None or isinstance(entry.element, RawFragment):
            return None
        return entry.element

    def mode_of(self, name: str) -> IntentMode | None:
        """Intent the element named ``name`` was last registered with."""
        entry = self._by_name.get(name)
        return entry.mode if entry else None

    def chunk(self, kind: ChunkKind) -> list[PatternElement]:
        """Elements registered under the modes ``kind`` covers, in render order."""
        modes = _CHUNK_MODES[kind]
        elements = [entry.element for entry in self._entries if entry.mode in modes]
        # sorted() is stable, registration order is kept within each rank
        return sorted(elements, key=lambda element: _RENDER_RANK[type(element)])

    def __len__(self) -> int:
        return len(self._entries)

    # Registration

    def _register_node(
        self,
        label: LabelArgument,
        name: str | None,
        mode: IntentMode,
        properties: Iterable[PropertyAssignment] = (),
    ) -> Node:
        resolved, labels = decode(label, name, self._names, default_node_name)

        entry = self._by_name.get(resolved)
        if entry is not None:
            if not isinstance(entry.element, Node):
                raise PatternConflictError(
                    f"'{resolved}' is already declared as a relationship and cannot be used as a node",
                    {"source": "pattern", "operation": "register_node", "field": "name"},
                )
            node = entry.element
            node.labels.extend(label for label in labels if label not in node.labels)
            node.properties.extend(properties)
            entry.mode = mode
            return node

        node = Node(Variable(resolved), labels, list(properties))
        self._append(resolved, node, mode)
        return node

    def _register_relationship(
        self,
        left: str | None,
        right: str | None,
        type_: LabelArgument,
        name: str | None,
        direction: Direction | None,
        mode: IntentMode,
        properties: Iterable[PropertyAssignment] = (),
    ) -> Relationship:
        types, marked = extract_direction(coalesce(type_))
        direction = direction or marked or Direction.LEFT_TO_RIGHT

        # Endpoints resolve before the relationship so that they are registered first
        left_variable = self._resolve_endpoint(left, mode)
        right_variable = self._resolve_endpoint(right, mode)

        resolved, types = decode(types, name, self._names, default_relationship_name)

        entry = self._by_name.get(resolved)
        if entry is not None:
            if not isinstance(entry.element, Relationship):
                raise PatternConflictError(
                    f"'{resolved}' is already declared as a node and cannot be used as a relationship",
                    {"source": "pattern", "operation": "register_relationship", "field": "name"},
                )
            relationship = entry.element
            relationship.types.extend(t for t in types if t not in relationship.types)
            relationship.properties.extend(properties)
            entry.mode = mode
            return relationship

        relationship = Relationship(
            name=Variable(resolved),
            left=left_variable,
            right=right_variable,
            types=types,
            properties=list(properties),
            direction=direction,
        )
        self._append(resolved, relationship, mode)
        return relationship

    def _resolve_endpoint(self, endpoint: str | None, mode: IntentMode) -> Variable:
        if endpoint is None or not endpoint.strip():
            return Variable(self._names.next())

        name, labels = decode(None, endpoint, self._names, default_node_name)
        if labels:
            self._register_node(labels, name, mode)
        return Variable(name)

    def _register_raw(self, cypher: str, mode: IntentMode) -> RawFragment:
        fragment = RawFragment(cypher)
        self._entries.append(_Entry(fragment, mode))
        return fragment

    def _append(self, name: str, element: Node | Relationship, mode: IntentMode) -> None:
        entry = _Entry(element, mode)
        self._entries.append(entry)
        self._by_name[name] = entry
        logger.debug("Registered pattern element", name=name, kind=type(element).__name__, mode=mode.value)
