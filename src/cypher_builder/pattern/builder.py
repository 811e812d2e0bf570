"""Fluent navigation over a graph pattern store.

A pattern is described as a tree walk: node contexts open relationships,
relationship contexts collect child nodes, and ``end()`` climbs back up.
Relationships are only registered when their context is ended, because the
number of children decides how many of them there are.

Example:
    ```python
    pattern = (
        GraphPatternBuilder.from_("Person", "p")
        .add_relationship("KNOWS")
        .add_child_node("Person", "friend").end()
        .end()
    )
    ```
"""

from abc import ABC, abstractmethod

from cypher_builder.core.errors import ConfigurationError
from cypher_builder.pattern.decoding import Direction, has_direction_marker
from cypher_builder.pattern.store import GraphPatternStore, LabelArgument


class PatternContext(ABC):
    """One position in the pattern tree.

    Args:
        store: Store every context of the tree registers into
        parent: Context this one was opened from, None for the root
        optional: Whether elements registered below are optional matches
    """

    def __init__(self, store: GraphPatternStore, parent: "PatternContext | None", optional: bool) -> None:
        self._store = store
        self._parent = parent
        self._optional = optional
        self._children: list[NodeContext] = []

    @property
    def store(self) -> GraphPatternStore:
        return self._store

    @property
    def parent(self) -> "PatternContext | None":
        return self._parent

    @property
    def optional(self) -> bool:
        return self._optional

    @property
    def children(self) -> list["NodeContext"]:
        return list(self._children)

    def add_child_node(
        self,
        label: LabelArgument = None,
        name: str | None = None,
        optional: bool = False,
    ) -> "NodeContext":
        """Register a node below this context and descend into it."""
        is_optional = self._optional or optional
        node = self._store.add_matching_node(label, name, is_optional)
        child = NodeContext(self._store, self, is_optional, node.name.name)
        self._children.append(child)
        return child

    @abstractmethod
    def add_relationship(
        self,
        type_: LabelArgument = None,
        name: str | None = None,
        direction: Direction | None = None,
        optional: bool = False,
    ) -> "RelationshipContext": ...

    def end(self) -> "PatternContext":
        """Ascend to the parent context."""
        if self._parent is None:
            raise ConfigurationError.for_argument(
                "Cannot end the root of a pattern",
                operation="end",
                constraint="context must have a parent",
            )
        return self._parent


class NodeContext(PatternContext):
    """Context positioned on a registered node.

    ``skip`` marks the anonymous intermediate nodes of multi-hop chains;
    ascending from a relationship passes through them.
    """

    def __init__(
        self,
        store: GraphPatternStore,
        parent: PatternContext | None,
        optional: bool,
        name: str,
        skip: bool = False,
    ) -> None:
        super().__init__(store, parent, optional)
        self.name = name
        self.skip = skip

    def add_relationship(
        self,
        type_: LabelArgument = None,
        name: str | None = None,
        direction: Direction | None = None,
        optional: bool = False,
    ) -> "RelationshipContext":
        """Describe a relationship leaving this node; its far end is added on the returned context."""
        return RelationshipContext(self._store, self, self._optional or optional, type_, name, direction)


class RelationshipContext(PatternContext):
    """Context describing relationships leaving the parent node."""

    def __init__(
        self,
        store: GraphPatternStore,
        parent: NodeContext,
        optional: bool,
        type_: LabelArgument,
        name: str | None,
        direction: Direction | None,
    ) -> None:
        super().__init__(store, parent, optional)
        self._origin = parent
        self.type = type_
        self.name = name
        self.direction = direction

    def add_relationship(
        self,
        type_: LabelArgument = None,
        name: str | None = None,
        direction: Direction | None = None,
        optional: bool = False,
    ) -> "RelationshipContext":
        """Continue the chain through an anonymous intermediate node."""
        is_optional = self._optional or optional
        node = self._store.add_matching_node(None, None, is_optional)
        intermediate = NodeContext(self._store, self, is_optional, node.name.name, skip=True)
        self._children.append(intermediate)
        return intermediate.add_relationship(type_, name, direction, optional)

    def end(self) -> PatternContext:
        """Register the relationship(s) and ascend past the origin node.

        With several children the relationships are named ``base``,
        ``base1``, ``base2``, ... in the order the children were added.
        """
        left = self._origin.name
        if not self._children:
            self._store.add_matching_relationship(left, None, self.type, self.name, self.direction, self._optional)
        else:
            first, *rest = self._children
            base = self._store.add_matching_relationship(
                left, first.name, self.type, self.name, self.direction, self._optional
            ).name.name
            for index, child in enumerate(rest, start=1):
                self._store.add_matching_relationship(
                    left, child.name, self.type, f"{base}{index}", self.direction, self._optional
                )

        if self._origin.skip and self._origin.parent is not None:
            return self._origin.end()
        return self._origin


class GraphPatternBuilder:
    """Entry points creating the root context of a pattern tree."""

    @staticmethod
    def from_(
        label_or_type: LabelArgument = None,
        name: str | None = None,
        optional: bool = False,
        store: GraphPatternStore | None = None,
    ) -> PatternContext:
        """Start from a node, or from a relationship when the token carries ``<``/``>``."""
        if isinstance(label_or_type, str) and has_direction_marker(label_or_type):
            return GraphPatternBuilder.from_relationship(label_or_type, name, optional=optional, store=store)
        return GraphPatternBuilder.from_node(label_or_type, name, optional, store)

    @staticmethod
    def from_node(
        label: LabelArgument = None,
        name: str | None = None,
        optional: bool = False,
        store: GraphPatternStore | None = None,
    ) -> NodeContext:
        store = store if store is not None else GraphPatternStore()
        node = store.add_matching_node(label, name, optional)
        return NodeContext(store, None, optional, node.name.name)

    @staticmethod
    def from_relationship(
        type_: LabelArgument = None,
        name: str | None = None,
        direction: Direction | None = None,
        optional: bool = False,
        store: GraphPatternStore | None = None,
    ) -> RelationshipContext:
        """Start from a relationship whose left end is an anonymous node."""
        store = store if store is not None else GraphPatternStore()
        root = store.add_matching_node(None, None, optional)
        return NodeContext(store, None, optional, root.name.name, skip=True).add_relationship(
            type_, name, direction, optional
        )
