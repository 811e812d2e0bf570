"""The application-facing query builder."""

from typing import Any

from cypher_builder.adapter import BuilderToCypherAdapter, QueryKind
from cypher_builder.builders.helpers import FilterHelpers
from cypher_builder.builders.matching import MatchesGraphs
from cypher_builder.builders.running import RunsQueries
from cypher_builder.builders.sub_query import CallsSubQueries
from cypher_builder.builders.union import UnionisesQueries
from cypher_builder.core.errors import ConfigurationError
from cypher_builder.expressions import ParameterStack, RawFragment
from cypher_builder.grammar.clauses import CompiledQuery
from cypher_builder.pattern.builder import PatternContext
from cypher_builder.pattern.decoding import Direction, has_direction_marker
from cypher_builder.pattern.store import ChunkKind, GraphPatternStore, LabelArgument
from cypher_builder.structure import QueryStructure


class QueryBuilder(
    MatchesGraphs,
    CallsSubQueries,
    FilterHelpers,
    UnionisesQueries,
    RunsQueries,
):
    """Fluent builder compiling to parameterized Cypher.

    A builder starts from its entry element: bare property keys passed to
    later calls are properties of the entry.

    Example:
        ```python
        text, parameters = (
            QueryBuilder.from_("p:Person")
            .matching_relationship("p", "KNOWS", "friend:Person")
            .where_equals("name", "Ada")
            .returning("friend.name AS name")
            .build()
        )
        # MATCH (p:Person),(friend:Person),(p)-[knows:KNOWS]->(friend)
        # WHERE p.name = $param0 RETURN friend.name AS name
        ```

    Args:
        structure: Structure to build on
        adapter: Adapter compiling the structure, a new one when omitted
    """

    def __init__(self, structure: QueryStructure, adapter: BuilderToCypherAdapter | None = None) -> None:
        super().__init__(structure)
        self._adapter = adapter or BuilderToCypherAdapter()

    # Construction

    @classmethod
    def from_(
        cls,
        label_or_type: LabelArgument | PatternContext = None,
        name: str | None = None,
        optional: bool = False,
        *,
        store: GraphPatternStore | None = None,
        parameters: ParameterStack | None = None,
    ) -> "QueryBuilder":
        """Start from a node, a relationship (``"TYPE>"``, ``"<TYPE"``) or a pattern builder."""
        if isinstance(label_or_type, PatternContext):
            return cls.from_pattern_builder(label_or_type, parameters=parameters)

        first = label_or_type if isinstance(label_or_type, str) else next(iter(label_or_type or []), "")
        if first and has_direction_marker(first):
            return cls.from_relationship(label_or_type, name, optional=optional, store=store, parameters=parameters)
        return cls.from_node(label_or_type, name, optional, store=store, parameters=parameters)

    @classmethod
    def from_node(
        cls,
        label: LabelArgument = None,
        name: str | None = None,
        optional: bool = False,
        *,
        store: GraphPatternStore | None = None,
        parameters: ParameterStack | None = None,
    ) -> "QueryBuilder":
        store = store if store is not None else GraphPatternStore()
        node = store.add_matching_node(label, name, optional)
        return cls(QueryStructure(parameters if parameters is not None else ParameterStack(), store, node.name))

    @classmethod
    def from_relationship(
        cls,
        type_: LabelArgument = None,
        name: str | None = None,
        direction: Direction | None = None,
        optional: bool = False,
        *,
        store: GraphPatternStore | None = None,
        parameters: ParameterStack | None = None,
    ) -> "QueryBuilder":
        """Start from a relationship between two anonymous nodes."""
        store = store if store is not None else GraphPatternStore()
        relationship = store.add_matching_relationship(None, None, type_, name, direction, optional)
        return cls(
            QueryStructure(parameters if parameters is not None else ParameterStack(), store, relationship.name)
        )

    @classmethod
    def from_pattern_builder(
        cls,
        context: PatternContext,
        *,
        parameters: ParameterStack | None = None,
    ) -> "QueryBuilder":
        """Start from the store of a pattern built with GraphPatternBuilder.

        The first matched element becomes the entry.

        Raises:
            ConfigurationError: If the pattern matches no named element
        """
        store = context.store
        entry = next(
            (element.name for element in store.chunk(ChunkKind.MATCH) if not isinstance(element, RawFragment)),
            None,
        )
        if entry is None:
            raise ConfigurationError.for_argument(
                "A pattern builder needs a named match element to start a query from",
                operation="from_pattern_builder",
                field="context",
                constraint="at least one matched node or relationship",
            )
        return cls(QueryStructure(parameters if parameters is not None else ParameterStack(), store, entry))

    # Compilation

    def to_query(self, kind: QueryKind = QueryKind.FULL) -> CompiledQuery:
        """The compiled clauses."""
        return self._adapter.compile(self._structure, kind)

    def to_cypher(self, kind: QueryKind = QueryKind.FULL) -> str:
        """Compile to text with parameter placeholders; the builder stays reusable."""
        return self.to_query(kind).to_text()

    def build(self, kind: QueryKind = QueryKind.FULL) -> tuple[str, dict[str, Any]]:
        """Compile to ``(text, parameters)``."""
        return self._adapter.build(self._structure, kind)

    def __str__(self) -> str:
        return self.to_cypher()
