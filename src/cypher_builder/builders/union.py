"""UNION of two queries."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Self

from cypher_builder.builders.base import BaseBuilder
from cypher_builder.core.errors import ConfigurationError
from cypher_builder.expressions import ParameterStack
from cypher_builder.pattern.decoding import NameSequence
from cypher_builder.pattern.store import GraphPatternStore, LabelArgument

if TYPE_CHECKING:
    from cypher_builder.builders.query import QueryBuilder


class UnionStarter:
    """Entry points for the second query of a union.

    Queries started here bind their parameters in the stack of the first
    query and draw anonymous names from its sequence.
    """

    def __init__(self, parameters: ParameterStack, names: NameSequence) -> None:
        self._parameters = parameters
        self._names = names

    def from_(self, label_or_type: LabelArgument = None, name: str | None = None, optional: bool = False) -> "QueryBuilder":
        from cypher_builder.builders.query import QueryBuilder

        return QueryBuilder.from_(
            label_or_type, name, optional, store=GraphPatternStore(self._names), parameters=self._parameters
        )

    def from_node(self, label: LabelArgument = None, name: str | None = None, optional: bool = False) -> "QueryBuilder":
        from cypher_builder.builders.query import QueryBuilder

        return QueryBuilder.from_node(
            label, name, optional, store=GraphPatternStore(self._names), parameters=self._parameters
        )

    def from_relationship(
        self,
        type_: LabelArgument = None,
        name: str | None = None,
        optional: bool = False,
    ) -> "QueryBuilder":
        from cypher_builder.builders.query import QueryBuilder

        return QueryBuilder.from_relationship(
            type_, name, optional=optional, store=GraphPatternStore(self._names), parameters=self._parameters
        )


class UnionisesQueries(BaseBuilder):
    """Mixin attaching the query that follows ``UNION``."""

    def unioning(self, query: "QueryBuilder | Callable[[UnionStarter], QueryBuilder]") -> Self:
        """Append ``UNION`` and a second query.

        Pass a callback to start the second query from a :class:`UnionStarter`
        so both queries number their parameters in one sequence. A finished
        builder is accepted as long as it has not bound parameters of its own.

        Example:
            ```python
            QueryBuilder.from_("a:A").returning("name").unioning(
                lambda union: union.from_("b:B").returning("name")
            )
            ```

        Raises:
            ConfigurationError: If the second query bound parameters in a separate stack
        """
        if callable(query) and not isinstance(query, BaseBuilder):
            starter = UnionStarter(self._structure.parameters, self._structure.pattern.names)
            query = query(starter)
            if not isinstance(query, BaseBuilder):
                raise ConfigurationError.for_argument(
                    "The union callback must return the query it started",
                    operation="unioning",
                    field="query",
                    actual_value=query,
                )

        union = query.structure
        if union.parameters is not self._structure.parameters:
            if len(union.parameters):
                raise ConfigurationError.for_argument(
                    "The union query binds parameters in a separate stack",
                    operation="unioning",
                    field="query",
                    constraint="start it from the union callback",
                )
            union.parameters = self._structure.parameters

        self._structure.union = union
        return self
