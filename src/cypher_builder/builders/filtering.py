"""WHERE filters.

Every filter is appended to the structure's filter list together with the
operator chaining it to the filter before it. Each base filter has
``and_``, ``or_`` and ``xor_`` variants; the operator of the first filter
in a list is ignored.
"""

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Self

from cypher_builder.builders.base import BaseBuilder, ChainArgument
from cypher_builder.where import (
    Binary,
    BinaryProperty,
    ChainOperator,
    Inner,
    IsNull,
    Raw,
    SubQueryCount,
    SubQueryExists,
    WhereNode,
    normalize_operator,
)

if TYPE_CHECKING:
    from cypher_builder.builders.sub_query import SubQueryBuilder

SubQueryCallback = Callable[["SubQueryBuilder"], Any]

AND = ChainOperator.AND
OR = ChainOperator.OR
XOR = ChainOperator.XOR


class FiltersGraphTraversal(BaseBuilder):
    """Mixin adding filter nodes to the structure."""

    def _add_where(self, node: WhereNode) -> Self:
        self._structure.wheres.append(node)
        return self

    def where(self, property: str, operator: str, value: Any, chain: ChainArgument = AND) -> Self:
        """Compare a property against a value bound as a parameter.

        Args:
            property: ``"variable.property"`` or a bare property of the entry
            operator: Comparison operator such as ``=``, ``<>`` or ``STARTS WITH``
            value: Bound as a parameter, or emitted verbatim if a RawFragment
            chain: Operator joining this filter to the previous one

        Raises:
            ConfigurationError: If the operator is not supported
        """
        operator = normalize_operator(operator, "where")
        reference = self._string_to_property(property)
        parameter = self._structure.parameters.add(value)
        return self._add_where(Binary(reference, operator, parameter, self._chain(chain)))

    def and_where(self, property: str, operator: str, value: Any) -> Self:
        return self.where(property, operator, value, AND)

    def or_where(self, property: str, operator: str, value: Any) -> Self:
        return self.where(property, operator, value, OR)

    def xor_where(self, property: str, operator: str, value: Any) -> Self:
        return self.where(property, operator, value, XOR)

    def where_properties(self, left: str, operator: str, right: str, chain: ChainArgument = AND) -> Self:
        """Compare two properties with each other."""
        operator = normalize_operator(operator, "where_properties")
        return self._add_where(
            BinaryProperty(
                self._string_to_property(left),
                operator,
                self._string_to_property(right),
                self._chain(chain),
            )
        )

    def and_where_properties(self, left: str, operator: str, right: str) -> Self:
        return self.where_properties(left, operator, right, AND)

    def or_where_properties(self, left: str, operator: str, right: str) -> Self:
        return self.where_properties(left, operator, right, OR)

    def xor_where_properties(self, left: str, operator: str, right: str) -> Self:
        return self.where_properties(left, operator, right, XOR)

    def where_in(self, property: str, values: Sequence[Any], chain: ChainArgument = AND) -> Self:
        """Property value is one of ``values``, bound as a single list parameter."""
        return self.where(property, "IN", list(values), chain)

    def and_where_in(self, property: str, values: Sequence[Any]) -> Self:
        return self.where_in(property, values, AND)

    def or_where_in(self, property: str, values: Sequence[Any]) -> Self:
        return self.where_in(property, values, OR)

    def xor_where_in(self, property: str, values: Sequence[Any]) -> Self:
        return self.where_in(property, values, XOR)

    def where_null(self, property: str, chain: ChainArgument = AND) -> Self:
        """``property IS NULL``"""
        return self._add_where(IsNull(self._string_to_property(property), False, self._chain(chain)))

    def and_where_null(self, property: str) -> Self:
        return self.where_null(property, AND)

    def or_where_null(self, property: str) -> Self:
        return self.where_null(property, OR)

    def xor_where_null(self, property: str) -> Self:
        return self.where_null(property, XOR)

    def where_not_null(self, property: str, chain: ChainArgument = AND) -> Self:
        return self._add_where(IsNull(self._string_to_property(property), True, self._chain(chain)))

    def and_where_not_null(self, property: str) -> Self:
        return self.where_not_null(property, AND)

    def or_where_not_null(self, property: str) -> Self:
        return self.where_not_null(property, OR)

    def xor_where_not_null(self, property: str) -> Self:
        return self.where_not_null(property, XOR)

    # Sub-query predicates

    def where_exists(self, builder: SubQueryCallback, chain: ChainArgument = AND) -> Self:
        """Require the pattern built by ``builder`` to exist.

        Example:
            ```python
            query.where_exists(lambda q: q.matching_relationship("x", "HAHA", "y").matching_node("Y"))
            # WHERE EXISTS { MATCH (y:Y),(x)-[haha:HAHA]->(y) }
            ```
        """
        sub_query = self._create_sub_query_builder()
        builder(sub_query)
        return self._add_where(SubQueryExists(sub_query.structure, False, self._chain(chain)))

    def and_where_exists(self, builder: SubQueryCallback) -> Self:
        return self.where_exists(builder, AND)

    def or_where_exists(self, builder: SubQueryCallback) -> Self:
        return self.where_exists(builder, OR)

    def xor_where_exists(self, builder: SubQueryCallback) -> Self:
        return self.where_exists(builder, XOR)

    def where_not_exists(self, builder: SubQueryCallback, chain: ChainArgument = AND) -> Self:
        """Negated :meth:`where_exists`."""
        sub_query = self._create_sub_query_builder()
        builder(sub_query)
        return self._add_where(SubQueryExists(sub_query.structure, True, self._chain(chain)))

    def and_where_not_exists(self, builder: SubQueryCallback) -> Self:
        return self.where_not_exists(builder, AND)

    def or_where_not_exists(self, builder: SubQueryCallback) -> Self:
        return self.where_not_exists(builder, OR)

    def xor_where_not_exists(self, builder: SubQueryCallback) -> Self:
        return self.where_not_exists(builder, XOR)

    def where_count(
        self,
        builder: SubQueryCallback,
        count: int,
        operator: str = "=",
        chain: ChainArgument = AND,
    ) -> Self:
        """Compare the number of matches of a sub-query against ``count``."""
        operator = normalize_operator(operator, "where_count")
        sub_query = self._create_sub_query_builder()
        builder(sub_query)
        parameter = self._structure.parameters.add(count)
        return self._add_where(SubQueryCount(sub_query.structure, operator, parameter, self._chain(chain)))

    def and_where_count(self, builder: SubQueryCallback, count: int, operator: str = "=") -> Self:
        return self.where_count(builder, count, operator, AND)

    def or_where_count(self, builder: SubQueryCallback, count: int, operator: str = "=") -> Self:
        return self.where_count(builder, count, operator, OR)

    def xor_where_count(self, builder: SubQueryCallback, count: int, operator: str = "=") -> Self:
        return self.where_count(builder, count, operator, XOR)

    # Groups

    def where_inner(self, builder: SubQueryCallback, chain: ChainArgument = AND) -> Self:
        """Group the filters added by ``builder`` in parentheses.

        Nothing is added when ``builder`` adds no filters.

        Example:
            ```python
            query.where_equals("a", 1).where_inner(lambda q: q.where_equals("b", 2).or_where("c", "=", 3))
            # WHERE n.a = $param0 AND (n.b = $param1 OR n.c = $param2)
            ```
        """
        sub_query = self._create_sub_query_builder()
        builder(sub_query)
        if sub_query.structure.wheres:
            self._add_where(Inner(list(sub_query.structure.wheres), False, self._chain(chain)))
        return self

    def and_where_inner(self, builder: SubQueryCallback) -> Self:
        return self.where_inner(builder, AND)

    def or_where_inner(self, builder: SubQueryCallback) -> Self:
        return self.where_inner(builder, OR)

    def xor_where_inner(self, builder: SubQueryCallback) -> Self:
        return self.where_inner(builder, XOR)

    def where_not(self, builder: SubQueryCallback, chain: ChainArgument = AND) -> Self:
        """Negate the filters added by ``builder`` as ``NOT (...)``."""
        sub_query = self._create_sub_query_builder()
        builder(sub_query)
        if sub_query.structure.wheres:
            self._add_where(Inner(list(sub_query.structure.wheres), True, self._chain(chain)))
        return self

    def and_where_not(self, builder: SubQueryCallback) -> Self:
        return self.where_not(builder, AND)

    def or_where_not(self, builder: SubQueryCallback) -> Self:
        return self.where_not(builder, OR)

    def xor_where_not(self, builder: SubQueryCallback) -> Self:
        return self.where_not(builder, XOR)

    def where_raw(self, cypher: str, chain: ChainArgument = AND) -> Self:
        """Add a raw boolean expression; it is always parenthesised."""
        return self._add_where(Raw(cypher, self._chain(chain)))

    def and_where_raw(self, cypher: str) -> Self:
        return self.where_raw(cypher, AND)

    def or_where_raw(self, cypher: str) -> Self:
        return self.where_raw(cypher, OR)

    def xor_where_raw(self, cypher: str) -> Self:
        return self.where_raw(cypher, XOR)
