"""Comparison shorthands and dictionary filters on top of the base filters."""

from collections.abc import Mapping, Sequence
from typing import Any, Self

from cypher_builder.builders.base import ChainArgument
from cypher_builder.builders.filtering import AND, OR, FiltersGraphTraversal
from cypher_builder.core.errors import ConfigurationError

# Suffix operators accepted by where_filters, as in {"age__gt": 18}
_OPS = {
    "lt": "<",
    "lte": "<=",
    "gt": ">",
    "gte": ">=",
    "ne": "<>",
    "in": "IN",
    "contains": "CONTAINS",
    "startswith": "STARTS WITH",
    "endswith": "ENDS WITH",
}


class FilterHelpers(FiltersGraphTraversal):
    """Mixin providing helper methods for common filter patterns."""

    def where_equals(self, property: str, value: Any, chain: ChainArgument = AND) -> Self:
        return self.where(property, "=", value, chain)

    def where_contains(self, property: str, value: str, chain: ChainArgument = AND) -> Self:
        """Substring match with ``CONTAINS``."""
        return self.where(property, "CONTAINS", value, chain)

    def where_starts_with(self, property: str, value: str, chain: ChainArgument = AND) -> Self:
        return self.where(property, "STARTS WITH", value, chain)

    def where_ends_with(self, property: str, value: str, chain: ChainArgument = AND) -> Self:
        return self.where(property, "ENDS WITH", value, chain)

    def where_regex(self, property: str, pattern: str, chain: ChainArgument = AND) -> Self:
        """Match ``pattern`` with ``=~``; the pattern is bound as a parameter."""
        return self.where(property, "=~", pattern, chain)

    def where_less_than(self, property: str, value: Any, chain: ChainArgument = AND) -> Self:
        return self.where(property, "<", value, chain)

    def where_less_than_or_equal(self, property: str, value: Any, chain: ChainArgument = AND) -> Self:
        return self.where(property, "<=", value, chain)

    def where_greater_than(self, property: str, value: Any, chain: ChainArgument = AND) -> Self:
        return self.where(property, ">", value, chain)

    def where_greater_than_or_equal(self, property: str, value: Any, chain: ChainArgument = AND) -> Self:
        return self.where(property, ">=", value, chain)

    def where_properties_equals(self, left: str, right: str, chain: ChainArgument = AND) -> Self:
        """Compare two properties of the pattern, neither is parameterised."""
        return self.where_properties(left, "=", right, chain)

    def where_properties_in(self, left: str, right: str, chain: ChainArgument = AND) -> Self:
        return self.where_properties(left, "IN", right, chain)

    def where_properties_contains(self, left: str, right: str, chain: ChainArgument = AND) -> Self:
        return self.where_properties(left, "CONTAINS", right, chain)

    def where_properties_starts_with(self, left: str, right: str, chain: ChainArgument = AND) -> Self:
        return self.where_properties(left, "STARTS WITH", right, chain)

    def where_properties_ends_with(self, left: str, right: str, chain: ChainArgument = AND) -> Self:
        return self.where_properties(left, "ENDS WITH", right, chain)

    def where_properties_regex(self, left: str, right: str, chain: ChainArgument = AND) -> Self:
        return self.where_properties(left, "=~", right, chain)

    def where_properties_less_than(self, left: str, right: str, chain: ChainArgument = AND) -> Self:
        return self.where_properties(left, "<", right, chain)

    def where_properties_less_than_or_equal(self, left: str, right: str, chain: ChainArgument = AND) -> Self:
        return self.where_properties(left, "<=", right, chain)

    def where_properties_greater_than(self, left: str, right: str, chain: ChainArgument = AND) -> Self:
        return self.where_properties(left, ">", right, chain)

    def where_properties_greater_than_or_equal(self, left: str, right: str, chain: ChainArgument = AND) -> Self:
        return self.where_properties(left, ">=", right, chain)

    def where_filters(self, filters: Mapping[str, Any], chain: ChainArgument = AND) -> Self:
        """Add filters described by a dictionary.

        Args:
            filters: Dictionary of filters supporting:
                - Simple equality: {"field": "value"}
                - Operators: {"field__gt": 5, "field__contains": "text"}
                - Logical groups: {"$or": [...], "$and": [...]}
                - Null checks: {"field": None}
            chain: Operator joining the first of these filters to the previous one

        Returns:
            Self for method chaining

        Example:
            ```python
            QueryBuilder.from_("m:Memory").where_filters({"$or": [{"type": "A"}, {"type": "B"}], "salience__gt": 0.5})
            # WHERE (m.type = $param0 OR m.type = $param1) AND m.salience > $param2
            ```
        """
        current = chain
        for key, value in filters.items():
            if key in ("$or", "$and"):
                self.where_inner(lambda query, groups=value, key=key: query._where_groups(key, groups), current)
            elif "__" in key:
                field, _, op = key.rpartition("__")
                if op not in _OPS:
                    raise ConfigurationError.for_argument(
                        f"Unsupported filter operator '{op}' in '{key}'",
                        operation="where_filters",
                        field=key,
                        actual_value=value,
                        constraint=f"one of {', '.join(_OPS)}",
                    )
                self.where(field, _OPS[op], value, current)
            elif value is None:
                self.where_null(key, current)
            else:
                self.where_equals(key, value, current)
            current = AND
        return self

    def _where_groups(self, key: str, groups: Sequence[Mapping[str, Any]]) -> Self:
        if isinstance(groups, Mapping) or not all(isinstance(group, Mapping) for group in groups):
            raise ConfigurationError.for_argument(
                f"'{key}' expects a list of filter dictionaries",
                operation="where_filters",
                field=key,
                actual_value=groups,
                constraint="list of dict",
            )

        group_chain = OR if key == "$or" else AND
        for group in groups:
            self.where_inner(lambda query, group=group: query.where_filters(group), group_chain)
        return self
