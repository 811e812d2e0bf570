"""CALL sub-queries and the builder used inside them."""

from collections.abc import Callable
from typing import Any, Self

from cypher_builder.builders.base import BaseBuilder
from cypher_builder.builders.helpers import FilterHelpers
from cypher_builder.builders.matching import MatchesGraphs
from cypher_builder.builders.returning import ReturnsGraphData
from cypher_builder.core.errors import ConfigurationError


class CallsSubQueries(BaseBuilder):
    """Mixin appending ``CALL { ... }`` sub-queries."""

    def calling(self, sub_query: "Callable[[SubQueryBuilder], Any] | SubQueryBuilder") -> Self:
        """Call a sub-query.

        The sub-query shares this query's parameters and entry, imports the
        outer scope with ``WITH *`` and has its own pattern.

        Example:
            ```python
            query.calling(lambda q: q.matching_node("XO", "x").returning("x.y"))
            # CALL { WITH * MATCH (x:XO) RETURN x.y }
            ```
        """
        if isinstance(sub_query, SubQueryBuilder):
            builder = sub_query
            if builder.structure.parameters is not self._structure.parameters:
                raise ConfigurationError.for_argument(
                    "A sub-query builder must be created from the query calling it",
                    operation="calling",
                    field="sub_query",
                    constraint="shares the parameters of the calling query",
                )
        else:
            builder = self._create_sub_query_builder()
            sub_query(builder)

        self._structure.sub_queries.append(builder.structure)
        return self

    def sub_query(self) -> "SubQueryBuilder":
        """Create a sub-query builder to pass to :meth:`calling` later."""
        return self._create_sub_query_builder()


class SubQueryBuilder(MatchesGraphs, CallsSubQueries, FilterHelpers, ReturnsGraphData):
    """Builder for the body of CALL, EXISTS and COUNT sub-queries and filter groups.

    It only matches, filters, calls and returns; writes belong to the
    outer query.
    """
