"""RETURN projections, ordering and pagination."""

from typing import Self

from cypher_builder.builders.base import BaseBuilder, PropertyArgument
from cypher_builder.core.errors import ConfigurationError
from cypher_builder.expressions import Alias, FunctionCall, RawFragment, Variable
from cypher_builder.structure import OrderDirection


class ReturnsGraphData(BaseBuilder):
    """Mixin collecting the projection and pagination of a query."""

    def returning(self, *properties: str) -> Self:
        """Project properties.

        Bare keys are properties of the entry and keep their key as alias;
        ``"x AS y"`` aliases explicitly.

        Example:
            ```python
            QueryBuilder.from_("b:Bar").returning("foo", "b.boo", "zoo AS z")
            # MATCH (b:Bar) RETURN b.foo AS foo, b.boo, b.zoo AS z
            ```
        """
        self._structure.returns.extend(self._string_to_aliasable_property(property) for property in properties)
        return self

    def returning_all(self) -> Self:
        """``RETURN *``"""
        self._structure.returns = [RawFragment("*")]
        return self

    def returning_raw(self, *cypher: str) -> Self:
        """Return verbatim projections."""
        self._structure.returns.extend(RawFragment(fragment) for fragment in cypher)
        return self

    def returning_variables(self, *variables: str) -> Self:
        """Return whole variables rather than their properties."""
        self._structure.returns.extend(Variable(variable) for variable in variables)
        return self

    def returning_procedure(self, function: str, alias: str, *properties: PropertyArgument) -> Self:
        """Project ``function(properties...) AS alias``."""
        arguments = tuple(self._to_expression(property) for property in properties)
        self._structure.returns.append(Alias(FunctionCall(function, arguments), alias))
        return self

    def distinct(self, distinct: bool = True) -> Self:
        self._structure.distinct = distinct
        return self

    def skipping(self, skip: int) -> Self:
        """``SKIP`` the first ``skip`` rows."""
        self._structure.skip = skip
        return self

    def limiting(self, limit: int) -> Self:
        """``LIMIT`` the rows returned."""
        self._structure.limit = limit
        return self

    def paginate(self, page: int, page_size: int) -> Self:
        """Skip to a page and limit to its size.

        Args:
            page: Page number (1-based)
            page_size: Number of records per page

        Returns:
            Self for method chaining
        """
        if page < 1:
            raise ConfigurationError.for_argument(
                "Page number must be greater than or equal to 1",
                operation="paginate",
                field="page",
                actual_value=page,
                constraint=">= 1",
            )
        if page_size < 1:
            raise ConfigurationError.for_argument(
                "Page size must be greater than or equal to 1",
                operation="paginate",
                field="page_size",
                actual_value=page_size,
                constraint=">= 1",
            )

        return self.skipping((page - 1) * page_size).limiting(page_size)

    def ordering_by(self, direction: OrderDirection | str = OrderDirection.ASC, *properties: PropertyArgument) -> Self:
        """Order by properties; the direction applies to the whole list."""
        try:
            self._structure.order_direction = OrderDirection(str(getattr(direction, "value", direction)).upper())
        except ValueError as e:
            raise ConfigurationError.for_argument(
                f"Invalid order direction '{direction}'",
                operation="ordering_by",
                field="direction",
                actual_value=direction,
                constraint="ASC or DESC",
            ) from e

        self._structure.order_by.extend(self._to_expression(property) for property in properties)
        return self
