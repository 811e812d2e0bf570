"""Execution of built queries through an attached ExecutionContext.

Reads and aggregations run on a clone of the structure, so the projection
they install never leaks into the builder. Writes record their values on
the builder first, like their fluent counterparts, then run.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Self

from cypher_builder.adapter import BuilderToCypherAdapter, QueryKind
from cypher_builder.builders.base import PropertyArgument
from cypher_builder.builders.creating import CreatesGraphElements, MergesGraphElements
from cypher_builder.builders.returning import ReturnsGraphData
from cypher_builder.builders.setting import DeletesGraphElements, RemovesGraphData, SetsProperties
from cypher_builder.core.errors import ConfigurationError
from cypher_builder.expressions import Alias, Distinct, Expression, FunctionCall, RawFragment
from cypher_builder.interfaces import QueryRunner
from cypher_builder.neo4j.execution import QueryResult
from cypher_builder.structure import QueryStructure

AGGREGATE_ALIAS = "aggregate"


class RunsQueries(
    SetsProperties,
    CreatesGraphElements,
    MergesGraphElements,
    DeletesGraphElements,
    RemovesGraphData,
    ReturnsGraphData,
):
    """Mixin sending queries to the database."""

    _adapter: BuilderToCypherAdapter
    _runner: QueryRunner | None = None
    _connection: str | None = None

    def using_context(self, context: QueryRunner) -> Self:
        """Attach the execution context queries are run with."""
        self._runner = context
        return self

    def using_connection(self, connection: str | None) -> Self:
        """Run on the driver registered under ``connection`` instead of the default one."""
        self._connection = connection
        return self

    async def _run(self, kind: QueryKind, operation: str, structure: QueryStructure | None = None) -> QueryResult:
        if self._runner is None:
            raise ConfigurationError.for_argument(
                "No execution context is attached to this builder",
                operation=operation,
                constraint="call using_context() first",
            )
        return await self._adapter.run(
            self._runner,
            structure if structure is not None else self._structure,
            kind,
            self._connection,
        )

    # Reads

    async def execute(self) -> QueryResult:
        """Run the whole query as built."""
        return await self._run(QueryKind.FULL, "execute")

    async def get(self, *properties: str) -> QueryResult:
        """Run the read part of the query, projecting ``properties`` when given."""
        if properties:
            self.returning(*properties)
        return await self._run(QueryKind.READ, "get")

    async def return_(self, *properties: str) -> QueryResult:
        return await self.get(*properties)

    async def return_all(self) -> QueryResult:
        self.returning_all()
        return await self._run(QueryKind.READ, "return_all")

    async def return_raw(self, *cypher: str) -> QueryResult:
        self.returning_raw(*cypher)
        return await self._run(QueryKind.READ, "return_raw")

    async def first(self) -> dict[str, Any]:
        """The first record of the query.

        Raises:
            NoResultError: If the query matches nothing
        """
        structure = self._structure.clone()
        structure.limit = 1
        result = await self._run(QueryKind.FULL, "first", structure)
        return result.first()

    async def only(self) -> Any:
        """The first column of the first record."""
        record = await self.first()
        return next(iter(record.values()), None)

    async def pluck(self, property: str) -> list[Any]:
        """One property of every matched record."""
        reference = self._string_to_property(property)
        structure = self._structure.clone()
        structure.returns = [Alias(reference, reference.key)]
        result = await self._run(QueryKind.READ, "pluck", structure)
        return result.pluck(reference.key)

    # Aggregations

    async def count(self, property: PropertyArgument | None = None, distinct: bool = False) -> int:
        """``count(*)``, or ``count([DISTINCT] property)``."""
        expression: Expression = RawFragment("*") if property is None else self._to_expression(property)
        if distinct:
            expression = Distinct(expression)
        return await self._aggregate("count", expression)

    async def average(self, property: PropertyArgument) -> Any:
        return await self.aggregate("avg", property)

    async def collect(self, property: PropertyArgument) -> list[Any]:
        return await self.aggregate("collect", property)

    async def max(self, property: PropertyArgument) -> Any:
        return await self.aggregate("max", property)

    async def min(self, property: PropertyArgument) -> Any:
        return await self.aggregate("min", property)

    async def sum(self, property: PropertyArgument) -> Any:
        return await self.aggregate("sum", property)

    async def std_dev(self, property: PropertyArgument) -> float:
        return await self.aggregate("stdDev", property)

    async def std_dev_p(self, property: PropertyArgument) -> float:
        return await self.aggregate("stdDevP", property)

    async def percentile_cont(self, property: PropertyArgument, percentile: float) -> float:
        return await self._percentile("percentileCont", property, percentile)

    async def percentile_disc(self, property: PropertyArgument, percentile: float) -> Any:
        return await self._percentile("percentileDisc", property, percentile)

    async def aggregate(self, function: str, property: PropertyArgument) -> Any:
        """Run ``function(property) AS aggregate`` and return its value.

        Example:
            ```python
            total = await QueryBuilder.from_("o:Order").using_context(ctx).aggregate("sum", "amount")
            # MATCH (o:Order) RETURN sum(o.amount) AS aggregate
            ```
        """
        return await self._aggregate(function, self._to_expression(property))

    async def _percentile(self, function: str, property: PropertyArgument, percentile: float) -> Any:
        parameter = self._structure.parameters.add(percentile)
        return await self._aggregate(function, self._to_expression(property), parameter)

    async def _aggregate(self, function: str, *arguments: Expression) -> Any:
        structure = self._structure.clone()
        structure.returns = [Alias(FunctionCall(function, arguments), AGGREGATE_ALIAS)]
        result = await self._run(QueryKind.READ, function, structure)
        return result.first()[AGGREGATE_ALIAS]

    # Writes

    async def set(self, values: Mapping[str, Any] | Sequence[str]) -> QueryResult:
        self.setting_many(values)
        return await self._run(QueryKind.SET, "set")

    async def update(self, values: Mapping[str, Any] | Sequence[str]) -> QueryResult:
        return await self.set(values)

    async def create(self, values: Mapping[str, Any] | None = None) -> QueryResult:
        if values:
            self.creating(values)
        return await self._run(QueryKind.CREATE, "create")

    async def insert(self, values: Mapping[str, Any] | None = None) -> QueryResult:
        return await self.create(values)

    async def batch_create(self, rows: Sequence[Mapping[str, Any]]) -> QueryResult:
        self.batch_creating(rows)
        return await self._run(QueryKind.CREATE, "batch_create")

    async def batch_insert(self, rows: Sequence[Mapping[str, Any]]) -> QueryResult:
        return await self.batch_create(rows)

    async def merge(self, values: Mapping[str, Any] | None = None) -> QueryResult:
        if values:
            self.merging(values)
        return await self._run(QueryKind.MERGE, "merge")

    async def delete(self, *variables: str) -> QueryResult:
        self.deleting(*variables)
        return await self._run(QueryKind.DELETE, "delete")

    async def force_delete(self, *variables: str) -> QueryResult:
        """Delete the variables together with the relationships still attached to them."""
        self.forcing_deletion(*variables)
        return await self._run(QueryKind.DELETE, "force_delete")

    async def remove(self, *properties_and_labels: str) -> QueryResult:
        self.removing(*properties_and_labels)
        return await self._run(QueryKind.REMOVE, "remove")
