"""Execution of compiled queries against Neo4j.

An ExecutionContext owns the drivers of one application, keyed by
connection alias, and the transactions currently bound to them. Builders
are given a context explicitly; nothing here is global.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any, LiteralString, cast

import logfire
from neo4j import AsyncDriver, AsyncGraphDatabase, AsyncResult, AsyncSession, AsyncTransaction, ResultSummary
from neo4j.exceptions import DriverError, Neo4jError

from cypher_builder.core.base import DatabaseErrorDetails
from cypher_builder.core.config import Settings, settings
from cypher_builder.core.decorators import with_error_handling
from cypher_builder.core.errors import ConfigurationError, ExecutionError, NoResultError, TransactionError
from cypher_builder.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@dataclass
class QueryResult:
    """Records and summary of one executed query."""

    records: list[dict[str, Any]] = field(default_factory=list)
    summary: ResultSummary | None = None

    def first(self) -> dict[str, Any]:
        """The first record.

        Raises:
            NoResultError: If the query returned no records
        """
        if not self.records:
            raise NoResultError(
                "The query returned no records",
                DatabaseErrorDetails(source="execution", operation="first"),
            )
        return self.records[0]

    def value(self, key: str | None = None) -> Any:
        """A single value of the first record, its first column when ``key`` is omitted."""
        record = self.first()
        if key is None:
            return next(iter(record.values()), None)
        return record.get(key)

    def pluck(self, key: str) -> list[Any]:
        return [record.get(key) for record in self.records]

    @property
    def counters(self) -> dict[str, int]:
        """Update counters reported by the server, empty for read queries."""
        if self.summary is None:
            return {}
        return {
            name: value for name, value in vars(self.summary.counters).items() if isinstance(value, int) and value
        }

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class _BoundTransaction:
    session: AsyncSession
    transaction: AsyncTransaction


def _trusted(query: str) -> LiteralString:
    # Compiled text only interpolates escaped identifiers; values travel as parameters
    return cast("LiteralString", query)


class ExecutionContext:
    """Drivers by connection alias plus the transactions bound to them.

    Args:
        drivers: Drivers keyed by connection alias
        default_connection: Alias used when a call names no connection
        database: Database to open sessions on, None for the server default
    """

    def __init__(
        self,
        drivers: Mapping[str, AsyncDriver] | None = None,
        default_connection: str | None = None,
        database: str | None = None,
    ) -> None:
        self._drivers: dict[str, AsyncDriver] = dict(drivers or {})
        self._default_connection = default_connection or settings.default_connection
        self._database = database
        self._transactions: dict[str, _BoundTransaction] = {}

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "ExecutionContext":
        """Create a context with one driver for the configured Neo4j server."""
        driver = AsyncGraphDatabase.driver(
            config.neo4j_uri,
            auth=(config.neo4j_user, config.neo4j_password.get_secret_value()),
        )
        setup_logging(config)
        logger.info("Created Neo4j driver", uri=config.neo4j_uri, connection=config.default_connection)
        return cls({config.default_connection: driver}, config.default_connection, config.neo4j_database)

    @property
    def default_connection(self) -> str:
        return self._default_connection

    def add_connection(self, alias: str, driver: AsyncDriver) -> None:
        self._drivers[alias] = driver

    def driver(self, connection: str | None = None) -> AsyncDriver:
        alias = connection or self._default_connection
        if alias not in self._drivers:
            raise ConfigurationError.for_argument(
                f"No driver is registered for connection '{alias}'",
                operation="driver",
                field="connection",
                actual_value=alias,
                constraint=f"one of {', '.join(self._drivers) or 'no connections'}",
            )
        return self._drivers[alias]

    async def verify_connectivity(self, connection: str | None = None) -> None:
        await self.driver(connection).verify_connectivity()
        logger.info("Connected to Neo4j", connection=connection or self._default_connection)

    def in_transaction(self, connection: str | None = None) -> bool:
        return (connection or self._default_connection) in self._transactions

    @logfire.instrument("cypher query", extract_args=("query", "connection"))
    @with_error_handling()
    async def run(
        self,
        query: str,
        parameters: Mapping[str, Any] | None = None,
        connection: str | None = None,
    ) -> QueryResult:
        """Run a query in the transaction bound to ``connection``, or in a fresh session.

        Raises:
            ExecutionError: If the driver or the server rejects the query
        """
        alias = connection or self._default_connection
        params = dict(parameters or {})
        logger.debug("Executing Neo4j query", connection=alias, query=query, parameter_names=sorted(params))

        try:
            bound = self._transactions.get(alias)
            if bound is not None:
                result = await bound.transaction.run(_trusted(query), params)
                return await self._collect(result)

            async with self.driver(alias).session(database=self._database) as session:
                result = await session.run(_trusted(query), params)
                return await self._collect(result)
        except (Neo4jError, DriverError) as e:
            raise ExecutionError(
                f"Query failed on connection '{alias}': {e}",
                DatabaseErrorDetails(
                    source="execution",
                    operation="run",
                    connection=alias,
                    query=query,
                    parameter_names=sorted(params),
                ),
            ) from e

    async def begin_transaction(self, connection: str | None = None) -> None:
        alias = connection or self._default_connection
        if alias in self._transactions:
            raise TransactionError(
                f"A transaction is already bound to connection '{alias}'",
                DatabaseErrorDetails(source="execution", operation="begin_transaction", connection=alias),
            )

        session = self.driver(alias).session(database=self._database)
        try:
            transaction = await session.begin_transaction()
        except BaseException:
            await session.close()
            raise
        self._transactions[alias] = _BoundTransaction(session, transaction)
        logger.debug("Began transaction", connection=alias)

    async def commit_transaction(self, connection: str | None = None) -> None:
        bound = self._unbind(connection, "commit_transaction")
        try:
            await bound.transaction.commit()
        finally:
            await bound.session.close()
        logger.debug("Committed transaction", connection=connection or self._default_connection)

    async def rollback_transaction(self, connection: str | None = None) -> None:
        bound = self._unbind(connection, "rollback_transaction")
        try:
            await bound.transaction.rollback()
        finally:
            await bound.session.close()
        logger.debug("Rolled back transaction", connection=connection or self._default_connection)

    async def close(self) -> None:
        """Roll back open transactions and close every driver."""
        for alias in list(self._transactions):
            await self.rollback_transaction(alias)
        for alias, driver in self._drivers.items():
            await driver.close()
            logger.info("Closed Neo4j connection", connection=alias)

    async def __aenter__(self) -> "ExecutionContext":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _unbind(self, connection: str | None, operation: str) -> _BoundTransaction:
        alias = connection or self._default_connection
        bound = self._transactions.pop(alias, None)
        if bound is None:
            raise TransactionError(
                f"No transaction is bound to connection '{alias}'",
                DatabaseErrorDetails(source="execution", operation=operation, connection=alias),
            )
        return bound

    @staticmethod
    async def _collect(result: AsyncResult) -> QueryResult:
        records = await result.data()
        summary = await result.consume()
        return QueryResult(records, summary)
