"""Neo4j execution of compiled queries."""

from .execution import ExecutionContext, QueryResult

__all__ = [
    "ExecutionContext",
    "QueryResult",
]
