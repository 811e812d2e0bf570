"""Compile fluent graph query builder calls to parameterized Cypher."""

from .adapter import BuilderToCypherAdapter, QueryKind
from .builders import QueryBuilder, SubQueryBuilder
from .core.errors import (
    CompilationError,
    ConfigurationError,
    ExecutionError,
    NoResultError,
    PatternConflictError,
    TransactionError,
)
from .expressions import ParameterStack, RawFragment
from .grammar import GrammarPipeline
from .neo4j import ExecutionContext, QueryResult
from .pattern import Direction, GraphPatternBuilder, GraphPatternStore
from .structure import OrderDirection, QueryStructure
from .where import ChainOperator

__version__ = "0.1.0"

__all__ = [
    "BuilderToCypherAdapter",
    "ChainOperator",
    "CompilationError",
    "ConfigurationError",
    "Direction",
    "ExecutionContext",
    "ExecutionError",
    "GrammarPipeline",
    "GraphPatternBuilder",
    "GraphPatternStore",
    "NoResultError",
    "OrderDirection",
    "ParameterStack",
    "PatternConflictError",
    "QueryBuilder",
    "QueryKind",
    "QueryResult",
    "QueryStructure",
    "RawFragment",
    "SubQueryBuilder",
    "TransactionError",
    "__version__",
]
