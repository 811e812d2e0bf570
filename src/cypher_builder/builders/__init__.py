"""Fluent builders mutating a QueryStructure.

Each concern (matching, writing, filtering, returning, running) is a mixin
over BaseBuilder; QueryBuilder combines all of them, SubQueryBuilder only
the read concerns.
"""

from .query import QueryBuilder
from .sub_query import SubQueryBuilder
from .union import UnionStarter

__all__ = [
    "QueryBuilder",
    "SubQueryBuilder",
    "UnionStarter",
]
