"""Compilation of query structures to Cypher clauses."""

from .clauses import Clause, ClauseType, CompiledQuery
from .pipeline import GrammarPipeline
from .rendering import NodePattern, RelationshipPattern, escape
from .where import WhereCompiler

__all__ = [
    "Clause",
    "ClauseType",
    "CompiledQuery",
    "GrammarPipeline",
    "NodePattern",
    "RelationshipPattern",
    "WhereCompiler",
    "escape",
]
