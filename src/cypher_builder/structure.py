"""The mutable record of one query under construction."""

import copy
from dataclasses import dataclass, field
from enum import Enum

from cypher_builder.core.config import settings
from cypher_builder.expressions import (
    Expression,
    Parameter,
    ParameterStack,
    PropertyAssignment,
    RemoveItem,
    SetItem,
    Variable,
)
from cypher_builder.pattern.store import GraphPatternStore
from cypher_builder.where import WhereNode


class OrderDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass
class QueryStructure:
    """Everything the grammar passes need to render a query.

    Sub-query structures share the ParameterStack and entry of the structure
    they were created from; their pattern store is a fork of its store.
    """

    parameters: ParameterStack
    pattern: GraphPatternStore
    entry: Variable

    wheres: list[WhereNode] = field(default_factory=list)
    sub_queries: list["QueryStructure"] = field(default_factory=list)
    returns: list[Expression] = field(default_factory=list)
    sets: list[SetItem] = field(default_factory=list)
    on_match: list[PropertyAssignment] = field(default_factory=list)
    on_create: list[PropertyAssignment] = field(default_factory=list)
    deletes: list[Variable] = field(default_factory=list)
    force_delete: bool = False
    removes: list[RemoveItem] = field(default_factory=list)
    order_by: list[Expression] = field(default_factory=list)
    order_direction: OrderDirection = OrderDirection.ASC
    skip: int | None = None
    limit: int | None = None
    distinct: bool = False
    union: "QueryStructure | None" = None
    batch_create: Parameter | None = None
    batch_variable: Variable = field(default_factory=lambda: Variable(settings.batch_variable))

    def sub_structure(self) -> "QueryStructure":
        """Empty structure for a nested query (CALL, EXISTS, COUNT, inner filters)."""
        return QueryStructure(self.parameters, self.pattern.fork(), self.entry)

    def clone(self) -> "QueryStructure":
        """Deep copy sharing the ParameterStack and the anonymous name sequence.

        Parameters added while compiling the copy land in the original stack,
        while pattern, filter and projection changes stay on the copy.
        """
        memo = {
            id(self.parameters): self.parameters,
            id(self.pattern.names): self.pattern.names,
        }
        return copy.deepcopy(self, memo)
