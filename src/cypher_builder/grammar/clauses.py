"""Clauses produced by the grammar passes."""

from dataclasses import dataclass, field
from enum import Enum


class ClauseType(Enum):
    """Cypher clause keywords, in the spelling they render with."""

    # Reading
    MATCH = "MATCH"
    OPTIONAL_MATCH = "OPTIONAL MATCH"
    WHERE = "WHERE"
    WITH = "WITH"
    CALL = "CALL"

    # Writing
    UNWIND = "UNWIND"
    CREATE = "CREATE"
    MERGE = "MERGE"
    ON_MATCH_SET = "ON MATCH SET"
    ON_CREATE_SET = "ON CREATE SET"
    SET = "SET"
    REMOVE = "REMOVE"
    DELETE = "DELETE"
    DETACH_DELETE = "DETACH DELETE"

    # Projection
    RETURN = "RETURN"
    ORDER_BY = "ORDER BY"
    SKIP = "SKIP"
    LIMIT = "LIMIT"

    UNION = "UNION"


@dataclass(frozen=True)
class Clause:
    type: ClauseType
    body: str = ""

    def render(self) -> str:
        if not self.body:
            return self.type.value
        return f"{self.type.value} {self.body}"


@dataclass
class CompiledQuery:
    """Ordered clauses of one compiled query."""

    clauses: list[Clause] = field(default_factory=list)

    def to_text(self) -> str:
        return " ".join(clause.render() for clause in self.clauses)

    def types(self) -> list[ClauseType]:
        return [clause.type for clause in self.clauses]

    def __str__(self) -> str:
        return self.to_text()
