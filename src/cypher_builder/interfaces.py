"""Interfaces decoupling the grammar passes, the builders and execution.

Grammar passes recurse through pipeline factories instead of importing the
pipeline module, and builders run queries through any QueryRunner.
"""

from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from cypher_builder.grammar.clauses import Clause, CompiledQuery
    from cypher_builder.neo4j.execution import QueryResult
    from cypher_builder.structure import QueryStructure


class PartialGrammar(Protocol):
    """One compiler pass mapping a structure to zero or more clauses."""

    def compile(self, structure: "QueryStructure") -> Iterable["Clause"]:
        """Yield the clauses this pass contributes.

        Args:
            structure: Structure being compiled; passes never mutate it
        """
        ...


class Pipeline(Protocol):
    def pipe(self, structure: "QueryStructure") -> "CompiledQuery": ...


# Named compositions are handed to recursive passes as factories
PipelineFactory = Callable[[], Pipeline]


class QueryRunner(Protocol):
    """The run seam: sends compiled text and parameters to a database."""

    async def run(
        self,
        query: str,
        parameters: Mapping[str, Any] | None = None,
        connection: str | None = None,
    ) -> "QueryResult": ...
