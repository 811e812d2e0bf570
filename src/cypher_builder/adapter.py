"""Selection of the pipeline composition per operation, and the run seam."""

from collections.abc import Callable
from enum import Enum
from typing import Any

import logfire
from structlog.typing import FilteringBoundLogger

from cypher_builder.core.decorators import with_error_handling
from cypher_builder.core.logging import get_logger
from cypher_builder.grammar.clauses import CompiledQuery
from cypher_builder.grammar.pipeline import GrammarPipeline
from cypher_builder.interfaces import QueryRunner
from cypher_builder.neo4j.execution import QueryResult
from cypher_builder.structure import QueryStructure

logger: FilteringBoundLogger = get_logger(name=__name__)


class QueryKind(str, Enum):
    READ = "read"
    CREATE = "create"
    SET = "set"
    MERGE = "merge"
    DELETE = "delete"
    REMOVE = "remove"
    FULL = "full"


def _read() -> GrammarPipeline:
    return GrammarPipeline().with_match_grammar().with_call_grammar().with_where_grammar().with_return_grammar()


def _set() -> GrammarPipeline:
    return GrammarPipeline().with_match_grammar(strict=True).with_call_grammar().with_where_grammar().with_set_grammar()


def _create() -> GrammarPipeline:
    return (
        GrammarPipeline().with_match_grammar(strict=True).with_call_grammar().with_where_grammar().with_create_grammar()
    )


def _remove() -> GrammarPipeline:
    return (
        GrammarPipeline().with_match_grammar(strict=True).with_call_grammar().with_where_grammar().with_remove_grammar()
    )


def _merge() -> GrammarPipeline:
    return GrammarPipeline().with_match_grammar().with_where_grammar().with_call_grammar().with_merge_grammar()


def _delete() -> GrammarPipeline:
    return GrammarPipeline().with_match_grammar().with_where_grammar().with_call_grammar().with_delete_grammar()


_COMPOSITIONS: dict[QueryKind, Callable[[], GrammarPipeline]] = {
    QueryKind.READ: _read,
    QueryKind.CREATE: _create,
    QueryKind.SET: _set,
    QueryKind.MERGE: _merge,
    QueryKind.DELETE: _delete,
    QueryKind.REMOVE: _remove,
    QueryKind.FULL: GrammarPipeline.all,
}


class BuilderToCypherAdapter:
    """Compiles query structures with the composition matching the operation.

    Every compilation runs on a clone of the structure, so the caller's
    structure is never changed by it.
    """

    def pipeline(self, kind: QueryKind) -> GrammarPipeline:
        return _COMPOSITIONS[kind]()

    @with_error_handling()
    def compile(self, structure: QueryStructure, kind: QueryKind = QueryKind.FULL) -> CompiledQuery:
        query = self.pipeline(kind).pipe(structure.clone())
        logger.debug(
            "Compiled Cypher query",
            kind=kind.value,
            query=query.to_text(),
            parameter_names=sorted(structure.parameters.to_dict()),
        )
        return query

    def read_only_query(self, structure: QueryStructure) -> CompiledQuery:
        return self.compile(structure, QueryKind.READ)

    def set_query(self, structure: QueryStructure) -> CompiledQuery:
        return self.compile(structure, QueryKind.SET)

    def create_query(self, structure: QueryStructure) -> CompiledQuery:
        return self.compile(structure, QueryKind.CREATE)

    def merge_query(self, structure: QueryStructure) -> CompiledQuery:
        return self.compile(structure, QueryKind.MERGE)

    def delete_query(self, structure: QueryStructure) -> CompiledQuery:
        return self.compile(structure, QueryKind.DELETE)

    def remove_query(self, structure: QueryStructure) -> CompiledQuery:
        return self.compile(structure, QueryKind.REMOVE)

    def full_query(self, structure: QueryStructure) -> CompiledQuery:
        return self.compile(structure, QueryKind.FULL)

    def build(self, structure: QueryStructure, kind: QueryKind = QueryKind.FULL) -> tuple[str, dict[str, Any]]:
        """Compile to ``(text, parameters)``."""
        return self.compile(structure, kind).to_text(), structure.parameters.to_dict()

    async def run(
        self,
        runner: QueryRunner,
        structure: QueryStructure,
        kind: QueryKind,
        connection: str | None = None,
    ) -> QueryResult:
        """Compile ``structure`` and send it through ``runner``."""
        with logfire.span("run {kind} query", kind=kind.value, connection=connection):
            text, parameters = self.build(structure, kind)
            return await runner.run(text, parameters, connection)
