"""The grammar passes.

Every pass reads a QueryStructure and yields complete clauses. Passes that
recurse into nested structures (CALL, EXISTS, COUNT, UNION) receive the
pipeline they recurse with as a factory, so they never import the
pipeline module.
"""

from collections.abc import Iterator

from cypher_builder.grammar.clauses import Clause, ClauseType
from cypher_builder.grammar.rendering import render_element, render_expression, render_remove_item, render_set_item
from cypher_builder.grammar.where import WhereCompiler
from cypher_builder.interfaces import PipelineFactory
from cypher_builder.pattern.store import ChunkKind
from cypher_builder.structure import OrderDirection, QueryStructure


def _joined(elements: list) -> str:
    return ",".join(render_element(element) for element in elements)


class MatchGrammar:
    """``MATCH`` for strict elements, then one ``OPTIONAL MATCH`` per optional element.

    Args:
        strict: Only render the strict matches (used by write queries)
    """

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict

    def compile(self, structure: QueryStructure) -> Iterator[Clause]:
        strict = structure.pattern.chunk(ChunkKind.MATCH_STRICT)
        if strict:
            yield Clause(ClauseType.MATCH, _joined(strict))

        if self.strict:
            return

        for element in structure.pattern.chunk(ChunkKind.MATCH_OPTIONAL):
            yield Clause(ClauseType.OPTIONAL_MATCH, render_element(element))


class WithAllGrammar:
    """``WITH *`` importing the outer scope into a CALL body."""

    def compile(self, structure: QueryStructure) -> Iterator[Clause]:
        yield Clause(ClauseType.WITH, "*")


class CallGrammar:
    def __init__(self, sub_query_pipeline: PipelineFactory) -> None:
        self._sub_query_pipeline = sub_query_pipeline

    def compile(self, structure: QueryStructure) -> Iterator[Clause]:
        for sub_query in structure.sub_queries:
            body = self._sub_query_pipeline().pipe(sub_query).to_text()
            yield Clause(ClauseType.CALL, f"{{ {body} }}")


class WhereGrammar:
    def __init__(self, predicate_pipeline: PipelineFactory) -> None:
        self._compiler = WhereCompiler(predicate_pipeline)

    def compile(self, structure: QueryStructure) -> Iterator[Clause]:
        if structure.wheres:
            yield Clause(ClauseType.WHERE, self._compiler.compile(structure.wheres))


class CreateGrammar:
    """``[UNWIND $rows AS toCreate] CREATE ...``"""

    def compile(self, structure: QueryStructure) -> Iterator[Clause]:
        elements = structure.pattern.chunk(ChunkKind.CREATE)
        if not elements:
            return

        if structure.batch_create is not None:
            yield Clause(
                ClauseType.UNWIND,
                f"{render_expression(structure.batch_create)} AS {render_expression(structure.batch_variable)}",
            )
        yield Clause(ClauseType.CREATE, _joined(elements))


class MergeGrammar:
    """``MERGE ...`` followed by ``ON MATCH SET`` and ``ON CREATE SET``."""

    def compile(self, structure: QueryStructure) -> Iterator[Clause]:
        elements = structure.pattern.chunk(ChunkKind.MERGE)
        if not elements:
            return

        yield Clause(ClauseType.MERGE, _joined(elements))
        if structure.on_match:
            yield Clause(ClauseType.ON_MATCH_SET, ",".join(render_set_item(item) for item in structure.on_match))
        if structure.on_create:
            yield Clause(ClauseType.ON_CREATE_SET, ",".join(render_set_item(item) for item in structure.on_create))


class SetGrammar:
    def compile(self, structure: QueryStructure) -> Iterator[Clause]:
        if structure.sets:
            yield Clause(ClauseType.SET, ",".join(render_set_item(item) for item in structure.sets))


class RemoveGrammar:
    def compile(self, structure: QueryStructure) -> Iterator[Clause]:
        if structure.removes:
            yield Clause(ClauseType.REMOVE, ",".join(render_remove_item(item) for item in structure.removes))


class DeleteGrammar:
    def compile(self, structure: QueryStructure) -> Iterator[Clause]:
        if not structure.deletes:
            return

        clause_type = ClauseType.DETACH_DELETE if structure.force_delete else ClauseType.DELETE
        yield Clause(clause_type, ",".join(render_expression(variable) for variable in structure.deletes))


class ReturnGrammar:
    """Projection, ordering and pagination."""

    def compile(self, structure: QueryStructure) -> Iterator[Clause]:
        if structure.returns:
            projection = ", ".join(render_expression(expression) for expression in structure.returns)
            if structure.distinct:
                projection = f"DISTINCT {projection}"
            yield Clause(ClauseType.RETURN, projection)

        if structure.order_by:
            order = ",".join(render_expression(expression) for expression in structure.order_by)
            if structure.order_direction == OrderDirection.DESC:
                order = f"{order} DESC"
            yield Clause(ClauseType.ORDER_BY, order)

        if structure.skip:
            yield Clause(ClauseType.SKIP, str(int(structure.skip)))

        if structure.limit is not None:
            yield Clause(ClauseType.LIMIT, str(int(structure.limit)))


class UnionGrammar:
    def __init__(self, union_pipeline: PipelineFactory) -> None:
        self._union_pipeline = union_pipeline

    def compile(self, structure: QueryStructure) -> Iterator[Clause]:
        if structure.union is None:
            return

        yield Clause(ClauseType.UNION)
        yield from self._union_pipeline().pipe(structure.union).clauses
