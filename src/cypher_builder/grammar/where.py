"""Compilation of filter trees to boolean Cypher expressions."""

from cypher_builder.core.errors import CompilationError
from cypher_builder.grammar.rendering import render_expression
from cypher_builder.interfaces import PipelineFactory
from cypher_builder.where import (
    Binary,
    BinaryProperty,
    Inner,
    IsNull,
    Raw,
    SubQueryCount,
    SubQueryExists,
    WhereNode,
    normalize_operator,
)


class WhereCompiler:
    """Left fold of a filter list into one expression.

    Each node decides on its own whether its fragment needs parentheses:
    comparisons and null checks never do, groups do when they hold more
    than one filter, raw text always does.

    Args:
        predicate_pipeline: Factory of the pipeline compiling EXISTS and COUNT bodies
    """

    def __init__(self, predicate_pipeline: PipelineFactory) -> None:
        self._predicate_pipeline = predicate_pipeline

    def compile(self, wheres: list[WhereNode]) -> str:
        expression = ""
        for index, where in enumerate(wheres):
            fragment = self._fragment(where)
            if index == 0:
                expression = fragment
            else:
                expression = f"{expression} {where.chain.value} {fragment}"
        return expression

    def _fragment(self, where: WhereNode) -> str:
        if isinstance(where, IsNull):
            check = "IS NOT NULL" if where.negate else "IS NULL"
            return f"{render_expression(where.property)} {check}"

        if isinstance(where, Binary):
            operator = normalize_operator(where.operator)
            return f"{render_expression(where.property)} {operator} {render_expression(where.value)}"

        if isinstance(where, BinaryProperty):
            operator = normalize_operator(where.operator, "where_properties")
            return f"{render_expression(where.left)} {operator} {render_expression(where.right)}"

        if isinstance(where, Inner):
            inner = self.compile(where.children)
            if where.negate:
                return f"NOT ({inner})"
            if len(where.children) > 1:
                return f"({inner})"
            return inner

        if isinstance(where, Raw):
            return f"({where.text})"

        if isinstance(where, SubQueryExists):
            body = self._predicate_pipeline().pipe(where.structure).to_text()
            keyword = "NOT EXISTS" if where.negate else "EXISTS"
            return f"{keyword} {{ {body} }}"

        if isinstance(where, SubQueryCount):
            body = self._predicate_pipeline().pipe(where.structure).to_text()
            operator = normalize_operator(where.operator, "where_count")
            return f"COUNT {{ {body} }} {operator} {render_expression(where.value)}"

        raise CompilationError.unsupported("where", where)
