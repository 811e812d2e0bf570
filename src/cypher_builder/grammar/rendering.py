"""Rendering of atomic expressions and pattern elements to Cypher text.

This is the only place that turns names and values into text. Identifiers
are quoted with backticks when they are not plain words; parameter values
are never inlined.
"""

import re
from typing import Any

from cypher_builder.core.errors import CompilationError
from cypher_builder.expressions import (
    Alias,
    Distinct,
    Expression,
    FunctionCall,
    LabelAssignment,
    MapValue,
    Parameter,
    PropertyAssignment,
    PropertyRef,
    RawFragment,
    RemoveItem,
    SetItem,
    Variable,
)
from cypher_builder.pattern.decoding import Direction
from cypher_builder.pattern.store import Node, PatternElement, Relationship

_PLAIN_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def escape(identifier: str) -> str:
    """Quote an identifier unless it is a plain word.

    Example:
        ``escape("`backtick")`` returns ``"```backtick`"``
    """
    if _PLAIN_IDENTIFIER.match(identifier):
        return identifier
    return "`" + identifier.replace("`", "``") + "`"


def string_literal(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def render_labels(labels: list[str] | tuple[str, ...]) -> str:
    return "".join(f":{escape(label)}" for label in labels)


def render_expression(expression: Expression) -> str:
    """Render any expression of the expression model."""
    if isinstance(expression, Variable):
        return escape(expression.name)
    if isinstance(expression, PropertyRef):
        return f"{escape(expression.variable.name)}.{escape(expression.key)}"
    if isinstance(expression, Parameter):
        return f"${expression.name}"
    if isinstance(expression, RawFragment):
        return expression.text
    if isinstance(expression, MapValue):
        return f"{escape(expression.variable.name)}[{string_literal(expression.key)}]"
    if isinstance(expression, Distinct):
        return f"DISTINCT {render_expression(expression.expression)}"
    if isinstance(expression, FunctionCall):
        arguments = ",".join(render_expression(argument) for argument in expression.arguments)
        return f"{expression.function}({arguments})"
    if isinstance(expression, Alias):
        inner = expression.expression
        # An alias of an alias keeps the inner name
        if isinstance(inner, Alias):
            return render_expression(inner)
        return f"{render_expression(inner)} AS {escape(expression.alias)}"
    raise CompilationError.unsupported("expression", expression)


def render_set_item(item: SetItem) -> str:
    """``n.x = $param0``, ``n:Label`` or raw text."""
    if isinstance(item, PropertyAssignment):
        return f"{render_expression(item.property)} = {render_expression(item.value)}"
    if isinstance(item, LabelAssignment):
        return f"{escape(item.variable.name)}{render_labels(item.labels)}"
    if isinstance(item, RawFragment):
        return item.text
    raise CompilationError.unsupported("set", item)


def render_remove_item(item: RemoveItem) -> str:
    if isinstance(item, PropertyRef):
        return render_expression(item)
    if isinstance(item, LabelAssignment):
        return f"{escape(item.variable.name)}{render_labels(item.labels)}"
    raise CompilationError.unsupported("remove", item)


def render_properties(properties: list[PropertyAssignment]) -> dict[str, Any]:
    return {assignment.property.key: render_expression(assignment.value) for assignment in properties}


class NodePattern:
    """Builder for Cypher node patterns like ``(n:Label {prop: $param0})``.

    Property values must already be rendered expressions.
    """

    def __init__(
        self,
        variable: str = "",
        labels: list[str] | None = None,
        properties: dict[str, str] | None = None,
    ) -> None:
        self.variable: str = variable
        self.labels: list[str] = labels or []
        self.properties: dict[str, str] = properties or {}

    def build(self) -> str:
        pattern_parts: list[str] = ["("]

        if self.variable:
            pattern_parts.append(escape(self.variable))

        pattern_parts.append(render_labels(self.labels))
        pattern_parts.append(_render_map(self.properties))

        pattern_parts.append(")")
        return "".join(pattern_parts)


class RelationshipPattern:
    """Builder for Cypher relationship patterns like ``[r:TYPE {prop: $param0}]``."""

    def __init__(
        self,
        variable: str = "",
        types: list[str] | None = None,
        properties: dict[str, str] | None = None,
        direction: Direction = Direction.LEFT_TO_RIGHT,
    ) -> None:
        self.variable: str = variable
        self.types: list[str] = types or []
        self.properties: dict[str, str] = properties or {}
        self.direction: Direction = direction

    def build(self) -> str:
        pattern_parts: list[str] = ["["]

        if self.variable:
            pattern_parts.append(escape(self.variable))

        if self.types:
            pattern_parts.append(":" + "|".join(escape(type_) for type_ in self.types))

        pattern_parts.append(_render_map(self.properties))

        pattern_parts.append("]")
        return "".join(pattern_parts)

    def connect(self, left: str, right: str) -> str:
        """Draw the relationship between two rendered node patterns."""
        if self.direction == Direction.LEFT_TO_RIGHT:
            return f"{left}-{self.build()}->{right}"
        if self.direction == Direction.RIGHT_TO_LEFT:
            return f"{left}<-{self.build()}-{right}"
        return f"{left}-{self.build()}-{right}"


def _render_map(properties: dict[str, str]) -> str:
    if not properties:
        return ""
    entries = ", ".join(f"{escape(key)}: {value}" for key, value in properties.items())
    return f" {{{entries}}}"


def render_element(element: PatternElement) -> str:
    """Render one element of a pattern chunk."""
    if isinstance(element, Node):
        return NodePattern(element.name.name, element.labels, render_properties(element.properties)).build()
    if isinstance(element, Relationship):
        relationship = RelationshipPattern(
            element.name.name,
            element.types,
            render_properties(element.properties),
            element.direction,
        )
        return relationship.connect(NodePattern(element.left.name).build(), NodePattern(element.right.name).build())
    if isinstance(element, RawFragment):
        return element.text
    raise CompilationError.unsupported("pattern", element)
