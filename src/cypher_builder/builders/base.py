"""Shared state and string decoding for the fluent builders.

Builders accept properties, labels and projections as short strings:

- ``"name"`` is a property of the entry variable, ``"n.name"`` one of ``n``
- ``"n.name AS alias"`` projects a property under an alias
- ``"n:Label1:Label2"`` assigns labels to ``n``, ``"Label"`` to the entry
"""

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from cypher_builder.core.errors import ConfigurationError
from cypher_builder.expressions import (
    Alias,
    Expression,
    LabelAssignment,
    PropertyAssignment,
    PropertyRef,
    RawFragment,
    Variable,
)
from cypher_builder.structure import QueryStructure
from cypher_builder.where import ChainOperator

if TYPE_CHECKING:
    from cypher_builder.builders.sub_query import SubQueryBuilder

_ALIASED = re.compile(r"^(?P<property>.+?) as (?P<alias>.+)$", re.IGNORECASE | re.DOTALL)

PropertyArgument = str | RawFragment
ChainArgument = ChainOperator | str


class BaseBuilder:
    """Owner of one QueryStructure.

    Args:
        structure: Structure every fluent call mutates
    """

    def __init__(self, structure: QueryStructure) -> None:
        self._structure = structure

    @property
    def structure(self) -> QueryStructure:
        return self._structure

    def _create_sub_query_builder(self) -> "SubQueryBuilder":
        from cypher_builder.builders.sub_query import SubQueryBuilder

        return SubQueryBuilder(self._structure.sub_structure())

    # Decoding

    def _string_to_property(self, property: str) -> PropertyRef:
        if "." in property:
            variable, _, key = property.partition(".")
            return PropertyRef(Variable(variable), key)
        return PropertyRef(self._structure.entry, property)

    def _to_expression(self, property: PropertyArgument) -> Expression:
        if isinstance(property, RawFragment):
            return property
        return self._string_to_property(property)

    def _string_to_aliasable_property(self, property: str) -> PropertyRef | Alias:
        reference = self._string_to_property(property)

        match = _ALIASED.match(reference.key)
        if match:
            return Alias(PropertyRef(reference.variable, match["property"].strip()), match["alias"].strip())
        if "." not in property:
            return Alias(reference, property)
        return reference

    def _string_to_label(self, label: str) -> LabelAssignment:
        name, separator, rest = label.partition(":")
        if not separator:
            return LabelAssignment(self._structure.entry, (label.strip(),))

        labels = tuple(part.strip() for part in rest.split(":") if part.strip())
        variable = Variable(name.strip()) if name.strip() else self._structure.entry
        return LabelAssignment(variable, labels)

    def _decode_property_or_label(self, item: str) -> PropertyRef | LabelAssignment:
        if ":" in item:
            return self._string_to_label(item)
        return self._string_to_property(item)

    def _assignments(self, values: Mapping[str, Any]) -> list[PropertyAssignment]:
        """Box every value and pair it with the property its key names."""
        return [
            PropertyAssignment(self._string_to_property(key), self._structure.parameters.add(value))
            for key, value in values.items()
        ]

    def _assignments_on(self, variable: Variable, properties: Mapping[str, Any] | None) -> list[PropertyAssignment]:
        if not properties:
            return []
        return [
            PropertyAssignment(PropertyRef(variable, key), self._structure.parameters.add(value))
            for key, value in properties.items()
        ]

    @staticmethod
    def _chain(chain: ChainArgument) -> ChainOperator:
        if isinstance(chain, ChainOperator):
            return chain
        try:
            return ChainOperator(chain.strip().upper())
        except ValueError as e:
            raise ConfigurationError.for_argument(
                f"Unsupported chain operator '{chain}'",
                operation="where",
                field="chain",
                actual_value=chain,
                constraint="one of AND, OR, XOR",
            ) from e

