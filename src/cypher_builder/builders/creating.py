"""CREATE and MERGE declarations."""

from collections.abc import Mapping, Sequence
from typing import Any, Self

from cypher_builder.builders.base import BaseBuilder
from cypher_builder.expressions import MapValue, Parameter, PropertyAssignment
from cypher_builder.pattern.decoding import Direction
from cypher_builder.pattern.store import IntentMode, LabelArgument


class CreatesGraphElements(BaseBuilder):
    """Mixin registering elements to create, one by one or as a batch."""

    def creating_node(
        self,
        label: LabelArgument,
        name: str | None = None,
        properties: Mapping[str, Any] | None = None,
    ) -> Self:
        """Register ``label`` for ``CREATE``; an element already declared under ``name`` is extended instead."""
        pattern = self._structure.pattern
        node = pattern.add_creating_node(label, name)
        if properties:
            pattern.assign(node.name.name, self._assignments_on(node.name, properties), IntentMode.CREATE)
        return self

    def creating_relationship(
        self,
        from_: str | None,
        type_: LabelArgument,
        end: str | None = None,
        name: str | None = None,
        properties: Mapping[str, Any] | None = None,
        direction: Direction | None = None,
    ) -> Self:
        """Create a relationship from ``from_`` to ``end``; ``<``/``>`` on the type set its direction."""
        pattern = self._structure.pattern
        relationship = pattern.add_creating_relationship(from_, end, type_, name, direction=direction)
        if properties:
            pattern.assign(
                relationship.name.name,
                self._assignments_on(relationship.name, properties),
                IntentMode.CREATE,
            )
        return self

    def creating_connection(
        self,
        from_: str | None,
        type_: LabelArgument,
        end: str | None = None,
        name: str | None = None,
        properties: Mapping[str, Any] | None = None,
        direction: Direction | None = None,
    ) -> Self:
        return self.creating_relationship(from_, type_, end, name, properties, direction)

    def creating_raw(self, cypher: str) -> Self:
        """Append a verbatim fragment to the CREATE clause."""
        self._structure.pattern.add_creating_raw(cypher)
        return self

    def creating(self, values: Mapping[str, Any]) -> Self:
        """Create the elements the keys name, with the given property values.

        Keys are ``"variable.property"`` or a bare property of the entry.
        Every element named is switched to create mode, so a matched node
        given values here is created instead.

        Example:
            ```python
            QueryBuilder.from_("Bar").creating({"foo": "woo"})
            # CREATE (bar:Bar {foo: $param0})
            ```
        """
        self._structure.batch_create = None
        for assignment in self._assignments(values):
            self._structure.pattern.assign(assignment.property.variable.name, [assignment], IntentMode.CREATE)
        return self

    def batch_creating(self, rows: Sequence[Mapping[str, Any]]) -> Self:
        """Create one set of elements per row with ``UNWIND``.

        The rows are bound as a single parameter. The keys of the first row
        decide which properties are assigned; each reads its value from the
        unwound row as ``toCreate['key']``.
        """
        if not rows:
            self._structure.batch_create = None
            return self

        batch = self._structure.parameters.add(list(rows))
        if isinstance(batch, Parameter):
            self._structure.batch_create = batch

        row_variable = self._structure.batch_variable
        for key in rows[0]:
            reference = self._string_to_property(key)
            self._structure.pattern.assign(
                reference.variable.name,
                [PropertyAssignment(reference, MapValue(row_variable, key))],
                IntentMode.CREATE,
            )
        return self


class MergesGraphElements(BaseBuilder):
    """Mixin registering elements to merge and their ON MATCH / ON CREATE updates."""

    def merging_node(
        self,
        label: LabelArgument,
        name: str | None = None,
        properties: Mapping[str, Any] | None = None,
    ) -> Self:
        """Register ``label`` for ``MERGE``."""
        pattern = self._structure.pattern
        node = pattern.add_merging_node(label, name)
        if properties:
            pattern.assign(node.name.name, self._assignments_on(node.name, properties), IntentMode.MERGE)
        return self

    def merging_connection(
        self,
        from_: str | None,
        type_: LabelArgument,
        end: str | None = None,
        name: str | None = None,
        properties: Mapping[str, Any] | None = None,
        direction: Direction | None = None,
    ) -> Self:
        pattern = self._structure.pattern
        relationship = pattern.add_merging_relationship(from_, end, type_, name, direction=direction)
        if properties:
            pattern.assign(
                relationship.name.name,
                self._assignments_on(relationship.name, properties),
                IntentMode.MERGE,
            )
        return self

    def merging_raw(self, cypher: str) -> Self:
        """Append a verbatim fragment to the MERGE clause."""
        self._structure.pattern.add_merging_raw(cypher)
        return self

    def merging(self, values: Mapping[str, Any]) -> Self:
        """Merge the elements the keys name on the given property values."""
        for assignment in self._assignments(values):
            self._structure.pattern.assign(assignment.property.variable.name, [assignment], IntentMode.MERGE)
        return self

    def on_matching(self, values: Mapping[str, Any]) -> Self:
        """Properties to ``ON MATCH SET`` after the merge."""
        self._structure.on_match.extend(self._assignments(values))
        return self

    def on_creating(self, values: Mapping[str, Any]) -> Self:
        """Properties to ``ON CREATE SET`` after the merge."""
        self._structure.on_create.extend(self._assignments(values))
        return self
