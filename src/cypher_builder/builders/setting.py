"""SET, REMOVE and DELETE."""

from collections.abc import Mapping, Sequence
from typing import Any, Self

from cypher_builder.builders.base import BaseBuilder
from cypher_builder.expressions import LabelAssignment, PropertyAssignment, RawFragment, Variable
from cypher_builder.pattern.decoding import coalesce
from cypher_builder.pattern.store import LabelArgument


class SetsProperties(BaseBuilder):
    """Mixin collecting SET items."""

    def setting(self, property: str, value: Any) -> Self:
        """Set one property to a value.

        Args:
            property: ``"variable.property"`` or a bare property of the entry
            value: Bound as a parameter, or emitted verbatim if a RawFragment

        Returns:
            Self for method chaining
        """
        reference = self._string_to_property(property)
        self._structure.sets.append(PropertyAssignment(reference, self._structure.parameters.add(value)))
        return self

    def setting_many(self, values: Mapping[str, Any] | Sequence[str]) -> Self:
        """Set several properties, or assign labels.

        A mapping sets each key to its value; a sequence of strings assigns
        labels written as ``"n:Label"`` (or ``"Label"`` for the entry).

        Example:
            ```python
            builder.setting_many({"n.name": "Ada", "age": 36})
            builder.setting_many(["n:Admin", "Person"])
            ```
        """
        if isinstance(values, Mapping):
            for property, value in values.items():
                self.setting(property, value)
            return self

        for label in values:
            self._structure.sets.append(self._string_to_label(label))
        return self

    def setting_label(self, name: str, labels: LabelArgument) -> Self:
        """Add labels to the element named ``name``."""
        self._structure.sets.append(LabelAssignment(Variable(name), tuple(coalesce(labels))))
        return self

    def setting_raw(self, *cypher: str) -> Self:
        self._structure.sets.extend(RawFragment(fragment) for fragment in cypher)
        return self


class RemovesGraphData(BaseBuilder):
    """Mixin collecting REMOVE items."""

    def removing(self, *properties_and_labels: str) -> Self:
        """Remove properties (``"n.name"``) and labels (``"n:Label"``)."""
        self._structure.removes.extend(self._decode_property_or_label(item) for item in properties_and_labels)
        return self

    def removing_label(self, name: str, *labels: str) -> Self:
        """Remove labels from the element named ``name``."""
        cleaned = tuple(coalesce(list(labels)))
        if cleaned:
            self._structure.removes.append(LabelAssignment(Variable(name), cleaned))
        return self


class DeletesGraphElements(BaseBuilder):
    """Mixin collecting DELETE targets."""

    def deleting(self, *variables: str) -> Self:
        """Delete the given variables; see :meth:`forcing_deletion` to detach first."""
        self._structure.deletes.extend(Variable(variable) for variable in variables)
        return self

    def forcing_deletion(self, *variables: str) -> Self:
        """Delete with ``DETACH DELETE``, removing attached relationships too."""
        self._structure.force_delete = True
        return self.deleting(*variables)
