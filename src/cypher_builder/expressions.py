"""Expression model shared by patterns, filters and projections.

Every value that ends up in compiled Cypher text is one of the small
immutable types below. Parameter values never appear in the text itself;
they are boxed into a :class:`ParameterStack` and referenced as ``$name``.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from cypher_builder.core.config import settings


@dataclass(frozen=True)
class Variable:
    """Identifier naming a matched or created element."""

    name: str

    def property(self, key: str) -> "PropertyRef":
        return PropertyRef(self, key)


@dataclass(frozen=True)
class PropertyRef:
    """``variable.key``"""

    variable: Variable
    key: str


@dataclass(frozen=True)
class Parameter:
    """A boxed value bound under ``name``."""

    name: str
    value: Any = field(compare=False, repr=False)


@dataclass(frozen=True)
class RawFragment:
    """Caller-supplied Cypher, emitted verbatim."""

    text: str


@dataclass(frozen=True)
class MapValue:
    """``variable['key']``: a column of the row bound by a batch UNWIND."""

    variable: Variable
    key: str


@dataclass(frozen=True)
class Distinct:
    """``DISTINCT expression``, used inside aggregations."""

    expression: "Expression"


@dataclass(frozen=True)
class FunctionCall:
    function: str
    arguments: tuple["Expression", ...] = ()


@dataclass(frozen=True)
class Alias:
    """``expression AS alias``"""

    expression: "Expression"
    alias: str


Expression = Variable | PropertyRef | Parameter | RawFragment | MapValue | Distinct | FunctionCall | Alias

# Right-hand side of a property assignment or comparison
Value = Parameter | RawFragment | MapValue | PropertyRef


@dataclass(frozen=True)
class PropertyAssignment:
    """``variable.key = value``; inside a pattern it renders as ``key: value``."""

    property: PropertyRef
    value: Value


@dataclass(frozen=True)
class LabelAssignment:
    """``variable:Label1:Label2``"""

    variable: Variable
    labels: tuple[str, ...]


SetItem = PropertyAssignment | LabelAssignment | RawFragment
RemoveItem = PropertyRef | LabelAssignment


class ParameterStack:
    """Insertion-ordered store of query parameters.

    Names are generated as ``<prefix>0``, ``<prefix>1``, ... unless an
    explicit name is given. The stack is shared by a query and all of its
    sub-queries so that numbering stays unique across the compiled text.
    """

    def __init__(self, prefix: str | None = None) -> None:
        self._prefix = prefix or settings.parameter_prefix
        self._parameters: dict[str, Parameter] = {}

    def add(self, value: Any, name: str | None = None) -> Parameter | RawFragment:
        """Box ``value`` and return the handle to reference it by.

        A RawFragment is returned unchanged; it is never bound as a parameter.
        """
        if isinstance(value, RawFragment):
            return value

        if name is None:
            index = len(self._parameters)
            name = f"{self._prefix}{index}"
            while name in self._parameters:
                index += 1
                name = f"{self._prefix}{index}"

        parameter = Parameter(name, value)
        self._parameters[name] = parameter
        return parameter

    def to_dict(self) -> dict[str, Any]:
        return {name: parameter.value for name, parameter in self._parameters.items()}

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._parameters.values())

    def __len__(self) -> int:
        return len(self._parameters)

    def __contains__(self, name: object) -> bool:
        return name in self._parameters
