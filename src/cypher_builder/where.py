"""Boolean filter tree.

Each node carries the operator chaining it to the node before it. The
operator on the first node of a list is never rendered.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from cypher_builder.core.errors import ConfigurationError
from cypher_builder.expressions import Parameter, PropertyRef, RawFragment

if TYPE_CHECKING:
    from cypher_builder.structure import QueryStructure


class ChainOperator(str, Enum):
    AND = "AND"
    OR = "OR"
    XOR = "XOR"


# Accepted comparison spellings mapped to the Cypher operator they render as
OPERATORS: dict[str, str] = {
    "<": "<",
    "<=": "<=",
    "=": "=",
    "==": "=",
    "===": "=",
    ">": ">",
    ">=": ">=",
    "=~": "=~",
    "LIKE": "=~",
    "!=": "<>",
    "!==": "<>",
    "<>": "<>",
    "STARTS WITH": "STARTS WITH",
    "ENDS WITH": "ENDS WITH",
    "CONTAINS": "CONTAINS",
    "IN": "IN",
}


def normalize_operator(operator: str, operation: str = "where") -> str:
    """Map a comparison spelling to its Cypher operator.

    Raises:
        ConfigurationError: If the operator is not supported
    """
    key = " ".join(operator.split())
    if key.upper() in OPERATORS:
        return OPERATORS[key.upper()]
    raise ConfigurationError.for_argument(
        f"Unsupported comparison operator '{operator}'",
        operation=operation,
        field="operator",
        actual_value=operator,
        constraint=f"one of {', '.join(OPERATORS)}",
    )


@dataclass
class Binary:
    """``property op $parameter``"""

    property: PropertyRef
    operator: str
    value: Parameter | RawFragment
    chain: ChainOperator = ChainOperator.AND


@dataclass
class BinaryProperty:
    """``left op right`` comparing two properties."""

    left: PropertyRef
    operator: str
    right: PropertyRef
    chain: ChainOperator = ChainOperator.AND


@dataclass
class IsNull:
    property: PropertyRef
    negate: bool = False
    chain: ChainOperator = ChainOperator.AND


@dataclass
class Inner:
    """A parenthesised group of filters."""

    children: list["WhereNode"] = field(default_factory=list)
    negate: bool = False
    chain: ChainOperator = ChainOperator.AND


@dataclass
class Raw:
    text: str
    chain: ChainOperator = ChainOperator.AND


@dataclass
class SubQueryExists:
    structure: "QueryStructure"
    negate: bool = False
    chain: ChainOperator = ChainOperator.AND


@dataclass
class SubQueryCount:
    structure: "QueryStructure"
    operator: str
    value: Parameter | RawFragment
    chain: ChainOperator = ChainOperator.AND


WhereNode = Binary | BinaryProperty | IsNull | Inner | Raw | SubQueryExists | SubQueryCount
