"""Decoding of label/type tokens into names, labels and directions.

Tokens follow a small syntax: ``name:Label1:Label2`` embeds the variable
name, a leading ``<`` or trailing ``>`` on a relationship type marks its
direction. Names that are not given are derived from the first label, or
drawn from the anonymous name sequence.
"""

import itertools
import re
from enum import Enum

from cypher_builder.core.errors import ConfigurationError

_SCREAMING_CASE = re.compile(r"^[A-Z0-9_]+$")


class Direction(str, Enum):
    """Arrow drawn between the endpoints of a relationship."""

    LEFT_TO_RIGHT = "->"
    RIGHT_TO_LEFT = "<-"
    ANY = "-"


class NameSequence:
    """Generator of ``anon0``, ``anon1``, ... shared by a store and its forks."""

    def __init__(self, prefix: str = "anon") -> None:
        self._prefix = prefix
        self._counter = itertools.count()

    def next(self) -> str:
        return f"{self._prefix}{next(self._counter)}"


def coalesce(label_or_type: str | list[str] | tuple[str, ...] | None) -> list[str]:
    """Normalise a label argument to a list of trimmed, non-empty labels."""
    if label_or_type is None:
        return []
    if isinstance(label_or_type, str):
        label_or_type = [label_or_type]

    return [label.strip() for label in label_or_type if label and label.strip()]


def coalesce_strict(label_or_type: str | list[str] | tuple[str, ...] | None, operation: str) -> list[str]:
    labels = coalesce(label_or_type)
    if not labels:
        raise ConfigurationError.for_argument(
            f"{operation} requires at least one label or type",
            operation=operation,
            field="label_or_type",
            actual_value=label_or_type,
            constraint="non-empty",
        )
    return labels


def lcfirst(value: str) -> str:
    return value[:1].lower() + value[1:]


def default_node_name(label: str) -> str:
    """``OtherTest`` -> ``otherTest``"""
    return lcfirst(label)


def default_relationship_name(type_: str) -> str:
    """``GOES_TO`` -> ``goesTo``, ``CONNECTION`` -> ``connection``, ``Hello`` -> ``hello``"""
    if not _SCREAMING_CASE.match(type_):
        return lcfirst(type_)

    parts = [part for part in type_.lower().split("_") if part]
    if not parts:
        return type_.lower()
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


def _markers(token: str) -> tuple[str, str, str, bool, bool]:
    # The markers belong to the type: "k:<KNOWS" and "<k:KNOWS" both point left
    token = token.strip()
    name, separator, type_ = token.partition(":")
    if not separator:
        name, type_ = "", token

    leading = token.startswith("<") or type_.lstrip().startswith("<")
    trailing = token.endswith(">")
    return name.removeprefix("<").strip(), separator, type_.strip(), leading, trailing


def extract_direction(types: list[str]) -> tuple[list[str], Direction | None]:
    """Strip ``<``/``>`` markers from the first type.

    A name embedded in front of the type (``"k:<KNOWS"``) is kept.

    Returns the cleaned types and the direction the markers encode, or None
    when there were no markers.
    """
    if not types:
        return types, None

    name, separator, type_, leading, trailing = _markers(types[0])
    if not leading and not trailing:
        return types, None

    type_ = type_.removeprefix("<").removesuffix(">").strip()
    cleaned = f"{name}{separator}{type_}" if type_ or name else ""
    remaining = ([cleaned] if cleaned else []) + types[1:]
    if leading and trailing:
        return remaining, Direction.ANY
    if leading:
        return remaining, Direction.RIGHT_TO_LEFT
    return remaining, Direction.LEFT_TO_RIGHT


def has_direction_marker(token: str) -> bool:
    _, _, _, leading, trailing = _markers(token)
    return leading or trailing


def _split_embedded_name(labels: list[str]) -> tuple[str | None, list[str]]:
    if not labels or ":" not in labels[0]:
        return None, labels

    name, _, rest = labels[0].partition(":")
    embedded = [label.strip() for label in rest.split(":") if label.strip()]
    return name.strip(), embedded + labels[1:]


def decode(
    label_or_type: str | list[str] | tuple[str, ...] | None,
    name: str | None,
    names: NameSequence,
    default_name=default_node_name,
) -> tuple[str, list[str]]:
    """Resolve the variable name and labels for one element.

    An explicit ``name`` may itself carry labels (``"c:Bar"``). When no name
    is available one is derived from the first label with ``default_name``,
    and failing that taken from ``names``.
    """
    labels = coalesce(label_or_type)
    explicit = name.strip() if name else None

    if explicit and ":" in explicit:
        explicit, extra = _split_embedded_name([explicit])
        labels = extra + labels
    elif not explicit:
        explicit, labels = _split_embedded_name(labels)

    if explicit:
        return explicit, labels
    if labels:
        return default_name(labels[0]), labels
    return names.next(), labels
