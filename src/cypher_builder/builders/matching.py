"""MATCH declarations."""

from typing import Self

from cypher_builder.builders.base import BaseBuilder
from cypher_builder.pattern.decoding import Direction
from cypher_builder.pattern.store import LabelArgument


class MatchesGraphs(BaseBuilder):
    """Mixin registering match and optional match elements."""

    def matching_node(self, label: LabelArgument = None, name: str | None = None, optional: bool = False) -> Self:
        """Match a node.

        Args:
            label: Label(s), optionally embedding the name as ``name:Label``
            name: Variable name, derived from the first label when omitted
            optional: Render it in its own ``OPTIONAL MATCH``

        Returns:
            Self for method chaining
        """
        self._structure.pattern.add_matching_node(label, name, optional)
        return self

    def matching_relationship(
        self,
        from_: str | None,
        type_: LabelArgument = None,
        end: str | None = None,
        name: str | None = None,
        direction: Direction | None = None,
        optional: bool = False,
    ) -> Self:
        """Match a relationship between two nodes.

        Endpoints that carry labels (``":Bar"``, ``"b:Bar"``) are matched as
        nodes as well; missing endpoints become anonymous nodes.

        Example:
            ```python
            builder.matching_relationship("foo", "ZOO", ":Bar", optional=True)
            ```
        """
        self._structure.pattern.add_matching_relationship(from_, end, type_, name, direction, optional)
        return self

    def matching_raw(self, cypher: str, optional: bool = False) -> Self:
        """Append a verbatim pattern, as its own OPTIONAL MATCH when ``optional``."""
        self._structure.pattern.add_matching_raw(cypher, optional)
        return self
