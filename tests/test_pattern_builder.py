"""Tests for the fluent pattern builder."""

import pytest

from cypher_builder.core.errors import ConfigurationError
from cypher_builder.pattern.builder import GraphPatternBuilder, NodeContext, RelationshipContext
from cypher_builder.pattern.decoding import Direction
from cypher_builder.pattern.store import ChunkKind, IntentMode


def relationship_names(store):
    return [element.name.name for element in store.chunk(ChunkKind.MATCH) if hasattr(element, "types")]


class TestNavigation:
    def test_from_dispatches_on_direction_markers(self):
        assert isinstance(GraphPatternBuilder.from_("Foo"), NodeContext)
        assert isinstance(GraphPatternBuilder.from_("FOO>"), RelationshipContext)
        assert isinstance(GraphPatternBuilder.from_("<FOO"), RelationshipContext)

    def test_end_on_root_fails(self):
        root = GraphPatternBuilder.from_node("Foo")

        with pytest.raises(ConfigurationError):
            root.end()

    def test_child_inherits_optionality(self):
        root = GraphPatternBuilder.from_node("Foo")
        relationship = root.add_relationship("OPT", optional=True)
        child = relationship.add_child_node("Bar")

        assert child.optional
        assert root.store.mode_of("bar") == IntentMode.OPTIONAL_MATCH

    def test_end_without_children_uses_an_anonymous_endpoint(self):
        root = GraphPatternBuilder.from_node("Foo")
        back = root.add_relationship("KNOWS").end()

        relationship = root.store.get("knows")
        assert back is root
        assert relationship.left.name == "foo"
        assert relationship.right.name == "anon0"


class TestFanOut:
    def test_relationships_are_numbered_per_child(self):
        root = GraphPatternBuilder.from_node("Foo")
        (
            root.add_relationship("FOO_BAZ")
            .add_child_node("A").end()
            .add_child_node("B").end()
            .add_child_node("C").end()
            .add_child_node("D").end()
            .end()
        )

        assert relationship_names(root.store) == ["fooBaz", "fooBaz1", "fooBaz2", "fooBaz3"]
        assert [root.store.get(name).right.name for name in relationship_names(root.store)] == ["a", "b", "c", "d"]

    def test_each_child_is_registered_once(self):
        root = GraphPatternBuilder.from_node("Foo")
        root.add_relationship("R").add_child_node("A").end().add_child_node("B").end().end()

        assert len(root.store) == 5


class TestMultiHop:
    def test_chained_relationship_passes_through_an_anonymous_node(self):
        root = GraphPatternBuilder.from_node("Foo")
        back = root.add_relationship("FIRST").add_relationship("SECOND").add_child_node("End").end().end().end()

        first = root.store.get("first")
        second = root.store.get("second")
        assert back is root
        assert first.left.name == "foo"
        assert first.right.name == second.left.name == "anon0"
        assert second.right.name == "end"
        assert root.store.get("anon0").labels == []

    def test_from_relationship_registers_an_anonymous_root(self):
        context = GraphPatternBuilder.from_relationship("KNOWS", direction=Direction.RIGHT_TO_LEFT)
        root = context.add_child_node("Person").end().end()

        relationship = root.store.get("knows")
        assert relationship.left.name == "anon0"
        assert relationship.right.name == "person"
        assert relationship.direction == Direction.RIGHT_TO_LEFT
