"""Tests for the graph pattern store."""

import pytest

from cypher_builder.core.errors import ConfigurationError, PatternConflictError
from cypher_builder.expressions import PropertyAssignment, PropertyRef, RawFragment, Variable
from cypher_builder.grammar.rendering import render_element
from cypher_builder.pattern.decoding import Direction
from cypher_builder.pattern.store import ChunkKind, IntentMode, Node, Relationship


def names(elements):
    return [element.text if isinstance(element, RawFragment) else element.name.name for element in elements]


def _assign(variable, key, value):
    return PropertyAssignment(PropertyRef(Variable(variable), key), RawFragment(value))


class TestRegistration:
    """Registering nodes and relationships."""

    def test_matching_node(self, store):
        node = store.add_matching_node("Person", "p")

        assert node == Node(Variable("p"), ["Person"])
        assert store.mode_of("p") == IntentMode.MATCH

    def test_optional_node(self, store):
        store.add_matching_node("Person", optional=True)

        assert store.mode_of("person") == IntentMode.OPTIONAL_MATCH

    def test_creating_requires_a_label(self, store):
        with pytest.raises(ConfigurationError):
            store.add_creating_node([])

    def test_merging_relationship_requires_a_type(self, store):
        with pytest.raises(ConfigurationError):
            store.add_merging_relationship("a", "b", None)

    def test_missing_endpoints_are_anonymous(self, store):
        relationship = store.add_matching_relationship(None, None, "KNOWS")

        assert relationship.left == Variable("anon0")
        assert relationship.right == Variable("anon1")
        assert relationship.name == Variable("knows")
        assert len(store) == 1

    def test_labelled_endpoint_is_registered_with_the_relationship_mode(self, store):
        store.add_creating_relationship("a", "d:D", "BAR")

        assert store.get("d") == Node(Variable("d"), ["D"])
        assert store.mode_of("d") == IntentMode.CREATE
        assert store.get("a") is None

    def test_direction_marker_and_explicit_direction(self, store):
        marked = store.add_matching_relationship("a", "b", "<FOLLOWS")
        explicit = store.add_matching_relationship("a", "b", "LIKES>", direction=Direction.ANY)

        assert marked.direction == Direction.RIGHT_TO_LEFT
        assert marked.types == ["FOLLOWS"]
        assert explicit.direction == Direction.ANY
        assert explicit.types == ["LIKES"]


class TestMergeByName:
    """At most one live element per variable name."""

    def test_registering_again_merges_labels_and_keeps_position(self, store):
        store.add_matching_node("A", "a")
        store.add_matching_node("B", "b")
        store.add_creating_node(["A", "Extra"], "a")

        assert store.get("a").labels == ["A", "Extra"]
        assert names(store.chunk(ChunkKind.CREATE)) == ["a"]
        assert names(store.chunk(ChunkKind.MATCH)) == ["b"]
        assert len(store) == 2

    def test_registration_is_idempotent(self, store):
        store.add_matching_node("A", "a")
        store.add_matching_node("A", "a")

        assert store.get("a").labels == ["A"]
        assert len(store) == 1

    def test_node_properties_and_labels_merge_in_call_order(self, store):
        store.add_merging_node("A", "n", [_assign("n", "x", "1")])
        store.add_creating_node(["B"], "n", [_assign("n", "y", "2")])

        assert len(store) == 1
        assert store.mode_of("n") == IntentMode.CREATE
        assert store.chunk(ChunkKind.MERGE) == []
        assert [render_element(element) for element in store.chunk(ChunkKind.CREATE)] == ["(n:A:B {x: 1, y: 2})"]

    def test_relationship_types_and_properties_merge(self, store):
        store.add_merging_relationship("a", "b", "R", "r", [_assign("r", "p", "1")])
        store.add_creating_relationship("a", "b", "S", "r", [_assign("r", "q", "2")])

        assert len(store) == 1
        assert store.mode_of("r") == IntentMode.CREATE
        assert render_element(store.get("r")) == "(a)-[r:R|S {p: 1, q: 2}]->(b)"

    def test_node_name_reused_as_relationship_conflicts(self, store):
        store.add_matching_node("A", "x")

        with pytest.raises(PatternConflictError):
            store.add_matching_relationship("a", "b", "REL", "x")

    def test_relationship_name_reused_as_node_conflicts(self, store):
        store.add_matching_relationship("a", "b", "REL")

        with pytest.raises(PatternConflictError):
            store.add_matching_node("Rel", "rel")

    def test_assign_switches_mode_and_appends_properties(self, store):
        store.add_matching_node("Bar")
        assignment = PropertyAssignment(PropertyRef(Variable("bar"), "foo"), RawFragment("1"))

        element = store.assign("bar", [assignment], IntentMode.CREATE)

        assert element.properties == [assignment]
        assert store.mode_of("bar") == IntentMode.CREATE

    def test_assign_unknown_name(self, store):
        with pytest.raises(ConfigurationError):
            store.assign("ghost", [], IntentMode.MERGE)


class TestChunks:
    """Chunk retrieval and ordering."""

    def test_raw_then_nodes_then_relationships(self, store):
        store.add_matching_relationship("a", "b", "R1")
        store.add_matching_node("A", "a")
        store.add_matching_raw("(x)--(y)")
        store.add_matching_node("B", "b")
        store.add_matching_relationship("b", "a", "R2")

        assert names(store.chunk(ChunkKind.MATCH)) == ["(x)--(y)", "a", "b", "r1", "r2"]

    def test_strict_and_optional_views(self, store):
        store.add_matching_node("A", "a")
        store.add_matching_node("B", "b", optional=True)
        store.add_merging_node("C", "c")

        assert names(store.chunk(ChunkKind.MATCH)) == ["a", "b"]
        assert names(store.chunk(ChunkKind.MATCH_STRICT)) == ["a"]
        assert names(store.chunk(ChunkKind.MATCH_OPTIONAL)) == ["b"]
        assert names(store.chunk(ChunkKind.MERGE)) == ["c"]
        assert store.chunk(ChunkKind.CREATE) == []

    def test_elements_are_typed(self, store):
        store.add_matching_relationship("a", "b", "R")

        assert isinstance(store.chunk(ChunkKind.MATCH)[0], Relationship)


class TestForks:
    def test_fork_shares_the_anonymous_sequence(self, store):
        store.add_matching_node()
        fork = store.fork()

        assert fork.add_matching_node().name == Variable("anon1")
        assert len(fork) == 1
        assert len(store) == 1
        assert fork.names is store.names
