"""Tests for the per-operation pipeline compositions and the run seam."""

import asyncio

import pytest
from structlog.testing import capture_logs

from cypher_builder.adapter import BuilderToCypherAdapter, QueryKind
from cypher_builder.builders import QueryBuilder
from cypher_builder.grammar.clauses import ClauseType
from cypher_builder.neo4j.execution import QueryResult


class RecordingRunner:
    """Runner answering every query with fixed records."""

    def __init__(self, records=None):
        self.records = records or []
        self.calls = []

    async def run(self, query, parameters=None, connection=None):
        self.calls.append((query, dict(parameters or {}), connection))
        return QueryResult(list(self.records))


@pytest.fixture
def adapter():
    return BuilderToCypherAdapter()


@pytest.fixture
def builder():
    """Query touching every clause kind, with one optional match."""
    return (
        QueryBuilder.from_("n:Node")
        .matching_node("Tag", "t", optional=True)
        .calling(lambda q: q.matching_node("M", "m").returning_variables("m"))
        .where_equals("a", 1)
        .merging_node("Audit", "audit")
        .creating_node("Log", "log")
        .setting("b", 2)
        .removing("n.c")
        .deleting("t")
        .returning_all()
    )


class TestCompositions:
    def test_full_query_renders_every_clause(self, adapter, builder):
        query = adapter.full_query(builder.structure)

        assert query.types() == [
            ClauseType.MATCH,
            ClauseType.OPTIONAL_MATCH,
            ClauseType.CALL,
            ClauseType.WHERE,
            ClauseType.MERGE,
            ClauseType.CREATE,
            ClauseType.SET,
            ClauseType.REMOVE,
            ClauseType.DELETE,
            ClauseType.RETURN,
        ]

    def test_read_query(self, adapter, builder):
        assert adapter.read_only_query(builder.structure).to_text() == (
            "MATCH (n:Node) OPTIONAL MATCH (t:Tag) CALL { WITH * MATCH (m:M) RETURN m } WHERE n.a = $param0 RETURN *"
        )

    def test_set_query_uses_strict_matches(self, adapter, builder):
        assert adapter.set_query(builder.structure).to_text() == (
            "MATCH (n:Node) CALL { WITH * MATCH (m:M) RETURN m } WHERE n.a = $param0 SET n.b = $param1"
        )

    def test_create_query(self, adapter, builder):
        assert adapter.create_query(builder.structure).types() == [
            ClauseType.MATCH,
            ClauseType.CALL,
            ClauseType.WHERE,
            ClauseType.CREATE,
        ]

    def test_remove_query(self, adapter, builder):
        assert adapter.remove_query(builder.structure).to_text().endswith("WHERE n.a = $param0 REMOVE n.c")

    def test_merge_query_keeps_optional_matches(self, adapter, builder):
        assert adapter.merge_query(builder.structure).types() == [
            ClauseType.MATCH,
            ClauseType.OPTIONAL_MATCH,
            ClauseType.WHERE,
            ClauseType.CALL,
            ClauseType.MERGE,
        ]

    def test_delete_query(self, adapter, builder):
        assert adapter.delete_query(builder.structure).to_text() == (
            "MATCH (n:Node) OPTIONAL MATCH (t:Tag) WHERE n.a = $param0 CALL { WITH * MATCH (m:M) RETURN m } DELETE t"
        )

    @pytest.mark.parametrize("kind", list(QueryKind))
    def test_every_kind_has_a_composition(self, adapter, kind):
        assert len(adapter.pipeline(kind)) > 0


class TestCompile:
    def test_compile_leaves_the_structure_untouched(self, adapter, builder):
        structure = builder.structure
        returns = list(structure.returns)
        wheres = list(structure.wheres)
        elements = len(structure.pattern)

        adapter.compile(structure, QueryKind.FULL)
        adapter.compile(structure, QueryKind.SET)

        assert structure.returns == returns
        assert structure.wheres == wheres
        assert len(structure.pattern) == elements

    def test_build_returns_the_bound_parameters(self, adapter, builder):
        text, parameters = adapter.build(builder.structure, QueryKind.SET)

        assert text.startswith("MATCH (n:Node)")
        assert parameters == {"param0": 1, "param1": 2}

    def test_compiled_queries_are_logged_without_parameter_values(self, adapter):
        structure = QueryBuilder.from_("u:User").where_equals("password", "hunter2").returning_all().structure

        with capture_logs() as logs:
            adapter.compile(structure)

        (event,) = [log for log in logs if log["event"] == "Compiled Cypher query"]
        assert event["parameter_names"] == ["param0"]
        assert "hunter2" not in repr(logs)


class TestRun:
    def test_run_sends_text_parameters_and_connection(self, adapter):
        runner = RecordingRunner([{"name": "Ada"}])
        structure = QueryBuilder.from_("p:Person").where_equals("name", "Ada").returning("name").structure

        result = asyncio.run(adapter.run(runner, structure, QueryKind.READ, "replica"))

        assert result.first() == {"name": "Ada"}
        assert runner.calls == [
            ("MATCH (p:Person) WHERE p.name = $param0 RETURN p.name AS name", {"param0": "Ada"}, "replica"),
        ]
