"""Tests for the boolean filter compiler."""

import pytest

from cypher_builder.core.errors import CompilationError, ConfigurationError
from cypher_builder.expressions import Parameter, PropertyRef, Variable
from cypher_builder.grammar.pipeline import GrammarPipeline
from cypher_builder.grammar.where import WhereCompiler
from cypher_builder.where import (
    Binary,
    BinaryProperty,
    ChainOperator,
    Inner,
    IsNull,
    Raw,
    SubQueryCount,
    SubQueryExists,
    normalize_operator,
)

n = Variable("n")


def binary(key, value, chain=ChainOperator.AND, operator="="):
    return Binary(PropertyRef(n, key), operator, Parameter(value, None), chain)


@pytest.fixture
def compiler():
    return WhereCompiler(GrammarPipeline.predicate)


class TestOperators:
    @pytest.mark.parametrize(
        ("spelling", "operator"),
        [
            ("==", "="),
            ("===", "="),
            ("like", "=~"),
            ("!==", "<>"),
            ("!=", "<>"),
            ("starts   with", "STARTS WITH"),
            ("in", "IN"),
        ],
    )
    def test_spellings_are_normalized(self, spelling, operator):
        assert normalize_operator(spelling) == operator

    def test_unknown_operator(self):
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_operator("~~", "where_properties")

        assert exc_info.value.details.operation == "where_properties"


class TestFold:
    """Left fold and chain operators."""

    def test_first_chain_operator_is_ignored(self, compiler):
        wheres = [binary("a", "p0", ChainOperator.OR), binary("b", "p1", ChainOperator.XOR)]

        assert compiler.compile(wheres) == "n.a = $p0 XOR n.b = $p1"

    def test_null_checks(self, compiler):
        wheres = [IsNull(PropertyRef(n, "a")), IsNull(PropertyRef(n, "b"), negate=True, chain=ChainOperator.OR)]

        assert compiler.compile(wheres) == "n.a IS NULL OR n.b IS NOT NULL"

    def test_property_comparison(self, compiler):
        wheres = [BinaryProperty(PropertyRef(Variable("c"), "createdAt"), "==", PropertyRef(Variable("c"), "updatedAt"))]

        assert compiler.compile(wheres) == "c.createdAt = c.updatedAt"

    def test_raw_is_always_parenthesised(self, compiler):
        wheres = [Raw("n.a > 1"), Raw("n.b < 2", ChainOperator.OR)]

        assert compiler.compile(wheres) == "(n.a > 1) OR (n.b < 2)"


class TestGroups:
    def test_group_with_one_child_is_bare(self, compiler):
        assert compiler.compile([Inner([binary("a", "p0")])]) == "n.a = $p0"

    def test_group_with_several_children_is_parenthesised(self, compiler):
        group = Inner([binary("a", "p0"), binary("b", "p1", ChainOperator.OR)])

        assert compiler.compile([group, binary("c", "p2")]) == "(n.a = $p0 OR n.b = $p1) AND n.c = $p2"

    def test_group_in_later_position(self, compiler):
        group = Inner([binary("b", "p1"), binary("c", "p2", ChainOperator.OR)], chain=ChainOperator.AND)

        assert compiler.compile([binary("a", "p0"), group]) == "n.a = $p0 AND (n.b = $p1 OR n.c = $p2)"

    def test_negated_group_has_one_pair_of_parentheses(self, compiler):
        group = Inner([binary("a", "p0"), binary("b", "p1")], negate=True)

        assert compiler.compile([group]) == "NOT (n.a = $p0 AND n.b = $p1)"


class TestSubQueries:
    def test_exists(self, compiler, structure):
        sub = structure.sub_structure()
        sub.pattern.add_matching_relationship("n", "y:Y", "HAS")

        assert compiler.compile([SubQueryExists(sub)]) == "EXISTS { MATCH (y:Y),(n)-[has:HAS]->(y) }"

    def test_not_exists(self, compiler, structure):
        sub = structure.sub_structure()
        sub.pattern.add_matching_node("Y", "y")

        assert compiler.compile([SubQueryExists(sub, negate=True)]) == "NOT EXISTS { MATCH (y:Y) }"

    def test_count(self, compiler, structure):
        sub = structure.sub_structure()
        sub.pattern.add_matching_relationship("n", None, "HAS")
        parameter = structure.parameters.add(3)

        assert compiler.compile([SubQueryCount(sub, ">=", parameter)]) == (
            "COUNT { MATCH (n)-[has:HAS]->(anon0) } >= $param0"
        )


def test_unsupported_node(compiler):
    with pytest.raises(CompilationError):
        compiler.compile([object()])
