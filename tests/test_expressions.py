"""Tests for the expression model and the parameter stack."""

from cypher_builder.expressions import (
    Alias,
    Distinct,
    FunctionCall,
    MapValue,
    Parameter,
    ParameterStack,
    PropertyRef,
    RawFragment,
    Variable,
)
from cypher_builder.grammar.rendering import escape, render_expression, string_literal


class TestParameterStack:
    """Boxing of values into generated parameters."""

    def test_names_are_generated_in_insertion_order(self, parameters):
        first = parameters.add("a")
        second = parameters.add("b")

        assert first.name == "param0"
        assert second.name == "param1"
        assert parameters.to_dict() == {"param0": "a", "param1": "b"}

    def test_raw_fragment_is_not_bound(self, parameters):
        raw = RawFragment("datetime()")

        assert parameters.add(raw) is raw
        assert len(parameters) == 0

    def test_explicit_name_is_kept(self, parameters):
        parameters.add(1, name="param1")
        generated = parameters.add(2)

        assert "param1" in parameters
        assert generated.name == "param2"

    def test_custom_prefix(self):
        stack = ParameterStack(prefix="p")

        assert stack.add(True).name == "p0"

    def test_parameters_compare_by_name(self):
        assert Parameter("param0", [1]) == Parameter("param0", [2])


class TestRendering:
    """Rendering of atomic expressions."""

    def test_plain_identifiers_are_bare(self):
        assert escape("otherNode") == "otherNode"
        assert escape("_x1") == "_x1"

    def test_other_identifiers_are_quoted(self):
        assert escape("`backtick") == "```backtick`"
        assert escape("has space") == "`has space`"
        assert escape("1st") == "`1st`"

    def test_string_literal_escapes_quotes_and_backslashes(self):
        assert string_literal("it's") == "'it\\'s'"
        assert string_literal("a\\b") == "'a\\\\b'"

    def test_property_and_parameter(self):
        n = Variable("n")

        assert render_expression(n.property("name")) == "n.name"
        assert render_expression(Parameter("param3", None)) == "$param3"

    def test_map_value(self):
        assert render_expression(MapValue(Variable("toCreate"), "h.x")) == "toCreate['h.x']"

    def test_function_call_with_distinct_argument(self):
        call = FunctionCall("count", (Distinct(PropertyRef(Variable("n"), "name")),))

        assert render_expression(call) == "count(DISTINCT n.name)"

    def test_function_call_arguments_are_comma_joined(self):
        n = Variable("b")
        call = FunctionCall("callingme", (n.property("bar"), n.property("boo")))

        assert render_expression(Alias(call, "aggregate")) == "callingme(b.bar,b.boo) AS aggregate"

    def test_alias_of_alias_keeps_inner_name(self):
        inner = Alias(Variable("n"), "inner")

        assert render_expression(Alias(inner, "outer")) == "n AS inner"
