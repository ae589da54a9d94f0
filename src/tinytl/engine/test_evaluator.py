"""Tests for the evaluator."""

import pytest

from tinytl.ast.node import (
    EqualsOperator,
    IfDirective,
    JoinDirective,
    Reference,
    Sequence,
    Text,
)
from tinytl.ast.parser import parse
from tinytl.config import EngineConfig
from tinytl.engine.evaluator import Evaluator
from tinytl.errors import EvaluationError
from tinytl.values import Scalar, to_context


def render(source, context=None, **config):
    return Evaluator(EngineConfig(**config)).evaluate(parse(source), context or {})


# =============================================================================
# References
# =============================================================================


def test_hello_name():
    assert render("hello {$name}", {"name": "arthur"}) == "hello arthur"


def test_literal_text_is_verbatim():
    source = "no directives here: } ' $ == in with"
    assert render(source) == source
    assert render(source, {"x": "y"}) == source


def test_nested_reference():
    ctx = {"user": {"address": {"city": "Paris"}}}
    assert render("{$user.address.city}", ctx) == "Paris"


def test_missing_final_segment_renders_empty():
    assert render("[{$missing}]") == "[]"
    assert render("[{$user.missing}]", {"user": {}}) == "[]"


def test_missing_intermediate_segment_raises():
    with pytest.raises(EvaluationError, match="parameter 'user' not found"):
        render("{$user.name}")


def test_rendering_list_is_wrong_type():
    with pytest.raises(EvaluationError, match="wrong type"):
        render("{$items}", {"items": ["a"]})


def test_rendering_map_is_wrong_type():
    with pytest.raises(EvaluationError, match="wrong type"):
        render("{$user}", {"user": {"name": "x"}})


def test_failure_does_not_leak_partial_output():
    evaluator = Evaluator()
    root = parse("prefix {$ok} {$a.b} suffix")
    with pytest.raises(EvaluationError):
        evaluator.evaluate(root, {"ok": "fine"})


# =============================================================================
# #if
# =============================================================================


def test_if_else():
    source = "{#if $x}yes{#else}no{#end}"
    assert render(source) == "no"
    assert render(source, {"x": "1"}) == "yes"


def test_if_without_else_renders_empty():
    assert render("[{#if $x}yes{#end}]") == "[]"


def test_if_first_match_wins():
    source = "{#if $a}A{#elseif $b}B{#elseif $c}C{#else}D{#end}"
    assert render(source, {"a": "1", "b": "1"}) == "A"
    assert render(source, {"b": "1", "c": "1"}) == "B"
    assert render(source, {"c": "1"}) == "C"
    assert render(source) == "D"


def test_if_truthiness_of_collections():
    source = "{#if $v}T{#else}F{#end}"
    assert render(source, {"v": []}) == "F"
    assert render(source, {"v": ["x"]}) == "T"
    assert render(source, {"v": {}}) == "F"
    assert render(source, {"v": {"k": ""}}) == "T"
    assert render(source, {"v": ""}) == "F"


def test_if_unresolvable_reference_is_false():
    assert render("{#if $a.b.c}T{#else}F{#end}") == "F"
    assert render("{#if $a.b}T{#else}F{#end}", {"a": "scalar"}) == "F"


def test_if_equality():
    source = "{#if $a == $b}eq{#else}neq{#end}"
    assert render(source, {"a": "x", "b": "x"}) == "eq"
    assert render(source, {"a": "x", "b": "y"}) == "neq"


def test_if_equality_with_literal():
    source = "{#if $a == 'foo'}!{#end}"
    assert render(source, {"a": "foo"}) == "!"
    assert render(source, {"a": "bar"}) == ""


def test_equality_missing_values_compare_empty():
    assert render("{#if $a == $b}eq{#end}") == "eq"


def test_equality_unresolvable_operand_is_false():
    assert render("{#if $a.b == 'x'}eq{#else}neq{#end}") == "neq"


def test_equality_with_list_operand_raises():
    with pytest.raises(EvaluationError, match="wrong type"):
        render("{#if $items == 'a'}x{#end}", {"items": ["a"]})


# =============================================================================
# #join
# =============================================================================


def test_join_with_separator():
    source = "{#join $i in $items with ','}{$i}{#end}"
    assert render(source, {"items": ["a", "b", "c"]}) == "a,b,c"


def test_join_separator_count():
    source = "{#join $i in $items with '|'}x{#end}"
    for k in range(5):
        out = render(source, {"items": ["v"] * k})
        assert out.count("|") == max(k - 1, 0)
        assert out.count("x") == k


def test_join_empty_list_renders_empty():
    assert render("[{#join $i in $items with ','}{$i}{#end}]", {"items": []}) == "[]"


def test_join_over_maps():
    ctx = {"users": [{"name": "arthur"}, {"name": "ford"}]}
    source = "{#join $u in $users with ' & '}{$u.name}{#end}"
    assert render(source, ctx) == "arthur & ford"


def test_join_binding_does_not_leak():
    source = "{#join $i in $items}{$i}{#end}[{$i}]"
    assert render(source, {"items": ["a", "b"]}) == "ab[]"
    assert render(source, {"items": ["a", "b"], "i": "outer"}) == "ab[outer]"


def test_join_does_not_mutate_context():
    ctx = to_context({"items": ["a", "b"]})
    Evaluator().evaluate(parse("{#join $i in $items}{$i}{#end}"), ctx)
    assert "i" not in ctx


def test_join_separator_uses_outer_context():
    source = "{#join $i in $items with $i}{$i}{#end}"
    assert render(source, {"items": ["a", "b"], "i": "-"}) == "a-b"


def test_nested_join():
    source = (
        "{#join $r in $rows with ';'}"
        "{#join $c in $cols with ','}{$r}{$c}{#end}"
        "{#end}"
    )
    ctx = {"rows": ["1", "2"], "cols": ["a", "b"]}
    assert render(source, ctx) == "1a,1b;2a,2b"


def test_join_scalar_is_singleton():
    source = "{#join $i in $x with ','}[{$i}]{#end}"
    assert render(source, {"x": "a"}) == "[a]"


def test_join_map_is_singleton():
    source = "{#join $i in $x}[{$i.k}]{#end}"
    assert render(source, {"x": {"k": "v"}}) == "[v]"


def test_join_missing_collection_is_single_empty_item():
    assert render("{#join $i in $x}[{$i}]{#end}") == "[]"


def test_join_scalar_verbatim_mode():
    source = "{#join $i in $x}[{$i}]{#end}"
    assert render(source, {"x": "a"}, join_scalar="verbatim") == "a"
    assert render(source, {"x": {"k": "v"}}, join_scalar="verbatim") == ""
    assert render(source, {"x": ["a"]}, join_scalar="verbatim") == "[a]"


def test_join_collection_resolution_error_propagates():
    node = JoinDirective(
        iterator="i",
        collection=Reference(("a", "b")),
        body=Sequence((Reference(("i",)),)),
    )
    with pytest.raises(EvaluationError, match="parameter 'a' not found"):
        Evaluator().evaluate(node, {})


# =============================================================================
# Unsupported capabilities and hand-built trees
# =============================================================================


def test_condition_cannot_be_evaluated():
    node = EqualsOperator(Text("a"), Text("a"))
    with pytest.raises(EvaluationError, match="condition cannot be evaluated"):
        Evaluator().evaluate(node, {})
    assert Evaluator().test(node, {})


def test_directives_cannot_be_tested():
    evaluator = Evaluator()
    if_node = parse("{#if $x}y{#end}").children[0]
    join_node = parse("{#join $i in $x}y{#end}").children[0]
    with pytest.raises(EvaluationError, match="cannot be tested"):
        evaluator.test(if_node, {})
    with pytest.raises(EvaluationError, match="cannot be tested"):
        evaluator.test(join_node, {})


def test_text_truthiness():
    evaluator = Evaluator()
    assert evaluator.test(Text("x"), {})
    assert not evaluator.test(Text(""), {})


def test_malformed_if_raises():
    node = IfDirective(conditions=(Reference(("x",)),), branches=())
    with pytest.raises(EvaluationError, match="malformed #if directive"):
        Evaluator().evaluate(node, {"x": "1"})


def test_join_over_non_reference_raises():
    node = JoinDirective(iterator="i", collection=Text("a"), body=Text("x"))
    with pytest.raises(EvaluationError, match="malformed #join directive"):
        Evaluator().evaluate(node, {})


def test_depth_limit():
    source = "{#if $x}{#if $x}{#if $x}deep{#end}{#end}{#end}"
    assert render(source, {"x": "1"}) == "deep"
    with pytest.raises(EvaluationError, match="maximum nesting depth"):
        render(source, {"x": "1"}, max_depth=3)


def test_evaluate_accepts_value_context():
    ctx = to_context({"name": "arthur"}).bind("greeting", Scalar("hi"))
    assert Evaluator().evaluate(parse("{$greeting} {$name}"), ctx) == "hi arthur"


def test_ast_is_reusable_across_contexts():
    evaluator = Evaluator()
    root = parse("hello {$name}")
    assert evaluator.evaluate(root, {"name": "a"}) == "hello a"
    assert evaluator.evaluate(root, {"name": "b"}) == "hello b"


def test_greeting_with_items():
    source = (
        "hello {#if $name}{$name}{#elseif $surname}{$surname}{#else}John{#end}, "
        "you have the following items: "
        "{#join $item in $items with ', '}{$item}{#if $item == 'foo'}!{#end}{#end}"
    )
    ctx = {"name": "arthur", "items": ["foo", "bar"]}
    assert render(source, ctx) == (
        "hello arthur, you have the following items: foo!, bar"
    )
    assert render(source, {"surname": "dent", "items": []}).startswith("hello dent,")
    assert render(source, {"items": []}).startswith("hello John,")
