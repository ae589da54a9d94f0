"""Tests for the JSON exporter."""

import json

import pytest

from tinytl.engine.exporter import to_json
from tinytl.errors import EvaluationError
from tinytl.values import List, Map, Scalar, to_context


def test_to_json_compact_output():
    ctx = {"name": "arthur", "items": ["a", "b"], "user": {"city": "Paris"}}
    assert to_json(ctx) == (
        '{"name":"arthur","items":["a","b"],"user":{"city":"Paris"}}'
    )


def test_to_json_keeps_insertion_order():
    out = to_json({"zeta": "1", "alpha": "2"})
    assert out.index('"zeta"') < out.index('"alpha"')


def test_to_json_accepts_values():
    ctx = Map({"l": List((Scalar("x"), Map()))})
    assert to_json(ctx) == '{"l":["x",{}]}'


def test_to_json_escapes_strings():
    ctx = {"quote": 'say "hi"', "lines": "a\nb\tc", "ctrl": "\x01"}
    out = to_json(ctx)
    assert '\\"hi\\"' in out
    assert "\\n" in out
    assert "\n" not in out
    assert json.loads(out) == ctx


def test_to_json_roundtrips_through_context():
    data = {"a": {"b": ["c", {"d": ""}]}}
    assert json.loads(to_json(to_context(data))) == data


@pytest.mark.parametrize("bad", [{"n": 1}, {"n": None}, {"l": [1.5]}])
def test_to_json_rejects_unsupported_values(bad):
    with pytest.raises(EvaluationError, match="invalid type"):
        to_json(bad)


@pytest.mark.parametrize("root", ["plain", ["a", "b"], Scalar("x")])
def test_to_json_requires_map_root(root):
    with pytest.raises(EvaluationError, match="context must be a map"):
        to_json(root)


def test_to_json_of_missing_context_is_empty_object():
    assert to_json(None) == "{}"
