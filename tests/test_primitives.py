"""
Tests for the scalar and literal codecs.
"""

import pytest

from twoway import Err, Ok, boolean, literal, number, text
from twoway.primitives import deep_equal


class TestText:
    def test_identity_encode(self):
        assert text.encode_to_tree("foo") == "foo"

    def test_accepts_empty(self):
        assert text.decode_from_tree("") == Ok("")

    @pytest.mark.parametrize("node", [1, 1.5, True, None, [], {}])
    def test_rejects(self, node):
        assert text.decode_from_tree(node) == Err("expected string")


class TestNumber:
    @pytest.mark.parametrize("node", [0, 1, -3, 2.5, float("inf")])
    def test_accepts(self, node):
        assert number.decode_from_tree(node) == Ok(node)

    @pytest.mark.parametrize("node", [True, False, "1", None, [1], {"n": 1}])
    def test_rejects(self, node):
        assert number.decode_from_tree(node) == Err("expected number")

    def test_no_coercion_from_text(self):
        assert number.decode_from_text("true") == Err("expected number")


class TestBoolean:
    def test_accepts(self):
        assert boolean.decode_from_tree(False) == Ok(False)
        assert boolean.encode_to_tree(False) is False

    @pytest.mark.parametrize("node", [0, 1, "1", "true", None])
    def test_rejects(self, node):
        assert boolean.decode_from_tree(node) == Err("expected boolean")


class TestLiteral:
    def test_encode_ignores_input(self):
        tag = literal("circle")
        assert tag.encode_to_tree(None) == "circle"
        assert tag.encode_to_tree({"anything": 1}) == "circle"

    def test_decode(self):
        tag = literal("circle")
        assert tag.decode_from_tree("circle") == Ok("circle")
        assert tag.decode_from_tree("square") == Err("expected literal 'circle'")

    def test_bool_not_int(self):
        assert isinstance(literal(1).decode_from_tree(True), Err)
        assert isinstance(literal(False).decode_from_tree(0), Err)
        assert literal(1).decode_from_tree(1.0) == Ok(1)

    def test_structured_literal(self):
        tag = literal({"v": [1, 2]})
        assert tag.decode_from_text('{"v": [1, 2]}') == Ok({"v": [1, 2]})
        assert isinstance(tag.decode_from_text('{"v": [1, 2, 3]}'), Err)


class TestDeepEqual:
    def test_nested(self):
        assert deep_equal({"a": [1, {"b": None}]}, {"a": (1, {"b": None})})

    def test_key_mismatch(self):
        assert not deep_equal({"a": 1}, {"b": 1})

    def test_type_mismatch(self):
        assert not deep_equal("1", 1)
        assert not deep_equal(None, False)
