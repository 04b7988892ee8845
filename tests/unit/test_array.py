"""Unit tests for array parsing, editing and encoding."""
from __future__ import annotations

import pytest

from retoml import parse_value
from retoml.model import Array, Formatted, InlineTable, unwrap
from retoml.parser import TomlError


def parse_array(text: str) -> Array:
    value = parse_value(text)
    assert isinstance(value, Array)
    return value


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParseArray:
    def test_empty(self) -> None:
        array = parse_array("[]")
        assert array.is_empty()
        assert array.trailing == ""

    def test_empty_with_whitespace(self) -> None:
        array = parse_array("[ \n ]")
        assert array.is_empty()
        assert array.trailing == " \n "

    def test_integers(self) -> None:
        assert unwrap(parse_array("[ 1, 2, 3 ]")) == [1, 2, 3]

    def test_mixed_types(self) -> None:
        array = parse_array('[ 0.1, "x", true, 1979-05-27, { a = 1 }, [2] ]')
        assert unwrap(array)[:3] == [0.1, "x", True]
        assert isinstance(array[4], InlineTable)
        assert isinstance(array[5], Array)

    def test_nested(self) -> None:
        assert unwrap(parse_array('[ [ 1, 2 ], ["a", "b"] ]')) == [[1, 2], ["a", "b"]]

    def test_trailing_comma(self) -> None:
        array = parse_array("[1, 2,]")
        assert array.trailing_comma
        assert len(array) == 2

    def test_element_decor(self) -> None:
        array = parse_array("[\n  1, # one\n  2\n]")
        first, second = array[0], array[1]
        assert isinstance(first, Formatted) and isinstance(second, Formatted)
        assert (first.decor.prefix, first.decor.suffix) == ("\n  ", "")
        assert (second.decor.prefix, second.decor.suffix) == (" # one\n  ", "\n")

    @pytest.mark.parametrize(
        "text",
        [
            "[]",
            "[ ]",
            "[1,2,3]",
            "[ 1, 2, 3, ]",
            "[\n  'a',\n  'b',  # comment\n]",
            "[ # leading comment\n  1\n]",
            "[ [ 1 ], [ [ ] ] ]",
            "[\r\n  1,\r\n  2\r\n]",
        ],
    )
    def test_round_trip(self, text: str) -> None:
        assert str(parse_value(text)) == text


class TestArrayErrors:
    def test_missing_close(self) -> None:
        with pytest.raises(TomlError) as exc_info:
            parse_value("[1, 2")
        assert exc_info.value.message == "invalid array\nexpected `]`"

    @pytest.mark.parametrize("text", ["[,]", "[1,,2]", "[1 2]", "[1,", "[unquoted]"])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(TomlError):
            parse_value(text)

    def test_error_inside_element_is_located(self) -> None:
        with pytest.raises(TomlError) as exc_info:
            parse_value("[1, 2, 0x]")
        assert exc_info.value.column == 10


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------


class TestArrayEditing:
    def test_programmatic_array(self) -> None:
        assert str(Array([1, "two", 3.0, True])) == '[1, "two", 3.0, true]'

    def test_nested_programmatic_array(self) -> None:
        assert str(Array([[1, 2], {"a": 1}])) == "[[1, 2], { a = 1 }]"

    def test_append(self) -> None:
        array = parse_array("[1, 2]")
        array.append(3)
        assert str(array) == "[1, 2, 3]"

    def test_append_after_trailing_comma(self) -> None:
        array = parse_array("[\n  1,\n  2,\n]")
        array.append(3)
        assert str(array) == "[\n  1,\n  2, 3,\n]"

    def test_replace_keeps_decor(self) -> None:
        array = parse_array("[ 1, 2 ]")
        array[0] = 10
        assert str(array) == "[ 10, 2 ]"

    def test_delete(self) -> None:
        array = parse_array("[1, 2]")
        del array[1]
        assert str(array) == "[1]"

    def test_delete_last_drops_trailing_comma(self) -> None:
        array = parse_array("[1,]")
        del array[0]
        assert not array.trailing_comma
        assert str(array) == "[]"

    def test_format(self) -> None:
        array = parse_array("[ 1 ,2,  3 , ]")
        array.format()
        assert str(array) == "[1, 2, 3]"

    def test_rejects_unconvertible_values(self) -> None:
        with pytest.raises(TypeError):
            Array([object()])

    def test_equality_compares_elements(self) -> None:
        assert Array([1, 2]) == Array([1, 2])
        assert Array([1, 2]) != Array([2, 1])
