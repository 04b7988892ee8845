"""Unit tests for inline-table parsing, assembly and encoding."""
from __future__ import annotations

import pytest

from retoml import parse_document, parse_value
from retoml.model import Formatted, InlineTable, Key, TableKeyValue, unwrap
from retoml.parser import TomlError
from retoml.parser.errors import DottedKeyExtendWrongType, DuplicateKey
from retoml.parser.inline_table import descend_path, table_from_pairs


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_inline(text: str) -> InlineTable:
    """Parse ``text`` as a value and return the inline table."""
    value = parse_value(text)
    assert isinstance(value, InlineTable)
    return value


def parse_failure(text: str) -> TomlError:
    with pytest.raises(TomlError) as exc_info:
        parse_value(text)
    return exc_info.value


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParseInlineTable:
    def test_empty(self) -> None:
        table = parse_inline("{}")
        assert table.is_empty()
        assert str(table) == "{}"

    def test_empty_with_whitespace(self) -> None:
        table = parse_inline("{   }")
        assert table.is_empty()
        assert table.preamble == "   "
        assert str(table) == "{   }"

    def test_simple_pairs(self) -> None:
        table = parse_inline('{ first = "Tom", last = "Preston-Werner" }')
        assert table.keys() == ["first", "last"]
        assert unwrap(table) == {"first": "Tom", "last": "Preston-Werner"}

    def test_nested(self) -> None:
        table = parse_inline("{ point = { x = 1, y = 2 } }")
        point = table["point"]
        assert isinstance(point, InlineTable)
        assert not point.dotted
        assert unwrap(table) == {"point": {"x": 1, "y": 2}}

    def test_dotted_keys_build_dotted_tables(self) -> None:
        table = parse_inline("{ a.b = 1, a.c = 2 }")
        inner = table["a"]
        assert isinstance(inner, InlineTable)
        assert inner.dotted
        assert unwrap(table) == {"a": {"b": 1, "c": 2}}

    def test_quoted_keys_unify(self) -> None:
        table = parse_inline("{ 'a'.b = 1, \"a\".c = 2 }")
        assert table.keys() == ["a"]
        assert table.key("a").to_repr().as_raw() == "'a'"

    def test_dotted_key_may_extend_explicit_inline_table(self) -> None:
        table = parse_inline("{ a = {}, a.b = 1 }")
        assert unwrap(table) == {"a": {"b": 1}}

    def test_values_keep_decor(self) -> None:
        table = parse_inline("{a=1,  b = 2 }")
        a, b = table["a"], table["b"]
        assert isinstance(a, Formatted) and isinstance(b, Formatted)
        assert (a.decor.prefix, a.decor.suffix) == ("", "")
        assert (b.decor.prefix, b.decor.suffix) == (" ", " ")
        assert table.key("b").decor.prefix == "  "

    @pytest.mark.parametrize(
        "text",
        [
            "{}",
            "{   }",
            "{a=1}",
            "{ a = 1 }",
            "{a=1,b=2}",
            '{ "quoted key" = true, \'lit\' = 0x1F }',
            "{ a . b = 1 , a.c=[1, 2] }",
            "{ x = { y = { z = {} } } }",
            "{ a.x = 1, b = 2, a.y = 3 }",
            "{a.x=1,b.c=2,a.y={ d.e = 3, f = 4, d.g = 5 }}",
        ],
    )
    def test_round_trip(self, text: str) -> None:
        assert str(parse_value(text)) == text

    def test_interleaved_dotted_keys_in_document(self) -> None:
        text = "x = { a.x = 1, b = 2, a.y = 3 }\n"
        assert str(parse_document(text)) == text


class TestInlineTableErrors:
    def test_duplicate_key(self) -> None:
        err = parse_failure("{ a = 1, a = 2 }")
        assert isinstance(err.cause, DuplicateKey)
        assert err.message == "duplicate key `a`"

    def test_duplicate_among_other_keys(self) -> None:
        err = parse_failure('{ hello = "world", a = 2, hello = 1 }')
        assert isinstance(err.cause, DuplicateKey)
        assert unwrap(parse_inline('{ hello = "world", a = 1}')) == {"hello": "world", "a": 1}

    def test_duplicate_dotted_key(self) -> None:
        err = parse_failure("{ a.b = 1, a.b = 2 }")
        assert isinstance(err.cause, DuplicateKey)

    def test_dotted_key_through_value(self) -> None:
        err = parse_failure("{ a = 1, a.b = 2 }")
        assert isinstance(err.cause, DottedKeyExtendWrongType)
        assert err.message == "dotted key `a` attempted to extend non-table type (integer)"

    def test_trailing_comma(self) -> None:
        err = parse_failure("{ a = 1, }")
        assert err.message == "invalid inline table\nexpected `}`"

    def test_newline_inside(self) -> None:
        parse_failure("{ a = 1\n}")

    def test_missing_close(self) -> None:
        err = parse_failure("{ a = 1")
        assert err.span == (7, 7)

    def test_missing_value(self) -> None:
        parse_failure("{ a = }")

    def test_missing_equals(self) -> None:
        err = parse_failure("{ a 1 }")
        assert "expected `.`, `=`" in err.message

    def test_in_document_reports_location(self) -> None:
        with pytest.raises(TomlError) as exc_info:
            parse_document("ok = 1\nt = { a = 1, a = 2 }\n")
        assert exc_info.value.line == 2


# ---------------------------------------------------------------------------
# Assembly helpers
# ---------------------------------------------------------------------------


class TestTableFromPairs:
    def test_assembles_in_order(self) -> None:
        pairs = [
            ([], TableKeyValue(Key("z"), Formatted(1))),
            ([Key("p")], TableKeyValue(Key("x"), Formatted(2))),
            ([], TableKeyValue(Key("a"), Formatted(3))),
        ]
        table = table_from_pairs(pairs, " ")
        assert table.keys() == ["z", "p", "a"]
        assert table.preamble == " "
        assert unwrap(table) == {"z": 1, "p": {"x": 2}, "a": 3}

    def test_records_pair_positions(self) -> None:
        pairs = [
            ([Key("a")], TableKeyValue(Key("x"), Formatted(1))),
            ([], TableKeyValue(Key("b"), Formatted(2))),
            ([Key("a")], TableKeyValue(Key("y"), Formatted(3))),
        ]
        table = table_from_pairs(pairs, "")
        assert table.keys() == ["a", "b"]
        assert [kv.position for _, kv in table.iter_leaves()] == [0, 2, 1]

    def test_duplicate(self) -> None:
        pairs = [
            ([], TableKeyValue(Key("a"), Formatted(1))),
            ([], TableKeyValue(Key("a"), Formatted(2))),
        ]
        with pytest.raises(DuplicateKey):
            table_from_pairs(pairs, "")

    def test_descend_creates_dotted_tables(self) -> None:
        root = InlineTable()
        leaf = descend_path(root, [Key("a"), Key("b")])
        assert leaf.dotted
        assert root["a"]["b"] is leaf  # type: ignore[index]

    def test_descend_through_value_names_segment(self) -> None:
        root = InlineTable({"a": {"b": "text"}})
        with pytest.raises(DottedKeyExtendWrongType) as exc_info:
            descend_path(root, [Key("a"), Key("b"), Key("c")])
        assert exc_info.value.key == (Key("a"), Key("b"))
        assert exc_info.value.actual == "string"


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------


class TestInlineTableEditing:
    def test_programmatic_table(self) -> None:
        table = InlineTable({"a": 1, "b": "x"})
        assert str(table) == '{ a = 1, b = "x" }'

    def test_nested_programmatic_table(self) -> None:
        table = InlineTable({"point": {"x": 1}})
        assert str(table) == "{ point = { x = 1 } }"

    def test_format_resets_layout(self) -> None:
        table = parse_inline("{a=1,   'b'  =2}")
        table.format()
        assert str(table) == "{ a = 1, b = 2 }"

    def test_format_dotted_keys(self) -> None:
        table = parse_inline("{a . b=1}")
        table.format()
        assert str(table) == "{ a.b = 1 }"

    def test_replace_value_keeps_decor(self) -> None:
        table = parse_inline("{a=1,b=2}")
        table["a"] = 10
        assert str(table) == "{a=10,b=2}"

    def test_format_keeps_source_order(self) -> None:
        table = parse_inline("{a.x=1,b=2,a.y=3}")
        table.format()
        assert str(table) == "{ a.x = 1, b = 2, a.y = 3 }"

    def test_added_key_goes_last(self) -> None:
        table = parse_inline("{ a.x = 1, b = 2, a.y = 3 }")
        table["c"] = 4
        assert str(table) == "{ a.x = 1, b = 2, a.y = 3 , c = 4 }"

    def test_added_key_reparses(self) -> None:
        table = parse_inline("{ a = 1 }")
        table["c"] = [1, 2]
        assert unwrap(parse_value(str(table))) == {"a": 1, "c": [1, 2]}

    def test_remove(self) -> None:
        table = parse_inline("{ a = 1, b = 2 }")
        removed = table.remove("a")
        assert isinstance(removed, Formatted)
        assert removed.value == 1
        assert table.remove("missing") is None
        assert "a" not in table

    def test_get_values_flattens_dotted_keys(self) -> None:
        table = parse_inline("{ a.b = 1, c = 2 }")
        flat = [([k.get() for k in path], unwrap(v)) for path, v in table.get_values()]
        assert flat == [(["a", "b"], 1), (["c"], 2)]
